"""
Shape Builder Module.

Converts between GeoJSON geometries and editable shapes on a rendering
surface:

- add_geometry_as_markers() creates a handle for every vertex, the shape
  markers that own them, the rendered facade, and a populated MarkerIndex.
- to_geometry() reads the current handle positions back into GeoJSON.
- new_shape() starts an empty shape for interactive drawing.

GeoJSON positions are [longitude, latitude]. Polygon rings in GeoJSON repeat
their first position at the end; handles are never created for that closing
position and it is added back on export.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from geoshape.core.editor_config import EditorConfig
from geoshape.core.geo_point import GeoPoint
from geoshape.core.map_shape import MapShape, MapShapeType
from geoshape.core.marker_index import MarkerIndex
from geoshape.core.protocols import RenderSurface
from geoshape.core.shape_markers import (
    MultiPointMarkers,
    MultiPolygonMarkers,
    MultiPolylineMarkers,
    PointMarkers,
    PolygonHoleMarkers,
    PolygonMarkers,
    PolylineMarkers,
    ShapeMarkers,
    points_from_markers,
)

logger = logging.getLogger(__name__)

Geometry = Dict[str, Any]

_EMPTY_SHAPES = {
    MapShapeType.POINT: PointMarkers,
    MapShapeType.POLYLINE: PolylineMarkers,
    MapShapeType.POLYGON: PolygonMarkers,
    MapShapeType.MULTI_POINT: MultiPointMarkers,
    MapShapeType.MULTI_POLYLINE: MultiPolylineMarkers,
    MapShapeType.MULTI_POLYGON: MultiPolygonMarkers,
}


def ring_points(coordinates: List[List[float]]) -> List[GeoPoint]:
    """
    Converts a GeoJSON linear ring to its distinct vertices.

    Args:
        coordinates: Ring positions, optionally closed.

    Returns:
        List[GeoPoint]: Vertices without the closing duplicate.
    """
    points = [GeoPoint.from_lon_lat(c) for c in coordinates]
    if len(points) > 1 and points[0] == points[-1]:
        points.pop()
    return points


def closed_ring(points: List[GeoPoint]) -> List[List[float]]:
    """
    Converts ring vertices to a closed GeoJSON linear ring.

    Args:
        points: Distinct ring vertices.

    Returns:
        List[List[float]]: Positions with the first repeated at the end.
    """
    coordinates = [p.to_lon_lat() for p in points]
    if coordinates:
        coordinates.append(list(coordinates[0]))
    return coordinates


class ShapeBuilder:
    """
    Builds editable shapes on a rendering surface.
    """

    def __init__(
        self, surface: RenderSurface, config: Optional[EditorConfig] = None
    ) -> None:
        """
        Initializes the builder.

        Args:
            surface: Surface that creates the handles and facades.
            config: Editor settings, defaults if omitted.
        """
        self.surface = surface
        self.config = config or EditorConfig()

    # ------------------------------------------------------------------
    # GeoJSON -> shapes
    # ------------------------------------------------------------------

    def add_geometry_as_markers(self, geometry: Geometry) -> MarkerIndex:
        """
        Renders a geometry with a draggable handle on every vertex.

        Args:
            geometry: GeoJSON geometry object.

        Returns:
            MarkerIndex: Index of the new handles, wrapping the rendered shape.

        Raises:
            ValueError: If the geometry type is missing or unsupported.
        """
        index = self._build(geometry)
        self._apply_config(index)
        logger.debug(
            f"Built {geometry.get('type')} with {index.size()} editable markers"
        )
        return index

    def _build(self, geometry: Geometry) -> MarkerIndex:
        geometry_type = geometry.get("type")
        try:
            shape_type = MapShapeType(geometry_type)
        except ValueError:
            raise ValueError(f"Unsupported geometry type: {geometry_type!r}") from None

        if shape_type is MapShapeType.COLLECTION:
            return self._build_collection(geometry.get("geometries", []))

        coordinates = geometry.get("coordinates")
        if coordinates is None:
            raise ValueError(f"{geometry_type} geometry has no coordinates")

        index = MarkerIndex(self.surface)
        if shape_type is MapShapeType.POINT:
            markers: ShapeMarkers = self._point(coordinates, index)
        elif shape_type is MapShapeType.POLYLINE:
            markers = self._polyline(coordinates, index)
        elif shape_type is MapShapeType.POLYGON:
            markers = self._polygon(coordinates, index)
        elif shape_type is MapShapeType.MULTI_POINT:
            markers = MultiPointMarkers(self.surface)
            for point in coordinates:
                markers.add_child(self._point(point, index))
        elif shape_type is MapShapeType.MULTI_POLYLINE:
            markers = MultiPolylineMarkers(self.surface)
            for line in coordinates:
                markers.add_child(self._polyline(line, index))
        else:
            markers = MultiPolygonMarkers(self.surface)
            for polygon in coordinates:
                markers.add_child(self._polygon(polygon, index))

        index.shape = MapShape(shape_type, markers)
        return index

    def _build_collection(self, geometries: List[Geometry]) -> MarkerIndex:
        index = MarkerIndex(self.surface)
        parts: List[MapShape] = []
        for geometry in geometries:
            part = self._build(geometry)
            index.merge(part)
            parts.append(part.shape)
        index.shape = MapShape(MapShapeType.COLLECTION, parts)
        return index

    def _add_markers(
        self, owner: ShapeMarkers, points: List[GeoPoint], index: MarkerIndex
    ) -> None:
        for point in points:
            owner.add(self.surface.create_marker(point))
        index.add_markers(owner)

    def _point(self, coordinates: List[float], index: MarkerIndex) -> PointMarkers:
        point = PointMarkers(self.surface)
        self._add_markers(point, [GeoPoint.from_lon_lat(coordinates)], index)
        return point

    def _polyline(
        self, coordinates: List[List[float]], index: MarkerIndex
    ) -> PolylineMarkers:
        polyline = PolylineMarkers(self.surface)
        self._add_markers(
            polyline, [GeoPoint.from_lon_lat(c) for c in coordinates], index
        )
        polyline.update()
        return polyline

    def _polygon(
        self, rings: List[List[List[float]]], index: MarkerIndex
    ) -> PolygonMarkers:
        polygon = PolygonMarkers(self.surface)
        if rings:
            self._add_markers(polygon, ring_points(rings[0]), index)
            for hole_ring in rings[1:]:
                hole = polygon.create_child()
                self._add_markers(hole, ring_points(hole_ring), index)
        polygon.update()
        return polygon

    def _apply_config(self, index: MarkerIndex) -> None:
        if self.config.z_index is not None:
            index.set_z_index(self.config.z_index)
        if not self.config.markers_visible:
            index.set_visible_markers(False)

    # ------------------------------------------------------------------
    # Interactive drawing
    # ------------------------------------------------------------------

    def new_shape(self, shape_type: MapShapeType) -> MarkerIndex:
        """
        Starts an empty shape for interactive drawing.

        The facade is created by the first update once the shape has vertices.

        Args:
            shape_type: Kind of shape to draw.

        Returns:
            MarkerIndex: Empty index wrapping the new shape.

        Raises:
            ValueError: For geometry collections, which cannot be drawn directly.
        """
        shape_class = _EMPTY_SHAPES.get(shape_type)
        if shape_class is None:
            raise ValueError(f"Cannot draw a {shape_type.value} directly")
        markers = shape_class(self.surface)
        if self.config.z_index is not None:
            markers.set_z_index(self.config.z_index)
        return MarkerIndex(self.surface, MapShape(shape_type, markers))

    # ------------------------------------------------------------------
    # Shapes -> GeoJSON
    # ------------------------------------------------------------------

    def to_geometry(self, shape: Union[MapShape, ShapeMarkers]) -> Optional[Geometry]:
        """
        Reads the current geometry of a shape from its handle positions.

        Deleted parts (rings, lines and points without markers) are left out.

        Args:
            shape: A rendered MapShape or a single ShapeMarkers.

        Returns:
            Optional[Geometry]: GeoJSON geometry, or None if fully deleted.

        Raises:
            ValueError: For a polygon hole, which is not a geometry on its own.
        """
        if isinstance(shape, MapShape):
            if shape.shape_type is MapShapeType.COLLECTION:
                geometries = [self.to_geometry(part) for part in shape.shape]
                geometries = [g for g in geometries if g is not None]
                if not geometries:
                    return None
                return {"type": MapShapeType.COLLECTION.value, "geometries": geometries}
            return self.to_geometry(shape.shape)

        if isinstance(shape, PolygonHoleMarkers):
            raise ValueError("A polygon hole is exported with its parent polygon")
        if shape.is_deleted():
            return None

        if isinstance(shape, PointMarkers):
            shape_type = MapShapeType.POINT
            coordinates: Any = shape.get_markers()[0].position.to_lon_lat()
        elif isinstance(shape, PolylineMarkers):
            shape_type = MapShapeType.POLYLINE
            coordinates = self._line_coordinates(shape)
        elif isinstance(shape, PolygonMarkers):
            shape_type = MapShapeType.POLYGON
            coordinates = self._polygon_coordinates(shape)
        elif isinstance(shape, MultiPointMarkers):
            shape_type = MapShapeType.MULTI_POINT
            coordinates = [
                p.get_markers()[0].position.to_lon_lat()
                for p in shape.get_children()
                if not p.is_deleted()
            ]
        elif isinstance(shape, MultiPolylineMarkers):
            shape_type = MapShapeType.MULTI_POLYLINE
            coordinates = [
                self._line_coordinates(line)
                for line in shape.get_children()
                if not line.is_deleted()
            ]
        elif isinstance(shape, MultiPolygonMarkers):
            shape_type = MapShapeType.MULTI_POLYGON
            coordinates = [
                self._polygon_coordinates(polygon)
                for polygon in shape.get_children()
                if not polygon.is_deleted()
            ]
        else:
            raise ValueError(f"Unsupported shape markers: {type(shape).__name__}")

        return {"type": shape_type.value, "coordinates": coordinates}

    @staticmethod
    def _line_coordinates(polyline: PolylineMarkers) -> List[List[float]]:
        return [p.to_lon_lat() for p in points_from_markers(polyline.get_markers())]

    @staticmethod
    def _polygon_coordinates(polygon: PolygonMarkers) -> List[List[List[float]]]:
        rings = [closed_ring(points_from_markers(polygon.get_markers()))]
        rings.extend(closed_ring(points) for points in polygon.hole_points())
        return rings
