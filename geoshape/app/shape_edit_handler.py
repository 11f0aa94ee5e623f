"""
ShapeEditHandler - Routes map surface events to the shapes being edited.

This module turns the raw interactions reported by the rendering surface
(tap on the map, handle drag finished, handle delete requested) into edits
of the shape markers resolved through the MarkerIndex.
"""

from typing import Any, Dict, List, Optional, Set

from PySide6.QtCore import QObject, Slot

from geoshape.core.editor_config import EditorConfig
from geoshape.core.geo_point import GeoPoint
from geoshape.core.logging_config import get_logger
from geoshape.core.map_shape import MapShape, MapShapeType
from geoshape.core.marker_index import MarkerIndex
from geoshape.core.protocols import MarkerHandle, RenderSurface
from geoshape.core.shape_builder import ShapeBuilder
from geoshape.core.shape_markers import (
    MultiPolygonMarkers,
    PolygonHoleMarkers,
    ShapeMarkers,
)

logger = get_logger(__name__)


class ShapeEditHandler(QObject):
    """
    Manages interactive shape editing on a rendering surface.

    This class encapsulates:
    - Loading GeoJSON geometries as editable shapes
    - Drawing new shapes and polygon holes vertex by vertex
    - Redrawing shapes when their handles are dragged
    - Deleting handles and the vertices they stand for
    """

    def __init__(
        self,
        surface: RenderSurface,
        index: Optional[MarkerIndex] = None,
        config: Optional[EditorConfig] = None,
    ) -> None:
        """
        Initialize the ShapeEditHandler.

        Args:
            surface: The surface that renders handles and facades.
            index: Marker index shared with other editors, a new one if omitted.
            config: Editor settings, defaults if omitted.
        """
        super().__init__()
        self.surface = surface
        self.config = config or EditorConfig()
        self.index = index if index is not None else MarkerIndex(surface)
        self.builder = ShapeBuilder(surface, self.config)
        self.shapes: List[MapShape] = []

        # Ids this handler registered, the index may hold other editors' too
        self._marker_ids: Set[str] = set()
        self._active_shape: Optional[MapShape] = None
        self._active_target: Optional[ShapeMarkers] = None

        # Connect surface signals when the surface emits them
        if hasattr(surface, "map_clicked"):
            surface.map_clicked.connect(self.on_map_clicked)
            surface.marker_drag_finished.connect(self.on_marker_drag_finished)
            surface.marker_delete_requested.connect(self.on_marker_delete_requested)

    @property
    def active_target(self) -> Optional[ShapeMarkers]:
        """The shape markers that receive new vertices, if drawing."""
        return self._active_target

    def load_geometry(self, geometry: Dict[str, Any]) -> MapShape:
        """
        Renders a GeoJSON geometry with editable handles.

        Args:
            geometry: GeoJSON geometry object.

        Returns:
            MapShape: The rendered shape.
        """
        shape_index = self.builder.add_geometry_as_markers(geometry)
        self.index.merge(shape_index)
        self._marker_ids.update(shape_index.marker_ids())
        self.shapes.append(shape_index.shape)
        logger.info(
            f"Loaded {geometry.get('type')} with {shape_index.size()} handles"
        )
        return shape_index.shape

    def begin_shape(self, shape_type: MapShapeType) -> ShapeMarkers:
        """
        Starts drawing a new shape; map taps add vertices to it.

        Args:
            shape_type: Kind of shape to draw.

        Returns:
            ShapeMarkers: The empty shape markers.
        """
        shape_index = self.builder.new_shape(shape_type)
        self.shapes.append(shape_index.shape)
        self._active_shape = shape_index.shape
        self._active_target = shape_index.shape.shape
        logger.info(f"Started drawing a {shape_type.value}")
        return self._active_target

    def begin_hole(self) -> PolygonHoleMarkers:
        """
        Starts drawing a hole in the polygon being drawn.

        For a multi-polygon the hole is cut from its last polygon.

        Returns:
            PolygonHoleMarkers: The empty hole.

        Raises:
            RuntimeError: If no shape is being drawn.
            NotImplementedError: If the shape being drawn has no holes.
        """
        target = self._active_target
        if target is None:
            raise RuntimeError("No shape is being drawn")
        if isinstance(target, PolygonHoleMarkers):
            target = target.parent
        elif isinstance(target, MultiPolygonMarkers) and target.get_children():
            target = target.get_children()[-1]
        if not hasattr(target, "get_holes"):
            raise NotImplementedError(f"{type(target).__name__} does not have holes")

        hole = target.create_child()
        self._active_target = hole
        return hole

    def finish_shape(self) -> Optional[Dict[str, Any]]:
        """
        Ends drawing if the shape being drawn is valid.

        Returns:
            Optional[Dict[str, Any]]: GeoJSON of the finished shape, or None
            when nothing is drawn or the shape is still invalid.
        """
        if self._active_shape is None:
            return None
        if not self._active_shape.is_valid():
            logger.warning("Cannot finish drawing, shape is not valid yet")
            return None

        geometry = self.builder.to_geometry(self._active_shape)
        self._active_shape = None
        self._active_target = None
        return geometry

    @Slot(float, float)
    def on_map_clicked(self, latitude: float, longitude: float) -> MarkerHandle:
        """
        Handler for a tap on the map background.

        Adds a vertex to the shape being drawn, or a bare marker otherwise.

        Args:
            latitude: Tapped latitude.
            longitude: Tapped longitude.

        Returns:
            MarkerHandle: The new marker.
        """
        marker = self.surface.create_marker(GeoPoint(latitude, longitude))
        self._marker_ids.add(marker.id)
        target = self._active_target
        if target is None:
            self.index.add_bare(marker)
            logger.debug(f"Added bare marker {marker.id}")
            return marker

        target.add_new(marker)
        self.index.add(marker, self._owner_of(target, marker))
        target.update()
        return marker

    @staticmethod
    def _owner_of(target: ShapeMarkers, marker: MarkerHandle) -> ShapeMarkers:
        """Finds the immediate owner of a marker just added through target."""
        if any(m is marker for m in target.get_markers()):
            return target
        for child in getattr(target, "get_children", list)():
            if any(m is marker for m in child.get_markers()):
                return child
        return target

    @Slot(str)
    def on_marker_drag_finished(self, marker_id: str) -> None:
        """
        Handler for the end of a handle drag. Redraws the owning shape.

        Args:
            marker_id: ID of the dragged handle.
        """
        owner = self.index.lookup(marker_id)
        if owner is None:
            logger.debug(f"Dragged marker {marker_id} has no shape to update")
            return
        owner.update()

    @Slot(str)
    def on_marker_delete_requested(self, marker_id: str) -> bool:
        """
        Handler for a request to delete a handle and its vertex.

        Args:
            marker_id: ID of the handle.

        Returns:
            bool: True if the marker was known and deleted.
        """
        deleted = self.index.delete(marker_id)
        if not deleted:
            logger.warning(f"Delete requested for unknown marker {marker_id}")
            return False

        self._marker_ids.discard(marker_id)
        # Emptying a ring removes the polygon together with its holes
        self.index.prune_removed()
        self._retarget_removed_hole()
        return True

    def _retarget_removed_hole(self) -> None:
        """Continues drawing on the polygon if the hole being drawn was removed."""
        target = self._active_target
        if not isinstance(target, PolygonHoleMarkers):
            return
        polygon = target.parent
        if not any(hole is target for hole in polygon.get_holes()):
            logger.info("Polygon of the hole being drawn was removed")
            self._active_target = polygon

    def set_markers_visible(self, visible: bool) -> None:
        """
        Shows or hides every vertex handle, leaving the shapes drawn.

        Args:
            visible: Visibility flag.
        """
        self.index.set_visible_markers(visible)

    def is_valid(self) -> bool:
        """
        Checks whether every shape on the map is valid.

        Returns:
            bool: True if all shapes are valid.
        """
        return all(shape.is_valid() for shape in self.shapes)

    def clear(self) -> None:
        """
        Removes every shape and handle this handler created.

        Markers registered by other editors sharing the index are kept.
        """
        for shape in self.shapes:
            shape.remove()
        for marker_id in self._marker_ids:
            if self.index.lookup(marker_id) is None:
                # Bare marker, its handle is still on the map
                self.index.delete(marker_id)
            else:
                self.index.discard(marker_id)
        self._marker_ids = set()
        self.shapes = []
        self._active_shape = None
        self._active_target = None
