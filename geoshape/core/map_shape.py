"""
Map Shape Module.

Wraps what was rendered for one geometry: either a single editable
ShapeMarkers variant or, for geometry collections, a list of nested
MapShapes. Operations are dispatched on the shape type.
"""

from enum import Enum
from typing import List, Union

from geoshape.core.shape_markers import ShapeMarkers


class MapShapeType(Enum):
    """Kinds of rendered shapes."""

    POINT = "Point"
    POLYLINE = "LineString"
    POLYGON = "Polygon"
    MULTI_POINT = "MultiPoint"
    MULTI_POLYLINE = "MultiLineString"
    MULTI_POLYGON = "MultiPolygon"
    COLLECTION = "GeometryCollection"


class MapShape:
    """
    A rendered geometry and the handles used to edit it.

    Attributes:
        shape_type: Kind of the shape; its value is the GeoJSON type name.
        shape: ShapeMarkers for single geometries, List[MapShape] for
            collections.
    """

    def __init__(
        self, shape_type: MapShapeType, shape: Union[ShapeMarkers, List["MapShape"]]
    ) -> None:
        if (shape_type is MapShapeType.COLLECTION) != isinstance(shape, list):
            raise ValueError(
                f"{shape_type.name} shape cannot wrap {type(shape).__name__}"
            )
        self.shape_type = shape_type
        self.shape = shape

    def _parts(self) -> List[Union[ShapeMarkers, "MapShape"]]:
        if self.shape_type is MapShapeType.COLLECTION:
            return list(self.shape)
        return [self.shape]

    def remove(self) -> None:
        """Removes the shape and every handle from the map."""
        for part in self._parts():
            part.remove()

    def update(self) -> None:
        """Redraws the shape from the current marker positions."""
        for part in self._parts():
            part.update()

    def is_valid(self) -> bool:
        """
        Checks whether every part of the shape is valid.

        Returns:
            bool: True if valid.
        """
        return all(part.is_valid() for part in self._parts())

    def set_visible(self, visible: bool) -> None:
        """
        Shows or hides the shape and its handles.

        Args:
            visible: Visibility flag.
        """
        for part in self._parts():
            part.set_visible(visible)

    def set_z_index(self, z_index: float) -> None:
        """
        Sets the stacking order of the shape and its handles.

        Args:
            z_index: Z value passed to the surface.
        """
        for part in self._parts():
            part.set_z_index(z_index)
