"""
Map Widget Package.

Provides the PySide6 rendering surface for editable map shapes.
"""

from geoshape.gui.widgets.map.coordinate_system import GeoCoordinateSystem
from geoshape.gui.widgets.map.map_shape_scene import MapShapeScene
from geoshape.gui.widgets.map.marker_handle_item import MarkerHandleItem, SceneMarker
from geoshape.gui.widgets.map.shape_facade_item import ShapeFacadeItem

__all__ = [
    "GeoCoordinateSystem",
    "MapShapeScene",
    "MarkerHandleItem",
    "SceneMarker",
    "ShapeFacadeItem",
]
