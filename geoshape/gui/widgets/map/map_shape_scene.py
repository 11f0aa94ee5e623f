"""
Map Shape Scene Module.

Provides MapShapeScene, a QGraphicsScene that implements the RenderSurface
protocol: it creates draggable vertex handles and polyline/polygon facades,
and reports user interaction with them as Qt signals.
"""

import logging
import uuid
from typing import Dict, List, Optional, Sequence

from PySide6.QtCore import QObject, QPointF, Qt, Signal
from PySide6.QtGui import QTransform
from PySide6.QtWidgets import QGraphicsScene, QGraphicsSceneMouseEvent

from geoshape.core.geo_point import GeoPoint
from geoshape.gui.widgets.map.coordinate_system import GeoCoordinateSystem
from geoshape.gui.widgets.map.marker_handle_item import MarkerHandleItem, SceneMarker
from geoshape.gui.widgets.map.shape_facade_item import ShapeFacadeItem

logger = logging.getLogger(__name__)

# Manhattan distance in scene pixels below which a press/release is a tap
CLICK_THRESHOLD = 4


class MapShapeScene(QGraphicsScene):
    """
    Scene rendering editable map shapes.

    Signals:
        map_clicked: Emitted when the empty map is tapped.
                     Args: (latitude: float, longitude: float)
        marker_drag_finished: Emitted when a handle is released after a drag.
                     Args: (marker_id: str)
        marker_delete_requested: Emitted when deleting a handle is requested.
                     Args: (marker_id: str)
    """

    map_clicked = Signal(float, float)
    marker_drag_finished = Signal(str)
    marker_delete_requested = Signal(str)

    def __init__(
        self,
        coord_system: Optional[GeoCoordinateSystem] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        """
        Initializes the MapShapeScene.

        Args:
            coord_system: Geographic to scene mapping, default scale if omitted.
            parent: Parent object.
        """
        super().__init__(parent)
        self.coord_system = coord_system or GeoCoordinateSystem()
        self.setSceneRect(self.coord_system.scene_rect())

        self.markers: Dict[str, SceneMarker] = {}
        self.facades: List[ShapeFacadeItem] = []
        self._press_pos = None

    # ------------------------------------------------------------------
    # RenderSurface: marker handles
    # ------------------------------------------------------------------

    def create_marker(self, position: GeoPoint) -> SceneMarker:
        """Creates a draggable handle at the position."""
        item = MarkerHandleItem(str(uuid.uuid4()))
        item.setPos(self.coord_system.to_scene(position))
        item.drag_finished.connect(self.marker_drag_finished)
        item.delete_requested.connect(self.marker_delete_requested)
        self.addItem(item)

        marker = SceneMarker(item, self.coord_system)
        self.markers[marker.id] = marker
        return marker

    def remove_marker(self, handle: SceneMarker) -> None:
        """Removes a handle; removing it twice is a no-op."""
        if self.markers.pop(handle.id, None) is None:
            return
        self.removeItem(handle.item)

    def set_marker_visible(self, handle: SceneMarker, visible: bool) -> None:
        handle.item.setVisible(visible)

    def set_marker_z_index(self, handle: SceneMarker, z_index: float) -> None:
        handle.item.setZValue(z_index)

    def get_marker(self, marker_id: str) -> Optional[SceneMarker]:
        """
        Gets a handle by id.

        Args:
            marker_id: ID of the handle.

        Returns:
            Optional[SceneMarker]: The handle, or None if not on the scene.
        """
        return self.markers.get(marker_id)

    # ------------------------------------------------------------------
    # RenderSurface: facades
    # ------------------------------------------------------------------

    def create_polyline(self, points: Sequence[GeoPoint]) -> ShapeFacadeItem:
        """Draws an open line through the points."""
        facade = ShapeFacadeItem(self.coord_system, closed=False)
        return self._add_facade(facade, points)

    def create_polygon(
        self, points: Sequence[GeoPoint], holes: Sequence[Sequence[GeoPoint]]
    ) -> ShapeFacadeItem:
        """Draws a polygon with holes."""
        facade = ShapeFacadeItem(self.coord_system, closed=True)
        return self._add_facade(facade, points, [list(h) for h in holes])

    def _add_facade(
        self,
        facade: ShapeFacadeItem,
        points: Sequence[GeoPoint],
        holes: Optional[List[List[GeoPoint]]] = None,
    ) -> ShapeFacadeItem:
        facade.set_geometry(list(points), holes)
        self.addItem(facade)
        self.facades.append(facade)
        return facade

    def update_facade(
        self,
        facade: ShapeFacadeItem,
        points: List[GeoPoint],
        holes: Optional[List[List[GeoPoint]]] = None,
    ) -> None:
        facade.set_geometry(points, holes)

    def remove_facade(self, facade: ShapeFacadeItem) -> None:
        if facade not in self.facades:
            return
        self.facades.remove(facade)
        self.removeItem(facade)

    def set_facade_visible(self, facade: ShapeFacadeItem, visible: bool) -> None:
        facade.setVisible(visible)

    def set_facade_z_index(self, facade: ShapeFacadeItem, z_index: float) -> None:
        facade.setZValue(z_index)

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    def mousePressEvent(self, event: QGraphicsSceneMouseEvent) -> None:
        """Remembers presses on the empty map so a release can become a tap."""
        transform = self.views()[0].transform() if self.views() else QTransform()
        item = self.itemAt(event.scenePos(), transform)
        if event.button() == Qt.MouseButton.LeftButton and not isinstance(
            item, MarkerHandleItem
        ):
            self._press_pos = event.scenePos()
        else:
            self._press_pos = None
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event: QGraphicsSceneMouseEvent) -> None:
        """Emits map_clicked for a tap (press and release without a drag)."""
        super().mouseReleaseEvent(event)
        if self._press_pos is None:
            return

        distance = (event.scenePos() - self._press_pos).manhattanLength()
        self._press_pos = None
        if distance < CLICK_THRESHOLD:
            self.emit_map_click(event.scenePos())

    def emit_map_click(self, scene_pos: QPointF) -> None:
        """
        Emits map_clicked with the geographic position of a scene point.

        Args:
            scene_pos: Tapped point in scene coordinates.
        """
        point = self.coord_system.to_geo(scene_pos)
        logger.debug(f"Map tapped at {point.latitude:.5f}, {point.longitude:.5f}")
        self.map_clicked.emit(point.latitude, point.longitude)
