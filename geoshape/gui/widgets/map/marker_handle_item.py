"""
Marker Handle Item Module.

Provides the draggable vertex handle drawn on the map scene and the
SceneMarker wrapper the editing core addresses it through.
"""

import logging
from typing import Any, Optional

from PySide6.QtCore import QRectF, Qt, Signal
from PySide6.QtGui import QBrush, QColor, QCursor, QPainter, QPen
from PySide6.QtWidgets import QGraphicsItem, QGraphicsObject, QMenu

from geoshape.core.geo_point import GeoPoint
from geoshape.gui.widgets.map.coordinate_system import GeoCoordinateSystem

logger = logging.getLogger(__name__)

# Constants for visuals
HANDLE_SIZE = 14
COLOR_HANDLE = QColor("#ECF0F1")
COLOR_BORDER = QColor("#2C3E50")
COLOR_SELECTED = QColor("#F1C40F")  # Yellow highlight

# Handles draw above facades
HANDLE_Z_VALUE = 10


class MarkerHandleItem(QGraphicsObject):
    """
    Visual handle for a single shape vertex.
    Interactive: can be dragged, and deleted from its context menu.
    """

    drag_finished = Signal(str)  # marker_id
    delete_requested = Signal(str)  # marker_id

    def __init__(self, marker_id: str, parent: Optional[QGraphicsItem] = None) -> None:
        super().__init__(parent)
        self.marker_id = marker_id

        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsSelectable, True)
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsMovable, True)
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemSendsGeometryChanges, True)
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIgnoresTransformations, True)

        self.setAcceptHoverEvents(True)
        self._is_hovered = False
        self._press_pos = None

        self.setCursor(QCursor(Qt.CursorShape.SizeAllCursor))
        self.setZValue(HANDLE_Z_VALUE)

    def boundingRect(self) -> QRectF:
        half = HANDLE_SIZE / 2
        return QRectF(-half, -half, HANDLE_SIZE, HANDLE_SIZE)

    def paint(
        self, painter: QPainter, option: Any, widget: Optional[Any] = None
    ) -> None:
        """Draws the handle as a circle."""
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        color = COLOR_SELECTED if self.isSelected() else COLOR_HANDLE
        if self._is_hovered:
            color = color.lighter(120)

        painter.setBrush(QBrush(color))
        painter.setPen(QPen(COLOR_BORDER, 2))
        painter.drawEllipse(self.boundingRect().adjusted(1, 1, -1, -1))

    def hoverEnterEvent(self, event: Any) -> None:
        self._is_hovered = True
        self.update()
        super().hoverEnterEvent(event)

    def hoverLeaveEvent(self, event: Any) -> None:
        self._is_hovered = False
        self.update()
        super().hoverLeaveEvent(event)

    def mousePressEvent(self, event: Any) -> None:
        self._press_pos = self.scenePos()
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event: Any) -> None:
        super().mouseReleaseEvent(event)
        # Only a real move changes the geometry
        if self._press_pos is not None and self.scenePos() != self._press_pos:
            logger.debug(f"Handle {self.marker_id} dragged to {self.scenePos()}")
            self.drag_finished.emit(self.marker_id)
        self._press_pos = None

    def contextMenuEvent(self, event: Any) -> None:
        """Handle context menu for deleting the vertex."""
        menu = QMenu()
        delete_action = menu.addAction("Delete Vertex")

        action = menu.exec(event.screenPos())
        if action == delete_action:
            self.delete_requested.emit(self.marker_id)


class SceneMarker:
    """
    Marker handle as seen by the editing core.

    Wraps a MarkerHandleItem and reads its geographic position from the
    item's scene position, so drags are reflected without bookkeeping.
    """

    def __init__(
        self, item: MarkerHandleItem, coord_system: GeoCoordinateSystem
    ) -> None:
        self.item = item
        self._coord_system = coord_system

    @property
    def id(self) -> str:
        return self.item.marker_id

    @property
    def position(self) -> GeoPoint:
        return self._coord_system.to_geo(self.item.scenePos())

    @property
    def visible(self) -> bool:
        return self.item.isVisible()

    def __repr__(self) -> str:
        return f"SceneMarker({self.id!r}, {self.position})"
