"""
Shape Facade Item Module.

Provides the path items that draw polylines and polygons (with holes) on the
map scene. Their geometry is always replaced as a whole from the handle
positions; they are never edited directly.
"""

from typing import List, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QBrush, QColor, QPainterPath, QPen, QPolygonF
from PySide6.QtWidgets import QGraphicsItem, QGraphicsPathItem

from geoshape.core.geo_point import GeoPoint
from geoshape.gui.widgets.map.coordinate_system import GeoCoordinateSystem

COLOR_LINE = QColor("#3498DB")  # Blue
COLOR_FILL = QColor(52, 152, 219, 70)  # Translucent blue

# Draw above the map (0) but below handles (10)
FACADE_Z_VALUE = 5


class ShapeFacadeItem(QGraphicsPathItem):
    """
    Renders a polyline, or a polygon whose holes are cut out with an
    odd-even fill.
    """

    def __init__(
        self,
        coord_system: GeoCoordinateSystem,
        closed: bool,
        parent: Optional[QGraphicsItem] = None,
    ) -> None:
        super().__init__(parent)
        self._coord_system = coord_system
        self.closed = closed
        self.points: List[GeoPoint] = []
        self.holes: List[List[GeoPoint]] = []

        self.setZValue(FACADE_Z_VALUE)
        self.setPen(QPen(COLOR_LINE, 2))
        if closed:
            self.setBrush(QBrush(COLOR_FILL))
        else:
            self.setBrush(QBrush(Qt.BrushStyle.NoBrush))

    def set_geometry(
        self, points: List[GeoPoint], holes: Optional[List[List[GeoPoint]]] = None
    ) -> None:
        """
        Rebuilds the path from the given vertices in one step.

        Args:
            points: Line or outer ring vertices, in order.
            holes: Hole rings, ignored for polylines.
        """
        self.points = list(points)
        self.holes = [list(hole) for hole in holes or []] if self.closed else []

        path = QPainterPath()
        path.setFillRule(Qt.FillRule.OddEvenFill)
        if self.closed:
            for ring in [self.points] + self.holes:
                self._add_ring(path, ring)
        elif self.points:
            path.moveTo(self._coord_system.to_scene(self.points[0]))
            for point in self.points[1:]:
                path.lineTo(self._coord_system.to_scene(point))

        self.setPath(path)

    def _add_ring(self, path: QPainterPath, ring: List[GeoPoint]) -> None:
        if not ring:
            return
        polygon = QPolygonF([self._coord_system.to_scene(p) for p in ring])
        path.addPolygon(polygon)
        path.closeSubpath()
