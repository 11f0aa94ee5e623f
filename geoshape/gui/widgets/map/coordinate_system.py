"""
Map Coordinate System Module.

Handles translation between geographic coordinates and scene coordinates
using an equirectangular (plate carree) layout:

- Longitude -180..180 maps left to right onto 0..360 * scale.
- Latitude 90..-90 maps top to bottom onto 0..180 * scale.

Only used for drawing; distances are always computed on the sphere.
"""

from PySide6.QtCore import QPointF, QRectF

from geoshape.core.geo_point import GeoPoint

# Scene pixels per degree
DEFAULT_SCALE = 10.0


class GeoCoordinateSystem:
    """
    Manages coordinate transformations for the map scene.
    """

    def __init__(self, scale: float = DEFAULT_SCALE) -> None:
        """
        Initializes the GeoCoordinateSystem.

        Args:
            scale: Scene pixels per degree of longitude and latitude.

        Raises:
            ValueError: If the scale is not positive.
        """
        if scale <= 0:
            raise ValueError("Scale must be positive")
        self._scale = scale

    @property
    def scale(self) -> float:
        """Scene pixels per degree."""
        return self._scale

    def scene_rect(self) -> QRectF:
        """
        Returns the scene rectangle covering the whole world.

        Returns:
            QRectF: Bounds of the map in scene coordinates.
        """
        return QRectF(0.0, 0.0, 360.0 * self._scale, 180.0 * self._scale)

    def to_scene(self, point: GeoPoint) -> QPointF:
        """
        Converts a geographic point to scene coordinates.

        Args:
            point: Geographic point.

        Returns:
            QPointF: Point in scene coordinates.
        """
        return QPointF(
            (point.longitude + 180.0) * self._scale,
            (90.0 - point.latitude) * self._scale,
        )

    def to_geo(self, scene_pos: QPointF) -> GeoPoint:
        """
        Converts scene coordinates to a geographic point.

        Args:
            scene_pos: Point in scene coordinates.

        Returns:
            GeoPoint: Clamped to valid latitude and longitude ranges.
        """
        longitude = scene_pos.x() / self._scale - 180.0
        latitude = 90.0 - scene_pos.y() / self._scale
        return GeoPoint(
            latitude=max(-90.0, min(90.0, latitude)),
            longitude=max(-180.0, min(180.0, longitude)),
        )
