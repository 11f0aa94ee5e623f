"""
Geographic Point Model.

Defines the GeoPoint value type used for every marker position and every
rendered vertex. Points are copied by value and carry no ownership.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence


@dataclass(frozen=True)
class GeoPoint:
    """
    A latitude/longitude pair in decimal degrees.

    Attributes:
        latitude: Latitude in degrees, positive north.
        longitude: Longitude in degrees, positive east.
    """

    latitude: float
    longitude: float

    def to_lon_lat(self) -> List[float]:
        """
        Returns the point in GeoJSON coordinate order.

        Returns:
            List[float]: [longitude, latitude]
        """
        return [self.longitude, self.latitude]

    @classmethod
    def from_lon_lat(cls, coordinate: Sequence[float]) -> "GeoPoint":
        """
        Creates a GeoPoint from a GeoJSON position.

        Args:
            coordinate: [longitude, latitude, (altitude ignored)].

        Returns:
            GeoPoint: The point.

        Raises:
            ValueError: If fewer than two ordinates are given.
        """
        if len(coordinate) < 2:
            raise ValueError(f"GeoJSON position needs two ordinates, got {coordinate}")
        return cls(latitude=float(coordinate[1]), longitude=float(coordinate[0]))

    def to_dict(self) -> Dict[str, Any]:
        """Converts the point to a dictionary."""
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeoPoint":
        """Creates a GeoPoint from a dictionary produced by to_dict()."""
        return cls(latitude=data["latitude"], longitude=data["longitude"])
