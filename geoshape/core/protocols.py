"""
Protocol Interfaces for the Rendering Surface.

This module defines Protocol interfaces (PEP 544) for the collaborators the
editing core consumes: the marker handles and the rendering surface that
owns them and draws shape facades.

Any map widget that implements the required methods satisfies the protocol
without explicit inheritance, which keeps the editing core testable without
a running GUI.
"""

from typing import Any, List, Optional, Protocol, Sequence, runtime_checkable

from geoshape.core.geo_point import GeoPoint


@runtime_checkable
class MarkerHandle(Protocol):
    """
    A draggable point handle owned by the rendering surface.

    The id is stable for the lifetime of the handle. The position is
    changed by drag gestures; the editing core only reads it.
    """

    @property
    def id(self) -> str:
        """Stable identifier, unique within the rendering session."""
        ...

    @property
    def position(self) -> GeoPoint:
        """Current geographic position."""
        ...

    @property
    def visible(self) -> bool:
        """Whether the handle is currently shown."""
        ...


@runtime_checkable
class RenderSurface(Protocol):
    """
    Protocol for the map surface that renders handles and shape overlays.

    Facade handles are opaque to the editing core; it only passes them back
    to the surface that created them.
    """

    def create_marker(self, position: GeoPoint) -> MarkerHandle:
        """Create a draggable handle at the position."""
        ...

    def remove_marker(self, handle: MarkerHandle) -> None:
        """Remove the handle from the map."""
        ...

    def set_marker_visible(self, handle: MarkerHandle, visible: bool) -> None:
        """Show or hide a handle."""
        ...

    def set_marker_z_index(self, handle: MarkerHandle, z_index: float) -> None:
        """Set the stacking order of a handle."""
        ...

    def create_polyline(self, points: Sequence[GeoPoint]) -> Any:
        """Render an open line through the points and return its facade."""
        ...

    def create_polygon(
        self, points: Sequence[GeoPoint], holes: Sequence[Sequence[GeoPoint]]
    ) -> Any:
        """Render a polygon with holes and return its facade."""
        ...

    def update_facade(
        self,
        facade: Any,
        points: List[GeoPoint],
        holes: Optional[List[List[GeoPoint]]] = None,
    ) -> None:
        """Replace the geometry of a facade in a single batch."""
        ...

    def remove_facade(self, facade: Any) -> None:
        """Remove a facade from the map."""
        ...

    def set_facade_visible(self, facade: Any, visible: bool) -> None:
        """Show or hide a facade."""
        ...

    def set_facade_z_index(self, facade: Any, z_index: float) -> None:
        """Set the stacking order of a facade."""
        ...
