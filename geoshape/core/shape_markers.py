"""
Shape Markers Module.

Keeps the draggable vertex handles of an editable shape consistent with the
overlay rendered for it. Each geometry kind has a ShapeMarkers variant that
owns an ordered sequence of marker handles (the order is the geometry) and
regenerates its facade from the current handle positions on every update.

Variants:
    PointMarkers: A single point handle, no facade.
    PolylineMarkers: Open chain rendered as a polyline.
    PolygonMarkers: Closed ring rendered as a polygon, owns PolygonHoleMarkers.
    PolygonHoleMarkers: Closed ring inside a polygon, rendered by its parent.
    MultiPointMarkers, MultiPolylineMarkers, MultiPolygonMarkers:
        Composites that own a list of component shapes.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, TypeVar

from geoshape.core.geo_point import GeoPoint
from geoshape.core.insertion import add_marker_as_polygon, add_marker_as_polyline
from geoshape.core.protocols import MarkerHandle, RenderSurface

logger = logging.getLogger(__name__)

# Minimum vertices of a drawn ring and chain
MIN_RING_MARKERS = 3
MIN_CHAIN_MARKERS = 2


def points_from_markers(markers: List[MarkerHandle]) -> List[GeoPoint]:
    """
    Reads the current positions of the markers in order.

    Args:
        markers: Ordered marker handles.

    Returns:
        List[GeoPoint]: Their positions.
    """
    return [marker.position for marker in markers]


class ShapeMarkers(ABC):
    """
    Abstract base class for the markers of one editable shape.

    Owns an ordered list of marker handles. The handles themselves belong to
    the rendering surface; removing a marker here removes its handle too.
    """

    def __init__(self, surface: RenderSurface) -> None:
        """
        Initializes the shape markers.

        Args:
            surface: The rendering surface that owns the handles and facades.
        """
        self._surface = surface
        self._markers: List[MarkerHandle] = []

    @property
    def surface(self) -> RenderSurface:
        """The rendering surface this shape is drawn on."""
        return self._surface

    def get_markers(self) -> List[MarkerHandle]:
        """
        Returns the ordered markers of this shape only, not of its children.

        Returns:
            List[MarkerHandle]: The live marker list.
        """
        return self._markers

    def add(self, marker: MarkerHandle) -> None:
        """
        Appends a marker without applying the insertion policy.

        Used when building markers from an existing geometry, whose vertex
        order is already correct.

        Args:
            marker: The marker to append.
        """
        self._markers.append(marker)

    def delete(self, marker: MarkerHandle) -> bool:
        """
        Deletes a marker owned by this shape and refreshes the facade.

        Args:
            marker: The marker to delete.

        Returns:
            bool: True if the marker was owned here and removed.
        """
        if not any(m is marker for m in self._markers):
            return False

        self._markers = [m for m in self._markers if m is not marker]
        self._surface.remove_marker(marker)
        logger.debug(
            f"Deleted marker {marker.id} from {type(self).__name__}, "
            f"{len(self._markers)} left"
        )
        self.update()
        return True

    def create_child(self) -> "ShapeMarkers":
        """
        Creates a child shape bound to this one.

        Raises:
            NotImplementedError: This kind of shape has no children.
        """
        raise NotImplementedError(f"{type(self).__name__} does not support children")

    def set_visible_markers(self, visible: bool) -> None:
        """
        Shows or hides the marker handles, leaving the facade untouched.

        Args:
            visible: Visibility flag.
        """
        for marker in self._markers:
            self._surface.set_marker_visible(marker, visible)

    def set_z_index(self, z_index: float) -> None:
        """
        Sets the stacking order of the marker handles.

        Args:
            z_index: Z value passed to the surface.
        """
        for marker in self._markers:
            self._surface.set_marker_z_index(marker, z_index)

    def is_deleted(self) -> bool:
        """
        Checks whether every vertex of the shape has been deleted.

        Returns:
            bool: True when the shape has no markers.
        """
        return not self._markers

    def _remove_markers(self) -> None:
        """Removes every owned marker handle from the surface."""
        for marker in self._markers:
            self._surface.remove_marker(marker)
        self._markers = []

    @abstractmethod
    def add_new(self, marker: MarkerHandle) -> None:
        """
        Inserts a newly created marker at its best position.

        Args:
            marker: The new marker.
        """

    @abstractmethod
    def update(self) -> None:
        """Regenerates the rendered facade from the current marker positions."""

    @abstractmethod
    def remove(self) -> None:
        """Removes the facade and every owned marker, including children's."""

    @abstractmethod
    def set_visible(self, visible: bool) -> None:
        """
        Shows or hides the facade, the markers and the children.

        Args:
            visible: Visibility flag.
        """

    @abstractmethod
    def is_valid(self) -> bool:
        """
        Checks whether the shape has a drawable number of vertices.

        Returns:
            bool: True if valid.
        """


class PointMarkers(ShapeMarkers):
    """
    Markers of a single point. The handle is the rendering, no facade.
    """

    def add_new(self, marker: MarkerHandle) -> None:
        self._markers.append(marker)

    def update(self) -> None:
        # The handle is the point; nothing else to redraw
        pass

    def remove(self) -> None:
        self._remove_markers()

    def set_visible(self, visible: bool) -> None:
        self.set_visible_markers(visible)

    def is_valid(self) -> bool:
        return len(self._markers) <= 1


class _FacadeShapeMarkers(ShapeMarkers):
    """
    Shared facade bookkeeping for shapes rendered as a single overlay.

    The facade may not exist yet while a shape is first being drawn; it is
    created on the first update with vertices, honouring the visibility and
    z-index requested before it existed.
    """

    def __init__(self, surface: RenderSurface, facade: Any = None) -> None:
        super().__init__(surface)
        self._facade = facade
        self._visible = True
        self._z_index: Optional[float] = None

    @property
    def facade(self) -> Any:
        """The rendered overlay, or None when not rendered."""
        return self._facade

    @facade.setter
    def facade(self, facade: Any) -> None:
        self._facade = facade

    @abstractmethod
    def _create_facade(self) -> Any:
        """Asks the surface for a new facade of the current geometry."""

    @abstractmethod
    def _update_facade(self) -> None:
        """Pushes the current geometry to the existing facade in one batch."""

    def update(self) -> None:
        if self.is_deleted():
            self.remove()
            return

        if self._facade is None:
            self._facade = self._create_facade()
            if not self._visible:
                self._surface.set_facade_visible(self._facade, False)
            if self._z_index is not None:
                self._surface.set_facade_z_index(self._facade, self._z_index)
        else:
            self._update_facade()

    def _remove_facade(self) -> None:
        if self._facade is not None:
            self._surface.remove_facade(self._facade)
            self._facade = None

    def set_visible(self, visible: bool) -> None:
        self._visible = visible
        if self._facade is not None:
            self._surface.set_facade_visible(self._facade, visible)
        self.set_visible_markers(visible)

    def set_z_index(self, z_index: float) -> None:
        self._z_index = z_index
        if self._facade is not None:
            self._surface.set_facade_z_index(self._facade, z_index)
        super().set_z_index(z_index)


class PolylineMarkers(_FacadeShapeMarkers):
    """
    Markers of an open chain rendered as a polyline.
    """

    def add_new(self, marker: MarkerHandle) -> None:
        index = add_marker_as_polyline(marker, self._markers)
        logger.debug(f"Inserted marker {marker.id} into polyline at {index}")

    def _create_facade(self) -> Any:
        return self._surface.create_polyline(points_from_markers(self._markers))

    def _update_facade(self) -> None:
        self._surface.update_facade(self._facade, points_from_markers(self._markers))

    def remove(self) -> None:
        self._remove_facade()
        self._remove_markers()

    def is_valid(self) -> bool:
        return not self._markers or len(self._markers) >= MIN_CHAIN_MARKERS


class PolygonMarkers(_FacadeShapeMarkers):
    """
    Markers of a polygon ring and of its holes.

    The polygon owns its holes; each hole keeps a back-reference to the
    polygon only to request a redraw of the shared facade.
    """

    def __init__(self, surface: RenderSurface, facade: Any = None) -> None:
        super().__init__(surface, facade)
        self._holes: List["PolygonHoleMarkers"] = []

    def get_holes(self) -> List["PolygonHoleMarkers"]:
        """
        Returns the holes, including deleted ones that were not pruned.

        Returns:
            List[PolygonHoleMarkers]: The live hole list.
        """
        return self._holes

    def add_hole(self, hole: "PolygonHoleMarkers") -> None:
        """
        Adds an existing hole to the polygon.

        Args:
            hole: Hole whose parent is this polygon.
        """
        self._holes.append(hole)

    def create_child(self) -> "PolygonHoleMarkers":
        """
        Creates a new empty hole in this polygon.

        Returns:
            PolygonHoleMarkers: The hole, already registered with the polygon.
        """
        hole = PolygonHoleMarkers(self)
        self._holes.append(hole)
        logger.debug(f"Created hole {len(self._holes)} in polygon")
        return hole

    def prune_deleted_holes(self) -> int:
        """
        Drops the structural entries of holes whose markers were all deleted.

        Returns:
            int: Number of holes pruned.
        """
        remaining = [hole for hole in self._holes if not hole.is_deleted()]
        pruned = len(self._holes) - len(remaining)
        self._holes = remaining
        return pruned

    def add_new(self, marker: MarkerHandle) -> None:
        index = add_marker_as_polygon(marker, self._markers)
        logger.debug(f"Inserted marker {marker.id} into polygon at {index}")

    def hole_points(self) -> List[List[GeoPoint]]:
        """
        Reads the positions of every hole that still has markers.

        Returns:
            List[List[GeoPoint]]: One point list per non-deleted hole.
        """
        return [
            points_from_markers(hole.get_markers())
            for hole in self._holes
            if not hole.is_deleted()
        ]

    def _create_facade(self) -> Any:
        return self._surface.create_polygon(
            points_from_markers(self._markers), self.hole_points()
        )

    def _update_facade(self) -> None:
        self._surface.update_facade(
            self._facade, points_from_markers(self._markers), self.hole_points()
        )

    def remove(self) -> None:
        self._remove_facade()
        self._remove_markers()
        for hole in self._holes:
            hole.remove()
        self._holes = []

    def set_visible_markers(self, visible: bool) -> None:
        # Also reached from set_visible, holes have no facade of their own
        super().set_visible_markers(visible)
        for hole in self._holes:
            hole.set_visible_markers(visible)

    def set_z_index(self, z_index: float) -> None:
        super().set_z_index(z_index)
        for hole in self._holes:
            hole.set_z_index(z_index)

    def is_valid(self) -> bool:
        if self._markers and len(self._markers) < MIN_RING_MARKERS:
            return False
        return all(hole.is_valid() for hole in self._holes)


class PolygonHoleMarkers(ShapeMarkers):
    """
    Markers of a hole ring inside a polygon.

    A hole has no facade of its own: it is drawn as part of the parent
    polygon, so updates are forwarded to the parent.
    """

    def __init__(self, parent: PolygonMarkers) -> None:
        """
        Initializes the hole.

        Args:
            parent: The polygon the hole belongs to.
        """
        super().__init__(parent.surface)
        self._parent = parent

    @property
    def parent(self) -> PolygonMarkers:
        """The polygon this hole is cut from."""
        return self._parent

    def add_new(self, marker: MarkerHandle) -> None:
        index = add_marker_as_polygon(marker, self._markers)
        logger.debug(f"Inserted marker {marker.id} into polygon hole at {index}")

    def update(self) -> None:
        self._parent.update()

    def remove(self) -> None:
        self._remove_markers()

    def set_visible(self, visible: bool) -> None:
        self.set_visible_markers(visible)

    def is_valid(self) -> bool:
        return not self._markers or len(self._markers) >= MIN_RING_MARKERS


ChildT = TypeVar("ChildT", bound=ShapeMarkers)


class _CompositeShapeMarkers(ShapeMarkers, Generic[ChildT]):
    """
    Shared behaviour of multi-geometry shapes.

    A composite has no markers of its own; each marker belongs to exactly
    one component, which is also its owner in the marker index.
    """

    def __init__(self, surface: RenderSurface) -> None:
        super().__init__(surface)
        self._children: List[ChildT] = []

    @abstractmethod
    def _new_child(self) -> ChildT:
        """Instantiates an empty component of the right kind."""

    def get_children(self) -> List[ChildT]:
        """
        Returns the component shapes.

        Returns:
            List: The live component list.
        """
        return self._children

    def add_child(self, child: ChildT) -> None:
        """
        Adds an existing component.

        Args:
            child: The component shape.
        """
        self._children.append(child)

    def create_child(self) -> ChildT:
        """
        Creates a new empty component.

        Returns:
            The component, already part of this composite.
        """
        child = self._new_child()
        self._children.append(child)
        return child

    def add(self, marker: MarkerHandle) -> None:
        raise NotImplementedError(
            f"{type(self).__name__} markers are added to its components"
        )

    def add_new(self, marker: MarkerHandle) -> None:
        # New vertices extend the component being drawn, the last one
        if not self._children:
            self.create_child()
        self._children[-1].add_new(marker)

    def update(self) -> None:
        for child in self._children:
            child.update()

    def remove(self) -> None:
        for child in self._children:
            child.remove()
        self._children = []

    def set_visible(self, visible: bool) -> None:
        for child in self._children:
            child.set_visible(visible)

    def set_visible_markers(self, visible: bool) -> None:
        for child in self._children:
            child.set_visible_markers(visible)

    def set_z_index(self, z_index: float) -> None:
        for child in self._children:
            child.set_z_index(z_index)

    def is_valid(self) -> bool:
        return all(child.is_valid() for child in self._children)

    def is_deleted(self) -> bool:
        return all(child.is_deleted() for child in self._children)


class MultiPointMarkers(_CompositeShapeMarkers[PointMarkers]):
    """Markers of a multi-point, one PointMarkers per point."""

    def _new_child(self) -> PointMarkers:
        return PointMarkers(self._surface)

    def add_new(self, marker: MarkerHandle) -> None:
        # Every new point is its own component
        self.create_child().add_new(marker)


class MultiPolylineMarkers(_CompositeShapeMarkers[PolylineMarkers]):
    """Markers of a multi-polyline, one PolylineMarkers per line."""

    def _new_child(self) -> PolylineMarkers:
        return PolylineMarkers(self._surface)


class MultiPolygonMarkers(_CompositeShapeMarkers[PolygonMarkers]):
    """Markers of a multi-polygon, one PolygonMarkers per polygon."""

    def _new_child(self) -> PolygonMarkers:
        return PolygonMarkers(self._surface)
