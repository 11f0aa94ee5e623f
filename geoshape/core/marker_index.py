"""
Marker Index Module.

Maps every marker handle on the map to the ShapeMarkers that owns it, so an
event reported for a handle (drag, tap, delete) can be resolved to the shape
that must be edited and redrawn. Markers that belong to no shape are tracked
as bare markers with a None owner.

The index is passed explicitly to whoever edits shapes; there is no global
instance.
"""

import logging
from typing import Dict, Iterable, List, Optional, Union

from geoshape.core.map_shape import MapShape
from geoshape.core.protocols import MarkerHandle, RenderSurface
from geoshape.core.shape_markers import ShapeMarkers

logger = logging.getLogger(__name__)

MarkerRef = Union[MarkerHandle, str]

_MISSING = object()


def _marker_id(marker: MarkerRef) -> str:
    return marker if isinstance(marker, str) else marker.id


class MarkerIndex:
    """
    Index from marker id to owning shape markers.

    Every marker of every shape, nested holes included, has exactly one
    entry pointing at its immediate owner. A hole's markers map to the hole,
    not to the parent polygon.
    """

    def __init__(
        self, surface: RenderSurface, shape: Optional[MapShape] = None
    ) -> None:
        """
        Initializes an empty index.

        Args:
            surface: Surface that owns the indexed marker handles.
            shape: The rendered shape the index was built for, if any.
        """
        self._surface = surface
        self._owners: Dict[str, Optional[ShapeMarkers]] = {}
        self._handles: Dict[str, MarkerHandle] = {}
        self.shape = shape

    def add(self, marker: MarkerRef, owner: Optional[ShapeMarkers]) -> None:
        """
        Registers the owner of a marker, replacing any previous owner.

        Args:
            marker: The marker handle or its id.
            owner: The owning shape markers, or None for a bare marker.
        """
        marker_id = _marker_id(marker)
        self._owners[marker_id] = owner
        if not isinstance(marker, str):
            self._handles[marker_id] = marker

    def add_markers(self, owner: ShapeMarkers) -> None:
        """
        Registers every marker currently owned by the shape.

        Args:
            owner: The shape markers.
        """
        for marker in owner.get_markers():
            self.add(marker, owner)

    def add_bare(self, marker: MarkerHandle) -> None:
        """
        Registers a marker that belongs to no shape.

        Args:
            marker: The marker handle.
        """
        self.add(marker, None)

    def add_bare_markers(self, markers: Iterable[MarkerHandle]) -> None:
        """
        Registers markers that belong to no shape.

        Args:
            markers: The marker handles.
        """
        for marker in markers:
            self.add_bare(marker)

    def merge(self, other: "MarkerIndex") -> None:
        """
        Absorbs every entry of another index. On colliding ids the other
        index's owner wins.

        Args:
            other: Index of a component shape.
        """
        self._owners.update(other._owners)
        self._handles.update(other._handles)

    def contains(self, marker: MarkerRef) -> bool:
        """
        Checks whether the marker is indexed.

        Args:
            marker: The marker handle or its id.

        Returns:
            bool: True if indexed, with or without an owner.
        """
        return _marker_id(marker) in self._owners

    def __contains__(self, marker: MarkerRef) -> bool:
        return self.contains(marker)

    def lookup(self, marker: MarkerRef) -> Optional[ShapeMarkers]:
        """
        Gets the shape markers that own a marker.

        Args:
            marker: The marker handle or its id.

        Returns:
            Optional[ShapeMarkers]: The owner, or None for bare or unknown markers.
        """
        return self._owners.get(_marker_id(marker))

    def _resolve_handle(
        self, marker: MarkerRef, owner: Optional[ShapeMarkers]
    ) -> Optional[MarkerHandle]:
        if not isinstance(marker, str):
            return marker
        handle = self._handles.get(marker)
        if handle is None and owner is not None:
            handle = next((m for m in owner.get_markers() if m.id == marker), None)
        return handle

    def delete(self, marker: MarkerRef) -> bool:
        """
        Deletes an indexed marker from the index, its owner and the map.

        Args:
            marker: The marker handle or its id.

        Returns:
            bool: True if the marker was indexed, owner or not.
        """
        marker_id = _marker_id(marker)
        if marker_id not in self._owners:
            return False

        owner = self._owners.pop(marker_id)
        handle = self._resolve_handle(marker, owner)
        self._handles.pop(marker_id, None)

        if handle is None:
            logger.warning(f"No handle known for deleted marker {marker_id}")
            return True

        # An owner that deletes the marker also removes its handle
        if owner is None or not owner.delete(handle):
            self._surface.remove_marker(handle)
        return True

    def discard(self, marker: MarkerRef) -> bool:
        """
        Drops a marker's entry without touching its owner or the map.

        Args:
            marker: The marker handle or its id.

        Returns:
            bool: True if the marker was indexed.
        """
        marker_id = _marker_id(marker)
        self._handles.pop(marker_id, None)
        return self._owners.pop(marker_id, _MISSING) is not _MISSING

    def prune_removed(self) -> int:
        """
        Drops entries whose owner no longer holds the marker, e.g. the hole
        markers of a polygon that was removed when its ring was emptied.

        Returns:
            int: Number of entries dropped.
        """
        stale = [
            marker_id
            for marker_id, owner in self._owners.items()
            if owner is not None
            and not any(m.id == marker_id for m in owner.get_markers())
        ]
        for marker_id in stale:
            self.discard(marker_id)
        if stale:
            logger.debug(f"Pruned {len(stale)} entries of removed shapes")
        return len(stale)

    def marker_ids(self) -> List[str]:
        """Returns the ids of every indexed marker."""
        return list(self._owners)

    def owners(self) -> List[ShapeMarkers]:
        """
        Returns each distinct shape that owns at least one indexed marker.

        Returns:
            List[ShapeMarkers]: Owners in first-registered order.
        """
        seen: List[ShapeMarkers] = []
        for owner in self._owners.values():
            if owner is not None and not any(owner is s for s in seen):
                seen.append(owner)
        return seen

    def remove(self) -> None:
        """Removes the rendered shape and its handles from the map."""
        if self.shape is not None:
            self.shape.remove()

    def update(self) -> None:
        """Redraws the rendered shape after markers were moved."""
        if self.shape is not None:
            self.shape.update()

    def is_valid(self) -> bool:
        """
        Checks whether the rendered shape is in a valid state.

        Returns:
            bool: True if valid or if there is no shape.
        """
        if self.shape is None:
            return True
        return self.shape.is_valid()

    def set_visible(self, visible: bool) -> None:
        """
        Shows or hides the shape and every indexed handle.

        Args:
            visible: Visibility flag.
        """
        if self.shape is not None:
            self.shape.set_visible(visible)
        self.set_visible_markers(visible)

    def set_visible_markers(self, visible: bool) -> None:
        """
        Shows or hides the handles of every indexed shape.

        Args:
            visible: Visibility flag.
        """
        for owner in self.owners():
            owner.set_visible_markers(visible)

    def set_z_index(self, z_index: float) -> None:
        """
        Sets the stacking order of the shape and its handles.

        Args:
            z_index: Z value passed to the surface.
        """
        if self.shape is not None:
            self.shape.set_z_index(z_index)
        for owner in self.owners():
            owner.set_z_index(z_index)

    def size(self) -> int:
        """Returns the number of indexed markers."""
        return len(self._owners)

    def __len__(self) -> int:
        return self.size()

    def is_empty(self) -> bool:
        """Returns True when no marker is indexed."""
        return not self._owners
