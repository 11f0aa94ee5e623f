"""
Marker Insertion Policy.

Pure geometric functions that decide where a newly created vertex goes in an
existing ordered sequence of markers:

- Rings (polygons and holes) are closed, so neighbours wrap around.
- Chains (polylines) are open, so the end vertices have a single neighbour.

The new vertex is placed beside its nearest existing vertex, on the side of
whichever neighbour is closer, which approximates inserting along the nearest
edge without projecting onto segments.
"""

from typing import List, Sequence, Tuple

from geoshape.core.geo_point import GeoPoint
from geoshape.core.protocols import MarkerHandle
from geoshape.core.spherical import great_circle_distance


def _nearest(
    position: GeoPoint, positions: Sequence[GeoPoint]
) -> Tuple[int, List[float]]:
    """
    Finds the existing vertex closest to the position.

    Returns:
        Tuple[int, List[float]]: Index of the first minimum and the distance
        from the position to every vertex.
    """
    distances = [great_circle_distance(position, p) for p in positions]
    nearest = 0
    for i in range(1, len(distances)):
        if distances[i] < distances[nearest]:
            nearest = i
    return nearest, distances


def ring_insert_index(position: GeoPoint, positions: Sequence[GeoPoint]) -> int:
    """
    Computes the insertion index of a new vertex in a closed ring.

    With fewer than three vertices every position is equivalent, so the new
    vertex is appended.

    Args:
        position: Position of the new vertex.
        positions: Ordered ring vertices.

    Returns:
        int: Index at which to insert, in [0, len(positions)].

    Example:
        >>> a, b = GeoPoint(0, 0), GeoPoint(0, 10)
        >>> c, d = GeoPoint(10, 10), GeoPoint(10, 0)
        >>> ring_insert_index(GeoPoint(0, 4), [a, b, c, d])
        1
    """
    size = len(positions)
    if size <= 2:
        return size

    nearest, distances = _nearest(position, positions)
    before = nearest - 1 if nearest > 0 else size - 1
    after = nearest + 1 if nearest < size - 1 else 0

    if distances[before] > distances[after]:
        return after
    return nearest


def chain_insert_index(position: GeoPoint, positions: Sequence[GeoPoint]) -> int:
    """
    Computes the insertion index of a new vertex in an open chain.

    When the nearest vertex is an end point, the decision is made against the
    length of the end segment: past the last vertex the new point extends the
    chain when it is at least as far from the previous vertex as the end is
    (non-strict), before the first vertex it is inserted inside the chain only
    when strictly closer to the second vertex than the start is.

    Args:
        position: Position of the new vertex.
        positions: Ordered chain vertices.

    Returns:
        int: Index at which to insert, in [0, len(positions)].
    """
    size = len(positions)
    if size <= 1:
        return size

    nearest, distances = _nearest(position, positions)
    has_before = nearest > 0
    has_after = nearest < size - 1

    if has_before and has_after:
        if distances[nearest - 1] > distances[nearest + 1]:
            return nearest + 1
        return nearest

    if has_before:
        before = nearest - 1
        segment = great_circle_distance(positions[before], positions[nearest])
        if distances[before] >= segment:
            return nearest + 1
        return nearest

    after = nearest + 1
    segment = great_circle_distance(positions[after], positions[nearest])
    if distances[after] < segment:
        return nearest + 1
    return nearest


def add_marker_as_polygon(marker: MarkerHandle, markers: List[MarkerHandle]) -> int:
    """
    Inserts a marker into a polygon ring where it is closest to its neighbours.

    Args:
        marker: The new marker.
        markers: Ordered ring markers, modified in place.

    Returns:
        int: The index the marker was inserted at.
    """
    index = ring_insert_index(marker.position, [m.position for m in markers])
    markers.insert(index, marker)
    return index


def add_marker_as_polyline(marker: MarkerHandle, markers: List[MarkerHandle]) -> int:
    """
    Inserts a marker into a polyline chain where it is closest to its neighbours.

    Args:
        marker: The new marker.
        markers: Ordered chain markers, modified in place.

    Returns:
        int: The index the marker was inserted at.
    """
    index = chain_insert_index(marker.position, [m.position for m in markers])
    markers.insert(index, marker)
    return index
