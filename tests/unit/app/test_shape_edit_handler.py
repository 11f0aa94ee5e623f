"""
Tests for ShapeEditHandler routing surface events to shape edits.
"""

import pytest

from geoshape.app.shape_edit_handler import ShapeEditHandler
from geoshape.core.editor_config import EditorConfig
from geoshape.core.geo_point import GeoPoint
from geoshape.core.map_shape import MapShapeType
from geoshape.core.marker_index import MarkerIndex
from geoshape.core.shape_markers import PolygonHoleMarkers

POLYGON = {
    "type": "Polygon",
    "coordinates": [[[0.0, 0.0], [10.0, 0.0], [10.0, 10.0], [0.0, 10.0], [0.0, 0.0]]],
}


@pytest.fixture
def handler(qapp, surface):
    return ShapeEditHandler(surface)


def tap_all(handler, coords):
    return [handler.on_map_clicked(lat, lon) for lat, lon in coords]


def test_tap_without_drawing_adds_bare_marker(handler, surface):
    marker = handler.on_map_clicked(1.0, 2.0)

    assert marker.position == GeoPoint(1.0, 2.0)
    assert handler.index.contains(marker)
    assert handler.index.lookup(marker) is None
    assert surface.facades == []


def test_draw_polygon(handler, surface):
    polygon = handler.begin_shape(MapShapeType.POLYGON)

    markers = tap_all(handler, [(0, 0), (0, 10), (10, 10), (10, 0), (0, 5)])

    ring = polygon.get_markers()
    assert len(ring) == 5
    # The last tap lands on the edge between the first two taps
    i = ring.index(markers[4])
    assert ring[i - 1] is markers[0]
    assert ring[(i + 1) % 5] is markers[1]
    assert GeoPoint(0, 5) in polygon.facade.points
    assert all(handler.index.lookup(m) is polygon for m in markers)

    geometry = handler.finish_shape()

    assert geometry["type"] == "Polygon"
    assert len(geometry["coordinates"][0]) == 6
    assert handler.active_target is None


def test_finish_invalid_shape_keeps_drawing(handler):
    handler.begin_shape(MapShapeType.POLYGON)
    tap_all(handler, [(0, 0), (0, 10)])

    assert handler.finish_shape() is None
    assert handler.active_target is not None


def test_finish_without_drawing(handler):
    assert handler.finish_shape() is None


def test_draw_hole(handler, surface):
    polygon = handler.begin_shape(MapShapeType.POLYGON)
    tap_all(handler, [(0, 0), (0, 10), (10, 10), (10, 0)])

    hole = handler.begin_hole()
    hole_markers = tap_all(handler, [(2, 2), (2, 4), (4, 4)])

    assert isinstance(hole, PolygonHoleMarkers)
    assert hole.parent is polygon
    assert all(handler.index.lookup(m) is hole for m in hole_markers)
    assert polygon.facade.holes == [[GeoPoint(2, 2), GeoPoint(2, 4), GeoPoint(4, 4)]]

    # A second hole is cut from the same polygon
    assert handler.begin_hole().parent is polygon


def test_begin_hole_requires_polygon(handler):
    with pytest.raises(RuntimeError):
        handler.begin_hole()

    handler.begin_shape(MapShapeType.POLYLINE)
    with pytest.raises(NotImplementedError):
        handler.begin_hole()


def test_hole_in_multi_polygon_uses_last_polygon(handler):
    multi = handler.begin_shape(MapShapeType.MULTI_POLYGON)
    tap_all(handler, [(0, 0), (0, 10), (10, 10)])

    hole = handler.begin_hole()

    assert hole.parent is multi.get_children()[-1]


def test_multi_point_registers_components(handler):
    multi = handler.begin_shape(MapShapeType.MULTI_POINT)

    first, second = tap_all(handler, [(0, 0), (1, 1)])

    children = multi.get_children()
    assert handler.index.lookup(first) is children[0]
    assert handler.index.lookup(second) is children[1]


def test_drag_finished_redraws_owner(handler):
    shape = handler.load_geometry(POLYGON)
    polygon = shape.shape
    marker = polygon.get_markers()[0]
    marker.position = GeoPoint(-5, -5)

    handler.on_marker_drag_finished(marker.id)

    assert polygon.facade.points[0] == GeoPoint(-5, -5)


def test_drag_of_bare_marker_is_ignored(handler, surface):
    marker = handler.on_map_clicked(0, 0)
    handler.on_marker_drag_finished(marker.id)
    assert surface.facades == []


def test_delete_requested(handler, surface):
    polygon = handler.load_geometry(POLYGON).shape
    marker = polygon.get_markers()[0]

    assert handler.on_marker_delete_requested(marker.id) is True

    assert len(polygon.get_markers()) == 3
    assert marker in surface.removed_markers
    assert handler.is_valid()

    handler.on_marker_delete_requested(polygon.get_markers()[0].id)
    assert not handler.is_valid()


def test_delete_requested_for_unknown_marker(handler):
    assert handler.on_marker_delete_requested("missing") is False


def test_set_markers_visible(handler, surface):
    handler.load_geometry(POLYGON)

    handler.set_markers_visible(False)

    assert all(not m.visible for m in surface.markers)
    assert surface.facades[0].visible is True


def test_config_is_applied_to_loaded_shapes(qapp, surface):
    handler = ShapeEditHandler(surface, config=EditorConfig(markers_visible=False))

    handler.load_geometry(POLYGON)

    assert all(not m.visible for m in surface.markers)


def test_clear_removes_everything(handler, surface):
    handler.load_geometry(POLYGON)
    handler.on_map_clicked(20, 20)
    handler.begin_shape(MapShapeType.POLYLINE)
    tap_all(handler, [(0, 0), (1, 1)])

    handler.clear()

    assert surface.markers == []
    assert surface.facades == []
    assert handler.index.is_empty()
    assert handler.shapes == []


def test_clear_keeps_markers_of_other_editors(qapp, surface):
    shared = MarkerIndex(surface)
    mine = ShapeEditHandler(surface, index=shared)
    other = ShapeEditHandler(surface, index=shared)
    other_marker = other.on_map_clicked(5, 5)
    other_polygon = other.load_geometry(POLYGON).shape
    mine.on_map_clicked(20, 20)
    mine.begin_shape(MapShapeType.POLYLINE)
    tap_all(mine, [(0, 0), (1, 1)])

    mine.clear()

    assert mine.index is shared
    assert other_marker in surface.markers
    assert shared.contains(other_marker)
    assert shared.size() == 5
    assert all(shared.lookup(m) is other_polygon for m in other_polygon.get_markers())
    assert len(surface.facades) == 1


def test_clear_forgets_deleted_markers(handler, surface):
    marker = handler.on_map_clicked(1, 1)
    handler.on_marker_delete_requested(marker.id)

    handler.clear()

    assert surface.removed_markers == [marker]


def test_emptying_ring_while_drawing_hole(handler, surface):
    polygon = handler.begin_shape(MapShapeType.POLYGON)
    ring = tap_all(handler, [(0, 0), (0, 10), (10, 10), (10, 0)])
    handler.begin_hole()
    tap_all(handler, [(2, 2), (2, 4), (4, 4)])

    for marker in ring:
        handler.on_marker_delete_requested(marker.id)

    assert handler.index.is_empty()
    assert handler.active_target is polygon

    # Further taps redraw the polygon instead of the removed hole
    restarted = tap_all(handler, [(3, 3), (3, 8), (8, 8)])

    assert surface.markers == restarted
    assert len(surface.facades) == 1
    assert polygon.facade is surface.facades[0]
    assert all(handler.index.lookup(m) is polygon for m in restarted)
    assert handler.finish_shape()["type"] == "Polygon"
