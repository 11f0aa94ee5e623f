"""Unit tests for building editable shapes from GeoJSON and back."""

import pytest

from geoshape.core.editor_config import EditorConfig
from geoshape.core.geo_point import GeoPoint
from geoshape.core.map_shape import MapShape, MapShapeType
from geoshape.core.shape_builder import ShapeBuilder, closed_ring, ring_points
from geoshape.core.shape_markers import (
    MultiPointMarkers,
    MultiPolygonMarkers,
    PointMarkers,
    PolygonMarkers,
    PolylineMarkers,
)

SQUARE_RING = [[0.0, 0.0], [10.0, 0.0], [10.0, 10.0], [0.0, 10.0], [0.0, 0.0]]
HOLE_RING = [[2.0, 2.0], [4.0, 2.0], [4.0, 4.0], [2.0, 2.0]]

POINT = {"type": "Point", "coordinates": [13.4, 52.5]}
LINE = {"type": "LineString", "coordinates": [[0.0, 0.0], [1.0, 1.0], [2.0, 0.0]]}
POLYGON = {"type": "Polygon", "coordinates": [SQUARE_RING, HOLE_RING]}


@pytest.fixture
def builder(surface):
    return ShapeBuilder(surface)


def test_ring_points_drop_closing_position():
    points = ring_points(SQUARE_RING)
    assert len(points) == 4
    assert points[1] == GeoPoint(0.0, 10.0)


def test_ring_points_accept_open_ring():
    assert len(ring_points(SQUARE_RING[:-1])) == 4


def test_closed_ring_repeats_first_position():
    ring = closed_ring([GeoPoint(0, 0), GeoPoint(0, 1), GeoPoint(1, 1)])
    assert ring[0] == ring[-1] == [0, 0]
    assert len(ring) == 4
    assert closed_ring([]) == []


class TestAddGeometryAsMarkers:
    """Tests for ShapeBuilder.add_geometry_as_markers."""

    def test_point(self, surface, builder):
        index = builder.add_geometry_as_markers(POINT)

        assert index.shape.shape_type is MapShapeType.POINT
        assert isinstance(index.shape.shape, PointMarkers)
        assert surface.markers[0].position == GeoPoint(52.5, 13.4)
        assert surface.facades == []
        assert index.lookup(surface.markers[0]) is index.shape.shape

    def test_line_string(self, surface, builder):
        index = builder.add_geometry_as_markers(LINE)

        polyline = index.shape.shape
        assert isinstance(polyline, PolylineMarkers)
        assert index.size() == 3
        assert polyline.facade.kind == "polyline"
        assert polyline.facade.points == [
            GeoPoint(0, 0),
            GeoPoint(1, 1),
            GeoPoint(0, 2),
        ]

    def test_polygon_with_hole(self, surface, builder):
        index = builder.add_geometry_as_markers(POLYGON)

        polygon = index.shape.shape
        hole = polygon.get_holes()[0]
        assert index.size() == 7
        assert len(surface.markers) == 7
        assert len(surface.facades) == 1
        assert len(polygon.facade.points) == 4
        assert len(polygon.facade.holes[0]) == 3
        for marker in hole.get_markers():
            assert index.lookup(marker) is hole

    def test_multi_point(self, builder):
        geometry = {"type": "MultiPoint", "coordinates": [[0.0, 0.0], [1.0, 1.0]]}

        index = builder.add_geometry_as_markers(geometry)

        multi = index.shape.shape
        assert isinstance(multi, MultiPointMarkers)
        assert len(multi.get_children()) == 2
        for child in multi.get_children():
            assert index.lookup(child.get_markers()[0]) is child

    def test_multi_polygon(self, surface, builder):
        geometry = {
            "type": "MultiPolygon",
            "coordinates": [[SQUARE_RING], [HOLE_RING]],
        }

        index = builder.add_geometry_as_markers(geometry)

        assert isinstance(index.shape.shape, MultiPolygonMarkers)
        assert index.size() == 7
        assert len(surface.facades) == 2

    def test_geometry_collection_merges_indexes(self, surface, builder):
        geometry = {"type": "GeometryCollection", "geometries": [POINT, LINE]}

        index = builder.add_geometry_as_markers(geometry)

        assert index.shape.shape_type is MapShapeType.COLLECTION
        assert len(index.shape.shape) == 2
        assert index.size() == 4
        line = index.shape.shape[1].shape
        assert index.lookup(line.get_markers()[0]) is line

    def test_unsupported_type(self, builder):
        with pytest.raises(ValueError, match="Unsupported"):
            builder.add_geometry_as_markers({"type": "Circle", "coordinates": []})

    def test_missing_coordinates(self, builder):
        with pytest.raises(ValueError, match="no coordinates"):
            builder.add_geometry_as_markers({"type": "LineString"})

    def test_config_applies_z_index_and_hides_markers(self, surface):
        config = EditorConfig(markers_visible=False, z_index=3)
        builder = ShapeBuilder(surface, config)

        index = builder.add_geometry_as_markers(POLYGON)

        polygon = index.shape.shape
        assert polygon.facade.visible is True
        assert polygon.facade.z_index == 3
        assert all(not m.visible for m in surface.markers)
        assert all(m.z_index == 3 for m in surface.markers)


class TestNewShape:
    """Tests for ShapeBuilder.new_shape."""

    def test_new_polygon_is_empty(self, surface, builder):
        index = builder.new_shape(MapShapeType.POLYGON)

        assert index.is_empty()
        assert isinstance(index.shape.shape, PolygonMarkers)
        assert surface.facades == []

    def test_collection_cannot_be_drawn(self, builder):
        with pytest.raises(ValueError):
            builder.new_shape(MapShapeType.COLLECTION)


class TestToGeometry:
    """Tests for ShapeBuilder.to_geometry."""

    @pytest.mark.parametrize("geometry", [POINT, LINE, POLYGON])
    def test_reads_back_built_geometry(self, builder, geometry):
        index = builder.add_geometry_as_markers(geometry)
        assert builder.to_geometry(index.shape) == geometry

    def test_reads_moved_handles(self, builder):
        index = builder.add_geometry_as_markers(LINE)
        index.shape.shape.get_markers()[2].position = GeoPoint(5.0, 6.0)

        geometry = builder.to_geometry(index.shape)

        assert geometry["coordinates"][2] == [6.0, 5.0]

    def test_deleted_hole_is_left_out(self, builder):
        index = builder.add_geometry_as_markers(POLYGON)
        hole = index.shape.shape.get_holes()[0]
        for marker in list(hole.get_markers()):
            index.delete(marker)

        geometry = builder.to_geometry(index.shape)

        assert geometry["coordinates"] == [SQUARE_RING]

    def test_fully_deleted_shape(self, builder):
        index = builder.add_geometry_as_markers(LINE)
        for marker in list(index.shape.shape.get_markers()):
            index.delete(marker)

        assert builder.to_geometry(index.shape) is None

    def test_collection(self, builder):
        geometry = {"type": "GeometryCollection", "geometries": [POINT, LINE]}
        index = builder.add_geometry_as_markers(geometry)

        assert builder.to_geometry(index.shape) == geometry

    def test_empty_collection(self, builder):
        assert builder.to_geometry(MapShape(MapShapeType.COLLECTION, [])) is None

    def test_hole_alone_is_rejected(self, builder):
        index = builder.add_geometry_as_markers(POLYGON)
        with pytest.raises(ValueError):
            builder.to_geometry(index.shape.shape.get_holes()[0])


def test_map_shape_rejects_mismatched_wrapping(surface):
    with pytest.raises(ValueError):
        MapShape(MapShapeType.COLLECTION, PointMarkers(surface))
    with pytest.raises(ValueError):
        MapShape(MapShapeType.POINT, [])
