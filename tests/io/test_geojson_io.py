import json

import pytest

from tapnet.domain.entities.geography import Point
from tapnet.domain.errors import NetworkFormatError
from tapnet.domain.geodesy.geodesy_providers import PlanarGeodesy
from tapnet.domain.network.network_builder import TreeBuilder
from tapnet.io.geojson_io import (
    load_segments,
    points_to_multipoint,
    segments_from_geojson,
    write_points,
    write_tree,
)

# ---------- Reading


def test_multilinestring_with_elevation():
    obj = {
        "type": "MultiLineString",
        "coordinates": [
            [[-111.94005548, 33.48386668, 350.0], [-111.9391, 33.4840, 352.0]],
            [[-111.9391, 33.4840], [-111.9380, 33.4851]],
        ],
    }
    segs = segments_from_geojson(obj)
    assert [s.segment_id for s in segs] == [0, 1]
    assert segs[0].first == Point(-111.94005548, 33.48386668)
    assert segs[0].first.z == 350.0
    # full precision is kept so the junction matches exactly
    assert segs[0].last == segs[1].first


def test_feature_collection_of_lines(tmp_path):
    fc = {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "properties": {}, "geometry": {
                "type": "LineString", "coordinates": [[0, 0], [1, 0]]}},
            {"type": "Feature", "properties": {}, "geometry": {
                "type": "MultiLineString", "coordinates": [[[1, 0], [2, 0]], [[1, 0], [1, 1]]]}},
        ],
    }
    path = tmp_path / "net.geojson"
    path.write_text(json.dumps(fc), encoding="utf-8")
    segs = load_segments(path)
    assert len(segs) == 3
    assert segs[2].last == Point(1.0, 1.0)


def test_geometry_collection_of_lines():
    obj = {
        "type": "GeometryCollection",
        "geometries": [{"type": "LineString", "coordinates": [[0, 0], [1, 1]]}],
    }
    assert len(segments_from_geojson(obj)) == 1


@pytest.mark.parametrize(
    "obj",
    [
        {"type": "Point", "coordinates": [0, 0]},
        {"type": "MultiLineString", "coordinates": []},
        {"type": "LineString", "coordinates": [[0, 0]]},
        {"type": "LineString", "coordinates": [[0, 0], ["a", 1]]},
        {"type": "Feature", "geometry": None, "properties": {}},
        {"type": "Feature", "geometry": [[0, 0], [1, 1]], "properties": {}},
        {"type": "GeometryCollection", "geometries": [[0, 0]]},
        {"type": "FeatureCollection", "features": ["LineString"]},
        {"type": "FeatureCollection", "features": {"type": "Feature"}},
        {"type": "MultiLineString", "coordinates": 5},
        [[0, 0], [1, 1]],
    ],
)
def test_rejects_non_line_input(obj):
    with pytest.raises(NetworkFormatError):
        segments_from_geojson(obj)


def test_rejects_broken_json(tmp_path):
    path = tmp_path / "broken.geojson"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(NetworkFormatError):
        load_segments(path)


def test_rejects_undecodable_bytes(tmp_path):
    path = tmp_path / "latin.geojson"
    path.write_bytes(
        b'{"type": "LineString", "coordinates": [[0, 0], [1, 1]], "name": "\xff\xfe"}'
    )
    with pytest.raises(NetworkFormatError):
        load_segments(path)


# ---------- Writing


def test_points_written_as_sorted_multipoint(tmp_path):
    pts = {Point(10.0, 5.0), Point(10.0, -5.0), Point(2.5, 5.0)}
    mp = points_to_multipoint(pts)
    assert mp["type"] == "MultiPoint"
    assert mp["coordinates"] == [[10.0, -5.0], [2.5, 5.0], [10.0, 5.0]]

    path = write_points(tmp_path / "out" / "fault-locations-15.0.geojson", pts)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["type"] == "MultiPoint"
    assert len(data["coordinates"]) == 3


def test_tree_written_with_depth(tmp_path, y_network, origin):
    root = TreeBuilder(PlanarGeodesy()).build(y_network, origin)
    data = json.loads(write_tree(tmp_path / "tree.geojson", root).read_text(encoding="utf-8"))
    assert data["type"] == "FeatureCollection"
    depths = [f["properties"]["depth"] for f in data["features"]]
    assert depths == [0, 1, 1]
    first = data["features"][0]["geometry"]["coordinates"]
    assert first[0] == [0.0, 0.0]
