"""GeoJSON input and output for tapped-line networks.

Input is read with the standard json decoder so coordinates keep full precision;
the geojson library rounds on construction, and junction matching is exact.
Output geometries are built with the geojson library.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from geojson import Feature, FeatureCollection, LineString, MultiPoint

from tapnet.domain.entities.geography import Point, Segment
from tapnet.domain.entities.tree import TreeNode
from tapnet.domain.errors import NetworkFormatError

log = logging.getLogger(__name__)

COORDINATE_PRECISION = 10


def _members(geometry: Mapping, key: str) -> list:
    members = geometry.get(key) or []
    if not isinstance(members, list):
        raise NetworkFormatError(f"{geometry.get('type')} {key!r} must be a list")
    return members


def _line_coords(geometry: Mapping) -> list[list]:
    if not isinstance(geometry, Mapping):
        raise NetworkFormatError(f"expected a GeoJSON object, got {type(geometry).__name__}")
    kind = geometry.get("type")
    if kind == "LineString":
        return [geometry.get("coordinates") or []]
    if kind == "MultiLineString":
        return list(_members(geometry, "coordinates"))
    if kind == "GeometryCollection":
        out = []
        for g in _members(geometry, "geometries"):
            out.extend(_line_coords(g))
        return out
    if kind == "Feature":
        if geometry.get("geometry") is None:
            raise NetworkFormatError("feature has no geometry")
        return _line_coords(geometry["geometry"])
    if kind == "FeatureCollection":
        out = []
        for f in _members(geometry, "features"):
            out.extend(_line_coords(f))
        return out
    raise NetworkFormatError(f"expected line geometry, got {kind!r}")


def segments_from_geojson(obj: Mapping) -> list[Segment]:
    segments = []
    for i, coords in enumerate(_line_coords(obj)):
        try:
            segments.append(Segment.from_coords(coords, segment_id=i))
        except (TypeError, ValueError) as exc:
            raise NetworkFormatError(f"line {i} is malformed: {exc}") from exc
    if not segments:
        raise NetworkFormatError("no line strings found")
    return segments


def load_segments(path: str | Path) -> list[Segment]:
    with open(path, encoding="utf-8") as f:
        try:
            obj = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise NetworkFormatError(f"{path}: {exc}") from exc
    segments = segments_from_geojson(obj)
    log.info("Loaded %d segment(s) from %s", len(segments), path)
    return segments


def _coords(p: Point) -> tuple:
    return (p.x, p.y) if p.z is None else (p.x, p.y, p.z)


def points_to_multipoint(points: Iterable[Point]) -> MultiPoint:
    ordered = sorted(points, key=lambda p: (p.y, p.x))
    return MultiPoint([_coords(p) for p in ordered], precision=COORDINATE_PRECISION)


def write_points(path: str | Path, points: Iterable[Point]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(points_to_multipoint(points), f)
    return path


def tree_to_feature_collection(root: TreeNode) -> FeatureCollection:
    features = []
    for node, depth in root.iter_with_depth():
        line = LineString([_coords(p) for p in node.edge.points], precision=COORDINATE_PRECISION)
        features.append(
            Feature(geometry=line, properties={"depth": depth, "segment_id": node.edge.segment_id})
        )
    return FeatureCollection(features)


def write_tree(path: str | Path, root: TreeNode) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(tree_to_feature_collection(root), f)
    return path
