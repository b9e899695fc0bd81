import pytest

from tapnet.domain.entities.geography import Point
from tapnet.domain.errors import TreeConstructionError
from tapnet.domain.network.network_builder import TreeBuilder


def _assert_continuity(root):
    for node in root.iter_nodes():
        for child in node.children:
            assert child.edge.start == node.edge.end


# ---------- Anchoring


def test_anchor_is_nearest_endpoint(planar, y_network, origin):
    assert TreeBuilder(planar).anchor_point(y_network, origin) == Point(0.0, 0.0)
    assert TreeBuilder(planar).anchor_point(y_network, Point(10.0, 25.0)) == Point(10.0, 20.0)


def test_anchor_tie_goes_to_first_endpoint(planar, make_seg):
    segs = [make_seg((0, 1), (5, 5)), make_seg((0, -1), (5, -5))]
    assert TreeBuilder(planar).anchor_point(segs, Point(0.0, 0.0)) == Point(0.0, 1.0)


def test_root_is_reversed_to_start_at_anchor(planar, y_network, origin):
    root = TreeBuilder(planar).build(y_network, origin)
    assert root.edge.start == Point(0.0, 0.0)
    assert root.edge.end == Point(10.0, 0.0)
    assert root.edge.segment_id == 2


# ---------- Growth


def test_children_oriented_away_from_root(planar, y_network, origin):
    root = TreeBuilder(planar).build(y_network, origin)
    assert [c.edge.segment_id for c in root.children] == [0, 1]
    reversed_tap, forward_tap = root.children
    assert reversed_tap.edge.end == Point(10.0, -20.0)
    assert reversed_tap.edge.points[1] == Point(10.0, -10.0)
    assert forward_tap.edge.end == Point(10.0, 20.0)
    assert root.size == 3
    _assert_continuity(root)


def test_input_segments_are_not_mutated(planar, y_network, origin):
    before = [s.points for s in y_network]
    TreeBuilder(planar).build(y_network, origin)
    assert [s.points for s in y_network] == before


def test_deep_branching_network(planar, make_seg):
    segs = [
        make_seg((0, 0), (1, 0), sid=0),
        make_seg((2, 1), (1, 0), sid=1),
        make_seg((1, 0), (2, -1), sid=2),
        make_seg((3, 1), (2, 1), sid=3),
        make_seg((2, 1), (2, 2), sid=4),
        make_seg((2, -1), (3, -1), sid=5),
    ]
    root = TreeBuilder(planar).build(segs, Point(-1.0, 0.0))
    assert root.size == 6
    _assert_continuity(root)
    ids = [n.edge.segment_id for n in root.iter_nodes()]
    assert ids == [0, 1, 3, 4, 2, 5]


def test_long_chain_does_not_exhaust_recursion(planar, make_seg):
    n = 2000
    segs = [make_seg((i, 0), (i + 1, 0), sid=i) for i in range(n)]
    root = TreeBuilder(planar).build(segs, Point(0.0, 0.0))
    assert root.size == n
    _assert_continuity(root)


# ---------- Failures


def test_empty_input_fails(planar, origin):
    with pytest.raises(TreeConstructionError):
        TreeBuilder(planar).build([], origin)


def test_unreachable_reference_fails(planar, y_network):
    with pytest.raises(TreeConstructionError):
        TreeBuilder(planar).build(y_network, Point(float("nan"), 0.0))


def test_unplaced_segment_is_reported(planar, y_network, origin, make_seg):
    stray = make_seg((50, 50), (60, 60), sid=9)
    with pytest.raises(TreeConstructionError) as exc:
        TreeBuilder(planar).build([*y_network, stray], origin)
    assert exc.value.segment_ids == (9,)


def test_loop_back_segment_is_ambiguous(planar, y_network, origin, make_seg):
    loop = make_seg((10, 0), (12, 1), (10, 0), sid=5)
    with pytest.raises(TreeConstructionError) as exc:
        TreeBuilder(planar).build([*y_network, loop], origin)
    assert exc.value.segment_ids == (5,)
