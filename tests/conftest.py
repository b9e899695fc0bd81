import pytest

from tapnet.domain.entities.geography import Point, Segment
from tapnet.domain.geodesy.geodesy_providers import PlanarGeodesy


def _seg(*coords, sid=None) -> Segment:
    return Segment.from_coords(coords, segment_id=sid)


@pytest.fixture
def make_seg():
    """Factory: make_seg((x, y), (x, y), ..., sid=3) -> Segment."""
    return _seg


@pytest.fixture
def planar() -> PlanarGeodesy:
    return PlanarGeodesy()


@pytest.fixture
def y_network() -> list[Segment]:
    """
    Root (0,0)->(10,0) splitting into two 20 m taps, shuffled and partly reversed:
      C: (10,-20) -> (10,0)   reversed relative to the tree
      B: (10,0)   -> (10,20)
      A: (10,0)   -> (0,0)    root, reversed relative to the tree
    """
    return [
        _seg((10, -20), (10, -10), (10, 0), sid=0),
        _seg((10, 0), (10, 20), sid=1),
        _seg((10, 0), (0, 0), sid=2),
    ]


@pytest.fixture
def origin() -> Point:
    return Point(-1.0, 0.0)
