from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from tapnet.domain.entities.geography import Point
from tapnet.domain.entities.tree import TreeNode


# ------------- Geodesy --------------------
@runtime_checkable
class GeodesyProvider(Protocol):
    """
    Responsibilities:
      • Distance between two points.
      • Length of a polyline, summed leg by leg.
      • Point reached after walking a distance from a polyline's first vertex.
    Units: meters for all distances.
    """

    def distance_m(self, a: Point, b: Point) -> float: ...
    def line_length_m(self, points: Sequence[Point]) -> float:
        """Raise GeodesyError if any leg cannot be measured."""

    def point_at_distance(self, points: Sequence[Point], meters: float) -> Point | None:
        """Return None if meters exceeds the line length."""


# ------------- Network --------------------
@runtime_checkable
class Locator(Protocol):
    """
    Responsibilities:
      • Return every point reached by walking a distance from the root along all branches.
    """

    def locate(self, root: TreeNode, distance_m: float) -> frozenset[Point]: ...
    def sweep(
        self, root: TreeNode, distances: Iterable[float]
    ) -> Iterable[tuple[float, frozenset[Point]]]: ...
