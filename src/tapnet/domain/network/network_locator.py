import logging
import math
from collections.abc import Iterable, Iterator

from tapnet.app.protocols import GeodesyProvider, Locator
from tapnet.domain.entities.geography import Point
from tapnet.domain.entities.tree import TreeNode
from tapnet.domain.errors import GeodesyError

log = logging.getLogger(__name__)


class FaultLocator(Locator):
    """
    Walks a distance from the root down every branch and collects the point where
    each walk ends. A walk that runs off a leaf contributes nothing; a target of 0
    contributes nothing either.
    """

    def __init__(self, geodesy: GeodesyProvider):
        self.geodesy = geodesy

    def locate(self, root: TreeNode, distance_m: float) -> frozenset[Point]:
        if not math.isfinite(distance_m) or distance_m < 0:
            raise ValueError(f"distance must be finite and >= 0, got {distance_m}")

        found: set[Point] = set()
        stack = [(root, float(distance_m))]
        while stack:
            node, remaining = stack.pop()
            if remaining <= 0:
                continue
            edge = node.edge
            try:
                length = self.geodesy.line_length_m(edge.points)
                log.debug("Walking edge %s: remaining=%s length=%s", edge.segment, remaining, length)
                if remaining <= length:
                    p = self.geodesy.point_at_distance(edge.points, remaining)
                    if p is None:
                        log.warning("No point at %s m along edge %s", remaining, edge.segment)
                    else:
                        found.add(p)
                    continue
            except GeodesyError as exc:
                log.warning("Skipping branch at edge %s: %s", edge.segment, exc)
                continue
            if node.is_leaf:
                log.debug("Walk ran %s m past leaf %s", remaining - length, edge.end)
                continue
            stack.extend((child, remaining - length) for child in reversed(node.children))
        return frozenset(found)

    def sweep(
        self, root: TreeNode, distances: Iterable[float]
    ) -> Iterator[tuple[float, frozenset[Point]]]:
        for d in distances:
            yield d, self.locate(root, d)
