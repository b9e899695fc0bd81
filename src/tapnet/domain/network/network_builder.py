"""
Tree construction from unordered line segments.

The network is assumed to be one tapped line: the end of segment A splits into
the starts of B and C, B splits into D and E, and so on::

        |
        A
        |
       / \\
      B   C
      |   |

Segments may arrive in any order and in either direction. Junctions are found
by exact coordinate equality, so coordinates shared at a junction must match
bit for bit.
"""

import logging
import math
from collections.abc import Sequence

from tapnet.app.protocols import GeodesyProvider
from tapnet.domain.entities.geography import Point, Segment
from tapnet.domain.entities.tree import Edge, TreeNode
from tapnet.domain.errors import TreeConstructionError

log = logging.getLogger(__name__)


class TreeBuilder:
    def __init__(self, geodesy: GeodesyProvider):
        self.geodesy = geodesy

    def build(self, segments: Sequence[Segment], reference: Point) -> TreeNode:
        segments = list(segments)
        anchor = self.anchor_point(segments, reference)
        log.info("Closest point to start: %s", anchor)

        idx = self._anchor_segment(segments, anchor)
        seg = segments[idx]
        if seg.first != anchor:
            seg = seg.reversed()
        root = TreeNode(Edge(seg))

        # private pool of unplaced segments, keyed by input position
        pool = {i: s for i, s in enumerate(segments) if i != idx}
        self._grow(root, pool)

        if pool:
            ids = tuple(self._label(i, s) for i, s in pool.items())
            raise TreeConstructionError(
                f"{len(pool)} segment(s) could not be placed in the tree: {list(ids)}",
                segment_ids=ids,
            )

        if log.isEnabledFor(logging.DEBUG):
            log.debug("Edge tree:\n%s", root.render())
        return root

    def anchor_point(self, segments: Sequence[Segment], reference: Point) -> Point:
        """Endpoint nearest to the reference; the first one wins a tie."""
        best, best_d = None, math.inf
        for seg in segments:
            for p in seg.endpoints:
                d = self.geodesy.distance_m(p, reference)
                if d < best_d:
                    best, best_d = p, d
        if best is None:
            raise TreeConstructionError(f"no segment endpoint found near reference {reference}")
        return best

    @staticmethod
    def _anchor_segment(segments: Sequence[Segment], anchor: Point) -> int:
        for i, seg in enumerate(segments):
            if seg.first == anchor or seg.last == anchor:
                return i
        raise TreeConstructionError(f"no segment contains anchor point {anchor}")

    @staticmethod
    def _label(i: int, seg: Segment) -> int:
        return seg.segment_id if seg.segment_id is not None else i

    def _attach(self, i: int, seg: Segment, end: Point) -> Edge | None:
        head, tail = seg.first == end, seg.last == end
        if head and tail:
            raise TreeConstructionError(
                f"segment {self._label(i, seg)} joins {end} at both ends; placement is ambiguous",
                segment_ids=(self._label(i, seg),),
            )
        if head:
            return Edge(seg)
        if tail:
            return Edge(seg.reversed())
        return None

    def _grow(self, root: TreeNode, pool: dict[int, Segment]) -> None:
        # Depth-first with an explicit stack. Each frame scans a snapshot of the
        # pool taken when its node was attached, skipping anything placed since.
        stack = [(root, iter(list(pool)))]
        while stack:
            node, pending = stack[-1]
            for i in pending:
                seg = pool.get(i)
                if seg is None:
                    continue
                edge = self._attach(i, seg, node.edge.end)
                if edge is None:
                    continue
                del pool[i]
                child = TreeNode(edge)
                node.children.append(child)
                stack.append((child, iter(list(pool))))
                break
            else:
                stack.pop()
