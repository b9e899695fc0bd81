import logging
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field

from tapnet.domain.entities.geography import Point, Segment
from tapnet.domain.entities.tree import TreeNode
from tapnet.domain.errors import TopologyRule, TopologyViolation

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Violation:
    rule: TopologyRule
    message: str
    segment_id: int | None = None

    def to_error(self) -> TopologyViolation:
        return TopologyViolation(self.rule, self.message, segment_id=self.segment_id)


@dataclass
class TopologyReport:
    violations: list[Violation] = field(default_factory=list)

    @property
    def passes(self) -> bool:
        return not self.violations

    @property
    def first(self) -> Violation | None:
        return self.violations[0] if self.violations else None

    def rules(self) -> list[TopologyRule]:
        return [v.rule for v in self.violations]


class TopologyValidator:
    """
    Tapped-line rules, checked over the original segments:
      • no segment is a closed loop
      • every segment shares an endpoint with another (when there is more than one)
      • a vertex that is not a segment's endpoint appears in no other segment
      • the tree has a root
    Read-only: neither the segments nor the tree are touched.
    """

    def check(self, segments: Sequence[Segment], root: TreeNode | None) -> TopologyReport:
        segments = list(segments)
        report = TopologyReport()
        report.violations.extend(self._closed_loops(segments))
        report.violations.extend(self._disconnected(segments))
        report.violations.extend(self._interior_sharing(segments))
        if root is None:
            report.violations.append(Violation(TopologyRule.NULL_ROOT, "root node is null"))
        return report

    def validate(self, segments: Sequence[Segment], root: TreeNode | None) -> None:
        report = self.check(segments, root)
        for v in report.violations:
            log.error("%s: %s", v.rule.value, v.message)
        if not report.passes:
            raise report.first.to_error()
        log.info("Edge tree passes rules")

    # ------------------------- rules -------------------------------

    @staticmethod
    def _id(i: int, seg: Segment) -> int:
        return seg.segment_id if seg.segment_id is not None else i

    def _closed_loops(self, segments):
        for i, seg in enumerate(segments):
            if seg.is_closed:
                yield Violation(
                    TopologyRule.CLOSED_LOOP,
                    f"segment {self._id(i, seg)} is a closed loop at {seg.first}",
                    self._id(i, seg),
                )

    def _disconnected(self, segments):
        if len(segments) < 2:
            return
        owners: dict[Point, set[int]] = defaultdict(set)
        for i, seg in enumerate(segments):
            for p in seg.endpoints:
                owners[p].add(i)
        for i, seg in enumerate(segments):
            if not any(owners[p] - {i} for p in seg.endpoints):
                yield Violation(
                    TopologyRule.DISCONNECTED,
                    f"segment {self._id(i, seg)} shares no endpoint with another segment",
                    self._id(i, seg),
                )

    def _interior_sharing(self, segments):
        owners: dict[Point, set[int]] = defaultdict(set)
        for i, seg in enumerate(segments):
            for p in seg.points:
                owners[p].add(i)
        for i, seg in enumerate(segments):
            for p in seg.interior_points():
                others = owners[p] - {i}
                if others:
                    shared = sorted(self._id(j, segments[j]) for j in others)
                    yield Violation(
                        TopologyRule.INTERIOR_SHARING,
                        f"interior point {p} of segment {self._id(i, seg)} "
                        f"is shared with segment(s) {shared}",
                        self._id(i, seg),
                    )
                    break
