from collections.abc import Iterator
from dataclasses import dataclass, field

from tapnet.domain.entities.geography import Point, Segment


@dataclass(frozen=True)
class Edge:
    """A segment bound to a traversal direction, start -> end."""

    segment: Segment
    start: Point = field(init=False)
    end: Point = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "start", self.segment.first)
        object.__setattr__(self, "end", self.segment.last)

    @property
    def points(self) -> tuple[Point, ...]:
        return self.segment.points

    @property
    def segment_id(self) -> int | None:
        return self.segment.segment_id


@dataclass(eq=False)
class TreeNode:
    """
    One edge plus its downstream children. Children are owned by the parent;
    every child's edge starts where this edge ends.
    Only the builder appends children; the finished tree is read-only.
    """

    edge: Edge
    children: list["TreeNode"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def iter_nodes(self) -> Iterator["TreeNode"]:
        """Pre-order walk without recursion."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_with_depth(self) -> Iterator[tuple["TreeNode", int]]:
        stack = [(self, 0)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            stack.extend((c, depth + 1) for c in reversed(node.children))

    @property
    def size(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    def render(self) -> str:
        lines = []
        for node, depth in self.iter_with_depth():
            lines.append("  " * depth + str(node.edge.segment))
        return "\n".join(lines)
