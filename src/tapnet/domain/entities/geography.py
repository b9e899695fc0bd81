from collections.abc import Iterable
from dataclasses import dataclass, field


# Core geometry types used by the network builder
@dataclass(frozen=True)
class Point:
    """
    Immutable coordinate. x is longitude (or easting), y is latitude (or northing).
    Equality is exact on (x, y); elevation never takes part.
    """

    x: float
    y: float
    z: float | None = field(default=None, compare=False)

    @property
    def longitude(self) -> float:
        return self.x

    @property
    def latitude(self) -> float:
        return self.y

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(frozen=True)
class Segment:
    """Undirected polyline as supplied; it may need reversing to join the tree."""

    points: tuple[Point, ...]
    segment_id: int | None = field(default=None, compare=False)

    def __post_init__(self):
        pts = tuple(self.points)
        if len(pts) < 2:
            raise ValueError(f"segment needs at least 2 points, got {len(pts)}")
        object.__setattr__(self, "points", pts)

    @classmethod
    def from_coords(cls, coords: Iterable[Iterable[float]], segment_id: int | None = None):
        return cls(tuple(Point(*map(float, c)) for c in coords), segment_id=segment_id)

    @property
    def first(self) -> Point:
        return self.points[0]

    @property
    def last(self) -> Point:
        return self.points[-1]

    @property
    def endpoints(self) -> tuple[Point, Point]:
        return self.first, self.last

    @property
    def is_closed(self) -> bool:
        return self.first == self.last

    def reversed(self) -> "Segment":
        return Segment(self.points[::-1], segment_id=self.segment_id)

    def interior_points(self) -> list[Point]:
        # by value: a vertex equal to either endpoint counts as an endpoint
        a, b = self.endpoints
        return [p for p in self.points[1:-1] if p != a and p != b]

    def __len__(self) -> int:
        return len(self.points)

    def __str__(self) -> str:
        label = f"#{self.segment_id} " if self.segment_id is not None else ""
        return f"{label}{self.first} -> {self.last} ({len(self.points)} pts)"
