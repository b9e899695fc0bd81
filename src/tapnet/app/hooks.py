# app/hooks.py
from typing import Protocol

from tapnet.domain.entities.geography import Point


class SweepHooks(Protocol):
    def run_start(self, *, segments: int, distances: int): ...
    def tree_ready(self, *, nodes: int, anchor: Point): ...
    def distance_done(self, *, distance_m: float, points: frozenset[Point]): ...
    def output_written(self, *, distance_m: float, path: str): ...
    def run_end(self, *, located: int, written: int, wall_ms: float): ...
    def error(self, *, reason: str, **kw): ...


class NoopHooks:
    def run_start(self, **_):
        pass

    def tree_ready(self, **_):
        pass

    def distance_done(self, **_):
        pass

    def output_written(self, **_):
        pass

    def run_end(self, **_):
        pass

    def error(self, **_):
        pass
