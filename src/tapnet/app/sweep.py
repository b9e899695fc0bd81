# tapnet/app/sweep.py
import logging
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from tapnet.app.hooks import NoopHooks, SweepHooks
from tapnet.app.protocols import Locator
from tapnet.config.models import OutputModel, SweepModel
from tapnet.domain.entities.geography import Point
from tapnet.domain.entities.tree import TreeNode
from tapnet.io.geojson_io import write_points

log = logging.getLogger(__name__)


@dataclass
class SweepResult:
    located: dict[float, frozenset[Point]] = field(default_factory=dict)
    written: dict[float, Path] = field(default_factory=dict)

    @property
    def non_empty(self) -> list[float]:
        return [d for d, pts in self.located.items() if pts]


def sweep_distances(cfg: SweepModel) -> list[float]:
    """start, start+step, ... up to and including end."""
    n = int(np.floor((cfg.end_m - cfg.start_m) / cfg.step_m + 1e-9))
    ds = cfg.start_m + cfg.step_m * np.arange(n + 1)
    return [float(d) for d in np.round(ds, 9)]


def output_path(out: OutputModel, distance_m: float) -> Path:
    return Path(out.directory) / f"{out.prefix}-{float(distance_m)}.geojson"


def run_sweep(
    root: TreeNode,
    locator: Locator,
    sweep: SweepModel,
    out: OutputModel,
    *,
    hooks: SweepHooks | None = None,
) -> SweepResult:
    hooks = hooks or NoopHooks()
    result = SweepResult()
    for d, points in locator.sweep(root, sweep_distances(sweep)):
        result.located[d] = points
        hooks.distance_done(distance_m=d, points=points)
        if not points:
            log.info("No fault locations found for distance: %s", d)
            continue
        path = output_path(out, d)
        try:
            write_points(path, points)
        except OSError as exc:
            log.error("Failed to write %s: %s", path, exc)
            hooks.error(reason="write_failed", path=str(path), detail=str(exc))
            continue
        result.written[d] = path
        hooks.output_written(distance_m=d, path=str(path))
    return result
