# tapnet/app/build.py
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from tapnet.app.hooks import NoopHooks, SweepHooks
from tapnet.app.protocols import GeodesyProvider
from tapnet.app.sweep import SweepResult, run_sweep, sweep_distances
from tapnet.config.models import ScenarioModel
from tapnet.domain.entities.geography import Point, Segment
from tapnet.domain.entities.tree import TreeNode
from tapnet.domain.errors import TapnetError
from tapnet.domain.network.network_factory import build_network
from tapnet.domain.network.network_locator import FaultLocator
from tapnet.io.geojson_io import load_segments, write_tree
from tapnet.io.recorder import JsonlSink, Recorder
from tapnet.io.sweep_logging import SweepLogging
from tapnet.runtime.registries import make_geodesy


@dataclass
class App:
    cfg: ScenarioModel
    geodesy: GeodesyProvider
    segments: list[Segment]
    tree: TreeNode
    locator: FaultLocator
    hooks: SweepHooks

    def run(self) -> SweepResult:
        t0 = time.perf_counter()
        self.hooks.run_start(
            segments=len(self.segments), distances=len(sweep_distances(self.cfg.sweep))
        )
        result = run_sweep(
            self.tree, self.locator, self.cfg.sweep, self.cfg.output, hooks=self.hooks
        )
        self.hooks.run_end(
            located=len(result.non_empty),
            written=len(result.written),
            wall_ms=(time.perf_counter() - t0) * 1000.0,
        )
        return result


def build(
    cfg: ScenarioModel | Mapping,
    *,
    segments: Sequence[Segment] | None = None,
    use_logging: bool = True,
    recorder: Recorder | None = None,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) Recorder for located points & hooks
    if recorder is None and model.output.records:
        records = Path(model.output.records)
        records.parent.mkdir(parents=True, exist_ok=True)
        recorder = Recorder(JsonlSink(path=records))
    hooks = (
        SweepLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            recorder=recorder,
        )
        if use_logging
        else NoopHooks()
    )

    # 2) Geodesy & network
    geodesy = make_geodesy(model.geodesy)
    reference = Point(model.reference.x, model.reference.y)
    try:
        segs = list(segments) if segments is not None else load_segments(model.network.file)
        tree = build_network(segs, reference, geodesy)
    except TapnetError as exc:
        hooks.error(reason=type(exc).__name__, detail=str(exc))
        raise
    hooks.tree_ready(nodes=tree.size, anchor=tree.edge.start)

    # 3) Optional debug output of the oriented tree
    if model.output.write_tree:
        write_tree(Path(model.output.directory) / f"{model.output.prefix}-tree.geojson", tree)

    return App(model, geodesy, segs, tree, FaultLocator(geodesy), hooks)
