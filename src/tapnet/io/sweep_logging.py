# io/sweep_logging.py
import json
import logging
import sys

from tapnet.app.hooks import NoopHooks
from tapnet.io.recorder import FaultLocationsFound, Recorder


def _default_json_logger(name="tapnet", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class SweepLogging(NoopHooks):
    """
    One place to shape and emit structured logs for a build-and-sweep run.
    Located points also go to the recorder, if one is attached.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug = run_id, debug
        self.recorder = recorder
        self.log = logger or _default_json_logger(level="DEBUG" if debug else level)

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    @staticmethod
    def _xy(points) -> list[list[float]]:
        return [[p.x, p.y] for p in sorted(points, key=lambda p: (p.y, p.x))]

    # --------------------------------------------------------

    def run_start(self, *, segments: int, distances: int):
        self._emit("INFO", "run_start", segments=segments, distances=distances)

    def tree_ready(self, *, nodes: int, anchor):
        self._emit("INFO", "tree_ready", nodes=nodes, anchor=[anchor.x, anchor.y])

    def distance_done(self, *, distance_m: float, points):
        if not points:
            self._emit("INFO", "no fault locations", distance_m=distance_m)
            return
        xy = self._xy(points)
        self._emit("INFO", "fault locations", distance_m=distance_m, count=len(xy))
        if self.debug:
            for p in xy:
                self._emit("DEBUG", "fault location", distance_m=distance_m, point=p)
        if self.recorder is not None:
            self.recorder.emit(FaultLocationsFound(self.run_id, distance_m, xy))

    def output_written(self, *, distance_m: float, path: str):
        self._emit("INFO", "output_written", distance_m=distance_m, path=path)

    def run_end(self, *, located: int, written: int, wall_ms: float):
        self._emit("INFO", "run_end", located=located, written=written, wall_ms=round(wall_ms, 3))

    def error(self, *, reason: str, **kw):
        self._emit("ERROR", "error", reason=reason, **kw)
