# io/recorder.py
import json
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Protocol


@dataclass
class FaultLocationsFound:
    run_id: str
    distance_m: float
    points: list[list[float]]  # [x, y] pairs, sorted by (y, x)


class Sink(Protocol):
    def write(self, rec) -> None: ...


class JsonlSink:
    """One JSON object per line, to a stream or appended to a file."""

    def __init__(self, fp=sys.stdout, path: str | Path | None = None):
        self.fp = fp
        self.path = Path(path) if path is not None else None

    def write(self, rec) -> None:
        line = json.dumps(asdict(rec)) + "\n"
        if self.path is None:
            self.fp.write(line)
            return
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line)


class MemorySink:
    def __init__(self):
        self.records: list = []

    def write(self, rec) -> None:
        self.records.append(rec)


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks

    def emit(self, rec):
        for s in self.sinks:
            try:
                s.write(rec)
            except Exception:
                pass  # never break the sweep
