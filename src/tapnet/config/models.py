import json
import os
from math import isfinite
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from tapnet.domain.geodesy.geodesy_providers import EARTH_RADIUS_M


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


# ----------------- GEODESY ---------------------


class GeodesySphericalModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["spherical"] = "spherical"
    radius_m: float = EARTH_RADIUS_M

    @field_validator("radius_m")
    @classmethod
    def _positive(cls, v: float) -> float:
        if not isfinite(v) or v <= 0:
            raise ValueError("radius_m must be a positive number")
        return v


class GeodesyPlanarModel(BaseModel):
    """Projected coordinates already in meters."""

    model_config = ConfigDict(extra="forbid")
    kind: Literal["planar"] = "planar"


GeodesyUnion = Annotated[
    GeodesySphericalModel | GeodesyPlanarModel,
    Field(discriminator="kind"),
]

# ----------------- NETWORK ---------------------


class ReferenceModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    x: float  # longitude
    y: float  # latitude

    @field_validator("x", "y")
    def _finite(cls, v: float, info: ValidationInfo) -> float:
        if not isfinite(v):
            raise ValueError(f"{info.field_name} must be finite")
        return v


class NetworkSourceModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    file: str

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


# ----------------- SWEEP ---------------------


class SweepModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    start_m: float = 0.0
    end_m: float = 1000.0
    step_m: float = 100.0

    @field_validator("start_m", "end_m", "step_m")
    def _finite_nonneg(cls, v: float, info: ValidationInfo) -> float:
        if not isfinite(v) or v < 0:
            raise ValueError(f"{info.field_name} must be finite and >= 0")
        return v

    @model_validator(mode="after")
    def _check_range(self):
        if self.step_m <= 0:
            raise ValueError("step_m must be > 0")
        if self.end_m < self.start_m:
            raise ValueError(f"end_m ({self.end_m}) must be >= start_m ({self.start_m})")
        return self


class OutputModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    directory: str = "."
    prefix: str = "fault-locations"
    write_tree: bool = False
    records: str | None = None  # JSONL file of located points, appended per run

    @field_validator("directory", "records")
    @classmethod
    def _expand(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return os.path.expandvars(os.path.expanduser(v))


# ------------------------------------------------------------------


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "tapnet"
    run_id: str = "local"
    network: NetworkSourceModel
    reference: ReferenceModel
    geodesy: GeodesyUnion = Field(default_factory=GeodesySphericalModel)
    sweep: SweepModel = SweepModel()
    output: OutputModel = OutputModel()
    log: LogModel = LogModel()


def load_scenario(path: str | Path) -> ScenarioModel:
    with open(path, encoding="utf-8") as f:
        return ScenarioModel.model_validate(json.load(f))
