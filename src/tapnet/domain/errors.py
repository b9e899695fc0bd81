from enum import Enum


class TopologyRule(Enum):
    CLOSED_LOOP = "closed_loop"
    DISCONNECTED = "disconnected"
    INTERIOR_SHARING = "interior_sharing"
    NULL_ROOT = "null_root"


class TapnetError(Exception):
    """Base class for rejected network input."""


class TreeConstructionError(TapnetError):
    """Raised when the segments cannot be arranged into a single rooted tree."""

    def __init__(self, message: str, *, segment_ids: tuple[int | None, ...] = ()):
        super().__init__(message)
        self.segment_ids = segment_ids


class TopologyViolation(TapnetError):
    """Raised when the input breaks a tapped-line rule."""

    def __init__(self, rule: TopologyRule, message: str, *, segment_id: int | None = None):
        super().__init__(f"[{rule.value}] {message}")
        self.rule = rule
        self.segment_id = segment_id


class GeodesyError(TapnetError):
    """Raised when a geodesic value cannot be computed."""


class NetworkFormatError(TapnetError):
    """Raised when a GeoJSON document does not describe line geometry."""
