import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np

from tapnet.app.protocols import GeodesyProvider
from tapnet.domain.entities.geography import Point
from tapnet.domain.errors import GeodesyError

log = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_008.8  # mean radius


class LegwiseGeodesy(GeodesyProvider, ABC):
    """
    Shared leg walking. Subclasses measure legs (vectorised) and advance along one leg.
    Lengths and locations use the same cumulative sums, so a target equal to the
    line length always resolves.
    """

    @abstractmethod
    def _leg_lengths(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray: ...

    @abstractmethod
    def _advance(self, a: Point, b: Point, leg_m: float, along_m: float) -> Point: ...

    def _legs(self, points: Sequence[Point]) -> np.ndarray:
        if len(points) < 2:
            raise GeodesyError(f"a line needs at least 2 points, got {len(points)}")
        xs = np.fromiter((p.x for p in points), dtype=float, count=len(points))
        ys = np.fromiter((p.y for p in points), dtype=float, count=len(points))
        with np.errstate(invalid="ignore"):
            legs = self._leg_lengths(xs, ys)
        if not np.isfinite(legs).all():
            bad = np.flatnonzero(~np.isfinite(legs))
            raise GeodesyError(f"cannot measure leg(s) {bad.tolist()}")
        return legs

    def distance_m(self, a: Point, b: Point) -> float:
        xs = np.array([a.x, b.x], dtype=float)
        ys = np.array([a.y, b.y], dtype=float)
        with np.errstate(invalid="ignore"):
            return float(self._leg_lengths(xs, ys)[0])

    def line_length_m(self, points: Sequence[Point]) -> float:
        return float(np.cumsum(self._legs(points))[-1])

    def point_at_distance(self, points: Sequence[Point], meters: float) -> Point | None:
        if meters < 0:
            raise ValueError(f"distance along a line must be >= 0, got {meters}")
        legs = self._legs(points)
        cum = np.cumsum(legs)
        if meters > cum[-1]:
            log.info(
                "Not able to compute location. Distance %s is greater than line length %s",
                meters,
                float(cum[-1]),
            )
            return None
        if meters == 0:
            return points[0]
        i = int(np.searchsorted(cum, meters, side="left"))
        if meters == cum[i]:
            return points[i + 1]
        walked = float(cum[i - 1]) if i else 0.0
        return self._advance(points[i], points[i + 1], float(legs[i]), meters - walked)


class SphericalGeodesy(LegwiseGeodesy):
    """Great-circle geodesy on a sphere; x is longitude and y latitude, in degrees."""

    def __init__(self, radius_m: float = EARTH_RADIUS_M):
        self.radius_m = radius_m

    def _leg_lengths(self, xs, ys):
        lon, lat = np.radians(xs), np.radians(ys)
        dlat = np.diff(lat)
        dlon = np.diff(lon)
        # haversine
        h = np.sin(dlat / 2) ** 2 + np.cos(lat[:-1]) * np.cos(lat[1:]) * np.sin(dlon / 2) ** 2
        h = np.clip(h, 0.0, 1.0)
        return self.radius_m * 2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h))

    def bearing_deg(self, a: Point, b: Point) -> float:
        """Initial bearing from a to b, 0-360 with 0 at north."""
        lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
        dlon = math.radians(b.longitude - a.longitude)
        y = math.sin(dlon) * math.cos(lat2)
        x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
        return (math.degrees(math.atan2(y, x)) + 360) % 360

    def destination(self, a: Point, bearing: float, distance_m: float) -> Point:
        d = distance_m / self.radius_m
        lat1, lon1 = math.radians(a.latitude), math.radians(a.longitude)
        theta = math.radians(bearing)
        lat2 = math.asin(
            math.sin(lat1) * math.cos(d) + math.cos(lat1) * math.sin(d) * math.cos(theta)
        )
        lon2 = lon1 + math.atan2(
            math.sin(theta) * math.sin(d) * math.cos(lat1),
            math.cos(d) - math.sin(lat1) * math.sin(lat2),
        )
        lon = (math.degrees(lon2) + 540) % 360 - 180
        return Point(lon, math.degrees(lat2))

    def _advance(self, a, b, leg_m, along_m):
        if along_m >= leg_m:
            return b
        if along_m <= 0:
            return a
        return self.destination(a, self.bearing_deg(a, b), along_m)


class PlanarGeodesy(LegwiseGeodesy):
    """Euclidean geometry on projected coordinates in meters."""

    def _leg_lengths(self, xs, ys):
        return np.hypot(np.diff(xs), np.diff(ys))

    def _advance(self, a, b, leg_m, along_m):
        if along_m >= leg_m:
            return b
        if along_m <= 0:
            return a
        s = along_m / leg_m
        return Point(a.x + s * (b.x - a.x), a.y + s * (b.y - a.y))
