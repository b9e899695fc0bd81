# runtime/registries.py
from collections.abc import Callable

from tapnet.app.protocols import GeodesyProvider
from tapnet.config.models import GeodesyPlanarModel, GeodesySphericalModel, GeodesyUnion
from tapnet.domain.geodesy.geodesy_providers import PlanarGeodesy, SphericalGeodesy

GeodesyFactory = Callable[[GeodesyUnion], GeodesyProvider]

_geodesy_registry: dict[str, GeodesyFactory] = {}


# ------------------- Geodesy providers ---------------------------


def register_geodesy(kind: str):
    def deco(fn: GeodesyFactory):
        _geodesy_registry[kind] = fn
        return fn

    return deco


def make_geodesy(cfg: GeodesyUnion) -> GeodesyProvider:
    try:
        factory = _geodesy_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown geodesy kind {cfg.kind!r}") from None
    return factory(cfg)


@register_geodesy("spherical")
def _make_spherical(cfg: GeodesySphericalModel):
    return SphericalGeodesy(radius_m=cfg.radius_m)


@register_geodesy("planar")
def _make_planar(cfg: GeodesyPlanarModel):
    return PlanarGeodesy()
