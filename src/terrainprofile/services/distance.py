# src/terrainprofile/services/distance.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from ..contracts.core import DistanceMethod
from ..contracts.geo import GeoCoordinate

EARTH_RADIUS_M = 6_371_000.0
METERS_PER_DEGREE = 111_320.0

DistanceFn = Callable[[GeoCoordinate, GeoCoordinate], float]


def haversine_m(a: GeoCoordinate, b: GeoCoordinate) -> float:
    """Distancia de gran círculo (tierra esférica, R=6 371 km). Grados de entrada."""
    lon1, lat1 = a
    lon2, lat2 = b
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    h = (math.sin(d_lat / 2.0) ** 2
         + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2.0) ** 2)
    h = min(h, 1.0)  # antípodas: error de redondeo puede pasar de 1
    return EARTH_RADIUS_M * 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))


def planar_m(a: GeoCoordinate, b: GeoCoordinate) -> float:
    """Euclídea en grados * 111 320 m. Sólo válida en tramos cortos cerca del ecuador."""
    return math.hypot(b.lon - a.lon, b.lat - a.lat) * METERS_PER_DEGREE


_STRATEGIES: Dict[DistanceMethod, DistanceFn] = {
    DistanceMethod.HAVERSINE: haversine_m,
    DistanceMethod.PLANAR: planar_m,
}


def distance_fn(method: DistanceMethod | str) -> DistanceFn:
    return _STRATEGIES[DistanceMethod(method)]


@dataclass
class DistanceAccumulator:
    """
    Acumulador de distancia entre muestras consecutivas.
    El total se lleva sin redondear; redondear es cosa de quien reporta.
    """
    fn: DistanceFn = haversine_m
    total: float = 0.0
    _prev: Optional[GeoCoordinate] = field(default=None, repr=False)

    def add(self, coord: GeoCoordinate) -> float:
        if self._prev is not None:
            self.total += self.fn(self._prev, coord)
        self._prev = coord
        return self.total


__all__ = [
    "EARTH_RADIUS_M", "METERS_PER_DEGREE", "DistanceFn",
    "haversine_m", "planar_m", "distance_fn", "DistanceAccumulator",
]
