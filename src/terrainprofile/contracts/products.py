from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, NonNegativeFloat, NonNegativeInt, PositiveInt, model_validator

from .core import DistanceMethod
from .geo import GeoCoordinate


class ProfilePoint(BaseModel):
    """Una muestra del perfil. `elevation=None` significa "sin dato"."""
    model_config = ConfigDict(frozen=True)

    distance_m: NonNegativeFloat
    elevation: Optional[float] = None
    coordinates: GeoCoordinate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distance": self.distance_m,
            "elevation": self.elevation,
            "coordinates": [self.coordinates.lon, self.coordinates.lat],
        }


class ProfileSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_points: NonNegativeInt
    sampling_interval: PositiveInt
    total_distance_m: NonNegativeFloat
    dataset: Optional[str] = None
    distance_method: DistanceMethod = DistanceMethod.HAVERSINE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalPoints": self.total_points,
            "samplingInterval": self.sampling_interval,
            "totalDistance": self.total_distance_m,
            "dataset": self.dataset,
            "distanceMethod": self.distance_method.value,
        }


class ElevationProfile(BaseModel):
    """
    Perfil ordenado A -> B + resumen.
    - Distancia acumulada no decreciente, primera muestra en 0.
    - La última distancia coincide con `summary.total_distance_m`.
    """
    model_config = ConfigDict(frozen=True)

    points: Tuple[ProfilePoint, ...]
    summary: ProfileSummary

    @model_validator(mode="after")
    def _check_monotonic(self) -> "ElevationProfile":
        if self.summary.total_points != len(self.points):
            raise ValueError(
                f"total_points={self.summary.total_points} no coincide con {len(self.points)} muestras"
            )
        if self.points and self.points[0].distance_m != 0.0:
            raise ValueError("la primera muestra debe estar a distancia 0")
        for prev, cur in zip(self.points, self.points[1:]):
            if cur.distance_m < prev.distance_m:
                raise ValueError("distancia acumulada decreciente")
        return self

    def distances(self) -> Tuple[float, ...]:
        return tuple(p.distance_m for p in self.points)

    def elevations(self) -> Tuple[Optional[float], ...]:
        return tuple(p.elevation for p in self.points)

    def nodata_count(self) -> int:
        return sum(1 for p in self.points if p.elevation is None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profile": [p.to_dict() for p in self.points],
            "metadata": self.summary.to_dict(),
        }


__all__ = ["ProfilePoint", "ProfileSummary", "ElevationProfile"]
