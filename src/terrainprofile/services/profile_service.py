# src/terrainprofile/services/profile_service.py
from __future__ import annotations

"""
Servicio de perfiles de elevación (contracts-first), sin dependencias duras
fuera de *ports*.

Flujo de compute_profile():
  dataset -> (caché) GeoTransform -> pixeles A/B -> recorrido muestreado
  -> coordenadas geo -> UNA consulta por lotes -> distancia acumulada
  -> ElevationProfile (puntos + resumen)

Errores:
  • InputError / DatasetError / MetadataError abortan el request.
  • SampleError del sampler se degrada a "sin dato" en todas las muestras.
  • Cualquier otra excepción se reporta como InternalError.

Nota: no reproyecta ni interpola; los puntos deben venir en el mismo sistema
geográfico que el dataset.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence

from ..config import Settings, get_settings
from ..contracts.core import DistanceMethod, coerce_interval, coerce_method, coerce_point
from ..contracts.errors import DatasetError, InternalError, ProfileError, SampleError
from ..contracts.geo import GeoCoordinate, GeoTransform, to_geo, to_pixel, validate_geotransform
from ..contracts.products import ElevationProfile, ProfilePoint, ProfileSummary
from ..ports.raster_metadata import RasterMetadataPort
from ..ports.raster_sample import RasterSamplerPort
from .distance import DistanceAccumulator, distance_fn
from .metadata_cache import MetadataCache, get_metadata_cache
from .rasterize import sample_line

logger = logging.getLogger(__name__)


@dataclass
class ProfileService:
    metadata: RasterMetadataPort
    sampler: RasterSamplerPort
    cache: MetadataCache = field(default_factory=get_metadata_cache)
    settings: Settings = field(default_factory=get_settings)

    # ---------- Helpers ----------
    def _load_transform(self, key: Any) -> GeoTransform:
        return validate_geotransform(self.metadata.get_transform(str(key)))

    def transform_for(self, dataset: Optional[str] = None) -> tuple[Path, GeoTransform]:
        path = self.settings.resolve_dataset(dataset)
        # se verifica siempre, aunque el transform ya esté en caché
        if not self.metadata.exists(str(path)):
            raise DatasetError(f"Dataset no encontrado: {path}")
        return path, self.cache.get(str(path), self._load_transform)

    def _sample(self, path: Path, coords: Sequence[GeoCoordinate]) -> List[Optional[float]]:
        try:
            values = list(self.sampler.get_values(str(path), coords))
        except SampleError as e:
            logger.warning("lectura de valores degradada a sin dato (%s): %s", path, e)
            return [None] * len(coords)
        if len(values) != len(coords):
            raise InternalError(
                f"El sampler devolvió {len(values)} valores para {len(coords)} coordenadas"
            )
        return values

    # ---------- Casos de uso ----------
    def compute_profile(
        self,
        point_a: Sequence[float],
        point_b: Sequence[float],
        sampling_interval: int = 1,
        dataset: Optional[str] = None,
        method: DistanceMethod | str | None = None,
    ) -> ElevationProfile:
        # validación de forma antes de cualquier I/O
        a = coerce_point(point_a, "a")
        b = coerce_point(point_b, "b")
        interval = coerce_interval(sampling_interval)
        dist_method = coerce_method(method, self.settings.distance_method)

        try:
            return self._compute(a, b, interval, dataset, dist_method)
        except ProfileError:
            raise
        except Exception as ex:
            logger.exception("Error interno generando perfil")
            raise InternalError("Error interno generando perfil", detail=repr(ex)) from ex

    def _compute(
        self,
        a: GeoCoordinate,
        b: GeoCoordinate,
        interval: int,
        dataset: Optional[str],
        method: DistanceMethod,
    ) -> ElevationProfile:
        path, gt = self.transform_for(dataset)

        x0, y0 = to_pixel(a.lon, a.lat, gt)
        x1, y1 = to_pixel(b.lon, b.lat, gt)
        pixels = sample_line(x0, y0, x1, y1, interval)
        coords = [to_geo(x, y, gt) for x, y in pixels]
        logger.debug("perfil %s: (%d,%d)->(%d,%d) %d muestras", path, x0, y0, x1, y1, len(coords))

        values = self._sample(path, coords)

        acc = DistanceAccumulator(fn=distance_fn(method))
        points = [
            ProfilePoint(distance_m=round(acc.add(c), 2), elevation=v, coordinates=c)
            for c, v in zip(coords, values)
        ]
        summary = ProfileSummary(
            total_points=len(points),
            sampling_interval=interval,
            total_distance_m=round(acc.total, 2),
            dataset=str(path),
            distance_method=method,
        )
        return ElevationProfile(points=tuple(points), summary=summary)


__all__ = ["ProfileService"]
