# src/terrainprofile/adapters/rasterio_backend.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import rasterio
from rasterio.errors import RasterioIOError
from rasterio.transform import Affine

from ..contracts.errors import DatasetError, MetadataError
from ..contracts.geo import GeoCoordinate, GeoTransform
from ..ports.raster_metadata import RasterMetadataPort
from ..ports.raster_sample import RasterSamplerPort

logger = logging.getLogger(__name__)


def _affine_to_gt(a: Affine) -> GeoTransform:
    return GeoTransform(a.c, a.a, a.b, a.f, a.d, a.e)


def _to_value(sample, nodata: Optional[float]) -> Optional[float]:
    """Una muestra de `ds.sample(masked=True)` -> float o None (sin dato)."""
    if sample.size == 0:
        return None
    if np.ma.isMaskedArray(sample) and np.ma.getmaskarray(sample)[0]:
        return None
    v = float(np.ma.getdata(sample)[0])
    if not np.isfinite(v):
        return None
    if nodata is not None and np.isfinite(nodata) and v == nodata:
        return None
    return v


@dataclass(frozen=True)
class RasterioMetadata(RasterMetadataPort):
    """Lee el GeoTransform con rasterio (GDAL enlazado, sin subprocesos)."""

    def exists(self, uri: str) -> bool:
        return os.path.exists(uri)

    def get_transform(self, uri: str) -> GeoTransform:
        try:
            with rasterio.open(uri) as ds:
                a = ds.transform
                georef = ds.crs is not None or not a.is_identity
        except RasterioIOError as e:
            raise DatasetError(f"rasterio no pudo abrir {uri}", detail=str(e)) from e
        if not georef:
            # mismo criterio que gdalinfo: sin geoTransform en datasets no georreferenciados
            raise MetadataError(f"{uri} no está georreferenciado")
        return _affine_to_gt(a)


@dataclass(frozen=True)
class RasterioSampler(RasterSamplerPort):
    """Muestreo por lotes con `DatasetReader.sample`.

    Banda 1-based (rasterio/GDAL). Fuera de bounds, enmascarado, NaN o nodata
    -> None. Si el dataset no abre, todo None.
    """
    band_index: int = 1

    def get_values(self, uri: str, coords: Sequence[GeoCoordinate]) -> List[Optional[float]]:
        if not coords:
            return []
        try:
            with rasterio.open(uri) as ds:
                nodata = ds.nodata
                b = ds.bounds
                inside = [b.left <= lon <= b.right and b.bottom <= lat <= b.top for lon, lat in coords]
                samples = ds.sample([(lon, lat) for lon, lat in coords], indexes=self.band_index, masked=True)
                return [
                    _to_value(s, nodata) if ok else None
                    for s, ok in zip(samples, inside)
                ]
        except RasterioIOError as e:
            logger.warning("rasterio no pudo muestrear %s: %s", uri, e)
            return [None] * len(coords)


__all__ = ["RasterioMetadata", "RasterioSampler"]
