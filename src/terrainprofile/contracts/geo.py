# src/terrainprofile/contracts/geo.py

from __future__ import annotations
import logging
import math
from typing import NamedTuple, Sequence

from .errors import MetadataError

logger = logging.getLogger(__name__)


class PixelCoordinate(NamedTuple):
    x: int; y: int


class GeoCoordinate(NamedTuple):
    lon: float; lat: float


class GeoTransform(NamedTuple):
    """Transformación afín estilo GDAL (6 coeficientes).

    Se desempaqueta igual que la tupla de `gdalinfo`/`GetGeoTransform()`:
        (origin_x, pixel_width, rotation_x, origin_y, rotation_y, pixel_height)
    Los términos de rotación se transportan pero la matemática asume raster
    alineado a ejes.
    """
    origin_x: float
    pixel_width: float
    rotation_x: float
    origin_y: float
    rotation_y: float
    pixel_height: float

    @staticmethod
    def from_sequence(seq: Sequence[float]) -> "GeoTransform":
        try:
            values = [float(v) for v in seq]
        except (TypeError, ValueError) as e:
            raise MetadataError(f"GeoTransform con coeficientes no numéricos: {seq!r}") from e
        if len(values) != 6:
            raise MetadataError(f"GeoTransform requiere 6 coeficientes, llegaron {len(values)}")
        return GeoTransform(*values)

    @property
    def is_rotated(self) -> bool:
        return self.rotation_x != 0.0 or self.rotation_y != 0.0


# ---------- helpers (puro dominio, sin GDAL) ----------
def _round_half_up(v: float) -> int:
    # Igual que Math.round: .5 siempre hacia +inf (no banker's rounding)
    return int(math.floor(v + 0.5))


def validate_geotransform(gt: GeoTransform) -> GeoTransform:
    """Rechaza transformaciones no utilizables antes de dividir por ellas."""
    if not all(math.isfinite(c) for c in gt):
        raise MetadataError(f"GeoTransform con coeficientes no finitos: {tuple(gt)}")
    if gt.pixel_width == 0.0 or gt.pixel_height == 0.0:
        raise MetadataError(
            f"GeoTransform con tamaño de pixel nulo (pixel_width={gt.pixel_width}, "
            f"pixel_height={gt.pixel_height})"
        )
    if gt.is_rotated:
        logger.warning("GeoTransform rotado (%s, %s); se ignora la rotación", gt.rotation_x, gt.rotation_y)
    return gt


def to_pixel(lon: float, lat: float, gt: GeoTransform) -> PixelCoordinate:
    x0, px, _, y0, _, py = gt
    return PixelCoordinate(_round_half_up((lon - x0) / px), _round_half_up((lat - y0) / py))


def to_geo(x: int, y: int, gt: GeoTransform) -> GeoCoordinate:
    x0, px, _, y0, _, py = gt
    return GeoCoordinate(x0 + x * px, y0 + y * py)


__all__ = [
    "PixelCoordinate", "GeoCoordinate", "GeoTransform",
    "validate_geotransform", "to_pixel", "to_geo",
]
