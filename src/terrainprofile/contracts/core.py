# src/terrainprofile/contracts/core.py
from __future__ import annotations

import math
from enum import Enum
from typing import Any, Sequence

from .errors import InputError
from .geo import GeoCoordinate

# -------------------------
# Estrategias / backends
# -------------------------
class DistanceMethod(str, Enum):
    HAVERSINE = "haversine"
    PLANAR = "planar"


class RasterBackend(str, Enum):
    GDAL = "gdal"
    RASTERIO = "rasterio"


# -------------------------
# Validación de entradas
# -------------------------
def coerce_point(value: Any, name: str = "point") -> GeoCoordinate:
    """[lon, lat] -> GeoCoordinate. Cualquier otra forma es InputError."""
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise InputError(f"{name} debe ser [lon, lat]")
    if len(value) != 2:
        raise InputError(f"{name} debe tener 2 coordenadas [lon, lat], tiene {len(value)}")
    out = []
    for v in value:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise InputError(f"{name} contiene un valor no numérico: {v!r}")
        if not math.isfinite(v):
            raise InputError(f"{name} contiene un valor no finito: {v!r}")
        out.append(float(v))
    return GeoCoordinate(out[0], out[1])


def coerce_interval(value: Any) -> int:
    # JSON puede traer 2.0; se acepta si es entero exacto
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputError(f"sampling_interval debe ser entero, llegó {value!r}")
    if value < 1:
        raise InputError(f"sampling_interval debe ser >= 1, llegó {value}")
    return value


def coerce_method(value: DistanceMethod | str | None, default: DistanceMethod) -> DistanceMethod:
    if value is None:
        return default
    try:
        return DistanceMethod(value)
    except ValueError as e:
        allowed = ", ".join(m.value for m in DistanceMethod)
        raise InputError(f"método de distancia desconocido: {value!r} (usa {allowed})") from e


__all__ = [
    "DistanceMethod", "RasterBackend",
    "coerce_point", "coerce_interval", "coerce_method",
]
