# src/terrainprofile/ports/raster_sample.py
from __future__ import annotations

from typing import List, Optional, Protocol, Sequence, runtime_checkable
from ..contracts.geo import GeoCoordinate

URI = str

@runtime_checkable
class RasterSamplerPort(Protocol):
    """
    Lectura por lotes de valores de raster en coordenadas geográficas.
    Reglas:
      - Un resultado por coordenada, en el mismo orden.
      - `None` = sin dato (nodata, fuera de raster, valor ilegible).
      - Un fallo total se degrada a todo `None`; no propaga excepción.
    """
    def get_values(self, uri: URI, coords: Sequence[GeoCoordinate]) -> List[Optional[float]]: ...

__all__ = ["RasterSamplerPort", "URI"]
