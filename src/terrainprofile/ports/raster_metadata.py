# src/terrainprofile/ports/raster_metadata.py
from __future__ import annotations

from typing import Protocol, runtime_checkable
from ..contracts.geo import GeoTransform

URI = str

@runtime_checkable
class RasterMetadataPort(Protocol):
    """
    Metadatos de georreferencia de un raster (GeoTIFF/COG, etc.).
    Reglas:
      - `get_transform` lanza DatasetError si el dataset no existe / no se lee,
        y MetadataError si se lee pero no entrega GeoTransform usable.
      - Implementación típica: `gdalinfo -json` o rasterio.
    """
    def exists(self, uri: URI) -> bool: ...
    def get_transform(self, uri: URI) -> GeoTransform: ...

__all__ = ["RasterMetadataPort", "URI"]
