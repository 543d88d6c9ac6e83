## `src/terrainprofile/adapters/gdal_cli.py`
from __future__ import annotations

import json
import logging
import math
import os
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..contracts.errors import DatasetError, MetadataError
from ..contracts.geo import GeoCoordinate, GeoTransform
from ..ports.raster_metadata import RasterMetadataPort
from ..ports.raster_sample import RasterSamplerPort

logger = logging.getLogger(__name__)


def _parse_value(line: str) -> Optional[float]:
    s = line.strip()
    if not s:
        return None
    try:
        v = float(s)
    except ValueError:
        return None
    return v if math.isfinite(v) else None


@dataclass(frozen=True)
class GdalInfoMetadata(RasterMetadataPort):
    """Adapter que invoca `gdalinfo -json` por CLI para leer el GeoTransform.

    Si `gdalinfo_exe` es None, intenta usar `gdalinfo` del PATH.
    """
    gdalinfo_exe: str | None = None
    timeout_s: float = 30.0

    def _exe(self) -> str:
        return self.gdalinfo_exe or "gdalinfo"

    def exists(self, uri: str) -> bool:
        return os.path.exists(uri)

    def get_transform(self, uri: str) -> GeoTransform:
        args = [self._exe(), "-json", uri]
        try:
            cp = subprocess.run(args, capture_output=True, text=True, timeout=self.timeout_s)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise DatasetError(f"No se pudo ejecutar gdalinfo sobre {uri}", detail=str(e)) from e
        if cp.returncode != 0:
            raise DatasetError(f"gdalinfo no pudo leer {uri}", detail=cp.stderr.strip())
        try:
            info = json.loads(cp.stdout)
        except json.JSONDecodeError as e:
            raise MetadataError(f"gdalinfo devolvió JSON inválido para {uri}", detail=str(e)) from e
        gt = info.get("geoTransform") if isinstance(info, dict) else None
        if gt is None:
            raise MetadataError(f"{uri} no tiene geoTransform")
        return GeoTransform.from_sequence(gt)


@dataclass(frozen=True)
class GdalLocationInfoSampler(RasterSamplerPort):
    """Adapter que invoca `gdallocationinfo -valonly -geoloc` en un solo lote.

    Entrada por stdin: un par `lon lat` por línea; salida: un valor por línea,
    en el mismo orden (línea vacía = fuera de raster).
    Si el proceso falla sin una línea por coordenada, el lote se degrada a todo `None`.
    """
    gdallocationinfo_exe: str | None = None
    timeout_s: float = 30.0

    def _exe(self) -> str:
        return self.gdallocationinfo_exe or "gdallocationinfo"

    def get_values(self, uri: str, coords: Sequence[GeoCoordinate]) -> List[Optional[float]]:
        if not coords:
            return []
        stdin = "".join(f"{lon} {lat}\n" for lon, lat in coords)
        args = [self._exe(), "-valonly", "-geoloc", uri]
        try:
            cp = subprocess.run(args, input=stdin, capture_output=True, text=True, timeout=self.timeout_s)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("gdallocationinfo falló sobre %s: %s", uri, e)
            return [None] * len(coords)
        # no usar strip() global: se perderían líneas vacías finales y el orden
        lines = cp.stdout.splitlines()
        if cp.returncode != 0:
            # un punto fuera de raster deja línea vacía y código 1; el lote sigue siendo válido
            if len(lines) != len(coords):
                logger.warning("gdallocationinfo error (%s) sobre %s: %s", cp.returncode, uri, cp.stderr.strip())
                return [None] * len(coords)
            logger.debug("gdallocationinfo terminó con %s sobre %s; se usan los valores leídos", cp.returncode, uri)
        return [_parse_value(line) for line in lines]


__all__ = ["GdalInfoMetadata", "GdalLocationInfoSampler"]
