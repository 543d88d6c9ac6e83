# src/terrainprofile/config.py
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .contracts.core import DistanceMethod, RasterBackend


class Settings(BaseSettings):
    """
    Config unificada del servicio de perfiles. No toca disco.
    Debe ser construida y provista por composition/di.py (CLI/API).
    Variables de entorno con prefijo PROFILE_ (p.ej. PROFILE_DEFAULT_DATASET).
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PROFILE_",
        extra="forbid",
        frozen=True,
    )

    # --- datasets ---
    data_root: Path = Field(Path("."), validate_default=True)
    default_dataset: str = "data/1.tif"

    # --- herramientas externas ---
    backend: RasterBackend = RasterBackend.GDAL
    gdalinfo_exe: Optional[Path] = None          # si None, se busca en PATH desde adapters
    gdallocationinfo_exe: Optional[Path] = None
    subprocess_timeout_s: float = Field(30.0, gt=0)

    # --- motor ---
    distance_method: DistanceMethod = DistanceMethod.HAVERSINE
    cache_capacity: Optional[int] = Field(None, ge=1)  # None = sin límite

    # --- hosts ---
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = Field(3000, ge=1, le=65535)

    # ----------------------------
    # Normalizadores / validadores
    # ----------------------------
    @field_validator("data_root", mode="before")
    @classmethod
    def _abs_root(cls, v: Path | str) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("default_dataset")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("default_dataset no puede ser vacío")
        return v2

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v2 = v.strip().upper()
        if not isinstance(logging.getLevelName(v2), int):
            raise ValueError(f"log_level desconocido: {v}")
        return v2

    # ----------------------------
    # Helpers puros (sin side-effects)
    # ----------------------------
    def resolve_dataset(self, identifier: Optional[str] = None) -> Path:
        """Identificador relativo -> ruta absoluta bajo data_root."""
        p = Path(identifier or self.default_dataset).expanduser()
        return p if p.is_absolute() else (self.data_root / p).resolve()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Instancia cacheada. Úsala SOLO desde composition/di.py o CLI/API.
    Prohibido usarla en services/ salvo como default. Para tests, recuerda limpiar:
        get_settings.cache_clear()
    """
    return Settings()
