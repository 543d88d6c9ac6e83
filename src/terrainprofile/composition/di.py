from __future__ import annotations
from pathlib import Path
from typing import Optional, Tuple

import yaml

from ..adapters.gdal_cli import GdalInfoMetadata, GdalLocationInfoSampler
from ..adapters.rasterio_backend import RasterioMetadata, RasterioSampler
from ..config import Settings, get_settings
from ..contracts.core import RasterBackend
from ..ports.raster_metadata import RasterMetadataPort
from ..ports.raster_sample import RasterSamplerPort
from ..services.metadata_cache import MetadataCache, get_metadata_cache
from ..services.profile_service import ProfileService

def load_settings_from_yaml(path: Path) -> Settings:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return Settings(**data)

def build_settings(config_path: Optional[Path] = None) -> Settings:
    if config_path is None:
        return get_settings()
    return load_settings_from_yaml(Path(config_path).resolve())

def build_backend(settings: Settings) -> Tuple[RasterMetadataPort, RasterSamplerPort]:
    if settings.backend == RasterBackend.RASTERIO:
        return RasterioMetadata(), RasterioSampler()
    return (
        GdalInfoMetadata(
            gdalinfo_exe=str(settings.gdalinfo_exe) if settings.gdalinfo_exe else None,
            timeout_s=settings.subprocess_timeout_s,
        ),
        GdalLocationInfoSampler(
            gdallocationinfo_exe=str(settings.gdallocationinfo_exe) if settings.gdallocationinfo_exe else None,
            timeout_s=settings.subprocess_timeout_s,
        ),
    )

def build_profile_service(settings: Optional[Settings] = None, cache: Optional[MetadataCache] = None) -> ProfileService:
    st = settings or get_settings()
    metadata, sampler = build_backend(st)
    if cache is None:
        # settings globales -> caché de proceso; settings explícitos -> caché propia del servicio
        cache = get_metadata_cache() if settings is None else MetadataCache(capacity=st.cache_capacity)
    return ProfileService(
        metadata=metadata,
        sampler=sampler,
        cache=cache,
        settings=st,
    )
