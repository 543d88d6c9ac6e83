# src/terrainprofile/ports/exporters.py
from __future__ import annotations

from typing import Protocol, runtime_checkable
from ..contracts.products import ElevationProfile

URI = str

@runtime_checkable
class ProfileExporterPort(Protocol):
    """Escribe un perfil a disco (CSV, JSON, ...). Devuelve la URI escrita."""
    def export(self, profile: ElevationProfile, out_uri: URI) -> URI: ...

__all__ = ["ProfileExporterPort", "URI"]
