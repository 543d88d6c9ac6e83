## `src/terrainprofile/adapters/profile_exporters.py`

from __future__ import annotations

import csv
import json
import os

from ..contracts.products import ElevationProfile
from ..ports.exporters import ProfileExporterPort

CSV_HEADERS = ("distance_m", "elevation", "lon", "lat")


def _ensure_dir(path: str) -> None:
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)


class ProfileCSVExporter(ProfileExporterPort):
    """Exporter mínimo: una fila por muestra, en orden A -> B.

    Convención: elevación sin dato -> celda vacía.
    """
    def export(self, profile: ElevationProfile, out_uri: str) -> str:
        _ensure_dir(out_uri)
        with open(out_uri, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(CSV_HEADERS)
            for p in profile.points:
                writer.writerow([
                    p.distance_m,
                    "" if p.elevation is None else p.elevation,
                    p.coordinates.lon,
                    p.coordinates.lat,
                ])
        return out_uri


class ProfileJSONExporter(ProfileExporterPort):
    """Mismo formato que responde el servicio HTTP (`profile` + `metadata`)."""
    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def export(self, profile: ElevationProfile, out_uri: str) -> str:
        _ensure_dir(out_uri)
        with open(out_uri, "w", encoding="utf-8") as f:
            json.dump(profile.to_dict(), f, indent=self.indent)
        return out_uri


def exporter_for(out_uri: str) -> ProfileExporterPort:
    ext = os.path.splitext(out_uri)[1].lower()
    if ext == ".csv":
        return ProfileCSVExporter()
    if ext == ".json":
        return ProfileJSONExporter()
    raise ValueError(f"Formato de salida no soportado: {ext or out_uri} (usa .csv o .json)")


__all__ = ["ProfileCSVExporter", "ProfileJSONExporter", "exporter_for", "CSV_HEADERS"]
