# src/terrainprofile/contracts/errors.py
from __future__ import annotations

"""
Jerarquía de errores del motor de perfiles.

  • InputError     -> request mal formado (aridad, intervalo <= 0). Antes de I/O.
  • DatasetError   -> dataset inexistente o ilegible. Fatal.
  • MetadataError  -> dataset legible pero sin GeoTransform usable. Fatal.
  • SampleError    -> fallo de lectura de valores. Se degrada a "sin dato".
  • InternalError  -> cualquier otra cosa atrapada en el borde del servicio.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorReport(BaseModel):
    """Payload estructurado que los hosts (CLI/API) renderizan."""
    model_config = ConfigDict(frozen=True)
    kind: str
    message: str
    detail: Optional[str] = None


class ProfileError(Exception):
    """Base de todos los errores del motor."""
    kind = "profile_error"

    def __init__(self, message: str, *, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_report(self) -> ErrorReport:
        return ErrorReport(kind=self.kind, message=self.message, detail=self.detail)


class InputError(ProfileError):
    kind = "input_error"


class DatasetError(ProfileError):
    kind = "dataset_error"


class MetadataError(ProfileError):
    kind = "metadata_error"


class SampleError(ProfileError):
    kind = "sample_error"


class InternalError(ProfileError):
    kind = "internal_error"


__all__ = [
    "ErrorReport", "ProfileError", "InputError", "DatasetError",
    "MetadataError", "SampleError", "InternalError",
]
