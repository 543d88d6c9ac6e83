# src/terrainprofile/api.py
from __future__ import annotations

"""
Servicio HTTP de perfiles.

  POST /profile  {a: [lon, lat], b: [lon, lat], sampling_interval?, file_path?, method?}
  GET  /health

Errores -> {"error": mensaje, "kind": tipo}:
  InputError 400 · DatasetError 404 · MetadataError 422 · resto 500
"""

import logging
from typing import Any, Dict, Optional, Type

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .composition.di import build_profile_service
from .config import configure_logging, get_settings
from .contracts.errors import DatasetError, InputError, MetadataError, ProfileError
from .services.profile_service import ProfileService

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: Dict[Type[ProfileError], int] = {
    InputError: 400,
    DatasetError: 404,
    MetadataError: 422,
}


class ProfileRequest(BaseModel):
    # la forma la valida ProfileService.compute_profile (InputError -> 400)
    a: Optional[Any] = None
    b: Optional[Any] = None
    sampling_interval: Any = 1
    file_path: Optional[str] = None
    method: Optional[str] = None


def _status_for(err: ProfileError) -> int:
    for cls, status in STATUS_BY_ERROR.items():
        if isinstance(err, cls):
            return status
    return 500


def create_app(service: Optional[ProfileService] = None) -> FastAPI:
    app = FastAPI(title="terrainprofile")
    # se construye una vez, antes del primer request
    app.state.profile_service = service if service is not None else build_profile_service()

    @app.exception_handler(ProfileError)
    def _profile_error(_request, exc: ProfileError) -> JSONResponse:
        status = _status_for(exc)
        if status >= 500:
            logger.error("Profile generation error: %s (%s)", exc.message, exc.detail)
        report = exc.to_report()
        return JSONResponse(status_code=status, content={"error": report.message, "kind": report.kind})

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    # síncrono: corre en el threadpool de FastAPI
    @app.post("/profile")
    def profile(req: ProfileRequest) -> Dict[str, Any]:
        if req.a is None or req.b is None:
            raise InputError("Se requieren dos puntos: a: [lon, lat], b: [lon, lat]")
        prof = app.state.profile_service.compute_profile(
            req.a, req.b,
            sampling_interval=req.sampling_interval,
            dataset=req.file_path,
            method=req.method,
        )
        return prof.to_dict()

    return app


def main() -> None:
    import uvicorn

    s = get_settings()
    configure_logging(s)
    uvicorn.run(create_app(), host=s.host, port=s.port)


if __name__ == "__main__":
    main()
