# src/terrainprofile/cli.py
from __future__ import annotations

"""
CLI del servicio de perfiles (contracts-first, minimal).

Comandos principales:
  - profile: perfil de elevación entre dos puntos (JSON por stdout).
  - info: GeoTransform del dataset.

Ejemplos rápidos:
  python -m terrainprofile.cli profile --a -70.65 -33.45 --b -70.55 -33.40 \
      --interval 2 --dataset ./data/1.tif --out ./perfil.csv

  python -m terrainprofile.cli --backend rasterio info --dataset ./data/1.tif
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Type

from .adapters.profile_exporters import exporter_for
from .composition.di import build_profile_service, build_settings
from .config import Settings, configure_logging
from .contracts.core import DistanceMethod, RasterBackend
from .contracts.errors import DatasetError, InputError, InternalError, MetadataError, ProfileError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

EXIT_CODES: Dict[Type[ProfileError], int] = {
    InputError: 2,
    DatasetError: 3,
    MetadataError: 4,
    InternalError: 1,
}

# ----------------------
# Utilidades locales
# ----------------------

def _settings_from_args(args: argparse.Namespace) -> Settings:
    s = build_settings(Path(args.config) if args.config else None)
    upd: dict = {}
    if args.root:
        upd["data_root"] = Path(args.root).expanduser().resolve()
    if args.backend:
        upd["backend"] = RasterBackend(args.backend)
    if args.log_level:
        upd["log_level"] = args.log_level
    if upd:
        s = s.model_copy(update=upd)
    return s


def _exit_code(err: ProfileError) -> int:
    for cls, code in EXIT_CODES.items():
        if isinstance(err, cls):
            return code
    return 1

# ----------------------
# Comandos
# ----------------------

def cmd_profile(args: argparse.Namespace, s: Settings) -> int:
    svc = build_profile_service(s)
    prof = svc.compute_profile(
        args.a, args.b,
        sampling_interval=args.interval,
        dataset=args.dataset,
        method=args.method,
    )
    if args.out:
        out = exporter_for(args.out).export(prof, args.out)
        logger.info("perfil escrito en %s", out)
    print(json.dumps(prof.to_dict(), indent=2))
    return 0


def cmd_info(args: argparse.Namespace, s: Settings) -> int:
    svc = build_profile_service(s)
    path, gt = svc.transform_for(args.dataset)
    print(json.dumps({"dataset": str(path), "geoTransform": list(gt)}, indent=2))
    return 0

# ----------------------
# Parser
# ----------------------

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="terrainprofile", description="Perfiles de elevación sobre rasters")
    p.add_argument("--config", help="settings.yaml (si no, variables PROFILE_* / .env)")
    p.add_argument("--root", help="data_root (sobre-escribe Settings.data_root)")
    p.add_argument("--backend", choices=[b.value for b in RasterBackend], help="backend de lectura de raster")
    p.add_argument("--log-level", dest="log_level", type=str.upper, choices=LOG_LEVELS, help="nivel de logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    # profile
    pp = sub.add_parser("profile", help="perfil entre dos puntos")
    pp.add_argument("--a", nargs=2, type=float, required=True, metavar=("LON", "LAT"), help="punto inicial")
    pp.add_argument("--b", nargs=2, type=float, required=True, metavar=("LON", "LAT"), help="punto final")
    pp.add_argument("--interval", type=int, default=1, help="retiene 1 de cada N pixeles (>=1)")
    pp.add_argument("--dataset", help="ruta del raster (si no, Settings.default_dataset)")
    pp.add_argument("--method", choices=[m.value for m in DistanceMethod], default=None, help="estrategia de distancia")
    pp.add_argument("--out", help="escribe además el perfil a .csv o .json")
    pp.set_defaults(func=cmd_profile)

    # info
    pi = sub.add_parser("info", help="muestra el GeoTransform del dataset")
    pi.add_argument("--dataset", help="ruta del raster (si no, Settings.default_dataset)")
    pi.set_defaults(func=cmd_info)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        s = _settings_from_args(args)
        configure_logging(s)
        return int(args.func(args, s))
    except KeyboardInterrupt:
        return 130
    except ProfileError as ex:
        print(f"[ERROR] {ex.to_report().model_dump_json()}", file=sys.stderr)
        return _exit_code(ex)
    except Exception as ex:
        print(f"[ERROR] {ex}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
