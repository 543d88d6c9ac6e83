# =============================
# FILE: examples/profile_between_points.py
# =============================
"""
Uso mínimo: ProfileService detrás de los puertos de metadatos/muestreo.
El backend (gdal CLI o rasterio) sale de Settings (PROFILE_BACKEND).
"""
import sys

from terrainprofile.composition.di import build_profile_service
from terrainprofile.config import configure_logging, get_settings


if __name__ == "__main__":
    dataset = sys.argv[1] if len(sys.argv) > 1 else None
    configure_logging(get_settings())
    svc = build_profile_service()

    prof = svc.compute_profile([-70.65, -33.45], [-70.55, -33.40], sampling_interval=2, dataset=dataset)
    print("Muestras:", prof.summary.total_points, "distancia total (m):", prof.summary.total_distance_m)
    for p in prof.points[:10]:
        print(f" - {p.distance_m:>10.2f} m  {p.elevation!s:>8}  {p.coordinates.lon:.6f} {p.coordinates.lat:.6f}")
