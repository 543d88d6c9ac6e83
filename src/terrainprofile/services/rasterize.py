# src/terrainprofile/services/rasterize.py
from __future__ import annotations

"""
Rasterización de segmentos en espacio pixel (Bresenham entero, 8-conexo).

La fase del muestreo se ancla en el paso 0 del recorrido dado: con intervalo
> 1, A->B y B->A pueden retener subconjuntos distintos. En los empates de la
regla de paso el camino tampoco es simétrico: (0,0)->(2,1) pasa por (1,0) y
(2,1)->(0,0) pasa por (1,1).
"""

from typing import Iterator, List

from ..contracts.core import coerce_interval
from ..contracts.geo import PixelCoordinate


def iter_line(x0: int, y0: int, x1: int, y1: int) -> Iterator[PixelCoordinate]:
    """Recorrido completo (ambos extremos incluidos)."""
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy

    x, y = x0, y0
    while True:
        yield PixelCoordinate(x, y)
        if x == x1 and y == y1:
            return
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy


def sample_line(x0: int, y0: int, x1: int, y1: int, interval: int = 1) -> List[PixelCoordinate]:
    """Retiene los pixeles cuya posición `i` cumple `i % interval == 0`."""
    interval = coerce_interval(interval)
    return [p for i, p in enumerate(iter_line(x0, y0, x1, y1)) if i % interval == 0]


__all__ = ["iter_line", "sample_line"]
