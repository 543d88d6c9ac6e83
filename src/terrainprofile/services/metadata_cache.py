# src/terrainprofile/services/metadata_cache.py
from __future__ import annotations

"""
Caché de GeoTransform por dataset, compartida por todo el proceso.

- Poblado perezoso en el primer acceso; sin invalidación.
- `capacity=None` -> sin límite (catálogos chicos y fijos).
  `capacity=N`    -> LRU acotado a N entradas.
- El loader corre FUERA del lock: dos primeros accesos concurrentes al mismo
  dataset pueden leer dos veces y sobrescribir la misma entrada (idempotente).
"""

import logging
import threading
from collections import OrderedDict
from functools import lru_cache
from typing import Callable, Hashable, Optional

from ..contracts.geo import GeoTransform

logger = logging.getLogger(__name__)


class MetadataCache:
    def __init__(self, capacity: Optional[int] = None) -> None:
        if capacity is not None and capacity < 1:
            raise ValueError(f"capacity debe ser >= 1 o None, llegó {capacity}")
        self.capacity = capacity
        self._entries: "OrderedDict[Hashable, GeoTransform]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: Hashable, loader: Callable[[Hashable], GeoTransform]) -> GeoTransform:
        with self._lock:
            gt = self._entries.get(key)
            if gt is not None:
                self._entries.move_to_end(key)
                logger.debug("metadata cache hit: %s", key)
                return gt

        logger.debug("metadata cache miss: %s", key)
        gt = loader(key)

        with self._lock:
            self._entries[key] = gt
            self._entries.move_to_end(key)
            if self.capacity is not None:
                while len(self._entries) > self.capacity:
                    evicted, _ = self._entries.popitem(last=False)
                    logger.debug("metadata cache evict: %s", evicted)
        return gt

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries


@lru_cache(maxsize=1)
def get_metadata_cache() -> MetadataCache:
    """
    Instancia de proceso. Capacidad según Settings.cache_capacity.
    Para tests: `get_metadata_cache.cache_clear()`.
    """
    from ..config import get_settings
    return MetadataCache(capacity=get_settings().cache_capacity)


__all__ = ["MetadataCache", "get_metadata_cache"]
