from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from ec2offering.core.metrics import CACHE_EVICTIONS, CACHE_HITS, CACHE_MISSES
from ec2offering.domain.models import Offering

logger = logging.getLogger(__name__)


class OfferingCache:
    """
    In-Memory Cache für zusammengeführte Angebotslisten, Schlüssel ist der kanonische Filter-Key.

    Der Ablauf gilt für den ganzen Store, nicht pro Key: der erste Zugriff nach
    ``oldest + ttl`` leert alles. ``oldest`` ist der Zeitpunkt des ersten Eintrags
    in einen leeren Store.
    """

    def __init__(self, ttl_seconds: int) -> None:
        self._ttl = ttl_seconds
        self._storage: dict[str, tuple[Offering, ...]] = {}
        self._oldest: float | None = None

    @property
    def oldest(self) -> float | None:
        return self._oldest

    def __len__(self) -> int:
        return len(self._storage)

    def get(self, key: str) -> tuple[Offering, ...] | None:
        """Holt Angebote aus dem Cache. ``None`` bei Miss oder nach Ablauf des Stores."""
        if self._oldest is not None and time.time() > self._oldest + self._ttl:
            logger.info("Offering cache expired, evicting %d entries", len(self._storage))
            self.clear()
            CACHE_EVICTIONS.inc()
            CACHE_MISSES.inc()
            return None

        offerings = self._storage.get(key)
        if offerings is None:
            CACHE_MISSES.inc()
        else:
            CACHE_HITS.inc()
        return offerings

    def put(self, key: str, offerings: Sequence[Offering]) -> tuple[Offering, ...] | None:
        """Speichert Angebote und gibt den bisherigen Wert unter ``key`` zurück."""
        if self._oldest is None:
            self._oldest = time.time()
        previous = self._storage.get(key)
        self._storage[key] = tuple(offerings)
        return previous

    def clear(self) -> None:
        self._storage.clear()
        self._oldest = None
