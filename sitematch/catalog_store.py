"""Shared read-only catalog snapshot.

Matching runs read an immutable tuple; a reload swaps the whole tuple at once,
so a run in flight keeps the snapshot it started with.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from sitematch.models import Product

logger = logging.getLogger(__name__)


class CatalogStore:
    """Holds the current catalog snapshot and replaces it atomically."""

    def __init__(self, products: Iterable[Product] | None = None):
        self._lock = threading.Lock()
        self._snapshot: tuple[Product, ...] | None = None
        self._version = 0
        if products is not None:
            self.load(products)

    @property
    def version(self) -> int:
        """Number of snapshots loaded so far (0 before the first load)."""
        return self._version

    @property
    def loaded(self) -> bool:
        return self._snapshot is not None

    def load(self, products: Iterable[Product]) -> int:
        """Install a new snapshot and return its version."""
        snapshot = tuple(products)
        with self._lock:
            self._snapshot = snapshot
            self._version += 1
            version = self._version
        logger.info(f"Catalog snapshot v{version} loaded ({len(snapshot)} products)")
        return version

    def replace(self, products: Iterable[Product]) -> int:
        """Swap in a reloaded catalog. Readers holding the old tuple are unaffected."""
        return self.load(products)

    def snapshot(self) -> tuple[Product, ...]:
        """Return the current snapshot, or an empty tuple before the first load."""
        with self._lock:
            return self._snapshot or ()

    def current(self) -> tuple[Product, ...]:
        """Return the current snapshot.

        Raises:
            RuntimeError: If no catalog has been loaded yet
        """
        with self._lock:
            if self._snapshot is None:
                raise RuntimeError("Catalog not loaded")
            return self._snapshot
