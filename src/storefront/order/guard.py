"""Inventory guard: per-product mutual exclusion for stock changes.

Each product id maps to a re-entrant lock created on first use and kept for
the life of the process. Placement and cancellation hold the locks of every
product they touch until their unit of work has committed, so a second
request for the same product always reads committed stock.

The guarantee only holds within one process. Several instances writing to a
shared database would need a conditional update at the storage level.
"""

import os
import threading
from collections import Counter
from collections.abc import Callable, Iterable
from contextlib import contextmanager
from typing import TypeVar

from storefront.shared.errors import ConflictError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_LOCK_TIMEOUT = 10.0


class InventoryGuard:
    """Keyed lock registry. Performs no stock logic itself."""

    def __init__(self, timeout: float = DEFAULT_LOCK_TIMEOUT):
        self.timeout = timeout
        self._locks: dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()
        self._held = threading.local()

    def lock_for(self, product_id) -> threading.RLock:
        key = str(product_id)
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    def _acquire(self, product_id) -> threading.RLock:
        lock = self.lock_for(product_id)
        if not lock.acquire(timeout=self.timeout):
            logger.warning("Timed out waiting for product lock", product_id=str(product_id), timeout=self.timeout)
            raise ConflictError(
                {"product_id": [f"Product {product_id} is busy with another order, please retry"]}
            )
        return lock

    def with_product_lock(self, product_id, critical_section: Callable[[], T]) -> T:
        """Run ``critical_section`` while holding the lock of ``product_id``."""
        lock = self._acquire(product_id)
        try:
            return critical_section()
        finally:
            lock.release()

    def _held_counts(self) -> Counter:
        counts = getattr(self._held, "counts", None)
        if counts is None:
            counts = self._held.counts = Counter()
        return counts

    def held_product_ids(self) -> set[str]:
        """Product ids whose locks the calling thread holds through ``hold``."""
        return {product_id for product_id, depth in self._held_counts().items() if depth > 0}

    @contextmanager
    def hold(self, product_ids: Iterable):
        """Hold the locks of several products at once.

        Locks are taken in sorted id order so two callers with overlapping
        product sets cannot deadlock, and released in reverse order.
        """
        counts = self._held_counts()
        acquired = []
        try:
            for product_id in sorted({str(pid) for pid in product_ids}):
                acquired.append((product_id, self._acquire(product_id)))
                counts[product_id] += 1
            yield
        finally:
            for product_id, lock in reversed(acquired):
                lock.release()
                counts[product_id] -= 1
                if counts[product_id] <= 0:
                    del counts[product_id]


_current_guard: InventoryGuard | None = None
_guard_init_lock = threading.Lock()


def get_inventory_guard() -> InventoryGuard:
    """Return the process-wide guard, built from INVENTORY_LOCK_TIMEOUT on first use."""
    global _current_guard
    with _guard_init_lock:
        if _current_guard is None:
            _current_guard = InventoryGuard(timeout=float(os.getenv("INVENTORY_LOCK_TIMEOUT", DEFAULT_LOCK_TIMEOUT)))
        return _current_guard


def set_inventory_guard(guard: InventoryGuard) -> None:
    """Override the active guard (useful for tests)."""
    global _current_guard
    _current_guard = guard


def reset_inventory_guard() -> None:
    global _current_guard
    _current_guard = None
