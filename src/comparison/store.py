"""In-memory comparative store — the persistence boundary.

Mutations on one comparative are serialized by a per-id lock, re-run the
scoring pass on the stored snapshot, and bump ``version``.  Passing
``expected_version`` turns a write into an optimistic check: a stale
caller gets ``VersionConflictError`` instead of clobbering a newer ranking.
Retrying is up to the caller.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from src.comparison.engine import recompute
from src.comparison.models import Comparative

logger = logging.getLogger(__name__)


class VersionConflictError(RuntimeError):
    def __init__(self, comparative_id: str, expected: int, actual: int) -> None:
        super().__init__(
            f"comparative {comparative_id!r} is at version {actual}, "
            f"caller expected {expected}"
        )
        self.comparative_id = comparative_id
        self.expected = expected
        self.actual = actual


class ComparativeStore:
    def __init__(self) -> None:
        self._snapshots: dict[str, Comparative] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, comparative_id: str) -> threading.Lock:
        with self._registry_lock:
            return self._locks.setdefault(comparative_id, threading.Lock())

    def __contains__(self, comparative_id: object) -> bool:
        return comparative_id in self._snapshots

    def get(self, comparative_id: str) -> Comparative:
        """Current snapshot; raises ``KeyError`` for an unknown id."""
        return self._snapshots[comparative_id].model_copy(deep=True)

    def create(self, comparative: Comparative) -> Comparative:
        with self._lock_for(comparative.id):
            if comparative.id in self._snapshots:
                raise ValueError(f"comparative {comparative.id!r} already exists")
            stored = recompute(comparative).model_copy(update={"version": 1})
            self._snapshots[comparative.id] = stored
        logger.info("Created comparative %s", comparative.id)
        return stored.model_copy(deep=True)

    def mutate(
        self,
        comparative_id: str,
        edit: Callable[[Comparative], Comparative],
        expected_version: int | None = None,
    ) -> Comparative:
        """Apply ``edit`` to the stored snapshot and persist the recomputed result."""
        with self._lock_for(comparative_id):
            current = self._snapshots[comparative_id]
            if expected_version is not None and expected_version != current.version:
                logger.warning(
                    "Rejected stale write to %s (expected v%d, at v%d)",
                    comparative_id, expected_version, current.version,
                )
                raise VersionConflictError(comparative_id, expected_version, current.version)

            edited = edit(current.model_copy(deep=True))
            if edited.id != comparative_id:
                raise ValueError(
                    f"edit changed comparative id {comparative_id!r} to {edited.id!r}"
                )
            stored = recompute(edited).model_copy(update={"version": current.version + 1})
            self._snapshots[comparative_id] = stored
        logger.debug("Comparative %s now at v%d", comparative_id, stored.version)
        return stored.model_copy(deep=True)

    def delete(self, comparative_id: str) -> None:
        # Lock entry stays registered for any later create of this id.
        with self._lock_for(comparative_id):
            del self._snapshots[comparative_id]
