"""
In-memory cache of canonical tag/theme embeddings.

One instance per concept kind per process. The published snapshot is an
immutable tuple swapped in by a single attribute assignment, so readers on
the fast path never take the lock and never see a half-built list.

Logic:
1. Return the current snapshot if one is published
2. Otherwise acquire the per-instance gate and re-check
3. Load rows from the concept store (once!)
4. Parse embeddings, skipping malformed rows
5. Publish the snapshot and return it to every waiting caller
"""
from __future__ import annotations

import asyncio
import logging
from collections import Counter
from typing import Optional

import numpy as np

from ..domain.concepts.models import CanonicalConcept, ConceptKind, ConceptRow
from ..domain.concepts.ports import ConceptStoreReader
from .concept_embedding import ConceptEmbeddingEngine

logger = logging.getLogger(__name__)

ConceptSnapshot = tuple[CanonicalConcept, ...]


class CanonicalEmbeddingCache:
    """
    Lazily-built, single-flight cache of canonical concepts for one kind.

    Strategy:
    - Lock-free read of the published snapshot
    - asyncio.Lock gate around rebuilds (not reentrant)
    - Explicit invalidation only; no time-based expiry
    - A store failure propagates to the caller that triggered the load and
      leaves the cache empty for the next caller to retry
    """

    def __init__(self, kind: ConceptKind, store: ConceptStoreReader):
        self.kind = kind
        self._store = store
        self._snapshot: Optional[ConceptSnapshot] = None
        self._gate = asyncio.Lock()
        # Bumped by invalidate() so an in-flight load never republishes data
        # that was invalidated while it was being read.
        self._generation = 0

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def dimension(self) -> Optional[int]:
        """Embedding length of the published snapshot, if any."""
        snapshot = self._snapshot
        if not snapshot:
            return None
        return snapshot[0].dimension

    async def get_concepts(self) -> ConceptSnapshot:
        """
        Get the canonical concepts for this kind, loading them on first demand.

        Returns:
            Immutable tuple of CanonicalConcept ordered by id. The same tuple
            object is returned to every caller until invalidate() is called.

        Raises:
            Whatever the concept store raises; nothing is published in that case.
        """
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot

        async with self._gate:
            snapshot = self._snapshot
            if snapshot is not None:
                return snapshot

            generation = self._generation
            rows = await self._store.fetch_concepts(self.kind)
            snapshot = self._build_snapshot(rows)

            if generation == self._generation:
                self._snapshot = snapshot
                logger.info(f"Canonical {self.kind.value} cache loaded {len(snapshot)} concepts")
            else:
                logger.info(
                    f"Canonical {self.kind.value} cache invalidated during load; "
                    f"returning {len(snapshot)} concepts without publishing"
                )
            return snapshot

    def invalidate(self) -> None:
        """Drop the published snapshot; the next get_concepts() reloads."""
        self._generation += 1
        self._snapshot = None
        logger.info(f"Canonical {self.kind.value} cache invalidated")

    def _build_snapshot(self, rows: list[ConceptRow]) -> ConceptSnapshot:
        parsed: list[tuple[ConceptRow, np.ndarray]] = []
        for row in sorted(rows, key=lambda r: r.id):
            try:
                vector = ConceptEmbeddingEngine.parse(row.embedding_json)
            except ValueError as exc:
                logger.warning(
                    "Skipping canonical %s id=%s name=%r: %s",
                    self.kind.value, row.id, row.name, exc,
                )
                continue
            parsed.append((row, vector))

        if not parsed:
            return ()

        # The dominant length wins; ties go to the lowest id.
        dimension = Counter(vector.shape[0] for _, vector in parsed).most_common(1)[0][0]

        concepts: list[CanonicalConcept] = []
        for row, vector in parsed:
            if vector.shape[0] != dimension:
                logger.warning(
                    "Skipping canonical %s id=%s name=%r: embedding has %d dimensions, expected %d",
                    self.kind.value, row.id, row.name, vector.shape[0], dimension,
                )
                continue
            concepts.append(
                CanonicalConcept(
                    id=row.id,
                    name=row.name,
                    description=row.description,
                    embedding=vector,
                )
            )
        return tuple(concepts)


class CanonicalTagEmbeddingCache(CanonicalEmbeddingCache):
    """Process-wide cache of canonical tag embeddings."""

    def __init__(self, store: ConceptStoreReader):
        super().__init__(ConceptKind.TAG, store)


class CanonicalThemeEmbeddingCache(CanonicalEmbeddingCache):
    """Process-wide cache of canonical theme embeddings."""

    def __init__(self, store: ConceptStoreReader):
        super().__init__(ConceptKind.THEME, store)
