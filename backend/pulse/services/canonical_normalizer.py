"""Resolve raw AI-extracted labels onto the canonical tag/theme vocabulary."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from ..config import settings
from ..domain.concepts.errors import EmbeddingDimensionMismatchError
from ..domain.concepts.models import (
    CanonicalConcept,
    ConceptKind,
    MatchMethod,
    NormalizationResult,
)
from .canonical_embedding_cache import CanonicalEmbeddingCache, ConceptSnapshot
from .concept_embedding import ConceptEmbeddingEngine

logger = logging.getLogger(__name__)

NO_MATCH_CONFIDENCE = 1.0


class CanonicalNormalizer:
    """
    Match a raw label + embedding against the cached canonical concepts.

    Read-only relative to the caches: a non-match is reported as
    ``is_new_canonical=True`` and minting the new concept is left to the caller.
    """

    def __init__(
        self,
        caches: Sequence[CanonicalEmbeddingCache],
        *,
        thresholds: Optional[dict[ConceptKind, float]] = None,
        min_margin: Optional[float] = None,
    ):
        self._caches = {cache.kind: cache for cache in caches}
        self._thresholds = thresholds or {
            kind: settings.match_threshold_for(kind.value) for kind in ConceptKind
        }
        self._min_margin = settings.match_min_margin if min_margin is None else min_margin
        # Stacked embedding matrix per kind, rebuilt whenever the snapshot object changes.
        self._matrices: dict[ConceptKind, tuple[ConceptSnapshot, np.ndarray]] = {}

    def threshold_for(self, kind: ConceptKind) -> float:
        return float(self._thresholds[kind])

    async def normalize(
        self,
        raw_label: str,
        raw_embedding: Sequence[float] | np.ndarray,
        kind: ConceptKind,
    ) -> NormalizationResult:
        """
        Resolve *raw_label* to an existing canonical concept of *kind*.

        Args:
            raw_label: Label as produced by upstream extraction
            raw_embedding: Pre-computed embedding of the label
            kind: Which vocabulary to search

        Returns:
            NormalizationResult; ``is_new_canonical`` is True when no concept
            meets the acceptance threshold.

        Raises:
            ValueError: blank label or empty/non-numeric embedding
            EmbeddingDimensionMismatchError: embedding length differs from
                the cached concepts
        """
        if raw_label is None or not raw_label.strip():
            raise ValueError("raw_label is required")
        cache = self._caches.get(kind)
        if cache is None:
            raise ValueError(f"No embedding cache registered for {kind.value}")

        vector = ConceptEmbeddingEngine.as_vector(raw_embedding)
        cleaned, sentiment = self._clean_label(raw_label, kind)
        if not cleaned:
            raise ValueError("raw_label is required")

        concepts = await cache.get_concepts()
        if not concepts:
            logger.debug(f"No canonical {kind.value}s cached; '{cleaned}' is new")
            return self._new_canonical(raw_label, sentiment)

        expected = concepts[0].dimension
        if vector.shape[0] != expected:
            raise EmbeddingDimensionMismatchError(kind.value, expected, vector.shape[0])

        exact = self._find_exact(concepts, cleaned)
        if exact is not None:
            logger.debug(f"{kind.value} exact match '{cleaned}' -> id={exact.id}")
            return NormalizationResult(
                raw_label=raw_label,
                resolved_concept=exact,
                confidence_score=1.0,
                is_new_canonical=False,
                method=MatchMethod.EXACT_NAME,
                sentiment=sentiment,
                best_similarity=1.0,
                best_concept_id=exact.id,
            )

        scores = ConceptEmbeddingEngine.cosine_similarities(vector, self._matrix_for(kind, concepts))
        # argmax returns the first maximum; the snapshot is ordered by id so
        # ties resolve to the lowest id.
        best_index = int(np.argmax(scores))
        best_score = float(scores[best_index])
        best = concepts[best_index]
        second_score = float(np.max(np.delete(scores, best_index))) if len(scores) > 1 else float("-inf")
        margin = best_score - second_score
        threshold = self.threshold_for(kind)

        logger.debug(
            "%s normalize raw=%r best=%s(%s) score=%.4f second=%.4f margin=%.4f threshold=%.2f",
            kind.value, cleaned, best.name, best.id, best_score, second_score, margin, threshold,
        )

        if best_score >= threshold and margin >= self._min_margin:
            return NormalizationResult(
                raw_label=raw_label,
                resolved_concept=best,
                confidence_score=min(1.0, max(0.0, best_score)),
                is_new_canonical=False,
                method=MatchMethod.EMBEDDING,
                sentiment=sentiment,
                best_similarity=best_score,
                best_concept_id=best.id,
            )

        logger.info(
            f"No confident canonical {kind.value} for '{cleaned}' "
            f"(best id={best.id} score={best_score:.4f})"
        )
        return self._new_canonical(raw_label, sentiment, best_score=best_score, best_id=best.id)

    def _matrix_for(self, kind: ConceptKind, concepts: ConceptSnapshot) -> np.ndarray:
        cached = self._matrices.get(kind)
        if cached is not None and cached[0] is concepts:
            return cached[1]
        matrix = np.vstack([concept.embedding for concept in concepts])
        self._matrices[kind] = (concepts, matrix)
        return matrix

    @staticmethod
    def _clean_label(raw_label: str, kind: ConceptKind) -> tuple[str, str]:
        cleaned = raw_label.strip().lower()
        sentiment = ""
        # Tags carry a trailing +/- sentiment marker ("slow support-").
        if kind == ConceptKind.TAG and cleaned[-1:] in ("+", "-"):
            sentiment = cleaned[-1]
            cleaned = cleaned[:-1].strip()
        return cleaned, sentiment

    @staticmethod
    def _find_exact(concepts: ConceptSnapshot, cleaned: str) -> Optional[CanonicalConcept]:
        for concept in concepts:
            if (concept.name or "").strip().lower() == cleaned:
                return concept
        return None

    @staticmethod
    def _new_canonical(
        raw_label: str,
        sentiment: str,
        *,
        best_score: Optional[float] = None,
        best_id: Optional[int] = None,
    ) -> NormalizationResult:
        return NormalizationResult(
            raw_label=raw_label,
            resolved_concept=None,
            confidence_score=NO_MATCH_CONFIDENCE,
            is_new_canonical=True,
            method=MatchMethod.NEW_CANONICAL,
            sentiment=sentiment,
            best_similarity=best_score,
            best_concept_id=best_id,
        )
