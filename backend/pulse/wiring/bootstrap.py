"""Dependency injection bootstrap: the single place that binds ports to adapters.

The caches are process-wide: construct them once at startup and share them
across every request/job. Factories here return the same instances on every
call.

Example usage::

    from pulse.wiring.bootstrap import get_canonical_normalizer

    result = await get_canonical_normalizer().normalize(label, embedding, ConceptKind.THEME)
"""

from __future__ import annotations

from pulse.database import SessionLocal
from pulse.infra.db.repositories.concept_repo import SqlConceptStoreReader, SqlSignalTypeRepository
from pulse.services.canonical_embedding_cache import (
    CanonicalTagEmbeddingCache,
    CanonicalThemeEmbeddingCache,
)
from pulse.services.canonical_normalizer import CanonicalNormalizer
from pulse.services.signal_type_cache import SignalTypeOptionsCache


# ── Concept caches ───────────────────────────────────────────────────────

_tag_cache: CanonicalTagEmbeddingCache | None = None
_theme_cache: CanonicalThemeEmbeddingCache | None = None


def get_tag_cache() -> CanonicalTagEmbeddingCache:
    """Return the singleton canonical tag embedding cache."""
    global _tag_cache
    if _tag_cache is None:
        _tag_cache = CanonicalTagEmbeddingCache(SqlConceptStoreReader(SessionLocal))
    return _tag_cache


def get_theme_cache() -> CanonicalThemeEmbeddingCache:
    """Return the singleton canonical theme embedding cache."""
    global _theme_cache
    if _theme_cache is None:
        _theme_cache = CanonicalThemeEmbeddingCache(SqlConceptStoreReader(SessionLocal))
    return _theme_cache


# ── Signal types ─────────────────────────────────────────────────────────

_signal_type_cache: SignalTypeOptionsCache | None = None


def get_signal_type_cache() -> SignalTypeOptionsCache:
    """Return the singleton signal-type allow-list cache."""
    global _signal_type_cache
    if _signal_type_cache is None:
        _signal_type_cache = SignalTypeOptionsCache(SqlSignalTypeRepository(SessionLocal))
    return _signal_type_cache


# ── Normalizer ───────────────────────────────────────────────────────────

_normalizer: CanonicalNormalizer | None = None


def get_canonical_normalizer() -> CanonicalNormalizer:
    """Return a CanonicalNormalizer backed by the singleton caches."""
    global _normalizer
    if _normalizer is None:
        _normalizer = CanonicalNormalizer([get_tag_cache(), get_theme_cache()])
    return _normalizer


def reset_singletons() -> None:
    """Forget every singleton (tests and process re-init only)."""
    global _tag_cache, _theme_cache, _signal_type_cache, _normalizer
    _tag_cache = None
    _theme_cache = None
    _signal_type_cache = None
    _normalizer = None
