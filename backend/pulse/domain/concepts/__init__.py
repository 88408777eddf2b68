"""Domain models for canonical concepts and their normalization."""

from .errors import EmbeddingDimensionMismatchError
from .models import (
    CanonicalConcept,
    ConceptKind,
    ConceptRow,
    MatchMethod,
    NormalizationResult,
    SignalTypeOption,
)
from .ports import ConceptStoreReader, SignalTypeStore

__all__ = [
    "CanonicalConcept",
    "ConceptKind",
    "ConceptRow",
    "ConceptStoreReader",
    "EmbeddingDimensionMismatchError",
    "MatchMethod",
    "NormalizationResult",
    "SignalTypeOption",
    "SignalTypeStore",
]
