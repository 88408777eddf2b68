"""Value objects for canonical concept caching and normalization."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


class ConceptKind(str, Enum):
    """Vocabulary a canonical concept belongs to."""

    TAG = "tag"
    THEME = "theme"


class MatchMethod(str, Enum):
    """How a raw label was resolved."""

    EXACT_NAME = "exact_name"
    EMBEDDING = "embedding"
    NEW_CANONICAL = "new_canonical"


@dataclass(frozen=True)
class ConceptRow:
    """Raw persisted concept as returned by the concept store reader."""

    id: int
    name: str
    description: str | None = None
    embedding_json: str | None = None


@dataclass(frozen=True, eq=False)
class CanonicalConcept:
    """Canonical tag or theme with a parsed, read-only embedding vector.

    Equality is identity: two loads of the same row are different snapshot
    members.
    """

    id: int
    name: str
    description: str | None
    embedding: np.ndarray

    @property
    def dimension(self) -> int:
        return int(self.embedding.shape[0])


@dataclass(frozen=True)
class NormalizationResult:
    """Outcome of resolving one raw label against the canonical vocabulary."""

    raw_label: str
    resolved_concept: CanonicalConcept | None
    confidence_score: float
    is_new_canonical: bool
    method: MatchMethod
    sentiment: str = ""
    best_similarity: float | None = None
    best_concept_id: int | None = None

    def __post_init__(self) -> None:
        if self.is_new_canonical != (self.resolved_concept is None):
            raise ValueError("is_new_canonical must be True exactly when resolved_concept is None")
        if not 0.0 <= self.confidence_score <= 1.0:
            raise ValueError(f"confidence_score out of range: {self.confidence_score}")

    @property
    def concept_id(self) -> int | None:
        return self.resolved_concept.id if self.resolved_concept is not None else None


@dataclass(frozen=True)
class SignalTypeOption:
    """Signal type permitted as a classification output."""

    id: int
    name: str
    description: str | None = None
