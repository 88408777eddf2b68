"""Shared embedding primitives for canonical tag/theme matching."""
from __future__ import annotations

import json
from typing import Sequence

import numpy as np

from ..domain.concepts.models import ConceptKind


class ConceptEmbeddingEngine:
    """Vector math + embedding JSON helpers.

    Embeddings are produced upstream and persisted as JSON float arrays;
    this class only parses and compares them.
    """

    @staticmethod
    def cosine_similarities(vector: np.ndarray, matrix: np.ndarray) -> np.ndarray:
        """Cosine similarity of *vector* against every row of *matrix*."""
        vector_norm = np.linalg.norm(vector)
        row_norms = np.linalg.norm(matrix, axis=1)
        denom = row_norms * vector_norm
        dots = matrix @ vector
        with np.errstate(divide="ignore", invalid="ignore"):
            scores = np.where(denom == 0, 0.0, dots / np.where(denom == 0, 1.0, denom))
        return scores.astype(np.float64)

    @staticmethod
    def parse(payload: str | None) -> np.ndarray:
        """Parse an embedding JSON payload into a read-only float vector.

        Raises:
            ValueError: payload is missing, not a flat numeric array, empty,
                or contains non-finite values.
        """
        if payload is None or not payload.strip():
            raise ValueError("embedding payload is empty")
        try:
            decoded = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise ValueError(f"embedding payload is not JSON: {exc.msg}") from exc
        return ConceptEmbeddingEngine.as_vector(decoded)

    @staticmethod
    def as_vector(values: Sequence[float] | np.ndarray) -> np.ndarray:
        """Validate and freeze a raw numeric sequence as a 1-D float vector."""
        if isinstance(values, (str, bytes)) or not hasattr(values, "__len__"):
            raise ValueError("embedding must be an array of numbers")
        if not isinstance(values, np.ndarray) and any(isinstance(v, bool) for v in values):
            raise ValueError("embedding must be an array of numbers")
        try:
            vector = np.array(values, dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise ValueError("embedding must be an array of numbers") from exc
        if vector.ndim != 1:
            raise ValueError("embedding must be a flat array")
        if vector.size == 0:
            raise ValueError("embedding is empty")
        if not np.all(np.isfinite(vector)):
            raise ValueError("embedding contains non-finite values")
        vector.flags.writeable = False
        return vector

    @staticmethod
    def build_embedding_text(name: str, reason: str | None, kind: ConceptKind) -> str:
        """Text the upstream embedding call should encode for a label."""
        label = (name or "").strip().lower().replace("_", " ")
        meaning = (reason or "").strip()
        if not meaning:
            return f"Product feedback {kind.value}: {label}"
        return f"Product feedback {kind.value}: {label}. Meaning: {meaning}"
