"""Ports (abstract interfaces) for the canonical concept domain.

These define WHAT the caches need from durable storage without
specifying HOW it's provided.  Concrete implementations live in
``pulse.infra.db.repositories``.
"""

from __future__ import annotations

import abc

from .models import ConceptKind, ConceptRow, SignalTypeOption


class ConceptStoreReader(abc.ABC):
    """Read-only provider of persisted canonical concepts."""

    @abc.abstractmethod
    async def fetch_concepts(self, kind: ConceptKind) -> list[ConceptRow]:
        """Return concept rows of *kind* that carry an embedding payload."""
        ...


class SignalTypeStore(abc.ABC):
    """Read-only provider of the signal-type catalog."""

    @abc.abstractmethod
    async def fetch_allowed(self) -> list[SignalTypeOption]:
        """Return signal types flagged as LLM-eligible, ordered by id."""
        ...
