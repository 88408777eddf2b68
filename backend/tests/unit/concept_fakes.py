"""Shared test fakes for the concept caches and pulse assembly.

In-memory stand-ins for the store ports plus a controllable clock and a
static rules table.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Mapping, Sequence

from pulse.domain.concepts.models import ConceptKind, ConceptRow, SignalTypeOption
from pulse.domain.concepts.ports import ConceptStoreReader, SignalTypeStore
from pulse.domain.pulse.models import ActivityRecord, PulseClassification


def concept_row(concept_id: int, name: str, embedding: Sequence[float] | None, description: str | None = None) -> ConceptRow:
    payload = None if embedding is None else json.dumps(list(embedding))
    return ConceptRow(id=concept_id, name=name, description=description, embedding_json=payload)


class StoreUnavailableError(RuntimeError):
    """Simulated outage of the backing store."""


# ---------------------------------------------------------------------------
# Fake stores
# ---------------------------------------------------------------------------


class FakeConceptStore(ConceptStoreReader):
    """In-memory concept store that counts reads.

    ``release`` can be cleared to hold every read until the test sets it,
    which lets tests pile up concurrent callers on a cold cache.
    """

    def __init__(self, rows: dict[ConceptKind, list[ConceptRow]] | None = None) -> None:
        self.rows: dict[ConceptKind, list[ConceptRow]] = rows or {}
        self.calls: list[ConceptKind] = []
        self.failures_remaining = 0
        self.release = asyncio.Event()
        self.release.set()
        self.started = asyncio.Event()

    async def fetch_concepts(self, kind: ConceptKind) -> list[ConceptRow]:
        self.calls.append(kind)
        self.started.set()
        await self.release.wait()
        if self.failures_remaining > 0:
            self.failures_remaining -= 1
            raise StoreUnavailableError("concept store unavailable")
        return list(self.rows.get(kind, []))


class FakeSignalTypeStore(SignalTypeStore):
    def __init__(self, options: list[SignalTypeOption] | None = None) -> None:
        self.options = options or []
        self.calls = 0
        self.fail = False

    async def fetch_allowed(self) -> list[SignalTypeOption]:
        self.calls += 1
        if self.fail:
            raise StoreUnavailableError("signal type store unavailable")
        return list(self.options)


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


class StaticRules:
    """Rules table that returns the same classification (or None) and records inputs."""

    def __init__(self, classification: PulseClassification | None) -> None:
        self.classification = classification
        self.seen: list[tuple[ActivityRecord, dict[str, Any]]] = []

    def classify(self, record: ActivityRecord, context: Mapping[str, Any]) -> PulseClassification | None:
        self.seen.append((record, dict(context)))
        return self.classification
