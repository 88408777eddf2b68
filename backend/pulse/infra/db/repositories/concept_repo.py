"""SQLAlchemy readers for the canonical vocabulary and signal-type catalog."""

from __future__ import annotations

import asyncio

from sqlalchemy import and_
from sqlalchemy.orm import sessionmaker

from pulse.domain.concepts.models import ConceptKind, ConceptRow, SignalTypeOption
from pulse.domain.concepts.ports import ConceptStoreReader, SignalTypeStore
from pulse.models.concept import CanonicalTag, CanonicalTheme, SignalType

_CONCEPT_MODELS = {
    ConceptKind.TAG: CanonicalTag,
    ConceptKind.THEME: CanonicalTheme,
}


class SqlConceptStoreReader(ConceptStoreReader):
    """Read canonical_tags / canonical_themes rows that carry an embedding.

    Each call opens its own session and runs the blocking query in a worker
    thread.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    async def fetch_concepts(self, kind: ConceptKind) -> list[ConceptRow]:
        return await asyncio.to_thread(self._load, kind)

    def _load(self, kind: ConceptKind) -> list[ConceptRow]:
        model = _CONCEPT_MODELS[kind]
        session = self._session_factory()
        try:
            rows = (
                session.query(model.id, model.name, model.description, model.embedding_json)
                .filter(and_(model.embedding_json.isnot(None), model.embedding_json != ""))
                .order_by(model.id)
                .all()
            )
            return [
                ConceptRow(
                    id=row.id,
                    name=row.name,
                    description=row.description,
                    embedding_json=row.embedding_json,
                )
                for row in rows
            ]
        finally:
            session.close()


class SqlSignalTypeRepository(SignalTypeStore):
    """Read the LLM-eligible subset of signal_types."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    async def fetch_allowed(self) -> list[SignalTypeOption]:
        return await asyncio.to_thread(self._load_allowed)

    def _load_allowed(self) -> list[SignalTypeOption]:
        session = self._session_factory()
        try:
            rows = (
                session.query(SignalType.id, SignalType.name, SignalType.description)
                .filter(SignalType.allowed_in_llm.is_(True))
                .order_by(SignalType.id)
                .all()
            )
            return [
                SignalTypeOption(id=row.id, name=row.name, description=row.description)
                for row in rows
            ]
        finally:
            session.close()
