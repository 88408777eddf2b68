"""Ports for the pulse domain."""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from .models import ActivityRecord, PulseClassification


class PulseRules(Protocol):
    """External rules table that assigns tier/bucket to a candidate.

    Returning ``None`` drops the candidate.
    """

    def classify(
        self,
        record: ActivityRecord,
        context: Mapping[str, Any],
    ) -> PulseClassification | None:
        ...
