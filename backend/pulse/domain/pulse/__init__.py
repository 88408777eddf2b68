"""Domain models for baselines and pulse points."""

from .models import (
    REVIEW_SOURCES,
    ActivityRecord,
    PulseBucket,
    PulseClassification,
    PulsePoint,
    PulseTier,
    Sentiment,
    SourceType,
    is_content_source,
    is_review_source,
)
from .ports import PulseRules

__all__ = [
    "REVIEW_SOURCES",
    "ActivityRecord",
    "PulseBucket",
    "PulseClassification",
    "PulsePoint",
    "PulseRules",
    "PulseTier",
    "Sentiment",
    "SourceType",
    "is_content_source",
    "is_review_source",
]
