"""Domain models for baseline statistics and pulse point assembly.

Pure value objects and enums, independent of any infrastructure.
All dataclasses use frozen=True for immutability.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class SourceType(str, Enum):
    """Channel an activity record was collected from."""

    FACEBOOK = "facebook"
    PINTEREST = "pinterest"
    X = "x"
    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"
    YOUTUBE = "youtube"
    LINKEDIN = "linkedin"
    BLOG = "blog"
    EMAIL_NEWSLETTERS = "email_newsletters"
    G2 = "g2"
    CAPTERRA = "capterra"
    TRUSTRADIUS = "trustradius"
    GETAPP = "getapp"
    SOFTWARE_ADVICE = "software_advice"
    GARTNER_PEER_INSIGHTS = "gartner_peer_insights"
    REDDIT = "reddit"
    NEWS = "news"
    FACEBOOK_REVIEWS = "facebook_reviews"
    COMPANY_CONTENT = "company_content"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class PulseTier(str, Enum):
    """Display priority of a pulse point (tier1 is the most urgent)."""

    TIER1 = "tier1"
    TIER2 = "tier2"
    TIER3 = "tier3"


class PulseBucket(str, Enum):
    """Presentation bucket of a pulse point."""

    CUSTOMER_VOICE = "customer_voice"
    MARKETING = "marketing"
    PRODUCT = "product"


REVIEW_SOURCES = frozenset({
    SourceType.G2,
    SourceType.CAPTERRA,
    SourceType.TRUSTRADIUS,
    SourceType.GETAPP,
    SourceType.SOFTWARE_ADVICE,
    SourceType.GARTNER_PEER_INSIGHTS,
    SourceType.FACEBOOK_REVIEWS,
})


def is_review_source(source_type: SourceType | None) -> bool:
    return source_type in REVIEW_SOURCES


def is_content_source(source_type: SourceType | None) -> bool:
    """Every known channel that is not a review site counts as content."""
    return source_type is not None and source_type not in REVIEW_SOURCES


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ActivityRecord:
    """One summarized piece of activity about a company."""

    company_id: int
    date: datetime | None = None
    source_type: SourceType | None = None
    sentiment: Sentiment | None = None
    theme_labels: tuple[str, ...] = ()
    tag_labels: tuple[str, ...] = ()
    id: int | None = None
    company_name: str | None = None
    title: str | None = None
    gist: str | None = None
    url: str | None = None
    raw_content_id: int | None = None

    def distinct_themes(self) -> list[str]:
        """Non-blank theme labels, stripped, first occurrence order."""
        labels = (label.strip() for label in self.theme_labels if label and label.strip())
        return list(dict.fromkeys(labels))


@dataclass(frozen=True)
class PulseClassification:
    """Tier/bucket decision handed back by the rules layer."""

    tier: PulseTier
    bucket: PulseBucket
    chip_slug: str


@dataclass(frozen=True)
class PulsePoint:
    """Candidate signal after classification, ready for presentation/storage."""

    company_id: int
    company_name: str
    bucket: PulseBucket
    chip_slug: str
    tier: PulseTier
    title: str
    url: str
    seen_at: datetime
    context: dict[str, Any] = field(default_factory=dict)
    raw_content_id: int | None = None
    summarized_info_id: int | None = None
    source_key: str | None = None
