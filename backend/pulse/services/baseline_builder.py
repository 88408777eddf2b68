"""
Baseline statistics for judging whether new activity is unusual.

Built once per pulse-generation run from an in-memory window of historical
records and a reference "now". Every accessor is a pure lookup into maps
precomputed at construction; missing keys read as 0 / 0.0, so "no data" and
"zero occurrences" look the same to callers.
"""
from __future__ import annotations

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from ..config import settings
from ..domain.pulse.models import (
    ActivityRecord,
    Sentiment,
    SourceType,
    is_content_source,
    is_review_source,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BaselineWindows:
    """Window sizes (days) precomputed by the builder."""

    review_days: int = 30
    theme_days: tuple[int, ...] = (14, 90)
    channel_days: int = 30
    negative_days: int = 30

    @classmethod
    def from_settings(cls) -> "BaselineWindows":
        return cls(
            review_days=settings.baseline_review_window_days,
            theme_days=tuple(settings.baseline_theme_windows_list),
            channel_days=settings.baseline_channel_window_days,
            negative_days=settings.baseline_negative_window_days,
        )


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BaselineBuilder:
    """
    Per-company comparison counters over a window of historical records.

    Keys:
    - (company_id, days) -> review count
    - (company_id, theme, days) -> content posts mentioning the theme
    - (company_id, channel, days) -> share of content posts on the channel
    - (company_id, theme, days) -> negative-sentiment records with the theme

    Read-only after construction; safe for concurrent reads.
    """

    def __init__(
        self,
        records: Iterable[ActivityRecord],
        now_utc: datetime,
        windows: Optional[BaselineWindows] = None,
    ):
        self.now_utc = as_utc(now_utc)
        self.windows = windows or BaselineWindows.from_settings()

        records = list(records)  # materialize once
        self._companies = frozenset(record.company_id for record in records)

        self._reviews: dict[tuple[int, int], int] = self._count_reviews(records)
        self._theme_posts: dict[tuple[int, str, int], int] = self._count_theme_posts(records)
        self._channel_share: dict[tuple[int, SourceType, int], float] = self._compute_channel_shares(records)
        self._negative_themes: dict[tuple[int, str, int], int] = self._count_negative_themes(records)

        logger.debug(
            f"Baselines built from {len(records)} records for {len(self._companies)} companies "
            f"(reviews={len(self._reviews)} theme_posts={len(self._theme_posts)} "
            f"channel_share={len(self._channel_share)} negative_themes={len(self._negative_themes)})"
        )

    # ------------------------------------------------------------------
    # Construction passes
    # ------------------------------------------------------------------

    def _within(self, record: ActivityRecord, days: int) -> bool:
        if record.date is None:
            return False
        return as_utc(record.date) >= self.now_utc - timedelta(days=days)

    def _count_reviews(self, records: list[ActivityRecord]) -> dict[tuple[int, int], int]:
        days = self.windows.review_days
        counts: Counter = Counter()
        for record in records:
            # Every dated review counts; the window only names the key.
            if is_review_source(record.source_type) and record.date is not None:
                counts[(record.company_id, days)] += 1
        return dict(counts)

    def _count_theme_posts(self, records: list[ActivityRecord]) -> dict[tuple[int, str, int], int]:
        counts: Counter = Counter()
        for window in self.windows.theme_days:
            for record in records:
                if not is_content_source(record.source_type) or not self._within(record, window):
                    continue
                for theme in record.distinct_themes():
                    counts[(record.company_id, theme, window)] += 1
        return dict(counts)

    def _compute_channel_shares(
        self, records: list[ActivityRecord]
    ) -> dict[tuple[int, SourceType, int], float]:
        days = self.windows.channel_days

        # Pass 1: raw per-channel counts
        channel_counts: Counter = Counter()
        for record in records:
            if not is_content_source(record.source_type) or not self._within(record, days):
                continue
            channel_counts[(record.company_id, record.source_type, days)] += 1

        # Pass 2: normalize by the per-company total
        totals: defaultdict[tuple[int, int], int] = defaultdict(int)
        for (company_id, _channel, window), count in channel_counts.items():
            totals[(company_id, window)] += count

        shares: dict[tuple[int, SourceType, int], float] = {}
        for (company_id, channel, window), count in channel_counts.items():
            total = totals[(company_id, window)]
            shares[(company_id, channel, window)] = count / total if total > 0 else 0.0
        return shares

    def _count_negative_themes(self, records: list[ActivityRecord]) -> dict[tuple[int, str, int], int]:
        days = self.windows.negative_days
        counts: Counter = Counter()
        for record in records:
            if record.sentiment != Sentiment.NEGATIVE or not self._within(record, days):
                continue
            for theme in record.distinct_themes():
                counts[(record.company_id, theme, days)] += 1
        return dict(counts)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def companies(self) -> frozenset[int]:
        return self._companies

    def reviews_in_last_days(self, company_id: int, days: int) -> int:
        """Dated review-source records, stored under the configured review window; other windows read 0."""
        return self._reviews.get((company_id, days), 0)

    def theme_posts(self, company_id: int, theme: str, days: int) -> int:
        """Content-source records mentioning *theme* within one of the theme windows."""
        return self._theme_posts.get((company_id, (theme or "").strip(), days), 0)

    def channel_share(self, company_id: int, channel: SourceType, days: int) -> float:
        """Fraction of the company's content records on *channel* in the channel window."""
        return self._channel_share.get((company_id, channel, days), 0.0)

    def negative_theme_count(self, company_id: int, theme: str, days: Optional[int] = None) -> int:
        """Negative-sentiment records mentioning *theme*; defaults to the 30-day window."""
        if days is None:
            days = self.windows.negative_days
        return self._negative_themes.get((company_id, (theme or "").strip(), days), 0)

    def theme_surge_ratio(self, company_id: int, theme: str) -> float:
        """
        Daily mention rate in the shortest theme window over the rate in the longest.

        1.0 means the theme is running at its usual pace; 0.0 when the theme
        has no history.
        """
        if not self.windows.theme_days:
            return 0.0
        short_days = min(self.windows.theme_days)
        long_days = max(self.windows.theme_days)
        long_posts = self.theme_posts(company_id, theme, long_days)
        if long_posts == 0:
            return 0.0
        short_rate = self.theme_posts(company_id, theme, short_days) / short_days
        long_rate = long_posts / long_days
        return short_rate / long_rate
