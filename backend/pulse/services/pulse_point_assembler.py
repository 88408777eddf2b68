"""Assemble classified pulse points from candidate records and baselines."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from ..config import settings
from ..domain.concepts.models import NormalizationResult
from ..domain.pulse.models import (
    ActivityRecord,
    PulsePoint,
    PulseTier,
    is_content_source,
)
from ..domain.pulse.ports import PulseRules
from .baseline_builder import BaselineBuilder, as_utc

logger = logging.getLogger(__name__)

_TIER_SCORES = {
    PulseTier.TIER1: 3,
    PulseTier.TIER2: 2,
    PulseTier.TIER3: 1,
}


def tier_score(tier: Optional[PulseTier]) -> int:
    return _TIER_SCORES.get(tier, 0)


def trim_title(text: str, max_chars: int) -> str:
    if not text or len(text) <= max_chars:
        return text
    return text[:max_chars].rstrip() + "…"


def _label_for(result: NormalizationResult) -> str:
    if result.resolved_concept is not None:
        return result.resolved_concept.name
    return result.raw_label.strip()


@dataclass(frozen=True)
class PulseCandidate:
    """One record plus the normalizer output for its themes and tags."""

    record: ActivityRecord
    themes: tuple[NormalizationResult, ...] = ()
    tags: tuple[NormalizationResult, ...] = ()


class PulsePointAssembler:
    """
    Turn candidates into PulsePoints.

    Baseline counts/shares are exposed as named context entries; the rules
    collaborator thresholds on them and hands back the tier/bucket.
    """

    def __init__(self, rules: PulseRules, title_max_chars: Optional[int] = None):
        self._rules = rules
        self.title_max_chars = title_max_chars or settings.pulse_title_max_chars

    def build_context(self, candidate: PulseCandidate, baselines: BaselineBuilder) -> dict[str, Any]:
        record = candidate.record
        company_id = record.company_id
        windows = baselines.windows

        if candidate.themes:
            themes = list(dict.fromkeys(_label_for(result) for result in candidate.themes))
            new_themes = [_label_for(result) for result in candidate.themes if result.is_new_canonical]
        else:
            themes = record.distinct_themes()
            new_themes = []
        tags = list(dict.fromkeys(_label_for(result) for result in candidate.tags))
        # Resolved concepts only; new canonical labels carry no id.
        theme_ids = list(dict.fromkeys(r.concept_id for r in candidate.themes if r.concept_id is not None))
        tag_ids = list(dict.fromkeys(r.concept_id for r in candidate.tags if r.concept_id is not None))
        top_theme = max(themes, key=len) if themes else None

        context: dict[str, Any] = {
            "source": record.source_type.value if record.source_type else None,
            "sentiment": record.sentiment.value if record.sentiment else None,
            "themes": themes,
            "tags": tags,
            "theme_ids": theme_ids,
            "tag_ids": tag_ids,
            "new_themes": new_themes,
            "top_theme": top_theme,
            "is_new_theme": top_theme in new_themes if top_theme else False,
            f"reviews_{windows.review_days}d": baselines.reviews_in_last_days(company_id, windows.review_days),
        }

        for window in windows.theme_days:
            context[f"theme_posts_{window}d"] = (
                baselines.theme_posts(company_id, top_theme, window) if top_theme else 0
            )
        context["theme_surge_ratio"] = (
            baselines.theme_surge_ratio(company_id, top_theme) if top_theme else 0.0
        )
        context[f"negative_theme_count_{windows.negative_days}d"] = (
            baselines.negative_theme_count(company_id, top_theme, windows.negative_days) if top_theme else 0
        )
        context[f"channel_share_{windows.channel_days}d"] = (
            baselines.channel_share(company_id, record.source_type, windows.channel_days)
            if is_content_source(record.source_type)
            else 0.0
        )
        return context

    def assemble(self, candidate: PulseCandidate, baselines: BaselineBuilder) -> Optional[PulsePoint]:
        """
        Classify one candidate.

        Returns:
            PulsePoint, or None when the rules layer drops the candidate
        """
        record = candidate.record
        context = self.build_context(candidate, baselines)

        classification = self._rules.classify(record, context)
        if classification is None:
            logger.debug(f"Rules dropped record id={record.id} company={record.company_id}")
            return None

        title_seed = record.title or record.gist or context["top_theme"] or "Activity update"
        source_key = None
        if record.source_type is not None and record.id is not None:
            source_key = f"{record.source_type.value}:{record.id}"

        return PulsePoint(
            company_id=record.company_id,
            company_name=record.company_name or "Unknown",
            bucket=classification.bucket,
            chip_slug=classification.chip_slug,
            tier=classification.tier,
            title=trim_title(title_seed.strip(), self.title_max_chars),
            url=record.url or "",
            seen_at=as_utc(record.date) if record.date is not None else baselines.now_utc,
            context=context,
            raw_content_id=record.raw_content_id,
            summarized_info_id=record.id,
            source_key=source_key,
        )

    def assemble_many(
        self,
        candidates: Iterable[PulseCandidate],
        baselines: BaselineBuilder,
    ) -> list[PulsePoint]:
        """Assemble every candidate, most urgent tier first, then most recent."""
        points = []
        seen = 0
        for candidate in candidates:
            seen += 1
            point = self.assemble(candidate, baselines)
            if point is not None:
                points.append(point)

        points.sort(key=lambda p: (tier_score(p.tier), p.seen_at), reverse=True)
        logger.info(f"Assembled {len(points)} pulse points from {seen} candidates")
        return points
