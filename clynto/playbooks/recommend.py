"""Rank playbooks for an account waiting for assignment."""

from __future__ import annotations

from typing import List

from ..journey import stage_category
from ..models import AwaitingAccount
from ..utils.formatting import format_currency
from .library import PlaybookLibrary
from .models import PlaybookRecommendation, PlaybookTemplate

STAGE_WEIGHT = 40
SEGMENT_WEIGHT = 30
ARR_WEIGHT = 20
SUCCESS_WEIGHT = 10


def score_playbook(
    account: AwaitingAccount, template: PlaybookTemplate
) -> PlaybookRecommendation:
    score = 0
    reasons = []
    try:
        wanted = stage_category(account.suggested_stage)
    except ValueError:
        wanted = None
    if template.category is wanted:
        score += STAGE_WEIGHT
        reasons.append(f"Lifecycle stage match: {account.suggested_stage}")
    if account.segment in template.segments:
        score += SEGMENT_WEIGHT
        reasons.append(f"{account.segment} segment match")
    if account.arr >= template.min_arr:
        score += ARR_WEIGHT
        if template.min_arr:
            reasons.append(f"ARR above {format_currency(template.min_arr)} threshold")
    if template.success_rate is not None:
        score += round(SUCCESS_WEIGHT * template.success_rate / 100)
    return PlaybookRecommendation(
        playbook_id=template.id,
        name=template.name,
        match_score=min(score, 100),
        reasons=reasons or ["General purpose workflow"],
        phases=len(template.phases),
        avg_duration=template.avg_duration,
    )


def recommend_playbooks(
    account: AwaitingAccount, library: PlaybookLibrary, limit: int = 3
) -> List[PlaybookRecommendation]:
    """Return the best matching playbooks, highest score first.

    Ties keep library order. The first entry is flagged as recommended.
    """
    ranked = sorted(
        (score_playbook(account, t) for t in library.list()),
        key=lambda r: r.match_score,
        reverse=True,
    )[:limit]
    if ranked:
        ranked[0].is_recommended = True
    return ranked
