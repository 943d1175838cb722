"""Funnel stage normalization and the funnel summary with coaching copy.

Application records were migrated from a ``status`` enum to a ``stage`` enum
without backfilling, so both fields are consulted and ``stage`` wins whenever
it is set. Rejected, withdrawn and archived applications are excluded from
funnel counts.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Union

from .models import (
    EXCLUDED,
    FUNNEL_STAGES,
    Application,
    CoachingCopy,
    FunnelStage,
    FunnelSummary,
    StageSummary,
)

_STAGE_ALIASES: dict[str, FunnelStage] = {
    "Prospect": "saved",
    "saved": "saved",
    "Applied": "applied",
    "applied": "applied",
    "Interview": "interview",
    "interview": "interview",
    "Offer": "offer",
    "Accepted": "offer",
    "offer": "offer",
}

DEFAULT_SAMPLE_SIZE = 3


def normalize_stage(
    stage: Optional[str] = None, status: Optional[str] = None
) -> Union[FunnelStage, str]:
    """Map a stage/status pair to a funnel stage or ``"excluded"``."""

    raw = stage or status
    if not raw:
        return EXCLUDED
    return _STAGE_ALIASES.get(raw, EXCLUDED)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def coaching_copy(counts: Mapping[str, int]) -> CoachingCopy:
    """Pick the next-best-action suggestion for a set of stage counts.

    Exactly one branch applies for any counts; an offer outranks everything
    except the empty-funnel case.
    """
    saved = counts.get("saved", 0)
    applied = counts.get("applied", 0)
    interview = counts.get("interview", 0)
    offer = counts.get("offer", 0)

    if saved == 0 and applied == 0 and interview == 0 and offer == 0:
        return CoachingCopy(
            text="Start your job search journey by tracking your first application.",
            cta_text="Add application",
            cta_href="/applications/new",
        )
    if offer > 0:
        return CoachingCopy(
            text=f"Congratulations! You have {_plural(offer, 'offer')}. Review and make your decision.",
            cta_text="View offers",
            cta_href="/applications?stage=Offer",
        )
    if interview > 0:
        return CoachingCopy(
            text=f"You have {_plural(interview, 'active interview')}. Prepare and follow up.",
            cta_text="View interviews",
            cta_href="/applications?stage=Interview",
        )
    if saved > 0 and applied < 3:
        return CoachingCopy(
            text=(
                f"You have {_plural(saved, 'saved role')} you haven't applied to yet. "
                "Move one forward today."
            ),
            cta_text="View saved roles",
            cta_href="/applications?stage=Prospect",
        )
    if applied > 0 and interview == 0:
        return CoachingCopy(
            text=f"You have {_plural(applied, 'active application')}. Follow up on one today.",
            cta_text="View applications",
            cta_href="/applications?stage=Applied",
        )
    return CoachingCopy(
        text="Keep the momentum going. Add more applications to increase your chances.",
        cta_text="Add application",
        cta_href="/applications/new",
    )


def summarize_funnel(
    applications: Iterable[Application], sample_size: int = DEFAULT_SAMPLE_SIZE
) -> FunnelSummary:
    """Count applications per funnel stage and keep recent samples per stage."""

    grouped: dict[str, list[Application]] = {stage: [] for stage in FUNNEL_STAGES}
    for application in applications:
        stage = normalize_stage(application.stage, application.status)
        if stage == EXCLUDED:
            continue
        grouped[stage].append(application)

    stages = [
        StageSummary(
            stage=stage,
            count=len(grouped[stage]),
            samples=sorted(
                grouped[stage], key=lambda app: (-app.updated_at, app.id)
            )[: max(0, sample_size)],
        )
        for stage in FUNNEL_STAGES
    ]
    counts = {summary.stage: summary.count for summary in stages}
    return FunnelSummary(stages=stages, coaching=coaching_copy(counts))


__all__ = ["coaching_copy", "normalize_stage", "summarize_funnel"]
