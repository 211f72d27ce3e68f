"""RTP trends over day, week, month or year periods."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from math import ceil

import numpy as np

from rtp_engine.rtp import calculate_rtp
from rtp_engine.schema import Tier, User

logger = logging.getLogger(__name__)

SCALES = ("day", "week", "month", "year")


def _week_number(value: datetime) -> int:
    first_day = value.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    days_elapsed = (value - first_day).total_seconds() / 86400.0
    first_weekday = (first_day.weekday() + 1) % 7  # Sunday = 0
    return ceil((days_elapsed + first_weekday + 1) / 7)


def period_key(value: datetime, scale: str) -> str:
    """Sortable period label for a timestamp."""

    if scale == "day":
        return value.strftime("%Y-%m-%d")
    if scale == "week":
        return f"{value.year}-W{_week_number(value):02d}"
    if scale == "month":
        return value.strftime("%Y-%m")
    if scale == "year":
        return str(value.year)
    raise ValueError(f"Unknown trend scale '{scale}', expected one of {SCALES}")


def productivity_trends(user: User, now: datetime, scale: str = "month") -> list[dict]:
    """Group tasks by start period and compute overall and per-tier RTP for each."""

    groups: dict[str, list] = defaultdict(list)
    for task in user.tasks:
        if task.start is None:
            continue
        groups[period_key(task.start, scale)].append(task)

    rows = []
    for key in sorted(groups):
        # Preferences carry over to each period.
        period_user = User(name=user.name, tasks=groups[key], preferences=user.preferences)
        overall = calculate_rtp(period_user, now)
        tier_results = [calculate_rtp(period_user, now, filter_tier=tier) for tier in Tier]

        percentages = np.array([result["percentage"] for result in tier_results], dtype=float)
        scores = np.array([result["score"] for result in tier_results], dtype=int)

        row = {
            "period": key,
            "all": overall["percentage"],
            "all_score": overall["score"],
            "aggregate": float(percentages.mean()),
            "aggregate_score": int(scores.sum()),
        }
        for tier, result in zip(Tier, tier_results):
            row[tier.value] = result["percentage"]
            row[f"{tier.value}_score"] = result["score"]
        rows.append(row)

    logger.debug("Trends for %s at %s scale: %d periods", user.name, scale, len(rows))
    return rows
