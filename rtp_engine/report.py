"""Combined per-user report for dashboards and the command-line script."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Optional

from rtp_engine.breakdown import task_breakdown
from rtp_engine.rtp import calculate_rtp, daily_rtp, rtp_by_tier
from rtp_engine.schema import Tier, User
from rtp_engine.trends import productivity_trends
from rtp_engine.workload import calculate_workload_metrics


def build_report(user: User, now: datetime, filter_tier: Optional[Tier] = None, scale: str = "month") -> dict:
    """Collect every engine output for one user into a JSON-friendly dict."""

    breakdown = task_breakdown(user)
    return {
        "user": user.name,
        "as_of": now.isoformat(),
        "filter": filter_tier.value if filter_tier is not None else "ALL",
        "rtp": calculate_rtp(user, now, filter_tier=filter_tier),
        "rtp_by_tier": rtp_by_tier(user, now),
        "today": daily_rtp(user, now, filter_tier=filter_tier),
        "workload": asdict(calculate_workload_metrics(user, now)),
        "breakdown": {tier.value: counts for tier, counts in breakdown.items()},
        "trends": productivity_trends(user, now, scale=scale),
    }
