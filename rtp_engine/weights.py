"""Per-task weighting from priority, urgency, complexity and preferences."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from math import log10
from typing import Optional

from rtp_engine.schema import Task, Tier, User, WeightPreferences, WorkloadMetrics
from rtp_engine.workload import calculate_workload_metrics

logger = logging.getLogger(__name__)

BASE_TIER_WEIGHTS = {
    Tier.LOW: 2,
    Tier.MID: 5,
    Tier.HIGH: 8,
}
DEFAULT_TIER_WEIGHT = 5

URGENCY_SLOPE = 0.5
OVERDUE_CAP = 3.0
SUBTASK_COMPLEXITY_STEP = 0.1
SUBTASK_COMPLEXITY_LIMIT = 10
COLLABORATOR_COMPLEXITY_STEP = 0.1
COLLABORATOR_COMPLEXITY_LIMIT = 5
PRODUCTIVE_HOUR_BOOST = 1.1
OVERLOAD_EXPONENT = 1.2

_ONE_DAY = timedelta(days=1)


def base_priority_weight(priority: Optional[int] = None, tier: Optional[Tier] = None) -> float:
    """Return the explicit 1-10 priority, else the fixed weight for the tier."""

    if priority:
        return priority
    if tier is None:
        return DEFAULT_TIER_WEIGHT
    return BASE_TIER_WEIGHTS.get(tier, DEFAULT_TIER_WEIGHT)


def urgency_factor(task: Task, now: datetime) -> float:
    """Deadline pressure relative to the task's own duration.

    Rises from 1 at the start of the task toward ``1 + 0.5 * duration_factor``
    at the deadline, where ``duration_factor = max(1, log10(duration_days))``.
    Tasks that have not started yet stay at 1.
    Overdue tasks grow with the overdue share of the duration, capped at 3.
    """

    if task.start is None or task.end is None:
        return 1.0

    remaining = task.end - now
    total = task.end - task.start

    if remaining > timedelta(0) and total > timedelta(0):
        duration_factor = max(1.0, log10(total / _ONE_DAY))
        proportion_remaining = min(1.0, remaining / total)
        return 1 + (1 - proportion_remaining) * URGENCY_SLOPE * duration_factor

    if remaining < timedelta(0):
        denominator = total if total > timedelta(0) else _ONE_DAY
        return min(OVERDUE_CAP, 1 + abs(remaining) / denominator)

    return 1.0


def complexity_factor(task: Task) -> float:
    factor = 1.0
    if task.subtasks:
        factor += SUBTASK_COMPLEXITY_STEP * min(SUBTASK_COMPLEXITY_LIMIT, len(task.subtasks))
    if task.collaborators:
        factor += COLLABORATOR_COMPLEXITY_STEP * min(COLLABORATOR_COMPLEXITY_LIMIT, len(task.collaborators))
    return factor


def _weight_preferences(user: User) -> WeightPreferences:
    if user.preferences is not None and user.preferences.weight_preferences is not None:
        return user.preferences.weight_preferences
    return WeightPreferences()


def in_productive_hours(user: User, now: datetime) -> bool:
    if user.preferences is None:
        return False
    return any(window.contains(now.hour) for window in user.preferences.productive_hours)


def dynamic_weight(
    task: Task,
    user: User,
    now: datetime,
    workload: Optional[WorkloadMetrics] = None,
) -> float:
    """Blend priority, urgency and complexity by the user's preference ratios.

    The blend is a weighted average normalized by the sum of the ratios, so
    they need not total 1. The result is boosted by 10% inside a productive
    hour window, then raised to the power 1.2 when the user declares a
    capacity and is over it. Pass ``workload`` to reuse metrics already
    computed for ``user`` at ``now``.
    """

    base = base_priority_weight(task.priority, task.type)
    prefs = _weight_preferences(user)

    priority_term = base
    urgency_term = base * urgency_factor(task, now)
    complexity_term = base * complexity_factor(task)

    total_preference = prefs.priority + prefs.deadline + prefs.complexity
    if total_preference <= 0:
        weight = float(base)
    else:
        weight = (
            priority_term * prefs.priority + urgency_term * prefs.deadline + complexity_term * prefs.complexity
        ) / total_preference

    if in_productive_hours(user, now):
        weight *= PRODUCTIVE_HOUR_BOOST

    if user.preferences is not None and user.preferences.workload_capacity:
        if workload is None:
            workload = calculate_workload_metrics(user, now)
        if workload.overload_factor > 1 and weight > 0:
            logger.debug(
                "User %s over capacity (overload %.2f); sharpening weight of %r",
                user.name,
                workload.overload_factor,
                task.name,
            )
            weight = weight**OVERLOAD_EXPONENT

    return weight
