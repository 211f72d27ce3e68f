"""Real-Time Productivity (RTP) score over a user's task set."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from rtp_engine.rounding import round_half_up
from rtp_engine.schema import DateRange, Tier, User
from rtp_engine.subtasks import subtask_contribution
from rtp_engine.weights import dynamic_weight
from rtp_engine.workload import calculate_workload_metrics

logger = logging.getLogger(__name__)


def _empty_result() -> dict:
    return {
        "percentage": 0.0,
        "score": 0,
        "metrics": {
            "estimation_accuracy": 0.0,
            "completion_rate": 0.0,
            "blocked_tasks_percentage": 0.0,
            "average_task_weight": 0.0,
        },
    }


def calculate_rtp(
    user: User,
    now: datetime,
    filter_tier: Optional[Tier] = None,
    date_range: Optional[DateRange] = None,
) -> dict:
    """Compute the weighted completion percentage, raw score and derived metrics.

    Every task inside ``date_range`` counts toward ``total_tasks`` and the
    blocked count; only tasks of ``filter_tier`` (all when ``None``) feed the
    weighted sums. ``estimation_accuracy`` is ``None`` when no task has both an
    estimate and an actual or the estimates sum to zero, and is not clamped
    below 0.
    """

    tasks = user.tasks
    if date_range is not None:
        tasks = [task for task in tasks if date_range.contains(task.start)]

    weighted_completed = 0.0
    weighted_total = 0.0
    estimated_total = 0.0
    actual_total = 0.0
    tracked_estimates = 0
    total_tasks = 0
    completed_tasks = 0
    blocked_tasks = 0
    # Overload is judged on the user's whole task list, not the filtered view.
    workload = calculate_workload_metrics(user, now)

    for task in tasks:
        total_tasks += 1
        if task.blocked_by:
            blocked_tasks += 1

        if filter_tier is not None and task.type != filter_tier:
            continue

        weight = dynamic_weight(task, user, now, workload=workload)

        if task.estimated_minutes:
            estimated_total += task.estimated_minutes
            if task.actual_minutes:
                actual_total += task.actual_minutes
                tracked_estimates += 1

        contribution = subtask_contribution(task)
        if task.subtasks:
            if contribution["completed_count"] == len(task.subtasks) and task.completed:
                completed_tasks += 1
        elif task.completed:
            completed_tasks += 1

        weighted_completed += weight * contribution["completed_weight"]
        weighted_total += weight * contribution["total_weight"]

    logger.debug(
        "RTP for %s (tier=%s): %d tasks, weighted %.3f/%.3f",
        user.name,
        filter_tier.value if filter_tier is not None else "ALL",
        total_tasks,
        weighted_completed,
        weighted_total,
    )

    if weighted_total == 0:
        return _empty_result()

    estimation_accuracy = None
    if tracked_estimates > 0 and estimated_total:
        divergence = abs((actual_total - estimated_total) / estimated_total) * 100
        estimation_accuracy = min(100.0, 100.0 - divergence)

    return {
        "percentage": weighted_completed / weighted_total * 100,
        "score": round_half_up(weighted_completed),
        "metrics": {
            "estimation_accuracy": estimation_accuracy,
            "completion_rate": completed_tasks / total_tasks * 100 if total_tasks else 0.0,
            "blocked_tasks_percentage": blocked_tasks / total_tasks * 100 if total_tasks else 0.0,
            "average_task_weight": weighted_total / total_tasks if total_tasks else 0.0,
        },
    }


def rtp_by_tier(user: User, now: datetime, date_range: Optional[DateRange] = None) -> dict:
    """Overall RTP plus one filtered result per tier."""

    results = {"all": calculate_rtp(user, now, date_range=date_range)}
    for tier in Tier:
        results[tier.value] = calculate_rtp(user, now, filter_tier=tier, date_range=date_range)
    return results


def today_range(now: datetime) -> DateRange:
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return DateRange(start=midnight, end=midnight + timedelta(days=1))


def daily_rtp(user: User, now: datetime, filter_tier: Optional[Tier] = None) -> dict:
    """RTP restricted to tasks that start today."""

    return calculate_rtp(user, now, filter_tier=filter_tier, date_range=today_range(now))
