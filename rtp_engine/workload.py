"""Workload analysis against a user's daily capacity."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from rtp_engine.schema import User, WorkloadMetrics

logger = logging.getLogger(__name__)

DEFAULT_DAILY_CAPACITY = 5
UPCOMING_HORIZON_DAYS = 3


def end_of_tomorrow(now: datetime) -> datetime:
    return (now + timedelta(days=1)).replace(hour=23, minute=59, second=59, microsecond=999999)


def calculate_workload_metrics(user: User, now: datetime) -> WorkloadMetrics:
    """Count near-term and blocked open tasks and compare against capacity.

    ``current_load`` counts open tasks due by the end of tomorrow;
    ``upcoming_deadlines`` counts open tasks due after that but no later than
    three days from ``now``.
    """

    capacity = DEFAULT_DAILY_CAPACITY
    if user.preferences is not None and user.preferences.workload_capacity:
        capacity = user.preferences.workload_capacity

    tomorrow = end_of_tomorrow(now)
    horizon = now + timedelta(days=UPCOMING_HORIZON_DAYS)

    open_tasks = [task for task in user.tasks if not task.completed]
    current_load = sum(1 for task in open_tasks if task.end is not None and task.end <= tomorrow)
    upcoming = sum(1 for task in open_tasks if task.end is not None and tomorrow < task.end <= horizon)
    blocked = sum(1 for task in open_tasks if task.blocked_by)

    metrics = WorkloadMetrics(
        daily_capacity=capacity,
        current_load=current_load,
        overload_factor=current_load / capacity,
        upcoming_deadlines=upcoming,
        blocked_tasks=blocked,
    )
    logger.debug("Workload for %s: %s", user.name, metrics)
    return metrics
