"""Per-tier task counts."""

from __future__ import annotations

from rtp_engine.schema import Tier, User


def task_breakdown(user: User) -> dict:
    """Count total and completed tasks per tier.

    Tasks with subtasks count as partly completed by their unweighted subtask
    ratio. Tasks without a tier are left out.
    """

    counts = {tier: {"total": 0, "completed": 0.0} for tier in Tier}
    for task in user.tasks:
        if task.type is None:
            continue
        bucket = counts[task.type]
        bucket["total"] += 1
        if task.subtasks:
            done = sum(1 for subtask in task.subtasks if subtask.completed)
            bucket["completed"] += done / len(task.subtasks)
        elif task.completed:
            bucket["completed"] += 1
    return counts
