"""Subtask roll-up into the parent task's completion fraction."""

from __future__ import annotations

from rtp_engine.schema import Task
from rtp_engine.weights import base_priority_weight


def subtask_contribution(task: Task) -> dict:
    """Return the parent's completed fraction, its share (always 1) and the done count.

    Subtasks are weighted by their explicit priority or tier default. A task
    without subtasks behaves as its own single subtask.
    """

    if not task.subtasks:
        done = 1 if task.completed else 0
        return {"completed_weight": done, "total_weight": 1, "completed_count": done}

    completed_count = sum(1 for subtask in task.subtasks if subtask.completed)

    weighted_done = 0.0
    weighted_total = 0.0
    for subtask in task.subtasks:
        weight = base_priority_weight(subtask.priority, subtask.type)
        weighted_total += weight
        if subtask.completed:
            weighted_done += weight

    if weighted_total > 0:
        completed_weight = weighted_done / weighted_total
    else:
        completed_weight = completed_count / len(task.subtasks)

    return {"completed_weight": completed_weight, "total_weight": 1, "completed_count": completed_count}
