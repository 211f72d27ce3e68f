"""Rule-based tier and priority classification for new tasks."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime
from typing import Optional, Union

from rtp_engine.rounding import round_half_up
from rtp_engine.schema import SubTask, Task, Tier

logger = logging.getLogger(__name__)

# Each ladder is checked top-down: (exclusive lower bound, tier, points).
# The trailing entry with bound None is the fallback.
DESCRIPTION_LADDER = ((300, Tier.HIGH, 3), (150, Tier.HIGH, 2), (80, Tier.MID, 2), (None, Tier.LOW, 1))
SUBTASK_LADDER = ((5, Tier.HIGH, 4), (3, Tier.HIGH, 3), (0, Tier.MID, 2), (None, Tier.LOW, 1))
DURATION_HOURS_LADDER = ((24, Tier.HIGH, 3), (8, Tier.HIGH, 2), (2, Tier.MID, 2), (None, Tier.LOW, 2))
COLLABORATOR_LADDER = ((2, Tier.HIGH, 2), (0, Tier.MID, 1))
ESTIMATE_MINUTES_LADDER = ((240, Tier.HIGH, 2), (60, Tier.MID, 2), (None, Tier.LOW, 1))
BLOCKED_POINTS = (Tier.MID, 1)

KEYWORDS = {
    Tier.HIGH: ("urgent", "critical", "important", "deadline", "priority", "asap", "emergency", "crucial"),
    Tier.MID: ("review", "update", "prepare", "meeting", "report", "develop", "implement", "analyze"),
    Tier.LOW: ("check", "read", "reminder", "routine", "daily", "follow-up", "monitor", "maintain"),
}

TIER_MULTIPLIERS = {Tier.LOW: 1, Tier.MID: 2, Tier.HIGH: 3}
PRIORITY_SCALE = 3
MIN_PRIORITY = 1
MAX_PRIORITY = 10


def _apply_ladder(scores: Counter, ladder: tuple, value: float) -> None:
    for bound, tier, points in ladder:
        if bound is None or value > bound:
            scores[tier] += points
            return


def score_task(task: Union[Task, SubTask]) -> Counter:
    """Accumulate per-tier points from the task's text and structure."""

    scores: Counter = Counter({tier: 0 for tier in Tier})

    _apply_ladder(scores, DESCRIPTION_LADDER, len(task.description or ""))
    _apply_ladder(scores, SUBTASK_LADDER, len(getattr(task, "subtasks", None) or []))

    if task.start is not None and task.end is not None:
        duration_hours = (task.end - task.start).total_seconds() / 3600.0
        _apply_ladder(scores, DURATION_HOURS_LADDER, duration_hours)

    text = f"{task.name or ''} {task.description or ''}".lower()
    for tier, keywords in KEYWORDS.items():
        scores[tier] += sum(1 for keyword in keywords if keyword in text)

    _apply_ladder(scores, COLLABORATOR_LADDER, len(getattr(task, "collaborators", None) or []))

    if task.blocked_by:
        tier, points = BLOCKED_POINTS
        scores[tier] += points

    if task.estimated_minutes:
        _apply_ladder(scores, ESTIMATE_MINUTES_LADDER, task.estimated_minutes)

    return scores


def select_tier(scores: Counter) -> Tier:
    """HIGH needs a strict lead over both others; ties fall to LOW."""

    if scores[Tier.HIGH] > scores[Tier.MID] and scores[Tier.HIGH] > scores[Tier.LOW]:
        return Tier.HIGH
    if scores[Tier.MID] > scores[Tier.LOW]:
        return Tier.MID
    return Tier.LOW


def priority_from_scores(scores: Counter) -> int:
    total = sum(scores[tier] for tier in Tier)
    weighted = sum(scores[tier] * TIER_MULTIPLIERS[tier] for tier in Tier)
    raw = weighted / (total or 1) * PRIORITY_SCALE
    return max(MIN_PRIORITY, min(MAX_PRIORITY, round_half_up(raw)))


def classify_task(task: Union[Task, SubTask]) -> dict:
    """Assign a tier and a 1-10 priority to a task created without a type."""

    scores = score_task(task)
    result = {"type": select_tier(scores), "priority": priority_from_scores(scores)}
    logger.debug(
        "Classified %r: scores LOW=%d MID=%d HIGH=%d -> %s/%d",
        task.name,
        scores[Tier.LOW],
        scores[Tier.MID],
        scores[Tier.HIGH],
        result["type"].value,
        result["priority"],
    )
    return result


def create_task(
    name: str,
    start: datetime,
    end: datetime,
    description: str = "",
    tier: Optional[Tier] = None,
    priority: Optional[int] = None,
    subtasks: Optional[list[SubTask]] = None,
    estimated_minutes: Optional[float] = None,
    collaborators: Optional[list[str]] = None,
    blocked_by: Optional[list[str]] = None,
    tags: Optional[list[str]] = None,
    recurrence: Optional[str] = None,
    task_id: Optional[str] = None,
) -> Task:
    """Build a new open task, classifying it (and its subtasks) when ``tier`` is None.

    An explicit ``priority`` always wins over the classified one. The returned
    task is not attached to any user.
    """

    draft = Task(
        name=name,
        description=description,
        start=start,
        end=end,
        subtasks=list(subtasks or []),
        estimated_minutes=estimated_minutes,
        collaborators=list(collaborators or []),
    )
    if tier is None:
        classification = classify_task(draft)
    else:
        classification = {"type": tier, "priority": priority or 5}

    task_priority = priority or classification["priority"]

    built_subtasks = []
    for subtask in draft.subtasks:
        if tier is None:
            sub_classification = classify_task(
                SubTask(
                    name=subtask.name,
                    description=subtask.description,
                    start=subtask.start,
                    end=subtask.end,
                    estimated_minutes=subtask.estimated_minutes,
                )
            )
        else:
            sub_classification = {"type": tier, "priority": subtask.priority or classification["priority"]}
        built_subtasks.append(
            SubTask(
                name=subtask.name,
                description=subtask.description,
                start=subtask.start,
                end=subtask.end,
                completed=False,
                type=sub_classification["type"],
                priority=subtask.priority or sub_classification["priority"],
                estimated_minutes=subtask.estimated_minutes,
                actual_minutes=subtask.actual_minutes,
                blocked_by=list(subtask.blocked_by),
                id=subtask.id,
            )
        )

    return Task(
        name=name,
        description=description,
        start=start,
        end=end,
        completed=False,
        type=classification["type"],
        priority=task_priority,
        estimated_minutes=estimated_minutes or None,
        subtasks=built_subtasks,
        blocked_by=list(blocked_by or []),
        collaborators=list(collaborators or []),
        tags=list(tags or []),
        recurrence=recurrence or "none",
        id=task_id,
    )
