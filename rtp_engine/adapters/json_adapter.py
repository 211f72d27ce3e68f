"""JSON adapter for user and task records."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Optional

from rtp_engine.schema import (
    HistoryEntry,
    ProductiveHours,
    SubTask,
    Task,
    Tier,
    User,
    UserPreferences,
    WeightPreferences,
)

logger = logging.getLogger(__name__)


def _timestamp(item: dict, key: str, context: str) -> Optional[datetime]:
    raw = item.get(key)
    if raw in (None, ""):
        return None
    try:
        return datetime.fromisoformat(str(raw))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"{context}: malformed {key}") from exc


def _number(item: dict, key: str, context: str) -> Optional[float]:
    raw = item.get(key)
    if raw is None:
        return None
    try:
        return float(raw)
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"{context}: invalid {key}") from exc


def _integer(item: dict, key: str, context: str) -> Optional[int]:
    value = _number(item, key, context)
    if value is None:
        return None
    if not value.is_integer():
        raise ValueError(f"{context}: {key} must be a whole number")
    return int(value)


def _boolean(item: dict, key: str, context: str) -> bool:
    raw = item.get(key, False)
    if not isinstance(raw, bool):
        raise ValueError(f"{context}: {key} must be true or false")
    return raw


def _tier(raw: Any, context: str) -> Optional[Tier]:
    if raw in (None, ""):
        return None
    try:
        return Tier(str(raw).strip().upper())
    except ValueError as exc:
        raise ValueError(f"{context}: invalid type '{raw}'") from exc


def _strings(item: dict, key: str) -> list[str]:
    return [str(value) for value in item.get(key) or []]


def _require_name(item: Any, context: str) -> str:
    if not isinstance(item, dict):
        raise ValueError(f"{context}: expected an object")
    if not item.get("name"):
        raise ValueError(f"{context}: missing required fields ['name']")
    return str(item["name"]).strip()


def _parse_subtask(item: Any, context: str) -> SubTask:
    name = _require_name(item, context)
    return SubTask(
        name=name,
        description=str(item.get("description") or ""),
        start=_timestamp(item, "startDateTime", context),
        end=_timestamp(item, "endDateTime", context),
        completed=_boolean(item, "completed", context),
        type=_tier(item.get("type"), context),
        priority=_integer(item, "priority", context),
        estimated_minutes=_number(item, "estimatedMinutes", context),
        actual_minutes=_number(item, "actualMinutes", context),
        blocked_by=_strings(item, "blockedBy"),
        id=item.get("id"),
    )


def _parse_task(item: Any, context: str) -> Task:
    name = _require_name(item, context)
    subtasks = [
        _parse_subtask(sub, f"{context}, subtask {i}") for i, sub in enumerate(item.get("subTasks") or [], start=1)
    ]
    return Task(
        name=name,
        description=str(item.get("description") or ""),
        start=_timestamp(item, "startDateTime", context),
        end=_timestamp(item, "endDateTime", context),
        completed=_boolean(item, "completed", context),
        type=_tier(item.get("type"), context),
        priority=_integer(item, "priority", context),
        estimated_minutes=_number(item, "estimatedMinutes", context),
        actual_minutes=_number(item, "actualMinutes", context),
        subtasks=subtasks,
        blocked_by=_strings(item, "blockedBy"),
        collaborators=_strings(item, "collaborators"),
        quality_rating=_integer(item, "qualityRating", context),
        tags=_strings(item, "tags"),
        recurrence=item.get("recurrence"),
        id=item.get("id"),
    )


def _parse_preferences(item: Any, context: str) -> Optional[UserPreferences]:
    if item is None:
        return None
    if not isinstance(item, dict):
        raise ValueError(f"{context}: preferences must be an object")

    windows = []
    for window in item.get("productiveHours") or []:
        if not isinstance(window, dict):
            raise ValueError(f"{context}: productive hours must be objects")
        start = _integer(window, "start", context)
        end = _integer(window, "end", context)
        if start is None or end is None:
            raise ValueError(f"{context}: productive hours need start and end")
        windows.append(ProductiveHours(start=start, end=end))

    weights = None
    raw_weights = item.get("weightPreferences")
    if raw_weights is not None:
        if not isinstance(raw_weights, dict):
            raise ValueError(f"{context}: weightPreferences must be an object")
        defaults = WeightPreferences()
        weights = WeightPreferences(
            deadline=_number(raw_weights, "deadline", context) if "deadline" in raw_weights else defaults.deadline,
            priority=_number(raw_weights, "priority", context) if "priority" in raw_weights else defaults.priority,
            complexity=(
                _number(raw_weights, "complexity", context) if "complexity" in raw_weights else defaults.complexity
            ),
        )

    return UserPreferences(
        productive_hours=windows,
        preferred_tiers=[tier for tier in (_tier(raw, context) for raw in item.get("preferredTaskTypes") or []) if tier],
        workload_capacity=_integer(item, "workloadCapacity", context),
        weight_preferences=weights,
    )


def _parse_history(item: Any, context: str) -> HistoryEntry:
    if not isinstance(item, dict) or not item.get("date"):
        raise ValueError(f"{context}: missing required fields ['date']")
    return HistoryEntry(
        date=str(item["date"]),
        score=_number(item, "score", context) or 0.0,
        tasks_completed=_integer(item, "tasksCompleted", context) or 0,
        total_tasks=_integer(item, "totalTasks", context) or 0,
    )


def _parse_user(item: Any, index: int) -> User:
    context = f"User {index}"
    name = _require_name(item, context)
    tasks = [_parse_task(task, f"{context}, task {i}") for i, task in enumerate(item.get("tasks") or [], start=1)]
    history = [
        _parse_history(entry, f"{context}, history {i}")
        for i, entry in enumerate(item.get("productivityHistory") or [], start=1)
    ]
    return User(
        name=name,
        tasks=tasks,
        preferences=_parse_preferences(item.get("preferences"), context),
        productivity_history=history,
    )


def parse(file_path: str) -> list[User]:
    """Parse a JSON file holding a list of users into user records."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of users")

    users = [_parse_user(item, i) for i, item in enumerate(payload, start=1)]
    logger.debug("Loaded %d users from %s", len(users), file_path)
    return users
