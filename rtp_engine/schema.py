"""Core data schema for tasks, users and workload metrics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class Tier(str, Enum):
    """Coarse task category."""

    LOW = "LOW"
    MID = "MID"
    HIGH = "HIGH"


@dataclass
class SubTask:
    """Unit of work owned by exactly one parent task."""

    name: str
    description: str = ""
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    completed: bool = False
    type: Optional[Tier] = None
    priority: Optional[int] = None
    estimated_minutes: Optional[float] = None
    actual_minutes: Optional[float] = None
    blocked_by: list[str] = field(default_factory=list)
    id: Optional[str] = None


@dataclass
class Task:
    """Unit of work tracked for a user.

    ``end`` is expected to be on or after ``start``; nothing here enforces it.
    """

    name: str
    description: str = ""
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    completed: bool = False
    type: Optional[Tier] = None
    priority: Optional[int] = None
    estimated_minutes: Optional[float] = None
    actual_minutes: Optional[float] = None
    subtasks: list[SubTask] = field(default_factory=list)
    blocked_by: list[str] = field(default_factory=list)
    collaborators: list[str] = field(default_factory=list)
    quality_rating: Optional[int] = None
    tags: list[str] = field(default_factory=list)
    recurrence: Optional[str] = None
    id: Optional[str] = None


@dataclass
class ProductiveHours:
    """Hour-of-day window, start inclusive and end exclusive."""

    start: int
    end: int

    def contains(self, hour: int) -> bool:
        return self.start <= hour < self.end


@dataclass
class WeightPreferences:
    """Relative importance of deadline, priority and complexity."""

    deadline: float = 0.4
    priority: float = 0.4
    complexity: float = 0.2


@dataclass
class UserPreferences:
    productive_hours: list[ProductiveHours] = field(default_factory=list)
    preferred_tiers: list[Tier] = field(default_factory=list)
    workload_capacity: Optional[int] = None
    weight_preferences: Optional[WeightPreferences] = None


@dataclass
class HistoryEntry:
    date: str
    score: float
    tasks_completed: int
    total_tasks: int


@dataclass
class User:
    name: str
    tasks: list[Task] = field(default_factory=list)
    preferences: Optional[UserPreferences] = None
    productivity_history: list[HistoryEntry] = field(default_factory=list)


@dataclass
class DateRange:
    """Half-open timestamp range ``[start, end)``."""

    start: datetime
    end: datetime

    def contains(self, value: Optional[datetime]) -> bool:
        if value is None:
            return False
        return self.start <= value < self.end


@dataclass
class WorkloadMetrics:
    """Near-term load of a user against their declared daily capacity."""

    daily_capacity: int
    current_load: int
    overload_factor: float
    upcoming_deadlines: int
    blocked_tasks: int
