from datetime import datetime, timedelta

import pytest

from rtp_engine.schema import (
    ProductiveHours,
    SubTask,
    Task,
    Tier,
    User,
    UserPreferences,
    WeightPreferences,
    WorkloadMetrics,
)
from rtp_engine.weights import base_priority_weight, complexity_factor, dynamic_weight, urgency_factor

NOW = datetime(2025, 3, 10, 8, 0)


def halfway_task(**kwargs):
    return Task(name="Halfway", start=NOW - timedelta(days=1), end=NOW + timedelta(days=1), **kwargs)


def test_base_priority_weight():
    assert base_priority_weight(7, Tier.LOW) == 7
    assert base_priority_weight(None, Tier.LOW) == 2
    assert base_priority_weight(None, Tier.MID) == 5
    assert base_priority_weight(None, Tier.HIGH) == 8
    assert base_priority_weight(None, None) == 5


def test_urgency_factor_before_deadline():
    assert urgency_factor(halfway_task(), NOW) == pytest.approx(1.25)
    just_started = Task(name="fresh", start=NOW, end=NOW + timedelta(days=1))
    assert urgency_factor(just_started, NOW) == pytest.approx(1.0)


def test_urgency_factor_long_task_uses_duration_factor():
    task = Task(name="long", start=NOW - timedelta(days=90), end=NOW + timedelta(days=10))
    assert urgency_factor(task, NOW) == pytest.approx(1 + 0.9 * 0.5 * 2)


def test_urgency_factor_overdue_and_cap():
    overdue = Task(name="late", start=NOW - timedelta(days=3), end=NOW - timedelta(days=1))
    assert urgency_factor(overdue, NOW) == pytest.approx(1.5)

    stale = Task(name="stale", start=NOW - timedelta(days=101), end=NOW - timedelta(days=100))
    assert urgency_factor(stale, NOW) == 3


def test_urgency_factor_degenerate_duration():
    instant = Task(name="instant", start=NOW - timedelta(hours=12), end=NOW - timedelta(hours=12))
    assert urgency_factor(instant, NOW) == pytest.approx(1.5)
    assert urgency_factor(Task(name="undated"), NOW) == 1.0


def test_complexity_factor_caps():
    task = Task(name="team", subtasks=[SubTask(name=str(i)) for i in range(3)], collaborators=["a", "b"])
    assert complexity_factor(task) == pytest.approx(1.5)

    crowded = Task(
        name="crowded",
        subtasks=[SubTask(name=str(i)) for i in range(15)],
        collaborators=[str(i) for i in range(8)],
    )
    assert complexity_factor(crowded) == pytest.approx(2.5)


def test_dynamic_weight_default_preferences():
    user = User(name="u")
    assert dynamic_weight(halfway_task(type=Tier.MID), user, NOW) == pytest.approx(5.5)


def test_dynamic_weight_normalizes_preference_ratios():
    prefs = UserPreferences(weight_preferences=WeightPreferences(deadline=1, priority=1, complexity=0))
    user = User(name="u", preferences=prefs)
    assert dynamic_weight(halfway_task(type=Tier.MID), user, NOW) == pytest.approx(5.625)


def test_dynamic_weight_productive_hours_boost():
    user = User(name="u", preferences=UserPreferences(productive_hours=[ProductiveHours(8, 12)]))
    assert dynamic_weight(halfway_task(type=Tier.MID), user, NOW) == pytest.approx(5.5 * 1.1)

    outside = User(name="u", preferences=UserPreferences(productive_hours=[ProductiveHours(14, 17)]))
    assert dynamic_weight(halfway_task(type=Tier.MID), outside, NOW) == pytest.approx(5.5)


def test_dynamic_weight_overload_exponent():
    task = halfway_task(type=Tier.MID)
    other = Task(name="soon", start=NOW - timedelta(hours=1), end=NOW + timedelta(hours=2))
    overloaded = User(name="u", tasks=[task, other], preferences=UserPreferences(workload_capacity=1))
    assert dynamic_weight(task, overloaded, NOW) == pytest.approx(5.5**1.2)

    relaxed = User(name="u", tasks=[task, other], preferences=UserPreferences(workload_capacity=5))
    assert dynamic_weight(task, relaxed, NOW) == pytest.approx(5.5)


def test_dynamic_weight_monotonic_in_priority():
    user = User(name="u")
    weights = [dynamic_weight(halfway_task(priority=p), user, NOW) for p in range(1, 11)]
    assert weights == sorted(weights)


def test_urgency_factor_before_start_stays_neutral():
    upcoming = Task(name="later", start=NOW + timedelta(days=10), end=NOW + timedelta(days=10, minutes=30))
    assert urgency_factor(upcoming, NOW) == 1.0

    upcoming.type = Tier.LOW
    assert dynamic_weight(upcoming, User(name="u"), NOW) == pytest.approx(2.0)


def test_urgency_factor_inverted_duration():
    not_due = Task(name="inverted", start=NOW + timedelta(days=2), end=NOW + timedelta(days=1))
    assert urgency_factor(not_due, NOW) == 1.0

    overdue = Task(name="inverted late", start=NOW, end=NOW - timedelta(hours=12))
    assert urgency_factor(overdue, NOW) == pytest.approx(1.5)


def test_dynamic_weight_productive_boost_before_overload_exponent():
    task = halfway_task(type=Tier.MID)
    other = Task(name="soon", start=NOW - timedelta(hours=1), end=NOW + timedelta(hours=2))
    prefs = UserPreferences(productive_hours=[ProductiveHours(8, 12)], workload_capacity=1)
    user = User(name="u", tasks=[task, other], preferences=prefs)
    assert dynamic_weight(task, user, NOW) == pytest.approx((5.5 * 1.1) ** 1.2)


def test_dynamic_weight_overload_applies_to_future_tasks():
    later = Task(name="later", type=Tier.MID, start=NOW + timedelta(days=5), end=NOW + timedelta(days=6))
    soon = [Task(name=str(i), end=NOW + timedelta(hours=i + 1)) for i in range(3)]
    user = User(name="u", tasks=[later, *soon], preferences=UserPreferences(workload_capacity=2))
    assert dynamic_weight(later, user, NOW) == pytest.approx(5.0**1.2)


def test_dynamic_weight_uses_supplied_workload():
    task = halfway_task(type=Tier.MID)
    user = User(name="u", tasks=[task], preferences=UserPreferences(workload_capacity=5))
    overloaded = WorkloadMetrics(
        daily_capacity=5, current_load=10, overload_factor=2.0, upcoming_deadlines=0, blocked_tasks=0
    )
    assert dynamic_weight(task, user, NOW, workload=overloaded) == pytest.approx(5.5**1.2)
    assert dynamic_weight(task, user, NOW) == pytest.approx(5.5)
