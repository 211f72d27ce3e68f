from datetime import datetime, timedelta

from rtp_engine.classifier import classify_task, create_task, score_task
from rtp_engine.schema import SubTask, Task, Tier

NOW = datetime(2025, 3, 10, 8, 0)


def test_large_long_task_is_high():
    task = Task(
        name="Plan",
        description="x" * 400,
        subtasks=[SubTask(name=f"step {i}") for i in range(6)],
        start=NOW,
        end=NOW + timedelta(hours=30),
    )
    scores = score_task(task)
    assert (scores[Tier.HIGH], scores[Tier.MID], scores[Tier.LOW]) == (10, 0, 0)
    assert classify_task(task) == {"type": Tier.HIGH, "priority": 9}


def test_keywords_accumulate_across_lists():
    task = Task(name="Urgent review")
    scores = score_task(task)
    assert (scores[Tier.HIGH], scores[Tier.MID], scores[Tier.LOW]) == (1, 1, 2)
    assert classify_task(task) == {"type": Tier.LOW, "priority": 5}


def test_mid_low_tie_goes_to_low_and_priority_rounds_half_up():
    task = Task(name="Task", description="x" * 90, estimated_minutes=30)
    scores = score_task(task)
    assert (scores[Tier.MID], scores[Tier.LOW]) == (2, 2)
    assert classify_task(task) == {"type": Tier.LOW, "priority": 5}


def test_high_needs_strict_lead():
    task = Task(name="Task", description="x" * 200, subtasks=[SubTask(name="a"), SubTask(name="b")])
    assert classify_task(task) == {"type": Tier.MID, "priority": 8}


def test_structure_rules():
    scores = score_task(Task(name="Task", collaborators=["a", "b", "c"], estimated_minutes=300))
    assert scores[Tier.HIGH] == 4

    scores = score_task(Task(name="Task", collaborators=["a"], blocked_by=["t1"], estimated_minutes=90))
    assert scores[Tier.MID] == 4

    scores = score_task(Task(name="Task", start=NOW, end=NOW + timedelta(hours=1)))
    assert scores[Tier.LOW] == 4


def test_classification_is_deterministic():
    task = Task(name="Prepare critical report", description="Quarterly numbers", estimated_minutes=120)
    assert classify_task(task) == classify_task(task)


def test_create_task_auto_classifies():
    task = create_task(
        name="Plan",
        description="x" * 400,
        start=NOW,
        end=NOW + timedelta(hours=30),
        subtasks=[SubTask(name="Check mail")] + [SubTask(name=f"step {i}") for i in range(5)],
    )
    assert task.type == Tier.HIGH
    assert task.priority == 9
    assert task.completed is False
    assert task.recurrence == "none"
    assert task.subtasks[0].type == Tier.LOW
    assert task.subtasks[0].priority == 3


def test_create_task_explicit_priority_wins():
    task = create_task(name="Plan", description="x" * 400, start=NOW, end=NOW + timedelta(hours=30), priority=2)
    assert task.type == Tier.HIGH
    assert task.priority == 2


def test_create_task_explicit_tier_propagates_to_subtasks():
    task = create_task(
        name="Ship",
        start=NOW,
        end=NOW + timedelta(days=1),
        tier=Tier.HIGH,
        subtasks=[SubTask(name="a"), SubTask(name="b", priority=3, completed=True)],
        blocked_by=["t1"],
    )
    assert task.type == Tier.HIGH
    assert task.priority == 5
    assert [sub.type for sub in task.subtasks] == [Tier.HIGH, Tier.HIGH]
    assert [sub.priority for sub in task.subtasks] == [5, 3]
    assert not any(sub.completed for sub in task.subtasks)
    assert task.blocked_by == ["t1"]
