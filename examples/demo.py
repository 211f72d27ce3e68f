"""Demo script for rtp-engine."""

import sys
from datetime import datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from rtp_engine.adapters.json_adapter import parse
from rtp_engine.classifier import create_task
from rtp_engine.rtp import calculate_rtp, rtp_by_tier
from rtp_engine.workload import calculate_workload_metrics


def main() -> None:
    now = datetime.now()
    users = parse("examples/sample_users.json")
    user = users[0]

    print("RTP:", calculate_rtp(user, now))
    print("Workload:", calculate_workload_metrics(user, now))

    task = create_task(
        name="Prepare urgent client report",
        description="Collect the quarterly numbers and review them with the team before the deadline.",
        start=now,
        end=now + timedelta(hours=10),
        estimated_minutes=180,
        collaborators=["bob", "carol"],
    )
    print("Classified new task:", task.type.value, task.priority)
    user.tasks.append(task)

    for label, result in rtp_by_tier(user, now).items():
        print(f"{label:>4}: {result['percentage']:.1f}% (score {result['score']})")


if __name__ == "__main__":
    main()
