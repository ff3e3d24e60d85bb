#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path

USERS = [(101, "alice"), (102, "bob"), (103, "carol")]
LISTS = [(1, "Website", "Client A"), (2, "Backend", "Client A"), (3, "Support", "Internal")]
TAGS = ["billable", "meeting", "review"]


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate provider-shaped sample time entries")
    parser.add_argument("--output", required=True, help="Output file path (.json)")
    parser.add_argument("--days", type=int, default=60, help="Number of days before now to cover")
    parser.add_argument("--seed", type=int, default=7, help="Random seed")
    args = parser.parse_args()

    rng = random.Random(args.seed)
    now = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)
    entries = []
    for offset in range(args.days):
        day_end = now - timedelta(days=offset)
        if day_end.weekday() >= 5:
            continue
        for user_id, username in USERS:
            list_id, list_name, space_name = rng.choice(LISTS)
            hours = rng.choice([2, 4, 6, 8])
            entries.append(
                {
                    "id": f"{user_id}-{offset}",
                    "user": {"id": user_id, "username": username},
                    "task_location": {"list_id": list_id, "list_name": list_name, "space_name": space_name},
                    "end": str(int(day_end.timestamp() * 1000)),
                    "duration": str(hours * 60 * 60 * 1000),
                    "tags": [{"name": rng.choice(TAGS)}],
                    "task_tags": [],
                }
            )

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps({"data": entries}, indent=2), encoding="utf-8")
    print(f"Sample entries written: {output} ({len(entries)} entries)")


if __name__ == "__main__":
    main()
