#!/usr/bin/env python
import os

from tracker.core import settings_store
from tracker.core.tasks_repo import add_tasks, list_tasks_for_week
from tracker.core.weeks_repo import list_weeks


def main():
    settings_store.initialize()
    week = list_weeks()[0]
    if os.getenv("SEED_DEMO_TASKS") and not list_tasks_for_week(week.id):
        add_tasks(week.id, ["Memorize 5 colors", "Read the short story"])
    print(f"[seed] done, current week: {week.id} {week.title}")


if __name__ == "__main__":
    main()
