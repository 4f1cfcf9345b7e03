# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from task_planner import Rgba, Task, TaskPriority, TextTag, TimeState


@pytest.fixture()
def sample_tag() -> TextTag:
    return TextTag(name="home", color=Rgba(51, 170, 85))


@pytest.fixture()
def task_tree(sample_tag: TextTag) -> Task:
    """
    Three-level tree, 5 nodes in total:

        Move house
        ├── Pack boxes
        │   └── Buy tape
        ├── Book van
        └── Notify bank
    """
    root = Task(
        title="Move house",
        description="Everything for the move",
        priority=TaskPriority.HIGH,
        start_date=datetime(2024, 3, 1),
        deadline=datetime(2024, 3, 31),
        common_completion_time=timedelta(hours=40),
        task_group_id=7,
        time_flags=TimeState.USE_CONCRETE_DATE | TimeState.HAS_STRICT_DEADLINE,
        tags=[sample_tag, TextTag(name="big", color=Rgba(200, 0, 0))],
        task_repeat_time=[datetime(2024, 3, 8)],
    )
    pack = Task(title="Pack boxes", subtasks=[Task(title="Buy tape")])
    root.subtasks.extend([pack, Task(title="Book van"), Task(title="Notify bank")])
    return root
