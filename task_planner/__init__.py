"""
TASK PLANNER - Planning Domain Model
====================================

Tasks with nested subtasks, colored text tags, priority / status enumerations
and time-handling flags, plus a validator for the declared field constraints.

Usage:
    from task_planner import Task, TextTag, Rgba, TimeState, validate_task

    task = Task(title="Pay bills", time_flags=TimeState.USE_CONCRETE_DATE)
    task.tags.append(TextTag(name="home", color=Rgba.from_hex("#33aa55")))
    task.subtasks.append(Task(title="Electricity"))

    copy = task.clone()          # independent deep copy of the whole tree
    print(copy)                  # "Pay bills [-]: Unfinished"
    report = validate_task(copy)
"""

from .schema import (
    FieldRule,
    Rgba,
    Task,
    TaskPriority,
    TaskStatus,
    TextTag,
    TimeState,
    clone_task,
    describe_task,
    field_rules
)

from .validation import (
    TaskValidationError,
    TaskValidator,
    ValidationIssue,
    ValidationReport,
    validate_tag,
    validate_task
)

__version__ = "1.0.0"
__all__ = [
    "Task",
    "TextTag",
    "Rgba",
    "TaskPriority",
    "TaskStatus",
    "TimeState",
    "FieldRule",
    "field_rules",
    "clone_task",
    "describe_task",
    "TaskValidator",
    "TaskValidationError",
    "ValidationIssue",
    "ValidationReport",
    "validate_task",
    "validate_tag"
]
