"""
TASK PLANNER - Task Schema Definition
=====================================
Planning-domain data model: tasks with nested subtasks, text tags and the
enumerations describing priority, status and time handling.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum, IntEnum, IntFlag
from typing import Annotated, Dict, Iterator, List, NamedTuple, Optional, Type
import logging

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger("task_planner")


class TaskPriority(IntEnum):
    """Task priority levels, most urgent first.

    Values are spaced so intermediate levels can be added without renumbering.
    """
    NONE = 0            # No specified priority
    MAXIMAL = 10        # Complete as soon as possible
    CRITICAL = 20       # Critically valuable to complete
    VERY_HIGH = 30      # Should be completed anyway
    HIGH = 40           # Complete earlier than other tasks
    SLIGHTLY_HIGH = 50  # Higher than common
    NORMAL = 60         # Common task, default priority
    LOW = 70            # Can be skipped if time is short
    VERY_LOW = 80       # Additional, when there is still time
    MINIMAL = 90        # Almost not needed, a tip mostly
    FREE_TIME = 100     # When there is a lot of free time


class TaskStatus(str, Enum):
    """Task lifecycle states"""
    UNFINISHED = "Unfinished"              # Initial state
    COMPLETED = "Completed"
    FAILED = "Failed"
    PARTLY_COMPLETED = "PartlyCompleted"   # Only for tasks with subtasks
    CANCELED = "Canceled"
    EXCEEDED = "Exceeded"                  # Set manually, never inferred


class TimeState(IntFlag):
    """Flags describing how a task is placed in time"""
    NONE = 0
    USE_CONCRETE_DATE = 1     # Start date / deadline are fixed, no rescheduling
    HAS_STRICT_DEADLINE = 2   # Deadline breach moves the task towards FAILED
    REPEAT_WEEKLY = 4         # Task recurs; see Task.task_repeat_time

    def has_flag(self, flag: "TimeState") -> bool:
        return (self & flag) == flag


ColorChannel = Annotated[int, Field(ge=0, le=255)]


class Rgba(NamedTuple):
    """RGBA color, one byte per channel"""
    r: ColorChannel
    g: ColorChannel
    b: ColorChannel
    a: ColorChannel = 255

    @classmethod
    def from_hex(cls, value: str) -> "Rgba":
        """Parse ``#rrggbb`` or ``#rrggbbaa``"""
        digits = value[1:] if value.startswith("#") else value
        if len(digits) not in (6, 8):
            raise ValueError(f"Expected #rrggbb or #rrggbbaa, got {value!r}")
        channels = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
        return cls(*channels)

    @property
    def hex(self) -> str:
        return "#{:02x}{:02x}{:02x}{:02x}".format(*self)


@dataclass(frozen=True)
class FieldRule:
    """Declarative constraint attached to a model field.

    pydantic carries it in ``model_fields[...].metadata`` without enforcing
    it; ``task_planner.validation.TaskValidator`` reads and checks it.
    """
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    required: bool = False
    key: bool = False       # Value identifies the item inside its container


def field_rules(model_cls: Type[BaseModel]) -> Dict[str, FieldRule]:
    """Collect the FieldRule declared on each field of a model class"""
    rules = {}
    for name, info in model_cls.model_fields.items():
        for meta in info.metadata:
            if isinstance(meta, FieldRule):
                rules[name] = meta
    return rules


class TextTag(BaseModel):
    """Named, colored label attached to tasks"""
    model_config = ConfigDict(frozen=True)

    name: Annotated[str, FieldRule(max_length=24, required=True, key=True)]
    color: Rgba = Rgba(0, 0, 0)


def _format_moment(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    if value.time() == datetime.min.time():
        return value.date().isoformat()
    return value.strftime("%Y-%m-%d %H:%M")


class Task(BaseModel):
    """Task to build a schedule / daily plan from.

    Subtasks are owned exclusively by their parent: the structure is a tree
    and ``clone`` duplicates it node by node.
    """
    title: Annotated[str, FieldRule(min_length=3, max_length=25)] = ""
    description: str = ""
    priority: TaskPriority = TaskPriority.NORMAL
    status: TaskStatus = TaskStatus.UNFINISHED

    # Scheduling
    start_date: Optional[datetime] = None
    deadline: Optional[datetime] = None
    common_completion_time: timedelta = timedelta(0)  # Advisory estimate
    task_group_id: int = 0                             # Opaque grouping key
    time_flags: TimeState = TimeState.NONE

    # Collections
    tags: List[TextTag] = Field(default_factory=list)
    subtasks: List["Task"] = Field(default_factory=list)
    task_repeat_time: List[datetime] = Field(default_factory=list)

    def clone(self) -> "Task":
        """Deep copy: new lists everywhere, every subtask cloned recursively"""
        return type(self).model_construct(
            title=self.title,
            description=self.description,
            priority=self.priority,
            status=self.status,
            start_date=self.start_date,
            deadline=self.deadline,
            common_completion_time=self.common_completion_time,
            task_group_id=self.task_group_id,
            time_flags=self.time_flags,
            tags=list(self.tags),
            subtasks=[child.clone() for child in self.subtasks],
            task_repeat_time=list(self.task_repeat_time),
        )

    def __str__(self) -> str:
        return (
            f"{self.title} [{_format_moment(self.start_date)}-"
            f"{_format_moment(self.deadline)}]: {self.status.value}"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return (
            self._scalars() == other._scalars()
            and Counter(self.tags) == Counter(other.tags)
            and self.task_repeat_time == other.task_repeat_time
            and self.subtasks == other.subtasks
        )

    def _scalars(self) -> tuple:
        return (
            self.title, self.description, self.priority, self.status,
            self.start_date, self.deadline, self.common_completion_time,
            self.task_group_id, self.time_flags,
        )

    # ========================================
    # TREE HELPERS
    # ========================================

    def walk(self) -> Iterator["Task"]:
        """Yield this task and all descendants, pre-order"""
        yield self
        for child in self.subtasks:
            yield from child.walk()

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self.walk())

    @property
    def depth(self) -> int:
        """Longest subtask chain down to a leaf; 0 for a leaf"""
        if not self.subtasks:
            return 0
        return 1 + max(child.depth for child in self.subtasks)

    def has_flag(self, flag: TimeState) -> bool:
        return self.time_flags.has_flag(flag)

    # Completion tracking over direct subtasks
    @property
    def progress_pct(self) -> int:
        if not self.subtasks:
            return 0
        completed = sum(1 for t in self.subtasks if t.status == TaskStatus.COMPLETED)
        return int((completed / len(self.subtasks)) * 100)

    @property
    def status_summary(self) -> Dict[str, int]:
        summary = {status.value: 0 for status in TaskStatus}
        for task in self.subtasks:
            summary[task.status.value] += 1
        return summary


def _require_task(task: object) -> Task:
    if not isinstance(task, Task):
        raise TypeError(f"Expected Task, got {type(task).__name__}")
    return task


def clone_task(task: Task) -> Task:
    """Deep-copy a task tree"""
    copy = _require_task(task).clone()
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"📋 Cloned task '{task.title}' ({copy.node_count} nodes)")
    return copy


def describe_task(task: Task) -> str:
    """Human-readable one-line summary, for logs only"""
    return str(_require_task(task))
