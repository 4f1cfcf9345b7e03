"""
TASK PLANNER - Task Validation
==============================
Enforces the constraints declared on the schema (FieldRule metadata) plus the
tree, date and status invariants the model itself leaves to its callers.

Usage:
    from task_planner import Task, validate_task

    report = validate_task(Task(title="ok"))
    if not report.is_valid:
        for issue in report.issues:
            print(issue.path, issue.kind, issue.message)
"""

from functools import lru_cache
from typing import Annotated, Dict, List, Optional, Set
import logging

from pydantic import BaseModel, Field, StringConstraints, TypeAdapter, ValidationError

from .schema import Task, TaskStatus, TextTag, field_rules

logger = logging.getLogger("task_planner")


class ValidationIssue(BaseModel):
    """Single constraint violation"""
    path: str       # e.g. "subtasks[1].tags[0].name"
    kind: str       # "missing", "string_too_short", "date_order", ...
    message: str


class ValidationReport(BaseModel):
    """Outcome of validating one task tree or tag"""
    issues: List[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def kinds(self) -> Set[str]:
        return {issue.kind for issue in self.issues}

    def raise_for_issues(self) -> None:
        if self.issues:
            raise TaskValidationError(self)


class TaskValidationError(ValueError):
    """Raised on request when a report holds issues"""

    def __init__(self, report: ValidationReport):
        self.report = report
        first = report.issues[0]
        more = f" (+{len(report.issues) - 1} more)" if len(report.issues) > 1 else ""
        super().__init__(f"{first.path}: {first.message}{more}")


@lru_cache(maxsize=None)
def _length_adapter(min_length: Optional[int], max_length: Optional[int]) -> TypeAdapter:
    return TypeAdapter(
        Annotated[str, StringConstraints(min_length=min_length, max_length=max_length)]
    )


def _join(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


class TaskValidator:
    """
    Validation collaborator for the task model.

    Never raises for bad data: every problem becomes a ValidationIssue.
    Only a wrong argument type (not a Task / TextTag) raises TypeError.
    """

    def __init__(
        self,
        check_dates: bool = True,
        check_tree: bool = True,
        check_status: bool = True
    ):
        self.check_dates = check_dates
        self.check_tree = check_tree
        self.check_status = check_status

    # ========================================
    # ENTRY POINTS
    # ========================================

    def validate(self, task: Task) -> ValidationReport:
        """Validate a task and its whole subtask tree"""
        if not isinstance(task, Task):
            raise TypeError(f"Expected Task, got {type(task).__name__}")

        issues: List[ValidationIssue] = []
        self._visit(task, "", set(), issues)
        report = ValidationReport(issues=issues)

        if issues:
            logger.warning(f"⚠️ Task '{task.title}' has {len(issues)} validation issue(s)")
        else:
            logger.debug(f"✅ Task '{task.title}' is valid")
        return report

    def validate_tag(self, tag: TextTag) -> ValidationReport:
        if not isinstance(tag, TextTag):
            raise TypeError(f"Expected TextTag, got {type(tag).__name__}")
        issues: List[ValidationIssue] = []
        self._check_rules(tag, "", issues)
        return ValidationReport(issues=issues)

    def ensure_valid(self, task: Task) -> Task:
        """Validate and raise TaskValidationError on any issue"""
        self.validate(task).raise_for_issues()
        return task

    # ========================================
    # TREE WALK
    # ========================================

    def _visit(
        self,
        task: Task,
        path: str,
        seen: Set[int],
        issues: List[ValidationIssue]
    ) -> None:
        # Always tracked, so a cyclic graph cannot recurse forever
        if id(task) in seen:
            if self.check_tree:
                issues.append(ValidationIssue(
                    path=path,
                    kind="shared_subtask",
                    message=f"Task '{task.title}' appears more than once in the tree"
                ))
            return
        seen.add(id(task))

        self._check_rules(task, path, issues)

        tag_paths: Dict[str, str] = {}
        for i, tag in enumerate(task.tags):
            tag_path = _join(path, f"tags[{i}]")
            self._check_rules(tag, tag_path, issues)
            self._check_key(tag, tag_path, tag_paths, issues)

        if self.check_dates:
            self._check_dates(task, path, issues)
        if self.check_status:
            self._check_status(task, path, issues)

        for i, child in enumerate(task.subtasks):
            self._visit(child, _join(path, f"subtasks[{i}]"), seen, issues)

    # ========================================
    # CHECKS
    # ========================================

    def _check_rules(self, model: BaseModel, path: str, issues: List[ValidationIssue]) -> None:
        """Enforce FieldRule metadata declared on the model's fields"""
        for name, rule in field_rules(type(model)).items():
            value = getattr(model, name)
            field_path = _join(path, name)

            if rule.required and not value:
                issues.append(ValidationIssue(
                    path=field_path, kind="missing", message="Field is required"
                ))
                continue
            if rule.min_length is None and rule.max_length is None:
                continue

            try:
                _length_adapter(rule.min_length, rule.max_length).validate_python(value)
            except ValidationError as e:
                for error in e.errors():
                    issues.append(ValidationIssue(
                        path=field_path, kind=error["type"], message=error["msg"]
                    ))

    def _check_key(
        self,
        tag: TextTag,
        path: str,
        tag_paths: Dict[str, str],
        issues: List[ValidationIssue]
    ) -> None:
        """Key fields must be unique within one task's tag list"""
        for name, rule in field_rules(TextTag).items():
            if not rule.key:
                continue
            value = getattr(tag, name)
            first = tag_paths.get(value)
            if first is not None:
                issues.append(ValidationIssue(
                    path=_join(path, name),
                    kind="duplicate_key",
                    message=f"Duplicate {name} {value!r}, first used at {first}"
                ))
            else:
                tag_paths[value] = path

    def _check_dates(self, task: Task, path: str, issues: List[ValidationIssue]) -> None:
        if task.start_date is None or task.deadline is None:
            return
        if (task.start_date.tzinfo is None) != (task.deadline.tzinfo is None):
            issues.append(ValidationIssue(
                path=_join(path, "deadline"),
                kind="date_mixed_tz",
                message="Start date and deadline mix naive and timezone-aware datetimes"
            ))
            return
        if task.start_date > task.deadline:
            issues.append(ValidationIssue(
                path=_join(path, "deadline"),
                kind="date_order",
                message=f"Deadline {task.deadline} is before start date {task.start_date}"
            ))

    def _check_status(self, task: Task, path: str, issues: List[ValidationIssue]) -> None:
        if task.status == TaskStatus.PARTLY_COMPLETED and not task.subtasks:
            issues.append(ValidationIssue(
                path=_join(path, "status"),
                kind="status_without_subtasks",
                message="PartlyCompleted requires at least one subtask"
            ))


_default_validator = TaskValidator()


def validate_task(task: Task) -> ValidationReport:
    """Validate a task tree with all checks enabled"""
    return _default_validator.validate(task)


def validate_tag(tag: TextTag) -> ValidationReport:
    return _default_validator.validate_tag(tag)
