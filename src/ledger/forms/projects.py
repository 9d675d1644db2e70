"""Project and task-template forms."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..models.project import PROJECT_STATUSES, TASK_PRIORITIES, TASK_STATUSES
from .base import BaseForm


@dataclass(frozen=True)
class ProjectInput:
    title: str
    description: Optional[str] = None
    is_public: bool = True
    status: str = "active"
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


@dataclass(frozen=True)
class TaskInput:
    project_id: int
    title: str
    description: Optional[str] = None
    template_url: Optional[str] = None
    status: str = "pending"
    priority: str = "medium"
    assignee_id: Optional[int] = None


@dataclass(frozen=True)
class TaskUpdateInput:
    """Partial update; ``fields`` holds only what the caller sent."""

    fields: dict


class ProjectForm(BaseForm[ProjectInput]):
    FIELDS = ("title", "description", "is_public", "status", "start_date", "end_date")

    def clean(self) -> ProjectInput:
        title = self._text(
            "title", required=True, min_length=5, max_length=200, label="Project title"
        )
        description = self._text("description", max_length=2000)
        is_public = self._bool("is_public", default=True)
        status = self._choice("status", PROJECT_STATUSES, default="active") or "active"
        start = self._datetime("start_date")
        end = self._datetime("end_date")
        if start and end and not _after(end, start):
            self._add_error("end_date", "End date must be after start date.")
        return ProjectInput(
            title=title or "",
            description=description,
            is_public=is_public,
            status=status,
            start_date=start,
            end_date=end,
        )


class TaskForm(BaseForm[TaskInput]):
    FIELDS = (
        "project_id",
        "title",
        "description",
        "template_url",
        "status",
        "priority",
        "assignee_id",
    )

    def clean(self) -> TaskInput:
        project_id = self._int("project_id", required=True, positive=True, label="Project ID")
        title = self._text("title", required=True, min_length=3, max_length=200, label="Task title")
        description = self._text("description", max_length=2000)
        template_url = self._url("template_url")
        status = self._choice("status", TASK_STATUSES, default="pending") or "pending"
        priority = self._choice("priority", TASK_PRIORITIES, default="medium") or "medium"
        assignee_id = self._int("assignee_id", positive=True, label="Assignee ID")
        if status == "completed" and not (description or template_url):
            self._add_error(
                "description",
                "Completed tasks must have a description or template URL for documentation.",
            )
        return TaskInput(
            project_id=project_id or 0,
            title=title or "",
            description=description,
            template_url=template_url,
            status=status,
            priority=priority,
            assignee_id=assignee_id,
        )


class TaskUpdateForm(BaseForm[TaskUpdateInput]):
    FIELDS = ("title", "description", "template_url", "status", "priority", "assignee_id")

    def clean(self) -> TaskUpdateInput:
        fields: dict[str, object] = {}
        if "title" in self.raw_data:
            fields["title"] = self._text(
                "title", required=True, min_length=3, max_length=200, label="Task title"
            )
        if "description" in self.raw_data:
            fields["description"] = self._text("description", max_length=2000)
        if "template_url" in self.raw_data:
            fields["template_url"] = self._url("template_url")
        if "status" in self.raw_data:
            fields["status"] = self._choice("status", TASK_STATUSES)
            if fields["status"] is None and "status" not in self.errors:
                self._add_error("status", "Status cannot be empty.")
        if "priority" in self.raw_data:
            fields["priority"] = self._choice("priority", TASK_PRIORITIES)
            if fields["priority"] is None and "priority" not in self.errors:
                self._add_error("priority", "Priority cannot be empty.")
        if "assignee_id" in self.raw_data:
            fields["assignee_id"] = self._int("assignee_id", positive=True, label="Assignee ID")
        if not fields:
            self._add_error("title", "Nothing to update.")
        return TaskUpdateInput(fields=fields)


def _after(end: datetime, start: datetime) -> bool:
    # Mixed naive/aware inputs compare on wall-clock values.
    if (end.tzinfo is None) != (start.tzinfo is None):
        return end.replace(tzinfo=None) > start.replace(tzinfo=None)
    return end > start
