"""Project and task repository protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ...models.project import Project, Task


@dataclass(frozen=True)
class TaskFilter:
    """Filters applied to task listings."""

    project_id: Optional[int] = None
    status: Optional[str] = None
    has_template: Optional[bool] = None
    public_only: bool = False


class ProjectRepository(Protocol):
    """Read access to projects and their tasks."""

    def get_project(self, project_id: int) -> Optional[Project]:
        """Retrieve an active project by ID."""
        ...

    def list_projects(self, *, viewer_id: Optional[int] = None) -> list[Project]:
        """Active public projects plus the viewer's own."""
        ...

    def get_task(self, task_id: int) -> Optional[Task]:
        """Retrieve an active task by ID."""
        ...

    def list_tasks(self, filters: TaskFilter | None = None) -> list[Task]:
        """Active tasks matching the filters, newest first."""
        ...
