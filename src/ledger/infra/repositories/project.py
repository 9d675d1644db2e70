"""SQLModel implementation of the project repository."""

from __future__ import annotations

from typing import Callable, ContextManager, Optional

from sqlalchemy import or_
from sqlmodel import Session, col, select

from ...domain.repositories.project import TaskFilter
from ...models.project import Project, Task


class SQLModelProjectRepository:
    """SQLModel-based project and task repository implementation."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_project(self, project_id: int) -> Optional[Project]:
        """Retrieve an active project by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Project).where(Project.id == project_id, Project.active())
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_projects(self, *, viewer_id: Optional[int] = None) -> list[Project]:
        """Active public projects plus the viewer's own."""
        statement = select(Project).where(Project.active())
        if viewer_id is None:
            statement = statement.where(Project.is_public == True)  # noqa: E712
        else:
            statement = statement.where(
                or_(Project.is_public == True, Project.owner_id == viewer_id)  # noqa: E712
            )
        statement = statement.order_by(col(Project.created_at).desc(), col(Project.id).desc())
        with self.session_factory() as session:
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def get_task(self, task_id: int) -> Optional[Task]:
        """Retrieve an active task by ID."""
        with self.session_factory() as session:
            obj = session.exec(select(Task).where(Task.id == task_id, Task.active())).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_tasks(self, filters: TaskFilter | None = None) -> list[Task]:
        """Active tasks matching the filters, newest first."""
        filters = filters or TaskFilter()
        statement = (
            select(Task)
            .join(Project, Project.id == Task.project_id)
            .where(Task.active(), Project.active())
        )
        if filters.project_id is not None:
            statement = statement.where(Task.project_id == filters.project_id)
        if filters.status:
            statement = statement.where(Task.status == filters.status)
        if filters.has_template is True:
            statement = statement.where(col(Task.template_url).is_not(None))
        elif filters.has_template is False:
            statement = statement.where(col(Task.template_url).is_(None))
        if filters.public_only:
            statement = statement.where(Project.is_public == True)  # noqa: E712
        statement = statement.order_by(col(Task.created_at).desc(), col(Task.id).desc())
        with self.session_factory() as session:
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows
