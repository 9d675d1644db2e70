"""Projects and the reusable task templates organizations share."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from sqlmodel import select

from ..domain.repositories.project import ProjectRepository, TaskFilter
from ..errors import (
    AccountNotFound,
    NotClaimOwner,
    PermissionDenied,
    ProjectNotFound,
    TaskNotFound,
    ValidationFailed,
)
from ..forms.projects import ProjectInput, TaskInput
from ..identity import Identity
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.account import ROLE_USER, Account
from ..models.lifecycle import utcnow
from ..models.project import Project, Task

logger = get_logger(__name__)

_TASK_FIELDS = {"title", "description", "template_url", "status", "priority", "assignee_id"}


def _can_manage(identity: Identity, project: Project) -> bool:
    return project.owner_id == identity.account_id or identity.is_admin


def _check_assignee(session, assignee_id: Optional[int]) -> None:
    if assignee_id is None:
        return
    assignee = session.get(Account, assignee_id)
    if assignee is None or not assignee.is_active:
        raise AccountNotFound(f"Assignee {assignee_id} not found")


def create_project(
    *, identity: Identity, data: ProjectInput, session_factory: SessionFactory
) -> Project:
    """Publish a project owned by the caller."""

    if identity.role == ROLE_USER:
        raise PermissionDenied("Only organizations can publish projects")
    with session_factory() as session:
        project = Project(
            owner_id=identity.account_id,
            title=data.title,
            description=data.description,
            is_public=data.is_public,
            status=data.status,
            start_date=data.start_date,
            end_date=data.end_date,
        )
        session.add(project)
        session.commit()
        session.refresh(project)
        session.expunge(project)

    logger.info("Project created", extra={"project_id": project.id, "owner_id": project.owner_id})
    return project


def list_projects(repo: ProjectRepository, identity: Optional[Identity] = None) -> list[Project]:
    """Public projects plus any the caller owns."""

    return repo.list_projects(viewer_id=identity.account_id if identity else None)


def get_project(repo: ProjectRepository, project_id: int) -> Project:
    project = repo.get_project(project_id)
    if project is None:
        raise ProjectNotFound(f"Project {project_id} not found")
    return project


def archive_project(
    *, identity: Identity, project_id: int, session_factory: SessionFactory
) -> Project:
    """Logically delete a project together with its tasks."""

    at = utcnow()
    with session_factory() as session:
        project = session.get(Project, project_id)
        if project is None or not project.is_active:
            raise ProjectNotFound(f"Project {project_id} not found")
        if not _can_manage(identity, project):
            raise NotClaimOwner("You can only archive your own projects")
        project.deactivate(at=at)
        project.status = "archived"
        session.add(project)
        tasks = session.exec(
            select(Task).where(Task.project_id == project_id, Task.active())
        ).all()
        for task in tasks:
            task.deactivate(at=at)
            session.add(task)
        session.commit()
        session.refresh(project)
        session.expunge(project)

    logger.info(
        "Project archived",
        extra={"project_id": project_id, "tasks_archived": len(tasks)},
    )
    return project


def create_task(
    *, identity: Identity, data: TaskInput, session_factory: SessionFactory
) -> Task:
    """Add a task to a project the caller manages."""

    with session_factory() as session:
        project = session.get(Project, data.project_id)
        if project is None or not project.is_active:
            raise ProjectNotFound(f"Project {data.project_id} not found")
        if not _can_manage(identity, project):
            raise NotClaimOwner("You can only add tasks to your own projects")
        _check_assignee(session, data.assignee_id)
        task = Task(
            project_id=data.project_id,
            assignee_id=data.assignee_id,
            title=data.title,
            description=data.description,
            template_url=data.template_url,
            status=data.status,
            priority=data.priority,
        )
        session.add(task)
        session.commit()
        session.refresh(task)
        session.expunge(task)

    logger.info("Task created", extra={"task_id": task.id, "project_id": task.project_id})
    return task


def update_task(
    *,
    identity: Identity,
    task_id: int,
    fields: Mapping[str, Any],
    session_factory: SessionFactory,
) -> Task:
    """Apply a partial update; the project owner or the assignee may edit."""

    unknown = set(fields) - _TASK_FIELDS
    if unknown:
        raise ValidationFailed({name: ["Field cannot be changed."] for name in sorted(unknown)})

    with session_factory() as session:
        task = session.get(Task, task_id)
        if task is None or not task.is_active:
            raise TaskNotFound(f"Task {task_id} not found")
        project = session.get(Project, task.project_id)
        if project is None or not project.is_active:
            raise TaskNotFound(f"Task {task_id} not found")
        if not _can_manage(identity, project) and task.assignee_id != identity.account_id:
            raise NotClaimOwner("You can only edit tasks you own or are assigned to")
        if "assignee_id" in fields:
            _check_assignee(session, fields["assignee_id"])

        for name, value in fields.items():
            setattr(task, name, value)
        if task.status == "completed" and not (task.description or task.template_url):
            raise ValidationFailed(
                {
                    "description": [
                        "Completed tasks must have a description or template URL for documentation."
                    ]
                }
            )
        session.add(task)
        session.commit()
        session.refresh(task)
        session.expunge(task)

    logger.info("Task updated", extra={"task_id": task_id, "fields": sorted(fields)})
    return task


def archive_task(*, identity: Identity, task_id: int, session_factory: SessionFactory) -> Task:
    with session_factory() as session:
        task = session.get(Task, task_id)
        if task is None or not task.is_active:
            raise TaskNotFound(f"Task {task_id} not found")
        project = session.get(Project, task.project_id)
        if project is None or not _can_manage(identity, project):
            raise NotClaimOwner("You can only archive tasks in your own projects")
        task.deactivate()
        session.add(task)
        session.commit()
        session.refresh(task)
        session.expunge(task)

    logger.info("Task archived", extra={"task_id": task_id})
    return task


def list_tasks(
    repo: ProjectRepository,
    *,
    project_id: Optional[int] = None,
    status: Optional[str] = None,
    has_template: Optional[bool] = None,
) -> list[Task]:
    return repo.list_tasks(
        TaskFilter(project_id=project_id, status=status, has_template=has_template)
    )


def list_templates(repo: ProjectRepository) -> list[Task]:
    """Active tasks with a template URL in public projects."""

    return repo.list_tasks(TaskFilter(has_template=True, public_only=True))


__all__ = [
    "archive_project",
    "archive_task",
    "create_project",
    "create_task",
    "get_project",
    "list_projects",
    "list_tasks",
    "list_templates",
    "update_task",
]
