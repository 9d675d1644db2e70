"""Project, task and template routes."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import ValidationFailed
from ...forms.projects import ProjectForm, TaskForm, TaskUpdateForm
from ...models.project import TASK_STATUSES
from ...services import projects as project_service
from ..common import bind, created, current_identity, get_context, optional_identity
from ..serializers import project_to_dict, task_to_dict
from . import bp


def _flag(name: str):
    value = request.args.get(name)
    if value is None:
        return None
    return value.strip().lower() in {"1", "true", "yes", "on"}


@bp.get("/projects")
def list_projects():
    projects = project_service.list_projects(get_context().project_repo, optional_identity())
    return jsonify({"projects": [project_to_dict(p) for p in projects]})


@bp.post("/projects")
def create_project():
    identity = current_identity()
    data = bind(ProjectForm)
    project = project_service.create_project(
        identity=identity, data=data, session_factory=get_context().session_factory
    )
    return created({"project": project_to_dict(project)})


@bp.get("/projects/<int:project_id>")
def project_detail(project_id: int):
    ctx = get_context()
    project = project_service.get_project(ctx.project_repo, project_id)
    tasks = project_service.list_tasks(ctx.project_repo, project_id=project_id)
    payload = project_to_dict(project)
    payload["tasks"] = [task_to_dict(t) for t in tasks]
    return jsonify({"project": payload})


@bp.delete("/projects/<int:project_id>")
def archive_project(project_id: int):
    identity = current_identity()
    project = project_service.archive_project(
        identity=identity, project_id=project_id, session_factory=get_context().session_factory
    )
    return jsonify({"project": project_to_dict(project)})


@bp.get("/tasks")
def list_tasks():
    status = (request.args.get("status") or "").strip().lower() or None
    if status is not None and status not in TASK_STATUSES:
        raise ValidationFailed({"status": [f"Must be one of: {', '.join(TASK_STATUSES)}."]})
    tasks = project_service.list_tasks(
        get_context().project_repo,
        project_id=request.args.get("project_id", type=int),
        status=status,
        has_template=_flag("has_template"),
    )
    return jsonify({"tasks": [task_to_dict(t) for t in tasks]})


@bp.post("/tasks")
def create_task():
    identity = current_identity()
    data = bind(TaskForm)
    task = project_service.create_task(
        identity=identity, data=data, session_factory=get_context().session_factory
    )
    return created({"task": task_to_dict(task)})


@bp.patch("/tasks/<int:task_id>")
def update_task(task_id: int):
    identity = current_identity()
    data = bind(TaskUpdateForm)
    task = project_service.update_task(
        identity=identity,
        task_id=task_id,
        fields=data.fields,
        session_factory=get_context().session_factory,
    )
    return jsonify({"task": task_to_dict(task)})


@bp.delete("/tasks/<int:task_id>")
def archive_task(task_id: int):
    identity = current_identity()
    task = project_service.archive_task(
        identity=identity, task_id=task_id, session_factory=get_context().session_factory
    )
    return jsonify({"task": task_to_dict(task)})


@bp.get("/templates")
def templates():
    """Reusable task templates published in public projects."""

    tasks = project_service.list_templates(get_context().project_repo)
    return jsonify({"templates": [task_to_dict(t) for t in tasks]})
