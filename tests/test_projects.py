"""Projects, tasks and shared templates."""

from __future__ import annotations

import pytest

from ledger.errors import (
    AccountNotFound,
    NotClaimOwner,
    PermissionDenied,
    ProjectNotFound,
    TaskNotFound,
    ValidationFailed,
)
from ledger.forms.projects import ProjectInput, TaskInput
from ledger.services import projects as project_service


@pytest.fixture
def project(org_a, session_factory):
    return project_service.create_project(
        identity=org_a,
        data=ProjectInput(title="Community Garden", description="Weekend planting"),
        session_factory=session_factory,
    )


def _task(identity, project, session_factory, **overrides):
    values = {"project_id": project.id, "title": "Plant seeds"}
    values.update(overrides)
    return project_service.create_task(
        identity=identity, data=TaskInput(**values), session_factory=session_factory
    )


def test_create_project(project, org_a):
    assert project.owner_id == org_a.account_id
    assert project.is_public is True
    assert project.status == "active"


def test_plain_users_cannot_publish_projects(rater, session_factory):
    with pytest.raises(PermissionDenied):
        project_service.create_project(
            identity=rater, data=ProjectInput(title="My project"), session_factory=session_factory
        )


def test_list_projects_shows_public_and_own(org_a, org_b, project, session_factory, project_repo):
    private = project_service.create_project(
        identity=org_b,
        data=ProjectInput(title="Internal planning", is_public=False),
        session_factory=session_factory,
    )

    anonymous = project_service.list_projects(project_repo)
    assert [p.id for p in anonymous] == [project.id]

    as_owner = project_service.list_projects(project_repo, org_b)
    assert {p.id for p in as_owner} == {project.id, private.id}

    assert private.id not in {p.id for p in project_service.list_projects(project_repo, org_a)}


def test_tasks_and_templates(org_a, project, session_factory, project_repo):
    plain = _task(org_a, project, session_factory)
    template = _task(
        org_a,
        project,
        session_factory,
        title="Volunteer sign-up sheet",
        template_url="https://example.org/templates/signup",
    )

    tasks = project_service.list_tasks(project_repo, project_id=project.id)
    assert {t.id for t in tasks} == {plain.id, template.id}

    templates = project_service.list_templates(project_repo)
    assert [t.id for t in templates] == [template.id]

    without = project_service.list_tasks(project_repo, has_template=False)
    assert [t.id for t in without] == [plain.id]


def test_private_project_tasks_are_not_templates(org_b, session_factory, project_repo):
    private = project_service.create_project(
        identity=org_b,
        data=ProjectInput(title="Internal planning", is_public=False),
        session_factory=session_factory,
    )
    _task(org_b, private, session_factory, template_url="https://example.org/t")

    assert project_service.list_templates(project_repo) == []


def test_only_project_owner_adds_tasks(org_b, project, session_factory):
    with pytest.raises(NotClaimOwner):
        _task(org_b, project, session_factory)


def test_task_assignee_must_exist(org_a, project, session_factory):
    with pytest.raises(AccountNotFound):
        _task(org_a, project, session_factory, assignee_id=999)


def test_update_task_by_assignee(org_a, rater, org_b, project, session_factory):
    task = _task(org_a, project, session_factory, assignee_id=rater.account_id)

    updated = project_service.update_task(
        identity=rater,
        task_id=task.id,
        fields={"status": "in-progress"},
        session_factory=session_factory,
    )
    assert updated.status == "in-progress"

    with pytest.raises(NotClaimOwner):
        project_service.update_task(
            identity=org_b,
            task_id=task.id,
            fields={"status": "blocked"},
            session_factory=session_factory,
        )


def test_completed_task_needs_documentation(org_a, project, session_factory):
    task = _task(org_a, project, session_factory)

    with pytest.raises(ValidationFailed):
        project_service.update_task(
            identity=org_a,
            task_id=task.id,
            fields={"status": "completed"},
            session_factory=session_factory,
        )

    done = project_service.update_task(
        identity=org_a,
        task_id=task.id,
        fields={"status": "completed", "description": "Planted 40 seedlings"},
        session_factory=session_factory,
    )
    assert done.status == "completed"


def test_archive_project_archives_tasks(org_a, org_b, project, session_factory, project_repo):
    task = _task(org_a, project, session_factory)

    with pytest.raises(NotClaimOwner):
        project_service.archive_project(
            identity=org_b, project_id=project.id, session_factory=session_factory
        )

    archived = project_service.archive_project(
        identity=org_a, project_id=project.id, session_factory=session_factory
    )
    assert archived.is_active is False
    assert archived.status == "archived"
    assert project_service.list_tasks(project_repo, project_id=project.id) == []
    with pytest.raises(ProjectNotFound):
        project_service.get_project(project_repo, project.id)
    with pytest.raises(TaskNotFound):
        project_service.archive_task(identity=org_a, task_id=task.id, session_factory=session_factory)


def test_archive_task(org_a, project, session_factory, project_repo):
    task = _task(org_a, project, session_factory)

    project_service.archive_task(identity=org_a, task_id=task.id, session_factory=session_factory)

    assert project_repo.get_task(task.id) is None
