"""Projects and the reusable task templates published under them."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship

from .lifecycle import Lifecycle, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .account import Account

PROJECT_STATUSES = ("active", "completed", "archived", "paused")
TASK_STATUSES = ("pending", "in-progress", "completed", "blocked")
TASK_PRIORITIES = ("low", "medium", "high", "urgent")


class Project(Lifecycle, table=True):
    """A body of work an account publishes, visible across organizations when public."""

    __tablename__: ClassVar[str] = "project"

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="account.id", nullable=False, index=True)
    title: str = Field(nullable=False, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    is_public: bool = Field(default=True, nullable=False)
    status: str = Field(default="active", nullable=False, max_length=16)
    start_date: Optional[datetime] = Field(default=None)
    end_date: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)

    owner: "Account" = Relationship(sa_relationship=relationship("Account"))
    tasks: list["Task"] = Relationship(
        back_populates="project",
        sa_relationship=relationship("Task", back_populates="project"),
    )


class Task(Lifecycle, table=True):
    """Unit of work; a task with a template URL doubles as a reusable template."""

    __tablename__: ClassVar[str] = "task"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", nullable=False, index=True)
    assignee_id: Optional[int] = Field(default=None, foreign_key="account.id", index=True)
    title: str = Field(nullable=False, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    template_url: Optional[str] = Field(default=None, max_length=500)
    status: str = Field(default="pending", nullable=False, max_length=16, index=True)
    priority: str = Field(default="medium", nullable=False, max_length=16)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)

    project: "Project" = Relationship(
        sa_relationship=relationship("Project", back_populates="tasks")
    )
    assignee: Optional["Account"] = Relationship(sa_relationship=relationship("Account"))
