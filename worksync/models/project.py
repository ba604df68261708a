"""Project ORM — a project row with its milestones embedded as JSON.

Invariants:
    - workspace_id references workspaces.id; deleting the workspace deletes its projects
    - milestones is a JSON array of {id, title, date, completed}, rewritten wholesale
    - milestones_revision increases by one on every milestones write

Design Decisions:
    - members/tags as JSON arrays: portable between PostgreSQL and SQLite test DB
    - Tasks are NOT embedded: they live in the tasks table (FK with cascade)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from worksync.db.base import Base
from worksync.core.domain_types import DEFAULT_COLOR, ProjectStatus


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ProjectStatus.ACTIVE.value,
    )
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    members: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    workspace_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    color: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DEFAULT_COLOR,
    )
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    milestones: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    milestones_revision: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
