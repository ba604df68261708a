"""Workspace ORM — top-level grouping owned by one actor.

Invariants:
    - id is a UUID string issued by the remote store (python-side default)
    - owner_id is the actor identity from the auth flow (opaque string)

Design Decisions:
    - owner_id is storage-only: the domain Workspace never exposes it
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from worksync.db.base import Base
from worksync.core.domain_types import DEFAULT_COLOR


class Workspace(Base):
    __tablename__ = "workspaces"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    color: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DEFAULT_COLOR,
    )
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
