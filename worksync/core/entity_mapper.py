"""Entity Mapper — the only place domain fields are translated to storage columns.

Invariants:
    - Every domain field is either in *_COLUMNS or in *_DROPPED (totality)
    - *_to_storage maps only the keys it is given (partial rows for partial updates)
    - *_to_domain applies defaults for NULL/missing columns so the store never
      special-cases missing data
    - Embedded collections are serialized as plain JSON lists of dicts
    - Pure functions: no IO, no clock, no ids

Design Decisions:
    - Explicit column maps over reflection: a new domain field fails the totality
      test until someone decides where it is stored
    - Storage-only columns (owner_id) never appear in the maps; the store adds them
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Mapping

from pydantic import BaseModel

from worksync.core.domain_types import (
    DEFAULT_COLOR, ProjectStatus, TaskPriority, TaskStatus,
)
from worksync.core.entities import (
    Activity, Milestone, Project, Subtask, Task, Workspace,
)
from worksync.core.errors import EntityValidationError


# ─── Column maps (domain field -> storage column) ────────────────

WORKSPACE_COLUMNS: dict[str, str] = {
    "id": "id",
    "name": "name",
    "color": "color",
}
WORKSPACE_DROPPED: frozenset[str] = frozenset()

PROJECT_COLUMNS: dict[str, str] = {
    "id": "id",
    "name": "name",
    "description": "description",
    "created_at": "created_at",
    "due_date": "due_date",
    "status": "status",
    "progress": "progress",
    "members": "members",
    "workspace": "workspace_id",
    "favorite": "favorite",
    "color": "color",
    "tags": "tags",
    "milestones": "milestones",
    "milestones_revision": "milestones_revision",
}
# Tasks are rows of their own table, joined back by project_id.
PROJECT_DROPPED: frozenset[str] = frozenset({"tasks"})

TASK_COLUMNS: dict[str, str] = {
    "id": "id",
    "title": "title",
    "description": "description",
    "status": "status",
    "priority": "priority",
    "assignee_id": "assignee_id",
    "due_date": "due_date",
    "created_at": "created_at",
    "tags": "tags",
    "subtasks": "subtasks",
    "project_id": "project_id",
    "subtasks_revision": "subtasks_revision",
}
TASK_DROPPED: frozenset[str] = frozenset()

ACTIVITY_COLUMNS: dict[str, str] = {
    "id": "id",
    "user_id": "user_id",
    "action": "action",
    "entity_type": "entity_type",
    "entity_id": "entity_id",
    "entity_name": "entity_name",
    "metadata": "metadata",
    "created_at": "created_at",
}
ACTIVITY_DROPPED: frozenset[str] = frozenset()


# ─── Value conversion ────────────────────────────────────────────

def _to_column_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (list, tuple)):
        return [_to_column_value(v) for v in value]
    return value


def _as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; the domain is always UTC-aware."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _str_or_none(value: Any) -> str | None:
    return None if value is None else str(value)


def _map_fields(
    fields: Mapping[str, Any], columns: dict[str, str],
    dropped: frozenset[str], entity: str,
) -> dict[str, Any]:
    unknown = sorted(set(fields) - set(columns) - dropped)
    if unknown:
        raise EntityValidationError(
            f"Unknown {entity} field(s): {', '.join(unknown)}", unknown,
        )
    return {
        columns[name]: _to_column_value(value)
        for name, value in fields.items()
        if name in columns
    }


# ─── Workspace ───────────────────────────────────────────────────

def workspace_to_storage(fields: Mapping[str, Any]) -> dict[str, Any]:
    return _map_fields(fields, WORKSPACE_COLUMNS, WORKSPACE_DROPPED, "workspace")


def workspace_to_domain(row: Mapping[str, Any]) -> Workspace:
    return Workspace(
        id=str(row["id"]),
        name=row.get("name") or "",
        color=row.get("color") or DEFAULT_COLOR,
    )


# ─── Project ─────────────────────────────────────────────────────

def project_to_storage(fields: Mapping[str, Any]) -> dict[str, Any]:
    return _map_fields(fields, PROJECT_COLUMNS, PROJECT_DROPPED, "project")


def project_to_domain(
    row: Mapping[str, Any], tasks: Iterable[Task] = (),
) -> Project:
    return Project(
        id=str(row["id"]),
        name=row.get("name") or "",
        description=row.get("description") or "",
        created_at=_as_utc(row["created_at"]),
        due_date=_as_utc(row.get("due_date")),
        status=row.get("status") or ProjectStatus.ACTIVE,
        progress=row.get("progress") or 0,
        members=list(row.get("members") or []),
        tasks=list(tasks),
        workspace=str(row["workspace_id"]),
        favorite=bool(row.get("favorite")),
        color=row.get("color") or DEFAULT_COLOR,
        tags=list(row.get("tags") or []),
        milestones=[
            Milestone.model_validate(m) for m in row.get("milestones") or []
        ],
        milestones_revision=row.get("milestones_revision") or 0,
    )


# ─── Task ────────────────────────────────────────────────────────

def task_to_storage(fields: Mapping[str, Any]) -> dict[str, Any]:
    return _map_fields(fields, TASK_COLUMNS, TASK_DROPPED, "task")


def task_to_domain(row: Mapping[str, Any]) -> Task:
    return Task(
        id=str(row["id"]),
        title=row.get("title") or "",
        description=row.get("description") or "",
        status=row.get("status") or TaskStatus.TODO,
        priority=row.get("priority") or TaskPriority.MEDIUM,
        assignee_id=_str_or_none(row.get("assignee_id")),
        due_date=_as_utc(row.get("due_date")),
        created_at=_as_utc(row["created_at"]),
        tags=list(row.get("tags") or []),
        subtasks=[
            Subtask.model_validate(s) for s in row.get("subtasks") or []
        ],
        project_id=str(row["project_id"]),
        subtasks_revision=row.get("subtasks_revision") or 0,
    )


# ─── Activity ────────────────────────────────────────────────────

def activity_to_storage(fields: Mapping[str, Any]) -> dict[str, Any]:
    return _map_fields(fields, ACTIVITY_COLUMNS, ACTIVITY_DROPPED, "activity")


def activity_to_domain(row: Mapping[str, Any]) -> Activity:
    return Activity(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        action=row["action"],
        entity_type=row["entity_type"],
        entity_id=str(row["entity_id"]),
        entity_name=row.get("entity_name"),
        metadata=dict(row.get("metadata") or {}),
        created_at=_as_utc(row["created_at"]),
    )
