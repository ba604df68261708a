"""Entities — domain shapes for workspaces, projects, tasks and their embedded children.

Invariants:
    - Field names are snake_case in Python, camelCase on the wire (alias_generator)
    - Milestones live only inside Project.milestones, Subtasks only inside Task.subtasks
    - *_revision counters are read-only for callers; only the store advances them
    - Drafts/patches reject unknown and read-only fields (extra="forbid")
    - Patch.changes() returns typed values for the fields the caller actually sent
    - Milestone dates are UTC-aware: naive input is read as UTC, other offsets are
      converted, so milestones always compare and sort

Design Decisions:
    - pydantic models over dataclasses: validation at the store boundary and
      JSON serialization for the HTTP adapter from one definition
    - Entities are treated as immutable by the store (model_copy(update=...)),
      so snapshots handed to consumers never change underneath them
"""

from datetime import datetime, timezone
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from worksync.core.domain_types import (
    DEFAULT_COLOR, MAX_PROGRESS, MIN_PROGRESS,
    ActorRole, ProjectStatus, TaskPriority, TaskStatus, TimelineStatus,
)


class DomainModel(BaseModel):
    """Base for every domain shape: camelCase aliases, snake_case population."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _utc_aware(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _strip_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("title cannot be empty or whitespace")
    return v


# ─── Entities ────────────────────────────────────────────────────

class Actor(DomainModel):
    """Current actor identity, supplied by the authentication flow."""
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    email: str = ""
    role: ActorRole = ActorRole.MEMBER


class Workspace(DomainModel):
    id: str
    name: str
    color: str = DEFAULT_COLOR


class Subtask(DomainModel):
    id: str
    title: str
    completed: bool = False


class Milestone(DomainModel):
    id: str
    title: str
    date: datetime
    completed: bool = False

    @field_validator("date")
    @classmethod
    def date_as_utc(cls, v: datetime) -> datetime:
        return _utc_aware(v)


class Task(DomainModel):
    id: str
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee_id: str | None = None
    due_date: datetime | None = None
    created_at: datetime
    tags: list[str] = Field(default_factory=list)
    subtasks: list[Subtask] = Field(default_factory=list)
    project_id: str
    subtasks_revision: int = 0


class Project(DomainModel):
    id: str
    name: str
    description: str = ""
    created_at: datetime
    due_date: datetime | None = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    progress: int = Field(default=0, ge=MIN_PROGRESS, le=MAX_PROGRESS)
    members: list[str] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
    workspace: str
    favorite: bool = False
    color: str = DEFAULT_COLOR
    tags: list[str] = Field(default_factory=list)
    milestones: list[Milestone] = Field(default_factory=list)
    milestones_revision: int = 0


class Activity(DomainModel):
    """Append-only audit record. Never mutated once read."""
    id: str
    user_id: str
    action: str
    entity_type: str
    entity_id: str
    entity_name: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


# ─── Read models ─────────────────────────────────────────────────

class TimelineMilestone(Milestone):
    timeline_status: TimelineStatus


class ProjectTimeline(DomainModel):
    """A project's milestones by date, with completion shares for the progress bars."""
    project_id: str
    milestone_progress: int = Field(ge=MIN_PROGRESS, le=MAX_PROGRESS)
    subtask_progress: int = Field(ge=MIN_PROGRESS, le=MAX_PROGRESS)
    milestones: list[TimelineMilestone] = Field(default_factory=list)


# ─── Drafts (create input) ───────────────────────────────────────

class _InputModel(DomainModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid",
    )


class ProjectDraft(_InputModel):
    name: str = Field(default="New Project", min_length=1)
    description: str = ""
    due_date: datetime | None = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    progress: int = Field(default=0, ge=MIN_PROGRESS, le=MAX_PROGRESS)
    members: list[str] = Field(default_factory=list)
    workspace: str | None = None
    favorite: bool = False
    color: str = DEFAULT_COLOR
    tags: list[str] = Field(default_factory=list)
    milestones: list[Milestone] = Field(default_factory=list)


class TaskDraft(_InputModel):
    project_id: str = Field(min_length=1)
    title: str = Field(default="New Task", min_length=1)
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee_id: str | None = None
    due_date: datetime | None = None
    tags: list[str] = Field(default_factory=list)
    subtasks: list[Subtask] = Field(default_factory=list)


class MilestoneDraft(_InputModel):
    title: str
    date: datetime = Field(default_factory=_utc_now)
    completed: bool = False

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_title(v)

    @field_validator("date")
    @classmethod
    def date_as_utc(cls, v: datetime) -> datetime:
        return _utc_aware(v)


class SubtaskDraft(_InputModel):
    title: str
    completed: bool = False

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_title(v)


# ─── Patches (partial update input) ──────────────────────────────

class _PatchModel(_InputModel):
    """Every field optional; only fields the caller sent are applied.

    NULLABLE lists fields that may legitimately be cleared with None.
    """
    NULLABLE: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_for_required(self):
        bad = sorted(
            name for name in self.model_fields_set
            if getattr(self, name) is None and name not in self.NULLABLE
        )
        if bad:
            raise ValueError(f"fields cannot be null: {', '.join(bad)}")
        return self

    def changes(self) -> dict[str, Any]:
        """Typed values for the fields present in the input."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class ProjectPatch(_PatchModel):
    NULLABLE: ClassVar[frozenset[str]] = frozenset({"due_date"})

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    due_date: datetime | None = None
    status: ProjectStatus | None = None
    progress: int | None = Field(default=None, ge=MIN_PROGRESS, le=MAX_PROGRESS)
    members: list[str] | None = None
    workspace: str | None = None
    favorite: bool | None = None
    color: str | None = None
    tags: list[str] | None = None
    milestones: list[Milestone] | None = None


class TaskPatch(_PatchModel):
    NULLABLE: ClassVar[frozenset[str]] = frozenset({"assignee_id", "due_date"})

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assignee_id: str | None = None
    due_date: datetime | None = None
    tags: list[str] | None = None
    subtasks: list[Subtask] | None = None
    project_id: str | None = Field(default=None, min_length=1)


class MilestonePatch(_PatchModel):
    title: str | None = Field(default=None, min_length=1)
    date: datetime | None = None
    completed: bool | None = None

    @field_validator("date")
    @classmethod
    def date_as_utc(cls, v: datetime | None) -> datetime | None:
        return _utc_aware(v)


class SubtaskPatch(_PatchModel):
    title: str | None = Field(default=None, min_length=1)
    completed: bool | None = None
