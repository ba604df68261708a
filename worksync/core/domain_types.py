"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - WorkspaceId, ProjectId, TaskId, ... wrap str ids — remote store issues them
    - Project progress is bounded 0–100
    - All valid states encoded as Enums — no raw string matching
    - Enum values match the storage values exactly (camelCase where the UI expects it)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and to DB columns without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ActorId = NewType("ActorId", str)
WorkspaceId = NewType("WorkspaceId", str)
ProjectId = NewType("ProjectId", str)
TaskId = NewType("TaskId", str)
MilestoneId = NewType("MilestoneId", str)
SubtaskId = NewType("SubtaskId", str)
ActivityId = NewType("ActivityId", str)


# ─── Constants ───────────────────────────────────────────────────

DEFAULT_COLOR = "#4f46e5"
DEFAULT_ACTIVITY_FEED_LIMIT = 20
UPCOMING_MILESTONE_DAYS = 7
MIN_PROGRESS = 0
MAX_PROGRESS = 100


# ─── Enums ───────────────────────────────────────────────────────

class ProjectStatus(str, Enum):
    """Project lifecycle states — maps to projects.status."""
    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "onHold"


class TaskStatus(str, Enum):
    """Board columns — maps to tasks.status."""
    BACKLOG = "backlog"
    TODO = "todo"
    IN_PROGRESS = "inProgress"
    IN_REVIEW = "inReview"
    DONE = "done"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ActorRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"


class EntityType(str, Enum):
    """Entity names recorded in activities.entity_type."""
    WORKSPACE = "workspace"
    PROJECT = "project"
    TASK = "task"


class ActivityVerb(str, Enum):
    """Verbs prefixed to the entity type in activities.action."""
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    COMPLETED = "completed"
    FAVORITED = "favorited"
    UNFAVORITED = "unfavorited"


class TimelineStatus(str, Enum):
    """Milestone position relative to now."""
    PAST = "past"
    UPCOMING = "upcoming"
    FUTURE = "future"


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
