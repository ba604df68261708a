"""Embedded Collections — pure edits and read helpers for milestone and subtask arrays.

Invariants:
    - Every edit returns a NEW list; the input list and its items are never mutated
    - Item order is preserved by merge/remove/toggle; append adds at the end
    - completion_percentage is 0 for an empty collection, otherwise rounded 0–100
    - project_timeline is derived from the project alone; it never reads the clock

Design Decisions:
    - Generic over Milestone and Subtask: both are {id, ..., completed} records
      rewritten wholesale on their parent row
    - Lookup misses return None rather than raising: the store decides which
      error (and which entity name) to report
"""

from datetime import datetime, timedelta
from typing import Any, Iterable, Sequence, TypeVar

from worksync.core.domain_types import UPCOMING_MILESTONE_DAYS, TimelineStatus
from worksync.core.entities import (
    Milestone, Project, ProjectTimeline, Subtask, TimelineMilestone,
)

Item = TypeVar("Item", Milestone, Subtask)


def find_item(items: Iterable[Item], item_id: str) -> Item | None:
    return next((i for i in items if i.id == item_id), None)


def append_item(items: Sequence[Item], item: Item) -> list[Item]:
    return [*items, item]


def merge_item(
    items: Sequence[Item], item_id: str, changes: dict[str, Any],
) -> list[Item]:
    """Field-level merge of changes into the matching item."""
    return [
        i.model_copy(update=changes) if i.id == item_id else i
        for i in items
    ]


def toggle_item(items: Sequence[Item], item_id: str) -> list[Item]:
    return [
        i.model_copy(update={"completed": not i.completed})
        if i.id == item_id else i
        for i in items
    ]


def remove_item(items: Sequence[Item], item_id: str) -> list[Item]:
    return [i for i in items if i.id != item_id]


def completion_percentage(items: Sequence[Milestone | Subtask]) -> int:
    if not items:
        return 0
    done = sum(1 for i in items if i.completed)
    return round(done / len(items) * 100)


def sort_milestones(milestones: Iterable[Milestone]) -> list[Milestone]:
    return sorted(milestones, key=lambda m: m.date)


def milestone_timeline_status(
    milestone: Milestone, now: datetime,
) -> TimelineStatus:
    """past if already due, upcoming within UPCOMING_MILESTONE_DAYS, else future."""
    if milestone.date < now:
        return TimelineStatus.PAST
    if milestone.date - now <= timedelta(days=UPCOMING_MILESTONE_DAYS):
        return TimelineStatus.UPCOMING
    return TimelineStatus.FUTURE


def project_timeline(project: Project, now: datetime) -> ProjectTimeline:
    subtasks = [s for t in project.tasks for s in t.subtasks]
    return ProjectTimeline(
        project_id=project.id,
        milestone_progress=completion_percentage(project.milestones),
        subtask_progress=completion_percentage(subtasks),
        milestones=[
            TimelineMilestone(
                **m.model_dump(),
                timeline_status=milestone_timeline_status(m, now),
            )
            for m in sort_milestones(project.milestones)
        ],
    )
