"""Activity Labels — which verb a successful mutation is recorded under.

Invariants:
    - action strings are "<verb> <entity_type>" (e.g. "completed task")
    - A favorite change on a project is recorded as favorited/unfavorited, never updated
    - A task moving INTO done is recorded as completed; re-saving a done task is updated

Design Decisions:
    - Pure functions over inline branching in the store: labeling is part of the
      audit contract and is tested on its own
"""

from typing import Any, Mapping

from worksync.core.domain_types import ActivityVerb, EntityType, TaskStatus
from worksync.core.entities import Task


def activity_action(verb: ActivityVerb, entity_type: EntityType) -> str:
    return f"{verb.value} {entity_type.value}"


def project_update_verb(changes: Mapping[str, Any]) -> ActivityVerb:
    if "favorite" in changes:
        return ActivityVerb.FAVORITED if changes["favorite"] else ActivityVerb.UNFAVORITED
    return ActivityVerb.UPDATED


def task_update_verb(previous: Task, changes: Mapping[str, Any]) -> ActivityVerb:
    if changes.get("status") == TaskStatus.DONE and previous.status != TaskStatus.DONE:
        return ActivityVerb.COMPLETED
    return ActivityVerb.UPDATED
