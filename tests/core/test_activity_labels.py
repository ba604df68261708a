"""Activity Labels — which verb each mutation is recorded under."""

from datetime import datetime, timezone

from worksync.core.activity_labels import activity_action, project_update_verb, task_update_verb
from worksync.core.domain_types import ActivityVerb, EntityType, TaskStatus
from worksync.core.entities import Task


def _task(status=TaskStatus.TODO):
    return Task(
        id="t1", title="T", status=status, project_id="p1",
        created_at=datetime(2026, 3, 1, tzinfo=timezone.utc),
    )


def test_action_string_joins_verb_and_entity():
    assert activity_action(ActivityVerb.CREATED, EntityType.PROJECT) == "created project"
    assert activity_action(ActivityVerb.COMPLETED, EntityType.TASK) == "completed task"


def test_favorite_change_is_favorited_or_unfavorited():
    assert project_update_verb({"favorite": True}) == ActivityVerb.FAVORITED
    assert project_update_verb({"favorite": False}) == ActivityVerb.UNFAVORITED


def test_other_project_change_is_updated():
    assert project_update_verb({"name": "X"}) == ActivityVerb.UPDATED


def test_task_moving_to_done_is_completed():
    assert task_update_verb(_task(), {"status": TaskStatus.DONE}) == ActivityVerb.COMPLETED


def test_task_already_done_is_updated():
    verb = task_update_verb(_task(TaskStatus.DONE), {"status": TaskStatus.DONE})
    assert verb == ActivityVerb.UPDATED


def test_task_other_change_is_updated():
    assert task_update_verb(_task(), {"title": "New"}) == ActivityVerb.UPDATED
