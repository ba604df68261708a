"""Entity Mapper — column maps are total, partial rows stay partial, defaults apply."""

from datetime import datetime, timezone

import pytest

from worksync.core.domain_types import DEFAULT_COLOR, ProjectStatus, TaskPriority, TaskStatus
from worksync.core.entities import Activity, Milestone, Project, Subtask, Task, Workspace
from worksync.core.entity_mapper import (
    ACTIVITY_COLUMNS, ACTIVITY_DROPPED, PROJECT_COLUMNS, PROJECT_DROPPED,
    TASK_COLUMNS, TASK_DROPPED, WORKSPACE_COLUMNS, WORKSPACE_DROPPED,
    activity_to_domain, project_to_domain, project_to_storage,
    task_to_domain, task_to_storage, workspace_to_domain,
)
from worksync.core.errors import EntityValidationError

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("entity, columns, dropped", [
    (Workspace, WORKSPACE_COLUMNS, WORKSPACE_DROPPED),
    (Project, PROJECT_COLUMNS, PROJECT_DROPPED),
    (Task, TASK_COLUMNS, TASK_DROPPED),
    (Activity, ACTIVITY_COLUMNS, ACTIVITY_DROPPED),
])
def test_every_domain_field_is_mapped_or_dropped(entity, columns, dropped):
    fields = set(entity.model_fields)
    assert fields == set(columns) | dropped
    assert not set(columns) & dropped


def test_project_workspace_maps_to_workspace_id():
    assert project_to_storage({"workspace": "w1"}) == {"workspace_id": "w1"}


def test_partial_fields_map_to_partial_row():
    assert project_to_storage({"name": "X"}) == {"name": "X"}


def test_tasks_are_never_written_on_the_project_row():
    assert project_to_storage({"name": "X", "tasks": []}) == {"name": "X"}


def test_unknown_field_is_rejected():
    with pytest.raises(EntityValidationError) as exc:
        task_to_storage({"title": "T", "estimate": 3})
    assert exc.value.fields == ["estimate"]


def test_enums_and_embedded_items_are_serialized():
    row = task_to_storage({
        "status": TaskStatus.IN_REVIEW,
        "subtasks": [Subtask(id="s1", title="Check")],
    })
    assert row == {
        "status": "inReview",
        "subtasks": [{"id": "s1", "title": "Check", "completed": False}],
    }


def test_milestone_dates_serialize_as_iso_strings():
    row = project_to_storage({"milestones": [Milestone(id="m1", title="Beta", date=NOW)]})
    assert row["milestones"][0]["date"].startswith("2026-03-01T12:00:00")


def test_project_to_domain_applies_defaults_for_nulls():
    project = project_to_domain({
        "id": "p1", "name": "Apollo", "created_at": NOW, "workspace_id": "w1",
        "description": None, "status": None, "progress": None, "members": None,
        "favorite": None, "color": None, "tags": None, "milestones": None,
        "milestones_revision": None,
    })
    assert project.description == ""
    assert project.status == ProjectStatus.ACTIVE
    assert project.progress == 0
    assert project.members == []
    assert project.favorite is False
    assert project.color == DEFAULT_COLOR
    assert project.milestones == []
    assert project.tasks == []
    assert project.workspace == "w1"


def test_project_to_domain_attaches_tasks_and_parses_milestones():
    task = Task(id="t1", title="T", created_at=NOW, project_id="p1")
    project = project_to_domain(
        {
            "id": "p1", "name": "Apollo", "created_at": NOW, "workspace_id": "w1",
            "milestones": [{"id": "m1", "title": "Beta", "date": NOW.isoformat(), "completed": True}],
            "milestones_revision": 4,
        },
        [task],
    )
    assert project.tasks == [task]
    assert project.milestones[0].completed is True
    assert project.milestones_revision == 4


def test_naive_datetimes_become_utc():
    task = task_to_domain({
        "id": "t1", "title": "T", "project_id": "p1",
        "created_at": datetime(2026, 3, 1, 12, 0),
    })
    assert task.created_at == NOW


def test_task_to_domain_defaults():
    task = task_to_domain({"id": "t1", "project_id": "p1", "created_at": NOW})
    assert task.title == ""
    assert task.status == TaskStatus.TODO
    assert task.priority == TaskPriority.MEDIUM
    assert task.subtasks == []
    assert task.assignee_id is None


def test_workspace_and_activity_to_domain():
    ws = workspace_to_domain({"id": "w1", "name": "Ada's Workspace", "color": None})
    assert ws.color == DEFAULT_COLOR
    activity = activity_to_domain({
        "id": "a1", "user_id": "u1", "action": "created project",
        "entity_type": "project", "entity_id": "p1", "metadata": None,
        "created_at": NOW,
    })
    assert activity.metadata == {}
    assert activity.entity_name is None
