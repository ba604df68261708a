"""Entities — camelCase wire shape, draft defaults, and patch semantics."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from worksync.core.domain_types import ProjectStatus, TaskStatus
from worksync.core.entities import (
    Milestone, MilestoneDraft, MilestonePatch, Project, ProjectDraft, ProjectPatch,
    SubtaskDraft, Task, TaskDraft, TaskPatch,
)

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def test_project_serializes_with_camel_case_aliases():
    project = Project(id="p1", name="Apollo", created_at=NOW, workspace="w1")
    data = project.model_dump(mode="json", by_alias=True)
    assert data["createdAt"].startswith("2026-03-01")
    assert data["dueDate"] is None
    assert data["milestonesRevision"] == 0
    assert "created_at" not in data


def test_task_accepts_camel_case_input():
    task = Task.model_validate({
        "id": "t1", "title": "Write docs", "createdAt": NOW.isoformat(),
        "projectId": "p1", "assigneeId": "u1",
    })
    assert task.project_id == "p1"
    assert task.assignee_id == "u1"
    assert task.status == TaskStatus.TODO


def test_project_draft_defaults():
    draft = ProjectDraft()
    assert draft.name == "New Project"
    assert draft.status == ProjectStatus.ACTIVE
    assert draft.progress == 0
    assert draft.workspace is None
    assert draft.milestones == []


def test_project_draft_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        ProjectDraft(name="X", owner="someone")


def test_project_draft_rejects_progress_out_of_range():
    with pytest.raises(ValidationError):
        ProjectDraft(progress=101)


def test_task_draft_requires_project_id():
    with pytest.raises(ValidationError):
        TaskDraft(title="Orphan")


def test_task_draft_defaults_title():
    assert TaskDraft(project_id="p1").title == "New Task"


def test_milestone_draft_strips_title_and_defaults_date():
    draft = MilestoneDraft(title="  Beta  ")
    assert draft.title == "Beta"
    assert draft.date.tzinfo is not None
    assert draft.completed is False


def test_milestone_dates_are_utc_aware():
    naive = Milestone(id="m1", title="Beta", date="2024-01-01T00:00:00")
    assert naive.date == datetime(2024, 1, 1, tzinfo=timezone.utc)

    offset = Milestone(id="m2", title="GA", date="2024-01-01T02:00:00+02:00")
    assert offset.date == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert offset.date.utcoffset() == timedelta(0)

    assert MilestoneDraft(title="Beta", date="2024-01-01T00:00:00").date.tzinfo is not None
    assert MilestonePatch(date="2024-01-01T00:00:00").date.tzinfo is not None
    assert MilestonePatch(title="RC").changes() == {"title": "RC"}


def test_subtask_draft_rejects_blank_title():
    with pytest.raises(ValidationError):
        SubtaskDraft(title="   ")


def test_patch_changes_only_contains_sent_fields():
    patch = ProjectPatch(name="Renamed")
    assert patch.changes() == {"name": "Renamed"}


def test_patch_changes_keep_typed_values():
    patch = TaskPatch.model_validate({"status": "done"})
    assert patch.changes() == {"status": TaskStatus.DONE}


def test_patch_allows_clearing_nullable_field():
    assert TaskPatch(due_date=None).changes() == {"due_date": None}
    assert TaskPatch(assignee_id=None).changes() == {"assignee_id": None}


def test_patch_rejects_null_for_required_field():
    with pytest.raises(ValidationError):
        ProjectPatch(name=None)
    with pytest.raises(ValidationError):
        TaskPatch(status=None)


def test_patch_rejects_read_only_revision():
    with pytest.raises(ValidationError):
        ProjectPatch(milestones_revision=3)


def test_patch_parses_embedded_milestones():
    patch = ProjectPatch.model_validate({
        "milestones": [{"id": "m1", "title": "Beta", "date": NOW.isoformat()}],
    })
    assert patch.changes()["milestones"] == [
        Milestone(id="m1", title="Beta", date=NOW),
    ]
