"""Embedded Collections — pure milestone/subtask edits and timeline helpers."""

from datetime import datetime, timedelta, timezone

from worksync.core.domain_types import TimelineStatus
from worksync.core.embedded_collections import (
    append_item, completion_percentage, find_item, merge_item,
    milestone_timeline_status, project_timeline, remove_item, sort_milestones,
    toggle_item,
)
from worksync.core.entities import Milestone, Project, Subtask, Task

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _subtasks():
    return [Subtask(id="s1", title="A"), Subtask(id="s2", title="B", completed=True)]


def test_append_returns_new_list():
    items = _subtasks()
    result = append_item(items, Subtask(id="s3", title="C"))
    assert [s.id for s in result] == ["s1", "s2", "s3"]
    assert len(items) == 2


def test_merge_only_touches_matching_item():
    items = _subtasks()
    result = merge_item(items, "s1", {"title": "A2"})
    assert result[0].title == "A2"
    assert result[1] is items[1]
    assert items[0].title == "A"


def test_toggle_flips_completed():
    result = toggle_item(_subtasks(), "s2")
    assert result[1].completed is False
    assert toggle_item(result, "s2")[1].completed is True


def test_remove_keeps_order():
    items = append_item(_subtasks(), Subtask(id="s3", title="C"))
    assert [s.id for s in remove_item(items, "s2")] == ["s1", "s3"]


def test_find_item_miss_returns_none():
    assert find_item(_subtasks(), "nope") is None


def test_completion_percentage():
    assert completion_percentage([]) == 0
    assert completion_percentage(_subtasks()) == 50
    three = append_item(_subtasks(), Subtask(id="s3", title="C"))
    assert completion_percentage(three) == 33


def test_sort_milestones_by_date():
    late = Milestone(id="m1", title="GA", date=NOW + timedelta(days=30))
    early = Milestone(id="m2", title="Beta", date=NOW)
    assert [m.id for m in sort_milestones([late, early])] == ["m2", "m1"]


def test_timeline_status():
    past = Milestone(id="m1", title="A", date=NOW - timedelta(days=1))
    soon = Milestone(id="m2", title="B", date=NOW + timedelta(days=3))
    later = Milestone(id="m3", title="C", date=NOW + timedelta(days=8))
    assert milestone_timeline_status(past, NOW) == TimelineStatus.PAST
    assert milestone_timeline_status(soon, NOW) == TimelineStatus.UPCOMING
    assert milestone_timeline_status(later, NOW) == TimelineStatus.FUTURE


def test_sort_milestones_mixing_naive_and_aware_dates():
    milestones = [
        Milestone.model_validate({"id": "m1", "title": "GA", "date": "2024-02-01T00:00:00Z"}),
        Milestone.model_validate({"id": "m2", "title": "Beta", "date": "2024-01-01T00:00:00"}),
    ]
    assert [m.id for m in sort_milestones(milestones)] == ["m2", "m1"]
    assert milestone_timeline_status(milestones[1], NOW) == TimelineStatus.PAST


def test_project_timeline():
    project = Project(
        id="p1", name="Apollo", created_at=NOW, workspace="w1",
        milestones=[
            Milestone(id="m1", title="GA", date=NOW + timedelta(days=30)),
            Milestone(id="m2", title="RC", date=NOW + timedelta(days=2)),
            Milestone(id="m3", title="Beta", date=NOW - timedelta(days=5), completed=True),
        ],
        tasks=[
            Task(id="t1", title="Ship", created_at=NOW, project_id="p1", subtasks=_subtasks()),
            Task(id="t2", title="Docs", created_at=NOW, project_id="p1",
                 subtasks=[Subtask(id="s9", title="Z", completed=True)]),
        ],
    )
    timeline = project_timeline(project, NOW)
    assert timeline.project_id == "p1"
    assert timeline.milestone_progress == 33
    assert timeline.subtask_progress == 67
    assert [(m.id, m.timeline_status) for m in timeline.milestones] == [
        ("m3", TimelineStatus.PAST),
        ("m2", TimelineStatus.UPCOMING),
        ("m1", TimelineStatus.FUTURE),
    ]
    data = timeline.model_dump(mode="json", by_alias=True)
    assert data["milestoneProgress"] == 33
    assert data["milestones"][0]["timelineStatus"] == "past"


def test_empty_project_timeline():
    project = Project(id="p1", name="Apollo", created_at=NOW, workspace="w1")
    timeline = project_timeline(project, NOW)
    assert timeline.milestones == []
    assert timeline.milestone_progress == 0
    assert timeline.subtask_progress == 0
