"""Store Snapshot — the read side of the consumer interface.

Invariants:
    - A snapshot is immutable: tuples of entities the store never mutates in place
    - current_project is resolved from the mirror, so it always reflects the latest
      confirmed state of the selected project (or None)
    - is_loading is True only while a load cycle is in flight

Design Decisions:
    - Frozen dataclass over pydantic: no validation needed on data the store built
    - to_dict() uses the camelCase aliases UI collaborators expect
"""

from dataclasses import dataclass

from worksync.core.entities import Activity, Project, Task, Workspace


@dataclass(frozen=True)
class StoreSnapshot:
    projects: tuple[Project, ...] = ()
    workspaces: tuple[Workspace, ...] = ()
    activities: tuple[Activity, ...] = ()
    current_project: Project | None = None
    is_loading: bool = False

    @property
    def tasks(self) -> list[Task]:
        """All tasks across projects, in project order."""
        return [t for p in self.projects for t in p.tasks]

    def find_project(self, project_id: str) -> Project | None:
        return next((p for p in self.projects if p.id == project_id), None)

    def find_task(self, task_id: str) -> Task | None:
        return next((t for t in self.tasks if t.id == task_id), None)

    def to_dict(self) -> dict:
        return {
            "projects": [p.model_dump(mode="json", by_alias=True) for p in self.projects],
            "workspaces": [w.model_dump(mode="json", by_alias=True) for w in self.workspaces],
            "activities": [a.model_dump(mode="json", by_alias=True) for a in self.activities],
            "currentProject": (
                self.current_project.model_dump(mode="json", by_alias=True)
                if self.current_project else None
            ),
            "isLoading": self.is_loading,
        }


EMPTY_SNAPSHOT = StoreSnapshot()
