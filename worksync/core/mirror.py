"""Mirror — in-memory copy of the actor's confirmed workspaces, projects and tasks.

Invariants:
    - Every Task sits inside the Project whose id equals task.project_id
    - Collections are swapped, never mutated in place (tuples of immutable-by-convention
      entities), so a snapshot taken earlier never changes
    - The selection is stored by id; removing the selected project clears it
    - No IO: the store only calls mutators after the remote write is confirmed

Design Decisions:
    - Lookups are linear scans: a single actor's projects/tasks fit in memory and
      the UI reads far more than it writes
"""

from worksync.core.entities import Project, Task, Workspace
from worksync.core.embedded_collections import find_item


class Mirror:
    """Actor-scoped entity mirror with current-project selection."""

    def __init__(self):
        self.workspaces: tuple[Workspace, ...] = ()
        self.projects: tuple[Project, ...] = ()
        self.current_project_id: str | None = None

    # --- Seeding ---------------------------------------------------------------

    def seed(self, workspaces: list[Workspace], projects: list[Project]) -> None:
        self.workspaces = tuple(workspaces)
        self.projects = tuple(projects)
        if self.find_project(self.current_project_id or "") is None:
            self.current_project_id = None

    def clear(self) -> None:
        self.workspaces = ()
        self.projects = ()
        self.current_project_id = None

    # --- Lookups ---------------------------------------------------------------

    def find_workspace(self, workspace_id: str) -> Workspace | None:
        return next((w for w in self.workspaces if w.id == workspace_id), None)

    def find_project(self, project_id: str) -> Project | None:
        return next((p for p in self.projects if p.id == project_id), None)

    def find_task(self, task_id: str) -> Task | None:
        for project in self.projects:
            task = next((t for t in project.tasks if t.id == task_id), None)
            if task is not None:
                return task
        return None

    def find_milestone_owner(self, milestone_id: str) -> Project | None:
        return next(
            (p for p in self.projects if find_item(p.milestones, milestone_id) is not None),
            None,
        )

    def find_subtask_owner(self, subtask_id: str) -> Task | None:
        for project in self.projects:
            for task in project.tasks:
                if find_item(task.subtasks, subtask_id) is not None:
                    return task
        return None

    @property
    def current_project(self) -> Project | None:
        if self.current_project_id is None:
            return None
        return self.find_project(self.current_project_id)

    # --- Projects --------------------------------------------------------------

    def add_project(self, project: Project) -> None:
        self.projects = (*self.projects, project)

    def replace_project(self, project: Project) -> None:
        self.projects = tuple(
            project if p.id == project.id else p for p in self.projects
        )

    def remove_project(self, project_id: str) -> None:
        self.projects = tuple(p for p in self.projects if p.id != project_id)
        if self.current_project_id == project_id:
            self.current_project_id = None

    # --- Tasks -----------------------------------------------------------------

    def add_task(self, task: Task) -> None:
        self.projects = tuple(
            p.model_copy(update={"tasks": [*p.tasks, task]})
            if p.id == task.project_id else p
            for p in self.projects
        )

    def replace_task(self, task: Task) -> None:
        """Swap in the new task version, moving it if project_id changed."""
        current = self.find_task(task.id)
        if current is not None and current.project_id != task.project_id:
            self.remove_task(task.id)
            self.add_task(task)
            return
        self.projects = tuple(
            p.model_copy(update={
                "tasks": [task if t.id == task.id else t for t in p.tasks],
            })
            if p.id == task.project_id else p
            for p in self.projects
        )

    def remove_task(self, task_id: str) -> None:
        self.projects = tuple(
            p.model_copy(update={"tasks": [t for t in p.tasks if t.id != task_id]})
            if any(t.id == task_id for t in p.tasks) else p
            for p in self.projects
        )
