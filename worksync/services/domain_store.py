"""Domain Store — the actor's entity mirror and the mutation API over it.

Invariants:
    - Pipeline per mutation: persist -> mirror update -> audit (best-effort) ->
      notify (best-effort). The mirror changes ONLY after the remote call succeeds
    - Failures (gateway, referential, validation) leave the mirror untouched, push an
      error notice, and are raised to the caller as WorkSyncError; nothing is retried
    - Activity logging failures never undo or fail a confirmed mutation
    - Updates are field-level merges into the CURRENT mirror copy, so fields the
      caller did not send (including milestones/subtasks) are never dropped
    - Milestones/subtasks are written by rewriting the parent's array, guarded by the
      parent's *_revision: a write built on a stale array raises StaleRevisionError
    - toggle_favorite and every milestone/subtask operation go through the same
      update path as update_project/update_task (one update + one activity)
    - A load for actor A is discarded if the actor changed while it was in flight
    - A mutation started by actor A is audited as A. If the actor changed while its
      remote call was in flight, the new actor's mirror, feed and notices are left alone

Design Decisions:
    - Explicit instance built at startup and injected (ADR: no ambient singleton)
    - Observers register via subscribe(); listener errors are logged and ignored
    - Public operations are thin wrappers that report failures once; derived
      operations call the private implementations so a failure yields one notice
"""

import functools
import logging
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, NamedTuple, TypeVar

from pydantic import BaseModel, ValidationError

from worksync.core.activity_labels import (
    activity_action, project_update_verb, task_update_verb,
)
from worksync.core.domain_types import ActivityVerb, EntityType
from worksync.core.embedded_collections import (
    append_item, find_item, merge_item, project_timeline, remove_item, toggle_item,
)
from worksync.core.entities import (
    Actor, Milestone, MilestoneDraft, MilestonePatch, Project, ProjectDraft,
    ProjectPatch, ProjectTimeline, Subtask, SubtaskDraft, SubtaskPatch, Task,
    TaskDraft, TaskPatch,
)
from worksync.core.entity_mapper import (
    project_to_domain, project_to_storage, task_to_domain, task_to_storage,
)
from worksync.core.errors import (
    EntityValidationError, NoWorkspaceAvailableError, NotAuthenticatedError,
    ResourceNotFoundError, WorkSyncError,
)
from worksync.core.mirror import Mirror
from worksync.core.notices import NoticeBoard
from worksync.core.repository_protocols import RemoteStore, SnapshotListener
from worksync.core.store_snapshot import StoreSnapshot
from worksync.services.activity_logger import ActivityLogger
from worksync.services.workspace_bootstrapper import WorkspaceBootstrapper

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_FAILURE_TITLES = {
    "load": "Could not load your projects",
    "create_project": "Could not create project",
    "update_project": "Could not update project",
    "delete_project": "Could not delete project",
    "toggle_favorite": "Could not update favorites",
    "create_task": "Could not create task",
    "update_task": "Could not update task",
    "delete_task": "Could not delete task",
    "add_milestone": "Could not add milestone",
    "update_milestone": "Could not update milestone",
    "delete_milestone": "Could not delete milestone",
    "toggle_milestone": "Could not update milestone",
    "add_subtask": "Could not add subtask",
    "update_subtask": "Could not update subtask",
    "delete_subtask": "Could not delete subtask",
    "toggle_subtask": "Could not update subtask",
}


def _validate(model: type[M], fields: Mapping[str, Any] | M) -> M:
    """Validate caller input, translating pydantic errors to EntityValidationError."""
    if isinstance(fields, model):
        return fields
    try:
        return model.model_validate(dict(fields))
    except ValidationError as e:
        names = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise EntityValidationError(
            f"Invalid {model.__name__}: {'; '.join(err['msg'] for err in e.errors())}",
            names,
        )


def _patch_changes(model: type[M], fields: Mapping[str, Any] | M) -> dict[str, Any]:
    changes = _validate(model, fields).changes()
    if not changes:
        raise EntityValidationError(f"{model.__name__} has no fields to update")
    return changes


class _Session(NamedTuple):
    """The actor a mutation runs for, and the sign-in epoch it started in."""
    actor: Actor
    epoch: int


def _reports_failures(operation: str):
    """Push an error notice and log once, then re-raise to the caller."""
    def decorate(fn: Callable):
        @functools.wraps(fn)
        async def wrapper(self: "DomainStore", *args, **kwargs):
            try:
                return await fn(self, *args, **kwargs)
            except WorkSyncError as e:
                self._report_failure(operation, e)
                raise
        return wrapper
    return decorate


class DomainStore:
    """Owns the mirror for the current actor and synchronizes it with the remote store."""

    def __init__(
        self,
        remote: RemoteStore,
        activity_logger: ActivityLogger,
        bootstrapper: WorkspaceBootstrapper,
        notices: NoticeBoard | None = None,
    ):
        self._remote = remote
        self._activity = activity_logger
        self._bootstrapper = bootstrapper
        self.notices = notices or NoticeBoard()
        self._mirror = Mirror()
        self._actor: Actor | None = None
        self._is_loading = False
        self._load_generation = 0
        self._session_epoch = 0
        self._listeners: list[SnapshotListener] = []

    # --- Consumer interface ----------------------------------------------------

    @property
    def actor(self) -> Actor | None:
        return self._actor

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            projects=self._mirror.projects,
            workspaces=self._mirror.workspaces,
            activities=self._activity.feed,
            current_project=self._mirror.current_project,
            is_loading=self._is_loading,
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener; returns the function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def set_current_project(self, project: Project | str | None) -> Project | None:
        """Select a project (or clear the selection with None)."""
        if project is None:
            self._mirror.current_project_id = None
        else:
            project_id = project if isinstance(project, str) else project.id
            self._project_or_raise(project_id)
            self._mirror.current_project_id = project_id
        self._publish()
        return self._mirror.current_project

    def project_timeline(
        self, project_id: str, now: datetime | None = None,
    ) -> ProjectTimeline:
        """Milestones by date with their timeline status, plus completion shares."""
        project = self._project_or_raise(project_id)
        return project_timeline(project, now or datetime.now(timezone.utc))

    # --- Actor lifecycle -------------------------------------------------------

    async def set_actor(self, actor: Actor | None) -> StoreSnapshot:
        """Login/logout hook: re-seed on identity change, clear on None."""
        if actor is None:
            self._clear()
            return self.snapshot()
        changed = self._actor is None or self._actor.id != actor.id
        self._actor = actor
        if changed:
            self._session_epoch += 1
            self._mirror.clear()
            self._activity.reset()
            await self.load()
        return self.snapshot()

    def _clear(self) -> None:
        if self._actor is not None:
            logger.info("Actor signed out, clearing mirror",
                extra={"actor_id": self._actor.id})
        self._actor = None
        self._session_epoch += 1
        self._load_generation += 1
        self._is_loading = False
        self._mirror.clear()
        self._activity.reset()
        self._publish()

    @_reports_failures("load")
    async def load(self) -> StoreSnapshot:
        """Bootstrap workspaces, then seed projects, tasks and the activity feed."""
        actor = self._require_actor()
        self._load_generation += 1
        generation = self._load_generation
        self._is_loading = True
        self._publish()
        try:
            workspaces = await self._bootstrapper.ensure_workspaces(actor)
            project_rows = await self._remote.projects.select(
                {"workspace_id": [w.id for w in workspaces]}, order_by="created_at",
            )
            task_rows = []
            if project_rows:
                task_rows = await self._remote.tasks.select(
                    {"project_id": [str(r["id"]) for r in project_rows]},
                    order_by="created_at",
                )
            feed = await self._activity.fetch(actor.id)
        except WorkSyncError:
            if generation == self._load_generation:
                self._is_loading = False
                self._publish()
            raise

        if generation != self._load_generation:
            logger.info("Discarding stale load", extra={"actor_id": actor.id})
            return self.snapshot()

        tasks_by_project: defaultdict[str, list[Task]] = defaultdict(list)
        for row in task_rows:
            task = task_to_domain(row)
            tasks_by_project[task.project_id].append(task)
        projects = [
            project_to_domain(row, tasks_by_project[str(row["id"])])
            for row in project_rows
        ]
        self._mirror.seed(workspaces, projects)
        self._activity.replace(feed)
        self._is_loading = False
        logger.info(
            f"Loaded {len(workspaces)} workspace(s), {len(projects)} project(s), "
            f"{len(task_rows)} task(s)",
            extra={"actor_id": actor.id},
        )
        self._publish()
        return self.snapshot()

    # --- Projects --------------------------------------------------------------

    @_reports_failures("create_project")
    async def create_project(self, fields: Mapping[str, Any] | ProjectDraft) -> Project:
        session = self._session()
        draft = _validate(ProjectDraft, fields)
        changes = {name: getattr(draft, name) for name in ProjectDraft.model_fields}
        changes["workspace"] = self._resolve_workspace(draft.workspace)

        row = project_to_storage(changes)
        row["owner_id"] = session.actor.id
        created = await self._remote.projects.insert(row)

        project = project_to_domain(created)
        if self._is_current(session):
            self._mirror.add_project(project)
        await self._after_commit(
            session, ActivityVerb.CREATED, EntityType.PROJECT, project.id, project.name,
            {"workspace_id": project.workspace}, "Project created",
        )
        return project

    @_reports_failures("update_project")
    async def update_project(
        self, project_id: str, fields: Mapping[str, Any] | ProjectPatch,
        *, base_revision: int | None = None,
    ) -> Project:
        """Partial update. base_revision guards a milestones write (defaults to the mirror's)."""
        return await self._update_project(project_id, fields, base_revision=base_revision)

    @_reports_failures("toggle_favorite")
    async def toggle_favorite(self, project_id: str) -> Project:
        project = self._project_or_raise(project_id)
        return await self._update_project(project_id, {"favorite": not project.favorite})

    @_reports_failures("delete_project")
    async def delete_project(self, project_id: str) -> None:
        session = self._session()
        project = self._project_or_raise(project_id)
        await self._remote.projects.delete(project.id)

        if self._is_current(session):
            self._mirror.remove_project(project.id)
        await self._after_commit(
            session, ActivityVerb.DELETED, EntityType.PROJECT, project.id, project.name,
            {"task_count": len(project.tasks)}, "Project deleted",
        )

    async def _update_project(
        self, project_id: str, fields: Mapping[str, Any] | ProjectPatch,
        *, base_revision: int | None = None, audit: dict[str, Any] | None = None,
    ) -> Project:
        session = self._session()
        project = self._project_or_raise(project_id)
        changes = _patch_changes(ProjectPatch, fields)
        if "workspace" in changes:
            self._resolve_workspace(changes["workspace"])

        values = project_to_storage(changes)
        match = None
        if "milestones" in changes:
            base = project.milestones_revision if base_revision is None else base_revision
            match = {"milestones_revision": base}
            changes["milestones_revision"] = values["milestones_revision"] = base + 1
        await self._remote.projects.update(project.id, values, match=match)

        updated = project.model_copy(update=changes)
        if self._is_current(session):
            latest = self._mirror.find_project(project.id) or project
            updated = latest.model_copy(update=changes)
            self._mirror.replace_project(updated)

        verb = project_update_verb(changes)
        metadata = {"fields": sorted(k for k in changes if k != "milestones_revision")}
        metadata.update(audit or {})
        await self._after_commit(
            session, verb, EntityType.PROJECT, updated.id, updated.name, metadata,
            _PROJECT_NOTICES[verb],
        )
        return updated

    # --- Tasks -----------------------------------------------------------------

    @_reports_failures("create_task")
    async def create_task(self, fields: Mapping[str, Any] | TaskDraft) -> Task:
        session = self._session()
        draft = _validate(TaskDraft, fields)
        self._project_or_raise(draft.project_id)
        changes = {name: getattr(draft, name) for name in TaskDraft.model_fields}

        created = await self._remote.tasks.insert(task_to_storage(changes))

        task = task_to_domain(created)
        if self._is_current(session):
            self._mirror.add_task(task)
        await self._after_commit(
            session, ActivityVerb.CREATED, EntityType.TASK, task.id, task.title,
            {"project_id": task.project_id}, "Task created",
        )
        return task

    @_reports_failures("update_task")
    async def update_task(
        self, task_id: str, fields: Mapping[str, Any] | TaskPatch,
        *, base_revision: int | None = None,
    ) -> Task:
        """Partial update. base_revision guards a subtasks write (defaults to the mirror's)."""
        return await self._update_task(task_id, fields, base_revision=base_revision)

    @_reports_failures("delete_task")
    async def delete_task(self, task_id: str) -> None:
        session = self._session()
        task = self._task_or_raise(task_id)
        await self._remote.tasks.delete(task.id)

        if self._is_current(session):
            self._mirror.remove_task(task.id)
        await self._after_commit(
            session, ActivityVerb.DELETED, EntityType.TASK, task.id, task.title,
            {"project_id": task.project_id}, "Task deleted",
        )

    async def _update_task(
        self, task_id: str, fields: Mapping[str, Any] | TaskPatch,
        *, base_revision: int | None = None, audit: dict[str, Any] | None = None,
    ) -> Task:
        session = self._session()
        task = self._task_or_raise(task_id)
        changes = _patch_changes(TaskPatch, fields)
        if "project_id" in changes:
            self._project_or_raise(changes["project_id"])

        values = task_to_storage(changes)
        match = None
        if "subtasks" in changes:
            base = task.subtasks_revision if base_revision is None else base_revision
            match = {"subtasks_revision": base}
            changes["subtasks_revision"] = values["subtasks_revision"] = base + 1
        await self._remote.tasks.update(task.id, values, match=match)

        updated = task.model_copy(update=changes)
        if self._is_current(session):
            latest = self._mirror.find_task(task.id) or task
            updated = latest.model_copy(update=changes)
            self._mirror.replace_task(updated)

        verb = task_update_verb(task, changes)
        metadata = {"fields": sorted(k for k in changes if k != "subtasks_revision")}
        metadata.update(audit or {})
        if "status" in changes:
            metadata["from_status"] = task.status.value
            metadata["to_status"] = updated.status.value
        await self._after_commit(
            session, verb, EntityType.TASK, updated.id, updated.title, metadata,
            "Task completed" if verb == ActivityVerb.COMPLETED else "Task updated",
        )
        return updated

    # --- Milestones (embedded in Project.milestones) ---------------------------

    @_reports_failures("add_milestone")
    async def add_milestone(
        self, project_id: str, fields: Mapping[str, Any] | MilestoneDraft,
    ) -> Milestone:
        project = self._project_or_raise(project_id)
        draft = _validate(MilestoneDraft, fields)
        milestone = Milestone(id=str(uuid.uuid4()), **draft.model_dump())
        await self._update_project(
            project.id, {"milestones": append_item(project.milestones, milestone)},
            base_revision=project.milestones_revision,
            audit={"milestone_id": milestone.id, "change": "added"},
        )
        return milestone

    @_reports_failures("update_milestone")
    async def update_milestone(
        self, milestone_id: str, fields: Mapping[str, Any] | MilestonePatch,
    ) -> Milestone:
        project = self._milestone_owner_or_raise(milestone_id)
        changes = _patch_changes(MilestonePatch, fields)
        milestones = merge_item(project.milestones, milestone_id, changes)
        await self._update_project(
            project.id, {"milestones": milestones},
            base_revision=project.milestones_revision,
            audit={"milestone_id": milestone_id, "change": "updated"},
        )
        return find_item(milestones, milestone_id)

    @_reports_failures("toggle_milestone")
    async def toggle_milestone(self, milestone_id: str) -> Milestone:
        project = self._milestone_owner_or_raise(milestone_id)
        milestones = toggle_item(project.milestones, milestone_id)
        await self._update_project(
            project.id, {"milestones": milestones},
            base_revision=project.milestones_revision,
            audit={"milestone_id": milestone_id, "change": "toggled"},
        )
        return find_item(milestones, milestone_id)

    @_reports_failures("delete_milestone")
    async def delete_milestone(self, milestone_id: str) -> None:
        project = self._milestone_owner_or_raise(milestone_id)
        await self._update_project(
            project.id, {"milestones": remove_item(project.milestones, milestone_id)},
            base_revision=project.milestones_revision,
            audit={"milestone_id": milestone_id, "change": "deleted"},
        )

    # --- Subtasks (embedded in Task.subtasks) ----------------------------------

    @_reports_failures("add_subtask")
    async def add_subtask(
        self, task_id: str, fields: Mapping[str, Any] | SubtaskDraft,
    ) -> Subtask:
        task = self._task_or_raise(task_id)
        draft = _validate(SubtaskDraft, fields)
        subtask = Subtask(id=str(uuid.uuid4()), **draft.model_dump())
        await self._update_task(
            task.id, {"subtasks": append_item(task.subtasks, subtask)},
            base_revision=task.subtasks_revision,
            audit={"subtask_id": subtask.id, "change": "added"},
        )
        return subtask

    @_reports_failures("update_subtask")
    async def update_subtask(
        self, subtask_id: str, fields: Mapping[str, Any] | SubtaskPatch,
    ) -> Subtask:
        task = self._subtask_owner_or_raise(subtask_id)
        changes = _patch_changes(SubtaskPatch, fields)
        subtasks = merge_item(task.subtasks, subtask_id, changes)
        await self._update_task(
            task.id, {"subtasks": subtasks},
            base_revision=task.subtasks_revision,
            audit={"subtask_id": subtask_id, "change": "updated"},
        )
        return find_item(subtasks, subtask_id)

    @_reports_failures("toggle_subtask")
    async def toggle_subtask(self, subtask_id: str) -> Subtask:
        task = self._subtask_owner_or_raise(subtask_id)
        subtasks = toggle_item(task.subtasks, subtask_id)
        await self._update_task(
            task.id, {"subtasks": subtasks},
            base_revision=task.subtasks_revision,
            audit={"subtask_id": subtask_id, "change": "toggled"},
        )
        return find_item(subtasks, subtask_id)

    @_reports_failures("delete_subtask")
    async def delete_subtask(self, subtask_id: str) -> None:
        task = self._subtask_owner_or_raise(subtask_id)
        await self._update_task(
            task.id, {"subtasks": remove_item(task.subtasks, subtask_id)},
            base_revision=task.subtasks_revision,
            audit={"subtask_id": subtask_id, "change": "deleted"},
        )

    # --- Pipeline stages -------------------------------------------------------

    async def _after_commit(
        self,
        session: _Session,
        verb: ActivityVerb,
        entity_type: EntityType,
        entity_id: str,
        entity_name: str | None,
        metadata: dict[str, Any],
        notice_title: str,
    ) -> None:
        """Audit then notify. Both stages are best-effort.

        The audit row always belongs to the actor who started the mutation. When
        the actor changed meanwhile, the new session sees neither the feed refresh
        nor the notice.
        """
        await self._activity.log(
            session.actor.id, activity_action(verb, entity_type), entity_type,
            entity_id, entity_name, metadata,
            is_current=lambda: self._is_current(session),
        )
        if not self._is_current(session):
            logger.info(
                f"Actor changed during {activity_action(verb, entity_type)}, "
                "mirror left to the new session",
                extra={"actor_id": session.actor.id, "entity_id": entity_id},
            )
            return
        self.notices.success(notice_title, entity_name or "")
        self._publish()

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Snapshot listener failed: {e}", exc_info=True)

    def _report_failure(self, operation: str, error: WorkSyncError) -> None:
        logger.warning(
            f"{operation} failed: {error.message}",
            extra={
                "actor_id": self._actor.id if self._actor else None,
                "error_code": error.code,
                "operation": operation,
                "entity_type": error.context.entity_type,
                "entity_id": error.context.entity_id,
            },
        )
        self.notices.error(
            _FAILURE_TITLES.get(operation, "Something went wrong"),
            error.user_message,
        )

    # --- Lookups ---------------------------------------------------------------

    def _require_actor(self) -> Actor:
        if self._actor is None:
            raise NotAuthenticatedError()
        return self._actor

    def _session(self) -> _Session:
        return _Session(self._require_actor(), self._session_epoch)

    def _is_current(self, session: _Session) -> bool:
        return session.epoch == self._session_epoch

    def _resolve_workspace(self, workspace_id: str | None) -> str:
        if workspace_id is None:
            if not self._mirror.workspaces:
                raise NoWorkspaceAvailableError()
            return self._mirror.workspaces[0].id
        if self._mirror.find_workspace(workspace_id) is None:
            raise ResourceNotFoundError("Workspace", workspace_id)
        return workspace_id

    def _project_or_raise(self, project_id: str) -> Project:
        project = self._mirror.find_project(project_id)
        if project is None:
            raise ResourceNotFoundError("Project", project_id)
        return project

    def _task_or_raise(self, task_id: str) -> Task:
        task = self._mirror.find_task(task_id)
        if task is None:
            raise ResourceNotFoundError("Task", task_id)
        return task

    def _milestone_owner_or_raise(self, milestone_id: str) -> Project:
        project = self._mirror.find_milestone_owner(milestone_id)
        if project is None:
            raise ResourceNotFoundError("Milestone", milestone_id)
        return project

    def _subtask_owner_or_raise(self, subtask_id: str) -> Task:
        task = self._mirror.find_subtask_owner(subtask_id)
        if task is None:
            raise ResourceNotFoundError("Subtask", subtask_id)
        return task


_PROJECT_NOTICES = {
    ActivityVerb.UPDATED: "Project updated",
    ActivityVerb.FAVORITED: "Added to favorites",
    ActivityVerb.UNFAVORITED: "Removed from favorites",
}
