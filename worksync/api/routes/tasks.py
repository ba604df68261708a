"""Tasks — task CRUD and subtask creation.

Invariants:
    - A task can only be created in, or moved to, a project present in the mirror
    - Moving a task to done is recorded as "completed task"
"""

from fastapi import APIRouter, Depends, status

from worksync.api.dependencies import get_store
from worksync.core.entities import Subtask, SubtaskDraft, Task, TaskDraft, TaskPatch
from worksync.services.domain_store import DomainStore

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(body: TaskDraft, store: DomainStore = Depends(get_store)):
    return await store.create_task(body)


@router.patch("/{task_id}", response_model=Task)
async def update_task(
    task_id: str, body: TaskPatch, store: DomainStore = Depends(get_store),
):
    return await store.update_task(task_id, body)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: str, store: DomainStore = Depends(get_store)):
    await store.delete_task(task_id)


@router.post(
    "/{task_id}/subtasks",
    response_model=Subtask, status_code=status.HTTP_201_CREATED,
)
async def add_subtask(
    task_id: str, body: SubtaskDraft, store: DomainStore = Depends(get_store),
):
    return await store.add_subtask(task_id, body)
