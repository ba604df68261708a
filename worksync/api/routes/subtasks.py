"""Subtasks — edits to subtasks embedded in their task."""

from fastapi import APIRouter, Depends, status

from worksync.api.dependencies import get_store
from worksync.core.entities import Subtask, SubtaskPatch
from worksync.services.domain_store import DomainStore

router = APIRouter(prefix="/api/v1/subtasks", tags=["subtasks"])


@router.patch("/{subtask_id}", response_model=Subtask)
async def update_subtask(
    subtask_id: str, body: SubtaskPatch, store: DomainStore = Depends(get_store),
):
    return await store.update_subtask(subtask_id, body)


@router.post("/{subtask_id}/toggle", response_model=Subtask)
async def toggle_subtask(subtask_id: str, store: DomainStore = Depends(get_store)):
    return await store.toggle_subtask(subtask_id)


@router.delete("/{subtask_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subtask(subtask_id: str, store: DomainStore = Depends(get_store)):
    await store.delete_subtask(subtask_id)
