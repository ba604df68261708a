"""Milestones — edits to milestones embedded in their project."""

from fastapi import APIRouter, Depends, status

from worksync.api.dependencies import get_store
from worksync.core.entities import Milestone, MilestonePatch
from worksync.services.domain_store import DomainStore

router = APIRouter(prefix="/api/v1/milestones", tags=["milestones"])


@router.patch("/{milestone_id}", response_model=Milestone)
async def update_milestone(
    milestone_id: str, body: MilestonePatch, store: DomainStore = Depends(get_store),
):
    return await store.update_milestone(milestone_id, body)


@router.post("/{milestone_id}/toggle", response_model=Milestone)
async def toggle_milestone(milestone_id: str, store: DomainStore = Depends(get_store)):
    return await store.toggle_milestone(milestone_id)


@router.delete("/{milestone_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_milestone(milestone_id: str, store: DomainStore = Depends(get_store)):
    await store.delete_milestone(milestone_id)
