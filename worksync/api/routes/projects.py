"""Projects — project CRUD, favorites, selection, milestone creation and the timeline view.

Invariants:
    - Bodies are validated by the core draft/patch models (extra fields rejected)
    - Every mutation goes through DomainStore (persist -> mirror -> audit -> notify)
    - Store errors propagate to the global WorkSyncError handler
"""

import logging

from fastapi import APIRouter, Depends, status

from worksync.api.dependencies import get_store
from worksync.core.entities import (
    Milestone, MilestoneDraft, Project, ProjectDraft, ProjectPatch, ProjectTimeline,
)
from worksync.schemas.session import CurrentProjectSelect
from worksync.services.domain_store import DomainStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectDraft, store: DomainStore = Depends(get_store),
):
    return await store.create_project(body)


@router.put("/current")
async def select_current_project(
    body: CurrentProjectSelect, store: DomainStore = Depends(get_store),
):
    """Select (or clear) the current project; returns the refreshed snapshot."""
    store.set_current_project(body.project_id)
    return store.snapshot().to_dict()


@router.patch("/{project_id}", response_model=Project)
async def update_project(
    project_id: str, body: ProjectPatch, store: DomainStore = Depends(get_store),
):
    return await store.update_project(project_id, body)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: str, store: DomainStore = Depends(get_store)):
    await store.delete_project(project_id)


@router.post("/{project_id}/favorite", response_model=Project)
async def toggle_favorite(project_id: str, store: DomainStore = Depends(get_store)):
    return await store.toggle_favorite(project_id)


@router.post(
    "/{project_id}/milestones",
    response_model=Milestone, status_code=status.HTTP_201_CREATED,
)
async def add_milestone(
    project_id: str, body: MilestoneDraft, store: DomainStore = Depends(get_store),
):
    return await store.add_milestone(project_id, body)


@router.get("/{project_id}/timeline", response_model=ProjectTimeline)
async def get_timeline(project_id: str, store: DomainStore = Depends(get_store)):
    return store.project_timeline(project_id)
