"""Snapshot — read side of the Domain Store for UI collaborators."""

from fastapi import APIRouter, Depends

from worksync.api.dependencies import get_store
from worksync.services.domain_store import DomainStore

router = APIRouter(prefix="/api/v1/snapshot", tags=["snapshot"])


@router.get("")
async def get_snapshot(store: DomainStore = Depends(get_store)):
    return store.snapshot().to_dict()
