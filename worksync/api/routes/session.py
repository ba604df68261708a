"""Session — actor sign-in (login + load) and sign-out for the Domain Store.

Invariants:
    - PUT with a different actor re-seeds the mirror; the same actor is a no-op
    - DELETE clears the mirror and the activity feed
    - Routes never contain business logic (delegate to DomainStore)
"""

import logging

from fastapi import APIRouter, Depends, status

from worksync.api.dependencies import get_store
from worksync.schemas.session import SessionStart
from worksync.services.domain_store import DomainStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/session", tags=["session"])


@router.put("")
async def start_session(body: SessionStart, store: DomainStore = Depends(get_store)):
    """Sign in as `body` and return the loaded snapshot."""
    snapshot = await store.set_actor(body)
    return snapshot.to_dict()


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def end_session(store: DomainStore = Depends(get_store)):
    await store.set_actor(None)
