"""Notices — pending success/error notifications raised by store operations.

Invariants:
    - GET drains the board: each notice is delivered once
"""

from fastapi import APIRouter, Depends

from worksync.api.dependencies import get_store
from worksync.schemas.session import NoticeList, NoticeResponse
from worksync.services.domain_store import DomainStore

router = APIRouter(prefix="/api/v1/notices", tags=["notices"])


@router.get("", response_model=NoticeList)
async def drain_notices(store: DomainStore = Depends(get_store)):
    return NoticeList(notices=[
        NoticeResponse.model_validate(n.to_dict()) for n in store.notices.drain()
    ])
