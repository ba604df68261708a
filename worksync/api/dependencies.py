"""Route Dependencies — access to the process-wide Domain Store.

Invariants:
    - The store is built once in the lifespan and stored on app.state.store
    - Routes never construct a store or touch the gateway directly
"""

from fastapi import Request

from worksync.services.domain_store import DomainStore


def get_store(request: Request) -> DomainStore:
    return request.app.state.store
