"""Boundary Protocols — contracts between the store and the remote store.

Invariants:
    - Services NEVER import a concrete gateway — they receive one by injection
    - Rows crossing the boundary are storage-shape dicts (see entity_mapper)
    - Every method is a single remote call; implementations do not retry or cache

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO; the pure mapping around them does not
"""

from typing import Any, Callable, Protocol

from worksync.core.store_snapshot import StoreSnapshot


class TableGateway(Protocol):
    """Contract for one remote table — implemented by infrastructure/gateway.py."""
    table_name: str

    async def select(
        self,
        filters: dict[str, Any] | None = None,
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]: ...

    async def insert(self, row: dict[str, Any]) -> dict[str, Any]: ...

    async def update(
        self,
        row_id: str,
        values: dict[str, Any],
        *,
        match: dict[str, Any] | None = None,
    ) -> None: ...

    async def delete(self, row_id: str) -> None: ...


class RemoteStore(Protocol):
    """The four tables the store synchronizes with."""
    workspaces: TableGateway
    projects: TableGateway
    tasks: TableGateway
    activities: TableGateway


SnapshotListener = Callable[[StoreSnapshot], None]
