"""Workspace Bootstrapper — guarantees an actor has at least one workspace after load.

Invariants:
    - Creates a workspace ONLY when the actor owns none
    - Never creates more than one workspace per call
    - Idempotent: once a workspace exists, repeated calls only read
    - Calls for the same actor are serialized, so two overlapping loads cannot
      both observe "no workspace" and both insert

Design Decisions:
    - Explicit bootstrap step over a branch inside a generic fetch (ADR: a read
      path with a hidden write is hard to reason about and to test)
    - Per-actor asyncio.Lock: single event loop, so no cross-thread primitive needed
    - A lock lives only while some call holds or waits on it; the table holds no
      entry for actors with no bootstrap in flight
"""

import asyncio
import logging

from worksync.core.domain_types import DEFAULT_COLOR
from worksync.core.entities import Actor, Workspace
from worksync.core.entity_mapper import workspace_to_domain, workspace_to_storage
from worksync.core.repository_protocols import TableGateway

logger = logging.getLogger(__name__)


def default_workspace_name(actor: Actor) -> str:
    return f"{actor.name}'s Workspace"


class WorkspaceBootstrapper:
    """Loads the actor's workspaces, creating the default one on first use."""

    def __init__(self, workspaces: TableGateway, default_color: str = DEFAULT_COLOR):
        self._workspaces = workspaces
        self._default_color = default_color
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    async def ensure_workspaces(self, actor: Actor) -> list[Workspace]:
        lock = self._locks.setdefault(actor.id, asyncio.Lock())
        self._waiters[actor.id] = self._waiters.get(actor.id, 0) + 1
        try:
            async with lock:
                return await self._load_or_create(actor)
        finally:
            self._waiters[actor.id] -= 1
            if not self._waiters[actor.id]:
                del self._waiters[actor.id]
                del self._locks[actor.id]

    async def _load_or_create(self, actor: Actor) -> list[Workspace]:
        rows = await self._workspaces.select(
            {"owner_id": actor.id}, order_by="created_at",
        )
        if rows:
            return [workspace_to_domain(r) for r in rows]

        row = workspace_to_storage({
            "name": default_workspace_name(actor),
            "color": self._default_color,
        })
        row["owner_id"] = actor.id
        created = await self._workspaces.insert(row)
        logger.info(
            f"Created default workspace for actor {actor.id}",
            extra={"actor_id": actor.id, "entity_type": "workspace",
                   "entity_id": str(created["id"])},
        )
        return [workspace_to_domain(created)]
