"""Activity Logger — audit record per confirmed mutation plus a bounded, newest-first feed.

Invariants:
    - log() inserts exactly one activity row, then replaces the feed wholesale
      with the latest `limit` rows for the actor (no incremental merge)
    - The feed is only replaced while is_current() holds, so a row written for a
      signed-out actor never lands in the next actor's feed
    - log() never raises WorkSyncError: a failed insert/refetch is reported to the
      log stream and dropped, so the already-confirmed mutation stands
    - refresh() DOES raise: it is part of the load cycle, where failures are terminal
    - The feed is a tuple — consumers can hold it without it changing underneath them

Design Decisions:
    - Refetch over local prepend: the remote store's created_at ordering is the
      only ordering (ADR: one extra round trip per log, no ordering bugs)
"""

import logging
from typing import Any, Callable

from worksync.core.domain_types import DEFAULT_ACTIVITY_FEED_LIMIT, EntityType
from worksync.core.entities import Activity
from worksync.core.entity_mapper import activity_to_domain, activity_to_storage
from worksync.core.errors import WorkSyncError
from worksync.core.repository_protocols import TableGateway

logger = logging.getLogger(__name__)


class ActivityLogger:
    """Writes audit records and owns the in-memory activity feed."""

    def __init__(
        self, activities: TableGateway, limit: int = DEFAULT_ACTIVITY_FEED_LIMIT,
    ):
        self._activities = activities
        self._limit = limit
        self._feed: tuple[Activity, ...] = ()

    @property
    def feed(self) -> tuple[Activity, ...]:
        return self._feed

    @property
    def limit(self) -> int:
        return self._limit

    async def log(
        self,
        actor_id: str,
        action: str,
        entity_type: EntityType | str,
        entity_id: str,
        entity_name: str | None = None,
        metadata: dict[str, Any] | None = None,
        *,
        is_current: Callable[[], bool] = lambda: True,
    ) -> None:
        """Record one action. Best-effort: failures are logged, not raised."""
        row = activity_to_storage({
            "user_id": actor_id,
            "action": action,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "entity_name": entity_name,
            "metadata": metadata or {},
        })
        try:
            await self._activities.insert(row)
            if is_current():
                feed = await self.fetch(actor_id)
                if is_current():
                    self.replace(feed)
        except WorkSyncError as e:
            logger.warning(
                f"Activity logging failed: {e.message}",
                extra={
                    "actor_id": actor_id,
                    "action": action,
                    "entity_type": row["entity_type"],
                    "entity_id": entity_id,
                    "error_code": e.code,
                },
            )

    async def fetch(self, actor_id: str) -> tuple[Activity, ...]:
        """The actor's latest activities, newest first. Does not touch the feed."""
        rows = await self._activities.select(
            {"user_id": actor_id},
            order_by="created_at", descending=True, limit=self._limit,
        )
        return tuple(activity_to_domain(r) for r in rows)

    async def refresh(self, actor_id: str) -> tuple[Activity, ...]:
        """Replace the feed with the actor's latest activities."""
        self.replace(await self.fetch(actor_id))
        return self._feed

    def replace(self, feed: tuple[Activity, ...]) -> None:
        self._feed = tuple(feed)

    def reset(self) -> None:
        self._feed = ()
