"""Remote Persistence Gateway — select/insert/update/delete per table over SQLAlchemy.

Invariants:
    - One call = one DB session = one transaction; no retry, no cache
    - Rows in and out are storage-shape dicts keyed by column name
    - update/delete that match no row raise RowNotFoundError
    - update with `match` guards raises StaleRevisionError when the row exists but
      a guard column moved (lost-update protection for embedded JSON arrays)
    - Transport/constraint failures surface as typed errors via DatabaseSessionManager
    - Column names are checked before any statement runs: an unknown one raises
      UnknownColumnError and never reaches the database

Design Decisions:
    - Core statements on Model.__table__ over ORM unit-of-work: the gateway deals in
      partial rows, and the store owns identity (ADR: no second identity map)
    - INSERT ... RETURNING: the remote store issues ids/defaults and the caller
      gets the confirmed row back in the same round trip
"""

import logging
from typing import Any

from sqlalchemy import Column, Table, delete, insert, select, update

from worksync.core.errors import (
    RowNotFoundError, StaleRevisionError, UnknownColumnError,
)
from worksync.infrastructure.database import DatabaseSessionManager
from worksync.models import Activity, Project, Task, Workspace

logger = logging.getLogger(__name__)


class SqlTableGateway:
    """Gateway for a single remote table."""

    def __init__(self, db: DatabaseSessionManager, table: Table):
        self._db = db
        self._table = table
        self.table_name = table.name

    def _column(self, name: str, operation: str) -> Column:
        try:
            return self._table.c[name]
        except KeyError:
            raise UnknownColumnError(self.table_name, name, operation) from None

    async def select(
        self,
        filters: dict[str, Any] | None = None,
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Rows matching every filter. A list/tuple/set value means IN."""
        operation = f"select {self.table_name}"
        stmt = select(self._table)
        for name, value in (filters or {}).items():
            column = self._column(name, operation)
            if isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_(list(value)))
            else:
                stmt = stmt.where(column == value)
        if order_by:
            column = self._column(order_by, operation)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._db.session(operation) as db:
            result = await db.execute(stmt)
            rows = [dict(row) for row in result.mappings().all()]
        logger.debug(f"{operation}: {len(rows)} row(s)")
        return rows

    async def insert(self, row: dict[str, Any]) -> dict[str, Any]:
        """Insert and return the stored row, including remote defaults."""
        operation = f"insert {self.table_name}"
        for name in row:
            self._column(name, operation)
        stmt = insert(self._table).values(**row).returning(*self._table.c)
        async with self._db.session(operation) as db:
            result = await db.execute(stmt)
            created = dict(result.mappings().one())
            await db.commit()
        logger.debug(f"{operation}: {created['id']}")
        return created

    async def update(
        self,
        row_id: str,
        values: dict[str, Any],
        *,
        match: dict[str, Any] | None = None,
    ) -> None:
        """Partial update of one row, optionally guarded by `match` columns."""
        if not values:
            return
        operation = f"update {self.table_name}"
        for name in values:
            self._column(name, operation)
        id_column = self._column("id", operation)
        stmt = update(self._table).where(id_column == row_id)
        for name, expected in (match or {}).items():
            stmt = stmt.where(self._column(name, operation) == expected)
        stmt = stmt.values(**values)

        async with self._db.session(operation) as db:
            result = await db.execute(stmt)
            if result.rowcount == 0:
                exists = await db.scalar(
                    select(id_column).where(id_column == row_id),
                )
                if exists is not None and match:
                    raise StaleRevisionError(self.table_name, row_id, match)
                raise RowNotFoundError(self.table_name, row_id, operation)
            await db.commit()
        logger.debug(f"{operation}: {row_id} ({', '.join(sorted(values))})")

    async def delete(self, row_id: str) -> None:
        operation = f"delete {self.table_name}"
        stmt = delete(self._table).where(self._column("id", operation) == row_id)
        async with self._db.session(operation) as db:
            result = await db.execute(stmt)
            if result.rowcount == 0:
                raise RowNotFoundError(self.table_name, row_id, operation)
            await db.commit()
        logger.debug(f"{operation}: {row_id}")


class SqlRemoteStore:
    """The four synchronized tables, sharing one session manager."""

    def __init__(self, db: DatabaseSessionManager):
        self.workspaces = SqlTableGateway(db, Workspace.__table__)
        self.projects = SqlTableGateway(db, Project.__table__)
        self.tasks = SqlTableGateway(db, Task.__table__)
        self.activities = SqlTableGateway(db, Activity.__table__)
