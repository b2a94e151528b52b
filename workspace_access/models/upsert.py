"""
Dialect-aware bulk upserts.

PostgreSQL and SQLite get a native ``INSERT ... ON CONFLICT`` so that
concurrent writers collapse on the unique constraint inside the store.
Other dialects insert row by row inside a SAVEPOINT and treat an
``IntegrityError`` as "row already exists".
"""

from typing import Any, Sequence

from sqlalchemy import Table, and_, func, insert, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .base import Base


def _table_for(target: type[Base] | Table) -> Table:
    return target if isinstance(target, Table) else target.__table__


async def upsert_rows(
    session: AsyncSession,
    target: type[Base] | Table,
    rows: Sequence[dict[str, Any]],
    *,
    conflict_columns: Sequence[str],
    update_columns: Sequence[str] = (),
) -> None:
    """
    Insert ``rows``; on a conflict over ``conflict_columns`` either leave
    the existing row alone or overwrite ``update_columns``.

    Never commits: the caller owns the transaction.
    """
    if not rows:
        return

    table = _table_for(target)
    bind = session.get_bind()
    dialect = bind.dialect.name if bind is not None else ""

    if dialect in ("postgresql", "sqlite"):
        stmt = (pg_insert if dialect == "postgresql" else sqlite_insert)(table)
        if update_columns:
            set_ = {name: stmt.excluded[name] for name in update_columns}
            if "updated_at" in table.c:
                set_["updated_at"] = func.now()
            stmt = stmt.on_conflict_do_update(
                index_elements=list(conflict_columns),
                set_=set_,
            )
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=list(conflict_columns))
        await session.execute(stmt, list(rows))
        return

    for row in rows:
        try:
            async with session.begin_nested():
                await session.execute(insert(table).values(**row))
        except IntegrityError:
            # Another transaction created the same row concurrently.
            if update_columns:
                await session.execute(
                    update(table)
                    .where(and_(*(table.c[name] == row[name] for name in conflict_columns)))
                    .values({name: row[name] for name in update_columns})
                )
