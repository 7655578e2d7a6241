"""
PostgreSQL inscription store (SQLAlchemy async)
"""

from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from models.inscription import Inscription
from core.exceptions import DatabaseError
import logging

logger = logging.getLogger(__name__)


class PostgresInscriptionStore:
    """
    Inscription rows in PostgreSQL.

    Ensures:
    - INSERT ... ON CONFLICT (id) DO NOTHING, so a row already stored never
      aborts the rest of the batch
    - one transaction per call
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.table = Inscription.__table__

    async def insert_unordered(self, rows: List[Dict[str, Any]]) -> int:
        if not rows:
            return 0

        # Multi-VALUES inserts need one key set; absent optional columns become NULL
        keys = list(dict.fromkeys(k for row in rows for k in row))
        values = [{k: row.get(k) for k in keys} for row in rows]

        stmt = (
            insert(self.table)
            .values(values)
            .on_conflict_do_nothing(index_elements=["id"])
            .returning(self.table.c.id)
        )

        try:
            result = await self.db.execute(stmt)
            inserted = len(result.fetchall())
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DatabaseError(
                "Bulk insert failed",
                context={"operation": "INSERT", "table_name": "inscriptions", "rows": len(rows)},
                original_exception=e
            )

        return inserted

    async def delete_by_block(self, height: int) -> int:
        try:
            result = await self.db.execute(
                delete(self.table).where(self.table.c.genesis_block_height == height)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DatabaseError(
                f"Failed to delete inscriptions of block {height}",
                context={"operation": "DELETE", "table_name": "inscriptions", "block": height},
                original_exception=e
            )
        return result.rowcount or 0

    async def max_block(self) -> Optional[int]:
        try:
            result = await self.db.execute(select(func.max(self.table.c.genesis_block_height)))
        except SQLAlchemyError as e:
            raise DatabaseError(
                "Failed to read highest stored block",
                context={"operation": "SELECT", "table_name": "inscriptions"},
                original_exception=e
            )
        return result.scalar()
