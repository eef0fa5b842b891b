"""
Reset and load dataset tables.

Every run replaces its dataset table wholesale: drop, recreate, then insert
row by row with a commit after each row. There is no run-level transaction,
so a failing insert leaves the rows before it committed.
"""

from typing import List, Type
from pydantic import BaseModel
from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from core.exceptions import SchemaError, PersistenceError
from models.base import Base
import logging

logger = logging.getLogger(__name__)


class TableLoader:
    """
    Load cleaned records into a dataset table.

    Ensures:
    - The table exists with its fixed column set before loading
    - Each committed row survives a later failure in the same batch
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def reset_table(self, model: Type[Base]) -> None:
        """Drop the table if it exists, then create it empty"""
        table = model.__table__
        operation = "DROP"

        try:
            conn = await self.db.connection()
            await conn.run_sync(table.drop, checkfirst=True)
            operation = "CREATE"
            await conn.run_sync(table.create, checkfirst=True)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise SchemaError(
                f"Failed to reset table {table.name}",
                context={"table_name": table.name, "operation": operation},
                original_exception=e
            )

        logger.info(f"Reset table {table.name}")

    async def load(self, model: Type[Base], records: List[BaseModel]) -> int:
        """
        Insert records one at a time, committing after each.

        Returns:
            Number of rows committed

        Raises:
            PersistenceError: On the first failing insert
        """
        table_name = model.__tablename__
        committed = 0

        for index, record in enumerate(records):
            stmt = insert(model).values(**record.model_dump())

            try:
                await self.db.execute(stmt)
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                raise PersistenceError(
                    f"Failed to insert row into {table_name}",
                    context={
                        "table_name": table_name,
                        "row_index": index,
                        "rows_committed": committed
                    },
                    original_exception=e
                )

            committed += 1

        logger.info(f"Loaded {committed} rows into {table_name}")
        return committed
