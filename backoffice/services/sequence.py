import logging
from typing import Optional

from tortoise.transactions import in_transaction

from backoffice.core.config import ORDER_NUMBER_SEED
from backoffice.models.order import SequenceCounter

log = logging.getLogger(__name__)

# Seeding and incrementing are the same statement, so two first allocations
# can never both observe an empty counter.
_UPSERT_SQL = (
    'INSERT INTO "{table}" ("name", "value") VALUES ({p_name}, {p_seed}) '
    'ON CONFLICT ("name") DO UPDATE SET "value" = "{table}"."value" + 1 '
    'RETURNING "value"'
)


def _placeholders(conn):
    if conn.capabilities.dialect == "postgres":
        return "$1", "$2"
    return "?", "?"


class SequentialNumberAllocator:
    """Hands out strictly increasing integers from one named counter."""

    def __init__(self, name: str = "order_number", seed: int = ORDER_NUMBER_SEED):
        self.name = name
        self.seed = seed

    async def next(self, using_db=None) -> int:
        """
        Atomically increments the counter and returns the new value.

        Pass the enclosing transaction as ``using_db`` so the number is only
        consumed if that transaction commits.
        """
        if using_db is not None:
            return await self._increment(using_db)
        async with in_transaction() as conn:
            return await self._increment(conn)

    async def _increment(self, conn) -> int:
        p_name, p_seed = _placeholders(conn)
        sql = _UPSERT_SQL.format(table=SequenceCounter._meta.db_table, p_name=p_name, p_seed=p_seed)
        _, rows = await conn.execute_query(sql, [self.name, self.seed])
        value = int(rows[0]["value"])
        log.debug(f"Sequence '{self.name}' issued {value}")
        return value

    async def current(self) -> Optional[int]:
        """Last issued value, or None before the first allocation."""
        counter = await SequenceCounter.get_or_none(name=self.name)
        return counter.value if counter else None
