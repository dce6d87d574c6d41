"""Read-only history queries. Always hit the store, never the entry cache."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_account.domain.models import Transaction
from src.wl_history.domain.models import CategorySpend


class HistoryRepositoryProtocol(Protocol):
    async def list_transactions_since(
        self, db: AsyncSession, user_id: str, since: datetime, limit: int
    ) -> list[Transaction]: ...

    async def group_debits_by_category(
        self, db: AsyncSession, user_id: str, since: datetime
    ) -> list[CategorySpend]: ...
