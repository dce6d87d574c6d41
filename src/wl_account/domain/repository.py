"""Balance store Protocol — dependency inversion for testability.

Unit tests inject a mock (or an in-memory fake) that conforms to this Protocol.
Infrastructure layer provides the PostgreSQL implementation.

Each balance-bearing method is one atomic unit: the balance check, the
balance write and the transaction insert/delete run on the same session and
are committed (or rolled back) together by the caller.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_account.domain.models import (
    Category,
    CreditTransaction,
    DebitTransaction,
    SetWalletTransaction,
    Transaction,
    User,
)


class BalanceStoreProtocol(Protocol):
    async def find_user(self, db: AsyncSession, user_id: str) -> User | None: ...

    async def create_user(
        self, db: AsyncSession, user_id: str, name: str, wallet_amount: int
    ) -> User: ...

    async def find_category(self, db: AsyncSession, name: str) -> Category | None: ...

    async def create_category(self, db: AsyncSession, name: str) -> Category: ...

    async def apply_credit(
        self, db: AsyncSession, user_id: str, amount: int, at: datetime
    ) -> tuple[User, CreditTransaction]: ...

    async def apply_debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        category: Category,
        at: datetime,
    ) -> tuple[User, DebitTransaction]: ...

    async def set_wallet(
        self, db: AsyncSession, user_id: str, amount: int, at: datetime
    ) -> tuple[User, SetWalletTransaction]: ...

    async def find_latest_transaction(
        self, db: AsyncSession, user_id: str
    ) -> Transaction | None: ...

    async def revert_transaction(
        self, db: AsyncSession, transaction: Transaction
    ) -> User: ...
