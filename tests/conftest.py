"""Shared test fixtures."""

import asyncio
import itertools
from collections.abc import AsyncGenerator
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.wl_account.domain.models import (
    Category,
    CreditTransaction,
    DebitTransaction,
    SetWalletTransaction,
    Transaction,
    User,
    normalize_category_name,
)
from src.wl_common.errors import (
    InsufficientBalanceError,
    NothingToUndoError,
    TransactionNotUndoableError,
    UserNotFoundError,
)


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints (lifespan not run)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TickingClock:
    """Returns a strictly increasing UTC datetime on every call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 10, 16, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


class InMemoryBalanceStore:
    """BalanceStoreProtocol in memory.

    One asyncio.Lock plays the role of the database row lock: every
    balance-bearing method holds it for its whole read-check-write, and
    yields to the loop while holding it so racing callers really interleave.
    """

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.categories: dict[str, Category] = {}
        self.transactions: list[Transaction] = []
        self.category_creates = 0
        self._txn_ids = itertools.count(1)
        self._category_ids = itertools.count(1)
        self._lock = asyncio.Lock()

    async def find_user(self, db: object, user_id: str) -> User | None:
        await asyncio.sleep(0)
        user = self.users.get(user_id)
        return replace(user) if user else None

    async def create_user(self, db: object, user_id: str, name: str, wallet_amount: int) -> User:
        user = self.users.setdefault(user_id, User(id=user_id, name=name, wallet_amount=wallet_amount))
        return replace(user)

    async def find_category(self, db: object, name: str) -> Category | None:
        return self.categories.get(normalize_category_name(name))

    async def create_category(self, db: object, name: str) -> Category:
        normalized = normalize_category_name(name)
        if normalized not in self.categories:
            self.category_creates += 1
            self.categories[normalized] = Category(id=next(self._category_ids), name=normalized)
        return self.categories[normalized]

    async def apply_credit(self, db: object, user_id: str, amount: int, at: datetime):
        async with self._lock:
            user = self._require(user_id)
            await asyncio.sleep(0)
            user.wallet_amount += amount
            txn = CreditTransaction(id=next(self._txn_ids), user_id=user_id, amount=amount, date=at)
            self.transactions.append(txn)
            return replace(user), txn

    async def apply_debit(
        self, db: object, user_id: str, amount: int, category: Category, at: datetime
    ):
        async with self._lock:
            user = self._require(user_id)
            balance = user.wallet_amount
            await asyncio.sleep(0)
            if balance < amount:
                raise InsufficientBalanceError(amount, balance)
            user.wallet_amount = balance - amount
            txn = DebitTransaction(
                id=next(self._txn_ids), user_id=user_id, amount=amount, date=at, category=category
            )
            self.transactions.append(txn)
            return replace(user), txn

    async def set_wallet(self, db: object, user_id: str, amount: int, at: datetime):
        async with self._lock:
            user = self._require(user_id)
            user.wallet_amount = amount
            txn = SetWalletTransaction(id=next(self._txn_ids), user_id=user_id, amount=amount, date=at)
            self.transactions.append(txn)
            return replace(user), txn

    async def find_latest_transaction(self, db: object, user_id: str) -> Transaction | None:
        mine = [t for t in self.transactions if t.user_id == user_id]
        if not mine:
            return None
        return max(mine, key=lambda t: (t.date, t.id))

    async def revert_transaction(self, db: object, transaction: Transaction) -> User:
        async with self._lock:
            if not transaction.undoable:
                raise TransactionNotUndoableError(transaction.id, transaction.type.value)
            if transaction not in self.transactions:
                raise NothingToUndoError()
            self.transactions.remove(transaction)
            user = self._require(transaction.user_id)
            user.wallet_amount += transaction.reversal_delta
            return replace(user)

    def rows_for(self, user_id: str) -> list[Transaction]:
        return [t for t in self.transactions if t.user_id == user_id]

    def _require(self, user_id: str) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user


@pytest.fixture
def store() -> InMemoryBalanceStore:
    return InMemoryBalanceStore()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def db() -> AsyncMock:
    """Stand-in AsyncSession: commit/rollback are awaitable no-ops."""
    return AsyncMock()
