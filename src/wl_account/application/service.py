"""LedgerApplicationService — the ledger engine.

Every balance-affecting operation runs as one atomic unit on the caller's
AsyncSession: the repository issues the guarded UPDATE plus the transaction
INSERT/DELETE, and this service commits or rolls back the whole unit.

Cache discipline:
  - validation happens before any store access
  - the cache is written only after a successful commit (write-through)
  - a cached balance is never used to decide whether a debit is affordable
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_account.application.schemas import BalanceResponse, LedgerResult, UndoResult
from src.wl_account.domain.cache import EntryCache
from src.wl_account.domain.models import (
    CATEGORY_NAME_MAX_LENGTH,
    Category,
    Transaction,
    User,
    normalize_category_name,
)
from src.wl_account.domain.repository import BalanceStoreProtocol
from src.wl_account.infrastructure.persistence import BalanceStore
from src.wl_common.amounts import parse_amount
from src.wl_common.datetime_utils import utc_now
from src.wl_common.errors import (
    AppError,
    MissingCategoryError,
    NothingToUndoError,
    StoreError,
    TransactionNotUndoableError,
    UserNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LedgerApplicationService:
    def __init__(
        self,
        repo: BalanceStoreProtocol | None = None,
        cache: EntryCache | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repo: BalanceStoreProtocol = repo or BalanceStore()
        self._cache = cache if cache is not None else EntryCache.from_settings()
        self._clock = clock

    @property
    def cache(self) -> EntryCache:
        return self._cache

    async def ensure_user(self, db: AsyncSession, user_id: str, name: str) -> User | None:
        """Best-effort presence check. Never raises; returns None if the store failed."""
        cached = self._cache.get_user(user_id)
        if cached is not None:
            return User(id=cached.id, name=cached.name, wallet_amount=cached.wallet_amount)

        try:
            user = await self._repo.find_user(db, user_id)
            if user is None:
                user = await self._repo.create_user(db, user_id, name, 0)
                await db.commit()
                logger.info("Created user %s (%s)", user_id, name)
        except Exception:
            logger.warning("ensure_user failed for %s, continuing", user_id, exc_info=True)
            await self._rollback_quietly(db)
            return None

        self._cache.set_user(user_id, user)
        return user

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        cached = self._cache.get_user(user_id)
        if cached is not None:
            return BalanceResponse.from_values(user_id, cached.name, cached.wallet_amount)

        try:
            user = await self._repo.find_user(db, user_id)
        except SQLAlchemyError as exc:
            logger.exception("fetch balance failed for user %s", user_id)
            raise StoreError("fetch balance") from exc
        if user is None:
            raise UserNotFoundError(user_id)
        self._cache.set_user(user_id, user)
        return BalanceResponse.from_values(user_id, user.name, user.wallet_amount)

    async def credit(self, db: AsyncSession, user_id: str, amount: object) -> LedgerResult:
        cents = parse_amount(amount)

        user, txn = await self._run_atomic(
            db,
            "process credit",
            user_id,
            lambda: self._repo.apply_credit(db, user_id, cents, self._clock()),
        )
        self._cache.update_user(user_id, user)
        logger.info("Credit %d for user %s, balance now %d", cents, user_id, user.wallet_amount)
        return LedgerResult.from_result(user, txn)

    async def debit(
        self, db: AsyncSession, user_id: str, amount: object, category_name: str | None
    ) -> LedgerResult:
        cents = parse_amount(amount)
        if category_name is None or not normalize_category_name(category_name):
            raise MissingCategoryError()

        category = await self.resolve_category(db, category_name)
        user, txn = await self._run_atomic(
            db,
            "process debit",
            user_id,
            lambda: self._repo.apply_debit(db, user_id, cents, category, self._clock()),
        )
        self._cache.update_user(user_id, user)
        logger.info(
            "Debit %d (%s) for user %s, balance now %d",
            cents, category.name, user_id, user.wallet_amount,
        )
        return LedgerResult.from_result(user, txn)

    async def set_balance(self, db: AsyncSession, user_id: str, amount: object) -> LedgerResult:
        cents = parse_amount(amount)

        user, txn = await self._run_atomic(
            db,
            "set wallet",
            user_id,
            lambda: self._repo.set_wallet(db, user_id, cents, self._clock()),
        )
        self._cache.update_user(user_id, user)
        logger.info("Wallet of user %s set to %d", user_id, cents)
        return LedgerResult.from_result(user, txn)

    async def undo(self, db: AsyncSession, user_id: str) -> UndoResult:
        async def unit() -> tuple[Transaction, User]:
            latest = await self._repo.find_latest_transaction(db, user_id)
            if latest is None:
                raise NothingToUndoError()
            # SET_WALLET overwrote the balance; there is no delta to reverse
            if not latest.undoable:
                raise TransactionNotUndoableError(latest.id, latest.type.value)
            user = await self._repo.revert_transaction(db, latest)
            return latest, user

        undone, user = await self._run_atomic(db, "undo transaction", user_id, unit)
        self._cache.update_user(user_id, user)
        logger.info(
            "Undid %s #%d for user %s, balance now %d",
            undone.type.value, undone.id, user_id, user.wallet_amount,
        )
        return UndoResult.from_result(user, undone)

    async def resolve_category(self, db: AsyncSession, name: str) -> Category:
        """Cache-first lookup; lazily creates the category on first use."""
        normalized = normalize_category_name(name)
        if len(normalized) > CATEGORY_NAME_MAX_LENGTH:
            raise ValidationError(
                "category",
                f"Category name must be at most {CATEGORY_NAME_MAX_LENGTH} characters",
            )
        cached = self._cache.get_category(normalized)
        if cached is not None:
            return cached

        async def unit() -> Category:
            found = await self._repo.find_category(db, normalized)
            if found is not None:
                return found
            return await self._repo.create_category(db, normalized)

        category = await self._run_atomic(db, "resolve category", normalized, unit)
        self._cache.set_category(normalized, category)
        return category

    async def _run_atomic(
        self,
        db: AsyncSession,
        operation: str,
        subject: str,
        unit: Callable[[], Awaitable[T]],
    ) -> T:
        try:
            result = await unit()
            await db.commit()
        except AppError as exc:
            await self._rollback_quietly(db)
            logger.info("%s rejected for %s: %s", operation, subject, exc.message)
            raise
        except SQLAlchemyError as exc:
            await self._rollback_quietly(db)
            logger.exception("%s failed for %s", operation, subject)
            raise StoreError(operation) from exc
        return result

    async def _rollback_quietly(self, db: AsyncSession) -> None:
        try:
            await db.rollback()
        except SQLAlchemyError:
            logger.warning("rollback failed", exc_info=True)
