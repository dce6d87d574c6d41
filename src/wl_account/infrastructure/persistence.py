"""BalanceStore — PostgreSQL implementation of BalanceStoreProtocol.

All balance-mutating operations use atomic UPDATE ... RETURNING.
A result of 0 rows on a guarded UPDATE means a business constraint was
violated (insufficient balance) or the user row does not exist.

Transaction ownership: the CALLER (LedgerApplicationService) commits or rolls
back. Every method here only issues statements on the given session, so a
balance write and its transaction row always land in the same commit.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_account.domain.models import (
    Category,
    CreditTransaction,
    DebitTransaction,
    SetWalletTransaction,
    Transaction,
    User,
    normalize_category_name,
)
from src.wl_common.enums import TransactionType
from src.wl_common.errors import (
    InsufficientBalanceError,
    InternalError,
    NothingToUndoError,
    TransactionNotUndoableError,
    UserNotFoundError,
)

# ---------------------------------------------------------------------------
# SQL: users
# ---------------------------------------------------------------------------

_USER_COLUMNS = "id, name, wallet_amount, created_at, updated_at"

_FIND_USER_SQL = text(f"""
    SELECT {_USER_COLUMNS}
    FROM users
    WHERE id = :user_id
""")

_CREATE_USER_SQL = text(f"""
    INSERT INTO users (id, name, wallet_amount)
    VALUES (:user_id, :name, :wallet_amount)
    ON CONFLICT (id) DO NOTHING
    RETURNING {_USER_COLUMNS}
""")

_CREDIT_SQL = text(f"""
    UPDATE users
    SET wallet_amount = wallet_amount + :amount,
        updated_at = NOW()
    WHERE id = :user_id
    RETURNING {_USER_COLUMNS}
""")

_DEBIT_SQL = text(f"""
    UPDATE users
    SET wallet_amount = wallet_amount - :amount,
        updated_at = NOW()
    WHERE id = :user_id AND wallet_amount >= :amount
    RETURNING {_USER_COLUMNS}
""")

_SET_WALLET_SQL = text(f"""
    UPDATE users
    SET wallet_amount = :amount,
        updated_at = NOW()
    WHERE id = :user_id
    RETURNING {_USER_COLUMNS}
""")

_ADJUST_WALLET_SQL = text(f"""
    UPDATE users
    SET wallet_amount = wallet_amount + :delta,
        updated_at = NOW()
    WHERE id = :user_id
    RETURNING {_USER_COLUMNS}
""")

# ---------------------------------------------------------------------------
# SQL: categories
# ---------------------------------------------------------------------------

_FIND_CATEGORY_SQL = text("""
    SELECT id, name
    FROM categories
    WHERE name = :name
""")

# Unique constraint on name settles concurrent first use of the same category
_CREATE_CATEGORY_SQL = text("""
    INSERT INTO categories (name)
    VALUES (:name)
    ON CONFLICT (name) DO NOTHING
    RETURNING id, name
""")

# ---------------------------------------------------------------------------
# SQL: transactions
# ---------------------------------------------------------------------------

_INSERT_TRANSACTION_SQL = text("""
    INSERT INTO transactions (user_id, type, amount, category_id, date)
    VALUES (:user_id, :type, :amount, :category_id, :date)
    RETURNING id, user_id, type, amount, category_id, date
""")

# Row lock keeps two concurrent undos from reverting the same row twice
_LATEST_TRANSACTION_SQL = text("""
    SELECT t.id, t.user_id, t.type, t.amount, t.category_id, t.date,
           c.name AS category_name
    FROM transactions t
    LEFT JOIN categories c ON c.id = t.category_id
    WHERE t.user_id = :user_id
    ORDER BY t.date DESC, t.id DESC
    LIMIT 1
    FOR UPDATE OF t
""")

_DELETE_TRANSACTION_SQL = text("""
    DELETE FROM transactions
    WHERE id = :transaction_id AND user_id = :user_id
    RETURNING id
""")


def _row_to_user(row: object) -> User:
    return User(
        id=str(row.id),  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        wallet_amount=row.wallet_amount,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_category(row: object) -> Category:
    return Category(id=row.id, name=row.name)  # type: ignore[attr-defined]


def row_to_transaction(row: object, category: Category | None = None) -> Transaction:
    """Build the tagged variant from a transactions row.

    DEBIT rows take `category` when given, otherwise the joined
    `category_id` / `category_name` columns.
    """
    common = {
        "id": row.id,  # type: ignore[attr-defined]
        "user_id": str(row.user_id),  # type: ignore[attr-defined]
        "amount": row.amount,  # type: ignore[attr-defined]
        "date": row.date,  # type: ignore[attr-defined]
    }
    txn_type = TransactionType(row.type)  # type: ignore[attr-defined]
    if txn_type is TransactionType.CREDIT:
        return CreditTransaction(**common)
    if txn_type is TransactionType.SET_WALLET:
        return SetWalletTransaction(**common)
    if category is None:
        category = Category(
            id=row.category_id,  # type: ignore[attr-defined]
            name=row.category_name,  # type: ignore[attr-defined]
        )
    return DebitTransaction(category=category, **common)


class BalanceStore:
    """Concrete store — all balance operations atomic at the SQL level."""

    async def find_user(self, db: AsyncSession, user_id: str) -> User | None:
        result = await db.execute(_FIND_USER_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_user(row) if row else None

    async def create_user(
        self, db: AsyncSession, user_id: str, name: str, wallet_amount: int
    ) -> User:
        """Upsert: returns the existing row when the id is already taken."""
        result = await db.execute(
            _CREATE_USER_SQL,
            {"user_id": user_id, "name": name, "wallet_amount": wallet_amount},
        )
        row = result.fetchone()
        if row is not None:
            return _row_to_user(row)
        existing = await self.find_user(db, user_id)
        if existing is None:
            raise InternalError(f"User {user_id} neither inserted nor found")
        return existing

    async def find_category(self, db: AsyncSession, name: str) -> Category | None:
        result = await db.execute(
            _FIND_CATEGORY_SQL, {"name": normalize_category_name(name)}
        )
        row = result.fetchone()
        return _row_to_category(row) if row else None

    async def create_category(self, db: AsyncSession, name: str) -> Category:
        normalized = normalize_category_name(name)
        result = await db.execute(_CREATE_CATEGORY_SQL, {"name": normalized})
        row = result.fetchone()
        if row is not None:
            return _row_to_category(row)
        # Lost the race to a concurrent creator: the row exists now
        existing = await self.find_category(db, normalized)
        if existing is None:
            raise InternalError(f"Category {normalized!r} neither inserted nor found")
        return existing

    async def apply_credit(
        self, db: AsyncSession, user_id: str, amount: int, at: datetime
    ) -> tuple[User, CreditTransaction]:
        result = await db.execute(_CREDIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise UserNotFoundError(user_id)
        user = _row_to_user(row)
        txn = await self._insert_transaction(db, user_id, TransactionType.CREDIT, amount, at)
        return user, txn  # type: ignore[return-value]

    async def apply_debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        category: Category,
        at: datetime,
    ) -> tuple[User, DebitTransaction]:
        result = await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            current = await self.find_user(db, user_id)
            if current is None:
                raise UserNotFoundError(user_id)
            raise InsufficientBalanceError(amount, current.wallet_amount)
        user = _row_to_user(row)
        txn = await self._insert_transaction(
            db, user_id, TransactionType.DEBIT, amount, at, category
        )
        return user, txn  # type: ignore[return-value]

    async def set_wallet(
        self, db: AsyncSession, user_id: str, amount: int, at: datetime
    ) -> tuple[User, SetWalletTransaction]:
        result = await db.execute(_SET_WALLET_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise UserNotFoundError(user_id)
        user = _row_to_user(row)
        txn = await self._insert_transaction(
            db, user_id, TransactionType.SET_WALLET, amount, at
        )
        return user, txn  # type: ignore[return-value]

    async def find_latest_transaction(
        self, db: AsyncSession, user_id: str
    ) -> Transaction | None:
        result = await db.execute(_LATEST_TRANSACTION_SQL, {"user_id": user_id})
        row = result.fetchone()
        return row_to_transaction(row) if row else None

    async def revert_transaction(self, db: AsyncSession, transaction: Transaction) -> User:
        """Delete the row and apply its reversal delta in the same unit."""
        if not transaction.undoable:
            raise TransactionNotUndoableError(transaction.id, transaction.type.value)
        deleted = await db.execute(
            _DELETE_TRANSACTION_SQL,
            {"transaction_id": transaction.id, "user_id": transaction.user_id},
        )
        if deleted.fetchone() is None:
            raise NothingToUndoError()
        result = await db.execute(
            _ADJUST_WALLET_SQL,
            {"user_id": transaction.user_id, "delta": transaction.reversal_delta},
        )
        row = result.fetchone()
        if row is None:
            raise UserNotFoundError(transaction.user_id)
        return _row_to_user(row)

    async def _insert_transaction(
        self,
        db: AsyncSession,
        user_id: str,
        txn_type: TransactionType,
        amount: int,
        at: datetime,
        category: Category | None = None,
    ) -> Transaction:
        result = await db.execute(
            _INSERT_TRANSACTION_SQL,
            {
                "user_id": user_id,
                "type": txn_type.value,
                "amount": amount,
                "category_id": category.id if category else None,
                "date": at,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Transaction insert returned no rows — this should never happen")
        return row_to_transaction(row, category)
