"""Domain models for wl_account — pure dataclasses, no SQLAlchemy dependency.

Transactions are a tagged variant: only DebitTransaction carries a Category,
so no code path has to thread an optional category_id around.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar

from src.wl_common.enums import TransactionType


# Width of categories.name
CATEGORY_NAME_MAX_LENGTH = 100


def normalize_category_name(name: str) -> str:
    return name.strip().lower()


@dataclass
class User:
    id: str
    name: str
    wallet_amount: int   # cents
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Category:
    id: int
    name: str            # normalized (lowercase, trimmed)


@dataclass(frozen=True, kw_only=True)
class _TransactionBase:
    id: int              # BIGSERIAL
    user_id: str
    amount: int          # cents, always >= 0
    date: datetime

    type: ClassVar[TransactionType]
    undoable: ClassVar[bool] = True

    @property
    def signed_amount(self) -> int:
        """Effect on the running balance; SET_WALLET rows contribute nothing."""
        raise NotImplementedError

    @property
    def reversal_delta(self) -> int:
        """Balance delta that cancels this transaction."""
        return -self.signed_amount


@dataclass(frozen=True, kw_only=True)
class CreditTransaction(_TransactionBase):
    type: ClassVar[TransactionType] = TransactionType.CREDIT

    @property
    def signed_amount(self) -> int:
        return self.amount


@dataclass(frozen=True, kw_only=True)
class DebitTransaction(_TransactionBase):
    category: Category

    type: ClassVar[TransactionType] = TransactionType.DEBIT

    @property
    def signed_amount(self) -> int:
        return -self.amount


@dataclass(frozen=True, kw_only=True)
class SetWalletTransaction(_TransactionBase):
    """`amount` is the absolute balance the wallet was set to."""

    type: ClassVar[TransactionType] = TransactionType.SET_WALLET
    undoable: ClassVar[bool] = False

    @property
    def signed_amount(self) -> int:
        return 0


Transaction = CreditTransaction | DebitTransaction | SetWalletTransaction
