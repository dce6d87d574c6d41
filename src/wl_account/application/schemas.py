"""Pydantic schemas returned by the ledger engine."""

from pydantic import BaseModel

from src.wl_account.domain.models import DebitTransaction, Transaction, User
from src.wl_common.amounts import cents_to_display


class TransactionItem(BaseModel):
    id: int
    type: str
    amount_cents: int
    amount_display: str
    category: str | None
    date: str  # ISO8601 string

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionItem":
        return cls(
            id=txn.id,
            type=txn.type.value,
            amount_cents=txn.amount,
            amount_display=cents_to_display(txn.amount),
            category=txn.category.name if isinstance(txn, DebitTransaction) else None,
            date=txn.date.isoformat(),
        )


class BalanceResponse(BaseModel):
    user_id: str
    name: str
    wallet_amount_cents: int
    wallet_amount_display: str

    @classmethod
    def from_values(cls, user_id: str, name: str, wallet_amount: int) -> "BalanceResponse":
        return cls(
            user_id=user_id,
            name=name,
            wallet_amount_cents=wallet_amount,
            wallet_amount_display=cents_to_display(wallet_amount),
        )


class LedgerResult(BaseModel):
    """Outcome of credit / debit / set: the new balance plus the row written."""

    user_id: str
    amount_cents: int
    amount_display: str
    wallet_amount_cents: int
    wallet_amount_display: str
    transaction: TransactionItem

    @classmethod
    def from_result(cls, user: User, txn: Transaction) -> "LedgerResult":
        return cls(
            user_id=user.id,
            amount_cents=txn.amount,
            amount_display=cents_to_display(txn.amount),
            wallet_amount_cents=user.wallet_amount,
            wallet_amount_display=cents_to_display(user.wallet_amount),
            transaction=TransactionItem.from_domain(txn),
        )


class UndoResult(BaseModel):
    user_id: str
    undone: TransactionItem
    wallet_amount_cents: int
    wallet_amount_display: str

    @classmethod
    def from_result(cls, user: User, undone: Transaction) -> "UndoResult":
        return cls(
            user_id=user.id,
            undone=TransactionItem.from_domain(undone),
            wallet_amount_cents=user.wallet_amount,
            wallet_amount_display=cents_to_display(user.wallet_amount),
        )
