from datetime import UTC, datetime

import pytest

from src.wl_account.domain.models import (
    Category,
    CreditTransaction,
    DebitTransaction,
    SetWalletTransaction,
    normalize_category_name,
)
from src.wl_common.enums import TransactionType

NOW = datetime(2026, 10, 16, tzinfo=UTC)


class TestTransactionVariants:
    def test_credit(self) -> None:
        txn = CreditTransaction(id=1, user_id="42", amount=10000, date=NOW)
        assert txn.type is TransactionType.CREDIT
        assert txn.signed_amount == 10000
        assert txn.reversal_delta == -10000
        assert txn.undoable is True

    def test_debit_carries_category(self) -> None:
        food = Category(id=3, name="food")
        txn = DebitTransaction(id=2, user_id="42", amount=3000, date=NOW, category=food)
        assert txn.type is TransactionType.DEBIT
        assert txn.category == food
        assert txn.signed_amount == -3000
        assert txn.reversal_delta == 3000

    def test_debit_requires_category(self) -> None:
        with pytest.raises(TypeError):
            DebitTransaction(id=2, user_id="42", amount=3000, date=NOW)  # type: ignore[call-arg]

    def test_set_wallet_is_not_undoable(self) -> None:
        txn = SetWalletTransaction(id=3, user_id="42", amount=50000, date=NOW)
        assert txn.type is TransactionType.SET_WALLET
        assert txn.signed_amount == 0
        assert txn.undoable is False

    def test_credit_has_no_category_attribute(self) -> None:
        txn = CreditTransaction(id=1, user_id="42", amount=1, date=NOW)
        assert not hasattr(txn, "category")


class TestNormalizeCategoryName:
    def test_lowercase_and_trim(self) -> None:
        assert normalize_category_name("  Food ") == "food"

    def test_already_normal(self) -> None:
        assert normalize_category_name("travel") == "travel"
