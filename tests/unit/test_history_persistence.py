"""Unit tests for HistoryRepository using MagicMock AsyncSession."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.wl_account.domain.models import CreditTransaction, DebitTransaction
from src.wl_history.infrastructure.persistence import HistoryRepository

NOW = datetime(2026, 10, 16, 12, 0, tzinfo=UTC)


def _txn_row(txn_id: int, txn_type: str, amount: int, category_id=None, category_name=None):
    row = MagicMock()
    row.id = txn_id
    row.user_id = "42"
    row.type = txn_type
    row.amount = amount
    row.date = NOW
    row.category_id = category_id
    row.category_name = category_name
    return row


def _spend_row(category_id: int, name: str, total, count: int):
    row = MagicMock()
    row.category_id = category_id
    row.category_name = name
    row.total = total
    row.count = count
    return row


@pytest.fixture
def db():
    return MagicMock()


class TestListTransactionsSince:
    async def test_maps_rows_to_variants(self, db) -> None:
        result_mock = MagicMock()
        result_mock.fetchall.return_value = [
            _txn_row(2, "DEBIT", 3000, 1, "food"),
            _txn_row(1, "CREDIT", 10000),
        ]
        db.execute = AsyncMock(return_value=result_mock)

        txns = await HistoryRepository().list_transactions_since(db, "42", NOW, 50)

        assert isinstance(txns[0], DebitTransaction)
        assert txns[0].category.name == "food"
        assert isinstance(txns[1], CreditTransaction)

    async def test_query_filters_user_window_and_limit(self, db) -> None:
        result_mock = MagicMock()
        result_mock.fetchall.return_value = []
        db.execute = AsyncMock(return_value=result_mock)

        await HistoryRepository().list_transactions_since(db, "42", NOW, 25)

        stmt = db.execute.await_args.args[0]
        compiled = stmt.compile()
        sql = str(compiled)
        assert "ORDER BY transactions.date DESC, transactions.id DESC" in sql
        assert "LEFT OUTER JOIN categories" in sql
        params = list(compiled.params.values())
        assert "42" in params
        assert NOW in params
        assert 25 in params


class TestGroupDebitsByCategory:
    async def test_maps_rows(self, db) -> None:
        result_mock = MagicMock()
        result_mock.fetchall.return_value = [
            _spend_row(2, "travel", 30000, 1),
            _spend_row(1, "food", 20000, 3),
        ]
        db.execute = AsyncMock(return_value=result_mock)

        spends = await HistoryRepository().group_debits_by_category(db, "42", NOW)

        assert [(s.category.name, s.total, s.count) for s in spends] == [
            ("travel", 30000, 1),
            ("food", 20000, 3),
        ]

    async def test_only_debits_grouped(self, db) -> None:
        result_mock = MagicMock()
        result_mock.fetchall.return_value = []
        db.execute = AsyncMock(return_value=result_mock)

        await HistoryRepository().group_debits_by_category(db, "42", NOW)

        compiled = db.execute.await_args.args[0].compile()
        assert "GROUP BY categories.id, categories.name" in str(compiled)
        assert "DEBIT" in compiled.params.values()
