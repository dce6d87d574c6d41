"""HistoryApplicationService — the read-only query engine.

Bypasses the entry cache entirely: every committed transaction must show up.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.wl_account.application.schemas import TransactionItem
from src.wl_common.amounts import cents_to_display
from src.wl_common.datetime_utils import utc_now, window_start
from src.wl_common.errors import StoreError
from src.wl_history.application.schemas import (
    BreakdownResponse,
    CategorySpendItem,
    HistoryResponse,
)
from src.wl_history.domain.periods import period_label, resolve_window_days
from src.wl_history.domain.repository import HistoryRepositoryProtocol
from src.wl_history.infrastructure.persistence import HistoryRepository

logger = logging.getLogger(__name__)


class HistoryApplicationService:
    def __init__(
        self,
        repo: HistoryRepositoryProtocol | None = None,
        clock: Callable[[], datetime] = utc_now,
        max_rows: int | None = None,
    ) -> None:
        self._repo: HistoryRepositoryProtocol = repo or HistoryRepository()
        self._clock = clock
        self._max_rows = max_rows or settings.HISTORY_LIMIT

    async def history(
        self,
        db: AsyncSession,
        user_id: str,
        period: str | None = None,
        limit: int | None = None,
    ) -> HistoryResponse:
        now = self._clock()
        days = resolve_window_days(period, now)
        cap = max(1, min(limit, self._max_rows)) if limit is not None else self._max_rows

        try:
            txns = await self._repo.list_transactions_since(
                db, user_id, window_start(now, days), cap
            )
        except SQLAlchemyError as exc:
            logger.exception("history query failed for user %s", user_id)
            raise StoreError("fetch transaction history") from exc

        net = sum(t.signed_amount for t in txns)
        return HistoryResponse(
            user_id=user_id,
            period=period_label(period),
            window_days=days,
            items=[TransactionItem.from_domain(t) for t in txns],
            net_total_cents=net,
            net_total_display=cents_to_display(net),
        )

    async def category_breakdown(
        self, db: AsyncSession, user_id: str, period: str | None = None
    ) -> BreakdownResponse:
        now = self._clock()
        days = resolve_window_days(period, now)

        try:
            spends = await self._repo.group_debits_by_category(
                db, user_id, window_start(now, days)
            )
        except SQLAlchemyError as exc:
            logger.exception("category breakdown failed for user %s", user_id)
            raise StoreError("fetch category breakdown") from exc

        spends = sorted(
            (s for s in spends if s.count > 0),
            key=lambda s: (-s.total, s.category.name),
        )
        total_spent = sum(s.total for s in spends)
        return BreakdownResponse(
            user_id=user_id,
            period=period_label(period),
            window_days=days,
            items=[CategorySpendItem.from_domain(s) for s in spends],
            total_spent_cents=total_spent,
            total_spent_display=cents_to_display(total_spent),
            transaction_count=sum(s.count for s in spends),
        )
