"""HistoryRepository — ORM-level SELECTs over transactions and categories."""

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_account.domain.models import Category, Transaction
from src.wl_account.infrastructure.db_models import CategoryORM, TransactionORM
from src.wl_account.infrastructure.persistence import row_to_transaction
from src.wl_common.enums import TransactionType
from src.wl_history.domain.models import CategorySpend


class HistoryRepository:
    async def list_transactions_since(
        self, db: AsyncSession, user_id: str, since: datetime, limit: int
    ) -> list[Transaction]:
        stmt = (
            select(
                TransactionORM.id,
                TransactionORM.user_id,
                TransactionORM.type,
                TransactionORM.amount,
                TransactionORM.category_id,
                TransactionORM.date,
                CategoryORM.name.label("category_name"),
            )
            .outerjoin(CategoryORM, CategoryORM.id == TransactionORM.category_id)
            .where(TransactionORM.user_id == user_id, TransactionORM.date >= since)
            .order_by(TransactionORM.date.desc(), TransactionORM.id.desc())
            .limit(limit)
        )
        result = await db.execute(stmt)
        return [row_to_transaction(row) for row in result.fetchall()]

    async def group_debits_by_category(
        self, db: AsyncSession, user_id: str, since: datetime
    ) -> list[CategorySpend]:
        total = func.sum(TransactionORM.amount).label("total")
        stmt = (
            select(
                CategoryORM.id.label("category_id"),
                CategoryORM.name.label("category_name"),
                total,
                func.count(TransactionORM.id).label("count"),
            )
            .join(CategoryORM, CategoryORM.id == TransactionORM.category_id)
            .where(
                TransactionORM.user_id == user_id,
                TransactionORM.type == TransactionType.DEBIT.value,
                TransactionORM.date >= since,
            )
            .group_by(CategoryORM.id, CategoryORM.name)
            .order_by(total.desc(), CategoryORM.name)
        )
        result = await db.execute(stmt)
        return [
            CategorySpend(
                category=Category(id=row.category_id, name=row.category_name),
                total=int(row.total),
                count=row.count,
            )
            for row in result.fetchall()
        ]
