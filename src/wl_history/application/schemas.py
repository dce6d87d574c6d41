"""Pydantic schemas for the history and breakdown queries."""

from pydantic import BaseModel

from src.wl_account.application.schemas import TransactionItem
from src.wl_common.amounts import cents_to_display
from src.wl_history.domain.models import CategorySpend


class HistoryResponse(BaseModel):
    user_id: str
    period: str
    window_days: int
    items: list[TransactionItem]
    net_total_cents: int       # credits − debits, SET_WALLET rows excluded
    net_total_display: str

    @property
    def is_empty(self) -> bool:
        return not self.items


class CategorySpendItem(BaseModel):
    category: str
    total_cents: int
    total_display: str
    count: int

    @classmethod
    def from_domain(cls, spend: CategorySpend) -> "CategorySpendItem":
        return cls(
            category=spend.category.name,
            total_cents=spend.total,
            total_display=cents_to_display(spend.total),
            count=spend.count,
        )


class BreakdownResponse(BaseModel):
    user_id: str
    period: str
    window_days: int
    items: list[CategorySpendItem]
    total_spent_cents: int
    total_spent_display: str
    transaction_count: int

    @property
    def is_empty(self) -> bool:
        return not self.items
