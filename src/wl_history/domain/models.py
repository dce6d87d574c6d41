from dataclasses import dataclass

from src.wl_account.domain.models import Category


@dataclass(frozen=True)
class CategorySpend:
    category: Category
    total: int   # cents, sum of DEBIT amounts in the window
    count: int
