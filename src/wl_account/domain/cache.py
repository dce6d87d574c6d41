"""Entry cache for User and Category lookups.

  - User entries: 5 min TTL, 100 entries (LRU)
  - Category entries: 30 min TTL, 500 entries (LRU), keyed by normalized name
  - Write-through: store commit first, then cache set/update
  - Read: cache-aside (check cache → store on miss → populate cache)

The cache is never the source of truth. It saves lookups; the affordability
check for a debit always runs inside the store's atomic unit.

Expiry is checked lazily on access, there is no background sweeper. Each
process owns its own instance; nothing is shared across workers.
"""

import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from dataclasses import dataclass, replace
from typing import Generic, TypeVar

from config.settings import settings
from src.wl_account.domain.models import Category, User, normalize_category_name

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

Clock = Callable[[], float]


class TTLRUCache(Generic[K, V]):
    """Bounded LRU map whose entries also expire `ttl` seconds after insertion.

    Safe for concurrent callers; last writer wins on identical keys.
    """

    def __init__(self, maxsize: int, ttl: float, clock: Clock = time.monotonic) -> None:
        if maxsize <= 0:
            raise ValueError(f"maxsize must be positive, got {maxsize}")
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self._maxsize = maxsize
        self._ttl = ttl
        self._clock = clock
        self._data: OrderedDict[K, tuple[float, V]] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def maxsize(self) -> int:
        return self._maxsize

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: K) -> V | None:
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return None
            expires_at, value = item
            if self._clock() >= expires_at:
                del self._data[key]
                return None
            self._data.move_to_end(key)
            return value

    def set(self, key: K, value: V) -> None:
        with self._lock:
            self._data[key] = (self._clock() + self._ttl, value)
            self._data.move_to_end(key)
            while len(self._data) > self._maxsize:
                self._data.popitem(last=False)

    def delete(self, key: K) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        # May include expired entries not yet touched
        with self._lock:
            return len(self._data)


@dataclass(frozen=True)
class CachedUser:
    id: str
    name: str
    wallet_amount: int   # cents
    last_updated: float  # wall-clock seconds


class EntryCache:
    """Owns the user and category caches; clock is injectable for TTL tests."""

    def __init__(
        self,
        user_ttl: float = 5 * 60,
        user_capacity: int = 100,
        category_ttl: float = 30 * 60,
        category_capacity: int = 500,
        clock: Clock = time.time,
    ) -> None:
        self._clock = clock
        self._users: TTLRUCache[str, CachedUser] = TTLRUCache(user_capacity, user_ttl, clock)
        self._categories: TTLRUCache[str, Category] = TTLRUCache(
            category_capacity, category_ttl, clock
        )

    @classmethod
    def from_settings(cls) -> "EntryCache":
        return cls(
            user_ttl=settings.USER_CACHE_TTL_SECONDS,
            user_capacity=settings.USER_CACHE_MAX_SIZE,
            category_ttl=settings.CATEGORY_CACHE_TTL_SECONDS,
            category_capacity=settings.CATEGORY_CACHE_MAX_SIZE,
        )

    # ---------------------------------------------------------------------------
    # Users
    # ---------------------------------------------------------------------------

    def get_user(self, user_id: str) -> CachedUser | None:
        return self._users.get(user_id)

    def set_user(self, user_id: str, user: User) -> CachedUser:
        cached = CachedUser(
            id=str(user.id),
            name=user.name,
            wallet_amount=user.wallet_amount,
            last_updated=self._clock(),
        )
        self._users.set(user_id, cached)
        return cached

    def update_user(self, user_id: str, user: User) -> CachedUser:
        """Merge a fresh store snapshot into the cached entry, or insert it."""
        existing = self._users.get(user_id)
        if existing is None:
            return self.set_user(user_id, user)
        merged = replace(
            existing,
            name=user.name or existing.name,
            wallet_amount=user.wallet_amount,
            last_updated=self._clock(),
        )
        self._users.set(user_id, merged)
        return merged

    def delete_user(self, user_id: str) -> None:
        self._users.delete(user_id)

    # ---------------------------------------------------------------------------
    # Categories
    # ---------------------------------------------------------------------------

    def get_category(self, name: str) -> Category | None:
        return self._categories.get(normalize_category_name(name))

    def set_category(self, name: str, category: Category) -> None:
        self._categories.set(normalize_category_name(name), category)

    def clear(self) -> None:
        self._users.clear()
        self._categories.clear()
