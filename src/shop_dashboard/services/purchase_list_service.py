"""
Purchase List Service.

Builds the "what to order" report for a store: the per-day material
requirement over a period, computed from that period's sales.

Recomputation is pull-based. A report is computed when asked for and
cached under (store_id, period_from, period_to) for a limited time.
Writes that change a store's inputs (recording a sale, editing or deleting
a product) call invalidate_store_on_commit(); the store's entries are
dropped once the write is committed, so the next request recomputes.

Session Management Pattern:
- All public functions that touch the database accept session=None
- If session provided, use it directly
- If session is None, create a new session via session_scope()
"""

import logging
import threading
import time
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import event
from sqlalchemy.orm import Session

from shop_dashboard.services.database import session_scope
from shop_dashboard.services.exceptions import ValidationError
from shop_dashboard.services.logging_utils import get_service_logger, log_operation
from shop_dashboard.services.material_usage_service import (
    DailyMaterialUsage,
    SaleRecord,
    aggregate_material_usage,
    count_period_days,
    project_to_daily,
)
from shop_dashboard.utils.config import get_config
from shop_dashboard.utils.datetime_utils import DateLike, parse_date

logger = get_service_logger(__name__)

# (store_id, period_from, period_to)
CacheKey = Tuple[int, Optional[date], Optional[date]]
CachedList = Sequence[DailyMaterialUsage]


class PurchaseListCache:
    """
    Thread-safe cache of computed purchase lists with TTL (Time To Live).

    Entries are keyed by (store_id, period_from, period_to) and can be
    dropped per store when that store's sales or products change. Values
    are tuples of frozen DailyMaterialUsage, so readers cannot alter them.
    """

    def __init__(self, ttl_seconds: int = 300):
        self.cache: Dict[CacheKey, Tuple[CachedList, float]] = {}
        self.ttl = ttl_seconds
        self.lock = threading.RLock()

    def get(self, key: CacheKey) -> Optional[CachedList]:
        """Get cached value if not expired."""
        with self.lock:
            if key in self.cache:
                value, timestamp = self.cache[key]
                if time.time() - timestamp < self.ttl:
                    return value
                del self.cache[key]
            return None

    def put(self, key: CacheKey, value: CachedList) -> None:
        """Store value in cache with current timestamp."""
        with self.lock:
            self.cache[key] = (value, time.time())

    def invalidate(self, store_id: Optional[int] = None) -> None:
        """Remove cache entries, all of them or only one store's."""
        with self.lock:
            if store_id is None:
                self.cache.clear()
            else:
                for key in [k for k in self.cache if k[0] == store_id]:
                    del self.cache[key]

    def size(self) -> int:
        """Get current cache size, expired entries excluded."""
        with self.lock:
            current_time = time.time()
            expired_keys = [
                k for k, (_, timestamp) in self.cache.items() if current_time - timestamp >= self.ttl
            ]
            for key in expired_keys:
                del self.cache[key]
            return len(self.cache)


_purchase_list_cache: Optional[PurchaseListCache] = None


def get_purchase_list_cache() -> PurchaseListCache:
    """Global cache instance, created with the configured TTL on first use."""
    global _purchase_list_cache
    if _purchase_list_cache is None:
        _purchase_list_cache = PurchaseListCache(get_config().purchase_list_cache_ttl)
    return _purchase_list_cache


def reset_purchase_list_cache() -> None:
    """Discard the global cache instance. Useful for testing."""
    global _purchase_list_cache
    _purchase_list_cache = None


def invalidate_store(store_id: int) -> None:
    """Drop every cached purchase list of a store."""
    get_purchase_list_cache().invalidate(store_id)
    log_operation(
        logger,
        operation="invalidate_purchase_list",
        outcome="success",
        level=logging.DEBUG,
        store_id=store_id,
    )


def invalidate_store_on_commit(session: Session, store_id: int) -> None:
    """Drop a store's cached purchase lists once session commits its changes."""

    def _after_commit(_session):
        invalidate_store(store_id)

    event.listen(session, "after_commit", _after_commit, once=True)


def _require_period(period_from: DateLike, period_to: DateLike) -> Tuple[date, date]:
    start = parse_date(period_from)
    end = parse_date(period_to)
    errors = []
    if start is None:
        errors.append("From: Please enter a date as YYYY-MM-DD")
    if end is None:
        errors.append("To: Please enter a date as YYYY-MM-DD")
    if errors:
        raise ValidationError(errors)
    return start, end


def build_purchase_list(
    records: Iterable[Any],
    period_from: Optional[DateLike],
    period_to: Optional[DateLike],
) -> List[DailyMaterialUsage]:
    """
    Aggregate sale records and project them to a per-day requirement.

    Pure: no database access, no cache.

    Args:
        records: SaleRecord objects or their JSON mappings
        period_from: First day of the period
        period_to: Last day of the period

    Returns:
        List of DailyMaterialUsage in ascending material-name order
    """
    records = list(records)
    totals = aggregate_material_usage(records)
    return project_to_daily(totals, period_from, period_to)


def get_purchase_list(
    store_id: int,
    period_from: DateLike,
    period_to: DateLike,
    session: Optional[Session] = None,
    use_cache: bool = True,
) -> List[DailyMaterialUsage]:
    """
    Get the purchase list of a store for an inclusive period.

    Args:
        store_id: Store to report on
        period_from: First day (date or "YYYY-MM-DD")
        period_to: Last day (date or "YYYY-MM-DD")
        session: Optional database session
        use_cache: If False, always recompute (the fresh result is still cached)

    Returns:
        List of DailyMaterialUsage in ascending material-name order

    Raises:
        ValidationError: If either boundary is not a valid date
    """
    start, end = _require_period(period_from, period_to)
    key: CacheKey = (store_id, start, end)
    cache = get_purchase_list_cache()

    if use_cache:
        cached = cache.get(key)
        if cached is not None:
            log_operation(
                logger,
                operation="get_purchase_list",
                outcome="cache_hit",
                level=logging.DEBUG,
                store_id=store_id,
            )
            return list(cached)

    if session is not None:
        result = _get_purchase_list_impl(store_id, start, end, session)
    else:
        with session_scope() as session:
            result = _get_purchase_list_impl(store_id, start, end, session)

    cache.put(key, tuple(result))
    return list(result)


def _get_purchase_list_impl(
    store_id: int,
    period_from: DateLike,
    period_to: DateLike,
    session: Session,
) -> List[DailyMaterialUsage]:
    """Internal implementation of get_purchase_list."""
    from shop_dashboard.services.sales_service import get_sale_records  # Import here to avoid circular

    records: List[SaleRecord] = get_sale_records(store_id, period_from, period_to, session=session)
    result = build_purchase_list(records, period_from, period_to)

    log_operation(
        logger,
        operation="get_purchase_list",
        outcome="computed",
        store_id=store_id,
        record_count=len(records),
        material_count=len(result),
        day_count=count_period_days(period_from, period_to),
    )
    return result
