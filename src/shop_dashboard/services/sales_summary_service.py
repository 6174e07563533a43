"""
Sales Summary Service.

Daily and monthly sales/profit roll-ups for the dashboard cards and
charts, plus the period totals shown for the selected view:

- "daily": today only
- "monthly": the current calendar month
- "custom": an arbitrary inclusive range, defaulting to the first and last
  day that has data

get_daily_summary() reads the database; the other functions are pure.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from shop_dashboard.models import Sale
from shop_dashboard.services.database import session_scope
from shop_dashboard.services.exceptions import ValidationError
from shop_dashboard.services.logging_utils import get_service_logger, log_operation
from shop_dashboard.utils.config import get_config
from shop_dashboard.utils.constants import (
    MONTH_FORMAT,
    SUMMARY_MODE_CUSTOM,
    SUMMARY_MODE_DAILY,
    SUMMARY_MODE_MONTHLY,
    SUMMARY_MODES,
)
from shop_dashboard.utils.datetime_utils import DateLike, parse_date

logger = get_service_logger(__name__)


@dataclass
class DailySales:
    """Sales and profit of one business day."""

    date: date
    sales: Decimal = Decimal("0")
    profit: Decimal = Decimal("0")


@dataclass
class MonthlySales:
    """Sales and profit of one calendar month ("YYYY-MM")."""

    month: str
    sales: Decimal = Decimal("0")
    profit: Decimal = Decimal("0")


@dataclass
class SalesSummary:
    """Totals for the selected view and the rows they were computed from."""

    title_prefix: str
    label: str
    sales_total: Decimal
    profit_total: Decimal
    rows: List[DailySales] = field(default_factory=list)

    @property
    def sales_title(self) -> str:
        return f"{self.title_prefix}の売上"

    @property
    def profit_title(self) -> str:
        return f"{self.title_prefix}の利益"


def default_period(today: Optional[date] = None) -> Tuple[date, date]:
    """The dashboard's default window: the configured number of days ending today."""
    today = today or date.today()
    days = get_config().default_period_days
    return today - timedelta(days=days - 1), today


def get_daily_summary(
    store_id: int,
    date_from: DateLike,
    date_to: DateLike,
    session: Optional[Session] = None,
) -> List[DailySales]:
    """
    Sum a store's sales and profit per business day.

    Args:
        store_id: Store to summarize
        date_from: First day, inclusive
        date_to: Last day, inclusive
        session: Optional database session

    Returns:
        One DailySales per day that has sales, in ascending date order

    Raises:
        ValidationError: If either boundary is not a valid date
    """
    start = parse_date(date_from)
    end = parse_date(date_to)
    errors = []
    if start is None:
        errors.append("From: Please enter a date as YYYY-MM-DD")
    if end is None:
        errors.append("To: Please enter a date as YYYY-MM-DD")
    if errors:
        raise ValidationError(errors)

    if session is not None:
        return _get_daily_summary_impl(store_id, start, end, session)
    with session_scope() as session:
        return _get_daily_summary_impl(store_id, start, end, session)


def _get_daily_summary_impl(
    store_id: int, start: date, end: date, session: Session
) -> List[DailySales]:
    rows = (
        session.query(
            Sale.sale_date,
            func.coalesce(func.sum(Sale.amount), 0),
            func.coalesce(func.sum(Sale.profit), 0),
        )
        .filter(
            Sale.store_id == store_id,
            Sale.sale_date >= start,
            Sale.sale_date <= end,
        )
        .group_by(Sale.sale_date)
        .order_by(Sale.sale_date)
        .all()
    )

    result = [
        DailySales(date=sale_date, sales=Decimal(str(sales)), profit=Decimal(str(profit)))
        for sale_date, sales, profit in rows
    ]
    log_operation(
        logger,
        operation="get_daily_summary",
        outcome="success",
        store_id=store_id,
        day_count=len(result),
    )
    return result


def summarize_monthly(daily: Sequence[DailySales]) -> List[MonthlySales]:
    """Roll daily rows up into calendar months, ascending."""
    months: Dict[str, MonthlySales] = {}
    for row in daily:
        key = row.date.strftime(MONTH_FORMAT)
        bucket = months.setdefault(key, MonthlySales(month=key))
        bucket.sales += row.sales
        bucket.profit += row.profit
    return [months[key] for key in sorted(months)]


def summarize(
    daily: Sequence[DailySales],
    mode: str,
    today: Optional[date] = None,
    range_from: Optional[DateLike] = None,
    range_to: Optional[DateLike] = None,
) -> SalesSummary:
    """
    Compute the totals shown for a dashboard view.

    Args:
        daily: Result of get_daily_summary(), ascending
        mode: "daily", "monthly" or "custom"
        today: Reference day (defaults to date.today())
        range_from: Custom range start (defaults to the first data day)
        range_to: Custom range end (defaults to the last data day)

    Returns:
        SalesSummary with label, totals and the rows included

    Raises:
        ValidationError: If mode is unknown
    """
    if mode not in SUMMARY_MODES:
        raise ValidationError([f"Mode: must be one of {', '.join(SUMMARY_MODES)}"])

    today = today or date.today()

    if mode == SUMMARY_MODE_DAILY:
        rows = [row for row in daily if row.date == today]
        title_prefix = "今日"
        label = "今日の合計"
    elif mode == SUMMARY_MODE_MONTHLY:
        current_month = today.strftime(MONTH_FORMAT)
        rows = [row for row in daily if row.date.strftime(MONTH_FORMAT) == current_month]
        title_prefix = "今月"
        label = f"今月（{current_month}）の合計"
    else:
        start = parse_date(range_from) or (daily[0].date if daily else None)
        end = parse_date(range_to) or (daily[-1].date if daily else None)
        if start is None or end is None:
            rows = list(daily)
            label = "任意期間の合計"
        else:
            rows = [row for row in daily if start <= row.date <= end]
            label = f"{start.isoformat()}〜{end.isoformat()} の合計"
        title_prefix = "任意期間"

    return SalesSummary(
        title_prefix=title_prefix,
        label=label,
        sales_total=sum((row.sales for row in rows), Decimal("0")),
        profit_total=sum((row.profit for row in rows), Decimal("0")),
        rows=rows,
    )


def chart_rows(
    daily: Sequence[DailySales],
    mode: str,
    range_from: Optional[DateLike] = None,
    range_to: Optional[DateLike] = None,
) -> List[object]:
    """
    Rows to chart for a view: months for "monthly", days otherwise.

    A custom range only narrows the days when both ends are valid and in
    order; otherwise every day is charted.
    """
    if mode == SUMMARY_MODE_MONTHLY:
        return list(summarize_monthly(daily))

    if mode == SUMMARY_MODE_CUSTOM:
        start = parse_date(range_from)
        end = parse_date(range_to)
        if start is not None and end is not None and start <= end:
            return [row for row in daily if start <= row.date <= end]

    return list(daily)
