"""Sales Service - recording sales and reading them back for reports.

record_sale() prices a sale from the product at the moment it is recorded:
amount = price * quantity, profit = (price - cost) * quantity. Both are
stored on the sale row.

get_sale_records() is the read side used by the purchase list: a store's
sales within an inclusive date range, each joined with its product's name
and recipe. Sales of deleted products come back with product=None.

All functions follow the session pattern for transactional safety:
- If session provided, use it directly
- If session is None, create a new session via session_scope()
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from shop_dashboard.models import Product, Sale, UserProfile
from shop_dashboard.services import purchase_list_service
from shop_dashboard.services.database import session_scope
from shop_dashboard.services.exceptions import ProductNotFound, ValidationError
from shop_dashboard.services.logging_utils import get_service_logger, log_operation
from shop_dashboard.services.material_usage_service import ProductSnapshot, SaleRecord
from shop_dashboard.utils.constants import (
    MAX_NOTE_LENGTH,
    MAX_SALE_QUANTITY,
    MIN_SALE_QUANTITY,
)
from shop_dashboard.utils.datetime_utils import DateLike, parse_date, utc_now

logger = get_service_logger(__name__)


def record_sale(
    store_id: int,
    product_id: int,
    quantity: Any,
    sale_date: DateLike,
    note: Optional[str] = None,
    user_key: Optional[str] = None,
    session: Optional[Session] = None,
) -> Dict[str, Any]:
    """Record a sale of a store's product.

    Args:
        store_id: Store recording the sale
        product_id: Product sold (must belong to the store)
        quantity: Units sold, integer between 1 and 1,000,000
        sale_date: Business date (date or "YYYY-MM-DD")
        note: Free text note; defaults to "<product name> × <quantity>個"
        user_key: Profile recording the sale (optional)
        session: Optional database session

    Returns:
        Dict[str, Any]: Created sale as dictionary

    Raises:
        ProductNotFound: If the product does not exist in the store
        ValidationError: If quantity, date or note is invalid
    """
    if session is not None:
        return _record_sale_impl(store_id, product_id, quantity, sale_date, note, user_key, session)
    with session_scope() as session:
        return _record_sale_impl(store_id, product_id, quantity, sale_date, note, user_key, session)


def _record_sale_impl(
    store_id: int,
    product_id: int,
    quantity: Any,
    sale_date: DateLike,
    note: Optional[str],
    user_key: Optional[str],
    session: Session,
) -> Dict[str, Any]:
    product = session.get(Product, product_id)
    if product is None or product.store_id != store_id:
        raise ProductNotFound(product_id)

    errors: List[str] = []
    units = _parse_sale_quantity(quantity, errors)

    business_date = parse_date(sale_date)
    if business_date is None:
        errors.append("Date: Please enter a date as YYYY-MM-DD")

    note = (note or "").strip()
    if len(note) > MAX_NOTE_LENGTH:
        errors.append(f"Note: Must be {MAX_NOTE_LENGTH} characters or less")

    if errors:
        raise ValidationError(errors)

    price = Decimal(product.price or 0)
    cost = Decimal(product.cost or 0)

    user_id = None
    if user_key:
        profile = session.query(UserProfile).filter(UserProfile.user_key == user_key).first()
        user_id = profile.id if profile else None

    sale = Sale(
        store_id=store_id,
        product_id=product.id,
        user_id=user_id,
        quantity=units,
        amount=price * units,
        profit=(price - cost) * units,
        note=note or f"{product.name} × {units}個",
        sale_date=business_date,
        sold_at=utc_now(),
    )
    session.add(sale)
    session.flush()

    purchase_list_service.invalidate_store_on_commit(session, store_id)
    log_operation(
        logger,
        operation="record_sale",
        outcome="success",
        sale_id=sale.id,
        store_id=store_id,
        product_id=product.id,
        quantity=units,
    )
    return sale.to_dict()


def get_sales_for_store(
    store_id: int,
    date_from: Optional[DateLike] = None,
    date_to: Optional[DateLike] = None,
    session: Optional[Session] = None,
) -> List[Dict[str, Any]]:
    """Get a store's sales, newest first, optionally limited to a date range."""
    if session is not None:
        return _get_sales_for_store_impl(store_id, date_from, date_to, session)
    with session_scope() as session:
        return _get_sales_for_store_impl(store_id, date_from, date_to, session)


def _get_sales_for_store_impl(
    store_id: int,
    date_from: Optional[DateLike],
    date_to: Optional[DateLike],
    session: Session,
) -> List[Dict[str, Any]]:
    query = _sales_in_range(session, store_id, date_from, date_to)
    sales = query.order_by(Sale.sold_at.desc(), Sale.id.desc()).all()
    return [s.to_dict() for s in sales]


def get_sale_records(
    store_id: int,
    period_from: Optional[DateLike],
    period_to: Optional[DateLike],
    session: Optional[Session] = None,
) -> List[SaleRecord]:
    """
    Get a store's sales in an inclusive period, joined with their products.

    Args:
        store_id: Store to read
        period_from: First business day (None for unbounded)
        period_to: Last business day (None for unbounded)
        session: Optional database session

    Returns:
        List of SaleRecord in recording order. Sales whose product was
        deleted have product=None.
    """
    if session is not None:
        return _get_sale_records_impl(store_id, period_from, period_to, session)
    with session_scope() as session:
        return _get_sale_records_impl(store_id, period_from, period_to, session)


def _get_sale_records_impl(
    store_id: int,
    period_from: Optional[DateLike],
    period_to: Optional[DateLike],
    session: Session,
) -> List[SaleRecord]:
    sales = (
        _sales_in_range(session, store_id, period_from, period_to)
        .options(joinedload(Sale.product))
        .order_by(Sale.sold_at, Sale.id)
        .all()
    )

    records = []
    for sale in sales:
        snapshot = None
        if sale.product is not None:
            snapshot = ProductSnapshot(name=sale.product.name, recipe=sale.product.materials)
        records.append(
            SaleRecord(
                product_id=sale.product_id,
                quantity=sale.quantity,
                sold_at=sale.sold_at,
                product=snapshot,
            )
        )
    return records


def _sales_in_range(
    session: Session,
    store_id: int,
    date_from: Optional[DateLike],
    date_to: Optional[DateLike],
):
    query = session.query(Sale).filter(Sale.store_id == store_id)
    start: Optional[date] = parse_date(date_from)
    end: Optional[date] = parse_date(date_to)
    if start is not None:
        query = query.filter(Sale.sale_date >= start)
    if end is not None:
        query = query.filter(Sale.sale_date <= end)
    return query


def _parse_sale_quantity(value: Any, errors: List[str]) -> int:
    if isinstance(value, bool):
        errors.append("Quantity: Please enter a whole number")
        return 0
    try:
        units = int(str(value).strip())
    except (TypeError, ValueError):
        errors.append("Quantity: Please enter a whole number")
        return 0
    if units < MIN_SALE_QUANTITY or units > MAX_SALE_QUANTITY:
        errors.append(
            f"Quantity: Must be between {MIN_SALE_QUANTITY:,} and {MAX_SALE_QUANTITY:,}"
        )
    return units
