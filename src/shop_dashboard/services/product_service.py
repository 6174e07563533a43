"""Product Service - CRUD operations for store products.

A product is what a store sells: name, selling price, unit cost, and the
recipe of materials one unit consumes. Recipes are validated when the
product is saved (see recipe_parser.validate_recipe_lines) and stored as
JSON text.

All functions follow the session pattern for transactional safety:
- If session provided, use it directly
- If session is None, create a new session via session_scope()

Saving or deleting a product invalidates the store's cached purchase lists.

Example Usage:
    >>> product = create_product(
    ...     store_id=1,
    ...     name="唐揚げ弁当",
    ...     price=650,
    ...     cost=280,
    ...     materials=[{"name": "鶏もも肉", "quantity": "120g"}],
    ... )
    >>> product["name"]
    '唐揚げ弁当'
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from shop_dashboard.models import Product, Sale, Store, UserProfile
from shop_dashboard.services import purchase_list_service
from shop_dashboard.services.database import session_scope
from shop_dashboard.services.exceptions import ProductNotFound, StoreNotFound, ValidationError
from shop_dashboard.services.logging_utils import get_service_logger, log_operation
from shop_dashboard.services.recipe_parser import (
    RecipeLine,
    decode_recipe,
    encode_recipe,
    validate_recipe_lines,
)
from shop_dashboard.utils.constants import (
    ERROR_INVALID_NON_NEGATIVE,
    ERROR_INVALID_NUMBER,
    ERROR_REQUIRED_FIELD,
    MAX_NAME_LENGTH,
    MAX_PRICE,
)

logger = get_service_logger(__name__)


def create_product(
    store_id: int,
    name: str,
    price: Any,
    cost: Any,
    materials: Any,
    user_key: Optional[str] = None,
    session: Optional[Session] = None,
) -> Dict[str, Any]:
    """Create a product for a store.

    Args:
        store_id: Store the product belongs to
        name: Product name (required)
        price: Selling price (number or numeric string, >= 0)
        cost: Unit cost (number or numeric string, >= 0)
        materials: Recipe lines (list of {"name", "quantity"} dicts,
            RecipeLine objects, (name, quantity) pairs, or JSON text)
        user_key: Profile saving the product (optional)
        session: Optional database session

    Returns:
        Dict[str, Any]: Created product as dictionary

    Raises:
        StoreNotFound: If the store does not exist
        ValidationError: If any field is invalid
    """
    if session is not None:
        return _create_product_impl(store_id, name, price, cost, materials, user_key, session)
    with session_scope() as session:
        return _create_product_impl(store_id, name, price, cost, materials, user_key, session)


def _create_product_impl(
    store_id: int,
    name: str,
    price: Any,
    cost: Any,
    materials: Any,
    user_key: Optional[str],
    session: Session,
) -> Dict[str, Any]:
    if session.get(Store, store_id) is None:
        raise StoreNotFound(store_id)

    name, price_value, cost_value, lines = _validate_product_fields(name, price, cost, materials)

    product = Product(
        store_id=store_id,
        name=name,
        price=price_value,
        cost=cost_value,
        materials=encode_recipe(lines),
        user_id=_resolve_profile_id(user_key, session),
    )
    session.add(product)
    session.flush()

    purchase_list_service.invalidate_store_on_commit(session, store_id)
    log_operation(
        logger,
        operation="create_product",
        outcome="success",
        product_id=product.id,
        store_id=store_id,
        material_count=len(lines),
    )
    return product.to_dict()


def update_product(
    product_id: int,
    name: str,
    price: Any,
    cost: Any,
    materials: Any,
    user_key: Optional[str] = None,
    session: Optional[Session] = None,
) -> Dict[str, Any]:
    """Replace a product's name, price, cost and recipe.

    Raises:
        ProductNotFound: If the product does not exist
        ValidationError: If any field is invalid
    """
    if session is not None:
        return _update_product_impl(product_id, name, price, cost, materials, user_key, session)
    with session_scope() as session:
        return _update_product_impl(product_id, name, price, cost, materials, user_key, session)


def _update_product_impl(
    product_id: int,
    name: str,
    price: Any,
    cost: Any,
    materials: Any,
    user_key: Optional[str],
    session: Session,
) -> Dict[str, Any]:
    product = session.get(Product, product_id)
    if product is None:
        raise ProductNotFound(product_id)

    name, price_value, cost_value, lines = _validate_product_fields(name, price, cost, materials)

    product.name = name
    product.price = price_value
    product.cost = cost_value
    product.materials = encode_recipe(lines)
    profile_id = _resolve_profile_id(user_key, session)
    if profile_id is not None:
        product.user_id = profile_id
    session.flush()

    purchase_list_service.invalidate_store_on_commit(session, product.store_id)
    log_operation(logger, operation="update_product", outcome="success", product_id=product.id)
    return product.to_dict()


def delete_product(product_id: int, session: Optional[Session] = None) -> bool:
    """Delete a product. Its sales stay, with the product reference cleared.

    Raises:
        ProductNotFound: If the product does not exist
    """
    if session is not None:
        return _delete_product_impl(product_id, session)
    with session_scope() as session:
        return _delete_product_impl(product_id, session)


def _delete_product_impl(product_id: int, session: Session) -> bool:
    product = session.get(Product, product_id)
    if product is None:
        raise ProductNotFound(product_id)

    store_id = product.store_id
    session.query(Sale).filter(Sale.product_id == product_id).update(
        {Sale.product_id: None}, synchronize_session="fetch"
    )
    session.delete(product)
    session.flush()

    purchase_list_service.invalidate_store_on_commit(session, store_id)
    log_operation(logger, operation="delete_product", outcome="success", product_id=product_id)
    return True


def get_product(product_id: int, session: Optional[Session] = None) -> Optional[Dict[str, Any]]:
    """Get product by ID, or None if not found."""
    if session is not None:
        return _get_product_impl(product_id, session)
    with session_scope() as session:
        return _get_product_impl(product_id, session)


def _get_product_impl(product_id: int, session: Session) -> Optional[Dict[str, Any]]:
    product = session.get(Product, product_id)
    return product.to_dict() if product else None


def get_products_for_store(store_id: int, session: Optional[Session] = None) -> List[Dict[str, Any]]:
    """Get a store's products, newest first."""
    if session is not None:
        return _get_products_for_store_impl(store_id, session)
    with session_scope() as session:
        return _get_products_for_store_impl(store_id, session)


def _get_products_for_store_impl(store_id: int, session: Session) -> List[Dict[str, Any]]:
    products = (
        session.query(Product)
        .filter(Product.store_id == store_id)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .all()
    )
    return [p.to_dict() for p in products]


def get_recipe_lines(product_id: int, session: Optional[Session] = None) -> List[RecipeLine]:
    """Decode a product's stored recipe (empty list when it is unreadable).

    Raises:
        ProductNotFound: If the product does not exist
    """
    if session is not None:
        return _get_recipe_lines_impl(product_id, session)
    with session_scope() as session:
        return _get_recipe_lines_impl(product_id, session)


def _get_recipe_lines_impl(product_id: int, session: Session) -> List[RecipeLine]:
    product = session.get(Product, product_id)
    if product is None:
        raise ProductNotFound(product_id)
    return decode_recipe(product.materials) or []


def _validate_product_fields(
    name: str, price: Any, cost: Any, materials: Any
) -> Tuple[str, Decimal, Decimal, List[RecipeLine]]:
    """Validate all product fields, collecting every error before raising."""
    errors: List[str] = []

    name = (name or "").strip()
    if not name:
        errors.append(f"Name: {ERROR_REQUIRED_FIELD}")
    elif len(name) > MAX_NAME_LENGTH:
        errors.append(f"Name: Must be {MAX_NAME_LENGTH} characters or less")

    price_value = _parse_money(price, "Price", errors)
    cost_value = _parse_money(cost, "Cost", errors)

    lines: List[RecipeLine] = []
    try:
        lines = validate_recipe_lines(materials)
    except ValidationError as e:
        errors.extend(e.errors)

    if errors:
        raise ValidationError(errors)

    return name, price_value, cost_value, lines


def _parse_money(value: Any, field_name: str, errors: List[str]) -> Decimal:
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        errors.append(f"{field_name}: {ERROR_REQUIRED_FIELD}")
        return Decimal("0")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        errors.append(f"{field_name}: {ERROR_INVALID_NUMBER}")
        return Decimal("0")
    if not amount.is_finite():
        errors.append(f"{field_name}: {ERROR_INVALID_NUMBER}")
        return Decimal("0")
    if amount < 0:
        errors.append(f"{field_name}: {ERROR_INVALID_NON_NEGATIVE}")
    elif amount > MAX_PRICE:
        errors.append(f"{field_name}: Must be {MAX_PRICE} or less")
    return amount


def _resolve_profile_id(user_key: Optional[str], session: Session) -> Optional[int]:
    if not user_key:
        return None
    profile = session.query(UserProfile).filter(UserProfile.user_key == user_key).first()
    return profile.id if profile else None
