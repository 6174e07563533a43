"""
Material Usage Service.

Rolls up the materials consumed by a period's sales and projects the
period total to a per-day purchasing estimate.

- aggregate_material_usage(): sale records -> totals keyed by
  (material_name, unit)
- count_period_days(): inclusive day count of a period, never below 1
- project_to_daily(): totals -> per-day requirement, rounded up

Everything here is a pure function of its arguments: no database access,
no shared state. Fetching the sale records for a store and period is the
job of sales_service.get_sale_records(); caching the result is the job of
purchase_list_service.

Data-quality problems never raise; each skip is logged at DEBUG:
- sale without a product (deleted product) -> record skipped
- recipe missing or not a JSON list -> record skipped
- material line without name or quantity text -> line skipped
- quantity text without a number -> amount 1, unit is the text itself
- malformed period boundaries -> day count 1
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_CEILING
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from shop_dashboard.services.logging_utils import get_service_logger, log_operation
from shop_dashboard.services.recipe_parser import decode_recipe, parse_quantity_text
from shop_dashboard.utils.collation import japanese_sort_key
from shop_dashboard.utils.constants import MAX_EXAMPLE_PRODUCTS
from shop_dashboard.utils.datetime_utils import DateLike, parse_date


# Type alias for aggregation key
MaterialKey = Tuple[str, str]  # (material_name, unit)

logger = get_service_logger(__name__)


@dataclass(frozen=True)
class ProductSnapshot:
    """Product fields joined onto a sale: display name and serialized recipe."""

    name: str
    recipe: Optional[Union[str, list]] = None


@dataclass(frozen=True)
class SaleRecord:
    """One sale joined with its product, as consumed by the aggregator."""

    product_id: Optional[Any]
    quantity: Any
    sold_at: Optional[Any] = None
    product: Optional[ProductSnapshot] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SaleRecord":
        """
        Build a record from its JSON shape.

        Accepts the camelCase form
        ``{"productId", "quantity", "soldAt", "product": {"name", "recipe"}}``
        as well as snake_case keys, and "materials" as an alias of "recipe".
        """
        product_data = data.get("product", data.get("products"))
        product = None
        if isinstance(product_data, Mapping):
            product = ProductSnapshot(
                name=str(product_data.get("name") or ""),
                recipe=product_data.get("recipe", product_data.get("materials")),
            )

        return cls(
            product_id=data.get("productId", data.get("product_id")),
            quantity=data.get("quantity"),
            sold_at=data.get("soldAt", data.get("sold_at")),
            product=product,
        )


@dataclass(frozen=True)
class MaterialUsageTotal:
    """Period total for one (material, unit) pair."""

    material_name: str
    unit: str
    total_amount: Decimal
    example_products: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "example_products", tuple(self.example_products))

    @property
    def key(self) -> MaterialKey:
        return (self.material_name, self.unit)


@dataclass(frozen=True)
class DailyMaterialUsage:
    """Per-day purchasing estimate for one (material, unit) pair."""

    material_name: str
    unit: str
    per_day: int
    example_products: Tuple[str, ...] = ()
    total_amount: Decimal = Decimal("0")

    def __post_init__(self):
        object.__setattr__(self, "example_products", tuple(self.example_products))

    @property
    def display_amount(self) -> str:
        """Per-day amount with thousands separators and unit, e.g. "1,500g"."""
        return f"{self.per_day:,}{self.unit}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "material_name": self.material_name,
            "unit": self.unit,
            "per_day": self.per_day,
            "example_products": list(self.example_products),
            "total_amount": str(self.total_amount),
        }


def aggregate_material_usage(
    records: Iterable[Union[SaleRecord, Mapping[str, Any]]],
) -> Dict[MaterialKey, MaterialUsageTotal]:
    """
    Aggregate material usage over a sequence of sale records.

    Each complete recipe line contributes ``amount * sale quantity`` to the
    total of its (material_name, unit) key. The same material recorded with
    two different units yields two totals.

    Args:
        records: Sale records already filtered to one store and period.
            Plain mappings are converted with SaleRecord.from_dict().

    Returns:
        Dict keyed by (material_name, unit) with MaterialUsageTotal values,
        in ascending material-name order (Japanese collation).
    """
    totals: Dict[MaterialKey, Decimal] = {}
    examples: Dict[MaterialKey, List[str]] = {}

    for record in records:
        if isinstance(record, Mapping):
            record = SaleRecord.from_dict(record)

        product = record.product
        if product is None:
            _log_skip("record_skipped", reason="no_product", product_id=record.product_id)
            continue

        lines = decode_recipe(product.recipe)
        if lines is None:
            _log_skip("record_skipped", reason="unreadable_recipe", product_id=record.product_id)
            continue

        quantity = _coerce_quantity(record.quantity)

        for line in lines:
            if not line.is_complete:
                _log_skip(
                    "line_skipped",
                    reason="incomplete_line",
                    product_id=record.product_id,
                    material_name=line.ingredient_name,
                )
                continue

            parsed = parse_quantity_text(line.quantity_text)
            key = (line.ingredient_name, parsed.unit)
            totals[key] = totals.get(key, Decimal("0")) + parsed.amount * quantity

            names = examples.setdefault(key, [])
            if (
                product.name
                and product.name not in names
                and len(names) < MAX_EXAMPLE_PRODUCTS
            ):
                names.append(product.name)

    return {
        key: MaterialUsageTotal(
            material_name=key[0],
            unit=key[1],
            total_amount=totals[key],
            example_products=tuple(examples[key]),
        )
        for key in sorted(totals, key=_material_sort_key)
    }


def count_period_days(period_from: Optional[DateLike], period_to: Optional[DateLike]) -> int:
    """
    Count the days in an inclusive period.

    Args:
        period_from: First day (date, datetime or "YYYY-MM-DD")
        period_to: Last day (date, datetime or "YYYY-MM-DD")

    Returns:
        (period_to - period_from) in days + 1, at least 1. Malformed or
        reversed boundaries give 1.

    Example:
        >>> count_period_days("2024-01-01", "2024-01-31")
        31
    """
    start = parse_date(period_from)
    end = parse_date(period_to)
    if start is None or end is None or end < start:
        _log_skip(
            "day_count_defaulted",
            operation="count_period_days",
            period_from=str(period_from),
            period_to=str(period_to),
        )
        return 1
    return (end - start).days + 1


def project_to_daily(
    totals: Union[Mapping[MaterialKey, MaterialUsageTotal], Iterable[MaterialUsageTotal]],
    period_from: Optional[DateLike],
    period_to: Optional[DateLike],
) -> List[DailyMaterialUsage]:
    """
    Project period totals to a per-day requirement.

    ``per_day = ceil(total_amount / day_count)``. Rounding is always up so
    the estimate used for ordering is never short.

    Args:
        totals: Result of aggregate_material_usage() (or its values)
        period_from: First day of the aggregated period
        period_to: Last day of the aggregated period

    Returns:
        List of DailyMaterialUsage in ascending material-name order
    """
    values = totals.values() if isinstance(totals, Mapping) else totals
    day_count = count_period_days(period_from, period_to)

    projected = [
        DailyMaterialUsage(
            material_name=total.material_name,
            unit=total.unit,
            per_day=_ceil_div(total.total_amount, day_count),
            example_products=total.example_products,
            total_amount=total.total_amount,
        )
        for total in values
    ]
    projected.sort(key=lambda usage: _material_sort_key((usage.material_name, usage.unit)))
    return projected


def _log_skip(outcome: str, operation: str = "aggregate_material_usage", **context: Any) -> None:
    log_operation(logger, operation=operation, outcome=outcome, level=logging.DEBUG, **context)


def _material_sort_key(key: MaterialKey):
    return (japanese_sort_key(key[0]), key[1])


def _ceil_div(total: Decimal, day_count: int) -> int:
    return int((Decimal(total) / day_count).to_integral_value(rounding=ROUND_CEILING))


def _coerce_quantity(value: Any) -> Decimal:
    """Sale quantity as Decimal; missing or unreadable quantities count as 0."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        quantity = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not quantity.is_finite():
        return Decimal("0")
    return quantity
