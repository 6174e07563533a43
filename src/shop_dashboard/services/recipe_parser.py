"""
Recipe parsing for product material lists.

A product's recipe is stored as a JSON list of
``{"name": <material>, "quantity": <free text>}`` objects. This module is
the boundary between that serialized form and typed values:

- parse_quantity_text(): "100g" -> ParsedQuantity(Decimal("100"), "g")
- decode_recipe(): stored JSON text -> list of RecipeLine, or None when the
  text is not a JSON list (read side, never raises)
- validate_recipe_lines(): user input -> bounded, validated list of
  RecipeLine (write side, raises ValidationError)
- encode_recipe(): list of RecipeLine -> JSON text for storage

Quantity parsing is a heuristic. The first number in the text is the
amount, whatever is left after removing digits, decimal points and
whitespace is the unit. No unit conversion happens: "1kg" and "1000g" stay
different units.

Examples:
    >>> parse_quantity_text("1.5 L")
    ParsedQuantity(amount=Decimal('1.5'), unit='L')
    >>> parse_quantity_text("少々")
    ParsedQuantity(amount=Decimal('1'), unit='少々')
"""

import json
import re
import unicodedata
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Union

from shop_dashboard.services.exceptions import ValidationError
from shop_dashboard.utils.constants import (
    MAX_INGREDIENT_NAME_LENGTH,
    MAX_QUANTITY_TEXT_LENGTH,
    MAX_RECIPE_LINES,
    RECIPE_KEY_NAME,
    RECIPE_KEY_QUANTITY,
)

# First run of digits containing at most one decimal point
_NUMBER_PATTERN = re.compile(r"[0-9]+(?:\.[0-9]+)?|\.[0-9]+")
_NON_UNIT_PATTERN = re.compile(r"[0-9.\s]+")

DEFAULT_AMOUNT = Decimal("1")


@dataclass(frozen=True)
class ParsedQuantity:
    """Numeric amount and unit extracted from a quantity text."""

    amount: Decimal
    unit: str


@dataclass(frozen=True)
class RecipeLine:
    """One material line of a product recipe."""

    ingredient_name: str
    quantity_text: str

    @property
    def is_complete(self) -> bool:
        """True when both the material name and quantity text are present."""
        return bool(self.ingredient_name) and bool(self.quantity_text)

    def to_dict(self) -> Dict[str, str]:
        return {RECIPE_KEY_NAME: self.ingredient_name, RECIPE_KEY_QUANTITY: self.quantity_text}


def parse_quantity_text(text: Optional[str]) -> ParsedQuantity:
    """
    Split a free-text quantity into amount and unit.

    Text is NFKC-normalized first, so "１００ｇ" parses the same as "100g"
    and the squared symbol "㎏" becomes the unit "kg". When no number is
    present the amount defaults to 1 and the whole text (minus whitespace)
    becomes the unit. Never raises.

    Args:
        text: Quantity text such as "100g", "2枚", "1.5L" or "少々"

    Returns:
        ParsedQuantity with a non-negative Decimal amount
    """
    normalized = unicodedata.normalize("NFKC", _coerce_text(text))

    match = _NUMBER_PATTERN.search(normalized)
    amount = Decimal(match.group()) if match else DEFAULT_AMOUNT
    unit = _NON_UNIT_PATTERN.sub("", normalized)

    return ParsedQuantity(amount=amount, unit=unit)


def decode_recipe(raw: Union[str, bytes, list, None]) -> Optional[List[RecipeLine]]:
    """
    Decode a stored recipe into recipe lines.

    Entries that are not JSON objects are dropped. Lines with an empty name
    or quantity are kept here; callers decide whether to skip them
    (see RecipeLine.is_complete).

    Args:
        raw: Serialized recipe JSON, or an already decoded list

    Returns:
        List of RecipeLine, or None if the recipe is missing or is not a JSON list
    """
    if raw is None:
        return None

    if isinstance(raw, list):
        data: Any = raw
    elif isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except (ValueError, TypeError):
            return None
    else:
        return None

    if not isinstance(data, list):
        return None

    return [
        RecipeLine(
            ingredient_name=_coerce_text(entry.get(RECIPE_KEY_NAME)),
            quantity_text=_coerce_text(entry.get(RECIPE_KEY_QUANTITY)),
        )
        for entry in data
        if isinstance(entry, dict)
    ]


def validate_recipe_lines(entries: Union[str, Iterable[Any], None]) -> List[RecipeLine]:
    """
    Validate recipe input when a product is saved.

    Rows with a blank material name are treated as empty form rows and
    dropped. Everything else must be a complete line.

    Args:
        entries: JSON text, or an iterable of RecipeLine, dicts with
            "name"/"quantity" keys, or (name, quantity) pairs

    Returns:
        List of complete RecipeLine, at most MAX_RECIPE_LINES long

    Raises:
        ValidationError: If a line is malformed, no line remains, or there
            are too many lines
    """
    if entries is None:
        raise ValidationError(["Materials: at least one material is required"])

    if isinstance(entries, (str, bytes)):
        decoded = decode_recipe(entries)
        if decoded is None:
            raise ValidationError(["Materials: recipe must be a JSON list"])
        entries = decoded

    errors: List[str] = []
    lines: List[RecipeLine] = []

    for index, entry in enumerate(entries, start=1):
        line = _to_recipe_line(entry)
        if line is None:
            errors.append(f"Material {index}: unrecognized entry {entry!r}")
            continue

        if not line.ingredient_name:
            continue

        if not line.quantity_text:
            errors.append(f"Material {index} ({line.ingredient_name}): quantity is required")
        if len(line.ingredient_name) > MAX_INGREDIENT_NAME_LENGTH:
            errors.append(
                f"Material {index}: name must be {MAX_INGREDIENT_NAME_LENGTH} characters or less"
            )
        if len(line.quantity_text) > MAX_QUANTITY_TEXT_LENGTH:
            errors.append(
                f"Material {index}: quantity must be {MAX_QUANTITY_TEXT_LENGTH} characters or less"
            )
        lines.append(line)

    if not lines and not errors:
        errors.append("Materials: at least one material is required")
    if len(lines) > MAX_RECIPE_LINES:
        errors.append(f"Materials: at most {MAX_RECIPE_LINES} materials are allowed")

    if errors:
        raise ValidationError(errors)

    return lines


def encode_recipe(lines: Iterable[RecipeLine]) -> str:
    """Serialize recipe lines for storage, keeping Japanese text readable."""
    return json.dumps([line.to_dict() for line in lines], ensure_ascii=False)


def _to_recipe_line(entry: Any) -> Optional[RecipeLine]:
    if isinstance(entry, RecipeLine):
        return RecipeLine(
            ingredient_name=_coerce_text(entry.ingredient_name),
            quantity_text=_coerce_text(entry.quantity_text),
        )
    if isinstance(entry, dict):
        name = entry.get(RECIPE_KEY_NAME, entry.get("ingredient_name"))
        quantity = entry.get(RECIPE_KEY_QUANTITY, entry.get("quantity_text"))
        return RecipeLine(ingredient_name=_coerce_text(name), quantity_text=_coerce_text(quantity))
    if isinstance(entry, (tuple, list)) and len(entry) == 2:
        return RecipeLine(ingredient_name=_coerce_text(entry[0]), quantity_text=_coerce_text(entry[1]))
    return None


def _coerce_text(value: Any) -> str:
    """Strip strings; render bare numbers as text; everything else is empty."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    return ""
