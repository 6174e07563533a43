"""Tests for recipe parsing: quantity text, stored recipe JSON and input validation."""

import json
from decimal import Decimal

import pytest

from shop_dashboard.services.exceptions import ValidationError
from shop_dashboard.services.recipe_parser import (
    ParsedQuantity,
    RecipeLine,
    decode_recipe,
    encode_recipe,
    parse_quantity_text,
    validate_recipe_lines,
)


class TestParseQuantityText:
    """Amount is the first number, unit is the remaining text."""

    @pytest.mark.parametrize(
        "text,amount,unit",
        [
            ("100g", Decimal("100"), "g"),
            ("2枚", Decimal("2"), "枚"),
            ("1.5L", Decimal("1.5"), "L"),
            ("1.5 L", Decimal("1.5"), "L"),
            ("250 ml", Decimal("250"), "ml"),
            (".5kg", Decimal("0.5"), "kg"),
        ],
    )
    def test_number_and_unit(self, text, amount, unit):
        assert parse_quantity_text(text) == ParsedQuantity(amount, unit)

    def test_text_without_number_defaults_to_one(self):
        result = parse_quantity_text("少々")
        assert result.amount == Decimal("1")
        assert result.unit == "少々"

    def test_number_without_unit(self):
        result = parse_quantity_text("3")
        assert result.amount == Decimal("3")
        assert result.unit == ""

    def test_full_width_digits_are_normalized(self):
        result = parse_quantity_text("１００ｇ")
        assert result.amount == Decimal("100")
        assert result.unit == "g"

    @pytest.mark.parametrize(
        "text, unit",
        [("1㎏", "kg"), ("200㎖", "ml"), ("1㍑", "リットル"), ("2ｺ", "コ")],
    )
    def test_compatibility_unit_characters_are_spelled_out(self, text, unit):
        """Squared unit symbols and half-width kana fold to their plain spelling."""
        assert parse_quantity_text(text).unit == unit

    def test_only_first_number_is_the_amount(self):
        """Later digits are dropped from the unit along with the decimal points."""
        result = parse_quantity_text("1/8個")
        assert result.amount == Decimal("1")
        assert result.unit == "/個"

    def test_second_decimal_point_ends_the_number(self):
        assert parse_quantity_text("1.2.3g").amount == Decimal("1.2")

    def test_empty_and_none(self):
        assert parse_quantity_text("") == ParsedQuantity(Decimal("1"), "")
        assert parse_quantity_text(None) == ParsedQuantity(Decimal("1"), "")

    def test_amount_is_never_negative(self):
        result = parse_quantity_text("-5g")
        assert result.amount == Decimal("5")
        assert result.unit == "-g"


class TestDecodeRecipe:
    def test_decodes_json_list(self):
        raw = json.dumps([{"name": "小麦粉", "quantity": "100g"}], ensure_ascii=False)
        assert decode_recipe(raw) == [RecipeLine("小麦粉", "100g")]

    def test_accepts_decoded_list(self):
        assert decode_recipe([{"name": "卵", "quantity": "1個"}]) == [RecipeLine("卵", "1個")]

    @pytest.mark.parametrize("raw", [None, "", "not json", '{"name": "x"}', "42", 42])
    def test_non_list_returns_none(self, raw):
        assert decode_recipe(raw) is None

    def test_non_object_entries_are_dropped(self):
        raw = json.dumps(["salt", {"name": "砂糖", "quantity": "10g"}, 5], ensure_ascii=False)
        assert decode_recipe(raw) == [RecipeLine("砂糖", "10g")]

    def test_incomplete_lines_are_kept_but_flagged(self):
        lines = decode_recipe('[{"name": "", "quantity": "10g"}, {"name": "塩"}]')
        assert len(lines) == 2
        assert not any(line.is_complete for line in lines)

    def test_numeric_quantity_is_read_as_text(self):
        lines = decode_recipe('[{"name": "卵", "quantity": 2}]')
        assert lines == [RecipeLine("卵", "2")]


class TestValidateRecipeLines:
    def test_accepts_dicts_pairs_and_lines(self):
        lines = validate_recipe_lines(
            [
                {"name": "鶏もも肉", "quantity": "120g"},
                ("キャベツ", "1/8個"),
                RecipeLine(" 塩 ", " 少々 "),
            ]
        )
        assert lines == [
            RecipeLine("鶏もも肉", "120g"),
            RecipeLine("キャベツ", "1/8個"),
            RecipeLine("塩", "少々"),
        ]

    def test_blank_rows_are_dropped(self):
        lines = validate_recipe_lines(
            [{"name": "卵", "quantity": "1個"}, {"name": "  ", "quantity": ""}]
        )
        assert lines == [RecipeLine("卵", "1個")]

    def test_accepts_json_text(self):
        lines = validate_recipe_lines('[{"name": "卵", "quantity": "1個"}]')
        assert lines == [RecipeLine("卵", "1個")]

    def test_missing_quantity_is_an_error(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_recipe_lines([{"name": "卵", "quantity": ""}])
        assert "quantity is required" in exc_info.value.errors[0]

    def test_empty_recipe_is_an_error(self):
        with pytest.raises(ValidationError):
            validate_recipe_lines([])
        with pytest.raises(ValidationError):
            validate_recipe_lines(None)

    def test_invalid_json_text_is_an_error(self):
        with pytest.raises(ValidationError):
            validate_recipe_lines("{not json")

    def test_too_many_lines(self):
        entries = [{"name": f"材料{i}", "quantity": "1g"} for i in range(51)]
        with pytest.raises(ValidationError) as exc_info:
            validate_recipe_lines(entries)
        assert any("at most 50" in e for e in exc_info.value.errors)

    def test_unrecognized_entry(self):
        with pytest.raises(ValidationError):
            validate_recipe_lines([object()])


def test_encode_recipe_keeps_japanese_readable():
    encoded = encode_recipe([RecipeLine("鶏もも肉", "120g")])
    assert encoded == '[{"name": "鶏もも肉", "quantity": "120g"}]'
    assert decode_recipe(encoded) == [RecipeLine("鶏もも肉", "120g")]
