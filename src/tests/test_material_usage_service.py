"""Tests for material usage aggregation and per-day projection.

These are pure-function tests; no database is involved.
"""

import json
import logging
from datetime import date
from decimal import Decimal

import pytest

from shop_dashboard.services.material_usage_service import (
    DailyMaterialUsage,
    MaterialUsageTotal,
    ProductSnapshot,
    SaleRecord,
    aggregate_material_usage,
    count_period_days,
    project_to_daily,
)


def _recipe(*lines):
    return json.dumps([{"name": n, "quantity": q} for n, q in lines], ensure_ascii=False)


def _sale(quantity, name, recipe, product_id=1):
    return SaleRecord(
        product_id=product_id,
        quantity=quantity,
        product=ProductSnapshot(name=name, recipe=recipe),
    )


class TestAggregateMaterialUsage:
    def test_amount_times_quantity_is_summed(self):
        recipe = _recipe(("小麦粉", "100g"))
        totals = aggregate_material_usage(
            [_sale(2, "パン", recipe), _sale(3, "パン", recipe)]
        )
        assert list(totals) == [("小麦粉", "g")]
        assert totals[("小麦粉", "g")].total_amount == Decimal("500")
        assert totals[("小麦粉", "g")].example_products == ("パン",)

    def test_same_material_different_units_stay_separate(self):
        totals = aggregate_material_usage(
            [
                _sale(1, "A", _recipe(("牛乳", "200ml"))),
                _sale(1, "B", _recipe(("牛乳", "1L"))),
            ]
        )
        assert set(totals) == {("牛乳", "ml"), ("牛乳", "L")}

    def test_example_products_are_distinct_and_capped_at_three(self):
        recipe = _recipe(("塩", "1g"))
        records = [
            _sale(1, name, recipe)
            for name in ["おにぎり", "唐揚げ", "おにぎり", "焼きそば", "味噌汁", "唐揚げ"]
        ]
        total = aggregate_material_usage(records)[("塩", "g")]
        assert total.example_products == ("おにぎり", "唐揚げ", "焼きそば")
        assert total.total_amount == Decimal("6")

    def test_sale_without_product_is_skipped(self):
        records = [
            SaleRecord(product_id=None, quantity=5, product=None),
            _sale(1, "パン", _recipe(("小麦粉", "100g"))),
        ]
        totals = aggregate_material_usage(records)
        assert totals[("小麦粉", "g")].total_amount == Decimal("100")

    @pytest.mark.parametrize("recipe", [None, "", "broken", '{"name": "x"}'])
    def test_unreadable_recipe_is_skipped(self, recipe):
        assert aggregate_material_usage([_sale(1, "謎", recipe)]) == {}

    def test_incomplete_lines_are_skipped(self):
        recipe = json.dumps(
            [{"name": "", "quantity": "10g"}, {"name": "砂糖"}, {"name": "卵", "quantity": "1個"}],
            ensure_ascii=False,
        )
        totals = aggregate_material_usage([_sale(2, "プリン", recipe)])
        assert list(totals) == [("卵", "個")]
        assert totals[("卵", "個")].total_amount == Decimal("2")

    def test_quantity_without_number_counts_as_one_unit(self):
        totals = aggregate_material_usage([_sale(4, "唐揚げ", _recipe(("塩", "少々")))])
        assert totals[("塩", "少々")].total_amount == Decimal("4")

    def test_unreadable_sale_quantity_counts_as_zero(self):
        totals = aggregate_material_usage([_sale(None, "パン", _recipe(("小麦粉", "100g")))])
        assert totals[("小麦粉", "g")].total_amount == Decimal("0")

    def test_accepts_camel_case_mappings(self):
        records = [
            {
                "productId": 7,
                "quantity": 2,
                "soldAt": "2024-01-05T10:00:00Z",
                "product": {"name": "唐揚げ", "recipe": _recipe(("鶏もも肉", "250g"))},
            }
        ]
        totals = aggregate_material_usage(records)
        assert totals[("鶏もも肉", "g")].total_amount == Decimal("500")

    def test_results_are_in_japanese_order(self):
        recipe = _recipe(("卵", "1個"), ("キャベツ", "1個"), ("あさり", "1個"))
        totals = aggregate_material_usage([_sale(1, "定食", recipe)])
        names = [key[0] for key in totals]
        assert names.index("あさり") < names.index("キャベツ")

    def test_kanji_materials_are_in_japanese_order(self):
        recipe = _recipe(
            ("卵", "1個"), ("塩", "1g"), ("牛乳", "100ml"),
            ("砂糖", "10g"), ("小麦粉", "100g"), ("醤油", "10ml"),
        )
        totals = aggregate_material_usage([_sale(1, "パンケーキ", recipe)])
        assert [key[0] for key in totals] == ["塩", "牛乳", "砂糖", "小麦粉", "醤油", "卵"]

    def test_aggregation_is_repeatable(self):
        records = [_sale(2, "パン", _recipe(("小麦粉", "100g"), ("バター", "10g")))]
        assert aggregate_material_usage(records) == aggregate_material_usage(records)

    def test_empty_input(self):
        assert aggregate_material_usage([]) == {}

    def test_compatibility_characters_merge_with_plain_units(self):
        totals = aggregate_material_usage(
            [_sale(1, "A", _recipe(("強力粉", "1㎏"))), _sale(2, "B", _recipe(("強力粉", "1kg")))]
        )
        assert list(totals) == [("強力粉", "kg")]
        assert totals[("強力粉", "kg")].total_amount == Decimal("3")


class TestCountPeriodDays:
    def test_inclusive_count(self):
        assert count_period_days("2024-01-01", "2024-01-31") == 31

    def test_same_day_is_one(self):
        assert count_period_days(date(2024, 3, 1), date(2024, 3, 1)) == 1

    def test_reversed_period_is_one(self):
        assert count_period_days("2024-02-10", "2024-02-01") == 1

    @pytest.mark.parametrize("bad", [None, "", "yesterday", "2024-13-01"])
    def test_malformed_boundary_is_one(self, bad):
        assert count_period_days(bad, "2024-01-31") == 1
        assert count_period_days("2024-01-01", bad) == 1

    def test_leap_year(self):
        assert count_period_days("2024-02-01", "2024-02-29") == 29


class TestProjectToDaily:
    def test_rounds_up(self):
        totals = {("米", "g"): MaterialUsageTotal("米", "g", Decimal("10"), ["おにぎり"])}
        result = project_to_daily(totals, "2024-01-01", "2024-01-03")
        assert result == [
            DailyMaterialUsage("米", "g", 4, ["おにぎり"], Decimal("10"))
        ]

    def test_exact_division_is_not_rounded(self):
        totals = [MaterialUsageTotal("米", "g", Decimal("300"), [])]
        assert project_to_daily(totals, "2024-01-01", "2024-01-03")[0].per_day == 100

    def test_fractional_total_rounds_up(self):
        totals = [MaterialUsageTotal("牛乳", "L", Decimal("1.5"), [])]
        assert project_to_daily(totals, "2024-01-01", "2024-01-01")[0].per_day == 2

    def test_zero_total(self):
        totals = [MaterialUsageTotal("塩", "g", Decimal("0"), [])]
        assert project_to_daily(totals, "2024-01-01", "2024-01-10")[0].per_day == 0

    def test_display_amount_has_thousands_separator(self):
        usage = DailyMaterialUsage("小麦粉", "g", 12500, [])
        assert usage.display_amount == "12,500g"


def test_end_to_end_karaage():
    """Two sales of 唐揚げ (250g chicken each) over one day need 500g per day."""
    recipe = _recipe(("鶏もも肉", "250g"))
    records = [_sale(1, "唐揚げ", recipe), _sale(1, "唐揚げ", recipe)]

    result = project_to_daily(aggregate_material_usage(records), "2024-05-01", "2024-05-01")

    assert len(result) == 1
    assert result[0].material_name == "鶏もも肉"
    assert result[0].unit == "g"
    assert result[0].per_day == 500
    assert result[0].example_products == ("唐揚げ",)
    assert result[0].display_amount == "500g"


class TestSkipLogging:
    LOGGER = "shop_dashboard.services.material_usage_service"

    def _own(self, caplog):
        return [r for r in caplog.records if r.name == self.LOGGER]

    def test_skipped_records_and_lines_are_logged_at_debug(self, caplog):
        records = [
            SaleRecord(product_id=None, quantity=1, product=None),
            _sale(1, "謎", "broken", product_id=2),
            _sale(1, "プリン", json.dumps([{"name": "砂糖"}], ensure_ascii=False), product_id=3),
        ]

        with caplog.at_level(logging.DEBUG, logger=self.LOGGER):
            assert aggregate_material_usage(records) == {}

        logged = self._own(caplog)
        assert [r.getMessage() for r in logged] == [
            "aggregate_material_usage: record_skipped",
            "aggregate_material_usage: record_skipped",
            "aggregate_material_usage: line_skipped",
        ]
        assert [r.reason for r in logged] == ["no_product", "unreadable_recipe", "incomplete_line"]
        assert all(r.levelno == logging.DEBUG for r in logged)

    def test_defaulted_day_count_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger=self.LOGGER):
            assert count_period_days("yesterday", "2024-01-31") == 1

        assert [r.getMessage() for r in self._own(caplog)] == [
            "count_period_days: day_count_defaulted"
        ]

    def test_clean_input_logs_nothing(self, caplog):
        with caplog.at_level(logging.DEBUG, logger=self.LOGGER):
            aggregate_material_usage([_sale(1, "パン", _recipe(("小麦粉", "100g")))])
            count_period_days("2024-01-01", "2024-01-31")

        assert self._own(caplog) == []
