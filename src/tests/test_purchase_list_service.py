"""Tests for purchase_list_service: cache behavior and store-level reports."""

import time
from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest

from shop_dashboard.services import product_service, purchase_list_service, sales_service
from shop_dashboard.services.exceptions import ValidationError
from shop_dashboard.services.material_usage_service import DailyMaterialUsage
from shop_dashboard.services.purchase_list_service import (
    PurchaseListCache,
    build_purchase_list,
    get_purchase_list,
    get_purchase_list_cache,
)


class TestPurchaseListCache:
    def test_put_and_get(self):
        cache = PurchaseListCache(ttl_seconds=60)
        value = [DailyMaterialUsage("米", "g", 100)]
        cache.put((1, None, None), value)
        assert cache.get((1, None, None)) == value
        assert cache.get((2, None, None)) is None

    def test_entries_expire(self, monkeypatch):
        cache = PurchaseListCache(ttl_seconds=10)
        now = [1000.0]
        monkeypatch.setattr(time, "time", lambda: now[0])

        cache.put((1, None, None), [])
        now[0] += 11
        assert cache.get((1, None, None)) is None
        assert cache.size() == 0

    def test_invalidate_one_store(self):
        cache = PurchaseListCache()
        cache.put((1, None, None), [])
        cache.put((2, None, None), [])

        cache.invalidate(1)

        assert cache.get((1, None, None)) is None
        assert cache.get((2, None, None)) == []

    def test_invalidate_everything(self):
        cache = PurchaseListCache()
        cache.put((1, None, None), [])
        cache.put((2, None, None), [])
        cache.invalidate()
        assert cache.size() == 0


def test_build_purchase_list_from_json_records():
    records = [
        {
            "productId": 1,
            "quantity": 3,
            "product": {"name": "パン", "recipe": '[{"name": "小麦粉", "quantity": "100g"}]'},
        }
    ]
    result = build_purchase_list(records, "2024-01-01", "2024-01-02")
    assert [(r.material_name, r.per_day) for r in result] == [("小麦粉", 150)]


class TestGetPurchaseList:
    def test_end_to_end(self, test_db, sample_store, karaage_product):
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, "2024-05-01")
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, "2024-05-01")

        result = get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-01")

        assert len(result) == 1
        assert result[0].material_name == "鶏もも肉"
        assert result[0].unit == "g"
        assert result[0].per_day == 500
        assert result[0].total_amount == Decimal("500")
        assert result[0].example_products == ("唐揚げ",)

    def test_per_day_over_period(self, test_db, sample_store, karaage_product):
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 3, "2024-05-02")

        result = get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-07")

        # 750g over 7 days, rounded up
        assert result[0].per_day == 108

    def test_no_sales(self, test_db, sample_store):
        assert get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-31") == []

    def test_result_is_cached(self, test_db, sample_store, karaage_product):
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, "2024-05-01")

        with patch.object(
            purchase_list_service,
            "_get_purchase_list_impl",
            wraps=purchase_list_service._get_purchase_list_impl,
        ) as impl:
            get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-01")
            result = get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-01")

        assert impl.call_count == 1
        assert result[0].per_day == 250

    def test_recording_a_sale_invalidates(self, test_db, sample_store, karaage_product):
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, "2024-05-01")
        assert get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-01")[0].per_day == 250

        sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, "2024-05-01")
        assert get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-01")[0].per_day == 500

    def test_editing_a_recipe_invalidates(self, test_db, sample_store, karaage_product):
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 2, "2024-05-01")
        get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-01")

        product_service.update_product(
            karaage_product["id"], "唐揚げ", 500, 200, [("鶏むね肉", "200g")]
        )

        result = get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-01")
        assert [(r.material_name, r.per_day) for r in result] == [("鶏むね肉", 400)]

    def test_deleting_a_product_drops_its_materials(self, test_db, sample_store, karaage_product):
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 2, "2024-05-01")
        get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-01")

        product_service.delete_product(karaage_product["id"])

        assert get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-01") == []

    def test_other_store_cache_is_kept(self, test_db, sample_store, other_store, karaage_product):
        get_purchase_list(other_store["id"], "2024-05-01", "2024-05-01")
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, "2024-05-01")

        key = (other_store["id"], date(2024, 5, 1), date(2024, 5, 1))
        assert get_purchase_list_cache().get(key) == ()

    def test_bypassing_the_cache(self, test_db, sample_store, karaage_product):
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, "2024-05-01")
        first = get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-01")
        second = get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-01", use_cache=False)
        assert first == second

    def test_malformed_boundary_is_rejected(self, test_db, sample_store, karaage_product):
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 10, "2020-01-01")
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, "2024-01-31")

        with pytest.raises(ValidationError) as exc_info:
            get_purchase_list(sample_store["id"], "garbage", "2024-01-31")

        assert exc_info.value.errors == ["From: Please enter a date as YYYY-MM-DD"]
        assert get_purchase_list_cache().size() == 0

    def test_cached_rows_cannot_be_altered(self, test_db, sample_store, karaage_product):
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, "2024-05-01")
        first = get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-01")

        with pytest.raises(FrozenInstanceError):
            first[0].example_products = ("改変",)
        first.clear()

        again = get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-01")
        assert again[0].example_products == ("唐揚げ",)

    def test_invalidation_waits_for_commit(self, test_db, sample_store, karaage_product):
        get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-01")
        key = (sample_store["id"], date(2024, 5, 1), date(2024, 5, 1))
        session = test_db()

        sales_service.record_sale(
            sample_store["id"], karaage_product["id"], 1, "2024-05-01", session=session
        )
        assert get_purchase_list_cache().get(key) == ()

        session.commit()
        assert get_purchase_list_cache().get(key) is None
