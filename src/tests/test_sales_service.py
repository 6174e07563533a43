"""Unit tests for sales_service: recording sales and reading sale records."""

from datetime import date
from decimal import Decimal

import pytest

from shop_dashboard.services import product_service, sales_service
from shop_dashboard.services.exceptions import ProductNotFound, ValidationError
from shop_dashboard.services.material_usage_service import SaleRecord


class TestRecordSale:
    def test_amount_profit_and_default_note(self, test_db, sample_store, karaage_product):
        sale = sales_service.record_sale(
            sample_store["id"], karaage_product["id"], 3, "2024-05-01"
        )

        assert sale["quantity"] == 3
        assert Decimal(str(sale["amount"])) == Decimal("1500")
        assert Decimal(str(sale["profit"])) == Decimal("900")
        assert sale["note"] == "唐揚げ × 3個"
        assert sale["sale_date"] == "2024-05-01"
        assert sale["sold_at"] is not None

    def test_explicit_note_is_kept(self, test_db, sample_store, karaage_product):
        sale = sales_service.record_sale(
            sample_store["id"], karaage_product["id"], 1, date(2024, 5, 1), note=" 予約分 "
        )
        assert sale["note"] == "予約分"

    def test_later_price_change_does_not_rewrite_sale(self, test_db, sample_store, karaage_product):
        sale = sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, "2024-05-01")
        product_service.update_product(
            karaage_product["id"], "唐揚げ", 900, 200, [("鶏もも肉", "250g")]
        )

        sales = sales_service.get_sales_for_store(sample_store["id"])
        assert sales[0]["id"] == sale["id"]
        assert Decimal(str(sales[0]["amount"])) == Decimal("500")

    @pytest.mark.parametrize("quantity", [0, -1, 1000001, "abc", 1.5, None, True])
    def test_invalid_quantity(self, test_db, sample_store, karaage_product, quantity):
        with pytest.raises(ValidationError):
            sales_service.record_sale(sample_store["id"], karaage_product["id"], quantity, "2024-05-01")

    def test_quantity_bounds_are_inclusive(self, test_db, sample_store, karaage_product):
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, "2024-05-01")
        sales_service.record_sale(sample_store["id"], karaage_product["id"], "1000000", "2024-05-01")

    def test_invalid_date(self, test_db, sample_store, karaage_product):
        with pytest.raises(ValidationError):
            sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, "05/01/2024")

    def test_product_of_another_store(self, test_db, other_store, karaage_product):
        with pytest.raises(ProductNotFound):
            sales_service.record_sale(other_store["id"], karaage_product["id"], 1, "2024-05-01")

    def test_missing_product(self, test_db, sample_store):
        with pytest.raises(ProductNotFound):
            sales_service.record_sale(sample_store["id"], 999, 1, "2024-05-01")


class TestGetSaleRecords:
    def test_inclusive_period(self, test_db, sample_store, karaage_product):
        for day in ("2024-04-30", "2024-05-01", "2024-05-31", "2024-06-01"):
            sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, day)

        records = sales_service.get_sale_records(sample_store["id"], "2024-05-01", "2024-05-31")

        assert len(records) == 2
        assert all(isinstance(r, SaleRecord) for r in records)
        assert records[0].product.name == "唐揚げ"
        assert "鶏もも肉" in records[0].product.recipe

    def test_other_stores_are_excluded(self, test_db, sample_store, other_store, karaage_product):
        other = product_service.create_product(other_store["id"], "パン", 200, 80, [("小麦粉", "100g")])
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, "2024-05-01")
        sales_service.record_sale(other_store["id"], other["id"], 1, "2024-05-01")

        records = sales_service.get_sale_records(sample_store["id"], "2024-05-01", "2024-05-01")
        assert [r.product.name for r in records] == ["唐揚げ"]

    def test_deleted_product_gives_empty_product(self, test_db, sample_store, karaage_product):
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 2, "2024-05-01")
        product_service.delete_product(karaage_product["id"])

        records = sales_service.get_sale_records(sample_store["id"], "2024-05-01", "2024-05-01")
        assert len(records) == 1
        assert records[0].product is None
        assert records[0].product_id is None
        assert records[0].quantity == 2

    def test_unbounded_period(self, test_db, sample_store, karaage_product):
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, "2020-01-01")
        assert len(sales_service.get_sale_records(sample_store["id"], None, None)) == 1
