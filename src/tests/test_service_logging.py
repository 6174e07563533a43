"""Tests for service layer structured logging.

These tests verify that report and write operations emit structured log
entries with appropriate context information.
"""

import logging

from shop_dashboard.services import product_service, purchase_list_service, sales_service
from shop_dashboard.services.logging_utils import get_service_logger, log_operation


class TestLoggingUtilities:
    """Tests for logging utility functions."""

    def test_get_service_logger_extracts_module_name(self):
        logger = get_service_logger("shop_dashboard.services.sales_service")
        assert logger.name == "shop_dashboard.services.sales_service"

    def test_log_operation_includes_extra_context(self, caplog):
        logger = get_service_logger("test")

        with caplog.at_level(logging.INFO):
            log_operation(logger, operation="context_test", outcome="success", store_id=7)

        record = caplog.records[0]
        assert record.getMessage() == "context_test: success"
        assert record.operation == "context_test"
        assert record.store_id == 7

    def test_log_operation_respects_level(self, caplog):
        logger = get_service_logger("test")

        with caplog.at_level(logging.INFO):
            log_operation(logger, operation="quiet", outcome="debug", level=logging.DEBUG)

        assert caplog.records == []


class TestServiceLogging:
    def test_record_sale_is_logged(self, test_db, sample_store, karaage_product, caplog):
        with caplog.at_level(logging.INFO, logger="shop_dashboard.services"):
            sale = sales_service.record_sale(
                sample_store["id"], karaage_product["id"], 2, "2024-05-01"
            )

        records = [r for r in caplog.records if getattr(r, "operation", None) == "record_sale"]
        assert len(records) == 1
        assert records[0].sale_id == sale["id"]
        assert records[0].quantity == 2

    def test_purchase_list_computation_is_logged(
        self, test_db, sample_store, karaage_product, caplog
    ):
        sales_service.record_sale(sample_store["id"], karaage_product["id"], 1, "2024-05-01")
        product_service.delete_product(karaage_product["id"])

        with caplog.at_level(logging.DEBUG, logger="shop_dashboard.services"):
            purchase_list_service.get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-03")
            purchase_list_service.get_purchase_list(sample_store["id"], "2024-05-01", "2024-05-03")

        outcomes = [
            r.outcome for r in caplog.records if getattr(r, "operation", None) == "get_purchase_list"
        ]
        assert outcomes == ["computed", "cache_hit"]

        computed = next(r for r in caplog.records if getattr(r, "outcome", None) == "computed")
        assert computed.record_count == 1
        assert computed.skipped_records == 1
        assert computed.day_count == 3
