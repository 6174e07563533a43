"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across product, sales and report
operations.

Usage:
    from shop_dashboard.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    log_operation(
        logger,
        operation="record_sale",
        outcome="success",
        sale_id=123,
        store_id=4,
    )
"""

import logging
from typing import Any


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for service operations.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger named 'shop_dashboard.services.<module>'.

    Example:
        >>> get_service_logger("shop_dashboard.services.sales_service").name
        'shop_dashboard.services.sales_service'
    """
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"shop_dashboard.services.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The message is "<operation>: <outcome>"; the context is passed via the
    'extra' parameter so handlers can emit it as structured fields.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "record_sale", "aggregate_material_usage")
        outcome: Outcome description (e.g., "success", "record_skipped")
        level: Log level (default: INFO). Use DEBUG for per-row events.
        **context: Additional context fields (entity IDs, counts, reasons)
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
