"""Services package - Business logic layer for Shop Dashboard.

This package contains all service modules that provide business logic
and database operations for the application.

Architecture:
- Services: Stateless functions organized by domain (store, product, sale, contact)
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy
- Validation: Input validation before database operations

Service Modules:
- store_service: Stores, user profiles and store visibility
- product_service: Product CRUD with recipe validation
- sales_service: Sale recording and the sale records feeding reports
- sales_summary_service: Daily/monthly sales and profit roll-ups
- contact_service: Support messages and admin replies
- notification_service: Per-user inbox
- announcement_service: Admin announcements shown to every store
- purchase_list_service: Cached per-day material purchase list

Core computation (no database access):
- recipe_parser: Recipe JSON and quantity text parsing
- material_usage_service: Material aggregation and per-day projection

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- logging_utils: Structured service logging
"""

from . import (
    database,
    recipe_parser,
    material_usage_service,
    purchase_list_service,
    store_service,
    product_service,
    sales_service,
    sales_summary_service,
    contact_service,
    notification_service,
    announcement_service,
)

from .database import get_session, init_database, session_scope
from .exceptions import (
    AnnouncementNotFound,
    ContactNotFound,
    DatabaseError,
    NotificationNotFound,
    PermissionDenied,
    ProductNotFound,
    ProfileNotFound,
    ServiceError,
    StoreNotFound,
    ValidationError,
)
from .material_usage_service import (
    DailyMaterialUsage,
    MaterialUsageTotal,
    ProductSnapshot,
    SaleRecord,
    aggregate_material_usage,
    count_period_days,
    project_to_daily,
)
from .purchase_list_service import build_purchase_list, get_purchase_list
from .recipe_parser import ParsedQuantity, RecipeLine, parse_quantity_text

__all__ = [
    # Modules
    "database",
    "recipe_parser",
    "material_usage_service",
    "purchase_list_service",
    "store_service",
    "product_service",
    "sales_service",
    "sales_summary_service",
    "contact_service",
    "notification_service",
    "announcement_service",
    # Database
    "get_session",
    "init_database",
    "session_scope",
    # Exceptions
    "ServiceError",
    "ValidationError",
    "StoreNotFound",
    "ProfileNotFound",
    "ProductNotFound",
    "ContactNotFound",
    "NotificationNotFound",
    "AnnouncementNotFound",
    "PermissionDenied",
    "DatabaseError",
    # Core computation
    "ParsedQuantity",
    "RecipeLine",
    "parse_quantity_text",
    "ProductSnapshot",
    "SaleRecord",
    "MaterialUsageTotal",
    "DailyMaterialUsage",
    "aggregate_material_usage",
    "count_period_days",
    "project_to_daily",
    "build_purchase_list",
    "get_purchase_list",
]
