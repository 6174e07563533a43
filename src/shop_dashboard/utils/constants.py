"""
Constants for the Shop Dashboard application.

This module defines all system-wide constants including:
- Application metadata
- Roles and contact statuses
- Validation limits for products, recipes and sales
- Report defaults (period length, example products, notification limits)
- UI constants (sizes, padding)
"""

from typing import List

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Shop Dashboard"
APP_VERSION = "0.1.0"
DATABASE_VERSION = "1.0"
APP_DIR_NAME = "ShopDashboard"
ENV_VAR_ENVIRONMENT = "SHOP_DASHBOARD_ENV"
ENV_VAR_CACHE_TTL = "SHOP_DASHBOARD_CACHE_TTL"
ENV_VAR_USER = "SHOP_DASHBOARD_USER"

# ============================================================================
# Roles
# ============================================================================

ROLE_STAFF = "staff"
ROLE_ADMIN = "admin"
ROLES: List[str] = [ROLE_STAFF, ROLE_ADMIN]

DEFAULT_DISPLAY_NAME = "ゲスト"

# ============================================================================
# Contacts, Notifications and Announcements
# ============================================================================

CONTACT_STATUS_OPEN = "open"
CONTACT_STATUS_REPLIED = "replied"
CONTACT_STATUSES: List[str] = [CONTACT_STATUS_OPEN, CONTACT_STATUS_REPLIED]

REPLY_NOTIFICATION_TITLE = "お問い合わせへの返信"
FALLBACK_NOTIFICATION_EMAIL = "unknown@example.com"
RECENT_NOTIFICATION_LIMIT = 5
MAX_TITLE_LENGTH = 200

# ============================================================================
# Validation Constants
# ============================================================================

# String length limits
MAX_NAME_LENGTH = 200
MAX_CODE_LENGTH = 50
MAX_EMAIL_LENGTH = 254
MAX_URL_LENGTH = 500
MAX_NOTE_LENGTH = 500
MAX_CONTACT_BODY_LENGTH = 4000
MAX_INGREDIENT_NAME_LENGTH = 100
MAX_QUANTITY_TEXT_LENGTH = 50

# Numeric limits
MIN_PRICE = 0
MAX_PRICE = 99999999
MIN_SALE_QUANTITY = 1
MAX_SALE_QUANTITY = 1000000

# Recipes
MAX_RECIPE_LINES = 50
RECIPE_KEY_NAME = "name"
RECIPE_KEY_QUANTITY = "quantity"

# ============================================================================
# Report Defaults
# ============================================================================

DEFAULT_PERIOD_DAYS = 30
DEFAULT_CACHE_TTL_SECONDS = 300
MAX_EXAMPLE_PRODUCTS = 3
REPORTING_LOCALE = "ja_JP"

SUMMARY_MODE_DAILY = "daily"
SUMMARY_MODE_MONTHLY = "monthly"
SUMMARY_MODE_CUSTOM = "custom"
SUMMARY_MODES: List[str] = [SUMMARY_MODE_DAILY, SUMMARY_MODE_MONTHLY, SUMMARY_MODE_CUSTOM]

# ============================================================================
# Database Constants
# ============================================================================

DATABASE_FILENAME = "shop_dashboard.db"

# ============================================================================
# Date/Time Formats
# ============================================================================

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

# ============================================================================
# UI Constants
# ============================================================================

DEFAULT_WINDOW_WIDTH = 1200
DEFAULT_WINDOW_HEIGHT = 800
MIN_WINDOW_WIDTH = 900
MIN_WINDOW_HEIGHT = 600

PADDING_SMALL = 5
PADDING_MEDIUM = 10
PADDING_LARGE = 20

EXAMPLE_PRODUCT_SEPARATOR = "、"

# ============================================================================
# Error Messages
# ============================================================================

ERROR_REQUIRED_FIELD = "This field is required"
ERROR_INVALID_NUMBER = "Please enter a valid number"
ERROR_INVALID_NON_NEGATIVE = "Value must be zero or greater"
