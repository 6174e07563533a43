"""Service layer exception classes for the Shop Dashboard.

This module defines all custom exceptions used by the service layer to provide
consistent error handling across the application.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    ├── StoreNotFound
    ├── ProfileNotFound
    ├── ProductNotFound
    ├── ContactNotFound
    ├── NotificationNotFound
    ├── PermissionDenied
    └── DatabaseError
"""


class ServiceError(Exception):
    """Base exception for all service layer errors."""

    pass


class ValidationError(ServiceError):
    """Raised when data validation fails.

    Args:
        errors: List of human-readable error messages

    Example:
        >>> raise ValidationError(["Name: This field is required"])
        ValidationError: Validation failed: Name: This field is required
    """

    def __init__(self, errors: list):
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}")


class StoreNotFound(ServiceError):
    """Raised when a store cannot be found by ID."""

    def __init__(self, store_id: int):
        self.store_id = store_id
        super().__init__(f"Store with ID {store_id} not found")


class ProfileNotFound(ServiceError):
    """Raised when a user profile cannot be found by user key."""

    def __init__(self, user_key: str):
        self.user_key = user_key
        super().__init__(f"Profile '{user_key}' not found")


class ProductNotFound(ServiceError):
    """Raised when a product cannot be found by ID.

    Example:
        >>> raise ProductNotFound(123)
        ProductNotFound: Product with ID 123 not found
    """

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found")


class ContactNotFound(ServiceError):
    """Raised when a contact message cannot be found by ID."""

    def __init__(self, contact_id: int):
        self.contact_id = contact_id
        super().__init__(f"Contact with ID {contact_id} not found")


class NotificationNotFound(ServiceError):
    """Raised when a notification does not exist for the requesting user."""

    def __init__(self, notification_id: int):
        self.notification_id = notification_id
        super().__init__(f"Notification with ID {notification_id} not found")


class AnnouncementNotFound(ServiceError):
    """Raised when an announcement does not exist."""

    def __init__(self, announcement_id: int):
        self.announcement_id = announcement_id
        super().__init__(f"Announcement with ID {announcement_id} not found")


class PermissionDenied(ServiceError):
    """Raised when a non-admin attempts an admin-only operation."""

    def __init__(self, user_key: str, operation: str):
        self.user_key = user_key
        self.operation = operation
        super().__init__(f"User '{user_key}' is not allowed to {operation}")


class DatabaseError(ServiceError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
