"""
Database models package.

This package contains all SQLAlchemy ORM models for the application.
"""

from .base import Base, BaseModel
from .store import Store
from .user_profile import UserProfile
from .product import Product
from .sale import Sale
from .contact import Contact
from .notification import Notification
from .announcement import Announcement

__all__ = [
    "Base",
    "BaseModel",
    "Store",
    "UserProfile",
    "Product",
    "Sale",
    "Contact",
    "Notification",
    "Announcement",
]
