"""
User profile model.

A profile is created the first time a user opens the dashboard. The
``user_key`` is the opaque identifier handed over by whatever
authenticates the user; this application does not manage credentials.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from .base import BaseModel
from shop_dashboard.utils.constants import ROLE_ADMIN, ROLE_STAFF


class UserProfile(BaseModel):
    """
    User profile model.

    Attributes:
        user_key: External user identifier (unique)
        display_name: Name shown in the UI
        email: Contact email (optional)
        icon_url: Avatar image URL (optional)
        role: "staff" (own store only) or "admin" (all stores, replies to contacts)
        store_id: Assigned store (nullable until assigned)
    """

    __tablename__ = "user_profiles"

    user_key = Column(String(100), nullable=False, unique=True, index=True)
    display_name = Column(String(200), nullable=False)
    email = Column(String(254), nullable=True)
    icon_url = Column(String(500), nullable=True)
    role = Column(String(20), nullable=False, default=ROLE_STAFF)
    store_id = Column(
        Integer, ForeignKey("stores.id", ondelete="SET NULL"), nullable=True, index=True
    )

    store = relationship("Store", back_populates="profiles")
    contacts = relationship("Contact", back_populates="sender")
    notifications = relationship(
        "Notification", back_populates="recipient", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("role IN ('staff', 'admin')", name="ck_user_profile_role"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
