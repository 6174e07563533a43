"""
Notification model for per-user messages such as admin replies.

Reading a notification does not remove it; deletion is a soft delete so
the admin side keeps its history.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import BaseModel


class Notification(BaseModel):
    """
    Notification model.

    Attributes:
        user_id: Recipient profile
        contact_id: Contact this notification answers (optional)
        email: Recipient email at the time of sending
        title: Short title
        message: Body text
        is_read: Read flag
        is_deleted: Soft-delete flag
    """

    __tablename__ = "notifications"

    user_id = Column(
        Integer, ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False
    )
    contact_id = Column(Integer, ForeignKey("contacts.id", ondelete="SET NULL"), nullable=True)
    email = Column(String(254), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    is_deleted = Column(Boolean, nullable=False, default=False)

    recipient = relationship("UserProfile", back_populates="notifications")
    contact = relationship("Contact", back_populates="notifications")

    __table_args__ = (
        Index("idx_notification_user_deleted", "user_id", "is_deleted", "created_at"),
    )
