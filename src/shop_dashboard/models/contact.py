"""
Contact model for support messages sent by store staff.

An admin answers a contact by filling in ``reply_body``; the reply is
delivered to the sender as a Notification.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import BaseModel
from shop_dashboard.utils.constants import CONTACT_STATUS_OPEN


class Contact(BaseModel):
    """
    Contact (support message) model.

    Attributes:
        user_id: Sending profile (NULL for legacy rows)
        store_id: Sender's store at the time of sending
        email: Reply-to email
        body: Message text
        status: "open" or "replied"
        reply_body: Admin reply text
        replied_at: When the reply was saved
    """

    __tablename__ = "contacts"

    user_id = Column(
        Integer, ForeignKey("user_profiles.id", ondelete="SET NULL"), nullable=True, index=True
    )
    store_id = Column(Integer, ForeignKey("stores.id", ondelete="SET NULL"), nullable=True)
    email = Column(String(254), nullable=True)
    body = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=CONTACT_STATUS_OPEN)
    reply_body = Column(Text, nullable=True)
    replied_at = Column(DateTime, nullable=True)

    sender = relationship("UserProfile", back_populates="contacts")
    notifications = relationship("Notification", back_populates="contact")

    __table_args__ = (Index("idx_contact_user_created", "user_id", "created_at"),)
