"""
Announcement model for notices posted by admins to every store.

Only published announcements are shown on the dashboard; drafts stay
hidden until an admin publishes them.
"""

from sqlalchemy import Column, String, Text, Boolean, Index

from .base import BaseModel


class Announcement(BaseModel):
    """
    Announcement model.

    Attributes:
        title: Short title
        body: Announcement text
        is_published: Whether the announcement is shown to users
    """

    __tablename__ = "announcements"

    title = Column(String(200), nullable=False)
    body = Column(Text, nullable=False)
    is_published = Column(Boolean, nullable=False, default=False)

    __table_args__ = (Index("idx_announcement_published_created", "is_published", "created_at"),)
