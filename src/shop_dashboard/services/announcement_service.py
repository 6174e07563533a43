"""Announcement Service - notices from admins to every store.

Admins post announcements as drafts or published; everyone reads the
published ones, newest first.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from shop_dashboard.models import Announcement
from shop_dashboard.services.database import session_scope
from shop_dashboard.services.exceptions import AnnouncementNotFound, ValidationError
from shop_dashboard.services.logging_utils import get_service_logger, log_operation
from shop_dashboard.services.store_service import require_admin
from shop_dashboard.utils.constants import MAX_CONTACT_BODY_LENGTH, MAX_TITLE_LENGTH

logger = get_service_logger(__name__)


def create_announcement(
    admin_key: str,
    title: str,
    body: str,
    publish: bool = True,
    session: Optional[Session] = None,
) -> Dict[str, Any]:
    """Post an announcement.

    Args:
        admin_key: Profile posting the announcement (must be an admin)
        title: Short title (required)
        body: Announcement text (required)
        publish: False keeps it as a hidden draft
        session: Optional database session

    Returns:
        Dict[str, Any]: Created announcement as dictionary

    Raises:
        PermissionDenied: If admin_key is not an admin
        ValidationError: If title or body is missing or too long
    """
    if session is not None:
        return _create_announcement_impl(admin_key, title, body, publish, session)
    with session_scope() as session:
        return _create_announcement_impl(admin_key, title, body, publish, session)


def _create_announcement_impl(
    admin_key: str, title: str, body: str, publish: bool, session: Session
) -> Dict[str, Any]:
    require_admin(admin_key, "post announcements", session)

    title = (title or "").strip()
    body = (body or "").strip()
    errors = []
    if not title:
        errors.append("Title: This field is required")
    elif len(title) > MAX_TITLE_LENGTH:
        errors.append(f"Title: Must be {MAX_TITLE_LENGTH} characters or less")
    if not body:
        errors.append("Body: This field is required")
    elif len(body) > MAX_CONTACT_BODY_LENGTH:
        errors.append(f"Body: Must be {MAX_CONTACT_BODY_LENGTH} characters or less")
    if errors:
        raise ValidationError(errors)

    announcement = Announcement(title=title, body=body, is_published=publish)
    session.add(announcement)
    session.flush()

    log_operation(
        logger,
        operation="create_announcement",
        outcome="success",
        announcement_id=announcement.id,
        published=publish,
    )
    return announcement.to_dict()


def set_published(
    admin_key: str,
    announcement_id: int,
    is_published: bool = True,
    session: Optional[Session] = None,
) -> Dict[str, Any]:
    """Publish a draft, or withdraw a published announcement."""
    if session is not None:
        return _set_published_impl(admin_key, announcement_id, is_published, session)
    with session_scope() as session:
        return _set_published_impl(admin_key, announcement_id, is_published, session)


def _set_published_impl(
    admin_key: str, announcement_id: int, is_published: bool, session: Session
) -> Dict[str, Any]:
    require_admin(admin_key, "publish announcements", session)
    announcement = session.get(Announcement, announcement_id)
    if announcement is None:
        raise AnnouncementNotFound(announcement_id)
    announcement.is_published = is_published
    session.flush()
    return announcement.to_dict()


def get_published_announcements(
    limit: Optional[int] = None, session: Optional[Session] = None
) -> List[Dict[str, Any]]:
    """Published announcements, newest first (all of them when limit is None)."""
    if session is not None:
        return _get_published_announcements_impl(limit, session)
    with session_scope() as session:
        return _get_published_announcements_impl(limit, session)


def _get_published_announcements_impl(
    limit: Optional[int], session: Session
) -> List[Dict[str, Any]]:
    query = (
        session.query(Announcement)
        .filter(Announcement.is_published.is_(True))
        .order_by(Announcement.created_at.desc(), Announcement.id.desc())
    )
    if limit is not None:
        query = query.limit(limit)
    return [a.to_dict() for a in query.all()]

