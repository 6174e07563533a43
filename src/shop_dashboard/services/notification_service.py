"""Notification Service - a user's inbox.

Notifications are created by other services (admin replies in
contact_service). Users read, mark and delete their own notifications;
deletion is soft. A notification belonging to someone else is reported as
NotificationNotFound.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from shop_dashboard.models import Notification
from shop_dashboard.services.database import session_scope
from shop_dashboard.services.exceptions import NotificationNotFound
from shop_dashboard.services.logging_utils import get_service_logger, log_operation
from shop_dashboard.services.store_service import get_profile_model
from shop_dashboard.utils.constants import RECENT_NOTIFICATION_LIMIT

logger = get_service_logger(__name__)


def get_recent_notifications(
    user_key: str,
    limit: int = RECENT_NOTIFICATION_LIMIT,
    session: Optional[Session] = None,
) -> List[Dict[str, Any]]:
    """A user's newest notifications, deleted ones excluded."""
    if session is not None:
        return _get_recent_notifications_impl(user_key, limit, session)
    with session_scope() as session:
        return _get_recent_notifications_impl(user_key, limit, session)


def _get_recent_notifications_impl(
    user_key: str, limit: int, session: Session
) -> List[Dict[str, Any]]:
    profile = get_profile_model(user_key, session)
    notifications = (
        _active_notifications(session, profile.id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
        .all()
    )
    return [n.to_dict() for n in notifications]


def get_unread_count(user_key: str, session: Optional[Session] = None) -> int:
    """Number of unread, undeleted notifications."""
    if session is not None:
        return _get_unread_count_impl(user_key, session)
    with session_scope() as session:
        return _get_unread_count_impl(user_key, session)


def _get_unread_count_impl(user_key: str, session: Session) -> int:
    profile = get_profile_model(user_key, session)
    return _active_notifications(session, profile.id).filter(Notification.is_read.is_(False)).count()


def set_read(
    notification_id: int,
    user_key: str,
    is_read: bool = True,
    session: Optional[Session] = None,
) -> Dict[str, Any]:
    """Mark one notification read (or unread)."""
    if session is not None:
        return _set_read_impl(notification_id, user_key, is_read, session)
    with session_scope() as session:
        return _set_read_impl(notification_id, user_key, is_read, session)


def _set_read_impl(
    notification_id: int, user_key: str, is_read: bool, session: Session
) -> Dict[str, Any]:
    notification = _get_owned_notification(notification_id, user_key, session)
    notification.is_read = is_read
    session.flush()
    return notification.to_dict()


def mark_all_read(user_key: str, session: Optional[Session] = None) -> int:
    """Mark every unread notification read. Returns how many changed."""
    if session is not None:
        return _mark_all_read_impl(user_key, session)
    with session_scope() as session:
        return _mark_all_read_impl(user_key, session)


def _mark_all_read_impl(user_key: str, session: Session) -> int:
    profile = get_profile_model(user_key, session)
    unread = _active_notifications(session, profile.id).filter(Notification.is_read.is_(False)).all()
    for notification in unread:
        notification.is_read = True
    session.flush()

    log_operation(
        logger, operation="mark_all_read", outcome="success", profile_id=profile.id, count=len(unread)
    )
    return len(unread)


def delete_notification(
    notification_id: int, user_key: str, session: Optional[Session] = None
) -> bool:
    """Soft-delete a notification."""
    if session is not None:
        return _delete_notification_impl(notification_id, user_key, session)
    with session_scope() as session:
        return _delete_notification_impl(notification_id, user_key, session)


def _delete_notification_impl(notification_id: int, user_key: str, session: Session) -> bool:
    notification = _get_owned_notification(notification_id, user_key, session)
    notification.is_deleted = True
    session.flush()

    log_operation(
        logger,
        operation="delete_notification",
        outcome="success",
        notification_id=notification_id,
    )
    return True


def _active_notifications(session: Session, profile_id: int):
    return session.query(Notification).filter(
        Notification.user_id == profile_id,
        Notification.is_deleted.is_(False),
    )


def _get_owned_notification(notification_id: int, user_key: str, session: Session) -> Notification:
    profile = get_profile_model(user_key, session)
    notification = session.get(Notification, notification_id)
    if notification is None or notification.user_id != profile.id or notification.is_deleted:
        raise NotificationNotFound(notification_id)
    return notification
