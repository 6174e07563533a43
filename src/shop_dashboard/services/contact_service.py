"""Contact Service - support messages from staff and admin replies.

Staff send free-text messages; an admin reads them grouped by sender and
replies. A reply marks the contact as replied and drops a notification
into the sender's inbox (see notification_service).

All functions follow the session pattern:
- If session provided, use it directly
- If session is None, create a new session via session_scope()
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from shop_dashboard.models import Contact, Notification, Store
from shop_dashboard.services.database import session_scope
from shop_dashboard.services.exceptions import (
    ContactNotFound,
    StoreNotFound,
    ValidationError,
)
from shop_dashboard.services.logging_utils import get_service_logger, log_operation
from shop_dashboard.services.store_service import get_profile_model, require_admin
from shop_dashboard.utils.constants import (
    CONTACT_STATUS_OPEN,
    CONTACT_STATUS_REPLIED,
    FALLBACK_NOTIFICATION_EMAIL,
    MAX_CONTACT_BODY_LENGTH,
    MAX_EMAIL_LENGTH,
    REPLY_NOTIFICATION_TITLE,
)
from shop_dashboard.utils.datetime_utils import utc_now

logger = get_service_logger(__name__)


def submit_contact(
    user_key: str,
    body: str,
    email: Optional[str] = None,
    store_id: Optional[int] = None,
    session: Optional[Session] = None,
) -> Dict[str, Any]:
    """Send a support message.

    Args:
        user_key: Sending user's key (profile must exist)
        body: Message text (required)
        email: Reply-to email; defaults to the profile's email
        store_id: Sender's store; defaults to the profile's store
        session: Optional database session

    Returns:
        Dict[str, Any]: Created contact as dictionary

    Raises:
        ProfileNotFound: If the sender has no profile
        StoreNotFound: If store_id does not exist
        ValidationError: If the body is empty or too long
    """
    if session is not None:
        return _submit_contact_impl(user_key, body, email, store_id, session)
    with session_scope() as session:
        return _submit_contact_impl(user_key, body, email, store_id, session)


def _submit_contact_impl(
    user_key: str,
    body: str,
    email: Optional[str],
    store_id: Optional[int],
    session: Session,
) -> Dict[str, Any]:
    profile = get_profile_model(user_key, session)

    body = (body or "").strip()
    email = (email or "").strip() or profile.email

    errors = []
    if not body:
        errors.append("Message: This field is required")
    elif len(body) > MAX_CONTACT_BODY_LENGTH:
        errors.append(f"Message: Must be {MAX_CONTACT_BODY_LENGTH} characters or less")
    if email and len(email) > MAX_EMAIL_LENGTH:
        errors.append(f"Email: Must be {MAX_EMAIL_LENGTH} characters or less")
    if errors:
        raise ValidationError(errors)

    if store_id is None:
        store_id = profile.store_id
    elif session.get(Store, store_id) is None:
        raise StoreNotFound(store_id)

    contact = Contact(
        user_id=profile.id,
        store_id=store_id,
        email=email,
        body=body,
        status=CONTACT_STATUS_OPEN,
    )
    session.add(contact)
    session.flush()

    log_operation(
        logger,
        operation="submit_contact",
        outcome="success",
        contact_id=contact.id,
        profile_id=profile.id,
    )
    return contact.to_dict()


def get_contacts_for_user(user_key: str, session: Optional[Session] = None) -> List[Dict[str, Any]]:
    """A user's contacts, newest first."""
    if session is not None:
        return _get_contacts_for_user_impl(user_key, session)
    with session_scope() as session:
        return _get_contacts_for_user_impl(user_key, session)


def _get_contacts_for_user_impl(user_key: str, session: Session) -> List[Dict[str, Any]]:
    profile = get_profile_model(user_key, session)
    contacts = (
        session.query(Contact)
        .filter(Contact.user_id == profile.id)
        .order_by(Contact.created_at.desc(), Contact.id.desc())
        .all()
    )
    return [c.to_dict() for c in contacts]


def get_contact_senders(admin_key: str, session: Optional[Session] = None) -> List[Dict[str, Any]]:
    """
    List everyone who has sent a contact, for the admin inbox.

    Each sender appears once with the email and store of their latest
    contact.

    Returns:
        List of {"user_key", "display_name", "email", "store_id",
        "last_contact_at"} dicts, most recent sender first

    Raises:
        PermissionDenied: If admin_key is not an admin
    """
    if session is not None:
        return _get_contact_senders_impl(admin_key, session)
    with session_scope() as session:
        return _get_contact_senders_impl(admin_key, session)


def _get_contact_senders_impl(admin_key: str, session: Session) -> List[Dict[str, Any]]:
    require_admin(admin_key, "list contact senders", session)

    contacts = (
        session.query(Contact)
        .filter(Contact.user_id.isnot(None))
        .order_by(Contact.created_at.desc(), Contact.id.desc())
        .all()
    )

    senders: Dict[int, Dict[str, Any]] = {}
    for contact in contacts:
        if contact.user_id in senders:
            continue
        senders[contact.user_id] = {
            "user_key": contact.sender.user_key,
            "display_name": contact.sender.display_name,
            "email": contact.email,
            "store_id": contact.store_id,
            "last_contact_at": contact.created_at.isoformat() if contact.created_at else None,
        }
    return list(senders.values())


def reply_to_contact(
    admin_key: str,
    contact_id: int,
    reply_body: str,
    session: Optional[Session] = None,
) -> Dict[str, Any]:
    """
    Answer a contact and notify its sender.

    Args:
        admin_key: Replying admin's user key
        contact_id: Contact to answer
        reply_body: Reply text (required)
        session: Optional database session

    Returns:
        Dict[str, Any]: Updated contact as dictionary

    Raises:
        PermissionDenied: If admin_key is not an admin
        ContactNotFound: If the contact does not exist
        ValidationError: If the reply is empty or too long
    """
    if session is not None:
        return _reply_to_contact_impl(admin_key, contact_id, reply_body, session)
    with session_scope() as session:
        return _reply_to_contact_impl(admin_key, contact_id, reply_body, session)


def _reply_to_contact_impl(
    admin_key: str, contact_id: int, reply_body: str, session: Session
) -> Dict[str, Any]:
    require_admin(admin_key, "reply to contacts", session)

    contact = session.get(Contact, contact_id)
    if contact is None:
        raise ContactNotFound(contact_id)

    reply_body = (reply_body or "").strip()
    if not reply_body:
        raise ValidationError(["Reply: This field is required"])
    if len(reply_body) > MAX_CONTACT_BODY_LENGTH:
        raise ValidationError([f"Reply: Must be {MAX_CONTACT_BODY_LENGTH} characters or less"])

    contact.reply_body = reply_body
    contact.replied_at = utc_now()
    contact.status = CONTACT_STATUS_REPLIED

    if contact.sender is not None:
        session.add(
            Notification(
                user_id=contact.user_id,
                contact_id=contact.id,
                email=contact.email or contact.sender.email or FALLBACK_NOTIFICATION_EMAIL,
                title=REPLY_NOTIFICATION_TITLE,
                message=reply_body,
                is_read=False,
                is_deleted=False,
            )
        )
    session.flush()

    log_operation(
        logger,
        operation="reply_to_contact",
        outcome="success",
        contact_id=contact.id,
        notified=contact.sender is not None,
    )
    return contact.to_dict()

