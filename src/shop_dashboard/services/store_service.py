"""Store Service - stores, user profiles and store visibility.

Every public function follows the session pattern:
- If session provided, use it directly
- If session is None, create a new session via session_scope()

Example Usage:
    >>> from shop_dashboard.services.store_service import create_store, get_or_create_profile
    >>>
    >>> store = create_store(name="渋谷店", code="SBY")
    >>> profile = get_or_create_profile("user-123", email="staff@example.com")
    >>> profile["role"]
    'staff'
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from shop_dashboard.models import Store, UserProfile
from shop_dashboard.services.database import session_scope
from shop_dashboard.services.exceptions import (
    PermissionDenied,
    ProfileNotFound,
    StoreNotFound,
    ValidationError,
)
from shop_dashboard.services.logging_utils import get_service_logger, log_operation
from shop_dashboard.utils.constants import (
    DEFAULT_DISPLAY_NAME,
    MAX_CODE_LENGTH,
    MAX_NAME_LENGTH,
    MAX_URL_LENGTH,
    ROLES,
    ROLE_ADMIN,
    ROLE_STAFF,
)

logger = get_service_logger(__name__)


def create_store(name: str, code: str, session: Optional[Session] = None) -> Dict[str, Any]:
    """Create a store.

    Args:
        name: Store display name (required)
        code: Unique short code (required)
        session: Optional database session

    Returns:
        Dict[str, Any]: Created store as dictionary

    Raises:
        ValidationError: If name/code is missing, too long, or the code is taken
    """
    if session is not None:
        return _create_store_impl(name, code, session)
    with session_scope() as session:
        return _create_store_impl(name, code, session)


def _create_store_impl(name: str, code: str, session: Session) -> Dict[str, Any]:
    name = (name or "").strip()
    code = (code or "").strip()

    errors = []
    if not name:
        errors.append("Name: This field is required")
    elif len(name) > MAX_NAME_LENGTH:
        errors.append(f"Name: Must be {MAX_NAME_LENGTH} characters or less")
    if not code:
        errors.append("Code: This field is required")
    elif len(code) > MAX_CODE_LENGTH:
        errors.append(f"Code: Must be {MAX_CODE_LENGTH} characters or less")
    elif session.query(Store).filter(Store.code == code).first() is not None:
        errors.append(f"Code: Store code '{code}' already exists")
    if errors:
        raise ValidationError(errors)

    store = Store(name=name, code=code)
    session.add(store)
    session.flush()

    log_operation(logger, operation="create_store", outcome="success", store_id=store.id)
    return store.to_dict()


def update_store(
    user_key: str, store_id: int, name: str, session: Optional[Session] = None
) -> Dict[str, Any]:
    """Rename a store.

    Admins may rename any store; staff only the store they are assigned to.

    Args:
        user_key: Profile making the change
        store_id: Store to rename
        name: New display name (required)
        session: Optional database session

    Returns:
        Dict[str, Any]: Updated store as dictionary

    Raises:
        ProfileNotFound: If no profile exists for user_key
        StoreNotFound: If the store does not exist
        PermissionDenied: If a staff user targets another store
        ValidationError: If the name is missing or too long
    """
    if session is not None:
        return _update_store_impl(user_key, store_id, name, session)
    with session_scope() as session:
        return _update_store_impl(user_key, store_id, name, session)


def _update_store_impl(user_key: str, store_id: int, name: str, session: Session) -> Dict[str, Any]:
    profile = get_profile_model(user_key, session)
    store = session.get(Store, store_id)
    if store is None:
        raise StoreNotFound(store_id)
    if not profile.is_admin and profile.store_id != store_id:
        log_operation(
            logger,
            operation="update_store",
            outcome="denied",
            profile_id=profile.id,
            store_id=store_id,
        )
        raise PermissionDenied(user_key, "rename this store")

    store.name = _require_name(name)
    session.flush()

    log_operation(logger, operation="update_store", outcome="success", store_id=store.id)
    return store.to_dict()


def get_store(store_id: int, session: Optional[Session] = None) -> Optional[Dict[str, Any]]:
    """Get store by ID, or None if not found."""
    if session is not None:
        return _get_store_impl(store_id, session)
    with session_scope() as session:
        return _get_store_impl(store_id, session)


def _get_store_impl(store_id: int, session: Session) -> Optional[Dict[str, Any]]:
    store = session.query(Store).filter(Store.id == store_id).first()
    return store.to_dict() if store else None


def get_all_stores(session: Optional[Session] = None) -> List[Dict[str, Any]]:
    """Get all stores sorted by name."""
    if session is not None:
        return _get_all_stores_impl(session)
    with session_scope() as session:
        return _get_all_stores_impl(session)


def _get_all_stores_impl(session: Session) -> List[Dict[str, Any]]:
    return [s.to_dict() for s in session.query(Store).order_by(Store.name, Store.id).all()]


def get_or_create_profile(
    user_key: str,
    email: Optional[str] = None,
    session: Optional[Session] = None,
) -> Dict[str, Any]:
    """Get a user's profile, creating a staff profile on first visit.

    Args:
        user_key: External user identifier
        email: Email used as display name for new profiles
        session: Optional database session

    Returns:
        Dict[str, Any]: Profile as dictionary
    """
    if session is not None:
        return _get_or_create_profile_impl(user_key, email, session)
    with session_scope() as session:
        return _get_or_create_profile_impl(user_key, email, session)


def _get_or_create_profile_impl(
    user_key: str, email: Optional[str], session: Session
) -> Dict[str, Any]:
    if not user_key:
        raise ValidationError(["User: This field is required"])

    profile = session.query(UserProfile).filter(UserProfile.user_key == user_key).first()
    if profile is None:
        profile = UserProfile(
            user_key=user_key,
            email=email,
            display_name=email or DEFAULT_DISPLAY_NAME,
            role=ROLE_STAFF,
            store_id=None,
        )
        session.add(profile)
        session.flush()
        log_operation(logger, operation="create_profile", outcome="success", profile_id=profile.id)

    return profile.to_dict()


def get_profile_model(user_key: str, session: Session) -> UserProfile:
    """Load a profile model inside an existing session.

    Raises:
        ProfileNotFound: If no profile exists for user_key
    """
    profile = session.query(UserProfile).filter(UserProfile.user_key == user_key).first()
    if profile is None:
        raise ProfileNotFound(user_key)
    return profile


def require_admin(user_key: str, operation: str, session: Session) -> UserProfile:
    """Load a profile and make sure it is an admin.

    Raises:
        ProfileNotFound: If no profile exists for user_key
        PermissionDenied: If the profile is not an admin
    """
    profile = get_profile_model(user_key, session)
    if not profile.is_admin:
        log_operation(
            logger,
            operation=operation.replace(" ", "_"),
            outcome="denied",
            profile_id=profile.id,
        )
        raise PermissionDenied(user_key, operation)
    return profile


def assign_store(
    user_key: str, store_id: Optional[int], session: Optional[Session] = None
) -> Dict[str, Any]:
    """Assign (or clear, with None) a profile's store."""
    if session is not None:
        return _assign_store_impl(user_key, store_id, session)
    with session_scope() as session:
        return _assign_store_impl(user_key, store_id, session)


def _assign_store_impl(user_key: str, store_id: Optional[int], session: Session) -> Dict[str, Any]:
    profile = get_profile_model(user_key, session)
    if store_id is not None and session.get(Store, store_id) is None:
        raise StoreNotFound(store_id)
    profile.store_id = store_id
    session.flush()
    return profile.to_dict()


def set_role(user_key: str, role: str, session: Optional[Session] = None) -> Dict[str, Any]:
    """Change a profile's role ("staff" or "admin")."""
    if session is not None:
        return _set_role_impl(user_key, role, session)
    with session_scope() as session:
        return _set_role_impl(user_key, role, session)


def _set_role_impl(user_key: str, role: str, session: Session) -> Dict[str, Any]:
    if role not in ROLES:
        raise ValidationError([f"Role: must be one of {', '.join(ROLES)}"])
    profile = get_profile_model(user_key, session)
    profile.role = role
    session.flush()
    log_operation(logger, operation="set_role", outcome="success", profile_id=profile.id, role=role)
    return profile.to_dict()


def get_visible_stores(user_key: str, session: Optional[Session] = None) -> List[Dict[str, Any]]:
    """Stores a user may view: all stores for admins, the own store for staff.

    Returns:
        List of store dicts sorted by name (empty for unassigned staff)

    Raises:
        ProfileNotFound: If no profile exists for user_key
    """
    if session is not None:
        return _get_visible_stores_impl(user_key, session)
    with session_scope() as session:
        return _get_visible_stores_impl(user_key, session)


def _get_visible_stores_impl(user_key: str, session: Session) -> List[Dict[str, Any]]:
    profile = get_profile_model(user_key, session)
    if profile.role == ROLE_ADMIN:
        return _get_all_stores_impl(session)
    if profile.store is None:
        return []
    return [profile.store.to_dict()]


def update_profile(
    user_key: str,
    display_name: str,
    icon_url: Optional[str] = None,
    session: Optional[Session] = None,
) -> Dict[str, Any]:
    """Change a user's display name and avatar URL.

    An empty icon_url clears the avatar.

    Raises:
        ProfileNotFound: If no profile exists for user_key
        ValidationError: If the display name is missing or a value is too long
    """
    if session is not None:
        return _update_profile_impl(user_key, display_name, icon_url, session)
    with session_scope() as session:
        return _update_profile_impl(user_key, display_name, icon_url, session)


def _update_profile_impl(
    user_key: str, display_name: str, icon_url: Optional[str], session: Session
) -> Dict[str, Any]:
    profile = get_profile_model(user_key, session)
    icon_url = (icon_url or "").strip() or None
    if icon_url is not None and len(icon_url) > MAX_URL_LENGTH:
        raise ValidationError([f"Icon URL: Must be {MAX_URL_LENGTH} characters or less"])

    profile.display_name = _require_name(display_name)
    profile.icon_url = icon_url
    session.flush()

    log_operation(logger, operation="update_profile", outcome="success", profile_id=profile.id)
    return profile.to_dict()


def _require_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError(["Name: This field is required"])
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError([f"Name: Must be {MAX_NAME_LENGTH} characters or less"])
    return name
