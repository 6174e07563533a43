"""Pytest configuration and fixtures for service layer tests."""

import os
import sys

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session

from shop_dashboard.models.base import Base
from shop_dashboard.services.purchase_list_service import reset_purchase_list_cache


@pytest.fixture(autouse=True)
def fresh_purchase_list_cache():
    """Every test starts with an empty purchase list cache."""
    reset_purchase_list_cache()
    yield
    reset_purchase_list_cache()


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    engine = create_engine("sqlite:///:memory:", echo=False)

    import shop_dashboard.models  # noqa: F401

    Base.metadata.create_all(engine)

    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import shop_dashboard.services.database as db_module

    original_get_session_factory = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    yield Session

    Session.remove()
    Base.metadata.drop_all(engine)

    db_module.get_session_factory = original_get_session_factory


@pytest.fixture
def sample_store(test_db):
    """Provide a sample store."""
    from shop_dashboard.services import store_service

    return store_service.create_store(name="渋谷店", code="SBY")


@pytest.fixture
def other_store(test_db):
    """Provide a second store for isolation tests."""
    from shop_dashboard.services import store_service

    return store_service.create_store(name="新宿店", code="SJK")


@pytest.fixture
def staff_user(test_db, sample_store):
    """Provide a staff profile assigned to sample_store."""
    from shop_dashboard.services import store_service

    store_service.get_or_create_profile("staff-1", email="staff@example.com")
    return store_service.assign_store("staff-1", sample_store["id"])


@pytest.fixture
def admin_user(test_db):
    """Provide an admin profile."""
    from shop_dashboard.services import store_service

    store_service.get_or_create_profile("admin-1", email="admin@example.com")
    return store_service.set_role("admin-1", "admin")


@pytest.fixture
def karaage_product(test_db, sample_store):
    """Provide a product whose recipe uses 250g chicken per unit."""
    from shop_dashboard.services import product_service

    return product_service.create_product(
        store_id=sample_store["id"],
        name="唐揚げ",
        price=500,
        cost=200,
        materials=[{"name": "鶏もも肉", "quantity": "250g"}],
    )


@pytest.fixture
def ctk_root():
    """Create a CTk root window for widget testing."""
    import customtkinter as ctk

    if os.environ.get("SHOP_DASHBOARD_UI_TESTS") != "1":
        if sys.platform != "win32" and not (
            os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY")
        ):
            pytest.skip(
                "UI tests require a display; set SHOP_DASHBOARD_UI_TESTS=1 to force"
            )

    try:
        root = ctk.CTk()
    except Exception as exc:  # pragma: no cover
        pytest.skip(f"CTk unavailable in this environment: {exc}")
    root.withdraw()
    yield root
    root.destroy()
