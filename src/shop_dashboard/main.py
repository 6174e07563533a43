"""
Main entry point for the Shop Dashboard application.

This module initializes the application, sets up the database,
and launches the main window.
"""

import getpass
import os
import sys
import traceback
import customtkinter as ctk

from shop_dashboard.services.database import initialize_app_database
from shop_dashboard.services.store_service import get_or_create_profile
from shop_dashboard.ui.main_window import MainWindow
from shop_dashboard.utils.config import get_config
from shop_dashboard.utils.constants import ENV_VAR_USER


def resolve_user_key() -> str:
    """User key for this session: SHOP_DASHBOARD_USER, else the OS login name."""
    return os.environ.get(ENV_VAR_USER) or getpass.getuser()


def initialize_application(user_key: str) -> bool:
    """
    Initialize the application.

    Sets up the database and makes sure the user has a profile.

    Returns:
        True if initialization successful, False otherwise
    """
    try:
        print("Initializing database...")
        initialize_app_database()
        print("Database initialized successfully")

        profile = get_or_create_profile(user_key)
        print(f"Signed in as {profile['display_name']} ({profile['role']})")
        return True

    except Exception as e:
        print(f"ERROR: Failed to initialize application: {e}")
        traceback.print_exc()
        return False


def main():
    """
    Main application entry point.

    Initializes the application and launches the main window.
    """
    # Set CustomTkinter appearance
    ctk.set_appearance_mode("system")
    ctk.set_default_color_theme("blue")

    config = get_config()
    print(f"Starting {config.app_name} v{config.app_version}")
    print(f"Environment: {config.environment}")
    print(f"Database path: {config.database_path}")

    user_key = resolve_user_key()
    if not initialize_application(user_key):
        print("Application initialization failed. Exiting.")
        sys.exit(1)

    try:
        app = MainWindow(user_key)
        app.mainloop()

    except Exception as e:
        print(f"ERROR: Application crashed: {e}")
        traceback.print_exc()
        sys.exit(1)

    print("Application closed successfully")
    sys.exit(0)


if __name__ == "__main__":
    main()
