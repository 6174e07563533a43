"""
Main application window for Shop Dashboard.

Provides the main window with tabbed navigation and menu bar.
"""

import tkinter as tk
import customtkinter as ctk
from tkinter import messagebox

from shop_dashboard.services.purchase_list_service import get_purchase_list_cache
from shop_dashboard.ui.dashboard_tab import DashboardTab
from shop_dashboard.utils.constants import (
    APP_NAME,
    APP_VERSION,
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_WIDTH,
    MIN_WINDOW_HEIGHT,
    MIN_WINDOW_WIDTH,
)


class MainWindow(ctk.CTk):
    """
    Main application window.

    Contains tabbed interface for different features and a menu bar.
    """

    def __init__(self, user_key: str):
        """
        Initialize the main window.

        Args:
            user_key: Signed-in user's key
        """
        super().__init__()

        self.user_key = user_key

        # Window configuration
        self.title(f"{APP_NAME} - v{APP_VERSION}")
        self.geometry(f"{DEFAULT_WINDOW_WIDTH}x{DEFAULT_WINDOW_HEIGHT}")
        self.minsize(MIN_WINDOW_WIDTH, MIN_WINDOW_HEIGHT)

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)  # Tab view
        self.grid_rowconfigure(1, weight=0)  # Status bar

        self._create_menu_bar()
        self._create_tabs()
        self._create_status_bar()

        self.update_status("Ready")

    def _create_menu_bar(self):
        """Create the native tkinter menu bar."""
        self.menu_bar = tk.Menu(self)
        self.config(menu=self.menu_bar)

        file_menu = tk.Menu(self.menu_bar, tearoff=0)
        file_menu.add_command(label="Refresh", command=self.refresh_dashboard)
        file_menu.add_command(label="Clear Report Cache", command=self._clear_report_cache)
        file_menu.add_separator()
        file_menu.add_command(label="Exit", command=self._on_exit)
        self.menu_bar.add_cascade(label="File", menu=file_menu)

        help_menu = tk.Menu(self.menu_bar, tearoff=0)
        help_menu.add_command(label="About", command=self._show_about)
        self.menu_bar.add_cascade(label="Help", menu=help_menu)

    def _create_tabs(self):
        """Create the tabbed interface."""
        self.tabview = ctk.CTkTabview(self, corner_radius=10)
        self.tabview.grid(row=0, column=0, padx=10, pady=(0, 10), sticky="nsew")

        self.tabview.add("ダッシュボード")
        dashboard_frame = self.tabview.tab("ダッシュボード")
        dashboard_frame.grid_columnconfigure(0, weight=1)
        dashboard_frame.grid_rowconfigure(0, weight=1)
        self.dashboard_tab = DashboardTab(dashboard_frame, self.user_key)

    def _create_status_bar(self):
        self.status_bar = ctk.CTkLabel(self, text="", anchor="w", height=24)
        self.status_bar.grid(row=1, column=0, padx=15, pady=(0, 5), sticky="ew")

    def update_status(self, message: str):
        """Show a message in the status bar."""
        self.status_bar.configure(text=message)

    def refresh_dashboard(self):
        self.dashboard_tab.refresh()
        self.update_status("Dashboard refreshed")

    def _clear_report_cache(self):
        get_purchase_list_cache().invalidate()
        self.refresh_dashboard()

    def _show_about(self):
        messagebox.showinfo(
            "About",
            f"{APP_NAME} v{APP_VERSION}\n\nStore sales, profit and purchase list reporting.",
        )

    def _on_exit(self):
        self.quit()
