"""
Dashboard tab for Shop Dashboard.

Store selector, reporting period, sales summary and the purchase list.
"""

import customtkinter as ctk
from datetime import date
from typing import Dict, List, Optional

from shop_dashboard.services import purchase_list_service, sales_summary_service, store_service
from shop_dashboard.services.exceptions import ServiceError
from shop_dashboard.ui.purchase_list_frame import PurchaseListFrame
from shop_dashboard.ui.sales_summary_frame import SalesSummaryFrame
from shop_dashboard.utils.constants import (
    PADDING_MEDIUM,
    SUMMARY_MODE_CUSTOM,
    SUMMARY_MODE_DAILY,
    SUMMARY_MODE_MONTHLY,
)
from shop_dashboard.utils.datetime_utils import parse_date

MODE_LABELS = {
    SUMMARY_MODE_DAILY: "日別",
    SUMMARY_MODE_MONTHLY: "月別",
    SUMMARY_MODE_CUSTOM: "任意期間",
}


class DashboardTab(ctk.CTkFrame):
    """
    Dashboard tab showing a store's sales summary and purchase list.
    """

    def __init__(self, parent, user_key: str, today: Optional[date] = None):
        """
        Initialize the dashboard tab.

        Args:
            parent: Parent widget
            user_key: Signed-in user; decides which stores are visible
            today: Reference day (defaults to date.today())
        """
        super().__init__(parent)

        self.user_key = user_key
        self._today = today or date.today()
        self._stores: Dict[str, int] = {}
        self._mode = SUMMARY_MODE_DAILY

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=0)  # Controls
        self.grid_rowconfigure(1, weight=0)  # Status
        self.grid_rowconfigure(2, weight=1)  # Summary
        self.grid_rowconfigure(3, weight=1)  # Purchase list

        self._create_controls()

        self.status_label = ctk.CTkLabel(self, text="", text_color="orange", anchor="w")
        self.status_label.grid(row=1, column=0, sticky="ew", padx=20)

        self.summary_frame = SalesSummaryFrame(self)
        self.summary_frame.grid(row=2, column=0, sticky="nsew", padx=PADDING_MEDIUM, pady=5)

        self.purchase_list_frame = PurchaseListFrame(self)
        self.purchase_list_frame.grid(row=3, column=0, sticky="nsew", padx=PADDING_MEDIUM, pady=5)

        self.grid(row=0, column=0, sticky="nsew", padx=10, pady=10)

        self._load_stores()
        self.refresh()

    def _create_controls(self):
        """Create store selector, period entries and view mode selector."""
        controls = ctk.CTkFrame(self, fg_color="transparent")
        controls.grid(row=0, column=0, sticky="ew", padx=20, pady=(20, 10))

        ctk.CTkLabel(controls, text="店舗").grid(row=0, column=0, padx=(0, 5))
        self.store_menu = ctk.CTkOptionMenu(
            controls, values=[""], command=lambda _: self.refresh(), width=180
        )
        self.store_menu.grid(row=0, column=1, padx=(0, 15))

        period_from, period_to = sales_summary_service.default_period(self._today)

        ctk.CTkLabel(controls, text="期間").grid(row=0, column=2, padx=(0, 5))
        self.from_entry = ctk.CTkEntry(controls, width=110)
        self.from_entry.insert(0, period_from.isoformat())
        self.from_entry.grid(row=0, column=3)
        ctk.CTkLabel(controls, text="〜").grid(row=0, column=4, padx=5)
        self.to_entry = ctk.CTkEntry(controls, width=110)
        self.to_entry.insert(0, period_to.isoformat())
        self.to_entry.grid(row=0, column=5, padx=(0, 15))

        self.mode_selector = ctk.CTkSegmentedButton(
            controls,
            values=list(MODE_LABELS.values()),
            command=self._on_mode_selected,
        )
        self.mode_selector.set(MODE_LABELS[self._mode])
        self.mode_selector.grid(row=0, column=6, padx=(0, 15))

        self.refresh_button = ctk.CTkButton(controls, text="更新", width=80, command=self.refresh)
        self.refresh_button.grid(row=0, column=7)

    def _load_stores(self):
        try:
            stores = store_service.get_visible_stores(self.user_key)
        except ServiceError as e:
            stores = []
            self.status_label.configure(text=str(e))

        self._stores = {store["name"]: store["id"] for store in stores}
        names: List[str] = list(self._stores) or [""]
        self.store_menu.configure(values=names)
        self.store_menu.set(names[0])

    def _on_mode_selected(self, label: str):
        for mode, mode_label in MODE_LABELS.items():
            if mode_label == label:
                self._mode = mode
        self.refresh()

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def selected_store_id(self) -> Optional[int]:
        return self._stores.get(self.store_menu.get())

    def set_period(self, period_from: str, period_to: str):
        """Replace the period entries (used by callers and tests)."""
        self.from_entry.delete(0, "end")
        self.from_entry.insert(0, period_from)
        self.to_entry.delete(0, "end")
        self.to_entry.insert(0, period_to)

    def refresh(self):
        """Reload the summary and purchase list for the current selection."""
        self.status_label.configure(text="")
        store_id = self.selected_store_id
        if store_id is None:
            self.summary_frame.clear()
            self.purchase_list_frame.show_no_store()
            return

        period_from = parse_date(self.from_entry.get().strip())
        period_to = parse_date(self.to_entry.get().strip())
        if period_from is None or period_to is None:
            self.status_label.configure(text="期間は YYYY-MM-DD で入力してください。")
            return

        self.purchase_list_frame.show_loading()
        try:
            daily = sales_summary_service.get_daily_summary(store_id, period_from, period_to)
            summary = sales_summary_service.summarize(
                daily, self._mode, today=self._today, range_from=period_from, range_to=period_to
            )
            rows = sales_summary_service.chart_rows(daily, self._mode, period_from, period_to)
            items = purchase_list_service.get_purchase_list(store_id, period_from, period_to)
        except ServiceError as e:
            self.status_label.configure(text=str(e))
            return

        self.summary_frame.update_summary(summary, rows)
        self.purchase_list_frame.show_items(items)
