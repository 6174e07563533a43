"""
Sales Summary Frame - sales/profit cards and the rows behind them.
"""

import customtkinter as ctk
from decimal import Decimal
from typing import List, Optional, Sequence

from shop_dashboard.services.sales_summary_service import DailySales, MonthlySales, SalesSummary
from shop_dashboard.utils.constants import PADDING_MEDIUM


def format_yen(amount) -> str:
    """Format an amount as whole yen with thousands separators, e.g. "¥12,300"."""
    return f"¥{Decimal(amount or 0):,.0f}"


class SalesSummaryFrame(ctk.CTkFrame):
    """
    Sales and profit totals for the selected view, with daily or monthly rows.
    """

    def __init__(self, parent, **kwargs):
        kwargs.setdefault("corner_radius", 8)
        super().__init__(parent, **kwargs)

        self._row_labels: List[ctk.CTkLabel] = []

        self._create_widgets()
        self._layout_widgets()

    def _create_widgets(self) -> None:
        """Create the two stat cards and the row list."""
        self._sales_card = ctk.CTkFrame(self)
        self._sales_title = ctk.CTkLabel(self._sales_card, text="売上", font=ctk.CTkFont(size=14, weight="bold"))
        self._sales_value = ctk.CTkLabel(self._sales_card, text=format_yen(0), font=ctk.CTkFont(size=28, weight="bold"))

        self._profit_card = ctk.CTkFrame(self)
        self._profit_title = ctk.CTkLabel(self._profit_card, text="利益", font=ctk.CTkFont(size=14, weight="bold"))
        self._profit_value = ctk.CTkLabel(self._profit_card, text=format_yen(0), font=ctk.CTkFont(size=28, weight="bold"))

        self._label = ctk.CTkLabel(self, text="", font=ctk.CTkFont(size=12), anchor="w")
        self._rows_frame = ctk.CTkScrollableFrame(self, height=200)
        self._rows_frame.grid_columnconfigure((0, 1, 2), weight=1)

    def _layout_widgets(self) -> None:
        self.grid_columnconfigure((0, 1), weight=1)
        self.grid_rowconfigure(2, weight=1)

        for card, title, value in (
            (self._sales_card, self._sales_title, self._sales_value),
            (self._profit_card, self._profit_title, self._profit_value),
        ):
            card.grid_columnconfigure(0, weight=1)
            title.grid(row=0, column=0, padx=15, pady=(15, 5))
            value.grid(row=1, column=0, padx=15, pady=(5, 15))

        self._sales_card.grid(row=0, column=0, padx=PADDING_MEDIUM, pady=PADDING_MEDIUM, sticky="nsew")
        self._profit_card.grid(row=0, column=1, padx=PADDING_MEDIUM, pady=PADDING_MEDIUM, sticky="nsew")
        self._label.grid(row=1, column=0, columnspan=2, padx=PADDING_MEDIUM, sticky="w")
        self._rows_frame.grid(row=2, column=0, columnspan=2, padx=PADDING_MEDIUM, pady=(5, 10), sticky="nsew")

    @property
    def sales_text(self) -> str:
        return self._sales_value.cget("text")

    @property
    def profit_text(self) -> str:
        return self._profit_value.cget("text")

    @property
    def label_text(self) -> str:
        return self._label.cget("text")

    def update_summary(
        self,
        summary: Optional[SalesSummary],
        rows: Optional[Sequence[object]] = None,
    ) -> None:
        """
        Show totals and rows.

        Args:
            summary: Result of summarize(), or None to clear
            rows: DailySales or MonthlySales rows to list (defaults to the
                summary's own rows)
        """
        if summary is None:
            self._sales_title.configure(text="売上")
            self._profit_title.configure(text="利益")
            self._sales_value.configure(text=format_yen(0))
            self._profit_value.configure(text=format_yen(0))
            self._label.configure(text="")
            self._set_rows([])
            return

        self._sales_title.configure(text=summary.sales_title)
        self._profit_title.configure(text=summary.profit_title)
        self._sales_value.configure(text=format_yen(summary.sales_total))
        self._profit_value.configure(text=format_yen(summary.profit_total))
        self._label.configure(text=summary.label)
        self._set_rows(summary.rows if rows is None else rows)

    def clear(self) -> None:
        self.update_summary(None)

    def _set_rows(self, rows: Sequence[object]) -> None:
        for label in self._row_labels:
            label.destroy()
        self._row_labels = []

        for index, row in enumerate(rows):
            if isinstance(row, MonthlySales):
                key = row.month
            elif isinstance(row, DailySales):
                key = row.date.isoformat()
            else:
                continue
            for column, text in enumerate((key, format_yen(row.sales), format_yen(row.profit))):
                label = ctk.CTkLabel(self._rows_frame, text=text, anchor="w" if column == 0 else "e")
                label.grid(row=index, column=column, padx=PADDING_MEDIUM, pady=1, sticky="ew")
                self._row_labels.append(label)
