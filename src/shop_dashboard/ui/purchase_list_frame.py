"""
Purchase List Frame - per-day material requirement table.

Shows one row per (material, unit): the material name, the per-day amount
with its unit, and up to three products that use it.
"""

import customtkinter as ctk
from typing import List, Optional

from shop_dashboard.services.material_usage_service import DailyMaterialUsage
from shop_dashboard.utils.constants import EXAMPLE_PRODUCT_SEPARATOR, PADDING_MEDIUM

TITLE_TEXT = "発注するものリスト"
DESCRIPTION_TEXT = (
    "選択した期間の「1日あたり」の材料使用量を集計しています。"
    "単位は商品登録時の入力から推定しています。"
)
NO_STORE_TEXT = "店舗情報が未設定のため、発注リストを表示できません。"
EMPTY_TEXT = "この期間に売れた商品がないため、発注リストは空です。"
LOADING_TEXT = "読み込み中..."
COLUMN_HEADERS = ("材料名", "1日あたりの必要量の目安", "主に使う商品")


class PurchaseListFrame(ctk.CTkFrame):
    """
    Table of the per-day purchase list.

    Call show_items() with the result of get_purchase_list(), or
    show_no_store() when the user has no store assigned.
    """

    def __init__(self, parent, **kwargs):
        """
        Initialize purchase list frame.

        Args:
            parent: Parent widget
        """
        kwargs.setdefault("corner_radius", 8)
        super().__init__(parent, **kwargs)

        self._items: List[DailyMaterialUsage] = []
        self._row_widgets: List[ctk.CTkLabel] = []

        self._create_widgets()
        self._layout_widgets()

    def _create_widgets(self) -> None:
        """Create internal widgets."""
        self._title_label = ctk.CTkLabel(
            self,
            text=TITLE_TEXT,
            font=ctk.CTkFont(weight="bold", size=16),
            anchor="w",
        )
        self._description_label = ctk.CTkLabel(
            self,
            text=DESCRIPTION_TEXT,
            font=ctk.CTkFont(size=12),
            text_color="gray60",
            anchor="w",
            justify="left",
            wraplength=700,
        )
        self._message_label = ctk.CTkLabel(self, text="", text_color="gray60", anchor="w")
        self._table = ctk.CTkScrollableFrame(self, height=300)
        self._table.grid_columnconfigure(0, weight=1)
        self._table.grid_columnconfigure(1, weight=1)
        self._table.grid_columnconfigure(2, weight=2)

        for column, text in enumerate(COLUMN_HEADERS):
            header = ctk.CTkLabel(
                self._table,
                text=text,
                font=ctk.CTkFont(weight="bold"),
                anchor="e" if column == 1 else "w",
            )
            header.grid(row=0, column=column, padx=PADDING_MEDIUM, pady=(0, 5), sticky="ew")

    def _layout_widgets(self) -> None:
        """Position widgets using grid layout."""
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)

        self._title_label.grid(row=0, column=0, padx=PADDING_MEDIUM, pady=(10, 0), sticky="w")
        self._description_label.grid(row=1, column=0, padx=PADDING_MEDIUM, pady=(0, 5), sticky="w")
        self._message_label.grid(row=2, column=0, padx=PADDING_MEDIUM, pady=5, sticky="w")
        self._table.grid(row=3, column=0, padx=PADDING_MEDIUM, pady=(0, 10), sticky="nsew")

    @property
    def items(self) -> List[DailyMaterialUsage]:
        return list(self._items)

    @property
    def message(self) -> str:
        return self._message_label.cget("text")

    def show_items(self, items: Optional[List[DailyMaterialUsage]]) -> None:
        """
        Display a purchase list.

        Args:
            items: Rows from get_purchase_list(); empty or None shows the
                empty-period message
        """
        self._items = list(items or [])
        self._clear_rows()

        if not self._items:
            self._message_label.configure(text=EMPTY_TEXT)
            return

        self._message_label.configure(text="")
        for row, item in enumerate(self._items, start=1):
            cells = (
                (item.material_name, "w"),
                (item.display_amount, "e"),
                (EXAMPLE_PRODUCT_SEPARATOR.join(item.example_products), "w"),
            )
            for column, (text, anchor) in enumerate(cells):
                label = ctk.CTkLabel(self._table, text=text, anchor=anchor)
                label.grid(row=row, column=column, padx=PADDING_MEDIUM, pady=2, sticky="ew")
                self._row_widgets.append(label)

    def show_no_store(self) -> None:
        """Show that the report needs a store assignment."""
        self._items = []
        self._clear_rows()
        self._message_label.configure(text=NO_STORE_TEXT)

    def show_loading(self) -> None:
        self._message_label.configure(text=LOADING_TEXT)

    def row_texts(self) -> List[List[str]]:
        """Displayed cell texts, one list per row."""
        texts = [label.cget("text") for label in self._row_widgets]
        return [texts[i:i + 3] for i in range(0, len(texts), 3)]

    def _clear_rows(self) -> None:
        for label in self._row_widgets:
            label.destroy()
        self._row_widgets = []
