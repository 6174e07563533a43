"""Locale-aware sort keys for report ordering.

Material and product names are entered in Japanese, mostly kanji with some
kana and the occasional Latin word. Reports order them with the ICU
collator of the configured reporting locale (``ja_JP`` by default), so
kanji follow their Japanese collation order rather than code points and
katakana sorts together with the matching hiragana.

Examples:
    >>> sorted(["卵", "塩", "牛乳", "砂糖"], key=japanese_sort_key)
    ['塩', '牛乳', '砂糖', '卵']
"""

import threading
from functools import lru_cache
from typing import Optional, Tuple

import icu

from shop_dashboard.utils.config import get_config

_collator_lock = threading.Lock()


@lru_cache(maxsize=None)
def get_collator(locale_name: str) -> icu.Collator:
    """ICU collator for a locale name such as "ja_JP" (cached per locale)."""
    return icu.Collator.createInstance(icu.Locale(locale_name))


def japanese_sort_key(text: Optional[str], locale_name: Optional[str] = None) -> Tuple[bytes, str]:
    """
    Build a sort key from the reporting locale's collator.

    The second element keeps ordering total and deterministic when two
    names collate equal.

    Args:
        text: Name to build a key for (None is treated as empty)
        locale_name: Locale to collate with; defaults to Config.reporting_locale

    Returns:
        Tuple of (ICU sort key, original text)
    """
    text = text or ""
    collator = get_collator(locale_name or get_config().reporting_locale)
    with _collator_lock:
        key = collator.getSortKey(text)
    return (key, text)
