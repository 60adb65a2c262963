"""Keyword-scored product matching over the price list."""
from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Sequence

PRICE_COLUMNS = (
    "Fiyat TL (KDV dahil)",
    "Fiyat TL (KDV Dahil)",
    "Fiyat TL",
    "Fiyat (TL)",
    "Fiyat",
    "Fiyat (KDV Dahil)",
    "Fiyat (KDV dahil)",
)
SEARCH_COLUMNS = (
    "SKU",
    "Ürün Adı",
    "Model",
    "Kategori",
    "İşlev Grubu",
    "Kullanım Yeri",
    "Uygun Olduğu Sistemler",
)
EMPTY_PRICES = {"", "0", "0,00", "0.00"}
MISSING_PRICE_TEXT = (
    "FİYAT BİLGİSİ CSV'DE YOK (bu ürün için fiyat UYDURMA, müşteriye fiyat veremediğini söyle)"
)
CONTEXT_HEADER = "İLGİLİ ÜRÜNLER VE FİYATLAR (CSV'den):"

_DIGIT = re.compile(r"(\d)")


def fold(value: Any) -> str:
    """Lowercase without the combining dot that ``"İ".lower()`` leaves behind."""
    return str(value).replace("İ", "i").lower()


def product_price_text(row: Mapping[str, Any]) -> str:
    raw = None
    for column in PRICE_COLUMNS:
        if row.get(column) is not None:
            raw = row[column]
            break
    return str(raw) if raw else ""


def has_price(text: str | None) -> bool:
    return (text or "").strip() not in EMPTY_PRICES


def _search_text(row: Mapping[str, Any]) -> str:
    return fold(" ".join(str(row[c]) for c in SEARCH_COLUMNS if row.get(c)))


def score_product(query: str, words: Sequence[str], row: Mapping[str, Any]) -> int:
    text = _search_text(row)
    score = 0
    # the phrase and TM2 checks use the unspaced query; the digit-spaced form
    # ("tm 2") never contains "tm2", so those bonuses could not fire on it
    if query in text:
        score += 5
    for word in words:
        if word in text:
            score += 2
    # TM2 controllers are asked for by model code ("tm2 4 istasyon")
    if "tm2" in query and "tm2" in text:
        score += 10
    if "4" in query and "4 ist" in text and "tm2" in text:
        score += 10
    return score


def find_related_products(
    query: str | None,
    catalog: Iterable[Mapping[str, Any]] | None,
    limit: int = 10,
) -> list[Mapping[str, Any]]:
    """Return up to ``limit`` catalog rows ranked by keyword score."""
    if not query or not catalog:
        return []
    q = fold(query).strip()
    if not q:
        return []
    words = _DIGIT.sub(r" \1 ", q).split()

    scored = []
    for row in catalog:
        if not isinstance(row, Mapping):
            continue
        score = score_product(q, words, row)
        if score > 0:
            scored.append((score, row))
    scored.sort(key=lambda item: item[0], reverse=True)
    return [row for _, row in scored[:limit]]


def product_line(row: Mapping[str, Any]) -> str:
    price = product_price_text(row).strip()
    price_text = f"{price} TL (CSV)" if has_price(price) else MISSING_PRICE_TEXT
    return f"- SKU: {row.get('SKU')} | Ürün: {row.get('Ürün Adı')} | Fiyat: {price_text}"


def build_product_context(products: Sequence[Mapping[str, Any]]) -> str:
    if not products:
        return ""
    return CONTEXT_HEADER + "\n" + "\n".join(product_line(p) for p in products)
