from __future__ import annotations

from conftest import PRICE_LIST
from sulama.domain.products import (
    MISSING_PRICE_TEXT,
    build_product_context,
    find_related_products,
    has_price,
    product_price_text,
    score_product,
)


def test_price_text_uses_first_present_column():
    assert product_price_text({"Fiyat TL": "100", "Fiyat": "90"}) == "100"
    assert product_price_text({"Fiyat (KDV dahil)": 250}) == "250"
    assert product_price_text({"Fiyat TL": "", "Fiyat": "90"}) == ""
    assert product_price_text({"SKU": "X"}) == ""


def test_has_price_rejects_zero_variants():
    for value in ("", "0", "0,00", "0.00", "  0 "):
        assert not has_price(value)
    assert has_price("1.150")


def test_tm2_query_ranks_four_station_controller_first():
    results = find_related_products("tm2 4 istasyon fiyatı", PRICE_LIST)
    assert results
    assert results[0]["SKU"] == "TM2-4"


def test_digits_split_from_letters():
    results = find_related_products("pe100", PRICE_LIST)
    assert [r["SKU"] for r in results][0] == "PE-20"


def test_no_match_and_empty_inputs():
    assert find_related_products("futbol maçı", PRICE_LIST) == []
    assert find_related_products("", PRICE_LIST) == []
    assert find_related_products("vana", []) == []
    assert find_related_products(None, PRICE_LIST) == []


def test_limit_and_stable_order():
    catalog = [{"SKU": f"V{i}", "Ürün Adı": "vana"} for i in range(5)]
    results = find_related_products("vana", catalog, limit=3)
    assert [r["SKU"] for r in results] == ["V0", "V1", "V2"]


def test_product_context_lines():
    context = build_product_context(PRICE_LIST[1:])
    lines = context.splitlines()
    assert lines[0] == "İLGİLİ ÜRÜNLER VE FİYATLAR (CSV'den):"
    assert lines[1] == '- SKU: PGV-101 | Ürün: Hunter PGV 1" Selenoid Vana | Fiyat: 1.150 TL (CSV)'
    assert lines[2].endswith(MISSING_PRICE_TEXT)
    assert build_product_context([]) == ""


def test_tm2_bonuses_read_the_unspaced_query():
    row = {"Ürün Adı": "Hunter TM2 4 İstasyon"}
    # phrase 5 + words (tm, 2, 4) 6 + tm2 10 + four-station 10
    assert score_product("tm2 4", ["tm", "2", "4"], row) == 31
    assert score_product("tm 2", ["tm", "2"], row) == 4
