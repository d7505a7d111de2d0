from reportkit.models import ProcessingMeta
from reportkit.sections.brand import (
    brand_performance_platform,
    brand_performance_sub_category,
    compare_brand_to_market,
    top_brand_channel,
)


def test_resilient_brand_in_shrinking_market(platform_rows, meta):
    out = brand_performance_platform({"brand_performance_platform": platform_rows}, meta)["chartData"]
    assert out == [{
        "Platform": "Shopee",
        "Brand GMV (Bio)": "0.0 Bio",
        "Brand Share (%)": "68.75%",
        "QoQ Growth": "10.00%",
        "Market Growth": "-20.00%",
        "Performance Signal": "Resilient Performer",
    }]


def test_brand_compared_on_market_months():
    rows = [
        {"Month": "2024-01", "Channel": "Lazada", "Brand": "Other", "totalsales": 100},
        {"Month": "2024-02", "Channel": "Lazada", "Brand": "Erha", "totalsales": 30},
        {"Month": "2024-02", "Channel": "Lazada", "Brand": "Other", "totalsales": 100},
    ]
    (item,) = compare_brand_to_market(rows, "Channel", ["Erha"])
    assert item.brand.current == 30.0
    assert item.brand.growth_pct is None
    assert item.market.growth_pct == 30.0
    assert round(item.brand_share, 2) == 23.08


def test_platform_without_brand_filter_has_zero_share(platform_rows):
    (row,) = brand_performance_platform({"brand_performance_platform": platform_rows})["chartData"]
    assert row["Brand Share (%)"] == "0.00%"
    assert row["QoQ Growth"] == "-"
    assert row["Performance Signal"] == "Missing Out"


def test_sub_category_keeps_brand_rows_sorted(meta):
    rows = [
        {"Month": "2024-01", "SubCategory": "Serum", "Brand": "Erha", "totalsales": 1e9},
        {"Month": "2024-02", "SubCategory": "Serum", "Brand": "Erha", "totalsales": 2e9},
        {"Month": "2024-01", "SubCategory": "Toner", "Brand": "Wardah", "totalsales": 4e9},
        {"Month": "2024-02", "SubCategory": "Toner", "Brand": "Wardah", "totalsales": 3e9},
        {"Month": "2024-02", "SubCategory": "Toner", "Brand": "Other", "totalsales": 1e9},
        {"Month": "2024-02", "SubCategory": "Mask", "Brand": "Other", "totalsales": 9e9},
    ]
    out = brand_performance_sub_category({"brand_performance_sub_category": rows}, meta)["chartData"]
    assert [r["Subcategory"] for r in out] == ["Toner", "Serum"]
    toner, serum = out
    assert toner["Brand GMV (Bio)"] == "3.0 Bio"
    assert toner["Brand Share (%)"] == "75.00%"
    assert toner["Performance Signal"] == "Underperforming"
    assert serum["QoQ Growth"] == "100.00%"
    assert serum["Performance Signal"] == "Aligned Growth"


def test_top_brand_channel_accepts_both_keys_and_wrapped_rows():
    rows = [
        {"json": {"Channel": "Shopee", "Brand": "Erha", "GMV": 2_500_000_000, "MonthlyGrowthPct": 12.5}},
        {"channel": "TikTok", "brand": "Wardah", "Value": 3_000_000, "growth": -4},
    ]
    expected = [
        {"Channel": "Shopee", "Brand": "Erha", "GMV (Bio)": "2.5 Bio", "Monthly Growth (%)": "+12.50%"},
        {"Channel": "TikTok", "Brand": "Wardah", "GMV (Bio)": "3.0 Mio", "Monthly Growth (%)": "-4.00%"},
    ]
    assert top_brand_channel({"top_brand_channel": rows})["chartData"] == expected
    assert top_brand_channel({"top_brand_by_channel": rows})["chartData"] == expected


def test_brand_filter_is_trimmed():
    assert ProcessingMeta(brand_filter=" Erha ,, Wardah").brands == ["Erha", "Wardah"]


def test_top_brand_channel_missing_growth_is_not_zero():
    rows = [
        {"Channel": "Shopee", "Brand": "New", "GMV": 1_000_000_000, "MonthlyGrowthPct": None},
        {"Channel": "Shopee", "Brand": "Flat", "GMV": 1_000_000_000, "MonthlyGrowthPct": 0},
    ]
    growth = [row["Monthly Growth (%)"] for row in top_brand_channel({"top_brand_channel": rows})["chartData"]]
    assert growth == ["-", "0.00%"]
