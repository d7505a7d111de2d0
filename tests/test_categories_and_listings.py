from reportkit.compare import UNCHANGED
from reportkit.sections.categories import top_categories
from reportkit.sections.listings import (
    clickhouse_customer_performance,
    customer_performance,
    geographic_intelligence,
    product_insights,
    top_listing_performance,
    top_reseller,
)


def test_top_categories_rank_delta(category_rows):
    out = top_categories({"top_categories": category_rows})["chartData"]
    categories = out["Shopee"]["categories"]
    assert out["Shopee"]["insights"] == []
    assert [c["category"] for c in categories] == ["C", "A", "B"]

    by_name = {c["category"]: c for c in categories}
    assert by_name["C"]["rankChange"] == 2
    assert by_name["A"]["rankChange"] == -1
    assert by_name["B"]["rankChange"] == -1
    assert by_name["C"]["growth"] == 1900.0
    assert by_name["A"]["growth"] == 0.0
    assert by_name["B"]["growth"] == -20.0
    assert by_name["A"]["gmv"] == 0.0


def test_top_categories_equal_rank_is_unchanged():
    rows = [
        {"Month": "2024-01", "Channel": "Lazada", "SubCategory": "A", "totalsales": 2e9, "analysis": "old"},
        {"Month": "2024-02", "Channel": "Lazada", "SubCategory": "A", "totalsales": 3e9, "analysis": "steady"},
        {"Month": "2024-02", "Channel": "Lazada", "category": "New", "totalsales": 1e9},
        {"Month": "2024-02", "Channel": None, "SubCategory": "X", "totalsales": 1},
    ]
    out = top_categories({"top_categories": rows})["chartData"]
    a, new = out["Lazada"]["categories"]
    assert a == {"category": "A", "gmv": 3.0, "rankChange": UNCHANGED, "growth": 50.0, "analysis": "steady"}
    assert new["rankChange"] == UNCHANGED
    assert new["growth"] == 0.0
    assert new["analysis"] == ""
    assert list(out) == ["Lazada", "Unknown"]


def test_top_reseller_formats_columns():
    rows = [{
        "ShopName": "Glow", "Province": "DKI Jakarta", "Channel": "Shopee", "ShopUrl": "https://x",
        "Gmv": 1_260_000_000, "UnitSold": "3400", "avgSalePrice": 125_500,
    }]
    assert top_reseller({"top_reseller": rows})["chartData"] == [{
        "ShopName": "Glow",
        "Province": "DKI Jakarta",
        "Channel": "Shopee",
        "ShopUrl": "https://x",
        "Total Sales": "1.3 Bio",
        "Units Sold": "3400",
        "AVG Sale Price": "IDR 126K",
    }]


def test_top_listing_performance():
    rows = [{"json": {"channel": "Shopee", "ListingName": "Serum 30ml", "GMV": 4_200_000,
                      "pct_of_brand_gmv": "12.5", "qoq_growth_pct": None}},
            {"channel": "Lazada", "ListingName": "Toner", "GMV": 1_000_000,
             "pct_of_brand_gmv": 3, "qoq_growth_pct": 0}]
    assert top_listing_performance({"top_listing_performance": rows})["chartData"] == [{
        "Platform": "Shopee",
        "Listing Name": "Serum 30ml",
        "GMV (Bio)": "4.2 Mio",
        "% of Brand GMV": "12.50%",
        "QoQ Growth": "-",
    }, {
        "Platform": "Lazada",
        "Listing Name": "Toner",
        "GMV (Bio)": "1.0 Mio",
        "% of Brand GMV": "3.00%",
        "QoQ Growth": "0.00%",
    }]


def test_customer_and_product_tables():
    customers = customer_performance({"top_customers": [
        {"customer_name": "PT Maju", "total_sales": 2_500_000},
        {"customer_name": None, "total_sales": None},
    ]})["chartData"]
    assert customers == [
        {"Customer": "PT Maju", "Total Sales": "Rp 2.5M"},
        {"Customer": "Unknown Customer", "Total Sales": "Rp 0M"},
    ]

    ch = clickhouse_customer_performance([{"customer_name": "PT Maju", "total_sales": "1000000"}])["chartData"]
    assert ch == [{"Customer": "PT Maju", "Total Sales": "Rp 1.0M"}]

    products = product_insights({"top_products": [{"product_name": "Toner", "total_revenue": 800_000}]})["chartData"]
    assert products == [{"Product": "Toner", "Total Revenue": "Rp 0.8M"}]


def test_geographic_intelligence_passes_preformatted_sales():
    rows = [
        {"Location": "Jakarta", "Total Sales": "Rp 50.2M"},
        {"location": "Bandung", "total_sales": 38_700_000},
        {},
    ]
    assert geographic_intelligence(rows)["chartData"] == [
        {"Location": "Jakarta", "Total Sales": "Rp 50.2M"},
        {"Location": "Bandung", "Total Sales": "Rp 38.7M"},
        {"Location": "Unknown", "Total Sales": "Rp 0M"},
    ]
