"""Section processors: ``(results, meta) -> {"chartData": ...}``."""

from .brand import brand_performance_platform, brand_performance_sub_category, top_brand_channel
from .categories import top_categories
from .listings import (
    clickhouse_customer_performance,
    customer_performance,
    geographic_intelligence,
    product_insights,
    top_listing_performance,
    top_reseller,
)
from .overview import (
    platform_sales_value,
    sales_overview,
    seasonal_patterns,
    store_sales_value,
    volume_sales_value,
)
from .payment_terms import payment_terms
