import copy

import pytest

from reportkit.models import ProcessingMeta
from reportkit.templates import QueryTemplates


class FakeRouter:
    """Returns canned rows per query id (matched by the SQL text) and records calls."""

    def __init__(self, rows_by_sql=None, fail_on=None):
        self.rows_by_sql = rows_by_sql or {}
        self.fail_on = fail_on
        self.calls = []

    def run(self, sql, params=None, database=None):
        self.calls.append({"sql": sql, "params": dict(params or {}), "database": database})
        if self.fail_on is not None and self.fail_on in sql:
            raise RuntimeError(f"Syntax error near {self.fail_on}")
        return copy.deepcopy(self.rows_by_sql.get(sql, []))


class FakeStore:
    def __init__(self, reports=None, clients=None):
        self.reports = reports or {}
        self.clients = clients or {}
        self.saved = []

    def fetch_report(self, report_id):
        from reportkit.connectors.supabase import ReportNotFoundError
        if report_id not in self.reports:
            raise ReportNotFoundError(f"Report not found: {report_id}")
        return copy.deepcopy(self.reports[report_id])

    def fetch_client(self, client_id):
        from reportkit.connectors.supabase import ClientNotFoundError
        if client_id not in self.clients:
            raise ClientNotFoundError(f"Client not found: {client_id}")
        return self.clients[client_id]

    def save_sections(self, report_id, sections):
        self.saved.append((report_id, copy.deepcopy(sections)))


@pytest.fixture()
def meta():
    return ProcessingMeta(client_id="c1", period="2024-Q1", brand_filter="Erha, Wardah", database_source="bigquery")


@pytest.fixture()
def platform_rows():
    """Two months of Shopee sales; the Erha brand grows while the market shrinks."""
    return [
        {"Month": "2024-01", "Channel": "Shopee", "Brand": "Erha", "totalsales": 50},
        {"Month": "2024-01", "Channel": "Shopee", "Brand": "Other", "totalsales": 50},
        {"Month": "2024-02", "Channel": "Shopee", "Brand": "Erha", "totalsales": 55},
        {"Month": "2024-02", "Channel": "Shopee", "Brand": "Other", "totalsales": 25},
    ]


@pytest.fixture()
def category_rows():
    return [
        {"Month": "2024-01", "Channel": "Shopee", "SubCategory": "A", "totalsales": 100},
        {"Month": "2024-01", "Channel": "Shopee", "SubCategory": "B", "totalsales": 50},
        {"Month": "2024-01", "Channel": "Shopee", "SubCategory": "C", "totalsales": 10},
        {"Month": "2024-02", "Channel": "Shopee", "SubCategory": "A", "totalsales": 100},
        {"Month": "2024-02", "Channel": "Shopee", "SubCategory": "B", "totalsales": 40},
        {"Month": "2024-02", "Channel": "Shopee", "SubCategory": "C", "totalsales": 200},
    ]


@pytest.fixture()
def payment_rows():
    return {
        "payment_analysis": [
            {"payment_term": "NET 30", "customer_category": "Retail", "order_count": "10",
             "total_sales": "3000000", "avg_order_value": "300000", "unique_customers": "4", "total_quantity": "20"},
            {"payment_term": "COD", "customer_category": "Retail", "order_count": "5",
             "total_sales": "1000000", "avg_order_value": "200000", "unique_customers": "3", "total_quantity": "8"},
            {"payment_term": "NET 30", "customer_category": "Wholesale", "order_count": "2",
             "total_sales": "2000000", "avg_order_value": "1000000", "unique_customers": "1", "total_quantity": "50"},
        ],
        "payment_trends": [
            {"payment_term": "COD", "month": "2024-02", "monthly_sales": "600000", "avg_order_value": "200000", "order_count": "3"},
            {"payment_term": "COD", "month": "2024-01", "monthly_sales": "400000", "avg_order_value": "200000", "order_count": "2"},
        ],
    }


@pytest.fixture()
def templates():
    return QueryTemplates({
        "sales_overview": [{"id": "monthly_sales", "query": "SELECT monthly"}],
        "top_categories": [{"id": "top_categories", "query": "SELECT categories", "database": "clickhouse"}],
    })


@pytest.fixture()
def fake_router():
    return FakeRouter


@pytest.fixture()
def fake_store():
    return FakeStore
