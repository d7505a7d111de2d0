import pytest

from reportkit.runner import process_report, run_report


def _report(sections):
    return {
        "id": "r1",
        "client_id": "c1",
        "period": "2024-02",
        "brand_filter": "Erha",
        "database_source": "bigquery",
        "sections": sections,
    }


SECTIONS = [
    {"id": "s1", "type": "sales_overview", "content": {"text": "intro", "queries": [{"id": "monthly_sales", "query": "SELECT sales"}]}},
    {"id": "s2", "type": "flashsale", "content": {"text": "kept"}},
    {"id": "s3", "type": "top_reseller", "content": {"queries": [{"id": "top_reseller", "query": "SELECT resellers"}]}},
]


def test_processes_sections_in_order_and_saves_once(fake_store, fake_router):
    store = fake_store({"r1": _report(SECTIONS)}, {"c1": {"id": "c1"}})
    router = fake_router({"SELECT sales": [{"Month": "2024-01", "totalsales": 2e9}]})
    progress = []

    updated = process_report("r1", store, router, on_progress=lambda cur, total: progress.append((cur, total)))

    assert progress == [(1, 3), (2, 3), (3, 3)]
    assert [s["id"] for s in updated] == ["s1", "s2", "s3"]
    assert updated[0]["content"]["chartData"] == [{"Month": "Jan-2024", "SUM of GMV": "2.0 Bio"}]
    assert updated[1] == SECTIONS[1]
    assert updated[2]["content"]["chartData"] == []
    assert store.saved == [("r1", updated)]
    assert [c["params"] for c in router.calls] == [{"clientId": "c1", "period": "2024-02"}] * 2


def test_failure_keeps_finished_sections(fake_store, fake_router):
    store = fake_store({"r1": _report(SECTIONS)}, {"c1": {"id": "c1"}})
    router = fake_router({"SELECT sales": [{"Month": "2024-01", "totalsales": 1e9}]}, fail_on="resellers")

    with pytest.raises(RuntimeError, match="resellers"):
        process_report("r1", store, router)

    (_, saved), = store.saved
    assert saved[0]["content"]["chartData"] == [{"Month": "Jan-2024", "SUM of GMV": "1.0 Bio"}]
    assert saved[2] == SECTIONS[2]


def test_run_report_reports_outcome(fake_store, fake_router, templates):
    store = fake_store({"r1": _report(SECTIONS)}, {"c1": {"id": "c1"}})
    ok = run_report("r1", store, fake_router(), templates)
    assert ok["success"] is True
    assert len(ok["updated_sections"]) == 3

    failed = run_report("r1", store, fake_router(fail_on="sales"), templates)
    assert failed == {"success": False, "error": "Syntax error near sales"}


def test_run_report_missing_rows(fake_store, fake_router, templates):
    store = fake_store({"r1": _report([])}, {})
    assert run_report("nope", store, fake_router(), templates) == {"success": False, "error": "Report not found: nope"}
    assert run_report("r1", store, fake_router(), templates) == {"success": False, "error": "Client not found: c1"}


def test_run_report_requires_id():
    with pytest.raises(ValueError):
        run_report("")
