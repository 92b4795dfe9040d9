"""Tests for the FastAPI app (fake analyzer, no network)."""

import pytest
from fastapi.testclient import TestClient

from conftest import FakeClient, analysis_payload, tool_response
from statement_analyzer import app as app_module
from statement_analyzer.analyzer import StatementAnalyzer
from statement_analyzer.app import build_app, create_app
from statement_analyzer.config import ConfigError, Settings


def _client(response=None, exc=None) -> TestClient:
    fake = FakeClient(response if response is not None else tool_response(analysis_payload()), exc)
    return TestClient(create_app(StatementAnalyzer(fake, model="claude-test")))


@pytest.fixture
def client() -> TestClient:
    return _client()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "model": "claude-test"}


def test_index_serves_ui(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "text/html" in r.headers["content-type"]
    assert "AI Financial Statement Analyzer" in r.text
    assert 'accept=".csv,.txt"' in r.text


# --- /api/analyze ---


def test_analyze(client):
    r = client.post("/api/analyze", json={
        "companyName": "Emaar Properties PJSC", "statementText": "Revenue 10,000,000",
    })
    assert r.status_code == 200
    body = r.json()
    assert body["type"] == "result"
    assert isinstance(body["elapsed_ms"], int)

    analysis = body["analysis"]
    assert analysis["companyName"] == "Emaar Properties PJSC"
    assert analysis["recommendation"] == "Hold"
    assert analysis["recommendationColors"] == {"background": "#eab308", "text": "#000000"}
    assert analysis["summary"]["strengths"]

    chart = body["chart"]
    assert chart["empty"] is False
    assert chart["theme"] == "dark"
    assert chart["svg"].startswith("<svg")
    assert [b["metric"] for b in chart["layout"]["bars"]] == ["Revenue", "Net Loss", "Operating Expenses"]


def test_analyze_accepts_snake_case_and_theme(client):
    r = client.post("/api/analyze", json={
        "company_name": "Emaar", "statement_text": "Revenue 1", "theme": "light",
    })
    assert r.status_code == 200
    assert r.json()["chart"]["theme"] == "light"


def test_analyze_missing_input(client):
    r = client.post("/api/analyze", json={"companyName": "Emaar", "statementText": "  "})
    assert r.status_code == 400
    assert r.json() == {
        "type": "error",
        "message": "Please provide both a company name and the financial statement text.",
    }


def test_analyze_api_failure():
    r = _client(exc=TimeoutError("timed out")).post(
        "/api/analyze", json={"companyName": "Emaar", "statementText": "Revenue 1"},
    )
    assert r.status_code == 502
    assert r.json()["message"] == "Analysis failed: Failed to analyze the financial statement."


def test_analyze_empty_chart():
    payload = analysis_payload()
    payload["extractedData"] = [{"metric": "Notes", "value": "See appendix"}]
    r = _client(tool_response(payload)).post(
        "/api/analyze", json={"companyName": "Emaar", "statementText": "Revenue 1"},
    )
    assert r.json()["chart"] == {
        "empty": True, "theme": "dark", "message": "No data available for visualization.",
    }


# --- /api/chart ---


def test_chart(client):
    r = client.post("/api/chart", json={
        "data": [{"metric": "A", "value": "$400"}, {"metric": "B", "value": "(100)"}],
        "theme": "light",
    })
    assert r.status_code == 200
    body = r.json()
    assert body["empty"] is False
    assert body["layout"]["has_negative"] is True
    assert body["layout"]["zero_x"] == 300
    assert "#DC2626" in body["svg"]


def test_chart_empty(client):
    r = client.post("/api/chart", json={"data": [{"metric": "X", "value": "N/A"}]})
    assert r.json()["empty"] is True


def test_chart_unknown_theme(client):
    r = client.post("/api/chart", json={"data": [], "theme": "purple"})
    assert r.status_code == 422


# --- /api/report/pdf ---


def test_report_pdf(client):
    r = client.post("/api/report/pdf", json={"analysis": analysis_payload(), "scale": 1})
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert r.headers["content-disposition"] == (
        'attachment; filename="financial_report_emaar_properties_pjsc.pdf"'
    )
    assert r.content.startswith(b"%PDF")


def test_report_pdf_export_failure(client):
    r = client.post("/api/report/pdf", json={"analysis": analysis_payload(), "scale": 0})
    assert r.status_code == 500
    assert r.json()["message"].startswith("Export failed:")


# --- Startup ---


def test_build_app_without_key():
    with pytest.raises(ConfigError):
        build_app(Settings(_env_file=None, anthropic_api_key=""))


def test_build_app_with_key():
    app = build_app(Settings(_env_file=None, anthropic_api_key="sk-test", model="claude-x"))
    assert TestClient(app).get("/health").json()["model"] == "claude-x"


def test_main_exits_without_key(monkeypatch):
    monkeypatch.setattr(app_module, "get_config", lambda: Settings(_env_file=None, anthropic_api_key=""))
    with pytest.raises(SystemExit) as err:
        app_module.main()
    assert err.value.code == 2
