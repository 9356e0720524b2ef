"""Tests for the Flask app."""

import pytest

from main import app

GIG = {
    "id": "1",
    "eventName": "Flask Test Gig",
    "date": "2026-03-15",
    "performers": "The Band",
    "numberOfMusicians": 4,
    "performanceFee": 1000,
    "technicalFee": 200,
    "managerBonusType": "fixed",
    "managerBonusAmount": 50,
    "paymentReceived": True,
}


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


class TestFlaskRoutes:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.get_json()["status"] == "healthy"

    def test_api_info(self, client):
        body = client.get("/api").get_json()
        assert body["endpoints"]["dashboard"] == "/dashboard [POST]"

    def test_calculate_gig(self, client):
        response = client.post("/calculate_gig", json=GIG)

        assert response.status_code == 200
        body = response.get_json()
        assert body["total_received"] == 1250.0
        assert body["my_earnings_already_received"] == 500.0

    def test_calculate_gig_no_body(self, client):
        response = client.post("/calculate_gig", data="")

        assert response.status_code == 400
        assert response.get_json()["status"] == "failed"

    def test_calculate_gig_invalid(self, client):
        response = client.post("/calculate_gig", json={**GIG, "numberOfMusicians": 0})

        assert response.status_code == 400
        assert response.get_json()["status"] == "validation_failed"

    def test_dashboard(self, client):
        response = client.post("/dashboard", json={"gigs": [GIG], "today": "2026-10-19"})

        assert response.status_code == 200
        body = response.get_json()
        assert body["totals"]["total_earnings_received"] == 500.0
        assert body["per_band"]["The Band"]["gigs"] == 1

    def test_financial_report(self, client):
        response = client.post("/reports/financial", json={"gigs": [GIG], "period": "year", "today": "2026-10-19"})

        assert response.status_code == 200
        assert response.get_json()["summary"]["total_gigs_count"] == 1

    def test_export_csv_headers(self, client):
        response = client.post("/exports", json={"gigs": [GIG], "type": "summary"})

        assert response.status_code == 200
        assert response.headers["Content-Type"].startswith("text/csv")
        assert response.headers["Content-Disposition"] == 'attachment; filename="summary.csv"'
        assert response.headers["Cache-Control"] == "no-store"
        assert response.get_data(as_text=True).splitlines()[1] == "The Band,1,500.00,500.00,0.00,750.00"

    def test_export_report_json(self, client):
        response = client.post("/exports", json={"gigs": [GIG], "type": "report"})

        assert response.status_code == 200
        assert response.get_json()["summary"]["total_earnings"] == 500.0

    def test_export_invalid_type(self, client):
        response = client.post("/exports", json={"gigs": [GIG], "type": "xlsx"})
        assert response.status_code == 400
