"""Tests for the Flask web front end."""

import csv
import io

import pytest

from loan_calc_web.app import app

FORM = {
    "principal": "100000",
    "rate": "12",
    "tenure": "1",
    "frequency": "monthly",
    "moratorium": "0",
    "start_date": "2024-01-01",
}


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def test_index_renders_empty_form(client) -> None:
    response = client.get("/")
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "Loan Repayment Calculator" in body
    assert "Repayment Schedule" not in body


def test_post_renders_schedule(client) -> None:
    response = client.post("/", data=FORM)
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "8884.88" in body
    assert "92115.12" in body
    assert "Jan 1, 2024" in body
    assert "Dec 1, 2024" in body
    assert '"balance": [' in body


def test_post_with_invalid_fields_shows_errors_and_no_schedule(client) -> None:
    response = client.post("/", data={**FORM, "principal": "0", "tenure": "-1"})
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "principal must be &gt; 0" in body
    assert "tenure must be &gt; 0" in body
    assert "Repayment Schedule" not in body


def test_long_schedules_are_truncated(client) -> None:
    app.config["MAX_ROWS"] = 24
    try:
        response = client.post("/", data={**FORM, "tenure": "30"})
    finally:
        app.config["MAX_ROWS"] = 120
    body = response.get_data(as_text=True)
    assert "336 more rows not shown" in body


def test_export_csv(client) -> None:
    response = client.post("/export/csv", data=FORM)
    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    assert "loan-schedule.csv" in response.headers["Content-Disposition"]
    rows = list(csv.reader(io.StringIO(response.get_data(as_text=True))))
    assert rows[0] == ["Date", "Payment", "Interest", "Principal", "Balance"]
    assert rows[1] == ["Jan 1, 2024", "8884.88", "1000.00", "7884.88", "92115.12"]
    assert len(rows) == 13


def test_export_json(client) -> None:
    response = client.post("/export/json", data=FORM)
    assert response.status_code == 200
    data = response.get_json(force=True)
    assert data["summary"]["periods"] == 12
    assert data["schedule"][-1]["date"] == "2024-12-01"


def test_export_rejects_invalid_input(client) -> None:
    response = client.post("/export/csv", data={**FORM, "rate": "-3"})
    assert response.status_code == 400
    assert response.get_json() == {"errors": {"rate": "rate must be ≥ 0"}}


def test_api_schedule_accepts_json(client) -> None:
    response = client.post(
        "/api/schedule",
        json={"principal": 12000, "rate": 0, "tenure": 1, "start_date": "2024-01-01", "moratorium": 3},
    )
    assert response.status_code == 200
    data = response.get_json()
    assert data["summary"]["payment"] == pytest.approx(1000.0)
    assert [row["interest"] for row in data["schedule"]] == [0.0] * 12
    assert data["schedule"][0]["date"] == "2024-04-01"
    assert data["chart"]["principal"] == [1000.0] * 12


def test_api_schedule_reports_all_errors(client) -> None:
    response = client.post(
        "/api/schedule",
        json={"principal": -1, "rate": -1, "tenure": 0, "moratorium": -1, "start_date": "2024-01-01"},
    )
    assert response.status_code == 400
    assert set(response.get_json()["errors"]) == {"principal", "rate", "tenure", "moratorium"}


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"moratorium": "100000"}, "moratorium"),
        ({"tenure": "8000"}, "tenure"),
        ({"rate": "1e500000"}, "rate"),
    ],
)
def test_out_of_range_input_is_a_client_error(client, overrides, field) -> None:
    response = client.post("/api/schedule", json={**FORM, **overrides})
    assert response.status_code == 400
    assert list(response.get_json()["errors"]) == [field]

    response = client.post("/export/csv", data={**FORM, **overrides})
    assert response.status_code == 400


def test_export_pdf(client) -> None:
    response = client.post("/export/pdf", data=FORM)
    assert response.status_code == 200
    assert response.mimetype == "application/pdf"
    assert "loan-schedule.pdf" in response.headers["Content-Disposition"]
    assert response.data.startswith(b"%PDF")
