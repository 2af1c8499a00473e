"""Integration tests for the tax calculation REST endpoint."""

from __future__ import annotations

import json
from http import HTTPStatus
from pathlib import Path
from typing import Dict, Iterable

import pytest
from flask.testing import FlaskClient

DATA_PATH = Path(__file__).resolve().parents[1] / "data" / "regression_scenarios.json"


def _load_scenarios() -> Iterable[Dict[str, object]]:
    with DATA_PATH.open("r", encoding="utf-8") as handle:
        return json.load(handle)


@pytest.mark.parametrize("scenario", _load_scenarios(), ids=lambda item: item["name"])
def test_calculation_endpoint_matches_regression_scenarios(
    client: FlaskClient, scenario: Dict[str, object]
) -> None:
    """Each regression scenario should remain stable over time."""

    response = client.post("/api/v1/calculations", json=scenario["payload"])
    assert response.status_code == HTTPStatus.OK

    summary = response.get_json()["summary"]
    for key, value in scenario["expectations"]["summary"].items():
        assert summary[key] == pytest.approx(value)


def test_calculation_endpoint_accepts_form_style_strings(client: FlaskClient) -> None:
    """Blank and malformed form fields count as zero instead of failing."""

    response = client.post(
        "/api/v1/calculations",
        json={"salaryIncome": "1276000", "interest": "", "rental": "n/a", "other": None},
    )

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["summary"]["tax_payable"] == pytest.approx(1_040)
    assert payload["display"]["headline"] == "₹1,040.00"
    assert payload["meta"]["year"] == 2025
    assert response.headers["Cache-Control"] == "no-store"


def test_calculation_endpoint_uses_year_query_parameter(client: FlaskClient) -> None:
    response = client.post("/api/v1/calculations?year=2024", json={"salaryIncome": 800000})

    assert response.status_code == HTTPStatus.OK
    assert response.get_json()["meta"]["year"] == 2024


def test_calculation_endpoint_rejects_non_json(client: FlaskClient) -> None:
    """Invalid payloads should return a structured 400 response."""

    response = client.post(
        "/api/v1/calculations",
        data="not-json",
        content_type="text/plain",
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "bad_request"
    assert "JSON" in payload["message"].upper()


def test_calculation_endpoint_rejects_json_arrays(client: FlaskClient) -> None:
    response = client.post("/api/v1/calculations", json=[1, 2, 3])

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["message"] == "Request JSON must be an object"


def test_calculation_endpoint_reports_unsupported_year(client: FlaskClient) -> None:
    """Unknown tax years surface as validation errors."""

    response = client.post(
        "/api/v1/calculations",
        json={"year": 2010, "salaryIncome": 1_000_000},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert "2010" in payload["message"]


def test_calculation_endpoint_allows_configured_origin(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations",
        json={"salaryIncome": 100},
        headers={"Origin": "https://calculator.example"},
    )

    assert response.headers["Access-Control-Allow-Origin"] == "https://calculator.example"


def test_calculation_endpoint_omits_cors_for_unknown_origin(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations",
        json={"salaryIncome": 100},
        headers={"Origin": "https://elsewhere.example"},
    )

    assert "Access-Control-Allow-Origin" not in response.headers
