"""Helpers for normalising incoming calculation requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest


def _resolve_year(req: Request, payload: dict[str, Any]) -> None:
    """Populate the year field in ``payload`` from the query string if absent."""

    if payload.get("year") not in (None, ""):
        return

    year_param = req.args.get("year", type=int)
    if year_param is not None:
        payload["year"] = year_param
    else:
        payload.pop("year", None)


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract a JSON object payload from ``req``."""

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    _resolve_year(req, payload)

    return payload
