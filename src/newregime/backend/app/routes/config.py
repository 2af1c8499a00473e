"""Expose configuration metadata consumed by the calculator front-end.

The slab table, rebate limit and cess rate are read from the YAML-backed year
configuration so the form and its information panel never duplicate the
rules applied by the engine.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from newregime.backend.app.http import problem_response
from newregime.backend.app.services.calculators import (
    format_currency,
    format_percentage,
    iter_bracket_bounds,
)
from newregime.backend.config.year_config import (
    RegimeConfiguration,
    available_years,
    load_manifest,
    load_year_configuration,
)
from newregime.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    supported_years = list(manifest.supported_years)
    default_year = supported_years[-1] if supported_years else None
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": default_year,
    }


def _serialise_slabs(config: RegimeConfiguration) -> list[dict[str, Any]]:
    slabs: list[dict[str, Any]] = []
    for lower, upper, rate in iter_bracket_bounds(config.brackets):
        if upper is None:
            band = f"Above {format_currency(lower)}"
        else:
            band = f"{format_currency(lower)} - {format_currency(upper)}"
        slabs.append(
            {
                "lower": lower,
                "upper": upper,
                "rate": rate,
                "band": band,
                "rate_label": format_percentage(rate),
            }
        )
    return slabs


def _serialise_year(year: int) -> dict[str, Any]:
    config = load_year_configuration(year)
    manifest_entry = load_manifest().get_entry(year)
    return {
        "year": config.year,
        "label": config.label,
        "status": manifest_entry.status,
        "notes_url": manifest_entry.notes_url,
        "currency": config.currency,
        "standard_deduction": config.standard_deduction,
        "rebate_limit": config.rebate_limit,
        "cess_rate": config.cess_rate,
        "slabs": _serialise_slabs(config),
        "meta": dict(config.meta),
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    payload = get_configuration_metadata()
    return jsonify(payload), 200


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return all configured years with their parameters."""

    years = [_serialise_year(year) for year in available_years()]
    metadata = get_configuration_metadata()
    payload = {
        "years": years,
        "default_year": metadata["default_year"],
        "supported_years": metadata["supported_years"],
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>/slabs")
def get_slabs(year: int) -> tuple[Any, int]:
    """Return the slab table shown in the calculator's information panel."""

    try:
        config = load_year_configuration(year)
    except FileNotFoundError as exc:
        return problem_response("not_found", status=404, message=str(exc)).to_response()

    payload = {
        "year": config.year,
        "label": config.label,
        "standard_deduction": config.standard_deduction,
        "rebate_limit": config.rebate_limit,
        "cess_rate": config.cess_rate,
        "slabs": _serialise_slabs(config),
        "notes": [
            (
                f"Total income up to {format_currency(config.rebate_limit)} "
                "is not taxed."
            ),
            (
                "Above that limit, tax before cess never exceeds the income "
                "earned over the limit."
            ),
            f"A {format_percentage(config.cess_rate)} health and education cess applies.",
        ],
    }
    return jsonify(payload), 200
