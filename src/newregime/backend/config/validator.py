"""Utilities for validating year configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Iterable, Mapping, Sequence

from .year_config import (
    RegimeConfiguration,
    TaxBracket,
    available_years,
    load_year_configuration,
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_brackets(brackets: Sequence[TaxBracket]) -> list[str]:
    errors: list[str] = []

    previous_rate: float | None = None
    for index, bracket in enumerate(brackets):
        scope = f"brackets[{index}]"
        if bracket.rate > 1:
            errors.append(
                _format_scope(scope, f"rate {bracket.rate} must be between 0 and 1")
            )
        if previous_rate is not None and bracket.rate < previous_rate:
            errors.append(
                _format_scope(
                    scope,
                    "rates must not decrease as income rises",
                )
            )
        previous_rate = bracket.rate

    if brackets and brackets[0].rate != 0:
        errors.append(
            _format_scope("brackets[0]", "the first slab should be taxed at 0%"),
        )

    return errors


def _validate_relief(config: RegimeConfiguration) -> list[str]:
    errors: list[str] = []

    if config.rebate_limit < config.standard_deduction:
        errors.append(
            _format_scope(
                "rebate_limit",
                "rebate limit cannot be lower than the standard deduction",
            )
        )

    if config.cess_rate > 1:
        errors.append(
            _format_scope("cess_rate", f"cess rate {config.cess_rate} must be between 0 and 1")
        )

    return errors


def validate_year_configuration(config: RegimeConfiguration) -> list[str]:
    """Return a list of human-readable issues detected in ``config``."""

    errors: list[str] = []
    errors.extend(_validate_brackets(config.brackets))
    errors.extend(_validate_relief(config))
    return errors


def validate_all_years(years: Iterable[int] | None = None) -> Mapping[int, list[str]]:
    """Validate each configured year and collect issues by year."""

    selected = list(years) if years is not None else list(available_years())
    return {
        year: validate_year_configuration(load_year_configuration(year))
        for year in selected
    }


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured tax years and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except FileNotFoundError as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
