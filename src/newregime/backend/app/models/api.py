"""Pydantic models describing the public API surface."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

__all__ = [
    "INCOME_FIELDS",
    "IncomeInput",
    "CalculationRequest",
    "Summary",
    "DisplaySummary",
    "SlabEntry",
    "ResponseMeta",
    "CalculationResponse",
    "coerce_amount",
    "format_validation_error",
]


INCOME_FIELDS = ("salary_income", "interest", "rental", "other")


def coerce_amount(value: Any) -> float:
    """Return ``value`` as a float, treating anything unparseable as zero.

    Mirrors the lenient behaviour of the calculator form: blanks, ``None``,
    booleans, malformed strings, non-ASCII digits, NaN and infinities all count
    as zero. Unsigned ``0x``/``0o``/``0b`` literals are read as integers.
    Negative numbers are passed through unchanged.
    """

    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, str):
        value = value.strip()
        if not value or "_" in value or not value.isascii():
            return 0.0
        if value[:2].lower() in {"0x", "0o", "0b"}:
            try:
                return float(int(value, 0))
            except (ValueError, OverflowError):
                return 0.0

    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0

    if not math.isfinite(number):
        return 0.0
    return number


class IncomeInput(BaseModel):
    """The four income figures entered on the calculator form."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    salary_income: float = Field(
        default=0.0,
        validation_alias=AliasChoices("salary_income", "salaryIncome", "salary"),
    )
    interest: float = 0.0
    rental: float = 0.0
    other: float = 0.0

    @field_validator(*INCOME_FIELDS, mode="before")
    @classmethod
    def _coerce_amounts(cls, value: Any) -> float:
        return coerce_amount(value)

    @model_validator(mode="before")
    @classmethod
    def _ensure_mapping(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, BaseModel):
            return data.model_dump()
        if not isinstance(data, Mapping):
            return {}
        return data

    @property
    def total(self) -> float:
        """Sum of the income figures."""

        return self.salary_income + self.interest + self.rental + self.other


class CalculationRequest(BaseModel):
    """Payload accepted by the calculation endpoint.

    Income figures may be supplied at the top level (as the form posts them)
    or nested under an ``income`` object.
    """

    model_config = ConfigDict(extra="ignore")

    year: int | None = Field(default=None, ge=1900, le=2100)
    income: IncomeInput = Field(default_factory=IncomeInput)

    @model_validator(mode="before")
    @classmethod
    def _lift_flat_income(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        nested = data.get("income")
        if isinstance(nested, (Mapping, IncomeInput)):
            return data

        income_keys = {
            key for key in data
            if key in INCOME_FIELDS or key in {"salaryIncome", "salary"}
        }
        copied = {key: value for key, value in data.items() if key not in income_keys}
        copied["income"] = {key: data[key] for key in income_keys}
        return copied


class Summary(BaseModel):
    """Numeric breakdown of a single calculation."""

    model_config = ConfigDict(extra="forbid")

    total_income: float
    standard_deductions: float
    taxable_income: float
    computed_tax: float
    final_tax_before_cess: float
    cess: float
    tax_payable: float


class DisplaySummary(BaseModel):
    """Currency-formatted counterpart of :class:`Summary`."""

    model_config = ConfigDict(extra="forbid")

    total_income: str
    standard_deductions: str
    taxable_income: str
    computed_tax: str
    final_tax_before_cess: str
    cess: str
    tax_payable: str
    headline: str


class SlabEntry(BaseModel):
    """Portion of taxable income falling inside a single slab."""

    model_config = ConfigDict(extra="forbid")

    lower: float
    upper: float | None = None
    rate: float
    label: str
    taxable_amount: float
    tax: float


class ResponseMeta(BaseModel):
    """Metadata describing how a calculation was produced."""

    model_config = ConfigDict(extra="forbid")

    year: int
    label: str | None = None
    regime: str = "new"
    currency: str = "INR"


class CalculationResponse(BaseModel):
    """Response body returned by the calculation endpoint."""

    model_config = ConfigDict(extra="forbid")

    summary: Summary
    display: DisplaySummary
    slabs: list[SlabEntry]
    effective_tax_rate: float
    marginal_rate: float
    rebate_applied: bool
    marginal_relief_applied: bool
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
