from __future__ import annotations

import csv
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pfcalc.core.errors import InvalidRangeError, MissingFieldError, StatementFormatError
from pfcalc.core.projection import project_continuation
from pfcalc.schemas.statement import (
    CalculatorInputs,
    ContinuationResult,
    ContinuationYear,
    StatementRecord,
)

# Share of salary assumed for the employee contribution when estimating salary.
ASSUMED_CONTRIBUTION_RATE = 0.12

REQUIRED_FIELDS = (
    "year",
    "opening_balance",
    "employee_contributions",
    "employer_contributions",
    "interest_earned",
)

# First match wins per row, so "Interest for the year" is an interest row.
LABEL_PATTERNS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("opening_balance", ("opening balance",)),
    ("closing_balance", ("closing balance",)),
    ("employee_contributions", ("employee contribution",)),
    ("employer_contributions", ("employer contribution",)),
    ("interest_earned", ("interest",)),
    ("year", ("year", "fy")),
)

_YEAR_RE = re.compile(r"(?<!\d)\d{4}(?!\d)")
_AMOUNT_RE = re.compile(r"-?\d[\d,]*(?:\.\d+)?|-?\.\d+")


@dataclass
class StatementFields:
    """Raw values scanned from statement rows, before reconciliation."""

    values: Dict[str, Optional[float]] = field(default_factory=dict)
    rows_seen: int = 0


def parse_amount(raw: str) -> Optional[float]:
    """
    Read the first number in a currency cell, dropping symbols and digit
    grouping: "₹1,23,456.50" gives 123456.5 and "Rs. 2500" gives 2500.0.
    """
    match = _AMOUNT_RE.search(raw)
    if match is None:
        return None
    return float(match.group(0).replace(",", ""))


def parse_year(raw: str) -> Optional[int]:
    """Take the first standalone 4-digit run, so "FY 2024-25" gives 2024 and "144000" gives None."""
    match = _YEAR_RE.search(raw)
    return int(match.group(0)) if match else None


def match_label(label: str) -> Optional[str]:
    lowered = label.lower()
    for name, needles in LABEL_PATTERNS:
        if any(needle in lowered for needle in needles):
            return name
    return None


def scan_rows(raw_text: str) -> StatementFields:
    """Collect recognised label/value rows. Later rows overwrite earlier ones."""
    fields = StatementFields()
    lines = [line.strip() for line in raw_text.strip().splitlines() if line.strip()]
    fields.rows_seen = len(lines)

    # One reader per line: an unclosed quote must not pull in the rows after it.
    for row_number, line in enumerate(lines, start=1):
        try:
            parts = next(csv.reader([line], skipinitialspace=True), [])
        except csv.Error as exc:
            raise StatementFormatError([f"row {row_number} could not be read: {exc}"]) from exc
        parts = [part.replace('"', "").strip() for part in parts]
        if len(parts) < 2:
            continue

        name = match_label(parts[0])
        if name is None:
            continue
        if name == "year":
            year = parse_year(parts[1])
            if year is not None:
                fields.values[name] = year
        else:
            fields.values[name] = parse_amount(parts[1])

    return fields


def _finite(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def estimate_monthly_salary(annual_employee_contributions: float) -> float:
    return annual_employee_contributions / ASSUMED_CONTRIBUTION_RATE / 12


def reconcile(values: Mapping[str, Any]) -> StatementRecord:
    """
    Turn resolved raw values into a canonical statement.

    Required: year, opening balance, both annual contributions and interest.
    Derived when absent:
      closing_balance = opening + employee + employer + interest
      monthly_salary  = employee / ASSUMED_CONTRIBUTION_RATE / 12
      monthly split   = annual contribution / 12
    """
    resolved = {name: _finite(values.get(name)) for name in REQUIRED_FIELDS}
    missing = [name for name, value in resolved.items() if value is None]
    if missing:
        raise MissingFieldError(missing)

    year = resolved["year"]
    if year != int(year):
        raise MissingFieldError(["year"], ["year must be a whole number"])

    opening = resolved["opening_balance"]
    employee = resolved["employee_contributions"]
    employer = resolved["employer_contributions"]
    interest = resolved["interest_earned"]

    closing = _finite(values.get("closing_balance"))
    if closing is None:
        closing = opening + employee + employer + interest

    return StatementRecord(
        year=int(year),
        opening_balance=opening,
        employee_contributions=employee,
        employer_contributions=employer,
        interest_earned=interest,
        closing_balance=closing,
        monthly_salary=estimate_monthly_salary(employee),
        monthly_employee_contribution=employee / 12,
        monthly_employer_contribution=employer / 12,
    )


def parse_statement(raw_text: str) -> StatementRecord:
    """Parse CSV-like statement text into a canonical statement."""
    fields = scan_rows(raw_text)
    if fields.rows_seen < 2:
        raise StatementFormatError(["statement must contain at least two rows"])
    return reconcile(fields.values)


def from_manual_fields(fields: Mapping[str, Any]) -> StatementRecord:
    return reconcile(fields)


def calculator_inputs(record: StatementRecord) -> CalculatorInputs:
    """Suggest salary and contribution percentages for a fresh projection."""
    salary = record.monthly_salary
    if salary > 0:
        employee_pct = round(record.monthly_employee_contribution / salary * 100, 2)
        employer_pct = round(record.monthly_employer_contribution / salary * 100, 2)
    else:
        employee_pct = employer_pct = 0.0

    return CalculatorInputs(
        salary=float(round(salary)),
        employee_rate_percent=employee_pct,
        employer_rate_percent=employer_pct,
    )


def continuation_project(
    record: StatementRecord,
    target_year: int,
    annual_interest_rate: float,
) -> ContinuationResult:
    """Project a statement forward, one row per calendar year up to target_year."""
    if target_year <= record.year:
        raise InvalidRangeError(
            [f"target year {target_year} must be after the statement year {record.year}"]
        )

    rows: List[ContinuationYear] = project_continuation(
        opening_balance=record.closing_balance,
        start_year=record.year,
        monthly_employee=record.monthly_employee_contribution,
        monthly_employer=record.monthly_employer_contribution,
        annual_interest_rate=annual_interest_rate,
        years=target_year - record.year,
    )

    imported = ContinuationYear(
        year=record.year,
        opening_balance=record.opening_balance,
        employee_contributions=record.employee_contributions,
        employer_contributions=record.employer_contributions,
        interest_earned=record.interest_earned,
        closing_balance=record.closing_balance,
    )
    final_balance = rows[-1].closing_balance
    return ContinuationResult(
        imported_year=imported,
        projection_years=rows,
        final_balance=final_balance,
        total_growth=final_balance - record.closing_balance,
    )
