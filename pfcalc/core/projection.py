"""PF projection engine: month-level compounding of employee and employer contributions."""

from __future__ import annotations

import math
from typing import List, Optional, Tuple

from pfcalc.core.errors import ComputationError, InvalidInputError
from pfcalc.core.increments import apply_increment
from pfcalc.schemas.projection import (
    MAX_INTEREST_RATE,
    MAX_MONTHLY_SALARY,
    MAX_YEARS,
    IncrementPolicy,
    IncrementRecord,
    ProjectionResult,
    YearRecord,
)
from pfcalc.schemas.statement import ContinuationYear

MONTHS_PER_YEAR = 12


def _check_range(errors: List[str], name: str, value: float, low: float, high: float) -> None:
    if not math.isfinite(value):
        errors.append(f"{name} must be a finite number")
    elif not low <= value <= high:
        errors.append(f"{name} must be between {low} and {high}")


def validate_projection_inputs(
    salary: float,
    employee_rate: float,
    employer_rate: float,
    annual_interest_rate: float,
    years: int,
) -> None:
    errors: List[str] = []
    _check_range(errors, "salary", salary, 0, MAX_MONTHLY_SALARY)
    _check_range(errors, "employee_rate", employee_rate, 0, 1)
    _check_range(errors, "employer_rate", employer_rate, 0, 1)
    _check_range(errors, "annual_interest_rate", annual_interest_rate, 0, MAX_INTEREST_RATE)
    if isinstance(years, bool) or not isinstance(years, int):
        errors.append("years must be a whole number")
    elif not 1 <= years <= MAX_YEARS:
        errors.append(f"years must be between 1 and {MAX_YEARS}")

    if errors:
        raise InvalidInputError(errors)


def _accumulate_year(
    balance: float,
    monthly_employee: float,
    monthly_employer: float,
    monthly_rate: float,
) -> Tuple[float, float, float, float]:
    """
    Run twelve months on a running balance.

    Order of operations (per month):
      1) Deposit both contributions.
      2) Compute interest on the balance including this month's deposit.
      3) Add the interest to the balance.

    Returns (balance, employee_total, employer_total, interest_total).
    """
    employee_total = 0.0
    employer_total = 0.0
    interest_total = 0.0

    for _ in range(MONTHS_PER_YEAR):
        employee_total += monthly_employee
        employer_total += monthly_employer
        balance += monthly_employee + monthly_employer

        interest = balance * monthly_rate
        interest_total += interest
        balance += interest

    return balance, employee_total, employer_total, interest_total


def project(
    salary: float,
    employee_rate: float,
    employer_rate: float,
    annual_interest_rate: float,
    years: int,
    increment_policy: Optional[IncrementPolicy] = None,
) -> ProjectionResult:
    """
    Build a year-by-year PF projection starting from a zero balance.

    Per year:
      1) Snapshot the monthly salary and contributions in force.
      2) Accumulate twelve months of deposits and interest.
      3) Record the year (closing balance rounded to 2 decimals).
      4) Apply the increment policy, unless this is the final year.

    Running values are never rounded; only the reported final monthly
    contributions are rounded for display.
    """
    validate_projection_inputs(salary, employee_rate, employer_rate, annual_interest_rate, years)

    monthly_salary = salary
    monthly_employee = salary * employee_rate
    monthly_employer = salary * employer_rate
    monthly_rate = annual_interest_rate / MONTHS_PER_YEAR
    balance = 0.0

    yearly: List[YearRecord] = []
    increments: List[IncrementRecord] = []

    for year in range(1, years + 1):
        increments.append(
            IncrementRecord(
                year=year,
                monthly_salary=monthly_salary,
                monthly_employee_contribution=monthly_employee,
                monthly_employer_contribution=monthly_employer,
                increment_applied=increment_policy is not None and year > 1,
            )
        )

        balance, employee_total, employer_total, interest_total = _accumulate_year(
            balance, monthly_employee, monthly_employer, monthly_rate
        )

        yearly.append(
            YearRecord(
                year=year,
                employee_contribution=employee_total,
                employer_contribution=employer_total,
                interest=interest_total,
                balance=round(balance, 2),
            )
        )

        if increment_policy is not None and year < years:
            monthly_employee, monthly_employer, monthly_salary = apply_increment(
                monthly_employee,
                monthly_employer,
                monthly_salary,
                increment_policy,
                employee_rate,
            )

    if not math.isfinite(balance):
        raise ComputationError(["projection produced a non-finite balance"])

    return ProjectionResult(
        initial_monthly_salary=salary,
        final_monthly_salary=monthly_salary,
        initial_monthly_employee_contribution=salary * employee_rate,
        initial_monthly_employer_contribution=salary * employer_rate,
        final_monthly_employee_contribution=round(monthly_employee, 2),
        final_monthly_employer_contribution=round(monthly_employer, 2),
        total_employee_contribution=sum(row.employee_contribution for row in yearly),
        total_employer_contribution=sum(row.employer_contribution for row in yearly),
        total_interest_earned=sum(row.interest for row in yearly),
        maturity_amount=balance,
        yearly=yearly,
        increments=increments,
        increments_applied=increment_policy is not None,
    )


def project_continuation(
    opening_balance: float,
    start_year: int,
    monthly_employee: float,
    monthly_employer: float,
    annual_interest_rate: float,
    years: int,
) -> List[ContinuationYear]:
    """
    Continue a projection from a known balance with constant contributions.

    Each calendar year after start_year opens on the previous year's rounded
    closing balance. No increments are applied.
    """
    errors: List[str] = []
    for name, value in (
        ("opening_balance", opening_balance),
        ("monthly_employee", monthly_employee),
        ("monthly_employer", monthly_employer),
    ):
        if not math.isfinite(value):
            errors.append(f"{name} must be a finite number")
    _check_range(errors, "annual_interest_rate", annual_interest_rate, 0, MAX_INTEREST_RATE)
    if years < 1:
        errors.append("years must be at least 1")
    if errors:
        raise InvalidInputError(errors)

    monthly_rate = annual_interest_rate / MONTHS_PER_YEAR
    balance = opening_balance
    rows: List[ContinuationYear] = []

    for year in range(start_year + 1, start_year + years + 1):
        opening = balance
        balance, employee_total, employer_total, interest_total = _accumulate_year(
            balance, monthly_employee, monthly_employer, monthly_rate
        )
        balance = round(balance, 2)
        if not math.isfinite(balance):
            raise ComputationError([f"continuation produced a non-finite balance in {year}"])

        rows.append(
            ContinuationYear(
                year=year,
                opening_balance=opening,
                employee_contributions=round(employee_total, 2),
                employer_contributions=round(employer_total, 2),
                interest_earned=round(interest_total, 2),
                closing_balance=balance,
            )
        )

    return rows
