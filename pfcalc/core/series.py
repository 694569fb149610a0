"""Chart-ready series derived from projection results."""

from __future__ import annotations

from typing import List

from pfcalc.schemas.projection import GrowthSeries, ProjectionResult
from pfcalc.schemas.statement import ContinuationResult, ContinuationSeries


def _running_total(values: List[float]) -> List[float]:
    out: List[float] = []
    total = 0.0
    for value in values:
        total += value
        out.append(total)
    return out


def growth_series(result: ProjectionResult) -> GrowthSeries:
    """
    Cumulative contributions and interest per year, plus the year-on-year
    balance growth (percent) when increments were applied.
    """
    growth_rates: List[float] = []
    if result.increments_applied:
        growth_rates.append(0.0)
        for previous, current in zip(result.yearly, result.yearly[1:]):
            if previous.balance == 0:
                growth_rates.append(0.0)
            else:
                growth_rates.append(round((current.balance / previous.balance - 1) * 100, 2))

    return GrowthSeries(
        labels=[f"Year {row.year}" for row in result.yearly],
        employee_contributions=_running_total([row.employee_contribution for row in result.yearly]),
        employer_contributions=_running_total([row.employer_contribution for row in result.yearly]),
        interest=_running_total([row.interest for row in result.yearly]),
        balances=[row.balance for row in result.yearly],
        growth_rates=growth_rates,
    )


def continuation_series(result: ContinuationResult) -> ContinuationSeries:
    # imported year first, then each projected year
    rows = [result.imported_year, *result.projection_years]
    contributions = [row.employee_contributions + row.employer_contributions for row in rows]
    interest = [row.interest_earned for row in rows]

    return ContinuationSeries(
        labels=[str(row.year) for row in rows],
        opening_balances=[row.opening_balance for row in rows],
        contributions=contributions,
        interest=interest,
        closing_balances=[row.closing_balance for row in rows],
        cumulative_contributions=_running_total(contributions),
        cumulative_interest=_running_total(interest),
    )
