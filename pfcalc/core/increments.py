"""Annual increment policy applied to monthly PF contributions."""

from __future__ import annotations

from typing import Tuple

from pfcalc.schemas.projection import IncrementMode, IncrementPolicy, PartyIncrement


def _step(monthly: float, increment: PartyIncrement) -> Tuple[float, bool]:
    """Return the stepped contribution and whether a step was taken."""
    if increment.mode == IncrementMode.PERCENTAGE:
        if increment.value > 0:
            return monthly * (1 + increment.value / 100), True
        return monthly, False
    return monthly + increment.value, True


def apply_increment(
    current_employee_monthly: float,
    current_employer_monthly: float,
    current_salary: float,
    policy: IncrementPolicy,
    employee_rate: float,
) -> Tuple[float, float, float]:
    """
    Step both monthly contributions up by one year's increment.

    Returns (employee_monthly, employer_monthly, salary). The salary is
    re-derived from the new employee contribution only:

      salary = employee_monthly / employee_rate   (when employee_rate > 0)

    The employer side never touches the salary. With a zero employee rate, or
    a zero percentage step, the salary stays at its last known value.
    """
    employee_monthly, stepped = _step(current_employee_monthly, policy.employee)
    salary = current_salary
    if stepped and employee_rate > 0:
        salary = employee_monthly / employee_rate

    employer_monthly, _ = _step(current_employer_monthly, policy.employer)
    return employee_monthly, employer_monthly, salary
