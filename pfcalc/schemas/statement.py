"""Data contracts for statement import and continuation projections."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pfcalc.schemas.projection import MAX_INTEREST_RATE, MAX_YEARS

EARLIEST_STATEMENT_YEAR = 1990


class StatementRecord(BaseModel):
    """Canonical prior-year PF statement."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    year: int
    opening_balance: float
    employee_contributions: float
    employer_contributions: float
    interest_earned: float
    closing_balance: float
    monthly_salary: float
    monthly_employee_contribution: float
    monthly_employer_contribution: float


class CalculatorInputs(BaseModel):
    """Calculator form values suggested by an imported statement."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    salary: float
    employee_rate_percent: float
    employer_rate_percent: float


class ManualStatementRequest(BaseModel):
    """Statement fields typed in by hand."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    year: int
    opening_balance: float = Field(..., ge=0)
    employee_contributions: float = Field(..., ge=0)
    employer_contributions: float = Field(..., ge=0)
    interest_earned: float = Field(..., ge=0)
    closing_balance: Optional[float] = Field(default=None, ge=0)

    @field_validator("year")
    @classmethod
    def year_in_range(cls, value: int) -> int:
        current_year = datetime.now().year
        if not EARLIEST_STATEMENT_YEAR <= value <= current_year:
            raise ValueError(f"year must be between {EARLIEST_STATEMENT_YEAR} and {current_year}")
        return value


class StatementImportRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    text: str = Field(..., min_length=1, description="Raw CSV-like statement text.")


class StatementImportResponse(BaseModel):
    statement: StatementRecord
    calculator_inputs: CalculatorInputs


class ContinuationRequest(BaseModel):
    """Project an imported statement forward to a target year."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    statement: StatementRecord
    target_year: int
    annual_interest_rate: float = Field(..., ge=0, le=MAX_INTEREST_RATE)

    @field_validator("target_year")
    @classmethod
    def target_year_in_range(cls, value: int) -> int:
        current_year = datetime.now().year
        if not current_year <= value <= current_year + MAX_YEARS:
            raise ValueError(f"target_year must be between {current_year} and {current_year + MAX_YEARS}")
        return value


class ContinuationYear(BaseModel):
    """One calendar year of a continuation projection."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int
    opening_balance: float
    employee_contributions: float
    employer_contributions: float
    interest_earned: float
    closing_balance: float


class ContinuationResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    imported_year: ContinuationYear
    projection_years: List[ContinuationYear]
    final_balance: float
    total_growth: float


class ContinuationSeries(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    labels: List[str]
    opening_balances: List[float]
    contributions: List[float]
    interest: List[float]
    closing_balances: List[float]
    cumulative_contributions: List[float]
    cumulative_interest: List[float]


class ContinuationResponse(BaseModel):
    result: ContinuationResult
    series: ContinuationSeries
