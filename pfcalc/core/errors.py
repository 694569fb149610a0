"""Structured error kinds raised by the PF calculation core."""

from __future__ import annotations

from typing import Iterable, List, Optional


class PFCalcError(ValueError):
    code = "pfcalc_error"

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class InvalidInputError(PFCalcError):
    """A projection input is non-finite or outside its allowed range."""

    code = "invalid_input"


class ComputationError(PFCalcError):
    """The projection produced a non-finite result."""

    code = "computation_error"


class StatementParseError(PFCalcError):
    code = "statement_parse_error"


class StatementFormatError(StatementParseError):
    """The statement text has no usable rows."""

    code = "invalid_statement_format"


class MissingFieldError(StatementParseError):
    """One or more required statement fields could not be resolved."""

    code = "missing_field"

    def __init__(self, fields: Iterable[str], errors: Optional[List[str]] = None):
        self.fields = list(fields)
        super().__init__(errors or [f"missing required field: {name}" for name in self.fields])


class InvalidRangeError(PFCalcError):
    """Continuation target year is not after the statement year."""

    code = "invalid_range"
