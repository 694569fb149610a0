"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from pfcalc.core.errors import (
    ComputationError,
    InvalidInputError,
    InvalidRangeError,
    MissingFieldError,
    PFCalcError,
    StatementFormatError,
    StatementParseError,
)
from pfcalc.core.projection import project
from pfcalc.core.series import continuation_series, growth_series
from pfcalc.domain.statement import (
    calculator_inputs,
    continuation_project,
    from_manual_fields,
    parse_statement,
)
from pfcalc.schemas.health import HealthResponse
from pfcalc.schemas.projection import ProjectionRequest, ProjectionResponse
from pfcalc.schemas.statement import (
    ContinuationRequest,
    ContinuationResponse,
    ManualStatementRequest,
    StatementImportRequest,
    StatementImportResponse,
    StatementRecord,
)

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)

ERROR_STATUS = {
    MissingFieldError: HTTPStatus.UNPROCESSABLE_ENTITY,
    StatementParseError: HTTPStatus.UNPROCESSABLE_ENTITY,
    InvalidRangeError: HTTPStatus.BAD_REQUEST,
    InvalidInputError: HTTPStatus.BAD_REQUEST,
    ComputationError: HTTPStatus.INTERNAL_SERVER_ERROR,
}


def _status_for(exc: PFCalcError) -> HTTPStatus:
    for kind in type(exc).__mro__:
        if kind in ERROR_STATUS:
            return ERROR_STATUS[kind]
    return HTTPStatus.BAD_REQUEST


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    logger.warning("rejected payload on %s: %d validation error(s)", request.path, exc.error_count())
    return (
        jsonify({"detail": exc.errors(include_url=False, include_context=False)}),
        HTTPStatus.UNPROCESSABLE_ENTITY,
    )


@api_bp.errorhandler(PFCalcError)
def _handle_calc_error(exc: PFCalcError):
    """Convert core error kinds into JSON responses."""
    status = _status_for(exc)
    if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.error("calculation failed on %s: %s", request.path, exc)
    else:
        logger.warning("rejected request on %s: %s", request.path, exc)

    body: Dict[str, Any] = {"error": exc.code, "detail": exc.errors}
    if isinstance(exc, MissingFieldError):
        body["fields"] = exc.fields
    return jsonify(body), status


def _statement_response(record: StatementRecord) -> Any:
    response = StatementImportResponse(statement=record, calculator_inputs=calculator_inputs(record))
    return jsonify(response.model_dump())


@api_bp.get("/health")
def health() -> Any:
    """Health-check endpoint."""
    response = HealthResponse(status="ok", version=current_app.config["VERSION"])
    return jsonify(response.model_dump())


@api_bp.post("/calc/projection")
def projection() -> Any:
    """Project PF growth from salary, rates and an optional increment policy."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = ProjectionRequest.model_validate(raw_payload)
    result = project(
        salary=payload.salary,
        employee_rate=payload.employee_rate,
        employer_rate=payload.employer_rate,
        annual_interest_rate=payload.annual_interest_rate,
        years=payload.years,
        increment_policy=payload.increment_policy,
    )
    logger.info(
        "projected %d year(s), increments=%s, maturity=%.2f",
        payload.years,
        result.increments_applied,
        result.maturity_amount,
    )
    response = ProjectionResponse(result=result, series=growth_series(result))
    return jsonify(response.model_dump())


@api_bp.post("/statements/import")
def import_statement() -> Any:
    """Import a statement from an uploaded CSV file or raw text."""
    upload = request.files.get("file")
    if upload is not None:
        filename = upload.filename or ""
        if upload.mimetype != "text/csv" and not filename.lower().endswith(".csv"):
            raise StatementFormatError(["please upload a CSV file"])
        try:
            raw_text = upload.read().decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise StatementFormatError(["statement file is not valid UTF-8 text"]) from exc
    else:
        payload = StatementImportRequest.model_validate(request.get_json(force=True, silent=False))
        raw_text = payload.text

    record = parse_statement(raw_text)
    logger.info("imported statement for %d", record.year)
    return _statement_response(record)


@api_bp.post("/statements/manual")
def manual_statement() -> Any:
    """Build a statement from hand-entered fields."""
    payload = ManualStatementRequest.model_validate(request.get_json(force=True, silent=False))
    record = from_manual_fields(payload.model_dump())
    logger.info("accepted manual statement for %d", record.year)
    return _statement_response(record)


@api_bp.post("/statements/projection")
def statement_projection() -> Any:
    """Project an imported statement forward to a target year."""
    payload = ContinuationRequest.model_validate(request.get_json(force=True, silent=False))
    result = continuation_project(
        payload.statement,
        target_year=payload.target_year,
        annual_interest_rate=payload.annual_interest_rate,
    )
    logger.info(
        "projected statement %d to %d, final=%.2f",
        payload.statement.year,
        payload.target_year,
        result.final_balance,
    )
    response = ContinuationResponse(result=result, series=continuation_series(result))
    return jsonify(response.model_dump())
