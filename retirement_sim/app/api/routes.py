"""HTTP routes for the Flask API."""

import logging
from datetime import datetime
from http import HTTPStatus
from typing import Any

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from retirement_sim.config import Settings
from retirement_sim.core.ping import get_ping_message
from retirement_sim.core.projection import (
    InvalidInput,
    effective_annual_rate,
    monthly_rate,
    simulate,
)
from retirement_sim.models import parse_params
from retirement_sim.schemas.ping import PingResponse
from retirement_sim.schemas.simulation import AssumptionsResponse, SimulationResponse

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)

DISCLAIMER = (
    "Values are estimates based on {fraction:.0f}% of the benchmark rate "
    "and may vary with market conditions."
)


def _settings() -> Settings:
    return current_app.config["SETTINGS"]


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return (
        jsonify({"detail": exc.errors(include_url=False, include_context=False)}),
        HTTPStatus.UNPROCESSABLE_ENTITY,
    )


@api_bp.errorhandler(InvalidInput)
def _handle_invalid_input(exc: InvalidInput):
    logger.warning("Rejected simulation input: %s", exc)
    return jsonify({"error": exc.errors}), HTTPStatus.BAD_REQUEST


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message=get_ping_message(), service=_settings().PROJECT_NAME)
    return jsonify(response.model_dump())


@api_bp.get("/retirement/assumptions")
def assumptions() -> Any:
    """Policy defaults used when a simulation request leaves them out."""
    settings = _settings()
    annual = effective_annual_rate(
        settings.ANNUAL_GROSS_RATE,
        settings.CONSERVATIVE_FRACTION,
        settings.ANNUAL_ADMIN_FEE_RATE,
    )
    response = AssumptionsResponse(
        **settings.policy_defaults(),
        effectiveAnnualRate=annual,
        monthlyRate=monthly_rate(annual),
        disclaimer=DISCLAIMER.format(fraction=settings.CONSERVATIVE_FRACTION * 100),
    )
    return jsonify(response.model_dump())


@api_bp.post("/retirement/simulate")
def simulation() -> Any:
    """Run the projection engine for either mode."""
    raw_payload = request.get_json(silent=True)
    if not isinstance(raw_payload, dict):
        return jsonify({"error": ["request body must be a JSON object"]}), HTTPStatus.BAD_REQUEST

    params = parse_params({**_settings().policy_defaults(), **raw_payload})
    result = simulate(params, current_year=datetime.now().year)

    logger.info(
        "Simulated %s over %d months: headline %.2f",
        result.mode.value,
        result.contributionMonths,
        result.headline,
    )
    response = SimulationResponse.from_result(result)
    return jsonify(response.model_dump(mode="json"))
