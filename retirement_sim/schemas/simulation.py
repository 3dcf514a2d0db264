"""Data contracts returned by the simulation endpoints."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer

from retirement_sim.core.projection import SimulationResult
from retirement_sim.models import Mode

CURRENCY_PLACES = 2
RATE_PLACES = 8


def to_cents(value: Optional[float]) -> Optional[float]:
    """Round a currency amount for display; None passes through."""
    if value is None:
        return None
    return round(value, CURRENCY_PLACES)


class ProjectionRowOut(BaseModel):
    """Single year of the contribution phase."""

    year: int = Field(..., description="Calendar year the row closes.")
    age: int = Field(..., description="Age at the end of the year.")
    annualContribution: float = Field(..., description="Amount paid in during the year, before fees.")
    annualLoadingFees: float = Field(..., description="Loading fees taken from the year's contributions.")
    annualEarnings: float = Field(..., description="Growth credited during the year.")
    accumulatedBalance: float = Field(..., description="Balance at the end of the year.")

    @field_serializer("annualContribution", "annualLoadingFees", "annualEarnings", "accumulatedBalance")
    def serialize_currency(self, value: float) -> float:
        return to_cents(value)


class SimulationResponse(BaseModel):
    """Headline numbers plus the year-by-year projection."""

    mode: Mode
    monthlyRetirementIncome: float
    requiredMonthlyContribution: Optional[float] = None
    requiredCapital: Optional[float] = None

    totalAccumulated: float
    totalContributed: float
    totalEarnings: float
    totalLoadingFees: float

    effectiveAnnualRate: float
    monthlyRate: float
    contributionMonths: int
    retirementMonths: int

    projection: List[ProjectionRowOut]

    @field_serializer(
        "monthlyRetirementIncome",
        "requiredMonthlyContribution",
        "requiredCapital",
        "totalAccumulated",
        "totalContributed",
        "totalEarnings",
        "totalLoadingFees",
    )
    def serialize_currency(self, value: Optional[float]) -> Optional[float]:
        return to_cents(value)

    @field_serializer("effectiveAnnualRate", "monthlyRate")
    def serialize_rate(self, value: float) -> float:
        return round(value, RATE_PLACES)

    @classmethod
    def from_result(cls, result: SimulationResult) -> "SimulationResponse":
        return cls.model_validate(result.model_dump())


class AssumptionsResponse(BaseModel):
    """Policy defaults applied when a request leaves them out."""

    annualGrossRate: float
    conservativeFraction: float
    annualAdminFeeRate: float
    loadingFeeRate: float
    lifeExpectancy: int
    effectiveAnnualRate: float
    monthlyRate: float
    disclaimer: str
