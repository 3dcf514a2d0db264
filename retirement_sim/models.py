from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

# Policy constants of the simulator; overridable per request or via settings.
DEFAULT_ANNUAL_GROSS_RATE = 0.1165  # benchmark CDI rate
DEFAULT_CONSERVATIVE_FRACTION = 0.85
DEFAULT_ANNUAL_ADMIN_FEE_RATE = 0.015
DEFAULT_LOADING_FEE_RATE = 0.005
DEFAULT_LIFE_EXPECTANCY = 85


class Mode(str, Enum):
    PROJECT_INCOME = "project_income"
    REQUIRED_CONTRIBUTION = "required_contribution"


class _BaseParams(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    currentAge: int
    retirementAge: int
    lifeExpectancy: int = DEFAULT_LIFE_EXPECTANCY
    initialContribution: float = 0.0

    annualGrossRate: float = DEFAULT_ANNUAL_GROSS_RATE
    conservativeFraction: float = DEFAULT_CONSERVATIVE_FRACTION
    annualAdminFeeRate: float = DEFAULT_ANNUAL_ADMIN_FEE_RATE
    loadingFeeRate: float = DEFAULT_LOADING_FEE_RATE

    @property
    def contribution_months(self) -> int:
        return max(0, self.retirementAge - self.currentAge) * 12

    @property
    def retirement_months(self) -> int:
        return (self.lifeExpectancy - self.retirementAge) * 12


class IncomeParams(_BaseParams):
    """Solve for the monthly income a fixed contribution buys."""

    mode: Literal["project_income"] = "project_income"
    monthlyContribution: float


class ContributionParams(_BaseParams):
    """Solve for the monthly contribution a target income requires."""

    mode: Literal["required_contribution"] = "required_contribution"
    desiredMonthlyIncome: float


SimulationParams = Annotated[
    Union[IncomeParams, ContributionParams],
    Field(discriminator="mode"),
]

_params_adapter: TypeAdapter[SimulationParams] = TypeAdapter(SimulationParams)


def parse_params(payload: Any) -> Union[IncomeParams, ContributionParams]:
    """Validate a raw payload into the variant selected by its ``mode``."""
    return _params_adapter.validate_python(payload)


__all__ = [
    "DEFAULT_ANNUAL_ADMIN_FEE_RATE",
    "DEFAULT_ANNUAL_GROSS_RATE",
    "DEFAULT_CONSERVATIVE_FRACTION",
    "DEFAULT_LIFE_EXPECTANCY",
    "DEFAULT_LOADING_FEE_RATE",
    "ContributionParams",
    "IncomeParams",
    "Mode",
    "SimulationParams",
    "parse_params",
]
