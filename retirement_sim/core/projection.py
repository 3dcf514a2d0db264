from __future__ import annotations

import math
from datetime import datetime
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from retirement_sim.models import ContributionParams, IncomeParams, Mode

MIN_CURRENT_AGE = 18
MAX_RETIREMENT_AGE = 90

# Below this magnitude the monthly rate is treated as exactly zero.
DEGENERATE_RATE_TOLERANCE = 1e-12


class InvalidInput(ValueError):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class YearlyProjectionRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    age: int
    annualContribution: float
    annualLoadingFees: float
    annualEarnings: float
    accumulatedBalance: float


class SimulationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

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

    projection: List[YearlyProjectionRow]

    @property
    def headline(self) -> float:
        """Income for project_income runs, contribution for required_contribution runs."""
        if self.requiredMonthlyContribution is not None:
            return self.requiredMonthlyContribution
        return self.monthlyRetirementIncome


Params = Union[IncomeParams, ContributionParams]


def effective_annual_rate(gross_rate: float, conservative_fraction: float, admin_fee_rate: float) -> float:
    """Benchmark rate scaled to the conservative allocation, net of the admin fee."""
    return gross_rate * conservative_fraction - admin_fee_rate


def _params_annual_rate(params: Params) -> float:
    return effective_annual_rate(
        params.annualGrossRate, params.conservativeFraction, params.annualAdminFeeRate
    )


def monthly_rate(annual_rate: float) -> float:
    """Decompound an annual rate: (1 + annual)^(1/12) - 1."""
    return (1.0 + annual_rate) ** (1.0 / 12.0) - 1.0


def is_degenerate_rate(rate: float) -> bool:
    return abs(rate) < DEGENERATE_RATE_TOLERANCE


def check_params(params: Params) -> List[str]:
    """Return every violated precondition; an empty list means the run can proceed."""
    errors: List[str] = []

    numbers = {
        "initialContribution": params.initialContribution,
        "annualGrossRate": params.annualGrossRate,
        "conservativeFraction": params.conservativeFraction,
        "annualAdminFeeRate": params.annualAdminFeeRate,
        "loadingFeeRate": params.loadingFeeRate,
    }
    if isinstance(params, IncomeParams):
        numbers["monthlyContribution"] = params.monthlyContribution
    else:
        numbers["desiredMonthlyIncome"] = params.desiredMonthlyIncome

    non_finite = [name for name, value in numbers.items() if not math.isfinite(value)]
    for name in non_finite:
        errors.append(f"{name} must be a finite number")

    if params.currentAge < MIN_CURRENT_AGE:
        errors.append(f"currentAge must be at least {MIN_CURRENT_AGE}")
    if params.retirementAge > MAX_RETIREMENT_AGE:
        errors.append(f"retirementAge must be at most {MAX_RETIREMENT_AGE}")
    if params.retirementAge <= params.currentAge:
        errors.append("retirementAge must be greater than currentAge")
    if params.lifeExpectancy <= params.retirementAge:
        errors.append("lifeExpectancy must be greater than retirementAge")

    if non_finite:
        # range checks below are meaningless on nan/inf
        return errors

    if params.initialContribution < 0:
        errors.append("initialContribution must not be negative")
    if params.annualAdminFeeRate < 0:
        errors.append("annualAdminFeeRate must not be negative")
    if not 0 <= params.loadingFeeRate < 1:
        errors.append("loadingFeeRate must be in [0, 1)")
    if not 0 < params.conservativeFraction <= 1:
        errors.append("conservativeFraction must be in (0, 1]")
    if _params_annual_rate(params) <= -1:
        errors.append("effective annual rate must be greater than -100%")

    if isinstance(params, IncomeParams) and params.monthlyContribution <= 0:
        errors.append("monthlyContribution must be greater than zero")
    if isinstance(params, ContributionParams) and params.desiredMonthlyIncome <= 0:
        errors.append("desiredMonthlyIncome must be greater than zero")

    if not errors and not _within_range(params):
        errors.append("projection exceeds representable range")

    return errors


def _within_range(params: Params) -> bool:
    """Whether the horizon growth and the balances it drives stay finite floats."""
    try:
        growth = math.pow(1.0 + monthly_rate(_params_annual_rate(params)), params.contribution_months)
    except OverflowError:
        return False
    if isinstance(params, IncomeParams):
        scale = params.initialContribution + params.monthlyContribution * params.contribution_months
    else:
        scale = params.initialContribution + params.desiredMonthlyIncome * params.retirement_months
    return math.isfinite(growth) and math.isfinite(scale * max(growth, 1.0))


def required_payment(adjusted_capital: float, rate: float, periods: int) -> float:
    """
    Level payment that grows to ``adjusted_capital`` after ``periods`` months.

    Payments are credited at the start of each month and earn that month's
    growth, so the future-value factor is ((1 + r)^n - 1) / r * (1 + r).
    With a degenerate rate the factor collapses to n.
    """
    if is_degenerate_rate(rate):
        return adjusted_capital / periods
    growth = (1.0 + rate) ** periods
    return adjusted_capital * rate / ((growth - 1.0) * (1.0 + rate))


def _accumulate(
    params: Params,
    nominal_contribution: float,
    rate: float,
    year0: int,
) -> Tuple[List[YearlyProjectionRow], float, float, float]:
    """
    Month-by-month accumulation shared by both modes.

    Order of operations (per month):
      1) Deposit the contribution net of the loading fee.
      2) Credit one month of growth on the whole balance.

    Returns (rows, capital, total_contributed, total_loading_fees).
    """
    net_contribution = nominal_contribution * (1.0 - params.loadingFeeRate)
    fee = nominal_contribution - net_contribution

    capital = float(params.initialContribution)
    total_contributed = float(params.initialContribution)
    total_fees = 0.0

    rows: List[YearlyProjectionRow] = []
    for elapsed in range(1, params.retirementAge - params.currentAge + 1):
        annual_contribution = 0.0
        annual_fees = 0.0
        annual_earnings = 0.0

        for _ in range(12):
            capital += net_contribution
            earnings = capital * rate
            capital += earnings

            annual_contribution += nominal_contribution
            annual_fees += fee
            annual_earnings += earnings

        total_contributed += annual_contribution
        total_fees += annual_fees

        rows.append(
            YearlyProjectionRow(
                year=year0 + elapsed,
                age=params.currentAge + elapsed,
                annualContribution=annual_contribution,
                annualLoadingFees=annual_fees,
                annualEarnings=annual_earnings,
                accumulatedBalance=capital,
            )
        )

    return rows, capital, total_contributed, total_fees


def simulate(params: Params, current_year: Optional[int] = None) -> SimulationResult:
    """
    Project a retirement plan for either mode.

    project_income:
        accumulate the given contribution, then spread the final capital
        evenly over the retirement months (no growth after retirement).
    required_contribution:
        solve for the contribution whose accumulation reaches
        desiredMonthlyIncome * retirementMonths, then accumulate it so the
        rows match the headline number.

    Raises InvalidInput before computing anything if a precondition fails.
    """
    errors = check_params(params)
    if errors:
        raise InvalidInput(errors)

    year0 = current_year if current_year is not None else datetime.now().year

    annual = _params_annual_rate(params)
    rate = monthly_rate(annual)
    months = params.contribution_months
    retirement_months = params.retirement_months

    required_contribution: Optional[float] = None
    required_capital: Optional[float] = None

    if isinstance(params, ContributionParams):
        required_capital = params.desiredMonthlyIncome * retirement_months
        if is_degenerate_rate(rate):
            adjusted_capital = required_capital - params.initialContribution
        else:
            adjusted_capital = required_capital - params.initialContribution * (1.0 + rate) ** months
        payment = required_payment(adjusted_capital, rate, months)
        # initial lump sum alone already reaches the target
        required_contribution = max(0.0, payment / (1.0 - params.loadingFeeRate))
        nominal = required_contribution
    else:
        nominal = params.monthlyContribution

    rows, capital, total_contributed, total_fees = _accumulate(params, nominal, rate, year0)

    return SimulationResult(
        mode=params.mode,
        monthlyRetirementIncome=capital / retirement_months,
        requiredMonthlyContribution=required_contribution,
        requiredCapital=required_capital,
        totalAccumulated=capital,
        totalContributed=total_contributed,
        totalEarnings=capital - total_contributed,
        totalLoadingFees=total_fees,
        effectiveAnnualRate=annual,
        monthlyRate=rate,
        contributionMonths=months,
        retirementMonths=retirement_months,
        projection=rows,
    )


__all__ = [
    "DEGENERATE_RATE_TOLERANCE",
    "MAX_RETIREMENT_AGE",
    "MIN_CURRENT_AGE",
    "InvalidInput",
    "SimulationResult",
    "YearlyProjectionRow",
    "check_params",
    "effective_annual_rate",
    "is_degenerate_rate",
    "monthly_rate",
    "required_payment",
    "simulate",
]
