"""
Compound Growth Projection

Projects a starting balance plus monthly contributions across several
return scenarios, in nominal and inflation-adjusted terms.
"""

from typing import List, Optional, Sequence
from dataclasses import dataclass, field

from fincalc.calculations._numbers import power, round_half_up, to_non_negative, to_number

DEFAULT_RATE_SCENARIOS = (4.0, 6.0, 8.0, 10.0, 12.0)
DEFAULT_MILESTONE_YEARS = (5, 10, 15, 20, 25)
DEFAULT_COMPOUNDING_FREQUENCY = 12


@dataclass(frozen=True)
class GrowthInputs:
    starting_balance: Optional[float] = None
    monthly_investment: Optional[float] = None
    current_age: Optional[float] = None
    inflation_rate_percent: Optional[float] = None
    compounding_frequency: Optional[int] = None
    rate_scenarios: Sequence[float] = DEFAULT_RATE_SCENARIOS
    milestone_years: Sequence[int] = DEFAULT_MILESTONE_YEARS


@dataclass(frozen=True)
class GrowthPoint:
    rate_percent: float
    years: int
    age: int
    nominal: float
    real: float
    total_invested: float


@dataclass(frozen=True)
class GrowthProjection:
    points: List[GrowthPoint] = field(default_factory=list)


def compound_balance(
    principal: float, annual_rate_percent: float, frequency: int, years: float
) -> float:
    """
    Grow a lump sum with periodic compounding.

    Args:
        principal: Starting balance
        annual_rate_percent: Annual rate as a percentage
        frequency: Compounding periods per year
        years: Years of growth

    Returns:
        Balance after `years`
    """
    if principal <= 0:
        return 0.0
    if annual_rate_percent <= 0:
        return principal
    if frequency < 1:
        frequency = DEFAULT_COMPOUNDING_FREQUENCY

    rate = annual_rate_percent / 100
    return principal * power(1 + rate / frequency, frequency * years)


def contribution_value(
    monthly_investment: float, annual_rate_percent: float, years: float
) -> float:
    """Future value of contributions made at the start of each month."""
    if monthly_investment <= 0:
        return 0.0
    monthly_rate = annual_rate_percent / 100 / 12
    total_months = years * 12

    if monthly_rate == 0:
        return monthly_investment * total_months

    return (
        monthly_investment
        * ((power(1 + monthly_rate, total_months) - 1) / monthly_rate)
        * (1 + monthly_rate)
    )


def project_growth(inputs: GrowthInputs) -> GrowthProjection:
    """
    Project nominal and real balances for every rate scenario and milestone.

    Returns:
        GrowthProjection with one point per (rate, milestone) pair, ordered
        by rate then milestone
    """
    starting_balance = to_non_negative(inputs.starting_balance)
    monthly_investment = to_non_negative(inputs.monthly_investment)
    current_age = round_half_up(to_non_negative(inputs.current_age))
    inflation = to_number(inputs.inflation_rate_percent) / 100
    frequency = int(to_number(inputs.compounding_frequency)) or DEFAULT_COMPOUNDING_FREQUENCY

    points = []
    for rate in inputs.rate_scenarios:
        rate = to_number(rate)
        for years in inputs.milestone_years:
            years = max(0, int(to_number(years)))
            nominal = compound_balance(
                starting_balance, rate, frequency, years
            ) + contribution_value(monthly_investment, rate, years)
            deflator = power(1 + inflation, years)
            real = nominal / deflator if deflator > 0 else 0.0

            points.append(
                GrowthPoint(
                    rate_percent=rate,
                    years=years,
                    age=current_age + years,
                    nominal=nominal,
                    real=real,
                    total_invested=monthly_investment * 12 * years,
                )
            )

    return GrowthProjection(points=points)
