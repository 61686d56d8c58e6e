"""
Financial calculation API endpoints.

These endpoints accept calculator inputs and return the full engine
results. Every numeric field is optional; missing values count as 0.
"""

import logging
from dataclasses import asdict
from fastapi import APIRouter
from pydantic import BaseModel
from typing import List, Optional

from fincalc.config import get_settings
from fincalc.calculations import amortization
from fincalc.calculations.buyd import BorrowMode, BuydInputs, simulate_buyd
from fincalc.calculations.debt_payoff import (
    DebtInput,
    DebtStrategy,
    get_priority_order,
    simulate_debt_payoff,
)
from fincalc.calculations.growth import (
    DEFAULT_MILESTONE_YEARS,
    DEFAULT_RATE_SCENARIOS,
    GrowthInputs,
    project_growth,
)
from fincalc.calculations.valuation import PropertyAssumptions, calculate_metrics

logger = logging.getLogger(__name__)

router = APIRouter()


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    principal: Optional[float] = None
    annual_rate_percent: Optional[float] = None
    term_years: Optional[float] = None


class PropertyInput(BaseModel):
    """Input for property analysis."""

    # Purchase
    purchase_price: Optional[float] = None
    renovation_cost: Optional[float] = None
    closing_costs: Optional[float] = None

    # Financing
    down_payment_percent: Optional[float] = None
    interest_rate: Optional[float] = None
    loan_term_years: Optional[float] = None

    # Income
    monthly_rent: Optional[float] = None
    other_monthly_income: Optional[float] = None
    vacancy_rate_percent: Optional[float] = None

    # Expenses
    management_fee_percent: Optional[float] = None
    property_tax_yearly: Optional[float] = None
    insurance_yearly: Optional[float] = None
    hoa_monthly: Optional[float] = None
    utilities_monthly: Optional[float] = None
    maintenance_percent: Optional[float] = None
    other_monthly_expenses: Optional[float] = None

    def to_assumptions(self) -> PropertyAssumptions:
        return PropertyAssumptions(**self.model_dump())


class BuydInput(BaseModel):
    """Input for the leveraged-asset simulation."""

    # Asset
    initial_asset_value: Optional[float] = None
    growth_rate_percent: Optional[float] = None
    income_yield_percent: Optional[float] = None
    income_growth_rate_percent: Optional[float] = None
    annual_expenses: Optional[float] = None
    expense_growth_rate_percent: Optional[float] = None

    # Debt
    initial_debt: Optional[float] = None
    interest_rate_percent: Optional[float] = None
    target_ltv_percent: Optional[float] = None
    lender_max_ltv_percent: Optional[float] = None
    borrow_mode: BorrowMode = BorrowMode.max_safe
    yearly_spend: Optional[float] = None

    # Household
    living_expenses_per_year: Optional[float] = None
    cash_buffer_months: Optional[float] = None
    years: Optional[float] = None

    # Stress scenarios
    stress_crash_enabled: bool = False
    stress_crash_year: Optional[float] = None
    stress_crash_drop_percent: Optional[float] = None
    stress_rate_spike_enabled: bool = False
    stress_rate_spike_start_year: Optional[float] = None
    stress_rate_spike_increase_percent: Optional[float] = None
    stress_income_shock_enabled: bool = False
    stress_income_shock_year: Optional[float] = None
    stress_income_shock_percent: Optional[float] = None
    stress_expense_shock_enabled: bool = False
    stress_expense_shock_year: Optional[float] = None
    stress_expense_shock_percent: Optional[float] = None

    def to_inputs(self) -> BuydInputs:
        return BuydInputs(**self.model_dump())


class DebtItem(BaseModel):
    """A single debt."""

    id: str
    name: str = ""
    balance: Optional[float] = None
    apr: Optional[float] = None
    min_payment: Optional[float] = None

    def to_debt(self) -> DebtInput:
        return DebtInput(
            id=self.id,
            name=self.name,
            balance=self.balance or 0.0,
            apr=self.apr or 0.0,
            min_payment=self.min_payment or 0.0,
        )


class DebtPriorityInput(BaseModel):
    """Input for ordering debts by strategy."""

    debts: List[DebtItem] = []
    strategy: DebtStrategy = DebtStrategy.avalanche
    hybrid_threshold: Optional[float] = None

    def to_debts(self) -> List[DebtInput]:
        return [debt.to_debt() for debt in self.debts]


class DebtPayoffInput(DebtPriorityInput):
    """Input for the debt payoff simulation."""

    extra_payment: Optional[float] = None
    max_months: Optional[int] = None

    def resolved_max_months(self) -> int:
        if self.max_months is None:
            return get_settings().debt_max_months
        return self.max_months


class GrowthInput(BaseModel):
    """Input for the compound growth projection."""

    starting_balance: Optional[float] = None
    monthly_investment: Optional[float] = None
    current_age: Optional[float] = None
    inflation_rate_percent: Optional[float] = None
    compounding_frequency: Optional[int] = None
    rate_scenarios: List[float] = list(DEFAULT_RATE_SCENARIOS)
    milestone_years: List[int] = list(DEFAULT_MILESTONE_YEARS)

    def to_inputs(self) -> GrowthInputs:
        return GrowthInputs(**self.model_dump())


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput):
    """Generate loan amortization schedule."""
    result = amortization.compute_amortization(
        principal=inputs.principal,
        annual_rate_percent=inputs.annual_rate_percent,
        term_years=inputs.term_years,
    )

    return {
        "monthly_payment": result.monthly_payment,
        "yearly_schedule": [asdict(row) for row in result.yearly_schedule],
        "total_interest": amortization.calculate_total_interest(result.yearly_schedule),
        "total_principal": amortization.calculate_total_principal(result.yearly_schedule),
    }


@router.post("/property")
async def calculate_property(inputs: PropertyInput):
    """Calculate cash flow, valuation and score for a rental property."""
    return asdict(calculate_metrics(inputs.to_assumptions()))


@router.post("/buyd")
async def calculate_buyd(inputs: BuydInput):
    """Run the leveraged-asset simulation."""
    result = simulate_buyd(inputs.to_inputs())
    if result.break_year is not None:
        logger.debug(f"Leveraged-asset plan breaks in year {result.break_year}")
    return asdict(result)


@router.post("/debt-payoff")
async def calculate_debt_payoff(inputs: DebtPayoffInput):
    """Simulate paying off debts with the chosen strategy."""
    result = simulate_debt_payoff(
        debts=inputs.to_debts(),
        extra_payment=inputs.extra_payment,
        strategy=inputs.strategy,
        hybrid_threshold=inputs.hybrid_threshold,
        max_months=inputs.resolved_max_months(),
    )
    return asdict(result)


@router.post("/debt-priority")
async def calculate_debt_priority(inputs: DebtPriorityInput):
    """Order debts by the chosen strategy's payoff priority."""
    ordered = get_priority_order(
        inputs.to_debts(), inputs.strategy, inputs.hybrid_threshold
    )
    return {
        "strategy": inputs.strategy.value,
        "debts": [asdict(debt) for debt in ordered],
    }


@router.post("/growth")
async def calculate_growth(inputs: GrowthInput):
    """Project compound growth across rate scenarios."""
    return asdict(project_growth(inputs.to_inputs()))
