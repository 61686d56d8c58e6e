"""
Leveraged Asset ("Buy, Borrow, Die") Simulation

Year-by-year simulation of living off loans drawn against an appreciating,
income-producing asset. Each year is a pure transition from the prior
year's ending state and that year's stress schedule:

1. Asset growth, then a one-time crash in the crash year
2. Income-yield, expense and living-cost growth
3. Income and expense shocks in their shock years
4. Interest-rate spike, ramped in over two years
5. Cash flow, borrowing up to the safe LTV, cash buffer
6. Rule-breach checks (LTV, DSCR, buffer)

Percent inputs are raw percentages (e.g., 55 for 55% LTV).
"""

import enum
from typing import List, Literal, Optional, Tuple, Union
from dataclasses import dataclass, field

from fincalc.calculations._numbers import (
    clamp,
    round_half_up,
    safe_divide,
    to_non_negative,
    to_number,
)


class BorrowMode(str, enum.Enum):
    """How much to draw each year."""
    fixed = "fixed"  # Draw the yearly spend, capped by capacity
    max_safe = "maxSafe"  # Draw the full capacity


class RuleBreach(str, enum.Enum):
    """Safety rules a simulated year can break."""
    ltv_max = "ltvMax"
    dscr_low = "dscrLow"
    buffer_depleted = "bufferDepleted"


@dataclass(frozen=True)
class Borrowed:
    amount: int
    type: Literal["borrowed"] = "borrowed"


@dataclass(frozen=True)
class AssetCrash:
    percent: int
    type: Literal["assetCrash"] = "assetCrash"


@dataclass(frozen=True)
class RateSpike:
    percent: float
    type: Literal["rateSpike"] = "rateSpike"


@dataclass(frozen=True)
class IncomeShock:
    percent: int
    type: Literal["incomeShock"] = "incomeShock"


@dataclass(frozen=True)
class ExpenseShock:
    percent: int
    type: Literal["expenseShock"] = "expenseShock"


BuydEvent = Union[Borrowed, AssetCrash, RateSpike, IncomeShock, ExpenseShock]


@dataclass(frozen=True)
class BuydInputs:
    """Configuration for one simulation run."""

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
    borrow_mode: Union[BorrowMode, str] = BorrowMode.max_safe
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


@dataclass(frozen=True)
class BuydParameters:
    """Inputs normalized to decimals, with the horizon clamped to at least 1."""

    years: int
    growth_rate: float
    income_growth_rate: float
    expense_growth_rate: float
    interest_rate: float
    target_ltv: float
    lender_max_ltv: float
    max_safe: bool
    yearly_spend: float

    crash_enabled: bool
    crash_year: float
    crash_drop: float  # 0-1
    rate_spike_enabled: bool
    rate_spike_start_year: float
    rate_spike_increase_percent: float
    income_shock_enabled: bool
    income_shock_year: float
    income_shock_cut: float  # 0-1
    expense_shock_enabled: bool
    expense_shock_year: float
    expense_shock_bump: float  # 0-1


@dataclass(frozen=True)
class YearStress:
    """Stress applied in one simulated year."""

    crash_drop: Optional[float] = None
    income_cut: Optional[float] = None
    expense_bump: Optional[float] = None
    rate_increase: float = 0.0
    rate_spike_begins: bool = False
    rate_spike_percent: float = 0.0


@dataclass(frozen=True)
class BuydState:
    """Ending position of a simulated year."""

    asset_value: float
    debt_balance: float
    income_yield_base: float
    annual_expenses: float
    living_expenses: float
    cash_buffer: float


@dataclass(frozen=True)
class BuydYear:
    """Snapshot of one simulated year."""

    year: int
    asset_value: float
    debt_balance: float
    ltv: float
    cash_flow: float
    borrow_capacity: float
    borrowed_this_year: float
    dscr: float
    cash_buffer: float
    buffer_months: float
    rule_breaches: List[RuleBreach] = field(default_factory=list)
    events: List[BuydEvent] = field(default_factory=list)


@dataclass(frozen=True)
class BuydResult:
    """Full year series plus the final-year position."""

    years: List[BuydYear]
    current_net_worth: float
    current_ltv: float
    current_cash_flow: float
    current_borrow_capacity: float
    current_dscr: float
    current_cash_buffer: float
    current_buffer_months: float
    break_year: Optional[int] = None


def _percent_share(value) -> float:
    """Raw percentage clamped to 0-100, as a 0-1 share."""
    return clamp(to_number(value), 0, 100) / 100


def normalize_inputs(inputs: BuydInputs) -> BuydParameters:
    """Convert raw inputs into the decimals the simulation works with."""
    return BuydParameters(
        years=max(1, round_half_up(to_number(inputs.years))),
        growth_rate=to_number(inputs.growth_rate_percent) / 100,
        income_growth_rate=to_number(inputs.income_growth_rate_percent) / 100,
        expense_growth_rate=to_number(inputs.expense_growth_rate_percent) / 100,
        interest_rate=to_number(inputs.interest_rate_percent) / 100,
        target_ltv=to_number(inputs.target_ltv_percent) / 100,
        lender_max_ltv=to_number(inputs.lender_max_ltv_percent) / 100,
        max_safe=inputs.borrow_mode == BorrowMode.max_safe,
        yearly_spend=to_non_negative(inputs.yearly_spend),
        crash_enabled=bool(inputs.stress_crash_enabled),
        crash_year=to_number(inputs.stress_crash_year),
        crash_drop=_percent_share(inputs.stress_crash_drop_percent),
        rate_spike_enabled=bool(inputs.stress_rate_spike_enabled),
        rate_spike_start_year=to_number(inputs.stress_rate_spike_start_year),
        rate_spike_increase_percent=to_non_negative(
            inputs.stress_rate_spike_increase_percent
        ),
        income_shock_enabled=bool(inputs.stress_income_shock_enabled),
        income_shock_year=to_number(inputs.stress_income_shock_year),
        income_shock_cut=_percent_share(inputs.stress_income_shock_percent),
        expense_shock_enabled=bool(inputs.stress_expense_shock_enabled),
        expense_shock_year=to_number(inputs.stress_expense_shock_year),
        expense_shock_bump=_percent_share(inputs.stress_expense_shock_percent),
    )


def initial_state(inputs: BuydInputs) -> BuydState:
    """Starting position before year 1."""
    living_expenses = to_non_negative(inputs.living_expenses_per_year)
    return BuydState(
        asset_value=to_non_negative(inputs.initial_asset_value),
        debt_balance=to_non_negative(inputs.initial_debt),
        income_yield_base=to_number(inputs.income_yield_percent) / 100,
        annual_expenses=to_non_negative(inputs.annual_expenses),
        living_expenses=living_expenses,
        cash_buffer=living_expenses / 12 * to_non_negative(inputs.cash_buffer_months),
    )


def stress_for_year(params: BuydParameters, year: int) -> YearStress:
    """
    Build the static stress schedule for a year.

    The rate spike adds half the increase in its first year and the full
    increase from the second year on.
    """
    crash_drop = None
    if params.crash_enabled and year == params.crash_year:
        crash_drop = params.crash_drop

    income_cut = None
    if params.income_shock_enabled and year == params.income_shock_year:
        income_cut = params.income_shock_cut

    expense_bump = None
    if params.expense_shock_enabled and year == params.expense_shock_year:
        expense_bump = params.expense_shock_bump

    rate_increase = 0.0
    rate_spike_begins = False
    if params.rate_spike_enabled and year >= params.rate_spike_start_year:
        years_since_start = year - params.rate_spike_start_year + 1
        ramp = min(2, years_since_start) / 2
        rate_increase = params.rate_spike_increase_percent / 100 * ramp
        # A start year before year 1 is first felt in year 1
        rate_spike_begins = year == 1 or year - 1 < params.rate_spike_start_year

    return YearStress(
        crash_drop=crash_drop,
        income_cut=income_cut,
        expense_bump=expense_bump,
        rate_increase=rate_increase,
        rate_spike_begins=rate_spike_begins,
        rate_spike_percent=params.rate_spike_increase_percent,
    )


def calculate_borrow_capacity(
    asset_value: float, debt_balance: float, target_ltv: float, lender_max_ltv: float
) -> float:
    """Headroom to the lower of the target LTV and the lender's maximum LTV."""
    to_target = max(0.0, target_ltv * asset_value - debt_balance)
    to_lender_max = max(0.0, lender_max_ltv * asset_value - debt_balance)
    return min(to_target, to_lender_max)


def advance_year(
    state: BuydState, year: int, params: BuydParameters, stress: YearStress
) -> Tuple[BuydState, BuydYear]:
    """
    Apply one simulated year to the prior year's ending state.

    Args:
        state: Ending position of the previous year
        year: 1-based year being simulated
        params: Normalized run parameters
        stress: Stress schedule for this year

    Returns:
        The new ending state and the year's snapshot
    """
    events: List[BuydEvent] = []

    # === ASSET ===
    asset_value = state.asset_value * (1 + params.growth_rate)
    if stress.crash_drop is not None:
        asset_value *= 1 - stress.crash_drop
        events.append(AssetCrash(percent=round_half_up(stress.crash_drop * 100)))

    # === GROWTH OF BASES ===
    income_yield_base = state.income_yield_base * (1 + params.income_growth_rate)
    annual_expenses = state.annual_expenses * (1 + params.expense_growth_rate)
    living_expenses = state.living_expenses * (1 + params.expense_growth_rate)

    # === SHOCKS ===
    effective_yield = income_yield_base
    if stress.income_cut is not None:
        effective_yield = income_yield_base * (1 - stress.income_cut)
        events.append(IncomeShock(percent=round_half_up(stress.income_cut * 100)))

    effective_expenses = annual_expenses
    if stress.expense_bump is not None:
        effective_expenses = annual_expenses * (1 + stress.expense_bump)
        events.append(ExpenseShock(percent=round_half_up(stress.expense_bump * 100)))

    effective_rate = params.interest_rate + stress.rate_increase
    if stress.rate_spike_begins:
        events.append(RateSpike(percent=stress.rate_spike_percent))

    # === CASH FLOW ===
    income = asset_value * effective_yield
    interest = state.debt_balance * effective_rate
    cash_flow = income - effective_expenses - interest

    # === BORROWING ===
    capacity = calculate_borrow_capacity(
        asset_value, state.debt_balance, params.target_ltv, params.lender_max_ltv
    )
    if params.max_safe:
        borrow = capacity
    else:
        borrow = min(capacity, params.yearly_spend)

    if borrow > 0:
        events.append(Borrowed(amount=round_half_up(borrow)))

    debt_balance = state.debt_balance + borrow
    ltv = safe_divide(debt_balance, asset_value)
    dscr = safe_divide(income, interest)

    # === CASH BUFFER ===
    cash_buffer = state.cash_buffer + (cash_flow - living_expenses)
    buffer_months = safe_divide(cash_buffer, living_expenses / 12)

    # === RULES ===
    rule_breaches = []
    if ltv > params.lender_max_ltv:
        rule_breaches.append(RuleBreach.ltv_max)
    # No interest means nothing to cover
    if interest > 0 and dscr < 1:
        rule_breaches.append(RuleBreach.dscr_low)
    if cash_buffer < 0:
        rule_breaches.append(RuleBreach.buffer_depleted)

    next_state = BuydState(
        asset_value=asset_value,
        debt_balance=debt_balance,
        income_yield_base=income_yield_base,
        annual_expenses=annual_expenses,
        living_expenses=living_expenses,
        cash_buffer=cash_buffer,
    )
    snapshot = BuydYear(
        year=year,
        asset_value=asset_value,
        debt_balance=debt_balance,
        ltv=ltv,
        cash_flow=cash_flow,
        borrow_capacity=capacity,
        borrowed_this_year=borrow,
        dscr=dscr,
        cash_buffer=cash_buffer,
        buffer_months=buffer_months,
        rule_breaches=rule_breaches,
        events=events,
    )
    return next_state, snapshot


def simulate_buyd(inputs: BuydInputs) -> BuydResult:
    """
    Run the leveraged-asset simulation over the configured horizon.

    Args:
        inputs: Asset, debt, household and stress configuration

    Returns:
        BuydResult with one snapshot per year, the final position and the
        first year any rule was broken (None if none was)
    """
    params = normalize_inputs(inputs)
    state = initial_state(inputs)

    series = []
    break_year = None

    for year in range(1, params.years + 1):
        state, snapshot = advance_year(state, year, params, stress_for_year(params, year))
        series.append(snapshot)

        if snapshot.rule_breaches and break_year is None:
            break_year = year

    final = series[-1]
    return BuydResult(
        years=series,
        current_net_worth=state.asset_value - state.debt_balance,
        current_ltv=final.ltv,
        current_cash_flow=final.cash_flow,
        current_borrow_capacity=final.borrow_capacity,
        current_dscr=final.dscr,
        current_cash_buffer=final.cash_buffer,
        current_buffer_months=final.buffer_months,
        break_year=break_year,
    )
