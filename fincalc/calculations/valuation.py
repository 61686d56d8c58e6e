"""
Property Valuation Calculations

Monthly cash flow, owner-earnings DCF, stress test and investment score
for a single rental property. Percent inputs are raw percentages
(e.g., 5 for 5%) and are divided by 100 where they are used.
"""

from typing import List, Optional, Tuple
from dataclasses import dataclass, field

from fincalc.calculations._numbers import (
    clamp,
    round_half_up,
    safe_divide,
    to_non_negative,
)
from fincalc.calculations.amortization import (
    AmortizationYear,
    balance_at_year,
    calculate_payment,
    compute_amortization,
    term_in_months,
)
from fincalc.calculations.discounting import (
    present_value_of_annuity,
    present_value_of_terminal,
)

DEFAULT_LOAN_TERM_YEARS = 30

# Conservative owner-earnings assumptions
CAPEX_RESERVE_PERCENT = 5.0
REQUIRED_RETURN = 0.10
HOLDING_PERIOD_YEARS = 10
TERMINAL_CAP_RATE = 0.08

# Stress scenario
STRESS_INCOME_FACTOR = 0.8
STRESS_VACANCY_BUMP = 10.0
STRESS_EXPENSE_FACTOR = 1.15
STRESS_RATE_BUMP = 2.0

# Score targets that earn a full component score
TARGET_CASH_ON_CASH = 12.0
TARGET_CAP_RATE = 8.0
TARGET_MONTHLY_CASH_FLOW = 500.0

GRADE_BANDS = [
    (90, "A+"),
    (80, "A"),
    (70, "B"),
    (60, "C"),
    (50, "D"),
]

APPRECIATION_RATE = 0.02
PROJECTION_YEARS = 30


@dataclass(frozen=True)
class PropertyAssumptions:
    """Purchase, financing, income and expense inputs for one property."""

    # Purchase
    purchase_price: Optional[float] = None
    renovation_cost: Optional[float] = None
    closing_costs: Optional[float] = None

    # Financing
    down_payment_percent: Optional[float] = None
    interest_rate: Optional[float] = None  # Annual, e.g. 6.5 for 6.5%
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


@dataclass(frozen=True)
class ProfitYear:
    """Cumulative wealth position at the end of a holding year."""

    year: int
    cumulative_cash_flow: float
    equity: float
    total_value: float


@dataclass(frozen=True)
class CalculationResult:
    """Every derived metric for one set of property assumptions."""

    monthly_mortgage: float
    monthly_principal: float
    monthly_interest: float
    total_monthly_expenses: float
    monthly_noi: float
    monthly_cash_flow: float
    owner_earnings_monthly: float
    owner_earnings_annual: float
    earnings_yield: float
    intrinsic_value: float
    margin_of_safety: float
    stress_test_cash_flow: float
    stress_test_pass: bool
    cap_rate: float
    cash_on_cash: float
    investment_score: int
    investment_grade: str
    total_initial_cash: float
    loan_amount: float
    yearly_amortization: List[AmortizationYear] = field(default_factory=list)
    cumulative_profit: List[ProfitYear] = field(default_factory=list)


def calculate_operating_expenses(
    gross_income: float,
    fixed_monthly_expenses: float,
    management_fee_percent: float,
    maintenance_percent: float,
) -> float:
    """
    Calculate total monthly operating expenses.

    Management and maintenance are charged on gross (pre-vacancy) income.
    """
    management = gross_income * (management_fee_percent / 100)
    maintenance = gross_income * (maintenance_percent / 100)
    return fixed_monthly_expenses + management + maintenance


def calculate_intrinsic_value(owner_earnings_annual: float) -> float:
    """
    Value owner earnings with a 10-year DCF plus a capitalized terminal value.

    Args:
        owner_earnings_annual: Annual owner earnings, held flat

    Returns:
        Intrinsic value, or 0 when owner earnings are not positive
    """
    if owner_earnings_annual <= 0:
        return 0.0

    dcf_value = present_value_of_annuity(
        owner_earnings_annual, REQUIRED_RETURN, HOLDING_PERIOD_YEARS
    )
    terminal_value = present_value_of_terminal(
        owner_earnings_annual, TERMINAL_CAP_RATE, REQUIRED_RETURN, HOLDING_PERIOD_YEARS
    )
    return dcf_value + terminal_value


def calculate_margin_of_safety(intrinsic_value: float, price: float) -> float:
    """Discount of price to intrinsic value, as a percentage of intrinsic value."""
    if intrinsic_value <= 0:
        return 0.0
    return (intrinsic_value - price) / intrinsic_value * 100


def grade_for_score(score: int) -> str:
    for threshold, grade in GRADE_BANDS:
        if score >= threshold:
            return grade
    return "F"


def calculate_investment_score(
    cash_on_cash: float, cap_rate: float, monthly_cash_flow: float
) -> Tuple[int, str]:
    """
    Weighted 0-100 score from cash-on-cash (50%), cap rate (30%) and
    monthly cash flow (20%), plus its letter grade.
    """
    coc_score = clamp(cash_on_cash / TARGET_CASH_ON_CASH * 100, 0, 100)
    cap_score = clamp(cap_rate / TARGET_CAP_RATE * 100, 0, 100)
    cf_score = clamp(monthly_cash_flow / TARGET_MONTHLY_CASH_FLOW * 100, 0, 100)

    score = round_half_up(coc_score * 0.5 + cap_score * 0.3 + cf_score * 0.2)
    return score, grade_for_score(score)


def run_stress_test(
    monthly_rent: float,
    other_income: float,
    vacancy_rate_percent: float,
    fixed_monthly_expenses: float,
    management_fee_percent: float,
    maintenance_percent: float,
    loan_amount: float,
    interest_rate: float,
    loan_term_years: float,
) -> float:
    """
    Monthly cash flow under a downside scenario.

    Income drops 20%, vacancy rises 10 points, expenses rise 15% and the
    mortgage rate rises 2 points.
    """
    stress_gross = (monthly_rent + other_income) * STRESS_INCOME_FACTOR
    stress_vacancy = min(100.0, vacancy_rate_percent + STRESS_VACANCY_BUMP)
    stress_effective_income = stress_gross * (1 - stress_vacancy / 100)

    stress_expenses = (
        calculate_operating_expenses(
            stress_gross,
            fixed_monthly_expenses,
            management_fee_percent,
            maintenance_percent,
        )
        * STRESS_EXPENSE_FACTOR
    )
    stress_mortgage = calculate_payment(
        loan_amount, interest_rate + STRESS_RATE_BUMP, term_in_months(loan_term_years)
    )

    return stress_effective_income - stress_expenses - stress_mortgage


def project_cumulative_profit(
    purchase_price: float,
    total_initial_cash: float,
    annual_cash_flow: float,
    schedule: List[AmortizationYear],
    years: int = PROJECTION_YEARS,
) -> List[ProfitYear]:
    """
    Project cumulative cash flow and equity year by year.

    Property value compounds at a fixed 2% a year; equity is value less
    that year's loan balance. Cumulative cash flow starts at minus the
    initial cash invested.
    """
    rows = []
    cumulative_cash_flow = -total_initial_cash
    property_value = purchase_price

    for year in range(1, years + 1):
        property_value *= 1 + APPRECIATION_RATE
        cumulative_cash_flow += annual_cash_flow
        equity = property_value - balance_at_year(schedule, year)

        rows.append(
            ProfitYear(
                year=year,
                cumulative_cash_flow=round(cumulative_cash_flow, 2),
                equity=round(equity, 2),
                total_value=round(cumulative_cash_flow + equity, 2),
            )
        )

    return rows


def calculate_metrics(assumptions: PropertyAssumptions) -> CalculationResult:
    """
    Calculate every property metric from a set of assumptions.

    Missing or negative inputs count as 0; a missing loan term falls back
    to 30 years. All ratios guard zero denominators.

    Args:
        assumptions: Property purchase, financing, income and expense inputs

    Returns:
        CalculationResult with metrics, amortization and profit projection
    """
    a = assumptions

    # === INPUTS ===
    purchase_price = to_non_negative(a.purchase_price)
    renovation = to_non_negative(a.renovation_cost)
    closing_costs = to_non_negative(a.closing_costs)
    down_payment_percent = to_non_negative(a.down_payment_percent)
    interest_rate = to_non_negative(a.interest_rate)
    loan_term_years = to_non_negative(a.loan_term_years) or DEFAULT_LOAN_TERM_YEARS

    monthly_rent = to_non_negative(a.monthly_rent)
    other_income = to_non_negative(a.other_monthly_income)
    vacancy_rate = to_non_negative(a.vacancy_rate_percent)

    management_percent = to_non_negative(a.management_fee_percent)
    maintenance_percent = to_non_negative(a.maintenance_percent)
    fixed_monthly_expenses = (
        to_non_negative(a.property_tax_yearly) / 12
        + to_non_negative(a.insurance_yearly) / 12
        + to_non_negative(a.hoa_monthly)
        + to_non_negative(a.utilities_monthly)
        + to_non_negative(a.other_monthly_expenses)
    )

    # === INITIAL INVESTMENT ===
    down_payment = purchase_price * (down_payment_percent / 100)
    loan_amount = max(0.0, purchase_price - down_payment)
    total_initial_cash = down_payment + closing_costs + renovation

    # === FINANCING ===
    amortization = compute_amortization(loan_amount, interest_rate, loan_term_years)
    monthly_mortgage = amortization.monthly_payment
    monthly_interest = loan_amount * (interest_rate / 100 / 12)
    monthly_principal = monthly_mortgage - monthly_interest

    # === OPERATIONS ===
    gross_income = monthly_rent + other_income
    effective_income = gross_income * (1 - vacancy_rate / 100)
    total_monthly_expenses = calculate_operating_expenses(
        gross_income, fixed_monthly_expenses, management_percent, maintenance_percent
    )

    monthly_noi = effective_income - total_monthly_expenses
    monthly_cash_flow = monthly_noi - monthly_mortgage
    annual_noi = monthly_noi * 12
    annual_cash_flow = monthly_cash_flow * 12

    cap_rate = safe_divide(annual_noi, purchase_price) * 100
    cash_on_cash = safe_divide(annual_cash_flow, total_initial_cash) * 100

    # === OWNER EARNINGS ===
    capex_reserve = gross_income * (CAPEX_RESERVE_PERCENT / 100)
    owner_earnings_monthly = monthly_noi - capex_reserve
    owner_earnings_annual = owner_earnings_monthly * 12
    earnings_yield = safe_divide(owner_earnings_annual, purchase_price) * 100

    intrinsic_value = calculate_intrinsic_value(owner_earnings_annual)
    margin_of_safety = calculate_margin_of_safety(intrinsic_value, purchase_price)

    # === STRESS TEST ===
    stress_cash_flow = run_stress_test(
        monthly_rent=monthly_rent,
        other_income=other_income,
        vacancy_rate_percent=vacancy_rate,
        fixed_monthly_expenses=fixed_monthly_expenses,
        management_fee_percent=management_percent,
        maintenance_percent=maintenance_percent,
        loan_amount=loan_amount,
        interest_rate=interest_rate,
        loan_term_years=loan_term_years,
    )

    score, grade = calculate_investment_score(cash_on_cash, cap_rate, monthly_cash_flow)

    cumulative_profit = project_cumulative_profit(
        purchase_price,
        total_initial_cash,
        annual_cash_flow,
        amortization.yearly_schedule,
    )

    return CalculationResult(
        monthly_mortgage=monthly_mortgage,
        monthly_principal=monthly_principal,
        monthly_interest=monthly_interest,
        total_monthly_expenses=total_monthly_expenses,
        monthly_noi=monthly_noi,
        monthly_cash_flow=monthly_cash_flow,
        owner_earnings_monthly=owner_earnings_monthly,
        owner_earnings_annual=owner_earnings_annual,
        earnings_yield=earnings_yield,
        intrinsic_value=intrinsic_value,
        margin_of_safety=margin_of_safety,
        stress_test_cash_flow=stress_cash_flow,
        stress_test_pass=stress_cash_flow > 0,
        cap_rate=cap_rate,
        cash_on_cash=cash_on_cash,
        investment_score=score,
        investment_grade=grade,
        total_initial_cash=total_initial_cash,
        loan_amount=loan_amount,
        yearly_amortization=amortization.yearly_schedule,
        cumulative_profit=cumulative_profit,
    )
