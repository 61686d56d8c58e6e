"""
Loan Amortization Calculations

Implements the level-payment mortgage formula and a yearly roll-up of the
monthly amortization walk. Rates are passed as raw percentages
(e.g., 6.5 for 6.5%).
"""

import math
from typing import List
from dataclasses import dataclass, field

from fincalc.calculations._numbers import power, to_non_negative

MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class AmortizationYear:
    """One loan year of the amortization schedule."""

    year: int
    balance: float  # Ending balance for the year
    interest_paid: float
    principal_paid: float
    total_paid: float


@dataclass(frozen=True)
class AmortizationResult:
    """Monthly payment plus the yearly schedule it produces."""

    monthly_payment: float
    yearly_schedule: List[AmortizationYear] = field(default_factory=list)


def calculate_payment(
    principal: float, annual_rate_percent: float, months: int
) -> float:
    """
    Calculate the level monthly payment for a fixed-rate loan.

    Args:
        principal: Loan principal amount
        annual_rate_percent: Annual interest rate as a percentage (e.g., 6 for 6%)
        months: Total number of monthly payments

    Returns:
        Monthly payment amount (0 when there is nothing to amortize)
    """
    principal = to_non_negative(principal)
    if principal <= 0 or months <= 0:
        return 0.0

    monthly_rate = to_non_negative(annual_rate_percent) / 100 / MONTHS_PER_YEAR

    if monthly_rate == 0:
        return principal / months

    growth = power(1 + monthly_rate, months)
    if growth == math.inf:
        # Interest-only in the limit
        return principal * monthly_rate
    return principal * monthly_rate * growth / (growth - 1)


def term_in_months(term_years: float) -> int:
    """Number of monthly payments in a loan term given in years."""
    months = to_non_negative(term_years) * MONTHS_PER_YEAR
    if not math.isfinite(months):
        return 0
    return int(round(months))


def compute_amortization(
    principal: float, annual_rate_percent: float, term_years: float
) -> AmortizationResult:
    """
    Generate the yearly amortization schedule for a fixed-rate loan.

    Walks the loan month by month, splitting each payment into interest
    and principal, and rolls the months up into loan years. A fractional
    final year is emitted as its own, shorter bucket.

    Args:
        principal: Loan principal amount
        annual_rate_percent: Annual interest rate as a percentage
        term_years: Loan term in years

    Returns:
        AmortizationResult with the monthly payment and yearly rows
    """
    balance = to_non_negative(principal)
    monthly_rate = to_non_negative(annual_rate_percent) / 100 / MONTHS_PER_YEAR
    months = term_in_months(term_years)
    payment = calculate_payment(balance, annual_rate_percent, months)

    schedule = []
    year_interest = 0.0
    year_principal = 0.0

    for period in range(1, months + 1):
        interest = balance * monthly_rate
        principal_pmt = payment - interest

        year_interest += interest
        year_principal += principal_pmt

        # Floating-point drift can leave a tiny negative balance at the end
        balance = max(0.0, balance - principal_pmt)

        if period % MONTHS_PER_YEAR == 0 or period == months:
            schedule.append(
                AmortizationYear(
                    year=(period + MONTHS_PER_YEAR - 1) // MONTHS_PER_YEAR,
                    balance=round(balance, 2),
                    interest_paid=round(year_interest, 2),
                    principal_paid=round(year_principal, 2),
                    total_paid=round(year_interest + year_principal, 2),
                )
            )
            year_interest = 0.0
            year_principal = 0.0

    return AmortizationResult(monthly_payment=payment, yearly_schedule=schedule)


def calculate_total_interest(schedule: List[AmortizationYear]) -> float:
    """Calculate total interest paid over the loan term."""
    return sum(row.interest_paid for row in schedule)


def calculate_total_principal(schedule: List[AmortizationYear]) -> float:
    """Calculate total principal repaid over the loan term."""
    return sum(row.principal_paid for row in schedule)


def balance_at_year(schedule: List[AmortizationYear], year: int) -> float:
    """Ending balance for a loan year, 0 once the loan is past its term."""
    for row in schedule:
        if row.year == year:
            return row.balance
    return 0.0
