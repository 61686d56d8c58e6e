"""
Discounting Calculations

NPV and discount-factor helpers used by the owner-earnings DCF.
"""

from typing import List

from fincalc.calculations._numbers import power


def discount_factor(discount_rate: float, period: int) -> float:
    """Present value of 1 received `period` years from now."""
    return 1 / power(1 + discount_rate, period)


def calculate_npv(cash_flows: List[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of cash flows.

    The first cash flow is at period 0 and is not discounted.

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow)
        discount_rate: Annual discount rate (e.g., 0.10 for 10%)

    Returns:
        NPV value
    """
    npv = 0.0
    for period, cf in enumerate(cash_flows):
        npv += cf * discount_factor(discount_rate, period)
    return npv


def present_value_of_annuity(
    payment: float, discount_rate: float, periods: int
) -> float:
    """Present value of `periods` equal year-end payments."""
    return calculate_npv([0.0] + [payment] * periods, discount_rate)


def present_value_of_terminal(
    annual_earnings: float, terminal_cap_rate: float, discount_rate: float, periods: int
) -> float:
    """Capitalize earnings at the terminal cap rate and discount back `periods` years."""
    if terminal_cap_rate <= 0:
        return 0.0
    terminal_value = annual_earnings / terminal_cap_rate
    return terminal_value * discount_factor(discount_rate, periods)
