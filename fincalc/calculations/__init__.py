"""
Financial Calculation Engine

Core calculation modules for the personal-finance calculators.
All engines are pure functions: they never raise on numeric input and
always return a complete result.
"""

from fincalc.calculations import (
    amortization,
    buyd,
    debt_payoff,
    discounting,
    growth,
    valuation,
)

__all__ = ["amortization", "buyd", "debt_payoff", "discounting", "growth", "valuation"]
