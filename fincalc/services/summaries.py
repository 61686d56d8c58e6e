"""
Terminal summaries for saved analyses.

A saved analysis keeps its raw inputs and only the final-period metrics a
list view needs; the full series is recomputed from the inputs on demand.
"""

import logging
from typing import Dict, Sequence, Union

from fincalc.calculations.buyd import BuydInputs, simulate_buyd
from fincalc.calculations.debt_payoff import (
    DebtInput,
    DebtStrategy,
    simulate_debt_payoff,
)
from fincalc.calculations.valuation import PropertyAssumptions, calculate_metrics

logger = logging.getLogger(__name__)


def summarize_property(assumptions: PropertyAssumptions) -> Dict:
    """Headline property metrics."""
    result = calculate_metrics(assumptions)
    return {
        "monthly_cash_flow": round(result.monthly_cash_flow, 2),
        "cap_rate": round(result.cap_rate, 2),
        "cash_on_cash": round(result.cash_on_cash, 2),
        "investment_score": result.investment_score,
        "investment_grade": result.investment_grade,
        "intrinsic_value": round(result.intrinsic_value, 2),
        "stress_test_pass": result.stress_test_pass,
    }


def summarize_buyd(inputs: BuydInputs) -> Dict:
    """Final-year position of a leveraged-asset run."""
    result = simulate_buyd(inputs)
    return {
        "years": len(result.years),
        "current_net_worth": round(result.current_net_worth, 2),
        "current_ltv": round(result.current_ltv, 4),
        "current_cash_flow": round(result.current_cash_flow, 2),
        "current_borrow_capacity": round(result.current_borrow_capacity, 2),
        "current_dscr": round(result.current_dscr, 4),
        "current_cash_buffer": round(result.current_cash_buffer, 2),
        "current_buffer_months": round(result.current_buffer_months, 2),
        "break_year": result.break_year,
    }


def summarize_debt(
    debts: Sequence[DebtInput],
    extra_payment: float,
    strategy: Union[DebtStrategy, str],
    hybrid_threshold: float,
    max_months: int,
) -> Dict:
    """Payoff horizon and total cost of a debt plan."""
    result = simulate_debt_payoff(
        debts=debts,
        extra_payment=extra_payment,
        strategy=strategy,
        hybrid_threshold=hybrid_threshold,
        max_months=max_months,
    )
    unresolved = [s for s in result.payoff_summaries if not s.paid_off]
    if unresolved:
        logger.info(
            f"Debt plan leaves {len(unresolved)} debt(s) open after {result.total_months} months"
        )
    return {
        "total_months": result.total_months,
        "total_interest_paid": round(result.total_interest_paid, 2),
        "debt_count": len(debts),
        "unresolved_debts": len(unresolved),
    }
