"""
Multi-Debt Payoff Simulation

Month-by-month payoff of several debts with one shared budget. Every month:

1. Interest accrues on each open debt (APR / 12)
2. Each open debt receives its minimum payment
3. The rest of the budget (every debt's minimum + extra payment) goes to
   debts in strategy priority order
4. Debts at or below one cent are settled

Strategies:
- avalanche: highest APR first
- snowball: smallest balance first
- hybrid: debts at or above an APR threshold first, by APR
"""

import enum
from typing import Dict, List, Sequence, Union
from dataclasses import dataclass, field, replace

from fincalc.calculations._numbers import to_non_negative, to_number

DEFAULT_MAX_MONTHS = 600
SETTLED_BALANCE = 0.01


class DebtStrategy(str, enum.Enum):
    """Order in which leftover budget is applied."""
    avalanche = "avalanche"
    snowball = "snowball"
    hybrid = "hybrid"


@dataclass(frozen=True)
class DebtInput:
    """A single debt as entered by the user."""

    id: str
    name: str = ""
    balance: float = 0.0
    apr: float = 0.0  # Annual rate, e.g. 22.9 for 22.9%
    min_payment: float = 0.0


@dataclass(frozen=True)
class DebtPayoffRow:
    """Position after one simulated month."""

    month: int
    total_balance: float
    total_interest_paid: float
    interest_this_month: float
    balances: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class DebtPayoffSummary:
    """When a debt was paid off and what it cost."""

    id: str
    name: str
    months_to_payoff: int
    interest_paid: float
    paid_off: bool = True


@dataclass(frozen=True)
class DebtSimulationResult:
    schedule: List[DebtPayoffRow]
    payoff_summaries: List[DebtPayoffSummary]
    total_interest_paid: float
    total_months: int


@dataclass(frozen=True)
class WorkingDebt:
    """Simulation copy of a debt, with interest accrued so far."""

    id: str
    name: str
    balance: float
    apr: float
    min_payment: float
    interest_paid: float = 0.0
    position: int = 0  # Index in the caller's debt list


@dataclass(frozen=True)
class MonthOutcome:
    """Result of one simulated month."""

    active: List[WorkingDebt]
    settled: List[WorkingDebt]
    interest: float


def _avalanche_key(debt):
    return (-to_number(debt.apr), -to_number(debt.balance))


def _snowball_key(debt):
    return (to_number(debt.balance), -to_number(debt.apr))


def _hybrid_key(debt):
    return (-to_number(debt.apr), to_number(debt.balance))


def get_priority_order(
    debts: Sequence[DebtInput],
    strategy: Union[DebtStrategy, str],
    hybrid_threshold: float,
) -> List[DebtInput]:
    """
    Order debts by payoff priority.

    Args:
        debts: Debts to order (anything with `apr` and `balance`)
        strategy: avalanche, snowball or hybrid
        hybrid_threshold: APR (percent) at or above which hybrid prioritizes a debt

    Returns:
        A new list, highest priority first; ties keep input order
    """
    if strategy == DebtStrategy.avalanche:
        return sorted(debts, key=_avalanche_key)

    if strategy == DebtStrategy.snowball:
        return sorted(debts, key=_snowball_key)

    threshold = to_number(hybrid_threshold)
    above = [debt for debt in debts if to_number(debt.apr) >= threshold]
    if not above:
        return sorted(debts, key=_snowball_key)

    below = [debt for debt in debts if to_number(debt.apr) < threshold]
    return sorted(above, key=_hybrid_key) + sorted(below, key=_hybrid_key)


def _to_working(debt: DebtInput, position: int) -> WorkingDebt:
    return WorkingDebt(
        position=position,
        id=debt.id,
        name=debt.name,
        balance=to_number(debt.balance),
        apr=to_number(debt.apr),
        min_payment=to_non_negative(debt.min_payment),
    )


def advance_month(
    active: List[WorkingDebt],
    monthly_budget: float,
    strategy: Union[DebtStrategy, str],
    hybrid_threshold: float,
) -> MonthOutcome:
    """
    Simulate one month for the open debts.

    Next balances are computed for every debt first; the settled debts are
    then split off with a stable partition.

    Args:
        active: Open debts at the start of the month
        monthly_budget: Total amount available this month
        strategy: Priority strategy for the leftover budget
        hybrid_threshold: APR threshold for the hybrid strategy

    Returns:
        MonthOutcome with still-open debts, debts settled this month and
        interest accrued this month
    """
    # === INTEREST ===
    accrued = []
    interest_this_month = 0.0
    for debt in active:
        interest = debt.balance * debt.apr / 100 / 12
        interest_this_month += interest
        accrued.append(
            replace(
                debt,
                balance=debt.balance + interest,
                interest_paid=debt.interest_paid + interest,
            )
        )

    # === MINIMUM PAYMENTS ===
    balances = []
    used_budget = 0.0
    for debt in accrued:
        payment = min(debt.min_payment, debt.balance)
        balances.append(debt.balance - payment)
        used_budget += payment

    # === LEFTOVER BY PRIORITY ===
    available = max(0.0, monthly_budget - used_budget)
    after_minimums = [replace(debt, balance=balances[i]) for i, debt in enumerate(accrued)]
    index_of = {id(debt): i for i, debt in enumerate(after_minimums)}

    for debt in get_priority_order(after_minimums, strategy, hybrid_threshold):
        if available <= 0:
            break
        i = index_of[id(debt)]
        payment = min(available, balances[i])
        balances[i] -= payment
        available -= payment

    # === SETTLEMENT ===
    next_debts = [replace(debt, balance=balances[i]) for i, debt in enumerate(accrued)]
    still_open = [debt for debt in next_debts if debt.balance > SETTLED_BALANCE]
    settled = [debt for debt in next_debts if debt.balance <= SETTLED_BALANCE]

    return MonthOutcome(active=still_open, settled=settled, interest=interest_this_month)


def simulate_debt_payoff(
    debts: Sequence[DebtInput],
    extra_payment: float,
    strategy: Union[DebtStrategy, str],
    hybrid_threshold: float,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> DebtSimulationResult:
    """
    Simulate paying off a set of debts with a fixed monthly budget.

    The monthly budget is the sum of every debt's minimum payment plus the
    extra payment, so minimums freed up by paid-off debts roll onto the
    next priority debt. Debts still open after `max_months` are reported
    with `paid_off=False`.

    Every input debt gets its own payoff summary. Schedule balances are
    keyed by id, so debts sharing an id are reported as one combined balance.

    Args:
        debts: Debts to pay off; the caller's objects are never modified
        extra_payment: Amount paid each month on top of the minimums
        strategy: avalanche, snowball or hybrid
        hybrid_threshold: APR (percent) threshold for the hybrid strategy
        max_months: Simulation cap

    Returns:
        DebtSimulationResult with the monthly schedule and per-debt summaries
    """
    max_months = max(0, int(to_number(max_months)))
    all_debt_ids = [debt.id for debt in debts]
    base_minimum = sum(to_non_negative(debt.min_payment) for debt in debts)
    monthly_budget = to_non_negative(extra_payment) + base_minimum

    active = [
        _to_working(debt, position)
        for position, debt in enumerate(debts)
        if to_number(debt.balance) > 0
    ]
    payoff_summaries: Dict[int, DebtPayoffSummary] = {}
    schedule = []
    total_interest_paid = 0.0

    for month in range(1, max_months + 1):
        if not active:
            break

        outcome = advance_month(active, monthly_budget, strategy, hybrid_threshold)
        active = outcome.active
        total_interest_paid += outcome.interest

        for debt in outcome.settled:
            if debt.position not in payoff_summaries:
                payoff_summaries[debt.position] = DebtPayoffSummary(
                    id=debt.id,
                    name=debt.name,
                    months_to_payoff=month,
                    interest_paid=debt.interest_paid,
                )

        open_balances: Dict[str, float] = {}
        for debt in active:
            open_balances[debt.id] = open_balances.get(debt.id, 0.0) + max(0.0, debt.balance)

        schedule.append(
            DebtPayoffRow(
                month=month,
                total_balance=sum(debt.balance for debt in active),
                total_interest_paid=total_interest_paid,
                interest_this_month=outcome.interest,
                balances={
                    debt_id: open_balances.get(debt_id, 0.0) for debt_id in all_debt_ids
                },
            )
        )

    total_months = len(schedule)
    unresolved = [
        DebtPayoffSummary(
            id=debt.id,
            name=debt.name,
            months_to_payoff=total_months,
            interest_paid=debt.interest_paid,
            paid_off=False,
        )
        for debt in active
    ]

    return DebtSimulationResult(
        schedule=schedule,
        payoff_summaries=list(payoff_summaries.values()) + unresolved,
        total_interest_paid=total_interest_paid,
        total_months=total_months,
    )
