"""
Tests for the amortization and property valuation engines.
"""

import math

import pytest
from fincalc.calculations._numbers import power, round_half_up
from fincalc.calculations.amortization import (
    calculate_payment,
    calculate_total_interest,
    compute_amortization,
    term_in_months,
)
from fincalc.calculations.discounting import calculate_npv, discount_factor
from fincalc.calculations.valuation import (
    PropertyAssumptions,
    calculate_intrinsic_value,
    calculate_investment_score,
    calculate_metrics,
    grade_for_score,
)


SAN_JUAN_CONDO = PropertyAssumptions(
    purchase_price=250000,
    renovation_cost=15000,
    closing_costs=5000,
    down_payment_percent=20,
    interest_rate=6.5,
    loan_term_years=30,
    monthly_rent=2200,
    property_tax_yearly=800,
    insurance_yearly=1200,
    hoa_monthly=150,
    maintenance_percent=5,
    vacancy_rate_percent=5,
    management_fee_percent=10,
)


class TestAmortization:
    """Test loan payment and amortization schedule."""

    def test_standard_mortgage_payment(self):
        """$200k at 6% for 30 years."""
        result = compute_amortization(200000, 6, 30)
        assert abs(result.monthly_payment - 1199.10) < 0.01

    def test_final_balance_is_zero(self):
        result = compute_amortization(200000, 6, 30)
        assert len(result.yearly_schedule) == 30
        assert abs(result.yearly_schedule[-1].balance) < 0.01

    def test_zero_rate_payment(self):
        """Zero rate spreads principal evenly over the term."""
        result = compute_amortization(120000, 0, 10)
        assert result.monthly_payment == 120000 / (10 * 12)
        assert all(row.interest_paid == 0 for row in result.yearly_schedule)
        assert result.yearly_schedule[0].principal_paid == 12000
        assert result.yearly_schedule[-1].balance == 0

    def test_zero_term(self):
        result = compute_amortization(100000, 5, 0)
        assert result.monthly_payment == 0
        assert result.yearly_schedule == []

    def test_negative_inputs_coerce_to_zero(self):
        result = compute_amortization(-5000, -3, 5)
        assert result.monthly_payment == 0
        assert len(result.yearly_schedule) == 5
        assert all(row.balance == 0 for row in result.yearly_schedule)

    def test_missing_inputs(self):
        result = compute_amortization(None, None, None)
        assert result.monthly_payment == 0
        assert result.yearly_schedule == []

    def test_years_are_one_based_and_increasing(self):
        schedule = compute_amortization(100000, 5, 15).yearly_schedule
        assert [row.year for row in schedule] == list(range(1, 16))

    def test_balance_declines(self):
        schedule = compute_amortization(100000, 5, 15).yearly_schedule
        balances = [row.balance for row in schedule]
        assert balances == sorted(balances, reverse=True)

    def test_fractional_term_emits_partial_year(self):
        schedule = compute_amortization(18000, 0, 1.5).yearly_schedule
        assert [row.year for row in schedule] == [1, 2]
        assert schedule[0].principal_paid == 12000
        assert schedule[1].principal_paid == 6000
        assert schedule[1].balance == 0

    def test_total_paid_matches_payments(self):
        result = compute_amortization(150000, 4.5, 20)
        total_paid = sum(row.total_paid for row in result.yearly_schedule)
        assert abs(total_paid - result.monthly_payment * 240) < 1

    def test_total_interest(self):
        result = compute_amortization(150000, 4.5, 20)
        total_interest = calculate_total_interest(result.yearly_schedule)
        assert abs(total_interest - (result.monthly_payment * 240 - 150000)) < 1

    def test_calculate_payment_months(self):
        # $1M loan at 5% for 30 years
        payment = calculate_payment(1000000, 5, 360)
        assert 5300 < payment < 5500


class TestDiscounting:
    """Test NPV helpers."""

    def test_npv_first_flow_undiscounted(self):
        assert calculate_npv([-100, 110], 0.10) == pytest.approx(0.0)

    def test_discount_factor(self):
        assert discount_factor(0.10, 0) == 1
        assert discount_factor(0.10, 2) == pytest.approx(1 / 1.21)


class TestValuation:
    """Test property metrics."""

    def test_all_cash_purchase(self):
        result = calculate_metrics(
            PropertyAssumptions(
                purchase_price=200000,
                down_payment_percent=100,
                monthly_rent=2000,
            )
        )
        assert result.loan_amount == 0
        assert result.monthly_mortgage == 0
        assert result.monthly_noi == 2000
        assert result.monthly_cash_flow == 2000
        assert result.cap_rate == pytest.approx(12.0)
        assert result.cash_on_cash == pytest.approx(12.0)
        assert result.owner_earnings_monthly == pytest.approx(1900)
        assert result.owner_earnings_annual == pytest.approx(22800)
        assert result.earnings_yield == pytest.approx(11.4)
        assert result.investment_score == 100
        assert result.investment_grade == "A+"
        assert result.stress_test_pass is True

    def test_leveraged_condo(self):
        result = calculate_metrics(SAN_JUAN_CONDO)
        assert result.loan_amount == pytest.approx(200000)
        assert result.total_initial_cash == pytest.approx(70000)
        assert abs(result.monthly_mortgage - 1264.14) < 0.01
        assert result.monthly_interest == pytest.approx(200000 * 0.065 / 12)
        assert result.monthly_principal == pytest.approx(
            result.monthly_mortgage - result.monthly_interest
        )
        # 800/12 + 1200/12 + 150 + 10% and 5% of 2200
        assert result.total_monthly_expenses == pytest.approx(646.6667, abs=0.001)
        assert result.monthly_noi == pytest.approx(2090 - 646.6667, abs=0.001)
        assert result.monthly_cash_flow == pytest.approx(
            result.monthly_noi - result.monthly_mortgage
        )

    def test_stress_test_fails_for_thin_margins(self):
        result = calculate_metrics(SAN_JUAN_CONDO)
        assert result.stress_test_cash_flow < result.monthly_cash_flow
        assert result.stress_test_pass is False

    def test_intrinsic_value_dcf(self):
        owner_earnings = 22800
        expected = sum(owner_earnings / 1.1 ** year for year in range(1, 11))
        expected += (owner_earnings / 0.08) / 1.1 ** 10
        assert calculate_intrinsic_value(owner_earnings) == pytest.approx(expected)

    def test_intrinsic_value_requires_positive_earnings(self):
        assert calculate_intrinsic_value(0) == 0
        assert calculate_intrinsic_value(-1000) == 0

    def test_margin_of_safety(self):
        result = calculate_metrics(
            PropertyAssumptions(
                purchase_price=200000,
                down_payment_percent=100,
                monthly_rent=2000,
            )
        )
        expected = (result.intrinsic_value - 200000) / result.intrinsic_value * 100
        assert result.margin_of_safety == pytest.approx(expected)
        assert result.margin_of_safety > 0

    def test_empty_assumptions(self):
        """Every field missing still yields a complete result."""
        result = calculate_metrics(PropertyAssumptions())
        assert result.cap_rate == 0
        assert result.cash_on_cash == 0
        assert result.earnings_yield == 0
        assert result.intrinsic_value == 0
        assert result.margin_of_safety == 0
        assert result.investment_score == 0
        assert result.investment_grade == "F"
        assert result.stress_test_pass is False
        # Missing loan term falls back to 30 years
        assert len(result.yearly_amortization) == 30
        assert len(result.cumulative_profit) == 30

    def test_negative_and_invalid_inputs(self):
        result = calculate_metrics(
            PropertyAssumptions(
                purchase_price=-100000,
                monthly_rent=float("nan"),
                hoa_monthly=float("inf"),
            )
        )
        assert result.cap_rate == 0
        assert result.earnings_yield == 0
        assert result.total_monthly_expenses == 0

    def test_cumulative_profit_projection(self):
        result = calculate_metrics(SAN_JUAN_CONDO)
        first = result.cumulative_profit[0]
        last = result.cumulative_profit[-1]

        annual_cash_flow = result.monthly_cash_flow * 12
        assert first.year == 1
        assert first.cumulative_cash_flow == pytest.approx(-70000 + annual_cash_flow, abs=0.01)
        assert first.equity == pytest.approx(
            250000 * 1.02 - result.yearly_amortization[0].balance, abs=0.01
        )
        assert first.total_value == pytest.approx(
            first.cumulative_cash_flow + first.equity, abs=0.02
        )
        # Loan is repaid by year 30
        assert last.equity == pytest.approx(250000 * 1.02 ** 30, abs=1)

    def test_equity_after_loan_term(self):
        """Years past a short loan term carry no balance."""
        result = calculate_metrics(
            PropertyAssumptions(
                purchase_price=100000,
                down_payment_percent=50,
                interest_rate=5,
                loan_term_years=10,
            )
        )
        assert len(result.yearly_amortization) == 10
        assert result.cumulative_profit[14].equity == pytest.approx(100000 * 1.02 ** 15, abs=0.01)


class TestInvestmentScore:
    """Test score weighting and grade bands."""

    def test_half_of_every_target(self):
        score, grade = calculate_investment_score(6, 4, 250)
        assert score == 50
        assert grade == "D"

    def test_components_are_clamped(self):
        score, _ = calculate_investment_score(-50, -10, -1000)
        assert score == 0
        score, _ = calculate_investment_score(100, 100, 10000)
        assert score == 100

    def test_half_rounds_up(self):
        # coc 1% -> 8.333, weighted 4.1667
        # cap 1.0% -> 12.5, weighted 3.75; cf 0 -> total 7.9167
        score, _ = calculate_investment_score(1, 1, 0)
        assert score == 8
        # 0.2 * 2.5 = 0.5 rounds to 1
        score, _ = calculate_investment_score(0, 0, 12.5)
        assert score == 1

    @pytest.mark.parametrize(
        "score,grade",
        [(100, "A+"), (90, "A+"), (89, "A"), (80, "A"), (79, "B"), (70, "B"),
         (60, "C"), (50, "D"), (49, "F"), (0, "F")],
    )
    def test_grade_bands(self, score, grade):
        assert grade_for_score(score) == grade


class TestExtremeInputs:
    """Huge rates and terms saturate instead of raising."""

    def test_power_saturates(self):
        assert power(1.5, 10000) == math.inf
        assert power(1.1, 2) == pytest.approx(1.21)

    def test_round_half_up_passes_non_finite_through(self):
        assert round_half_up(math.inf) == math.inf
        assert math.isnan(round_half_up(math.nan))

    def test_payment_for_huge_term_is_interest_only(self):
        # 6% a year is 0.5% a month
        assert calculate_payment(200000, 6, 10 ** 6) == pytest.approx(1000)

    def test_amortization_with_huge_rate(self):
        result = compute_amortization(200000, 10000, 30)
        assert result.monthly_payment == pytest.approx(200000 * 100 / 12)
        assert len(result.yearly_schedule) == 30
        # Payment only covers interest, so nothing is repaid
        assert result.yearly_schedule[-1].balance == pytest.approx(200000)

    def test_term_too_large_to_count(self):
        assert term_in_months(1e308) == 0
        result = compute_amortization(100000, 5, 1e308)
        assert result.monthly_payment == 0
        assert result.yearly_schedule == []

    def test_metrics_with_huge_rate(self):
        result = calculate_metrics(
            PropertyAssumptions(purchase_price=250000, interest_rate=10000)
        )
        assert result.monthly_mortgage == pytest.approx(250000 * 100 / 12)
        assert result.stress_test_pass is False
        assert result.investment_score == 0
        assert len(result.cumulative_profit) == 30
