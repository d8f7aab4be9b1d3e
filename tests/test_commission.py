"""
Unit tests for commission calculation service.

Tests:
- Cost markup and adjusted costs
- Commission base floor (no clawback)
- Commission amount at the plumber's rate
- Write-time pricing (rounding to cents)
- Commission bounds across a grid of amounts and rates
- Detecting updates that change commission inputs
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.services.commission import (
    DEFAULT_POLICY,
    CommissionPolicy,
    calculate_commission,
    commission_inputs_changed,
    price_job,
    to_decimal,
)


class TestCalculateCommission:
    """Tests for the per-job commission breakdown."""

    def test_typical_job(self):
        """Parts and labor are both marked up before subtracting."""
        result = calculate_commission(
            revenue=850, parts_cost=250, outside_labor=100, commission_rate=30
        )
        assert result.revenue == Decimal('850')
        assert result.parts_cost_with_markup == Decimal('312.50')
        assert result.outside_labor_with_markup == Decimal('125.00')
        assert result.adjusted_costs == Decimal('437.50')
        assert result.commission_base == Decimal('412.50')
        assert result.commission_amount == Decimal('123.75')

    def test_no_outside_labor(self):
        result = calculate_commission(
            revenue=1200, parts_cost=350, outside_labor=0, commission_rate=30
        )
        assert result.adjusted_costs == Decimal('437.50')
        assert result.commission_base == Decimal('762.50')
        assert result.commission_amount == Decimal('228.75')

    def test_base_floored_at_zero(self):
        """Costs above revenue give zero commission, never negative."""
        result = calculate_commission(
            revenue=100, parts_cost=100, outside_labor=0, commission_rate=50
        )
        assert result.adjusted_costs == Decimal('125')
        assert result.commission_base == Decimal('0')
        assert result.commission_amount == Decimal('0')

    def test_all_zero(self):
        result = calculate_commission(0, 0, 0, 0)
        assert all(value == 0 for value in result.as_dict().values())

    def test_zero_rate(self):
        result = calculate_commission(1000, 100, 0, 0)
        assert result.commission_base == Decimal('875')
        assert result.commission_amount == Decimal('0')

    def test_float_inputs_have_no_binary_noise(self):
        """0.1 + 0.2 style inputs are taken at their decimal value."""
        result = calculate_commission(0.3, 0.1, 0.1, 100)
        assert result.adjusted_costs == Decimal('0.250')
        assert result.commission_amount == Decimal('0.050')

    def test_result_is_unrounded(self):
        """The breakdown keeps full precision; rounding happens at write time."""
        result = calculate_commission(100, 0, 0, Decimal('33.335'))
        assert result.commission_amount == Decimal('33.335')

    def test_repeatable(self):
        """Same inputs always give the same breakdown."""
        first = calculate_commission(850, 250, 100, 30)
        second = calculate_commission(850, 250, 100, 30)
        assert first == second

    def test_out_of_range_inputs_are_proportional(self):
        """No validation here: a negative cost or rate over 100 just flows through."""
        result = calculate_commission(100, -20, 0, 150)
        assert result.adjusted_costs == Decimal('-25.00')
        assert result.commission_base == Decimal('125.00')
        assert result.commission_amount == Decimal('187.5')

    def test_custom_markup_policy(self):
        policy = CommissionPolicy(markup=Decimal('1.10'))
        result = calculate_commission(1000, 100, 100, 10, policy=policy)
        assert result.adjusted_costs == Decimal('220.00')
        assert result.commission_amount == Decimal('78.0')

    def test_as_dict_keys(self):
        result = calculate_commission(850, 250, 100, 30)
        assert list(result.as_dict()) == [
            'revenue',
            'parts_cost_with_markup',
            'outside_labor_with_markup',
            'adjusted_costs',
            'commission_base',
            'commission_amount',
        ]


class TestPolicy:
    """Tests for the shared markup and rounding rules."""

    def test_default_markup(self):
        assert DEFAULT_POLICY.markup == Decimal('1.25')

    def test_adjusted_costs_matches_calculator(self):
        breakdown = calculate_commission(850, 250, 100, 30)
        assert DEFAULT_POLICY.adjusted_costs(250, 100) == breakdown.adjusted_costs

    def test_none_counts_as_zero(self):
        assert to_decimal(None) == Decimal('0')
        assert DEFAULT_POLICY.adjusted_costs(None, 100) == Decimal('125.00')

    def test_round_half_up(self):
        """Halves round away from zero, not to even."""
        assert DEFAULT_POLICY.round_currency(Decimal('5.025')) == Decimal('5.03')
        assert DEFAULT_POLICY.round_currency(Decimal('5.015')) == Decimal('5.02')
        assert DEFAULT_POLICY.round_currency(Decimal('5.014')) == Decimal('5.01')


class TestPriceJob:
    """Tests for the commission stored on a job."""

    def test_rounds_to_cents(self):
        assert price_job(100, 0, 0, Decimal('33.335')) == Decimal('33.34')

    def test_half_cent_rounds_up(self):
        # 10.05 × 50% = 5.025
        assert price_job(Decimal('10.05'), 0, 0, 50) == Decimal('5.03')

    def test_exact_value_keeps_two_places(self):
        result = price_job(850, 250, 100, 30)
        assert result == Decimal('123.75')
        assert result.as_tuple().exponent == -2


class TestCommissionBounds:
    """The commission stays between zero and the rate applied to revenue."""

    @pytest.mark.parametrize('revenue', ['0', '1', '100', '850', '1000000'])
    @pytest.mark.parametrize('parts_cost', ['0', '100', '10000000'])
    @pytest.mark.parametrize('outside_labor', ['0', '100'])
    @pytest.mark.parametrize('rate', ['0', '30', '100'])
    def test_bounds(self, revenue, parts_cost, outside_labor, rate):
        revenue, rate = Decimal(revenue), Decimal(rate)
        ceiling = revenue * rate / 100

        result = calculate_commission(revenue, parts_cost, outside_labor, rate)
        stored = price_job(revenue, parts_cost, outside_labor, rate)

        assert Decimal('0') <= result.commission_amount <= ceiling
        assert Decimal('0') <= stored <= DEFAULT_POLICY.round_currency(ceiling)
        if result.adjusted_costs >= revenue:
            assert result.commission_base == Decimal('0')
            assert result.commission_amount == Decimal('0')
            assert stored == Decimal('0')

    @pytest.mark.parametrize('revenue', ['0', '850', '1000000'])
    def test_costs_far_above_revenue(self, revenue):
        result = calculate_commission(revenue, '10000000', '10000000', 100)
        assert result.commission_base == Decimal('0')
        assert result.commission_amount == Decimal('0')


class TestCommissionInputsChanged:
    """Tests for deciding when a job must be re-priced."""

    @pytest.fixture
    def job(self):
        return SimpleNamespace(
            revenue=Decimal('100.00'),
            parts_cost=Decimal('20.00'),
            outside_labor=Decimal('0.00'),
            plumber_id=1,
            customer_name='Adams Home',
        )

    def test_name_only_change(self, job):
        assert commission_inputs_changed(job, {'customer_name': 'Smith'}) is False

    def test_same_amount_different_scale(self, job):
        """100 and 100.00 are the same amount."""
        assert commission_inputs_changed(job, {'revenue': 100}) is False

    def test_revenue_change(self, job):
        assert commission_inputs_changed(job, {'revenue': Decimal('150')}) is True

    def test_outside_labor_change(self, job):
        assert commission_inputs_changed(job, {'outside_labor': 5}) is True

    def test_plumber_change(self, job):
        assert commission_inputs_changed(job, {'plumber_id': 2}) is True

    def test_none_values_ignored(self, job):
        assert commission_inputs_changed(job, {'revenue': None, 'plumber_id': None}) is False
