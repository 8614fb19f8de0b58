"""
Unit Tests for the Cash Discounting Calculator
"""

from decimal import Decimal

import pytest

from savings_engine.calculators.cash_discounting import CashDiscountingCalculator
from savings_engine.calculators.flat_rate import FlatRateDeriver
from savings_engine.models import (
    BusinessType,
    CashDiscountingResult,
    EngineConfig,
    ProcessingContext,
    ProgramInput,
    ProgramType,
)


def _make_context(
    card_volume: float = 0,
    cash_volume: float = 0,
    tax: float = 0,
    tip: float = 0,
    markup: float = 6,
    cash_discount: float = 0,
    current_rate: float = 2.5,
    business_type: BusinessType = BusinessType.RETAIL,
    override: float = None,
) -> ProcessingContext:
    """Helper to create a ProcessingContext with a derived flat rate."""
    inputs = ProgramInput(
        program_type=ProgramType.CASH_DISCOUNTING,
        business_type=business_type,
        monthly_card_volume=Decimal(str(card_volume)),
        monthly_cash_volume=Decimal(str(cash_volume)),
        tax_rate_percent=Decimal(str(tax)),
        tip_rate_percent=Decimal(str(tip)),
        price_adjustment_percent=Decimal(str(markup)),
        cash_discount_percent=Decimal(str(cash_discount)),
        current_rate_percent=Decimal(str(current_rate)),
        flat_rate_override_percent=Decimal(str(override)) if override is not None else None,
    )
    config = EngineConfig()
    return ProcessingContext(inputs=inputs, config=config, flat_rate=FlatRateDeriver().derive(inputs, config))


class TestScenarioC:
    """$5,000 cash, 6% menu markup, 0% cash discount."""

    @pytest.fixture
    def calculator(self):
        return CashDiscountingCalculator()

    def test_extra_revenue_is_markup_on_cash_base(self, calculator):
        result = calculator.calculate(_make_context(cash_volume=5000, markup=6, cash_discount=0))

        assert result.base_cash == Decimal("5000.00")
        assert result.menu_priced_cash_base == Decimal("5300.00")
        assert result.cash_discount_given == Decimal("0")
        assert result.extra_cash_revenue == Decimal("300.00")

    def test_extra_revenue_with_tax(self, calculator):
        """base_cash = 5000 / 1.10 = 4545.4545; x 6% = 272.7273"""
        result = calculator.calculate(_make_context(cash_volume=5000, tax=10, markup=6, cash_discount=0))

        assert result.base_cash == Decimal("4545.45")
        assert result.extra_cash_revenue == Decimal("272.73")


class TestCardAndCash:
    """
    $20,000 card + $5,000 cash, no tax/tip, 6% markup, 5% cash discount.
    Flat rate 0.06 / 1.06 = 0.0566 is capped at 4%.
    """

    @pytest.fixture
    def result(self) -> CashDiscountingResult:
        ctx = _make_context(card_volume=20000, cash_volume=5000, markup=6, cash_discount=5, current_rate=2.5)
        return CashDiscountingCalculator().calculate(ctx)

    def test_flat_rate_capped(self, result):
        assert result.flat_rate.value == Decimal("0.04")
        assert result.effective_flat_rate_percent == Decimal("4.00")

    def test_card_branch(self, result):
        assert result.base_pre_tax_pre_tip == Decimal("20000.00")
        assert result.price_adjusted_base == Decimal("21200.00")
        assert result.card_processed_total == Decimal("21200.00")
        assert result.processor_charge_on_cards == Decimal("848.00")
        assert result.markup_or_fee_collected_on_cards == Decimal("1200.00")
        assert result.recovery == Decimal("352.00")
        assert result.net_change_in_card_processing_cost == Decimal("-352.00")
        assert result.current_processing_cost == Decimal("500.00")
        assert result.processing_cost_savings_cards_only == Decimal("852.00")

    def test_cash_branch(self, result):
        assert result.menu_priced_cash_base == Decimal("5300.00")
        assert result.cash_discount_given == Decimal("265.00")
        assert result.net_cash_base == Decimal("5035.00")
        assert result.cash_processed_total == Decimal("5035.00")
        # (5300 - 5000) - 265
        assert result.extra_cash_revenue == Decimal("35.00")

    def test_totals(self, result):
        assert result.total_net_gain_monthly == Decimal("887.00")
        assert result.total_net_gain_annual == Decimal("10644.00")

    def test_order_of_operations(self, result):
        assert result.order_of_operations == "Base Card Volume → +Menu Markup → +Tax → +Tip"
        assert result.program_type == ProgramType.CASH_DISCOUNTING


class TestCashBranchEdgeCases:

    @pytest.fixture
    def calculator(self):
        return CashDiscountingCalculator()

    def test_discount_above_markup_gives_negative_revenue(self, calculator):
        """Not clamped: a net loss on cash transactions is reported as such."""
        result = calculator.calculate(_make_context(cash_volume=5000, markup=2, cash_discount=5))

        # menu 5100, discount 255, (5100 - 5000) - 255 = -155
        assert result.extra_cash_revenue == Decimal("-155.00")
        assert result.total_net_gain_monthly == Decimal("-155.00")

    def test_no_cash_volume_skips_cash_branch(self, calculator):
        result = calculator.calculate(_make_context(card_volume=10000, cash_volume=0, cash_discount=5))

        assert result.base_cash == Decimal("0")
        assert result.cash_discount_given == Decimal("0")
        assert result.extra_cash_revenue == Decimal("0")

    def test_cash_tip_included_for_restaurant(self, calculator):
        """$6,500 cash at 10% tax + 20% tip -> base 5,000; processed 5,035 x 1.1 x 1.2"""
        result = calculator.calculate(
            _make_context(
                cash_volume=6500, tax=10, tip=20, markup=6, cash_discount=5,
                business_type=BusinessType.RESTAURANT,
            )
        )

        assert result.base_cash == Decimal("5000.00")
        assert result.cash_processed_total == Decimal("6646.20")


class TestZeroMarkup:

    def test_markup_zero_and_net_change_equals_charge(self):
        ctx = _make_context(card_volume=10000, markup=0, override=3)
        result = CashDiscountingCalculator().calculate(ctx)

        assert result.markup_or_fee_collected_on_cards == Decimal("0")
        assert result.net_change_in_card_processing_cost == result.processor_charge_on_cards
        assert result.processor_charge_on_cards == Decimal("300.00")
