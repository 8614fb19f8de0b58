"""
Integration Test Scenarios for the Processing Savings Engine

End-to-end quotes as the quoting UI sends them: raw dictionaries in,
report dictionaries out.

Run with: python -m pytest tests/test_integration_scenarios.py -v
"""

import pytest

from savings_engine import QuoteProcessor


@pytest.fixture
def processor():
    return QuoteProcessor()


class TestRestaurantSupplementalFeeQuote:
    """Full restaurant quote: fee program, cash sales, hardware, menu works and credit."""

    @pytest.fixture
    def output(self, processor):
        input_data = {
            "program": {
                "programType": "SUPPLEMENTAL_FEE",
                "businessType": "RESTAURANT",
                "monthlyCardVolume": 20000,
                "monthlyCashVolume": 2000,
                "currentRatePercent": 3,
                "interchangeCostPercent": 2,
                "taxRatePercent": 10,
                "tipRatePercent": 20,
                "priceAdjustmentPercent": 4,
                "tipTiming": "BEFORE_TIP",
                "feeTaxBasis": "POST_TAX",
            },
            "quoteCosts": {
                "bundles": [{"itemName": "Countertop Bundle", "quantity": 1, "unitPrice": 1500}],
                "menuItems": [{"itemName": "Menu Build", "quantity": 1, "unitPrice": 300}],
                "designFee": 200,
            },
            "credit": {},
        }
        return processor.process_from_dict(input_data)

    def test_card_volumes(self, output):
        calculations = output["calculations"]

        assert calculations["base_pre_tax_pre_tip"]["value"] == 15384.62
        assert calculations["post_tax_pre_tip"]["value"] == 16923.08
        assert calculations["fee_eligible_volume"]["value"] == 16923.08
        # 16923.08 x 1.04 x 1.20
        assert calculations["card_processed_total"]["value"] == 21120.0

    def test_costs(self, output):
        calculations = output["calculations"]

        assert calculations["markup_or_fee_collected_on_cards"]["value"] == 676.92
        assert calculations["processor_charge_on_cards"]["value"] == 813.12
        assert calculations["current_processing_cost"]["value"] == 600.0
        assert calculations["net_change_in_card_processing_cost"]["value"] == 136.2
        assert calculations["fee_collected_on_cash"]["value"] == 80.0

    def test_savings(self, output):
        savings = output["savings"]

        assert savings["processing_cost_savings_cards_only"] == 463.8
        assert savings["processing_cost_savings_percent"] == 0.773
        # card savings + fee on cash
        assert savings["total_net_gain_monthly"] == 543.8
        assert savings["total_net_gain_annual"] == 6525.64

    def test_investment(self, output):
        investment = output["investment"]

        assert investment["hardware_total"] == 1500.0
        assert investment["menu_works_total"] == 500.0
        assert investment["investment_total"] == 2000.0

    def test_credit_with_defaults(self, output):
        credit = output["credit_and_roi"]

        # credit volume 15384.62 x 1.04 x (1 + 10% + 20%) = 20800
        # (3.85 - 2) x 6 months x 50% x 0.208 x 1000
        assert credit["merchant_credit_amount"] == 1154.4
        assert credit["total_investment_after_credit"] == 845.6
        assert credit["payback_months"] == 1.6

    def test_no_warnings(self, output):
        assert output["warnings"] == []


class TestRetailCashDiscountingQuote:
    """Retail shop: tip is ignored, markup is capped to a 4% processing rate."""

    @pytest.fixture
    def output(self, processor):
        return processor.process_from_dict(
            {
                "programType": "CASH_DISCOUNTING",
                "businessType": "RETAIL",
                "monthlyCardVolume": 10800,
                "monthlyCashVolume": 5400,
                "currentRatePercent": 2.5,
                "taxRatePercent": 8,
                "tipRatePercent": 20,
                "priceAdjustmentPercent": 5,
                "cashDiscountPercent": 3,
            }
        )

    def test_flat_rate_capped(self, output):
        # 0.05 / 1.05 = 0.0476 -> capped at 0.04
        assert output["quote_summary"]["effective_flat_rate_percent"] == 4.0

    def test_card_side(self, output):
        calculations = output["calculations"]

        assert calculations["base_pre_tax_pre_tip"]["value"] == 10000.0
        assert calculations["price_adjusted_base"]["value"] == 10500.0
        assert calculations["card_processed_total"]["value"] == 11340.0
        assert calculations["processor_charge_on_cards"]["value"] == 453.6
        assert calculations["recovery"]["value"] == 46.4

    def test_cash_side(self, output):
        calculations = output["calculations"]

        assert calculations["base_cash"]["value"] == 5000.0
        assert calculations["menu_priced_cash_base"]["value"] == 5250.0
        assert calculations["cash_discount_given"]["value"] == 157.5
        assert calculations["extra_cash_revenue"]["value"] == 92.5

    def test_totals(self, output):
        savings = output["savings"]

        assert savings["processing_cost_savings_cards_only"] == 316.4
        assert savings["total_net_gain_monthly"] == 408.9
        assert savings["total_net_gain_annual"] == 4906.8


class TestManualFlatRateQuote:
    """A negotiated flat rate replaces the derived one."""

    @pytest.fixture
    def output(self, processor):
        return processor.process_from_dict(
            {
                "programType": "DUAL_PRICING",
                "businessType": "RETAIL",
                "monthlyCardVolume": 50000,
                "currentRatePercent": 2.9,
                "priceAdjustmentPercent": 4,
                "flatRateOverridePercent": 3.5,
            }
        )

    def test_rate_source(self, output):
        summary = output["quote_summary"]

        assert summary["is_flat_rate_auto_derived"] is False
        assert summary["flat_rate_source"] == "MANUAL"
        assert summary["effective_flat_rate_percent"] == 3.5

    def test_negative_net_change_means_profit(self, output):
        calculations = output["calculations"]

        assert calculations["processor_charge_on_cards"]["value"] == 1820.0
        assert calculations["markup_or_fee_collected_on_cards"]["value"] == 2000.0
        assert calculations["net_change_in_card_processing_cost"]["value"] == -180.0

    def test_savings_above_current_cost(self, output):
        savings = output["savings"]

        assert savings["processing_cost_savings_cards_only"] == 1630.0
        assert savings["processing_cost_savings_percent"] == 1.1241
        assert savings["total_net_gain_annual"] == 19560.0
