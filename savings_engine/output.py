"""
Output Builder

Constructs the API / report response from a quote outcome.
"""

from typing import Optional

from .calculators.supplemental_fee import FEE_TAX_BASIS_LABELS, TIP_TIMING_LABELS
from .models import (
    CashDiscountingResult,
    CreditAndRoi,
    InvestmentTotals,
    ProgramInput,
    ProgramResult,
    QuoteOutcome,
    SupplementalFeeResult,
)
from .rounding import format_currency as _fmt
from .rounding import format_percent, humanize_program, to_money


def _entry(value, description: str) -> dict:
    return {"value": to_money(value), "description": description}


class OutputBuilder:
    """Builds the final output response."""

    def build(self, inputs: ProgramInput, outcome: QuoteOutcome) -> dict:
        """Construct the complete quote response."""
        result = outcome.result
        output = {
            "quote_summary": self._build_quote_summary(inputs, result),
            "calculations": self._build_calculations(inputs, result),
            "savings": self._build_savings(result),
            "warnings": list(outcome.warnings),
        }
        if outcome.investment is not None:
            output["investment"] = self._build_investment(outcome.investment)
        credit = self._build_credit_and_roi(outcome.credit_and_roi)
        if credit is not None:
            output["credit_and_roi"] = credit
        return output

    def _build_quote_summary(self, inputs: ProgramInput, result: ProgramResult) -> dict:
        summary = {
            "program_type": result.program_type.value,
            "program_name": humanize_program(result.program_type),
            "business_type": inputs.business_type.value,
            "order_of_operations": result.order_of_operations,
            "effective_flat_rate_percent": float(result.effective_flat_rate_percent),
            "is_flat_rate_auto_derived": result.is_flat_rate_auto_derived,
            "flat_rate_source": result.flat_rate.source.value,
        }
        if isinstance(result, SupplementalFeeResult):
            summary["tip_timing"] = result.tip_timing.value
            summary["tip_timing_label"] = TIP_TIMING_LABELS[result.tip_timing]
            summary["fee_tax_basis"] = result.fee_tax_basis.value
            summary["fee_tax_basis_label"] = FEE_TAX_BASIS_LABELS[result.fee_tax_basis]
            summary["used_default_combo"] = result.used_default_combo
        return summary

    def _build_calculations(self, inputs: ProgramInput, result: ProgramResult) -> dict:
        """Build calculations section with value and dynamic description for each field."""
        volume = _fmt(inputs.monthly_card_volume)
        rate = format_percent(result.effective_flat_rate_percent)
        adjustment = format_percent(inputs.price_adjustment_percent)
        divisor = f"(1 + {format_percent(inputs.tax_rate_percent)} tax + {format_percent(inputs.tip * 100)} tip)"

        calculations = {
            "base_pre_tax_pre_tip": _entry(
                result.base_pre_tax_pre_tip,
                f"{volume} / {divisor} = {_fmt(result.base_pre_tax_pre_tip)}",
            ),
            "card_processed_total": _entry(
                result.card_processed_total,
                f"Card total the processor charges on, following {result.order_of_operations}",
            ),
            "processor_charge_on_cards": _entry(
                result.processor_charge_on_cards,
                f"{rate} × {_fmt(result.card_processed_total)} = {_fmt(result.processor_charge_on_cards)}",
            ),
            "markup_or_fee_collected_on_cards": _entry(
                result.markup_or_fee_collected_on_cards,
                self._collected_description(inputs, result, adjustment),
            ),
            "recovery": _entry(
                result.recovery,
                f"collected ({_fmt(result.markup_or_fee_collected_on_cards)}) - processor charge "
                f"({_fmt(result.processor_charge_on_cards)}) = {_fmt(result.recovery)}",
            ),
            "current_processing_cost": _entry(
                result.current_processing_cost,
                f"{format_percent(inputs.current_rate_percent)} × {volume} = {_fmt(result.current_processing_cost)}",
            ),
            "net_change_in_card_processing_cost": _entry(
                result.net_change_in_card_processing_cost,
                f"New out-of-pocket card processing cost: processor charge - collected = "
                f"{_fmt(result.net_change_in_card_processing_cost)}",
            ),
            "processing_cost_savings_cards_only": _entry(
                result.processing_cost_savings_cards_only,
                f"current cost ({_fmt(result.current_processing_cost)}) - new cost "
                f"({_fmt(result.net_change_in_card_processing_cost)}) = "
                f"{_fmt(result.processing_cost_savings_cards_only)}",
            ),
        }

        if hasattr(result, "price_adjusted_base"):
            calculations["price_adjusted_base"] = _entry(
                result.price_adjusted_base,
                f"{_fmt(result.base_pre_tax_pre_tip)} × (1 + {adjustment}) = {_fmt(result.price_adjusted_base)}",
            )
        if isinstance(result, CashDiscountingResult):
            calculations.update(self._build_cash_calculations(inputs, result))
        if isinstance(result, SupplementalFeeResult):
            calculations.update(self._build_supplemental_calculations(inputs, result))
        return calculations

    def _collected_description(self, inputs: ProgramInput, result: ProgramResult, adjustment: str) -> str:
        if isinstance(result, SupplementalFeeResult):
            return (
                f"{adjustment} supplemental fee × {_fmt(result.fee_eligible_volume)} fee-eligible volume = "
                f"{_fmt(result.markup_or_fee_collected_on_cards)}"
            )
        return (
            f"{adjustment} × {_fmt(result.base_pre_tax_pre_tip)} original base = "
            f"{_fmt(result.markup_or_fee_collected_on_cards)}"
        )

    def _build_cash_calculations(self, inputs: ProgramInput, result: CashDiscountingResult) -> dict:
        discount = format_percent(inputs.cash_discount_percent)
        if inputs.monthly_cash_volume <= 0:
            note = "No cash volume for this quote"
        else:
            note = (
                f"markup ({_fmt(result.menu_priced_cash_base - result.base_cash)}) - discount "
                f"({_fmt(result.cash_discount_given)}) = {_fmt(result.extra_cash_revenue)}"
            )
        return {
            "base_cash": _entry(result.base_cash, "Cash volume with tax and tip backed out"),
            "menu_priced_cash_base": _entry(result.menu_priced_cash_base, "Cash base at menu (marked-up) prices"),
            "cash_discount_given": _entry(
                result.cash_discount_given,
                f"{discount} × {_fmt(result.menu_priced_cash_base)} = {_fmt(result.cash_discount_given)}",
            ),
            "net_cash_base": _entry(result.net_cash_base, "Menu-priced cash base after the cash discount"),
            "cash_processed_total": _entry(
                result.cash_processed_total, "Net cash base with tax and tip, for reporting only"
            ),
            "extra_cash_revenue": _entry(result.extra_cash_revenue, note),
        }

    def _build_supplemental_calculations(self, inputs: ProgramInput, result: SupplementalFeeResult) -> dict:
        return {
            "post_tax_pre_tip": _entry(result.post_tax_pre_tip, "Base with tax added, before tip"),
            "fee_eligible_volume": _entry(
                result.fee_eligible_volume,
                f"Amount the supplemental fee applies to ({FEE_TAX_BASIS_LABELS[result.fee_tax_basis]})",
            ),
            "tip_eligible_volume": _entry(
                result.tip_eligible_volume, f"Amount the tip applies to ({TIP_TIMING_LABELS[result.tip_timing]})"
            ),
            "tip_amount": _entry(
                result.tip_amount, f"{format_percent(inputs.tip * 100)} × {_fmt(result.tip_eligible_volume)}"
            ),
            "fee_collected_on_cash": _entry(
                result.fee_collected_on_cash,
                f"{format_percent(inputs.price_adjustment_percent)} × {_fmt(inputs.monthly_cash_volume)} cash volume "
                f"(no processing cost on cash)",
            ),
        }

    def _build_savings(self, result: ProgramResult) -> dict:
        return {
            "processing_cost_savings_cards_only": to_money(result.processing_cost_savings_cards_only),
            "processing_cost_savings_percent": float(result.processing_cost_savings_percent),
            "total_net_gain_monthly": to_money(result.total_net_gain_monthly),
            "total_net_gain_annual": to_money(result.total_net_gain_annual),
        }

    def _build_investment(self, investment: InvestmentTotals) -> dict:
        return {
            "hardware_total": to_money(investment.hardware_total),
            "menu_works_total": to_money(investment.menu_works_total),
            "monthly_software_cost": to_money(investment.monthly_software_cost),
            "investment_total": to_money(investment.investment_total),
        }

    def _build_credit_and_roi(self, credit: Optional[CreditAndRoi]) -> Optional[dict]:
        """Build credit section if a credit calculation was requested."""
        if credit is None:
            return None

        return {
            "merchant_credit_amount": to_money(credit.merchant_credit_amount),
            "investment_total": to_money(credit.investment_total),
            "total_investment_after_credit": to_money(credit.total_investment_after_credit),
            "software_savings_monthly": to_money(credit.software_savings_monthly),
            "software_savings_annual": to_money(credit.software_savings_annual),
            "total_monthly_savings": to_money(credit.total_monthly_savings),
            "total_annual_savings": to_money(credit.total_annual_savings),
            "payback_months": float(credit.payback_months) if credit.payback_months is not None else None,
            "description": (
                f"({format_percent(credit.net_margin_percent)} margin) × {credit.payback_window_months} months × "
                f"{format_percent(credit.profit_share * 100)} share × {credit.volume_factor:.4f} volume factor × 1000"
                f" = {_fmt(credit.merchant_credit_amount)}"
            ),
        }
