"""
Dual Pricing Calculator

Order of operations: Base -> +Price Differential -> +Tax -> +Tip.
The card price carries the differential; the processor charges the flat
rate on the full marked-up, tax- and tip-inclusive total.
"""

from ..models import CardBranch, DualPricingResult, ProcessingContext
from ..rounding import ONE, quantize_money
from .savings import back_out_base, summarize_savings

ORDER_OF_OPERATIONS = "Base Card Volume → +Price Differential → +Tax → +Tip"


def calculate_card_branch(ctx: ProcessingContext) -> CardBranch:
    """
    Card-side math shared with Cash Discounting.

    1. base = gross / (1 + tax + tip)
    2. price_adjusted_base = base x (1 + adjustment)
    3. card_processed_total = price_adjusted_base x (1 + tax) x (1 + tip)
    4. processor_charge = card_processed_total x flat_rate
    5. markup_collected = base x adjustment (on the ORIGINAL base only)
    6. current_cost = gross x current_rate
    """
    inputs = ctx.inputs
    tax, tip = inputs.tax, inputs.tip
    adjustment = inputs.price_adjustment

    base = back_out_base(inputs.monthly_card_volume, tax, tip)
    price_adjusted_base = base * (ONE + adjustment)
    card_processed_total = price_adjusted_base * (ONE + tax) * (ONE + tip)

    return CardBranch(
        base=base,
        price_adjusted_base=price_adjusted_base,
        card_processed_total=card_processed_total,
        processor_charge=card_processed_total * ctx.flat_rate.value,
        markup_collected=base * adjustment,
        current_cost=inputs.monthly_card_volume * inputs.current_rate,
    )


class DualPricingCalculator:
    """Calculates savings for the price differential program."""

    def calculate(self, ctx: ProcessingContext) -> DualPricingResult:
        branch = calculate_card_branch(ctx)

        fields = summarize_savings(
            ctx,
            base=branch.base,
            card_processed_total=branch.card_processed_total,
            processor_charge=branch.processor_charge,
            collected=branch.markup_collected,
            current_cost=branch.current_cost,
            order_of_operations=ORDER_OF_OPERATIONS,
        )
        return DualPricingResult(
            price_adjusted_base=quantize_money(branch.price_adjusted_base, ctx.config.currency_decimals),
            **fields,
        )
