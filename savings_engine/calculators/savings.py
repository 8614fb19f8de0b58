"""
Savings Summary

Turns the unrounded cost figures of any program into the shared,
cent-rounded savings fields of a ProgramBreakdown.
"""

from decimal import Decimal

from ..models import ProcessingContext
from ..rounding import ONE, ZERO, quantize_money, round_half_up, safe_divide


def back_out_base(gross_volume: Decimal, tax: Decimal, tip: Decimal) -> Decimal:
    """Pre-tax, pre-tip base: gross / (1 + tax + tip)."""
    return safe_divide(gross_volume, ONE + tax + tip)


def summarize_savings(
    ctx: ProcessingContext,
    *,
    base: Decimal,
    card_processed_total: Decimal,
    processor_charge: Decimal,
    collected: Decimal,
    current_cost: Decimal,
    extra_monthly: Decimal = ZERO,
    order_of_operations: str,
) -> dict:
    """
    Build the ProgramBreakdown keyword arguments.

    Annual gain is 12 x the UNROUNDED monthly figure, rounded once, so
    cent rounding never compounds across the year.
    """
    config = ctx.config
    cents = config.currency_decimals

    net_change = processor_charge - collected
    savings = current_cost - net_change
    savings_cards_only = quantize_money(savings, cents)

    if current_cost == 0:
        savings_percent = ZERO
    else:
        savings_percent = round_half_up(savings_cards_only / current_cost, config.rate_decimals)

    monthly = savings + extra_monthly

    return dict(
        base_pre_tax_pre_tip=quantize_money(base, cents),
        card_processed_total=quantize_money(card_processed_total, cents),
        processor_charge_on_cards=quantize_money(processor_charge, cents),
        markup_or_fee_collected_on_cards=quantize_money(collected, cents),
        recovery=quantize_money(collected - processor_charge, cents),
        current_processing_cost=quantize_money(current_cost, cents),
        net_change_in_card_processing_cost=quantize_money(net_change, cents),
        processing_cost_savings_cards_only=savings_cards_only,
        processing_cost_savings_percent=savings_percent,
        total_net_gain_monthly=quantize_money(monthly, cents),
        total_net_gain_annual=quantize_money(monthly * config.months_per_year, cents),
        flat_rate=ctx.flat_rate,
        effective_flat_rate_percent=ctx.flat_rate.display_percent(config.percent_decimals),
        order_of_operations=order_of_operations,
    )
