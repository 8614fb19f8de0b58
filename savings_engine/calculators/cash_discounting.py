"""
Cash Discounting Calculator

Card side: identical in shape to Dual Pricing, with the adjustment acting
as a menu markup. Cash side: menu prices carry the same markup and cash
customers receive the cash discount off the menu price.
"""

from decimal import Decimal

from ..models import CashDiscountingResult, ProcessingContext
from ..rounding import ONE, ZERO, quantize_money
from .dual_pricing import calculate_card_branch
from .savings import back_out_base, summarize_savings

ORDER_OF_OPERATIONS = "Base Card Volume → +Menu Markup → +Tax → +Tip"


class CashDiscountingCalculator:
    """Calculates savings for the menu markup / cash discount program."""

    def calculate(self, ctx: ProcessingContext) -> CashDiscountingResult:
        """
        Net monthly gain = card savings + extra cash revenue.

        A 0% cash discount still computes; it is the caller's job to flag
        that such a quote is pure upside on cash.
        """
        branch = calculate_card_branch(ctx)
        cash = self._calculate_cash_branch(ctx)
        cents = ctx.config.currency_decimals

        fields = summarize_savings(
            ctx,
            base=branch.base,
            card_processed_total=branch.card_processed_total,
            processor_charge=branch.processor_charge,
            collected=branch.markup_collected,
            current_cost=branch.current_cost,
            extra_monthly=cash["extra_cash_revenue"],
            order_of_operations=ORDER_OF_OPERATIONS,
        )
        return CashDiscountingResult(
            price_adjusted_base=quantize_money(branch.price_adjusted_base, cents),
            **{name: quantize_money(value, cents) for name, value in cash.items()},
            **fields,
        )

    def _calculate_cash_branch(self, ctx: ProcessingContext) -> dict[str, Decimal]:
        """
        Cash-side math, skipped entirely when there is no cash volume.

        1. base_cash = gross_cash / (1 + tax + tip)
        2. menu_priced_cash_base = base_cash x (1 + markup)
        3. cash_discount_given = menu_priced_cash_base x discount
        4. net_cash_base = menu_priced_cash_base - cash_discount_given
        5. cash_processed_total = net_cash_base x (1 + tax) x (1 + tip)   (report only)
        6. extra_cash_revenue = (menu_priced_cash_base - base_cash) - cash_discount_given
        """
        inputs = ctx.inputs
        names = (
            "base_cash",
            "menu_priced_cash_base",
            "cash_discount_given",
            "net_cash_base",
            "cash_processed_total",
            "extra_cash_revenue",
        )
        if inputs.monthly_cash_volume <= 0:
            return dict.fromkeys(names, ZERO)

        tax, tip = inputs.tax, inputs.tip
        base_cash = back_out_base(inputs.monthly_cash_volume, tax, tip)
        menu_priced_cash_base = base_cash * (ONE + inputs.price_adjustment)
        cash_discount_given = menu_priced_cash_base * inputs.cash_discount
        net_cash_base = menu_priced_cash_base - cash_discount_given

        return {
            "base_cash": base_cash,
            "menu_priced_cash_base": menu_priced_cash_base,
            "cash_discount_given": cash_discount_given,
            "net_cash_base": net_cash_base,
            "cash_processed_total": net_cash_base * (ONE + tax) * (ONE + tip),
            # Signed: negative when the discount outweighs the markup
            "extra_cash_revenue": (menu_priced_cash_base - base_cash) - cash_discount_given,
        }
