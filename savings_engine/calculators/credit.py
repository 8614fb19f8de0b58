"""
Merchant Credit & ROI Calculator

Offsets the one-time investment with a credit earned from the program's
projected processing margin, then works out how many months of savings
pay back whatever is still due.
"""

from decimal import Decimal

from ..models import CreditAndRoi, CreditInput, ProcessingContext, ProgramInput, ProgramResult
from ..rounding import HUNDRED, ONE, ZERO, quantize_money, round_half_up
from .savings import back_out_base


class MerchantCreditCalculator:
    """Computes merchant credit, amount due after credit, and payback months."""

    def calculate(self, ctx: ProcessingContext, result: ProgramResult, credit: CreditInput) -> CreditAndRoi:
        """
        Merchant Credit = max(0, net margin x window x profit share x volume factor x 1000)

        - net margin is in percentage points (flat rate % - interchange %)
        - volume factor scales the credit volume (see credit_volume) per $100,000
        - x1000 restores dollars: 1 point on $100,000 is $1,000
        """
        config = ctx.config
        cents = config.currency_decimals

        profit_share = self.normalize_profit_share(
            credit.profit_share_percent
            if credit.profit_share_percent is not None
            else config.default_profit_share_percent
        )
        window = (
            credit.payback_window_months
            if credit.payback_window_months is not None
            else Decimal(config.default_payback_window_months)
        )

        net_margin = ctx.flat_rate.percent - ctx.inputs.interchange_cost_percent
        volume_factor = self.credit_volume(ctx.inputs) / config.credit_volume_scale
        raw_credit = net_margin * window * profit_share * volume_factor * config.credit_dollar_factor
        merchant_credit = quantize_money(max(ZERO, raw_credit), cents)

        investment_total = quantize_money(credit.investment_total or ZERO, cents)
        total_due = quantize_money(max(ZERO, investment_total - merchant_credit), cents)

        software_monthly = self._software_savings(credit)
        total_monthly = result.total_net_gain_monthly + software_monthly

        return CreditAndRoi(
            merchant_credit_amount=merchant_credit,
            investment_total=investment_total,
            total_investment_after_credit=total_due,
            net_margin_percent=net_margin,
            volume_factor=volume_factor,
            profit_share=profit_share,
            payback_window_months=window,
            software_savings_monthly=quantize_money(software_monthly, cents),
            software_savings_annual=quantize_money(software_monthly * config.months_per_year, cents),
            total_monthly_savings=quantize_money(total_monthly, cents),
            total_annual_savings=quantize_money(
                result.total_net_gain_annual + software_monthly * config.months_per_year, cents
            ),
            payback_months=self.payback_months(total_due, total_monthly, config.payback_decimals),
        )

    @staticmethod
    def credit_volume(inputs: ProgramInput) -> Decimal:
        """
        Marked-up card volume with tax and tip added back on the same
        additive divisor the base was backed out with:

            base x (1 + adjustment) x (1 + tax + tip)

        This differs from card_processed_total, which compounds tax and tip.
        """
        tax, tip = inputs.tax, inputs.tip
        base = back_out_base(inputs.monthly_card_volume, tax, tip)
        return base * (ONE + inputs.price_adjustment) * (ONE + tax + tip)

    @staticmethod
    def normalize_profit_share(value: Decimal) -> Decimal:
        """50 -> 0.50; values already at or below 1 are fractions."""
        if value > ONE:
            return value / HUNDRED
        return value

    @staticmethod
    def payback_months(total_due: Decimal, monthly_savings: Decimal, decimals: int = 1) -> Decimal | None:
        """Months of savings to cover total_due, or None when nothing is saved."""
        if monthly_savings <= 0:
            return None
        return round_half_up(total_due / monthly_savings, decimals)

    def _software_savings(self, credit: CreditInput) -> Decimal:
        """
        When the processor covers the new software, the merchant saves its
        entire current software bill; otherwise only the difference.
        """
        if credit.covers_software_cost:
            return credit.current_software_cost
        return credit.current_software_cost - credit.new_software_cost
