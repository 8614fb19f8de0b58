"""
Supplemental Fee Calculator

The fee is a separate line on the ticket. Where it lands in the order of
operations depends on two independent choices:

- tip timing: is the fee computed before the tip is added, or after?
- tax basis: is the fee computed on the pre-tax or the post-tax amount?

Each (tip timing, tax basis) pair has its own volume rule.
"""

from decimal import Decimal

from ..models import FeeTaxBasis, ProcessingContext, SupplementalFeeResult, TipTiming
from ..rounding import ONE, quantize_money
from .savings import back_out_base, summarize_savings

DEFAULT_COMBO = (TipTiming.BEFORE_TIP, FeeTaxBasis.POST_TAX)

ORDER_OF_OPERATIONS = {
    (TipTiming.BEFORE_TIP, FeeTaxBasis.POST_TAX): "Pre-Tax Base → +Tax → +Supplemental Fee → +Tip",
    (TipTiming.BEFORE_TIP, FeeTaxBasis.PRE_TAX): "Pre-Tax Base → +Supplemental Fee → +Tax → +Tip",
    (TipTiming.AFTER_TIP, FeeTaxBasis.POST_TAX): "Pre-Tax Base → +Tax → +Tip → +Supplemental Fee",
    (TipTiming.AFTER_TIP, FeeTaxBasis.PRE_TAX): "Pre-Tax Base → +Tip → +Fee → +Tax",
}

TIP_TIMING_LABELS = {
    TipTiming.BEFORE_TIP: "Tip handwritten – post sale",
    TipTiming.AFTER_TIP: "Tip at time of sale",
}

FEE_TAX_BASIS_LABELS = {
    FeeTaxBasis.POST_TAX: "Apply fee to post-tax amount",
    FeeTaxBasis.PRE_TAX: "Apply fee to pre-tax amount",
}


def _before_tip_post_tax(base, post_tax_pre_tip, tax, tip, fee):
    fee_eligible = post_tax_pre_tip
    tip_eligible = post_tax_pre_tip * (ONE + fee)
    return fee_eligible, tip_eligible, tip_eligible * (ONE + tip)


def _before_tip_pre_tax(base, post_tax_pre_tip, tax, tip, fee):
    fee_eligible = base
    tip_eligible = base * (ONE + fee) * (ONE + tax)
    return fee_eligible, tip_eligible, tip_eligible * (ONE + tip)


def _after_tip_post_tax(base, post_tax_pre_tip, tax, tip, fee):
    fee_eligible = post_tax_pre_tip * (ONE + tip)
    return fee_eligible, post_tax_pre_tip, fee_eligible * (ONE + fee)


def _after_tip_pre_tax(base, post_tax_pre_tip, tax, tip, fee):
    fee_eligible = base * (ONE + tip)
    return fee_eligible, base, base * (ONE + tax) * (ONE + tip) * (ONE + fee)


# (tip timing, tax basis) -> (fee eligible, tip eligible, card processed total)
VOLUME_RULES = {
    (TipTiming.BEFORE_TIP, FeeTaxBasis.POST_TAX): _before_tip_post_tax,
    (TipTiming.BEFORE_TIP, FeeTaxBasis.PRE_TAX): _before_tip_pre_tax,
    (TipTiming.AFTER_TIP, FeeTaxBasis.POST_TAX): _after_tip_post_tax,
    (TipTiming.AFTER_TIP, FeeTaxBasis.PRE_TAX): _after_tip_pre_tax,
}


class SupplementalFeeCalculator:
    """Calculates savings for the supplemental fee program."""

    def calculate(self, ctx: ProcessingContext) -> SupplementalFeeResult:
        """
        Shared precomputation:
            base = gross / (1 + tax + tip)
            post_tax_pre_tip = base x (1 + tax)

        Then for the selected combo:
            fee_collected_on_cards = fee_eligible x fee
            tip_amount = tip_eligible x tip
            processor_charge = card_processed_total x flat_rate
            fee_collected_on_cash = gross_cash x fee   (no processing cost on cash)
            net monthly = card savings + fee collected on cash
        """
        inputs = ctx.inputs
        cents = ctx.config.currency_decimals
        combo, used_default = self.resolve_combo(ctx)

        tax, tip, fee = inputs.tax, inputs.tip, inputs.price_adjustment
        base = back_out_base(inputs.monthly_card_volume, tax, tip)
        post_tax_pre_tip = base * (ONE + tax)

        fee_eligible, tip_eligible, card_processed_total = VOLUME_RULES[combo](
            base, post_tax_pre_tip, tax, tip, fee
        )
        fee_collected_on_cards = fee_eligible * fee
        fee_collected_on_cash = self._fee_on_cash(inputs.monthly_cash_volume, fee)

        fields = summarize_savings(
            ctx,
            base=base,
            card_processed_total=card_processed_total,
            processor_charge=card_processed_total * ctx.flat_rate.value,
            collected=fee_collected_on_cards,
            current_cost=inputs.monthly_card_volume * inputs.current_rate,
            extra_monthly=fee_collected_on_cash,
            order_of_operations=ORDER_OF_OPERATIONS[combo],
        )
        return SupplementalFeeResult(
            post_tax_pre_tip=quantize_money(post_tax_pre_tip, cents),
            fee_eligible_volume=quantize_money(fee_eligible, cents),
            tip_eligible_volume=quantize_money(tip_eligible, cents),
            tip_amount=quantize_money(tip_eligible * tip, cents),
            fee_collected_on_cash=quantize_money(fee_collected_on_cash, cents),
            tip_timing=combo[0],
            fee_tax_basis=combo[1],
            used_default_combo=used_default,
            **fields,
        )

    def resolve_combo(self, ctx: ProcessingContext) -> tuple[tuple[TipTiming, FeeTaxBasis], bool]:
        """
        Pick the volume rule for the input flags.

        A missing flag means the pair is unsupported, and the whole combo
        falls back to BEFORE_TIP / POST_TAX, unless the config is strict.
        """
        inputs = ctx.inputs
        combo = (inputs.tip_timing, inputs.fee_tax_basis)
        if combo in VOLUME_RULES:
            return combo, False

        if ctx.config.strict_fee_combo:
            raise ValueError(
                f"tipTiming and feeTaxBasis are required for the supplemental fee program, "
                f"got: {inputs.tip_timing}, {inputs.fee_tax_basis}"
            )
        return DEFAULT_COMBO, True

    def _fee_on_cash(self, cash_volume: Decimal, fee: Decimal) -> Decimal:
        if cash_volume <= 0:
            return Decimal("0")
        return cash_volume * fee
