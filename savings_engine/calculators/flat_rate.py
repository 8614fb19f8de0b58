"""
Flat-Rate Deriver

Determines the processing rate the program itself charges on the
marked-up (or fee-inclusive) card total.
"""

from decimal import Decimal

from ..models import EngineConfig, FlatRate, ProgramInput, RateSource
from ..rounding import ONE, ZERO, percent_to_fraction, round_half_up


class FlatRateDeriver:
    """Derives the flat rate from the merchant-facing adjustment, or takes the manual override."""

    def derive(self, inputs: ProgramInput, config: EngineConfig) -> FlatRate:
        """
        Priority order:
        1. Manual override (used as-is, not capped)
        2. Auto rule: adjustment / (1 + adjustment), 4 decimals, capped at 4%

        The adjustment is the price differential, menu markup or
        supplemental fee depending on the program; all share the rule.
        """
        if inputs.flat_rate_override_percent is not None:
            return FlatRate(
                value=percent_to_fraction(inputs.flat_rate_override_percent),
                source=RateSource.MANUAL,
            )

        return FlatRate(
            value=self.auto_rate(inputs.price_adjustment, config),
            source=RateSource.AUTO,
        )

    def auto_rate(self, adjustment: Decimal, config: EngineConfig) -> Decimal:
        """
        Rate that exactly recovers a percentage adjustment.

        4% adjustment -> 0.04 / 1.04 = 0.038461... -> 0.0385
        """
        if adjustment <= 0:
            return ZERO

        rate = round_half_up(adjustment / (ONE + adjustment), config.rate_decimals)
        return min(rate, config.flat_rate_cap)
