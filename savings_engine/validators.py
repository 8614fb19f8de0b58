"""
Input Checks for the Processing Savings Engine

The engine computes whatever the formulas produce and never rejects a
numeric input. These checks let callers surface quotes that are
technically valid but not sensible. They return messages; they never raise.
"""

from .models import NUMERIC_INPUT_FIELDS, EngineConfig, ProgramInput, ProgramType
from .rounding import HUNDRED


class InputValidator:
    """Collects caller-level warnings for a program input."""

    def warnings(self, inputs: ProgramInput, config: EngineConfig) -> list[str]:
        """Run all checks and return their messages in a stable order."""
        messages = []
        messages.extend(self._check_unrecognized_values(inputs))
        messages.extend(self._check_negative_values(inputs))
        messages.extend(self._check_current_rate(inputs))
        messages.extend(self._check_flat_rate_override(inputs, config))
        messages.extend(self._check_cash_discount(inputs))
        messages.extend(self._check_fee_combo(inputs))
        return messages

    def _check_unrecognized_values(self, inputs: ProgramInput) -> list[str]:
        """Values that fell back to a default, e.g. an unknown businessType."""
        return [
            f"{name} not recognized, got: {raw}; using {inputs.business_type.value}"
            for name, raw in inputs.unrecognized_values
        ]

    def _check_negative_values(self, inputs: ProgramInput) -> list[str]:
        return [
            f"{name} should not be negative, got: {getattr(inputs, name)}"
            for name in NUMERIC_INPUT_FIELDS
            if getattr(inputs, name) < 0
        ]

    def _check_current_rate(self, inputs: ProgramInput) -> list[str]:
        if inputs.monthly_card_volume > 0 and inputs.current_rate_percent == 0:
            return ["current_rate_percent is 0; savings percentage is reported as 0"]
        return []

    def _check_flat_rate_override(self, inputs: ProgramInput, config: EngineConfig) -> list[str]:
        override = inputs.flat_rate_override_percent
        if override is not None and override > config.flat_rate_cap * HUNDRED:
            return [
                f"flat_rate_override_percent ({override}) exceeds the "
                f"{config.flat_rate_cap * HUNDRED}% cap applied to derived rates"
            ]
        return []

    def _check_cash_discount(self, inputs: ProgramInput) -> list[str]:
        """A 0% cash discount makes the cash side pure upside."""
        if inputs.program_type != ProgramType.CASH_DISCOUNTING:
            return []
        if inputs.monthly_cash_volume > 0 and inputs.cash_discount_percent == 0:
            return ["cash_discount_percent is 0; cash revenue figures will be unrealistically high"]
        return []

    def _check_fee_combo(self, inputs: ProgramInput) -> list[str]:
        if inputs.program_type != ProgramType.SUPPLEMENTAL_FEE or inputs.has_fee_combo:
            return []
        return ["tip_timing/fee_tax_basis not set; using BEFORE_TIP / POST_TAX"]
