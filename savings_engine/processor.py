"""
Quote Processor - Main Orchestrator

Coordinates the savings quote pipeline through discrete, testable steps.
"""

from dataclasses import replace
from typing import Any, Dict

from .calculators import (
    CashDiscountingCalculator,
    DualPricingCalculator,
    FlatRateDeriver,
    InvestmentCalculator,
    MerchantCreditCalculator,
    SupplementalFeeCalculator,
)
from .models import (
    CreditAndRoi,
    CreditInput,
    EngineConfig,
    ProcessingContext,
    ProgramInput,
    ProgramResult,
    ProgramType,
    QuoteOutcome,
    QuoteRequest,
)
from .output import OutputBuilder
from .validators import InputValidator


class QuoteProcessor:
    """
    Main orchestrator for savings quotes.

    Implements a clear pipeline pattern:
    1. Collect Warnings
    2. Derive Flat Rate
    3. Dispatch to the Program Calculator
    4. Total the Investment (optional)
    5. Calculate Merchant Credit & Payback (optional)
    6. Build Output

    The processor holds no per-quote state, so one instance can serve
    concurrent requests. A config passed to a call overrides the default.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self.validator = InputValidator()
        self.flat_rate_deriver = FlatRateDeriver()
        self.calculators = {
            ProgramType.DUAL_PRICING: DualPricingCalculator(),
            ProgramType.CASH_DISCOUNTING: CashDiscountingCalculator(),
            ProgramType.SUPPLEMENTAL_FEE: SupplementalFeeCalculator(),
        }
        self.investment_calculator = InvestmentCalculator()
        self.credit_calculator = MerchantCreditCalculator()
        self.output_builder = OutputBuilder()

    def calculate(self, inputs: ProgramInput, config: EngineConfig | None = None) -> ProgramResult:
        """Run one program calculation and return its result record."""
        ctx = self._build_context(inputs, config or self.config)
        return self.calculators[inputs.program_type].calculate(ctx)

    def calculate_credit(
        self,
        inputs: ProgramInput,
        result: ProgramResult,
        credit: CreditInput,
        config: EngineConfig | None = None,
    ) -> CreditAndRoi:
        """Merchant credit and payback for an already-calculated result."""
        ctx = ProcessingContext(inputs=inputs, config=config or self.config, flat_rate=result.flat_rate)
        return self.credit_calculator.calculate(ctx, result, credit)

    def process(self, request: QuoteRequest, config: EngineConfig | None = None) -> QuoteOutcome:
        """
        Process a full quote request through the complete pipeline.

        Args:
            request: QuoteRequest with the program input and optional credit/cost data
            config: Overrides the processor's default config for this call

        Returns:
            QuoteOutcome with the program result, optional credit/ROI and warnings
        """
        config = config or self.config
        inputs = request.program

        # Step 1: Collect caller-level warnings
        warnings = self.validator.warnings(inputs, config)

        # Steps 2-3: Derive flat rate and dispatch
        result = self.calculate(inputs, config)

        # Step 4: Investment totals from line items
        investment = None
        if request.costs is not None:
            investment = self.investment_calculator.calculate(request.costs, config)

        # Step 5: Merchant credit & payback
        credit_and_roi = None
        if request.credit is not None or investment is not None:
            credit = self._resolve_credit(request.credit or CreditInput(), investment)
            credit_and_roi = self.calculate_credit(inputs, result, credit, config)

        return QuoteOutcome(
            result=result,
            credit_and_roi=credit_and_roi,
            investment=investment,
            warnings=tuple(warnings),
        )

    def process_from_dict(self, data: Dict[str, Any], config: EngineConfig | None = None) -> Dict[str, Any]:
        """
        Process a quote from raw dictionary input.

        Convenience method for API usage.
        """
        request = QuoteRequest.from_dict(data)
        outcome = self.process(request, config)
        return self.output_builder.build(request.program, outcome)

    def _build_context(self, inputs: ProgramInput, config: EngineConfig) -> ProcessingContext:
        """Build the processing context, deriving the flat rate first."""
        return ProcessingContext(
            inputs=inputs,
            config=config,
            flat_rate=self.flat_rate_deriver.derive(inputs, config),
        )

    def _resolve_credit(self, credit: CreditInput, investment) -> CreditInput:
        """Fill investment total and new software cost from line items when not given."""
        if investment is None:
            return credit
        return replace(
            credit,
            investment_total=(
                credit.investment_total if credit.investment_total is not None else investment.investment_total
            ),
            new_software_cost=credit.new_software_cost or investment.monthly_software_cost,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def process_quote_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """Process a quote from Python dict and return Python dict."""
    processor = QuoteProcessor()
    return processor.process_from_dict(input_data)


def process_quote_from_json(json_input: str) -> str:
    """
    Process a quote from JSON string input and return JSON string output.
    """
    import json

    try:
        input_data = json.loads(json_input)
        result = process_quote_from_dict(input_data)
        return json.dumps(result, indent=2)

    except ValueError as e:
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)
