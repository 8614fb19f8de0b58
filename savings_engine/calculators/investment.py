"""
Investment Totals

Sums the hardware, menu works and software lines of a quote. Malformed
quantities or prices were already coerced to 0 by the models, so a bad
line simply contributes nothing.
"""

from decimal import Decimal

from ..models import EngineConfig, InvestmentTotals, LineItem, QuoteCosts, SoftwareItem
from ..rounding import ONE, ZERO, quantize_money


def _line_total(items) -> Decimal:
    return sum((item.quantity * item.unit_price for item in items), ZERO)


class InvestmentCalculator:
    """Builds the one-time investment and monthly software cost for a quote."""

    def calculate(self, costs: QuoteCosts, config: EngineConfig) -> InvestmentTotals:
        cents = config.currency_decimals
        return InvestmentTotals(
            hardware_total=quantize_money(self.hardware_total(costs.hardware_items), cents),
            menu_works_total=quantize_money(self.menu_works_total(costs), cents),
            monthly_software_cost=quantize_money(self.monthly_software_cost(costs.software_items), cents),
        )

    def hardware_total(self, items: tuple[LineItem, ...]) -> Decimal:
        """Bundles + individual + optional + other hardware, quantity x unit price."""
        return _line_total(items)

    def menu_works_total(self, costs: QuoteCosts) -> Decimal:
        """Menu items + menu add-ons + design fee."""
        return _line_total(costs.menu_items) + _line_total(costs.menu_add_ons) + costs.design_fee

    def monthly_software_cost(self, items: tuple[SoftwareItem, ...]) -> Decimal:
        return sum((self._software_item_cost(item) for item in items), ZERO)

    def _software_item_cost(self, item: SoftwareItem) -> Decimal:
        """
        Flat items: monthly_software x quantity.

        Tiered items price each unit separately: unit 1 at monthly_software,
        units 2-4 at their tier cost when one is set. Units past the fourth
        carry no software charge.
        """
        if not item.is_tiered:
            return item.monthly_software * item.quantity

        quantity = item.quantity or ONE
        cost = item.monthly_software if quantity >= 1 else ZERO
        for unit, tier_cost in enumerate(item.tier_costs, start=2):
            if quantity >= unit and tier_cost is not None:
                cost += tier_cost
        return cost
