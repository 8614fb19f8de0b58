"""
Calculators Package

Provides all calculation components for savings quotes.
"""

from .cash_discounting import CashDiscountingCalculator
from .credit import MerchantCreditCalculator
from .dual_pricing import DualPricingCalculator
from .flat_rate import FlatRateDeriver
from .investment import InvestmentCalculator
from .supplemental_fee import SupplementalFeeCalculator

__all__ = [
    "FlatRateDeriver",
    "DualPricingCalculator",
    "CashDiscountingCalculator",
    "SupplementalFeeCalculator",
    "MerchantCreditCalculator",
    "InvestmentCalculator",
]
