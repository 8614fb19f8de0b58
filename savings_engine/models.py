"""
Domain Models for the Processing Savings Engine

These dataclasses provide type-safe representations of all quoting inputs
and results. All monetary values and rates use Decimal for precision.
Results are frozen: every recalculation builds a fresh record.
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum

from .rounding import HUNDRED, ZERO, percent_to_fraction, round_half_up, to_decimal

# =============================================================================
# ENUMS
# =============================================================================


class ProgramType(str, Enum):
    DUAL_PRICING = "DUAL_PRICING"
    CASH_DISCOUNTING = "CASH_DISCOUNTING"
    SUPPLEMENTAL_FEE = "SUPPLEMENTAL_FEE"


class BusinessType(str, Enum):
    RESTAURANT = "RESTAURANT"
    RETAIL = "RETAIL"


class TipTiming(str, Enum):
    BEFORE_TIP = "BEFORE_TIP"
    AFTER_TIP = "AFTER_TIP"


class FeeTaxBasis(str, Enum):
    PRE_TAX = "PRE_TAX"
    POST_TAX = "POST_TAX"


class RateSource(str, Enum):
    AUTO = "AUTO"
    MANUAL = "MANUAL"


NUMERIC_INPUT_FIELDS = (
    "monthly_card_volume",
    "monthly_cash_volume",
    "current_rate_percent",
    "interchange_cost_percent",
    "tax_rate_percent",
    "tip_rate_percent",
    "price_adjustment_percent",
    "cash_discount_percent",
)

# Older clients send feeTiming instead of tipTiming
LEGACY_FEE_TIMING = {
    "FEE_BEFORE_TIP": TipTiming.BEFORE_TIP,
    "FEE_AFTER_TIP": TipTiming.AFTER_TIP,
}


def _pick(data: dict, *keys, default=None):
    """Return the first key present in data (camelCase first, then snake_case)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _parse_enum(enum_cls, raw, default=None, strict: bool = True):
    if raw is None or raw == "":
        return default
    try:
        return enum_cls(str(raw).upper())
    except ValueError:
        if strict:
            allowed = ", ".join(member.value for member in enum_cls)
            raise ValueError(f"Invalid {enum_cls.__name__}: {raw}. Must be one of {allowed}")
        return default


def _optional_decimal(raw) -> Decimal | None:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    return to_decimal(raw)


def _env_decimal(env, key: str, default: Decimal) -> Decimal:
    """Environment override; a missing or unparseable value keeps the default."""
    raw = env.get(key)
    if raw is None or not str(raw).strip():
        return default
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return default
    return value if value.is_finite() else default


# =============================================================================
# CONFIGURATION
# =============================================================================


@dataclass(frozen=True)
class EngineConfig:
    """Tuning constants, passed explicitly into every calculation."""

    currency_decimals: int = 2
    rate_decimals: int = 4
    percent_decimals: int = 2
    flat_rate_cap: Decimal = Decimal("0.04")
    months_per_year: int = 12
    default_profit_share_percent: Decimal = Decimal("50")
    default_payback_window_months: int = 6
    credit_volume_scale: Decimal = Decimal("100000")
    credit_dollar_factor: Decimal = Decimal("1000")
    payback_decimals: int = 1
    strict_fee_combo: bool = False

    @classmethod
    def from_env(cls, environ=None) -> "EngineConfig":
        """Build a config from SAVINGS_* environment overrides."""
        env = os.environ if environ is None else environ
        defaults = cls()
        strict = env.get("SAVINGS_STRICT_FEE_COMBO", "")
        window = _env_decimal(
            env, "SAVINGS_DEFAULT_PAYBACK_WINDOW", Decimal(defaults.default_payback_window_months)
        )
        return cls(
            flat_rate_cap=_env_decimal(env, "SAVINGS_FLAT_RATE_CAP", defaults.flat_rate_cap),
            default_profit_share_percent=_env_decimal(
                env, "SAVINGS_DEFAULT_PROFIT_SHARE", defaults.default_profit_share_percent
            ),
            default_payback_window_months=int(window),
            strict_fee_combo=strict.lower() in ("1", "true", "yes"),
        )


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass(frozen=True)
class ProgramInput:
    """One merchant/program record per calculation. Percentages are in percent units (4 = 4%)."""

    program_type: ProgramType
    business_type: BusinessType = BusinessType.RESTAURANT
    monthly_card_volume: Decimal = ZERO
    monthly_cash_volume: Decimal = ZERO
    current_rate_percent: Decimal = ZERO
    interchange_cost_percent: Decimal = ZERO
    tax_rate_percent: Decimal = ZERO
    tip_rate_percent: Decimal = ZERO
    price_adjustment_percent: Decimal = ZERO
    cash_discount_percent: Decimal = ZERO
    flat_rate_override_percent: Decimal | None = None
    tip_timing: TipTiming | None = None
    fee_tax_basis: FeeTaxBasis | None = None
    # (field, raw value) pairs that were not recognised and fell back to a default
    unrecognized_values: tuple[tuple[str, str], ...] = field(default=(), compare=False)

    def __post_init__(self):
        for name in NUMERIC_INPUT_FIELDS:
            object.__setattr__(self, name, to_decimal(getattr(self, name)))
        object.__setattr__(
            self, "flat_rate_override_percent", _optional_decimal(self.flat_rate_override_percent)
        )

    @property
    def tax(self) -> Decimal:
        return percent_to_fraction(self.tax_rate_percent)

    @property
    def tip(self) -> Decimal:
        """Tip fraction; retail businesses never carry a tip."""
        if self.business_type == BusinessType.RETAIL:
            return ZERO
        return percent_to_fraction(self.tip_rate_percent)

    @property
    def price_adjustment(self) -> Decimal:
        return percent_to_fraction(self.price_adjustment_percent)

    @property
    def current_rate(self) -> Decimal:
        return percent_to_fraction(self.current_rate_percent)

    @property
    def cash_discount(self) -> Decimal:
        return percent_to_fraction(self.cash_discount_percent)

    @property
    def has_fee_combo(self) -> bool:
        return self.tip_timing is not None and self.fee_tax_basis is not None

    @classmethod
    def from_dict(cls, data: dict) -> "ProgramInput":
        program_type = _parse_enum(ProgramType, _pick(data, "programType", "program_type"))
        if program_type is None:
            raise ValueError("programType is required")

        raw_business_type = _pick(data, "businessType", "business_type")
        business_type = _parse_enum(BusinessType, raw_business_type, strict=False)
        unrecognized = []
        if business_type is None:
            if raw_business_type not in (None, ""):
                unrecognized.append(("businessType", str(raw_business_type)))
            business_type = BusinessType.RESTAURANT

        tip_timing = _parse_enum(TipTiming, _pick(data, "tipTiming", "tip_timing"), strict=False)
        if tip_timing is None:
            legacy = _pick(data, "feeTiming", "fee_timing")
            tip_timing = LEGACY_FEE_TIMING.get(str(legacy).upper()) if legacy else None

        return cls(
            program_type=program_type,
            business_type=business_type,
            monthly_card_volume=to_decimal(_pick(data, "monthlyCardVolume", "monthly_card_volume")),
            monthly_cash_volume=to_decimal(_pick(data, "monthlyCashVolume", "monthly_cash_volume")),
            current_rate_percent=to_decimal(_pick(data, "currentRatePercent", "current_rate_percent")),
            interchange_cost_percent=to_decimal(_pick(data, "interchangeCostPercent", "interchange_cost_percent")),
            tax_rate_percent=to_decimal(_pick(data, "taxRatePercent", "tax_rate_percent")),
            tip_rate_percent=to_decimal(_pick(data, "tipRatePercent", "tip_rate_percent")),
            # Support legacy 'priceDifferential' from the dual pricing calculator
            price_adjustment_percent=to_decimal(
                _pick(data, "priceAdjustmentPercent", "price_adjustment_percent", "priceDifferential")
            ),
            cash_discount_percent=to_decimal(_pick(data, "cashDiscountPercent", "cash_discount_percent")),
            flat_rate_override_percent=_optional_decimal(
                _pick(data, "flatRateOverridePercent", "flat_rate_override_percent")
            ),
            tip_timing=tip_timing,
            fee_tax_basis=_parse_enum(FeeTaxBasis, _pick(data, "feeTaxBasis", "fee_tax_basis"), strict=False),
            unrecognized_values=tuple(unrecognized),
        )


@dataclass(frozen=True)
class CreditInput:
    """Parameters for the merchant credit and payback calculation."""

    investment_total: Decimal | None = None
    profit_share_percent: Decimal | None = None
    payback_window_months: Decimal | None = None
    current_software_cost: Decimal = ZERO
    new_software_cost: Decimal = ZERO
    covers_software_cost: bool = False

    def __post_init__(self):
        for name in ("investment_total", "profit_share_percent", "payback_window_months"):
            object.__setattr__(self, name, _optional_decimal(getattr(self, name)))
        for name in ("current_software_cost", "new_software_cost"):
            object.__setattr__(self, name, to_decimal(getattr(self, name)))

    @classmethod
    def from_dict(cls, data: dict) -> "CreditInput":
        return cls(
            investment_total=_optional_decimal(_pick(data, "investmentTotal", "investment_total")),
            profit_share_percent=_optional_decimal(_pick(data, "profitSharePercent", "profit_share_percent")),
            payback_window_months=_optional_decimal(
                _pick(data, "paybackWindowMonths", "payback_window_months", "roiMonths")
            ),
            current_software_cost=to_decimal(_pick(data, "currentSoftwareCost", "current_software_cost")),
            new_software_cost=to_decimal(_pick(data, "newSoftwareCost", "new_software_cost")),
            covers_software_cost=bool(_pick(data, "coversSoftwareCost", "covers_software_cost", default=False)),
        )


@dataclass(frozen=True)
class LineItem:
    """A priced hardware, menu or add-on line."""

    name: str
    quantity: Decimal
    unit_price: Decimal

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        return cls(
            name=str(_pick(data, "itemName", "name", default="")),
            quantity=to_decimal(data.get("quantity")),
            unit_price=to_decimal(_pick(data, "unitPrice", "unit_price")),
        )


@dataclass(frozen=True)
class SoftwareItem:
    """Monthly software line. tier_costs hold the 2nd, 3rd and 4th unit prices when tiered."""

    name: str
    quantity: Decimal
    monthly_software: Decimal
    tier_costs: tuple[Decimal | None, ...] = ()

    @property
    def is_tiered(self) -> bool:
        return any(cost is not None for cost in self.tier_costs)

    @classmethod
    def from_dict(cls, data: dict) -> "SoftwareItem":
        tiers = tuple(
            _optional_decimal(_pick(data, f"softwareCost{unit}", f"software_cost_{unit}")) for unit in (2, 3, 4)
        )
        return cls(
            name=str(_pick(data, "itemName", "name", default="")),
            quantity=to_decimal(data.get("quantity")),
            monthly_software=to_decimal(_pick(data, "monthlySoftware", "monthly_software")),
            tier_costs=tiers,
        )


def _items(data: dict, factory, *keys) -> tuple:
    raw = _pick(data, *keys, default=[])
    if not isinstance(raw, list):
        return ()
    return tuple(factory(item) for item in raw if isinstance(item, dict))


@dataclass(frozen=True)
class QuoteCosts:
    """Hardware, menu works and software lines making up the one-time investment."""

    bundles: tuple[LineItem, ...] = ()
    individual_equipment: tuple[LineItem, ...] = ()
    optional_equipment: tuple[LineItem, ...] = ()
    other_hardware: tuple[LineItem, ...] = ()
    menu_items: tuple[LineItem, ...] = ()
    menu_add_ons: tuple[LineItem, ...] = ()
    design_fee: Decimal = ZERO
    software_items: tuple[SoftwareItem, ...] = ()

    @property
    def hardware_items(self) -> tuple[LineItem, ...]:
        return self.bundles + self.individual_equipment + self.optional_equipment + self.other_hardware

    @classmethod
    def from_dict(cls, data: dict) -> "QuoteCosts":
        return cls(
            bundles=_items(data, LineItem.from_dict, "bundles"),
            individual_equipment=_items(data, LineItem.from_dict, "individualEquipment", "individual_equipment"),
            optional_equipment=_items(data, LineItem.from_dict, "optionalEquipment", "optional_equipment"),
            other_hardware=_items(data, LineItem.from_dict, "otherHardware", "other_hardware"),
            menu_items=_items(data, LineItem.from_dict, "menuItems", "menu_items"),
            menu_add_ons=_items(data, LineItem.from_dict, "menuAddOns", "menu_add_ons"),
            design_fee=to_decimal(_pick(data, "designFee", "design_fee")),
            software_items=_items(data, SoftwareItem.from_dict, "softwareItems", "software_items"),
        )


@dataclass(frozen=True)
class QuoteRequest:
    """Complete input for one quote: the program plus optional credit/investment data."""

    program: ProgramInput
    credit: CreditInput | None = None
    costs: QuoteCosts | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "QuoteRequest":
        program_data = data.get("program", data)
        credit = _pick(data, "credit")
        costs = _pick(data, "quoteCosts", "quote_costs")
        return cls(
            program=ProgramInput.from_dict(program_data),
            credit=CreditInput.from_dict(credit) if isinstance(credit, dict) else None,
            costs=QuoteCosts.from_dict(costs) if isinstance(costs, dict) else None,
        )


# =============================================================================
# INTERMEDIATE MODELS
# =============================================================================


@dataclass(frozen=True)
class FlatRate:
    """The rate the program charges, as a fraction, and where it came from."""

    value: Decimal
    source: RateSource

    @property
    def is_auto_derived(self) -> bool:
        return self.source == RateSource.AUTO

    @property
    def percent(self) -> Decimal:
        return self.value * HUNDRED

    def display_percent(self, decimals: int = 2) -> Decimal:
        return round_half_up(self.percent, decimals)


@dataclass(frozen=True)
class ProcessingContext:
    """
    Everything a calculator needs for one run.
    Holds no results; calculators return fresh records.
    """

    inputs: ProgramInput
    config: EngineConfig
    flat_rate: FlatRate


@dataclass(frozen=True)
class CardBranch:
    """Unrounded card-side figures shared by Dual Pricing and Cash Discounting."""

    base: Decimal
    price_adjusted_base: Decimal
    card_processed_total: Decimal
    processor_charge: Decimal
    markup_collected: Decimal
    current_cost: Decimal


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass(frozen=True)
class ProgramBreakdown:
    """Fields every program result carries. Money values are rounded to cents."""

    base_pre_tax_pre_tip: Decimal
    card_processed_total: Decimal
    processor_charge_on_cards: Decimal
    markup_or_fee_collected_on_cards: Decimal
    recovery: Decimal
    current_processing_cost: Decimal
    net_change_in_card_processing_cost: Decimal
    processing_cost_savings_cards_only: Decimal
    processing_cost_savings_percent: Decimal  # fraction of current cost
    total_net_gain_monthly: Decimal
    total_net_gain_annual: Decimal
    flat_rate: FlatRate
    effective_flat_rate_percent: Decimal
    order_of_operations: str

    @property
    def is_flat_rate_auto_derived(self) -> bool:
        return self.flat_rate.is_auto_derived


@dataclass(frozen=True)
class DualPricingResult(ProgramBreakdown):
    price_adjusted_base: Decimal = ZERO
    program_type: ProgramType = field(default=ProgramType.DUAL_PRICING, init=False)


@dataclass(frozen=True)
class CashDiscountingResult(ProgramBreakdown):
    price_adjusted_base: Decimal = ZERO
    base_cash: Decimal = ZERO
    menu_priced_cash_base: Decimal = ZERO
    cash_discount_given: Decimal = ZERO
    net_cash_base: Decimal = ZERO
    cash_processed_total: Decimal = ZERO
    extra_cash_revenue: Decimal = ZERO  # signed: negative when discount exceeds markup
    program_type: ProgramType = field(default=ProgramType.CASH_DISCOUNTING, init=False)


@dataclass(frozen=True)
class SupplementalFeeResult(ProgramBreakdown):
    post_tax_pre_tip: Decimal = ZERO
    fee_eligible_volume: Decimal = ZERO
    tip_eligible_volume: Decimal = ZERO
    tip_amount: Decimal = ZERO
    fee_collected_on_cash: Decimal = ZERO
    tip_timing: TipTiming = TipTiming.BEFORE_TIP
    fee_tax_basis: FeeTaxBasis = FeeTaxBasis.POST_TAX
    used_default_combo: bool = False
    program_type: ProgramType = field(default=ProgramType.SUPPLEMENTAL_FEE, init=False)


ProgramResult = DualPricingResult | CashDiscountingResult | SupplementalFeeResult


@dataclass(frozen=True)
class InvestmentTotals:
    """One-time and recurring totals derived from the quote's line items."""

    hardware_total: Decimal = ZERO
    menu_works_total: Decimal = ZERO
    monthly_software_cost: Decimal = ZERO

    @property
    def investment_total(self) -> Decimal:
        return self.hardware_total + self.menu_works_total


@dataclass(frozen=True)
class CreditAndRoi:
    """Merchant credit offset and payback period for a quote."""

    merchant_credit_amount: Decimal
    investment_total: Decimal
    total_investment_after_credit: Decimal
    net_margin_percent: Decimal
    volume_factor: Decimal
    profit_share: Decimal  # fraction
    payback_window_months: Decimal
    software_savings_monthly: Decimal
    software_savings_annual: Decimal
    total_monthly_savings: Decimal
    total_annual_savings: Decimal
    payback_months: Decimal | None  # None when monthly savings <= 0


@dataclass(frozen=True)
class QuoteOutcome:
    """Results of processing a QuoteRequest."""

    result: ProgramResult
    credit_and_roi: CreditAndRoi | None = None
    investment: InvestmentTotals | None = None
    warnings: tuple[str, ...] = ()
