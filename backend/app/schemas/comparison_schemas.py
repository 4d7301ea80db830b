"""
Booking comparison schemas - request/response DTOs for the comparison API.

Requests are validated here (non-negative amounts, known enum values,
currency code shape). Award-leg content rules (partner chosen, minimum
points) stay with the engine, which reports them as `award_error` rather
than failing the request.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from booking_engine.models import (
    AwardBaseline,
    BookingType,
    Confidence,
    EntryMode,
    LegDirection,
    Objective,
    PartnerKind,
    PathKind,
    PaymentStrategy,
)


# =============================================================================
# Request
# =============================================================================

class PriceInput(BaseModel):
    """A captured price in any supported currency."""
    amount: float = Field(..., ge=0, description="Sticker price, non-negative")
    currency: str = Field("USD", description="ISO 4217 code, e.g. EUR")

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        code = v.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError("currency must be a 3-letter ISO code")
        return code


class AwardLegRequest(BaseModel):
    """One award leg as typed by the traveler; blank fields are allowed."""
    direction: LegDirection
    partner_id: Optional[str] = None
    points: Optional[int] = Field(None, ge=0)
    taxes: Optional[float] = Field(None, ge=0, description="Cash taxes/fees in USD; omit to estimate")
    entry_mode: EntryMode = EntryMode.MILES

    @field_validator("partner_id")
    @classmethod
    def blank_partner_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class CompareRequest(BaseModel):
    """
    Body of POST /api/v1/compare.

    credit_remaining and valuation_cpp fall back to the server's configured
    defaults when omitted.
    """
    model_config = ConfigDict(extra="forbid")

    portal: PriceInput
    direct: PriceInput
    booking_type: BookingType = BookingType.FLIGHT
    objective: Objective = Objective.CHEAPEST_CASH
    credit_remaining: Optional[float] = Field(None, ge=0)
    valuation_cpp: Optional[float] = Field(None, gt=0, description="Cents per point")
    points_balance: int = Field(0, ge=0)
    award_legs: list[AwardLegRequest] = Field(default_factory=list)
    award_baseline: AwardBaseline = AwardBaseline.PORTAL_WITH_CREDIT


# =============================================================================
# Response
# =============================================================================

class PathOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    price: float
    credit_applied: float
    out_of_pocket: float
    points_earned: int
    points_value: float
    effective_cost: float


class VerdictOut(BaseModel):
    """Flattened tagged verdict: `kind` says which payload fields are set."""
    kind: PathKind
    out_of_pocket: Optional[float] = None
    points_earned: Optional[int] = None
    own_points: Optional[int] = None
    taxes: Optional[float] = None
    partner_ids: list[str] = Field(default_factory=list)
    contenders: list[PathKind] = Field(default_factory=list)
    reason: Optional[str] = None


class CloseCallOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_tie: bool
    gap: float
    gap_pct: float
    abs_threshold: float
    pct_threshold: float
    reason: Optional[str] = None


class AwardLegOut(BaseModel):
    direction: LegDirection
    partner_id: str
    partner_name: str
    partner_points: int
    own_points: int
    taxes: float
    taxes_estimated: bool
    entry_mode: EntryMode
    value_usd: float
    cpp: float


class AwardOut(BaseModel):
    legs: list[AwardLegOut]
    baseline: AwardBaseline
    baseline_amount: float
    own_points_total: int
    taxes_total: float
    taxes_estimated: bool
    cpp: float


class AwardErrorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    field: str
    message: str


class PaymentOptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    strategy: PaymentStrategy
    pay_today: float
    points_earned: int
    erase_later: float
    points_used_for_erase: int
    points_kept: int
    effective_cost: float


class DoubleDipOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    pay_today: float
    points_earned: int
    points_value: float
    erase_later: float
    points_used_for_erase: int
    savings_vs_direct: float
    explanation: str
    best_strategy: PaymentStrategy
    recommended: bool
    options: list[PaymentOptionOut]


class BuyMilesOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    partner_id: str
    partner_points: int
    own_points: int
    base_buy_cost_usd: float
    best_bonus_pct: int
    best_bonus_buy_cost_usd: float
    transfer_value_usd: float
    buy_is_cheaper_with_bonus: bool
    transfer_savings_usd: float
    buy_savings_usd: float


class PortalCheaperOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    portal_net_cost_usd: float
    award_total_value_usd: float
    award_cpp: float
    threshold_cpp: float
    is_portal_cheaper: bool
    savings_if_portal: float


class AuditOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    assumptions: list[str]
    breakdown: dict[str, float]
    notes: list[str]


class CompareResponse(BaseModel):
    recommendation: PathKind
    verdict: VerdictOut
    per_path_out_of_pocket: dict[str, float]
    per_path_points_earned: dict[str, int]
    confidence: Confidence
    confidence_reasons: list[str]
    flip_conditions: list[str]
    portal: PathOut
    direct: PathOut
    break_even_cpp: Optional[float] = None
    close_call: CloseCallOut
    award: Optional[AwardOut] = None
    award_error: Optional[AwardErrorOut] = None
    double_dip: Optional[DoubleDipOut] = None
    buy_miles: list[BuyMilesOut] = Field(default_factory=list)
    portal_cheaper: Optional[PortalCheaperOut] = None
    audit: AuditOut


# =============================================================================
# Partners
# =============================================================================

class BuyMilesDataOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    base_cost_cents: float
    typical_bonus_range: tuple[int, int]
    frequent_promotions: bool
    annual_max_miles: int
    min_purchase_miles: int


class PartnerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    transfer_ratio: float
    ratio_label: str
    iata: str
    kind: PartnerKind
    alliance: str
    buy_miles: Optional[BuyMilesDataOut] = None


class PartnersGroupedOut(BaseModel):
    airlines_1to1: list[PartnerOut]
    airlines_non_1to1: list[PartnerOut]
    hotels: list[PartnerOut]
