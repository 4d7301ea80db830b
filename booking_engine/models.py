"""
Data models for the Booking Decision Engine.
All models are frozen dataclasses: built per comparison request, never mutated.
"""

from dataclasses import dataclass, field
from enum import Enum as PyEnum
from typing import ClassVar, Optional, Union


class BookingType(str, PyEnum):
    FLIGHT = "flight"
    HOTEL = "hotel"
    VACATION_RENTAL = "vacation_rental"


class Objective(str, PyEnum):
    CHEAPEST_CASH = "cheapest_cash"
    MAX_VALUE = "max_value"


class Confidence(str, PyEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PathKind(str, PyEnum):
    PORTAL = "portal"
    DIRECT = "direct"
    AWARD = "award"
    TIE = "tie"


class AwardBaseline(str, PyEnum):
    PORTAL_WITH_CREDIT = "portal_with_credit"
    PORTAL_NO_CREDIT = "portal_no_credit"
    DIRECT = "direct"


class LegDirection(str, PyEnum):
    OUTBOUND = "outbound"
    RETURN = "return"
    ROUNDTRIP = "roundtrip"


class EntryMode(str, PyEnum):
    MILES = "miles"    # partner miles typed from an award search
    POINTS = "points"  # home points typed directly


class PartnerKind(str, PyEnum):
    AIRLINE = "airline"
    HOTEL = "hotel"


class PaymentStrategy(str, PyEnum):
    PORTAL_THEN_ERASE = "portal_then_erase"
    DIRECT_THEN_ERASE = "direct_then_erase"
    PORTAL_PAY_CASH = "portal_pay_cash"
    DIRECT_PAY_CASH = "direct_pay_cash"


# =============================================================================
# Prices
# =============================================================================

@dataclass(frozen=True)
class Money:
    """
    An amount in a given currency.

    Fields:
    - amount: non-negative amount
    - currency: ISO 4217 code (e.g., "USD", "EUR")
    """
    amount: float
    currency: str = "USD"


@dataclass(frozen=True)
class Itinerary:
    """
    Optional descriptor attached to a price quote.
    Flights fill origin/destination/cabin; stays fill property/room.
    """
    origin: Optional[str] = None
    destination: Optional[str] = None
    depart_date: Optional[str] = None  # YYYY-MM-DD
    return_date: Optional[str] = None  # YYYY-MM-DD
    cabin: Optional[str] = None
    property_name: Optional[str] = None
    room: Optional[str] = None


@dataclass(frozen=True)
class PriceQuote:
    """
    A captured price. Superseded, not edited, when the page is re-captured.

    Fields:
    - money: captured amount and currency
    - itinerary: optional trip descriptor
    """
    money: Money
    itinerary: Optional[Itinerary] = None


@dataclass(frozen=True)
class EarnProfile:
    portal_multiplier: float
    direct_multiplier: float


# =============================================================================
# Transfer partners
# =============================================================================

@dataclass(frozen=True)
class BuyMilesData:
    """
    Published pricing for buying a partner's miles outright.

    Fields:
    - base_cost_cents: price of one partner mile with no promotion
    - typical_bonus_range: (low, high) promotional bonus percentages
    - frequent_promotions: whether the program runs sales often
    - annual_max_miles: purchase cap per calendar year
    - min_purchase_miles: smallest purchasable block
    """
    base_cost_cents: float
    typical_bonus_range: tuple[int, int]
    frequent_promotions: bool
    annual_max_miles: int
    min_purchase_miles: int

    @property
    def best_bonus_pct(self) -> int:
        return self.typical_bonus_range[1]


@dataclass(frozen=True)
class TransferPartner:
    """
    A loyalty program home points can be transferred to.

    Fields:
    - id: internal slug (e.g., 'turkish')
    - name: display name
    - transfer_ratio: partner points received per home point (1.0 = 1:1)
    - ratio_label: human-readable ratio (e.g., '2:1.5')
    - iata: airline code or custom hotel code
    - kind: airline or hotel
    - alliance: airline alliance or 'none'
    - buy_miles: purchase pricing, when the program sells miles
    """
    id: str
    name: str
    transfer_ratio: float
    ratio_label: str
    iata: str
    kind: PartnerKind
    alliance: str = "none"
    buy_miles: Optional[BuyMilesData] = None

    @property
    def is_one_to_one(self) -> bool:
        return self.transfer_ratio == 1.0


# =============================================================================
# Award itinerary
# =============================================================================

@dataclass(frozen=True)
class AwardLegInput:
    """
    One award leg as the traveler typed it. Any field may be missing.

    Fields:
    - direction: outbound | return | roundtrip
    - partner_id: transfer partner slug
    - points: the number typed (partner miles, or home points in POINTS mode)
    - taxes: cash taxes/fees in USD; None means "left blank"
    - entry_mode: whether `points` are partner miles or home points
    """
    direction: LegDirection
    partner_id: Optional[str] = None
    points: Optional[int] = None
    taxes: Optional[float] = None
    entry_mode: EntryMode = EntryMode.MILES


@dataclass(frozen=True)
class AwardLeg:
    """A validated and valued award leg."""
    direction: LegDirection
    partner: TransferPartner
    partner_points: int
    own_points: int
    taxes: float
    taxes_estimated: bool
    entry_mode: EntryMode
    value_usd: float = 0.0  # share of (baseline - taxes) apportioned by own points
    cpp: float = 0.0


@dataclass(frozen=True)
class AwardValuation:
    """
    Aggregate economics of a 1-2 leg award itinerary against a cash baseline.

    Fields:
    - legs: valued legs in input order
    - baseline: which cash figure the award replaces
    - baseline_amount: that cash figure in USD
    - own_points_total: home points committed
    - taxes_total: cash still paid
    - cpp: cents of baseline value per home point, floored at 0
    """
    legs: tuple[AwardLeg, ...]
    baseline: AwardBaseline
    baseline_amount: float
    own_points_total: int
    taxes_total: float
    cpp: float

    @property
    def taxes_estimated(self) -> bool:
        return any(leg.taxes_estimated for leg in self.legs)

    @property
    def partner_ids(self) -> tuple[str, ...]:
        return tuple(leg.partner.id for leg in self.legs)


@dataclass(frozen=True)
class ValidationFailure:
    """A field-scoped validation message; the calculation was not performed."""
    field: str
    message: str


# =============================================================================
# Component outputs
# =============================================================================

@dataclass(frozen=True)
class PathDetails:
    """Per-path figures from the cost comparator."""
    price: float
    credit_applied: float
    out_of_pocket: float
    points_earned: int
    points_value: float
    effective_cost: float


@dataclass(frozen=True)
class CloseCall:
    """
    Close-call classification of the two leading out-of-pocket figures.

    Fields:
    - is_tie: True when the gap falls inside the tolerance band
    - gap: absolute dollar gap
    - gap_pct: gap as a percentage of the larger figure
    - abs_threshold / pct_threshold: band actually used (widened for FX)
    - reason: human-readable explanation when is_tie
    """
    is_tie: bool
    gap: float
    gap_pct: float
    abs_threshold: float
    pct_threshold: float
    reason: Optional[str] = None


@dataclass(frozen=True)
class CostComparison:
    """
    Portal-vs-direct comparison before any award data is considered.

    Fields:
    - portal / direct: per-path details
    - objective: which metric decided the winner
    - baseline_recommendation: PathKind.PORTAL or PathKind.DIRECT
    - close_call: classification of the two out-of-pocket figures
    - confidence / confidence_reasons: how sure the baseline is
    - could_flip_if: conditions that would change the winner
    - break_even_cpp: valuation where both effective costs match (None if undefined)
    - net_savings: gap between the winning and losing metric
    """
    portal: PathDetails
    direct: PathDetails
    booking_type: BookingType
    objective: Objective
    valuation_cpp: float
    fx_involved: bool
    baseline_recommendation: PathKind
    close_call: CloseCall
    confidence: Confidence
    confidence_reasons: list[str]
    could_flip_if: list[str]
    break_even_cpp: Optional[float]
    net_savings: float


@dataclass(frozen=True)
class PaymentOption:
    """
    One way to pay for the booking, scored on where it leaves you.

    Fields:
    - strategy: which path is paid, and whether the charge is erased
    - pay_today: cash charged at booking
    - points_earned: points the booking earns
    - erase_later: cash recovered by erasing the charge
    - points_used_for_erase: points spent on that erase
    - points_kept: balance after booking and erasing
    - effective_cost: net cash minus the net points gained, valued at valuation_cpp
    """
    strategy: PaymentStrategy
    pay_today: float
    points_earned: int
    erase_later: float
    points_used_for_erase: int
    points_kept: int
    effective_cost: float


@dataclass(frozen=True)
class DoubleDipStrategy:
    """
    Book through the portal today, erase the charge with points later.

    `options` ranks every way of paying (portal or direct, erased or not)
    by effective cost; `best_strategy` is the first of them.
    """
    pay_today: float
    points_earned: int
    points_value: float
    erase_later: float
    points_used_for_erase: int
    savings_vs_direct: float
    explanation: str
    best_strategy: PaymentStrategy
    recommended: bool
    options: tuple[PaymentOption, ...]


@dataclass(frozen=True)
class BuyMilesComparison:
    """Buying partner miles outright vs transferring home points."""
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


@dataclass(frozen=True)
class PortalCheaperAdvice:
    """Whether paying cash via the portal beats a weak award redemption."""
    portal_net_cost_usd: float
    award_total_value_usd: float
    award_cpp: float
    threshold_cpp: float
    is_portal_cheaper: bool
    savings_if_portal: float


@dataclass(frozen=True)
class ThreeWayDecision:
    """Winner among portal, direct and award, with every path's metric."""
    winner: PathKind
    metrics: dict[PathKind, float]
    ranking: tuple[PathKind, ...]


# =============================================================================
# Recommendation (tagged variant)
# =============================================================================

@dataclass(frozen=True)
class PortalVerdict:
    out_of_pocket: float
    points_earned: int
    kind: ClassVar[PathKind] = PathKind.PORTAL


@dataclass(frozen=True)
class DirectVerdict:
    out_of_pocket: float
    points_earned: int
    kind: ClassVar[PathKind] = PathKind.DIRECT


@dataclass(frozen=True)
class AwardVerdict:
    own_points: int
    taxes: float
    partner_ids: tuple[str, ...]
    kind: ClassVar[PathKind] = PathKind.AWARD


@dataclass(frozen=True)
class TieVerdict:
    contenders: tuple[PathKind, PathKind]
    reason: str
    kind: ClassVar[PathKind] = PathKind.TIE


Verdict = Union[PortalVerdict, DirectVerdict, AwardVerdict, TieVerdict]


# =============================================================================
# Request / result
# =============================================================================

@dataclass(frozen=True)
class ComparisonRequest:
    """
    Everything the engine needs for one comparison.

    Fields:
    - portal_quote / direct_quote: captured prices (any supported currency)
    - booking_type: selects the earn profile
    - objective: cheapest_cash | max_value
    - credit_remaining: statement credit left, in USD
    - valuation_cpp: assumed worth of one home point, in cents
    - points_balance: current home points balance
    - award_legs: user-entered award legs (empty = no award comparison)
    - award_baseline: which cash figure the award is measured against
    - config: overrides for DEFAULT_CONFIG
    """
    portal_quote: PriceQuote
    direct_quote: PriceQuote
    booking_type: BookingType = BookingType.FLIGHT
    objective: Objective = Objective.CHEAPEST_CASH
    credit_remaining: float = 0.0
    valuation_cpp: float = 1.8
    points_balance: int = 0
    award_legs: tuple[AwardLegInput, ...] = ()
    award_baseline: AwardBaseline = AwardBaseline.PORTAL_WITH_CREDIT
    config: Optional[dict] = None


@dataclass(frozen=True)
class AuditTrail:
    """Assumptions used, the full numeric breakdown, and free-form notes."""
    assumptions: list[str]
    breakdown: dict[str, float]
    notes: list[str]


@dataclass(frozen=True)
class ComparisonResult:
    """
    The engine's output for one request.

    Fields:
    - verdict: tagged recommendation (portal / direct / award / tie)
    - per_path_out_of_pocket: cash paid today per path
    - per_path_points_earned: points earned per path (award earns none)
    - confidence / confidence_reasons
    - flip_conditions: short reasons the recommendation could change
    - cost: the underlying portal-vs-direct comparison
    - award / award_error: award valuation, or why it was not computed
    - double_dip / buy_miles / portal_cheaper: auxiliary callouts
    - close_call: classification applied last
    - audit: assumptions, breakdown and notes for display
    """
    verdict: Verdict
    per_path_out_of_pocket: dict[str, float]
    per_path_points_earned: dict[str, int]
    confidence: Confidence
    confidence_reasons: list[str]
    flip_conditions: list[str]
    cost: CostComparison
    close_call: CloseCall
    audit: AuditTrail
    award: Optional[AwardValuation] = None
    award_error: Optional[ValidationFailure] = None
    double_dip: Optional[DoubleDipStrategy] = None
    buy_miles: list[BuyMilesComparison] = field(default_factory=list)
    portal_cheaper: Optional[PortalCheaperAdvice] = None

    @property
    def recommendation(self) -> PathKind:
        return self.verdict.kind
