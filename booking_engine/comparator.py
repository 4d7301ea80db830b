"""
Cost Comparator: portal vs direct.
Computes out-of-pocket, points earned and effective cost for each path,
picks a baseline winner for the objective, and rates how sure that is.
"""

from typing import List, Optional, Tuple

from booking_engine.close_call import classify_close_call
from booking_engine.config import DEFAULT_CONFIG, earn_profile
from booking_engine.models import (
    BookingType,
    CloseCall,
    Confidence,
    CostComparison,
    Objective,
    PathDetails,
    PathKind,
)


ALL_INPUTS_KNOWN = "All key inputs known"

CONFIDENCE_DOWNGRADE = {
    Confidence.HIGH: Confidence.MEDIUM,
    Confidence.MEDIUM: Confidence.LOW,
    Confidence.LOW: Confidence.LOW,
}


def _path(price: float, credit_applied: float, multiplier: float, valuation_cpp: float) -> PathDetails:
    out_of_pocket = price - credit_applied
    points_earned = round(price * multiplier)
    points_value = points_earned * valuation_cpp / 100
    return PathDetails(
        price=price,
        credit_applied=credit_applied,
        out_of_pocket=out_of_pocket,
        points_earned=points_earned,
        points_value=points_value,
        effective_cost=out_of_pocket - points_value,
    )


def metric_for(details: PathDetails, objective: Objective) -> float:
    """The figure the objective ranks paths by."""
    if Objective(objective) == Objective.MAX_VALUE:
        return details.effective_cost
    return details.out_of_pocket


def break_even_cpp(portal: PathDetails, direct: PathDetails) -> Optional[float]:
    """
    Point valuation (cents) at which both effective costs are equal.

    Solves portal_oop - portal_pts * c = direct_oop - direct_pts * c.
    Returns None when both paths earn the same points or the answer is negative.
    """
    points_gap = portal.points_earned - direct.points_earned
    if points_gap == 0:
        return None
    cpp = (portal.out_of_pocket - direct.out_of_pocket) / points_gap * 100
    if cpp < 0:
        return None
    return cpp


def rate_confidence(
    winner: PathKind,
    points_deficit: int,
    cash_gap: float,
    close_call: CloseCall,
    fx_involved: bool,
    valuation_cpp: float,
    config: dict = None,
) -> Tuple[Confidence, List[str]]:
    """
    Rate how sure a winner is over its runner-up.

    Starts at high; each issue knocks it down one step and adds a reason:
    a currency conversion fed either figure, the gap is a close call, or the
    winner gives up enough points (points_deficit) to rival its cash_gap.
    """
    if config is None:
        config = DEFAULT_CONFIG

    confidence = Confidence.HIGH
    reasons = []

    if fx_involved:
        confidence = CONFIDENCE_DOWNGRADE[confidence]
        reasons.append("Foreign-currency conversion involved; rates are fixed estimates")

    if close_call.is_tie:
        confidence = CONFIDENCE_DOWNGRADE[confidence]
        reasons.append(f"Gap of ${close_call.gap:,.2f} ({close_call.gap_pct:.1f}%) is inside the close-call band")

    deficit_value = points_deficit * valuation_cpp / 100
    if (
        points_deficit >= config.get("tradeoff_min_points", 1000)
        and deficit_value >= cash_gap * config.get("tradeoff_value_ratio", 0.5)
    ):
        confidence = CONFIDENCE_DOWNGRADE[confidence]
        reasons.append(
            f"{winner.value.capitalize()} is cheaper but earns {points_deficit:,} fewer points "
            f"(worth ${deficit_value:,.2f})"
        )

    if not reasons:
        reasons.append(ALL_INPUTS_KNOWN)
    return confidence, reasons


def compare_costs(
    portal_price: float,
    direct_price: float,
    credit_remaining: float,
    valuation_cpp: float,
    objective: Objective = Objective.CHEAPEST_CASH,
    booking_type: BookingType = BookingType.FLIGHT,
    fx_involved: bool = False,
    config: dict = None,
) -> CostComparison:
    """
    Compare booking through the portal against booking direct.

    Rules:
    - Credit applies to the portal path only, capped at the portal price
    - Points: price x multiplier from the booking type's earn profile
    - Effective cost: out-of-pocket minus points earned valued at valuation_cpp
    - Winner: lower out-of-pocket (cheapest_cash) or lower effective cost
      (max_value); ties go to the lower out-of-pocket, then portal
    - Close call: the two out-of-pocket figures, whatever the objective

    Inputs are assumed non-negative; callers validate before calling.

    Args:
        portal_price: portal sticker price in USD
        direct_price: direct sticker price in USD
        credit_remaining: statement credit left in USD
        valuation_cpp: assumed worth of a point in cents
        objective: cheapest_cash or max_value
        booking_type: flight, hotel or vacation_rental
        fx_involved: whether either price was converted from another currency
        config: optional config dict (uses defaults if not provided)

    Returns:
        CostComparison with per-path details, baseline winner and confidence
    """
    if config is None:
        config = DEFAULT_CONFIG

    objective = Objective(objective)
    booking_type = BookingType(booking_type)
    profile = earn_profile(booking_type)

    credit_applied = min(credit_remaining, portal_price)
    portal = _path(portal_price, credit_applied, profile.portal_multiplier, valuation_cpp)
    direct = _path(direct_price, 0.0, profile.direct_multiplier, valuation_cpp)

    portal_metric = metric_for(portal, objective)
    direct_metric = metric_for(direct, objective)

    if portal_metric < direct_metric:
        winner = PathKind.PORTAL
    elif direct_metric < portal_metric:
        winner = PathKind.DIRECT
    elif direct.out_of_pocket < portal.out_of_pocket:
        winner = PathKind.DIRECT
    else:
        winner = PathKind.PORTAL

    winning, losing = (portal, direct) if winner == PathKind.PORTAL else (direct, portal)
    # Ranking follows the objective; the close call is always on cash paid today
    close_call = classify_close_call(portal.out_of_pocket, direct.out_of_pocket, fx_involved, config)

    confidence, confidence_reasons = rate_confidence(
        winner,
        points_deficit=losing.points_earned - winning.points_earned,
        cash_gap=abs(losing.out_of_pocket - winning.out_of_pocket),
        close_call=close_call,
        fx_involved=fx_involved,
        valuation_cpp=valuation_cpp,
        config=config,
    )

    even_cpp = break_even_cpp(portal, direct)
    could_flip_if = _flip_conditions(winner, portal, direct, even_cpp, valuation_cpp, fx_involved)

    return CostComparison(
        portal=portal,
        direct=direct,
        booking_type=booking_type,
        objective=objective,
        valuation_cpp=valuation_cpp,
        fx_involved=fx_involved,
        baseline_recommendation=winner,
        close_call=close_call,
        confidence=confidence,
        confidence_reasons=confidence_reasons,
        could_flip_if=could_flip_if,
        break_even_cpp=even_cpp,
        net_savings=abs(portal_metric - direct_metric),
    )


def _flip_conditions(
    winner: PathKind,
    portal: PathDetails,
    direct: PathDetails,
    even_cpp: Optional[float],
    valuation_cpp: float,
    fx_involved: bool,
) -> list[str]:
    conditions = []

    if winner == PathKind.PORTAL and portal.credit_applied > 0:
        if portal.price > direct.price:
            conditions.append(
                f"If your travel credit resets to $0 → Direct likely wins "
                f"(out-of-pocket: ${portal.price:,.2f} vs ${direct.price:,.2f})"
            )
        else:
            conditions.append(
                f"If your travel credit resets to $0 → Portal's edge shrinks to "
                f"${direct.price - portal.price:,.2f}"
            )

    if even_cpp is not None:
        # Higher valuations favour the path earning more points
        if portal.points_earned > direct.points_earned:
            more_points, fewer_points = PathKind.PORTAL, PathKind.DIRECT
        else:
            more_points, fewer_points = PathKind.DIRECT, PathKind.PORTAL
        if valuation_cpp > even_cpp:
            conditions.append(
                f"If you value points below {even_cpp:.2f}¢ → {fewer_points.value.capitalize()} wins on effective cost"
            )
        else:
            conditions.append(
                f"If you value points above {even_cpp:.2f}¢ → {more_points.value.capitalize()} wins on effective cost"
            )

    if fx_involved:
        conditions.append("If the exchange rate moves, the converted price could shift the gap")

    return conditions
