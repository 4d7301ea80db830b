"""
Award Valuator.

Turns user-entered award legs (partner, points, taxes) into home-points
economics against a chosen cash baseline, then re-runs the winner decision
across portal, direct and award.

Per-leg cpp is apportioned from the aggregate by each leg's share of home
points, so every leg reports the itinerary's cpp.
"""

import logging
from typing import Mapping, Optional, Sequence, Union

from booking_engine.comparator import metric_for
from booking_engine.config import DEFAULT_CONFIG
from booking_engine.models import (
    AwardBaseline,
    AwardLeg,
    AwardLegInput,
    AwardValuation,
    CostComparison,
    EntryMode,
    LegDirection,
    Objective,
    PathKind,
    ThreeWayDecision,
    TransferPartner,
    ValidationFailure,
)
from booking_engine.partners import PARTNER_BY_ID, own_points_for, partner_points_for

logger = logging.getLogger(__name__)


DIRECTION_LABELS = {
    LegDirection.OUTBOUND: "Outbound",
    LegDirection.RETURN: "Return",
    LegDirection.ROUNDTRIP: "Round-trip",
}


def baseline_amount(baseline: AwardBaseline, cost: CostComparison) -> float:
    """Cash figure the award replaces, taken from the cost comparison."""
    baseline = AwardBaseline(baseline)
    if baseline == AwardBaseline.PORTAL_WITH_CREDIT:
        return cost.portal.out_of_pocket
    if baseline == AwardBaseline.PORTAL_NO_CREDIT:
        return cost.portal.price
    return cost.direct.price


def estimate_taxes(baseline: float, leg_count: int = 1, config: dict = None) -> float:
    """
    Estimated taxes/fees for one leg when the traveler left the field blank.

    Itinerary estimate is clamp(baseline x 10%, $75, $150); a 2-leg itinerary
    splits it evenly.
    """
    if config is None:
        config = DEFAULT_CONFIG

    total = baseline * config.get("tax_estimate_rate", 0.10)
    total = max(config.get("tax_estimate_min_usd", 75.0), min(config.get("tax_estimate_max_usd", 150.0), total))
    if leg_count == 2:
        return total / 2
    return total


def validate_award_legs(
    legs: Sequence[AwardLegInput],
    partners: Mapping[str, TransferPartner] = PARTNER_BY_ID,
    config: dict = None,
) -> Optional[ValidationFailure]:
    """
    Check user-entered legs before any calculation.

    Returns:
        None when every leg is usable, else the first field-scoped failure,
        e.g. "Outbound: enter valid miles (at least 1,000)"
    """
    if config is None:
        config = DEFAULT_CONFIG

    min_points = config.get("award_min_points", 1000)
    max_legs = config.get("award_max_legs", 2)

    if not legs:
        return ValidationFailure("award_legs", "Award: enter at least one leg")
    if len(legs) > max_legs:
        return ValidationFailure("award_legs", f"Award: enter at most {max_legs} legs")

    for index, leg in enumerate(legs):
        label = DIRECTION_LABELS[LegDirection(leg.direction)]
        prefix = f"award_legs[{index}]"

        if not leg.partner_id:
            return ValidationFailure(f"{prefix}.partner_id", f"{label}: select a transfer partner")
        if leg.partner_id not in partners:
            return ValidationFailure(f"{prefix}.partner_id", f"{label}: unknown transfer partner '{leg.partner_id}'")

        unit = "miles" if EntryMode(leg.entry_mode) == EntryMode.MILES else "points"
        if leg.points is None or leg.points < min_points:
            return ValidationFailure(f"{prefix}.points", f"{label}: enter valid {unit} (at least {min_points:,})")

        if leg.taxes is not None and leg.taxes < 0:
            return ValidationFailure(f"{prefix}.taxes", f"{label}: taxes cannot be negative")

    return None


def value_award(
    legs: Sequence[AwardLegInput],
    baseline: AwardBaseline,
    baseline_usd: float,
    partners: Mapping[str, TransferPartner] = PARTNER_BY_ID,
    config: dict = None,
) -> Union[AwardValuation, ValidationFailure]:
    """
    Value an award itinerary against a cash baseline.

    Rules:
    - Miles entry: own_points = ceil(partner_points / ratio)
    - Points entry: the typed home points are used as-is
    - Blank taxes are replaced by estimate_taxes() and flagged
    - cpp = (baseline - total taxes) / total own points x 100, floored at 0

    Args:
        legs: 1-2 user-entered legs
        baseline: which cash figure the award replaces
        baseline_usd: that figure in USD
        partners: partner lookup (the registry by default)
        config: optional config dict (uses defaults if not provided)

    Returns:
        AwardValuation, or ValidationFailure when the input is unusable
    """
    if config is None:
        config = DEFAULT_CONFIG

    failure = validate_award_legs(legs, partners, config)
    if failure is not None:
        logger.warning("Award input rejected: %s", failure.message)
        return failure

    estimate = estimate_taxes(baseline_usd, len(legs), config)

    priced = []
    for leg in legs:
        partner = partners[leg.partner_id]
        if EntryMode(leg.entry_mode) == EntryMode.MILES:
            partner_points = leg.points
            own_points = own_points_for(partner, leg.points)
        else:
            own_points = leg.points
            partner_points = partner_points_for(partner, leg.points)

        taxes_estimated = leg.taxes is None
        taxes = estimate if taxes_estimated else float(leg.taxes)
        if taxes_estimated:
            logger.debug("Estimated taxes for %s leg: $%.2f", leg.direction, taxes)

        priced.append((leg, partner, partner_points, own_points, taxes, taxes_estimated))

    own_total = sum(item[3] for item in priced)
    taxes_total = sum(item[4] for item in priced)
    value_total = max(0.0, baseline_usd - taxes_total)
    cpp = value_total / own_total * 100

    valued_legs = tuple(
        AwardLeg(
            direction=LegDirection(leg.direction),
            partner=partner,
            partner_points=partner_points,
            own_points=own_points,
            taxes=taxes,
            taxes_estimated=taxes_estimated,
            entry_mode=EntryMode(leg.entry_mode),
            value_usd=value_total * own_points / own_total,
            cpp=cpp,
        )
        for leg, partner, partner_points, own_points, taxes, taxes_estimated in priced
    )

    return AwardValuation(
        legs=valued_legs,
        baseline=AwardBaseline(baseline),
        baseline_amount=baseline_usd,
        own_points_total=own_total,
        taxes_total=taxes_total,
        cpp=cpp,
    )


def award_effective_cost(valuation: AwardValuation, valuation_cpp: float) -> float:
    """Cash taxes plus the home points spent, valued at valuation_cpp."""
    return valuation.taxes_total + valuation.own_points_total * valuation_cpp / 100


def decide_three_way(
    cost: CostComparison,
    valuation: AwardValuation,
    valuation_cpp: float,
    objective: Objective,
) -> ThreeWayDecision:
    """
    Pick the winner among portal, direct and award.

    cheapest_cash ranks by cash paid today (award pays only taxes);
    max_value ranks by effective cost. Ties go to the lower out-of-pocket.
    """
    objective = Objective(objective)
    if objective == Objective.MAX_VALUE:
        award_metric = award_effective_cost(valuation, valuation_cpp)
    else:
        award_metric = valuation.taxes_total

    metrics = {
        PathKind.PORTAL: metric_for(cost.portal, objective),
        PathKind.DIRECT: metric_for(cost.direct, objective),
        PathKind.AWARD: award_metric,
    }
    out_of_pocket = {
        PathKind.PORTAL: cost.portal.out_of_pocket,
        PathKind.DIRECT: cost.direct.out_of_pocket,
        PathKind.AWARD: valuation.taxes_total,
    }

    ranking = tuple(sorted(metrics, key=lambda path: (metrics[path], out_of_pocket[path])))
    return ThreeWayDecision(winner=ranking[0], metrics=metrics, ranking=ranking)
