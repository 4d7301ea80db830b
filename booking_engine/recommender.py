"""
Booking recommendation orchestrator.
Runs every engine component for one request and assembles the result.
"""

import logging
from typing import Optional

from booking_engine.award import baseline_amount, decide_three_way, value_award
from booking_engine.buy_miles import compare_buy_miles
from booking_engine.close_call import classify_close_call, resolve_verdict
from booking_engine.comparator import ALL_INPUTS_KNOWN, CONFIDENCE_DOWNGRADE, compare_costs, rate_confidence
from booking_engine.config import earn_profile, merge_config
from booking_engine.currency import HOME_CURRENCY, exchange_rate, normalize_quote
from booking_engine.double_dip import double_dip_for
from booking_engine.models import (
    AuditTrail,
    AwardValuation,
    AwardVerdict,
    ComparisonRequest,
    ComparisonResult,
    CostComparison,
    DirectVerdict,
    EntryMode,
    PathKind,
    PortalVerdict,
    ThreeWayDecision,
    ValidationFailure,
    Verdict,
)
from booking_engine.portal_advisor import advise_portal_cheaper

logger = logging.getLogger(__name__)


def compare_booking(request: ComparisonRequest) -> ComparisonResult:
    """
    Produce a recommendation for one booking decision.

    Steps:
    1. Normalize both quotes to USD
    2. Portal vs direct cost comparison
    3. Award valuation and three-way decision (when legs are supplied)
    4. Auxiliary callouts: double-dip, buy-miles, portal-cheaper
    5. Close-call classification of the two leading paths, applied last;
       confidence is rated on that same pair

    An invalid award never fails the request: the error is reported in
    `award_error` and the two-way result stands.

    Args:
        request: ComparisonRequest with quotes, preferences and award legs

    Returns:
        ComparisonResult
    """
    config = merge_config(request.config)

    portal_usd, portal_fx = normalize_quote(request.portal_quote)
    direct_usd, direct_fx = normalize_quote(request.direct_quote)
    credit = min(request.credit_remaining, config.get("max_travel_credit", 300.0))

    cost = compare_costs(
        portal_price=portal_usd,
        direct_price=direct_usd,
        credit_remaining=credit,
        valuation_cpp=request.valuation_cpp,
        objective=request.objective,
        booking_type=request.booking_type,
        fx_involved=portal_fx or direct_fx,
        config=config,
    )
    logger.debug(
        "Baseline %s: portal oop=%.2f direct oop=%.2f",
        cost.baseline_recommendation.value, cost.portal.out_of_pocket, cost.direct.out_of_pocket,
    )

    award = None
    award_error = None
    decision = None
    buy_miles = []
    portal_cheaper = None

    if request.award_legs:
        outcome = value_award(
            request.award_legs,
            request.award_baseline,
            baseline_amount(request.award_baseline, cost),
            config=config,
        )
        if isinstance(outcome, ValidationFailure):
            award_error = outcome
        else:
            award = outcome
            decision = decide_three_way(cost, award, request.valuation_cpp, request.objective)
            buy_miles = _buy_miles_callouts(request, award)
            portal_cheaper = advise_portal_cheaper(
                cash_price=cost.portal.price,
                own_points=award.own_points_total,
                taxes=award.taxes_total,
                valuation_cpp=request.valuation_cpp,
                portal_multiplier=earn_profile(cost.booking_type).portal_multiplier,
                credit_remaining=credit,
                award_cpp=award.cpp,
                config=config,
            )
            logger.debug("Award cpp=%.3f, three-way winner=%s", award.cpp, decision.winner.value)

    fx_by_path = {PathKind.PORTAL: portal_fx, PathKind.DIRECT: direct_fx, PathKind.AWARD: False}

    per_path_out_of_pocket = {
        PathKind.PORTAL.value: cost.portal.out_of_pocket,
        PathKind.DIRECT.value: cost.direct.out_of_pocket,
    }
    per_path_points_earned = {
        PathKind.PORTAL.value: cost.portal.points_earned,
        PathKind.DIRECT.value: cost.direct.points_earned,
    }
    if award is not None:
        per_path_out_of_pocket[PathKind.AWARD.value] = award.taxes_total
        per_path_points_earned[PathKind.AWARD.value] = 0

    if decision is not None:
        winner, runner_up = decision.ranking[0], decision.ranking[1]
        pair_fx = fx_by_path[winner] or fx_by_path[runner_up]
        close_call = classify_close_call(
            per_path_out_of_pocket[winner.value],
            per_path_out_of_pocket[runner_up.value],
            pair_fx,
            config,
        )
        confidence, reasons = rate_confidence(
            winner,
            points_deficit=per_path_points_earned[runner_up.value] - per_path_points_earned[winner.value],
            cash_gap=abs(per_path_out_of_pocket[runner_up.value] - per_path_out_of_pocket[winner.value]),
            close_call=close_call,
            fx_involved=pair_fx,
            valuation_cpp=request.valuation_cpp,
            config=config,
        )
    else:
        winner = cost.baseline_recommendation
        runner_up = PathKind.DIRECT if winner == PathKind.PORTAL else PathKind.PORTAL
        close_call = cost.close_call
        confidence, reasons = cost.confidence, list(cost.confidence_reasons)

    if award is not None and award.taxes_estimated:
        confidence, reasons = _downgrade(
            confidence, reasons, "Award taxes were estimated; enter the actual fees for a firmer answer"
        )

    verdict = resolve_verdict(_verdict_for(winner, cost, award), runner_up, close_call)

    double_dip = double_dip_for(cost, credit, request.points_balance, config)

    result = ComparisonResult(
        verdict=verdict,
        per_path_out_of_pocket=per_path_out_of_pocket,
        per_path_points_earned=per_path_points_earned,
        confidence=confidence,
        confidence_reasons=reasons,
        flip_conditions=_flip_conditions(cost, award, decision),
        cost=cost,
        close_call=close_call,
        audit=_audit(request, cost, award, award_error, close_call, credit, config),
        award=award,
        award_error=award_error,
        double_dip=double_dip,
        buy_miles=buy_miles,
        portal_cheaper=portal_cheaper,
    )
    logger.debug("Recommendation: %s (%s confidence)", result.recommendation.value, confidence.value)
    return result


def _verdict_for(winner: PathKind, cost: CostComparison, award: Optional[AwardValuation]) -> Verdict:
    if winner == PathKind.AWARD:
        return AwardVerdict(
            own_points=award.own_points_total,
            taxes=award.taxes_total,
            partner_ids=award.partner_ids,
        )
    if winner == PathKind.DIRECT:
        return DirectVerdict(out_of_pocket=cost.direct.out_of_pocket, points_earned=cost.direct.points_earned)
    return PortalVerdict(out_of_pocket=cost.portal.out_of_pocket, points_earned=cost.portal.points_earned)


def _buy_miles_callouts(request: ComparisonRequest, award: AwardValuation) -> list:
    """Buy-miles comparisons for legs priced in partner miles."""
    callouts = []
    for leg in award.legs:
        if leg.entry_mode != EntryMode.MILES:
            continue
        comparison = compare_buy_miles(leg.partner.id, leg.partner_points, leg.own_points, request.valuation_cpp)
        if comparison is not None:
            callouts.append(comparison)
    return callouts


def _downgrade(confidence, reasons, reason):
    """Knock confidence down one step; the new reason replaces the all-clear."""
    return CONFIDENCE_DOWNGRADE[confidence], [r for r in reasons if r != ALL_INPUTS_KNOWN] + [reason]


def _flip_conditions(
    cost: CostComparison,
    award: Optional[AwardValuation],
    decision: Optional[ThreeWayDecision],
) -> list[str]:
    conditions = list(cost.could_flip_if)
    if award is None or decision is None:
        return conditions

    if decision.winner == PathKind.AWARD:
        runner_up = decision.ranking[1]
        conditions.append(
            f"If you'd rather keep your {award.own_points_total:,} points → "
            f"{runner_up.value.capitalize()} is the best cash option"
        )
    if award.cpp < cost.valuation_cpp:
        conditions.append(
            f"This award redeems at {award.cpp:.2f}¢ per point, below your "
            f"{cost.valuation_cpp:.2f}¢ valuation; a cheaper award would change the math"
        )
    return conditions


def _audit(
    request: ComparisonRequest,
    cost: CostComparison,
    award: Optional[AwardValuation],
    award_error: Optional[ValidationFailure],
    close_call,
    credit: float,
    config: dict,
) -> AuditTrail:
    profile = earn_profile(cost.booking_type)

    assumptions = [
        f"Points valued at {cost.valuation_cpp:.2f}¢ each",
        f"Earn rates for {cost.booking_type.value}: portal {profile.portal_multiplier:g}x, "
        f"direct {profile.direct_multiplier:g}x",
        f"Travel credit: ${cost.portal.credit_applied:,.2f} applied of ${credit:,.2f} remaining",
    ]
    for label, quote in (("Portal", request.portal_quote), ("Direct", request.direct_quote)):
        code = (quote.money.currency or HOME_CURRENCY).upper()
        if code != HOME_CURRENCY:
            assumptions.append(
                f"{label} price converted from {code} at {exchange_rate(code):g} {HOME_CURRENCY} per unit"
            )

    breakdown = {}
    for kind, details in ((PathKind.PORTAL, cost.portal), (PathKind.DIRECT, cost.direct)):
        prefix = kind.value
        breakdown[f"{prefix}_price"] = details.price
        breakdown[f"{prefix}_credit_applied"] = details.credit_applied
        breakdown[f"{prefix}_out_of_pocket"] = details.out_of_pocket
        breakdown[f"{prefix}_points_earned"] = details.points_earned
        breakdown[f"{prefix}_points_value"] = details.points_value
        breakdown[f"{prefix}_effective_cost"] = details.effective_cost
    breakdown["close_call_gap"] = close_call.gap
    breakdown["close_call_gap_pct"] = close_call.gap_pct

    notes = []
    if award is not None:
        assumptions.append(
            f"Award measured against {award.baseline.value.replace('_', ' ')} (${award.baseline_amount:,.2f})"
        )
        if award.taxes_estimated:
            assumptions.append(
                f"Award taxes estimated at {config['tax_estimate_rate']:.0%} of the baseline, "
                f"between ${config['tax_estimate_min_usd']:,.0f} and ${config['tax_estimate_max_usd']:,.0f}"
            )
        breakdown["award_baseline_amount"] = award.baseline_amount
        breakdown["award_own_points"] = award.own_points_total
        breakdown["award_taxes"] = award.taxes_total
        breakdown["award_cpp"] = award.cpp
    if award_error is not None:
        notes.append(f"Award not compared: {award_error.message}")
    if close_call.is_tie:
        notes.append(close_call.reason)

    return AuditTrail(assumptions=assumptions, breakdown=breakdown, notes=notes)
