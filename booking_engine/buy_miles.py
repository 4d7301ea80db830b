"""
Buy-Miles Comparator.
Advisory callout: is buying partner miles during a sale cheaper than
transferring home points? Never changes the recommendation.
"""

from typing import Optional

from booking_engine.models import BuyMilesComparison
from booking_engine.partners import get_buy_miles_data


def compare_buy_miles(
    partner_id: str,
    partner_points: int,
    own_points: int,
    valuation_cpp: float,
) -> Optional[BuyMilesComparison]:
    """
    Compare buying `partner_points` outright against transferring `own_points`.

    Args:
        partner_id: transfer partner slug
        partner_points: partner miles the award costs
        own_points: home points a transfer would consume
        valuation_cpp: assumed worth of one home point, in cents

    Returns:
        BuyMilesComparison, or None when the partner does not sell miles
    """
    data = get_buy_miles_data(partner_id)
    if data is None:
        return None

    base_cost = partner_points * data.base_cost_cents / 100
    best_bonus_cost = base_cost / (1 + data.best_bonus_pct / 100)
    transfer_value = own_points * valuation_cpp / 100

    buy_is_cheaper = best_bonus_cost < transfer_value

    return BuyMilesComparison(
        partner_id=partner_id,
        partner_points=partner_points,
        own_points=own_points,
        base_buy_cost_usd=base_cost,
        best_bonus_pct=data.best_bonus_pct,
        best_bonus_buy_cost_usd=best_bonus_cost,
        transfer_value_usd=transfer_value,
        buy_is_cheaper_with_bonus=buy_is_cheaper,
        transfer_savings_usd=0.0 if buy_is_cheaper else best_bonus_cost - transfer_value,
        buy_savings_usd=transfer_value - best_bonus_cost if buy_is_cheaper else 0.0,
    )
