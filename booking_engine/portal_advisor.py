"""
Portal-Cheaper Advisor.
Flags weak award redemptions where simply paying cash through the portal
(and banking the points it earns) costs less.
"""

from booking_engine.config import DEFAULT_CONFIG
from booking_engine.models import PortalCheaperAdvice


def advise_portal_cheaper(
    cash_price: float,
    own_points: int,
    taxes: float,
    valuation_cpp: float,
    portal_multiplier: float,
    credit_remaining: float,
    award_cpp: float,
    config: dict = None,
) -> PortalCheaperAdvice:
    """
    Rules:
    - portal_net = cash paid after credit, minus the earned points' value
    - award_total = points spent at valuation_cpp, plus taxes
    - Portal is cheaper only when award_cpp < award_cpp_floor AND
      portal_net < award_total

    Example (weak award):
        cash $500, no credit, 80,000 points + $20 taxes at 1.8¢, award cpp 0.6
        -> portal_net $455, award_total $1,460, savings_if_portal $1,005
    """
    if config is None:
        config = DEFAULT_CONFIG

    threshold = config.get("award_cpp_floor", 1.0)

    paid = cash_price - min(credit_remaining, cash_price)
    earned_value = cash_price * portal_multiplier * valuation_cpp / 100
    portal_net = paid - earned_value
    award_total = own_points * valuation_cpp / 100 + taxes

    is_cheaper = award_cpp < threshold and portal_net < award_total

    return PortalCheaperAdvice(
        portal_net_cost_usd=portal_net,
        award_total_value_usd=award_total,
        award_cpp=award_cpp,
        threshold_cpp=threshold,
        is_portal_cheaper=is_cheaper,
        savings_if_portal=award_total - portal_net if is_cheaper else 0.0,
    )
