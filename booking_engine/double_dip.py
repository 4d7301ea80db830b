"""
Double-dip strategy for flights: pay cash through the portal today, earn the
portal multiplier, then erase the charge with points at the guaranteed floor.

Alongside the headline portal strategy, every way of paying is ranked:
portal or direct, each either erased after booking or paid in cash.
"""

from typing import Optional

from booking_engine.config import DEFAULT_CONFIG, earn_profile
from booking_engine.models import (
    BookingType,
    CostComparison,
    DoubleDipStrategy,
    PathKind,
    PaymentOption,
    PaymentStrategy,
)


def _payment_options(
    pay_today: float,
    points_earned: int,
    points_balance: int,
    valuation_cpp: float,
    floor_usd_per_point: float,
    erase: PaymentStrategy,
    pay_cash: PaymentStrategy,
) -> list:
    """
    The erase and pay-cash options for one path.

    Erasing draws on the balance after the booking posts. Points spent on the
    erase are not also counted as kept, so effective cost charges for them.
    """
    total_after_booking = points_balance + points_earned
    erase_later = min(pay_today, total_after_booking * floor_usd_per_point)
    points_used = round(erase_later / floor_usd_per_point) if floor_usd_per_point > 0 else 0

    options = []
    if erase_later > 0:
        options.append(PaymentOption(
            strategy=erase,
            pay_today=pay_today,
            points_earned=points_earned,
            erase_later=erase_later,
            points_used_for_erase=points_used,
            points_kept=max(0, total_after_booking - points_used),
            effective_cost=pay_today - erase_later - (points_earned - points_used) * valuation_cpp / 100,
        ))
    options.append(PaymentOption(
        strategy=pay_cash,
        pay_today=pay_today,
        points_earned=points_earned,
        erase_later=0.0,
        points_used_for_erase=0,
        points_kept=total_after_booking,
        effective_cost=pay_today - points_earned * valuation_cpp / 100,
    ))
    return options


def compute_double_dip(
    portal_price: float,
    direct_price: float,
    credit_remaining: float,
    points_balance: int,
    valuation_cpp: float,
    booking_type: BookingType = BookingType.FLIGHT,
    config: dict = None,
) -> DoubleDipStrategy:
    """
    Evaluate "book portal today, erase later".

    The erase rate is the fixed floor (eraser_floor_cpp, 1 point = $0.01),
    independent of valuation_cpp, which only prices the points earned.

    Ranking rules:
    - Four options: portal_then_erase, direct_then_erase, portal_pay_cash,
      direct_pay_cash; an erase option needs something to erase
    - Sorted by effective cost, ties in that order
    - Recommended only when an erase option is best and it recovers more
      than double_dip_min_erase_usd

    Returns:
        DoubleDipStrategy with pay_today, points_earned, points_value,
        erase_later = min(points_balance x floor, pay_today),
        savings_vs_direct = direct_price - (pay_today - erase_later),
        and the ranked options
    """
    if config is None:
        config = DEFAULT_CONFIG

    floor_cpp = config.get("eraser_floor_cpp", 1.0)
    floor_usd_per_point = floor_cpp / 100
    profile = earn_profile(booking_type)

    pay_today = portal_price - min(credit_remaining, portal_price)
    points_earned = round(portal_price * profile.portal_multiplier)
    points_value = points_earned * valuation_cpp / 100

    erase_later = min(points_balance * floor_usd_per_point, pay_today)
    points_used = round(erase_later / floor_usd_per_point) if floor_usd_per_point > 0 else 0
    savings_vs_direct = direct_price - (pay_today - erase_later)

    options = _payment_options(
        pay_today, points_earned, points_balance, valuation_cpp, floor_usd_per_point,
        PaymentStrategy.PORTAL_THEN_ERASE, PaymentStrategy.PORTAL_PAY_CASH,
    ) + _payment_options(
        direct_price, round(direct_price * profile.direct_multiplier), points_balance, valuation_cpp,
        floor_usd_per_point, PaymentStrategy.DIRECT_THEN_ERASE, PaymentStrategy.DIRECT_PAY_CASH,
    )
    order = list(PaymentStrategy)
    options.sort(key=lambda option: (option.effective_cost, order.index(option.strategy)))
    best = options[0]
    recommended = best.erase_later > config.get("double_dip_min_erase_usd", 50.0)

    explanation = (
        f"Book portal (${pay_today:,.0f}), earn {points_earned:,} points, "
        f"then erase ${erase_later:,.0f} later using {points_used:,} points at "
        f"{floor_cpp:.1f}¢ each."
    )

    return DoubleDipStrategy(
        pay_today=pay_today,
        points_earned=points_earned,
        points_value=points_value,
        erase_later=erase_later,
        points_used_for_erase=points_used,
        savings_vs_direct=savings_vs_direct,
        explanation=explanation,
        best_strategy=best.strategy,
        recommended=recommended,
        options=tuple(options),
    )


def double_dip_for(
    cost: CostComparison,
    credit_remaining: float,
    points_balance: int,
    config: dict = None,
) -> Optional[DoubleDipStrategy]:
    """Surface the double-dip only for flights whose baseline winner is the portal."""
    if cost.booking_type != BookingType.FLIGHT or cost.baseline_recommendation != PathKind.PORTAL:
        return None
    return compute_double_dip(
        portal_price=cost.portal.price,
        direct_price=cost.direct.price,
        credit_remaining=credit_remaining,
        points_balance=points_balance,
        valuation_cpp=cost.valuation_cpp,
        booking_type=cost.booking_type,
        config=config,
    )
