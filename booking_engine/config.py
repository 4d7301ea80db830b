"""
Named constants for the booking decision engine.
Every engine function accepts an optional config dict and falls back to these.
"""

from booking_engine.models import BookingType, EarnProfile


# Earn multipliers per booking type: (portal, direct)
EARN_PROFILES = {
    BookingType.FLIGHT: EarnProfile(portal_multiplier=5.0, direct_multiplier=2.0),
    BookingType.HOTEL: EarnProfile(portal_multiplier=10.0, direct_multiplier=2.0),
    BookingType.VACATION_RENTAL: EarnProfile(portal_multiplier=5.0, direct_multiplier=2.0),
}


# Default configuration values
DEFAULT_CONFIG = {
    # Statement credit
    "max_travel_credit": 300.0,

    # Point valuation (cents per point)
    "default_valuation_cpp": 1.8,

    # Close-call band
    "close_call_abs_usd": 25.0,
    "close_call_pct": 2.0,
    "fx_tolerance_multiplier": 1.5,

    # Ambiguous trade-off: winner gives up this many points or more...
    "tradeoff_min_points": 1000,
    # ...and those points are worth at least this share of the cash gap
    "tradeoff_value_ratio": 0.5,

    # Award redemption
    "award_min_points": 1000,
    "award_max_legs": 2,
    "award_cpp_floor": 1.0,
    "tax_estimate_rate": 0.10,
    "tax_estimate_min_usd": 75.0,
    "tax_estimate_max_usd": 150.0,

    # Guaranteed points-to-cash floor (1 point = $0.01)
    "eraser_floor_cpp": 1.0,
    # Erasing is only worth recommending above this many dollars
    "double_dip_min_erase_usd": 50.0,
}


def merge_config(overrides: dict = None) -> dict:
    """
    Build a full config dict from DEFAULT_CONFIG plus caller overrides.

    Unknown keys are kept so callers can thread their own settings through.
    """
    config = DEFAULT_CONFIG.copy()
    if overrides:
        config.update(overrides)
    return config


def earn_profile(booking_type: BookingType) -> EarnProfile:
    """Look up the earn multipliers for a booking type."""
    return EARN_PROFILES[BookingType(booking_type)]
