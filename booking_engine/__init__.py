"""
Booking decision engine: portal vs direct vs award.

Entry point is compare_booking(); the component modules are usable on their own.
"""

from booking_engine.models import (
    AwardBaseline,
    AwardLegInput,
    BookingType,
    ComparisonRequest,
    ComparisonResult,
    Confidence,
    EntryMode,
    LegDirection,
    Money,
    Objective,
    PathKind,
    PriceQuote,
)
from booking_engine.recommender import compare_booking

__all__ = [
    "AwardBaseline",
    "AwardLegInput",
    "BookingType",
    "ComparisonRequest",
    "ComparisonResult",
    "Confidence",
    "EntryMode",
    "LegDirection",
    "Money",
    "Objective",
    "PathKind",
    "PriceQuote",
    "compare_booking",
]
