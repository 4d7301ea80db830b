"""
Close-call classification.
Collapses a narrow numeric win into a tie without touching the numbers.
"""

from booking_engine.config import DEFAULT_CONFIG
from booking_engine.models import CloseCall, PathKind, TieVerdict, Verdict


def _fmt_usd(value: float) -> str:
    return f"${value:,.2f}".replace(".00", "")


def _fmt_pct(value: float) -> str:
    return f"{value:g}%"


def classify_close_call(first: float, second: float, fx_involved: bool = False, config: dict = None) -> CloseCall:
    """
    Decide whether two competing figures are too close to call.

    Tie when gap <= close_call_abs_usd OR gap% <= close_call_pct, with both
    thresholds widened by fx_tolerance_multiplier when a currency conversion
    fed either figure. Symmetric: argument order never changes the result.

    Args:
        first: metric of one path (out-of-pocket or effective cost)
        second: metric of the other path
        fx_involved: whether a foreign-currency conversion occurred
        config: optional config dict (uses defaults if not provided)

    Returns:
        CloseCall with gap figures, the band used, and a reason when tied
    """
    if config is None:
        config = DEFAULT_CONFIG

    abs_threshold = config.get("close_call_abs_usd", 25.0)
    pct_threshold = config.get("close_call_pct", 2.0)
    if fx_involved:
        widen = config.get("fx_tolerance_multiplier", 1.5)
        abs_threshold *= widen
        pct_threshold *= widen

    gap = abs(first - second)
    scale = max(abs(first), abs(second))
    gap_pct = (gap / scale * 100) if scale > 0 else 0.0

    is_tie = gap <= abs_threshold or gap_pct <= pct_threshold

    reason = None
    if is_tie:
        reason = (
            f"Within {_fmt_usd(abs_threshold)} or {_fmt_pct(pct_threshold)} "
            f"(gap {_fmt_usd(gap)}, {gap_pct:.1f}%) - too close to call; "
            "choose based on cancellation policy or support quality"
        )
        if fx_involved:
            reason += " (band widened for currency conversion)"

    return CloseCall(
        is_tie=is_tie,
        gap=round(gap, 2),
        gap_pct=round(gap_pct, 2),
        abs_threshold=abs_threshold,
        pct_threshold=pct_threshold,
        reason=reason,
    )


def resolve_verdict(verdict: Verdict, runner_up: PathKind, close_call: CloseCall) -> Verdict:
    """
    Downgrade a hard winner to a tie when the close call says so.

    Only the declared winner changes; payloads on other variants are untouched.
    """
    if not close_call.is_tie or isinstance(verdict, TieVerdict):
        return verdict
    return TieVerdict(contenders=(verdict.kind, runner_up), reason=close_call.reason)
