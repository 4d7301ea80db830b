"""
Command-line interface for the Booking Decision Engine.
Compare portal, direct and award options for one booking, or list transfer partners.
"""

import argparse
import logging
import sys

from booking_engine.config import DEFAULT_CONFIG
from booking_engine.currency import RATES_TO_HOME
from booking_engine.models import (
    AwardBaseline,
    AwardLegInput,
    BookingType,
    ComparisonRequest,
    EntryMode,
    LegDirection,
    Money,
    Objective,
    PathKind,
    PriceQuote,
)
from booking_engine.partners import get_partners_grouped
from booking_engine.recommender import compare_booking


GROUP_TITLES = {
    "airlines_1to1": "Airlines (1:1)",
    "airlines_non_1to1": "Airlines (other ratios)",
    "hotels": "Hotels",
}


def _choices(enum_cls) -> list:
    return [member.value for member in enum_cls]


def parse_leg(text: str, entry_mode: EntryMode = EntryMode.MILES) -> AwardLegInput:
    """
    Parse a --leg value of the form direction:partner:points[:taxes].

    Raises:
        ValueError: If the value is malformed
    """
    parts = text.split(":")
    if len(parts) not in (3, 4):
        raise ValueError(f"Invalid leg '{text}'. Expected direction:partner:points[:taxes].")

    direction, partner_id, points = parts[0], parts[1], parts[2]
    if direction not in _choices(LegDirection):
        raise ValueError(
            f"Invalid leg direction '{direction}'. Must be one of: {', '.join(_choices(LegDirection))}"
        )

    try:
        points = int(points.replace(",", ""))
        taxes = float(parts[3]) if len(parts) == 4 else None
    except ValueError:
        raise ValueError(f"Invalid leg '{text}'. Points must be a whole number and taxes a number.")

    return AwardLegInput(
        direction=LegDirection(direction),
        partner_id=partner_id or None,
        points=points,
        taxes=taxes,
        entry_mode=entry_mode,
    )


def cmd_compare(args):
    """
    Compare booking options and print the recommendation.

    Args:
        args: Parsed command-line arguments with fields:
            - portal / direct: prices in --currency
            - credit: remaining travel credit in USD
            - type: flight | hotel | vacation_rental
            - objective: cheapest_cash | max_value
            - cpp: point valuation in cents
            - balance: current points balance
            - leg: optional award legs (direction:partner:points[:taxes])
            - baseline: cash figure the award is measured against
    """
    # Validate amounts
    if args.portal < 0 or args.direct < 0:
        print("Error: Prices cannot be negative.")
        sys.exit(1)

    if args.credit < 0:
        print(f"Error: Credit cannot be negative. Got: {args.credit}")
        sys.exit(1)

    if args.cpp <= 0:
        print(f"Error: Point valuation must be greater than 0. Got: {args.cpp}")
        sys.exit(1)

    if args.balance < 0:
        print(f"Error: Points balance cannot be negative. Got: {args.balance}")
        sys.exit(1)

    currency = args.currency.upper()
    if currency not in RATES_TO_HOME:
        print(f"Error: Unsupported currency '{args.currency}'.")
        sys.exit(1)

    legs = []
    for text in args.leg or []:
        try:
            legs.append(parse_leg(text, EntryMode(args.entry_mode)))
        except ValueError as e:
            print(f"Error: {e}")
            sys.exit(1)

    request = ComparisonRequest(
        portal_quote=PriceQuote(Money(args.portal, currency)),
        direct_quote=PriceQuote(Money(args.direct, currency)),
        booking_type=BookingType(args.type),
        objective=Objective(args.objective),
        credit_remaining=args.credit,
        valuation_cpp=args.cpp,
        points_balance=args.balance,
        award_legs=tuple(legs),
        award_baseline=AwardBaseline(args.baseline),
    )

    result = compare_booking(request)
    print_result(result)


def print_result(result):
    """Render a ComparisonResult as plain text."""
    cost = result.cost
    verdict = result.verdict

    print("\n=== Booking Recommendation ===\n")
    print(f"Recommendation: {result.recommendation.value.upper()}")
    if result.recommendation == PathKind.TIE:
        print(f"  Between: {' and '.join(kind.value for kind in verdict.contenders)}")
        print(f"  {verdict.reason}")
    print(f"Confidence: {result.confidence.value}")
    for reason in result.confidence_reasons:
        print(f"  • {reason}")

    print("\n--- Per Path ---\n")
    for path, out_of_pocket in result.per_path_out_of_pocket.items():
        points = result.per_path_points_earned.get(path, 0)
        print(f"{path.capitalize():<8} out-of-pocket ${out_of_pocket:,.2f}, earns {points:,} points")
    print(f"\nEffective cost: portal ${cost.portal.effective_cost:,.2f}, direct ${cost.direct.effective_cost:,.2f}")

    if result.award is not None:
        award = result.award
        print("\n--- Award ---\n")
        for leg in award.legs:
            estimated = " (estimated)" if leg.taxes_estimated else ""
            print(
                f"{leg.direction.value.capitalize()}: {leg.partner.name}, "
                f"{leg.partner_points:,} partner points = {leg.own_points:,} points + ${leg.taxes:,.2f}{estimated}"
            )
        print(f"Total: {award.own_points_total:,} points + ${award.taxes_total:,.2f} taxes at {award.cpp:.2f}¢/point")
    if result.award_error is not None:
        print(f"\nAward not compared: {result.award_error.message}")

    if result.flip_conditions:
        print("\n--- Could Flip If ---\n")
        for condition in result.flip_conditions:
            print(f"  • {condition}")

    if result.double_dip is not None:
        print("\n--- Double-Dip ---\n")
        print(f"  {result.double_dip.explanation}")
        print(f"  Saves ${result.double_dip.savings_vs_direct:,.2f} vs booking direct")
        best = result.double_dip.options[0]
        print(f"  Best way to pay: {best.strategy.value} (effective ${best.effective_cost:,.2f})")

    for buy in result.buy_miles:
        if buy.buy_is_cheaper_with_bonus:
            print(
                f"\nBuying {buy.partner_points:,} {buy.partner_id} miles at a {buy.best_bonus_pct}% bonus "
                f"(${buy.best_bonus_buy_cost_usd:,.2f}) beats transferring (${buy.transfer_value_usd:,.2f})"
            )

    if result.portal_cheaper is not None and result.portal_cheaper.is_portal_cheaper:
        print(
            f"\nPaying cash via the portal saves ${result.portal_cheaper.savings_if_portal:,.2f} "
            f"over this {result.portal_cheaper.award_cpp:.2f}¢ award"
        )
    print()


def cmd_partners(args):
    """Print the transfer partner registry, grouped."""
    grouped = get_partners_grouped()

    print("\n=== Transfer Partners ===\n")
    for group, partners in grouped.items():
        print(f"{GROUP_TITLES[group]}:")
        for partner in partners:
            print(f"  {partner.id:<12} {partner.name} ({partner.ratio_label})")
        print()


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Booking Decision Engine CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Compare command
    parser_compare = subparsers.add_parser("compare", help="Compare portal, direct and award options")
    parser_compare.add_argument("--portal", type=float, required=True, help="Portal price")
    parser_compare.add_argument("--direct", type=float, required=True, help="Direct price")
    parser_compare.add_argument("--credit", type=float, default=0.0, help="Remaining travel credit in USD")
    parser_compare.add_argument("--type", choices=_choices(BookingType), default="flight", help="Booking type")
    parser_compare.add_argument("--currency", default="USD", help="Currency of both prices (e.g., EUR)")
    parser_compare.add_argument("--objective", choices=_choices(Objective), default="cheapest_cash",
                                help="Decision objective")
    parser_compare.add_argument("--cpp", type=float, default=DEFAULT_CONFIG["default_valuation_cpp"],
                                help="Point valuation in cents")
    parser_compare.add_argument("--balance", type=int, default=0, help="Current points balance")
    parser_compare.add_argument("--leg", action="append",
                                help="Award leg direction:partner:points[:taxes] (repeatable)")
    parser_compare.add_argument("--entry-mode", choices=_choices(EntryMode), default="miles",
                                help="Whether leg points are partner miles or home points")
    parser_compare.add_argument("--baseline", choices=_choices(AwardBaseline), default="portal_with_credit",
                                help="Cash figure the award is measured against")

    # Partners command
    subparsers.add_parser("partners", help="List transfer partners")

    # Parse arguments
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Execute command
    if args.command == "compare":
        cmd_compare(args)
    elif args.command == "partners":
        cmd_partners(args)


if __name__ == "__main__":
    main()
