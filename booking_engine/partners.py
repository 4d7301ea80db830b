"""
Transfer Partner Registry.

Static catalog of the loyalty programs home points transfer to.
Built once at import time; lookups go through an id index.

Grouped conceptually:
    1. Airlines with 1:1 ratio
    2. Airlines with non-1:1 ratio
    3. Hotels
"""

import math
from typing import Optional

from booking_engine.models import BuyMilesData, PartnerKind, TransferPartner


def _airline(pid, name, iata, alliance, ratio_label, ratio, base_cents, bonus_range,
             annual_max, min_purchase=1_000, frequent=False) -> TransferPartner:
    return TransferPartner(
        id=pid,
        name=name,
        transfer_ratio=ratio,
        ratio_label=ratio_label,
        iata=iata,
        kind=PartnerKind.AIRLINE,
        alliance=alliance,
        buy_miles=BuyMilesData(
            base_cost_cents=base_cents,
            typical_bonus_range=bonus_range,
            frequent_promotions=frequent,
            annual_max_miles=annual_max,
            min_purchase_miles=min_purchase,
        ),
    )


def _hotel(pid, name, code, ratio_label, ratio) -> TransferPartner:
    return TransferPartner(
        id=pid,
        name=name,
        transfer_ratio=ratio,
        ratio_label=ratio_label,
        iata=code,
        kind=PartnerKind.HOTEL,
    )


PARTNER_REGISTRY: tuple[TransferPartner, ...] = (
    # Airlines (1:1)
    _airline("aeromexico", "Aeromexico Rewards", "AM", "SkyTeam", "1:1", 1.0, 3.25, (15, 50), 100_000),
    _airline("aeroplan", "Air Canada Aeroplan", "AC", "Star Alliance", "1:1", 1.0, 3.00, (50, 100), 250_000),
    _airline("lifemiles", "Avianca LifeMiles", "AV", "Star Alliance", "1:1", 1.0, 3.25, (100, 200), 400_000,
             frequent=True),
    _airline("avios", "British Airways Executive Club", "BA", "Oneworld", "1:1", 1.0, 2.86, (25, 100), 200_000),
    _airline("cathay", "Cathay Pacific Asia Miles", "CX", "Oneworld", "1:1", 1.0, 3.50, (10, 50), 200_000),
    _airline("etihad", "Etihad Guest", "EY", "none", "1:1", 1.0, 3.50, (25, 50), 100_000),
    _airline("finnair", "Finnair Plus", "AY", "Oneworld", "1:1", 1.0, 2.86, (25, 100), 200_000),
    _airline("flyingblue", "Air France-KLM Flying Blue", "AF", "SkyTeam", "1:1", 1.0, 3.00, (50, 100), 100_000,
             min_purchase=2_000),
    _airline("qantas", "Qantas Frequent Flyer", "QF", "Oneworld", "1:1", 1.0, 3.00, (15, 50), 150_000),
    _airline("qatar", "Qatar Airways Privilege Club", "QR", "Oneworld", "1:1", 1.0, 3.25, (25, 100), 100_000),
    _airline("krisflyer", "Singapore Airlines KrisFlyer", "SQ", "Star Alliance", "1:1", 1.0, 3.50, (15, 25),
             200_000),
    _airline("tapmilesgo", "TAP Miles&Go", "TP", "Star Alliance", "1:1", 1.0, 3.00, (25, 50), 100_000),
    _airline("turkish", "Turkish Airlines Miles&Smiles", "TK", "Star Alliance", "1:1", 1.0, 3.00, (25, 50),
             100_000),
    _airline("virginred", "Virgin Red", "VS", "none", "1:1", 1.0, 2.50, (25, 50), 100_000),
    # Airlines (non-1:1)
    _airline("emirates", "Emirates Skywards", "EK", "none", "2:1.5", 0.75, 3.00, (30, 100), 100_000,
             min_purchase=2_000),
    _airline("evaair", "EVA Air Infinity MileageLands", "BR", "Star Alliance", "2:1.5", 0.75, 3.25, (10, 30),
             100_000),
    _airline("jal", "Japan Airlines Mileage Bank", "JL", "Oneworld", "2:1.5", 0.75, 3.00, (10, 50), 100_000),
    _airline("trueblue", "JetBlue TrueBlue", "B6", "none", "5:3", 0.6, 2.50, (25, 75), 150_000),
    # Hotels
    _hotel("choice", "Choice Privileges", "CH", "1:1", 1.0),
    _hotel("wyndham", "Wyndham Rewards", "WY", "1:1", 1.0),
    _hotel("iprefer", "I Prefer Hotel Rewards", "IP", "1:2", 2.0),
    _hotel("accor", "Accor Live Limitless", "AL", "2:1", 0.5),
)

PARTNER_BY_ID = {p.id: p for p in PARTNER_REGISTRY}


def get_all_partners() -> list[TransferPartner]:
    return list(PARTNER_REGISTRY)


def get_partner_by_id(partner_id: str) -> Optional[TransferPartner]:
    """Look up a partner by slug (e.g., 'turkish'). Returns None if unknown."""
    return PARTNER_BY_ID.get(partner_id)


def points_needed(partner_id: str, partner_points: int) -> Optional[int]:
    """
    Home points required to receive `partner_points` at the partner.

    Rounds up so the traveler is never told they need fewer points than the
    ratio implies. Returns None for an unknown partner.

    Example:
        >>> points_needed("emirates", 30000)
        40000
    """
    partner = PARTNER_BY_ID.get(partner_id)
    if partner is None:
        return None
    return own_points_for(partner, partner_points)


def own_points_for(partner: TransferPartner, partner_points: int) -> int:
    # round() first so float error cannot push an exact quotient up by one
    return math.ceil(round(partner_points / partner.transfer_ratio, 6))


def partner_points_for(partner: TransferPartner, own_points: int) -> int:
    return math.floor(round(own_points * partner.transfer_ratio, 6))


def partner_points_from_own(partner_id: str, own_points: int) -> Optional[int]:
    """Partner points received for transferring `own_points` (rounds down)."""
    partner = PARTNER_BY_ID.get(partner_id)
    if partner is None:
        return None
    return partner_points_for(partner, own_points)


def get_partners_grouped() -> dict[str, list[TransferPartner]]:
    """
    Partners grouped for presentation. A derived view over PARTNER_REGISTRY.

    Returns:
        Dict with keys 'airlines_1to1', 'airlines_non_1to1', 'hotels'
    """
    grouped = {"airlines_1to1": [], "airlines_non_1to1": [], "hotels": []}
    for partner in PARTNER_REGISTRY:
        if partner.kind == PartnerKind.HOTEL:
            grouped["hotels"].append(partner)
        elif partner.is_one_to_one:
            grouped["airlines_1to1"].append(partner)
        else:
            grouped["airlines_non_1to1"].append(partner)
    return grouped


def get_buy_miles_data(partner_id: str) -> Optional[BuyMilesData]:
    partner = PARTNER_BY_ID.get(partner_id)
    return partner.buy_miles if partner else None
