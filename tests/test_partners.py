"""
Tests for the transfer partner registry and ratio math.
"""

from booking_engine.models import PartnerKind
from booking_engine.partners import (
    PARTNER_BY_ID,
    PARTNER_REGISTRY,
    get_all_partners,
    get_buy_miles_data,
    get_partner_by_id,
    get_partners_grouped,
    partner_points_from_own,
    points_needed,
)


class TestRegistryLookup:

    def test_registry_size_and_unique_ids(self):
        ids = [p.id for p in PARTNER_REGISTRY]
        assert len(ids) == 22
        assert len(set(ids)) == len(ids)

    def test_get_all_partners_returns_copy(self):
        partners = get_all_partners()
        partners.clear()
        assert len(get_all_partners()) == 22

    def test_lookup_by_id(self):
        partner = get_partner_by_id("turkish")

        assert partner.name == "Turkish Airlines Miles&Smiles"
        assert partner.transfer_ratio == 1.0
        assert partner.kind == PartnerKind.AIRLINE

    def test_unknown_id_returns_none(self):
        assert get_partner_by_id("not-a-partner") is None

    def test_index_covers_registry(self):
        assert set(PARTNER_BY_ID) == {p.id for p in PARTNER_REGISTRY}
        assert PARTNER_BY_ID["emirates"].ratio_label == "2:1.5"


class TestPointsNeeded:

    def test_one_to_one(self):
        assert points_needed("turkish", 40000) == 40000

    def test_two_to_one_point_five(self):
        # Emirates: 2 home points -> 1.5 Skywards miles
        assert points_needed("emirates", 30000) == 40000

    def test_rounds_up_on_fractional_result(self):
        # 30,001 / 0.75 = 40,001.33 -> 40,002
        assert points_needed("emirates", 30001) == 40002

    def test_five_to_three(self):
        assert points_needed("trueblue", 30000) == 50000

    def test_hotel_ratios(self):
        assert points_needed("accor", 10000) == 20000
        assert points_needed("iprefer", 10001) == 5001

    def test_unknown_partner(self):
        assert points_needed("unknown", 10000) is None

    def test_monotonic_and_never_short(self):
        """
        For every partner, more partner points never needs fewer home points,
        and the home points always cover the requested partner points.
        """
        for partner in PARTNER_REGISTRY:
            previous = 0
            for partner_points in range(1000, 1400, 7):
                own = points_needed(partner.id, partner_points)

                assert own >= previous
                assert own * partner.transfer_ratio >= partner_points - 1e-6
                previous = own

    def test_partner_points_from_own_rounds_down(self):
        assert partner_points_from_own("emirates", 40000) == 30000
        assert partner_points_from_own("emirates", 40001) == 30000
        assert partner_points_from_own("unknown", 40000) is None


class TestGrouping:

    def test_group_sizes(self):
        grouped = get_partners_grouped()

        assert len(grouped["airlines_1to1"]) == 14
        assert len(grouped["airlines_non_1to1"]) == 4
        assert len(grouped["hotels"]) == 4

    def test_every_partner_in_exactly_one_group(self):
        grouped = get_partners_grouped()
        ids = [p.id for group in grouped.values() for p in group]

        assert sorted(ids) == sorted(p.id for p in PARTNER_REGISTRY)

    def test_hotels_have_no_buy_miles_data(self):
        for partner in get_partners_grouped()["hotels"]:
            assert partner.buy_miles is None


class TestBuyMilesData:

    def test_known_airline(self):
        data = get_buy_miles_data("lifemiles")

        assert data.base_cost_cents == 3.25
        assert data.best_bonus_pct == 200
        assert data.frequent_promotions is True

    def test_hotel_and_unknown(self):
        assert get_buy_miles_data("choice") is None
        assert get_buy_miles_data("unknown") is None
