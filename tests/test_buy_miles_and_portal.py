"""
Tests for the advisory callouts: buy-miles and portal-cheaper.
"""

import pytest

from booking_engine.buy_miles import compare_buy_miles
from booking_engine.portal_advisor import advise_portal_cheaper


class TestBuyMiles:

    def test_transfer_beats_buying(self):
        """
        Turkish: 40,000 miles at 3.00¢ = $1,200, $800 with a 50% bonus.
        Transferring 40,000 points at 1.8¢ is worth $720, so transfer wins by $80.
        """
        comparison = compare_buy_miles("turkish", 40000, 40000, 1.8)

        assert comparison.base_buy_cost_usd == pytest.approx(1200.0)
        assert comparison.best_bonus_pct == 50
        assert comparison.best_bonus_buy_cost_usd == pytest.approx(800.0)
        assert comparison.transfer_value_usd == pytest.approx(720.0)
        assert comparison.buy_is_cheaper_with_bonus is False
        assert comparison.transfer_savings_usd == pytest.approx(80.0)
        assert comparison.buy_savings_usd == 0.0

    def test_buying_on_sale_beats_transfer(self):
        # LifeMiles: $1,300 base, 200% bonus -> $433.33
        comparison = compare_buy_miles("lifemiles", 40000, 40000, 1.8)

        assert comparison.best_bonus_buy_cost_usd == pytest.approx(433.33, abs=0.01)
        assert comparison.buy_is_cheaper_with_bonus is True
        assert comparison.buy_savings_usd == pytest.approx(286.67, abs=0.01)
        assert comparison.transfer_savings_usd == 0.0

    def test_non_one_to_one_uses_home_points_for_transfer_value(self):
        comparison = compare_buy_miles("emirates", 30000, 40000, 1.5)

        assert comparison.transfer_value_usd == pytest.approx(600.0)
        assert comparison.base_buy_cost_usd == pytest.approx(900.0)

    def test_partner_without_buy_data(self):
        assert compare_buy_miles("choice", 10000, 10000, 1.8) is None
        assert compare_buy_miles("unknown", 10000, 10000, 1.8) is None


class TestPortalCheaper:

    def test_weak_award_flags_portal(self):
        """
        $500 cash, no credit, award 80,000 points + $20 at 0.6¢.

        Portal net = 500 - 2,500 points x 1.8¢ = $455; award costs
        80,000 x 1.8¢ + $20 = $1,460.
        """
        advice = advise_portal_cheaper(
            cash_price=500.0,
            own_points=80000,
            taxes=20.0,
            valuation_cpp=1.8,
            portal_multiplier=5.0,
            credit_remaining=0.0,
            award_cpp=0.6,
        )

        assert advice.portal_net_cost_usd == pytest.approx(455.0)
        assert advice.award_total_value_usd == pytest.approx(1460.0)
        assert advice.threshold_cpp == 1.0
        assert advice.is_portal_cheaper is True
        assert advice.savings_if_portal == pytest.approx(1005.0)

    def test_good_award_is_never_flagged(self):
        advice = advise_portal_cheaper(500.0, 80000, 20.0, 1.8, 5.0, 0.0, award_cpp=1.2)

        assert advice.is_portal_cheaper is False
        assert advice.savings_if_portal == 0.0

    def test_credit_capped_at_cash_price(self):
        advice = advise_portal_cheaper(200.0, 20000, 20.0, 1.8, 5.0, credit_remaining=300.0, award_cpp=0.5)

        # Nothing paid; 1,000 points earned worth $18
        assert advice.portal_net_cost_usd == pytest.approx(-18.0)
