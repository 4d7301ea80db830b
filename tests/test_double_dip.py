"""
Tests for the double-dip (book portal, erase later) strategy.
"""

import pytest

from booking_engine.comparator import compare_costs
from booking_engine.double_dip import compute_double_dip, double_dip_for
from booking_engine.models import BookingType, PaymentStrategy


class TestComputeDoubleDip:

    def test_partial_erase(self):
        """
        $800 portal, $850 direct, $300 credit, 20,000 points on hand.

        Expected: pay $500 today, earn 4,000 points, erase $200 with
        20,000 points, net $300 -> $550 better than direct.
        """
        strategy = compute_double_dip(800.0, 850.0, 300.0, 20000, 1.8)

        assert strategy.pay_today == 500.0
        assert strategy.points_earned == 4000
        assert strategy.points_value == pytest.approx(72.0)
        assert strategy.erase_later == pytest.approx(200.0)
        assert strategy.points_used_for_erase == 20000
        assert strategy.savings_vs_direct == pytest.approx(550.0)
        assert "erase $200" in strategy.explanation

    def test_erase_capped_at_amount_paid(self):
        strategy = compute_double_dip(800.0, 850.0, 300.0, 100000, 1.8)

        assert strategy.erase_later == pytest.approx(500.0)
        assert strategy.points_used_for_erase == 50000
        assert strategy.savings_vs_direct == pytest.approx(850.0)

    def test_no_balance(self):
        strategy = compute_double_dip(800.0, 850.0, 300.0, 0, 1.8)

        assert strategy.erase_later == 0.0
        assert strategy.savings_vs_direct == pytest.approx(350.0)

    def test_erase_rate_ignores_valuation(self):
        low = compute_double_dip(800.0, 850.0, 300.0, 20000, 1.0)
        high = compute_double_dip(800.0, 850.0, 300.0, 20000, 2.5)

        assert low.erase_later == high.erase_later
        assert low.points_value != high.points_value


class TestPaymentOptions:

    def test_keeping_points_wins_when_valued_above_erase_rate(self):
        """
        At 1.8¢ a point, spending points at the 1.0¢ erase rate loses value.

        Expected: pay cash through the portal and keep the points.
        """
        # Act
        strategy = compute_double_dip(800.0, 850.0, 300.0, 20000, 1.8)

        # Assert
        assert strategy.best_strategy == PaymentStrategy.PORTAL_PAY_CASH
        assert strategy.recommended is False
        assert strategy.options[0].effective_cost == pytest.approx(428.0)
        assert len(strategy.options) == 4

    def test_erase_wins_when_points_valued_below_erase_rate(self):
        """
        At 0.5¢ a point, erasing $240 with the 24,000 points held after
        booking beats keeping them.

        Expected ranking: portal erase $360, portal cash $480,
        direct erase $733, direct cash $841.50.
        """
        strategy = compute_double_dip(800.0, 850.0, 300.0, 20000, 0.5)

        assert [o.strategy for o in strategy.options] == [
            PaymentStrategy.PORTAL_THEN_ERASE,
            PaymentStrategy.PORTAL_PAY_CASH,
            PaymentStrategy.DIRECT_THEN_ERASE,
            PaymentStrategy.DIRECT_PAY_CASH,
        ]
        assert [o.effective_cost for o in strategy.options] == pytest.approx([360.0, 480.0, 733.0, 841.5])
        best = strategy.options[0]
        assert best.erase_later == pytest.approx(240.0)
        assert best.points_used_for_erase == 24000
        assert best.points_kept == 0
        assert strategy.recommended is True
        # Headline fields still erase from the current balance only
        assert strategy.erase_later == pytest.approx(200.0)

    def test_small_erase_is_not_recommended(self):
        # Only the 4,000 points this booking earns: a $40 erase
        strategy = compute_double_dip(800.0, 850.0, 300.0, 0, 0.5)

        assert strategy.best_strategy == PaymentStrategy.PORTAL_THEN_ERASE
        assert strategy.options[0].erase_later == pytest.approx(40.0)
        assert strategy.recommended is False


class TestDoubleDipGate:

    def test_offered_for_flight_when_portal_wins(self):
        cost = compare_costs(800.0, 850.0, 300.0, 1.8)

        assert double_dip_for(cost, 300.0, 20000) is not None

    def test_not_offered_when_direct_wins(self):
        cost = compare_costs(900.0, 500.0, 0.0, 1.8)

        assert double_dip_for(cost, 0.0, 20000) is None

    def test_not_offered_for_hotels(self):
        cost = compare_costs(800.0, 850.0, 300.0, 1.8, booking_type=BookingType.HOTEL)

        assert double_dip_for(cost, 300.0, 20000) is None
