"""
Tests for VIP loyalty scoring.
"""

import pytest

from bizcoach.assistant.vip import (
    VIP_TIERS,
    basket_points,
    calculate_vip_scores,
    frequency_points,
    recency_points,
    spend_points,
    tier_for,
)
from bizcoach.assistant.schemas import VipTier

from factories import NOW, make_client, make_sale


class TestComponents:

    @pytest.mark.parametrize("spent,points", [
        (600000, 40),
        (300000, 30),
        (150000, 20),
        (50000, 10),
        (49999, 9.9998),
        (10000, 2),
        (0, 0),
    ])
    def test_spend(self, spent, points):
        assert spend_points(spent) == pytest.approx(points)

    @pytest.mark.parametrize("count,points", [
        (50, 30), (30, 25), (15, 20), (8, 15), (7, 14), (1, 2),
    ])
    def test_frequency(self, count, points):
        assert frequency_points(count) == points

    @pytest.mark.parametrize("days,points", [
        (0, 20), (7, 20), (8, 15), (14, 15), (30, 10), (60, 5), (61, 0),
    ])
    def test_recency(self, days, points):
        assert recency_points(days) == points

    @pytest.mark.parametrize("avg,points", [
        (50000, 10), (30000, 8), (15000, 6), (8000, 4), (7999, 3.9995), (3000, 1.5),
    ])
    def test_basket(self, avg, points):
        assert basket_points(avg) == pytest.approx(points)

    def test_fallbacks_stay_below_next_tier(self):
        assert spend_points(49999.99) <= 10
        assert frequency_points(7) <= 15
        assert basket_points(7999.99) <= 4


class TestTiers:

    @pytest.mark.parametrize("score,tier", [
        (100, VipTier.PLATINE),
        (85, VipTier.PLATINE),
        (84.9, VipTier.OR),
        (70, VipTier.OR),
        (50, VipTier.ARGENT),
        (30, VipTier.BRONZE),
        (29.99, VipTier.STANDARD),
        (0, VipTier.STANDARD),
    ])
    def test_tier_bands(self, score, tier):
        assert tier_for(score) == tier

    def test_every_tier_has_a_profile(self):
        assert set(VIP_TIERS) == set(VipTier)


class TestCalculateVipScores:

    def test_perfect_client_is_platine_with_no_next_tier(self):
        sales = [make_sale(f"s{i}", total=60000, days_ago=i) for i in range(60)]

        score = calculate_vip_scores([make_client()], sales, NOW)[0]

        assert score.components.spend == 40
        assert score.components.frequency == 30
        assert score.components.recency == 20
        assert score.components.basket == 10
        assert score.score == 100
        assert score.tier == VipTier.PLATINE
        assert score.next_tier_score is None
        assert score.next_tier_name is None
        assert score.benefits[0] == "⭐ Client VIP Platine"

    def test_score_is_exact_sum_of_components(self):
        sales = [make_sale("s1", total=3000, days_ago=90)]

        score = calculate_vip_scores([make_client()], sales, NOW)[0]

        # 0.6 spend + 2 frequency + 0 recency + 1.5 basket
        assert score.score == pytest.approx(4.1)
        assert score.score == pytest.approx(score.components.total)
        assert score.tier == VipTier.STANDARD
        assert score.next_tier_score == 30
        assert score.next_tier_name == "Bronze"
        assert score.last_purchase_days == 90

    def test_aggregates(self):
        sales = [
            make_sale("s1", total=10000, days_ago=20),
            make_sale("s2", total=30000, days_ago=3),
        ]

        score = calculate_vip_scores([make_client()], sales, NOW)[0]

        assert score.total_spent == 40000
        assert score.nb_purchases == 2
        assert score.avg_purchase == 20000
        assert score.last_purchase_days == 3

    def test_clients_without_sales_are_skipped_and_best_first(self):
        clients = [make_client("small"), make_client("none"), make_client("big")]
        sales = [
            make_sale("a", client_id="small", total=1000, days_ago=100),
            make_sale("b", client_id="big", total=200000, days_ago=1),
        ]

        scores = calculate_vip_scores(clients, sales, NOW)

        assert [s.client_id for s in scores] == ["big", "small"]
        assert all(0 <= s.score <= 100 for s in scores)
