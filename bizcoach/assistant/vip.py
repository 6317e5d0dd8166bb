"""
VIP Classification

Loyalty score out of 100 per client, from four capped criteria:
- spend (40), frequency (30), recency (20), average basket (10)

The score maps to a tier with fixed benefits and a target for the next tier.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from bizcoach.assistant.ledger import days_since, group_sales_by_client
from bizcoach.assistant.rules import tiered_points
from bizcoach.assistant.schemas import VipComponents, VipScore, VipTier
from bizcoach.data.records import ClientRecord, SaleRecord


# (threshold, points), highest threshold first
SPEND_TIERS = [(500000, 40), (300000, 30), (150000, 20), (50000, 10)]
FREQUENCY_TIERS = [(50, 30), (30, 25), (15, 20), (8, 15)]
BASKET_TIERS = [(50000, 10), (30000, 8), (15000, 6), (8000, 4)]

# (max days since last purchase, points)
RECENCY_TIERS = [(7, 20), (14, 15), (30, 10), (60, 5)]


@dataclass(frozen=True)
class TierProfile:
    min_score: int
    benefits: List[str]
    next_tier_score: Optional[int]
    next_tier_name: Optional[str]


VIP_TIERS = {
    VipTier.PLATINE: TierProfile(
        min_score=85,
        benefits=[
            "⭐ Client VIP Platine",
            "🎁 Priorité absolue",
            "💎 Offres exclusives",
            "🎉 Cadeaux spéciaux",
            "📱 Contact privilégié",
        ],
        next_tier_score=None,
        next_tier_name=None,
    ),
    VipTier.OR: TierProfile(
        min_score=70,
        benefits=[
            "🥇 Client VIP Or",
            "🎁 Remises exclusives",
            "⚡ Service prioritaire",
            "🎊 Cadeaux de fidélité",
        ],
        next_tier_score=85,
        next_tier_name="Platine",
    ),
    VipTier.ARGENT: TierProfile(
        min_score=50,
        benefits=[
            "🥈 Client VIP Argent",
            "💝 Avantages fidélité",
            "📢 Infos en avant-première",
        ],
        next_tier_score=70,
        next_tier_name="Or",
    ),
    VipTier.BRONZE: TierProfile(
        min_score=30,
        benefits=["🥉 Client Fidèle", "✨ Petites attentions"],
        next_tier_score=50,
        next_tier_name="Argent",
    ),
    VipTier.STANDARD: TierProfile(
        min_score=0,
        benefits=["👤 Client Standard", "🌟 Bienvenue !"],
        next_tier_score=30,
        next_tier_name="Bronze",
    ),
}


def spend_points(total_spent: float) -> float:
    return tiered_points(total_spent, SPEND_TIERS, lambda v: min(10, v / 5000))


def frequency_points(nb_purchases: int) -> float:
    return tiered_points(nb_purchases, FREQUENCY_TIERS, lambda v: min(15, v * 2))


def recency_points(days: int) -> float:
    for max_days, points in RECENCY_TIERS:
        if days <= max_days:
            return points
    return 0


def basket_points(avg_purchase: float) -> float:
    return tiered_points(avg_purchase, BASKET_TIERS, lambda v: min(4, v / 2000))


def tier_for(score: float) -> VipTier:
    # VIP_TIERS is declared highest tier first
    for tier, profile in VIP_TIERS.items():
        if score >= profile.min_score:
            return tier
    return VipTier.STANDARD


def score_vip_client(client: ClientRecord, sales: List[SaleRecord], now: datetime) -> VipScore:
    """Score one client; `sales` must be non-empty."""
    total_spent = sum(s.total for s in sales)
    nb_purchases = len(sales)
    avg_purchase = total_spent / nb_purchases
    last_purchase_days = days_since(max(s.date for s in sales), now)

    components = VipComponents(
        spend=spend_points(total_spent),
        frequency=frequency_points(nb_purchases),
        recency=recency_points(last_purchase_days),
        basket=basket_points(avg_purchase),
    )
    score = round(components.total, 2)
    tier = tier_for(score)
    profile = VIP_TIERS[tier]

    return VipScore(
        client_id=client.id,
        client_name=client.full_name,
        tier=tier,
        score=score,
        components=components,
        total_spent=total_spent,
        nb_purchases=nb_purchases,
        avg_purchase=avg_purchase,
        last_purchase_days=last_purchase_days,
        benefits=list(profile.benefits),
        next_tier_score=profile.next_tier_score,
        next_tier_name=profile.next_tier_name,
    )


def calculate_vip_scores(
    clients: List[ClientRecord],
    sales: List[SaleRecord],
    now: datetime,
) -> List[VipScore]:
    """Score every client with at least one sale, best first."""
    sales_by_client = group_sales_by_client(sales)
    scores = [
        score_vip_client(client, sales_by_client[client.id], now)
        for client in clients
        if sales_by_client.get(client.id)
    ]
    return sorted(scores, key=lambda s: s.score, reverse=True)
