"""
Credit Risk Scoring

Scores every client that currently owes money:
- Start at 50
- Five independent adjustments (payment history, tenure, exposure,
  delinquency, purchase regularity), each adding a reason
- Clamp to 0-100 and map to a risk level

Higher score = riskier client.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from statistics import mean, pvariance
from typing import Dict, List, Optional

from bizcoach.assistant.ledger import (
    age_in_days,
    credit_outstanding,
    days_since,
    group_sales_by_client,
    is_fully_paid,
    outstanding_balance,
    payments_by_sale,
)
from bizcoach.assistant.rules import RuleOutcome, ScoringRule, apply_rules
from bizcoach.assistant.schemas import RiskLevel, RiskScore
from bizcoach.data.records import ClientRecord, PaymentRecord, SaleRecord

logger = logging.getLogger(__name__)


BASE_SCORE = 50

# Payment history needs this many sales before it counts
MIN_HISTORY_SALES = 3

RISK_RECOMMENDATIONS = {
    RiskLevel.LOW: "Client fiable. Vous pouvez continuer à accorder des crédits.",
    RiskLevel.MEDIUM: "Prudence recommandée. Surveillez les paiements de près.",
    RiskLevel.HIGH: "Risque élevé. Privilégiez les paiements comptant ou réduisez le crédit.",
}


@dataclass
class ClientCreditContext:
    """Everything the risk rules look at for one client."""
    client: ClientRecord
    sales: List[SaleRecord]
    paid_later: Dict[str, float]
    outstanding: float
    now: datetime
    delinquency_days: int = 30
    min_history_sales: int = MIN_HISTORY_SALES


# =============================================================================
# Rules
# =============================================================================

def payment_history_rule(ctx: ClientCreditContext) -> Optional[RuleOutcome]:
    if len(ctx.sales) < ctx.min_history_sales:
        return None

    fully_paid = sum(1 for s in ctx.sales if is_fully_paid(s, ctx.paid_later))
    ratio = fully_paid / len(ctx.sales)

    if ratio >= 0.9:
        return RuleOutcome(-20, "✅ Excellent historique de paiement")
    if ratio >= 0.7:
        return RuleOutcome(-10, "✓ Bon historique de paiement")
    if ratio < 0.5:
        return RuleOutcome(25, "⚠️ Historique de paiement faible")
    return None


def tenure_rule(ctx: ClientCreditContext) -> Optional[RuleOutcome]:
    if not ctx.sales:
        return None

    first_sale = min(ctx.sales, key=lambda s: s.date)
    tenure_days = days_since(first_sale.date, ctx.now)

    if tenure_days > 180:
        return RuleOutcome(-15, "✅ Client fidèle (>6 mois)")
    if tenure_days < 30:
        return RuleOutcome(10, "⚠️ Nouveau client (<1 mois)")
    return None


def exposure_rule(ctx: ClientCreditContext) -> Optional[RuleOutcome]:
    if not ctx.sales:
        return None

    average_sale = mean(s.total for s in ctx.sales)
    if average_sale <= 0:
        return None

    if ctx.outstanding > average_sale * 3:
        return RuleOutcome(20, "⚠️ Crédit élevé par rapport à la moyenne")
    if ctx.outstanding < average_sale:
        return RuleOutcome(-10, "✓ Crédit raisonnable")
    return None


def delinquency_rule(ctx: ClientCreditContext) -> Optional[RuleOutcome]:
    late = [
        s for s in ctx.sales
        if s.is_credit
        and outstanding_balance(s, ctx.paid_later) > 0
        and days_since(s.date, ctx.now) > ctx.delinquency_days
    ]

    if len(late) > 3:
        return RuleOutcome(25, f"🔴 {len(late)} paiements en retard")
    if late:
        return RuleOutcome(10, f"⚠️ {len(late)} paiement(s) en retard")
    return None


def regularity_rule(ctx: ClientCreditContext) -> Optional[RuleOutcome]:
    if len(ctx.sales) < 5:
        return None

    dates = sorted(s.date for s in ctx.sales)
    # Intervals in days
    intervals = [
        age_in_days(earlier, later)
        for earlier, later in zip(dates, dates[1:])
    ]
    average_interval = mean(intervals)

    if pvariance(intervals, average_interval) < average_interval * 0.3:
        return RuleOutcome(-10, "✅ Achats réguliers")
    return None


RISK_RULES = [
    ScoringRule("payment_history", payment_history_rule),
    ScoringRule("tenure", tenure_rule),
    ScoringRule("exposure", exposure_rule),
    ScoringRule("delinquency", delinquency_rule),
    ScoringRule("regularity", regularity_rule),
]


# =============================================================================
# Scoring
# =============================================================================

def risk_level_for(score: float) -> RiskLevel:
    if score < 35:
        return RiskLevel.LOW
    if score < 65:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def score_client(ctx: ClientCreditContext) -> RiskScore:
    score, reasons = apply_rules(BASE_SCORE, RISK_RULES, ctx)
    level = risk_level_for(score)

    return RiskScore(
        client_id=ctx.client.id,
        client_name=ctx.client.full_name,
        score=int(score),
        risk_level=level,
        reasons=reasons,
        recommendation=RISK_RECOMMENDATIONS[level],
    )


def calculate_credit_risk_scores(
    clients: List[ClientRecord],
    sales: List[SaleRecord],
    payments: List[PaymentRecord],
    now: datetime,
    delinquency_days: int = 30,
) -> List[RiskScore]:
    """
    Score every client with a non-zero outstanding credit balance.

    Returns:
        Scores sorted riskiest first; equal scores keep client order.
    """
    paid_later = payments_by_sale(payments)
    sales_by_client = group_sales_by_client(sales)

    scores: List[RiskScore] = []
    for client in clients:
        client_sales = sales_by_client.get(client.id, [])
        outstanding = credit_outstanding(client_sales, paid_later)
        if outstanding <= 0:
            continue

        ctx = ClientCreditContext(
            client=client,
            sales=client_sales,
            paid_later=paid_later,
            outstanding=outstanding,
            now=now,
            delinquency_days=delinquency_days,
        )
        scores.append(score_client(ctx))

    logger.debug(f"Scored credit risk for {len(scores)} of {len(clients)} clients")
    return sorted(scores, key=lambda s: s.score, reverse=True)
