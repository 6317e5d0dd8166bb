"""
Business Insights - dashboard cards computed from the sales ledger.

Each insight has a gate and a fixed priority. Gates are evaluated
independently; the result is sorted by priority, highest first.
"""
from datetime import datetime
from typing import List, Optional

from bizcoach.assistant.ledger import (
    WEEKDAY_NAMES,
    client_totals,
    format_amount,
    format_cfa,
    group_sales_by_client,
    month_start,
    outstanding_balance,
    payments_by_sale,
    revenue_by_weekday,
    sales_in_month,
)
from bizcoach.assistant.schemas import Insight, InsightCategory, InsightType
from bizcoach.data.records import ClientRecord, PaymentRecord, SaleRecord, SaleStatus


INSIGHT_PRIORITIES = {
    InsightCategory.GROWTH: 95,
    InsightCategory.CREDIT_TOTAL: 90,
    InsightCategory.DECLINE: 85,
    InsightCategory.ACTIVE_CREDITS: 80,
    InsightCategory.MONTHLY_TARGET: 70,
    InsightCategory.CREDIT_SHARE: 65,
    InsightCategory.VIP_CLIENTS: 60,
    InsightCategory.BEST_WEEKDAY: 50,
}

CREDIT_TOTAL_THRESHOLD = 50000
ACTIVE_CREDITS_THRESHOLD = 5
VIP_SPEND_THRESHOLD = 100000


def _insight(
    category: InsightCategory,
    type: InsightType,
    title: str,
    message: str,
    action: Optional[str] = None,
) -> Insight:
    return Insight(
        type=type,
        category=category,
        title=title,
        message=message,
        action=action,
        priority=INSIGHT_PRIORITIES[category],
    )


def generate_business_insights(
    clients: List[ClientRecord],
    sales: List[SaleRecord],
    payments: List[PaymentRecord],
    now: datetime,
    monthly_target: float = 500000,
) -> List[Insight]:
    """
    Compute dashboard insights from the full ledger.

    Args:
        clients: All clients
        sales: All sales
        payments: All later payments
        now: Reference time for "this month"
        monthly_target: Sales target for the calendar month, in CFA

    Returns:
        Triggered insights sorted by priority (descending)
    """
    insights: List[Insight] = []
    paid_later = payments_by_sale(payments)

    credit_sales = [s for s in sales if s.is_credit]
    cash_sales = [s for s in sales if s.status == SaleStatus.PAID]
    active_credits = [s for s in credit_sales if outstanding_balance(s, paid_later) > 0]
    credit_total = sum(outstanding_balance(s, paid_later) for s in credit_sales)

    this_month = sales_in_month(sales, month_start(now))
    last_month = sales_in_month(sales, month_start(now, months_back=1))
    month_total = sum(s.total for s in this_month)
    last_month_total = sum(s.total for s in last_month)

    # Outstanding credit
    if credit_total > CREDIT_TOTAL_THRESHOLD:
        insights.append(_insight(
            InsightCategory.CREDIT_TOTAL,
            InsightType.WARNING,
            "⚠️ Crédits importants",
            f"Vous avez {format_cfa(credit_total)} de crédits. Pensez à relancer "
            f"vos clients pour améliorer votre trésorerie.",
            action="Voir les relances",
        ))

    if len(active_credits) >= ACTIVE_CREDITS_THRESHOLD:
        insights.append(_insight(
            InsightCategory.ACTIVE_CREDITS,
            InsightType.WARNING,
            "📊 Nombreux crédits actifs",
            f"{len(active_credits)} ventes à crédit sont en cours. Utilisez les "
            f"messages WhatsApp automatiques pour gagner du temps.",
            action="Messages automatiques",
        ))

    # Monthly target
    progress = month_total / monthly_target * 100 if monthly_target > 0 else 0
    if month_total > 0 and progress < 30:
        insights.append(_insight(
            InsightCategory.MONTHLY_TARGET,
            InsightType.INFO,
            "🚀 Objectif mensuel",
            f"Vous êtes à {progress:.0f}% de votre objectif. Il reste "
            f"{format_cfa(monthly_target - month_total)} à réaliser.",
            action="Nouvelle vente",
        ))

    # Best weekday
    if len(sales) >= 10:
        by_weekday = revenue_by_weekday(sales)
        best_day, best_total = sorted(by_weekday.items(), key=lambda kv: (-kv[1], kv[0]))[0]
        insights.append(_insight(
            InsightCategory.BEST_WEEKDAY,
            InsightType.SUCCESS,
            "📈 Tendance identifiée",
            f"Votre meilleur jour de vente est le {WEEKDAY_NAMES[best_day]} avec "
            f"{format_amount(best_total)} CFA de ventes cumulées.",
        ))

    # Loyal big spenders
    totals = client_totals(clients, group_sales_by_client(sales))
    vip_count = sum(1 for _, spent in totals if spent > VIP_SPEND_THRESHOLD)
    if vip_count > 0:
        insights.append(_insight(
            InsightCategory.VIP_CLIENTS,
            InsightType.SUCCESS,
            "⭐ Clients fidèles",
            f"Vous avez {vip_count} client(s) VIP ! Pensez à les remercier pour leur fidélité.",
            action="Voir mes VIP",
        ))

    # Credit vs cash mix
    if len(sales) >= 20 and len(credit_sales) > len(cash_sales) * 1.5:
        share = round(len(credit_sales) / len(sales) * 100)
        insights.append(_insight(
            InsightCategory.CREDIT_SHARE,
            InsightType.TIP,
            "💡 Conseil financier",
            f"{share}% de vos ventes sont à crédit. Privilégier le comptant "
            f"améliorerait votre trésorerie.",
        ))

    # Month over month
    if this_month and last_month and last_month_total > 0:
        growth = (month_total - last_month_total) / last_month_total * 100
        if growth > 10:
            insights.append(_insight(
                InsightCategory.GROWTH,
                InsightType.SUCCESS,
                "🎉 Excellente progression",
                f"Vos ventes ont augmenté de {growth:.0f}% ce mois-ci ! Continuez comme ça !",
            ))
        elif growth < -10:
            insights.append(_insight(
                InsightCategory.DECLINE,
                InsightType.WARNING,
                "📉 Baisse d'activité",
                f"Vos ventes ont baissé de {abs(growth):.0f}% ce mois-ci. Pensez à relancer vos clients.",
            ))

    return sorted(insights, key=lambda i: i.priority, reverse=True)
