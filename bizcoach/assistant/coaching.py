"""
Business Coaching

Daily advice for the shop owner:
- A tip of the day (fixed weekly rotation)
- Last 7 days summary (best/worst weekday, top client)
- Opportunities: regulars to win back, big spenders to thank
- Warnings: cash tied up in credit, falling sales, clients drifting away
"""
from datetime import datetime
from typing import List

from bizcoach.assistant.ledger import (
    WEEKDAY_NAMES,
    client_totals,
    credit_outstanding,
    days_since,
    format_cfa,
    group_sales_by_client,
    payments_by_sale,
    revenue_by_weekday,
    sales_between_days,
    sales_in_last_days,
    weekday_index,
)
from bizcoach.assistant.schemas import (
    BusinessCoaching,
    CoachingWarning,
    DailyTip,
    Opportunity,
    OpportunityType,
    Severity,
    WarningType,
    WeeklySummary,
)
from bizcoach.data.records import ClientRecord, PaymentRecord, SaleRecord


# Indexed by day of week, Sunday = 0
DAILY_TIPS = [
    DailyTip(
        emoji="💰",
        title="Optimisez votre trésorerie",
        message="Relancez vos clients avec des crédits de plus de 14 jours. Une bonne trésorerie = un business sain !",
        actionable=True,
    ),
    DailyTip(
        emoji="📞",
        title="Restez connectée",
        message="Envoyez un message à vos 3 meilleurs clients pour les remercier. La fidélisation coûte moins cher que l'acquisition !",
        actionable=True,
    ),
    DailyTip(
        emoji="📊",
        title="Analysez vos données",
        message="Consultez vos statistiques pour identifier vos produits stars et ceux à améliorer.",
        actionable=True,
    ),
    DailyTip(
        emoji="🎯",
        title="Fixez des objectifs",
        message="Un objectif clair = motivation décuplée ! Définissez votre objectif de vente pour aujourd'hui.",
        actionable=True,
    ),
    DailyTip(
        emoji="🌟",
        title="Valorisez vos clients",
        message="Les clients satisfaits deviennent vos meilleurs ambassadeurs. Demandez-leur de parler de vous !",
        actionable=False,
    ),
    DailyTip(
        emoji="💪",
        title="Persévérance paye",
        message="Chaque grande entreprise a commencé petit. Continuez à avancer, les résultats suivront !",
        actionable=False,
    ),
    DailyTip(
        emoji="🎁",
        title="Surprenez vos clients",
        message="Un petit geste (cadeau, réduction surprise) peut transformer un client en fan !",
        actionable=True,
    ),
]

OPPORTUNITY_PRIORITIES = {
    OpportunityType.WIN_BACK: 85,
    OpportunityType.THANK_YOU: 70,
}

SEVERITY_RANK = {
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}

MAX_OPPORTUNITIES = 5
THANK_YOU_MIN_SPEND = 100000
THANK_YOU_MAX_CLIENTS = 3


# =============================================================================
# Tip & summary
# =============================================================================

def daily_tip(now: datetime) -> DailyTip:
    return DAILY_TIPS[weekday_index(now) % len(DAILY_TIPS)]


def weekly_summary(
    clients: List[ClientRecord], sales: List[SaleRecord], now: datetime
) -> WeeklySummary:
    """Summary of the trailing 7 days."""
    last_week = sales_in_last_days(sales, now, 7)
    if not last_week:
        return WeeklySummary()

    ranked_days = sorted(
        revenue_by_weekday(last_week).items(), key=lambda kv: (-kv[1], kv[0])
    )

    totals = client_totals(clients, group_sales_by_client(last_week))
    top_client = None
    if totals:
        best_client, best_total = max(totals, key=lambda ct: ct[1])
        if best_total > 0:
            top_client = best_client.full_name

    return WeeklySummary(
        best_day=WEEKDAY_NAMES[ranked_days[0][0]],
        worst_day=WEEKDAY_NAMES[ranked_days[-1][0]],
        top_client=top_client,
        week_total=sum(s.total for s in last_week),
    )


# =============================================================================
# Opportunities
# =============================================================================

def find_opportunities(
    clients: List[ClientRecord], sales: List[SaleRecord], now: datetime
) -> List[Opportunity]:
    sales_by_client = group_sales_by_client(sales)
    opportunities: List[Opportunity] = []

    # Regulars who stopped coming
    for client in clients:
        client_sales = sales_by_client.get(client.id, [])
        if len(client_sales) < 3:
            continue
        idle_days = days_since(max(s.date for s in client_sales), now)
        if 30 <= idle_days <= 60:
            opportunities.append(Opportunity(
                type=OpportunityType.WIN_BACK,
                client_id=client.id,
                client_name=client.full_name,
                message=f"N'a pas acheté depuis {idle_days} jours. Client régulier à reconquérir !",
                priority=OPPORTUNITY_PRIORITIES[OpportunityType.WIN_BACK],
            ))

    # Biggest spenders, one entry each
    big_spenders = sorted(
        (ct for ct in client_totals(clients, sales_by_client) if ct[1] >= THANK_YOU_MIN_SPEND),
        key=lambda ct: ct[1],
        reverse=True,
    )
    thanked = set()
    for client, spent in big_spenders:
        if client.id in thanked:
            continue
        if len(thanked) == THANK_YOU_MAX_CLIENTS:
            break
        thanked.add(client.id)
        opportunities.append(Opportunity(
            type=OpportunityType.THANK_YOU,
            client_id=client.id,
            client_name=client.full_name,
            message=f"Client VIP ({format_cfa(spent)}) - Envoyez un message de remerciement !",
            priority=OPPORTUNITY_PRIORITIES[OpportunityType.THANK_YOU],
        ))

    opportunities.sort(key=lambda o: o.priority, reverse=True)
    return opportunities[:MAX_OPPORTUNITIES]


# =============================================================================
# Warnings
# =============================================================================

def find_warnings(
    sales: List[SaleRecord], payments: List[PaymentRecord], now: datetime
) -> List[CoachingWarning]:
    warnings: List[CoachingWarning] = []

    outstanding = credit_outstanding(sales, payments_by_sale(payments))
    if outstanding > 100000:
        warnings.append(CoachingWarning(
            type=WarningType.CASH_FLOW,
            message=f"Crédits élevés : {format_cfa(outstanding)}. Relancez activement !",
            severity=Severity.HIGH,
        ))
    elif outstanding > 50000:
        warnings.append(CoachingWarning(
            type=WarningType.CASH_FLOW,
            message=f"Surveillez vos crédits : {format_cfa(outstanding)} en attente.",
            severity=Severity.MEDIUM,
        ))

    recent = sales_in_last_days(sales, now, 30)
    previous = sales_between_days(sales, now, 30, 60)
    recent_total = sum(s.total for s in recent)
    previous_total = sum(s.total for s in previous)

    if previous_total > 0 and recent_total < previous_total * 0.7:
        drop = round((1 - recent_total / previous_total) * 100)
        warnings.append(CoachingWarning(
            type=WarningType.LOW_SALES,
            message=f"Baisse de {drop}% vs le mois dernier. Relancez vos clients !",
            severity=Severity.HIGH,
        ))

    lost = {s.client_id for s in previous} - {s.client_id for s in recent}
    if len(lost) >= 3:
        warnings.append(CoachingWarning(
            type=WarningType.CLIENT_LOSS,
            message=f"{len(lost)} clients réguliers n'ont pas acheté ce mois-ci. Contactez-les !",
            severity=Severity.MEDIUM,
        ))

    return sorted(warnings, key=lambda w: SEVERITY_RANK[w.severity], reverse=True)


def build_business_coaching(
    clients: List[ClientRecord],
    sales: List[SaleRecord],
    payments: List[PaymentRecord],
    now: datetime,
) -> BusinessCoaching:
    return BusinessCoaching(
        daily_tip=daily_tip(now),
        weekly_summary=weekly_summary(clients, sales, now),
        opportunities=find_opportunities(clients, sales, now),
        warnings=find_warnings(sales, payments, now),
    )
