"""
Sales Forecast - end-of-month projection from the month-to-date run rate.

    daily_average   = current_total / days_elapsed
    estimated_total = current_total + daily_average * days_remaining

The trend compares the two most recent full months with the one before.
"""
import calendar
from datetime import datetime
from typing import List

from bizcoach.assistant.ledger import month_start, sales_in_month
from bizcoach.assistant.schemas import (
    CurrentMonthSales,
    ForecastConfidence,
    ForecastPrediction,
    SalesForecast,
    SalesTrend,
)
from bizcoach.data.records import SaleRecord


RECOMMENDATIONS = {
    "urgent": "🎯 Action urgente : Relancez vos meilleurs clients et proposez des promotions !",
    "momentum": "💪 Excellente dynamique ! Maintenez le cap et pensez à récompenser vos clients fidèles.",
    "last_week": "⚡ Dernière semaine ! Concentrez-vous sur les grosses ventes pour rattraper le retard.",
    "default": "✅ Continuez sur cette lancée ! Pensez à préparer le stock pour les prochains jours.",
}


def forecast_confidence(days_elapsed: int, sales_count: int) -> ForecastConfidence:
    if days_elapsed >= 15 and sales_count >= 10:
        return ForecastConfidence.HIGH
    if days_elapsed >= 7 and sales_count >= 5:
        return ForecastConfidence.MEDIUM
    return ForecastConfidence.LOW


def sales_trend(month_totals: List[float]) -> SalesTrend:
    """
    Trend from the last three full months, most recent first.

    The average of months 1-2 is compared with month 3; an empty month 3
    counts as equal to that average.
    """
    recent_average = (month_totals[0] + month_totals[1]) / 2
    older = month_totals[2] or recent_average

    if recent_average > older * 1.1:
        return SalesTrend.INCREASING
    if recent_average < older * 0.9:
        return SalesTrend.DECREASING
    return SalesTrend.STABLE


def forecast_message(growth: float) -> str:
    if growth > 20:
        return f"🚀 Excellent mois ! Vous êtes en route pour dépasser le mois dernier de {round(growth)}% !"
    if growth > 0:
        return f"📈 Bon mois en perspective ! Vous devriez faire {round(growth)}% de plus que le mois dernier."
    if growth > -10:
        return "📊 Mois stable. Résultat similaire au mois dernier attendu."
    return f"⚠️ Attention, vous êtes {abs(round(growth))}% en dessous du mois dernier. Il faut accélérer !"


def forecast_recommendation(
    trend: SalesTrend,
    growth: float,
    days_remaining: int,
    estimated_total: float,
    last_month_total: float,
) -> str:
    if trend == SalesTrend.DECREASING and growth < -10:
        return RECOMMENDATIONS["urgent"]
    if trend == SalesTrend.INCREASING and growth > 15:
        return RECOMMENDATIONS["momentum"]
    if days_remaining < 7 and estimated_total < last_month_total:
        return RECOMMENDATIONS["last_week"]
    return RECOMMENDATIONS["default"]


def calculate_sales_forecast(sales: List[SaleRecord], now: datetime) -> SalesForecast:
    """Project this month's sales total and compare it with last month."""
    days_in_month = calendar.monthrange(now.year, now.month)[1]
    days_elapsed = now.day
    days_remaining = days_in_month - days_elapsed

    this_month = sales_in_month(sales, month_start(now))
    current_total = sum(s.total for s in this_month)

    daily_average = current_total / days_elapsed if days_elapsed > 0 else 0
    estimated_total = current_total + daily_average * days_remaining

    # Full months before the current one, most recent first
    month_totals = [
        sum(s.total for s in sales_in_month(sales, month_start(now, months_back=i)))
        for i in (1, 2, 3)
    ]
    last_month_total = month_totals[0]

    growth = (
        (estimated_total - last_month_total) / last_month_total * 100
        if last_month_total > 0 else 0
    )
    trend = sales_trend(month_totals)

    return SalesForecast(
        current_month=CurrentMonthSales(
            total=current_total,
            sales_count=len(this_month),
            days_elapsed=days_elapsed,
            days_remaining=days_remaining,
        ),
        prediction=ForecastPrediction(
            daily_average=daily_average,
            estimated_total=estimated_total,
            confidence=forecast_confidence(days_elapsed, len(this_month)),
            growth_vs_last_month=round(growth, 2),
            message=forecast_message(growth),
        ),
        last_month_total=last_month_total,
        trend=trend,
        recommendation=forecast_recommendation(
            trend, growth, days_remaining, estimated_total, last_month_total
        ),
    )
