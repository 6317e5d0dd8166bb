"""
Ledger helpers shared by every assistant module.

Outstanding balances, time windows and currency display live here so the
scorers agree on what "owed", "this month" and "N days ago" mean.
"""
from collections import defaultdict
from datetime import datetime, date
from typing import Dict, Iterable, List, Tuple

from dateutil.relativedelta import relativedelta

from bizcoach.data.records import SaleRecord, SaleStatus, PaymentRecord, ClientRecord


SECONDS_PER_DAY = 24 * 60 * 60

# Indexed by day of week with Sunday = 0
WEEKDAY_NAMES = ["Dimanche", "Lundi", "Mardi", "Mercredi", "Jeudi", "Vendredi", "Samedi"]


# =============================================================================
# Balances
# =============================================================================

def payments_by_sale(payments: Iterable[PaymentRecord]) -> Dict[str, float]:
    """Sum of later payments per sale id."""
    totals: Dict[str, float] = defaultdict(float)
    for payment in payments:
        totals[payment.sale_id] += payment.amount
    return dict(totals)


def outstanding_balance(sale: SaleRecord, paid_later: Dict[str, float]) -> float:
    """total - (paid at sale time + later payments), never negative."""
    if sale.status == SaleStatus.PAID:
        return 0.0
    settled = sale.amount_paid + paid_later.get(sale.id, 0.0)
    return max(0.0, sale.total - settled)


def is_fully_paid(sale: SaleRecord, paid_later: Dict[str, float]) -> bool:
    return outstanding_balance(sale, paid_later) <= 0


def unpaid_credit_sales(
    sales: Iterable[SaleRecord], paid_later: Dict[str, float]
) -> List[SaleRecord]:
    """Credit/partial sales that still carry a balance."""
    return [
        s for s in sales
        if s.is_credit and outstanding_balance(s, paid_later) > 0
    ]


def credit_outstanding(sales: Iterable[SaleRecord], paid_later: Dict[str, float]) -> float:
    """Outstanding credit over credit/partial sales."""
    return sum(outstanding_balance(s, paid_later) for s in sales if s.is_credit)


def group_sales_by_client(sales: Iterable[SaleRecord]) -> Dict[str, List[SaleRecord]]:
    grouped: Dict[str, List[SaleRecord]] = defaultdict(list)
    for sale in sales:
        grouped[sale.client_id].append(sale)
    return dict(grouped)


def client_totals(
    clients: Iterable[ClientRecord], sales_by_client: Dict[str, List[SaleRecord]]
) -> List[Tuple[ClientRecord, float]]:
    """Lifetime spend per client, in client order."""
    return [
        (client, sum(s.total for s in sales_by_client.get(client.id, [])))
        for client in clients
    ]


# =============================================================================
# Time windows
# =============================================================================

def days_since(then: datetime, now: datetime) -> int:
    """Whole days elapsed (floored)."""
    return int((now - then).total_seconds() // SECONDS_PER_DAY)


def age_in_days(then: datetime, now: datetime) -> float:
    return (now - then).total_seconds() / SECONDS_PER_DAY


def month_start(moment: datetime, months_back: int = 0) -> date:
    """First day of the calendar month `months_back` months before `moment`."""
    return moment.date().replace(day=1) - relativedelta(months=months_back)


def in_month(sale: SaleRecord, first_day: date) -> bool:
    return sale.date.year == first_day.year and sale.date.month == first_day.month


def sales_in_month(sales: Iterable[SaleRecord], first_day: date) -> List[SaleRecord]:
    return [s for s in sales if in_month(s, first_day)]


def sales_in_last_days(sales: Iterable[SaleRecord], now: datetime, days: float) -> List[SaleRecord]:
    """Sales aged 0 to `days` days, both ends included."""
    return [s for s in sales if 0 <= age_in_days(s.date, now) <= days]


def sales_between_days(
    sales: Iterable[SaleRecord], now: datetime, newer_than: float, older_than: float
) -> List[SaleRecord]:
    """Sales aged more than `newer_than` and at most `older_than` days."""
    return [s for s in sales if newer_than < age_in_days(s.date, now) <= older_than]


def weekday_index(moment: datetime) -> int:
    """Day of week with Sunday = 0."""
    return moment.isoweekday() % 7


def revenue_by_weekday(sales: Iterable[SaleRecord]) -> Dict[int, float]:
    """Revenue per weekday index, only for weekdays that saw a sale."""
    totals: Dict[int, float] = {}
    for sale in sales:
        day = weekday_index(sale.date)
        totals[day] = totals.get(day, 0.0) + sale.total
    return totals


# =============================================================================
# Display
# =============================================================================

def format_amount(amount: float) -> str:
    """Integer grouping with a narrow no-break space, no decimals (fr-FR style)."""
    return f"{amount:,.0f}".replace(",", "\u202f")


def format_cfa(amount: float) -> str:
    return f"{format_amount(amount)} CFA"
