"""
Reminder Planning

Two jobs:
1. Suggest who to call about unpaid credit, when, and with what message
2. Scan for overdue credit sales and persist one reminder per sale

Messages are drafted in French for WhatsApp/SMS, in four tone bands that get
firmer the longer the credit has been outstanding.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Set

from bizcoach.assistant.ledger import (
    age_in_days,
    credit_outstanding,
    days_since,
    format_amount,
    format_cfa,
    group_sales_by_client,
    outstanding_balance,
    payments_by_sale,
    unpaid_credit_sales,
)
from bizcoach.assistant.schemas import (
    ReminderPriority,
    ReminderScanResult,
    ReminderSuggestion,
)
from bizcoach.data.gateway import DataGateway
from bizcoach.data.records import (
    ClientRecord,
    PaymentRecord,
    ReminderRecord,
    SaleRecord,
)

logger = logging.getLogger(__name__)


PRIORITY_ORDER = {
    ReminderPriority.HIGH: 3,
    ReminderPriority.MEDIUM: 2,
    ReminderPriority.LOW: 1,
}


# =============================================================================
# Suggestion helpers
# =============================================================================

def priority_for(days_elapsed: int, amount_due: float) -> ReminderPriority:
    if days_elapsed > 30 or amount_due > 50000:
        return ReminderPriority.HIGH
    if days_elapsed > 14 or amount_due > 20000:
        return ReminderPriority.MEDIUM
    return ReminderPriority.LOW


def best_time_to_contact(hour: int) -> str:
    """Next sensible calling window given the current hour (0-23)."""
    if hour < 9:
        return "Ce matin (9h-12h)"
    if hour < 14:
        return "Cet après-midi (14h-17h)"
    if hour < 18:
        return "En fin de journée (17h-19h)"
    return "Demain matin (9h-12h)"


def draft_reminder_message(first_name: str, amount: float, days_elapsed: int) -> str:
    """
    Draft a friendly collection message.

    Args:
        first_name: Client first name used in the greeting
        amount: Outstanding amount in CFA
        days_elapsed: Days since the oldest unpaid sale

    Returns:
        Message body ready to paste into a chat app
    """
    amount_text = format_amount(amount)

    if days_elapsed < 7:
        return (
            f"Bonjour {first_name} ! 😊\n\n"
            f"J'espère que vous allez bien. Je me permets de vous rappeler votre crédit de {amount_text} CFA.\n\n"
            f"Merci beaucoup ! 🙏"
        )
    if days_elapsed < 14:
        return (
            f"Bonjour {first_name},\n\n"
            f"Comment allez-vous ? Je vous contacte pour votre crédit de {amount_text} CFA.\n\n"
            f"Pouvez-vous me faire un paiement bientôt ?\n\n"
            f"Merci infiniment ! 💚"
        )
    if days_elapsed < 30:
        return (
            f"Bonjour {first_name},\n\n"
            f"J'espère que tout va bien de votre côté. Votre crédit de {amount_text} CFA est en attente depuis un moment.\n\n"
            f"Pouvons-nous arranger un paiement cette semaine ?\n\n"
            f"Je compte sur vous ! 🙏"
        )
    return (
        f"Bonjour {first_name},\n\n"
        f"J'espère que vous allez bien. Je me permets de vous relancer concernant votre crédit de {amount_text} CFA.\n\n"
        f"C'est important pour moi. Pouvons-nous en discuter ?\n\n"
        f"Merci de votre compréhension. 🙏"
    )


# =============================================================================
# Suggestions
# =============================================================================

def build_reminder_suggestions(
    clients: List[ClientRecord],
    sales: List[SaleRecord],
    payments: List[PaymentRecord],
    now: datetime,
) -> List[ReminderSuggestion]:
    """
    Suggest a collection contact for every reachable client who owes money.

    Clients without a phone number are skipped.

    Returns:
        Suggestions ordered by priority, then amount due, both descending.
    """
    paid_later = payments_by_sale(payments)
    sales_by_client = group_sales_by_client(sales)
    contact_window = best_time_to_contact(now.hour)

    suggestions: List[ReminderSuggestion] = []
    for client in clients:
        if not client.has_phone:
            continue

        client_sales = sales_by_client.get(client.id, [])
        amount_due = credit_outstanding(client_sales, paid_later)
        if amount_due <= 0:
            continue

        unpaid = unpaid_credit_sales(client_sales, paid_later)
        oldest = min(unpaid, key=lambda s: s.date)
        days_elapsed = days_since(oldest.date, now)

        suggestions.append(ReminderSuggestion(
            client_id=client.id,
            client_name=client.full_name,
            phone=client.phone.strip(),
            amount_due=amount_due,
            priority=priority_for(days_elapsed, amount_due),
            best_time_to_contact=contact_window,
            message=draft_reminder_message(client.first_name, amount_due, days_elapsed),
            days_since_oldest_unpaid=days_elapsed,
        ))

    return sorted(
        suggestions,
        key=lambda r: (PRIORITY_ORDER[r.priority], r.amount_due),
        reverse=True,
    )


# =============================================================================
# Overdue scan
# =============================================================================

def find_overdue_credit_sales(
    sales: List[SaleRecord],
    paid_later: Dict[str, float],
    now: datetime,
    overdue_days: int = 7,
) -> List[SaleRecord]:
    """Credit/partial sales still owing money and older than `overdue_days`."""
    return [
        s for s in unpaid_credit_sales(sales, paid_later)
        if age_in_days(s.date, now) > overdue_days
    ]


async def create_overdue_reminders(
    gateway: DataGateway,
    now: datetime,
    overdue_days: int = 7,
    due_in_days: int = 3,
) -> ReminderScanResult:
    """
    Persist a reminder for each overdue credit sale that has none open.

    A sale already carrying an unresolved reminder is left alone, so running
    the scan twice creates nothing the second time. A failed write is logged
    and the scan moves on to the next sale.
    """
    clients = await gateway.list_clients()
    sales = await gateway.list_sales()
    payments = await gateway.list_payments()
    existing = await gateway.list_reminders()

    clients_by_id = {c.id: c for c in clients}
    paid_later = payments_by_sale(payments)
    covered: Set[str] = {r.sale_id for r in existing if not r.resolved}

    created_ids: List[str] = []
    skipped = 0
    failed = 0

    for sale in find_overdue_credit_sales(sales, paid_later, now, overdue_days):
        if sale.id in covered:
            skipped += 1
            continue

        client = clients_by_id.get(sale.client_id)
        if client is None:
            logger.warning(f"Skipping reminder for sale {sale.id}: unknown client {sale.client_id}")
            continue

        remaining = outstanding_balance(sale, paid_later)
        reminder = ReminderRecord(
            client_id=client.id,
            sale_id=sale.id,
            message=f"Crédit en retard de {format_cfa(remaining)} pour {client.full_name}",
            due_date=now + timedelta(days=due_in_days),
            resolved=False,
            created_at=now,
        )

        try:
            reminder_id = await gateway.create_reminder(reminder)
        except Exception as e:
            failed += 1
            logger.error(f"Failed to create reminder for sale {sale.id}: {e}")
            continue

        covered.add(sale.id)
        created_ids.append(reminder_id)
        logger.info(f"Created reminder {reminder_id} for sale {sale.id} ({client.full_name})")

    return ReminderScanResult(
        created=len(created_ids),
        skipped_existing=skipped,
        failed=failed,
        reminder_ids=created_ids,
    )
