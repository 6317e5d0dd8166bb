"""Payment reliability of a single client."""
from typing import List

from bizcoach.assistant.ledger import is_fully_paid, payments_by_sale
from bizcoach.assistant.schemas import ClientBehavior, ClientReliability
from bizcoach.data.records import PaymentRecord, SaleRecord


MIN_SALES_FOR_ANALYSIS = 3

RELIABILITY_MESSAGES = {
    ClientReliability.EXCELLENT: "⭐ Client très fiable ! Toujours paye ses crédits.",
    ClientReliability.GOOD: "✓ Bon client. Paye régulièrement.",
    ClientReliability.AVERAGE: "⚠️ Client moyen. Surveiller les paiements.",
    ClientReliability.POOR: "🔴 Historique de paiement faible. Prudence recommandée.",
    ClientReliability.UNKNOWN: "Pas assez d'historique pour analyser ce client.",
}


def reliability_for(payment_ratio: float) -> ClientReliability:
    if payment_ratio >= 0.9:
        return ClientReliability.EXCELLENT
    if payment_ratio >= 0.7:
        return ClientReliability.GOOD
    if payment_ratio >= 0.5:
        return ClientReliability.AVERAGE
    return ClientReliability.POOR


def analyze_client_behavior(
    client_id: str,
    sales: List[SaleRecord],
    payments: List[PaymentRecord],
) -> ClientBehavior:
    """
    Classify how reliably a client settles their purchases.

    A sale counts as paid once its outstanding balance reaches zero, whether
    at the till or through later payments.
    """
    client_sales = [s for s in sales if s.client_id == client_id]

    if len(client_sales) < MIN_SALES_FOR_ANALYSIS:
        return ClientBehavior(
            client_id=client_id,
            reliability=ClientReliability.UNKNOWN,
            message=RELIABILITY_MESSAGES[ClientReliability.UNKNOWN],
            nb_sales=len(client_sales),
        )

    paid_later = payments_by_sale(payments)
    nb_paid = sum(1 for s in client_sales if is_fully_paid(s, paid_later))
    nb_credits = sum(1 for s in client_sales if s.is_credit)
    ratio = nb_paid / len(client_sales)
    reliability = reliability_for(ratio)

    return ClientBehavior(
        client_id=client_id,
        reliability=reliability,
        message=RELIABILITY_MESSAGES[reliability],
        payment_rate=round(ratio * 100),
        nb_sales=len(client_sales),
        nb_credits=nb_credits,
        nb_paid=nb_paid,
    )
