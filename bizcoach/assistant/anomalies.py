"""
Anomaly Detection

Checks a sale before it is recorded:
- Unusual amount: more than 3 standard deviations above the shop's mean sale
- High credit for a client with little history
- Probable duplicate of a sale entered moments ago
"""
from datetime import datetime
from statistics import mean, pstdev
from typing import List, Optional

from bizcoach.assistant.ledger import format_cfa
from bizcoach.assistant.schemas import AnomalyFlag, AnomalyKind, ProposedSale, Severity
from bizcoach.data.records import CREDIT_STATUSES, ClientRecord, SaleRecord


# Fewer historical sales than this and the amount check stays silent
MIN_SALES_FOR_AMOUNT_CHECK = 5
NEW_CLIENT_MAX_SALES = 3
HIGH_CREDIT_THRESHOLD = 20000


def check_unusual_amount(proposed: ProposedSale, history: List[SaleRecord]) -> Optional[AnomalyFlag]:
    if len(history) < MIN_SALES_FOR_AMOUNT_CHECK:
        return None

    amounts = [s.total for s in history]
    average = mean(amounts)
    spread = pstdev(amounts, average)

    if proposed.total > average + 3 * spread:
        return AnomalyFlag(
            kind=AnomalyKind.UNUSUAL_AMOUNT,
            severity=Severity.HIGH,
            message=(
                f"Cette vente de {format_cfa(proposed.total)} est bien au-dessus "
                f"de votre moyenne ({format_cfa(average)})."
            ),
            data={"amount": proposed.total, "mean": average, "stddev": spread},
        )
    return None


def check_high_credit_new_client(
    proposed: ProposedSale,
    history: List[SaleRecord],
    client: Optional[ClientRecord],
) -> Optional[AnomalyFlag]:
    """Only applies to a client the store knows about."""
    if client is None:
        return None

    prior_sales = sum(1 for s in history if s.client_id == client.id)
    if (
        prior_sales < NEW_CLIENT_MAX_SALES
        and proposed.status in CREDIT_STATUSES
        and proposed.total > HIGH_CREDIT_THRESHOLD
    ):
        return AnomalyFlag(
            kind=AnomalyKind.HIGH_CREDIT,
            severity=Severity.MEDIUM,
            message=(
                f"Attention : Crédit élevé ({format_cfa(proposed.total)}) "
                f"pour un client avec peu d'historique."
            ),
            data={"nb_sales": prior_sales},
        )
    return None


def check_duplicate(
    proposed: ProposedSale,
    history: List[SaleRecord],
    now: datetime,
    window_seconds: int = 60,
) -> Optional[AnomalyFlag]:
    recent = [
        s for s in history
        if s.client_id == proposed.client_id
        and 0 <= (now - s.date).total_seconds() < window_seconds
    ]
    if not recent:
        return None

    return AnomalyFlag(
        kind=AnomalyKind.DUPLICATE,
        severity=Severity.HIGH,
        message=(
            "Une vente similaire pour ce client a été enregistrée il y a moins "
            "d'une minute. S'agit-il d'un doublon ?"
        ),
        data={"recent_sale_ids": [s.id for s in recent]},
    )


def detect_anomalies(
    proposed: ProposedSale,
    history: List[SaleRecord],
    client: Optional[ClientRecord],
    now: datetime,
    duplicate_window_seconds: int = 60,
) -> List[AnomalyFlag]:
    """
    Run every check against the proposed sale.

    Returns:
        Flags in check order: unusual amount, high credit, duplicate.
    """
    candidates = [
        check_unusual_amount(proposed, history),
        check_high_credit_new_client(proposed, history, client),
        check_duplicate(proposed, history, now, duplicate_window_seconds),
    ]
    return [flag for flag in candidates if flag is not None]
