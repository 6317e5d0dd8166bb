"""
Record snapshots consumed by the assistant engine.

These are the read-only shapes every DataGateway produces. They carry no
behaviour beyond small derived properties; the store owns the canonical rows.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class SaleStatus(str, Enum):
    """Payment status of a sale."""
    PAID = "Paid"
    CREDIT = "Credit"      # Nothing paid yet
    PARTIAL = "Partial"    # Some but not all paid


class PaymentMethod(str, Enum):
    """How a payment was settled."""
    CASH = "cash"
    MOBILE_MONEY = "mobile_money"
    TRANSFER = "transfer"
    OTHER = "other"


CREDIT_STATUSES = frozenset({SaleStatus.CREDIT, SaleStatus.PARTIAL})


@dataclass(frozen=True)
class ClientRecord:
    id: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    client_type: Optional[str] = None  # "loyal" | "new" | "prospect" (free-form)
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def has_phone(self) -> bool:
        return bool(self.phone and self.phone.strip())


@dataclass(frozen=True)
class SaleItem:
    name: str
    quantity: float
    unit_price: float


@dataclass(frozen=True)
class SaleRecord:
    id: str
    client_id: str
    total: float
    status: SaleStatus
    date: datetime
    amount_paid: float = 0.0  # Paid at sale time
    items: List[SaleItem] = field(default_factory=list)

    @property
    def is_credit(self) -> bool:
        return self.status in CREDIT_STATUSES


@dataclass(frozen=True)
class PaymentRecord:
    id: str
    sale_id: str
    amount: float
    date: datetime
    method: PaymentMethod = PaymentMethod.CASH


@dataclass
class ReminderRecord:
    """
    Follow-up tied to one overdue sale.

    `id` is None until the store assigns one in create_reminder().
    """
    client_id: str
    sale_id: str
    message: str
    due_date: datetime
    resolved: bool = False
    created_at: Optional[datetime] = None
    id: Optional[str] = None
