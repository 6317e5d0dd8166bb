# Data Module
# Record snapshots and the gateway the assistant reads them through.

from .records import (
    ClientRecord,
    SaleRecord,
    SaleItem,
    SaleStatus,
    PaymentRecord,
    PaymentMethod,
    ReminderRecord,
    CREDIT_STATUSES,
)
from .gateway import DataGateway, SqlAlchemyGateway

__all__ = [
    "ClientRecord",
    "SaleRecord",
    "SaleItem",
    "SaleStatus",
    "PaymentRecord",
    "PaymentMethod",
    "ReminderRecord",
    "CREDIT_STATUSES",
    "DataGateway",
    "SqlAlchemyGateway",
]
