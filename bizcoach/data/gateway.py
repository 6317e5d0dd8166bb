"""
Data access gateway.

The assistant engine never talks to storage directly. It depends on the
DataGateway interface below; SqlAlchemyGateway is the adapter over the local
SQLite store, and tests substitute a mock.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bizcoach.data.base import generate_id
from bizcoach.data.models import Client, Sale, Payment, Reminder
from bizcoach.data.records import (
    ClientRecord,
    SaleRecord,
    SaleItem,
    SaleStatus,
    PaymentRecord,
    PaymentMethod,
    ReminderRecord,
)


class DataGateway(ABC):
    """Read snapshots of shop records, plus the single reminder write."""

    @abstractmethod
    async def list_clients(self) -> List[ClientRecord]:
        ...

    @abstractmethod
    async def list_sales(self) -> List[SaleRecord]:
        ...

    @abstractmethod
    async def list_payments(self) -> List[PaymentRecord]:
        ...

    @abstractmethod
    async def get_client(self, client_id: str) -> Optional[ClientRecord]:
        ...

    @abstractmethod
    async def list_reminders(self) -> List[ReminderRecord]:
        ...

    @abstractmethod
    async def create_reminder(self, reminder: ReminderRecord) -> str:
        """Persist a reminder and return its identifier."""
        ...


class SqlAlchemyGateway(DataGateway):
    """DataGateway backed by an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_clients(self) -> List[ClientRecord]:
        result = await self.db.execute(select(Client).order_by(Client.created_at))
        return [_client_record(c) for c in result.scalars().all()]

    async def list_sales(self) -> List[SaleRecord]:
        result = await self.db.execute(select(Sale).order_by(Sale.date))
        return [_sale_record(s) for s in result.scalars().all()]

    async def list_payments(self) -> List[PaymentRecord]:
        result = await self.db.execute(select(Payment).order_by(Payment.date))
        return [
            PaymentRecord(
                id=p.id,
                sale_id=p.sale_id,
                amount=float(p.amount),
                date=p.date,
                method=PaymentMethod(p.method),
            )
            for p in result.scalars().all()
        ]

    async def get_client(self, client_id: str) -> Optional[ClientRecord]:
        result = await self.db.execute(select(Client).where(Client.id == client_id))
        client = result.scalar_one_or_none()
        return _client_record(client) if client else None

    async def list_reminders(self) -> List[ReminderRecord]:
        result = await self.db.execute(select(Reminder).order_by(Reminder.due_date))
        return [
            ReminderRecord(
                id=r.id,
                client_id=r.client_id,
                sale_id=r.sale_id,
                message=r.message,
                due_date=r.due_date,
                resolved=bool(r.resolved),
                created_at=r.created_at,
            )
            for r in result.scalars().all()
        ]

    async def create_reminder(self, reminder: ReminderRecord) -> str:
        reminder_id = reminder.id or generate_id("rem")
        row = Reminder(
            id=reminder_id,
            client_id=reminder.client_id,
            sale_id=reminder.sale_id,
            message=reminder.message,
            due_date=reminder.due_date,
            resolved=reminder.resolved,
        )
        if reminder.created_at is not None:
            row.created_at = reminder.created_at
        try:
            self.db.add(row)
            await self.db.commit()
        except Exception:
            # Leave the session usable for the next write
            await self.db.rollback()
            raise
        return reminder_id


def _client_record(client: Client) -> ClientRecord:
    return ClientRecord(
        id=client.id,
        first_name=client.first_name,
        last_name=client.last_name or "",
        phone=client.phone,
        client_type=client.client_type,
        notes=client.notes,
        created_at=client.created_at,
    )


def _sale_record(sale: Sale) -> SaleRecord:
    items = [
        SaleItem(
            name=item.get("name", ""),
            quantity=float(item.get("quantity", 0)),
            unit_price=float(item.get("unit_price", 0)),
        )
        for item in (sale.items or [])
    ]
    return SaleRecord(
        id=sale.id,
        client_id=sale.client_id,
        total=float(sale.total),
        amount_paid=float(sale.amount_paid or 0),
        status=SaleStatus(sale.status),
        date=sale.date,
        items=items,
    )
