"""ORM models for the local shop store: clients, sales, payments, reminders."""
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Boolean, Float, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bizcoach.database import Base
from bizcoach.data.base import generate_id


class Client(Base):
    """A shop customer."""

    __tablename__ = "clients"

    id = Column(String, primary_key=True, default=lambda: generate_id("client"))

    # Identity
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False, default="")
    phone = Column(String, nullable=True)

    # Free-form classification: "loyal" | "new" | "prospect"
    client_type = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    sales = relationship("Sale", back_populates="client", cascade="all, delete-orphan")


class Sale(Base):
    """A sale with its line items and payment status."""

    __tablename__ = "sales"

    id = Column(String, primary_key=True, default=lambda: generate_id("sale"))
    client_id = Column(String, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)

    # Line items: [{"name": ..., "quantity": ..., "unit_price": ...}]
    items = Column(JSON, nullable=False, default=list)

    total = Column(Float, nullable=False)
    amount_paid = Column(Float, nullable=False, default=0)  # Paid at sale time
    status = Column(String, nullable=False)  # "Paid" | "Credit" | "Partial"

    date = Column(DateTime, nullable=False, index=True)

    client = relationship("Client", back_populates="sales")
    payments = relationship("Payment", back_populates="sale", cascade="all, delete-orphan")


class Payment(Base):
    """A later settlement recorded against a sale."""

    __tablename__ = "payments"

    id = Column(String, primary_key=True, default=lambda: generate_id("pay"))
    sale_id = Column(String, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)

    amount = Column(Float, nullable=False)
    date = Column(DateTime, nullable=False)
    method = Column(String, nullable=False, default="cash")  # "cash" | "mobile_money" | "transfer" | "other"

    sale = relationship("Sale", back_populates="payments")


class Reminder(Base):
    """Collection follow-up for one overdue sale."""

    __tablename__ = "reminders"

    id = Column(String, primary_key=True, default=lambda: generate_id("rem"))
    client_id = Column(String, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    sale_id = Column(String, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)

    message = Column(Text, nullable=False)
    due_date = Column(DateTime, nullable=False)
    resolved = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
