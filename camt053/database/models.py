from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, BigInteger, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StatementRecord(Base):
    """
    One decoded Stmt block together with the group header it arrived in.
    """

    __tablename__ = "statements"

    id: Mapped[int] = mapped_column(primary_key=True)
    message_id: Mapped[str] = mapped_column(String(35), index=True)
    message_created_on: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    statement_id: Mapped[str] = mapped_column(String(35), index=True)
    created_on: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    iban: Mapped[str] = mapped_column(String(34), index=True)
    account_currency: Mapped[Optional[str]] = mapped_column(String(3))
    electronic_sequence_number: Mapped[Optional[int]] = mapped_column(BigInteger)
    additional_information: Mapped[Optional[str]] = mapped_column(String(500))

    balances: Mapped[List["BalanceRecord"]] = relationship(
        back_populates="statement", cascade="all, delete-orphan", order_by="BalanceRecord.position"
    )
    entries: Mapped[List["EntryRecord"]] = relationship(
        back_populates="statement", cascade="all, delete-orphan", order_by="EntryRecord.position"
    )

    # Audit trail
    stored_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class BalanceRecord(Base):
    __tablename__ = "balances"

    id: Mapped[int] = mapped_column(primary_key=True)
    statement_pk: Mapped[int] = mapped_column(ForeignKey("statements.id"), index=True)
    position: Mapped[int] = mapped_column(Integer)

    kind: Mapped[str] = mapped_column(String(10))
    code: Mapped[Optional[str]] = mapped_column(String(35))
    amount_minor_units: Mapped[int] = mapped_column(BigInteger)
    currency: Mapped[str] = mapped_column(String(3))
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    statement: Mapped[StatementRecord] = relationship(back_populates="balances")


class EntryRecord(Base):
    __tablename__ = "entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    statement_pk: Mapped[int] = mapped_column(ForeignKey("statements.id"), index=True)
    position: Mapped[int] = mapped_column(Integer)

    amount_minor_units: Mapped[int] = mapped_column(BigInteger)
    currency: Mapped[str] = mapped_column(String(3))
    booking_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    value_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    reference: Mapped[Optional[str]] = mapped_column(String(35))
    status: Mapped[Optional[str]] = mapped_column(String(4))
    account_servicer_reference: Mapped[Optional[str]] = mapped_column(String(35))
    additional_information: Mapped[Optional[str]] = mapped_column(String(500))

    # Transaction level details stored as JSON
    transaction_details: Mapped[Optional[list]] = mapped_column(JSON)

    statement: Mapped[StatementRecord] = relationship(back_populates="entries")
