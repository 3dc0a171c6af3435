import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from camt053.database.models import Base, BalanceRecord, EntryRecord, StatementRecord
from camt053.message import Message
from camt053.models import Balance, Entry, GroupHeader, Statement

logger = logging.getLogger(__name__)


class StatementRepository:
    """
    Repository layer for persisting decoded statements.
    """

    def __init__(self, session: Session):
        self.session = session

    def save_message(self, message: Message) -> List[StatementRecord]:
        """
        Stores every statement of the message with its balances and entries.
        The caller owns the transaction (commit/rollback).
        """
        group_header = message.get_group_header()
        records = [self._to_record(group_header, s) for s in message.get_statements()]
        self.session.add_all(records)
        self.session.flush()  # Ensure IDs are populated
        logger.debug(
            "Stored %d statement(s) of message %s", len(records), group_header.message_id
        )
        return records

    def get_by_statement_id(self, statement_id: str) -> Optional[StatementRecord]:
        stmt = select(StatementRecord).where(StatementRecord.statement_id == statement_id)
        return self.session.execute(stmt).scalars().first()

    def list_by_iban(self, iban: str) -> List[StatementRecord]:
        stmt = (
            select(StatementRecord)
            .where(StatementRecord.iban == iban)
            .order_by(StatementRecord.created_on)
        )
        return list(self.session.execute(stmt).scalars().all())

    def list_entries_by_iban(self, iban: str) -> List[EntryRecord]:
        stmt = (
            select(EntryRecord)
            .join(EntryRecord.statement)
            .where(StatementRecord.iban == iban)
            .order_by(StatementRecord.created_on, StatementRecord.id, EntryRecord.position)
        )
        return list(self.session.execute(stmt).scalars().all())

    def _to_record(self, group_header: GroupHeader, statement: Statement) -> StatementRecord:
        return StatementRecord(
            message_id=group_header.message_id,
            message_created_on=group_header.created_on,
            statement_id=statement.id,
            created_on=statement.created_on,
            iban=str(statement.account.iban),
            account_currency=statement.account.currency,
            electronic_sequence_number=statement.electronic_sequence_number,
            additional_information=statement.additional_information,
            balances=[self._balance_record(i, b) for i, b in enumerate(statement.balances)],
            entries=[self._entry_record(i, e) for i, e in enumerate(statement.entries)],
        )

    @staticmethod
    def _balance_record(position: int, balance: Balance) -> BalanceRecord:
        return BalanceRecord(
            position=position,
            kind=balance.kind.value,
            code=balance.code,
            amount_minor_units=balance.amount.minor_units,
            currency=balance.amount.currency.code,
            date=balance.date,
        )

    @staticmethod
    def _entry_record(position: int, entry: Entry) -> EntryRecord:
        details = []
        for detail in entry.transaction_details:
            details.append(
                {
                    "references": [
                        {"end_to_end_id": r.end_to_end_id, "mandate_id": r.mandate_id}
                        for r in detail.references
                    ],
                    "related_parties": [
                        {
                            "creditor_name": p.creditor.name,
                            "creditor_country": p.creditor.address.country if p.creditor.address else None,
                            "creditor_address_lines": list(p.creditor.address.lines) if p.creditor.address else [],
                            "iban": str(p.account.iban),
                        }
                        for p in detail.related_parties
                    ],
                    "remittance_information": (
                        detail.remittance_information.unstructured
                        if detail.remittance_information
                        else None
                    ),
                }
            )

        return EntryRecord(
            position=position,
            amount_minor_units=entry.amount.minor_units,
            currency=entry.amount.currency.code,
            booking_date=entry.booking_date,
            value_date=entry.value_date,
            reference=entry.reference,
            status=entry.status,
            account_servicer_reference=entry.account_servicer_reference,
            additional_information=entry.additional_information,
            transaction_details=details,
        )

    @staticmethod
    def create_schema(engine) -> None:
        """
        Utility to create all defined tables in the target database.
        """
        Base.metadata.create_all(engine)
