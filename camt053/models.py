from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from camt053.values import Address, Iban, Money


def _freeze(instance, *names: str) -> None:
    # Collections are stored as tuples whatever sequence the caller passed.
    for name in names:
        object.__setattr__(instance, name, tuple(getattr(instance, name)))


@dataclass(frozen=True)
class GroupHeader:
    """
    Message level metadata from BkToCstmrStmt/GrpHdr.

    Attributes:
        message_id (str): GrpHdr/MsgId, unique per sending institution.
        created_on (datetime): GrpHdr/CreDtTm.
    """

    message_id: str
    created_on: datetime


@dataclass(frozen=True)
class Account:
    """
    A cash account identified by IBAN (Acct/Id/IBAN or CdtrAcct/Id/IBAN).
    """

    iban: Iban
    currency: Optional[str] = None
    owner_name: Optional[str] = None


class BalanceType(Enum):
    OPENING = "opening"
    CLOSING = "closing"


@dataclass(frozen=True)
class Balance:
    """
    Point in time balance of a statement.

    Only two kinds exist: ``OPBD`` decodes to OPENING and every other code,
    including interim and forward balances, decodes to CLOSING. The raw type
    code stays available in ``code``.
    """

    kind: BalanceType
    amount: Money
    date: datetime
    code: Optional[str] = None

    @classmethod
    def opening(cls, amount: Money, date: datetime, code: Optional[str] = "OPBD") -> "Balance":
        return cls(BalanceType.OPENING, amount, date, code)

    @classmethod
    def closing(cls, amount: Money, date: datetime, code: Optional[str] = None) -> "Balance":
        return cls(BalanceType.CLOSING, amount, date, code)

    def is_opening(self) -> bool:
        return self.kind is BalanceType.OPENING

    def is_closing(self) -> bool:
        return self.kind is BalanceType.CLOSING


@dataclass(frozen=True)
class Reference:
    end_to_end_id: str
    mandate_id: Optional[str] = None


@dataclass(frozen=True)
class Creditor:
    name: str
    address: Optional[Address] = None


@dataclass(frozen=True)
class RelatedParty:
    creditor: Creditor
    account: Account


@dataclass(frozen=True)
class RemittanceInformation:
    """
    Unstructured remittance text (RmtInf/Ustrd). Structured remittance
    information is not modeled.
    """

    unstructured: str

    @classmethod
    def from_unstructured(cls, message: str) -> "RemittanceInformation":
        return cls(unstructured=message)

    @property
    def message(self) -> str:
        return self.unstructured


@dataclass(frozen=True)
class EntryTransactionDetail:
    """
    One NtryDtls/TxDtls block. Like every decoded model it is frozen; the
    ``add_*`` and ``with_*`` methods return an updated copy.
    """

    references: Tuple[Reference, ...] = ()
    related_parties: Tuple[RelatedParty, ...] = ()
    remittance_information: Optional[RemittanceInformation] = None

    def __post_init__(self):
        _freeze(self, "references", "related_parties")

    def add_reference(self, reference: Reference) -> "EntryTransactionDetail":
        return replace(self, references=self.references + (reference,))

    def add_related_party(self, related_party: RelatedParty) -> "EntryTransactionDetail":
        return replace(self, related_parties=self.related_parties + (related_party,))

    def with_remittance_information(
        self, remittance_information: RemittanceInformation
    ) -> "EntryTransactionDetail":
        return replace(self, remittance_information=remittance_information)

    @property
    def reference(self) -> Optional[Reference]:
        return self.references[0] if self.references else None


@dataclass(frozen=True)
class Entry:
    """
    One booked (or pending) line of a statement.

    Attributes:
        amount (Money): Signed amount; negative for DBIT entries.
        booking_date (Optional[datetime]): BookgDt, absent for some pending entries.
        value_date (Optional[datetime]): ValDt.
        transaction_details (Tuple[EntryTransactionDetail, ...]): NtryDtls/TxDtls in document order.
        reference (Optional[str]): NtryRef.
        status (Optional[str]): Sts, e.g. BOOK or PDNG.
        account_servicer_reference (Optional[str]): AcctSvcrRef.
        additional_information (Optional[str]): AddtlNtryInf.
    """

    amount: Money
    booking_date: Optional[datetime] = None
    value_date: Optional[datetime] = None
    transaction_details: Tuple[EntryTransactionDetail, ...] = ()
    reference: Optional[str] = None
    status: Optional[str] = None
    account_servicer_reference: Optional[str] = None
    additional_information: Optional[str] = None

    def __post_init__(self):
        _freeze(self, "transaction_details")

    def add_transaction_detail(self, detail: EntryTransactionDetail) -> "Entry":
        return replace(self, transaction_details=self.transaction_details + (detail,))

    def is_debit(self) -> bool:
        return self.amount.is_negative()


@dataclass(frozen=True)
class Statement:
    """
    A single BkToCstmrStmt/Stmt block: one account over one reporting period.
    """

    id: str
    created_on: datetime
    account: Account
    balances: Tuple[Balance, ...] = ()
    entries: Tuple[Entry, ...] = ()
    electronic_sequence_number: Optional[int] = None
    additional_information: Optional[str] = None

    def __post_init__(self):
        _freeze(self, "balances", "entries")

    def add_balance(self, balance: Balance) -> "Statement":
        return replace(self, balances=self.balances + (balance,))

    def add_entry(self, entry: Entry) -> "Statement":
        return replace(self, entries=self.entries + (entry,))

    def get_opening_balance(self) -> Optional[Balance]:
        return next((b for b in self.balances if b.is_opening()), None)

    def get_closing_balance(self) -> Optional[Balance]:
        return next((b for b in self.balances if b.is_closing()), None)
