"""
camt053: Decode ISO 20022 camt.053.001.02 bank-to-customer statements into a
typed model of statements, balances and entries.
"""

from .exceptions import (
    Camt053Error,
    DecodingError,
    InvalidAmountError,
    InvalidCurrencyError,
    InvalidIbanError,
    InvalidMessageError,
    MalformedDateError,
    MalformedFieldError,
    MissingElementError,
    SchemaLoadError,
)
from .iterator import EntryIterator
from .message import Message
from .models import (
    Account,
    Balance,
    BalanceType,
    Creditor,
    Entry,
    EntryTransactionDetail,
    GroupHeader,
    Reference,
    RelatedParty,
    RemittanceInformation,
    Statement,
)
from .schema import Schema, ValidationReport
from .values import Address, Currency, Iban, Money, parse_timestamp, string_to_minor_units

__all__ = [
    "Message",
    "EntryIterator",
    "Schema",
    "ValidationReport",
    "GroupHeader",
    "Account",
    "Balance",
    "BalanceType",
    "Reference",
    "Creditor",
    "RelatedParty",
    "RemittanceInformation",
    "EntryTransactionDetail",
    "Entry",
    "Statement",
    "Address",
    "Currency",
    "Iban",
    "Money",
    "parse_timestamp",
    "string_to_minor_units",
    "Camt053Error",
    "InvalidMessageError",
    "DecodingError",
    "MalformedFieldError",
    "MissingElementError",
    "InvalidCurrencyError",
    "InvalidAmountError",
    "InvalidIbanError",
    "MalformedDateError",
    "SchemaLoadError",
]
