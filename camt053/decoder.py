"""
Mapping functions from a validated camt.053.001.02 tree to the domain model.

Each function reads one XML sub-structure and returns the matching model
object. All of them expect a document that already passed the schema gate;
anything the schema guarantees but is still missing is reported as
``MissingElementError``, and text that cannot be converted to its target type
is reported as ``MalformedFieldError``. Locations in error messages are 1-based
ordinals, e.g. ``statement 2, entry 1``.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, List, Optional, TypeVar

from camt053.exceptions import MalformedFieldError, MissingElementError
from camt053.models import (
    Account,
    Balance,
    Creditor,
    Entry,
    EntryTransactionDetail,
    GroupHeader,
    Reference,
    RelatedParty,
    RemittanceInformation,
    Statement,
)
from camt053.values import (
    Address,
    Currency,
    Iban,
    Money,
    parse_timestamp,
    string_to_minor_units,
)

logger = logging.getLogger(__name__)

NAMESPACE = "urn:iso:std:iso:20022:tech:xsd:camt.053.001.02"
NS = {"ns": NAMESPACE}

DEBIT = "DBIT"
OPENING_BALANCE_CODE = "OPBD"

_DATE_XPATH = "./ns:{0}/ns:Dt/text() | ./ns:{0}/ns:DtTm/text()"

T = TypeVar("T")


def _get_nodes(element: Any, xpath_expr: str) -> list:
    return element.xpath(xpath_expr, namespaces=NS)


def _get_text(element: Any, xpath_expr: str) -> Optional[str]:
    result = element.xpath(xpath_expr, namespaces=NS)
    if not result:
        return None

    value = result[0]
    text = value if isinstance(value, str) else value.text
    if text is None:
        return None
    return text.strip() or None


def _require_node(element: Any, xpath_expr: str, field: str, location: str) -> Any:
    nodes = _get_nodes(element, xpath_expr)
    if not nodes:
        raise MissingElementError(field, location)
    return nodes[0]


def _require_text(element: Any, xpath_expr: str, field: str, location: str) -> str:
    text = _get_text(element, xpath_expr)
    if text is None:
        raise MissingElementError(field, location)
    return text


def _convert(factory: Callable[[str], T], text: str, field: str, location: str) -> T:
    try:
        return factory(text)
    except ValueError as exc:
        raise MalformedFieldError(field, location, text) from exc


def _to_integer(text: str) -> int:
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Not a number: {text!r}") from None
    if not value.is_finite() or value != value.to_integral_value():
        raise ValueError(f"Not an integer: {text!r}")
    return int(value)


def _decode_date(
    element: Any, tag: str, field: str, location: str, required: bool = False
):
    xpath_expr = _DATE_XPATH.format(tag)
    if required:
        text = _require_text(element, xpath_expr, field, location)
    else:
        text = _get_text(element, xpath_expr)
        if text is None:
            return None
    return _convert(parse_timestamp, text, field, location)


def decode_group_header(root: Any) -> GroupHeader:
    location = "group header"
    node = _require_node(root, "./ns:BkToCstmrStmt/ns:GrpHdr", "BkToCstmrStmt/GrpHdr", location)

    message_id = _require_text(node, "./ns:MsgId/text()", "GrpHdr/MsgId", location)
    created_on = _require_text(node, "./ns:CreDtTm/text()", "GrpHdr/CreDtTm", location)

    return GroupHeader(
        message_id=message_id,
        created_on=_convert(parse_timestamp, created_on, "GrpHdr/CreDtTm", location),
    )


def decode_statements(root: Any) -> List[Statement]:
    """
    Decodes every BkToCstmrStmt/Stmt in document order.
    """
    statements = []
    for index, statement_el in enumerate(_get_nodes(root, "./ns:BkToCstmrStmt/ns:Stmt"), start=1):
        statements.append(decode_statement(statement_el, f"statement {index}"))
    return statements


def decode_statement(statement_el: Any, location: str) -> Statement:
    statement_id = _require_text(statement_el, "./ns:Id/text()", "Stmt/Id", location)
    created_on = _require_text(statement_el, "./ns:CreDtTm/text()", "Stmt/CreDtTm", location)
    sequence_number = _get_text(statement_el, "./ns:ElctrncSeqNb/text()")
    account = decode_account(
        _require_node(statement_el, "./ns:Acct", "Stmt/Acct", location), "Stmt/Acct", location
    )

    balances = [
        decode_balance(balance_el, f"{location}, balance {index}")
        for index, balance_el in enumerate(_get_nodes(statement_el, "./ns:Bal"), start=1)
    ]
    entries = [
        decode_entry(entry_el, f"{location}, entry {index}")
        for index, entry_el in enumerate(_get_nodes(statement_el, "./ns:Ntry"), start=1)
    ]

    statement = Statement(
        id=statement_id,
        created_on=_convert(parse_timestamp, created_on, "Stmt/CreDtTm", location),
        account=account,
        balances=balances,
        entries=entries,
        electronic_sequence_number=(
            _convert(_to_integer, sequence_number, "Stmt/ElctrncSeqNb", location)
            if sequence_number is not None
            else None
        ),
        additional_information=_get_text(statement_el, "./ns:AddtlStmtInf/text()"),
    )

    logger.debug(
        "Decoded statement %s (%s): %d balance(s), %d entry(ies)",
        statement.id,
        location,
        len(statement.balances),
        len(statement.entries),
    )
    return statement


def decode_account(account_el: Any, field: str, location: str) -> Account:
    iban = _require_text(account_el, "./ns:Id/ns:IBAN/text()", f"{field}/Id/IBAN", location)
    return Account(
        iban=_convert(Iban, iban, f"{field}/Id/IBAN", location),
        currency=_get_text(account_el, "./ns:Ccy/text()"),
        owner_name=_get_text(account_el, "./ns:Ownr/ns:Nm/text()"),
    )


def decode_money(element: Any, field: str, location: str) -> Money:
    """
    Reads Amt, Amt/@Ccy and CdtDbtInd of a balance or entry. The amount is
    negated when the indicator is DBIT and left as is otherwise.
    """
    amount = _require_text(element, "./ns:Amt/text()", f"{field}/Amt", location)
    code = _require_text(element, "./ns:Amt/@Ccy", f"{field}/Amt/@Ccy", location)

    currency = _convert(Currency, code, f"{field}/Amt/@Ccy", location)
    minor_units = _convert(
        lambda text: string_to_minor_units(text, currency), amount, f"{field}/Amt", location
    )

    if _get_text(element, "./ns:CdtDbtInd/text()") == DEBIT:
        minor_units = -minor_units

    return Money(minor_units, currency)


def decode_balance(balance_el: Any, location: str) -> Balance:
    amount = decode_money(balance_el, "Bal", location)
    date = _decode_date(balance_el, "Dt", "Bal/Dt", location, required=True)

    code = _get_text(balance_el, "./ns:Tp/ns:CdOrPrtry/ns:Cd/text()")
    if code == OPENING_BALANCE_CODE:
        return Balance.opening(amount, date, code)

    # Everything else, interim and forward balances included, counts as closing.
    if code is None:
        code = _get_text(balance_el, "./ns:Tp/ns:CdOrPrtry/ns:Prtry/text()")
    return Balance.closing(amount, date, code)


def decode_entry(entry_el: Any, location: str) -> Entry:
    amount = decode_money(entry_el, "Ntry", location)
    booking_date = _decode_date(entry_el, "BookgDt", "Ntry/BookgDt", location)
    value_date = _decode_date(entry_el, "ValDt", "Ntry/ValDt", location)

    details = _get_nodes(entry_el, "./ns:NtryDtls/ns:TxDtls")
    return Entry(
        amount=amount,
        booking_date=booking_date,
        value_date=value_date,
        transaction_details=[
            decode_transaction_detail(detail_el, f"{location}, transaction detail {index}")
            for index, detail_el in enumerate(details, start=1)
        ],
        reference=_get_text(entry_el, "./ns:NtryRef/text()"),
        status=_get_text(entry_el, "./ns:Sts/text()"),
        account_servicer_reference=_get_text(entry_el, "./ns:AcctSvcrRef/text()"),
        additional_information=_get_text(entry_el, "./ns:AddtlNtryInf/text()"),
    )


def decode_transaction_detail(detail_el: Any, location: str) -> EntryTransactionDetail:
    reference = decode_reference(detail_el)
    party_nodes = _get_nodes(detail_el, "./ns:RltdPties")

    return EntryTransactionDetail(
        references=[reference] if reference is not None else [],
        related_parties=[
            decode_related_party(party_el, f"{location}, related party {index}")
            for index, party_el in enumerate(party_nodes, start=1)
        ],
        remittance_information=decode_remittance_information(detail_el, location),
    )


def decode_reference(detail_el: Any) -> Optional[Reference]:
    """
    Builds a Reference from Refs/EndToEndId. Without an end-to-end id there is
    no reference at all; a missing MndtId stays None.
    """
    end_to_end_id = _get_text(detail_el, "./ns:Refs/ns:EndToEndId/text()")
    if end_to_end_id is None:
        return None
    return Reference(end_to_end_id, _get_text(detail_el, "./ns:Refs/ns:MndtId/text()"))


def decode_related_party(party_el: Any, location: str) -> RelatedParty:
    name = _require_text(party_el, "./ns:Cdtr/ns:Nm/text()", "RltdPties/Cdtr/Nm", location)

    address = None
    address_nodes = _get_nodes(party_el, "./ns:Cdtr/ns:PstlAdr")
    if address_nodes:
        address = decode_address(address_nodes[0])
        if address.is_empty():
            address = None

    account_el = _require_node(party_el, "./ns:CdtrAcct", "RltdPties/CdtrAcct", location)
    return RelatedParty(
        creditor=Creditor(name, address),
        account=decode_account(account_el, "RltdPties/CdtrAcct", location),
    )


def decode_address(address_el: Any) -> Address:
    address = Address()

    country = _get_text(address_el, "./ns:Ctry/text()")
    if country is not None:
        address = address.with_country(country)

    for line_el in _get_nodes(address_el, "./ns:AdrLine"):
        line = (line_el.text or "").strip()
        if line:
            address = address.add_address_line(line)

    return address


def decode_remittance_information(detail_el: Any, location: str) -> Optional[RemittanceInformation]:
    remittance_nodes = _get_nodes(detail_el, "./ns:RmtInf")
    if not remittance_nodes:
        return None

    unstructured = _get_text(remittance_nodes[0], "./ns:Ustrd/text()")
    if unstructured is None:
        if _get_nodes(remittance_nodes[0], "./ns:Strd"):
            logger.debug("Skipping structured remittance information at %s", location)
        return None

    return RemittanceInformation.from_unstructured(unstructured)
