import os

import pytest

from camt053 import decoder
from camt053.message import Message
from camt053.values import Currency, Money

EXAMPLES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "example_messages")


@pytest.fixture
def message():
    return Message.from_file(os.path.join(EXAMPLES_DIR, "camt053_two_statements.xml"))


@pytest.fixture
def decode_calls(monkeypatch):
    calls = []
    original = decoder.decode_statements

    def wrapper(root):
        calls.append(root)
        return original(root)

    monkeypatch.setattr(decoder, "decode_statements", wrapper)
    return calls


def test_entries_follow_statement_order(message):
    statements = message.get_statements()
    expected = statements[0].entries + statements[1].entries

    entries = list(message.get_entries())

    assert len(entries) == 4
    assert all(a is b for a, b in zip(entries, expected))
    assert [e.amount for e in entries] == [
        Money(-250, Currency("USD")),
        Money(10000, Currency("EUR")),
        Money(1000, Currency("JPY")),
        Money(-12345, Currency("KWD")),
    ]


def test_nothing_is_decoded_before_first_entry(message, decode_calls):
    entries = message.get_entries()
    iterator = iter(entries)
    assert decode_calls == []

    first = next(iterator)
    assert first.reference == "REF-1"
    assert len(decode_calls) == 1

    list(iterator)
    assert len(decode_calls) == 1


def test_iterator_is_restartable(message, decode_calls):
    entries = message.get_entries()

    first_pass = list(entries)
    second_pass = list(entries)

    assert first_pass == second_pass
    assert len(first_pass) == 4
    assert len(decode_calls) == 1


def test_next_pulls_entries_directly(message, decode_calls):
    entries = message.get_entries()
    assert decode_calls == []

    assert next(entries).reference == "REF-1"
    assert len(decode_calls) == 1
    assert next(entries).amount == Money(10000, Currency("EUR"))
    assert next(entries).amount == Money(1000, Currency("JPY"))
    assert next(entries).amount == Money(-12345, Currency("KWD"))

    with pytest.raises(StopIteration):
        next(entries)
    assert next(entries, None) is None
    assert len(decode_calls) == 1


def test_iter_restarts_after_next(message):
    entries = message.get_entries()
    next(entries)

    assert len(list(entries)) == 4
    assert next(entries).amount == Money(10000, Currency("EUR"))


def test_new_iterator_reuses_decoded_statements(message, decode_calls):
    list(message.get_entries())
    list(message.get_entries())
    message.get_statements()

    assert len(decode_calls) == 1


def test_message_without_entries_yields_nothing():
    data = b"""<?xml version="1.0" encoding="UTF-8"?>
<Document xmlns="urn:iso:std:iso:20022:tech:xsd:camt.053.001.02">
    <BkToCstmrStmt>
        <GrpHdr>
            <MsgId>EMPTY-1</MsgId>
            <CreDtTm>2020-01-03T08:30:00</CreDtTm>
        </GrpHdr>
        <Stmt>
            <Id>STMT-1</Id>
            <CreDtTm>2020-01-03T08:30:00</CreDtTm>
            <Acct>
                <Id><IBAN>DE89370400440532013000</IBAN></Id>
            </Acct>
            <Bal>
                <Tp><CdOrPrtry><Cd>OPBD</Cd></CdOrPrtry></Tp>
                <Amt Ccy="EUR">10.00</Amt>
                <CdtDbtInd>CRDT</CdtDbtInd>
                <Dt><Dt>2020-01-01</Dt></Dt>
            </Bal>
        </Stmt>
    </BkToCstmrStmt>
</Document>
"""
    message = Message.from_bytes(data)
    assert list(message.get_entries()) == []
    assert len(message.get_statements()) == 1
