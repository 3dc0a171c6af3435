import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from camt053.exceptions import (
    Camt053Error,
    InvalidAmountError,
    InvalidCurrencyError,
    InvalidIbanError,
    MalformedDateError,
)
from camt053.values import Address, Currency, Iban, Money, parse_timestamp, string_to_minor_units


def test_currency_known_codes_carry_minor_unit():
    assert Currency("EUR").minor_unit == 2
    assert Currency("JPY").minor_unit == 0
    assert Currency("KWD").minor_unit == 3
    assert str(Currency("USD")) == "USD"


def test_currency_unknown_code_raises():
    with pytest.raises(InvalidCurrencyError):
        Currency("XYZ")
    with pytest.raises(InvalidCurrencyError):
        Currency("eur")


def test_value_errors_share_package_base():
    with pytest.raises(Camt053Error):
        Currency("ABC")
    with pytest.raises(ValueError):
        Iban("nope")


@pytest.mark.parametrize(
    "text, code, expected",
    [
        ("10.00", "EUR", 1000),
        ("10.5", "EUR", 1050),
        ("0.01", "EUR", 1),
        ("1000", "JPY", 1000),
        ("12.345", "KWD", 12345),
        (" 7 ", "USD", 700),
        ("1e2", "EUR", 10000),
    ],
)
def test_string_to_minor_units(text, code, expected):
    assert string_to_minor_units(text, Currency(code)) == expected


@pytest.mark.parametrize("text", ["abc", "", "NaN", "Infinity", "1,50"])
def test_string_to_minor_units_rejects_non_numeric(text):
    with pytest.raises(InvalidAmountError):
        string_to_minor_units(text, Currency("EUR"))


def test_string_to_minor_units_rejects_precision_loss():
    """
    A fraction smaller than one cent must fail instead of being rounded away.
    """
    with pytest.raises(InvalidAmountError):
        string_to_minor_units("10.001", Currency("EUR"))
    with pytest.raises(InvalidAmountError):
        string_to_minor_units("1.5", Currency("JPY"))


def test_money_amount_and_sign():
    money = Money(1234, Currency("EUR"))
    assert money.amount == Decimal("12.34")
    assert not money.is_negative()
    assert money.negate() == Money(-1234, Currency("EUR"))
    assert money.negate().is_negative()
    assert str(Money(-250, Currency("USD"))) == "-2.50 USD"


def test_money_equality_uses_currency_code():
    assert Money(500, Currency("EUR")) == Money(500, Currency("EUR"))
    assert Money(500, Currency("EUR")) != Money(500, Currency("USD"))


def test_iban_normalizes_formatting():
    iban = Iban("de89 3704 0044 0532 0130 00")
    assert str(iban) == "DE89370400440532013000"
    assert iban.country_code == "DE"
    assert iban == Iban("DE89370400440532013000")
    assert len({iban, Iban("DE89370400440532013000")}) == 1


@pytest.mark.parametrize(
    "value",
    [
        "DE00370400440532013000",  # checksum
        "DE89",  # too short
        "1234567890123456",  # no country prefix
        "DE89370400440532013000\nX",
        "",
    ],
)
def test_iban_rejects_malformed_values(value):
    with pytest.raises(InvalidIbanError):
        Iban(value)


def test_address_builder_returns_updated_copies():
    empty = Address()
    assert empty.is_empty()

    with_country = empty.with_country("DE")
    with_lines = with_country.add_address_line("Hauptstrasse 1").add_address_line("10115 Berlin")

    assert empty.country is None
    assert with_country.lines == ()
    assert with_lines.country == "DE"
    assert with_lines.lines == ("Hauptstrasse 1", "10115 Berlin")
    assert not with_lines.is_empty()


def test_parse_timestamp_dates_and_datetimes():
    assert parse_timestamp("2020-01-01") == datetime(2020, 1, 1)
    assert parse_timestamp("2020-01-02T08:30:00") == datetime(2020, 1, 2, 8, 30)
    assert parse_timestamp("2020-01-02T08:30:00Z") == datetime(2020, 1, 2, 8, 30, tzinfo=timezone.utc)
    assert parse_timestamp("2020-01-02T08:30:00.250+02:00") == datetime(
        2020, 1, 2, 8, 30, 0, 250000, tzinfo=timezone(timedelta(hours=2))
    )


def test_parse_timestamp_date_with_offset():
    parsed = parse_timestamp("2020-01-01+01:00")
    assert parsed == datetime(2020, 1, 1, tzinfo=timezone(timedelta(hours=1)))


@pytest.mark.parametrize("value", ["2020-13-01", "yesterday", "01.01.2020", ""])
def test_parse_timestamp_rejects_garbage(value):
    with pytest.raises(MalformedDateError):
        parse_timestamp(value)
