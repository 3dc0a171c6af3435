import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional, Tuple

from camt053.exceptions import (
    InvalidAmountError,
    InvalidCurrencyError,
    InvalidIbanError,
    MalformedDateError,
)

# ISO 4217 codes mapped to their minor unit exponent. Codes without an
# exponent in the standard (precious metals, testing codes) are left out.
_ZERO_DECIMAL = (
    "BIF CLP DJF GNF ISK JPY KMF KRW PYG RWF UGX UYI VND VUV XAF XOF XPF"
)
_THREE_DECIMAL = "BHD IQD JOD KWD LYD OMR TND"
_FOUR_DECIMAL = "CLF UYW"
_TWO_DECIMAL = (
    "AED AFN ALL AMD ANG AOA ARS AUD AWG AZN BAM BBD BDT BGN BMD BND BOB BOV "
    "BRL BSD BTN BWP BYN BZD CAD CDF CHE CHF CHW CNY COP COU CRC CUC CUP CVE "
    "CZK DKK DOP DZD EGP ERN ETB EUR FJD FKP GBP GEL GHS GIP GMD GTQ GYD HKD "
    "HNL HTG HUF IDR ILS INR IRR JMD KES KGS KHR KPW KYD KZT LAK LBP LKR LRD "
    "LSL MAD MDL MGA MKD MMK MNT MOP MRU MUR MVR MWK MXN MXV MYR MZN NAD NGN "
    "NIO NOK NPR NZD PAB PEN PGK PHP PKR PLN QAR RON RSD RUB SAR SBD SCR SDG "
    "SEK SGD SHP SLE SLL SOS SRD SSP STN SVC SYP SZL THB TJS TMT TOP TRY TTD "
    "TWD TZS UAH USD USN UYU UZS VED VES WST XCD YER ZAR ZMW ZWL "
    # historic codes still seen on older statements
    "CYP EEK HRK LTL LVL MTL SIT SKK"
)

ISO_4217: Dict[str, int] = {
    **{code: 0 for code in _ZERO_DECIMAL.split()},
    **{code: 2 for code in _TWO_DECIMAL.split()},
    **{code: 3 for code in _THREE_DECIMAL.split()},
    **{code: 4 for code in _FOUR_DECIMAL.split()},
}


@dataclass(frozen=True)
class Currency:
    """
    ISO 4217 currency. Construction fails for codes outside the bundled table.
    """

    code: str
    minor_unit: int = field(init=False, compare=False)

    def __post_init__(self):
        exponent = ISO_4217.get(self.code)
        if exponent is None:
            raise InvalidCurrencyError(f"Unknown currency code: '{self.code}'")
        object.__setattr__(self, "minor_unit", exponent)

    def __str__(self) -> str:
        return self.code


def string_to_minor_units(text: str, currency: Currency) -> int:
    """
    Converts a decimal amount string into integer minor units of ``currency``.
    The conversion is exact: any fraction smaller than one minor unit is rejected
    instead of rounded.
    """
    try:
        value = Decimal(text.strip())
    except (InvalidOperation, AttributeError):
        raise InvalidAmountError(f"Amount is not a decimal number: {text!r}") from None

    if not value.is_finite():
        raise InvalidAmountError(f"Amount is not a finite number: {text!r}")

    scaled = value.scaleb(currency.minor_unit)
    if scaled != scaled.to_integral_value():
        raise InvalidAmountError(
            f"Amount {text!r} has more precision than {currency.code} allows "
            f"({currency.minor_unit} decimals)"
        )
    return int(scaled)


@dataclass(frozen=True)
class Money:
    minor_units: int
    currency: Currency

    @property
    def amount(self) -> Decimal:
        """The value in major units, e.g. Decimal('12.34') for 1234 EUR cents."""
        return Decimal(self.minor_units).scaleb(-self.currency.minor_unit)

    def is_negative(self) -> bool:
        return self.minor_units < 0

    def negate(self) -> "Money":
        return Money(-self.minor_units, self.currency)

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.code}"


class Iban:
    """
    International Bank Account Number, kept in electronic form (no spaces, upper case).
    """

    _format_pattern = re.compile(r"\A[A-Z]{2}[0-9]{2}[A-Z0-9]{11,30}\Z")
    _cleaner_pattern = re.compile(r"[ \-\.]")

    def __init__(self, iban: str):
        if not iban or len(iban) > 100:
            raise InvalidIbanError(f"Invalid IBAN: {iban!r}")

        formatted = self._cleaner_pattern.sub("", iban.strip().upper())
        if not self._format_pattern.match(formatted):
            raise InvalidIbanError(f"Invalid IBAN format: '{iban.strip()}'")

        # Move the first four characters to the end, map letters to A=10..Z=35
        # and check the remainder of the resulting integer modulo 97.
        rearranged = formatted[4:] + formatted[:4]
        numeric = "".join(str(ord(ch) - 55) if ch.isalpha() else ch for ch in rearranged)
        if int(numeric) % 97 != 1:
            raise InvalidIbanError(f"Invalid IBAN checksum: '{formatted}'")

        self._iban = formatted

    @property
    def country_code(self) -> str:
        return self._iban[:2]

    def __str__(self) -> str:
        return self._iban

    def __repr__(self) -> str:
        return f"Iban('{self._iban}')"

    def __eq__(self, other) -> bool:
        if isinstance(other, Iban):
            return self._iban == other._iban
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._iban)


@dataclass(frozen=True)
class Address:
    """
    Postal address of a related party. Built incrementally: every mutator returns
    an updated copy.
    """

    country: Optional[str] = None
    lines: Tuple[str, ...] = ()

    def with_country(self, country: str) -> "Address":
        return replace(self, country=country)

    def add_address_line(self, line: str) -> "Address":
        return replace(self, lines=self.lines + (line,))

    def is_empty(self) -> bool:
        return self.country is None and not self.lines


_DATE_WITH_OFFSET = re.compile(r"\A(\d{4}-\d{2}-\d{2})(Z|[+-]\d{2}:\d{2})\Z")


def parse_timestamp(text: str) -> datetime:
    """
    Parses an ISO 8601 date (``2020-01-01``, optionally with a UTC offset) or
    date-time (``2020-01-01T10:00:00.000+01:00``).
    """
    if text is None:
        raise MalformedDateError("Missing date value")

    value = text.strip()
    match = _DATE_WITH_OFFSET.match(value)
    if match:
        value = f"{match.group(1)}T00:00:00{match.group(2)}"

    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise MalformedDateError(f"Invalid ISO 8601 date: {text!r}") from None
