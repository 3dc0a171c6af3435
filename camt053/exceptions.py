"""
Exception hierarchy for camt053.

    Camt053Error
    ├── SchemaLoadError         -> XSD file is not a usable schema
    ├── InvalidMessageError     -> document rejected by the schema gate
    └── DecodingError           -> validated document could not be mapped
        ├── MalformedFieldError -> field text not convertible (amount, date, currency, IBAN)
        └── MissingElementError -> required node absent despite validation

Value objects raise the ``ValueError`` subclasses at the bottom of this module;
the decoder re-raises them as ``MalformedFieldError`` with the location attached.
"""

from typing import List, Optional


class Camt053Error(Exception):
    """Base class for every error raised by camt053."""


class SchemaLoadError(Camt053Error):
    """Raised when an XSD file cannot be parsed or compiled."""

    def __init__(self, xsd_path: str, reason: str):
        self.xsd_path = xsd_path
        super().__init__(f"Cannot load XSD '{xsd_path}': {reason}")


class InvalidMessageError(Camt053Error):
    """
    Raised when a document fails schema validation. Carries every collected
    validation message, not only the first one.
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        joined = "\n".join(self.errors)
        super().__init__(f"Provided XML is not valid according to the XSD:\n{joined}")


class DecodingError(Camt053Error):
    """Base for faults found while mapping a validated document."""

    def __init__(self, field: str, location: str, message: str):
        self.field = field
        self.location = location
        super().__init__(message)


class MalformedFieldError(DecodingError):
    def __init__(self, field: str, location: str, value: Optional[str]):
        self.value = value
        super().__init__(
            field, location, f"Malformed value {value!r} for field '{field}' at {location}"
        )


class MissingElementError(DecodingError):
    def __init__(self, field: str, location: str):
        super().__init__(field, location, f"Missing required element '{field}' at {location}")


class InvalidCurrencyError(Camt053Error, ValueError):
    """Currency code not present in the ISO 4217 table."""


class InvalidAmountError(Camt053Error, ValueError):
    """Amount text is not numeric or cannot be expressed in whole minor units."""


class InvalidIbanError(Camt053Error, ValueError):
    """IBAN fails the ISO 13616 shape or Modulo-97 checksum."""


class MalformedDateError(Camt053Error, ValueError):
    """Date or date-time text is not ISO 8601."""
