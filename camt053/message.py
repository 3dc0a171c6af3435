import logging
import threading
from typing import Any, Callable, Optional, Tuple

from lxml import etree

from camt053 import decoder
from camt053.exceptions import InvalidMessageError
from camt053.iterator import EntryIterator
from camt053.models import GroupHeader, Statement
from camt053.schema import Schema

logger = logging.getLogger(__name__)


class Message:
    """
    A camt.053 BankToCustomerStatement document.

    The document is validated against the XSD when the Message is constructed;
    an invalid document never produces an instance. The group header and the
    statement list are decoded lazily on first access and then kept for the
    lifetime of the instance. Decoding is guarded by a lock so concurrent
    readers share one result.
    """

    def __init__(self, document: Any, schema: Optional[Schema] = None):
        root = document.getroot() if hasattr(document, "getroot") else document

        report = (schema or Schema.default()).validate(root)
        if not report.is_valid:
            raise InvalidMessageError(report.errors)

        self._document = root
        self._lock = threading.Lock()
        self._group_header: Optional[GroupHeader] = None
        self._statements: Optional[Tuple[Statement, ...]] = None

    @classmethod
    def from_bytes(cls, data: bytes, schema: Optional[Schema] = None) -> "Message":
        """
        Parses raw XML bytes and validates them. Entity expansion and network
        access are disabled in the parser.
        """
        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            root = etree.fromstring(data.strip(), parser)
        except (etree.XMLSyntaxError, ValueError) as exc:
            raise InvalidMessageError([f"Malformed XML document: {exc}"]) from exc
        return cls(root, schema)

    @classmethod
    def from_file(cls, path: str, schema: Optional[Schema] = None) -> "Message":
        with open(path, "rb") as f:
            return cls.from_bytes(f.read(), schema)

    def get_group_header(self) -> GroupHeader:
        return self._compute_once("_group_header", decoder.decode_group_header)

    def get_statements(self) -> Tuple[Statement, ...]:
        return self._compute_once(
            "_statements", lambda root: tuple(decoder.decode_statements(root))
        )

    def get_entries(self) -> EntryIterator:
        """
        Returns an iterator over the entries of all statements in document order.
        Statements are not decoded before the first entry is requested.
        """
        return EntryIterator(self)

    def _compute_once(self, attribute: str, compute: Callable[[Any], Any]) -> Any:
        value = getattr(self, attribute)
        if value is not None:
            return value

        with self._lock:
            value = getattr(self, attribute)
            if value is None:
                logger.debug("Decoding %s", attribute.lstrip("_"))
                value = compute(self._document)
                setattr(self, attribute, value)
        return value
