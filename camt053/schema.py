import logging
import os
from dataclasses import dataclass
from typing import Any, List, Optional

from lxml import etree

from camt053.exceptions import SchemaLoadError

logger = logging.getLogger(__name__)

DEFAULT_XSD_PATH = os.path.join(os.path.dirname(__file__), "schemas", "camt.053.001.02.xsd")


@dataclass
class ValidationReport:
    """
    Outcome of validating a document against the camt.053 XSD.

    Attributes:
        is_valid (bool): True if the document conforms to the schema.
        errors (List[str]): Every XSD violation reported, in document order.
    """

    is_valid: bool
    errors: List[str]


class Schema:
    """
    Schema gate for camt.053 documents.

    Wraps a compiled lxml XMLSchema together with the namespace it targets. The
    bundled schema is compiled once per process and shared through ``default()``.
    """

    _DEFAULT: Optional["Schema"] = None

    def __init__(self, xsd_path: str = DEFAULT_XSD_PATH):
        self.xsd_path = os.path.abspath(xsd_path)
        logger.debug("Loading XSD from %s", self.xsd_path)

        with open(self.xsd_path, "rb") as f:
            data = f.read()

        try:
            schema_root = etree.XML(data)
            self._schema = etree.XMLSchema(schema_root)
        except (etree.XMLSyntaxError, etree.XMLSchemaParseError) as exc:
            raise SchemaLoadError(self.xsd_path, str(exc)) from exc

        self.target_namespace: Optional[str] = schema_root.get("targetNamespace")

    @classmethod
    def default(cls) -> "Schema":
        if cls._DEFAULT is None:
            cls._DEFAULT = cls(DEFAULT_XSD_PATH)
        return cls._DEFAULT

    def validate(self, document: Any) -> ValidationReport:
        """
        Validates a parsed document (lxml element or element tree).

        Returns:
            ValidationReport: ``is_valid`` plus every collected XSD error message.
        """
        root = document.getroot() if hasattr(document, "getroot") else document
        if root is None:
            return ValidationReport(is_valid=False, errors=["Empty XML document."])

        namespace = etree.QName(root).namespace
        if namespace != self.target_namespace:
            report = ValidationReport(
                is_valid=False,
                errors=[
                    f"Unsupported namespace '{namespace}'. Expected '{self.target_namespace}'."
                ],
            )
        elif self._schema.validate(root):
            report = ValidationReport(is_valid=True, errors=[])
        else:
            report = ValidationReport(
                is_valid=False, errors=[str(err) for err in self._schema.error_log]
            )

        if report.is_valid:
            logger.debug("Document is valid according to %s", self.xsd_path)
        else:
            logger.warning(
                "Document failed validation with %d error(s) against %s",
                len(report.errors),
                self.xsd_path,
            )
        return report
