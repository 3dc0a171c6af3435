import os

import pytest
from lxml import etree

from camt053.exceptions import Camt053Error, SchemaLoadError
from camt053.schema import DEFAULT_XSD_PATH, Schema

EXAMPLES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "example_messages")

VALID_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<Document xmlns="urn:iso:std:iso:20022:tech:xsd:camt.053.001.02">
    <BkToCstmrStmt>
        <GrpHdr>
            <MsgId>MSG-1</MsgId>
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

# Missing <CreDtTm> in <GrpHdr>, which is mandatory.
MISSING_CREATION_DATE_XML = VALID_XML.replace(
    b"<CreDtTm>2020-01-03T08:30:00</CreDtTm>\n        </GrpHdr>", b"</GrpHdr>"
)

TWO_BAD_VALUES_XML = VALID_XML.replace(b"<CdtDbtInd>CRDT</CdtDbtInd>", b"<CdtDbtInd>XXXX</CdtDbtInd>").replace(
    b'Ccy="EUR"', b'Ccy="eur"'
)

OTHER_VERSION_XML = VALID_XML.replace(b"camt.053.001.02", b"camt.053.001.08")


def test_default_schema_is_cached():
    assert Schema.default() is Schema.default()
    assert Schema.default().target_namespace == "urn:iso:std:iso:20022:tech:xsd:camt.053.001.02"


def test_valid_document_passes():
    report = Schema.default().validate(etree.fromstring(VALID_XML))
    assert report.is_valid is True, f"Validation failed with errors: {report.errors}"
    assert report.errors == []


def test_accepts_element_tree():
    tree = etree.ElementTree(etree.fromstring(VALID_XML))
    assert Schema.default().validate(tree).is_valid is True


def test_missing_mandatory_element():
    assert b"<CreDtTm>2020-01-03T08:30:00</CreDtTm>\n        </GrpHdr>" in VALID_XML

    report = Schema.default().validate(etree.fromstring(MISSING_CREATION_DATE_XML))
    assert report.is_valid is False
    assert any("CreDtTm" in err for err in report.errors)


def test_collects_every_error():
    report = Schema.default().validate(etree.fromstring(TWO_BAD_VALUES_XML))
    assert report.is_valid is False
    assert any("XXXX" in err for err in report.errors)
    assert any("eur" in err for err in report.errors)


def test_unsupported_namespace():
    report = Schema.default().validate(etree.fromstring(OTHER_VERSION_XML))
    assert report.is_valid is False
    assert "Unsupported namespace" in report.errors[0]
    assert len(report.errors) == 1


def test_custom_schema_path(tmp_path):
    xsd_copy = tmp_path / "camt.053.001.02.xsd"
    with open(DEFAULT_XSD_PATH, "rb") as f:
        xsd_copy.write_bytes(f.read())

    schema = Schema(str(xsd_copy))
    assert schema is not Schema.default()
    assert schema.xsd_path == str(xsd_copy)
    assert schema.validate(etree.fromstring(VALID_XML)).is_valid is True


def test_example_message_is_valid():
    with open(os.path.join(EXAMPLES_DIR, "camt053_two_statements.xml"), "rb") as f:
        document = etree.fromstring(f.read())

    report = Schema.default().validate(document)
    assert report.is_valid is True, f"Validation failed with errors: {report.errors}"


def test_example_with_charges_and_interest_is_valid():
    with open(os.path.join(EXAMPLES_DIR, "camt053_charges_and_interest.xml"), "rb") as f:
        document = etree.fromstring(f.read())

    report = Schema.default().validate(document)
    assert report.is_valid is True, f"Validation failed with errors: {report.errors}"


def test_unread_branch_content_is_not_checked():
    document = VALID_XML.replace(
        b"<Dt><Dt>2020-01-01</Dt></Dt>",
        b"<Dt><Dt>2020-01-01</Dt></Dt><Avlbty><Anything>goes</Anything></Avlbty>",
    )
    assert Schema.default().validate(etree.fromstring(document)).is_valid is True


def test_branch_out_of_order_is_rejected():
    document = VALID_XML.replace(b"<Tp><CdOrPrtry>", b"<Avlbty/><Tp><CdOrPrtry>")
    report = Schema.default().validate(etree.fromstring(document))
    assert report.is_valid is False
    assert any("Avlbty" in err for err in report.errors)


@pytest.mark.parametrize(
    "content",
    [
        b"<Document><NotASchema/></Document>",
        b"this is not XML at all",
    ],
)
def test_unusable_xsd_raises_schema_load_error(tmp_path, content):
    xsd_path = tmp_path / "broken.xsd"
    xsd_path.write_bytes(content)

    with pytest.raises(SchemaLoadError) as exc:
        Schema(str(xsd_path))
    assert exc.value.xsd_path == str(xsd_path)
    assert "broken.xsd" in str(exc.value)
    assert isinstance(exc.value, Camt053Error)


def test_missing_xsd_raises_os_error(tmp_path):
    with pytest.raises(OSError):
        Schema(str(tmp_path / "missing.xsd"))
