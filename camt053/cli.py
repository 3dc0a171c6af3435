import argparse
import logging
import sys

from camt053.exceptions import Camt053Error
from camt053.message import Message
from camt053.schema import DEFAULT_XSD_PATH, Schema


def _load(args) -> Message:
    schema = Schema(args.schema) if args.schema != DEFAULT_XSD_PATH else None
    return Message.from_file(args.file, schema)


def handle_parse(args):
    """Handles the 'parse' subcommand: Outputs the decoded statements as JSON."""
    from camt053.integrations.pydantic import from_message

    message = _load(args)
    print(from_message(message).model_dump_json(indent=2))


def handle_validate(args):
    """Handles the 'validate' subcommand: Schema check followed by a full decode."""
    message = _load(args)
    statements = message.get_statements()
    entries = sum(len(s.entries) for s in statements)
    print(
        f"Validation Successful: {len(statements)} statement(s), {entries} entry(ies) "
        f"in message {message.get_group_header().message_id}."
    )


def handle_entries(args):
    """Handles the 'entries' subcommand: One tab separated line per entry."""
    message = _load(args)
    for entry in message.get_entries():
        booking_date = entry.booking_date.date().isoformat() if entry.booking_date else ""
        value_date = entry.value_date.date().isoformat() if entry.value_date else ""
        remittance = ""
        for detail in entry.transaction_details:
            if detail.remittance_information:
                remittance = detail.remittance_information.unstructured
                break
        print(
            "\t".join(
                [booking_date, value_date, str(entry.amount.amount), entry.amount.currency.code, remittance]
            )
        )


def handle_persist(args):
    """Handles the 'persist' subcommand: Saves the statements to a database."""
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker

    from camt053.database.repository import StatementRepository

    message = _load(args)

    engine = create_engine(args.db_url)
    StatementRepository.create_schema(engine)
    Session = sessionmaker(bind=engine)

    with Session() as session:
        repo = StatementRepository(session)
        records = repo.save_message(message)
        session.commit()
        print(
            f"Successfully persisted {len(records)} statement(s) of message "
            f"{message.get_group_header().message_id} to database."
        )


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="camt053",
        description="Decode ISO 20022 camt.053 bank statements.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--schema", default=DEFAULT_XSD_PATH, help="Path to the camt.053.001.02 XSD to validate against."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Subcommand: parse
    parse_parser = subparsers.add_parser("parse", help="Decode a file and output JSON.")
    parse_parser.add_argument("file", help="Path to the camt.053 XML file.")
    parse_parser.set_defaults(func=handle_parse)

    # Subcommand: validate
    validate_parser = subparsers.add_parser("validate", help="Validate and decode a file.")
    validate_parser.add_argument("file", help="Path to the file to validate.")
    validate_parser.set_defaults(func=handle_validate)

    # Subcommand: entries
    entries_parser = subparsers.add_parser("entries", help="List all entries across statements.")
    entries_parser.add_argument("file", help="Path to the camt.053 XML file.")
    entries_parser.set_defaults(func=handle_entries)

    # Subcommand: persist
    persist_parser = subparsers.add_parser("persist", help="Decode and save a file to a database.")
    persist_parser.add_argument("file", help="Path to the file to persist.")
    persist_parser.add_argument("--db-url", required=True, help="SQLAlchemy database URL (e.g. sqlite:///test.db).")
    persist_parser.set_defaults(func=handle_persist)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        args.func(args)
    except (Camt053Error, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
