"""
Batch Driver Module

Reads transaction records from CSV, replays them through a PaymentEngine and
writes the final account snapshot as CSV.
"""

import csv
from typing import IO, Iterable, Iterator, Optional

from .accounts import Account
from .engine import PaymentEngine
from .errors import MalformedRecord, TransactionError, TransactionNotFound
from .logging_config import get_logger, log_action
from .records import IncomingRecord, parse_record

OUTPUT_FIELDS = ["client", "available", "held", "total", "locked"]

logger = get_logger("payment_engine.batch")


def read_records(stream: IO[str], strict: bool = False) -> Iterator[IncomingRecord]:
    """
    Yield validated records from a CSV stream with a type,client,tx,amount header

    Malformed rows are logged and skipped, or raise MalformedRecord when
    strict is set.
    """
    reader = csv.DictReader(stream, skipinitialspace=True)
    # DictReader already skips empty lines; any other row is validated
    for row in reader:
        try:
            yield parse_record(row, line=reader.line_num)
        except MalformedRecord as e:
            if strict:
                raise
            log_action(
                logger, "warning", f"Skipping malformed record: {e}",
                action="skip_record", resource=f"line:{reader.line_num}"
            )


def write_accounts(accounts: Iterable[Account], stream: IO[str]) -> None:
    """Write one CSV row per account"""
    writer = csv.DictWriter(stream, fieldnames=OUTPUT_FIELDS, lineterminator="\n")
    writer.writeheader()
    for account in accounts:
        writer.writerow(account.to_dict())


def apply_records(engine: PaymentEngine, records: Iterable[IncomingRecord]) -> int:
    """
    Apply records in order, discarding those that reference unknown transactions

    Returns:
        Number of records applied

    Raises:
        TransactionError: The first rejection other than TransactionNotFound
    """
    applied = 0
    for record in records:
        try:
            engine.process(record)
        except TransactionNotFound as e:
            log_action(
                logger, "info", f"Ignoring record: {e}",
                action=record.type, resource=f"tx:{record.tx}"
            )
            continue
        except TransactionError as e:
            log_action(
                logger, "error", f"Aborting run: {e}",
                action=record.type, resource=f"tx:{record.tx}",
                extra={"client": record.client, "error": type(e).__name__, "applied": applied}
            )
            raise
        applied += 1
    return applied


def run(input_stream: IO[str], output_stream: IO[str], strict: bool = False,
        engine: Optional[PaymentEngine] = None) -> PaymentEngine:
    """
    Replay a CSV record stream and write the final accounts

    Nothing is written to output_stream if the run aborts.

    Args:
        input_stream: CSV input
        output_stream: Destination for the account CSV
        strict: Abort on malformed rows instead of skipping them
        engine: Engine to apply records to (a fresh one by default)

    Returns:
        The engine holding the final state
    """
    if engine is None:
        engine = PaymentEngine()

    applied = apply_records(engine, read_records(input_stream, strict=strict))
    write_accounts(engine.accounts, output_stream)

    log_action(
        logger, "info", "Run complete", action="run",
        extra={"applied": applied, "accounts": len(engine.accounts), "transactions": len(engine.ledger)}
    )
    return engine
