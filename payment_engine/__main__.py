"""
Payment Engine Entry Point

Usage:
    python -m payment_engine transactions.csv > accounts.csv
"""

import argparse
import sys
from typing import List, Optional

from .batch import run
from .config import get_config
from .errors import MalformedRecord, TransactionError
from .logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    cfg = get_config()
    parser = argparse.ArgumentParser(
        prog="payment-engine",
        description="Replay a CSV of transactions and print final client account balances as CSV.",
    )
    parser.add_argument("input", help="Path to the transactions CSV file")
    parser.add_argument(
        "--strict", action="store_true", default=cfg.strict_input,
        help="Abort on malformed rows instead of skipping them",
    )
    parser.add_argument(
        "--log-level", default=cfg.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper, help="Log level (logs go to stderr)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    cfg = get_config()
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, fmt=cfg.log_format, log_file=cfg.log_file)

    try:
        with open(args.input, newline="", encoding=cfg.input_encoding) as f:
            run(f, sys.stdout, strict=args.strict)
    except OSError as e:
        print(f"error: cannot read {args.input}: {e.strerror or e}", file=sys.stderr)
        return 1
    except (TransactionError, MalformedRecord) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except ArithmeticError as e:
        # A balance grew past what an Amount can hold exactly
        print(f"error: balance overflow: {type(e).__name__}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
