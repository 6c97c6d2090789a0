import argparse
import logging
import sys
from decimal import Decimal
from typing import Dict, Optional, Sequence, TextIO

from errors import StreamError
from models import ClientAccount
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)

REPORT_HEADER = "client,available,held,total,locked"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payments-ledger",
        description="Process a CSV of transactions and print the final client balances.",
    )
    parser.add_argument("filepath", help="CSV file to process")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print rejected transactions to stderr.",
    )
    parser.add_argument(
        "--partial-report",
        action="store_true",
        help="Print balances accumulated so far even if the input can't be read to the end.",
    )
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def format_decimal(value: Decimal) -> str:
    """Format decimal with up to 4 decimal places, removing trailing zeros."""
    formatted = f"{value:.4f}".rstrip("0").rstrip(".")
    # Tiny negatives round to "-0"
    return "0" if formatted == "-0" else formatted


def write_report(accounts: Dict[int, ClientAccount], out: Optional[TextIO] = None) -> None:
    """Write the balance report as CSV, sorted by client id. Defaults to stdout."""
    print(REPORT_HEADER, file=out)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        print(
            f"{client_id},"
            f"{format_decimal(account.available)},"
            f"{format_decimal(account.held)},"
            f"{format_decimal(account.total)},"
            f"{str(account.locked).lower()}",
            file=out,
        )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    engine = PaymentsEngine(verbose=args.verbose)
    try:
        accounts = engine.process_file(args.filepath)
    except StreamError as e:
        logger.error(f"{e}")
        if args.partial_report:
            write_report(engine.accounts)
        return 1

    write_report(accounts)
    return 0


if __name__ == "__main__":
    sys.exit(main())
