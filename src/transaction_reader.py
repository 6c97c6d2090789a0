import csv
import logging
import re
from decimal import Decimal, getcontext
from typing import Iterable, Iterator, List, Optional

from errors import DeserializeError, NoRecordsError, ReadRecordError
from models import Transaction, TransactionType

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

ID_PATTERN = re.compile(r"[0-9]+")
AMOUNT_PATTERN = re.compile(r"-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")


def read_transactions(lines: Iterable[str]) -> Iterator[Transaction]:
    """
    Lazily parse CSV lines into Transactions, one row at a time.

    Accepts any iterable of text lines (an open file, a list, a socket wrapper).
    The first row is the `type, client, tx, amount` header and is skipped.

    Raises:
        NoRecordsError: the input has no rows at all
        ReadRecordError: the underlying stream couldn't be read or the CSV is corrupt
        DeserializeError: a row has the wrong shape or an unparseable field
    """
    reader = csv.reader(lines)

    header = _next_row(reader)
    if header is None:
        raise NoRecordsError()
    logger.debug(f"Skipping header {header}")

    while True:
        row = _next_row(reader)
        if row is None:
            return
        if not any(field.strip() for field in row):
            continue
        yield parse_csv_row(row, reader.line_num)


def _next_row(reader) -> Optional[List[str]]:
    try:
        return next(reader)
    except StopIteration:
        return None
    except (csv.Error, UnicodeDecodeError, OSError) as e:
        raise ReadRecordError(reader.line_num, e) from e


def parse_csv_row(row: List[str], line_number: int = 0) -> Transaction:
    """Parse CSV row into Transaction. A 3-field row or an empty amount field means no amount."""
    fields = [field.strip() for field in row]
    if len(fields) not in (3, 4):
        raise DeserializeError(row, line_number, f"expected 4 fields, got {len(fields)}")

    try:
        transaction_type = TransactionType(fields[0].lower())
        client_id = _parse_id(fields[1], MAX_CLIENT_ID, "client")
        transaction_id = _parse_id(fields[2], MAX_TRANSACTION_ID, "tx")

        amount = None
        if len(fields) == 4 and fields[3]:
            amount = _parse_amount(fields[3])
    except ValueError as e:
        raise DeserializeError(row, line_number, str(e)) from e

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(value: str, maximum: int, name: str) -> int:
    if not ID_PATTERN.fullmatch(value):
        raise ValueError(f"invalid {name} {value!r}")
    parsed = int(value)
    if parsed > maximum:
        raise ValueError(f"{name} {parsed} out of range 0..{maximum}")
    return parsed


def _parse_amount(value: str) -> Decimal:
    # Plain decimal notation only: no exponent, sign prefix other than '-', underscores, NaN or infinity
    if not AMOUNT_PATTERN.fullmatch(value):
        raise ValueError(f"invalid amount {value!r}")
    amount = Decimal(value)
    # Longer amounts would be silently rounded by the first balance update
    if len(amount.as_tuple().digits) > getcontext().prec:
        raise ValueError(f"amount {value!r} exceeds {getcontext().prec} significant digits")
    return amount
