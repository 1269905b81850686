"""Statement line parser.

A transaction line on an exported statement reads::

    7/19/2024 Islandadv.Whalewatch Purchase $274.18 $274.18 7/20/2024

that is ``<date> <description> <type> <amount> <net amount> <settle date>``. The description
is matched lazily so the fixed trailing fields anchor the line even when the description
contains spaces or punctuation. Anything that does not match the whole grammar (headers,
footers, page breaks, balance summaries) is not a transaction line.
"""

import re
from collections.abc import Iterable, Iterator
from datetime import datetime

from chime_ai.core.exceptions import LineParseError
from chime_ai.core.models import Transaction, TransactionType

DATE_FORMAT = "%m/%d/%Y"

_DATE = r"\d{1,2}/\d{1,2}/\d{4}"
_AMOUNT = r"-?\$\d+\.\d{2}"
_TYPES = "|".join(re.escape(t.value) for t in TransactionType)

TRANSACTION_LINE = re.compile(
    rf"^({_DATE})\s+(.*?)\s+({_TYPES})\s+({_AMOUNT})\s+({_AMOUNT})\s+({_DATE})$",
)


def parse_date(value: str) -> datetime:
    """Parse a statement date (M/D/YYYY) into a midnight datetime."""
    try:
        return datetime.strptime(value, DATE_FORMAT)
    except ValueError as exc:
        msg = f"Invalid date '{value}': {exc}"
        raise LineParseError(msg) from exc


def parse_amount(value: str) -> float:
    """Parse a statement amount such as ``-$10.00`` into a signed float."""
    try:
        return float(value.replace("$", ""))
    except ValueError as exc:
        msg = f"Invalid amount '{value}': {exc}"
        raise LineParseError(msg) from exc


def parse_line(line: str) -> Transaction | None:
    """Parse one statement line.

    Returns None when the line is not a transaction line. Raises LineParseError when the
    line has the shape of a transaction but a date or amount cannot be converted; no
    partial transaction is ever returned.
    """
    match = TRANSACTION_LINE.match(line.strip())
    if match is None:
        return None
    date_str, description, txn_type, amount, net_amount, settle_str = match.groups()
    return Transaction(
        date=parse_date(date_str),
        description=description.strip(),
        type=TransactionType(txn_type).value,
        amount=parse_amount(amount),
        net_amount=parse_amount(net_amount),
        settle_date=parse_date(settle_str),
    )


def iter_transactions(lines: Iterable[str]) -> Iterator[tuple[int, Transaction | None, LineParseError | None]]:
    """Yield ``(line_number, transaction, error)`` for every transaction-shaped line.

    Lines that are not transaction lines are skipped silently. Exactly one of
    ``transaction`` and ``error`` is set for each yielded line.
    """
    for number, line in enumerate(lines, start=1):
        try:
            txn = parse_line(line)
        except LineParseError as exc:
            yield number, None, exc
            continue
        if txn is not None:
            yield number, txn, None
