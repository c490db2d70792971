# =============================================================================
# SALES ORDERS v1.0 - ORDER NUMBERING
# =============================================================================
# Order number format: ORD + YY + MM + DD + NNNN
#   ORD2403150001 = first order of 15/03/2024
#
# The sequence restarts every calendar day. Allocation is done by the store
# with an atomic per-day counter in the same transaction as the insert;
# next_order_number() only computes the successor of an existing number and
# is used to seed a day's counter from data already present.
# =============================================================================

import re
from datetime import date, datetime
from typing import Iterable, Optional, Union

from ...exceptions import OrderNumberExhaustedError


ORDER_NUMBER_PREFIX = 'ORD'
SEQUENCE_DIGITS = 4
MAX_SEQUENCE = 10 ** SEQUENCE_DIGITS - 1

ORDER_NUMBER_PATTERN = re.compile(r'^ORD\d{10}$')


def day_prefix(day: Union[date, datetime]) -> str:
    """
    Prefix shared by all order numbers of a day.

    Args:
        day: Creation date

    Returns:
        "ORD" + YY + MM + DD
    """
    return f"{ORDER_NUMBER_PREFIX}{day:%y%m%d}"


def format_order_number(day: Union[date, datetime], sequence: int) -> str:
    """
    Build the order number for a day and sequence.

    Raises:
        OrderNumberExhaustedError: sequence does not fit in 4 digits
    """
    if sequence < 1 or sequence > MAX_SEQUENCE:
        raise OrderNumberExhaustedError(
            extra={'prefix': day_prefix(day), 'sequence': sequence}
        )
    return f"{day_prefix(day)}{sequence:0{SEQUENCE_DIGITS}d}"


def parse_sequence(order_number: str) -> int:
    """Trailing 4-digit sequence of an order number."""
    return int(order_number[-SEQUENCE_DIGITS:])


def is_valid_order_number(order_number: str) -> bool:
    return bool(order_number) and ORDER_NUMBER_PATTERN.match(order_number) is not None


def last_sequence(order_numbers: Iterable[str], prefix: str) -> int:
    """
    Highest sequence among the numbers carrying a day prefix.

    Returns:
        0 when the day has no orders yet
    """
    matching = [n for n in order_numbers if n and n.startswith(prefix)]
    if not matching:
        return 0
    return parse_sequence(max(matching))


def next_order_number(day: Union[date, datetime], last_order_number: Optional[str]) -> str:
    """
    Successor of the greatest existing number of the day.

    Args:
        day: Creation date
        last_order_number: Lexicographically greatest number with the day
            prefix, or None if the day has none

    Returns:
        Next order number ("...0001" for the first of the day)
    """
    if not last_order_number:
        return format_order_number(day, 1)
    return format_order_number(day, parse_sequence(last_order_number) + 1)
