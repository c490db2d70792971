# =============================================================================
# SALES ORDERS v1.0 - ORDER NUMBERING TESTS
# =============================================================================
# Unit tests for order number format and sequence helpers
# =============================================================================

import pytest
from datetime import date, datetime

from salesorders.exceptions import OrderNumberExhaustedError
from salesorders.services.orders.numbering import (
    MAX_SEQUENCE,
    day_prefix,
    format_order_number,
    is_valid_order_number,
    last_sequence,
    next_order_number,
    parse_sequence,
)

pytestmark = pytest.mark.unit


class TestFormat:
    """Test ORD + YYMMDD + NNNN format."""

    def test_day_prefix(self):
        """Two-digit year, month, day."""
        assert day_prefix(date(2024, 3, 15)) == "ORD240315"
        assert day_prefix(datetime(2009, 1, 2, 23, 59)) == "ORD090102"

    def test_format_pads_sequence(self):
        """Sequence is zero-padded to four digits."""
        assert format_order_number(date(2024, 3, 15), 1) == "ORD2403150001"
        assert format_order_number(date(2024, 3, 15), 42) == "ORD2403150042"
        assert format_order_number(date(2024, 3, 15), 9999) == "ORD2403159999"

    @pytest.mark.parametrize("sequence", [0, MAX_SEQUENCE + 1])
    def test_out_of_range_sequence(self, sequence):
        """Sequences outside 1..9999 cannot be formatted."""
        with pytest.raises(OrderNumberExhaustedError):
            format_order_number(date(2024, 3, 15), sequence)

    def test_parse_sequence(self):
        """Trailing four digits."""
        assert parse_sequence("ORD2403150123") == 123

    @pytest.mark.parametrize("value,expected", [
        ("ORD2403150001", True),
        ("ORD240315001", False),
        ("ord2403150001", False),
        ("XYZ2403150001", False),
        ("", False),
        (None, False),
    ])
    def test_is_valid_order_number(self, value, expected):
        """Matches ORD followed by ten digits."""
        assert is_valid_order_number(value) is expected


class TestSequence:
    """Test successor computation."""

    def test_first_of_the_day(self):
        """No previous number starts at 0001."""
        assert next_order_number(date(2024, 3, 15), None) == "ORD2403150001"

    def test_successor(self):
        """Last number + 1."""
        assert next_order_number(date(2024, 3, 15), "ORD2403150007") == "ORD2403150008"

    def test_last_sequence_ignores_other_days(self):
        """Only numbers with the day prefix count."""
        numbers = ["ORD2403140099", "ORD2403150003", "ORD2403150011", None]

        assert last_sequence(numbers, "ORD240315") == 11
        assert last_sequence(numbers, "ORD240316") == 0

    def test_exhausted_day(self):
        """No successor after 9999."""
        with pytest.raises(OrderNumberExhaustedError):
            next_order_number(date(2024, 3, 15), "ORD2403159999")
