# =============================================================================
# SALES ORDERS v1.0 - UTILS PACKAGE
# =============================================================================
#   utils/dates.py       - parse_datetime, is_valid_date, month_bucket
#   utils/response.py    - success_response, error_response, pagination
#   utils/db_helpers.py  - rows_to_dicts, row_to_dict, prefixed
# =============================================================================

from .dates import (
    parse_datetime,
    is_valid_date,
    month_bucket,
)

from .response import (
    success_response,
    error_response,
    total_pages,
    pagination,
)

from .db_helpers import (
    rows_to_dicts,
    row_to_dict,
    prefixed,
)


__all__ = [
    # Dates
    'parse_datetime',
    'is_valid_date',
    'month_bucket',
    # Response
    'success_response',
    'error_response',
    'total_pages',
    'pagination',
    # DB helpers
    'rows_to_dicts',
    'row_to_dict',
    'prefixed',
]
