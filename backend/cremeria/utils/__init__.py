# =============================================================================
# CREMERIA v1.0 - UTILS PACKAGE
# =============================================================================
#   utils/conversions.py   - to_decimal, parse_decimal, parse_bool, utc_now
#   utils/order_numbers.py - generate_order_number, order_number_label
#   utils/response.py      - success_response, batch_result
# =============================================================================

from .conversions import (
    utc_now,
    to_decimal,
    parse_decimal,
    parse_bool,
    parse_int,
    parse_timestamp,
)

from .order_numbers import (
    to_base36,
    generate_order_number,
    order_number_label,
)

from .response import (
    success_response,
    batch_result,
)

__all__ = [
    'utc_now',
    'to_decimal',
    'parse_decimal',
    'parse_bool',
    'parse_int',
    'parse_timestamp',
    'to_base36',
    'generate_order_number',
    'order_number_label',
    'success_response',
    'batch_result',
]
