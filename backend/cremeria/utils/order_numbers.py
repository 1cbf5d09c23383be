# =============================================================================
# CREMERIA v1.0 - UTILS/ORDER NUMBERS
# =============================================================================
# Generacion del numero de pedido PED-<timestamp base36>
# =============================================================================

from datetime import datetime
from typing import Any, Dict

from .conversions import utc_now


ORDER_NUMBER_PREFIX = "PED-"
BASE36_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def to_base36(number: int) -> str:
    """Codifica un entero no negativo en base 36 (mayusculas)."""
    if number < 0:
        raise ValueError("number must be non-negative")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_DIGITS[remainder])
    return ''.join(reversed(digits))


def generate_order_number(now: datetime = None) -> str:
    """
    Genera el numero de pedido a partir del timestamp en milisegundos.

    No se verifica unicidad.
    """
    now = now or utc_now()
    millis = int(now.timestamp() * 1000)
    return f"{ORDER_NUMBER_PREFIX}{to_base36(millis)}"


def order_number_label(order: Dict[str, Any]) -> str:
    """Numero de pedido o, si falta, ultimos 6 caracteres del id en mayusculas."""
    if order.get('order_number'):
        return order['order_number']
    return str(order.get('id') or '')[-6:].upper()
