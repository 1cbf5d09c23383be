# =============================================================================
# CREMERIA v1.0 - UTILS/CONVERSIONS
# =============================================================================
# Parsing y conversion de numeros, booleanos y fechas
# =============================================================================

import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
from zoneinfo import ZoneInfo

from ..config import config


TRUE_VALUES = {'true', '1', 'si', 'sí', 'yes', 'y', 'x'}
FALSE_VALUES = {'false', '0', 'no', 'n'}


def utc_now() -> datetime:
    """Timestamp actual en UTC (aware)."""
    return datetime.now(timezone.utc)


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convierte un valor almacenado (str, int, float, Decimal) en Decimal.

    None y cadenas vacias se devuelven como None.
    """
    if value is None or value == '':
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


def parse_decimal(value: str) -> Optional[Decimal]:
    """
    Convierte texto capturado por usuarios en Decimal.

    Gestiona:
    - Simbolo $ y MXN
    - Coma como separador de miles (1,234.56)
    - Coma decimal cuando no hay punto (12,5)

    Returns:
        Decimal o None si el valor esta vacio o no es numerico
    """
    if value is None:
        return None

    value = str(value).strip()
    value = value.replace('$', '').replace('MXN', '').replace(' ', '')
    value = re.sub(r'[^\d,.\-]', '', value)

    if not value:
        return None

    if ',' in value and '.' in value:
        # 1,234.56
        value = value.replace(',', '')
    elif ',' in value:
        # 1,234 (miles) o 12,5 (decimal)
        head, _, tail = value.rpartition(',')
        value = value.replace(',', '') if len(tail) == 3 else f"{head.replace(',', '')}.{tail}"

    try:
        return Decimal(value)
    except InvalidOperation:
        return None


def parse_bool(value: Any, default: bool = False) -> bool:
    """Interpreta true/false/1/0/si/no; valores desconocidos usan default."""
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    return default


def parse_int(value: Any, default: int = 0) -> int:
    """Convierte a entero; valores vacios o invalidos usan default."""
    if value is None or str(value).strip() == '':
        return default
    try:
        return int(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError):
        return default


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Convierte un timestamp ISO (SQLite) o datetime (PostgreSQL) a datetime."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def to_local(value: datetime) -> datetime:
    """Convierte un timestamp aware a la zona horaria configurada."""
    if value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(config.TIMEZONE))
