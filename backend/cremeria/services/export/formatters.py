# =============================================================================
# CREMERIA v1.0 - EXPORT FORMATTERS
# =============================================================================
# Formato de campos CSV para Punto Zero: escape RFC-4180, fechas, importes
# =============================================================================

from datetime import datetime
from decimal import Decimal
from typing import Any, List

from ...config import config
from ...utils.conversions import to_local, utc_now


# Caracteres que obligan a entrecomillar un campo
CSV_SPECIAL_CHARS = (',', '"', '\n', '\r')


def escape_csv_field(value: Any) -> str:
    """
    Escapa un campo CSV.

    Un campo con coma o comillas se entrecomilla y las comillas se duplican.
    None -> ''
    """
    if value is None:
        return ''
    text = value if isinstance(value, str) else str(value)
    if any(char in text for char in CSV_SPECIAL_CHARS):
        return '"' + text.replace('"', '""') + '"'
    return text


def parse_csv_line(line: str) -> List[str]:
    """
    Separa una linea CSV en campos (inverso de escape_csv_field).

    Respeta comas y comillas duplicadas dentro de campos entrecomillados.
    """
    fields = []
    current = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if in_quotes:
            if char == '"':
                if i + 1 < len(line) and line[i + 1] == '"':
                    current.append('"')
                    i += 1
                else:
                    in_quotes = False
            else:
                current.append(char)
        elif char == '"':
            in_quotes = True
        elif char == ',':
            fields.append(''.join(current))
            current = []
        else:
            current.append(char)
        i += 1
    fields.append(''.join(current))
    return fields


def format_date(value: datetime) -> str:
    """Fecha de pedido en formato dd/MM/yyyy HH:mm (zona horaria local)."""
    if value is None:
        return ''
    return to_local(value).strftime('%d/%m/%Y %H:%M')


def format_money(value: Decimal) -> str:
    """Importe con 2 decimales."""
    return f"{(value or Decimal('0')):.2f}"


def format_quantity(value: Decimal) -> str:
    """Cantidad sin ceros sobrantes: 3.000 -> 3, 0.850 -> 0.85."""
    if value is None:
        return ''
    normalized = value.normalize()
    # normalize() puede producir exponente (1E+1)
    return f"{normalized:f}"


def export_filename(now: datetime = None) -> str:
    """pedidos_punto_zero_<yyyyMMdd_HHmm>.csv"""
    now = to_local(now or utc_now())
    return f"{config.EXPORT_FILENAME_PREFIX}_{now.strftime('%Y%m%d_%H%M')}.csv"
