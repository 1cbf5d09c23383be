# =============================================================================
# CREMERIA v1.0 - EXPORT SERVICE PACKAGE
# =============================================================================
#   export/formatters.py - escape/parse CSV, fechas, importes, nombre archivo
#   export/generator.py  - filas de pedidos listo_captura y CSV final
# =============================================================================

from .formatters import (
    escape_csv_field,
    parse_csv_line,
    format_date,
    format_money,
    format_quantity,
    export_filename,
)

from .generator import (
    EXPORT_COLUMNS,
    ExportRow,
    export_quantity,
    export_rows,
    render_csv,
    generate_export,
)

__all__ = [
    'escape_csv_field',
    'parse_csv_line',
    'format_date',
    'format_money',
    'format_quantity',
    'export_filename',
    'EXPORT_COLUMNS',
    'ExportRow',
    'export_quantity',
    'export_rows',
    'render_csv',
    'generate_export',
]
