# =============================================================================
# CREMERIA v1.0 - CATALOG CSV IMPORT
# =============================================================================
# Importacion determinista del catalogo desde CSV (plantilla de columnas fija)
# con escritura por lotes. Un lote fallido se cuenta y se continua.
# =============================================================================

import csv
import io
import logging
from decimal import Decimal
from typing import Any, Dict, List, Union

from ...config import config
from ...database import DB_ERRORS, log_operation, transaction
from ...exceptions import ImportFormatError
from ...persistence.repositories import products_repository
from ...utils.response import batch_result
from .parsing import (
    TEMPLATE_COLUMNS,
    format_template_value,
    missing_columns,
    normalize_header,
    parse_product_row,
)


logger = logging.getLogger(__name__)


# Filas de ejemplo de la plantilla descargable
TEMPLATE_EXAMPLES = [
    {
        'sku': 'QSO001', 'name': 'Queso Oaxaca 1kg', 'category': 'quesos', 'unit': 'kg',
        'wholesale_price': Decimal('145.00'), 'warehouse_type': 'refrigerados',
        'has_final_measurement': True, 'final_measurement_unit': 'kg',
        'is_master_product': False, 'variant_order': 0, 'is_active': True,
    },
    {
        'sku': 'CRM001', 'name': 'Crema Ácida 1L', 'category': 'cremas', 'unit': 'litro',
        'wholesale_price': Decimal('52.00'), 'warehouse_type': 'refrigerados',
        'has_final_measurement': False, 'is_master_product': False,
        'variant_order': 0, 'is_active': True,
    },
    {
        'sku': 'MNT001', 'name': 'Mantequilla Sin Sal 250g', 'category': 'mantequillas',
        'unit': 'pieza', 'wholesale_price': Decimal('45.00'), 'warehouse_type': 'secos',
        'has_final_measurement': False, 'is_master_product': False,
        'variant_order': 0, 'is_active': True,
    },
]


def products_template_csv() -> str:
    """Plantilla CSV: encabezado + filas de ejemplo."""
    lines = [','.join(TEMPLATE_COLUMNS)]
    for example in TEMPLATE_EXAMPLES:
        lines.append(','.join(format_template_value(example.get(col)) for col in TEMPLATE_COLUMNS))
    return '\n'.join(lines) + '\n'


def _decode(content: Union[bytes, str]) -> str:
    if isinstance(content, str):
        return content
    try:
        return content.decode('utf-8-sig')
    except UnicodeDecodeError:
        return content.decode('latin-1', errors='replace')


def read_product_rows(content: Union[bytes, str]) -> List[Dict[str, Any]]:
    """
    Lee el CSV y devuelve las filas con encabezados normalizados.

    Raises:
        ImportFormatError: archivo vacio o columnas obligatorias faltantes
    """
    text = _decode(content or '').lstrip()
    if not text.strip():
        raise ImportFormatError("El archivo CSV esta vacio")

    # Excel en espanol exporta con ";"
    header = text.splitlines()[0]
    delimiter = ';' if ';' in header and ',' not in header else ','

    # Los campos entrecomillados pueden traer saltos de linea
    reader = csv.DictReader(io.StringIO(text, newline=''), delimiter=delimiter)
    headers = reader.fieldnames or []
    missing = missing_columns(headers)
    if missing:
        raise ImportFormatError(
            f"Columnas obligatorias faltantes: {', '.join(missing)}",
            {"missing_columns": missing, "found_columns": headers}
        )

    return [
        {normalize_header(k): v for k, v in row.items() if k is not None}
        for row in reader
        if any((v or '').strip() for v in row.values() if isinstance(v, str))
    ]


def import_products_csv(content: Union[bytes, str], user_id: str = None) -> Dict[str, Any]:
    """
    Importa productos desde CSV.

    Las filas validas se insertan en lotes de IMPORT_BATCH_SIZE; un lote que
    falla en el almacen se registra y cuenta como fallido sin detener el resto.

    Args:
        content: Contenido del archivo (bytes o texto)
        user_id: Usuario que importa (bitacora)

    Returns:
        batch_result con completados/total/lotes_fallidos/filas_omitidas
    """
    rows = read_product_rows(content)

    records = []
    errors = []
    for row_num, row in enumerate(rows, start=2):
        record, reason = parse_product_row(row)
        if record is None:
            errors.append(f"Fila {row_num}: {reason}")
            continue
        records.append(record)

    batch_size = max(1, config.IMPORT_BATCH_SIZE)
    created = 0
    failed_batches = 0
    for start in range(0, len(records), batch_size):
        batch = records[start:start + batch_size]
        try:
            with transaction():
                created += len(products_repository.bulk_create(batch))
        except DB_ERRORS:
            failed_batches += 1
            logger.exception("Lote de importacion %d-%d fallido", start + 1, start + len(batch))
            errors.append(f"Lote {start + 1}-{start + len(batch)}: error al guardar")

    total = len(rows)
    log_operation(
        'IMPORT_PRODUCTS', 'products', None,
        f"{created} de {total} productos importados",
        {"failed_batches": failed_batches, "skipped_rows": total - len(records)},
        id_usuario=user_id
    )
    logger.info("Import catalogo: %d de %d (lotes fallidos: %d)", created, total, failed_batches)

    return batch_result(
        created, total, errors,
        lotes_fallidos=failed_batches,
        filas_omitidas=total - len(records),
    )
