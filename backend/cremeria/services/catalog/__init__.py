# =============================================================================
# CREMERIA v1.0 - CATALOG SERVICE PACKAGE
# =============================================================================
#   catalog/parsing.py    - normalizacion de filas CSV, columnas plantilla
#   catalog/import_csv.py - importacion por lotes, plantilla descargable
#   catalog/commands.py   - alta/edicion de productos y clientes, listados
# =============================================================================

from .parsing import (
    TEMPLATE_COLUMNS,
    REQUIRED_COLUMNS,
    parse_product_row,
    missing_columns,
)

from .import_csv import (
    products_template_csv,
    read_product_rows,
    import_products_csv,
)

from .commands import (
    validate_product,
    create_product,
    update_product,
    deactivate_product,
    list_products,
    list_product_groups,
    validate_client,
    list_clients,
    create_client,
    update_client,
)

__all__ = [
    'TEMPLATE_COLUMNS',
    'REQUIRED_COLUMNS',
    'parse_product_row',
    'missing_columns',
    'products_template_csv',
    'read_product_rows',
    'import_products_csv',
    'validate_product',
    'create_product',
    'update_product',
    'deactivate_product',
    'list_products',
    'list_product_groups',
    'validate_client',
    'list_clients',
    'create_client',
    'update_client',
]
