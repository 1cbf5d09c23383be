# =============================================================================
# CREMERIA v1.0 - CATALOG PARSING
# =============================================================================
# Normalizacion de valores de filas CSV del catalogo con fallbacks
# documentados (categoria, unidad, bodega, importes, booleanos)
# =============================================================================

from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from ...models import Category, Unit, WarehouseType
from ...utils.conversions import parse_bool, parse_decimal, parse_int


PRICE_LIST_FIELDS = [f'price_list_{n}' for n in range(1, 6)]

# Columnas de la plantilla de importacion (en orden)
TEMPLATE_COLUMNS = [
    'sku',
    'name',
    'category',
    'unit',
    'wholesale_price',
    *PRICE_LIST_FIELDS,
    'warehouse_type',
    'has_final_measurement',
    'final_measurement_unit',
    'is_master_product',
    'master_product_id',
    'variant_name',
    'variant_order',
    'is_active',
]

REQUIRED_COLUMNS = ['sku', 'name', 'category', 'unit', 'wholesale_price']


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_header(name: str) -> str:
    """' Wholesale_Price ' -> 'wholesale_price' (quita BOM de Excel)."""
    return (name or '').replace('\ufeff', '').strip().lower()


def normalize_enum(value: Any, enum_cls, default):
    """Valor del enum si es valido, si no el default."""
    text = (_text(value) or '').lower()
    try:
        return enum_cls(text).value
    except ValueError:
        return default.value


def parse_product_row(row: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Convierte una fila CSV en registro de producto.

    Fallbacks:
    - category desconocida -> otros
    - unit desconocida -> pieza
    - warehouse_type desconocido -> secos
    - price_list_N no numerico -> None
    - is_active vacio -> True

    Returns:
        (registro, None) o (None, motivo) si la fila se descarta
    """
    sku = _text(row.get('sku'))
    name = _text(row.get('name'))
    if not sku or not name:
        return None, "SKU y nombre son requeridos"

    wholesale_price = parse_decimal(row.get('wholesale_price'))
    if wholesale_price is None or wholesale_price < 0:
        return None, f"Precio de mayoreo no valido para {sku.upper()}"

    is_master = parse_bool(row.get('is_master_product'), False)
    master_product_id = _text(row.get('master_product_id'))
    variant_name = _text(row.get('variant_name'))
    if is_master and master_product_id:
        return None, f"{sku.upper()}: un producto no puede ser maestro y variante"
    if master_product_id and not variant_name:
        return None, f"{sku.upper()}: la variante requiere variant_name"

    has_final_measurement = parse_bool(row.get('has_final_measurement'), False)

    record = {
        'sku': sku.upper(),
        'name': name,
        'category': normalize_enum(row.get('category'), Category, Category.OTROS),
        'unit': normalize_enum(row.get('unit'), Unit, Unit.PIEZA),
        'wholesale_price': wholesale_price,
        'warehouse_type': normalize_enum(row.get('warehouse_type'), WarehouseType, WarehouseType.SECOS),
        'has_final_measurement': has_final_measurement,
        'final_measurement_unit': _text(row.get('final_measurement_unit')) if has_final_measurement else None,
        'is_master_product': is_master,
        'master_product_id': master_product_id,
        'variant_name': variant_name,
        'variant_order': parse_int(row.get('variant_order'), 0),
        'is_active': parse_bool(row.get('is_active'), True),
        'is_on_offer': False,
    }
    for field in PRICE_LIST_FIELDS:
        price = parse_decimal(row.get(field))
        record[field] = price if price is not None and price >= 0 else None
    return record, None


def missing_columns(headers: List[str]) -> List[str]:
    """Columnas obligatorias ausentes en el encabezado."""
    present = {normalize_header(h) for h in headers}
    return [col for col in REQUIRED_COLUMNS if col not in present]


def format_template_value(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    return str(value)
