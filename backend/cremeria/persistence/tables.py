# =============================================================================
# CREMERIA v1.0 - DEFINICION TABLAS
# =============================================================================
# Columnas y tipos logicos de cada entidad. Los tipos logicos se traducen
# al tipo SQL del motor (SQLite / PostgreSQL) y guian la (de)serializacion
# en los repositorios.
#
# Tipos: text, int, decimal, bool, json, timestamp
# =============================================================================

from typing import Dict


COMMON_COLUMNS: Dict[str, str] = {
    'id': 'text',
    'created_date': 'timestamp',
}

PRODUCTS: Dict[str, str] = {
    **COMMON_COLUMNS,
    'sku': 'text',
    'name': 'text',
    'description': 'text',
    'category': 'text',
    'unit': 'text',
    'wholesale_price': 'decimal',
    'price_list_1': 'decimal',
    'price_list_2': 'decimal',
    'price_list_3': 'decimal',
    'price_list_4': 'decimal',
    'price_list_5': 'decimal',
    'is_active': 'bool',
    'warehouse_type': 'text',
    'has_final_measurement': 'bool',
    'final_measurement_unit': 'text',
    'is_on_offer': 'bool',
    'offer_price': 'decimal',
    'offer_description': 'text',
    'is_master_product': 'bool',
    'master_product_id': 'text',
    'variant_name': 'text',
    'variant_order': 'int',
}

CLIENTS: Dict[str, str] = {
    **COMMON_COLUMNS,
    'business_name': 'text',
    'legal_name': 'text',
    'rfc': 'text',
    'delivery_address': 'text',
    'phone': 'text',
    'email': 'text',
    'route_zone': 'text',
    'client_type': 'text',
    'assigned_price_list': 'text',
    'is_active': 'bool',
}

USERS: Dict[str, str] = {
    **COMMON_COLUMNS,
    'full_name': 'text',
    'email': 'text',
    'password_hash': 'text',
    'user_role': 'text',
    'assigned_client_id': 'text',
    'assigned_client_name': 'text',
    'assigned_clients': 'json',
    'phone': 'text',
    'is_active': 'bool',
}

ORDERS: Dict[str, str] = {
    **COMMON_COLUMNS,
    'order_number': 'text',
    'client_id': 'text',
    'client_name': 'text',
    'status': 'text',
    'notes': 'text',
    'total_estimated': 'decimal',
    'total_final': 'decimal',
    'created_by': 'text',
}

ORDER_LINES: Dict[str, str] = {
    **COMMON_COLUMNS,
    'order_id': 'text',
    'product_id': 'text',
    'product_sku': 'text',
    'product_name': 'text',
    'unit': 'text',
    'quantity_requested': 'decimal',
    'quantity_requested_unit': 'text',
    'unit_price': 'decimal',
    'subtotal': 'decimal',
    'quantity_fulfilled': 'decimal',
    'final_billed_quantity': 'decimal',
}

USER_SESSIONS: Dict[str, str] = {
    **COMMON_COLUMNS,
    'user_id': 'text',
    'token_hash': 'text',
    'expires_at': 'timestamp',
    'revoked_at': 'timestamp',
}

LOG_OPERACIONES: Dict[str, str] = {
    **COMMON_COLUMNS,
    'tipo_operacion': 'text',
    'entidad': 'text',
    'id_entidad': 'text',
    'descripcion': 'text',
    'datos_json': 'json',
    'id_usuario': 'text',
}

# Orden de creacion (y de borrado inverso)
TABLES: Dict[str, Dict[str, str]] = {
    'products': PRODUCTS,
    'clients': CLIENTS,
    'users': USERS,
    'orders': ORDERS,
    'order_lines': ORDER_LINES,
    'user_sessions': USER_SESSIONS,
    'log_operaciones': LOG_OPERACIONES,
}

# Tipo SQL por motor
SQL_TYPES: Dict[str, Dict[str, str]] = {
    'sqlite': {
        'text': 'TEXT',
        'int': 'INTEGER',
        'decimal': 'TEXT',
        'bool': 'INTEGER',
        'json': 'TEXT',
        'timestamp': 'TEXT',
    },
    'postgresql': {
        'text': 'TEXT',
        'int': 'INTEGER',
        'decimal': 'NUMERIC(14, 4)',
        'bool': 'BOOLEAN',
        'json': 'TEXT',
        'timestamp': 'TIMESTAMPTZ',
    },
}

# Indices secundarios (tabla, columna)
INDEXES = [
    ('products', 'sku'),
    ('products', 'master_product_id'),
    ('users', 'email'),
    ('orders', 'client_id'),
    ('orders', 'status'),
    ('order_lines', 'order_id'),
    ('user_sessions', 'token_hash'),
]


def create_table_sql(table_name: str, db_type: str) -> str:
    """Genera CREATE TABLE IF NOT EXISTS para el motor indicado."""
    types = SQL_TYPES[db_type]
    columns = []
    for column, logical_type in TABLES[table_name].items():
        definition = f"{column} {types[logical_type]}"
        if column == 'id':
            definition += " PRIMARY KEY"
        columns.append(definition)
    return f"CREATE TABLE IF NOT EXISTS {table_name} ({', '.join(columns)})"
