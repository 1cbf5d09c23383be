# =============================================================================
# CREMERIA v1.0 - PERSISTENCE PACKAGE
# =============================================================================
#   persistence/tables.py         - Columnas y tipos de cada entidad
#   persistence/repositories/     - Almacen de entidades (repository pattern)
#
# NOTA: sin imports aqui, database.py importa tables.py
# =============================================================================
