# =============================================================================
# CREMERIA v1.0 - SERVICES PACKAGE
# =============================================================================
#   services/pricing/ - precio por cliente, ofertas, variantes
#   services/orders/  - maquina de estados, surtido, totales, consultas
#   services/export/  - CSV Punto Zero
#   services/catalog/ - productos, clientes, importacion CSV
#   services/users/   - roles y asignaciones
# =============================================================================
