# =============================================================================
# CREMERIA v1.0
# =============================================================================
# Gestion de pedidos de un distribuidor mayorista de lacteos:
# precios por cliente, ciclo de vida del pedido por roles (cliente, bodegas,
# vendedor, admin) y exportacion CSV a Punto Zero.
# =============================================================================

__version__ = "1.0.0"
