# =============================================================================
# CREMERIA v1.0 - ORDERS REPOSITORY
# =============================================================================
# Repository para pedidos (cabecera) y lineas de pedido
# =============================================================================

from typing import Any, Dict, Iterable, List

from ..tables import ORDERS, ORDER_LINES
from .base import EntityRepository


class OrdersRepository(EntityRepository):
    """Repository para orders."""

    def __init__(self):
        super().__init__('orders', ORDERS)

    def list_by_client(self, client_id: str, limit: int = None) -> List[Dict[str, Any]]:
        """Pedidos de un cliente, mas recientes primero."""
        return self.filter({'client_id': client_id}, sort='-created_date', limit=limit)

    def list_history(self, client_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        """Historial del cliente excluyendo pedidos cancelados."""
        return self.filter(
            {'client_id': client_id, 'status': {'$ne': 'cancelado'}},
            sort='-created_date',
            limit=limit
        )


class OrderLinesRepository(EntityRepository):
    """Repository para order_lines."""

    def __init__(self):
        super().__init__('order_lines', ORDER_LINES, default_sort='created_date')

    def list_by_order(self, order_id: str) -> List[Dict[str, Any]]:
        """Lineas de un pedido en orden de captura."""
        return self.filter({'order_id': order_id})

    def list_by_orders(self, order_ids: Iterable[str]) -> List[Dict[str, Any]]:
        """Lineas de varios pedidos."""
        return self.filter({'order_id': {'$in': list(order_ids)}})


# Instancias singleton
orders_repository = OrdersRepository()
order_lines_repository = OrderLinesRepository()
