# =============================================================================
# CREMERIA v1.0 - CATALOG REPOSITORIES
# =============================================================================
# Repository para productos y clientes
# =============================================================================

from typing import Any, Dict, List, Optional

from ..tables import PRODUCTS, CLIENTS
from .base import EntityRepository


class ProductsRepository(EntityRepository):
    """Repository para products."""

    def __init__(self):
        super().__init__('products', PRODUCTS, default_sort='name')

    def list_active(self) -> List[Dict[str, Any]]:
        """Productos activos ordenados por nombre."""
        return self.filter({'is_active': True}, sort='name')

    def get_by_sku(self, sku: str) -> Optional[Dict[str, Any]]:
        """Producto por SKU (mayusculas)."""
        rows = self.filter({'sku': (sku or '').strip().upper()}, limit=1)
        return rows[0] if rows else None

    def list_offers(self, limit: int = None) -> List[Dict[str, Any]]:
        """Productos activos en oferta con precio de oferta definido."""
        return self.filter(
            {'is_active': True, 'is_on_offer': True, 'offer_price': {'$ne': None}},
            sort='name',
            limit=limit
        )


class ClientsRepository(EntityRepository):
    """Repository para clients."""

    def __init__(self):
        super().__init__('clients', CLIENTS, default_sort='business_name')

    def list_active(self) -> List[Dict[str, Any]]:
        """Clientes activos ordenados por nombre comercial."""
        return self.filter({'is_active': True})


# Instancias singleton
products_repository = ProductsRepository()
clients_repository = ClientsRepository()
