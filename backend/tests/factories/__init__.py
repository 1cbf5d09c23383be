# =============================================================================
# CREMERIA v1.0 - TEST FACTORIES
# =============================================================================
# Factory Boy factories para datos de test
# =============================================================================

from .catalog import ProductFactory, ClientFactory
from .orders import OrderFactory, OrderLineFactory
from .users import UserFactory

__all__ = [
    "ProductFactory",
    "ClientFactory",
    "OrderFactory",
    "OrderLineFactory",
    "UserFactory",
]
