# =============================================================================
# CREMERIA v1.0 - ROUTERS PACKAGE
# =============================================================================

from . import orders
from . import products
from . import clients
from . import users
from . import export
from . import dashboard

__all__ = [
    'orders',
    'products',
    'clients',
    'users',
    'export',
    'dashboard',
]
