# =============================================================================
# CREMERIA v1.0 - REPOSITORIES PACKAGE
# =============================================================================
# Estructura:
#   - base.py: EntityRepository (list/filter/create/bulk_create/update)
#   - catalog.py: ProductsRepository, ClientsRepository
#   - users.py: UsersRepository, SessionsRepository
#   - orders.py: OrdersRepository, OrderLinesRepository
# =============================================================================

from .base import EntityRepository

from .catalog import (
    ProductsRepository,
    ClientsRepository,
    products_repository,
    clients_repository,
)

from .users import (
    UsersRepository,
    SessionsRepository,
    users_repository,
    sessions_repository,
)

from .orders import (
    OrdersRepository,
    OrderLinesRepository,
    orders_repository,
    order_lines_repository,
)


__all__ = [
    'EntityRepository',
    'ProductsRepository',
    'ClientsRepository',
    'products_repository',
    'clients_repository',
    'UsersRepository',
    'SessionsRepository',
    'users_repository',
    'sessions_repository',
    'OrdersRepository',
    'OrderLinesRepository',
    'orders_repository',
    'order_lines_repository',
]
