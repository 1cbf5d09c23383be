# =============================================================================
# CREMERIA v1.0 - ORDERS QUERIES
# =============================================================================
# Listados por rol, detalle de pedido y estadisticas del panel admin
# =============================================================================

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ...exceptions import OrderNotFoundError
from ...models import Actor, OrderStatus, UserRole, STATUS_LABELS
from ...persistence.repositories import (
    clients_repository,
    order_lines_repository,
    orders_repository,
    products_repository,
)
from ...utils.conversions import to_local
from ...utils.order_numbers import order_number_label
from .fulfillment import has_shortages, lines_for_role
from .states import allowed_actions
from .totals import line_view, order_display_total


# Estados que ve la bodega en su bandeja
WAREHOUSE_QUEUE = [OrderStatus.PENDIENTE_REVISION.value, OrderStatus.EN_SURTIDO.value]


# =============================================================================
# VISIBILIDAD
# =============================================================================

def visibility_predicate(actor: Actor) -> Optional[Dict[str, Any]]:
    """
    Predicado de pedidos visibles para el usuario.

    - cliente: solo los de su cliente
    - bodega_*: pendientes y en surtido
    - vendedor: los de sus clientes asignados (todos si no tiene)
    - admin: todos

    Returns:
        Predicado para el repositorio o None (sin restriccion)
    """
    if actor.role == UserRole.CLIENTE:
        return {'client_id': actor.assigned_client_id}
    if actor.role.is_warehouse:
        return {'status': {'$in': WAREHOUSE_QUEUE}}
    if actor.role == UserRole.VENDEDOR and actor.assigned_client_ids:
        return {'client_id': {'$in': actor.assigned_client_ids}}
    return None


def can_view(actor: Actor, order: Dict[str, Any]) -> bool:
    """True si el pedido es visible para el usuario (detalle)."""
    if actor.role == UserRole.CLIENTE:
        return bool(actor.assigned_client_id) and order.get('client_id') == actor.assigned_client_id
    if actor.role == UserRole.VENDEDOR and actor.assigned_client_ids:
        return order.get('client_id') in actor.assigned_client_ids
    return True


# =============================================================================
# LISTADO
# =============================================================================

def _matches_search(order: Dict[str, Any], search: str) -> bool:
    term = search.strip().lower()
    return (
        term in (order.get('order_number') or '').lower()
        or term in (order.get('client_name') or '').lower()
    )


def _in_date_range(order: Dict[str, Any], date_from: Optional[date], date_to: Optional[date]) -> bool:
    created = order.get('created_date')
    if created is None:
        return date_from is None and date_to is None
    created_day = to_local(created).date()
    if date_from and created_day < date_from:
        return False
    # Fin de rango inclusivo (todo el dia)
    if date_to and created_day > date_to:
        return False
    return True


def list_orders(
    actor: Actor,
    status: Optional[str] = None,
    client_id: Optional[str] = None,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    limit: Optional[int] = None
) -> List[Dict[str, Any]]:
    """
    Pedidos visibles para el usuario, mas recientes primero.

    Args:
        actor: Usuario actual
        status: Filtra por estado
        client_id: Filtra por cliente
        search: Texto en numero de pedido o nombre de cliente
        date_from: Fecha de creacion desde (inclusive)
        date_to: Fecha de creacion hasta (inclusive)
        limit: Maximo de pedidos

    Returns:
        Lista de pedidos con status_label y display_total
    """
    if actor.role == UserRole.CLIENTE and not actor.assigned_client_id:
        return []

    predicate = dict(visibility_predicate(actor) or {})
    if status:
        status = OrderStatus(status).value
        if 'status' in predicate and status not in predicate['status']['$in']:
            return []
        predicate['status'] = status
    if client_id:
        if 'client_id' in predicate and not _client_allowed(predicate['client_id'], client_id):
            return []
        predicate['client_id'] = client_id

    orders = orders_repository.filter(predicate, sort='-created_date')
    if search:
        orders = [o for o in orders if _matches_search(o, search)]
    if date_from or date_to:
        orders = [o for o in orders if _in_date_range(o, date_from, date_to)]
    if limit:
        orders = orders[:limit]
    return [summarize_order(o) for o in orders]


def _client_allowed(condition: Any, client_id: str) -> bool:
    if isinstance(condition, dict):
        return client_id in condition['$in']
    return condition == client_id


def summarize_order(order: Dict[str, Any]) -> Dict[str, Any]:
    """Pedido con etiqueta de estado, numero mostrado y total mostrado."""
    return {
        **order,
        'order_number_label': order_number_label(order),
        'status_label': STATUS_LABELS[OrderStatus(order['status'])],
        'display_total': order_display_total(order),
    }


# =============================================================================
# DETALLE
# =============================================================================

def build_order_detail(
    actor: Actor,
    order: Dict[str, Any],
    lines: List[Dict[str, Any]],
    products_by_id: Dict[str, Dict[str, Any]]
) -> Dict[str, Any]:
    """Vista de detalle: lineas visibles para el rol, faltantes y acciones."""
    visible = lines_for_role(actor.role, lines, products_by_id)
    return {
        **summarize_order(order),
        'lines': [line_view(line, products_by_id.get(line.get('product_id'))) for line in visible],
        'has_shortages': has_shortages(visible),
        'allowed_actions': [a.value for a in allowed_actions(order['status'], actor.role)],
    }


def get_order_detail(actor: Actor, order_id: str) -> Dict[str, Any]:
    """
    Detalle de un pedido.

    Raises:
        OrderNotFoundError: id inexistente o pedido no visible para el usuario
    """
    order = orders_repository.get_by_id(order_id)
    if not order or not can_view(actor, order):
        raise OrderNotFoundError(extra={"order_id": order_id})

    lines = order_lines_repository.list_by_order(order_id)
    product_ids = list({line['product_id'] for line in lines})
    products_by_id = {p['id']: p for p in products_repository.filter({'id': {'$in': product_ids}})}
    return build_order_detail(actor, order, lines, products_by_id)


# =============================================================================
# DASHBOARD
# =============================================================================

def compute_dashboard_stats(
    orders: List[Dict[str, Any]],
    clients: List[Dict[str, Any]],
    products: List[Dict[str, Any]]
) -> Dict[str, Any]:
    """
    Estadisticas del panel de administracion.

    Ingresos = suma del total mostrado de pedidos listos para captura.
    """
    ready = [o for o in orders if o.get('status') == OrderStatus.LISTO_CAPTURA.value]
    return {
        'total_orders': len(orders),
        'pending_orders': sum(1 for o in orders if o.get('status') in WAREHOUSE_QUEUE),
        'ready_orders': len(ready),
        'total_clients': len(clients),
        'total_products': sum(1 for p in products if p.get('is_active')),
        'total_revenue': sum((order_display_total(o) for o in ready), Decimal('0')),
    }


def get_dashboard_stats() -> Dict[str, Any]:
    """Estadisticas calculadas sobre el almacen completo."""
    return compute_dashboard_stats(
        orders_repository.list(),
        clients_repository.list(),
        products_repository.list(),
    )


def get_recent_orders(limit: int = 5) -> List[Dict[str, Any]]:
    """Ultimos pedidos creados (panel admin)."""
    return [summarize_order(o) for o in orders_repository.list(sort='-created_date', limit=limit)]
