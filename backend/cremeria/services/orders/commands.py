# =============================================================================
# CREMERIA v1.0 - ORDERS COMMANDS
# =============================================================================
# Creacion de pedidos y transiciones de estado.
# Cada transicion escribe lineas + cabecera en una sola transaccion.
# =============================================================================

import logging
from collections import OrderedDict
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ...database import DB_ERRORS, transaction, log_operation
from ...exceptions import (
    ClientNotFoundError,
    ClientRequiredError,
    EmptyCartError,
    OrderNotFoundError,
    ProductNotFoundError,
    UpstreamServiceError,
    ValidationError,
)
from ...models import Actor, OrderStatus
from ...persistence.repositories import (
    clients_repository,
    order_lines_repository,
    orders_repository,
    products_repository,
)
from ...utils.conversions import to_decimal
from ...utils.order_numbers import generate_order_number
from ..pricing import resolve_client_price, resolve_effective_price, require_orderable
from .fulfillment import (
    LineQuantities,
    WarehouseFulfiller,
    WarehouseScope,
    resolve_line_updates,
)
from .queries import can_view
from .states import OrderAction, next_status
from .totals import cart_total, compute_total_final


logger = logging.getLogger(__name__)


@contextmanager
def _store_call(operation: str, order_id: Optional[str] = None):
    """Traduce fallos del almacen en UpstreamServiceError (con log)."""
    try:
        yield
    except DB_ERRORS as e:
        logger.exception("Fallo del almacen en %s (pedido %s)", operation, order_id)
        raise UpstreamServiceError(extra={"operation": operation}) from e


def _get_order(actor: Actor, order_id: str) -> Dict[str, Any]:
    """Pedido visible para el usuario; fuera de su alcance responde como inexistente."""
    with _store_call("get_order", order_id):
        order = orders_repository.get_by_id(order_id)
    if not order or not can_view(actor, order):
        raise OrderNotFoundError(extra={"order_id": order_id})
    return order


def _products_for(lines: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    product_ids = list({line['product_id'] for line in lines if line.get('product_id')})
    return {p['id']: p for p in products_repository.filter({'id': {'$in': product_ids}})}


def _merge_cart(items: List[Dict[str, Any]]) -> "OrderedDict[str, Decimal]":
    """Suma cantidades de un mismo producto conservando el orden de captura."""
    merged: "OrderedDict[str, Decimal]" = OrderedDict()
    for item in items:
        product_id = item.get('product_id')
        quantity = to_decimal(item.get('quantity'))
        if not product_id:
            raise ValidationError("Cada linea debe indicar un producto")
        if quantity is None or quantity <= 0:
            raise ValidationError(
                "La cantidad debe ser mayor a cero",
                {"product_id": product_id}
            )
        merged[product_id] = merged.get(product_id, Decimal('0')) + quantity
    return merged


# =============================================================================
# CREACION
# =============================================================================

def build_order_lines(
    client: Dict[str, Any],
    products: List[Dict[str, Any]],
    quantities: Dict[str, Decimal]
) -> List[Dict[str, Any]]:
    """
    Lineas con precio congelado al momento de crear el pedido.

    unit_price = precio efectivo (lista del cliente u oferta mas barata).
    """
    lines = []
    for product in products:
        require_orderable(product)
        list_price = resolve_client_price(product, client)
        unit_price = resolve_effective_price(product, list_price).price
        quantity = quantities[product['id']]
        lines.append({
            'product_id': product['id'],
            'product_sku': product.get('sku'),
            'product_name': product.get('name'),
            'unit': product.get('unit'),
            'quantity_requested': quantity,
            'quantity_requested_unit': product.get('unit'),
            'unit_price': unit_price,
            'subtotal': quantity * unit_price,
        })
    return lines


def create_order(actor: Actor, items: List[Dict[str, Any]], notes: Optional[str] = None) -> Dict[str, Any]:
    """
    Crea un pedido en pendiente_revision para el cliente del usuario.

    Args:
        actor: Usuario cliente
        items: [{"product_id": ..., "quantity": ...}]
        notes: Notas del pedido

    Returns:
        Pedido creado con sus lineas

    Raises:
        InsufficientRoleError, ClientRequiredError, EmptyCartError,
        ValidationError, VariantNotSelectedError, ProductNotFoundError
    """
    status = next_status(None, OrderAction.CREATE, actor.role)

    if not actor.assigned_client_id:
        raise ClientRequiredError("Tu usuario no tiene un cliente asignado")
    if not items:
        raise EmptyCartError()

    quantities = _merge_cart(items)

    with _store_call("create_order"):
        client = clients_repository.get_by_id(actor.assigned_client_id)
        if not client:
            raise ClientNotFoundError(extra={"client_id": actor.assigned_client_id})

        products = []
        for product_id in quantities:
            product = products_repository.get_by_id(product_id)
            if not product:
                raise ProductNotFoundError(extra={"product_id": product_id})
            if not product.get('is_active'):
                raise ValidationError(
                    f"{product.get('name')} ya no esta disponible",
                    {"product_id": product_id}
                )
            products.append(product)

        lines = build_order_lines(client, products, quantities)

        with transaction():
            order = orders_repository.create({
                'order_number': generate_order_number(),
                'client_id': client['id'],
                'client_name': client.get('business_name'),
                'status': status.value,
                'notes': (notes or '').strip() or None,
                'total_estimated': cart_total(lines),
                'total_final': None,
                'created_by': actor.user_id,
            })
            created_lines = order_lines_repository.bulk_create(
                [{**line, 'order_id': order['id']} for line in lines]
            )
            log_operation(
                'CREATE_ORDER', 'orders', order['id'],
                f"Pedido {order['order_number']} creado ({len(created_lines)} lineas)",
                {"total_estimated": order['total_estimated']},
                id_usuario=actor.user_id
            )

    logger.info("Pedido %s creado para %s", order['order_number'], client.get('business_name'))
    return {**order, 'lines': created_lines}


# =============================================================================
# TRANSICIONES
# =============================================================================

def _set_status(actor: Actor, order: Dict[str, Any], action: OrderAction) -> Dict[str, Any]:
    """Transicion que solo cambia el estado de la cabecera."""
    status = next_status(order['status'], action, actor.role)

    with _store_call(action.value, order['id']):
        with transaction():
            updated = orders_repository.update(order['id'], {'status': status.value})
            log_operation(
                action.value.upper(), 'orders', order['id'],
                f"Estado {order['status']} -> {status.value}",
                id_usuario=actor.user_id
            )

    logger.info("Pedido %s: %s -> %s (%s)", order['id'], order['status'], status.value, actor.role.value)
    return updated


def _save_lines_and_status(
    actor: Actor,
    order: Dict[str, Any],
    action: OrderAction,
    status: OrderStatus,
    all_lines: List[Dict[str, Any]],
    products_by_id: Dict[str, Dict[str, Any]],
    updates: Dict[str, Dict[str, Decimal]]
) -> Dict[str, Any]:
    """
    Escribe cantidades de lineas y cabecera (estado + total_final) de forma atomica.

    total_final se recalcula sobre todas las lineas del pedido.
    """
    merged_lines = [{**line, **updates.get(line['id'], {})} for line in all_lines]
    total_final = compute_total_final(merged_lines, products_by_id)

    with _store_call(action.value, order['id']):
        with transaction():
            for line_id, values in updates.items():
                order_lines_repository.update(line_id, values)
            updated = orders_repository.update(order['id'], {
                'status': status.value,
                'total_final': total_final,
            })
            log_operation(
                action.value.upper(), 'orders', order['id'],
                f"Estado {order['status']} -> {status.value}, {len(updates)} lineas",
                {"total_final": total_final},
                id_usuario=actor.user_id
            )

    logger.info(
        "Pedido %s: %s -> %s, total_final=%s (%s)",
        order['id'], order['status'], status.value, total_final, actor.role.value
    )
    return updated


def start_fulfillment(actor: Actor, order_id: str) -> Dict[str, Any]:
    """Bodega toma el pedido: pendiente_revision -> en_surtido."""
    return _set_status(actor, _get_order(actor, order_id), OrderAction.START_FULFILLMENT)


def complete_fulfillment(actor: Actor, order_id: str, quantities: LineQuantities = None) -> Dict[str, Any]:
    """
    Bodega registra lo surtido: en_surtido -> listo_revision.

    Solo se escriben las lineas visibles para la bodega del usuario;
    total_final se calcula sobre todas las lineas.
    """
    order = _get_order(actor, order_id)
    status = next_status(order['status'], OrderAction.COMPLETE_FULFILLMENT, actor.role)
    fulfiller = WarehouseFulfiller(WarehouseScope.for_role(actor.role))

    with _store_call(OrderAction.COMPLETE_FULFILLMENT.value, order_id):
        lines = order_lines_repository.list_by_order(order_id)
        products_by_id = _products_for(lines)

    visible = fulfiller.visible_lines(lines, products_by_id)
    updates = resolve_line_updates(visible, products_by_id, quantities)
    return _save_lines_and_status(
        actor, order, OrderAction.COMPLETE_FULFILLMENT, status, lines, products_by_id, updates
    )


def _seller_review(
    actor: Actor,
    order_id: str,
    action: OrderAction,
    quantities: LineQuantities = None
) -> Dict[str, Any]:
    order = _get_order(actor, order_id)
    status = next_status(order['status'], action, actor.role)

    with _store_call(action.value, order_id):
        lines = order_lines_repository.list_by_order(order_id)
        products_by_id = _products_for(lines)

    updates = resolve_line_updates(lines, products_by_id, quantities)
    return _save_lines_and_status(actor, order, action, status, lines, products_by_id, updates)


def save_adjustments(actor: Actor, order_id: str, quantities: LineQuantities = None) -> Dict[str, Any]:
    """Vendedor ajusta cantidades: listo_revision/ajustado -> ajustado."""
    return _seller_review(actor, order_id, OrderAction.SAVE_ADJUSTMENTS, quantities)


def approve_for_capture(actor: Actor, order_id: str, quantities: LineQuantities = None) -> Dict[str, Any]:
    """Vendedor aprueba: listo_revision/ajustado -> listo_captura."""
    return _seller_review(actor, order_id, OrderAction.APPROVE, quantities)


def cancel_order(actor: Actor, order_id: str) -> Dict[str, Any]:
    """Vendedor cancela un pedido no terminal."""
    return _set_status(actor, _get_order(actor, order_id), OrderAction.CANCEL)
