# =============================================================================
# CREMERIA v1.0 - UPSELLING SUGGESTIONS
# =============================================================================
# Sugerencias antes de enviar el pedido: productos frecuentes del cliente y
# ofertas vigentes. Son informativas: nunca bloquean el envio del pedido.
# =============================================================================

import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

from ...config import config
from ...database import DB_ERRORS
from ...models import Actor
from ...persistence.repositories import (
    clients_repository,
    order_lines_repository,
    orders_repository,
    products_repository,
)
from ..pricing import price_product


logger = logging.getLogger(__name__)


def frequent_products(
    history_lines: Iterable[Dict[str, Any]],
    products: List[Dict[str, Any]],
    cart_product_ids: Iterable[str],
    limit: int = 4
) -> List[Dict[str, Any]]:
    """
    Productos mas pedidos por el cliente que no estan en el carrito.

    Frecuencia = numero de lineas historicas por product_id. Se toman los
    primeros `limit` por frecuencia descendente (empates en orden de
    aparicion) y se descartan los que ya no estan en el catalogo.
    """
    in_cart = set(cart_product_ids)
    frequency = Counter(
        line['product_id'] for line in history_lines
        if line.get('product_id') and line['product_id'] not in in_cart
    )
    top_ids = [product_id for product_id, _ in frequency.most_common(limit)]

    catalog = {p['id']: p for p in products}
    return [catalog[product_id] for product_id in top_ids if product_id in catalog]


def offer_products(
    products: List[Dict[str, Any]],
    cart_product_ids: Iterable[str],
    limit: int = 4
) -> List[Dict[str, Any]]:
    """Productos activos en oferta (con precio de oferta) fuera del carrito."""
    in_cart = set(cart_product_ids)
    offers = [
        p for p in products
        if p.get('is_active') and p.get('is_on_offer')
        and p.get('offer_price') is not None and p['id'] not in in_cart
    ]
    return offers[:limit]


def build_suggestions(
    history_lines: Iterable[Dict[str, Any]],
    products: List[Dict[str, Any]],
    cart_product_ids: Iterable[str],
    client: Optional[Dict[str, Any]] = None,
    limit: int = 4
) -> Dict[str, List[Dict[str, Any]]]:
    """Listas 'frequent' y 'offers' con precios resueltos para el cliente."""
    cart_product_ids = list(cart_product_ids)
    return {
        'frequent': [
            price_product(p, client)
            for p in frequent_products(history_lines, products, cart_product_ids, limit)
        ],
        'offers': [
            price_product(p, client)
            for p in offer_products(products, cart_product_ids, limit)
        ],
    }


def get_suggestions(actor: Actor, cart_product_ids: Iterable[str]) -> Dict[str, List[Dict[str, Any]]]:
    """
    Sugerencias para el cliente del usuario.

    Un fallo al leer el historial se registra y devuelve listas vacias.
    """
    empty = {'frequent': [], 'offers': []}
    if not actor.assigned_client_id:
        return empty

    try:
        client = clients_repository.get_by_id(actor.assigned_client_id)
        history = orders_repository.list_history(
            actor.assigned_client_id, limit=config.SUGGESTIONS_HISTORY_LIMIT
        )
        history_lines = order_lines_repository.list_by_orders([o['id'] for o in history])
        products = products_repository.list_active()
    except DB_ERRORS:
        logger.exception("Error cargando sugerencias para cliente %s", actor.assigned_client_id)
        return empty

    return build_suggestions(
        history_lines, products, cart_product_ids, client, limit=config.SUGGESTIONS_MAX_ITEMS
    )
