# =============================================================================
# CREMERIA v1.0 - PRICING RESOLVER
# =============================================================================
# Precio de lista por cliente (price_list_1..5 con fallback a mayoreo) y
# precio efectivo con oferta. Funciones puras sobre datos ya cargados.
# =============================================================================

from decimal import Decimal
from typing import Any, Dict, NamedTuple, Optional

from ...models import PriceList
from ...utils.conversions import to_decimal


ZERO = Decimal('0')


class EffectivePrice(NamedTuple):
    """Precio a cobrar y si proviene de una oferta."""
    price: Decimal
    discounted: bool


def _price_list_field(client: Optional[Dict[str, Any]]) -> str:
    price_list = (client or {}).get('assigned_price_list') or PriceList.PRICE_LIST_1
    return price_list.value if isinstance(price_list, PriceList) else str(price_list)


def resolve_client_price(product: Dict[str, Any], client: Optional[Dict[str, Any]]) -> Decimal:
    """
    Precio de lista del producto para el cliente.

    Usa product[client.assigned_price_list] si tiene valor, si no
    wholesale_price. Sin cliente (admin, bodega) se usa wholesale_price.

    Args:
        product: Registro producto
        client: Registro cliente o None

    Returns:
        Precio de lista (Decimal)
    """
    if client is not None:
        tier_price = to_decimal(product.get(_price_list_field(client)))
        if tier_price is not None:
            return tier_price
    return to_decimal(product.get('wholesale_price')) or ZERO


def resolve_effective_price(product: Dict[str, Any], list_price: Decimal) -> EffectivePrice:
    """
    Aplica la oferta solo si es estrictamente menor al precio de lista.

    Una oferta mal configurada (mayor o igual) nunca sube el precio.
    """
    offer_price = to_decimal(product.get('offer_price'))
    if product.get('is_on_offer') and offer_price is not None and offer_price < list_price:
        return EffectivePrice(offer_price, True)
    return EffectivePrice(list_price, False)


def price_product(product: Dict[str, Any], client: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Copia del producto con list_price, effective_price e is_discounted."""
    list_price = resolve_client_price(product, client)
    effective = resolve_effective_price(product, list_price)
    return {
        **product,
        'list_price': list_price,
        'effective_price': effective.price,
        'is_discounted': effective.discounted,
    }
