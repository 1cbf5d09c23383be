# =============================================================================
# CREMERIA v1.0 - ORDER TOTALS
# =============================================================================
# Cantidades facturables, subtotales y totales del pedido.
# Funciones puras sobre lineas/pedidos ya cargados.
# =============================================================================

from decimal import Decimal
from typing import Any, Dict, Iterable, Mapping, Optional

from ...utils.conversions import to_decimal


ZERO = Decimal('0')


def fulfilled_quantity(line: Dict[str, Any]) -> Decimal:
    """Cantidad surtida; mientras no se edita vale la cantidad solicitada."""
    fulfilled = to_decimal(line.get('quantity_fulfilled'))
    if fulfilled is not None:
        return fulfilled
    return to_decimal(line.get('quantity_requested')) or ZERO


def billed_quantity(line: Dict[str, Any], product: Optional[Dict[str, Any]] = None) -> Decimal:
    """
    Cantidad a facturar de una linea.

    Productos con medicion final (ej. queso por kg) facturan
    final_billed_quantity aunque difiera de la cantidad surtida.
    """
    if product is not None and product.get('has_final_measurement'):
        final = to_decimal(line.get('final_billed_quantity'))
        if final is not None:
            return final
    return fulfilled_quantity(line)


def line_subtotal(line: Dict[str, Any], product: Optional[Dict[str, Any]] = None) -> Decimal:
    return billed_quantity(line, product) * (to_decimal(line.get('unit_price')) or ZERO)


def compute_total_final(
    lines: Iterable[Dict[str, Any]],
    products_by_id: Mapping[str, Dict[str, Any]]
) -> Decimal:
    """Suma de cantidad facturable x precio unitario sobre todas las lineas."""
    return sum(
        (line_subtotal(line, products_by_id.get(line.get('product_id'))) for line in lines),
        ZERO
    )


def cart_total(lines: Iterable[Dict[str, Any]]) -> Decimal:
    """Suma de cantidad solicitada x precio unitario del carrito."""
    return sum(
        ((to_decimal(line.get('quantity_requested')) or ZERO) * (to_decimal(line.get('unit_price')) or ZERO)
         for line in lines),
        ZERO
    )


def order_display_total(order: Dict[str, Any]) -> Decimal:
    """total_final si existe, si no total_estimated, si no 0."""
    total_final = to_decimal(order.get('total_final'))
    if total_final is not None:
        return total_final
    return to_decimal(order.get('total_estimated')) or ZERO


def line_view(line: Dict[str, Any], product: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Vista de linea: solicitado vs surtido vs facturado."""
    requested = to_decimal(line.get('quantity_requested')) or ZERO
    fulfilled = fulfilled_quantity(line)
    measured = bool(product and product.get('has_final_measurement'))
    return {
        **line,
        'quantity_fulfilled_effective': fulfilled,
        'quantity_billed': billed_quantity(line, product),
        'line_total': line_subtotal(line, product),
        'has_shortage': fulfilled < requested,
        'has_final_measurement': measured,
        'final_measurement_unit': product.get('final_measurement_unit') if measured else None,
        'warehouse_type': product.get('warehouse_type') if product else None,
    }
