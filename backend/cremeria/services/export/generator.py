# =============================================================================
# CREMERIA v1.0 - EXPORT GENERATOR
# =============================================================================
# Aplana los pedidos listos para captura en filas CSV para Punto Zero
# =============================================================================

import logging
from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, NamedTuple, Tuple

from ...database import DB_ERRORS, log_operation
from ...exceptions import NothingToExportError, UpstreamServiceError
from ...models import Actor, OrderStatus
from ...persistence.repositories import order_lines_repository, orders_repository
from ...utils.conversions import to_decimal
from ...utils.order_numbers import order_number_label
from ..orders.totals import fulfilled_quantity
from .formatters import (
    escape_csv_field,
    export_filename,
    format_date,
    format_money,
    format_quantity,
)


logger = logging.getLogger(__name__)


EXPORT_COLUMNS = [
    'Número de Pedido',
    'Cliente',
    'Fecha',
    'Producto',
    'SKU',
    'Unidad',
    'Cantidad Surtida',
    'Precio Unitario',
    'Subtotal',
    'Notas',
]


class ExportRow(NamedTuple):
    """Una linea de pedido aplanada con los datos de su cabecera."""
    order_number: str
    client_name: str
    created_date: datetime
    product_name: str
    sku: str
    unit: str
    quantity: Decimal
    unit_price: Decimal
    subtotal: Decimal
    notes: str

    def to_fields(self) -> List[str]:
        return [
            self.order_number,
            self.client_name or '',
            format_date(self.created_date),
            self.product_name or '',
            self.sku or '',
            self.unit or '',
            format_quantity(self.quantity),
            format_money(self.unit_price),
            format_money(self.subtotal),
            self.notes or '',
        ]


def export_quantity(line: Dict[str, Any]) -> Decimal:
    """Cantidad facturada: medicion final si existe, si no cantidad surtida."""
    final = to_decimal(line.get('final_billed_quantity'))
    if final is not None:
        return final
    return fulfilled_quantity(line)


def export_rows(orders: List[Dict[str, Any]], lines: List[Dict[str, Any]]) -> List[ExportRow]:
    """
    Filas de exportacion: una por linea de cada pedido listo_captura.

    Pedidos en cualquier otro estado no generan filas. Se respeta el orden
    de pedidos y de lineas recibido.
    """
    lines_by_order = defaultdict(list)
    for line in lines:
        lines_by_order[line.get('order_id')].append(line)

    rows = []
    for order in orders:
        if order.get('status') != OrderStatus.LISTO_CAPTURA.value:
            continue
        for line in lines_by_order.get(order['id'], []):
            quantity = export_quantity(line)
            unit_price = to_decimal(line.get('unit_price')) or Decimal('0')
            rows.append(ExportRow(
                order_number=order_number_label(order),
                client_name=order.get('client_name'),
                created_date=order.get('created_date'),
                product_name=line.get('product_name'),
                sku=line.get('product_sku'),
                unit=line.get('unit'),
                quantity=quantity,
                unit_price=unit_price,
                subtotal=quantity * unit_price,
                notes=order.get('notes') or '',
            ))
    return rows


def render_csv(rows: List[ExportRow]) -> str:
    """Encabezado + filas, separadas por salto de linea."""
    lines = [','.join(escape_csv_field(h) for h in EXPORT_COLUMNS)]
    for row in rows:
        lines.append(','.join(escape_csv_field(field) for field in row.to_fields()))
    return '\n'.join(lines)


def generate_export(actor: Actor, orders: List[Dict[str, Any]] = None) -> Tuple[str, str]:
    """
    Genera el CSV de pedidos listos para captura.

    Args:
        actor: Usuario admin que exporta
        orders: Pedidos ya filtrados (default: todos los listo_captura)

    Returns:
        Tupla (filename, contenido CSV)

    Raises:
        NothingToExportError: no hay pedidos listo_captura con lineas
    """
    try:
        if orders is None:
            orders = orders_repository.filter(
                {'status': OrderStatus.LISTO_CAPTURA.value}, sort='-created_date'
            )
        ready = [o for o in orders if o.get('status') == OrderStatus.LISTO_CAPTURA.value]
        if not ready:
            raise NothingToExportError()
        lines = order_lines_repository.list_by_orders([o['id'] for o in ready])
    except DB_ERRORS as e:
        logger.exception("Fallo del almacen al generar export")
        raise UpstreamServiceError(extra={"operation": "export"}) from e

    rows = export_rows(ready, lines)
    if not rows:
        raise NothingToExportError()

    filename = export_filename()
    log_operation(
        'EXPORT_PUNTO_ZERO', 'orders', None,
        f"Exportados {len(ready)} pedidos ({len(rows)} lineas) en {filename}",
        {"order_ids": [o['id'] for o in ready]},
        id_usuario=actor.user_id
    )
    logger.info("Export Punto Zero: %d pedidos, %d lineas", len(ready), len(rows))
    return filename, render_csv(rows)
