# =============================================================================
# CREMERIA v1.0 - ORDERS SERVICE PACKAGE
# =============================================================================
# Servicio de pedidos en modulos:
#   orders/states.py      - Maquina de estados (transiciones y roles)
#   orders/totals.py      - Cantidades facturables y totales
#   orders/fulfillment.py - Surtido por bodega (WarehouseScope)
#   orders/commands.py    - Creacion y transiciones (escrituras)
#   orders/queries.py     - Listados por rol, detalle, dashboard
#   orders/suggestions.py - Sugerencias de venta (upselling)
# =============================================================================

from .states import (
    OrderAction,
    TRANSITIONS,
    ACTION_MESSAGES,
    next_status,
    allowed_actions,
    is_terminal,
)

from .totals import (
    fulfilled_quantity,
    billed_quantity,
    line_subtotal,
    compute_total_final,
    cart_total,
    order_display_total,
    line_view,
)

from .fulfillment import (
    WarehouseScope,
    WarehouseFulfiller,
    lines_for_role,
    has_shortages,
    resolve_line_updates,
)

from .commands import (
    build_order_lines,
    create_order,
    start_fulfillment,
    complete_fulfillment,
    save_adjustments,
    approve_for_capture,
    cancel_order,
)

from .queries import (
    list_orders,
    get_order_detail,
    summarize_order,
    compute_dashboard_stats,
    get_dashboard_stats,
    get_recent_orders,
)

from .suggestions import (
    build_suggestions,
    get_suggestions,
)


__all__ = [
    # States
    'OrderAction',
    'TRANSITIONS',
    'ACTION_MESSAGES',
    'next_status',
    'allowed_actions',
    'is_terminal',
    # Totals
    'fulfilled_quantity',
    'billed_quantity',
    'line_subtotal',
    'compute_total_final',
    'cart_total',
    'order_display_total',
    'line_view',
    # Fulfillment
    'WarehouseScope',
    'WarehouseFulfiller',
    'lines_for_role',
    'has_shortages',
    'resolve_line_updates',
    # Commands
    'build_order_lines',
    'create_order',
    'start_fulfillment',
    'complete_fulfillment',
    'save_adjustments',
    'approve_for_capture',
    'cancel_order',
    # Queries
    'list_orders',
    'get_order_detail',
    'summarize_order',
    'compute_dashboard_stats',
    'get_dashboard_stats',
    'get_recent_orders',
    # Suggestions
    'build_suggestions',
    'get_suggestions',
]
