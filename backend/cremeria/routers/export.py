# =============================================================================
# CREMERIA v1.0 - EXPORT ROUTER
# =============================================================================
# Descarga CSV de pedidos listos para captura en Punto Zero
# =============================================================================

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from ..auth.dependencies import require_admin
from ..models import Actor, OrderStatus
from ..services.export import generate_export
from ..services.orders import list_orders


router = APIRouter(prefix="/export")


@router.get("/orders.csv")
def export_pedidos(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    client_id: Optional[str] = Query(None),
    q: Optional[str] = Query(None, description="Busca en numero de pedido o cliente"),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    actor: Actor = Depends(require_admin)
) -> Response:
    """
    CSV (una fila por linea) de los pedidos en listo_captura.

    Acepta los mismos filtros que el listado de pedidos; de los pedidos
    filtrados solo se exportan los listos para captura.
    422 si no queda ninguno.
    """
    orders = list_orders(
        actor,
        status=status_filter.value if status_filter else None,
        client_id=client_id,
        search=q,
        date_from=date_from,
        date_to=date_to,
    )
    filename, content = generate_export(actor, orders)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
