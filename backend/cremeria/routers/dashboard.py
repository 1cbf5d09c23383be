# =============================================================================
# CREMERIA v1.0 - DASHBOARD ROUTER
# =============================================================================

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from ..auth.dependencies import require_admin
from ..models import Actor
from ..services.orders import get_dashboard_stats, get_recent_orders
from ..utils.response import success_response


router = APIRouter(prefix="/dashboard")


@router.get("/stats")
def dashboard_stats(
    recent: int = Query(5, ge=0, le=50, description="Pedidos recientes a incluir"),
    actor: Actor = Depends(require_admin)
) -> Dict[str, Any]:
    """Conteos de pedidos, clientes, productos activos e ingresos listos para captura."""
    return success_response(
        get_dashboard_stats(),
        recent_orders=get_recent_orders(recent) if recent else [],
    )
