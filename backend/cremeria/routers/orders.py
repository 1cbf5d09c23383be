# =============================================================================
# CREMERIA v1.0 - ORDERS ROUTER
# =============================================================================
# Endpoint de pedidos: creacion, listado por rol, detalle, sugerencias y
# transiciones de estado (surtido, revision, aprobacion, cancelacion)
# =============================================================================

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from ..auth.dependencies import get_current_user
from ..models import Actor, OrderStatus
from ..services.orders import (
    ACTION_MESSAGES,
    OrderAction,
    approve_for_capture,
    cancel_order,
    complete_fulfillment,
    create_order,
    get_order_detail,
    get_suggestions,
    list_orders,
    save_adjustments,
    start_fulfillment,
)
from ..utils.response import success_response


router = APIRouter(prefix="/orders")


# =============================================================================
# MODELOS REQUEST
# =============================================================================

class CartItem(BaseModel):
    product_id: str
    quantity: Decimal = Field(..., gt=0)


class CreateOrderRequest(BaseModel):
    items: List[CartItem]
    notes: Optional[str] = Field(None, max_length=2000)


class SuggestionsRequest(BaseModel):
    cart_product_ids: List[str] = Field(default_factory=list)


class LineQuantity(BaseModel):
    line_id: str
    quantity_fulfilled: Optional[Decimal] = Field(None, ge=0)
    final_billed_quantity: Optional[Decimal] = Field(None, ge=0)


class QuantitiesRequest(BaseModel):
    """Cantidades capturadas; las lineas omitidas conservan su valor."""
    lines: List[LineQuantity] = Field(default_factory=list)

    def to_quantities(self) -> Dict[str, Dict[str, Decimal]]:
        return {
            line.line_id: line.model_dump(exclude={'line_id'}, exclude_none=True)
            for line in self.lines
        }


def _transition_response(order: Dict[str, Any], action: OrderAction) -> Dict[str, Any]:
    return success_response(order, ACTION_MESSAGES[action])


# =============================================================================
# LISTADO Y DETALLE
# =============================================================================

@router.get("")
def lista_pedidos(
    status_filter: Optional[OrderStatus] = Query(None, alias="status", description="Filtra por estado"),
    client_id: Optional[str] = Query(None, description="Filtra por cliente"),
    q: Optional[str] = Query(None, description="Busca en numero de pedido o cliente"),
    date_from: Optional[date] = Query(None, description="Creado desde (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, description="Creado hasta (YYYY-MM-DD, inclusive)"),
    limit: Optional[int] = Query(None, ge=1, le=500),
    actor: Actor = Depends(get_current_user)
) -> Dict[str, Any]:
    """
    Pedidos visibles para el usuario (mas recientes primero).

    - cliente: los de su cliente
    - bodega: pendientes y en surtido
    - vendedor: los de sus clientes asignados
    - admin: todos
    """
    orders = list_orders(
        actor,
        status=status_filter.value if status_filter else None,
        client_id=client_id,
        search=q,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
    )
    return success_response(orders, count=len(orders))


@router.post("/suggestions")
def sugerencias(request: SuggestionsRequest, actor: Actor = Depends(get_current_user)) -> Dict[str, Any]:
    """Productos frecuentes del cliente y ofertas fuera del carrito."""
    return success_response(get_suggestions(actor, request.cart_product_ids))


@router.get("/{order_id}")
def detalle_pedido(order_id: str, actor: Actor = Depends(get_current_user)) -> Dict[str, Any]:
    """Detalle con lineas visibles para el rol y acciones permitidas."""
    return success_response(get_order_detail(actor, order_id))


# =============================================================================
# CREACION
# =============================================================================

@router.post("", status_code=status.HTTP_201_CREATED)
def crear_pedido(request: CreateOrderRequest, actor: Actor = Depends(get_current_user)) -> Dict[str, Any]:
    order = create_order(
        actor,
        [item.model_dump() for item in request.items],
        notes=request.notes,
    )
    return success_response(order, ACTION_MESSAGES[OrderAction.CREATE])


# =============================================================================
# TRANSICIONES
# =============================================================================

@router.post("/{order_id}/start-fulfillment")
def inicia_surtido(order_id: str, actor: Actor = Depends(get_current_user)) -> Dict[str, Any]:
    return _transition_response(start_fulfillment(actor, order_id), OrderAction.START_FULFILLMENT)


@router.post("/{order_id}/complete-fulfillment")
def completa_surtido(
    order_id: str,
    request: Optional[QuantitiesRequest] = None,
    actor: Actor = Depends(get_current_user)
) -> Dict[str, Any]:
    quantities = request.to_quantities() if request else None
    return _transition_response(
        complete_fulfillment(actor, order_id, quantities), OrderAction.COMPLETE_FULFILLMENT
    )


@router.post("/{order_id}/adjustments")
def guarda_ajustes(
    order_id: str,
    request: Optional[QuantitiesRequest] = None,
    actor: Actor = Depends(get_current_user)
) -> Dict[str, Any]:
    quantities = request.to_quantities() if request else None
    return _transition_response(
        save_adjustments(actor, order_id, quantities), OrderAction.SAVE_ADJUSTMENTS
    )


@router.post("/{order_id}/approve")
def aprueba_pedido(
    order_id: str,
    request: Optional[QuantitiesRequest] = None,
    actor: Actor = Depends(get_current_user)
) -> Dict[str, Any]:
    quantities = request.to_quantities() if request else None
    return _transition_response(
        approve_for_capture(actor, order_id, quantities), OrderAction.APPROVE
    )


@router.post("/{order_id}/cancel")
def cancela_pedido(order_id: str, actor: Actor = Depends(get_current_user)) -> Dict[str, Any]:
    return _transition_response(cancel_order(actor, order_id), OrderAction.CANCEL)
