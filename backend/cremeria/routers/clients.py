# =============================================================================
# CREMERIA v1.0 - CLIENTS ROUTER
# =============================================================================

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from ..auth.dependencies import require_roles, require_admin
from ..models import Actor, ClientType, PriceList, UserRole
from ..services.catalog import create_client, list_clients, update_client
from ..utils.response import success_response


router = APIRouter(prefix="/clients")


class ClientPayload(BaseModel):
    business_name: Optional[str] = None
    legal_name: Optional[str] = None
    rfc: Optional[str] = None
    delivery_address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    route_zone: Optional[str] = None
    client_type: Optional[ClientType] = None
    assigned_price_list: Optional[PriceList] = None
    is_active: Optional[bool] = None


@router.get("")
def lista_clientes(
    active_only: bool = Query(False),
    actor: Actor = Depends(require_roles(UserRole.ADMIN, UserRole.VENDEDOR))
) -> Dict[str, Any]:
    clients = list_clients(active_only=active_only)
    return success_response(clients, count=len(clients))


@router.post("", status_code=status.HTTP_201_CREATED)
def crear_cliente(payload: ClientPayload, actor: Actor = Depends(require_admin)) -> Dict[str, Any]:
    client = create_client(actor, payload.model_dump(exclude_unset=True))
    return success_response(client, "Cliente creado")


@router.put("/{client_id}")
def editar_cliente(
    client_id: str,
    payload: ClientPayload,
    actor: Actor = Depends(require_admin)
) -> Dict[str, Any]:
    client = update_client(actor, client_id, payload.model_dump(exclude_unset=True))
    return success_response(client, "Cliente actualizado")
