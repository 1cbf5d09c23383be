# =============================================================================
# CREMERIA v1.0 - USERS ROUTER
# =============================================================================
# Gestion de usuarios (admin): listado y asignacion de rol/clientes
# =============================================================================

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..auth.dependencies import require_admin
from ..models import Actor, UserRole
from ..services.users import assign_role, list_users
from ..utils.response import success_response


router = APIRouter(prefix="/users")


class AssignRoleRequest(BaseModel):
    user_role: UserRole
    assigned_client_id: Optional[str] = None
    assigned_clients: List[str] = Field(default_factory=list)


@router.get("")
def lista_usuarios(actor: Actor = Depends(require_admin)) -> Dict[str, Any]:
    users = list_users()
    return success_response(users, count=len(users))


@router.put("/{user_id}/role")
def asigna_rol(
    user_id: str,
    request: AssignRoleRequest,
    actor: Actor = Depends(require_admin)
) -> Dict[str, Any]:
    """
    - cliente: requiere assigned_client_id
    - vendedor: assigned_clients
    - bodega / admin: sin asignaciones
    """
    user = assign_role(
        actor,
        user_id,
        request.user_role.value,
        assigned_client_id=request.assigned_client_id,
        assigned_clients=request.assigned_clients,
    )
    return success_response(user, "Usuario actualizado")
