# =============================================================================
# CREMERIA v1.0 - USERS COMMANDS
# =============================================================================
# Administracion de roles y asignacion de clientes a usuarios
# =============================================================================

import logging
from typing import Any, Dict, List, Optional

from ...database import log_operation
from ...exceptions import ClientNotFoundError, UserNotFoundError, ValidationError
from ...models import Actor, UserRole
from ...persistence.repositories import clients_repository, users_repository


logger = logging.getLogger(__name__)


# Campos nunca expuestos por la API
PRIVATE_FIELDS = ('password_hash',)


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """Usuario sin campos sensibles."""
    return {k: v for k, v in user.items() if k not in PRIVATE_FIELDS}


def list_users() -> List[Dict[str, Any]]:
    return [public_user(u) for u in users_repository.list()]


def _client_or_raise(client_id: str) -> Dict[str, Any]:
    client = clients_repository.get_by_id(client_id)
    if not client:
        raise ClientNotFoundError(extra={"client_id": client_id})
    return client


def assignment_fields(
    role: UserRole,
    assigned_client_id: Optional[str] = None,
    assigned_clients: Optional[List[str]] = None
) -> Dict[str, Any]:
    """
    Campos de asignacion coherentes con el rol.

    - cliente: requiere assigned_client_id; limpia assigned_clients
    - vendedor: assigned_clients (ids); limpia el cliente individual
    - bodega_* / admin: limpia todas las asignaciones

    Raises:
        ValidationError: cliente sin cliente asignado
        ClientNotFoundError: id de cliente inexistente
    """
    if role == UserRole.CLIENTE:
        if not assigned_client_id:
            raise ValidationError(
                "Selecciona un cliente para este usuario",
                {"field": "assigned_client_id"}
            )
        client = _client_or_raise(assigned_client_id)
        return {
            'assigned_client_id': client['id'],
            'assigned_client_name': client.get('business_name'),
            'assigned_clients': [],
        }

    if role == UserRole.VENDEDOR:
        clients = []
        for client_id in dict.fromkeys(assigned_clients or []):
            client = _client_or_raise(client_id)
            clients.append({'client_id': client['id'], 'client_name': client.get('business_name')})
        return {
            'assigned_client_id': None,
            'assigned_client_name': None,
            'assigned_clients': clients,
        }

    return {
        'assigned_client_id': None,
        'assigned_client_name': None,
        'assigned_clients': [],
    }


def assign_role(
    actor: Actor,
    user_id: str,
    role: str,
    assigned_client_id: Optional[str] = None,
    assigned_clients: Optional[List[str]] = None
) -> Dict[str, Any]:
    """
    Cambia el rol de un usuario aplicando las reglas de asignacion.

    Returns:
        Usuario actualizado (sin password_hash)
    """
    user = users_repository.get_by_id(user_id)
    if not user:
        raise UserNotFoundError(extra={"user_id": user_id})

    try:
        new_role = UserRole(role)
    except ValueError:
        raise ValidationError(f"Rol no valido: {role}", {"field": "user_role"})

    changes = {'user_role': new_role.value, **assignment_fields(new_role, assigned_client_id, assigned_clients)}
    updated = users_repository.update(user_id, changes)

    log_operation(
        'ASSIGN_ROLE', 'users', user_id,
        f"Rol {user.get('user_role')} -> {new_role.value}",
        {"assigned_client_id": changes['assigned_client_id'],
         "assigned_clients": [c['client_id'] for c in changes['assigned_clients']]},
        id_usuario=actor.user_id
    )
    logger.info("Usuario %s: rol %s (por %s)", user.get('email'), new_role.value, actor.email)
    return public_user(updated)
