# =============================================================================
# CREMERIA v1.0 - AUTH DEPENDENCIES
# =============================================================================
# Dependencias FastAPI: usuario autenticado (Actor) y control de roles
# =============================================================================

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..exceptions import InsufficientRoleError, TokenInvalidError, UserDisabledError
from ..models import Actor, AssignedClient, UserRole
from ..persistence.repositories import sessions_repository, users_repository
from ..utils.conversions import utc_now
from .security import decode_access_token, hash_token_for_storage


bearer_scheme = HTTPBearer(auto_error=False)


def actor_from_user(user: dict, session_id: Optional[str] = None) -> Actor:
    """Construye el contexto de sesion desde el registro usuario."""
    return Actor(
        user_id=user['id'],
        email=user['email'],
        full_name=user.get('full_name'),
        role=UserRole(user['user_role']),
        assigned_client_id=user.get('assigned_client_id'),
        assigned_client_name=user.get('assigned_client_name'),
        assigned_clients=[AssignedClient(**c) for c in (user.get('assigned_clients') or [])],
        session_id=session_id,
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Actor:
    """
    Usuario autenticado a partir del header Authorization: Bearer <token>.

    Verifica firma/expiracion del JWT, sesion no revocada y usuario activo.

    Raises:
        TokenInvalidError: token ausente, invalido, expirado o revocado
        UserDisabledError: usuario deshabilitado
    """
    if credentials is None or not credentials.credentials:
        raise TokenInvalidError("Autenticacion requerida")

    token = credentials.credentials
    payload = decode_access_token(token)
    if payload is None:
        raise TokenInvalidError()

    session = sessions_repository.get_by_token_hash(hash_token_for_storage(token))
    if not session or session.get('revoked_at') is not None:
        raise TokenInvalidError()
    if session.get('expires_at') and session['expires_at'] <= utc_now():
        raise TokenInvalidError()

    user = users_repository.get_by_id(payload['sub'])
    if not user:
        raise TokenInvalidError()
    if not user.get('is_active'):
        raise UserDisabledError()

    return actor_from_user(user, session_id=session['id'])


def require_roles(*roles: UserRole):
    """
    Dependency factory: solo los roles indicados.

    Uso:
        @router.get("/", dependencies=[Depends(require_roles(UserRole.ADMIN))])
    """
    allowed = frozenset(roles)

    def checker(actor: Actor = Depends(get_current_user)) -> Actor:
        if actor.role not in allowed:
            raise InsufficientRoleError(extra={"role": actor.role.value})
        return actor

    return checker


# Atajo mas comun
require_admin = require_roles(UserRole.ADMIN)
