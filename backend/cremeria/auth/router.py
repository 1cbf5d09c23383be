# =============================================================================
# CREMERIA v1.0 - AUTH ROUTER
# =============================================================================
# Endpoint de autenticacion.
#
# ENDPOINT:
# - POST /auth/login   - Login con email/password
# - POST /auth/logout  - Logout (revoca la sesion)
# - GET  /auth/me      - Info del usuario actual
# =============================================================================

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from ..database import log_operation
from ..exceptions import InvalidCredentialsError, UserDisabledError
from ..models import Actor, UserRole
from ..persistence.repositories import sessions_repository, users_repository
from ..services.users import public_user
from ..utils.conversions import utc_now
from .dependencies import get_current_user
from .security import (
    create_access_token,
    get_token_expiration_seconds,
    hash_token_for_storage,
    verify_password,
)


logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/auth",
    tags=["Autenticacion"],
    responses={
        401: {"description": "No autenticado"},
        403: {"description": "Acceso denegado"}
    }
)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


# =============================================================================
# ENDPOINT: LOGIN
# =============================================================================

@router.post("/login", summary="Login usuario")
def login(login_data: LoginRequest) -> Dict[str, Any]:
    """
    Flujo:
    1. Busca usuario por email (sin distinguir mayusculas)
    2. Verifica password contra hash
    3. Verifica usuario activo
    4. Genera JWT y crea la sesion
    """
    user = users_repository.get_by_email(login_data.email)

    if not user or not verify_password(login_data.password, user.get('password_hash')):
        log_operation('LOGIN_FAILED', 'users', user['id'] if user else None,
                      f"Login fallido: {login_data.email}")
        # Mensaje generico: no revela si el email existe
        raise InvalidCredentialsError()

    if not user.get('is_active'):
        raise UserDisabledError()

    token, jti, expires_at = create_access_token(
        user_id=user['id'],
        email=user['email'],
        role=UserRole(user['user_role'])
    )
    session = sessions_repository.create({
        'user_id': user['id'],
        'token_hash': hash_token_for_storage(token),
        'expires_at': expires_at,
    })
    log_operation('LOGIN', 'users', user['id'], f"Login: {user['email']}",
                  {"session_id": session['id'], "jti": jti}, id_usuario=user['id'])
    logger.info("Login %s (%s)", user['email'], user['user_role'])

    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_in": get_token_expiration_seconds(),
        "user": public_user(user),
    }


# =============================================================================
# ENDPOINT: LOGOUT
# =============================================================================

@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, summary="Logout usuario")
def logout(current_user: Actor = Depends(get_current_user)):
    """Revoca la sesion actual: el token deja de ser valido aunque no haya expirado."""
    sessions_repository.update(current_user.session_id, {'revoked_at': utc_now()})
    log_operation('LOGOUT', 'users', current_user.user_id, f"Logout: {current_user.email}",
                  id_usuario=current_user.user_id)
    return None


# =============================================================================
# ENDPOINT: ME
# =============================================================================

@router.get("/me", summary="Info usuario actual")
def get_me(current_user: Actor = Depends(get_current_user)) -> Dict[str, Any]:
    return current_user.model_dump(mode='json')
