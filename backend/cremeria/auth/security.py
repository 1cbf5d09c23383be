# =============================================================================
# CREMERIA v1.0 - SECURITY
# =============================================================================
# Funciones de seguridad: hashing password, generacion/validacion JWT.
#
# COMPONENTES:
# - Password hashing (bcrypt)
# - JWT token creation/validation (PyJWT, HS256)
# - Token storage hashing (SHA256)
# =============================================================================

import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

import bcrypt
import jwt

from ..config import config
from ..models import UserRole
from ..utils.conversions import utc_now


# =============================================================================
# FUNCIONES PASSWORD
# =============================================================================

def hash_password(password: str) -> str:
    """
    Genera hash bcrypt de la password.

    bcrypt incluye un salt aleatorio: el mismo input genera hashes
    distintos. Formato: $2b$<rounds>$<salt><hash>
    """
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifica password en claro contra el hash guardado.

    Returns:
        True si coincide; False si no coincide o el hash esta malformado
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        # Hash malformado
        return False


# =============================================================================
# FUNCIONES JWT
# =============================================================================

def create_access_token(
    user_id: str,
    email: str,
    role: UserRole,
    expires_delta: Optional[timedelta] = None
) -> Tuple[str, str, datetime]:
    """
    Crea un JWT access token.

    Args:
        user_id: id del usuario
        email: email del usuario
        role: rol del usuario
        expires_delta: duracion (default: JWT_EXPIRATION_HOURS)

    Returns:
        Tupla (token, jti, expires_at)

    Estructura payload:
        {"sub": user_id, "email": ..., "role": ..., "exp": ..., "iat": ..., "jti": ...}
    """
    now = utc_now()
    expire = now + (expires_delta or timedelta(hours=config.JWT_EXPIRATION_HOURS))

    # ID unico del token (trazabilidad de sesion)
    jti = secrets.token_hex(16)

    payload = {
        "sub": user_id,
        "email": email,
        "role": role.value if isinstance(role, UserRole) else str(role),
        "exp": expire,
        "iat": now,
        "jti": jti,
    }
    token = jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)
    return token, jti, expire


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decodifica y valida un JWT token (firma + expiracion).

    No verifica revocacion ni usuario activo: lo hace get_current_user.

    Returns:
        Payload o None si el token no es valido
    """
    try:
        payload = jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        # Incluye ExpiredSignatureError
        return None
    if not payload.get("sub") or not payload.get("jti"):
        return None
    return payload


# =============================================================================
# FUNCIONES STORAGE TOKEN
# =============================================================================

def hash_token_for_storage(token: str) -> str:
    """SHA256 del token (64 hex): el token nunca se guarda en claro."""
    return hashlib.sha256(token.encode()).hexdigest()


def get_token_expiration_seconds() -> int:
    """Duracion del token en segundos (campo expires_in del login)."""
    return config.JWT_EXPIRATION_HOURS * 3600
