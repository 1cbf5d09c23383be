# =============================================================================
# CREMERIA v1.0 - AUTH PACKAGE
# =============================================================================
#   auth/security.py     - bcrypt, JWT, hash token
#   auth/dependencies.py - get_current_user (Actor), require_roles
#   auth/router.py       - /auth/login, /auth/logout, /auth/me
# =============================================================================

from .security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_access_token,
    hash_token_for_storage,
)

from .dependencies import (
    get_current_user,
    require_roles,
    require_admin,
    actor_from_user,
)

from .router import router as auth_router

__all__ = [
    'hash_password',
    'verify_password',
    'create_access_token',
    'decode_access_token',
    'hash_token_for_storage',
    'get_current_user',
    'require_roles',
    'require_admin',
    'actor_from_user',
    'auth_router',
]
