# =============================================================================
# CREMERIA v1.0 - USERS REPOSITORY
# =============================================================================
# Repository para usuarios y sesiones
# =============================================================================

from typing import Any, Dict, Optional

from ..tables import USERS, USER_SESSIONS
from .base import EntityRepository


class UsersRepository(EntityRepository):
    """Repository para users."""

    def __init__(self):
        super().__init__('users', USERS, default_sort='full_name')

    def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Usuario por email (sin distinguir mayusculas)."""
        rows = self.filter({'email': (email or '').strip().lower()}, limit=1)
        return rows[0] if rows else None


class SessionsRepository(EntityRepository):
    """Repository para user_sessions (revocacion de tokens)."""

    def __init__(self):
        super().__init__('user_sessions', USER_SESSIONS)

    def get_by_token_hash(self, token_hash: str) -> Optional[Dict[str, Any]]:
        rows = self.filter({'token_hash': token_hash}, limit=1)
        return rows[0] if rows else None


# Instancias singleton
users_repository = UsersRepository()
sessions_repository = SessionsRepository()
