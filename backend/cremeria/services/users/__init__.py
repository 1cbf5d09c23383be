# =============================================================================
# CREMERIA v1.0 - USERS SERVICE PACKAGE
# =============================================================================

from .commands import (
    public_user,
    list_users,
    assignment_fields,
    assign_role,
)

__all__ = [
    'public_user',
    'list_users',
    'assignment_fields',
    'assign_role',
]
