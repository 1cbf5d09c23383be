# =============================================================================
# CREMERIA v1.0 - ORDER STATE MACHINE
# =============================================================================
# Estados, acciones y rol autorizado para cada transicion del pedido.
#
#   (nuevo)            --create-->               pendiente_revision  [cliente]
#   pendiente_revision --start_fulfillment-->    en_surtido          [bodega_*]
#   en_surtido         --complete_fulfillment--> listo_revision      [bodega_*]
#   listo_revision     --save_adjustments-->     ajustado            [vendedor]
#   ajustado           --save_adjustments-->     ajustado            [vendedor]
#   listo_revision/ajustado --approve-->         listo_captura       [vendedor]
#   (no terminal)      --cancel-->               cancelado           [vendedor]
# =============================================================================

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional, Union

from ...exceptions import InvalidTransitionError, InsufficientRoleError
from ...models import OrderStatus, UserRole, TERMINAL_STATUSES, WAREHOUSE_ROLES


class OrderAction(str, Enum):
    """Acciones que cambian el estado del pedido."""
    CREATE = "create"
    START_FULFILLMENT = "start_fulfillment"
    COMPLETE_FULFILLMENT = "complete_fulfillment"
    SAVE_ADJUSTMENTS = "save_adjustments"
    APPROVE = "approve"
    CANCEL = "cancel"


@dataclass(frozen=True)
class Transition:
    sources: FrozenSet[Optional[OrderStatus]]
    target: OrderStatus
    roles: FrozenSet[UserRole]


REVIEW_STATUSES = frozenset({OrderStatus.LISTO_REVISION, OrderStatus.AJUSTADO})
CANCELLABLE_STATUSES = frozenset(set(OrderStatus) - TERMINAL_STATUSES)
SELLER_ROLES = frozenset({UserRole.VENDEDOR})

TRANSITIONS = {
    OrderAction.CREATE: Transition(
        frozenset({None}), OrderStatus.PENDIENTE_REVISION, frozenset({UserRole.CLIENTE})
    ),
    OrderAction.START_FULFILLMENT: Transition(
        frozenset({OrderStatus.PENDIENTE_REVISION}), OrderStatus.EN_SURTIDO, WAREHOUSE_ROLES
    ),
    OrderAction.COMPLETE_FULFILLMENT: Transition(
        frozenset({OrderStatus.EN_SURTIDO}), OrderStatus.LISTO_REVISION, WAREHOUSE_ROLES
    ),
    OrderAction.SAVE_ADJUSTMENTS: Transition(
        REVIEW_STATUSES, OrderStatus.AJUSTADO, SELLER_ROLES
    ),
    OrderAction.APPROVE: Transition(
        REVIEW_STATUSES, OrderStatus.LISTO_CAPTURA, SELLER_ROLES
    ),
    OrderAction.CANCEL: Transition(
        CANCELLABLE_STATUSES, OrderStatus.CANCELADO, SELLER_ROLES
    ),
}

# Mensaje mostrado tras cada accion
ACTION_MESSAGES = {
    OrderAction.CREATE: "Pedido enviado correctamente",
    OrderAction.START_FULFILLMENT: 'Pedido marcado como "En surtido"',
    OrderAction.COMPLETE_FULFILLMENT: "Pedido completado y listo para revisión",
    OrderAction.SAVE_ADJUSTMENTS: "Pedido ajustado correctamente",
    OrderAction.APPROVE: "Pedido listo para captura en Punto Zero",
    OrderAction.CANCEL: "Pedido cancelado",
}


def _status(value: Union[str, OrderStatus, None]) -> Optional[OrderStatus]:
    return OrderStatus(value) if value is not None else None


def is_terminal(status: Union[str, OrderStatus]) -> bool:
    return OrderStatus(status) in TERMINAL_STATUSES


def next_status(
    current: Union[str, OrderStatus, None],
    action: OrderAction,
    role: Union[str, UserRole]
) -> OrderStatus:
    """
    Estado resultante de aplicar action desde current con el rol dado.

    Args:
        current: Estado actual (None para un pedido nuevo)
        action: Accion solicitada
        role: Rol del usuario que la ejecuta

    Returns:
        Nuevo estado

    Raises:
        InsufficientRoleError: el rol no puede ejecutar la accion
        InvalidTransitionError: la accion no es valida desde el estado actual
    """
    transition = TRANSITIONS[OrderAction(action)]
    role = UserRole(role)
    current = _status(current)

    if role not in transition.roles:
        raise InsufficientRoleError(
            extra={"action": transition_name(action), "role": role.value}
        )
    if current not in transition.sources:
        raise InvalidTransitionError(
            f"No se puede ejecutar '{transition_name(action)}' con el pedido en estado "
            f"'{current.value if current else 'nuevo'}'",
            {"action": transition_name(action), "status": current.value if current else None}
        )
    return transition.target


def allowed_actions(current: Union[str, OrderStatus], role: Union[str, UserRole]) -> List[OrderAction]:
    """Acciones que el rol puede ejecutar ahora sobre un pedido existente."""
    current = _status(current)
    role = UserRole(role)
    return [
        action for action, transition in TRANSITIONS.items()
        if current in transition.sources and role in transition.roles
    ]


def transition_name(action: Union[str, OrderAction]) -> str:
    return OrderAction(action).value
