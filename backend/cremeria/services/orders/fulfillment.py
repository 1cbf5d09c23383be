# =============================================================================
# CREMERIA v1.0 - WAREHOUSE FULFILLMENT
# =============================================================================
# Un solo surtidor parametrizado por bodega (secos, refrigerados, barra).
# Cada bodega ve las lineas de su tipo mas las de tipo mixto; el faltante
# se evalua solo sobre ese subconjunto.
# =============================================================================

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Union

from ...exceptions import InsufficientRoleError, ValidationError
from ...models import UserRole, WarehouseType
from ...utils.conversions import to_decimal
from .totals import fulfilled_quantity, billed_quantity


class WarehouseScope(str, Enum):
    """Especializacion de bodega."""
    SECOS = "secos"
    REFRIGERADOS = "refrigerados"
    BARRA = "barra"

    @property
    def visible_types(self) -> FrozenSet[WarehouseType]:
        return frozenset({WarehouseType(self.value), WarehouseType.MIXTO})

    @classmethod
    def for_role(cls, role: Union[str, UserRole]) -> "WarehouseScope":
        """bodega_secos -> SECOS, etc."""
        role = UserRole(role)
        if not role.is_warehouse:
            raise InsufficientRoleError(
                "Solo el personal de bodega puede surtir pedidos",
                {"role": role.value}
            )
        return cls(role.value[len("bodega_"):])


# Cantidades capturadas por linea: {line_id: {"quantity_fulfilled": x, "final_billed_quantity": y}}
LineQuantities = Mapping[str, Mapping[str, Any]]


class WarehouseFulfiller:
    """Operaciones de surtido acotadas a una bodega."""

    def __init__(self, scope: WarehouseScope):
        self.scope = WarehouseScope(scope)

    def sees(self, product: Optional[Dict[str, Any]]) -> bool:
        if not product or not product.get('warehouse_type'):
            return False
        return product['warehouse_type'] in {t.value for t in self.scope.visible_types}

    def visible_lines(
        self,
        lines: List[Dict[str, Any]],
        products_by_id: Mapping[str, Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        return [line for line in lines if self.sees(products_by_id.get(line.get('product_id')))]

    def has_shortages(
        self,
        lines: List[Dict[str, Any]],
        products_by_id: Mapping[str, Dict[str, Any]],
        quantities: LineQuantities = None
    ) -> bool:
        return has_shortages(self.visible_lines(lines, products_by_id), quantities)


def lines_for_role(
    role: Union[str, UserRole],
    lines: List[Dict[str, Any]],
    products_by_id: Mapping[str, Dict[str, Any]]
) -> List[Dict[str, Any]]:
    """Lineas visibles para el rol: bodegas filtran, el resto ve todas."""
    role = UserRole(role)
    if role.is_warehouse:
        return WarehouseFulfiller(WarehouseScope.for_role(role)).visible_lines(lines, products_by_id)
    return list(lines)


def has_shortages(lines: List[Dict[str, Any]], quantities: LineQuantities = None) -> bool:
    """True si alguna linea tiene surtido menor a lo solicitado."""
    quantities = quantities or {}
    for line in lines:
        captured = quantities.get(line['id'], {})
        fulfilled = to_decimal(captured.get('quantity_fulfilled'))
        if fulfilled is None:
            fulfilled = fulfilled_quantity(line)
        if fulfilled < (to_decimal(line.get('quantity_requested')) or Decimal('0')):
            return True
    return False


def _non_negative(value: Any, line_id: str, field: str) -> Decimal:
    quantity = to_decimal(value)
    if quantity is None or quantity < 0:
        raise ValidationError(
            "Las cantidades deben ser numeros mayores o iguales a cero",
            {"line_id": line_id, "field": field}
        )
    return quantity


def resolve_line_updates(
    lines: List[Dict[str, Any]],
    products_by_id: Mapping[str, Dict[str, Any]],
    quantities: LineQuantities = None
) -> Dict[str, Dict[str, Decimal]]:
    """
    Valores a escribir en cada linea editable.

    Las lineas sin captura conservan su valor actual (surtido o, si falta,
    solicitado). final_billed_quantity solo aplica a productos con medicion
    final.

    Raises:
        ValidationError: linea fuera del conjunto editable o cantidad negativa
    """
    quantities = quantities or {}
    editable = {line['id']: line for line in lines}

    unknown = [line_id for line_id in quantities if line_id not in editable]
    if unknown:
        raise ValidationError(
            "Hay lineas que no pertenecen al pedido o a tu bodega",
            {"line_ids": unknown}
        )

    updates = {}
    for line_id, line in editable.items():
        captured = quantities.get(line_id, {})
        product = products_by_id.get(line.get('product_id'))

        fulfilled = captured.get('quantity_fulfilled')
        update = {
            'quantity_fulfilled': (
                _non_negative(fulfilled, line_id, 'quantity_fulfilled')
                if fulfilled is not None else fulfilled_quantity(line)
            )
        }
        if product is not None and product.get('has_final_measurement'):
            final = captured.get('final_billed_quantity')
            update['final_billed_quantity'] = (
                _non_negative(final, line_id, 'final_billed_quantity')
                if final is not None else billed_quantity({**line, **update}, product)
            )
        updates[line_id] = update
    return updates
