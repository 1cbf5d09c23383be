# =============================================================================
# CREMERIA v1.0 - TEST WAREHOUSE FULFILLMENT
# =============================================================================
# Alcance por bodega, faltantes y cantidades capturadas
# =============================================================================

import pytest
from decimal import Decimal

from cremeria.exceptions import InsufficientRoleError, ValidationError
from cremeria.services.orders import (
    WarehouseFulfiller,
    WarehouseScope,
    has_shortages,
    lines_for_role,
    resolve_line_updates,
)

from factories import OrderLineFactory, ProductFactory


@pytest.fixture
def mixed_order():
    """Pedido con una linea por tipo de bodega."""
    products = {
        kind: ProductFactory(warehouse_type=kind)
        for kind in ("secos", "refrigerados", "barra", "mixto")
    }
    lines = {
        kind: OrderLineFactory(product_id=product["id"], quantity_requested=Decimal("5"))
        for kind, product in products.items()
    }
    products_by_id = {p["id"]: p for p in products.values()}
    return products, lines, products_by_id


@pytest.mark.unit
class TestWarehouseScope:

    @pytest.mark.parametrize("role,scope", [
        ("bodega_secos", WarehouseScope.SECOS),
        ("bodega_refrigerados", WarehouseScope.REFRIGERADOS),
        ("bodega_barra", WarehouseScope.BARRA),
    ])
    def test_scope_for_role(self, role, scope):
        assert WarehouseScope.for_role(role) == scope

    @pytest.mark.parametrize("role", ["cliente", "vendedor", "admin"])
    def test_non_warehouse_role_rejected(self, role):
        with pytest.raises(InsufficientRoleError):
            WarehouseScope.for_role(role)

    @pytest.mark.parametrize("scope,expected", [
        (WarehouseScope.SECOS, {"secos", "mixto"}),
        (WarehouseScope.REFRIGERADOS, {"refrigerados", "mixto"}),
        (WarehouseScope.BARRA, {"barra", "mixto"}),
    ])
    def test_visible_lines(self, mixed_order, scope, expected):
        products, lines, products_by_id = mixed_order

        visible = WarehouseFulfiller(scope).visible_lines(list(lines.values()), products_by_id)

        assert {lines[kind]["id"] for kind in expected} == {line["id"] for line in visible}

    def test_line_with_unknown_product_hidden(self):
        line = OrderLineFactory(product_id="missing")

        assert WarehouseFulfiller(WarehouseScope.SECOS).visible_lines([line], {}) == []

    def test_non_warehouse_roles_see_all_lines(self, mixed_order):
        _, lines, products_by_id = mixed_order

        assert len(lines_for_role("vendedor", list(lines.values()), products_by_id)) == 4
        assert len(lines_for_role("bodega_barra", list(lines.values()), products_by_id)) == 2


@pytest.mark.unit
class TestShortages:

    def test_shortage_outside_scope_ignored(self, mixed_order):
        _, lines, products_by_id = mixed_order
        lines["refrigerados"]["quantity_fulfilled"] = Decimal("2")

        fulfiller = WarehouseFulfiller(WarehouseScope.SECOS)

        assert fulfiller.has_shortages(list(lines.values()), products_by_id) is False
        assert has_shortages(list(lines.values())) is True

    def test_captured_quantities_override_stored(self, mixed_order):
        _, lines, products_by_id = mixed_order
        fulfiller = WarehouseFulfiller(WarehouseScope.SECOS)
        captured = {lines["mixto"]["id"]: {"quantity_fulfilled": Decimal("4")}}

        assert fulfiller.has_shortages(list(lines.values()), products_by_id, captured) is True

    def test_complete_fulfillment_has_no_shortage(self):
        line = OrderLineFactory(quantity_requested=Decimal("5"), quantity_fulfilled=Decimal("6"))

        assert has_shortages([line]) is False


@pytest.mark.unit
class TestResolveLineUpdates:

    def test_uncaptured_lines_keep_requested(self):
        line = OrderLineFactory(quantity_requested=Decimal("7"))

        updates = resolve_line_updates([line], {})

        assert updates == {line["id"]: {"quantity_fulfilled": Decimal("7")}}

    def test_captured_quantity_written(self):
        line = OrderLineFactory(quantity_requested=Decimal("7"))

        updates = resolve_line_updates([line], {}, {line["id"]: {"quantity_fulfilled": "5"}})

        assert updates[line["id"]]["quantity_fulfilled"] == Decimal("5")

    def test_measured_product_defaults_final_to_fulfilled(self):
        product = ProductFactory.measured()
        line = OrderLineFactory(product_id=product["id"], quantity_requested=Decimal("2"))

        updates = resolve_line_updates(
            [line], {product["id"]: product}, {line["id"]: {"quantity_fulfilled": Decimal("1")}}
        )

        assert updates[line["id"]] == {
            "quantity_fulfilled": Decimal("1"),
            "final_billed_quantity": Decimal("1"),
        }

    def test_final_quantity_ignored_for_regular_product(self):
        product = ProductFactory()
        line = OrderLineFactory(product_id=product["id"])

        updates = resolve_line_updates(
            [line], {product["id"]: product},
            {line["id"]: {"final_billed_quantity": Decimal("3")}}
        )

        assert "final_billed_quantity" not in updates[line["id"]]

    def test_line_outside_editable_set_rejected(self):
        line = OrderLineFactory()

        with pytest.raises(ValidationError):
            resolve_line_updates([line], {}, {"otra-linea": {"quantity_fulfilled": 1}})

    def test_negative_quantity_rejected(self):
        line = OrderLineFactory()

        with pytest.raises(ValidationError):
            resolve_line_updates([line], {}, {line["id"]: {"quantity_fulfilled": Decimal("-1")}})
