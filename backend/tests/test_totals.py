# =============================================================================
# CREMERIA v1.0 - TEST ORDER TOTALS
# =============================================================================

import pytest
from decimal import Decimal

from cremeria.services.orders import (
    billed_quantity,
    cart_total,
    compute_total_final,
    fulfilled_quantity,
    line_view,
    order_display_total,
)

from factories import OrderFactory, OrderLineFactory, ProductFactory


@pytest.mark.unit
class TestBilledQuantity:

    def test_unfulfilled_line_bills_requested(self):
        line = OrderLineFactory(quantity_requested=Decimal("4"), quantity_fulfilled=None)

        assert fulfilled_quantity(line) == Decimal("4")

    def test_zero_fulfilled_is_zero(self):
        line = OrderLineFactory(quantity_requested=Decimal("4"), quantity_fulfilled=Decimal("0"))

        assert fulfilled_quantity(line) == Decimal("0")

    def test_measured_product_bills_final_quantity(self):
        product = ProductFactory.measured()
        line = OrderLineFactory(
            product_id=product["id"],
            quantity_fulfilled=Decimal("1"),
            final_billed_quantity=Decimal("0.85"),
        )

        assert billed_quantity(line, product) == Decimal("0.85")

    def test_measured_without_final_bills_fulfilled(self):
        product = ProductFactory.measured()
        line = OrderLineFactory(quantity_fulfilled=Decimal("2"), final_billed_quantity=None)

        assert billed_quantity(line, product) == Decimal("2")

    def test_final_quantity_ignored_for_regular_product(self):
        product = ProductFactory(has_final_measurement=False)
        line = OrderLineFactory(quantity_fulfilled=Decimal("3"), final_billed_quantity=Decimal("9"))

        assert billed_quantity(line, product) == Decimal("3")


@pytest.mark.unit
class TestTotalFinal:

    def test_total_is_pure_function_of_lines(self):
        products = {}
        lines = [
            OrderLineFactory(quantity_fulfilled=Decimal("3"), unit_price=Decimal("10")),
            OrderLineFactory(quantity_fulfilled=Decimal("1"), unit_price=Decimal("5")),
        ]

        first = compute_total_final(lines, products)
        second = compute_total_final(lines, products)

        assert first == Decimal("35")
        assert second == first

    def test_measured_line_contributes_weighed_amount(self):
        product = ProductFactory.measured()
        line = OrderLineFactory(
            product_id=product["id"],
            quantity_fulfilled=Decimal("1"),
            final_billed_quantity=Decimal("0.85"),
            unit_price=Decimal("100"),
        )

        assert compute_total_final([line], {product["id"]: product}) == Decimal("85")

    def test_empty_order_totals_zero(self):
        assert compute_total_final([], {}) == Decimal("0")

    def test_cart_total_uses_requested_quantities(self):
        lines = [
            OrderLineFactory(quantity_requested=Decimal("2"), unit_price=Decimal("145.00"),
                             quantity_fulfilled=Decimal("1")),
            OrderLineFactory(quantity_requested=Decimal("3"), unit_price=Decimal("52.00")),
        ]

        assert cart_total(lines) == Decimal("446.00")


@pytest.mark.unit
class TestDisplayTotal:

    def test_prefers_total_final(self):
        order = OrderFactory(total_estimated=Decimal("500"), total_final=Decimal("480"))

        assert order_display_total(order) == Decimal("480")

    def test_falls_back_to_estimated(self):
        order = OrderFactory(total_estimated=Decimal("500"), total_final=None)

        assert order_display_total(order) == Decimal("500")

    def test_zero_total_final_is_kept(self):
        order = OrderFactory(total_estimated=Decimal("500"), total_final=Decimal("0"))

        assert order_display_total(order) == Decimal("0")


@pytest.mark.unit
class TestLineView:

    def test_shortage_and_measurement_flags(self):
        product = ProductFactory.measured()
        line = OrderLineFactory(
            product_id=product["id"],
            quantity_requested=Decimal("2"),
            quantity_fulfilled=Decimal("1"),
            final_billed_quantity=Decimal("0.9"),
            unit_price=Decimal("100"),
        )

        view = line_view(line, product)

        assert view["has_shortage"] is True
        assert view["has_final_measurement"] is True
        assert view["final_measurement_unit"] == "kg"
        assert view["quantity_billed"] == Decimal("0.9")
        assert view["line_total"] == Decimal("90")
        assert view["warehouse_type"] == "refrigerados"
