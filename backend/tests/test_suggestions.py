# =============================================================================
# CREMERIA v1.0 - TEST SUGGESTIONS
# =============================================================================

import pytest
from decimal import Decimal

from cremeria.services.orders import build_suggestions

from factories import ClientFactory, OrderLineFactory, ProductFactory


def history_for(*product_ids):
    return [OrderLineFactory(product_id=pid) for pid in product_ids]


@pytest.mark.unit
class TestFrequentProducts:

    def test_most_ordered_first(self):
        a, b, c = ProductFactory(), ProductFactory(), ProductFactory()
        history = history_for(b["id"], a["id"], a["id"], c["id"], a["id"], c["id"])

        result = build_suggestions(history, [a, b, c], [])

        assert [p["id"] for p in result["frequent"]] == [a["id"], c["id"], b["id"]]

    def test_cart_products_excluded(self):
        a, b = ProductFactory(), ProductFactory()
        history = history_for(a["id"], a["id"], b["id"])

        result = build_suggestions(history, [a, b], [a["id"]])

        assert [p["id"] for p in result["frequent"]] == [b["id"]]

    def test_limited_to_four(self):
        products = ProductFactory.create_batch(6)
        history = history_for(*[p["id"] for p in products])

        result = build_suggestions(history, products, [])

        assert len(result["frequent"]) == 4

    def test_products_no_longer_in_catalog_dropped(self):
        a = ProductFactory()
        history = history_for("descontinuado", "descontinuado", a["id"])

        result = build_suggestions(history, [a], [])

        assert [p["id"] for p in result["frequent"]] == [a["id"]]

    def test_priced_for_client(self):
        a = ProductFactory(wholesale_price=Decimal("100"), price_list_2=Decimal("95"))
        client = ClientFactory(assigned_price_list="price_list_2")

        result = build_suggestions(history_for(a["id"]), [a], [], client)

        assert result["frequent"][0]["effective_price"] == Decimal("95")


@pytest.mark.unit
class TestOffers:

    def test_only_active_offers_outside_cart(self):
        offer = ProductFactory(is_on_offer=True, offer_price=Decimal("80"))
        in_cart = ProductFactory(is_on_offer=True, offer_price=Decimal("80"))
        no_price = ProductFactory(is_on_offer=True, offer_price=None)
        inactive = ProductFactory(is_on_offer=True, offer_price=Decimal("80"), is_active=False)
        regular = ProductFactory()

        result = build_suggestions([], [offer, in_cart, no_price, inactive, regular], [in_cart["id"]])

        assert [p["id"] for p in result["offers"]] == [offer["id"]]
        assert result["offers"][0]["is_discounted"] is True
        assert result["frequent"] == []
