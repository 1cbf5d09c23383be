# =============================================================================
# CREMERIA v1.0 - TEST CATALOG API
# =============================================================================
# Catalogo con precios por cliente, variantes, alta/baja de productos,
# clientes e importacion CSV via endpoint
# =============================================================================

import pytest
from decimal import Decimal


def _money(value) -> Decimal:
    return Decimal(str(value))


@pytest.mark.integration
class TestCatalogQueries:

    def test_client_sees_own_price_list(self, client, customer_headers, make_product):
        make_product(sku="QSO010", wholesale_price=Decimal("145.00"), price_list_2=Decimal("138.00"))

        response = client.get("/api/v1/products", headers=customer_headers)

        assert response.status_code == 200
        product = response.json()["data"][0]
        assert _money(product["list_price"]) == Decimal("138.00")
        assert _money(product["effective_price"]) == Decimal("138.00")
        assert product["is_discounted"] is False

    def test_offer_applies_when_cheaper(self, client, customer_headers, make_product):
        make_product(
            wholesale_price=Decimal("60.00"), price_list_2=Decimal("55.00"),
            is_on_offer=True, offer_price=Decimal("50.00"),
        )

        product = client.get("/api/v1/products", headers=customer_headers).json()["data"][0]

        assert _money(product["effective_price"]) == Decimal("50.00")
        assert product["is_discounted"] is True

    def test_staff_sees_wholesale_price(self, client, headers_for, make_product):
        make_product(wholesale_price=Decimal("145.00"), price_list_2=Decimal("138.00"))

        product = client.get("/api/v1/products", headers=headers_for("vendedor")).json()["data"][0]

        assert _money(product["list_price"]) == Decimal("145.00")

    def test_inactive_hidden_except_for_admin(self, client, headers_for, admin_headers, make_product):
        make_product(sku="ACT001")
        make_product(sku="INA001", is_active=False)

        seller = client.get(
            "/api/v1/products", params={"include_inactive": True}, headers=headers_for("vendedor")
        ).json()
        admin = client.get(
            "/api/v1/products", params={"include_inactive": True}, headers=admin_headers
        ).json()

        assert [p["sku"] for p in seller["data"]] == ["ACT001"]
        assert {p["sku"] for p in admin["data"]} == {"ACT001", "INA001"}

    def test_category_filter(self, client, customer_headers, make_product):
        make_product(sku="QSO020", category="quesos")
        make_product(sku="CRM020", category="cremas")

        response = client.get("/api/v1/products", params={"category": "cremas"}, headers=customer_headers)

        assert [p["sku"] for p in response.json()["data"]] == ["CRM020"]

    def test_groups_with_sorted_variants(self, client, customer_headers, make_product):
        master = make_product(sku="QSO100", name="Queso Panela", is_master_product=True)
        make_product(sku="QSO101", master_product_id=master["id"], variant_name="1 kg", variant_order=2)
        make_product(sku="QSO102", master_product_id=master["id"], variant_name="500 g", variant_order=1)
        make_product(sku="CRM100", name="Crema Natural")

        response = client.get("/api/v1/products/groups", headers=customer_headers)

        assert response.status_code == 200
        groups = {g["product"]["sku"]: g for g in response.json()["data"]}
        assert set(groups) == {"QSO100", "CRM100"}
        assert [v["sku"] for v in groups["QSO100"]["variants"]] == ["QSO102", "QSO101"]
        assert groups["CRM100"]["variants"] == []
        assert "effective_price" in groups["QSO100"]["variants"][0]


@pytest.mark.integration
class TestProductAdmin:

    def test_create_product(self, client, admin_headers):
        response = client.post(
            "/api/v1/products",
            json={
                "sku": " crm050 ",
                "name": "Crema Acida 1L",
                "category": "cremas",
                "unit": "litro",
                "wholesale_price": "52.00",
            },
            headers=admin_headers
        )

        assert response.status_code == 201
        product = response.json()["data"]
        assert product["sku"] == "CRM050"
        assert product["warehouse_type"] == "secos"
        assert product["is_active"] is True

    def test_create_requires_fields(self, client, admin_headers):
        response = client.post("/api/v1/products", json={"name": "Sin SKU"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "Completa los campos requeridos"

    def test_master_cannot_be_variant(self, client, admin_headers, make_product):
        master = make_product(is_master_product=True)

        response = client.post(
            "/api/v1/products",
            json={
                "sku": "X1", "name": "Invalido", "wholesale_price": "10",
                "is_master_product": True, "master_product_id": master["id"],
                "variant_name": "1 kg",
            },
            headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "Un producto no puede ser maestro y variante a la vez"

    def test_variant_requires_existing_master(self, client, admin_headers):
        response = client.post(
            "/api/v1/products",
            json={
                "sku": "QSO010", "name": "Queso Oaxaca", "wholesale_price": "140",
                "master_product_id": "no-existe", "variant_name": "1 kg",
            },
            headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "El producto maestro no existe"

    def test_variant_cannot_point_to_non_master(self, client, admin_headers, make_product):
        plain = make_product(is_master_product=False)

        response = client.post(
            "/api/v1/products",
            json={
                "sku": "QSO011", "name": "Queso Oaxaca", "wholesale_price": "140",
                "master_product_id": plain["id"], "variant_name": "1 kg",
            },
            headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "El producto indicado no es un producto maestro"

    def test_variant_of_master_created(self, client, admin_headers, make_product):
        master = make_product(is_master_product=True, name="Queso Oaxaca")

        response = client.post(
            "/api/v1/products",
            json={
                "sku": "QSO012", "name": "Queso Oaxaca 1kg", "wholesale_price": "140",
                "master_product_id": master["id"], "variant_name": "1 kg",
            },
            headers=admin_headers
        )

        assert response.status_code == 201
        assert response.json()["data"]["master_product_id"] == master["id"]

    def test_update_only_changed_fields(self, client, admin_headers, make_product):
        product = make_product(sku="MNT050", wholesale_price=Decimal("45.00"))

        response = client.put(
            f"/api/v1/products/{product['id']}",
            json={"offer_price": "39.90", "is_on_offer": True},
            headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert _money(data["offer_price"]) == Decimal("39.90")
        assert _money(data["wholesale_price"]) == Decimal("45.00")

    def test_deactivate_is_soft(self, client, admin_headers, customer_headers, make_product):
        product = make_product()

        response = client.patch(f"/api/v1/products/{product['id']}/deactivate", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["is_active"] is False
        assert client.get("/api/v1/products", headers=customer_headers).json()["count"] == 0

    def test_seller_cannot_create(self, client, headers_for):
        response = client.post(
            "/api/v1/products",
            json={"sku": "X", "name": "X", "wholesale_price": "1"},
            headers=headers_for("vendedor")
        )

        assert response.status_code == 403

    def test_import_endpoint(self, client, admin_headers):
        content = (
            "sku,name,category,unit,wholesale_price\n"
            "QSO300,Queso Fresco,quesos,kg,120.00\n"
            "CRM300,Crema,cremas,litro,no-es-precio\n"
        ).encode("utf-8")

        response = client.post(
            "/api/v1/products/import",
            files={"file": ("productos.csv", content, "text/csv")},
            headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["message"] == "1 de 2 productos importados"

    def test_template_download(self, client, admin_headers):
        response = client.get("/api/v1/products/import/template", headers=admin_headers)

        assert response.status_code == 200
        assert response.text.splitlines()[0].startswith("sku,name,")


@pytest.mark.integration
class TestClientsApi:

    def test_create_client(self, client, admin_headers):
        response = client.post(
            "/api/v1/clients",
            json={
                "business_name": "  Abarrotes La Esperanza ",
                "rfc": "aes010101abc",
                "assigned_price_list": "price_list_3",
            },
            headers=admin_headers
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["business_name"] == "Abarrotes La Esperanza"
        assert data["rfc"] == "AES010101ABC"
        assert data["client_type"] == "mayorista_b"

    def test_business_name_required(self, client, admin_headers):
        response = client.post("/api/v1/clients", json={"business_name": "  "}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "El nombre comercial es requerido"

    def test_update_unknown_client(self, client, admin_headers):
        response = client.put("/api/v1/clients/no-existe", json={"phone": "555"}, headers=admin_headers)

        assert response.status_code == 404

    def test_seller_lists_clients(self, client, headers_for, make_client):
        make_client()

        response = client.get("/api/v1/clients", headers=headers_for("vendedor"))

        assert response.status_code == 200
        assert response.json()["count"] == 1

    def test_client_role_cannot_list(self, client, customer_headers):
        response = client.get("/api/v1/clients", headers=customer_headers)

        assert response.status_code == 403
