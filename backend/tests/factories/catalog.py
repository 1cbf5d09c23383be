# =============================================================================
# CREMERIA v1.0 - CATALOG FACTORIES
# =============================================================================
# Factories de productos y clientes de test
# =============================================================================

import factory
from decimal import Decimal


class ProductFactory(factory.Factory):
    """
    Factory para productos del catalogo.
    """

    class Meta:
        model = dict

    id = factory.Sequence(lambda n: f"prod{n:05d}")
    sku = factory.Sequence(lambda n: f"TST{n:04d}")
    name = factory.Sequence(lambda n: f"Producto Test {n}")
    description = None
    category = "quesos"
    unit = "pieza"

    # Precios
    wholesale_price = Decimal("100.00")
    price_list_1 = None
    price_list_2 = None
    price_list_3 = None
    price_list_4 = None
    price_list_5 = None

    is_active = True
    warehouse_type = "secos"
    has_final_measurement = False
    final_measurement_unit = None

    # Oferta
    is_on_offer = False
    offer_price = None
    offer_description = None

    # Variantes
    is_master_product = False
    master_product_id = None
    variant_name = None
    variant_order = 0

    @classmethod
    def measured(cls, **kwargs):
        """Producto que se factura por peso medido (ej. queso por kg)."""
        defaults = {
            "unit": "kg",
            "warehouse_type": "refrigerados",
            "has_final_measurement": True,
            "final_measurement_unit": "kg",
        }
        defaults.update(kwargs)
        return cls(**defaults)

    @classmethod
    def master_with_variants(cls, orders: list, **kwargs):
        """Producto maestro con una variante por cada variant_order indicado."""
        master = cls(is_master_product=True, **kwargs)
        variants = [
            cls(
                master_product_id=master["id"],
                variant_name=f"Presentacion {i}",
                variant_order=order,
            )
            for i, order in enumerate(orders)
        ]
        return master, variants


class ClientFactory(factory.Factory):
    """
    Factory para clientes mayoristas.
    """

    class Meta:
        model = dict

    id = factory.Sequence(lambda n: f"cli{n:05d}")
    business_name = factory.Sequence(lambda n: f"Cremeria Test {n}")
    legal_name = factory.LazyAttribute(lambda obj: f"{obj.business_name} SA de CV")
    rfc = None
    delivery_address = factory.Sequence(lambda n: f"Calle Test {n}")
    phone = None
    email = None
    route_zone = factory.Iterator(["Norte", "Sur", "Centro"])
    client_type = "mayorista_b"
    assigned_price_list = "price_list_1"
    is_active = True
