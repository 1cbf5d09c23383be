# =============================================================================
# CREMERIA v1.0 - PRODUCT VARIANTS
# =============================================================================
# Agrupacion producto maestro -> presentaciones (profundidad fija 1)
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ...exceptions import VariantNotSelectedError
from .resolver import price_product


@dataclass
class ProductGroup:
    """Producto mostrable con sus presentaciones ordenadas (vacio si es independiente)."""
    master: Dict[str, Any]
    variants: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def is_master(self) -> bool:
        return bool(self.master.get('is_master_product'))

    def to_dict(self) -> Dict[str, Any]:
        return {'product': self.master, 'variants': self.variants}


def _variant_order(product: Dict[str, Any]) -> int:
    return product.get('variant_order') or 0


def group_variants(
    products: List[Dict[str, Any]],
    client: Optional[Dict[str, Any]] = None
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Agrupa las variantes por master_product_id.

    Cada lista se ordena por variant_order ascendente (faltante = 0),
    conservando el orden original en empates. Las variantes llevan los
    precios resueltos para el cliente.

    Returns:
        {master_id: [variante, ...]}
    """
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for product in products:
        master_id = product.get('master_product_id')
        if master_id:
            groups.setdefault(master_id, []).append(product)

    return {
        master_id: [price_product(v, client) for v in sorted(variants, key=_variant_order)]
        for master_id, variants in groups.items()
    }


def display_products(products: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Productos maestros e independientes (se excluyen las variantes)."""
    return [
        p for p in products
        if p.get('is_master_product') or not p.get('master_product_id')
    ]


def build_product_groups(
    products: List[Dict[str, Any]],
    client: Optional[Dict[str, Any]] = None
) -> List[ProductGroup]:
    """
    Resuelve el catalogo una sola vez en ProductGroup.

    Los maestros no tienen precio propio; los independientes se devuelven
    con precio resuelto y sin variantes.
    """
    variants_by_master = group_variants(products, client)
    groups = []
    for product in display_products(products):
        if product.get('is_master_product'):
            groups.append(ProductGroup(product, variants_by_master.get(product['id'], [])))
        else:
            groups.append(ProductGroup(price_product(product, client)))
    return groups


def require_orderable(product: Dict[str, Any]) -> None:
    """Rechaza un producto maestro agregado sin elegir presentacion."""
    if product.get('is_master_product'):
        raise VariantNotSelectedError(
            f"Selecciona una presentacion de {product.get('name')}",
            {"product_id": product.get('id')}
        )
