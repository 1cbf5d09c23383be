# =============================================================================
# CREMERIA v1.0 - PRICING SERVICE PACKAGE
# =============================================================================
#   pricing/resolver.py - precio de lista y precio efectivo (oferta)
#   pricing/variants.py - maestro/presentaciones, ProductGroup
# =============================================================================

from .resolver import (
    EffectivePrice,
    resolve_client_price,
    resolve_effective_price,
    price_product,
)

from .variants import (
    ProductGroup,
    group_variants,
    display_products,
    build_product_groups,
    require_orderable,
)

__all__ = [
    'EffectivePrice',
    'resolve_client_price',
    'resolve_effective_price',
    'price_product',
    'ProductGroup',
    'group_variants',
    'display_products',
    'build_product_groups',
    'require_orderable',
]
