# =============================================================================
# CREMERIA v1.0 - CATALOG COMMANDS
# =============================================================================
# Alta/edicion de productos y clientes, baja logica de productos y
# listados de catalogo con precios resueltos para el usuario
# =============================================================================

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ...database import log_operation
from ...exceptions import (
    ClientNotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from ...models import Actor, Client, Product, UserRole
from ...persistence.repositories import clients_repository, products_repository
from ..pricing import build_product_groups, price_product


logger = logging.getLogger(__name__)


PRODUCT_REQUIRED_FIELDS = ('sku', 'name', 'wholesale_price')


def _first_error_message(exc: PydanticValidationError) -> str:
    message = exc.errors()[0].get('msg', '')
    # Los ValueError de validadores llegan como "Value error, <mensaje>"
    return message.split(', ', 1)[1] if message.startswith('Value error, ') else message


def _dump(model) -> Dict[str, Any]:
    """Modelo -> dict con enums como valor."""
    return {
        key: (value.value if hasattr(value, 'value') else value)
        for key, value in model.model_dump().items()
    }


# =============================================================================
# PRODUCTOS
# =============================================================================

def validate_product(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Valida un producto.

    Raises:
        ValidationError: "Completa los campos requeridos" si faltan sku,
                         name o wholesale_price; mensaje del invariante si no;
                         master_product_id inexistente o que no es maestro
    """
    missing = [f for f in PRODUCT_REQUIRED_FIELDS if data.get(f) in (None, '')]
    if missing:
        raise ValidationError("Completa los campos requeridos", {"fields": missing})
    try:
        record = _dump(Product(**data))
    except PydanticValidationError as e:
        raise ValidationError(
            _first_error_message(e),
            {"fields": [".".join(str(p) for p in err['loc']) for err in e.errors()]}
        ) from e

    master_id = record.get('master_product_id')
    if master_id:
        master = products_repository.get_by_id(master_id)
        if not master:
            raise ValidationError("El producto maestro no existe",
                                  {"fields": ["master_product_id"]})
        if not master.get('is_master_product'):
            raise ValidationError("El producto indicado no es un producto maestro",
                                  {"fields": ["master_product_id"]})
    return record


def create_product(actor: Actor, data: Dict[str, Any]) -> Dict[str, Any]:
    """Crea un producto validado."""
    record = validate_product(data)
    product = products_repository.create(record)
    log_operation('CREATE_PRODUCT', 'products', product['id'], f"Producto {product['sku']} creado",
                  id_usuario=actor.user_id)
    return product


def update_product(actor: Actor, product_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
    """
    Actualiza un producto: valida el registro resultante y escribe solo
    los campos indicados.
    """
    current = products_repository.get_by_id(product_id)
    if not current:
        raise ProductNotFoundError(extra={"product_id": product_id})

    merged = {k: v for k, v in {**current, **changes}.items() if k in Product.model_fields}
    validated = validate_product(merged)
    partial = {k: validated[k] for k in changes if k in validated}

    product = products_repository.update(product_id, partial)
    log_operation('UPDATE_PRODUCT', 'products', product_id,
                  f"Producto {product['sku']} actualizado ({', '.join(sorted(partial))})",
                  id_usuario=actor.user_id)
    return product


def deactivate_product(actor: Actor, product_id: str) -> Dict[str, Any]:
    """Baja logica (is_active=false); el producto nunca se borra."""
    product = products_repository.update(product_id, {'is_active': False})
    if not product:
        raise ProductNotFoundError(extra={"product_id": product_id})
    log_operation('DEACTIVATE_PRODUCT', 'products', product_id,
                  f"Producto {product['sku']} desactivado", id_usuario=actor.user_id)
    logger.info("Producto %s desactivado por %s", product['sku'], actor.email)
    return product


def _pricing_client(actor: Actor) -> Optional[Dict[str, Any]]:
    """Cliente cuyos precios ve el usuario (solo rol cliente)."""
    if actor.role == UserRole.CLIENTE and actor.assigned_client_id:
        return clients_repository.get_by_id(actor.assigned_client_id)
    return None


def list_products(actor: Actor, include_inactive: bool = False, category: str = None) -> List[Dict[str, Any]]:
    """
    Productos con precio resuelto para el usuario.

    Solo admin puede ver inactivos.
    """
    if include_inactive and actor.role == UserRole.ADMIN:
        products = products_repository.list()
    else:
        products = products_repository.list_active()
    if category:
        products = [p for p in products if p.get('category') == category]

    client = _pricing_client(actor)
    return [price_product(p, client) for p in products]


def list_product_groups(actor: Actor, category: str = None) -> List[Dict[str, Any]]:
    """Catalogo de pedido: maestros con presentaciones e independientes."""
    products = products_repository.list_active()
    if category:
        products = [p for p in products if p.get('category') == category]
    groups = build_product_groups(products, _pricing_client(actor))
    return [g.to_dict() for g in groups]


# =============================================================================
# CLIENTES
# =============================================================================

def validate_client(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Valida un cliente.

    Raises:
        ValidationError: "El nombre comercial es requerido" u otro campo invalido
    """
    if not (data.get('business_name') or '').strip():
        raise ValidationError("El nombre comercial es requerido", {"fields": ['business_name']})
    try:
        return _dump(Client(**data))
    except PydanticValidationError as e:
        raise ValidationError(
            _first_error_message(e),
            {"fields": [".".join(str(p) for p in err['loc']) for err in e.errors()]}
        ) from e


def list_clients(active_only: bool = False) -> List[Dict[str, Any]]:
    return clients_repository.list_active() if active_only else clients_repository.list()


def create_client(actor: Actor, data: Dict[str, Any]) -> Dict[str, Any]:
    record = validate_client(data)
    client = clients_repository.create(record)
    log_operation('CREATE_CLIENT', 'clients', client['id'],
                  f"Cliente {client['business_name']} creado", id_usuario=actor.user_id)
    return client


def update_client(actor: Actor, client_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
    current = clients_repository.get_by_id(client_id)
    if not current:
        raise ClientNotFoundError(extra={"client_id": client_id})

    merged = {k: v for k, v in {**current, **changes}.items() if k in Client.model_fields}
    validated = validate_client(merged)
    partial = {k: validated[k] for k in changes if k in validated}

    client = clients_repository.update(client_id, partial)
    log_operation('UPDATE_CLIENT', 'clients', client_id,
                  f"Cliente {client['business_name']} actualizado", id_usuario=actor.user_id)
    return client
