# =============================================================================
# CREMERIA v1.0 - PRODUCTS ROUTER
# =============================================================================
# Catalogo: listado con precios del cliente, agrupacion por variantes,
# alta/edicion/baja (admin) e importacion CSV
# =============================================================================

from decimal import Decimal
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import Response
from pydantic import BaseModel, Field

from ..auth.dependencies import get_current_user, require_admin
from ..models import Actor, Category, Unit, WarehouseType
from ..services.catalog import (
    create_product,
    deactivate_product,
    import_products_csv,
    list_product_groups,
    list_products,
    products_template_csv,
    update_product,
)
from ..utils.response import success_response


router = APIRouter(prefix="/products")


class ProductPayload(BaseModel):
    """Campos editables; en alta se validan sku, name y wholesale_price."""
    sku: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[Category] = None
    unit: Optional[Unit] = None
    wholesale_price: Optional[Decimal] = Field(None, ge=0)
    price_list_1: Optional[Decimal] = Field(None, ge=0)
    price_list_2: Optional[Decimal] = Field(None, ge=0)
    price_list_3: Optional[Decimal] = Field(None, ge=0)
    price_list_4: Optional[Decimal] = Field(None, ge=0)
    price_list_5: Optional[Decimal] = Field(None, ge=0)
    is_active: Optional[bool] = None
    warehouse_type: Optional[WarehouseType] = None
    has_final_measurement: Optional[bool] = None
    final_measurement_unit: Optional[str] = None
    is_on_offer: Optional[bool] = None
    offer_price: Optional[Decimal] = Field(None, ge=0)
    offer_description: Optional[str] = None
    is_master_product: Optional[bool] = None
    master_product_id: Optional[str] = None
    variant_name: Optional[str] = None
    variant_order: Optional[int] = None


# =============================================================================
# CONSULTA
# =============================================================================

@router.get("")
def lista_productos(
    category: Optional[Category] = Query(None),
    include_inactive: bool = Query(False, description="Solo admin"),
    actor: Actor = Depends(get_current_user)
) -> Dict[str, Any]:
    """Productos con list_price, effective_price e is_discounted para el usuario."""
    products = list_products(
        actor,
        include_inactive=include_inactive,
        category=category.value if category else None,
    )
    return success_response(products, count=len(products))


@router.get("/groups")
def grupos_productos(
    category: Optional[Category] = Query(None),
    actor: Actor = Depends(get_current_user)
) -> Dict[str, Any]:
    """Maestros con sus presentaciones ordenadas e independientes."""
    groups = list_product_groups(actor, category=category.value if category else None)
    return success_response(groups, count=len(groups))


@router.get("/import/template")
def plantilla_importacion(actor: Actor = Depends(require_admin)) -> Response:
    return Response(
        content=products_template_csv(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="plantilla_productos.csv"'},
    )


# =============================================================================
# ADMINISTRACION
# =============================================================================

@router.post("", status_code=status.HTTP_201_CREATED)
def crear_producto(payload: ProductPayload, actor: Actor = Depends(require_admin)) -> Dict[str, Any]:
    product = create_product(actor, payload.model_dump(exclude_unset=True))
    return success_response(product, "Producto creado")


@router.put("/{product_id}")
def editar_producto(
    product_id: str,
    payload: ProductPayload,
    actor: Actor = Depends(require_admin)
) -> Dict[str, Any]:
    product = update_product(actor, product_id, payload.model_dump(exclude_unset=True))
    return success_response(product, "Producto actualizado")


@router.patch("/{product_id}/deactivate")
def desactivar_producto(product_id: str, actor: Actor = Depends(require_admin)) -> Dict[str, Any]:
    return success_response(deactivate_product(actor, product_id), "Producto desactivado")


@router.post("/import")
async def importar_productos(
    file: UploadFile = File(...),
    actor: Actor = Depends(require_admin)
) -> Dict[str, Any]:
    """
    Importa productos desde CSV (columnas de la plantilla).

    Returns:
        "N de M productos importados" con lotes fallidos y filas omitidas
    """
    content = await file.read()
    return import_products_csv(content, user_id=actor.user_id)
