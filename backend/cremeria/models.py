# =============================================================================
# CREMERIA v1.0 - MODELS
# =============================================================================
# Enumeraciones y modelos Pydantic del dominio.
#
# ESTRUCTURA:
# - Enumeraciones (estados, roles, catalogo)
# - Modelos de entidad (Product, Client) con sus invariantes
# - Actor: contexto de sesion explicito que reciben las operaciones
# =============================================================================

from decimal import Decimal
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# ENUMERACIONES
# =============================================================================

class OrderStatus(str, Enum):
    """
    Estados del ciclo de vida del pedido.

    pendiente_revision -> en_surtido -> listo_revision <-> ajustado -> listo_captura
    cancelado es alcanzable desde cualquier estado no terminal.
    """
    PENDIENTE_REVISION = "pendiente_revision"
    EN_SURTIDO = "en_surtido"
    LISTO_REVISION = "listo_revision"
    AJUSTADO = "ajustado"
    LISTO_CAPTURA = "listo_captura"
    CANCELADO = "cancelado"


TERMINAL_STATUSES = frozenset({OrderStatus.LISTO_CAPTURA, OrderStatus.CANCELADO})

# Etiquetas mostradas al usuario
STATUS_LABELS = {
    OrderStatus.PENDIENTE_REVISION: "Pendiente de revisión",
    OrderStatus.EN_SURTIDO: "En surtido",
    OrderStatus.LISTO_REVISION: "Listo para revisión",
    OrderStatus.AJUSTADO: "Ajustado",
    OrderStatus.LISTO_CAPTURA: "Listo para captura",
    OrderStatus.CANCELADO: "Cancelado",
}


class UserRole(str, Enum):
    """Roles del sistema."""
    CLIENTE = "cliente"
    BODEGA_SECOS = "bodega_secos"
    BODEGA_REFRIGERADOS = "bodega_refrigerados"
    BODEGA_BARRA = "bodega_barra"
    VENDEDOR = "vendedor"
    ADMIN = "admin"

    @property
    def is_warehouse(self) -> bool:
        return self.value.startswith("bodega_")


WAREHOUSE_ROLES = frozenset({
    UserRole.BODEGA_SECOS,
    UserRole.BODEGA_REFRIGERADOS,
    UserRole.BODEGA_BARRA,
})


class Category(str, Enum):
    QUESOS = "quesos"
    CREMAS = "cremas"
    MANTEQUILLAS = "mantequillas"
    YOGURES = "yogures"
    LECHES = "leches"
    OTROS = "otros"


class Unit(str, Enum):
    PIEZA = "pieza"
    CAJA = "caja"
    PAQUETE = "paquete"
    KG = "kg"
    LITRO = "litro"


class WarehouseType(str, Enum):
    """Bodega que surte el producto; mixto lo ven todas."""
    SECOS = "secos"
    REFRIGERADOS = "refrigerados"
    BARRA = "barra"
    MIXTO = "mixto"


class ClientType(str, Enum):
    MAYORISTA_A = "mayorista_a"
    MAYORISTA_B = "mayorista_b"
    MAYORISTA_C = "mayorista_c"


class PriceList(str, Enum):
    """Campo de Product con el precio del nivel asignado al cliente."""
    PRICE_LIST_1 = "price_list_1"
    PRICE_LIST_2 = "price_list_2"
    PRICE_LIST_3 = "price_list_3"
    PRICE_LIST_4 = "price_list_4"
    PRICE_LIST_5 = "price_list_5"


# =============================================================================
# MODELOS DE ENTIDAD
# =============================================================================

class Product(BaseModel):
    """
    Producto del catalogo.

    Invariantes:
    - un producto no puede ser maestro y variante a la vez
    - una variante (master_product_id) requiere variant_name
    """
    sku: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: Category = Category.OTROS
    unit: Unit = Unit.PIEZA
    wholesale_price: Decimal = Field(..., ge=0)
    price_list_1: Optional[Decimal] = Field(None, ge=0)
    price_list_2: Optional[Decimal] = Field(None, ge=0)
    price_list_3: Optional[Decimal] = Field(None, ge=0)
    price_list_4: Optional[Decimal] = Field(None, ge=0)
    price_list_5: Optional[Decimal] = Field(None, ge=0)
    is_active: bool = True
    warehouse_type: WarehouseType = WarehouseType.SECOS
    has_final_measurement: bool = False
    final_measurement_unit: Optional[str] = None
    is_on_offer: bool = False
    offer_price: Optional[Decimal] = Field(None, ge=0)
    offer_description: Optional[str] = None
    is_master_product: bool = False
    master_product_id: Optional[str] = None
    variant_name: Optional[str] = None
    variant_order: int = 0

    @field_validator('sku')
    @classmethod
    def sku_uppercase(cls, v):
        if not v.strip():
            raise ValueError("El SKU es requerido")
        return v.strip().upper()

    @field_validator('name')
    @classmethod
    def name_strip(cls, v):
        if not v.strip():
            raise ValueError("El nombre es requerido")
        return v.strip()

    @model_validator(mode='after')
    def check_master_variant(self):
        if self.is_master_product and self.master_product_id:
            raise ValueError("Un producto no puede ser maestro y variante a la vez")
        if self.master_product_id and not (self.variant_name or '').strip():
            raise ValueError("Una variante requiere nombre de presentacion")
        return self


class Client(BaseModel):
    """Cliente mayorista."""
    business_name: str = Field(..., min_length=1)
    legal_name: Optional[str] = None
    rfc: Optional[str] = None
    delivery_address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    route_zone: Optional[str] = None
    client_type: ClientType = ClientType.MAYORISTA_B
    assigned_price_list: PriceList = PriceList.PRICE_LIST_1
    is_active: bool = True

    @field_validator('business_name')
    @classmethod
    def business_name_strip(cls, v):
        if not v.strip():
            raise ValueError("El nombre comercial es requerido")
        return v.strip()

    @field_validator('rfc')
    @classmethod
    def rfc_uppercase(cls, v):
        return v.strip().upper() if v else v


class AssignedClient(BaseModel):
    """Cliente asignado a un vendedor."""
    client_id: str
    client_name: Optional[str] = None


# =============================================================================
# ACTOR (CONTEXTO DE SESION)
# =============================================================================

class Actor(BaseModel):
    """
    Usuario autenticado que ejecuta una operacion.

    Se pasa explicitamente a cada operacion de dominio.
    """
    user_id: str
    email: str
    full_name: Optional[str] = None
    role: UserRole
    assigned_client_id: Optional[str] = None
    assigned_client_name: Optional[str] = None
    assigned_clients: List[AssignedClient] = Field(default_factory=list)
    session_id: Optional[str] = None

    @property
    def assigned_client_ids(self) -> List[str]:
        return [c.client_id for c in self.assigned_clients]
