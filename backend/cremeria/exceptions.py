# =============================================================================
# CREMERIA v1.0 - EXCEPCIONES CENTRALIZADAS
# =============================================================================
# Jerarquia de excepciones para manejo uniforme de errores
# =============================================================================

from fastapi import HTTPException
from typing import Optional, Dict, Any


class CremeriaException(Exception):
    """
    Excepcion base de CREMERIA.

    Todas las excepciones de dominio extienden esta clase.
    Se convierte automaticamente a HTTPException / respuesta JSON.
    """
    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    detail: str = "Error interno del servidor"

    def __init__(self, detail: Optional[str] = None, extra: Dict[str, Any] = None):
        self.detail = detail or self.__class__.detail
        self.extra = extra or {}
        super().__init__(self.detail)

    def to_http_exception(self) -> HTTPException:
        """Convierte a HTTPException para FastAPI."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "code": self.code,
                "message": self.detail,
                **self.extra
            }
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para logging."""
        return {
            "code": self.code,
            "status_code": self.status_code,
            "message": self.detail,
            **self.extra
        }


# =============================================================================
# EXCEPCIONES HTTP ESTANDAR
# =============================================================================

class NotFoundError(CremeriaException):
    """Recurso no encontrado (404)."""
    status_code = 404
    code = "NOT_FOUND"
    detail = "Recurso no encontrado"


class ValidationError(CremeriaException):
    """Error de validacion de datos (400)."""
    status_code = 400
    code = "VALIDATION_ERROR"
    detail = "Error de validacion"


class ConflictError(CremeriaException):
    """Conflicto con el estado actual (409)."""
    status_code = 409
    code = "CONFLICT"
    detail = "Conflicto con el estado actual del recurso"


class UnauthorizedError(CremeriaException):
    """Autenticacion requerida (401)."""
    status_code = 401
    code = "UNAUTHORIZED"
    detail = "Autenticacion requerida"


class ForbiddenError(CremeriaException):
    """Permisos insuficientes (403)."""
    status_code = 403
    code = "FORBIDDEN"
    detail = "Permisos insuficientes"


class UpstreamServiceError(CremeriaException):
    """Fallo del almacen de entidades u otro servicio externo (502)."""
    status_code = 502
    code = "UPSTREAM_ERROR"
    detail = "No se pudo completar la operacion, intenta de nuevo"


# =============================================================================
# EXCEPCIONES DOMINIO - PEDIDOS
# =============================================================================

class OrderNotFoundError(NotFoundError):
    """Pedido no encontrado."""
    code = "ORDER_NOT_FOUND"
    detail = "Pedido no encontrado"


class InvalidTransitionError(ConflictError):
    """Transicion de estado no permitida desde el estado actual."""
    code = "INVALID_TRANSITION"
    detail = "Transicion de estado no valida para este pedido"


class InsufficientRoleError(ForbiddenError):
    """El rol del usuario no puede ejecutar la accion."""
    code = "INSUFFICIENT_ROLE"
    detail = "Tu rol no permite realizar esta accion"


class EmptyCartError(ValidationError):
    """Pedido sin productos."""
    code = "EMPTY_CART"
    detail = "Agrega al menos un producto al pedido"


class ClientRequiredError(ValidationError):
    """Falta el cliente del pedido o del usuario."""
    code = "CLIENT_REQUIRED"
    detail = "Selecciona un cliente"


# =============================================================================
# EXCEPCIONES DOMINIO - CATALOGO
# =============================================================================

class ProductNotFoundError(NotFoundError):
    """Producto no encontrado."""
    code = "PRODUCT_NOT_FOUND"
    detail = "Producto no encontrado"


class VariantNotSelectedError(ValidationError):
    """Producto maestro agregado sin elegir presentacion."""
    code = "VARIANT_NOT_SELECTED"
    detail = "Selecciona una presentacion del producto"


class ClientNotFoundError(NotFoundError):
    """Cliente no encontrado."""
    code = "CLIENT_NOT_FOUND"
    detail = "Cliente no encontrado"


class ImportFormatError(ValidationError):
    """Archivo de importacion vacio o con columnas faltantes."""
    code = "IMPORT_FORMAT_ERROR"
    detail = "Formato de archivo CSV no valido"


# =============================================================================
# EXCEPCIONES DOMINIO - EXPORT
# =============================================================================

class NothingToExportError(CremeriaException):
    """No hay pedidos listos para captura."""
    status_code = 422
    code = "NOTHING_TO_EXPORT"
    detail = "No hay pedidos listos para exportar"


# =============================================================================
# EXCEPCIONES DOMINIO - AUTENTICACION / USUARIOS
# =============================================================================

class UserNotFoundError(NotFoundError):
    """Usuario no encontrado."""
    code = "USER_NOT_FOUND"
    detail = "Usuario no encontrado"


class InvalidCredentialsError(UnauthorizedError):
    """Credenciales no validas."""
    code = "INVALID_CREDENTIALS"
    detail = "Correo o contrasena incorrectos"


class TokenInvalidError(UnauthorizedError):
    """Token JWT no valido, expirado o revocado."""
    code = "TOKEN_INVALID"
    detail = "Sesion no valida o expirada"


class UserDisabledError(ForbiddenError):
    """Usuario deshabilitado."""
    code = "USER_DISABLED"
    detail = "Cuenta de usuario deshabilitada"


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def raise_validation_error(message: str, field: str = None) -> None:
    """Lanza ValidationError con campo opcional."""
    extra = {"field": field} if field else {}
    raise ValidationError(message, extra)
