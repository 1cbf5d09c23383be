# =============================================================================
# CREMERIA v1.0 - UTILS/RESPONSE
# =============================================================================
# Envoltorio comun de las respuestas API: {"success", "data", "message", ...}
# =============================================================================

from typing import Any, Dict, List


def success_response(data: Any = None, message: str = None, **kwargs) -> Dict[str, Any]:
    """
    Respuesta exitosa.

    Args:
        data: Contenido (se omite si es None)
        message: Mensaje para mostrar al usuario
        **kwargs: Campos extra al nivel raiz (count, recent_orders, ...)
    """
    body = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    body.update(kwargs)
    return body


def batch_result(created: int, total: int, errors: List[str] = None, **counters) -> Dict[str, Any]:
    """Resultado de una importacion por lotes: "N de M productos importados"."""
    data = {
        "completados": created,
        "total": total,
        "fallidos": total - created,
        **counters,
    }
    if errors:
        data["errores"] = errors
    return {
        "success": created > 0 or total == 0,
        "message": f"{created} de {total} productos importados",
        "data": data,
    }
