# =============================================================================
# CREMERIA v1.0 - FASTAPI MAIN
# =============================================================================
# Aplicacion FastAPI principal
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .auth import auth_router
from .config import config
from .database import DB_ERRORS, close_db, get_stats, init_database
from .exceptions import CremeriaException, UpstreamServiceError
from .routers import clients, dashboard, export, orders, products, users


logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# LIFESPAN - Startup/Shutdown
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gestiona startup y shutdown de la aplicacion."""
    logger.info("%s v%s - Inicio...", config.APP_NAME, config.VERSION)

    init_database()
    stats = get_stats()
    logger.info(
        "Database: %d productos, %d clientes, %d usuarios, %d pedidos",
        stats['products'], stats['clients'], stats['users'], stats['orders']
    )

    yield

    close_db()
    logger.info("%s - Detenido", config.APP_NAME)


# =============================================================================
# APP FASTAPI
# =============================================================================

app = FastAPI(
    title="CREMERIA API",
    description="Pedidos mayoristas de lacteos: precios por cliente, surtido y captura Punto Zero",
    version=config.VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"https?://.*",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


# =============================================================================
# ROUTERS
# =============================================================================

API_PREFIX = "/api/v1"

app.include_router(auth_router, prefix=API_PREFIX, tags=["Autenticacion"])
app.include_router(products.router, prefix=API_PREFIX, tags=["Productos"])
app.include_router(clients.router, prefix=API_PREFIX, tags=["Clientes"])
app.include_router(users.router, prefix=API_PREFIX, tags=["Usuarios"])
app.include_router(orders.router, prefix=API_PREFIX, tags=["Pedidos"])
app.include_router(export.router, prefix=API_PREFIX, tags=["Export"])
app.include_router(dashboard.router, prefix=API_PREFIX, tags=["Dashboard"])


# =============================================================================
# ROOT ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
def root():
    """Endpoint root - info aplicacion."""
    return {
        "app": config.APP_NAME,
        "version": config.VERSION,
        "status": "running",
        "docs": "/docs",
        "api": API_PREFIX,
    }


@app.get("/health", tags=["Root"])
def health_check():
    """Health check endpoint."""
    try:
        stats = get_stats()
    except DB_ERRORS as e:
        logger.exception("Health check: database no disponible")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "error": str(e)}
        )
    return {
        "status": "healthy",
        "database": config.DB_TYPE,
        "stats": stats,
    }


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(CremeriaException)
async def cremeria_exception_handler(request: Request, exc: CremeriaException):
    """Excepciones de dominio -> {"detail": {"code", "message", ...}}."""
    if exc.status_code >= 500:
        logger.error("%s %s: %s", request.method, request.url.path, exc.to_dict())
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder({"detail": exc.to_http_exception().detail}),
    )


async def store_exception_handler(request: Request, exc: Exception):
    """Fallo del almacen no traducido por un servicio."""
    logger.exception("Fallo del almacen en %s %s", request.method, request.url.path)
    error = UpstreamServiceError()
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": error.to_http_exception().detail},
    )


for _db_error in DB_ERRORS:
    app.add_exception_handler(_db_error, store_exception_handler)


# =============================================================================
# RUN (desarrollo)
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "cremeria.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
