# =============================================================================
# CREMERIA v1.0 - CONFIGURACION
# =============================================================================
# Parametros globales leidos de variables de entorno (.env soportado)
# =============================================================================

import os

from dotenv import load_dotenv

# Carga variables de entorno desde .env si existe
load_dotenv()


# =============================================================================
# CONFIGURACION PRINCIPAL
# =============================================================================

class Settings:
    """Configuracion global de la aplicacion."""

    # Selector de base de datos: "postgresql" o "sqlite"
    DB_TYPE: str = os.getenv("DB_TYPE", "postgresql")

    # PostgreSQL
    PG_HOST: str = os.getenv("PG_HOST", "localhost")
    PG_PORT: int = int(os.getenv("PG_PORT", "5432"))
    PG_DATABASE: str = os.getenv("PG_DATABASE", "cremeria")
    PG_USER: str = os.getenv("PG_USER", "cremeria_user")
    PG_PASSWORD: str = os.getenv("PG_PASSWORD", "")
    PG_POOL_MAX: int = int(os.getenv("PG_POOL_MAX", "10"))

    # SQLite (desarrollo local y pruebas)
    DB_PATH: str = os.getenv("DB_PATH", "cremeria.db")

    # Autenticacion
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "CREMERIA_SECRET_KEY_CHANGE_IN_PRODUCTION")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_HOURS: int = int(os.getenv("JWT_EXPIRATION_HOURS", "8"))
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Usuario administrador inicial
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "admin@cremeria.local")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "Admin123!")
    ADMIN_NAME: str = os.getenv("ADMIN_NAME", "Administrador")

    # Importacion de catalogo
    IMPORT_BATCH_SIZE: int = int(os.getenv("IMPORT_BATCH_SIZE", "50"))

    # Sugerencias (upselling)
    SUGGESTIONS_HISTORY_LIMIT: int = 50
    SUGGESTIONS_MAX_ITEMS: int = 4

    # Export Punto Zero
    EXPORT_FILENAME_PREFIX: str = "pedidos_punto_zero"

    # Zona horaria para fechas mostradas/exportadas
    TIMEZONE: str = os.getenv("TIMEZONE", "America/Mexico_City")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Version
    VERSION: str = "1.0.0"
    APP_NAME: str = "CREMERIA"


# Instancia singleton
config = Settings()
