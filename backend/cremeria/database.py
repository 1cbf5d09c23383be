# =============================================================================
# CREMERIA v1.0 - DATABASE MANAGER
# =============================================================================
# Conexion unica por proceso: PostgreSQL (pool psycopg2) en produccion,
# SQLite para desarrollo local y pruebas. Las consultas se escriben con
# placeholder '?' y el wrapper PostgreSQL las convierte a '%s'.
# =============================================================================

import json
import logging
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from decimal import Decimal
from typing import Optional, Dict, Any

import psycopg2
from psycopg2 import pool
from psycopg2.extras import RealDictCursor

from .config import config
from .persistence.tables import TABLES, INDEXES, create_table_sql
from .utils.conversions import utc_now

logger = logging.getLogger(__name__)

# Errores del motor que se traducen a UpstreamServiceError en los servicios
DB_ERRORS = (sqlite3.Error, psycopg2.Error)

# SQLite guarda los importes como TEXT para no perder precision
sqlite3.register_adapter(Decimal, str)


# =============================================================================
# CONNECTION POOL (PostgreSQL)
# =============================================================================

_pool: Optional[pool.ThreadedConnectionPool] = None


def init_pool():
    """Inicializa el connection pool PostgreSQL."""
    global _pool
    if _pool is not None:
        return

    _pool = pool.ThreadedConnectionPool(
        minconn=1,
        maxconn=config.PG_POOL_MAX,
        host=config.PG_HOST,
        port=config.PG_PORT,
        database=config.PG_DATABASE,
        user=config.PG_USER,
        password=config.PG_PASSWORD
    )
    logger.info("PostgreSQL pool: %s:%s/%s", config.PG_HOST, config.PG_PORT, config.PG_DATABASE)


def close_pool():
    """Cierra el connection pool."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None


# =============================================================================
# WRAPPER COMPATIBILIDAD SQLITE
# =============================================================================

class PostgreSQLConnection:
    """
    Wrapper que expone la interfaz de sqlite3.Connection sobre PostgreSQL.
    Permite usar el mismo SQL (placeholder '?') en ambos motores.
    """

    def __init__(self, conn):
        self._conn = conn

    def execute(self, sql: str, params: tuple = None):
        """Ejecuta una consulta convirtiendo '?' en '%s'."""
        cursor = self._conn.cursor(cursor_factory=RealDictCursor)
        try:
            cursor.execute(sql.replace('?', '%s'), params or ())
        except psycopg2.Error:
            cursor.close()
            self._conn.rollback()
            raise
        return PostgreSQLCursor(cursor)

    def executemany(self, sql: str, params_list: list):
        """Ejecuta la misma consulta con multiples parametros."""
        cursor = self._conn.cursor(cursor_factory=RealDictCursor)
        try:
            cursor.executemany(sql.replace('?', '%s'), params_list)
        except psycopg2.Error:
            cursor.close()
            self._conn.rollback()
            raise
        return PostgreSQLCursor(cursor)

    def commit(self):
        self._conn.commit()

    def rollback(self):
        self._conn.rollback()

    def close(self):
        """Devuelve la conexion al pool."""
        if _pool is not None:
            _pool.putconn(self._conn)


class PostgreSQLCursor:
    """Wrapper del cursor PostgreSQL con la interfaz de sqlite3.Cursor."""

    def __init__(self, cursor):
        self._cursor = cursor
        self.rowcount = cursor.rowcount

    def fetchone(self):
        if self._cursor.description is None:
            return None
        row = self._cursor.fetchone()
        return dict(row) if row is not None else None

    def fetchall(self):
        if self._cursor.description is None:
            return []
        return [dict(row) for row in self._cursor.fetchall()]


# =============================================================================
# CONEXION DATABASE
# =============================================================================

_connection = None
# Serializa el uso de la conexion compartida entre hilos del threadpool
_lock = threading.RLock()
_tx_state = threading.local()


def _connect_sqlite() -> sqlite3.Connection:
    conn = sqlite3.connect(config.DB_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def get_db():
    """
    Devuelve la conexion compartida del proceso.

    SQLite: sqlite3.Connection con filas sqlite3.Row.
    PostgreSQL: PostgreSQLConnection con filas dict.
    """
    global _connection

    with _lock:
        if _connection is None:
            if config.DB_TYPE == 'sqlite':
                _connection = _connect_sqlite()
            else:
                init_pool()
                raw_conn = _pool.getconn()
                raw_conn.autocommit = False
                _connection = PostgreSQLConnection(raw_conn)

    return _connection


def close_db():
    """Cierra la conexion (y el pool, si aplica)."""
    global _connection
    with _lock:
        if _connection is not None:
            _connection.rollback()
            _connection.close()
            _connection = None
        close_pool()


@contextmanager
def locked():
    """
    Uso exclusivo de la conexion para una lectura.

    Mientras otro hilo tiene una transaccion abierta, espera a que termine:
    nunca se leen escrituras sin confirmar de otra peticion.
    """
    with _lock:
        yield get_db()


def _tx_depth() -> int:
    return getattr(_tx_state, 'depth', 0)


@contextmanager
def transaction():
    """
    Agrupa varias escrituras en una sola transaccion.

    Anidable dentro del mismo hilo: solo el bloque mas externo hace
    commit/rollback. El lock se mantiene hasta el final del bloque, asi que
    las escrituras de otros hilos esperan y nunca se mezclan con esta
    transaccion.
    """
    with _lock:
        db = get_db()
        depth = _tx_depth()
        _tx_state.depth = depth + 1
        try:
            yield db
            if depth == 0:
                db.commit()
        except Exception:
            if depth == 0:
                db.rollback()
            raise
        finally:
            _tx_state.depth = depth


# =============================================================================
# INICIALIZACION DATABASE
# =============================================================================

def _create_schema(db) -> None:
    """Crea tablas e indices si no existen."""
    for table_name in TABLES:
        db.execute(create_table_sql(table_name, config.DB_TYPE))
    for table_name, column in INDEXES:
        db.execute(
            f"CREATE INDEX IF NOT EXISTS idx_{table_name}_{column} ON {table_name} ({column})"
        )
    db.commit()


def _ensure_admin_exists(db) -> None:
    """Crea el usuario admin inicial si no existe ninguno."""
    from .auth.security import hash_password

    admin = db.execute(
        "SELECT id FROM users WHERE user_role = 'admin' AND is_active = ?",
        (True,)
    ).fetchone()
    if admin:
        return

    db.execute(
        """
        INSERT INTO users (id, created_date, full_name, email, password_hash,
                           user_role, assigned_clients, is_active)
        VALUES (?, ?, ?, ?, ?, 'admin', '[]', ?)
        """,
        (uuid.uuid4().hex, utc_now().isoformat(timespec='microseconds'),
         config.ADMIN_NAME, config.ADMIN_EMAIL.lower(),
         hash_password(config.ADMIN_PASSWORD), True)
    )
    db.commit()
    logger.info("Usuario admin inicial creado (%s)", config.ADMIN_EMAIL)


def init_database():
    """Inicializa el esquema y el usuario admin."""
    with _lock:
        db = get_db()
        _create_schema(db)
        _ensure_admin_exists(db)
    logger.info("Database inicializada (%s)", config.DB_TYPE)
    return db


def get_stats() -> Dict[str, int]:
    """Conteo de registros por tabla principal."""
    stats = {}
    with locked() as db:
        for table_name in ('products', 'clients', 'users', 'orders'):
            row = db.execute(f"SELECT COUNT(*) AS cnt FROM {table_name}").fetchone()
            stats[table_name] = row['cnt'] if row else 0
    return stats


# =============================================================================
# LOG OPERACIONES
# =============================================================================

def log_operation(tipo: str, entidad: str = None, id_entidad: str = None,
                  descripcion: str = None, datos: Dict[str, Any] = None,
                  id_usuario: str = None):
    """
    Registra una operacion en la bitacora.

    Args:
        tipo: Tipo de operacion (ej. START_FULFILLMENT, IMPORT_PRODUCTS)
        entidad: Tabla/entidad involucrada
        id_entidad: ID de la entidad
        descripcion: Descripcion legible
        datos: Datos adicionales (JSON)
        id_usuario: Usuario que ejecuto la operacion
    """
    with transaction() as db:
        db.execute(
            """
            INSERT INTO log_operaciones (id, created_date, tipo_operacion, entidad,
                                         id_entidad, descripcion, datos_json, id_usuario)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (uuid.uuid4().hex, utc_now().isoformat(timespec='microseconds'), tipo, entidad,
             id_entidad, descripcion, json.dumps(datos, default=str) if datos else None, id_usuario)
        )
