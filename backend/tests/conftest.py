# =============================================================================
# CREMERIA v1.0 - TEST CONFIGURATION
# =============================================================================
# Global fixtures y configuracion de pytest.
# Los tests corren contra una base SQLite temporal.
# =============================================================================

import os
import tempfile

import pytest
from fastapi.testclient import TestClient
from typing import Any, Callable, Dict, Generator

# Ambiente de test ANTES de importar la app
_TEST_DIR = tempfile.mkdtemp(prefix="cremeria_test_")
os.environ["DB_TYPE"] = "sqlite"
os.environ["DB_PATH"] = os.path.join(_TEST_DIR, "cremeria_test.db")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from cremeria.main import app
from cremeria.auth.security import hash_password
from cremeria.config import config as app_config
from cremeria.database import get_db, init_database
from cremeria.models import Actor, AssignedClient, UserRole
from cremeria.persistence.repositories import (
    clients_repository,
    products_repository,
    users_repository,
)
from cremeria.persistence.tables import TABLES

from factories import ClientFactory, ProductFactory, UserFactory


TEST_PASSWORD = "Secreta123!"


# =============================================================================
# CLIENT FIXTURES
# =============================================================================

@pytest.fixture(scope="session")
def client() -> Generator[TestClient, None, None]:
    """
    TestClient para llamadas API sincronas (ejecuta el lifespan).
    Scope session por performance.
    """
    with TestClient(app) as c:
        yield c


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(autouse=True)
def clean_db():
    """Base vacia (solo el admin inicial) para cada test."""
    db = init_database()
    for table_name in reversed(list(TABLES)):
        db.execute(f"DELETE FROM {table_name}")
    db.commit()
    init_database()
    yield
    get_db().rollback()


@pytest.fixture
def make_product() -> Callable[..., Dict[str, Any]]:
    """Crea un producto en la base; devuelve el registro guardado."""
    def _make(**kwargs) -> Dict[str, Any]:
        return products_repository.create(ProductFactory(**kwargs))
    return _make


@pytest.fixture
def make_client() -> Callable[..., Dict[str, Any]]:
    """Crea un cliente en la base; devuelve el registro guardado."""
    def _make(**kwargs) -> Dict[str, Any]:
        return clients_repository.create(ClientFactory(**kwargs))
    return _make


@pytest.fixture
def make_user() -> Callable[..., Dict[str, Any]]:
    """Crea un usuario con password TEST_PASSWORD."""
    def _make(**kwargs) -> Dict[str, Any]:
        record = UserFactory(**kwargs)
        record["password_hash"] = hash_password(TEST_PASSWORD)
        return users_repository.create(record)
    return _make


# =============================================================================
# AUTH FIXTURES
# =============================================================================

def login(client: TestClient, email: str, password: str = TEST_PASSWORD) -> Dict[str, str]:
    response = client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password}
    )
    assert response.status_code == 200, response.text
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client: TestClient) -> Dict[str, str]:
    """Headers con token JWT del admin inicial."""
    return login(client, app_config.ADMIN_EMAIL, app_config.ADMIN_PASSWORD)


@pytest.fixture
def customer(make_client, make_user) -> Dict[str, Any]:
    """Cliente mayorista con su usuario de rol cliente."""
    client_record = make_client(assigned_price_list="price_list_2")
    user = make_user(
        user_role="cliente",
        assigned_client_id=client_record["id"],
        assigned_client_name=client_record["business_name"],
    )
    return {"client": client_record, "user": user}


@pytest.fixture
def headers_for(client: TestClient, make_user) -> Callable[..., Dict[str, str]]:
    """Crea un usuario del rol indicado y devuelve sus headers."""
    def _headers(role: str, **kwargs) -> Dict[str, str]:
        user = make_user(user_role=role, **kwargs)
        return login(client, user["email"])
    return _headers


@pytest.fixture
def customer_headers(client: TestClient, customer) -> Dict[str, str]:
    return login(client, customer["user"]["email"])


# =============================================================================
# ACTOR FIXTURES (test de servicios sin HTTP)
# =============================================================================

def make_actor(role: str, **kwargs) -> Actor:
    assigned = [AssignedClient(**c) for c in kwargs.pop("assigned_clients", [])]
    return Actor(
        user_id=kwargs.pop("user_id", f"user-{role}"),
        email=kwargs.pop("email", f"{role}@cremeria.test"),
        role=UserRole(role),
        assigned_clients=assigned,
        **kwargs
    )


@pytest.fixture
def actor_for() -> Callable[..., Actor]:
    return make_actor


# =============================================================================
# MARKER CONFIGURATION
# =============================================================================

def pytest_configure(config):
    """
    Configura marker personalizados.
    """
    config.addinivalue_line(
        "markers", "integration: test de integracion (API + base SQLite)"
    )
    config.addinivalue_line(
        "markers", "unit: test unitarios aislados"
    )
