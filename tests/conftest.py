"""
Configuración de tests del comparador de ofertas
"""
import os
import sys

# Configurar variables de entorno antes de importar la aplicación
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_CREATE_TABLES", "false")
os.environ.setdefault("JWT_SECRET_KEY", "clave-de-pruebas")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Agregar el directorio raíz al path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.main import app
from app.core.database import get_db, Base
from app.core.security import get_password_hash
from tests.utils import auth_headers_for, make_offer

# Base de datos de test en memoria compartida por todas las sesiones
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Crear session de test
TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=test_engine
)


def override_get_db():
    """Override de la dependencia de base de datos para tests"""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override de la dependencia
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="session")
def test_app():
    """Fixture de la aplicación FastAPI para tests"""
    return app


@pytest.fixture(scope="session")
def client(test_app):
    """Fixture del cliente de test"""
    with TestClient(test_app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def db_session():
    """Fixture de sesión de base de datos para cada test"""
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Limpiar tablas después de cada test
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def sample_category(db_session):
    """Fixture de categoría de ejemplo"""
    from app.models.category import Category

    category = Category(name="Lácteos", description="Leches, yogures y quesos")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def sample_supermarkets(db_session):
    """Tres supermercados: A, B y C"""
    from app.models.supermarket import Supermarket

    supermarkets = [
        Supermarket(name="Supermercado A", address="Av. Uno 100", website_url="https://a.example.com"),
        Supermarket(name="Supermercado B", address="Av. Dos 200", website_url="https://b.example.com"),
        Supermarket(name="Supermercado C", address="Av. Tres 300", website_url="https://c.example.com"),
    ]
    db_session.add_all(supermarkets)
    db_session.commit()
    for supermarket in supermarkets:
        db_session.refresh(supermarket)
    return supermarkets


@pytest.fixture
def sample_supermarket(sample_supermarkets):
    return sample_supermarkets[0]


@pytest.fixture
def sample_product(db_session, sample_category):
    """Fixture de producto de ejemplo"""
    from app.models.product import Product

    product = Product(
        name="Leche Entera 1L",
        brand="Colun",
        description="Leche entera larga vida",
        image_url="https://example.com/leche.jpg",
        category_id=sample_category.id,
    )
    db_session.add(product)
    db_session.commit()
    db_session.refresh(product)
    return product


@pytest.fixture
def sample_product_alt(db_session, sample_category):
    """Producto alternativo de ejemplo"""
    from app.models.product import Product

    product = Product(
        name="Yogurt Natural",
        brand="Soprole",
        description="Yogurt natural sin azúcar",
        category_id=sample_category.id,
    )
    db_session.add(product)
    db_session.commit()
    db_session.refresh(product)
    return product


@pytest.fixture
def product_without_offers(db_session, sample_category):
    from app.models.product import Product

    product = Product(name="Queso Gauda", brand="Colun", category_id=sample_category.id)
    db_session.add(product)
    db_session.commit()
    db_session.refresh(product)
    return product


@pytest.fixture
def sample_offers(db_session, sample_product, sample_supermarkets):
    """
    Ofertas del producto de ejemplo: A a 50 (válida), B a 40 (válida) y
    C a 30 (inválida).
    """
    market_a, market_b, market_c = sample_supermarkets
    return [
        make_offer(db_session, sample_product, market_a, 50, original=60, description="Oferta semanal"),
        make_offer(db_session, sample_product, market_b, 40, original=50, description="Precio especial"),
        make_offer(db_session, sample_product, market_c, 30, original=45, valid=False),
    ]


def _make_user(db, email, role):
    from app.models.user import User

    user = User(
        full_name=f"Usuario {role.value.title()}",
        email=email,
        password_hash=get_password_hash("secreto123"),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session):
    from app.models.user import UserRole
    return _make_user(db_session, "admin@example.com", UserRole.ADMINISTRADOR)


@pytest.fixture
def regular_user(db_session):
    from app.models.user import UserRole
    return _make_user(db_session, "usuario@example.com", UserRole.USUARIO)


@pytest.fixture
def moderator_user(db_session):
    from app.models.user import UserRole
    return _make_user(db_session, "moderador@example.com", UserRole.MODERADOR)


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers_for(admin_user)


@pytest.fixture
def user_headers(regular_user):
    return auth_headers_for(regular_user)


@pytest.fixture
def moderator_headers(moderator_user):
    return auth_headers_for(moderator_user)


