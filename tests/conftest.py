import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tiendapos.config.database import Base, get_db, init_db
from tiendapos.main import app
from tiendapos.shared.database.models import Product, PaymentMethod, Role, User
from tiendapos.shared.database.seed import seed_reference_data


@pytest.fixture
def db_session():
    """
    Base de datos SQLite en memoria por prueba.
    - StaticPool: la misma conexión para la prueba y para los requests.
    - Crea el esquema completo y lo elimina al terminar.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def seeded(db_session):
    """Roles, formularios, permisos, métodos de pago y usuarios de prueba"""
    seed_reference_data(db_session)
    return db_session


@pytest.fixture
def client(seeded):
    def override_get_db():
        yield seeded

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _login(client, email, password):
    response = client.post("/api/v1/auth/login-json", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return _login(client, "admin@tiendapos.com", "admin123")


@pytest.fixture
def seller_headers(client):
    return _login(client, "vendedor@tiendapos.com", "vendedor123")


@pytest.fixture
def admin_user(seeded):
    return seeded.query(User).filter(User.email == "admin@tiendapos.com").one()


@pytest.fixture
def seller_role(seeded):
    return seeded.query(Role).filter(Role.name == "vendedor").one()


@pytest.fixture
def cash(seeded):
    return seeded.query(PaymentMethod).filter(PaymentMethod.name == "Efectivo").one()


@pytest.fixture
def products(seeded):
    """
    arroz: stock 10, mínimo 2, máximo 20
    aceite: stock 5, sin límites
    """
    arroz = Product(name="Arroz 500 g", sale_price=1000, purchase_price=700,
                    stock=10, min_stock=2, max_stock=20, is_active=True)
    aceite = Product(name="Aceite 1 L", sale_price=9000, purchase_price=7000,
                     stock=5, is_active=True)
    seeded.add_all([arroz, aceite])
    seeded.commit()
    return {"arroz": arroz, "aceite": aceite}
