"""Pytest fixtures for testing"""

import os

# Must be set before pix_checkout.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("ORDER_WEBHOOK_URL", "")

import pytest
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from pix_checkout.api.main import create_app
from pix_checkout.infrastructure.database.models import Base
from pix_checkout.infrastructure.database.session import get_db, init_db
from pix_checkout.domain.models import Addon, CartLine, MerchantProfile


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    init_db(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def merchant() -> MerchantProfile:
    return MerchantProfile(
        pix_key="teste@exemplo.com",
        display_name="Loja Teste",
        city="Sao Paulo",
    )


@pytest.fixture
def sample_lines() -> list[CartLine]:
    """Two-line cart: burger with bacon x3, pizza x1 (subtotal R$ 61.00)"""
    return [
        CartLine(
            base_name="X-Burger",
            base_unit_price=Decimal("10.00"),
            quantity=3,
            selected_addons=[Addon(name="Bacon", unit_price=Decimal("2.00"))],
        ),
        CartLine(
            base_name="Pizza Broto",
            base_unit_price=Decimal("25.00"),
            quantity=1,
        ),
    ]


@pytest.fixture
def quote_body() -> dict:
    """JSON body matching sample_lines, delivered to a zone with R$ 8.00 fee"""
    return {
        "establishment_id": "estab_1",
        "fulfillment": "delivery",
        "neighborhood": "Centro",
        "delivery_zones": [
            {"neighborhood": "Centro", "fee": "8.00"},
            {"neighborhood": "Jardim América", "fee": "12.00"},
        ],
        "lines": [
            {
                "product_id": "p1",
                "name": "X-Burger",
                "unit_price": "10.00",
                "quantity": 3,
                "addons": [{"name": "Bacon", "unit_price": "2.00"}],
                "note": "sem cebola",
            },
            {"product_id": "p2", "name": "Pizza Broto", "unit_price": "25.00", "quantity": 1},
        ],
    }
