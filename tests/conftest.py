import os
import tempfile

# Settings are read once on import; point them at throwaway locations first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="sebeta-uploads-"))
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import itertools
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sebeta_mart.database import Base, get_db
from sebeta_mart.main import app
from sebeta_mart.models.delivery_profile import DeliveryProfile
from sebeta_mart.models.order import Order, OrderStatus, PaymentStatus
from sebeta_mart.models.product import Product
from sebeta_mart.models.seller import Seller
from sebeta_mart.models.user import User, UserRole
from sebeta_mart.utils.security import create_session_token, get_password_hash

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"
# Hashing is slow on purpose; do it once for every factory user
PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_client(client):
    """Factory: a client whose session cookie belongs to ``user``"""
    def _auth_client(user: User) -> TestClient:
        return TestClient(app, cookies={"token": create_session_token(user)})
    return _auth_client


@pytest.fixture()
def make_user(db):
    counter = itertools.count(1)

    def _make_user(role: UserRole = UserRole.BUYER, **fields) -> User:
        n = next(counter)
        fields.setdefault("full_name", f"{role.value.title()} User {n}")
        fields.setdefault("email", f"{role.value}{n}@example.com")
        fields.setdefault("phone_number", f"+2519{n:08d}")
        user = User(role=role, password_hash=PASSWORD_HASH, **fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture()
def make_product(db):
    def _make_product(seller: User, name: str = "Injera Mitad", price: str = "250.00", stock: int = 10, **fields) -> Product:
        product = Product(seller_id=seller.id, name=name, price=Decimal(price), stock=stock, **fields)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
    return _make_product


@pytest.fixture()
def make_order(db):
    def _make_order(buyer: User, product: Product, quantity: int = 1, paid: bool = False, **fields) -> Order:
        if paid:
            fields.setdefault("payment_status", PaymentStatus.PAYMENT_CONFIRMED)
            fields.setdefault("status", OrderStatus.PAYMENT_CONFIRMED)
        order = Order(
            user_id=buyer.id,
            product_id=product.id,
            seller_id=product.seller_id,
            quantity=quantity,
            total_price=Decimal(str(product.price)) * quantity,
            **fields
        )
        db.add(order)
        db.commit()
        db.refresh(order)
        return order
    return _make_order


@pytest.fixture()
def make_shop(db):
    def _make_shop(seller: User, **fields) -> Seller:
        fields.setdefault("shop_name", f"{seller.full_name}'s Shop")
        fields.setdefault("business_license", "BL-001")
        fields.setdefault("government_id", "GOV-001")
        shop = Seller(user_id=seller.id, **fields)
        db.add(shop)
        db.commit()
        db.refresh(shop)
        return shop
    return _make_shop


@pytest.fixture()
def make_delivery_profile(db):
    def _make_delivery_profile(user: User, **fields) -> DeliveryProfile:
        fields.setdefault("national_id", "1234567890123456")
        fields.setdefault("vehicle_type", "motorbike")
        profile = DeliveryProfile(user_id=user.id, **fields)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile
    return _make_delivery_profile


@pytest.fixture()
def second_session(db):
    """Another session on the same database, standing in for a concurrent request"""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
