import os

# Must be set before storefront.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["RETRY_DELAY"] = "0"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.database import Base, enable_sqlite_foreign_keys, get_db
from storefront.main import app
from storefront.models import CartItem, Product, User
from storefront.services.auth_service import create_access_token, hash_password

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """Session used by tests to arrange data and inspect results"""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def checkout_session(db_session):
    """Separate session standing in for one request's storage handle"""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    def _make(username="alice", email="alice@example.com", password="secret123", is_admin=False):
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            is_admin=is_admin
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make


@pytest.fixture
def customer(make_user):
    return make_user()


@pytest.fixture
def other_customer(make_user):
    return make_user(username="bob", email="bob@example.com")


@pytest.fixture
def admin(make_user):
    return make_user(username="admin", email="admin@example.com", is_admin=True)


@pytest.fixture
def headers_for():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}
    return _headers


@pytest.fixture
def make_product(db_session):
    def _make(name="Widget", price="10.00", stock=5, description=None):
        product = Product(name=name, description=description, price=Decimal(price), stock=stock)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product
    return _make


@pytest.fixture
def add_to_cart(db_session):
    def _add(user, product, quantity):
        item = CartItem(user_id=user.id, product_id=product.id, quantity=quantity)
        db_session.add(item)
        db_session.commit()
        return item
    return _add


@pytest.fixture
def stock_of(db_session):
    """Read a product's committed stock, bypassing cached state"""
    def _stock(product_id):
        db_session.expire_all()
        return db_session.get(Product, product_id).stock
    return _stock
