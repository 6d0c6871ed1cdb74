import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from storefront.database import Base, enable_sqlite_foreign_keys
from storefront.models import CartItem, Order, Product, User
from storefront.services.checkout_service import CheckoutOrchestrator
from storefront.services.exceptions import StockConflictError, StockError

BUYERS = 8
STOCK = 3


@pytest.fixture
def file_sessions(tmp_path):
    """Session factory over a database file, one pooled connection per thread"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'storefront.db'}",
        connect_args={"check_same_thread": False, "timeout": 30}
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        engine.dispose()


def test_concurrent_checkouts_never_oversell(file_sessions):
    with file_sessions() as session:
        product = Product(name="Last units", price=Decimal("5.00"), stock=STOCK)
        buyers = [
            User(username=f"buyer{i}", email=f"buyer{i}@example.com", password_hash="x")
            for i in range(BUYERS)
        ]
        session.add(product)
        session.add_all(buyers)
        session.flush()
        session.add_all([CartItem(user_id=u.id, product_id=product.id, quantity=1) for u in buyers])
        session.commit()
        product_id = product.id
        user_ids = [u.id for u in buyers]

    start = threading.Barrier(BUYERS)

    def buy(user_id):
        session = file_sessions()
        try:
            start.wait()
            result = CheckoutOrchestrator(session).checkout(user_id)
            return user_id, result.error
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=BUYERS) as pool:
        outcomes = list(pool.map(buy, user_ids))

    winners = {user_id for user_id, error in outcomes if error is None}
    errors = [error for _, error in outcomes if error is not None]
    assert len(winners) == STOCK
    assert len(errors) == BUYERS - STOCK
    assert all(isinstance(error, (StockError, StockConflictError)) for error in errors)

    with file_sessions() as session:
        assert session.get(Product, product_id).stock == 0
        orders = session.query(Order).all()
        assert {order.user_id for order in orders} == winners
        assert len(orders) == STOCK
        assert all(order.total_amount == Decimal("5.00") for order in orders)
        # Losers keep their carts
        assert {item.user_id for item in session.query(CartItem).all()} == set(user_ids) - winners
