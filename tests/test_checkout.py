from decimal import Decimal

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from storefront.models import CartItem, Order, OrderStatus, Product
from storefront.services.cart_snapshot import CartLine
from storefront.services.checkout_service import CheckoutOrchestrator
from storefront.services.exceptions import (
    CheckoutServerError,
    CheckoutValidationError,
    InsufficientStockError,
    ProductNotFoundError,
    StockConflictError,
    StockError
)


@pytest.fixture
def orchestrator(checkout_session):
    return CheckoutOrchestrator(checkout_session)


def order_count(db_session):
    db_session.expire_all()
    return db_session.query(Order).count()


def cart_count(db_session, user):
    db_session.expire_all()
    return db_session.query(CartItem).filter(CartItem.user_id == user.id).count()


def test_empty_line_list_is_validation_error(orchestrator, db_session, customer, make_product, stock_of):
    product = make_product(stock=5)

    result = orchestrator.checkout(customer.id, [])

    assert not result.ok
    assert isinstance(result.error, CheckoutValidationError)
    assert result.error.code == "empty_cart"
    assert order_count(db_session) == 0
    assert stock_of(product.id) == 5


def test_empty_cart_is_validation_error(orchestrator, db_session, customer):
    result = orchestrator.checkout(customer.id)

    assert isinstance(result.error, CheckoutValidationError)
    assert order_count(db_session) == 0


def test_checkout_from_cart_creates_order_and_empties_cart(
    orchestrator, db_session, customer, make_product, add_to_cart, stock_of
):
    product = make_product(name="Product A", price="10.00", stock=5)
    add_to_cart(customer, product, 2)

    result = orchestrator.checkout(customer.id)

    assert result.ok
    order = result.order
    assert order.user_id == customer.id
    assert order.total_amount == Decimal("20.00")
    assert order.status == OrderStatus.PROCESSING.value
    assert order.created_at is not None
    assert [(i.product_id, i.quantity, i.price_at_order) for i in order.items] == [
        (product.id, 2, Decimal("10.00"))
    ]
    assert stock_of(product.id) == 3
    assert cart_count(db_session, customer) == 0
    assert order_count(db_session) == 1


def test_one_short_line_rolls_back_everything(
    orchestrator, db_session, customer, make_product, add_to_cart, stock_of
):
    product_a = make_product(name="Product A", stock=5)
    product_b = make_product(name="Product B", stock=0)
    add_to_cart(customer, product_a, 2)
    add_to_cart(customer, product_b, 1)

    result = orchestrator.checkout(customer.id)

    assert isinstance(result.error, InsufficientStockError)
    assert isinstance(result.error, StockError)
    assert result.error.product_id == product_b.id
    assert result.error.line == 1
    assert result.error.available == 0
    assert result.error.requested == 1
    assert stock_of(product_a.id) == 5
    assert order_count(db_session) == 0
    assert cart_count(db_session, customer) == 2


def test_unknown_product_is_reported(orchestrator, db_session, customer, make_product, stock_of):
    product = make_product(stock=5)

    result = orchestrator.checkout(customer.id, [CartLine(product.id, 1), CartLine(9999, 1)])

    assert isinstance(result.error, ProductNotFoundError)
    assert result.error.code == "product_not_found"
    assert result.error.product_id == 9999
    assert result.error.line == 1
    assert stock_of(product.id) == 5
    assert order_count(db_session) == 0


def test_repeated_product_lines_are_checked_against_combined_quantity(
    orchestrator, db_session, customer, make_product, stock_of
):
    product = make_product(stock=3)

    result = orchestrator.checkout(customer.id, [CartLine(product.id, 2), CartLine(product.id, 2)])

    assert isinstance(result.error, InsufficientStockError)
    assert result.error.requested == 4
    assert result.error.available == 3
    assert stock_of(product.id) == 3


def test_repeated_product_lines_within_stock_succeed(orchestrator, customer, make_product, stock_of):
    product = make_product(price="2.50", stock=3)

    result = orchestrator.checkout(customer.id, [CartLine(product.id, 1), CartLine(product.id, 2)])

    assert result.ok
    assert result.order.total_amount == Decimal("7.50")
    assert len(result.order.items) == 2
    assert stock_of(product.id) == 0


def test_total_uses_current_prices(orchestrator, customer, make_product):
    product_a = make_product(name="A", price="19.99", stock=10)
    product_b = make_product(name="B", price="0.35", stock=10)

    result = orchestrator.checkout(customer.id, [CartLine(product_a.id, 3), CartLine(product_b.id, 7)])

    assert result.ok
    assert result.order.total_amount == Decimal("62.42")


def test_price_at_order_is_frozen(orchestrator, db_session, customer, make_product):
    product = make_product(price="10.00", stock=5)
    result = orchestrator.checkout(customer.id, [CartLine(product.id, 1)])
    assert result.ok
    order_id = result.order.id

    db_session.expire_all()
    db_session.get(Product, product.id).price = Decimal("99.00")
    db_session.commit()

    db_session.expire_all()
    order = db_session.get(Order, order_id)
    assert order.items[0].price_at_order == Decimal("10.00")
    assert order.total_amount == Decimal("10.00")


def test_last_unit_goes_to_exactly_one_buyer(
    checkout_session, db_session, customer, other_customer, make_product, add_to_cart, stock_of
):
    product = make_product(stock=1)
    add_to_cart(customer, product, 1)
    add_to_cart(other_customer, product, 1)

    first = CheckoutOrchestrator(checkout_session).checkout(customer.id)
    second = CheckoutOrchestrator(checkout_session).checkout(other_customer.id)

    assert first.ok
    assert isinstance(second.error, (StockError, StockConflictError))
    assert stock_of(product.id) == 0
    assert order_count(db_session) == 1
    assert cart_count(db_session, other_customer) == 1


def test_stock_taken_after_validation_is_a_conflict(
    orchestrator, checkout_session, db_session, customer, make_product, add_to_cart, stock_of, monkeypatch
):
    product = make_product(stock=1)
    add_to_cart(customer, product, 1)

    original_get_by_ids = orchestrator.products.get_by_ids

    def get_by_ids_then_sell_out(product_ids):
        products = original_get_by_ids(product_ids)
        # Another buyer takes the last unit after our read
        checkout_session.execute(text("UPDATE products SET stock = 0 WHERE id = :id"), {"id": product.id})
        return products

    monkeypatch.setattr(orchestrator.products, "get_by_ids", get_by_ids_then_sell_out)

    result = orchestrator.checkout(customer.id)

    assert isinstance(result.error, StockConflictError)
    assert result.error.code == "stock_conflict"
    assert result.error.product_id == product.id
    assert result.error.line == 0
    assert result.error.requested == 1
    assert order_count(db_session) == 0
    assert cart_count(db_session, customer) == 1
    # The competing update was part of the rolled back transaction
    assert stock_of(product.id) == 1


def test_storage_failure_rolls_back_and_reports_server_error(
    orchestrator, db_session, customer, make_product, add_to_cart, stock_of, monkeypatch
):
    product = make_product(stock=5)
    add_to_cart(customer, product, 2)

    def failing_clear(user_id, commit=True):
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(orchestrator.carts, "clear", failing_clear)

    result = orchestrator.checkout(customer.id)

    assert isinstance(result.error, CheckoutServerError)
    assert "disk" not in result.error.message
    assert order_count(db_session) == 0
    assert stock_of(product.id) == 5
    assert cart_count(db_session, customer) == 1


def test_transient_failure_is_retried(
    orchestrator, db_session, customer, make_product, add_to_cart, stock_of, monkeypatch
):
    product = make_product(stock=5)
    add_to_cart(customer, product, 2)

    calls = []
    original_clear = orchestrator.carts.clear

    def flaky_clear(user_id, commit=True):
        calls.append(user_id)
        if len(calls) == 1:
            raise OperationalError("DELETE FROM cart_items", {}, Exception("database is locked"))
        return original_clear(user_id, commit=commit)

    monkeypatch.setattr(orchestrator.carts, "clear", flaky_clear)

    result = orchestrator.checkout(customer.id)

    assert result.ok
    assert len(calls) == 2
    assert order_count(db_session) == 1
    assert stock_of(product.id) == 3
    assert cart_count(db_session, customer) == 0
