from decimal import Decimal

from storefront.models import CartItem
from storefront.repositories.cart_repository import CartRepository


def test_cart_requires_authentication(client):
    assert client.get("/cart").status_code == 401


def test_empty_cart(client, customer, headers_for):
    response = client.get("/cart", headers=headers_for(customer))

    assert response.status_code == 200
    body = response.json()
    assert body["user_id"] == customer.id
    assert body["items"] == []
    assert Decimal(body["total"]) == 0


def test_add_item_and_totals(client, customer, headers_for, make_product):
    widget = make_product(name="Widget", price="2.50", stock=10)
    gadget = make_product(name="Gadget", price="4.00", stock=10)
    headers = headers_for(customer)

    client.post("/cart", json={"product_id": widget.id, "quantity": 2}, headers=headers)
    response = client.post("/cart", json={"product_id": gadget.id, "quantity": 1}, headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert [line["product_name"] for line in body["items"]] == ["Widget", "Gadget"]
    assert Decimal(body["items"][0]["subtotal"]) == Decimal("5.00")
    assert Decimal(body["total"]) == Decimal("9.00")


def test_adding_same_product_replaces_quantity(client, customer, headers_for, make_product):
    product = make_product(stock=10)
    headers = headers_for(customer)

    client.post("/cart", json={"product_id": product.id, "quantity": 2}, headers=headers)
    response = client.post("/cart", json={"product_id": product.id, "quantity": 5}, headers=headers)

    items = response.json()["items"]
    assert len(items) == 1
    assert items[0]["quantity"] == 5


def test_add_unknown_product(client, customer, headers_for, db_session):
    response = client.post("/cart", json={"product_id": 999, "quantity": 1}, headers=headers_for(customer))
    assert response.status_code == 404


def test_add_more_than_stock(client, customer, headers_for, make_product):
    product = make_product(stock=1)

    response = client.post("/cart", json={"product_id": product.id, "quantity": 2}, headers=headers_for(customer))

    assert response.status_code == 409


def test_update_quantity(client, customer, headers_for, make_product, add_to_cart):
    product = make_product(stock=10)
    add_to_cart(customer, product, 1)

    response = client.patch("/cart", json={"product_id": product.id, "quantity": 4}, headers=headers_for(customer))

    assert response.status_code == 200
    assert response.json()["items"][0]["quantity"] == 4


def test_update_to_zero_is_rejected(client, customer, headers_for, make_product, add_to_cart):
    product = make_product(stock=10)
    add_to_cart(customer, product, 1)

    response = client.patch("/cart", json={"product_id": product.id, "quantity": 0}, headers=headers_for(customer))

    assert response.status_code == 422


def test_update_item_not_in_cart(client, customer, headers_for, make_product):
    product = make_product(stock=10)

    response = client.patch("/cart", json={"product_id": product.id, "quantity": 1}, headers=headers_for(customer))

    assert response.status_code == 404


def test_remove_item(client, customer, headers_for, make_product, add_to_cart):
    product = make_product(stock=10)
    add_to_cart(customer, product, 1)
    headers = headers_for(customer)

    response = client.delete(f"/cart/{product.id}", headers=headers)
    assert response.status_code == 200
    assert response.json()["items"] == []

    assert client.delete(f"/cart/{product.id}", headers=headers).status_code == 404


def test_clear_cart_only_touches_own_cart(client, customer, other_customer, headers_for, make_product, add_to_cart):
    product = make_product(stock=10)
    add_to_cart(customer, product, 1)
    add_to_cart(other_customer, product, 3)

    response = client.delete("/cart", headers=headers_for(customer))

    assert response.json()["items"] == []
    other = client.get("/cart", headers=headers_for(other_customer)).json()
    assert other["items"][0]["quantity"] == 3


def test_add_out_of_range_product_id(client, customer, headers_for):
    response = client.post("/cart", json={"product_id": 2**63, "quantity": 1}, headers=headers_for(customer))
    assert response.status_code == 422


def test_update_out_of_range_product_id(client, customer, headers_for):
    response = client.patch("/cart", json={"product_id": 2**63, "quantity": 1}, headers=headers_for(customer))
    assert response.status_code == 422


def test_remove_out_of_range_product_id(client, customer, headers_for):
    response = client.delete(f"/cart/{2**63}", headers=headers_for(customer))
    assert response.status_code == 422


def test_set_item_recovers_when_line_was_inserted_concurrently(
    checkout_session, db_session, customer, make_product, add_to_cart, monkeypatch
):
    product = make_product(stock=10)
    add_to_cart(customer, product, 1)
    repository = CartRepository(checkout_session)
    real_get_item = repository.get_item
    calls = []

    def missing_then_found(user_id, product_id):
        calls.append(product_id)
        if len(calls) == 1:
            return None
        return real_get_item(user_id, product_id)

    monkeypatch.setattr(repository, "get_item", missing_then_found)

    item = repository.set_item(customer.id, product.id, 4)

    assert item.quantity == 4
    db_session.expire_all()
    lines = db_session.query(CartItem).filter(CartItem.user_id == customer.id).all()
    assert [(line.product_id, line.quantity) for line in lines] == [(product.id, 4)]
