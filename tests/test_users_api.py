from storefront.services.auth_service import verify_password
from storefront.models import User
from storefront.repositories.user_repository import UserRepository


def test_get_own_profile(client, customer, headers_for):
    response = client.get(f"/users/{customer.id}", headers=headers_for(customer))

    assert response.status_code == 200
    assert response.json()["username"] == "alice"


def test_cannot_read_other_profile(client, customer, other_customer, headers_for):
    response = client.get(f"/users/{other_customer.id}", headers=headers_for(customer))
    assert response.status_code == 403


def test_admin_can_read_any_profile(client, customer, admin, headers_for):
    response = client.get(f"/users/{customer.id}", headers=headers_for(admin))
    assert response.status_code == 200


def test_admin_gets_404_for_missing_user(client, admin, headers_for):
    assert client.get("/users/999", headers=headers_for(admin)).status_code == 404


def test_update_profile_and_password(client, db_session, customer, headers_for):
    response = client.patch(
        f"/users/{customer.id}",
        json={"username": "alice2", "password": "newsecret"},
        headers=headers_for(customer)
    )

    assert response.status_code == 200
    assert response.json()["username"] == "alice2"
    db_session.expire_all()
    assert verify_password("newsecret", db_session.get(User, customer.id).password_hash)


def test_update_to_taken_email(client, customer, other_customer, headers_for):
    response = client.patch(
        f"/users/{customer.id}",
        json={"email": other_customer.email},
        headers=headers_for(customer)
    )

    assert response.status_code == 409


def test_update_email_losing_race_is_conflict(client, customer, other_customer, headers_for, monkeypatch):
    monkeypatch.setattr(UserRepository, "get_by_email", lambda self, email: None)

    response = client.patch(
        f"/users/{customer.id}",
        json={"email": other_customer.email},
        headers=headers_for(customer)
    )

    assert response.status_code == 409


def test_empty_update(client, customer, headers_for):
    response = client.patch(f"/users/{customer.id}", json={}, headers=headers_for(customer))
    assert response.status_code == 400


def test_update_rejects_unknown_fields(client, customer, headers_for):
    response = client.patch(f"/users/{customer.id}", json={"is_admin": True}, headers=headers_for(customer))
    assert response.status_code == 422


def test_delete_own_account(client, db_session, customer, headers_for):
    response = client.delete(f"/users/{customer.id}", headers=headers_for(customer))

    assert response.status_code == 204
    db_session.expire_all()
    assert db_session.get(User, customer.id) is None


def test_out_of_range_user_id(client, admin, headers_for):
    assert client.get(f"/users/{2**63}", headers=headers_for(admin)).status_code == 422
