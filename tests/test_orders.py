import pytest
from conftest import reload

from extensions import db
from models import Artwork, Order, OrderItem
from schemas import CheckoutRequest
from services import orders
from services.errors import Conflict, ValidationError


def checkout_payload(*artworks, email="a@b.com"):
    return {
        "order": {"email": email, "total": sum(a.price for a in artworks) or 1},
        "items": [{"artworkId": a.id, "quantity": 1, "price": a.price} for a in artworks],
    }


def test_create_order_marks_artwork_sold(client, make_artwork):
    artwork = make_artwork(price=500)

    response = client.post(
        "/api/orders",
        json={
            "order": {"email": "a@b.com", "total": 500},
            "items": [{"artworkId": artwork.id, "quantity": 1, "price": 500}],
        },
    )

    assert response.status_code == 201
    body = response.get_json()
    assert body["status"] == "pending"
    assert body["total"] == 500
    assert body["email"] == "a@b.com"
    assert reload(Artwork, artwork.id).in_stock is False
    assert OrderItem.query.filter_by(order_id=body["id"]).count() == 1


def test_client_status_is_ignored_on_create(client, make_artwork):
    artwork = make_artwork()
    payload = checkout_payload(artwork)
    payload["order"]["status"] = "completed"

    response = client.post("/api/orders", json=payload)

    assert response.status_code == 201
    assert response.get_json()["status"] == "pending"


def test_out_of_stock_artwork_writes_nothing(client, make_artwork):
    available = make_artwork(title="Ocean Waves")
    sold = make_artwork(title="Fluid Dreams", in_stock=False)

    response = client.post("/api/orders", json=checkout_payload(available, sold))

    assert response.status_code == 400
    assert response.get_json()["message"] == 'Artwork "Fluid Dreams" is not in stock'
    assert Order.query.count() == 0
    assert OrderItem.query.count() == 0
    assert reload(Artwork, available.id).in_stock is True


def test_unknown_artwork_is_not_found(client, make_artwork):
    artwork = make_artwork()
    payload = checkout_payload(artwork)
    payload["items"].append({"artworkId": 999, "quantity": 1, "price": 10})

    response = client.post("/api/orders", json=payload)

    assert response.status_code == 404
    assert response.get_json()["message"] == "Artwork with ID 999 not found"
    assert reload(Artwork, artwork.id).in_stock is True


def test_out_of_range_ids_are_rejected_not_crashed(admin_client, make_artwork):
    artwork = make_artwork()
    payload = checkout_payload(artwork)
    payload["items"][0]["artworkId"] = 10**30

    checkout = admin_client.post("/api/orders", json=payload)

    assert checkout.status_code == 400
    assert checkout.get_json()["message"].startswith("Validation error: items.0.artworkId")
    assert admin_client.get(f"/api/artworks/{10**30}").status_code == 404
    assert admin_client.get(f"/api/orders/{10**30}").status_code == 404
    assert Order.query.count() == 0


def test_second_order_for_same_artwork_conflicts(client, make_artwork):
    artwork = make_artwork()

    first = client.post("/api/orders", json=checkout_payload(artwork))
    second = client.post("/api/orders", json=checkout_payload(artwork, email="late@buyer.org"))

    assert first.status_code == 201
    assert second.status_code == 400
    assert Order.query.count() == 1


def test_lost_claim_rolls_back_whole_order(app, make_artwork, monkeypatch):
    first = make_artwork(title="Serene Valley")
    second = make_artwork(title="Misty Forest")
    request = CheckoutRequest.model_validate(checkout_payload(first, second))

    # Вторую работу «покупают» между проверкой корзины и записью
    real_claim = orders._claim_artwork

    def racing_claim(artwork_id):
        if artwork_id == second.id:
            return False
        return real_claim(artwork_id)

    monkeypatch.setattr(orders, "_claim_artwork", racing_claim)

    with pytest.raises(Conflict, match="Misty Forest"):
        orders.create_order(request.order, request.items)

    assert Order.query.count() == 0
    assert OrderItem.query.count() == 0
    assert reload(Artwork, first.id).in_stock is True


def test_quantity_other_than_one_is_rejected(client, make_artwork):
    artwork = make_artwork()
    payload = checkout_payload(artwork)
    payload["items"][0]["quantity"] = 2

    response = client.post("/api/orders", json=payload)

    assert response.status_code == 400
    assert response.get_json()["message"].startswith("Validation error:")
    assert "quantity must be 1" in response.get_json()["message"]
    assert reload(Artwork, artwork.id).in_stock is True


def test_duplicate_artwork_lines_are_rejected(client, make_artwork):
    artwork = make_artwork()
    payload = checkout_payload(artwork, artwork)

    response = client.post("/api/orders", json=payload)

    assert response.status_code == 400
    assert "appears more than once" in response.get_json()["message"]


def test_empty_cart_and_bad_email_are_validation_errors(client, make_artwork):
    artwork = make_artwork()

    empty = client.post("/api/orders", json={"order": {"email": "a@b.com", "total": 10}, "items": []})
    bad_email = client.post("/api/orders", json=checkout_payload(artwork, email="not-an-email"))
    no_body = client.post("/api/orders", data="oops", content_type="text/plain")

    assert empty.status_code == 400
    assert "items" in empty.get_json()["message"]
    assert bad_email.status_code == 400
    assert "email" in bad_email.get_json()["message"]
    assert no_body.status_code == 400
    assert no_body.get_json()["message"] == "Validation error: request body must be a JSON object"


def test_order_admin_endpoints_require_admin(client, user_client, make_artwork):
    artwork = make_artwork()
    order_id = client.post("/api/orders", json=checkout_payload(artwork)).get_json()["id"]

    assert client.get("/api/orders").status_code == 401
    assert client.get(f"/api/orders/{order_id}").status_code == 401
    assert user_client.get(f"/api/orders/{order_id}").status_code == 403
    forbidden = user_client.put(f"/api/orders/{order_id}/status", json={"status": "completed"})
    assert forbidden.status_code == 403
    assert reload(Order, order_id).status == "pending"


def test_admin_reads_and_updates_orders(admin_client, make_artwork):
    first = make_artwork(title="Ocean Waves", price=680)
    second = make_artwork(title="Color Explosion", price=520)
    order_id = admin_client.post("/api/orders", json=checkout_payload(first, second)).get_json()["id"]

    detail = admin_client.get(f"/api/orders/{order_id}")
    assert detail.status_code == 200
    body = detail.get_json()
    assert body["order"]["id"] == order_id
    assert sorted(item["artworkId"] for item in body["items"]) == sorted([first.id, second.id])

    updated = admin_client.put(f"/api/orders/{order_id}/status", json={"status": "completed"})
    assert updated.status_code == 200
    assert updated.get_json()["status"] == "completed"

    invalid = admin_client.put(f"/api/orders/{order_id}/status", json={"status": "shipped"})
    assert invalid.status_code == 400

    listing = admin_client.get("/api/orders")
    assert [order["id"] for order in listing.get_json()] == [order_id]

    assert admin_client.get("/api/orders/424242").status_code == 404


def test_update_status_service_rejects_unknown_status(app, make_artwork):
    artwork = make_artwork()
    request = CheckoutRequest.model_validate(checkout_payload(artwork))
    order = orders.create_order(request.order, request.items)

    with pytest.raises(ValidationError):
        orders.update_order_status(order.id, "refunded")

    db.session.expire_all()
    assert db.session.get(Order, order.id).status == "pending"
