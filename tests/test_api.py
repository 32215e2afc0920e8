"""HTTP surface via TestClient: auth, error mapping and the buy-and-chat flow."""

from factories import auth_headers, make_profile

BUYER = 1
SELLER = 2


def _sell(client, title="Dune", price=199):
    response = client.post(
        "/listings",
        json={"title": title, "author": "Frank Herbert", "price": price, "condition": "like-new"},
        headers=auth_headers(SELLER),
    )
    assert response.status_code == 201
    return response.json()


def _add(client, listing_id, user_id=BUYER):
    return client.post("/cart/add", json={"listing_id": listing_id}, headers=auth_headers(user_id))


def test_protected_routes_need_a_token(client):
    for method, path in [
        ("get", "/messages"),
        ("get", "/cart"),
        ("get", "/orders"),
        ("post", "/checkout/complete"),
    ]:
        kwargs = {"json": {"payment_handle": "order_1"}} if method == "post" else {}
        response = getattr(client, method)(path, **kwargs)
        assert response.status_code == 401, path
        assert response.json()["detail"] == "Could not validate credentials"


def test_invalid_token_is_unauthenticated(client):
    response = client.get("/messages", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_buy_flow(client, provider):
    first = _sell(client, "Dune", 199)
    second = _sell(client, "Emma", 350)

    browse = client.get("/listings").json()
    assert browse["total_items"] == 2
    assert [r["book"]["title"] for r in browse["results"]] == ["Emma", "Dune"]

    item_ids = [_add(client, first["id"]).json()["item_id"], _add(client, second["id"]).json()["item_id"]]

    cart = client.get("/cart", headers=auth_headers(BUYER)).json()
    assert cart["subtotal"] == 549
    assert len(cart["items"]) == 2

    response = client.post(
        "/checkout/session",
        json={"cart_item_ids": item_ids},
        headers=auth_headers(BUYER),
    )
    assert response.status_code == 200
    token = response.json()["client_token"]

    # not paid yet
    response = client.post("/checkout/complete", json={"payment_handle": token}, headers=auth_headers(BUYER))
    assert response.status_code == 402

    provider.mark_paid(token, "pay_1")
    response = client.post("/checkout/complete", json={"payment_handle": token}, headers=auth_headers(BUYER))
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["orders_created"] == 2

    again = client.post("/checkout/complete", json={"payment_handle": token}, headers=auth_headers(BUYER))
    assert again.json()["nothing_to_finalize"] is True

    orders = client.get("/orders", headers=auth_headers(BUYER)).json()
    assert sorted(o["total_amount"] for o in orders) == [199, 350]
    assert all(o["payment_id"] == "pay_1" for o in orders)

    sales = client.get("/orders/sales", headers=auth_headers(SELLER)).json()
    assert len(sales) == 2

    stats = client.get("/orders/stats", headers=auth_headers(BUYER)).json()
    assert stats == {"total_orders": 2, "total_spent": 549, "pending_orders": 0}

    assert client.get("/cart", headers=auth_headers(BUYER)).json()["items"] == []
    assert client.get("/listings").json()["total_items"] == 0
    assert client.get(f"/listings/{first['id']}").json()["status"] == "sold"


def test_checkout_with_foreign_items_is_not_found(client, provider):
    listing = _sell(client)
    item_id = _add(client, listing["id"]).json()["item_id"]

    response = client.post(
        "/checkout/session",
        json={"cart_item_ids": [item_id]},
        headers=auth_headers(3),
    )
    assert response.status_code == 404
    assert provider.created == []


def test_checkout_without_items_is_rejected(client):
    response = client.post("/checkout/session", json={"cart_item_ids": []}, headers=auth_headers(BUYER))
    assert response.status_code == 400


def test_cart_rules(client):
    listing = _sell(client)

    first = _add(client, listing["id"]).json()
    second = _add(client, listing["id"]).json()
    assert first["item_id"] == second["item_id"]

    own = _add(client, listing["id"], user_id=SELLER)
    assert own.status_code == 400

    missing = _add(client, 999)
    assert missing.status_code == 404

    not_mine = client.delete(f"/cart/remove/{first['item_id']}", headers=auth_headers(3))
    assert not_mine.status_code == 404

    removed = client.delete(f"/cart/remove/{first['item_id']}", headers=auth_headers(BUYER))
    assert removed.status_code == 200
    assert client.get("/cart", headers=auth_headers(BUYER)).json()["items"] == []


def test_listing_removal_by_seller_only(client):
    listing = _sell(client)

    response = client.delete(f"/listings/{listing['id']}", headers=auth_headers(BUYER))
    assert response.status_code == 404

    response = client.delete(f"/listings/{listing['id']}", headers=auth_headers(SELLER))
    assert response.status_code == 200

    assert client.get(f"/listings/{listing['id']}").status_code == 404
    mine = client.get("/listings/mine", headers=auth_headers(SELLER)).json()
    assert [m["status"] for m in mine] == ["removed"]


def test_listing_search(client):
    _sell(client, "Dune")
    _sell(client, "Emma")

    results = client.get("/listings", params={"search": "emm"}).json()["results"]
    assert [r["book"]["title"] for r in results] == ["Emma"]


def test_messaging_flow(client, session):
    make_profile(session, BUYER, "Buyer")
    make_profile(session, SELLER, "Seller")

    sent = client.post(
        "/messages",
        json={"receiver_id": SELLER, "content": "Is this available?"},
        headers=auth_headers(BUYER),
    )
    assert sent.status_code == 200
    assert sent.json()["read"] is False

    inbox = client.get("/messages", headers=auth_headers(SELLER)).json()
    assert inbox[0]["user_id"] == BUYER
    assert inbox[0]["profile"]["full_name"] == "Buyer"
    assert inbox[0]["unread_count"] == 1

    thread = client.get(f"/messages/{BUYER}", headers=auth_headers(SELLER))
    assert thread.headers["X-Poll-Interval"] == "2"
    assert [m["content"] for m in thread.json()] == ["Is this available?"]

    inbox = client.get("/messages", headers=auth_headers(SELLER)).json()
    assert inbox[0]["unread_count"] == 0


def test_send_message_validation_error(client):
    response = client.post("/messages", json={"receiver_id": SELLER, "content": ""}, headers=auth_headers(BUYER))
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields"


def test_my_profile_exists_before_first_write(client):
    response = client.get("/profiles/me", headers=auth_headers(5))
    assert response.status_code == 200
    assert response.json()["id"] == 5

    assert client.get("/profiles/5").status_code == 200


def test_profiles(client):
    response = client.put("/profiles/me", json={"full_name": "Sam Reader"}, headers=auth_headers(BUYER))
    assert response.status_code == 200
    assert response.json()["full_name"] == "Sam Reader"

    public = client.get(f"/profiles/{BUYER}").json()
    assert public == {"id": BUYER, "full_name": "Sam Reader", "avatar_url": None}

    assert client.get("/profiles/404").status_code == 404


def test_health(client):
    assert client.get("/health/check").json()["store"] == "ok"
