"""
HTTP surface tests using the Flask test client.
"""
from unittest.mock import patch


def sign_up_and_in(client, account, password="secret1"):
    resp = client.post("/api/sign-up", json={
        "account": account, "password": password, "passwordConfirm": password, "name": account,
    })
    assert resp.status_code == 201, resp.get_json()
    resp = client.post("/api/sign-in", json={"account": account, "password": password})
    assert resp.status_code == 200
    return resp


def stock_catalog(client):
    """Sign in as admin, add two items, sign out."""
    sign_up_and_in(client, "admin")
    for code, name, health, power, price in [
        (1, "Iron Sword", 20, 15, 3000),
        (2, "Leather Armor", 50, 0, 1000),
    ]:
        resp = client.post("/api/item", json={
            "item_code": code,
            "item_name": name,
            "item_stat": {"health": health, "power": power},
            "item_price": price,
        })
        assert resp.status_code == 201
    client.post("/api/sign-out")


def create_character(client, name="hero"):
    resp = client.post("/api/character", json={"name": name})
    assert resp.status_code == 201
    return resp.get_json()["id"]


def test_health(client):
    resp = client.get("/api/")
    assert resp.status_code == 200
    assert resp.get_json() == {"message": "hello"}


def test_unknown_route_returns_json(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert "message" in resp.get_json()


def test_sign_up_errors(client):
    resp = client.post("/api/sign-up", json={
        "account": "Bad!", "password": "secret1", "passwordConfirm": "secret1",
    })
    assert resp.status_code == 400
    assert resp.get_json()["message"]

    sign_up_and_in(client, "hero")
    resp = client.post("/api/sign-up", json={
        "account": "hero", "password": "secret1", "passwordConfirm": "secret1",
    })
    assert resp.status_code == 400


def test_sign_in_wrong_password(client):
    sign_up_and_in(client, "hero")
    resp = client.post("/api/sign-in", json={"account": "hero", "password": "nope123"})
    assert resp.status_code == 400


def test_authentication_required(client):
    resp = client.post("/api/character/1/purchase", json=[{"item_code": 1, "count": 1}])
    assert resp.status_code == 401
    assert resp.get_json() == {"message": "Please sign in first."}


def test_item_routes(client):
    stock_catalog(client)
    assert client.get("/api/items").get_json() == [
        {"item_code": 1, "item_name": "Iron Sword", "item_price": 3000},
        {"item_code": 2, "item_name": "Leather Armor", "item_price": 1000},
    ]
    assert client.get("/api/item/1").get_json()["item_stat"] == {"health": 20, "power": 15}
    assert client.get("/api/item/99").status_code == 404


def test_item_admin_only(client):
    sign_up_and_in(client, "hero")
    resp = client.post("/api/item", json={
        "item_code": 9, "item_name": "Cheat", "item_stat": {}, "item_price": 0,
    })
    assert resp.status_code == 403


def test_update_item(client):
    stock_catalog(client)
    client.post("/api/sign-in", json={"account": "admin", "password": "secret1"})
    resp = client.post("/api/item/1", json={"item_name": "Steel Sword", "item_stat": {"health": 0, "power": 30}})
    assert resp.status_code == 200
    assert resp.get_json()["item"]["item_price"] == 3000
    assert client.post("/api/item/42", json={"item_name": "X", "item_stat": {}}).status_code == 404


def test_character_lifecycle(client):
    sign_up_and_in(client, "hero")
    character_id = create_character(client)

    assert client.post("/api/character", json={"name": "hero"}).status_code == 400
    assert [c["id"] for c in client.get("/api/characters").get_json()] == [character_id]

    detail = client.get(f"/api/character/{character_id}").get_json()
    assert detail == {"id": character_id, "name": "hero", "health": 500, "power": 100, "money": 10000}

    assert client.delete(f"/api/character/{character_id}").status_code == 200
    assert client.get(f"/api/character/{character_id}").status_code == 404


def test_economy_flow(client):
    stock_catalog(client)
    sign_up_and_in(client, "hero")
    cid = create_character(client)

    resp = client.post(f"/api/character/{cid}/purchase", json=[{"item_code": 1, "count": 2}])
    assert resp.status_code == 200
    assert resp.get_json()["money"] == 4000

    assert client.post(f"/api/character/{cid}/equip", json={"item_code": 1}).status_code == 200
    assert client.get(f"/api/character/{cid}").get_json()["health"] == 520
    assert client.get(f"/api/character/{cid}/inventory").get_json() == [
        {"item_code": 1, "item_name": "Iron Sword", "count": 1},
    ]
    assert client.get(f"/api/character/{cid}/equipped").get_json() == [
        {"item_code": 1, "item_name": "Iron Sword"},
    ]

    # Equipped codes cannot be sold, and cannot be equipped twice
    assert client.post(f"/api/character/{cid}/sell", json=[{"item_code": 1}]).status_code == 400
    assert client.post(f"/api/character/{cid}/equip", json={"item_code": 1}).status_code == 400

    assert client.post(f"/api/character/{cid}/unequip", json={"item_code": 1}).status_code == 200
    assert client.post(f"/api/character/{cid}/unequip", json={"item_code": 1}).status_code == 400

    resp = client.post(f"/api/character/{cid}/sell", json=[{"item_code": 1}, {"item_code": 1}])
    assert resp.status_code == 200
    assert resp.get_json() == {"message": "Items sold.", "money": 7600}

    resp = client.post(f"/api/character/{cid}/earn-money")
    assert resp.get_json()["money"] == 7700


def test_economy_error_statuses(client):
    stock_catalog(client)
    sign_up_and_in(client, "hero")
    cid = create_character(client)

    assert client.post(f"/api/character/{cid}/purchase", json=[{"item_code": 77, "count": 1}]).status_code == 404
    resp = client.post(f"/api/character/{cid}/purchase", json=[{"item_code": 1, "count": 4}])
    assert resp.status_code == 400
    assert client.get(f"/api/character/{cid}").get_json()["money"] == 10000

    assert client.post(f"/api/character/{cid}/purchase", json={"item_code": 1}).status_code == 400
    assert client.post(f"/api/character/{cid}/purchase", json=[{"item_code": 1, "count": "2"}]).status_code == 400
    assert client.post(f"/api/character/{cid}/sell", json=[{"item_code": 2}]).status_code == 400
    assert client.post(f"/api/character/{cid}/equip", json={"item_code": 2}).status_code == 400
    assert client.post(f"/api/character/{cid}/equip", data="not json").status_code == 400


def test_other_accounts_get_403(client):
    stock_catalog(client)
    sign_up_and_in(client, "hero")
    cid = create_character(client)
    client.post(f"/api/character/{cid}/purchase", json=[{"item_code": 2, "count": 1}])
    client.post("/api/sign-out")

    sign_up_and_in(client, "thief")
    for path, body in [
        ("purchase", [{"item_code": 1, "count": 1}]),
        ("sell", [{"item_code": 2}]),
        ("equip", {"item_code": 2}),
        ("unequip", {"item_code": 2}),
        ("earn-money", None),
    ]:
        resp = client.post(f"/api/character/{cid}/{path}", json=body)
        assert resp.status_code == 403, path
        assert resp.get_json() == {"message": "This is not your character."}

    assert client.get(f"/api/character/{cid}/inventory").status_code == 403
    assert client.delete(f"/api/character/{cid}").status_code == 403
    assert "money" not in client.get(f"/api/character/{cid}").get_json()
    # Equipped items are public
    assert client.get(f"/api/character/{cid}/equipped").status_code == 200


def test_out_of_range_integers(client):
    huge = 2 ** 63
    stock_catalog(client)
    client.post("/api/sign-in", json={"account": "admin", "password": "secret1"})
    assert client.get(f"/api/item/{huge}").status_code == 404
    assert client.post(f"/api/item/{huge}", json={"item_name": "X", "item_stat": {}}).status_code == 404
    resp = client.post("/api/item", json={
        "item_code": huge, "item_name": "Huge", "item_stat": {}, "item_price": 1,
    })
    assert resp.status_code == 400
    client.post("/api/sign-out")

    sign_up_and_in(client, "hero")
    cid = create_character(client)
    for path, body in [
        ("purchase", [{"item_code": huge, "count": 1}]),
        ("purchase", [{"item_code": 1, "count": huge}]),
        ("sell", [{"item_code": huge}]),
        ("equip", {"item_code": huge}),
        ("unequip", {"item_code": -huge - 1}),
    ]:
        resp = client.post(f"/api/character/{cid}/{path}", json=body)
        assert resp.status_code == 400, path
    assert client.get(f"/api/character/{huge}").status_code == 404
    assert client.post(f"/api/character/{huge}/earn-money").status_code == 404
    assert client.get(f"/api/character/{cid}").get_json()["money"] == 10000


def test_purchase_count_capped(client):
    sign_up_and_in(client, "admin")
    client.post("/api/item", json={
        "item_code": 9, "item_name": "Pebble", "item_stat": {}, "item_price": 0,
    })
    cid = create_character(client, "collector")

    resp = client.post(f"/api/character/{cid}/purchase", json=[{"item_code": 9, "count": 1001}])
    assert resp.status_code == 400
    assert client.get(f"/api/character/{cid}/inventory").get_json() == []


def test_create_app_leaves_exit_hooks_to_main(tmp_path):
    from app import create_app

    with patch("app.atexit.register") as register:
        create_app({"DATABASE": str(tmp_path / "hooks.db"), "REDIS_URL": None, "LOG_FILE": ""})
    register.assert_not_called()
