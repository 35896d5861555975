from datetime import date

import pytest

from hardline.exceptions import NotFoundError
from hardline.services import price_service, shopping_service


@pytest.mark.parametrize(
    "payday, today, expected",
    [
        (25, date(2025, 11, 25), "MonthStart"),
        (25, date(2025, 11, 30), "MonthStart"),
        (25, date(2025, 11, 24), "MidMonth"),
        (25, date(2025, 12, 3), "MidMonth"),
        (1, date(2025, 11, 1), "MonthStart"),
        (1, date(2025, 11, 14), "MonthStart"),
        (1, date(2025, 11, 15), "MidMonth"),
        (31, date(2025, 11, 30), "MidMonth"),
    ],
)
def test_shopping_cycle(payday, today, expected):
    assert shopping_service.get_current_shopping_cycle(payday, today) == expected


def _item(db_conn, user_id, name, cycle, is_active=True, category="Pantry", typical_cost=0):
    cur = db_conn.execute(
        "INSERT INTO shopping_items (user_id, name, category, cycle, is_active, typical_cost) VALUES (?, ?, ?, ?, ?, ?)",
        (user_id, name, category, cycle, 1 if is_active else 0, typical_cost),
    )
    db_conn.commit()
    return cur.lastrowid


def test_active_list_for_cycle(db_conn, make_user):
    uid = make_user(payday=25)
    _item(db_conn, uid, "Washing powder", "MonthStart", category="Cleaning")
    _item(db_conn, uid, "Spinach", "MidMonth", category="Fridge")
    _item(db_conn, uid, "Rice", "Both")
    _item(db_conn, uid, "Old brand", "MonthStart", is_active=False)

    month_start = shopping_service.get_active_shopping_list(db_conn, uid, today=date(2025, 11, 26))
    assert sorted(i["name"] for i in month_start) == ["Rice", "Washing powder"]

    mid_month = shopping_service.get_active_shopping_list(db_conn, uid, today=date(2025, 11, 10))
    assert sorted(i["name"] for i in mid_month) == ["Rice", "Spinach"]


def test_active_list_unknown_user(db_conn):
    with pytest.raises(NotFoundError):
        shopping_service.get_active_shopping_list(db_conn, 404)


def test_price_trend(db_conn, make_user):
    uid = make_user()
    item = _item(db_conn, uid, "Coffee", "Both", typical_cost=90)

    assert price_service.get_price_trend(db_conn, uid, item)["trend"] == "insufficient_data"

    price_service.record_price(db_conn, uid, item, 90, recorded_date=date(2025, 9, 1))
    single = price_service.get_price_trend(db_conn, uid, item)
    assert single["trend"] == "insufficient_data"
    assert single["current_price"] == 90

    price_service.record_price(db_conn, uid, item, 100, source="purchase", recorded_date=date(2025, 10, 1))
    trend = price_service.get_price_trend(db_conn, uid, item)
    assert trend["trend"] == "up"
    assert trend["current_price"] == 100
    assert trend["previous_price"] == 90
    assert trend["change_percent"] == 11.11
    assert trend["avg_price"] == 95

    price_service.record_price(db_conn, uid, item, 97, recorded_date=date(2025, 11, 1))
    assert price_service.get_price_trend(db_conn, uid, item)["trend"] == "stable"

    price_service.record_price(db_conn, uid, item, 80, recorded_date=date(2025, 12, 1))
    assert price_service.get_price_trend(db_conn, uid, item)["trend"] == "down"

    history = price_service.get_price_history(db_conn, uid, item)
    assert [h["price"] for h in history] == [80, 97, 100, 90]


def test_record_price_for_foreign_item_fails(db_conn, make_user):
    owner = make_user("Owner")
    other = make_user("Other")
    item = _item(db_conn, owner, "Milk", "MidMonth", category="Fridge")
    with pytest.raises(NotFoundError):
        price_service.record_price(db_conn, other, item, 25)


def test_shopping_and_price_api(app_client, make_user):
    uid = make_user(payday=1)
    created = app_client.post(
        "/api/shopping/items",
        json={"user_id": uid, "name": "Oats", "category": "Pantry", "cycle": "Both", "typical_cost": 45},
    )
    assert created.status_code == 200, created.text
    item_id = created.json()["id"]

    listing = app_client.get("/api/shopping/list", params={"user_id": uid})
    assert [i["name"] for i in listing.json()] == ["Oats"]

    cycle = app_client.get("/api/shopping/cycle", params={"user_id": uid})
    assert cycle.json()["cycle"] in ("MonthStart", "MidMonth")

    for price, day in ((40, "2025-10-01"), (50, "2025-11-01")):
        r = app_client.post("/api/prices", json={"user_id": uid, "shopping_item_id": item_id, "price": price, "recorded_date": day})
        assert r.status_code == 200, r.text

    trend = app_client.get(f"/api/prices/items/{item_id}/trend", params={"user_id": uid}).json()
    assert trend["trend"] == "up"
    assert trend["change_percent"] == 25.0

    comparison = app_client.get("/api/prices/comparison", params={"user_id": uid}).json()
    assert comparison == [
        {"item_id": item_id, "item_name": "Oats", "current_price": 50.0, "typical_cost": 45.0, "trend": "up", "change_percent": 25.0}
    ]

    deactivated = app_client.patch(f"/api/shopping/items/{item_id}", params={"user_id": uid}, json={"is_active": False})
    assert deactivated.status_code == 200
    assert app_client.get("/api/shopping/list", params={"user_id": uid}).json() == []

    missing = app_client.post("/api/prices", json={"user_id": uid, "shopping_item_id": 999, "price": 1})
    assert missing.status_code == 404


def test_user_settings_api(app_client):
    r = app_client.post("/api/users", json={"name": "Thandi", "email": "Thandi@Example.com", "payday": 25})
    assert r.status_code == 200, r.text
    user = r.json()
    assert user["email"] == "thandi@example.com"

    dup = app_client.post("/api/users", json={"name": "Other", "email": "thandi@example.com", "payday": 1})
    assert dup.status_code == 400

    upd = app_client.patch(f"/api/users/{user['id']}", json={"payday": 1, "penalty_system_enabled": True})
    assert upd.status_code == 200
    assert upd.json()["payday"] == 1
    assert upd.json()["penalty_system_enabled"] is True

    assert app_client.patch(f"/api/users/{user['id']}", json={"payday": 40}).status_code == 422
    assert app_client.get("/api/users/999").status_code == 404
