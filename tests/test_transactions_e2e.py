from datetime import date

from hardline import auto_debit


def _payload(user_id, **overrides):
    payload = {
        "user_id": user_id,
        "type": "expense",
        "date": "2025-11-04",
        "amount": 120.5,
        "description": "pytest-groceries",
        "category": "Food",
    }
    payload.update(overrides)
    return payload


def test_create_and_filter_transactions(app_client, make_user):
    uid = make_user()
    a = app_client.post("/api/transactions", json=_payload(uid))
    assert a.status_code == 200, a.text
    b = app_client.post(
        "/api/transactions",
        json=_payload(uid, type="income", amount=30000, description="Salary", category=None, income_source="Salary", date="2025-11-25"),
    )
    assert b.status_code == 200, b.text
    assert b.json()["category"] is None

    all_rows = app_client.get("/api/transactions", params={"user_id": uid}).json()
    assert [t["description"] for t in all_rows] == ["Salary", "pytest-groceries"]

    expenses = app_client.get("/api/transactions", params={"user_id": uid, "type": "expense"}).json()
    assert len(expenses) == 1

    ranged = app_client.get("/api/transactions", params={"user_id": uid, "from_date": "2025-11-10", "to_date": "2025-11-30"}).json()
    assert [t["description"] for t in ranged] == ["Salary"]


def test_expense_requires_known_category(app_client, make_user):
    uid = make_user()
    r = app_client.post("/api/transactions", json=_payload(uid, category="Yachts"))
    assert r.status_code == 422
    r = app_client.post("/api/transactions", json=_payload(uid, category=None))
    assert r.status_code == 422
    r = app_client.post("/api/transactions", json=_payload(uid, amount=-5))
    assert r.status_code == 422


def test_update_and_delete(app_client, make_user):
    uid = make_user()
    tx = app_client.post("/api/transactions", json=_payload(uid)).json()
    url = f"/api/transactions/{tx['id']}"
    owner = {"user_id": uid}

    upd = app_client.put(url, params=owner, json={"amount": 99.0, "date": "2025-11-05"})
    assert upd.status_code == 200, upd.text
    assert upd.json()["amount"] == 99.0
    assert upd.json()["date"] == "2025-11-05"

    bad = app_client.put(url, params=owner, json={"category": "Yachts"})
    assert bad.status_code == 422

    empty = app_client.put(url, params=owner, json={})
    assert empty.status_code == 400

    d = app_client.delete(url, params=owner)
    assert d.status_code == 200
    assert app_client.delete(url, params=owner).status_code == 404


def test_update_nonexistent_transaction_returns_404(app_client, make_user):
    uid = make_user()
    r = app_client.put("/api/transactions/999999", params={"user_id": uid}, json={"amount": 12.3})
    assert r.status_code == 404


def test_other_user_cannot_edit_or_delete_ledger_rows(app_client, db_conn, make_user, make_fixed_expense):
    owner = make_user()
    intruder = make_user(name="Sipho")
    make_fixed_expense(owner, name="Rent", amount=8500, trigger_day=1)
    auto_debit.run_daily_charges(date(2025, 11, 1))
    tx_id = db_conn.execute("SELECT id FROM transactions WHERE user_id = ?", (owner,)).fetchone()[0]
    url = f"/api/transactions/{tx_id}"

    upd = app_client.put(url, params={"user_id": intruder}, json={"amount": 1.0})
    assert upd.status_code == 404
    assert app_client.delete(url, params={"user_id": intruder}).status_code == 404

    row = db_conn.execute("SELECT amount, description FROM transactions WHERE id = ?", (tx_id,)).fetchone()
    assert row["amount"] == 8500
    assert row["description"] == "Auto-debit: Rent"


def test_update_rejects_cross_type_classification(app_client, make_user):
    uid = make_user()
    income = app_client.post(
        "/api/transactions",
        json=_payload(uid, type="income", description="Salary", category=None, income_source="Salary"),
    ).json()
    expense = app_client.post("/api/transactions", json=_payload(uid)).json()

    r = app_client.put(f"/api/transactions/{income['id']}", params={"user_id": uid}, json={"category": "Food"})
    assert r.status_code == 422
    r = app_client.put(f"/api/transactions/{expense['id']}", params={"user_id": uid}, json={"income_source": "Salary"})
    assert r.status_code == 422

    rows = app_client.get("/api/transactions", params={"user_id": uid, "type": "income"}).json()
    assert rows[0]["category"] is None


def test_penalty_trigger_flag(app_client, make_user):
    uid = make_user(penalties=True)
    today = date.today().isoformat()

    takeaway = app_client.post("/api/transactions", json=_payload(uid, category="Takeaway", date=today)).json()
    assert takeaway["is_penalty_trigger"] is True

    flags = [
        app_client.post("/api/transactions", json=_payload(uid, category="Snack", date=today)).json()["is_penalty_trigger"]
        for _ in range(3)
    ]
    assert flags == [False, False, True]

    food = app_client.post("/api/transactions", json=_payload(uid, category="Food", date=today)).json()
    assert food["is_penalty_trigger"] is False


def test_penalty_trigger_off_when_disabled(app_client, make_user):
    uid = make_user(penalties=False)
    r = app_client.post("/api/transactions", json=_payload(uid, category="Takeaway"))
    assert r.json()["is_penalty_trigger"] is False
