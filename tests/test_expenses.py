import math
from datetime import date

import pytest


def test_create_expense(client, auth_headers, category_ids):
    response = client.post(
        "/api/expenses/",
        json={"title": "  Groceries ", "amount": 42.5, "category": category_ids["Food"], "date": "2024-03-05"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Expense created successfully"
    data = body["data"]
    assert data["title"] == "Groceries"
    assert data["amount"] == 42.5
    assert data["category"]["name"] == "Food"
    assert data["category"]["isDefault"] is True
    assert data["formattedDate"] == "5 Mar 2024"
    assert data["date"].startswith("2024-03-05")


def test_create_validation(client, auth_headers, category_ids):
    response = client.post(
        "/api/expenses/",
        json={"title": "x", "amount": -3, "category": category_ids["Food"], "date": "2024-03-05"},
        headers=auth_headers,
    )
    assert response.status_code == 422
    errors = response.json()["errors"]
    assert errors["title"] == "Title must be at least 2 characters long"
    assert errors["amount"] == "Amount must be positive"


def test_create_with_unknown_category(client, auth_headers):
    response = client.post(
        "/api/expenses/",
        json={"title": "Lunch", "amount": 5, "category": 9999, "date": "2024-03-05"},
        headers=auth_headers,
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Category not found"


def test_cannot_use_another_users_category(client, register):
    alice = register()
    bob = register(name="Bob", email="bob@example.com")
    gym = client.post("/api/categories/", json={"name": "Gym"}, headers=alice).json()["data"]

    response = client.post(
        "/api/expenses/",
        json={"title": "Lunch", "amount": 5, "category": gym["id"], "date": "2024-03-05"},
        headers=bob,
    )
    assert response.status_code == 404


def test_get_update_delete(client, auth_headers, category_ids, add_expense):
    expense = add_expense(auth_headers, category_ids["Food"])

    fetched = client.get(f"/api/expenses/{expense['id']}", headers=auth_headers)
    assert fetched.status_code == 200
    assert fetched.json()["data"]["title"] == "Lunch"

    updated = client.put(
        f"/api/expenses/{expense['id']}",
        json={"amount": 12.75, "category": category_ids["Bills"], "title": None},
        headers=auth_headers,
    )
    assert updated.status_code == 200
    data = updated.json()["data"]
    assert data["amount"] == 12.75
    assert data["category"]["name"] == "Bills"
    assert data["title"] == "Lunch"

    deleted = client.delete(f"/api/expenses/{expense['id']}", headers=auth_headers)
    assert deleted.status_code == 200
    assert deleted.json()["data"] == []

    missing = client.get(f"/api/expenses/{expense['id']}", headers=auth_headers)
    assert missing.status_code == 404
    assert missing.json()["message"] == "Expense not found or not authorized"


def test_other_users_expense_is_hidden_and_unchanged(client, register, category_ids, add_expense):
    alice = register(email="alice2@example.com")
    bob = register(name="Bob", email="bob@example.com")
    expense = add_expense(alice, category_ids["Food"], amount=20)

    assert client.get(f"/api/expenses/{expense['id']}", headers=bob).status_code == 404
    assert client.put(f"/api/expenses/{expense['id']}", json={"amount": 1}, headers=bob).status_code == 404
    assert client.delete(f"/api/expenses/{expense['id']}", headers=bob).status_code == 404

    still = client.get(f"/api/expenses/{expense['id']}", headers=alice).json()["data"]
    assert still["amount"] == 20
    assert client.get("/api/expenses/", headers=bob).json()["pagination"]["total"] == 0


def test_pagination_covers_every_expense_once(client, auth_headers, category_ids, add_expense):
    created = {
        add_expense(auth_headers, category_ids["Food"], title=f"Item {i}", amount=i + 1, date="2024-03-05")["id"]
        for i in range(7)
    }

    seen = []
    for page in (1, 2, 3):
        response = client.get(f"/api/expenses/?page={page}&limit=3", headers=auth_headers)
        body = response.json()
        assert body["pagination"] == {"page": page, "limit": 3, "total": 7, "totalPages": math.ceil(7 / 3)}
        seen.extend(item["id"] for item in body["data"])

    assert len(seen) == 7
    assert set(seen) == created


def test_list_is_newest_first(client, auth_headers, category_ids, add_expense):
    add_expense(auth_headers, category_ids["Food"], title="Old", date="2024-01-01")
    add_expense(auth_headers, category_ids["Food"], title="New", date="2024-02-01")

    titles = [e["title"] for e in client.get("/api/expenses/", headers=auth_headers).json()["data"]]
    assert titles == ["New", "Old"]


def test_list_filters(client, auth_headers, category_ids, add_expense):
    year = date.today().year
    add_expense(auth_headers, category_ids["Food"], title="March food", date=f"{year}-03-10")
    add_expense(auth_headers, category_ids["Travel"], title="March taxi", date=f"{year}-03-12")
    add_expense(auth_headers, category_ids["Food"], title="April food", date=f"{year}-04-02")

    by_month = client.get("/api/expenses/?month=03", headers=auth_headers).json()["data"]
    assert {e["title"] for e in by_month} == {"March food", "March taxi"}

    by_category = client.get(f"/api/expenses/?category={category_ids['Food']}", headers=auth_headers).json()["data"]
    assert {e["title"] for e in by_category} == {"March food", "April food"}

    by_range = client.get(
        f"/api/expenses/?startDate={year}-03-11&endDate={year}-04-02",
        headers=auth_headers,
    ).json()["data"]
    assert {e["title"] for e in by_range} == {"March taxi", "April food"}


def test_invalid_filters(client, auth_headers):
    assert client.get("/api/expenses/?month=13", headers=auth_headers).status_code == 422
    assert client.get("/api/expenses/?limit=500", headers=auth_headers).status_code == 422

    response = client.get("/api/expenses/stats?startDate=2024-03-10&endDate=2024-03-01", headers=auth_headers)
    assert response.status_code == 422
    assert response.json()["errors"]["endDate"] == "End date must be after start date"


def test_stats(client, auth_headers, category_ids, add_expense):
    add_expense(auth_headers, category_ids["Food"], amount=10, date="2024-03-01")
    add_expense(auth_headers, category_ids["Food"], amount=30, date="2024-03-02")
    add_expense(auth_headers, category_ids["Food"], amount=100, date="2024-05-02")

    everything = client.get("/api/expenses/stats", headers=auth_headers).json()["data"]
    assert everything["totalAmount"] == 140
    assert everything["totalExpenses"] == 3
    assert everything["averageAmount"] == pytest.approx(140 / 3)

    march = client.get(
        "/api/expenses/stats?startDate=2024-03-01&endDate=2024-03-31",
        headers=auth_headers,
    ).json()["data"]
    assert march["totalAmount"] == 40
    assert march["averageAmount"] == 20


def test_chart_data_over_range(client, auth_headers, category_ids, add_expense):
    add_expense(auth_headers, category_ids["Food"], amount=10, date="2024-03-01")
    add_expense(auth_headers, category_ids["Travel"], amount=5, date="2024-03-01")
    add_expense(auth_headers, category_ids["Food"], amount=7, date="2024-03-03")

    response = client.get(
        "/api/expenses/chart-data?startDate=2024-03-01&endDate=2024-03-31",
        headers=auth_headers,
    )
    data = response.json()["data"]
    assert data["monthlyData"] == [
        {"date": "2024-03-01", "amount": 15},
        {"date": "2024-03-03", "amount": 7},
    ]
    assert data["categoryDistribution"] == [
        {"name": "Food", "value": 17, "color": "#10b981"},
        {"name": "Travel", "value": 5, "color": "#3b82f6"},
    ]


def test_chart_data_defaults_to_last_30_days(client, auth_headers, category_ids, add_expense):
    add_expense(auth_headers, category_ids["Food"], amount=10, date=date.today().isoformat())
    add_expense(auth_headers, category_ids["Food"], amount=99, date="2000-01-01")

    data = client.get("/api/expenses/chart-data", headers=auth_headers).json()["data"]
    assert sum(item["amount"] for item in data["monthlyData"]) == 10


def test_export_csv(client, auth_headers, category_ids, add_expense):
    add_expense(auth_headers, category_ids["Food"], title='Dinner "out"', amount=25, date="2024-03-05")

    response = client.get("/api/expenses/export", headers=auth_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == 'attachment; filename="expenses.csv"'
    assert response.text.split("\n") == [
        '"Title","Amount","Category","Date"',
        '"Dinner ""out""","25","Food","5 Mar 2024"',
    ]


def test_non_finite_amounts_are_rejected(client, auth_headers, category_ids, add_expense):
    headers = {**auth_headers, "Content-Type": "application/json"}
    body = '{"title": "Lottery", "amount": 1e400, "category": %d, "date": "2024-03-05"}' % category_ids["Food"]

    response = client.post("/api/expenses/", content=body, headers=headers)
    assert response.status_code == 422
    assert "amount" in response.json()["errors"]

    expense = add_expense(auth_headers, category_ids["Food"], amount=5)
    response = client.put(f"/api/expenses/{expense['id']}", content='{"amount": -1e400}', headers=headers)
    assert response.status_code == 422

    listing = client.get("/api/expenses/", headers=auth_headers)
    assert listing.status_code == 200
    assert [e["amount"] for e in listing.json()["data"]] == [5]
    assert client.get("/api/expenses/stats", headers=auth_headers).json()["data"]["totalAmount"] == 5
