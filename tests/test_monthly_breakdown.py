import pytest

from expense_tracker.reports import formatters


@pytest.fixture()
def march(client, auth_headers, category_ids, add_expense):
    add_expense(auth_headers, category_ids["Food"], title="Groceries", amount=10, date="2024-03-01")
    add_expense(auth_headers, category_ids["Travel"], title="Taxi", amount=20, date="2024-03-15")
    add_expense(auth_headers, category_ids["Food"], title="Dinner", amount=30, date="2024-03-15")
    add_expense(auth_headers, category_ids["Bills"], title="Rent", amount=900, date="2024-04-01")
    return auth_headers


def test_full_breakdown(client, march):
    response = client.post("/api/monthly-breakdown/", json={"month": 3, "year": 2024}, headers=march)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Monthly breakdown retrieved successfully"

    data = body["data"]
    assert data["summary"] == {
        "totalSpent": 60,
        "totalExpenses": 3,
        "averagePerDay": 1.94,
        "daysInMonth": 31,
    }
    assert [e["title"] for e in data["expenses"]] == ["Dinner", "Taxi", "Groceries"]
    assert body["pagination"] == {"page": 1, "limit": 10, "total": 3, "totalPages": 1}

    daily = data["dailyBreakdown"]
    assert [d["date"] for d in daily] == ["2024-03-01", "2024-03-15"]
    assert daily[1]["formattedDate"] == "15 Mar 2024"

    distribution = data["categoryDistribution"]
    assert distribution[0] == {"name": "Food", "value": 40, "color": "#10b981"}
    assert sum(d["amount"] for d in daily) == pytest.approx(data["summary"]["totalSpent"])
    assert sum(c["value"] for c in distribution) == pytest.approx(data["summary"]["totalSpent"])


def test_breakdown_pages_expenses(client, march):
    response = client.post(
        "/api/monthly-breakdown/",
        json={"month": 3, "year": 2024, "page": 2, "limit": 2},
        headers=march,
    )
    body = response.json()
    assert [e["title"] for e in body["data"]["expenses"]] == ["Groceries"]
    assert body["pagination"]["totalPages"] == 2
    assert body["data"]["summary"]["totalExpenses"] == 3


def test_empty_month(client, auth_headers):
    response = client.post("/api/monthly-breakdown/", json={"month": 2, "year": 2024}, headers=auth_headers)
    data = response.json()["data"]
    assert data["summary"] == {"totalSpent": 0, "totalExpenses": 0, "averagePerDay": 0, "daysInMonth": 29}
    assert data["expenses"] == []
    assert data["dailyBreakdown"] == []
    assert data["categoryDistribution"] == []


def test_individual_endpoints(client, march):
    payload = {"month": 3, "year": 2024}

    summary = client.post("/api/monthly-breakdown/summary", json=payload, headers=march).json()["data"]
    assert summary["totalSpent"] == 60

    expenses = client.post("/api/monthly-breakdown/expenses", json=payload, headers=march).json()
    assert len(expenses["data"]) == 3
    assert expenses["pagination"]["total"] == 3

    distribution = client.post("/api/monthly-breakdown/category-distribution", json=payload, headers=march)
    assert {c["name"] for c in distribution.json()["data"]} == {"Food", "Travel"}

    daily = client.post("/api/monthly-breakdown/daily", json=payload, headers=march).json()["data"]
    assert daily[1]["amount"] == 50

    export = client.post("/api/monthly-breakdown/export", json=payload, headers=march).json()["data"]
    lines = export.split("\n")
    assert lines[0] == '"Title","Amount","Category","Date"'
    assert len(lines) == 4
    assert '"Rent"' not in export


def test_month_and_year_are_validated(client, auth_headers):
    response = client.post("/api/monthly-breakdown/", json={"month": 13, "year": 2024}, headers=auth_headers)
    assert response.status_code == 422
    assert "month" in response.json()["errors"]

    response = client.post("/api/monthly-breakdown/summary", json={"month": 1, "year": 1800}, headers=auth_headers)
    assert response.status_code == 422
    assert "year" in response.json()["errors"]


def test_requires_authentication(client):
    response = client.post("/api/monthly-breakdown/", json={"month": 3, "year": 2024})
    assert response.status_code == 401


def test_average_per_day_rounds_to_cents():
    summary = formatters.format_monthly_summary({"totalAmount": 100, "totalExpenses": 2}, 2, 2023)
    assert summary["averagePerDay"] == 3.57
    assert summary["daysInMonth"] == 28
