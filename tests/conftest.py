import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_FILE"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from expense_tracker import database  # noqa: E402
from expense_tracker.categories.seeder import seed_default_categories  # noqa: E402
from expense_tracker.database import Base  # noqa: E402
from expense_tracker.main import app  # noqa: E402


@pytest.fixture()
def engine(tmp_path):
    # a file database so the monthly breakdown threads share one store
    test_engine = create_engine(
        f"sqlite:///{tmp_path / 'expenses.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=test_engine)
    with Session(test_engine) as db:
        seed_default_categories(db)
    yield test_engine
    test_engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture()
def db_session(session_factory):
    session: Session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[database.get_db] = override_get_db
    app.dependency_overrides[database.get_session_factory] = lambda: session_factory
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def register(client):
    """Sign a user up and return bearer headers for them.

    The auth cookie is cleared afterwards so several users can share a client.
    """

    def _register(name="Alice", email="alice@example.com", password="secret1"):
        response = client.post(
            "/api/auth/signup",
            json={
                "name": name,
                "email": email,
                "password": password,
                "confirmPassword": password,
            },
        )
        assert response.status_code == 201, response.text
        token = client.cookies.get("token")
        client.cookies.clear()
        return {"Authorization": f"Bearer {token}"}

    return _register


@pytest.fixture()
def auth_headers(register):
    return register()


@pytest.fixture()
def category_ids(client, auth_headers):
    response = client.get("/api/categories/", headers=auth_headers)
    return {item["name"]: item["id"] for item in response.json()["data"]}


@pytest.fixture()
def add_expense(client):
    def _add_expense(headers, category, title="Lunch", amount=10, date="2024-03-05"):
        response = client.post(
            "/api/expenses/",
            json={"title": title, "amount": amount, "category": category, "date": date},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _add_expense
