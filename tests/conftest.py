import pytest
from fastapi.testclient import TestClient

from shareit.core.config import Settings
from shareit.main import create_app

PASSWORD = "s3cret"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'shareit-test.db'}",
        ADMIN_PASSWORD=PASSWORD,
        AUTO_CREATE_TABLES=True,
        DB_CONNECT_RETRIES=1,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def group(client):
    res = client.post("/api/groups", json={"name": "Goa Trip", "password": PASSWORD})
    assert res.status_code == 201
    return res.json()


def add_family(client, group_id, name, members):
    res = client.post(
        "/api/families",
        json={"groupId": group_id, "name": name, "members": members, "password": PASSWORD},
    )
    assert res.status_code == 201, res.text
    return res.json()


def add_expense(client, group_id, family_name, amount, description="misc"):
    res = client.post(
        "/api/expenses",
        json={"groupId": group_id, "familyName": family_name, "amount": amount, "description": description},
    )
    assert res.status_code == 201, res.text
    return res.json()
