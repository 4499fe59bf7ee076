import uuid

import pytest
from fastapi.testclient import TestClient

from companion.api.routes.patients import get_patient_service
from companion.core.exceptions import StoreUnavailable
from companion.main import app

BASE = "/api/patients/"


@pytest.fixture
def client(service):
    app.dependency_overrides[get_patient_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, **body):
    body = {"name": "Jane Doe", "email": "jane@example.com", **body}
    return client.post(BASE, json=body)


def test_root(client):
    assert client.get("/").json() == {"message": "API is running"}


def test_create_returns_201_with_camel_case_body(client):
    res = register(client, hospitalName="Mayo Clinic")

    assert res.status_code == 201
    body = res.json()
    uuid.UUID(body["id"])
    assert body["hospitalName"] == "Mayo Clinic"
    assert body["roomNumber"] is None
    assert body["createdAt"] == body["updatedAt"]


def test_create_duplicate_is_400(client):
    register(client)

    res = register(client, name="John")

    assert res.status_code == 400
    assert res.json()["detail"] == "Patient with email already exists"


def test_create_invalid_is_400_with_field_errors(client):
    res = client.post(BASE, json={"name": " ", "email": "bad"})

    assert res.status_code == 400
    assert {e["field"] for e in res.json()["errors"]} == {"name", "email"}


def test_get_list_and_lookup_by_email(client):
    created = register(client).json()

    assert client.get(f"{BASE}{created['id']}").json()["email"] == "jane@example.com"
    assert [p["id"] for p in client.get(BASE).json()] == [created["id"]]
    assert client.get(f"{BASE}by-email/JANE@example.com").json()["id"] == created["id"]


def test_get_missing_is_404(client):
    assert client.get(f"{BASE}{uuid.uuid4()}").status_code == 404
    assert client.get(f"{BASE}by-email/nobody@example.com").status_code == 404


def test_put_is_partial(client, clock):
    created = register(client, roomNumber="4A").json()
    clock.advance()

    res = client.put(f"{BASE}{created['id']}", json={"hospitalName": "Mayo Clinic", "email": "x@example.com"})

    assert res.status_code == 200
    body = res.json()
    assert body["hospitalName"] == "Mayo Clinic"
    assert body["roomNumber"] == "4A"
    assert body["email"] == "jane@example.com"
    assert body["updatedAt"] > body["createdAt"]


def test_put_missing_is_404(client):
    assert client.put(f"{BASE}{uuid.uuid4()}", json={"name": "X"}).status_code == 404


def test_delete_is_204_then_404(client):
    created = register(client).json()

    assert client.delete(f"{BASE}{created['id']}").status_code == 204
    assert client.delete(f"{BASE}{created['id']}").status_code == 404
    assert client.get(f"{BASE}{created['id']}").status_code == 404


def test_store_failure_is_503(client, store, monkeypatch):
    def broken():
        raise StoreUnavailable("connection refused")

    monkeypatch.setattr(store, "find_all", broken)

    assert client.get(BASE).status_code == 503


@pytest.mark.parametrize("method", ["get", "put", "delete"])
def test_malformed_id_is_404(client, method):
    kwargs = {"json": {"name": "X"}} if method == "put" else {}

    res = getattr(client, method)(f"{BASE}not-a-uuid", **kwargs)

    assert res.status_code == 404


def test_non_object_body_is_400(client):
    created = register(client).json()

    for res in (client.post(BASE, json=[1]), client.put(f"{BASE}{created['id']}", json=[1])):
        assert res.status_code == 400
        assert res.json()["detail"] == "Invalid patient data"
        assert res.json()["errors"]
