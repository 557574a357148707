"""API endpoint tests."""

from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from roster.api.dependencies import get_company_repository
from roster.main import app
from roster.models import COMPANY_SCHEMA
from roster.services.repository import RecordRepository

MISSING_KEY = "64b7f0c2a1b2c3d4e5f60718"


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_create_company(client):
    """Test creating a company stamps both timestamps with the same time."""
    response = client.post(
        "/api/v1/companies",
        json={"name": "Acme", "since": "1999-12-31T00:00:00Z"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Acme"
    assert data["key"]
    assert data["id"] == f"companies/{data['key']}"
    assert data["rev"]
    assert data["created_at"] is not None
    assert data["created_at"] == data["modified_at"]
    assert data["deleted_at"] is None


def test_create_company_from_form(client):
    """Test creating a company from a urlencoded form body."""
    response = client.post("/api/v1/companies", data={"name": "Form Co"})
    assert response.status_code == 200
    assert response.json()["name"] == "Form Co"
    assert response.json()["since"] is None


def test_create_company_requires_name(client, db):
    """Test that a missing name is rejected before anything is stored."""
    response = client.post("/api/v1/companies", json={"since": "2001-01-01T00:00:00Z"})
    assert response.status_code == 400
    assert "name" in response.json()["errors"]
    assert db["companies"].count_documents({}) == 0


def test_create_company_rejects_non_object_json(client):
    """Test that a JSON array body is a validation error."""
    response = client.post("/api/v1/companies", json=["Acme"])
    assert response.status_code == 400
    assert "body" in response.json()["errors"]


def test_show_company_round_trip(client, company):
    """Test showing a created company returns the same fields."""
    response = client.get(f"/api/v1/companies/{company['key']}")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Acme Corp"
    assert datetime.fromisoformat(data["since"]) == datetime.fromisoformat(company["since"])
    assert data["created_at"] == data["modified_at"]


def test_show_company_not_found(client):
    """Test showing a company that does not exist."""
    response = client.get(f"/api/v1/companies/{MISSING_KEY}")
    assert response.status_code == 404


def test_show_company_malformed_key(client):
    """Test that a key that cannot exist is a plain not found."""
    response = client.get("/api/v1/companies/not-a-key")
    assert response.status_code == 404


def test_find_companies(client):
    """Test listing all companies."""
    for name in ["Acme", "Globex", "Initech"]:
        client.post("/api/v1/companies", json={"name": name})

    response = client.get("/api/v1/companies")
    assert response.status_code == 200
    assert len(response.json()) == 3


def test_find_companies_empty(client):
    """Test listing with nothing stored."""
    response = client.get("/api/v1/companies")
    assert response.status_code == 200
    assert response.json() == []


def test_find_companies_search_is_trimmed(client):
    """Test that surrounding whitespace in search is ignored."""
    client.post("/api/v1/companies", json={"name": "Acme Widgets"})
    client.post("/api/v1/companies", json={"name": "Globex"})

    response = client.get("/api/v1/companies", params={"search": "  Acme  "})
    assert response.status_code == 200
    names = [c["name"] for c in response.json()]
    assert names == ["Acme Widgets"]


def test_find_companies_search_is_case_sensitive(client):
    """Test that search matches substrings with exact case."""
    client.post("/api/v1/companies", json={"name": "Acme"})

    response = client.get("/api/v1/companies", params={"search": "acme"})
    assert response.json() == []

    response = client.get("/api/v1/companies", params={"search": "cm"})
    assert len(response.json()) == 1


def test_find_companies_search_is_literal(client):
    """Test that regex characters in search are matched literally."""
    client.post("/api/v1/companies", json={"name": "A.B Holdings"})
    client.post("/api/v1/companies", json={"name": "AXB Holdings"})

    response = client.get("/api/v1/companies", params={"search": "A.B"})
    assert [c["name"] for c in response.json()] == ["A.B Holdings"]


def test_find_companies_blank_search(client):
    """Test that a whitespace-only search returns everything."""
    client.post("/api/v1/companies", json={"name": "Acme"})
    client.post("/api/v1/companies", json={"name": "Globex"})

    response = client.get("/api/v1/companies", params={"search": "   "})
    assert len(response.json()) == 2


def test_find_companies_sorted_and_limited(client):
    """Test sorting by name ascending and capping the result count."""
    for name in ["Umbrella", "Acme", "Globex", "Initech"]:
        client.post("/api/v1/companies", json={"name": name})

    response = client.get("/api/v1/companies", params={"sort_by": "name", "limit": 3})
    assert response.status_code == 200
    assert [c["name"] for c in response.json()] == ["Acme", "Globex", "Initech"]


def test_find_companies_sorted_by_since(client):
    """Test sorting by founding date."""
    client.post("/api/v1/companies", json={"name": "Newer", "since": "2010-01-01T00:00:00Z"})
    client.post("/api/v1/companies", json={"name": "Older", "since": "1990-01-01T00:00:00Z"})

    response = client.get("/api/v1/companies", params={"sort_by": "since"})
    assert [c["name"] for c in response.json()] == ["Older", "Newer"]


def test_find_companies_invalid_sort_by(client):
    """Test that sort fields outside the whitelist are rejected."""
    response = client.get("/api/v1/companies", params={"sort_by": "created_at"})
    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Validation failed"
    assert "sort_by" in body["errors"]


def test_find_companies_invalid_limit(client):
    """Test that limits outside 1..100 are rejected."""
    for limit in ["0", "101", "-5", "many"]:
        response = client.get("/api/v1/companies", params={"limit": limit})
        assert response.status_code == 400, limit
        assert "limit" in response.json()["errors"]


def test_find_companies_validation_runs_before_query(client):
    """Test that an invalid request never reaches the database."""
    repo = MagicMock(spec=RecordRepository)
    app.dependency_overrides[get_company_repository] = lambda: repo

    response = client.get("/api/v1/companies", params={"sort_by": "password"})
    assert response.status_code == 400
    repo.find.assert_not_called()


def test_find_companies_includes_trashed(client, company):
    """Test that soft-deleted companies still appear in listings."""
    client.request("DELETE", f"/api/v1/companies/{company['key']}", json={"mode": "trash"})

    response = client.get("/api/v1/companies")
    assert len(response.json()) == 1
    assert response.json()[0]["deleted_at"] is not None


def test_update_company_partial(client, company):
    """Test updating only the name keeps since and advances modified_at."""
    later = datetime.fromisoformat(company["modified_at"]) + timedelta(hours=1)
    with patch("roster.models.mixins.utcnow", return_value=later):
        response = client.put(
            f"/api/v1/companies/{company['key']}",
            json={"name": "NewName"},
        )
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "NewName"
    assert datetime.fromisoformat(data["since"]) == datetime.fromisoformat(company["since"])
    assert datetime.fromisoformat(data["modified_at"]) > datetime.fromisoformat(
        company["modified_at"]
    )
    assert data["rev"] != company["rev"]


def test_update_company_clears_since(client, company):
    """Test that an explicit null removes since."""
    response = client.put(f"/api/v1/companies/{company['key']}", json={"since": None})
    assert response.status_code == 200
    assert response.json()["since"] is None
    assert response.json()["name"] == "Acme Corp"


def test_update_company_rejects_null_name(client, company):
    """Test that name cannot be nulled out."""
    response = client.put(f"/api/v1/companies/{company['key']}", json={"name": None})
    assert response.status_code == 400
    assert "name" in response.json()["errors"]


def test_update_company_not_found(client):
    """Test updating a company that does not exist."""
    response = client.put(f"/api/v1/companies/{MISSING_KEY}", json={"name": "Ghost"})
    assert response.status_code == 404


def test_trash_and_restore_company(client, company):
    """Test the soft delete lifecycle."""
    url = f"/api/v1/companies/{company['key']}"

    response = client.request("DELETE", url, json={"mode": "trash"})
    assert response.status_code == 200
    assert response.json()["deleted_at"] is not None

    response = client.request("DELETE", url, json={"mode": "restore"})
    assert response.status_code == 200
    assert response.json()["deleted_at"] is None

    response = client.get(url)
    assert response.json()["deleted_at"] is None


def test_restore_removes_field(client, company, db):
    """Test that restore removes deleted_at from the stored document."""
    from bson import ObjectId

    url = f"/api/v1/companies/{company['key']}"
    client.request("DELETE", url, json={"mode": "trash"})
    client.request("DELETE", url, json={"mode": "restore"})

    stored = db["companies"].find_one({"_id": ObjectId(company["key"])})
    assert "deleted_at" not in stored


def test_erase_company(client, company):
    """Test that erase permanently removes the company."""
    url = f"/api/v1/companies/{company['key']}"
    client.request("DELETE", url, json={"mode": "trash"})

    response = client.request("DELETE", url, json={"mode": "erase"})
    assert response.status_code == 204
    assert response.content == b""

    response = client.get(url)
    assert response.status_code == 404


def test_delete_mode_from_form_and_query(client, company):
    """Test that mode is accepted from a form body or the query string."""
    url = f"/api/v1/companies/{company['key']}"

    response = client.request("DELETE", url, data={"mode": "trash"})
    assert response.status_code == 200

    response = client.delete(url, params={"mode": "restore"})
    assert response.status_code == 200
    assert response.json()["deleted_at"] is None


def test_delete_company_invalid_mode(client, company):
    """Test that unknown delete modes are rejected."""
    url = f"/api/v1/companies/{company['key']}"
    response = client.request("DELETE", url, json={"mode": "shred"})
    assert response.status_code == 400
    assert "mode" in response.json()["errors"]

    response = client.delete(url)
    assert response.status_code == 400


def test_delete_company_not_found(client):
    """Test deleting a company that does not exist."""
    response = client.request(
        "DELETE", f"/api/v1/companies/{MISSING_KEY}", json={"mode": "erase"}
    )
    assert response.status_code == 404


def test_database_unavailable(client):
    """Test that connection failures surface as 503."""
    db = MagicMock()
    db.__getitem__.return_value.find_one.side_effect = ServerSelectionTimeoutError("no servers")
    app.dependency_overrides[get_company_repository] = lambda: RecordRepository(
        db, COMPANY_SCHEMA
    )

    response = client.get(f"/api/v1/companies/{MISSING_KEY}")
    assert response.status_code == 503
    assert response.json()["detail"] == "Database unavailable"


def test_database_error_is_internal(client):
    """Test that other driver failures surface as a JSON 500."""
    db = MagicMock()
    db.__getitem__.return_value.aggregate.side_effect = OperationFailure("not authorized")
    app.dependency_overrides[get_company_repository] = lambda: RecordRepository(
        db, COMPANY_SCHEMA
    )

    response = client.get("/api/v1/companies")
    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"
