"""
Tests for the /api/issues/{project} endpoints.

Tests verify:
1. Status codes and response shapes for each verb
2. Validation errors (400) are distinct from not-found (404)
3. Empty values and unknown fields never reach stored records
"""

import asyncio
import time

import httpx
import pytest

from issue_tracker.api import app
from issue_tracker.db.base import Base
from issue_tracker.issues import IssueService, IssueStore
from issue_tracker.issues.routes import get_issue_service

URL = "/api/issues/apitest"
UNKNOWN_ID = "00000000-0000-4000-8000-000000000000"


def _create(client, payload):
    response = client.post(URL, json=payload)
    assert response.status_code == 201
    return response.json()


class TestCreateEndpoint:
    def test_create_with_required_fields(self, client, make_issue_payload):
        response = client.post(URL, json=make_issue_payload())

        assert response.status_code == 201
        data = response.json()
        assert data["issue_title"] == "Login button unresponsive"
        assert data["created_by"] == "alice"
        assert data["open"] is True
        assert data["assigned_to"] == ""
        assert data["status_text"] == ""
        assert data["created_on"] == data["updated_on"]
        assert "_id" in data

    def test_create_with_all_fields(self, client, make_issue_payload):
        data = _create(
            client, make_issue_payload(assigned_to="bob", status_text="triage")
        )
        assert data["assigned_to"] == "bob"
        assert data["status_text"] == "triage"

    def test_missing_required_field(self, client, make_issue_payload):
        payload = make_issue_payload()
        del payload["created_by"]
        response = client.post(URL, json=payload)

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == "required field(s) missing"
        assert detail["fields"] == ["created_by"]

        assert client.get(URL).json() == []

    def test_missing_body(self, client):
        response = client.post(URL)
        assert response.status_code == 400

    def test_client_cannot_preset_server_fields(self, client, make_issue_payload):
        data = _create(
            client,
            make_issue_payload(open=False, _id=UNKNOWN_ID, created_on="2000-01-01"),
        )
        assert data["open"] is True
        assert data["_id"] != UNKNOWN_ID
        assert not data["created_on"].startswith("2000")


class TestListEndpoint:
    def test_empty_project(self, client):
        response = client.get("/api/issues/nothing-here")
        assert response.status_code == 200
        assert response.json() == []

    def test_lists_newest_first(self, client, make_issue_payload):
        for title in ("one", "two", "three"):
            _create(client, make_issue_payload(issue_title=title))
            time.sleep(0.002)

        response = client.get(URL)
        assert response.status_code == 200
        assert [i["issue_title"] for i in response.json()] == ["three", "two", "one"]

    def test_filters(self, client, make_issue_payload):
        _create(client, make_issue_payload(assigned_to="bob"))
        _create(client, make_issue_payload(assigned_to="carol"))

        response = client.get(URL, params={"assigned_to": "bob"})
        assert [i["assigned_to"] for i in response.json()] == ["bob"]

        response = client.get(URL, params={"assigned_to": "", "open": "true"})
        assert len(response.json()) == 2

    def test_filter_open_false(self, client, make_issue_payload):
        closed = _create(client, make_issue_payload())
        _create(client, make_issue_payload())
        client.put(URL, json={"_id": closed["_id"], "open": False})

        response = client.get(URL, params={"open": "false"})
        assert [i["_id"] for i in response.json()] == [closed["_id"]]

    def test_filter_by_id(self, client, make_issue_payload):
        issue = _create(client, make_issue_payload())
        _create(client, make_issue_payload())

        response = client.get(URL, params={"_id": issue["_id"]})
        assert response.status_code == 200
        assert [i["_id"] for i in response.json()] == [issue["_id"]]

    def test_invalid_id_filter(self, client):
        response = client.get(URL, params={"_id": "xyz"})
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid _id"

    def test_invalid_open_filter(self, client):
        response = client.get(URL, params={"open": "perhaps"})
        assert response.status_code == 400


class TestUpdateEndpoint:
    @pytest.fixture
    def issue(self, client, make_issue_payload):
        return _create(client, make_issue_payload())

    def test_successful_update(self, client, issue):
        response = client.put(URL, json={"_id": issue["_id"], "status_text": "doing"})

        assert response.status_code == 200
        assert response.json() == {"result": "successfully updated", "_id": issue["_id"]}
        [updated] = client.get(URL, params={"_id": issue["_id"]}).json()
        assert updated["status_text"] == "doing"

    def test_missing_id(self, client):
        response = client.put(URL, json={"status_text": "doing"})
        assert response.status_code == 400
        assert response.json()["detail"] == {"error": "missing _id"}

    def test_invalid_id(self, client):
        response = client.put(URL, json={"_id": "12345", "status_text": "doing"})
        assert response.status_code == 400
        assert response.json()["detail"] == {"error": "invalid _id", "_id": "12345"}

    def test_no_fields(self, client, issue):
        response = client.put(URL, json={"_id": issue["_id"], "issue_text": ""})
        assert response.status_code == 400
        assert response.json()["detail"] == {
            "error": "no update field(s) sent",
            "_id": issue["_id"],
        }

    def test_unknown_id(self, client):
        response = client.put(URL, json={"_id": UNKNOWN_ID, "status_text": "doing"})
        assert response.status_code == 404
        assert response.json()["detail"] == {
            "error": "could not update",
            "_id": UNKNOWN_ID,
        }

    def test_unknown_fields_ignored(self, client, issue):
        response = client.put(
            URL,
            json={
                "_id": issue["_id"],
                "status_text": "doing",
                "created_on": "2000-01-01T00:00:00",
                "project": "elsewhere",
            },
        )
        assert response.status_code == 200

        [updated] = client.get(URL, params={"_id": issue["_id"]}).json()
        assert updated["created_on"] == issue["created_on"]
        assert client.get("/api/issues/elsewhere").json() == []

    def test_invalid_field_value(self, client, issue):
        response = client.put(URL, json={"_id": issue["_id"], "open": "sometimes"})
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid update field(s)"


class TestDeleteEndpoint:
    def test_delete(self, client, make_issue_payload):
        issue = _create(client, make_issue_payload())

        response = client.request("DELETE", URL, json={"_id": issue["_id"]})
        assert response.status_code == 200
        assert response.json() == {"result": "successfully deleted", "_id": issue["_id"]}
        assert client.get(URL).json() == []

        response = client.request("DELETE", URL, json={"_id": issue["_id"]})
        assert response.status_code == 404
        assert response.json()["detail"] == {
            "error": "could not delete",
            "_id": issue["_id"],
        }

    def test_invalid_id(self, client):
        response = client.request("DELETE", URL, json={"_id": "zzz"})
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid _id"

    def test_missing_body(self, client):
        response = client.delete(URL)
        assert response.status_code == 400
        assert response.json()["detail"] == {"error": "missing _id"}


def test_storage_failure_returns_500(client, engine):
    Base.metadata.drop_all(bind=engine)

    response = client.get(URL)
    assert response.status_code == 500
    assert response.json()["detail"] == {"error": "internal server error"}


class TestLongFreeFormValues:
    def test_long_project_and_text_fields(self, client, make_issue_payload):
        project_url = "/api/issues/" + "p" * 300
        long_value = "x" * 300
        response = client.post(
            project_url,
            json=make_issue_payload(
                created_by=long_value, assigned_to=long_value, status_text=long_value
            ),
        )
        assert response.status_code == 201
        issue = response.json()
        assert issue["created_by"] == long_value

        response = client.put(
            project_url, json={"_id": issue["_id"], "status_text": "y" * 1000}
        )
        assert response.status_code == 200
        [stored] = client.get(project_url).json()
        assert stored["status_text"] == "y" * 1000


class SlowStore(IssueStore):
    """Store whose reads take a fixed time, standing in for a slow database."""

    delay = 0.3

    def find_many(self, project, conditions):
        time.sleep(self.delay)
        return []

    def insert_one(self, project, record):
        raise NotImplementedError

    def find_one_and_update(self, project, issue_id, changes):
        raise NotImplementedError

    def delete_one(self, project, issue_id):
        raise NotImplementedError


def test_concurrent_requests_overlap():
    """Storage waits run in the threadpool, so requests are not serialized."""
    app.dependency_overrides[get_issue_service] = lambda: IssueService(SlowStore())

    async def fire(count):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
            return await asyncio.gather(*(ac.get(URL) for _ in range(count)))

    try:
        started = time.perf_counter()
        responses = asyncio.run(fire(4))
        elapsed = time.perf_counter() - started
    finally:
        app.dependency_overrides.clear()

    assert [r.status_code for r in responses] == [200] * 4
    assert elapsed < 4 * SlowStore.delay * 0.75
