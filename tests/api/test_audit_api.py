"""
Tests for audit trail API endpoints.
"""

from datetime import datetime, timedelta, timezone


def as_(principal_name):
    return {"X-Principal": principal_name}


def an_hour_ago():
    return (datetime.utcnow() - timedelta(hours=1)).isoformat()


def record_event(client, principal="teller1", **overrides):
    body = {
        "action_type": "LOGIN",
        "affected_entity": "SESSIONS",
        "affected_id": 1,
    }
    body.update(overrides)
    return client.post("/audit/events", headers=as_(principal), json=body)


class TestRecordEvent:

    def test_teller_records_event(self, client):
        response = record_event(client, new_value="ok")
        assert response.status_code == 201
        data = response.json()
        assert data["principal"] == "teller1"
        assert data["affected_entity"] == "SESSIONS"
        assert data["origin"] == "testclient"

    def test_principal_without_role_returns_403(self, client):
        response = record_event(client, principal="nobody1")
        assert response.status_code == 403


class TestQueryEvents:

    def test_auditor_lists_newest_first(self, client):
        record_event(client, action_type="FIRST")
        record_event(client, action_type="SECOND")

        response = client.get(
            "/audit/events",
            headers=as_("auditor1"),
            params={"start_time": an_hour_ago()},
        )
        assert response.status_code == 200
        assert [e["action_type"] for e in response.json()] == ["SECOND", "FIRST"]

    def test_filter_by_principal(self, client):
        record_event(client, principal="teller1")
        record_event(client, principal="manager1")

        response = client.get(
            "/audit/events",
            headers=as_("auditor1"),
            params={"start_time": an_hour_ago(), "principal": "manager1"},
        )
        assert [e["principal"] for e in response.json()] == ["manager1"]

    def test_teller_cannot_query(self, client):
        response = client.get(
            "/audit/events",
            headers=as_("teller1"),
            params={"start_time": an_hour_ago()},
        )
        assert response.status_code == 403

    def test_start_time_is_required(self, client):
        response = client.get("/audit/events", headers=as_("auditor1"))
        assert response.status_code == 422

    def test_start_time_with_offset(self, client):
        record_event(client)
        plus_five = timezone(timedelta(hours=5))
        start = datetime.now(timezone.utc).astimezone(plus_five) - timedelta(minutes=1)

        response = client.get(
            "/audit/events",
            headers=as_("auditor1"),
            params={"start_time": start.isoformat()},
        )
        assert response.status_code == 200
        assert len(response.json()) == 1
