"""Tests for the /v1 HTTP endpoints."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch
from uuid import uuid4

from tests.conftest import make_supabase


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


class TestCustomers:
    def test_create(self, client, auth_headers, use_supabase, customer_row):
        use_supabase(make_supabase({"customers": [([], 0), ([customer_row], 1)]}))
        response = client.post(
            "/v1/customers",
            json={"phone": "(555) 123-4567", "name": "Jane Swimmer", "source": "referral"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["phoneNormalized"] == "+15551234567"

    def test_create_duplicate(self, client, auth_headers, use_supabase, customer_row):
        use_supabase(make_supabase({"customers": ([customer_row], 1)}))
        response = client.post(
            "/v1/customers",
            json={"phone": "555-123-4567", "name": "Jane Again"},
            headers=auth_headers,
        )
        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "DUPLICATE_PHONE"
        assert body["details"]["existingCustomer"]["name"] == "Jane Swimmer"

    def test_create_allow_duplicate(self, client, auth_headers, use_supabase, customer_row):
        use_supabase(make_supabase({"customers": ([customer_row], 1)}))
        response = client.post(
            "/v1/customers?allowDuplicate=true",
            json={"phone": "555-123-4567", "name": "Jane Again"},
            headers=auth_headers,
        )
        assert response.status_code == 201

    def test_create_invalid(self, client, auth_headers):
        response = client.post("/v1/customers", json={"name": "No Phone"}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_body_must_be_an_object(self, client, auth_headers):
        response = client.post("/v1/customers", json=["not", "an", "object"], headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_list(self, client, auth_headers, use_supabase, customer_row):
        use_supabase(make_supabase({"customers": ([customer_row], 1)}))
        response = client.get("/v1/customers?limit=10", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 1
        assert data["hasMore"] is False
        assert data["items"][0]["name"] == "Jane Swimmer"

    def test_count(self, client, auth_headers, use_supabase):
        use_supabase(make_supabase({"customers": ([{"id": "x"}], 42)}))
        response = client.get("/v1/customers/count", headers=auth_headers)
        assert response.json() == {"success": True, "data": 42}

    def test_get_missing(self, client, auth_headers):
        response = client.get(f"/v1/customers/{uuid4()}", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "Customer not found"

    def test_delete(self, client, auth_headers, use_supabase, customer_row):
        use_supabase(make_supabase({"customers": ([customer_row], 1)}))
        response = client.delete(f"/v1/customers/{customer_row['id']}", headers=auth_headers)
        assert response.json() == {"success": True, "data": {"deleted": True}}


class TestEstimates:
    def test_status_transition_rejected(self, client, auth_headers, use_supabase):
        use_supabase(make_supabase({"estimates": ([{"status": "draft"}], 1)}))
        response = client.post(
            f"/v1/estimates/{uuid4()}/status",
            json={"status": "converted"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid status transition from 'draft' to 'converted'"

    def test_get_by_number(self, client, auth_headers, use_supabase, estimate_row):
        use_supabase(make_supabase({"estimates": ([estimate_row], 1)}))
        response = client.get("/v1/estimates/number/EST-0007", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["estimateNumber"] == "EST-0007"
        assert data["totalCents"] == 117722
        assert data["lineItems"][1]["unitPriceCents"] == 9500


class TestCalendar:
    def test_cancel_conflict(self, client, auth_headers, use_supabase, event_row):
        current = {"id": event_row["id"], "version": 9, "status": "scheduled"}
        use_supabase(make_supabase({"calendar_events": [([], 0), ([current], 1)]}))
        response = client.post(
            f"/v1/calendar/events/{event_row['id']}/cancel",
            json={"version": 3},
            headers=auth_headers,
        )
        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "CONFLICT"
        assert body["details"]["currentVersion"] == 9

    def test_get_missing(self, client, auth_headers):
        response = client.get(f"/v1/calendar/events/{uuid4()}", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "Calendar event not found"

    def test_range(self, client, auth_headers, use_supabase, event_row):
        use_supabase(make_supabase({"calendar_events": ([event_row], 1)}))
        response = client.get(
            "/v1/calendar/events/range?start=2025-03-01T00:00:00Z&end=2025-03-31T23:59:59Z",
            headers=auth_headers,
        )
        assert response.status_code == 200
        events = response.json()["data"]
        assert events[0]["title"] == "Opening consultation"
        assert events[0]["version"] == 3


def test_pool_specs_is_public(client):
    result = {"message": "Pool specs retrieved from cache", "data": {}, "fromCache": True}
    with patch(
        "poolcrm_api.actions.pool_specs.PoolSpecsScraper.get_specs",
        new=AsyncMock(return_value=result),
    ):
        response = client.get("/v1/pool-specs")
    assert response.status_code == 200
    assert response.json()["data"]["fromCache"] is True
