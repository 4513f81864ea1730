"""Tests for the Supabase data services."""

from __future__ import annotations

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from postgrest.exceptions import APIError

from poolcrm_api.errors import ConflictError, DuplicatePhoneError, NotFoundError, ValidationError
from poolcrm_api.services.calendar_service import CONFLICT_MESSAGE, CalendarService
from poolcrm_api.services.communication_service import CommunicationService
from poolcrm_api.services.customer_service import CustomerService
from poolcrm_api.services.estimate_service import EstimateService
from poolcrm_api.services.note_service import NoteService
from poolcrm_api.services.pool_service import (
    DEPTH_ORDER_MESSAGE,
    POOL_EXISTS_MESSAGE,
    PoolService,
)
from poolcrm_api.services.property_service import PropertyService
from poolcrm_api.utils.pagination import encode_cursor
from poolcrm_api.validation import (
    CalendarEventUpdate,
    CalendarListParams,
    CustomerCreate,
    CustomerListParams,
    CustomerUpdate,
    EstimateCreate,
    EstimateUpdate,
    PoolCreate,
    PoolUpdate,
    validate_input,
)
from tests.conftest import ADMIN_ID, make_chain, make_supabase

PROPERTY_ID = str(uuid4())


def _pool_row(**overrides):
    row = {
        "id": str(uuid4()),
        "property_id": PROPERTY_ID,
        "type": "inground",
        "length_ft": 32,
        "width_ft": 16,
        "depth_shallow_ft": 3.5,
        "depth_deep_ft": 8,
        "volume_gallons": 22080,
    }
    row.update(overrides)
    return row


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------


class TestCustomerService:
    def test_create_rejects_duplicate_phone(self, customer_row):
        client = make_supabase({"customers": ([customer_row], 1)})
        data = CustomerCreate(phone="555.123.4567", name="Someone Else")

        with pytest.raises(DuplicatePhoneError) as exc_info:
            CustomerService(client).create(data, ADMIN_ID)

        err = exc_info.value
        assert err.code == "DUPLICATE_PHONE"
        assert err.details["existingCustomerId"] == customer_row["id"]
        lookup = client.chains["customers"][0]
        lookup.eq.assert_any_call("phone_normalized", "+15551234567")
        lookup.is_.assert_any_call("deleted_at", "null")

    def test_create_stores_normalized_phone(self, customer_row):
        client = make_supabase({"customers": [([], 0), ([customer_row], 1)]})
        data = CustomerCreate(phone="(555) 123-4567", name="Jane Swimmer")

        customer = CustomerService(client).create(data, ADMIN_ID)

        assert customer.id == customer_row["id"]
        inserted = client.chains["customers"][1].insert.call_args[0][0]
        assert inserted["phone_normalized"] == "+15551234567"
        assert inserted["created_by"] == ADMIN_ID

    def test_update_duplicate_excludes_self(self, customer_row):
        other = {**customer_row, "id": str(uuid4())}
        client = make_supabase({"customers": ([other], 1)})

        with pytest.raises(DuplicatePhoneError):
            CustomerService(client).update(
                customer_row["id"], CustomerUpdate(phone="5551234567")
            )
        client.chains["customers"][0].neq.assert_called_with("id", customer_row["id"])

    def test_list_searches_phone_digits(self):
        client = make_supabase({"customers": ([], 0)})
        CustomerService(client).list(CustomerListParams(search="555-12"))
        client.chains["customers"][0].ilike.assert_called_with("phone_normalized", "%55512%")

    def test_list_searches_name(self):
        client = make_supabase({"customers": ([], 0)})
        CustomerService(client).list(CustomerListParams(search="Jo"))
        client.chains["customers"][0].ilike.assert_called_with("name", "%Jo%")

    def test_list_pages(self, customer_row):
        rows = [{**customer_row, "id": str(uuid4())} for _ in range(3)]
        client = make_supabase({"customers": (rows, 12)})

        page = CustomerService(client).list(CustomerListParams(limit=2))

        assert len(page.items) == 2
        assert page.has_more is True
        assert page.total == 12
        assert page.items[0]["phoneNormalized"] == "+15551234567"
        client.chains["customers"][0].limit.assert_called_with(3)

    def test_list_hides_deleted_by_default(self):
        client = make_supabase({"customers": ([], 0)})
        CustomerService(client).list(CustomerListParams())
        client.chains["customers"][0].is_.assert_called_with("deleted_at", "null")

    def test_list_include_deleted_drops_filter(self):
        client = make_supabase({"customers": ([], 0)})
        CustomerService(client).list(CustomerListParams(include_deleted=True))
        client.chains["customers"][0].is_.assert_not_called()

    def test_global_search_needs_two_characters(self):
        client = make_supabase()
        assert CustomerService(client).global_search(" a ") == []
        client.table.assert_not_called()

    def test_restore_requires_deleted_customer(self, customer_row):
        client = make_supabase({"customers": ([customer_row], 1)})
        with pytest.raises(NotFoundError) as exc_info:
            CustomerService(client).restore(customer_row["id"])
        assert exc_info.value.message == "Deleted customer not found"

    def test_delete_returns_false_when_missing(self):
        client = make_supabase({"customers": ([], 0)})
        assert CustomerService(client).delete(str(uuid4())) is False


# ---------------------------------------------------------------------------
# Properties and pools
# ---------------------------------------------------------------------------


class TestPropertyService:
    def test_belongs_to_customer(self):
        client = make_supabase({"properties": ([{"id": PROPERTY_ID}], 1)})
        assert PropertyService(client).belongs_to_customer(PROPERTY_ID, "cust") is True
        chain = client.chains["properties"][0]
        chain.eq.assert_any_call("id", PROPERTY_ID)
        chain.eq.assert_any_call("customer_id", "cust")

    def test_not_found(self):
        client = make_supabase({"properties": ([], 0)})
        assert PropertyService(client).belongs_to_customer(PROPERTY_ID, "cust") is False


class TestPoolService:
    def test_create_conflicts_when_pool_exists(self):
        client = make_supabase({"pools": ([_pool_row()], 1)})
        with pytest.raises(ConflictError) as exc_info:
            PoolService(client).create(PoolCreate(property_id=PROPERTY_ID, type="spa"))
        assert exc_info.value.message == POOL_EXISTS_MESSAGE

    def test_create_maps_unique_violation(self):
        lookup = make_chain([])
        insert = make_chain()
        insert.execute.side_effect = APIError(
            {"code": "23505", "message": "duplicate key", "details": "", "hint": ""}
        )
        client = MagicMock()
        client.table.side_effect = [lookup, insert]

        with pytest.raises(ConflictError):
            PoolService(client).create(PoolCreate(property_id=PROPERTY_ID, type="spa"))

    def test_create_computes_volume(self):
        client = make_supabase({"pools": [([], 0), ([_pool_row()], 1)]})
        data = PoolCreate(
            property_id=PROPERTY_ID,
            type="inground",
            length_ft=32,
            width_ft=16,
            depth_shallow_ft=3.5,
            depth_deep_ft=8,
        )
        PoolService(client).create(data)
        inserted = client.chains["pools"][1].insert.call_args[0][0]
        assert inserted["volume_gallons"] == 22080

    def test_update_recomputes_volume(self):
        client = make_supabase({"pools": [([_pool_row()], 1), ([_pool_row(length_ft=40)], 1)]})
        PoolService(client).update("pool-1", PoolUpdate(length_ft=40))
        changes = client.chains["pools"][1].update.call_args[0][0]
        assert changes["volume_gallons"] == 27600

    def test_update_keeps_explicit_volume(self):
        client = make_supabase({"pools": [([_pool_row()], 1), ([_pool_row()], 1)]})
        PoolService(client).update("pool-1", PoolUpdate(length_ft=40, volume_gallons=25000))
        changes = client.chains["pools"][1].update.call_args[0][0]
        assert changes["volume_gallons"] == 25000

    def test_update_shallow_against_stored_deep_end(self):
        client = make_supabase({"pools": [([_pool_row(depth_deep_ft=5)], 1), ([_pool_row()], 1)]})
        with pytest.raises(ValidationError) as exc_info:
            PoolService(client).update("pool-1", PoolUpdate(depth_shallow_ft=6))
        assert exc_info.value.message == DEPTH_ORDER_MESSAGE
        assert len(client.chains["pools"]) == 1

    def test_update_deep_against_stored_shallow_end(self):
        client = make_supabase({"pools": [([_pool_row()], 1), ([_pool_row()], 1)]})
        with pytest.raises(ValidationError):
            PoolService(client).update("pool-1", PoolUpdate(depth_deep_ft=3))

    def test_update_clearing_a_depth_skips_order_check(self):
        client = make_supabase({"pools": [([_pool_row()], 1), ([_pool_row()], 1)]})
        PoolService(client).update("pool-1", PoolUpdate(depth_deep_ft=None))
        changes = client.chains["pools"][1].update.call_args[0][0]
        assert changes["depth_deep_ft"] is None
        assert changes["volume_gallons"] == 13440

    def test_belongs_to_property(self):
        client = make_supabase({"pools": ([], 0)})
        assert PoolService(client).belongs_to_property("pool-1", PROPERTY_ID) is False


# ---------------------------------------------------------------------------
# Activity
# ---------------------------------------------------------------------------


class TestNoteService:
    def test_delete_removes_attachments(self):
        attachments = [{"storage_path": "c1/a.jpg"}, {"storage_path": "c1/b.pdf"}]
        client = make_supabase(
            {
                "customer_attachments": (attachments, 2),
                "customer_notes": ([{"id": "note-1"}], 1),
            }
        )

        assert NoteService(client).delete("note-1") is True

        client.storage.from_.assert_called_with("customer-attachments")
        client.storage.from_.return_value.remove.assert_called_once_with(["c1/a.jpg", "c1/b.pdf"])
        client.chains["customer_attachments"][1].delete.assert_called_once()

    def test_delete_without_attachments(self):
        client = make_supabase({"customer_notes": ([{"id": "note-1"}], 1)})
        NoteService(client).delete("note-1")
        client.storage.from_.assert_not_called()


class TestCommunicationService:
    def test_stats(self):
        rows = [
            {"type": "call", "direction": "inbound"},
            {"type": "call", "direction": "outbound"},
            {"type": "email", "direction": "outbound"},
        ]
        client = make_supabase({"communications": (rows, 3)})
        stats = CommunicationService(client).get_stats("cust")
        assert stats == {
            "total": 3,
            "byType": {"call": 2, "text": 0, "email": 1},
            "byDirection": {"inbound": 1, "outbound": 2},
        }


# ---------------------------------------------------------------------------
# Estimates
# ---------------------------------------------------------------------------


class TestEstimateService:
    def test_create_numbers_and_prices(self, estimate_row, customer_row):
        client = make_supabase(
            {"estimates": [([{"estimate_number": "EST-0041"}], 1), ([estimate_row], 1)]}
        )
        data = validate_input(
            EstimateCreate,
            {
                "customerId": customer_row["id"],
                "lineItems": [
                    {"description": "Pump replacement", "quantity": 1, "unitPriceCents": 85000},
                    {"description": "Labor (hours)", "quantity": 2.5, "unitPriceCents": 9500},
                ],
                "taxRate": 0.0825,
            },
        )

        EstimateService(client).create(data, ADMIN_ID)

        row = client.chains["estimates"][1].insert.call_args[0][0]
        assert row["estimate_number"] == "EST-0042"
        assert row["status"] == "draft"
        assert row["subtotal_cents"] == 108750
        assert row["tax_amount_cents"] == 8972
        assert row["total_cents"] == 117722
        assert [i["total_cents"] for i in row["line_items"]] == [85000, 23750]

    def test_update_status_rejects_invalid_transition(self):
        client = make_supabase({"estimates": ([{"status": "draft"}], 1)})
        with pytest.raises(ValidationError) as exc_info:
            EstimateService(client).update_status("est-1", "converted")
        assert exc_info.value.message == "Invalid status transition from 'draft' to 'converted'"

    def test_update_status_missing(self):
        client = make_supabase({"estimates": ([], 0)})
        with pytest.raises(NotFoundError):
            EstimateService(client).update_status("est-1", "sent")

    def test_update_status_applies(self, estimate_row):
        sent = {**estimate_row, "status": "sent"}
        client = make_supabase({"estimates": [([{"status": "draft"}], 1), ([sent], 1)]})
        estimate = EstimateService(client).update_status(estimate_row["id"], "sent")
        assert estimate.status == "sent"
        client.chains["estimates"][1].update.assert_called_with({"status": "sent"})

    def test_tax_change_recomputes_from_stored_items(self, estimate_row):
        client = make_supabase({"estimates": [([estimate_row], 1), ([estimate_row], 1)]})
        EstimateService(client).update(estimate_row["id"], EstimateUpdate(tax_rate=0))
        changes = client.chains["estimates"][1].update.call_args[0][0]
        assert changes["subtotal_cents"] == 108750
        assert changes["tax_amount_cents"] == 0
        assert changes["total_cents"] == 108750

    def test_notes_only_update_leaves_totals(self, estimate_row):
        client = make_supabase({"estimates": [([estimate_row], 1), ([estimate_row], 1)]})
        EstimateService(client).update(estimate_row["id"], EstimateUpdate(notes="Call first"))
        changes = client.chains["estimates"][1].update.call_args[0][0]
        assert changes == {"notes": "Call first"}

    def test_duplicate_is_a_fresh_draft(self, estimate_row):
        sent = {**estimate_row, "status": "sent"}
        client = make_supabase(
            {
                "estimates": [
                    ([sent], 1),
                    ([{"estimate_number": "EST-0007"}], 1),
                    ([{**estimate_row, "estimate_number": "EST-0008"}], 1),
                ]
            }
        )

        EstimateService(client).duplicate(estimate_row["id"], ADMIN_ID)

        row = client.chains["estimates"][2].insert.call_args[0][0]
        assert row["estimate_number"] == "EST-0008"
        assert row["status"] == "draft"
        assert row["valid_until"] is None
        assert row["total_cents"] == 117722
        old_ids = {i["id"] for i in estimate_row["line_items"]}
        assert not old_ids & {i["id"] for i in row["line_items"]}

    def test_next_number_is_numeric_maximum(self):
        rows = [
            {"estimate_number": "EST-9999"},
            {"estimate_number": "EST-10000"},
            {"estimate_number": "EST-0042"},
        ]
        client = make_supabase({"estimates": (rows, 3)})
        assert EstimateService(client).generate_estimate_number() == "EST-10001"
        client.chains["estimates"][0].like.assert_called_with("estimate_number", "EST-%")

    def test_first_number(self):
        client = make_supabase({"estimates": ([], 0)})
        assert EstimateService(client).generate_estimate_number() == "EST-0001"

    def test_pool_belongs_to_customer(self):
        client = make_supabase(
            {"pools": ([{"id": "pool-1", "property": {"customer_id": "cust-1"}}], 1)}
        )
        service = EstimateService(client)
        assert service.pool_belongs_to_customer("pool-1", "cust-1") is True
        assert service.pool_belongs_to_customer("pool-1", "cust-2") is False


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


class TestCalendarService:
    def test_cancel_bumps_version(self, event_row):
        canceled = {**event_row, "status": "canceled", "version": 4}
        client = make_supabase({"calendar_events": ([canceled], 1)})

        event = CalendarService(client).cancel(event_row["id"], 3)

        assert event.status == "canceled"
        assert event.version == 4
        chain = client.chains["calendar_events"][0]
        chain.update.assert_called_with({"status": "canceled", "version": 4})
        chain.eq.assert_any_call("version", 3)
        chain.eq.assert_any_call("status", "scheduled")

    def test_stale_version_conflicts(self, event_row):
        current = {"id": event_row["id"], "version": 5, "status": "scheduled"}
        client = make_supabase({"calendar_events": [([], 0), ([current], 1)]})

        with pytest.raises(ConflictError) as exc_info:
            CalendarService(client).complete(event_row["id"], 3)

        assert exc_info.value.message == CONFLICT_MESSAGE
        assert exc_info.value.details == {"currentVersion": 5}

    def test_missing_event(self):
        client = make_supabase({"calendar_events": ([], 0)})
        with pytest.raises(NotFoundError) as exc_info:
            CalendarService(client).cancel("evt-1", 1)
        assert exc_info.value.message == "Calendar event not found"

    def test_wrong_status(self, event_row):
        current = {"id": event_row["id"], "version": 3, "status": "completed"}
        client = make_supabase({"calendar_events": [([], 0), ([current], 1)]})
        with pytest.raises(ValidationError) as exc_info:
            CalendarService(client).cancel(event_row["id"], 3)
        assert exc_info.value.message == "Cannot cancel a completed event"

    def test_reopen_needs_canceled_event(self, event_row):
        current = {"id": event_row["id"], "version": 3, "status": "scheduled"}
        client = make_supabase({"calendar_events": [([], 0), ([current], 1)]})
        with pytest.raises(ValidationError):
            CalendarService(client).reopen(event_row["id"], 3)

    def test_update_moving_end_before_start(self, event_row):
        client = make_supabase({"calendar_events": ([event_row], 1)})
        data = CalendarEventUpdate(version=3, end_datetime="2025-03-03T14:00:00Z")
        with pytest.raises(ValidationError):
            CalendarService(client).update(event_row["id"], data)
        assert len(client.chains["calendar_events"]) == 1

    def test_list_cursor_moves_forward(self, event_row):
        cursor = encode_cursor("startDatetime", "2025-03-03T15:00:00+00:00", event_row["id"])
        client = make_supabase({"calendar_events": ([], 0)})

        CalendarService(client).list(CalendarListParams(cursor=cursor))

        chain = client.chains["calendar_events"][0]
        chain.gt.assert_called_once_with("start_datetime", "2025-03-03T15:00:00+00:00")
        chain.lt.assert_not_called()
        chain.order.assert_called_with("start_datetime")

    def test_list_without_cursor_starts_at_beginning(self):
        client = make_supabase({"calendar_events": ([], 0)})
        CalendarService(client).list(CalendarListParams())
        client.chains["calendar_events"][0].gt.assert_not_called()

    def test_create_requires_active_customer(self, event_row):
        from poolcrm_api.validation import CalendarEventCreate

        client = make_supabase({"customers": ([], 0)})
        data = CalendarEventCreate(
            customer_id=event_row["customer_id"],
            title="Visit",
            event_type="estimate_visit",
            start_datetime="2025-03-03T15:00:00Z",
            end_datetime="2025-03-03T16:00:00Z",
        )
        with pytest.raises(NotFoundError):
            CalendarService(client).create(data, ADMIN_ID)
        assert "calendar_events" not in client.chains
