"""
poolcrm_shared.models — Pydantic models matching each database table.

These models are used by:
- packages/api services: parse PostgREST rows
- packages/api routers: serialize rows into camelCase API responses

All models provide:
  .from_db_row(row: dict) -> Model
  .to_insert_dict() -> dict   (snake_case columns)
  .to_api() -> dict           (camelCase keys)
"""

from poolcrm_shared.models.activity import Attachment, Communication, Note
from poolcrm_shared.models.calendar import CalendarEvent
from poolcrm_shared.models.customer import (
    Admin,
    Customer,
    CustomerDetails,
    CustomerSummary,
    CustomerTag,
)
from poolcrm_shared.models.estimate import Estimate, EstimateTotals, LineItem
from poolcrm_shared.models.property import Pool, Property

__all__ = [
    "Admin",
    "Customer",
    "CustomerDetails",
    "CustomerSummary",
    "CustomerTag",
    "Property",
    "Pool",
    "Communication",
    "Note",
    "Attachment",
    "CalendarEvent",
    "Estimate",
    "EstimateTotals",
    "LineItem",
]
