"""Input schemas for every action, plus the validate_input helper."""

from poolcrm_api.validation.auth import LoginInput, RefreshInput
from poolcrm_api.validation.base import Schema, validate_input
from poolcrm_api.validation.calendar import (
    CalendarEventCreate,
    CalendarEventUpdate,
    CalendarListParams,
    CalendarRangeParams,
    RescheduleEvent,
    VersionedAction,
)
from poolcrm_api.validation.communication import (
    CommunicationCreate,
    CommunicationListParams,
    CommunicationSearchParams,
    CommunicationUpdate,
)
from poolcrm_api.validation.customer import (
    CustomerCreate,
    CustomerListParams,
    CustomerSearchParams,
    CustomerUpdate,
)
from poolcrm_api.validation.estimate import (
    EstimateCreate,
    EstimateListParams,
    EstimateStatusUpdate,
    EstimateUpdate,
    LineItemInput,
)
from poolcrm_api.validation.note import NoteCreate, NoteListParams, NoteUpdate
from poolcrm_api.validation.pool import PoolCreate, PoolUpdate
from poolcrm_api.validation.property import PropertyCreate, PropertyUpdate

__all__ = [
    "Schema",
    "validate_input",
    "LoginInput",
    "RefreshInput",
    "CustomerCreate",
    "CustomerUpdate",
    "CustomerListParams",
    "CustomerSearchParams",
    "PropertyCreate",
    "PropertyUpdate",
    "PoolCreate",
    "PoolUpdate",
    "NoteCreate",
    "NoteUpdate",
    "NoteListParams",
    "CommunicationCreate",
    "CommunicationUpdate",
    "CommunicationListParams",
    "CommunicationSearchParams",
    "CalendarEventCreate",
    "CalendarEventUpdate",
    "CalendarListParams",
    "CalendarRangeParams",
    "RescheduleEvent",
    "VersionedAction",
    "EstimateCreate",
    "EstimateUpdate",
    "EstimateStatusUpdate",
    "EstimateListParams",
    "LineItemInput",
]
