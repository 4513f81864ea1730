"""
constants.py — shared constants used across the API, services and workers.

Enumerated column values, lead sources, US state codes and the status
transition tables are defined here so validation, services and the HTTP
layer stay in sync.
"""

from __future__ import annotations

from typing import Final, Literal

# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------
LeadSource = Literal[
    "referral", "website", "phone", "walk_in", "google", "facebook", "yelp", "other"
]

LEAD_SOURCES: Final[dict[str, str]] = {
    "referral": "Referral",
    "website": "Website",
    "phone": "Phone Call",
    "walk_in": "Walk-in",
    "google": "Google",
    "facebook": "Facebook",
    "yelp": "Yelp",
    "other": "Other",
}

# ---------------------------------------------------------------------------
# Properties: 50 states, DC and inhabited territories
# ---------------------------------------------------------------------------
US_STATES: Final[dict[str, str]] = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas",
    "CA": "California", "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware",
    "FL": "Florida", "GA": "Georgia", "HI": "Hawaii", "ID": "Idaho",
    "IL": "Illinois", "IN": "Indiana", "IA": "Iowa", "KS": "Kansas",
    "KY": "Kentucky", "LA": "Louisiana", "ME": "Maine", "MD": "Maryland",
    "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota", "MS": "Mississippi",
    "MO": "Missouri", "MT": "Montana", "NE": "Nebraska", "NV": "Nevada",
    "NH": "New Hampshire", "NJ": "New Jersey", "NM": "New Mexico", "NY": "New York",
    "NC": "North Carolina", "ND": "North Dakota", "OH": "Ohio", "OK": "Oklahoma",
    "OR": "Oregon", "PA": "Pennsylvania", "RI": "Rhode Island", "SC": "South Carolina",
    "SD": "South Dakota", "TN": "Tennessee", "TX": "Texas", "UT": "Utah",
    "VT": "Vermont", "VA": "Virginia", "WA": "Washington", "WV": "West Virginia",
    "WI": "Wisconsin", "WY": "Wyoming",
    "DC": "District of Columbia", "PR": "Puerto Rico", "VI": "U.S. Virgin Islands",
    "GU": "Guam", "AS": "American Samoa", "MP": "Northern Mariana Islands",
}

# ---------------------------------------------------------------------------
# Pools
# ---------------------------------------------------------------------------
PoolType = Literal["inground", "above_ground", "spa", "other"]
PoolSurface = Literal["plaster", "pebble", "tile", "vinyl", "fiberglass"]

POOL_TYPES: Final[dict[str, str]] = {
    "inground": "In-ground",
    "above_ground": "Above Ground",
    "spa": "Spa / Hot Tub",
    "other": "Other",
}

POOL_SURFACES: Final[dict[str, str]] = {
    "plaster": "Plaster",
    "pebble": "Pebble",
    "tile": "Tile",
    "vinyl": "Vinyl",
    "fiberglass": "Fiberglass",
}

GALLONS_PER_CUBIC_FOOT: Final[float] = 7.5
MAX_POOL_DIMENSION_FT: Final[float] = 999.99
MAX_POOL_VOLUME_GALLONS: Final[int] = 9_999_999

# ---------------------------------------------------------------------------
# Communications
# ---------------------------------------------------------------------------
CommunicationType = Literal["call", "text", "email"]
CommunicationDirection = Literal["inbound", "outbound"]

COMMUNICATION_TYPES: Final[tuple[str, ...]] = ("call", "text", "email")
COMMUNICATION_DIRECTIONS: Final[tuple[str, ...]] = ("inbound", "outbound")

# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------
EventType = Literal["consultation", "estimate_visit", "follow_up", "other"]
EventStatus = Literal["scheduled", "completed", "canceled"]

EVENT_TYPES: Final[dict[str, str]] = {
    "consultation": "Consultation",
    "estimate_visit": "Estimate Visit",
    "follow_up": "Follow-up",
    "other": "Other",
}

EVENT_STATUS_TRANSITIONS: Final[dict[str, tuple[str, ...]]] = {
    "scheduled": ("completed", "canceled"),
    "completed": (),
    "canceled": ("scheduled",),
}

DEFAULT_EVENT_DURATION_MINUTES: Final[int] = 60

# ---------------------------------------------------------------------------
# Estimates
# ---------------------------------------------------------------------------
EstimateStatus = Literal["draft", "sent", "internal_final", "converted", "declined"]

ESTIMATE_STATUSES: Final[dict[str, str]] = {
    "draft": "Draft",
    "sent": "Sent",
    "internal_final": "Internal Final",
    "converted": "Converted",
    "declined": "Declined",
}

ESTIMATE_STATUS_TRANSITIONS: Final[dict[str, tuple[str, ...]]] = {
    "draft": ("sent",),
    "sent": ("internal_final", "converted", "declined"),
    "internal_final": ("converted", "declined"),
    "converted": (),
    "declined": ("draft",),
}

ESTIMATE_NUMBER_PREFIX: Final[str] = "EST-"
ESTIMATE_VALID_DAYS: Final[int] = 30
MAX_LINE_ITEM_QUANTITY: Final[float] = 9999
MAX_UNIT_PRICE_CENTS: Final[int] = 99_999_999

# ---------------------------------------------------------------------------
# Notes / attachments
# ---------------------------------------------------------------------------
ATTACHMENTS_BUCKET: Final[str] = "customer-attachments"

# Related rows embedded in a customer detail view
CUSTOMER_DETAIL_RELATED_LIMIT: Final[int] = 50

# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------
DEFAULT_PAGE_SIZE: Final[int] = 25
MAX_PAGE_SIZE: Final[int] = 100
