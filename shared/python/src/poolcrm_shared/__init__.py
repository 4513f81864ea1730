"""
poolcrm_shared — shared configuration, database clients, models and domain
helpers for the pool CRM.

Usage:
    from poolcrm_shared.config import settings
    from poolcrm_shared.db import get_supabase_client
    from poolcrm_shared.models import Customer, Estimate
    from poolcrm_shared.phone import normalize_phone
    from poolcrm_shared.constants import ESTIMATE_STATUS_TRANSITIONS
"""

__version__ = "0.1.0"
