"""
db.py — Supabase clients for the CRM tables and for admin sign-in.

Two long-lived clients exist per process: the service-role client the actions
use for every table read and write (admin checks happen in the action layer),
and the anon client, which is bound by row-level security. Sign-in and token
refresh get a throwaway anon client each, because the auth client stores the
session it creates.

Usage:
    from poolcrm_shared.db import get_supabase_client, create_session_client

    supabase = get_supabase_client(service_role=True)   # customers, estimates, ...
    auth = create_session_client().auth                 # sign_in_with_password
"""

from __future__ import annotations

import threading

import structlog
from supabase import Client, create_client

from poolcrm_shared.config import settings

logger = structlog.get_logger(__name__)

# SQLSTATE PostgREST reports for a UNIQUE constraint (customers.phone_normalized,
# pools.property_id, estimates.estimate_number)
UNIQUE_VIOLATION = "23505"

_clients: dict[str, Client] = {}
_clients_lock = threading.Lock()


def _role_key(role: str) -> str:
    key = settings.supabase_service_key if role == "service_role" else settings.supabase_anon_key
    if not key:
        env_name = "SUPABASE_SERVICE_KEY" if role == "service_role" else "SUPABASE_ANON_KEY"
        raise RuntimeError(f"{env_name} is not set. Set it in .env before using the {role} client.")
    return key


def get_supabase_client(*, service_role: bool = False) -> Client:
    """
    Return the process-wide client for a role, creating it on first use.

    Args:
        service_role: True for the service-role client the actions use;
                      False for the RLS-bound anon client.

    Raises:
        RuntimeError: the key for that role is not configured.
    """
    role = "service_role" if service_role else "anon"
    with _clients_lock:
        client = _clients.get(role)
        if client is None:
            client = create_client(settings.supabase_url, _role_key(role))
            _clients[role] = client
            logger.info("supabase_client_created", role=role, url=settings.supabase_url)
        return client


def create_session_client() -> Client:
    """A new anon client for one sign-in or refresh; never cached or shared."""
    return create_client(settings.supabase_url, _role_key("anon"))


def reset_supabase_clients() -> None:
    """Forget the cached clients (tests, settings reloads)."""
    with _clients_lock:
        _clients.clear()


def is_unique_violation(exc: Exception) -> bool:
    """True when a PostgREST error carries the unique-violation code."""
    return getattr(exc, "code", None) == UNIQUE_VIOLATION
