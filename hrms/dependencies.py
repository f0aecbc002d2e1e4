"""Shared FastAPI dependencies."""

from hrms.config import settings
from hrms.policy.store import PolicyStore


def get_policy_store() -> PolicyStore:
    """FastAPI dependency: a fresh store per request (policy is never cached)."""
    return PolicyStore(settings.GROUP_WORKING_HOURS_FILE)
