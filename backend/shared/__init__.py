"""
Shared infrastructure for the HRDC assistant.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- observable: Publish/subscribe value holder for service state
- timeouts: Deadline wrapper for remote calls
- cleanup: Best-effort cleanup chains

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, get_supabase_service_client, reset_client_cache
from .exceptions import (
    HRDCError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    StoreError,
    OperationTimeoutError,
)
from .observable import Observable
from .timeouts import with_timeout
from .cleanup import CleanupStep, CleanupReport, run_cleanup

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "get_supabase_service_client",
    "reset_client_cache",
    "HRDCError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "StoreError",
    "OperationTimeoutError",
    "Observable",
    "with_timeout",
    "CleanupStep",
    "CleanupReport",
    "run_cleanup",
]
