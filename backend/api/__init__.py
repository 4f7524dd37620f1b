"""
HRDC assistant trusted backend.

Provides the FastAPI application for server-side payment verification.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
