"""
Application package initializer.

The project is organised into small layers: ``models`` holds the plain
book record, ``schemas`` the Pydantic payloads exchanged over HTTP,
``stores`` the SQLite persistence, ``services`` the validation and
lifecycle logic, and ``api`` the versioned FastAPI routers.
"""

from .main import app  # noqa: F401
