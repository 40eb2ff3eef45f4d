"""
App assembly entry point.

Re-exports the FastAPI `app` from `brandhub.api.main` so the service can be
started with ``uvicorn app:app``.
"""

from brandhub.api.main import app  # noqa: F401
