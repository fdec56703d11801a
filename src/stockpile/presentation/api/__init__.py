"""REST API presentation layer for Stockpile.

This package provides a FastAPI-based REST API for the Stockpile application.

Structure:
    api/
    ├── app.py               # FastAPI application factory
    ├── config.py            # API configuration
    ├── dependencies.py      # Dependency injection
    ├── exception_handlers.py
    ├── middleware.py        # Prometheus HTTP metrics
    ├── routers/             # API route handlers
    └── schemas/             # Pydantic request/response schemas
"""

from stockpile.presentation.api.app import create_app

__all__ = ["create_app"]
