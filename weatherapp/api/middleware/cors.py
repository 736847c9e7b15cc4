"""
CORS middleware configuration.

All origins in development; the ``Settings.cors_origins`` allowlist
everywhere else. The API is read-only, so only GET is exposed.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from weatherapp.settings import get_settings


def configure_cors(app: FastAPI) -> None:
    """Add CORS middleware to the FastAPI application."""
    settings = get_settings()
    origins = ["*"] if settings.environment == "development" else settings.cors_origins

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=False,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )
