"""HTTP client factory.

The fetcher works against a shared ``httpx.AsyncClient``; whoever creates the
client owns it and closes it on shutdown.
"""
from __future__ import annotations

import logging

import httpx

from .config import Settings

logger = logging.getLogger(__name__)


def create_client(settings: Settings) -> httpx.AsyncClient:
    logger.info("Creating HTTP client for %s", settings.api_base_url)
    return httpx.AsyncClient(timeout=settings.request_timeout_seconds)
