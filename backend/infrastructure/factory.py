from __future__ import annotations

import logging

from backend.core.settings import Settings
from backend.infrastructure.local_store import JsonFileClaimStore
from backend.infrastructure.remote_table import RemoteTableClaimStore
from backend.infrastructure.store import ClaimStore, InMemoryClaimStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> ClaimStore:
    """Instantiate the store selected by ``settings.store_backend``."""

    if settings.store_backend == "remote":
        if not settings.remote_url:
            raise ValueError("WELDTRACK_REMOTE_URL is required for the remote store")
        logger.info("Using remote table store at %s", settings.remote_url)
        return RemoteTableClaimStore(
            settings.remote_url,
            settings.remote_api_key,
            table=settings.remote_table,
            timeout=settings.remote_timeout,
        )
    if settings.store_backend == "json":
        logger.info("Using JSON file store in %s", settings.data_dir)
        return JsonFileClaimStore(settings.data_dir)
    return InMemoryClaimStore()
