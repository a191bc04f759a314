"""Search service layer for GraylogSearch.

Provides the multi-call search recipes and factory functions wiring the
configured transport into them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from GraylogSearch.graylog.client import GraylogHttpClient
from GraylogSearch.graylog.search import GraylogSearch
from GraylogSearch.services.search import GraylogSearchService

if TYPE_CHECKING:
    from GraylogSearch.config import AppConfig


def create_search_client(config: AppConfig) -> GraylogSearch:
    """Create a search client for the configured server and stream."""
    graylog = config.graylog
    transport = GraylogHttpClient(
        username=graylog.username,
        password=graylog.password,
        token=graylog.token,
        timeout=graylog.timeout,
        max_attempts=graylog.max_attempts,
    )
    return GraylogSearch(transport, base_url=graylog.base_url, stream_id=graylog.stream_id)


def create_search_service(config: AppConfig) -> GraylogSearchService:
    return GraylogSearchService(client=create_search_client(config))


__all__ = [
    "GraylogSearchService",
    "create_search_client",
    "create_search_service",
]
