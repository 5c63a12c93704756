"""Verse endpoint client (GraphQL over HTTP).

Every failure is reported through ``FetchResult.errors`` instead of being
raised: transport errors, non-2xx statuses, undecodable bodies and
GraphQL errors all end up there.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

import httpx

from reftagger.engine.query import QueryDescriptor

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://alkotob.org/query"
DEFAULT_TIMEOUT = 10.0


@dataclass
class FetchResult:
    """Response of a verse query."""

    data: dict | None = None
    errors: list[dict] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def get(self, *path: str):
        """Walk ``data`` along path, returning None on any missing step."""
        node = self.data
        for key in path:
            if not isinstance(node, Mapping):
                return None
            node = node.get(key)
        return node


class GraphQLClient:
    """Posts queries to the verse endpoint.

    Usage:
        client = GraphQLClient("https://alkotob.org/query")
        result = await client.fetch(query, {"version": "quran", "chapter": 2})
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize client.

        Args:
            endpoint: GraphQL endpoint URL
            timeout: Request timeout in seconds
            transport: Optional transport override (tests use MockTransport)
        """
        self.endpoint = endpoint
        self.timeout = timeout
        self._transport = transport

    async def fetch(
        self, query: QueryDescriptor | str, variables: dict | None = None
    ) -> FetchResult:
        payload = {"query": str(query), "variables": variables or {}}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.endpoint, json=payload)
        except httpx.HTTPError as e:
            logger.warning(f"Verse fetch failed: {e}")
            return FetchResult(errors=[{"message": f"Request failed: {e}"}])

        if response.status_code >= 400:
            logger.warning(f"Verse endpoint returned {response.status_code}")
            return FetchResult(
                errors=[
                    {
                        "message": f"HTTP {response.status_code}",
                        "status": response.status_code,
                    }
                ]
            )

        try:
            body = response.json()
        except ValueError:
            logger.warning("Verse endpoint returned a non-JSON body")
            return FetchResult(errors=[{"message": "Invalid JSON response"}])

        if not isinstance(body, dict):
            return FetchResult(errors=[{"message": "Unexpected response shape"}])

        errors = body.get("errors") or []
        if errors:
            logger.warning(f"Verse query returned errors: {errors}")
        return FetchResult(data=body.get("data"), errors=list(errors))
