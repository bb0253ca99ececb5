"""OpenBeta GraphQL API client.

API docs: https://docs.openbeta.io
Keeps two in-memory caches: whole query results (for cache-first reads) and
identifiable objects (``__typename`` + ``uuid``) for direct fragment reads.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from collections import OrderedDict
from typing import Any, Optional, Protocol

import httpx

logger = logging.getLogger(__name__)

API_BASE = "https://api.openbeta.io"
DEFAULT_TIMEOUT = 30.0
MAX_CACHED_RESULTS = 128

FETCH_POLICIES = ("cache-first", "network-only")


class GraphQLError(Exception):
    """The API answered with a GraphQL ``errors`` list."""

    def __init__(self, errors: list[dict]):
        self.errors = errors
        messages = "; ".join(str(e.get("message", e)) for e in errors) or "unknown error"
        super().__init__(f"GraphQL error: {messages}")


class QueryClient(Protocol):
    async def query(self, query: str, variables: Optional[dict] = None, fetch_policy: str = "cache-first") -> dict: ...

    def read_fragment(self, id: str) -> Optional[dict]: ...


def get_api_url() -> str:
    return os.environ.get("OPENBETA_API_URL", API_BASE)


def get_timeout() -> float:
    raw = os.environ.get("OPENBETA_TIMEOUT", "")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid OPENBETA_TIMEOUT=%r", raw)
        return DEFAULT_TIMEOUT


def cache_id(typename: str, uuid: str) -> str:
    """Cache key of an identifiable object, e.g. ``Area:{"uuid":"..."}``."""
    return f"{typename}:{json.dumps({'uuid': uuid}, separators=(',', ':'))}"


class GraphQLClient:
    """Minimal async GraphQL client with cache-first queries and fragment reads."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        max_results: int = MAX_CACHED_RESULTS,
    ):
        self.url = url or get_api_url()
        self.timeout = timeout if timeout is not None else get_timeout()
        self.max_results = max_results
        self._transport = transport
        self._results: OrderedDict[str, dict] = OrderedDict()
        self._objects: dict[str, dict] = {}

    @staticmethod
    def _result_key(query: str, variables: Optional[dict]) -> str:
        return json.dumps({"query": query, "variables": variables or {}}, sort_keys=True)

    async def _post(self, payload: dict) -> dict:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self._transport,
        ) as client:
            response = await client.post(self.url, json=payload)
            response.raise_for_status()
            return response.json()

    async def query(self, query: str, variables: Optional[dict] = None, fetch_policy: str = "cache-first") -> dict:
        """Run a query and return its ``data``.

        Args:
            query: GraphQL document.
            variables: Query variables.
            fetch_policy: 'cache-first' (answer from cache when possible) or
                'network-only' (always fetch, then refresh the cache).
        """
        if fetch_policy not in FETCH_POLICIES:
            raise ValueError(f"Unsupported fetch policy: {fetch_policy}. Use one of {', '.join(FETCH_POLICIES)}.")

        key = self._result_key(query, variables)
        if fetch_policy == "cache-first" and key in self._results:
            logger.debug("Cache hit for query with variables %s", variables)
            self._results.move_to_end(key)
            return copy.deepcopy(self._results[key])

        body = await self._post({"query": query, "variables": variables or {}})
        if body.get("errors"):
            raise GraphQLError(body["errors"])

        data = body.get("data") or {}
        self._results[key] = copy.deepcopy(data)
        self._results.move_to_end(key)
        while len(self._results) > self.max_results:
            self._results.popitem(last=False)
        self._remember(data)
        return data

    def _remember(self, node: Any) -> None:
        """Record every identifiable object in a result under its cache id."""
        if isinstance(node, list):
            for item in node:
                self._remember(item)
        elif isinstance(node, dict):
            typename = node.get("__typename")
            uuid = node.get("uuid")
            if typename and uuid:
                self.write_fragment(cache_id(typename, uuid), node)
            for value in node.values():
                if isinstance(value, (dict, list)):
                    self._remember(value)

    def read_fragment(self, id: str) -> Optional[dict]:
        """Return a copy of the cached object stored under ``id``, or None."""
        cached = self._objects.get(id)
        return copy.deepcopy(cached) if cached is not None else None

    def write_fragment(self, id: str, data: dict) -> None:
        """Store or merge an object under ``id``."""
        self._objects.setdefault(id, {}).update(copy.deepcopy(data))

    def reset(self) -> None:
        self._results.clear()
        self._objects.clear()


_client: Optional[QueryClient] = None


def get_client() -> QueryClient:
    global _client
    if _client is None:
        _client = GraphQLClient()
        logger.info("GraphQL client targeting %s", _client.url)
    return _client


def set_client(client: Optional[QueryClient]) -> None:
    """Replace the shared client; None resets to a fresh default on next use."""
    global _client
    _client = client
