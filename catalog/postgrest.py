"""
Supabase (PostgREST) query service.

Implements the QueryService capability over the REST endpoint of a hosted
Supabase project. All operations are async for efficient network IO; one
httpx.AsyncClient is shared by every in-flight call.

API Documentation: https://postgrest.org/en/stable/references/api.html
"""

import re
from typing import Any, Optional, Sequence

import httpx

from .config import QUERY_TIMEOUT, REST_PATH, get_supabase_credentials
from .query import Operator, Predicate, QueryFailure, Sort

# Characters that force a value to be double-quoted inside in.() / cs.{}
_RESERVED = re.compile(r'[,(){}"\s]')

_CONTENT_RANGE = re.compile(r"^(?:\d+-\d+|\*)/(\d+|\*)$")


def _format_scalar(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _format_list_item(value: Any) -> str:
    text = _format_scalar(value)
    if _RESERVED.search(text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def encode_predicate(predicate: Predicate) -> tuple[str, str]:
    """
    Encode a predicate as a PostgREST query parameter.

    Examples:
        eq("status", "active")      -> ("status", "eq.active")
        is_null("deleted_at")       -> ("deleted_at", "is.null")
        in_("role_type", ["a", "b"]) -> ("role_type", "in.(a,b)")
        contains("subject_area", ["Cardiology"]) -> ("subject_area", "cs.{Cardiology}")
    """
    if predicate.operator is Operator.EQ:
        return predicate.field, f"eq.{_format_scalar(predicate.value)}"

    if predicate.operator is Operator.IS_NULL:
        return predicate.field, "is.null"

    if predicate.operator is Operator.IN:
        items = ",".join(_format_list_item(v) for v in predicate.value)
        return predicate.field, f"in.({items})"

    if predicate.operator is Operator.CONTAINS:
        items = ",".join(_format_list_item(v) for v in predicate.value)
        return predicate.field, f"cs.{{{items}}}"

    raise ValueError(f"Unsupported operator: {predicate.operator}")


def parse_content_range(header: Optional[str]) -> Optional[int]:
    """
    Extract the total row count from a Content-Range header.

    Returns:
        Total count, or None when the store did not report one
    """
    if not header:
        return None

    match = _CONTENT_RANGE.match(header.strip())
    if not match or match.group(1) == "*":
        return None

    return int(match.group(1))


def _failure_reason(response: httpx.Response) -> str:
    """Best human-readable reason for a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        message = body.get("message") or body.get("error_description") or body.get("error")
        if message:
            return str(message)

    return f"HTTP {response.status_code}"


class PostgrestQueryService:
    """
    QueryService backed by a Supabase REST endpoint.

    Pass an existing httpx.AsyncClient to share a connection pool, or let the
    service create (and close) its own.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = QUERY_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }

    @classmethod
    def from_env(cls, client: Optional[httpx.AsyncClient] = None) -> "PostgrestQueryService":
        """
        Build a service from SUPABASE_URL / SUPABASE_KEY.

        Raises:
            ValueError: If required environment variables are not set
        """
        base_url, api_key = get_supabase_credentials()
        return cls(base_url=base_url, api_key=api_key, client=client)

    def _url(self, collection: str) -> str:
        return f"{self.base_url}{REST_PATH}/{collection}"

    async def count(
        self,
        collection: str,
        filters: Sequence[Predicate],
        count_column: str = "id",
    ) -> Optional[int]:
        """
        Count rows matching all filters without fetching row bodies.

        Returns:
            Exact matching-row count, or None if the store omitted it

        Raises:
            QueryFailure: On transport errors or non-2xx responses
        """
        params = [("select", count_column)]
        params.extend(encode_predicate(p) for p in filters)

        try:
            response = await self._client.head(
                self._url(collection),
                params=params,
                headers={**self._headers, "Prefer": "count=exact"},
            )
        except httpx.HTTPError as e:
            raise QueryFailure(str(e) or e.__class__.__name__) from e

        if response.is_error:
            raise QueryFailure(_failure_reason(response))

        return parse_content_range(response.headers.get("content-range"))

    async def select(
        self,
        collection: str,
        filters: Sequence[Predicate],
        sort: Sort,
        limit: Optional[int] = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        """
        Select rows matching all filters, ordered by the store.

        Args:
            collection: Remote table name
            filters: AND-combined predicates
            sort: Sort field and direction
            limit: Maximum rows (None for the store's default)
            columns: PostgREST select expression, may embed related tables

        Returns:
            List of row dictionaries in store order

        Raises:
            QueryFailure: On transport errors, non-2xx responses or a non-list body
        """
        params = [("select", columns)]
        params.extend(encode_predicate(p) for p in filters)
        direction = "asc" if sort.ascending else "desc"
        params.append(("order", f"{sort.field}.{direction}"))
        if limit:
            params.append(("limit", str(limit)))

        try:
            response = await self._client.get(
                self._url(collection),
                params=params,
                headers=self._headers,
            )
        except httpx.HTTPError as e:
            raise QueryFailure(str(e) or e.__class__.__name__) from e

        if response.is_error:
            raise QueryFailure(_failure_reason(response))

        try:
            rows = response.json()
        except ValueError as e:
            raise QueryFailure(f"Invalid JSON from {collection}: {e}") from e

        if not isinstance(rows, list):
            raise QueryFailure(f"Expected a list of rows from {collection}")

        return rows

    async def aclose(self) -> None:
        """Close the underlying client if this service created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "PostgrestQueryService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
