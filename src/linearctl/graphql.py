from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

import requests

from .errors import ConfigError, LinearAPIError, classify_error
from .retry import run_with_retries

if TYPE_CHECKING:
    from .config import CliConfig

DEFAULT_GRAPHQL_URL = "https://api.linear.app/graphql"
USER_AGENT = "linearctl/0.1.0"
HTTP_ERROR_STATUS = 400
REQUEST_TIMEOUT = 30
PAGE_SIZE = 100
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


class GraphQLRequester(Protocol):
    def request(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]: ...


def is_uuid(value: str) -> bool:
    return bool(UUID_PATTERN.match(value))


def is_not_found(exc: LinearAPIError) -> bool:
    return classify_error(exc).category == "not_found"


def mutation_success(data: dict[str, Any], field_name: str) -> bool:
    """Read ``data[field_name].success`` from a mutation payload."""
    payload = data.get(field_name)
    return isinstance(payload, dict) and bool(payload.get("success"))


def paginate(
    client: GraphQLRequester,
    query: str,
    variables: dict[str, Any],
    extract: Callable[[dict[str, Any]], dict[str, Any] | None],
    *,
    page_size: int = PAGE_SIZE,
) -> list[dict[str, Any]]:
    """Follow a connection's ``pageInfo`` cursor until the last page.

    ``query`` must accept ``$first`` and ``$after``; ``extract`` picks the
    connection (``nodes`` + ``pageInfo``) out of each response.
    """
    out: list[dict[str, Any]] = []
    after: str | None = None
    while True:
        data = client.request(query, {**variables, "first": page_size, "after": after})
        conn = extract(data) or {}
        out.extend(n for n in conn.get("nodes") or [] if isinstance(n, dict))
        page = conn.get("pageInfo") or {}
        after = page.get("endCursor")
        if not page.get("hasNextPage") or not after:
            return out


@dataclass
class LinearClient:
    """Lightweight GraphQL client for the Linear API."""

    api_key: str
    endpoint: str = DEFAULT_GRAPHQL_URL
    session: requests.Session | None = None
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._session = self.session or requests.Session()
        self._session.headers.setdefault("Authorization", self.api_key)
        self._session.headers.setdefault("Content-Type", "application/json")
        self._session.headers.setdefault("User-Agent", USER_AGENT)

    def _post(self, payload: dict[str, Any]) -> Any:
        def _run() -> Any:
            response = self._session.request(
                "POST",
                self.endpoint,
                json=payload,
                headers=self._session.headers,
                timeout=REQUEST_TIMEOUT,
            )
            if response.status_code >= HTTP_ERROR_STATUS:
                message = f"Linear API request failed with {response.status_code}"
                retry_after = getattr(response, "headers", {}).get("Retry-After")
                if retry_after:
                    message += f" (Retry-After: {retry_after})"
                raise LinearAPIError(
                    message,
                    status=response.status_code,
                    response_text=response.text,
                )
            try:
                return response.json()
            except ValueError as exc:
                raise LinearAPIError(
                    "Linear API returned a non-JSON response",
                    status=response.status_code,
                    response_text=response.text,
                ) from exc

        return run_with_retries(_run)

    def request(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a GraphQL document and return its ``data`` mapping."""
        body = self._post({"query": query, "variables": variables or {}})
        if not isinstance(body, dict):
            raise LinearAPIError("Linear API returned an unexpected payload")
        errors = body.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) and errors else errors
            message = first.get("message") if isinstance(first, dict) else str(first)
            extensions = first.get("extensions") if isinstance(first, dict) else None
            code = extensions.get("code") if isinstance(extensions, dict) else None
            raise LinearAPIError(
                f"GraphQL error: {message}" + (f" ({code})" if code else ""),
                response_text=str(errors),
            )
        data = body.get("data")
        return data if isinstance(data, dict) else {}


def build_client(cfg: CliConfig) -> LinearClient:
    if not cfg.api_key:
        raise ConfigError(
            "No Linear API key configured; set LINEAR_API_KEY or api.key in the config file"
        )
    return LinearClient(api_key=cfg.api_key, endpoint=cfg.graphql_endpoint)


__all__ = [
    "DEFAULT_GRAPHQL_URL",
    "PAGE_SIZE",
    "GraphQLRequester",
    "LinearAPIError",
    "LinearClient",
    "build_client",
    "is_not_found",
    "is_uuid",
    "mutation_success",
    "paginate",
]
