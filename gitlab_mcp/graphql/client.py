"""GitLab GraphQL client over httpx."""

import httpx

from gitlab_mcp.clients.models import normalize_url
from gitlab_mcp.exceptions import RequestError
from gitlab_mcp.graphql.base import ClientHandle

REDACTED = "[REDACTED]"


class GitLabGraphQLClient(ClientHandle):
    """Sends GraphQL documents to ``{gitlab_url}/api/graphql`` with a bearer token."""

    def __init__(self, gitlab_url: str, access_token: str, timeout: float = 30.0):
        self.endpoint = f"{normalize_url(gitlab_url)}/api/graphql"
        self._token = access_token
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    def __repr__(self) -> str:
        return f"GitLabGraphQLClient(endpoint={self.endpoint!r})"

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                headers=self._build_headers(),
            )
        return self._client

    def _build_headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._token}",
        }

    def _redact(self, text: str) -> str:
        return text.replace(self._token, REDACTED)

    async def request(self, query: str, variables: dict | None = None) -> dict:
        payload: dict = {"query": query}
        if variables:
            payload["variables"] = variables

        client = await self._get_client()
        try:
            response = await client.post(self.endpoint, json=payload)
        except httpx.TimeoutException as e:
            raise RequestError(
                f"GitLab API timed out after {self._timeout:g}s", timed_out=True
            ) from e
        except httpx.HTTPError as e:
            raise RequestError(self._redact(f"Cannot reach GitLab API: {e}")) from e

        if response.status_code >= 400:
            raise RequestError(
                self._redact(f"GitLab API returned HTTP {response.status_code}: {response.text[:200]}"),
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise RequestError("GitLab API returned a non-JSON response",
                               status_code=response.status_code) from e

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            messages = ", ".join(str(err.get("message", err)) if isinstance(err, dict) else str(err)
                                 for err in errors)
            raise RequestError(self._redact(f"GraphQL errors: {messages}"),
                               status_code=response.status_code)

        return (body.get("data") if isinstance(body, dict) else None) or {}

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
