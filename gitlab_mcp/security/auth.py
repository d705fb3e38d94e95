"""Caller credential extraction for the HTTP tool surface.

Tools accept credentials in their ``userCredentials`` argument. Callers that
would rather not put a token in the body can send it as headers instead;
this dependency turns those headers into a Credential. Absence is not an
error here: the auth policy decides whether the call can proceed.
"""

from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader

from gitlab_mcp.clients.models import Credential

token_header = APIKeyHeader(name="X-GitLab-Token", auto_error=False)
url_header = APIKeyHeader(name="X-GitLab-Url", auto_error=False)


async def header_credential(
    token: str | None = Security(token_header),
    gitlab_url: str | None = Security(url_header),
) -> Credential | None:
    """FastAPI dependency returning the header credential, if any."""
    if not token:
        if gitlab_url:
            raise HTTPException(status_code=400, detail="X-GitLab-Url requires X-GitLab-Token")
        return None

    if gitlab_url and not gitlab_url.startswith(("http://", "https://")):
        raise HTTPException(status_code=400, detail="X-GitLab-Url must be an http(s) URL")

    return Credential(token=token, gitlab_url=gitlab_url or None)
