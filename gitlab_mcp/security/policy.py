"""Authorization policy: which credential may authorize an operation.

The decision is a pure function of its inputs so it can be tested
exhaustively and evaluated concurrently without coordination.
"""

from dataclasses import dataclass

from gitlab_mcp.clients.models import AuthMode, Credential, OperationKind

WRITE_REQUIRES_USER = "write operations require user authentication"
USER_AUTH_REQUIRED = "this operation requires user authentication"
NO_AUTH_CONFIGURED = "no authentication configured"


@dataclass(frozen=True)
class UseShared:
    """Authorize with the process-wide shared token."""


@dataclass(frozen=True)
class UseUser:
    """Authorize with the caller's own credential."""

    credential: Credential


@dataclass(frozen=True)
class Reject:
    """No eligible credential."""

    reason: str


AuthDecision = UseShared | UseUser | Reject


def decide(
    operation: OperationKind,
    credential: Credential | None,
    mode: AuthMode,
    shared_present: bool,
) -> AuthDecision:
    """Pick the credential source for one call.

    Rules, in order:
      1. An explicit user credential always wins.
      2. Writes never fall back to the shared token.
      3. Reads use the shared token unless the mode is per-user.
    """
    if credential is not None:
        return UseUser(credential)

    if operation == OperationKind.WRITE:
        return Reject(WRITE_REQUIRES_USER)

    if shared_present and mode != AuthMode.PER_USER:
        return UseShared()

    if mode in (AuthMode.PER_USER, AuthMode.HYBRID):
        return Reject(USER_AUTH_REQUIRED)

    return Reject(NO_AUTH_CONFIGURED)
