"""Typed errors raised by the gateway core and rendered by the HTTP layer."""


class GatewayError(Exception):
    """Base exception for all gateway errors.

    Attributes:
        message: Human-readable reason, safe to show to the caller.
        code: Stable machine-readable error code.
    """

    def __init__(self, message: str, code: str = "GATEWAY_ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code


class ConfigurationError(GatewayError):
    """Raised at startup when the process configuration is invalid."""

    def __init__(self, message: str):
        super().__init__(message=message, code="CONFIGURATION_ERROR")


class AuthorizationError(GatewayError):
    """Raised when no credential qualifies for the requested operation.

    Attributes:
        reason: The policy's rejection reason.
    """

    def __init__(self, reason: str):
        super().__init__(message=reason, code="AUTHORIZATION_REQUIRED")
        self.reason = reason


class RequestError(GatewayError):
    """Raised when an authorized GraphQL exchange fails.

    Attributes:
        status_code: HTTP status returned by GitLab, if it answered at all.
        timed_out: True when the exchange exceeded the configured timeout.
    """

    def __init__(self, message: str, status_code: int | None = None, timed_out: bool = False):
        super().__init__(message=message, code="REQUEST_FAILED")
        self.status_code = status_code
        self.timed_out = timed_out


class IntrospectionError(GatewayError):
    """Raised when schema introspection fails. Safe to retry."""

    def __init__(self, message: str):
        super().__init__(message=message, code="INTROSPECTION_FAILED")


class ToolNotFoundError(GatewayError):
    """Raised when the requested tool is not in the catalogue."""

    def __init__(self, tool_name: str):
        super().__init__(message=f"Tool '{tool_name}' not found", code="TOOL_NOT_FOUND")
        self.tool_name = tool_name


class ToolExecutionError(GatewayError):
    """Raised when GitLab accepted the request but the tool could not complete it."""

    def __init__(self, message: str):
        super().__init__(message=message, code="TOOL_FAILED")
