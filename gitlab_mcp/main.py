"""GitLab Tool Gateway: FastAPI application entry point.

Exposes the GitLab GraphQL API as a catalogue of tools for LLM clients,
routing each call to a client authorized by the configured auth mode.
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import Body, Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from gitlab_mcp.clients.models import AuthMode, Credential
from gitlab_mcp.config.settings import get_settings
from gitlab_mcp.exceptions import (
    AuthorizationError,
    GatewayError,
    IntrospectionError,
    RequestError,
    ToolExecutionError,
    ToolNotFoundError,
)
from gitlab_mcp.logging.audit import (
    RequestTimer,
    generate_request_id,
    get_audit_logger,
    log_tool_call,
    request_id_var,
    setup_logging,
)
from gitlab_mcp.proxy.router import RequestRouter
from gitlab_mcp.schema.cache import SchemaCache
from gitlab_mcp.security.auth import header_credential
from gitlab_mcp.tools.registry import bind_tool, get_tool, list_tools

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging()
    logger = get_audit_logger()
    settings = get_settings()

    router = RequestRouter(settings)
    schemas = SchemaCache(router)
    app.state.router = router
    app.state.schemas = schemas

    if router.cache.has_shared and settings.gitlab_auth_mode != AuthMode.PER_USER:
        try:
            await schemas.ensure_introspected()
            logger.info("Schema introspected using shared token")
        except (IntrospectionError, AuthorizationError) as e:
            logger.warning(
                "Startup introspection failed; will retry on demand",
                extra={"audit_data": {"error": e.message}},
            )
    else:
        logger.info(
            "Shared token not used for reads; schema will be introspected with user credentials"
        )

    logger.info(
        "Gateway started",
        extra={"audit_data": {
            "gitlab_url": settings.gitlab_url,
            "auth_mode": settings.gitlab_auth_mode.value,
        }},
    )
    yield
    await router.close()
    logger.info("Gateway stopped")


app = FastAPI(
    title="GitLab Tool Gateway",
    description="GitLab GraphQL tools with shared, per-user and hybrid authentication",
    version=VERSION,
    lifespan=lifespan,
)


def _error_response(status_code: int, error: GatewayError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error.message, "code": error.code},
        headers={"X-Request-Id": request_id_var.get("")},
    )


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(request: Request, exc: AuthorizationError):
    return _error_response(401, exc)


@app.exception_handler(ToolNotFoundError)
async def tool_not_found_handler(request: Request, exc: ToolNotFoundError):
    return _error_response(404, exc)


@app.exception_handler(ToolExecutionError)
async def tool_execution_error_handler(request: Request, exc: ToolExecutionError):
    return _error_response(422, exc)


@app.exception_handler(RequestError)
async def request_error_handler(request: Request, exc: RequestError):
    return _error_response(504 if exc.timed_out else 502, exc)


@app.exception_handler(IntrospectionError)
async def introspection_error_handler(request: Request, exc: IntrospectionError):
    return _error_response(502, exc)


@app.exception_handler(ValidationError)
async def argument_error_handler(request: Request, exc: ValidationError):
    # Inputs are left out: they may carry an access token
    return JSONResponse(
        status_code=422,
        content={
            "error": "Invalid tool arguments",
            "code": "INVALID_ARGUMENTS",
            "details": exc.errors(include_url=False, include_input=False, include_context=False),
        },
        headers={"X-Request-Id": request_id_var.get("")},
    )


def get_router(request: Request) -> RequestRouter:
    return request.app.state.router


def get_schemas(request: Request) -> SchemaCache:
    return request.app.state.schemas


@app.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION}


@app.get("/tools")
async def tools():
    return {
        "tools": [
            {
                "name": tool.name,
                "description": tool.description,
                "operation": tool.operation.value,
                "inputSchema": tool.input_schema(),
            }
            for tool in list_tools()
        ]
    }


@app.post("/tools/{name}")
async def call_tool(
    name: str,
    arguments: dict[str, Any] = Body(default={}),
    credential: Credential | None = Depends(header_credential),
    router: RequestRouter = Depends(get_router),
    schemas: SchemaCache = Depends(get_schemas),
):
    """Invoke one tool with the JSON body as its arguments."""
    rid = generate_request_id()
    request_id_var.set(rid)
    tool = get_tool(name)

    error = None
    operation = tool.operation
    with RequestTimer() as timer:
        try:
            params, ctx = bind_tool(tool, arguments, router, schemas, credential)
            operation = ctx.operation
            result = await tool.handler(params, ctx)
        except (GatewayError, ValidationError) as e:
            error = e

    log_tool_call(name, operation.value, timer.elapsed_ms, error)
    if error is not None:
        raise error
    return JSONResponse(
        content={"tool": name, "result": result},
        headers={"X-Request-Id": rid},
    )
