"""Tool registry: lookup and invocation by name."""

from typing import Any

from gitlab_mcp.clients.models import Credential
from gitlab_mcp.exceptions import ToolNotFoundError
from gitlab_mcp.proxy.router import RequestRouter
from gitlab_mcp.schema.cache import SchemaCache
from gitlab_mcp.tools.base import Tool, ToolContext, ToolInput
from gitlab_mcp.tools.gitlab import TOOLS

_tools: dict[str, Tool] = {tool.name: tool for tool in TOOLS}


def get_tool(name: str) -> Tool:
    if name not in _tools:
        raise ToolNotFoundError(name)
    return _tools[name]


def list_tools() -> list[Tool]:
    return list(_tools.values())


def bind_tool(
    tool: Tool,
    arguments: dict[str, Any],
    router: RequestRouter,
    schemas: SchemaCache,
    fallback_credential: Credential | None = None,
) -> tuple[ToolInput, ToolContext]:
    """Validate arguments and build the context a call will run with.

    Credentials in the arguments win over ``fallback_credential`` (taken
    from request headers by the HTTP layer). The context carries the
    effective operation kind of this call.

    Raises:
        pydantic.ValidationError: Arguments don't match the tool's input model.
    """
    params = tool.input_model.model_validate(arguments)

    credential = fallback_credential
    if params.user_credentials is not None:
        credential = params.user_credentials.to_credential()

    ctx = ToolContext(
        router=router,
        schemas=schemas,
        operation=tool.operation_for(params),
        credential=credential,
    )
    return params, ctx


async def invoke_tool(
    name: str,
    arguments: dict[str, Any],
    router: RequestRouter,
    schemas: SchemaCache,
    fallback_credential: Credential | None = None,
) -> Any:
    """Validate arguments and run a tool.

    Raises:
        ToolNotFoundError: Unknown tool name.
        pydantic.ValidationError: Arguments don't match the tool's input model.
    """
    tool = get_tool(name)
    params, ctx = bind_tool(tool, arguments, router, schemas, fallback_credential)
    return await tool.handler(params, ctx)
