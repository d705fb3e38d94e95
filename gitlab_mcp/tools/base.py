"""Tool definitions: input models, invocation context and the Tool record."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from gitlab_mcp.clients.models import Credential, OperationKind
from gitlab_mcp.proxy.router import RequestRouter
from gitlab_mcp.schema.cache import SchemaCache


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserCredentials(CamelModel):
    access_token: str = Field(min_length=1)
    gitlab_url: str | None = None

    @field_validator("gitlab_url")
    @classmethod
    def _check_url(cls, value: str | None) -> str | None:
        if value is not None and not value.startswith(("http://", "https://")):
            raise ValueError("gitlabUrl must be an http(s) URL")
        return value

    def to_credential(self) -> Credential:
        return Credential(token=self.access_token, gitlab_url=self.gitlab_url)


class ToolInput(CamelModel):
    """Base for every tool's arguments. Credentials are always optional here."""

    user_credentials: UserCredentials | None = Field(
        default=None,
        description="Your GitLab credentials (optional for reads when a shared token is configured)",
    )


class PageInput(ToolInput):
    first: int = Field(default=20, ge=1, le=100, description="Number of items to retrieve")
    after: str | None = Field(default=None, description="Cursor for pagination")


@dataclass
class ToolContext:
    """Everything a handler needs to talk to GitLab for one invocation."""

    router: RequestRouter
    schemas: SchemaCache
    operation: OperationKind
    credential: Credential | None = None

    async def execute(
        self, query: str, variables: dict | None = None, operation: OperationKind | None = None
    ) -> dict:
        return await self.router.execute(
            query,
            variables,
            operation=operation or self.operation,
            credential=self.credential,
        )


Handler = Callable[[Any, ToolContext], Awaitable[Any]]


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    input_model: type[ToolInput]
    handler: Handler
    operation: OperationKind = OperationKind.READ

    def operation_for(self, params: ToolInput) -> OperationKind:
        """The operation kind of this call. Only custom queries can escalate to a write."""
        if getattr(params, "requires_write", False):
            return OperationKind.WRITE
        return self.operation

    def input_schema(self) -> dict:
        return self.input_model.model_json_schema(by_alias=True)
