"""The GitLab tool catalogue.

Each handler receives validated arguments and a ToolContext bound to the
caller's credential. Authorization is not checked here: the router applies
the auth policy to every exchange.
"""

from typing import Any, Literal

from pydantic import Field

from gitlab_mcp.clients.models import OperationKind
from gitlab_mcp.exceptions import ToolExecutionError
from gitlab_mcp.tools import queries
from gitlab_mcp.tools.base import PageInput, Tool, ToolContext, ToolInput

PROJECT_PATH = 'Full path of the project (e.g., "group/project-name")'
GIT_REF = "Git reference (branch, tag, or commit SHA)"


# --- Inputs ---

class NoInput(ToolInput):
    pass


class ProjectInput(ToolInput):
    full_path: str = Field(min_length=1, description=PROJECT_PATH)


class ProjectPageInput(PageInput):
    project_path: str = Field(min_length=1, description=PROJECT_PATH)


class CreateIssueInput(ToolInput):
    project_path: str = Field(min_length=1, description=PROJECT_PATH)
    title: str = Field(min_length=1, description="Title of the issue")
    description: str | None = Field(default=None, description="Description of the issue")


class CreateMergeRequestInput(ToolInput):
    project_path: str = Field(min_length=1, description=PROJECT_PATH)
    title: str = Field(min_length=1, description="Title of the merge request")
    source_branch: str = Field(min_length=1, description="Source branch name")
    target_branch: str = Field(min_length=1, description="Target branch name")
    description: str | None = Field(default=None, description="Description of the merge request")


class CustomQueryInput(ToolInput):
    query: str = Field(min_length=1, description="GraphQL query string")
    variables: dict[str, Any] | None = Field(default=None, description="Variables for the GraphQL query")
    requires_write: bool = Field(
        default=False,
        description="Set to true if this is a mutation that requires write permissions",
    )


class SearchInput(ToolInput):
    search_term: str = Field(min_length=1, description="Search term")


class SearchPageInput(PageInput):
    search_term: str = Field(min_length=1, description="Search term")


class SearchIssuesInput(SearchPageInput):
    project_path: str | None = Field(
        default=None, description="Limit search to a project. Leave empty to search globally."
    )
    state: Literal["opened", "closed", "all"] = Field(default="all", description="Filter by issue state")


class SearchMergeRequestsInput(SearchPageInput):
    project_path: str | None = Field(
        default=None, description="Limit search to a project. Leave empty to search globally."
    )
    state: Literal["opened", "closed", "merged", "all"] = Field(
        default="all", description="Filter by merge request state"
    )


class SearchLimitInput(SearchInput):
    first: int = Field(default=20, ge=1, le=100, description="Number of items to retrieve")


class BrowseRepositoryInput(ToolInput):
    project_path: str = Field(min_length=1, description=PROJECT_PATH)
    path: str = Field(default="", description="Directory path to browse (empty for root)")
    ref: str = Field(default="HEAD", description=GIT_REF)


class FileContentInput(ToolInput):
    project_path: str = Field(min_length=1, description=PROJECT_PATH)
    file_path: str = Field(min_length=1, description='Path to the file (e.g., "src/main.py")')
    ref: str = Field(default="HEAD", description=GIT_REF)


def _state_filter(state: str) -> str | None:
    return None if state == "all" else state


def _raise_mutation_errors(what: str, payload: dict) -> None:
    errors = payload.get("errors") or []
    if errors:
        raise ToolExecutionError(f"Failed to create {what}: {', '.join(errors)}")


# --- Read tools ---

async def get_current_user(params: NoInput, ctx: ToolContext) -> Any:
    result = await ctx.execute(queries.CURRENT_USER)
    return result.get("currentUser")


async def get_project(params: ProjectInput, ctx: ToolContext) -> Any:
    result = await ctx.execute(queries.PROJECT, {"fullPath": params.full_path})
    return result.get("project")


async def get_projects(params: PageInput, ctx: ToolContext) -> Any:
    result = await ctx.execute(queries.PROJECTS, {"first": params.first, "after": params.after})
    return (result.get("currentUser") or {}).get("projects")


async def get_issues(params: ProjectPageInput, ctx: ToolContext) -> Any:
    result = await ctx.execute(queries.ISSUES, {
        "projectPath": params.project_path, "first": params.first, "after": params.after,
    })
    return (result.get("project") or {}).get("issues")


async def get_merge_requests(params: ProjectPageInput, ctx: ToolContext) -> Any:
    result = await ctx.execute(queries.MERGE_REQUESTS, {
        "projectPath": params.project_path, "first": params.first, "after": params.after,
    })
    return (result.get("project") or {}).get("mergeRequests")


async def execute_custom_query(params: CustomQueryInput, ctx: ToolContext) -> Any:
    return await ctx.execute(params.query, params.variables)


async def get_available_queries(params: NoInput, ctx: ToolContext) -> Any:
    snapshot = await ctx.schemas.ensure_introspected(ctx.credential)
    return {
        "queries": snapshot.query_names,
        "mutations": snapshot.mutation_names,
    }


# --- Write tools ---

async def create_issue(params: CreateIssueInput, ctx: ToolContext) -> Any:
    result = await ctx.execute(queries.CREATE_ISSUE, {"input": {
        "projectPath": params.project_path,
        "title": params.title,
        "description": params.description,
    }})
    payload = result.get("createIssue") or {}
    _raise_mutation_errors("issue", payload)
    return payload.get("issue")


async def create_merge_request(params: CreateMergeRequestInput, ctx: ToolContext) -> Any:
    result = await ctx.execute(queries.CREATE_MERGE_REQUEST, {"input": {
        "projectPath": params.project_path,
        "title": params.title,
        "sourceBranch": params.source_branch,
        "targetBranch": params.target_branch,
        "description": params.description,
    }})
    payload = result.get("mergeRequestCreate") or {}
    _raise_mutation_errors("merge request", payload)
    return payload.get("mergeRequest")


# --- Search tools ---

async def search_gitlab(params: SearchInput, ctx: ToolContext) -> Any:
    result = await ctx.execute(queries.GLOBAL_SEARCH, {
        "search": params.search_term,
        "first": ctx.router.settings.gitlab_max_page_size,
    })
    projects = (result.get("projects") or {}).get("nodes") or []
    issues = (result.get("issues") or {}).get("nodes") or []
    merge_requests = (result.get("mergeRequests") or {}).get("nodes") or []
    return {
        "searchTerm": params.search_term,
        "projects": projects,
        "issues": issues,
        "mergeRequests": merge_requests,
        "totalResults": len(projects) + len(issues) + len(merge_requests),
    }


async def search_projects(params: SearchPageInput, ctx: ToolContext) -> Any:
    result = await ctx.execute(queries.SEARCH_PROJECTS, {
        "search": params.search_term, "first": params.first, "after": params.after,
    })
    return result.get("projects")


async def search_issues(params: SearchIssuesInput, ctx: ToolContext) -> Any:
    variables = {
        "search": params.search_term,
        "state": _state_filter(params.state),
        "first": params.first,
        "after": params.after,
    }
    if params.project_path:
        variables["projectPath"] = params.project_path
        result = await ctx.execute(queries.SEARCH_PROJECT_ISSUES, variables)
        return (result.get("project") or {}).get("issues")

    result = await ctx.execute(queries.SEARCH_ISSUES, variables)
    return result.get("issues")


async def search_merge_requests(params: SearchMergeRequestsInput, ctx: ToolContext) -> Any:
    variables = {
        "search": params.search_term,
        "state": _state_filter(params.state),
        "first": params.first,
        "after": params.after,
    }
    if params.project_path:
        variables["projectPath"] = params.project_path
        result = await ctx.execute(queries.SEARCH_PROJECT_MERGE_REQUESTS, variables)
        return (result.get("project") or {}).get("mergeRequests")

    result = await ctx.execute(queries.SEARCH_MERGE_REQUESTS, variables)
    return result.get("mergeRequests")


async def search_users(params: SearchLimitInput, ctx: ToolContext) -> Any:
    result = await ctx.execute(queries.SEARCH_USERS, {"search": params.search_term, "first": params.first})
    return result.get("users")


async def search_groups(params: SearchLimitInput, ctx: ToolContext) -> Any:
    result = await ctx.execute(queries.SEARCH_GROUPS, {"search": params.search_term, "first": params.first})
    return result.get("groups")


async def browse_repository(params: BrowseRepositoryInput, ctx: ToolContext) -> Any:
    result = await ctx.execute(queries.REPOSITORY_TREE, {
        "projectPath": params.project_path, "path": params.path, "ref": params.ref,
    })
    tree = ((result.get("project") or {}).get("repository") or {}).get("tree") or {}
    return {
        "project": params.project_path,
        "path": params.path,
        "ref": params.ref,
        "files": (tree.get("blobs") or {}).get("nodes") or [],
        "directories": (tree.get("trees") or {}).get("nodes") or [],
    }


async def get_file_content(params: FileContentInput, ctx: ToolContext) -> Any:
    result = await ctx.execute(queries.FILE_CONTENT, {
        "projectPath": params.project_path, "path": params.file_path, "ref": params.ref,
    })
    repository = (result.get("project") or {}).get("repository") or {}
    nodes = (repository.get("blobs") or {}).get("nodes") or []
    if not nodes:
        raise ToolExecutionError(
            f"File not found: {params.file_path} in {params.project_path} at {params.ref}"
        )

    blob = nodes[0]
    return {
        "project": params.project_path,
        "path": blob.get("path"),
        "name": blob.get("name"),
        "size": blob.get("size"),
        "content": blob.get("rawBlob"),
        "webUrl": blob.get("webUrl"),
        "ref": params.ref,
        "isLFS": bool(blob.get("lfsOid")),
    }


TOOLS: list[Tool] = [
    Tool("get_project", "Get detailed information about a specific GitLab project (read-only)",
         ProjectInput, get_project),
    Tool("get_issues", "Get issues from a specific GitLab project (read-only)",
         ProjectPageInput, get_issues),
    Tool("get_merge_requests", "Get merge requests from a specific GitLab project (read-only)",
         ProjectPageInput, get_merge_requests),
    Tool("execute_custom_query",
         "Execute a custom GraphQL query against the GitLab API "
         "(authentication may be required depending on query)",
         CustomQueryInput, execute_custom_query),
    Tool("get_available_queries",
         "Get list of available GraphQL queries and mutations from the GitLab schema",
         NoInput, get_available_queries),
    Tool("get_current_user", "Get information about the current authenticated GitLab user",
         NoInput, get_current_user),
    Tool("get_projects",
         "List projects accessible to the user (requires authentication to see private projects)",
         PageInput, get_projects),
    Tool("create_issue",
         "Create a new issue in a GitLab project (requires user authentication with write permissions)",
         CreateIssueInput, create_issue, OperationKind.WRITE),
    Tool("create_merge_request",
         "Create a new merge request in a GitLab project "
         "(requires user authentication with write permissions)",
         CreateMergeRequestInput, create_merge_request, OperationKind.WRITE),
    Tool("search_gitlab",
         "Search across all of GitLab (projects, issues, merge requests) with a single query",
         SearchInput, search_gitlab),
    Tool("search_projects", "Search for GitLab projects by name or description",
         SearchPageInput, search_projects),
    Tool("search_issues", "Search for issues across GitLab or within a specific project",
         SearchIssuesInput, search_issues),
    Tool("search_merge_requests", "Search for merge requests across GitLab or within a specific project",
         SearchMergeRequestsInput, search_merge_requests),
    Tool("search_users", "Search for GitLab users by username or name",
         SearchLimitInput, search_users),
    Tool("search_groups", "Search for GitLab groups and organizations",
         SearchLimitInput, search_groups),
    Tool("browse_repository", "Browse repository files and folders",
         BrowseRepositoryInput, browse_repository),
    Tool("get_file_content", "Get the content of a specific file from a GitLab repository",
         FileContentInput, get_file_content),
]
