"""GraphQL documents sent by the tool catalogue."""

PAGE_INFO = """
    pageInfo {
      hasNextPage
      hasPreviousPage
      startCursor
      endCursor
    }
"""

USER_REF = "id username name"

LABELS = """
    labels {
      nodes { id title color description }
    }
"""

CURRENT_USER = """
query getCurrentUser {
  currentUser {
    id
    username
    name
    email
    avatarUrl
    webUrl
  }
}
"""

PROJECT = """
query getProject($fullPath: ID!) {
  project(fullPath: $fullPath) {
    id
    name
    description
    fullPath
    webUrl
    createdAt
    updatedAt
    visibility
    defaultBranch
    issuesEnabled
    mergeRequestsEnabled
    wikiEnabled
    snippetsEnabled
    repository {
      tree {
        lastCommit {
          sha
          message
          authoredDate
          author { name email }
        }
      }
    }
  }
}
"""

PROJECTS = f"""
query getProjects($first: Int!, $after: String) {{
  currentUser {{
    projects(first: $first, after: $after) {{
      {PAGE_INFO}
      nodes {{
        id
        name
        description
        fullPath
        webUrl
        visibility
        createdAt
        updatedAt
        defaultBranch
        issuesEnabled
        mergeRequestsEnabled
      }}
    }}
  }}
}}
"""

ISSUE_FIELDS = f"""
        id
        iid
        title
        description
        state
        createdAt
        updatedAt
        closedAt
        webUrl
        author {{ {USER_REF} }}
        assignees {{ nodes {{ {USER_REF} }} }}
        {LABELS}
"""

MERGE_REQUEST_FIELDS = f"""
        id
        iid
        title
        description
        state
        createdAt
        updatedAt
        mergedAt
        webUrl
        sourceBranch
        targetBranch
        author {{ {USER_REF} }}
        assignees {{ nodes {{ {USER_REF} }} }}
        reviewers {{ nodes {{ {USER_REF} }} }}
        {LABELS}
"""

ISSUES = f"""
query getIssues($projectPath: ID!, $first: Int!, $after: String) {{
  project(fullPath: $projectPath) {{
    issues(first: $first, after: $after) {{
      {PAGE_INFO}
      nodes {{ {ISSUE_FIELDS} }}
    }}
  }}
}}
"""

MERGE_REQUESTS = f"""
query getMergeRequests($projectPath: ID!, $first: Int!, $after: String) {{
  project(fullPath: $projectPath) {{
    mergeRequests(first: $first, after: $after) {{
      {PAGE_INFO}
      nodes {{ {MERGE_REQUEST_FIELDS} }}
    }}
  }}
}}
"""

CREATE_ISSUE = """
mutation createIssue($input: CreateIssueInput!) {
  createIssue(input: $input) {
    issue {
      id
      iid
      title
      description
      webUrl
      state
      createdAt
    }
    errors
  }
}
"""

CREATE_MERGE_REQUEST = """
mutation createMergeRequest($input: MergeRequestCreateInput!) {
  mergeRequestCreate(input: $input) {
    mergeRequest {
      id
      iid
      title
      description
      webUrl
      state
      sourceBranch
      targetBranch
      createdAt
    }
    errors
  }
}
"""

GLOBAL_SEARCH = """
query globalSearch($search: String!, $first: Int!) {
  projects(search: $search, first: $first) {
    nodes { id name fullPath description webUrl visibility lastActivityAt }
  }
  issues(search: $search, first: $first) {
    nodes {
      id iid title description state webUrl createdAt updatedAt
      author { username name }
      project { fullPath }
    }
  }
  mergeRequests(search: $search, first: $first) {
    nodes {
      id iid title description state webUrl createdAt updatedAt
      author { username name }
      project { fullPath }
    }
  }
}
"""

SEARCH_PROJECTS = f"""
query searchProjects($search: String!, $first: Int!, $after: String) {{
  projects(search: $search, first: $first, after: $after) {{
    {PAGE_INFO}
    nodes {{
      id
      name
      fullPath
      description
      webUrl
      visibility
      createdAt
      updatedAt
      lastActivityAt
      defaultBranch
      issuesEnabled
      mergeRequestsEnabled
      starCount
      forksCount
    }}
  }}
}}
"""

SEARCH_PROJECT_ISSUES = f"""
query searchProjectIssues($search: String!, $projectPath: ID!, $state: IssuableState,
                          $first: Int!, $after: String) {{
  project(fullPath: $projectPath) {{
    issues(search: $search, state: $state, first: $first, after: $after) {{
      {PAGE_INFO}
      nodes {{ {ISSUE_FIELDS} }}
    }}
  }}
}}
"""

SEARCH_ISSUES = f"""
query searchIssues($search: String!, $state: IssuableState, $first: Int!, $after: String) {{
  issues(search: $search, state: $state, first: $first, after: $after) {{
    {PAGE_INFO}
    nodes {{
      {ISSUE_FIELDS}
      project {{ fullPath name }}
    }}
  }}
}}
"""

SEARCH_PROJECT_MERGE_REQUESTS = f"""
query searchProjectMergeRequests($search: String!, $projectPath: ID!, $state: MergeRequestState,
                                 $first: Int!, $after: String) {{
  project(fullPath: $projectPath) {{
    mergeRequests(search: $search, state: $state, first: $first, after: $after) {{
      {PAGE_INFO}
      nodes {{ {MERGE_REQUEST_FIELDS} }}
    }}
  }}
}}
"""

SEARCH_MERGE_REQUESTS = f"""
query searchMergeRequests($search: String!, $state: MergeRequestState, $first: Int!, $after: String) {{
  mergeRequests(search: $search, state: $state, first: $first, after: $after) {{
    {PAGE_INFO}
    nodes {{
      {MERGE_REQUEST_FIELDS}
      project {{ fullPath name }}
    }}
  }}
}}
"""

SEARCH_USERS = """
query searchUsers($search: String!, $first: Int!) {
  users(search: $search, first: $first) {
    nodes {
      id
      username
      name
      email
      avatarUrl
      webUrl
      publicEmail
      location
      bio
    }
  }
}
"""

SEARCH_GROUPS = """
query searchGroups($search: String!, $first: Int!) {
  groups(search: $search, first: $first) {
    nodes {
      id
      name
      fullName
      fullPath
      description
      webUrl
      visibility
      avatarUrl
      createdAt
    }
  }
}
"""

REPOSITORY_TREE = """
query browseRepository($projectPath: ID!, $path: String, $ref: String) {
  project(fullPath: $projectPath) {
    repository {
      tree(path: $path, ref: $ref, recursive: true) {
        blobs { nodes { name path type mode webUrl } }
        trees { nodes { name path type webUrl } }
      }
    }
  }
}
"""

FILE_CONTENT = """
query getFileContent($projectPath: ID!, $path: String!, $ref: String) {
  project(fullPath: $projectPath) {
    repository {
      blobs(paths: [$path], ref: $ref) {
        nodes { name path rawBlob size webUrl lfsOid }
      }
    }
  }
}
"""
