"""
GitHub event payload / API response schemas（Pydantic）。

说明：
- 字段只覆盖当前闭环需要的子集（PR / issue_comment 事件 + 几个 REST 接口）
- GitHub 可能返回 null 的字段一律声明为 Optional，缺失就是 None，不做兜底编造
"""

from __future__ import annotations

from pydantic import BaseModel


class GitHubPullRequestHead(BaseModel):
    ref: str
    sha: str | None = None


class GitHubPullRequest(BaseModel):
    """`pull_request` 事件 payload 或 GET /pulls/{number} 的子集。"""

    number: int
    head: GitHubPullRequestHead
    merged: bool | None = False


class GitHubPullRequestEvent(BaseModel):
    """`pull_request` 事件（action: opened/closed/synchronize 等）。"""

    action: str
    pull_request: GitHubPullRequest


class GitHubComment(BaseModel):
    body: str | None = None


class GitHubIssue(BaseModel):
    """issue_comment 事件里的 issue；`pull_request` 存在即表示它其实是 PR。"""

    number: int
    pull_request: dict[str, object] | None = None


class GitHubIssueCommentEvent(BaseModel):
    action: str
    comment: GitHubComment
    issue: GitHubIssue


class GitHubPullRequestFile(BaseModel):
    """
    PR 文件列表 item（GET /pulls/{pull_number}/files）。

    patch 可能缺失（例如大文件/二进制），这里保持 None，由 adapter 转成空字符串。
    """

    filename: str
    status: str
    additions: int = 0
    deletions: int = 0
    patch: str | None = None


class GitHubUser(BaseModel):
    """GET /users/{username}"""

    login: str
    name: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    html_url: str | None = None
    company: str | None = None
    blog: str | None = None
    location: str | None = None
    bio: str | None = None
    public_repos: int | None = None
    created_at: str | None = None


class GitHubOrganization(BaseModel):
    """GET /orgs/{org}"""

    login: str
    name: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    html_url: str | None = None
    description: str | None = None
    location: str | None = None
    blog: str | None = None
    public_repos: int | None = None
    created_at: str | None = None


class GitHubRepository(BaseModel):
    """GET /repos/{owner}/{repo}"""

    name: str
    full_name: str
    description: str | None = None
    private: bool
    default_branch: str
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    created_at: str | None = None


class GitHubSarifUpload(BaseModel):
    """POST /code-scanning/sarifs 的返回（202 Accepted）。"""

    id: str | None = None
    url: str | None = None
