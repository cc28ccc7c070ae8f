"""
Scan 领域模型（Pydantic）。

用途：
- 明确各阶段（classify -> fetch -> invoke -> render）输入/输出的数据结构
- 作为 Cortex backend 请求/响应的 schema（字段名即 wire 格式）

说明：
- 所有对象只存活于单次运行，不做持久化
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

TriggerType = Literal["pr_opened", "pr_merged", "manual_comment"]


class TriggerEvent(BaseModel):
    """事件分类结果。创建后不可变；manual_comment 的 branch 需要后续补全。"""

    model_config = ConfigDict(frozen=True)

    trigger_type: TriggerType
    pr_number: int
    branch: str | None = None


class ChangedFile(BaseModel):
    """PR 中的单个变更文件。patch 缺失（二进制/过大）时为空字符串。"""

    filename: str
    status: str
    additions: int
    deletions: int
    patch: str = ""


class ActorProfile(BaseModel):
    """触发本次运行的用户。"""

    login: str
    name: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    profile_url: str | None = None
    company: str | None = None


class OrganizationOwner(BaseModel):
    type: Literal["organization"] = "organization"
    login: str
    name: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    profile_url: str | None = None
    description: str | None = None
    location: str | None = None
    blog: str | None = None
    public_repos: int | None = None
    created_at: str | None = None


class IndividualOwner(BaseModel):
    type: Literal["individual"] = "individual"
    login: str
    name: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    profile_url: str | None = None
    company: str | None = None
    blog: str | None = None
    location: str | None = None
    bio: str | None = None
    public_repos: int | None = None
    created_at: str | None = None


OwnerProfile = Annotated[Union[OrganizationOwner, IndividualOwner], Field(discriminator="type")]


class RepositoryInfo(BaseModel):
    name: str
    full_name: str
    description: str | None = None
    private: bool
    default_branch: str
    language: str | None = None
    stars: int
    forks: int
    created_at: str | None = None


class ScanContext(BaseModel):
    """Context Fetcher 的输出：一次扫描所需的全部 PR 上下文（不含 secrets）。"""

    owner_login: str
    repo_name: str
    trigger: TriggerEvent
    changed_files: list[ChangedFile] = Field(default_factory=list)
    triggered_by: ActorProfile
    repository: RepositoryInfo
    owner: OwnerProfile

    @property
    def repository_slug(self) -> str:
        return f"{self.owner_login}/{self.repo_name}"


class ScanRequest(BaseModel):
    """发给 Cortex backend 的唯一请求体（字段名即 JSON key）。"""

    trigger_type: TriggerType
    provider: Literal["github"] = "github"
    github_token: str
    cortex_api_key: str
    repository: str
    branch: str
    commit: str
    pr_number: str
    changed_files: list[ChangedFile]
    triggered_by: ActorProfile
    repo: RepositoryInfo
    owner: OwnerProfile


class ScanIssue(BaseModel):
    """
    backend 返回的单条 finding。

    单条 issue 字段不全不能拖垮整个结果：缺失或 null 时按默认值补齐。
    """

    rule_id: str = "cortex"
    message: str = ""
    severity: str = "warning"
    filename: str | None = None
    line: int | None = None

    @field_validator("rule_id", mode="before")
    @classmethod
    def _rule_id_default(cls, value: object) -> object:
        return "cortex" if value is None or value == "" else value

    @field_validator("message", mode="before")
    @classmethod
    def _message_default(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("severity", mode="before")
    @classmethod
    def _severity_default(cls, value: object) -> object:
        return "warning" if value is None or value == "" else value


class ScanResult(BaseModel):
    """
    backend 返回的扫描结果。

    数值字段缺失或为 null 时一律按 0 处理，保证部分结果也能渲染。
    """

    scan_id: str | None = None
    scan_url: str | None = None
    critical: int = 0
    warnings: int = 0
    suggestions: int = 0
    passed: int = 0
    issues: list[ScanIssue] = Field(default_factory=list)

    @field_validator("critical", "warnings", "suggestions", "passed", mode="before")
    @classmethod
    def _none_as_zero(cls, value: object) -> object:
        return 0 if value is None else value

    @field_validator("issues", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("scan_id", mode="before")
    @classmethod
    def _scan_id_as_str(cls, value: object) -> object:
        # 部分 backend 返回数字 id
        return str(value) if isinstance(value, int) else value
