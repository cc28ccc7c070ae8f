"""
Context Fetcher（非 AI，纯 GitHub API 编排）。

职责：
- manual_comment 触发时补全 branch（issue_comment 事件里没有 head ref）
- 拉取 PR 变更文件、触发者资料、仓库信息、仓库 owner 资料
- 每一步都可能失败；除 org/user 探测外，任何失败都直接上抛，终止本次运行
"""

from __future__ import annotations

import logging

from cortex_review.github.adapter import build_actor_profile
from cortex_review.github.adapter import build_changed_files
from cortex_review.github.adapter import build_individual_owner
from cortex_review.github.adapter import build_organization_owner
from cortex_review.github.adapter import build_repository_info
from cortex_review.github.client import GitHubClient
from cortex_review.github.client import GitHubNotFoundError
from cortex_review.scan.models import IndividualOwner
from cortex_review.scan.models import OrganizationOwner
from cortex_review.scan.models import ScanContext
from cortex_review.scan.models import TriggerEvent

logger = logging.getLogger(__name__)


async def resolve_trigger_branch(
    github_client: GitHubClient,
    owner: str,
    repo: str,
    trigger: TriggerEvent,
) -> TriggerEvent:
    """branch 已知则原样返回；否则查 PR 的 head ref，返回补全后的新对象。"""
    if trigger.branch is not None:
        return trigger
    pr = await github_client.get_pull_request(owner=owner, repo=repo, pull_number=trigger.pr_number)
    return trigger.model_copy(update={"branch": pr.head.ref})


async def resolve_owner_profile(github_client: GitHubClient, login: str) -> OrganizationOwner | IndividualOwner:
    """
    两步解析仓库 owner：

    - Step 1: 按 organization 查询
    - Step 2: 仅当 Step 1 返回 404 时，按个人用户查询
    其它错误（401/403/5xx/网络错误）原样上抛，不做降级。
    """
    try:
        org = await github_client.get_organization(org=login)
    except GitHubNotFoundError:
        logger.info(f"Owner {login} is not an organization, falling back to user lookup")
        user = await github_client.get_user(username=login)
        return build_individual_owner(user)
    return build_organization_owner(org)


async def fetch_scan_context(
    github_client: GitHubClient,
    owner: str,
    repo: str,
    trigger: TriggerEvent,
    actor: str,
) -> ScanContext:
    resolved = await resolve_trigger_branch(github_client=github_client, owner=owner, repo=repo, trigger=trigger)

    files = await github_client.list_pull_request_files(owner=owner, repo=repo, pull_number=resolved.pr_number)
    triggered_by = await github_client.get_user(username=actor)
    repository = await github_client.get_repository(owner=owner, repo=repo)
    owner_profile = await resolve_owner_profile(github_client=github_client, login=owner)

    logger.info(f"Trigger: {resolved.trigger_type} | PR: #{resolved.pr_number} | Branch: {resolved.branch}")
    logger.info(f"Changed files: {len(files)}")

    return ScanContext(
        owner_login=owner,
        repo_name=repo,
        trigger=resolved,
        changed_files=build_changed_files(files),
        triggered_by=build_actor_profile(triggered_by),
        repository=build_repository_info(repository),
        owner=owner_profile,
    )
