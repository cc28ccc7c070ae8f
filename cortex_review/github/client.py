"""
GitHub API 客户端（外部系统连接器）。

约定：
- 这里只做 HTTP 调用 + 错误处理 + schema 校验
- 出错直接抛错（不要吞），便于定位与告警
- 404 单独抛 `GitHubNotFoundError`：owner 解析需要据此区分 org / user
"""

from __future__ import annotations

import logging

import httpx

from cortex_review.github.schemas import GitHubOrganization
from cortex_review.github.schemas import GitHubPullRequest
from cortex_review.github.schemas import GitHubPullRequestFile
from cortex_review.github.schemas import GitHubRepository
from cortex_review.github.schemas import GitHubSarifUpload
from cortex_review.github.schemas import GitHubUser

logger = logging.getLogger(__name__)


class GitHubAPIError(RuntimeError):
    """GitHub REST API 返回非成功状态码。"""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"GitHub API error {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class GitHubNotFoundError(GitHubAPIError):
    """404：资源不存在（或 token 无权限看到）。"""

    pass


def _raise_for_status(response: httpx.Response) -> None:
    if response.status_code == 404:
        raise GitHubNotFoundError(response.status_code, response.text)
    if response.status_code >= 400:
        raise GitHubAPIError(response.status_code, response.text)


class GitHubClient:
    """最小 GitHub API client（PR / files / users / orgs / repos / code scanning）。"""

    def __init__(self, api_base_url: str, token: str, http_client: httpx.AsyncClient) -> None:
        self._api_base_url = api_base_url.rstrip("/")
        self._token = token
        self._http_client = http_client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def _get_json(self, path: str, params: dict[str, object] | None = None) -> object:
        response = await self._http_client.get(f"{self._api_base_url}{path}", headers=self._headers(), params=params)
        _raise_for_status(response)
        return response.json()

    async def get_pull_request(self, owner: str, repo: str, pull_number: int) -> GitHubPullRequest:
        data = await self._get_json(f"/repos/{owner}/{repo}/pulls/{pull_number}")
        return GitHubPullRequest.model_validate(data)

    async def list_pull_request_files(self, owner: str, repo: str, pull_number: int) -> list[GitHubPullRequestFile]:
        """
        拉取 PR 的变更文件列表（包含每个文件的 patch diff）。

        注意：GitHub API 有分页；这里会拉取全部文件，并保持 API 返回顺序。
        """
        per_page = 100
        page = 1
        all_items: list[GitHubPullRequestFile] = []
        while True:
            data = await self._get_json(
                f"/repos/{owner}/{repo}/pulls/{pull_number}/files",
                params={"per_page": per_page, "page": page},
            )
            if not isinstance(data, list):
                raise RuntimeError(f"Unexpected GitHub response shape for PR files: {data}")
            items = [GitHubPullRequestFile.model_validate(x) for x in data]
            all_items.extend(items)
            if len(items) < per_page:
                break
            page += 1
        return all_items

    async def get_user(self, username: str) -> GitHubUser:
        data = await self._get_json(f"/users/{username}")
        return GitHubUser.model_validate(data)

    async def get_organization(self, org: str) -> GitHubOrganization:
        data = await self._get_json(f"/orgs/{org}")
        return GitHubOrganization.model_validate(data)

    async def get_repository(self, owner: str, repo: str) -> GitHubRepository:
        data = await self._get_json(f"/repos/{owner}/{repo}")
        return GitHubRepository.model_validate(data)

    async def upload_sarif(self, owner: str, repo: str, commit_sha: str, ref: str, sarif: str) -> GitHubSarifUpload:
        """
        上传 SARIF 到 code scanning。

        - sarif: gzip 压缩后再 base64 编码的 SARIF JSON
        - ref: 形如 `refs/heads/main`
        """
        url = f"{self._api_base_url}/repos/{owner}/{repo}/code-scanning/sarifs"
        payload = {"commit_sha": commit_sha, "ref": ref, "sarif": sarif}
        response = await self._http_client.post(url, headers=self._headers(), json=payload)
        _raise_for_status(response)
        receipt = GitHubSarifUpload.model_validate(response.json())
        logger.info(f"SARIF upload accepted: id={receipt.id}")
        return receipt
