"""
Cortex backend 客户端（Backend Invoker）。

约定：
- 每次运行只发**一次** POST，body 为完整 `ScanRequest`
- github_token / cortex_api_key 原样放进 body（backend 的鉴权方式要求如此），不写日志
- 非 2xx 直接抛 `CortexBackendError`，带上响应正文便于排查
"""

from __future__ import annotations

import json
import logging

import httpx
from pydantic import ValidationError

from cortex_review.scan.models import ScanContext
from cortex_review.scan.models import ScanRequest
from cortex_review.scan.models import ScanResult

logger = logging.getLogger(__name__)

# backend 同步执行扫描，读超时需要比 GitHub API 宽松得多
BACKEND_TIMEOUT = httpx.Timeout(30.0, read=300.0)


class CortexBackendError(RuntimeError):
    """backend 返回非成功状态码或无法解析的结果。"""

    pass


def build_scan_request(context: ScanContext, github_token: str, cortex_api_key: str, commit: str) -> ScanRequest:
    """把 PR 上下文和显式传入的 secrets 拼成唯一的请求体。"""
    if context.trigger.branch is None:
        raise ValueError(f"Branch is unresolved for PR #{context.trigger.pr_number}")
    return ScanRequest(
        trigger_type=context.trigger.trigger_type,
        github_token=github_token,
        cortex_api_key=cortex_api_key,
        repository=context.repository_slug,
        branch=context.trigger.branch,
        commit=commit,
        pr_number=str(context.trigger.pr_number),
        changed_files=context.changed_files,
        triggered_by=context.triggered_by,
        repo=context.repository,
        owner=context.owner,
    )


class CortexBackendClient:
    def __init__(self, backend_url: str, http_client: httpx.AsyncClient) -> None:
        self._backend_url = backend_url
        self._http_client = http_client

    async def trigger_scan(self, request: ScanRequest) -> ScanResult:
        logger.info(
            f"Submitting scan: repository={request.repository}, pr={request.pr_number}, "
            f"files={len(request.changed_files)}"
        )
        response = await self._http_client.post(
            self._backend_url,
            json=request.model_dump(mode="json"),
            timeout=BACKEND_TIMEOUT,
        )
        if not response.is_success:
            raise CortexBackendError(f"Backend responded with {response.status_code}: {response.text}")

        if not response.content.strip():
            logger.info("Backend returned an empty body, treating as an empty result")
            return ScanResult()

        try:
            data = response.json()
        except json.JSONDecodeError as exc:
            raise CortexBackendError(f"Backend returned invalid JSON: {response.text}") from exc
        if not isinstance(data, dict):
            raise CortexBackendError(f"Unexpected backend response shape: {data}")

        try:
            result = ScanResult.model_validate(data)
        except ValidationError as exc:
            raise CortexBackendError(f"Backend result does not match ScanResult: {exc}") from exc

        logger.info("Cortex scan triggered successfully")
        return result
