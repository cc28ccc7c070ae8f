"""
Scan Orchestrator（核心流程编排）。

流程由工程代码控制，明确的 4 阶段 pipeline：
- Step 1: Classify（在 `main.run_action` 里完成，skip 时根本不会走到这里）
- Step 2: Fetch Context（GitHub API）
- Step 3: Invoke Backend（单次 POST）
- Step 4: Render（job summary + 可选 SARIF 上传）

每个阶段要么返回类型化结果，要么抛出类型化异常；异常统一由 `run_action` 处理。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from cortex_review.config import ActionConfig
from cortex_review.config import ActionContext
from cortex_review.gha import runtime
from cortex_review.gha.runtime import JobSummary
from cortex_review.github.client import GitHubAPIError
from cortex_review.github.client import GitHubClient
from cortex_review.scan.backend import CortexBackendClient
from cortex_review.scan.backend import build_scan_request
from cortex_review.scan.context import fetch_scan_context
from cortex_review.scan.models import ScanContext
from cortex_review.scan.models import ScanResult
from cortex_review.scan.models import TriggerEvent
from cortex_review.scan.sarif import build_sarif_report
from cortex_review.scan.sarif import encode_sarif_report
from cortex_review.scan.summary import render_completed_summary
from cortex_review.scan.summary import render_submitted_summary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanOrchestrator:
    """Orchestrator 运行时依赖集合。"""

    config: ActionConfig
    github_client: GitHubClient
    backend_client: CortexBackendClient
    summary: JobSummary


def build_scan_orchestrator(config: ActionConfig, http_client: httpx.AsyncClient, summary: JobSummary) -> ScanOrchestrator:
    """装配外部依赖（GitHub / backend client 共用同一个 httpx.AsyncClient）。"""
    return ScanOrchestrator(
        config=config,
        github_client=GitHubClient(
            api_base_url=str(config.github_api_url),
            token=config.github_token,
            http_client=http_client,
        ),
        backend_client=CortexBackendClient(backend_url=str(config.backend_url), http_client=http_client),
        summary=summary,
    )


async def upload_findings(
    github_client: GitHubClient,
    context: ScanContext,
    result: ScanResult,
    commit_sha: str,
) -> str | None:
    """
    有 issue 才上传 SARIF。

    返回上传失败的错误信息（成功或无需上传返回 None）。
    上传失败不终止运行：已经拿到的扫描结果仍然要写进 summary。
    """
    if not result.issues:
        return None

    report = build_sarif_report(issues=result.issues, changed_files=context.changed_files)
    ref = f"refs/heads/{context.repository.default_branch}"
    try:
        await github_client.upload_sarif(
            owner=context.owner_login,
            repo=context.repo_name,
            commit_sha=commit_sha,
            ref=ref,
            sarif=encode_sarif_report(report),
        )
    except (GitHubAPIError, httpx.HTTPError) as exc:
        logger.error(f"SARIF upload failed: {exc}")
        runtime.warning(f"SARIF upload failed: {exc}")
        return str(exc)
    logger.info(f"Uploaded {len(result.issues)} finding(s) to code scanning ({ref})")
    return None


async def run_scan(orchestrator: ScanOrchestrator, action_context: ActionContext, trigger: TriggerEvent) -> ScanResult:
    context = await fetch_scan_context(
        github_client=orchestrator.github_client,
        owner=action_context.owner,
        repo=action_context.repo,
        trigger=trigger,
        actor=action_context.actor,
    )
    orchestrator.summary.write(render_submitted_summary(context), overwrite=True)

    request = build_scan_request(
        context=context,
        github_token=orchestrator.config.github_token,
        cortex_api_key=orchestrator.config.cortex_api_key,
        commit=action_context.sha,
    )
    result = await orchestrator.backend_client.trigger_scan(request)
    logger.info(
        f"Scan results: critical={result.critical}, warnings={result.warnings}, "
        f"suggestions={result.suggestions}, passed={result.passed}, issues={len(result.issues)}"
    )

    upload_error = await upload_findings(
        github_client=orchestrator.github_client,
        context=context,
        result=result,
        commit_sha=action_context.sha,
    )
    orchestrator.summary.write(
        render_completed_summary(
            context=context,
            result=result,
            console_url=str(orchestrator.config.console_url),
            upload_error=upload_error,
        ),
        overwrite=True,
    )
    return result
