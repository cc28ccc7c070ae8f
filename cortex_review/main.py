"""
GitHub Action 入口。

这里做四件事：
- 读取 runner 注入的事件上下文，先做事件分类（不关心的事件直接成功退出）
- 加载配置（严格校验 input / 环境变量）
- 组装外部依赖（共用一个 httpx.AsyncClient）并运行 scan pipeline
- 统一异常处理：写 failure summary + `::error::`，返回非 0 exit code

注意：业务流程不写在这里（由 `scan/orchestrator.py` 负责）
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping

import httpx

from cortex_review.config import load_action_context
from cortex_review.config import load_config_from_env
from cortex_review.gha.runtime import JobSummary
from cortex_review.gha.runtime import set_failed
from cortex_review.github.events import classify_event
from cortex_review.scan.orchestrator import build_scan_orchestrator
from cortex_review.scan.orchestrator import run_scan
from cortex_review.scan.summary import render_failure_summary

logger = logging.getLogger(__name__)


async def run_action(environ: Mapping[str, str], transport: httpx.AsyncBaseTransport | None = None) -> int:
    """
    跑一次完整的 action，返回 exit code。

    - environ：runner 环境变量（例如 `os.environ`）
    - transport：可替换的 httpx transport（测试时注入 MockTransport）
    """
    summary = JobSummary(path=environ.get("GITHUB_STEP_SUMMARY") or None)
    try:
        action_context = load_action_context(environ)
        trigger = classify_event(event_name=action_context.event_name, payload=action_context.payload)
        if trigger is None:
            return 0

        config = load_config_from_env(environ)
        async with httpx.AsyncClient(timeout=httpx.Timeout(30.0), transport=transport) as http_client:
            orchestrator = build_scan_orchestrator(config=config, http_client=http_client, summary=summary)
            await run_scan(orchestrator=orchestrator, action_context=action_context, trigger=trigger)
    except Exception as exc:
        # 顶层兜底：任何阶段失败都要留下 failure summary 并标记失败
        logger.exception("Cortex code review failed")
        message = str(exc) or exc.__class__.__name__
        try:
            summary.write(render_failure_summary(message))
        except OSError as write_exc:
            # summary 写不进去也必须走到 set_failed
            logger.error(f"Failed to write failure summary: {write_exc}")
        set_failed(message)
        return 1
    return 0


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    raise SystemExit(asyncio.run(run_action(os.environ)))


if __name__ == "__main__":
    main()
