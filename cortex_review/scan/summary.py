"""
Job summary 渲染（确定性输出，只做字段替换）。

两阶段：
- submitted：上下文收集完成、调用 backend 之前写入
- completed：backend 返回后覆盖写入（包含 submitted 的内容 + 扫描结果）
失败时另外追加一段 failure summary。
"""

from __future__ import annotations

from cortex_review.scan.models import ScanContext
from cortex_review.scan.models import ScanResult

SUMMARY_TITLE = "## Cortex Code Review"


def build_console_link(result: ScanResult, console_url: str) -> str:
    """scan_url 优先；否则用 scan_id 拼接；都没有就回到 console 首页。"""
    if result.scan_url:
        return result.scan_url
    base = console_url.rstrip("/")
    if result.scan_id:
        return f"{base}/scans/{result.scan_id}"
    return base


def _context_table(context: ScanContext) -> list[str]:
    trigger = context.trigger
    actor = context.triggered_by
    owner = context.owner
    return [
        "| Field | Value |",
        "| --- | --- |",
        f"| Repository | `{context.repository_slug}` |",
        f"| Branch | `{trigger.branch}` |",
        f"| Pull Request | #{trigger.pr_number} |",
        f"| Triggered By | @{actor.login} |",
        f"| Owner | {owner.login} ({owner.type}) |",
        f"| Files Changed | {len(context.changed_files)} |",
        f"| Trigger | `{trigger.trigger_type}` |",
    ]


def render_submitted_summary(context: ScanContext) -> str:
    lines: list[str] = [SUMMARY_TITLE, ""]
    lines.extend(_context_table(context))
    lines.append("")
    lines.append("**Status:** Scan submitted to Cortex, waiting for results.")
    return "\n".join(lines) + "\n"


def render_completed_summary(
    context: ScanContext,
    result: ScanResult,
    console_url: str,
    upload_error: str | None = None,
) -> str:
    """
    - console_url：配置的 console 根地址（用于拼接结果链接）
    - upload_error：SARIF 上传失败时的错误信息（上传失败不阻塞 summary）
    """
    lines: list[str] = [SUMMARY_TITLE, ""]
    lines.extend(_context_table(context))
    lines.append("")
    lines.append("**Status:** Scan completed.")
    lines.append("")
    lines.append("### Scan Results")
    lines.append("")
    lines.append("| Severity | Count |")
    lines.append("| --- | --- |")
    lines.append(f"| Critical | {result.critical} |")
    lines.append(f"| Warnings | {result.warnings} |")
    lines.append(f"| Suggestions | {result.suggestions} |")
    lines.append(f"| Passed | {result.passed} |")
    lines.append("")
    lines.append(f"[View full results in Cortex Console]({build_console_link(result, console_url)})")

    if upload_error is not None:
        lines.append("")
        lines.append(f"> **Note:** uploading {len(result.issues)} finding(s) to code scanning failed: {upload_error}")

    return "\n".join(lines) + "\n"


def render_failure_summary(message: str) -> str:
    lines: list[str] = [
        "### Cortex Code Review Failed",
        "",
        "```",
        message,
        "```",
    ]
    return "\n".join(lines) + "\n"
