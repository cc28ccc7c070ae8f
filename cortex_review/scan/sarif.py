"""
SARIF 2.1.0 报告生成（GitHub code scanning 上传格式）。

注意：
- 一次 run、一个 tool（Cortex Code Review），rules 为空（rule 元数据由 backend 维护）
- results 与 backend issues 一一对应，顺序保持不变（没有文件位置的 issue 挂到第一个变更文件）
- 上传接口要求 gzip 压缩后再 base64 编码
"""

from __future__ import annotations

import base64
import gzip
import json
import logging

from cortex_review.scan.models import ChangedFile
from cortex_review.scan.models import ScanIssue

SARIF_VERSION = "2.1.0"
SARIF_SCHEMA = "https://json.schemastore.org/sarif-2.1.0.json"
TOOL_NAME = "Cortex Code Review"

logger = logging.getLogger(__name__)

_LEVEL_BY_SEVERITY: dict[str, str] = {
    "critical": "error",
    "error": "error",
    "high": "error",
    "warning": "warning",
    "medium": "warning",
    "suggestion": "note",
    "info": "note",
    "low": "note",
    "note": "note",
}


def sarif_level(severity: str) -> str:
    """backend severity -> SARIF level（未知值按 warning 处理）。"""
    return _LEVEL_BY_SEVERITY.get(severity.strip().lower(), "warning")


def _build_result(issue: ScanIssue, fallback_uri: str | None) -> dict[str, object] | None:
    """
    code scanning 要求每个 result 至少有一个 location。

    issue 没有 filename 时挂到 fallback_uri（PR 的第一个变更文件）第 1 行，并在 properties 里标记；
    连 fallback 都没有时返回 None（调用方丢弃并记录日志）。
    """
    properties: dict[str, object] = {"severity": issue.severity}
    if issue.filename:
        physical: dict[str, object] = {"artifactLocation": {"uri": issue.filename}}
        if issue.line is not None:
            # SARIF 行号从 1 开始
            physical["region"] = {"startLine": max(issue.line, 1)}
    elif fallback_uri is not None:
        physical = {"artifactLocation": {"uri": fallback_uri}, "region": {"startLine": 1}}
        properties["locationFallback"] = True
    else:
        return None
    return {
        "ruleId": issue.rule_id,
        "level": sarif_level(issue.severity),
        "message": {"text": issue.message},
        "locations": [{"physicalLocation": physical}],
        "properties": properties,
    }


def build_sarif_report(issues: list[ScanIssue], changed_files: list[ChangedFile]) -> dict[str, object]:
    fallback_uri = changed_files[0].filename if changed_files else None
    results: list[dict[str, object]] = []
    for issue in issues:
        result = _build_result(issue, fallback_uri)
        if result is None:
            logger.warning(f"Dropping SARIF result without a location: rule={issue.rule_id}")
            continue
        results.append(result)
    return {
        "$schema": SARIF_SCHEMA,
        "version": SARIF_VERSION,
        "runs": [
            {
                "tool": {"driver": {"name": TOOL_NAME, "rules": []}},
                "artifacts": [{"location": {"uri": f.filename}} for f in changed_files],
                "results": results,
            }
        ],
    }


def encode_sarif_report(report: dict[str, object]) -> str:
    raw = json.dumps(report, ensure_ascii=False).encode("utf-8")
    return base64.b64encode(gzip.compress(raw)).decode("ascii")
