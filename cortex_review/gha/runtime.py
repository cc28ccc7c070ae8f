"""
GitHub Actions runner 交互（job summary + workflow commands）。

说明：
- job summary 写入 `GITHUB_STEP_SUMMARY` 指向的文件（runner 在 step 结束后渲染为 Markdown）
- `::error::` / `::warning::` 写到 stdout，格式与 `@actions/core` 保持一致
"""

from __future__ import annotations

import logging
import sys

logger = logging.getLogger(__name__)


def _escape_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _issue_command(command: str, message: str) -> None:
    sys.stdout.write(f"::{command}::{_escape_data(message)}\n")
    sys.stdout.flush()


def set_failed(message: str) -> None:
    """标记本次运行失败（exit code 由调用方返回）。"""
    _issue_command("error", message)


def warning(message: str) -> None:
    _issue_command("warning", message)


class JobSummary:
    """本地运行时没有 `GITHUB_STEP_SUMMARY`，此时只记日志不写文件。"""

    def __init__(self, path: str | None) -> None:
        self._path = path

    def write(self, markdown: str, overwrite: bool = False) -> None:
        if self._path is None:
            logger.info(f"GITHUB_STEP_SUMMARY not set, summary not written:\n{markdown}")
            return
        mode = "w" if overwrite else "a"
        with open(self._path, mode, encoding="utf-8") as f:
            f.write(markdown)
