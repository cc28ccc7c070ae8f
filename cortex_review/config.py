"""
Action 配置与运行上下文加载。

设计目标：
- **严格**：缺少必要 input / 环境变量就直接报错（避免“看起来跑了其实没配置好”）
- **类型安全**：使用 Pydantic 校验 URL/字符串等，减少运行时踩坑
- **可测试**：加载函数接收 `environ` 显式输入，便于单元测试（不读全局 os.environ）
"""

from __future__ import annotations

import json
from collections.abc import Mapping

from pydantic import BaseModel, HttpUrl

DEFAULT_CONSOLE_URL = "https://console.cortex.dev"
DEFAULT_GITHUB_API_URL = "https://api.github.com"


class ActionConfig(BaseModel):
    """一次运行需要的配置（secrets 显式传递，不做全局状态）。"""

    cortex_api_key: str
    backend_url: HttpUrl
    console_url: HttpUrl
    github_token: str
    github_api_url: HttpUrl


class ActionContext(BaseModel):
    """GitHub Actions 注入的事件上下文（event + repo + actor + sha）。"""

    event_name: str
    payload: dict[str, object]
    owner: str
    repo: str
    actor: str
    sha: str


def get_input(environ: Mapping[str, str], name: str) -> str:
    """
    读取 action input，语义与 `@actions/core.getInput` 一致。

    - `cortex-api-key` -> `INPUT_CORTEX-API-KEY`（runner 默认保留连字符）
    - 同时兼容 `INPUT_CORTEX_API_KEY`（composite action 里手动映射时更常见）
    - 返回值去掉首尾空白；未设置返回空字符串
    """
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    value = environ.get(key) or environ.get(key.replace("-", "_")) or ""
    return value.strip()


def load_config_from_env(environ: Mapping[str, str]) -> ActionConfig:
    """
    从环境变量加载并校验配置。

    - **输入**：`environ`（例如 `os.environ`）
    - **输出**：`ActionConfig`
    - **失败**：缺失/为空则抛 `ValueError`，一次性列出所有缺失项
    """
    api_key = get_input(environ, "cortex-api-key")
    backend_url = get_input(environ, "backend-url")
    console_url = get_input(environ, "console-url") or DEFAULT_CONSOLE_URL
    github_token = environ.get("GITHUB_TOKEN", "")
    github_api_url = environ.get("GITHUB_API_URL") or DEFAULT_GITHUB_API_URL

    missing: list[str] = []
    if not api_key:
        missing.append("cortex-api-key")
    if not backend_url:
        missing.append("backend-url")
    if not github_token:
        missing.append("GITHUB_TOKEN")
    if missing:
        raise ValueError(f"Missing required inputs/env vars: {', '.join(missing)}")

    # 交给 Pydantic 做类型校验（例如 URL 合法性）
    return ActionConfig(
        cortex_api_key=api_key,
        backend_url=backend_url,
        console_url=console_url,
        github_token=github_token,
        github_api_url=github_api_url,
    )


def load_action_context(environ: Mapping[str, str]) -> ActionContext:
    """
    读取 runner 注入的事件上下文。

    - event payload 来自 `GITHUB_EVENT_PATH` 指向的 JSON 文件
    - `GITHUB_REPOSITORY` 形如 `owner/repo`
    """
    required_keys: tuple[str, ...] = (
        "GITHUB_EVENT_NAME",
        "GITHUB_EVENT_PATH",
        "GITHUB_REPOSITORY",
        "GITHUB_ACTOR",
        "GITHUB_SHA",
    )
    missing: list[str] = [key for key in required_keys if key not in environ or not environ[key]]
    if missing:
        raise ValueError(f"Missing required env vars: {', '.join(missing)}")

    owner, sep, repo = environ["GITHUB_REPOSITORY"].partition("/")
    if not sep or not owner or not repo:
        raise ValueError(f"Invalid GITHUB_REPOSITORY: {environ['GITHUB_REPOSITORY']}")

    with open(environ["GITHUB_EVENT_PATH"], encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ValueError(f"Event payload must be a JSON object: {environ['GITHUB_EVENT_PATH']}")

    return ActionContext(
        event_name=environ["GITHUB_EVENT_NAME"],
        payload=payload,
        owner=owner,
        repo=repo,
        actor=environ["GITHUB_ACTOR"],
        sha=environ["GITHUB_SHA"],
    )
