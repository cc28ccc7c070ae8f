from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

API = "https://api.github.com"
BACKEND_URL = "https://cortex.example.com/api/scan"


def pull_request_file(filename: str, patch: str | None = "@@ -1 +1 @@\n-a\n+b") -> dict[str, object]:
    item: dict[str, object] = {"filename": filename, "status": "modified", "additions": 1, "deletions": 1}
    if patch is not None:
        item["patch"] = patch
    return item


class FakeCortexAPI:
    """GitHub REST + Cortex backend 的内存版，挂在 httpx.MockTransport 上。"""

    def __init__(self) -> None:
        self.files: list[dict[str, object]] = [pull_request_file("a.js")]
        self.pull_request: dict[str, object] = {"number": 7, "head": {"ref": "feature/x", "sha": "abc"}, "merged": False}
        self.users: dict[str, dict[str, object]] = {
            "octocat": {
                "login": "octocat",
                "name": "The Octocat",
                "email": None,
                "avatar_url": "https://avatars.example.com/octocat",
                "html_url": "https://github.com/octocat",
                "company": "@github",
                "blog": "https://github.blog",
                "location": "San Francisco",
                "bio": None,
                "public_repos": 8,
                "created_at": "2011-01-25T18:44:36Z",
            }
        }
        self.orgs: dict[str, dict[str, object]] = {
            "acme": {
                "login": "acme",
                "name": "Acme Inc",
                "email": "dev@acme.example.com",
                "avatar_url": "https://avatars.example.com/acme",
                "html_url": "https://github.com/acme",
                "description": "Roadrunner traps",
                "location": "Arizona",
                "blog": "https://acme.example.com",
                "public_repos": 42,
                "created_at": "2015-03-01T00:00:00Z",
            }
        }
        self.org_status: int | None = None
        self.repository: dict[str, object] = {
            "name": "widgets",
            "full_name": "acme/widgets",
            "description": "Widget factory",
            "private": False,
            "default_branch": "main",
            "language": "JavaScript",
            "stargazers_count": 12,
            "forks_count": 3,
            "created_at": "2020-01-01T00:00:00Z",
        }
        self.backend_status = 200
        self.backend_body: object = {"scan_id": "s-1", "critical": 0, "warnings": 0, "suggestions": 0, "passed": 1}
        self.sarif_status = 202
        self.backend_requests: list[dict[str, object]] = []
        self.sarif_uploads: list[dict[str, object]] = []
        self.requests: list[httpx.Request] = []

    def _get(self, path: str, params: httpx.QueryParams) -> httpx.Response:
        parts = path.strip("/").split("/")
        if parts[0] == "users" and len(parts) == 2:
            user = self.users.get(parts[1])
            return httpx.Response(200, json=user) if user else httpx.Response(404, json={"message": "Not Found"})
        if parts[0] == "orgs" and len(parts) == 2:
            if self.org_status is not None:
                return httpx.Response(self.org_status, json={"message": "boom"})
            org = self.orgs.get(parts[1])
            return httpx.Response(200, json=org) if org else httpx.Response(404, json={"message": "Not Found"})
        if parts[0] == "repos" and len(parts) == 3:
            return httpx.Response(200, json=self.repository)
        if parts[0] == "repos" and len(parts) == 5 and parts[3] == "pulls":
            return httpx.Response(200, json=self.pull_request)
        if parts[0] == "repos" and len(parts) == 6 and parts[5] == "files":
            per_page = int(params.get("per_page", "30"))
            page = int(params.get("page", "1"))
            start = (page - 1) * per_page
            return httpx.Response(200, json=self.files[start : start + per_page])
        return httpx.Response(404, json={"message": "Not Found"})

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url.startswith(BACKEND_URL):
            self.backend_requests.append(json.loads(request.content))
            if isinstance(self.backend_body, str):
                return httpx.Response(self.backend_status, text=self.backend_body)
            return httpx.Response(self.backend_status, json=self.backend_body)
        path = request.url.path
        if request.method == "POST" and path.endswith("/code-scanning/sarifs"):
            self.sarif_uploads.append(json.loads(request.content))
            return httpx.Response(self.sarif_status, json={"id": "upload-1", "url": f"{API}{path}/upload-1"})
        return self._get(path, request.url.params)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport())

    def github_requests(self, suffix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(suffix)]


@pytest.fixture
def fake_api() -> FakeCortexAPI:
    return FakeCortexAPI()


@pytest.fixture
def action_env(tmp_path: Path):
    """写好 event payload 文件，返回构造 runner 环境变量的函数。"""

    def _build(event_name: str, payload: dict[str, object]) -> dict[str, str]:
        event_path = tmp_path / "event.json"
        event_path.write_text(json.dumps(payload), encoding="utf-8")
        return {
            "GITHUB_EVENT_NAME": event_name,
            "GITHUB_EVENT_PATH": str(event_path),
            "GITHUB_REPOSITORY": "acme/widgets",
            "GITHUB_ACTOR": "octocat",
            "GITHUB_SHA": "0123456789abcdef",
            "GITHUB_STEP_SUMMARY": str(tmp_path / "summary.md"),
            "GITHUB_TOKEN": "ghs_token",
            "INPUT_CORTEX-API-KEY": "ctx_key",
            "INPUT_BACKEND-URL": BACKEND_URL,
        }

    return _build
