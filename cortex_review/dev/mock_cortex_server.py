"""
本地 Mock Cortex backend（只覆盖 action 用到的一个接口）。

用途：
- 在没有真实 backend 的情况下，本地跑通：
  event -> GitHub context -> POST scan -> job summary / SARIF

启动：
  python -m cortex_review.dev.mock_cortex_server
然后把 action 的 `backend-url` 指向 http://127.0.0.1:9003/api/scan
"""

from __future__ import annotations

import uuid

import uvicorn
from fastapi import FastAPI

from cortex_review.scan.models import ScanIssue
from cortex_review.scan.models import ScanRequest
from cortex_review.scan.models import ScanResult

app = FastAPI(title="Mock Cortex Backend", version="0.1.0")

_scans: list[dict[str, object]] = []


def _first_added_line(patch: str) -> int | None:
    new_line = 0
    for line in patch.splitlines():
        if line.startswith("@@"):
            # @@ -a,b +c,d @@
            new_line = int(line.split(" ")[2].split(",")[0].lstrip("+"))
            continue
        if line.startswith("+") and not line.startswith("+++"):
            return new_line
        if not line.startswith("-"):
            new_line += 1
    return None


def build_canned_result(request: ScanRequest) -> ScanResult:
    """每个带 patch 的文件给一条 suggestion，其余文件计为 passed。"""
    issues: list[ScanIssue] = []
    for f in request.changed_files:
        if not f.patch:
            continue
        issues.append(
            ScanIssue(
                rule_id="MOCK001",
                message=f"Mock review note for {f.filename}",
                severity="suggestion",
                filename=f.filename,
                line=_first_added_line(f.patch),
            )
        )
    return ScanResult(
        scan_id=uuid.uuid4().hex[:12],
        suggestions=len(issues),
        passed=len(request.changed_files) - len(issues),
        issues=issues,
    )


@app.post("/api/scan")
async def create_scan(req: ScanRequest) -> ScanResult:
    result = build_canned_result(req)
    recorded = req.model_dump(mode="json")
    recorded["github_token"] = "***"
    recorded["cortex_api_key"] = "***"
    _scans.append({"scan_id": result.scan_id, "request": recorded})
    return result


@app.get("/__debug__/scans")
async def debug_scans() -> dict[str, object]:
    return {"count": len(_scans), "scans": _scans}


def main() -> None:
    uvicorn.run(app, host="127.0.0.1", port=9003)


if __name__ == "__main__":
    main()
