from __future__ import annotations

import base64
import gzip
import json

from cortex_review.scan.models import ChangedFile
from cortex_review.scan.models import ScanIssue
from cortex_review.scan.sarif import build_sarif_report
from cortex_review.scan.sarif import encode_sarif_report
from cortex_review.scan.sarif import sarif_level


def _issues() -> list[ScanIssue]:
    return [
        ScanIssue(rule_id="R1", message="sql injection", severity="critical", filename="db.py", line=10),
        ScanIssue(rule_id="R2", message="unused var", severity="warning", filename="a.js", line=5),
        ScanIssue(rule_id="R3", message="consider a helper", severity="suggestion"),
    ]


def test_report_envelope() -> None:
    report = build_sarif_report(issues=_issues(), changed_files=[])
    assert report["version"] == "2.1.0"
    runs = report["runs"]
    assert len(runs) == 1
    assert runs[0]["tool"] == {"driver": {"name": "Cortex Code Review", "rules": []}}


def _files(*names: str) -> list[ChangedFile]:
    return [ChangedFile(filename=name, status="modified", additions=1, deletions=0) for name in names]


def test_one_result_per_issue_in_order() -> None:
    results = build_sarif_report(issues=_issues(), changed_files=_files("db.py", "a.js"))["runs"][0]["results"]
    assert [r["ruleId"] for r in results] == ["R1", "R2", "R3"]
    assert [r["level"] for r in results] == ["error", "warning", "note"]
    assert results[1]["message"] == {"text": "unused var"}
    assert results[1]["locations"] == [
        {"physicalLocation": {"artifactLocation": {"uri": "a.js"}, "region": {"startLine": 5}}}
    ]
    assert results[1]["properties"] == {"severity": "warning"}


def test_issue_without_filename_uses_first_changed_file() -> None:
    results = build_sarif_report(issues=_issues(), changed_files=_files("db.py", "a.js"))["runs"][0]["results"]
    assert results[2]["locations"] == [
        {"physicalLocation": {"artifactLocation": {"uri": "db.py"}, "region": {"startLine": 1}}}
    ]
    assert results[2]["properties"] == {"severity": "suggestion", "locationFallback": True}
    assert all(r["locations"] for r in results)


def test_issue_without_any_location_is_dropped() -> None:
    results = build_sarif_report(issues=_issues(), changed_files=[])["runs"][0]["results"]
    assert [r["ruleId"] for r in results] == ["R1", "R2"]


def test_artifacts_follow_changed_file_order() -> None:
    files = _files("z.py", "a.py", "m.py")
    artifacts = build_sarif_report(issues=[], changed_files=files)["runs"][0]["artifacts"]
    assert [a["location"]["uri"] for a in artifacts] == ["z.py", "a.py", "m.py"]


def test_unknown_severity_maps_to_warning() -> None:
    assert sarif_level("Blocker") == "warning"
    assert sarif_level(" HIGH ") == "error"


def test_encoded_report_is_gzipped_base64_json() -> None:
    report = build_sarif_report(issues=_issues(), changed_files=[])
    decoded = json.loads(gzip.decompress(base64.b64decode(encode_sarif_report(report))))
    assert decoded == report
