from __future__ import annotations

import asyncio

import pytest
from conftest import API
from conftest import FakeCortexAPI
from conftest import pull_request_file

from cortex_review.github.client import GitHubAPIError
from cortex_review.github.client import GitHubClient
from cortex_review.github.client import GitHubNotFoundError


async def _list_files(fake_api: FakeCortexAPI) -> list[str]:
    async with fake_api.client() as http_client:
        client = GitHubClient(api_base_url=API, token="t", http_client=http_client)
        files = await client.list_pull_request_files(owner="acme", repo="widgets", pull_number=7)
    return [f.filename for f in files]


def test_list_pull_request_files_flattens_pages_in_order(fake_api: FakeCortexAPI) -> None:
    fake_api.files = [pull_request_file(f"src/file_{i:03d}.py") for i in range(150)]
    names = asyncio.run(_list_files(fake_api))
    assert names == [f"src/file_{i:03d}.py" for i in range(150)]
    assert len(fake_api.github_requests("/files")) == 2


def test_list_pull_request_files_keeps_missing_patch(fake_api: FakeCortexAPI) -> None:
    fake_api.files = [pull_request_file("logo.png", patch=None)]

    async def _run() -> None:
        async with fake_api.client() as http_client:
            client = GitHubClient(api_base_url=API, token="t", http_client=http_client)
            files = await client.list_pull_request_files(owner="acme", repo="widgets", pull_number=7)
        assert files[0].patch is None

    asyncio.run(_run())


def test_requests_carry_github_headers(fake_api: FakeCortexAPI) -> None:
    async def _run() -> None:
        async with fake_api.client() as http_client:
            client = GitHubClient(api_base_url=f"{API}/", token="secret", http_client=http_client)
            await client.get_repository(owner="acme", repo="widgets")

    asyncio.run(_run())
    request = fake_api.requests[0]
    assert str(request.url) == f"{API}/repos/acme/widgets"
    assert request.headers["Authorization"] == "Bearer secret"
    assert request.headers["Accept"] == "application/vnd.github+json"


def test_not_found_raises_dedicated_error(fake_api: FakeCortexAPI) -> None:
    async def _run() -> None:
        async with fake_api.client() as http_client:
            client = GitHubClient(api_base_url=API, token="t", http_client=http_client)
            await client.get_organization(org="nobody")

    with pytest.raises(GitHubNotFoundError) as exc_info:
        asyncio.run(_run())
    assert exc_info.value.status_code == 404


def test_server_error_is_not_a_not_found_error(fake_api: FakeCortexAPI) -> None:
    fake_api.org_status = 502

    async def _run() -> None:
        async with fake_api.client() as http_client:
            client = GitHubClient(api_base_url=API, token="t", http_client=http_client)
            await client.get_organization(org="acme")

    with pytest.raises(GitHubAPIError) as exc_info:
        asyncio.run(_run())
    assert not isinstance(exc_info.value, GitHubNotFoundError)
    assert "502" in str(exc_info.value)


def test_upload_sarif_posts_commit_and_ref(fake_api: FakeCortexAPI) -> None:
    async def _run() -> str | None:
        async with fake_api.client() as http_client:
            client = GitHubClient(api_base_url=API, token="t", http_client=http_client)
            receipt = await client.upload_sarif(
                owner="acme", repo="widgets", commit_sha="deadbeef", ref="refs/heads/main", sarif="H4sI"
            )
        return receipt.id

    assert asyncio.run(_run()) == "upload-1"
    assert fake_api.sarif_uploads == [{"commit_sha": "deadbeef", "ref": "refs/heads/main", "sarif": "H4sI"}]
