"""
GitHub -> Scan domain adapter。

职责：
- 将 GitHub API 的 schema 投影为 backend 需要的领域对象
- 只做数据归一化，不做业务决策
"""

from __future__ import annotations

from cortex_review.github.schemas import GitHubOrganization
from cortex_review.github.schemas import GitHubPullRequestFile
from cortex_review.github.schemas import GitHubRepository
from cortex_review.github.schemas import GitHubUser
from cortex_review.scan.models import ActorProfile
from cortex_review.scan.models import ChangedFile
from cortex_review.scan.models import IndividualOwner
from cortex_review.scan.models import OrganizationOwner
from cortex_review.scan.models import RepositoryInfo


def build_changed_files(files: list[GitHubPullRequestFile]) -> list[ChangedFile]:
    # 二进制文件没有 patch：透传为空字符串，不报错
    return [
        ChangedFile(
            filename=f.filename,
            status=f.status,
            additions=f.additions,
            deletions=f.deletions,
            patch=f.patch or "",
        )
        for f in files
    ]


def build_actor_profile(user: GitHubUser) -> ActorProfile:
    return ActorProfile(
        login=user.login,
        name=user.name,
        email=user.email,
        avatar_url=user.avatar_url,
        profile_url=user.html_url,
        company=user.company,
    )


def build_repository_info(repo: GitHubRepository) -> RepositoryInfo:
    return RepositoryInfo(
        name=repo.name,
        full_name=repo.full_name,
        description=repo.description,
        private=repo.private,
        default_branch=repo.default_branch,
        language=repo.language,
        stars=repo.stargazers_count,
        forks=repo.forks_count,
        created_at=repo.created_at,
    )


def build_organization_owner(org: GitHubOrganization) -> OrganizationOwner:
    return OrganizationOwner(
        login=org.login,
        name=org.name,
        email=org.email,
        avatar_url=org.avatar_url,
        profile_url=org.html_url,
        description=org.description,
        location=org.location,
        blog=org.blog,
        public_repos=org.public_repos,
        created_at=org.created_at,
    )


def build_individual_owner(user: GitHubUser) -> IndividualOwner:
    return IndividualOwner(
        login=user.login,
        name=user.name,
        email=user.email,
        avatar_url=user.avatar_url,
        profile_url=user.html_url,
        company=user.company,
        blog=user.blog,
        location=user.location,
        bio=user.bio,
        public_repos=user.public_repos,
        created_at=user.created_at,
    )
