"""
GitHub 事件分类（Event Classifier）。

职责：
- 判断 event + action 是否需要触发扫描
- 解析 payload -> Pydantic schema（类型安全）
- 产出 `TriggerEvent`；不关心的事件返回 None（skip 不是错误）

触发规则：
- pull_request/opened
- pull_request/closed 且 merged=true（closed 未合并不触发）
- issue_comment/created，评论包含 `/cortex code review`（忽略大小写与首尾空白），且评论在 PR 上
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from cortex_review.github.schemas import GitHubIssueCommentEvent
from cortex_review.github.schemas import GitHubPullRequestEvent
from cortex_review.scan.models import TriggerEvent

logger = logging.getLogger(__name__)

TRIGGER_PHRASE = "/cortex code review"


def comment_requests_review(body: str | None) -> bool:
    if not body:
        return False
    return TRIGGER_PHRASE in body.strip().lower()


def classify_event(event_name: str, payload: Mapping[str, object]) -> TriggerEvent | None:
    action = payload.get("action")
    logger.info(f"Event: {event_name}, Action: {action}")

    if event_name == "pull_request" and action in ("opened", "closed"):
        event = GitHubPullRequestEvent.model_validate(dict(payload))
        pr = event.pull_request
        if action == "opened":
            return TriggerEvent(trigger_type="pr_opened", pr_number=pr.number, branch=pr.head.ref)
        if pr.merged is True:
            return TriggerEvent(trigger_type="pr_merged", pr_number=pr.number, branch=pr.head.ref)
        logger.info("Pull request closed without merge. Skipping.")
        return None

    if event_name == "issue_comment" and action == "created":
        comment_event = GitHubIssueCommentEvent.model_validate(dict(payload))
        if not comment_requests_review(comment_event.comment.body):
            logger.info("Comment does not match trigger. Skipping.")
            return None
        if comment_event.issue.pull_request is None:
            logger.info("Comment is not on a PR. Skipping.")
            return None
        # issue_comment 不带 head ref，branch 由 Context Fetcher 补全
        return TriggerEvent(trigger_type="manual_comment", pr_number=comment_event.issue.number)

    logger.info("Event not handled. Skipping.")
    return None
