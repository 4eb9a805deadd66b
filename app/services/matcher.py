"""Watch rule evaluation for decoded build notifications."""

import re

import structlog

from app.config import WatchConfig
from app.schemas.notifications import BuildNotification

logger = structlog.get_logger()


def _full_match(pattern: str, value: str | None) -> bool:
    """Return True if *value* is present and matches *pattern* in its entirety."""
    return value is not None and re.fullmatch(pattern, value) is not None


def should_publish(config: WatchConfig, notification: BuildNotification) -> bool:
    """Decide whether a notification should update the badge.

    The repository name must match first.  When a tag pattern is configured
    only the tag is checked, so a tag-configured watch never falls back to
    the branch.  Otherwise the branch must match.
    """
    if not _full_match(config.repo_name_regex, notification.repo_name):
        logger.info(
            "watch_decision",
            decision=False,
            reason="repo_mismatch",
            repo_name=notification.repo_name,
            repo_name_regex=config.repo_name_regex,
        )
        return False

    if config.tag_name_regex is not None:
        decision = _full_match(config.tag_name_regex, notification.tag_name)
        logger.info(
            "watch_decision",
            decision=decision,
            reason="tag_match" if decision else "tag_mismatch",
            tag_name=notification.tag_name,
            tag_name_regex=config.tag_name_regex,
        )
        return decision

    decision = _full_match(config.branch_name_regex, notification.branch_name)
    logger.info(
        "watch_decision",
        decision=decision,
        reason="branch_match" if decision else "branch_mismatch",
        branch_name=notification.branch_name,
        branch_name_regex=config.branch_name_regex,
    )
    return decision
