"""Moderation audit trail helpers."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.models.moderation_action import ModerationActions


def record_moderation_action(
    db: AsyncSession,
    actor_id: int,
    action_type: str,
    *,
    fanwork_id: int | None = None,
    comment_id: int | None = None,
    target_user_id: int | None = None,
    report_id: int | None = None,
    details: dict[str, Any] | None = None,
) -> ModerationActions:
    """
    Add an audit row to the session. The caller commits.

    For deletions pass the id in `details` and leave the reference None,
    since the referenced row will not exist.
    """
    action = ModerationActions(
        actor_id=actor_id,
        action_type=action_type,
        fanwork_id=fanwork_id,
        comment_id=comment_id,
        target_user_id=target_user_id,
        report_id=report_id,
        details=details or {},
    )
    db.add(action)
    return action
