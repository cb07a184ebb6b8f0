"""Poll lifecycle, audience and input rules.

``poll_status`` is the only place that decides whether a poll is open; the
vote check and the status label are both derived from it.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable, Optional

from ..auth.model import Viewer
from ..common.validators import unique_ids
from ..core.enums import AudienceType, PollStatus
from ..core.exceptions import ValidationError
from ..permissions.policy import L4
from .model import Audience, Poll

_WHITESPACE = re.compile(r"\s+")


def poll_status(poll: Poll, now: datetime) -> PollStatus:
    if not poll.is_active:
        return PollStatus.CLOSED
    if poll.start_date is not None and now < poll.start_date:
        return PollStatus.SCHEDULED
    if poll.end_date is not None and now > poll.end_date:
        return PollStatus.ENDED
    return PollStatus.ACTIVE


def can_vote_now(poll: Poll, now: datetime) -> bool:
    return poll_status(poll, now) is PollStatus.ACTIVE


def display_custom_text(text) -> str:
    """Trimmed, inner whitespace collapsed; casing kept."""
    return _WHITESPACE.sub(" ", str(text or "").strip())


def normalize_custom_text(text) -> str:
    """Grouping key for custom answers."""
    return display_custom_text(text).lower()


def sanitize_options(options: Optional[Iterable]) -> list[str]:
    """Trim labels, drop blanks and case-insensitive duplicates, keep order."""
    if options is None:
        return []
    seen: set[str] = set()
    out: list[str] = []
    for option in options:
        if isinstance(option, dict):
            option = option.get("label")
        label = str(option or "").strip()
        if label and label.lower() not in seen:
            seen.add(label.lower())
            out.append(label)
    return out


def require_enough_options(labels: list[str], *, allow_custom_option: bool, min_options: int) -> None:
    if not allow_custom_option and len(labels) < min_options:
        raise ValidationError(f"Please provide at least {min_options} options for the poll")


def validate_schedule(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start is not None and end is not None and start >= end:
        raise ValidationError("End date must be after start date")


def build_audience(audience_type, department_ids=None, user_ids=None) -> Audience:
    try:
        kind = AudienceType(audience_type or AudienceType.ALL.value)
    except ValueError:
        raise ValidationError("Invalid audience type. Must be one of: all, department, custom")

    if kind == AudienceType.DEPARTMENT:
        ids = unique_ids(department_ids)
        if not ids:
            raise ValidationError("Select at least one department")
        return Audience(type=kind, department_ids=tuple(ids))
    if kind == AudienceType.CUSTOM:
        ids = unique_ids(user_ids)
        if not ids:
            raise ValidationError("Select at least one voter")
        return Audience(type=kind, user_ids=tuple(ids))
    return Audience(type=AudienceType.ALL)


def can_view_poll(poll: Poll, viewer: Viewer) -> bool:
    if viewer.level >= L4 or poll.created_by == viewer.employee_id:
        return True

    audience = poll.audience
    if audience.type == AudienceType.ALL:
        return True
    if audience.type == AudienceType.DEPARTMENT:
        return viewer.department_id is not None and int(viewer.department_id) in audience.department_ids
    if audience.type == AudienceType.CUSTOM:
        return viewer.employee_id in audience.user_ids
    return False
