from __future__ import annotations

import logging
from datetime import datetime
from typing import Mapping, Optional

from ..auth.model import Viewer
from ..common.datetime_utils import now_local, parse_optional_datetime
from ..common.validators import optional_int, require_non_empty
from ..core.constants import MIN_POLL_OPTIONS
from ..core.enums import PollStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..permissions import policy
from .model import Poll
from .repository import PollRepository
from .results import build_poll_view
from .rules import (
    build_audience,
    can_view_poll,
    display_custom_text,
    poll_status,
    require_enough_options,
    sanitize_options,
    validate_schedule,
)

logger = logging.getLogger(__name__)

_FROZEN_AFTER_VOTING = ("options", "audience_type", "department_ids", "user_ids")

_CLOSED_MESSAGES = {
    PollStatus.CLOSED: "This poll is closed",
    PollStatus.SCHEDULED: "This poll has not started yet",
    PollStatus.ENDED: "This poll has ended",
}


class PollService:
    def __init__(self, polls: PollRepository, *, clock=now_local):
        self._polls = polls
        self._clock = clock

    def _require(self, poll_id: int) -> Poll:
        poll = self._polls.get_by_id(int(poll_id))
        if not poll:
            raise NotFoundError("Poll not found")
        return poll

    def _require_visible(self, viewer: Viewer, poll_id: int) -> Poll:
        poll = self._require(poll_id)
        if not can_view_poll(poll, viewer):
            raise AuthorizationError("Access denied for this poll")
        return poll

    def _require_owner(self, viewer: Viewer, poll: Poll, action: str) -> None:
        if not policy.can_manage_polls(viewer.level):
            raise AuthorizationError("Only L3 and above can manage polls")
        if poll.created_by != viewer.employee_id and viewer.level < policy.L4:
            raise AuthorizationError(f"You cannot {action} this poll")

    def list_for_viewer(self, viewer: Viewer) -> list[dict]:
        now = self._clock()
        return [build_poll_view(p, viewer, now=now) for p in self._polls.list_all() if can_view_poll(p, viewer)]

    def get_for_viewer(self, viewer: Viewer, poll_id: int) -> dict:
        return build_poll_view(self._require_visible(viewer, poll_id), viewer, now=self._clock())

    def create(self, viewer: Viewer, data: Mapping) -> dict:
        if not policy.can_manage_polls(viewer.level):
            raise AuthorizationError("Only L3 and above can create polls")

        title = require_non_empty(data.get("title"), "Title")
        allow_custom = bool(data.get("allow_custom_option", False))
        options = sanitize_options(data.get("options"))
        require_enough_options(options, allow_custom_option=allow_custom, min_options=MIN_POLL_OPTIONS)

        start = parse_optional_datetime(data.get("start_date"), "Start date")
        end = parse_optional_datetime(data.get("end_date"), "End date")
        validate_schedule(start, end)
        audience = build_audience(data.get("audience_type"), data.get("department_ids"), data.get("user_ids"))

        poll_id = self._polls.create(
            title=title,
            description=str(data.get("description") or "").strip(),
            options=options,
            allow_custom_option=allow_custom,
            audience=audience,
            created_by=viewer.employee_id,
            start_date=start,
            end_date=end,
        )
        logger.info("Poll %s created by %s (audience=%s)", poll_id, viewer.employee_id, audience.type.value)
        return build_poll_view(self._require(poll_id), viewer, now=self._clock())

    def update(self, viewer: Viewer, poll_id: int, data: Mapping) -> dict:
        poll = self._require(poll_id)
        self._require_owner(viewer, poll, "edit")

        has_votes = poll.total_votes > 0
        if has_votes and any(key in data for key in _FROZEN_AFTER_VOTING):
            raise ValidationError("Poll options or audience cannot be changed once voting has started")

        title = require_non_empty(data["title"], "Title") if "title" in data else poll.title
        description = str(data.get("description") or "").strip() if "description" in data else poll.description
        allow_custom = bool(data["allow_custom_option"]) if "allow_custom_option" in data else poll.allow_custom_option
        is_active = bool(data["is_active"]) if "is_active" in data else poll.is_active
        start = parse_optional_datetime(data["start_date"], "Start date") if "start_date" in data else poll.start_date
        end = parse_optional_datetime(data["end_date"], "End date") if "end_date" in data else poll.end_date
        validate_schedule(start, end)

        options = None
        audience = None
        if not has_votes:
            options = sanitize_options(data["options"]) if "options" in data else [o.label for o in poll.options]
            require_enough_options(options, allow_custom_option=allow_custom, min_options=MIN_POLL_OPTIONS)
            audience = build_audience(
                data.get("audience_type", poll.audience.type.value),
                data.get("department_ids", list(poll.audience.department_ids)),
                data.get("user_ids", list(poll.audience.user_ids)),
            )
            if "options" not in data:
                # keep existing option ids so nothing downstream is orphaned
                options = None

        self._polls.update(
            poll.poll_id,
            title=title,
            description=description,
            allow_custom_option=allow_custom,
            is_active=is_active,
            start_date=start,
            end_date=end,
            options=options,
            audience=audience,
        )
        logger.info("Poll %s updated by %s", poll.poll_id, viewer.employee_id)
        return build_poll_view(self._require(poll.poll_id), viewer, now=self._clock())

    def delete(self, viewer: Viewer, poll_id: int) -> None:
        poll = self._require(poll_id)
        self._require_owner(viewer, poll, "delete")
        self._polls.delete_by_id(poll.poll_id)
        logger.info("Poll %s deleted by %s", poll.poll_id, viewer.employee_id)

    def vote(self, viewer: Viewer, poll_id: int, data: Mapping, *, now: Optional[datetime] = None) -> dict:
        poll = self._require(poll_id)
        now = now or self._clock()

        status = poll_status(poll, now)
        if status is not PollStatus.ACTIVE:
            raise ValidationError(_CLOSED_MESSAGES[status])
        if not can_view_poll(poll, viewer):
            raise AuthorizationError("You are not eligible to vote in this poll")

        option_id = optional_int(data.get("option_id"), "Option")
        selected = next((o for o in poll.options if o.option_id == option_id), None) if option_id is not None else None
        custom_text = display_custom_text(data.get("custom_text"))

        if selected is not None:
            self._polls.upsert_vote(poll.poll_id, employee_id=viewer.employee_id, option_id=selected.option_id, custom_text="")
        elif custom_text and poll.allow_custom_option:
            self._polls.upsert_vote(poll.poll_id, employee_id=viewer.employee_id, option_id=None, custom_text=custom_text)
        elif poll.allow_custom_option:
            raise ValidationError("Select an option or enter a custom response")
        else:
            raise ValidationError("Select a valid option to vote")

        logger.info("Employee %s voted in poll %s", viewer.employee_id, poll.poll_id)
        return build_poll_view(self._require(poll.poll_id), viewer, now=now)
