from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..auth.model import Viewer
from ..permissions.policy import L4, can_see_poll_results
from .model import Poll, PollVote
from .rules import can_vote_now, display_custom_text, normalize_custom_text, poll_status


def percentage(count: int, total: int) -> int:
    """Whole-number share, rounding halves up; 0 when nobody voted."""
    if total <= 0:
        return 0
    return int(count * 100 / total + 0.5)


def _voter(vote: PollVote) -> dict:
    return {
        "employee_id": vote.employee_id,
        "first_name": vote.voter_first_name,
        "last_name": vote.voter_last_name,
        "employee_code": vote.voter_code,
    }


def group_custom_responses(votes, *, include_voters: bool) -> list[dict]:
    """Group custom answers case-insensitively, keeping the first voter's wording."""
    groups: dict[str, dict] = {}
    for vote in votes:
        if vote.option_id is not None or not vote.custom_text:
            continue
        key = normalize_custom_text(vote.custom_text)
        group = groups.get(key)
        if group is None:
            group = {"text": display_custom_text(vote.custom_text), "count": 0}
            if include_voters:
                group["voters"] = []
            groups[key] = group
        group["count"] += 1
        if include_voters:
            group["voters"].append(_voter(vote))
    return list(groups.values())


def _viewer_vote(poll: Poll, viewer: Viewer) -> Optional[dict]:
    for vote in poll.votes:
        if vote.employee_id == viewer.employee_id:
            return {"option_id": vote.option_id, "custom_text": vote.custom_text or ""}
    return None


def build_poll_view(poll: Poll, viewer: Viewer, *, now: datetime) -> dict:
    """Poll as seen by ``viewer``: results only for the creator and L4."""
    can_see = can_see_poll_results(viewer.level, viewer.employee_id, poll.created_by)
    is_l4 = viewer.level >= L4
    total = poll.total_votes
    status = poll_status(poll, now)

    options = []
    for option in poll.options:
        if can_see:
            count = sum(1 for v in poll.votes if v.option_id == option.option_id)
            options.append({
                "option_id": option.option_id,
                "label": option.label,
                "count": count,
                "percentage": percentage(count, total),
            })
        else:
            options.append({"option_id": option.option_id, "label": option.label, "count": None, "percentage": None})

    custom_votes = [v for v in poll.votes if v.option_id is None and v.custom_text]

    view = {
        "poll_id": poll.poll_id,
        "title": poll.title,
        "description": poll.description,
        "options": options,
        "allow_custom_option": poll.allow_custom_option,
        "audience": {
            "type": poll.audience.type.value,
            "department_ids": list(poll.audience.department_ids),
            "user_ids": list(poll.audience.user_ids),
        },
        "created_by": poll.created_by,
        "creator_name": poll.creator_name,
        "is_active": poll.is_active,
        "start_date": poll.start_date.isoformat() if poll.start_date else None,
        "end_date": poll.end_date.isoformat() if poll.end_date else None,
        "created_at": poll.created_at.isoformat() if poll.created_at else None,
        "status": status.value,
        "statusLabel": status.label,
        "canVote": can_vote_now(poll, now),
        "canSeeResults": can_see,
        "totalVotes": total if can_see else None,
        "customVotesCount": len(custom_votes) if can_see else None,
        "customResponses": group_custom_responses(custom_votes, include_voters=is_l4) if can_see else [],
        "viewerVote": _viewer_vote(poll, viewer),
    }
    if is_l4:
        view["votes"] = [
            dict(_voter(v), option_id=v.option_id, custom_text=v.custom_text, voted_at=v.voted_at.isoformat() if v.voted_at else None)
            for v in poll.votes
        ]
    return view
