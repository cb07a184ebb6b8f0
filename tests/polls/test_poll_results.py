from __future__ import annotations

from datetime import datetime

from src.hr_portal.hr_portal.auth.model import Viewer
from src.hr_portal.hr_portal.core.enums import Role
from src.hr_portal.hr_portal.polls.model import Poll, PollOption, PollVote
from src.hr_portal.hr_portal.polls.results import build_poll_view, percentage

NOW = datetime(2024, 3, 13, 9, 0)
CREATOR = 100


def _viewer(employee_id, level=0) -> Viewer:
    return Viewer(employee_id=employee_id, full_name="V", role=Role.EMPLOYEE, management_level=level)


def _poll(votes=()) -> Poll:
    return Poll(
        poll_id=1,
        title="Offsite",
        created_by=CREATOR,
        allow_custom_option=True,
        options=(PollOption(option_id=10, label="Beach"), PollOption(option_id=11, label="Mountains")),
        votes=tuple(votes),
    )


VOTES = [
    PollVote(employee_id=1, option_id=10),
    PollVote(employee_id=2, option_id=10),
    PollVote(employee_id=3, option_id=11),
    PollVote(employee_id=4, custom_text="City  trip", voter_first_name="Dee"),
    PollVote(employee_id=5, custom_text="city trip"),
    PollVote(employee_id=6, custom_text="Lake"),
]


def test_percentage_rounds_half_up_and_handles_zero():
    assert percentage(0, 0) == 0
    assert percentage(1, 8) == 13
    assert percentage(1, 3) == 33
    assert percentage(2, 3) == 67


def test_creator_sees_counts_and_grouped_custom_answers():
    view = build_poll_view(_poll(VOTES), _viewer(CREATOR, level=3), now=NOW)

    assert view["canSeeResults"] is True
    assert view["totalVotes"] == 6
    assert [(o["label"], o["count"], o["percentage"]) for o in view["options"]] == [
        ("Beach", 2, 33),
        ("Mountains", 1, 17),
    ]
    assert view["customResponses"] == [{"text": "City trip", "count": 2}, {"text": "Lake", "count": 1}]
    assert view["customVotesCount"] == 3
    assert "votes" not in view


def test_counts_add_up_to_total():
    view = build_poll_view(_poll(VOTES), _viewer(CREATOR), now=NOW)
    options_total = sum(o["count"] for o in view["options"])
    custom_total = sum(g["count"] for g in view["customResponses"])
    assert options_total + custom_total == view["totalVotes"]


def test_l4_sees_voters():
    view = build_poll_view(_poll(VOTES), _viewer(999, level=4), now=NOW)
    group = view["customResponses"][0]
    assert [v["employee_id"] for v in group["voters"]] == [4, 5]
    assert group["voters"][0]["first_name"] == "Dee"
    assert len(view["votes"]) == 6


def test_other_viewers_see_no_results_but_their_own_vote():
    view = build_poll_view(_poll(VOTES), _viewer(3, level=3), now=NOW)
    assert view["canSeeResults"] is False
    assert view["totalVotes"] is None
    assert all(o["count"] is None for o in view["options"])
    assert view["customResponses"] == []
    assert view["viewerVote"] == {"option_id": 11, "custom_text": ""}


def test_no_votes_gives_zero_percentages():
    view = build_poll_view(_poll(), _viewer(CREATOR), now=NOW)
    assert [o["percentage"] for o in view["options"]] == [0, 0]
    assert view["viewerVote"] is None
    assert view["status"] == "active"
    assert view["statusLabel"] == "Active"
