from __future__ import annotations

from datetime import datetime

import pytest

from src.hr_portal.hr_portal.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.hr_portal.hr_portal.polls.service import PollService

from tests.fakes import FIXED_NOW, InMemoryPolls, make_employee, viewer

ADMIN = viewer(make_employee(1, level=3, department_id=1))
OTHER_ADMIN = viewer(make_employee(2, level=3))
OWNER = viewer(make_employee(3, level=4))
STAFF = viewer(make_employee(10, level=0, department_id=5))


@pytest.fixture
def repo():
    return InMemoryPolls()


@pytest.fixture
def svc(repo):
    return PollService(repo, clock=lambda: FIXED_NOW)


def _create(svc, **overrides):
    data = {"title": "Team lunch", "options": ["Pizza", "Sushi"]}
    data.update(overrides)
    return svc.create(ADMIN, data)


def test_staff_cannot_create(svc):
    with pytest.raises(AuthorizationError):
        svc.create(STAFF, {"title": "x", "options": ["a", "b"]})


def test_create_needs_two_options_unless_custom_allowed(svc):
    with pytest.raises(ValidationError):
        _create(svc, options=["Pizza", " pizza "])
    view = _create(svc, options=[], allow_custom_option=True)
    assert view["options"] == []


def test_create_rejects_bad_schedule(svc):
    with pytest.raises(ValidationError):
        _create(svc, start_date="2024-03-20T10:00:00Z", end_date="2024-03-19T10:00:00Z")


def test_vote_with_option_and_revote_replaces(svc, repo):
    poll = _create(svc)
    pizza, sushi = (o["option_id"] for o in poll["options"])

    svc.vote(STAFF, poll["poll_id"], {"option_id": pizza})
    view = svc.vote(STAFF, poll["poll_id"], {"option_id": str(sushi)})

    assert view["viewerVote"] == {"option_id": sushi, "custom_text": ""}
    assert len(repo.get_by_id(poll["poll_id"]).votes) == 1


def test_vote_needs_option_or_allowed_custom_text(svc, repo):
    poll = _create(svc)
    with pytest.raises(ValidationError):
        svc.vote(STAFF, poll["poll_id"], {"custom_text": "Tacos"})
    with pytest.raises(ValidationError):
        svc.vote(STAFF, poll["poll_id"], {"option_id": 99999})
    assert repo.upserts == 0


def test_custom_vote_is_cleaned(svc, repo):
    poll = _create(svc, allow_custom_option=True)
    with pytest.raises(ValidationError):
        svc.vote(STAFF, poll["poll_id"], {"custom_text": "   "})
    svc.vote(STAFF, poll["poll_id"], {"custom_text": "  Tacos   please "})
    assert repo.get_by_id(poll["poll_id"]).votes[0].custom_text == "Tacos please"


def test_vote_refused_outside_schedule(svc):
    scheduled = _create(svc, start_date="2024-04-01T00:00:00")
    ended = _create(svc, end_date="2024-03-01T00:00:00")
    with pytest.raises(ValidationError, match="not started"):
        svc.vote(STAFF, scheduled["poll_id"], {"option_id": scheduled["options"][0]["option_id"]})
    with pytest.raises(ValidationError, match="ended"):
        svc.vote(STAFF, ended["poll_id"], {"option_id": ended["options"][0]["option_id"]})


def test_vote_refused_when_closed(svc):
    poll = _create(svc)
    svc.update(ADMIN, poll["poll_id"], {"is_active": False})
    with pytest.raises(ValidationError, match="closed"):
        svc.vote(STAFF, poll["poll_id"], {"option_id": poll["options"][0]["option_id"]})


def test_audience_enforced_on_get_and_vote(svc):
    poll = _create(svc, audience_type="department", department_ids=[1])
    with pytest.raises(AuthorizationError):
        svc.get_for_viewer(STAFF, poll["poll_id"])
    with pytest.raises(AuthorizationError):
        svc.vote(STAFF, poll["poll_id"], {"option_id": poll["options"][0]["option_id"]})
    assert [p["poll_id"] for p in svc.list_for_viewer(STAFF)] == []
    assert [p["poll_id"] for p in svc.list_for_viewer(OWNER)] == [poll["poll_id"]]


def test_options_and_audience_frozen_after_first_vote(svc):
    poll = _create(svc)
    svc.vote(STAFF, poll["poll_id"], {"option_id": poll["options"][0]["option_id"]})

    with pytest.raises(ValidationError):
        svc.update(ADMIN, poll["poll_id"], {"options": ["A", "B"]})
    with pytest.raises(ValidationError):
        svc.update(ADMIN, poll["poll_id"], {"audience_type": "custom", "user_ids": [10]})

    view = svc.update(ADMIN, poll["poll_id"], {"title": "Team dinner", "allow_custom_option": True, "end_date": "2024-03-30T18:00:00"})
    assert view["title"] == "Team dinner"
    assert view["allow_custom_option"] is True
    assert view["end_date"] == datetime(2024, 3, 30, 18).isoformat()


def test_options_editable_before_votes(svc):
    poll = _create(svc)
    view = svc.update(ADMIN, poll["poll_id"], {"options": ["Curry", "Salad", "curry"]})
    assert [o["label"] for o in view["options"]] == ["Curry", "Salad"]


def test_only_creator_or_l4_can_edit_or_delete(svc, repo):
    poll = _create(svc)
    with pytest.raises(AuthorizationError):
        svc.update(OTHER_ADMIN, poll["poll_id"], {"title": "Mine now"})
    with pytest.raises(AuthorizationError):
        svc.delete(OTHER_ADMIN, poll["poll_id"])
    svc.delete(OWNER, poll["poll_id"])
    with pytest.raises(NotFoundError):
        svc.get_for_viewer(OWNER, poll["poll_id"])
