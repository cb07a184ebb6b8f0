from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import AudienceType


@dataclass(frozen=True)
class PollOption:
    option_id: int
    label: str
    sort_order: int = 0


@dataclass(frozen=True)
class PollVote:
    """One row per voter; exactly one of ``option_id`` / ``custom_text`` is set."""

    employee_id: int
    option_id: Optional[int] = None
    custom_text: str = ""
    voted_at: Optional[datetime] = None
    voter_first_name: str = ""
    voter_last_name: str = ""
    voter_code: str = ""


@dataclass(frozen=True)
class Audience:
    type: AudienceType = AudienceType.ALL
    department_ids: tuple[int, ...] = field(default_factory=tuple)
    user_ids: tuple[int, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Poll:
    poll_id: int
    title: str
    created_by: int
    description: str = ""
    options: tuple[PollOption, ...] = field(default_factory=tuple)
    allow_custom_option: bool = False
    audience: Audience = field(default_factory=Audience)
    is_active: bool = True
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    votes: tuple[PollVote, ...] = field(default_factory=tuple)
    creator_name: Optional[str] = None

    @property
    def total_votes(self) -> int:
        return len(self.votes)
