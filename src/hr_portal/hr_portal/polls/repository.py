from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Audience, Poll


class PollRepository(Protocol):
    """Polls are loaded whole: options, audience and votes included."""

    def list_all(self) -> Sequence[Poll]:
        raise NotImplementedError

    def get_by_id(self, poll_id: int) -> Optional[Poll]:
        raise NotImplementedError

    def create(
        self,
        *,
        title: str,
        description: str,
        options: Sequence[str],
        allow_custom_option: bool,
        audience: Audience,
        created_by: int,
        start_date: Optional[datetime],
        end_date: Optional[datetime],
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        poll_id: int,
        *,
        title: str,
        description: str,
        allow_custom_option: bool,
        is_active: bool,
        start_date: Optional[datetime],
        end_date: Optional[datetime],
        options: Optional[Sequence[str]] = None,
        audience: Optional[Audience] = None,
    ) -> bool:
        """``options`` / ``audience`` of ``None`` leave them unchanged."""

        raise NotImplementedError

    def delete_by_id(self, poll_id: int) -> bool:
        raise NotImplementedError

    def upsert_vote(self, poll_id: int, *, employee_id: int, option_id: Optional[int], custom_text: str) -> None:
        """Record the voter's choice, replacing any earlier vote in one statement."""

        raise NotImplementedError
