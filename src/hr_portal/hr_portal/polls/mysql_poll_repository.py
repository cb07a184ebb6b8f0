from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

from ..core.enums import AudienceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import Audience, Poll, PollOption, PollVote
from .repository import PollRepository

_SELECT = """
    SELECT p.poll_id, p.title, p.description, p.allow_custom_option, p.audience_type,
           p.created_by, p.is_active, p.start_date, p.end_date, p.created_at,
           CONCAT(e.first_name, ' ', e.last_name) AS creator_name
    FROM polls p
    LEFT JOIN employees e ON e.employee_id = p.created_by
"""


class MySQLPollRepository(PollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _hydrate(self, cur, rows: list[dict]) -> list[Poll]:
        if not rows:
            return []
        ids = [int(r["poll_id"]) for r in rows]
        marks = in_clause(ids)

        options = defaultdict(list)
        cur.execute(
            f"SELECT option_id, poll_id, label, sort_order FROM poll_options WHERE poll_id IN ({marks}) ORDER BY sort_order, option_id",
            tuple(ids),
        )
        for r in fetchall(cur):
            options[int(r["poll_id"])].append(
                PollOption(option_id=int(r["option_id"]), label=r["label"], sort_order=int(r["sort_order"] or 0))
            )

        departments = defaultdict(list)
        cur.execute(f"SELECT poll_id, department_id FROM poll_audience_departments WHERE poll_id IN ({marks})", tuple(ids))
        for r in fetchall(cur):
            departments[int(r["poll_id"])].append(int(r["department_id"]))

        users = defaultdict(list)
        cur.execute(f"SELECT poll_id, employee_id FROM poll_audience_users WHERE poll_id IN ({marks})", tuple(ids))
        for r in fetchall(cur):
            users[int(r["poll_id"])].append(int(r["employee_id"]))

        votes = defaultdict(list)
        cur.execute(
            f"""
            SELECT v.poll_id, v.employee_id, v.option_id, v.custom_text, v.voted_at,
                   e.first_name, e.last_name, e.employee_code
            FROM poll_votes v
            LEFT JOIN employees e ON e.employee_id = v.employee_id
            WHERE v.poll_id IN ({marks})
            ORDER BY v.voted_at, v.employee_id
            """,
            tuple(ids),
        )
        for r in fetchall(cur):
            votes[int(r["poll_id"])].append(
                PollVote(
                    employee_id=int(r["employee_id"]),
                    option_id=r.get("option_id"),
                    custom_text=r.get("custom_text") or "",
                    voted_at=r.get("voted_at"),
                    voter_first_name=r.get("first_name") or "",
                    voter_last_name=r.get("last_name") or "",
                    voter_code=r.get("employee_code") or "",
                )
            )

        polls = []
        for r in rows:
            pid = int(r["poll_id"])
            polls.append(
                Poll(
                    poll_id=pid,
                    title=r["title"],
                    description=r.get("description") or "",
                    options=tuple(options[pid]),
                    allow_custom_option=bool(r.get("allow_custom_option")),
                    audience=Audience(
                        type=AudienceType(r.get("audience_type") or AudienceType.ALL.value),
                        department_ids=tuple(departments[pid]),
                        user_ids=tuple(users[pid]),
                    ),
                    created_by=int(r["created_by"]),
                    is_active=bool(r.get("is_active", True)),
                    start_date=r.get("start_date"),
                    end_date=r.get("end_date"),
                    created_at=r.get("created_at"),
                    votes=tuple(votes[pid]),
                    creator_name=r.get("creator_name"),
                )
            )
        return polls

    def list_all(self) -> Sequence[Poll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY p.created_at DESC, p.poll_id DESC")
            return self._hydrate(cur, fetchall(cur))

    def get_by_id(self, poll_id: int) -> Optional[Poll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE p.poll_id=%s", (int(poll_id),))
            polls = self._hydrate(cur, fetchall(cur))
            return polls[0] if polls else None

    @staticmethod
    def _write_options(cur, poll_id: int, labels: Sequence[str]) -> None:
        cur.execute("DELETE FROM poll_options WHERE poll_id=%s", (poll_id,))
        for position, label in enumerate(labels):
            cur.execute(
                "INSERT INTO poll_options (poll_id, label, sort_order) VALUES (%s, %s, %s)",
                (poll_id, label, position),
            )

    @staticmethod
    def _write_audience(cur, poll_id: int, audience: Audience) -> None:
        cur.execute("UPDATE polls SET audience_type=%s WHERE poll_id=%s", (audience.type.value, poll_id))
        cur.execute("DELETE FROM poll_audience_departments WHERE poll_id=%s", (poll_id,))
        cur.execute("DELETE FROM poll_audience_users WHERE poll_id=%s", (poll_id,))
        for department_id in audience.department_ids:
            cur.execute(
                "INSERT INTO poll_audience_departments (poll_id, department_id) VALUES (%s, %s)",
                (poll_id, int(department_id)),
            )
        for employee_id in audience.user_ids:
            cur.execute(
                "INSERT INTO poll_audience_users (poll_id, employee_id) VALUES (%s, %s)",
                (poll_id, int(employee_id)),
            )

    def create(self, *, title, description, options, allow_custom_option, audience, created_by, start_date, end_date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO polls (title, description, allow_custom_option, audience_type,
                                   created_by, is_active, start_date, end_date)
                VALUES (%s, %s, %s, %s, %s, 1, %s, %s)
                """,
                (title, description, int(allow_custom_option), audience.type.value, int(created_by), start_date, end_date),
            )
            poll_id = int(cur.lastrowid)
            self._write_options(cur, poll_id, options)
            self._write_audience(cur, poll_id, audience)
            return poll_id

    def update(
        self,
        poll_id,
        *,
        title,
        description,
        allow_custom_option,
        is_active,
        start_date,
        end_date,
        options=None,
        audience=None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE polls
                SET title=%s, description=%s, allow_custom_option=%s, is_active=%s, start_date=%s, end_date=%s
                WHERE poll_id=%s
                """,
                (title, description, int(allow_custom_option), int(is_active), start_date, end_date, int(poll_id)),
            )
            found = cur.rowcount > 0
            if options is not None:
                self._write_options(cur, int(poll_id), options)
            if audience is not None:
                self._write_audience(cur, int(poll_id), audience)
            return found

    def delete_by_id(self, poll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM polls WHERE poll_id=%s", (int(poll_id),))
            return cur.rowcount > 0

    def upsert_vote(self, poll_id: int, *, employee_id: int, option_id: Optional[int], custom_text: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO poll_votes (poll_id, employee_id, option_id, custom_text, voted_at)
                VALUES (%s, %s, %s, %s, NOW())
                ON DUPLICATE KEY UPDATE option_id=VALUES(option_id), custom_text=VALUES(custom_text), voted_at=VALUES(voted_at)
                """,
                (int(poll_id), int(employee_id), option_id, custom_text or ""),
            )
