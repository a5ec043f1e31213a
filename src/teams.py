"""SQLite-based team repository."""

import json
import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Generator

from .config import TEAMS_DB

logger = logging.getLogger(__name__)


@dataclass
class QuestionSet:
    """Questions asked to team members before a periodic report."""

    questions: list[str] = field(default_factory=list)
    first_reminder_before_report: int = 0  # seconds, negative means before
    last_reminder_before_report: int = 0
    report_schedule_cron: str = ""


@dataclass
class Team:
    """A team and its reporting configuration."""

    name: str
    channel: str = ""
    members: list[str] = field(default_factory=list)
    split_report: bool = False
    out_of_office: list[str] = field(default_factory=list)
    question_sets: list[QuestionSet] = field(default_factory=list)


class TeamExistsError(ValueError):
    """Raised when adding a team whose name is already taken."""


class TeamStore:
    """SQLite-based storage for teams and their members."""

    def __init__(self, db_path: Path | str | None = None):
        """Initialize the team store.

        Args:
            db_path: Path to SQLite database. Defaults to config value.
        """
        self.db_path = Path(db_path) if db_path else TEAMS_DB
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @contextmanager
    def _connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize database schema."""
        with self._connection() as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS teams (
                    name TEXT PRIMARY KEY,
                    channel TEXT NOT NULL DEFAULT '',
                    split_report INTEGER NOT NULL DEFAULT 0,
                    out_of_office TEXT,
                    question_sets TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS team_members (
                    team TEXT NOT NULL,
                    username TEXT NOT NULL,
                    added_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (team, username),
                    FOREIGN KEY (team) REFERENCES teams(name) ON DELETE CASCADE
                );
                CREATE INDEX IF NOT EXISTS idx_members_username ON team_members(username);
            """)

    def list_teams(self) -> list[str]:
        """Get all team names, ordered by name."""
        with self._connection() as conn:
            rows = conn.execute("SELECT name FROM teams ORDER BY name").fetchall()
            return [row["name"] for row in rows]

    def list_teams_for_user(self, username: str) -> list[str]:
        """Get the names of the teams a user belongs to.

        Args:
            username: Slack username of the member.

        Returns:
            Team names, ordered by name.
        """
        with self._connection() as conn:
            rows = conn.execute(
                """
                SELECT team FROM team_members
                WHERE username = ?
                ORDER BY team
                """,
                (username,),
            ).fetchall()
            return [row["team"] for row in rows]

    def get_team(self, name: str) -> Team | None:
        """Get a team by name.

        Args:
            name: Team name.

        Returns:
            Team or None if not found.
        """
        with self._connection() as conn:
            row = conn.execute(
                "SELECT * FROM teams WHERE name = ?", (name,)
            ).fetchone()
            if not row:
                return None

            members = conn.execute(
                "SELECT username FROM team_members WHERE team = ? ORDER BY added_at, username",
                (name,),
            ).fetchall()

            return Team(
                name=row["name"],
                channel=row["channel"],
                members=[m["username"] for m in members],
                split_report=bool(row["split_report"]),
                out_of_office=json.loads(row["out_of_office"]) if row["out_of_office"] else [],
                question_sets=[
                    QuestionSet(**qs)
                    for qs in (json.loads(row["question_sets"]) if row["question_sets"] else [])
                ],
            )

    def add_team(self, team: Team) -> None:
        """Insert a new team and its members.

        Raises:
            TeamExistsError: If a team with the same name already exists.
        """
        with self._connection() as conn:
            try:
                conn.execute(
                    """
                    INSERT INTO teams (name, channel, split_report, out_of_office, question_sets)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        team.name,
                        team.channel,
                        int(team.split_report),
                        json.dumps(team.out_of_office),
                        json.dumps([asdict(qs) for qs in team.question_sets]),
                    ),
                )
            except sqlite3.IntegrityError as e:
                raise TeamExistsError(f"Team already exists: {team.name}") from e

            conn.executemany(
                "INSERT OR IGNORE INTO team_members (team, username) VALUES (?, ?)",
                [(team.name, member) for member in team.members],
            )

        logger.debug(f"Added team {team.name} with {len(team.members)} member(s)")

    def delete_team(self, name: str) -> bool:
        """Delete a team and its memberships.

        Returns:
            True if deleted, False if not found.
        """
        with self._connection() as conn:
            cursor = conn.execute("DELETE FROM teams WHERE name = ?", (name,))
            return cursor.rowcount > 0

    def add_member(self, team: str, username: str) -> bool:
        """Add a member to a team.

        Returns:
            True if added, False if the team doesn't exist or the user
            was already a member.
        """
        with self._connection() as conn:
            exists = conn.execute(
                "SELECT 1 FROM teams WHERE name = ?", (team,)
            ).fetchone()
            if not exists:
                logger.warning(f"Cannot add {username} to unknown team {team}")
                return False

            cursor = conn.execute(
                "INSERT OR IGNORE INTO team_members (team, username) VALUES (?, ?)",
                (team, username),
            )
            return cursor.rowcount > 0

    def remove_member(self, team: str, username: str) -> bool:
        """Remove a member from a team.

        Returns:
            True if removed, False if the user wasn't a member.
        """
        with self._connection() as conn:
            cursor = conn.execute(
                "DELETE FROM team_members WHERE team = ? AND username = ?",
                (team, username),
            )
            return cursor.rowcount > 0

    def get_stats(self) -> dict[str, int]:
        """Get team and membership counts."""
        with self._connection() as conn:
            teams = conn.execute("SELECT COUNT(*) FROM teams").fetchone()[0]
            members = conn.execute("SELECT COUNT(*) FROM team_members").fetchone()[0]
            return {"teams": teams, "memberships": members}
