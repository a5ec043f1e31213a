"""Configuration loaded from environment variables."""

import os
from pathlib import Path

# Paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("TEAMBOT_DATA_DIR", PROJECT_ROOT / "data"))
TEAMS_DB = Path(os.getenv("TEAMBOT_TEAMS_DB", DATA_DIR / "teams.db"))
LOG_DIR = Path(os.getenv("TEAMBOT_LOG_DIR", PROJECT_ROOT / "logs"))
LOG_FILE = LOG_DIR / "teambot.log"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Slack
SLACK_BOT_TOKEN = os.getenv("SLACK_BOT_TOKEN", "")
SLACK_APP_TOKEN = os.getenv("SLACK_APP_TOKEN", "")
SLACK_AUTHORIZED_USERS = [
    u.strip() for u in os.getenv("SLACK_AUTHORIZED_USERS", "").split(",") if u.strip()
]

# Dialog
QUIT_KEYWORD = os.getenv("TEAMBOT_QUIT_KEYWORD", "quit")

# Defaults seeded into every new team
DEFAULT_REPORT_SCHEDULE = os.getenv("TEAMBOT_DEFAULT_REPORT_SCHEDULE", "0 10 * * mon-fri")
DEFAULT_FIRST_REMINDER_BEFORE_REPORT = int(
    os.getenv("TEAMBOT_FIRST_REMINDER_BEFORE_REPORT", "-8")
)
DEFAULT_LAST_REMINDER_BEFORE_REPORT = int(
    os.getenv("TEAMBOT_LAST_REMINDER_BEFORE_REPORT", "-8")
)
DEFAULT_QUESTIONS = [
    "What did you do yesterday?",
    "What will you do today?",
    "Are you being blocked by someone for a review? who? why?",
]


def ensure_directories() -> None:
    """Create data and log directories if they don't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    TEAMS_DB.parent.mkdir(parents=True, exist_ok=True)
    LOG_DIR.mkdir(parents=True, exist_ok=True)


def validate_config() -> list[str]:
    """Check configuration for problems.

    Returns:
        List of human-readable issues. Empty if everything looks fine.
    """
    issues = []

    if not SLACK_BOT_TOKEN:
        issues.append("SLACK_BOT_TOKEN is not set")
    if not SLACK_APP_TOKEN:
        issues.append("SLACK_APP_TOKEN is not set")

    from .schedule import parse_report_schedule

    try:
        parse_report_schedule(DEFAULT_REPORT_SCHEDULE)
    except ValueError as e:
        issues.append(f"TEAMBOT_DEFAULT_REPORT_SCHEDULE is invalid: {e}")

    if not QUIT_KEYWORD.strip():
        issues.append("TEAMBOT_QUIT_KEYWORD must not be empty")

    return issues
