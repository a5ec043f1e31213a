"""Shared fixtures for bot tests."""

import tempfile
from pathlib import Path

import pytest

from src.bot.conversation import ConversationManager
from src.bot.router import DialogRouter
from src.bot.wizards import TeamWizards
from src.teams import TeamStore


class FakeSlack:
    """In-memory stand-in for SlackClient."""

    def __init__(self, users: dict[str, str] | None = None):
        self.users = users or {}
        self.posts: list[dict] = []
        self.fail_posts = False

    def post_message(self, channel, text, attachments=None):
        if self.fail_posts:
            return False
        self.posts.append({"channel": channel, "text": text, "attachments": attachments})
        return True

    def get_user_info(self, user_id):
        if user_id not in self.users:
            return None
        return {"id": user_id, "name": self.users[user_id]}

    @property
    def texts(self) -> list[str]:
        return [p["text"] for p in self.posts]

    @property
    def last_text(self) -> str:
        return self.posts[-1]["text"]


@pytest.fixture
def store():
    """Create a temporary team store for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield TeamStore(Path(tmpdir) / "teams.db")


@pytest.fixture
def slack():
    return FakeSlack({"U1": "alice", "U2": "bob", "U3": "carol"})


@pytest.fixture
def conversations():
    return ConversationManager()


@pytest.fixture
def router(slack, store, conversations):
    wizards = TeamWizards(slack, store, quit_keyword="quit")
    return DialogRouter(wizards, conversations, quit_keyword="quit")
