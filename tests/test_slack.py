"""Tests for the Slack client wrapper."""

from unittest.mock import MagicMock
from urllib.error import URLError

import pytest
from slack_sdk.errors import SlackApiError

from src.integrations.slack import SlackClient


@pytest.fixture
def web_client():
    return MagicMock()


@pytest.fixture
def client(web_client):
    return SlackClient(client=web_client)


class TestSlackClient:
    """Tests for SlackClient class."""

    def test_requires_token(self, monkeypatch):
        """Test that a token is needed without an existing client."""
        monkeypatch.setattr("src.integrations.slack.SLACK_BOT_TOKEN", "")

        with pytest.raises(ValueError):
            SlackClient()

    def test_post_message(self, client, web_client):
        """Test posting a message."""
        web_client.chat_postMessage.return_value = {"ok": True}

        assert client.post_message("C1", "hello") is True
        web_client.chat_postMessage.assert_called_once_with(channel="C1", text="hello")

    def test_post_message_with_attachments(self, client, web_client):
        """Test posting a message with attachments."""
        web_client.chat_postMessage.return_value = {"ok": True}
        attachments = [{"text": "details"}]

        client.post_message("C1", "hello", attachments=attachments)

        web_client.chat_postMessage.assert_called_once_with(
            channel="C1", text="hello", attachments=attachments
        )

    def test_post_message_error(self, client, web_client):
        """Test that API errors are reported as failure."""
        web_client.chat_postMessage.side_effect = SlackApiError(
            "channel_not_found", {"ok": False, "error": "channel_not_found"}
        )

        assert client.post_message("C404", "hello") is False

    def test_get_user_info(self, client, web_client):
        """Test looking up and caching a user."""
        web_client.users_info.return_value = {
            "user": {"id": "U1", "name": "alice", "profile": {"display_name": "Alice"}}
        }

        user = client.get_user_info("U1")
        client.get_user_info("U1")

        assert user["name"] == "alice"
        assert user["display_name"] == "Alice"
        web_client.users_info.assert_called_once_with(user="U1")

    def test_get_user_info_not_found(self, client, web_client):
        """Test looking up an unknown user."""
        web_client.users_info.side_effect = SlackApiError(
            "user_not_found", {"ok": False, "error": "user_not_found"}
        )

        assert client.get_user_info("U404") is None

    def test_post_message_unreachable(self, client, web_client):
        """Test that a network failure is reported as failure, not raised."""
        web_client.chat_postMessage.side_effect = URLError("connection refused")

        assert client.post_message("C1", "hello") is False

    def test_get_user_info_unreachable(self, client, web_client):
        """Test that a network failure during lookup gives no user."""
        web_client.users_info.side_effect = URLError("connection refused")

        assert client.get_user_info("U1") is None

    def test_user_cache_expires(self, web_client):
        """Test that an expired lookup is fetched again."""
        web_client.users_info.return_value = {"user": {"id": "U1", "name": "alice"}}
        client = SlackClient(client=web_client, user_cache_ttl=-1)

        client.get_user_info("U1")
        web_client.users_info.return_value = {"user": {"id": "U1", "name": "alice2"}}

        assert client.get_user_info("U1")["name"] == "alice2"
        assert web_client.users_info.call_count == 2
        assert len(client._user_cache) == 1
