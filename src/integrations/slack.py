"""Slack API client used by the bot to talk to users."""

import logging
import time
from typing import Any

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError, SlackClientError
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from ..config import SLACK_BOT_TOKEN

logger = logging.getLogger(__name__)

# Cached user lookups expire so renames are picked up (10 minutes)
USER_CACHE_TTL = 10 * 60

# Network failures surface from urllib as OSError subclasses (URLError, timeouts)
TRANSPORT_ERRORS = (SlackClientError, OSError)


def _is_rate_limited(exc: BaseException) -> bool:
    """Check if a Slack error is a rate limit response."""
    return isinstance(exc, SlackApiError) and exc.response.get("error") == "ratelimited"


class SlackClient:
    """Client for posting messages and looking up users."""

    def __init__(
        self,
        token: str | None = None,
        client: WebClient | None = None,
        user_cache_ttl: int = USER_CACHE_TTL,
    ):
        """Initialize Slack client.

        Args:
            token: Slack bot token. Defaults to environment variable.
            client: Existing WebClient to reuse (e.g. the Bolt app's client).
            user_cache_ttl: Seconds a user lookup stays cached.
        """
        if client is None:
            token = token or SLACK_BOT_TOKEN
            if not token:
                raise ValueError("Slack bot token is required")
            client = WebClient(token=token)

        self._client = client
        self.user_cache_ttl = user_cache_ttl
        self._user_cache: dict[str, tuple[float, dict]] = {}

    @retry(
        retry=retry_if_exception(_is_rate_limited),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=30),
        reraise=True,
    )
    def _call(self, method: str, **kwargs) -> Any:
        """Call a Web API method, retrying when rate limited."""
        return getattr(self._client, method)(**kwargs)

    def post_message(
        self,
        channel: str,
        text: str,
        attachments: list[dict] | None = None,
    ) -> bool:
        """Post a message to a channel or user.

        Args:
            channel: Channel ID, or a user ID to send a direct message.
            text: Message text.
            attachments: Optional legacy attachments.

        Returns:
            True if the message was posted.
        """
        kwargs: dict[str, Any] = {"channel": channel, "text": text}
        if attachments:
            kwargs["attachments"] = attachments

        try:
            response = self._call("chat_postMessage", **kwargs)
            return bool(response.get("ok", False))
        except TRANSPORT_ERRORS as e:
            logger.error(f"Error posting message to {channel}: {e}")
            return False

    def get_user_info(self, user_id: str) -> dict[str, Any] | None:
        """Get user information.

        Args:
            user_id: The user ID.

        Returns:
            User metadata or None if not found.
        """
        self._prune_cache()

        cached = self._user_cache.get(user_id)
        if cached:
            return cached[1]

        try:
            response = self._call("users_info", user=user_id)
            user = self._parse_user(response["user"])
            self._user_cache[user_id] = (time.time(), user)
            return user
        except SlackApiError as e:
            if e.response.get("error") == "user_not_found":
                logger.info(f"User {user_id} not found")
                return None
            logger.error(f"Error getting user {user_id}: {e}")
            return None
        except TRANSPORT_ERRORS as e:
            logger.error(f"Error getting user {user_id}: {e}")
            return None

    def _prune_cache(self) -> None:
        """Drop cached users older than the TTL."""
        cutoff = time.time() - self.user_cache_ttl
        expired = [
            uid for uid, (fetched, _) in list(self._user_cache.items()) if fetched < cutoff
        ]
        for uid in expired:
            self._user_cache.pop(uid, None)

    def _parse_user(self, user: dict) -> dict[str, Any]:
        """Parse a user object into a dictionary."""
        profile = user.get("profile", {})
        return {
            "id": user["id"],
            "name": user.get("name", ""),
            "real_name": user.get("real_name", profile.get("real_name", "")),
            "display_name": profile.get("display_name", ""),
            "is_bot": user.get("is_bot", False),
            "deleted": user.get("deleted", False),
        }
