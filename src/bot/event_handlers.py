"""Slack event handlers for the bot."""

import logging
from typing import Callable

from slack_bolt import App

from ..config import QUIT_KEYWORD, SLACK_AUTHORIZED_USERS
from .conversation import Message
from .formatters import format_help_message
from .router import DialogRouter

logger = logging.getLogger(__name__)

# A message handler returns True to pass the message on, False to stop
MessageHandler = Callable[[Message], bool]


def register_event_handlers(app: App, router: DialogRouter) -> None:
    """Register all event handlers with the app.

    Args:
        app: Slack App instance.
        router: Dialog router for the team wizards.
    """

    @app.event("message")
    def handle_message(event: dict, say) -> None:
        """Handle messages sent to the bot."""
        # Ignore bot messages and edits/joins
        if event.get("bot_id") or event.get("subtype"):
            return

        user_id = event.get("user")
        if not user_id:
            return

        if not _is_authorized(user_id):
            logger.warning(f"Unauthorized access attempt by user {user_id}")
            return

        message = Message(
            user_id=user_id,
            channel_id=event.get("channel", ""),
            text=event.get("text", ""),
        )

        handlers: list[MessageHandler] = [router.handle]
        if event.get("channel_type") == "im":
            handlers.append(lambda m: _reply_help(say))

        dispatch(message, handlers)


def dispatch(message: Message, handlers: list[MessageHandler]) -> bool:
    """Run handlers in order until one consumes the message.

    Returns:
        True if no handler consumed the message.
    """
    for handler in handlers:
        if not handler(message):
            return False
    return True


def _reply_help(say) -> bool:
    say(text=format_help_message(QUIT_KEYWORD))
    return False


def _is_authorized(user_id: str) -> bool:
    """Check if a user is authorized to use the bot."""
    # If no authorized users configured, allow all
    if not SLACK_AUTHORIZED_USERS:
        return True
    return user_id in SLACK_AUTHORIZED_USERS
