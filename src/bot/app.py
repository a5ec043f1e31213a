"""Main Slack bot application using Socket Mode."""

import logging
from pathlib import Path

from slack_bolt import App
from slack_bolt.adapter.socket_mode import SocketModeHandler

from ..config import SLACK_APP_TOKEN, SLACK_BOT_TOKEN
from ..integrations.slack import SlackClient
from ..teams import TeamStore
from .conversation import ConversationManager
from .event_handlers import register_event_handlers
from .router import DialogRouter
from .wizards import TeamWizards

logger = logging.getLogger(__name__)


def create_bot_app(
    bot_token: str | None = None,
    app_token: str | None = None,
    db_path: Path | str | None = None,
) -> tuple[App, SocketModeHandler]:
    """Create and configure the Slack bot application.

    Args:
        bot_token: Slack bot token. Defaults to environment variable.
        app_token: Slack app token for Socket Mode. Defaults to environment variable.
        db_path: Team database path. Defaults to config value.

    Returns:
        Tuple of (App, SocketModeHandler).
    """
    bot_token = bot_token or SLACK_BOT_TOKEN
    app_token = app_token or SLACK_APP_TOKEN

    if not bot_token:
        raise ValueError("SLACK_BOT_TOKEN is required")
    if not app_token:
        raise ValueError("SLACK_APP_TOKEN is required for Socket Mode")

    app = App(token=bot_token)

    wizards = TeamWizards(
        slack=SlackClient(client=app.client),
        teams=TeamStore(db_path),
    )
    router = DialogRouter(wizards, ConversationManager())

    register_event_handlers(app, router)

    @app.error
    def global_error_handler(error, body, logger):
        logger.error(f"Error: {error}")
        logger.error(f"Request body: {body}")

    handler = SocketModeHandler(app, app_token)

    logger.info("Slack bot app created successfully")
    return app, handler


def run_bot(
    bot_token: str | None = None,
    app_token: str | None = None,
    db_path: Path | str | None = None,
) -> None:
    """Run the Slack bot.

    Args:
        bot_token: Slack bot token.
        app_token: Slack app token for Socket Mode.
        db_path: Team database path. Defaults to config value.
    """
    app, handler = create_bot_app(bot_token, app_token, db_path)

    logger.info("Starting Slack bot in Socket Mode...")
    print("Bot is running! Press Ctrl+C to stop.")

    try:
        handler.start()
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.error(f"Bot error: {e}")
        raise
