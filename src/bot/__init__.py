"""Slack bot interface."""

from .app import create_bot_app
from .conversation import ConversationManager, Message, WizardState
from .router import DialogRouter
from .wizards import TeamWizards

__all__ = [
    "create_bot_app",
    "ConversationManager",
    "DialogRouter",
    "Message",
    "TeamWizards",
    "WizardState",
]
