"""Routing of incoming messages to the team wizards."""

import logging
from typing import Callable

from ..config import QUIT_KEYWORD
from .conversation import ConversationManager, Message, WizardState
from .wizards import TeamWizards

logger = logging.getLogger(__name__)


class DialogRouter:
    """Resumes a user's active wizard or starts a new one from a trigger."""

    def __init__(
        self,
        wizards: TeamWizards,
        conversations: ConversationManager | None = None,
        quit_keyword: str = QUIT_KEYWORD,
    ):
        """Initialize the router.

        Args:
            wizards: Wizard step logic.
            conversations: Per-user context store. A new one is created if omitted.
            quit_keyword: Message text that cancels any active wizard.
        """
        self.wizards = wizards
        self.conversations = conversations or ConversationManager()
        self.quit_keyword = quit_keyword

        # Checked in order against the lowercased message text
        self.triggers: list[tuple[str, Callable[[Message], WizardState | None]]] = [
            ("edit team", wizards.start_edition),
            ("add team", wizards.start_creation),
            ("remove team", wizards.start_deletion),
        ]

    def handle(self, message: Message) -> bool:
        """Handle a message.

        Args:
            message: Incoming message.

        Returns:
            False if the message was consumed, True if it should be passed on
            to the next handler.
        """
        with self.conversations.lock(message.user_id):
            state = self.conversations.get(message.user_id)

            if state is None:
                start = self._match_trigger(message.text)
                if start is None:
                    return True
                logger.info(f"Starting {start.__name__} for {message.user_id}")

            next_state = None
            try:
                if state is not None:
                    next_state = self._dispatch(state, message)
                else:
                    next_state = self._run(start, message)
            finally:
                # The context is always settled, even if a notice failed to send
                if next_state is None:
                    self.conversations.unset(message.user_id)
                else:
                    self.conversations.set(message.user_id, next_state)

        return False

    def _match_trigger(self, text: str) -> Callable[[Message], WizardState | None] | None:
        lowered = (text or "").lower()
        for prefix, start in self.triggers:
            if lowered.startswith(prefix):
                return start
        return None

    def _dispatch(self, state: WizardState, message: Message) -> WizardState | None:
        """Apply the quit keyword, then the step for the current state."""
        if message.text == self.quit_keyword:
            logger.info(f"{message.user_id} cancelled at {state.step.value}")
            self._notify(self.wizards.cancel, message)
            return None

        return self._run(lambda m: self.wizards.step(state, m), message)

    def _run(
        self,
        func: Callable[[Message], WizardState | None],
        message: Message,
    ) -> WizardState | None:
        """Run a step, clearing the context if it raises."""
        try:
            return func(message)
        except Exception as e:
            logger.error(f"Error handling message from {message.user_id}: {e}", exc_info=True)
            self._notify(self.wizards.notify_failure, message)
            return None

    def _notify(self, notify: Callable[[Message], None], message: Message) -> None:
        """Send a cancellation or failure notice without letting it raise."""
        try:
            notify(message)
        except Exception as e:
            logger.error(f"Could not notify {message.user_id}: {e}", exc_info=True)
