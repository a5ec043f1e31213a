"""Per-user conversation state for the Slack bot."""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Generator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Message:
    """An incoming chat message."""

    user_id: str
    channel_id: str
    text: str


class Step(Enum):
    """Wizard steps a user can be waiting in."""

    TEAM_NAME = "team_name"
    CHOOSE_TEAM = "choose_team"
    EDIT_ACTION = "edit_action"
    CONFIRM_DELETE = "confirm_delete"


class Purpose(Enum):
    """What a team selection is for."""

    EDIT = "edit"
    DELETE = "delete"


@dataclass(frozen=True)
class WizardState:
    """State of a user's in-progress wizard.

    Only the fields relevant to ``step`` are set.
    """

    step: Step
    teams: tuple[str, ...] = field(default_factory=tuple)
    purpose: Purpose | None = None
    team: str | None = None


class _UserQueue:
    """Ticket queue serving one user's messages in arrival order."""

    def __init__(self):
        self.ready = threading.Condition()
        self.next_ticket = 0
        self.serving = 0


class ConversationManager:
    """Manages the active wizard state of each user.

    A user has at most one active state. All work for a given user must be
    done while holding ``lock(user_id)``. Messages from one user are then
    processed one at a time, in the order they asked for the lock. Different
    users don't block each other.
    """

    def __init__(self):
        """Initialize the conversation manager."""
        self._states: dict[str, WizardState] = {}
        self._queues: dict[str, _UserQueue] = {}
        self._guard = threading.Lock()

    @contextmanager
    def lock(self, user_id: str) -> Generator[None, None, None]:
        """Hold the lock for a single user.

        Waiters are served first come, first served.

        Args:
            user_id: Slack user ID.
        """
        with self._guard:
            queue = self._queues.get(user_id)
            if queue is None:
                queue = self._queues[user_id] = _UserQueue()
            ticket = queue.next_ticket
            queue.next_ticket += 1

        with queue.ready:
            while queue.serving != ticket:
                queue.ready.wait()

        try:
            yield
        finally:
            with self._guard:
                with queue.ready:
                    queue.serving += 1
                    queue.ready.notify_all()
                    # Nobody waiting: drop the queue so idle users cost nothing
                    if queue.serving == queue.next_ticket:
                        del self._queues[user_id]

    def queued(self, user_id: str) -> int:
        """Get how many messages for a user are being or waiting to be processed."""
        with self._guard:
            queue = self._queues.get(user_id)
            return queue.next_ticket - queue.serving if queue else 0

    def get(self, user_id: str) -> WizardState | None:
        """Get a user's active state.

        Args:
            user_id: Slack user ID.

        Returns:
            WizardState or None if the user has no active context.
        """
        with self._guard:
            return self._states.get(user_id)

    def set(self, user_id: str, state: WizardState) -> None:
        """Install a state for a user, replacing any previous one.

        Args:
            user_id: Slack user ID.
            state: New wizard state.
        """
        with self._guard:
            self._states[user_id] = state
        logger.debug(f"Context for {user_id} set to {state.step.value}")

    def unset(self, user_id: str) -> bool:
        """Clear a user's active state.

        Args:
            user_id: Slack user ID.

        Returns:
            True if a state was cleared, False if there was none.
        """
        with self._guard:
            removed = self._states.pop(user_id, None)

        if removed is not None:
            logger.debug(f"Context for {user_id} cleared")
        return removed is not None

    def get_stats(self) -> dict:
        """Get statistics about active conversations.

        Returns:
            Dictionary with conversation stats.
        """
        with self._guard:
            steps: dict[str, int] = {}
            for state in self._states.values():
                steps[state.step.value] = steps.get(state.step.value, 0) + 1

            return {
                "active_conversations": len(self._states),
                "by_step": steps,
            }
