"""Team creation, edition and deletion wizards.

Each wizard step is a transition from ``(WizardState, Message)`` to the next
``WizardState``, or ``None`` when the wizard is over. Steps post their own
prompts and notifications and perform at most one repository mutation.
"""

import logging
from typing import Any, Callable

from ..config import (
    DEFAULT_FIRST_REMINDER_BEFORE_REPORT,
    DEFAULT_LAST_REMINDER_BEFORE_REPORT,
    DEFAULT_QUESTIONS,
    DEFAULT_REPORT_SCHEDULE,
    QUIT_KEYWORD,
)
from ..schedule import parse_report_schedule
from ..teams import QuestionSet, Team, TeamExistsError
from .conversation import Message, Purpose, Step, WizardState
from .formatters import (
    ALREADY_MEMBER,
    CANCELLED,
    EMPTY_NAME,
    ERROR,
    NAME_PROMPT,
    NOT_MEMBER,
    NO_TEAMS,
    TEAM_EXISTS,
    TEAM_GONE,
    USER_NOT_FOUND,
    WRONG_CHOICE,
    delete_confirmation,
    format_delete_prompt,
    format_edit_prompt,
    format_team_menu,
)
from .params import MEMBER_ACTION_PATTERN, extract_params

logger = logging.getLogger(__name__)


class TeamWizards:
    """Step logic for the team management wizards.

    Args:
        slack: Messaging client with ``post_message`` and ``get_user_info``.
        teams: Team repository (see ``TeamStore``).
        quit_keyword: Keyword shown in prompts to cancel a wizard.
        report_schedule: Report schedule seeded into new teams.
    """

    def __init__(
        self,
        slack,
        teams,
        quit_keyword: str = QUIT_KEYWORD,
        report_schedule: str = DEFAULT_REPORT_SCHEDULE,
    ):
        self.slack = slack
        self.teams = teams
        self.quit_keyword = quit_keyword
        self.report_schedule = report_schedule

        self._steps: dict[Step, Callable[[WizardState, Message], WizardState | None]] = {
            Step.TEAM_NAME: self._on_team_name,
            Step.CHOOSE_TEAM: self._on_team_choice,
            Step.EDIT_ACTION: self._on_edit_action,
            Step.CONFIRM_DELETE: self._on_delete_confirmation,
        }

    # Entry points

    def start_creation(self, message: Message) -> WizardState | None:
        """Start the team creation wizard."""
        if self._author(message) is None:
            return None
        return self._enter(WizardState(Step.TEAM_NAME), message)

    def start_edition(self, message: Message) -> WizardState | None:
        """Start the team edition wizard."""
        return self._start_team_choice(message, Purpose.EDIT)

    def start_deletion(self, message: Message) -> WizardState | None:
        """Start the team deletion wizard."""
        return self._start_team_choice(message, Purpose.DELETE)

    def step(self, state: WizardState, message: Message) -> WizardState | None:
        """Advance a wizard with the user's next message.

        Args:
            state: The user's current state.
            message: Incoming message.

        Returns:
            The state to install next, or None to clear the context.
        """
        return self._steps[state.step](state, message)

    def cancel(self, message: Message) -> None:
        """Tell the user their wizard was cancelled."""
        self._say(message.channel_id, CANCELLED)

    def notify_failure(self, message: Message) -> None:
        """Tell the user the wizard stopped because of an error."""
        self._say(message.channel_id, ERROR)

    # Steps

    def _on_team_name(self, state: WizardState, message: Message) -> WizardState | None:
        name = message.text.strip()

        if not name:
            return self._retry(state, message, EMPTY_NAME)

        if name in self.teams.list_teams():
            return self._retry(state, message, TEAM_EXISTS)

        author = self._author(message)
        if author is None:
            return None

        try:
            self.teams.add_team(self._new_team(name, author["name"]))
        except TeamExistsError:
            return self._retry(state, message, TEAM_EXISTS)

        logger.info(f"Team was created. team={name} doneBy={author['name']}")

        return self._enter(WizardState(Step.EDIT_ACTION, team=name), message)

    def _on_team_choice(self, state: WizardState, message: Message) -> WizardState | None:
        choice = message.text.strip()

        if not choice.isdecimal() or int(choice) >= len(state.teams):
            return self._retry(state, message, WRONG_CHOICE)

        team = state.teams[int(choice)]

        if state.purpose is Purpose.DELETE:
            return self._enter(WizardState(Step.CONFIRM_DELETE, team=team), message)
        return self._enter(WizardState(Step.EDIT_ACTION, team=team), message)

    def _on_edit_action(self, state: WizardState, message: Message) -> WizardState | None:
        params = extract_params(MEMBER_ACTION_PATTERN, message.text)
        action = params.get("action", "").lower()
        user_id = params.get("user")

        if action not in ("add", "remove") or not user_id:
            return self._retry(state, message, WRONG_CHOICE)

        target = self.slack.get_user_info(user_id)
        if target is None:
            return self._retry(state, message, USER_NOT_FOUND)

        author = self._author(message)
        if author is None:
            return None

        team = state.team
        username = target["name"]

        if self.teams.get_team(team) is None:
            self._say(message.channel_id, TEAM_GONE.format(team=team))
            logger.warning(f"Team disappeared during edition. team={team} doneBy={author['name']}")
            return None

        if action == "add":
            if not self.teams.add_member(team, username):
                return self._retry(state, message, ALREADY_MEMBER, user=username, team=team)
            self._say(message.channel_id, f"I've added @{username} to team {team}")
            self._say(
                target["id"],
                f"You've been added to team {team} by @{author['name']}.",
            )
            logger.info(
                f"User was added to team. user={username} team={team} doneBy={author['name']}"
            )
        else:
            if not self.teams.remove_member(team, username):
                return self._retry(state, message, NOT_MEMBER, user=username, team=team)
            self._say(message.channel_id, f"I've removed @{username} from team {team}")
            self._say(
                target["id"],
                f"You've been removed from team {team} by @{author['name']}.",
            )
            logger.info(
                f"User was removed from team. user={username} team={team} doneBy={author['name']}"
            )

        return None

    def _on_delete_confirmation(
        self, state: WizardState, message: Message
    ) -> WizardState | None:
        if message.text != delete_confirmation(state.team):
            return self._enter(state, message)

        author = self._author(message)
        if author is None:
            return None

        if not self.teams.delete_team(state.team):
            self._say(message.channel_id, TEAM_GONE.format(team=state.team))
            logger.warning(f"Team disappeared before deletion. team={state.team}")
            return None

        self._say(message.channel_id, f"I've deleted the team {state.team}")
        logger.info(f"Team was deleted. team={state.team} doneBy={author['name']}")

        return None

    # Helpers

    def _start_team_choice(self, message: Message, purpose: Purpose) -> WizardState | None:
        author = self._author(message)
        if author is None:
            return None

        teams = sorted(self.teams.list_teams_for_user(author["name"]))
        if not teams:
            self._say(message.channel_id, NO_TEAMS)
            return None

        state = WizardState(Step.CHOOSE_TEAM, teams=tuple(teams), purpose=purpose)
        return self._enter(state, message)

    def _new_team(self, name: str, username: str) -> Team:
        """Build a team seeded with the default questions and schedule."""
        # Fails fast on a misconfigured default schedule
        parse_report_schedule(self.report_schedule)

        return Team(
            name=name,
            channel=f"@{username}",
            members=[username],
            split_report=True,
            out_of_office=[],
            question_sets=[
                QuestionSet(
                    questions=list(DEFAULT_QUESTIONS),
                    first_reminder_before_report=DEFAULT_FIRST_REMINDER_BEFORE_REPORT,
                    last_reminder_before_report=DEFAULT_LAST_REMINDER_BEFORE_REPORT,
                    report_schedule_cron=self.report_schedule,
                )
            ],
        )

    def _prompt(self, state: WizardState) -> dict[str, Any]:
        """Render the prompt for a step."""
        if state.step is Step.TEAM_NAME:
            return {"text": NAME_PROMPT}
        if state.step is Step.CHOOSE_TEAM:
            return {"text": format_team_menu(state.teams)}
        if state.step is Step.EDIT_ACTION:
            return format_edit_prompt(state.team)
        return {"text": format_delete_prompt(state.team, self.quit_keyword)}

    def _enter(self, state: WizardState, message: Message) -> WizardState | None:
        """Post the prompt for a step and return the state to install.

        Returns None if the prompt couldn't be delivered.
        """
        prompt = self._prompt(state)
        if not self._say(message.channel_id, prompt["text"], prompt.get("attachments")):
            logger.error(f"Could not prompt {message.user_id} for {state.step.value}")
            return None
        return state

    def _retry(
        self, state: WizardState, message: Message, notice: str, **fields: str
    ) -> WizardState | None:
        """Tell the user what went wrong and prompt for the same step again."""
        if not self._say(message.channel_id, notice.format(quit=self.quit_keyword, **fields)):
            return None
        return self._enter(state, message)

    def _author(self, message: Message) -> dict[str, Any] | None:
        """Look up the user who sent a message, notifying them on failure."""
        author = self.slack.get_user_info(message.user_id)
        if author is None:
            logger.error(f"Fail to get user information. user={message.user_id}")
            self.notify_failure(message)
        return author

    def _say(self, channel: str, text: str, attachments: list[dict] | None = None) -> bool:
        ok = self.slack.post_message(channel, text, attachments=attachments)
        if not ok:
            logger.error(f"Fail to post message to slack. channel={channel}")
        return ok
