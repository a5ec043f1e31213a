"""Message formatting for the team wizards."""

from typing import Any

NAME_PROMPT = "What should be the team name?"
TEAM_EXISTS = "Team already exists, choose a new name or type `{quit}`"
EMPTY_NAME = "The team name can't be empty, try again or type `{quit}`"
WRONG_CHOICE = "Wrong choices, please try again :p or type `{quit}`"
USER_NOT_FOUND = "Hmmmm, I couldn't find the user. Try again!"
NO_TEAMS = "There are no teams, use `add team` to create a new team"
CANCELLED = "Team edition was cancelled. Better luck next time!"
ERROR = "There was an error editing the team, please try again"
TEAM_GONE = "Team {team} no longer exists"
ALREADY_MEMBER = "@{user} is already in team {team}, try again or type `{quit}`"
NOT_MEMBER = "@{user} is not in team {team}, try again or type `{quit}`"


def format_team_menu(teams: list[str] | tuple[str, ...]) -> str:
    """Format a numbered team selection menu.

    Args:
        teams: Team names, already in display order.

    Returns:
        Menu text.
    """
    choices = [f"{i} - {team}" for i, team in enumerate(teams)]
    return "Choose a team :\n" + "\n".join(choices)


def format_edit_prompt(team: str) -> dict[str, Any]:
    """Format the membership edition prompt for a team.

    Returns:
        Response dictionary with 'text' and 'attachments'.
    """
    return {
        "text": f"What do you want to do with team {team}?",
        "attachments": [
            {
                "mrkdwn_in": ["text"],
                "text": (
                    "- `add @name`: Add *@name* to team\n"
                    "- `remove @name`: Remove *@name* from team"
                ),
            }
        ],
    }


def delete_confirmation(team: str) -> str:
    """Get the exact text a user must type to delete a team."""
    return f"remove team {team}"


def format_delete_prompt(team: str, quit_keyword: str = "quit") -> str:
    """Format the deletion confirmation prompt."""
    return f"Type `{delete_confirmation(team)}` to delete the team or type `{quit_keyword}`"


def format_help_message(quit_keyword: str = "quit") -> str:
    """Format the help message listing available commands."""
    return (
        "*Here's what I can do:*\n"
        "- `add team`: create a new team\n"
        "- `edit team`: add or remove members of one of your teams\n"
        "- `remove team`: delete one of your teams\n"
        f"Type `{quit_keyword}` at any time to cancel."
    )
