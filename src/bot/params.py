"""Named-group parameter extraction from free text."""

import re

# "add <@U123>", "remove <@U123|jane>", the whole message and nothing else
MEMBER_ACTION_PATTERN = re.compile(
    r"^(?P<action>add|remove)\s+<@(?P<user>[^>|\s]+)(?:\|[^>]*)?>\s*$",
    re.IGNORECASE,
)


def extract_params(pattern: str | re.Pattern, text: str) -> dict[str, str]:
    """Extract named groups from the first match of a pattern in text.

    The match may start anywhere; anchor the pattern to restrict it.

    Args:
        pattern: Regex (string or compiled) with named capture groups.
        text: Subject text.

    Returns:
        Mapping of group name to captured value. Empty if the pattern
        doesn't match; groups that didn't participate are omitted.
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)

    match = pattern.search(text or "")
    if not match:
        return {}

    return {name: value for name, value in match.groupdict().items() if value is not None}
