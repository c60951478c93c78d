import re

from pydantic import BaseModel, ConfigDict

# A directive is a leading slash followed by word characters and hyphens
COMMAND_PATTERN = re.compile(r"^\s*/([\w-]+)", re.ASCII)


class ParsedCommand(BaseModel):
    """User input split into an optional model directive and the message text."""

    model_config = ConfigDict(frozen=True)

    command: str | None
    clean_content: str


def parse_command(text: str) -> ParsedCommand:
    """Extract a leading ``/model-id`` directive from user input.

    The first directive is the command. Any directives directly following it are
    stripped too, so parsing ``clean_content`` again never finds a command.
    A slash followed by anything other than word characters or hyphens is
    ordinary text.

    >>> parse_command("/grok what's the weather")
    ParsedCommand(command='grok', clean_content="what's the weather")
    """
    rest = text.strip()
    match = COMMAND_PATTERN.match(rest)
    if match is None:
        return ParsedCommand(command=None, clean_content=rest)

    command = match.group(1)
    rest = rest[match.end():].strip()
    while (extra := COMMAND_PATTERN.match(rest)) is not None:
        rest = rest[extra.end():].strip()

    return ParsedCommand(command=command, clean_content=rest)
