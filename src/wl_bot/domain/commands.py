"""Chat command parsing: "/d 30 food" → ParsedCommand(DEBIT, ["30", "food"])."""

from dataclasses import dataclass, field
from enum import Enum

from src.wl_common.errors import UnknownCommandError


class Command(str, Enum):
    DEBIT = "/d"
    CREDIT = "/c"
    SET = "/set"
    PAST = "/past"
    BREAKDOWN = "/br"
    UNDO = "/un"
    BALANCE = "/bal"
    HELP = "/help"


_ALIASES = {
    "/undo": Command.UNDO,
    "/start": Command.HELP,
}


@dataclass(frozen=True)
class ParsedCommand:
    command: Command
    args: list[str] = field(default_factory=list)

    def arg(self, index: int) -> str | None:
        return self.args[index] if index < len(self.args) else None

    def rest(self, start: int) -> str | None:
        """Join args[start:] back into one string (multi-word categories)."""
        joined = " ".join(self.args[start:])
        return joined or None


def parse_command(text: str | None) -> ParsedCommand:
    if not text or not text.strip().startswith("/"):
        raise UnknownCommandError((text or "").strip())

    head, *args = text.split()
    # Group chats address commands as "/d@SomeBot"
    token = head.split("@", 1)[0].lower()
    if token in _ALIASES:
        return ParsedCommand(_ALIASES[token], args)
    try:
        return ParsedCommand(Command(token), args)
    except ValueError:
        raise UnknownCommandError(token) from None
