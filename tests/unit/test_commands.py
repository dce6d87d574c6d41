import pytest

from src.wl_bot.domain.commands import Command, ParsedCommand, parse_command
from src.wl_common.errors import UnknownCommandError


class TestParseCommand:
    def test_debit_with_args(self) -> None:
        parsed = parse_command("/d 30 food")
        assert parsed == ParsedCommand(Command.DEBIT, ["30", "food"])

    def test_case_and_whitespace(self) -> None:
        parsed = parse_command("  /BAL  ")
        assert parsed.command is Command.BALANCE
        assert parsed.args == []

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("/undo", Command.UNDO), ("/un", Command.UNDO), ("/start", Command.HELP)],
    )
    def test_aliases(self, text: str, expected: Command) -> None:
        assert parse_command(text).command is expected

    def test_bot_mention_suffix_stripped(self) -> None:
        parsed = parse_command("/c@WalletBot 100")
        assert parsed.command is Command.CREDIT
        assert parsed.args == ["100"]

    @pytest.mark.parametrize("text", ["/withdraw 10", "hello", "", None, "   "])
    def test_unknown(self, text: str | None) -> None:
        with pytest.raises(UnknownCommandError):
            parse_command(text)


class TestParsedCommand:
    def test_arg_out_of_range(self) -> None:
        parsed = ParsedCommand(Command.PAST, [])
        assert parsed.arg(0) is None

    def test_rest_joins_multiword_category(self) -> None:
        parsed = parse_command("/d 12.50 eating out")
        assert parsed.arg(0) == "12.50"
        assert parsed.rest(1) == "eating out"

    def test_rest_empty(self) -> None:
        assert parse_command("/d 12").rest(1) is None
