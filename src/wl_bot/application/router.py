"""CommandRouter — maps parsed chat commands onto the ledger and history engines.

Engines raise AppError subclasses; this is the single place where they are
turned into a failed CommandResult for the chat transport.
"""

import logging
from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_account.application.service import LedgerApplicationService
from src.wl_bot.application import labels
from src.wl_bot.application.schemas import CommandResult
from src.wl_bot.domain.commands import Command, ParsedCommand, parse_command
from src.wl_common.errors import AppError, UnknownCommandError
from src.wl_history.application.service import HistoryApplicationService

logger = logging.getLogger(__name__)

Handler = Callable[[AsyncSession, str, ParsedCommand], Awaitable[CommandResult]]


class CommandRouter:
    def __init__(
        self,
        ledger: LedgerApplicationService | None = None,
        history: HistoryApplicationService | None = None,
    ) -> None:
        self._ledger = ledger or LedgerApplicationService()
        self._history = history or HistoryApplicationService()
        self._handlers: dict[Command, Handler] = {
            Command.CREDIT: self._credit,
            Command.DEBIT: self._debit,
            Command.SET: self._set,
            Command.UNDO: self._undo,
            Command.PAST: self._past,
            Command.BREAKDOWN: self._breakdown,
            Command.BALANCE: self._balance,
            Command.HELP: self._help,
        }

    async def dispatch(
        self, db: AsyncSession, chat_id: str, display_name: str, text: str
    ) -> CommandResult:
        try:
            parsed = parse_command(text)
        except UnknownCommandError as exc:
            return CommandResult.failure(labels.unknown_command(), exc.code)

        await self._ledger.ensure_user(db, chat_id, display_name)

        try:
            return await self._handlers[parsed.command](db, chat_id, parsed)
        except AppError as exc:
            logger.info("%s from %s failed: %s", parsed.command.value, chat_id, exc.message)
            return CommandResult.failure(labels.error_message(exc), exc.code)

    async def _credit(self, db: AsyncSession, user_id: str, cmd: ParsedCommand) -> CommandResult:
        if not cmd.args:
            return CommandResult.failure(labels.USAGE[Command.CREDIT])
        result = await self._ledger.credit(db, user_id, cmd.arg(0))
        return CommandResult.ok(labels.credit_added(result), result)

    async def _debit(self, db: AsyncSession, user_id: str, cmd: ParsedCommand) -> CommandResult:
        if not cmd.args:
            return CommandResult.failure(labels.USAGE[Command.DEBIT])
        result = await self._ledger.debit(db, user_id, cmd.arg(0), cmd.rest(1))
        return CommandResult.ok(labels.debit_added(result), result)

    async def _set(self, db: AsyncSession, user_id: str, cmd: ParsedCommand) -> CommandResult:
        if not cmd.args:
            return CommandResult.failure(labels.USAGE[Command.SET])
        result = await self._ledger.set_balance(db, user_id, cmd.arg(0))
        return CommandResult.ok(labels.wallet_set(result), result)

    async def _undo(self, db: AsyncSession, user_id: str, cmd: ParsedCommand) -> CommandResult:
        result = await self._ledger.undo(db, user_id)
        return CommandResult.ok(labels.undone(), result)

    async def _past(self, db: AsyncSession, user_id: str, cmd: ParsedCommand) -> CommandResult:
        history = await self._history.history(db, user_id, cmd.arg(0))
        if history.is_empty:
            return CommandResult.failure(labels.NO_TRANSACTIONS)
        return CommandResult.ok(labels.format_history(history), history)

    async def _breakdown(
        self, db: AsyncSession, user_id: str, cmd: ParsedCommand
    ) -> CommandResult:
        breakdown = await self._history.category_breakdown(db, user_id, cmd.arg(0))
        if breakdown.is_empty:
            return CommandResult.failure(labels.NO_TRANSACTIONS)
        return CommandResult.ok(labels.format_breakdown(breakdown), breakdown)

    async def _balance(self, db: AsyncSession, user_id: str, cmd: ParsedCommand) -> CommandResult:
        result = await self._ledger.get_balance(db, user_id)
        return CommandResult.ok(labels.balance(result), result)

    async def _help(self, db: AsyncSession, user_id: str, cmd: ParsedCommand) -> CommandResult:
        return CommandResult.ok(labels.help_text())
