"""User-facing chat strings and text formatting for command results."""

from datetime import datetime

from src.wl_account.application.schemas import BalanceResponse, LedgerResult
from src.wl_bot.domain.commands import Command
from src.wl_common.amounts import cents_to_display
from src.wl_common.enums import TransactionType
from src.wl_common.errors import (
    AppError,
    InsufficientBalanceError,
    InvalidAmountError,
    MissingCategoryError,
    NothingToUndoError,
    TransactionNotUndoableError,
    UnknownCommandError,
)
from src.wl_history.application.schemas import BreakdownResponse, HistoryResponse

RULE = "=" * 30

INVALID_AMOUNT = "❌ Please provide a valid positive amount"
NO_TRANSACTIONS = "No transactions found for the specified period."

USAGE = {
    Command.DEBIT: "❌ Please provide amount: /d <amount> <category>",
    Command.CREDIT: "❌ Please provide amount: /c <amount>",
    Command.SET: "❌ Please provide amount: /set <amount>",
}

ABOUT = {
    Command.DEBIT: "/d <amount> <category> - Add a debit transaction with amount and category",
    Command.CREDIT: "/c <amount> - Add a credit transaction to increase wallet balance",
    Command.SET: "/set <amount> - Set your wallet balance to a specific amount",
    Command.PAST: "/past [1d|1w|1m|1y] - View your transaction history for a period",
    Command.BREAKDOWN: "/br [1d|1w|1m|1y] - Show a category-wise breakdown of your expenses",
    Command.UNDO: "/un - Remove your most recent transaction",
    Command.BALANCE: "/bal - Show your current wallet balance",
    Command.HELP: "/help - Show this help message",
}


def help_text() -> str:
    return "Available commands:\n" + "\n".join(ABOUT.values())


def unknown_command() -> str:
    return "❌ Unknown command. Send /help to see what I understand."


def credit_added(result: LedgerResult) -> str:
    return (
        f"💰 Credit added: {result.amount_display}\n"
        f"💳 Current balance: {result.wallet_amount_display}"
    )


def debit_added(result: LedgerResult) -> str:
    return (
        f"💸 Debit added: {result.amount_display}\n"
        f"💳 Current balance: {result.wallet_amount_display}"
    )


def wallet_set(result: LedgerResult) -> str:
    return f"✅ Wallet balance set to {result.wallet_amount_display}"


def undone() -> str:
    return "✅ Latest transaction has been removed"


def balance(result: BalanceResponse) -> str:
    return f"💳 Current balance: {result.wallet_amount_display}"


def error_message(exc: AppError) -> str:
    if isinstance(exc, InvalidAmountError):
        return INVALID_AMOUNT
    if isinstance(exc, MissingCategoryError):
        return USAGE[Command.DEBIT]
    if isinstance(exc, InsufficientBalanceError):
        return f"❌ Insufficient balance. Current balance: {cents_to_display(exc.available)}"
    if isinstance(exc, NothingToUndoError):
        return "❌ No transaction found to undo."
    if isinstance(exc, TransactionNotUndoableError):
        return "❌ A wallet reset (/set) cannot be undone."
    if isinstance(exc, UnknownCommandError):
        return unknown_command()
    return f"❌ {exc.message}"


def _format_date(iso: str) -> str:
    return datetime.fromisoformat(iso).strftime("%d/%m/%Y")


def format_history(history: HistoryResponse) -> str:
    lines = []
    for item in history.items:
        icon = "💸" if item.type == TransactionType.DEBIT.value else "💰"
        category = f" | {item.category}" if item.category else ""
        lines.append(
            f"{icon} {_format_date(item.date)} | {item.type} {item.amount_display}{category}"
        )
    header = f"Txn History ({history.period})\n{RULE}\n"
    footer = (
        f"\n{RULE}\n📈 Net: {history.net_total_display} "
        f"({len(history.items)} transactions)"
    )
    return header + "\n".join(lines) + footer


def format_breakdown(breakdown: BreakdownResponse) -> str:
    lines = [f"📊 {item.category} → {item.total_display}" for item in breakdown.items]
    header = f"Category Breakdown ({breakdown.period})\n{RULE}\n"
    footer = (
        f"\n{RULE}\n💸 Total Spent: {breakdown.total_spent_display} "
        f"({breakdown.transaction_count} debit transactions)"
    )
    return header + "\n".join(lines) + footer
