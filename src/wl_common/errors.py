"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Validation / command input
  2xxx: Wallet balance
  3xxx: Lookup (user, transaction history)
  9xxx: System / store
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Validation ---

class ValidationError(AppError):
    """Rejected before any store access; `field` names the malformed input."""

    def __init__(self, field: str, message: str, code: int = 1000) -> None:
        self.field = field
        super().__init__(code, message, 422)


class InvalidAmountError(ValidationError):
    def __init__(self, raw: object, field: str = "amount") -> None:
        super().__init__(field, f"Invalid {field}: {raw!r} is not a valid non-negative amount", 1001)


class MissingCategoryError(ValidationError):
    def __init__(self) -> None:
        super().__init__("category", "Category is required for a debit", 1002)


class UnknownCommandError(AppError):
    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(1003, f"Unknown command: {command}", 400)


# --- 2xxx: Wallet ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(
            2001,
            f"Insufficient balance: required {required} cents, available {available} cents",
            422,
        )


# --- 3xxx: Lookup ---

class NotFoundError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 404)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str) -> None:
        super().__init__(3001, f"User not found: {user_id}")


class NothingToUndoError(NotFoundError):
    def __init__(self) -> None:
        super().__init__(3002, "Nothing to undo")


class TransactionNotUndoableError(AppError):
    def __init__(self, transaction_id: int, transaction_type: str) -> None:
        super().__init__(
            3003,
            f"Transaction {transaction_id} ({transaction_type}) cannot be undone",
            422,
        )


# --- 9xxx: System ---

class StoreError(AppError):
    """Store unavailable or transaction conflict. Safe for the caller to retry."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(9001, f"Failed to {operation}, please try again", 503)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
