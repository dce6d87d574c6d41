"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class TransactionType(str, Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"
    SET_WALLET = "SET_WALLET"
