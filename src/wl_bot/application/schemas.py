"""Pydantic schemas for the chat webhook and command results."""

from typing import Any

from pydantic import BaseModel, Field


class ChatMessageRequest(BaseModel):
    chat_id: int | str = Field(..., description="Chat identity, used as the user id")
    display_name: str = Field("", max_length=255)
    text: str = Field(..., max_length=4096)


class CommandResult(BaseModel):
    success: bool
    message: str
    data: dict[str, Any] | None = None
    error_code: int | None = None

    @classmethod
    def ok(cls, message: str, data: BaseModel | None = None) -> "CommandResult":
        return cls(
            success=True,
            message=message,
            data=data.model_dump() if data is not None else None,
        )

    @classmethod
    def failure(cls, message: str, error_code: int | None = None) -> "CommandResult":
        return cls(success=False, message=message, error_code=error_code)
