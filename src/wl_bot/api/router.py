"""Chat webhook — one endpoint, one command per inbound message.

Command failures (bad amount, insufficient balance, ...) are business outcomes
and come back as `data.success = false` inside a normal 200 envelope.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_bot.application.router import CommandRouter
from src.wl_bot.application.schemas import ChatMessageRequest
from src.wl_common.database import get_db_session
from src.wl_common.response import ApiResponse, success_response

router = APIRouter(prefix="/messages", tags=["messages"])

_command_router = CommandRouter()


def get_command_router() -> CommandRouter:
    """FastAPI dependency: the process-wide router (and the entry cache it owns)."""
    return _command_router


@router.post("")
async def handle_message(
    body: ChatMessageRequest,
    command_router: Annotated[CommandRouter, Depends(get_command_router)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await command_router.dispatch(
        db, str(body.chat_id), body.display_name, body.text
    )
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
