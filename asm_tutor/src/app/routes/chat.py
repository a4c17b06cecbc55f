from fastapi import APIRouter, Depends

from ..schemas.chat import ChatState, ReplyOut, SendMessageRequest, SendMessageResponse
from ...services.conversation import ConversationController, get_default_controller


router = APIRouter()


def _state(controller: ConversationController) -> ChatState:
    return ChatState(messages=list(controller.messages), loading=controller.loading)


@router.get("/api/chat", response_model=ChatState)
async def get_chat(controller: ConversationController = Depends(get_default_controller)):
    """Get the conversation and loading flag."""
    return _state(controller)


@router.post("/api/chat/messages", response_model=SendMessageResponse)
async def send_message(
    request: SendMessageRequest,
    controller: ConversationController = Depends(get_default_controller),
):
    """
    Send a message and wait for the tutor's reply.
    A send that is superseded by a newer one (or by a clear) returns outcome "aborted".
    """
    reply = await controller.send(request.content)
    reply_out = ReplyOut(outcome=reply.outcome, text=reply.text) if reply is not None else None
    return SendMessageResponse(reply=reply_out, state=_state(controller))


@router.delete("/api/chat", response_model=ChatState)
async def clear_chat(controller: ConversationController = Depends(get_default_controller)):
    """Cancel any pending reply and empty the conversation."""
    controller.clear()
    return _state(controller)
