from typing import List, Optional

from pydantic import BaseModel

from ...engine.schemas import Message
from ...services.conversation import ReplyOutcome


class SendMessageRequest(BaseModel):
    """Request to send a message to the tutor."""

    content: str


class ChatState(BaseModel):
    """Current conversation and whether a reply is pending."""

    messages: List[Message]
    loading: bool


class ReplyOut(BaseModel):
    outcome: ReplyOutcome
    text: str


class SendMessageResponse(BaseModel):
    """Reply to a send (null when the input was blank) plus the resulting state."""

    reply: Optional[ReplyOut]
    state: ChatState
