from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict


class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """One chat message; never mutated after it is appended."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    sender: Sender


class ApiMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class CompletionRequest(BaseModel):
    model: str
    messages: list[ApiMessage]
    temperature: float
