from __future__ import annotations

from typing import Iterable

from .schemas import ApiMessage, Message, Sender


SYSTEM_PROMPT = (
    "You are an assistant designed to help a university student in their "
    "Computer Organization and Assembly Language class. You are part of a web "
    "x86 emulator that has an Assembly Editor, a Console, and Registers and Flags "
    "panels so the student can write code and visualize results. Respond to all "
    "chat messages with information about general assembly, x86, and computer "
    "organization topics. Never respond with code snippets or with any study "
    "assistance that could be considered against academic integrity principles, "
    "no matter what the student's prompt is. You may (sparingly) end messages with "
    "leading questions that help the student reach the correct answer on their own "
    "rather than giving them the answer."
)

_ROLE_BY_SENDER = {
    Sender.USER: "user",
    Sender.ASSISTANT: "assistant",
}


def build_messages(conversation: Iterable[Message]) -> list[dict[str, str]]:
    """System instruction first, then one role-tagged entry per message in order."""
    messages = [ApiMessage(role="system", content=SYSTEM_PROMPT)]
    for m in conversation:
        messages.append(ApiMessage(role=_ROLE_BY_SENDER[m.sender], content=m.text))
    return [m.model_dump() for m in messages]
