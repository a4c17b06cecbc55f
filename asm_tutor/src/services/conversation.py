"""In-memory conversation controller for the tutor chat."""

from __future__ import annotations

import asyncio
import logging
import secrets
import string
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from .. import config
from ..engine.completions import CompletionResult, query_completion
from ..engine.prompts import build_messages
from ..engine.schemas import Message, Sender
from ..utils.redact import redact_secrets

logger = logging.getLogger(__name__)


NO_API_KEY_TEXT = "Error: No API key."
NO_RESPONSE_TEXT = "No response"
ABORTED_TEXT = "Request aborted"

_ID_ALPHABET = string.ascii_lowercase + string.digits


class ReplyOutcome(str, Enum):
    OK = "ok"
    NO_RESPONSE = "no_response"
    NO_CREDENTIAL = "no_credential"
    ERROR = "error"
    ABORTED = "aborted"


@dataclass(frozen=True)
class Reply:
    outcome: ReplyOutcome
    text: str
    message: Optional[Message] = None


CompletionFn = Callable[..., Awaitable[CompletionResult]]


def make_id() -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))


def reply_from_result(result: CompletionResult) -> tuple[ReplyOutcome, str]:
    if not result.ok:
        return ReplyOutcome.ERROR, f"Error: {result.error_text or 'request failed'}"
    if isinstance(result.content, str):
        return ReplyOutcome.OK, result.content.strip()
    return ReplyOutcome.NO_RESPONSE, NO_RESPONSE_TEXT


class ConversationController:
    """
    Owns the message list, the loading flag and the current request epoch.

    Only the most recent completion call may resolve into the conversation:
    `send` and `clear` bump the epoch and cancel the previous task, and a call
    whose epoch is stale when it settles is discarded.
    """

    def __init__(
        self,
        complete: CompletionFn = query_completion,
        *,
        api_key: str | None,
        model: str = config.TUTOR_MODEL,
        temperature: float = config.TUTOR_TEMPERATURE,
        id_factory: Callable[[], str] = make_id,
    ):
        self._complete = complete
        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._id_factory = id_factory
        self._messages: list[Message] = []
        self._loading = False
        self._epoch = 0
        self._inflight: asyncio.Task | None = None

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def has_credential(self) -> bool:
        return bool(self._api_key)

    def append(self, text: str, sender: Sender) -> Message:
        message = Message(id=self._id_factory(), text=text, sender=sender)
        self._messages.append(message)
        return message

    async def send(self, user_text: str) -> Reply | None:
        text = user_text.strip()
        if not text:
            return None

        self.append(text, Sender.USER)

        if not self._api_key:
            message = self.append(NO_API_KEY_TEXT, Sender.ASSISTANT)
            return Reply(ReplyOutcome.NO_CREDENTIAL, NO_API_KEY_TEXT, message)

        self._cancel_inflight()
        self._epoch += 1
        epoch = self._epoch
        self._loading = True

        api_messages = build_messages(self._messages)
        logger.info("chat_send epoch=%s messages=%s", epoch, len(api_messages))
        task = asyncio.create_task(
            self._complete(
                api_messages,
                api_key=self._api_key,
                model=self._model,
                temperature=self._temperature,
            )
        )
        self._inflight = task

        try:
            outcome, reply_text = reply_from_result(await task)
        except asyncio.CancelledError:
            current = asyncio.current_task()
            caller_cancelled = current is not None and current.cancelling() > 0
            if epoch != self._epoch and not caller_cancelled:
                logger.info("chat_send_superseded epoch=%s current=%s", epoch, self._epoch)
                return Reply(ReplyOutcome.ABORTED, ABORTED_TEXT)
            if epoch == self._epoch:
                self._inflight = None
                self._loading = False
            raise
        except Exception as e:
            logger.exception("chat_send_failed epoch=%s", epoch)
            reason = redact_secrets(str(e) or "request failed", self._api_key)
            outcome, reply_text = ReplyOutcome.ERROR, f"Error: {reason}"

        if epoch != self._epoch:
            logger.info("chat_send_stale epoch=%s current=%s", epoch, self._epoch)
            return Reply(ReplyOutcome.ABORTED, ABORTED_TEXT)

        self._inflight = None
        message = self.append(reply_text, Sender.ASSISTANT)
        self._loading = False
        logger.info("chat_reply epoch=%s outcome=%s", epoch, outcome.value)
        return Reply(outcome, reply_text, message)

    def clear(self) -> None:
        self._cancel_inflight()
        self._epoch += 1
        self._messages = []
        self._loading = False
        logger.info("chat_cleared epoch=%s", self._epoch)

    def _cancel_inflight(self) -> None:
        task = self._inflight
        self._inflight = None
        if task is not None and not task.done():
            task.cancel()


_DEFAULT_CONTROLLER: ConversationController | None = None


def get_default_controller() -> ConversationController:
    global _DEFAULT_CONTROLLER
    if _DEFAULT_CONTROLLER is None:
        _DEFAULT_CONTROLLER = ConversationController(api_key=config.OPENAI_API_KEY)
    return _DEFAULT_CONTROLLER


def set_default_controller(controller: ConversationController | None) -> None:
    global _DEFAULT_CONTROLLER
    _DEFAULT_CONTROLLER = controller
