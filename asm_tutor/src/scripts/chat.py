from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Callable, TextIO

import httpx

from asm_tutor.src import config
from asm_tutor.src.engine import completions
from asm_tutor.src.services.conversation import ConversationController


_HELP = "Commands: /clear empties the conversation, /quit exits."


async def run_session(
    controller: ConversationController,
    read_line: Callable[[], str],
    out: TextIO,
) -> None:
    """Read lines until /quit or EOF, printing each tutor reply."""
    print(_HELP, file=out)
    while True:
        try:
            line = await asyncio.to_thread(read_line)
        except EOFError:
            break
        command = line.strip()
        if command == "/quit":
            break
        if command == "/clear":
            controller.clear()
            print("(conversation cleared)", file=out)
            continue

        reply = await controller.send(line)
        if reply is not None:
            print(f"tutor> {reply.text}", file=out)


async def _run(model: str, temperature: float) -> None:
    async with httpx.AsyncClient(timeout=httpx.Timeout(config.OPENAI_TIMEOUT_SECONDS)) as client:
        completions.set_client(client)
        try:
            controller = ConversationController(
                api_key=config.OPENAI_API_KEY,
                model=model,
                temperature=temperature,
            )
            await run_session(controller, lambda: input("you> "), sys.stdout)
        finally:
            completions.set_client(None)


def main() -> None:
    parser = argparse.ArgumentParser(description="Chat with the assembly-language tutor in a terminal.")
    parser.add_argument("--model", default=config.TUTOR_MODEL)
    parser.add_argument("--temperature", type=float, default=config.TUTOR_TEMPERATURE)
    args = parser.parse_args()
    asyncio.run(_run(args.model, args.temperature))


if __name__ == "__main__":
    main()
