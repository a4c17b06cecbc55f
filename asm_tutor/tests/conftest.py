import os

# Ensure config reads these during import in tests.
os.environ.setdefault("OPENAI_API_KEY", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from asm_tutor.src.services import conversation as conversation_module


@pytest.fixture
def ids():
    counter = {"n": 0}

    def _next():
        counter["n"] += 1
        return f"m{counter['n']}"

    return _next


@pytest.fixture(autouse=True)
def reset_default_controller():
    conversation_module.set_default_controller(None)
    try:
        yield
    finally:
        conversation_module.set_default_controller(None)
