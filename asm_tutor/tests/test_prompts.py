from asm_tutor.src.engine.prompts import SYSTEM_PROMPT, build_messages
from asm_tutor.src.engine.schemas import Message, Sender


def test_system_instruction_comes_first():
    messages = build_messages([])

    assert messages == [{"role": "system", "content": SYSTEM_PROMPT}]
    assert "Assembly Language" in SYSTEM_PROMPT
    assert "code snippets" in SYSTEM_PROMPT


def test_senders_map_to_roles_verbatim_and_in_order():
    conversation = [
        Message(id="a", text="What is EAX?", sender=Sender.USER),
        Message(id="b", text="  A register.  ", sender=Sender.ASSISTANT),
        Message(id="c", text="And EBX?", sender=Sender.USER),
    ]

    messages = build_messages(conversation)

    assert messages[1:] == [
        {"role": "user", "content": "What is EAX?"},
        {"role": "assistant", "content": "  A register.  "},
        {"role": "user", "content": "And EBX?"},
    ]
