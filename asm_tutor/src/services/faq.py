"""Static FAQ content for the Class panel."""

from __future__ import annotations

from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict


class FaqSection(str, Enum):
    BACKGROUND = "background"
    INSTRUCTIONS = "instructions"
    EMULATOR = "emulator"


class FaqEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    question: str
    answer: str
    # "Show Me" has no action attached yet; it is only rendered.
    show_me: bool = False


SECTION_TITLES = {
    FaqSection.BACKGROUND: "Background",
    FaqSection.INSTRUCTIONS: "Instructions",
    FaqSection.EMULATOR: "Emulator",
}

_FAQS: dict[FaqSection, tuple[FaqEntry, ...]] = {
    FaqSection.BACKGROUND: (
        FaqEntry(
            question="What is assembly language?",
            answer=(
                "Assembly language is a low-level programming language that maps closely "
                "to machine code instructions for a CPU."
            ),
        ),
        FaqEntry(
            question="Why learn computer organization?",
            answer=(
                "Understanding computer organization helps you reason about performance, "
                "debugging, and how high-level code maps to hardware behavior."
            ),
        ),
    ),
    FaqSection.INSTRUCTIONS: (
        FaqEntry(
            question="How do I run a program in the emulator?",
            answer=(
                "Open the editor, assemble the code, then use the Run controls in the "
                "emulator panel. Watch the Console for output and the Registers panel "
                "for changes."
            ),
            show_me=True,
        ),
        FaqEntry(
            question="How do I step through instructions?",
            answer=(
                "Use Step / Next controls in the emulator. Each instruction will update "
                "registers and memory—observe the changes after each step."
            ),
            show_me=True,
        ),
        FaqEntry(
            question="How do I format assembly for the editor?",
            answer=(
                "Use standard x86 mnemonics and comments. Keep labels on their own line "
                "and align operands for readability."
            ),
        ),
    ),
    FaqSection.EMULATOR: (
        FaqEntry(
            question="What are some examples of x86 instructions?",
            answer=(
                "Some instructions move data such as ADD, SUB (subtract), and MOV (move), "
                "and some tell the machine how to navigate like JMP (jump), CALL, and etc."
            ),
            show_me=True,
        ),
        FaqEntry(
            question="What does the Registers panel show?",
            answer=(
                "Registers show current CPU register values (e.g., EAX, EBX) and flags—"
                "useful for tracking program state."
            ),
        ),
        FaqEntry(
            question="How is memory represented?",
            answer=(
                "Memory is displayed as a linear address space; you can inspect addresses, "
                "watch variables, and see stack frames during execution."
            ),
        ),
    ),
}


def get_section(section: FaqSection | str) -> List[FaqEntry]:
    """Entries for one section. Raises ValueError for an unknown section name."""
    return list(_FAQS[FaqSection(section)])


def list_sections() -> List[Tuple[FaqSection, str, List[FaqEntry]]]:
    return [(section, SECTION_TITLES[section], list(_FAQS[section])) for section in FaqSection]
