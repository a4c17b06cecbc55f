from typing import List

from pydantic import BaseModel

from ...services.faq import FaqEntry, FaqSection


class ClassSection(BaseModel):
    """One named group of FAQ entries in the Class panel."""

    section: FaqSection
    title: str
    entries: List[FaqEntry]
