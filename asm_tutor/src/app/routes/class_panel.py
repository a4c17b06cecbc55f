from typing import List

from fastapi import APIRouter, HTTPException

from ..schemas.class_panel import ClassSection
from ...services import faq


router = APIRouter()


@router.get("/api/class/sections", response_model=List[ClassSection])
async def list_class_sections():
    """List every Class section with its FAQ entries."""
    return [
        ClassSection(section=section, title=title, entries=entries)
        for section, title, entries in faq.list_sections()
    ]


@router.get("/api/class/sections/{section}", response_model=ClassSection)
async def get_class_section(section: str):
    """Get one Class section."""
    try:
        entries = faq.get_section(section)
    except ValueError:
        raise HTTPException(status_code=404, detail="section_not_found")
    key = faq.FaqSection(section)
    return ClassSection(section=key, title=faq.SECTION_TITLES[key], entries=entries)
