"""
Custom section content model

A custom section stores its content as serialized JSON whose shape depends on
the section's declared type. parse_section_content() checks untrusted content
against the shape for that type and returns a tagged value, or None when the
content does not conform.
"""
import enum
import json
import logging
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

class SectionType(str, enum.Enum):
    TEXT = "text"
    GALLERY = "gallery"
    TIMELINE = "timeline"
    SKILLS = "skills"
    CUSTOM = "custom"

# --- Item shapes ---
# Strict so that e.g. a numeric title or a "80" level is rejected instead of coerced.
# Extra keys (description, icon, marks...) are kept so nothing displayable is lost.
class ContentItem(BaseModel):
    model_config = ConfigDict(strict=True, extra="allow", populate_by_name=True)

class RichTextBlock(ContentItem):
    block_type: str = Field(alias="_type")
    children: Any

class GalleryItem(ContentItem):
    url: str
    title: str

class TimelineItem(ContentItem):
    date: str
    title: str
    description: str

class SkillItem(ContentItem):
    name: str
    level: Union[int, float]
    category: str

# --- Tagged content ---
class TextContent(BaseModel):
    type: Literal["text"] = "text"
    content: List[RichTextBlock]

class GalleryContent(BaseModel):
    type: Literal["gallery"] = "gallery"
    content: List[GalleryItem]

class TimelineContent(BaseModel):
    type: Literal["timeline"] = "timeline"
    content: List[TimelineItem]

class SkillsContent(BaseModel):
    type: Literal["skills"] = "skills"
    content: List[SkillItem]

class CustomContent(BaseModel):
    model_config = ConfigDict(strict=True)
    type: Literal["custom"] = "custom"
    content: str

SectionContent = Annotated[
    Union[TextContent, GalleryContent, TimelineContent, SkillsContent, CustomContent],
    Field(discriminator="type"),
]

section_content_adapter = TypeAdapter(SectionContent)

def parse_section_content(raw_content: Any, section_type: Union[str, SectionType]) -> Optional[SectionContent]:
    """
    Validate raw section content against the shape for its declared type.

    raw_content may be a serialized JSON string or an already decoded value.
    Returns the tagged content, or None if the type is unknown, the string is
    not JSON, or the decoded value does not match the expected shape.
    """
    try:
        tag = SectionType(section_type)
    except ValueError:
        logger.warning(f"Rejected section content: unknown section type {section_type!r}")
        return None

    content = raw_content
    if isinstance(raw_content, (str, bytes)):
        try:
            content = json.loads(raw_content)
        except ValueError as e:
            logger.warning(f"Rejected {tag.value} section content: not valid JSON ({e})")
            return None

    try:
        return section_content_adapter.validate_python({"type": tag.value, "content": content})
    except ValidationError as e:
        logger.warning(f"Rejected {tag.value} section content: {e.error_count()} validation error(s)")
        return None

def content_to_json(value: SectionContent):
    """Plain JSON-compatible content, with rich text keys restored to `_type`"""
    return value.model_dump(mode="json", by_alias=True)["content"]

def serialize_section_content(value: SectionContent) -> str:
    return json.dumps(content_to_json(value))
