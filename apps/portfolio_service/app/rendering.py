"""
HTML rendering for custom sections and the public portfolio page
"""
import logging
import os
from collections import OrderedDict
from typing import Any, Callable, Dict, List

import jinja2
from markupsafe import Markup

from .sections import (
    SectionType,
    SectionContent,
    TextContent,
    GalleryContent,
    TimelineContent,
    SkillsContent,
    CustomContent,
    parse_section_content,
)

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "templates")

template_loader = jinja2.FileSystemLoader(searchpath=TEMPLATES_DIR)
template_env = jinja2.Environment(loader=template_loader, autoescape=True)

BLOCK_TAGS = {
    "normal": "p",
    "h1": "h1",
    "h2": "h2",
    "h3": "h3",
    "h4": "h4",
    "h5": "h5",
    "h6": "h6",
    "blockquote": "blockquote",
}
MARK_TAGS = {"strong": "strong", "em": "em", "code": "code", "underline": "u"}

def _span_nodes(children) -> List[Dict[str, Any]]:
    spans = []
    if not isinstance(children, list):
        return spans
    for child in children:
        if not isinstance(child, dict) or not isinstance(child.get("text"), str):
            continue
        marks = child.get("marks") if isinstance(child.get("marks"), list) else []
        spans.append({
            "text": child["text"],
            "tags": [MARK_TAGS[m] for m in marks if m in MARK_TAGS],
        })
    return spans

def text_nodes(content: TextContent) -> List[Dict[str, Any]]:
    """
    Flatten rich text blocks into template nodes.
    Consecutive list items of the same kind are grouped into one ul/ol node.
    Blocks that are not text blocks (images, embeds) are skipped.
    """
    nodes: List[Dict[str, Any]] = []
    for block in content.content:
        if block.block_type != "block":
            continue
        extra = block.model_extra or {}
        spans = _span_nodes(block.children)
        list_item = extra.get("listItem")
        if list_item in ("bullet", "number"):
            tag = "ul" if list_item == "bullet" else "ol"
            if nodes and nodes[-1]["tag"] == tag:
                nodes[-1]["items"].append(spans)
            else:
                nodes.append({"tag": tag, "items": [spans]})
            continue
        nodes.append({"tag": BLOCK_TAGS.get(extra.get("style", "normal"), "p"), "spans": spans})
    return nodes

def group_skills(content: SkillsContent) -> "OrderedDict[str, list]":
    groups: "OrderedDict[str, list]" = OrderedDict()
    for skill in content.content:
        groups.setdefault(skill.category or "Other", []).append(skill)
    return groups

def _render_text(content: TextContent) -> Markup:
    return Markup(template_env.get_template("sections/text.html").render(nodes=text_nodes(content)))

def _render_gallery(content: GalleryContent) -> Markup:
    return Markup(template_env.get_template("sections/gallery.html").render(items=content.content))

def _render_timeline(content: TimelineContent) -> Markup:
    return Markup(template_env.get_template("sections/timeline.html").render(items=content.content))

def _render_skills(content: SkillsContent) -> Markup:
    return Markup(template_env.get_template("sections/skills.html").render(groups=group_skills(content)))

def _render_custom(content: CustomContent) -> Markup:
    # Owner-authored markup is injected as-is
    return Markup(content.content)

CONTENT_RENDERERS: Dict[SectionType, Callable[[Any], Markup]] = {
    SectionType.TEXT: _render_text,
    SectionType.GALLERY: _render_gallery,
    SectionType.TIMELINE: _render_timeline,
    SectionType.SKILLS: _render_skills,
    SectionType.CUSTOM: _render_custom,
}

_missing = set(SectionType) - set(CONTENT_RENDERERS)
if _missing:
    raise RuntimeError(f"No renderer registered for section types: {sorted(t.value for t in _missing)}")

def render_content(content: SectionContent) -> Markup:
    """Render validated section content by dispatching on its type tag."""
    try:
        renderer = CONTENT_RENDERERS[SectionType(content.type)]
    except (ValueError, KeyError):
        logger.error(f"No renderer for section type {content.type!r}")
        return Markup(template_env.get_template("sections/unknown.html").render(section_type=content.type))
    return renderer(content)

def render_section(section) -> Markup:
    """
    Render a stored CustomSection (title + content).
    Unpublished sections render as an empty string; content that fails
    validation renders a placeholder under the section title.
    """
    if not section.is_published:
        return Markup("")
    validated = parse_section_content(section.content, section.type)
    body = render_content(validated) if validated is not None else None
    return Markup(template_env.get_template("sections/section.html").render(
        title=section.title,
        section_type=section.type,
        body=body,
    ))

def render_portfolio_page(context: Dict[str, Any]) -> str:
    return template_env.get_template("portfolio.html").render(**context)
