"""
Tests for custom section content validation
"""
import json

import pytest

from apps.portfolio_service.app.sections import (
    CustomContent,
    GalleryContent,
    SectionType,
    SkillsContent,
    TextContent,
    TimelineContent,
    content_to_json,
    parse_section_content,
    serialize_section_content,
)


class TestParseSectionContent:
    """parse_section_content"""

    def test_gallery_from_json_string(self):
        raw = '[{"url":"a.png","title":"A"}]'
        result = parse_section_content(raw, "gallery")
        assert isinstance(result, GalleryContent)
        assert result.type == "gallery"
        assert result.content[0].url == "a.png"
        assert result.content[0].title == "A"

    def test_accepts_decoded_value(self):
        result = parse_section_content([{"date": "2020", "title": "Joined", "description": "First day"}], SectionType.TIMELINE)
        assert isinstance(result, TimelineContent)
        assert result.content[0].title == "Joined"

    def test_timeline_missing_fields_rejected(self):
        assert parse_section_content('[{"date":"2020"}]', "timeline") is None

    def test_skills_with_numeric_level(self):
        raw = json.dumps([
            {"name": "Python", "level": 80, "category": "Languages"},
            {"name": "Go", "level": 62.5, "category": "Languages"},
        ])
        result = parse_section_content(raw, "skills")
        assert isinstance(result, SkillsContent)
        assert [s.level for s in result.content] == [80, 62.5]

    def test_skill_level_is_not_range_checked(self):
        result = parse_section_content([{"name": "Python", "level": 140, "category": "Languages"}], "skills")
        assert result is not None
        assert result.content[0].level == 140

    def test_skill_level_string_rejected(self):
        assert parse_section_content([{"name": "Python", "level": "80", "category": "Languages"}], "skills") is None

    def test_text_blocks(self):
        blocks = [{"_type": "block", "style": "normal", "children": [{"_type": "span", "text": "Hello"}]}]
        result = parse_section_content(blocks, "text")
        assert isinstance(result, TextContent)
        assert result.content[0].block_type == "block"

    def test_text_block_missing_children_rejected(self):
        assert parse_section_content([{"_type": "block"}], "text") is None

    def test_custom_string(self):
        result = parse_section_content(json.dumps("<b>hi</b>"), "custom")
        assert isinstance(result, CustomContent)
        assert result.content == "<b>hi</b>"

    def test_custom_non_string_rejected(self):
        assert parse_section_content('["<b>hi</b>"]', "custom") is None

    def test_invalid_json_returns_none(self):
        assert parse_section_content("{not json", "gallery") is None

    def test_unknown_type_returns_none(self):
        assert parse_section_content("[]", "video") is None

    def test_empty_list_is_valid(self):
        result = parse_section_content("[]", "gallery")
        assert result is not None
        assert result.content == []

    def test_non_list_rejected(self):
        assert parse_section_content('{"url":"a.png","title":"A"}', "gallery") is None

    @pytest.mark.parametrize("section_type", ["gallery", "timeline", "skills", "text"])
    def test_list_of_non_objects_rejected(self, section_type):
        assert parse_section_content('[1, 2, 3]', section_type) is None


class TestSerializeSectionContent:
    """content_to_json / serialize_section_content"""

    def test_extra_fields_are_kept(self):
        result = parse_section_content(
            [{"url": "a.png", "title": "A", "description": "Sunset"}], "gallery"
        )
        assert content_to_json(result) == [{"url": "a.png", "title": "A", "description": "Sunset"}]

    def test_rich_text_key_restored(self):
        blocks = [{"_type": "block", "children": [{"_type": "span", "text": "Hi"}]}]
        stored = serialize_section_content(parse_section_content(blocks, "text"))
        assert json.loads(stored) == blocks
