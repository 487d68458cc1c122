"""
Tests for section rendering
"""
import json
from types import SimpleNamespace

from apps.portfolio_service.app.rendering import (
    CONTENT_RENDERERS,
    group_skills,
    render_content,
    render_section,
    text_nodes,
)
from apps.portfolio_service.app.sections import SectionType, parse_section_content


def make_section(type, content, title="My Section", is_published=True):
    """Stand-in for a stored CustomSection row"""
    if not isinstance(content, str):
        content = json.dumps(content)
    return SimpleNamespace(title=title, type=type, content=content, is_published=is_published)


class TestRenderContent:

    def test_every_section_type_has_a_renderer(self):
        assert set(CONTENT_RENDERERS) == set(SectionType)

    def test_gallery_tile_per_item(self):
        content = parse_section_content('[{"url":"a.png","title":"A"}]', "gallery")
        html = render_content(content)
        assert html.count("<figure") == 1
        assert 'src="a.png"' in html
        assert "<h3>A</h3>" in html

    def test_gallery_optional_description(self):
        content = parse_section_content([{"url": "a.png", "title": "A", "description": "Sunset"}], "gallery")
        assert "<p>Sunset</p>" in render_content(content)

    def test_skills_grouped_by_category(self):
        content = parse_section_content([{"name": "Python", "level": 80, "category": "Languages"}], "skills")
        html = render_content(content)
        assert "<h3>Languages</h3>" in html
        assert "Python" in html
        assert "80%" in html

    def test_skills_missing_category_grouped_as_other(self):
        content = parse_section_content(
            [
                {"name": "Python", "level": 80, "category": ""},
                {"name": "Docker", "level": 60, "category": "Tools"},
            ],
            "skills",
        )
        groups = group_skills(content)
        assert list(groups) == ["Other", "Tools"]

    def test_timeline_entries(self):
        content = parse_section_content(
            [
                {"date": "2020", "title": "Joined", "description": "First day"},
                {"date": "2022", "title": "Promoted", "description": "Lead", "icon": "*"},
            ],
            "timeline",
        )
        html = render_content(content)
        assert html.count('class="timeline-entry"') == 2
        assert "Promoted" in html

    def test_text_is_escaped(self):
        blocks = [{"_type": "block", "style": "normal", "children": [{"_type": "span", "text": "<script>x</script>"}]}]
        html = render_content(parse_section_content(blocks, "text"))
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_text_headings_marks_and_lists(self):
        blocks = [
            {"_type": "block", "style": "h2", "children": [{"_type": "span", "text": "Title"}]},
            {"_type": "block", "style": "normal", "children": [{"_type": "span", "text": "bold", "marks": ["strong"]}]},
            {"_type": "block", "listItem": "bullet", "children": [{"_type": "span", "text": "one"}]},
            {"_type": "block", "listItem": "bullet", "children": [{"_type": "span", "text": "two"}]},
            {"_type": "image", "children": []},
        ]
        content = parse_section_content(blocks, "text")
        nodes = text_nodes(content)
        assert [n["tag"] for n in nodes] == ["h2", "p", "ul"]
        html = render_content(content)
        assert "<h2>Title</h2>" in html
        assert "<strong>bold</strong>" in html
        assert html.count("<li>") == 2

    def test_custom_markup_is_not_escaped(self):
        content = parse_section_content(json.dumps("<b>hi</b>"), "custom")
        assert render_content(content) == "<b>hi</b>"

    def test_unknown_tag_renders_notice(self):
        html = render_content(SimpleNamespace(type="video"))
        assert "Unknown section type: video" in html


class TestRenderSection:

    def test_unpublished_renders_nothing(self):
        section = make_section("gallery", [{"url": "a.png", "title": "A"}], is_published=False)
        assert render_section(section) == ""

    def test_invalid_content_shows_placeholder_under_title(self):
        section = make_section("timeline", [{"date": "2020"}], title="Career")
        html = render_section(section)
        assert "Career" in html
        assert "Invalid content for section type: timeline" in html
        assert "timeline-entry" not in html

    def test_title_is_escaped(self):
        section = make_section("gallery", [], title="<i>x</i>")
        html = render_section(section)
        assert "&lt;i&gt;x&lt;/i&gt;" in html

    def test_valid_section_wraps_body(self):
        section = make_section("gallery", [{"url": "a.png", "title": "A"}], title="Photos")
        html = render_section(section)
        assert "Photos" in html
        assert 'src="a.png"' in html
