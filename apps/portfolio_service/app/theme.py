import logging
import re
from typing import Dict, Optional

logger = logging.getLogger(__name__)

HEX_COLOR_PATTERN = r"^#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$"
_HEX_COLOR_RE = re.compile(HEX_COLOR_PATTERN)

LAYOUTS = ("grid", "timeline", "cards")

# Supported font families with their fallbacks
SUPPORTED_FONTS = {
    "Inter": "Inter, system-ui, sans-serif",
    "Roboto": "Roboto, system-ui, sans-serif",
    "Open Sans": "'Open Sans', system-ui, sans-serif",
    "Poppins": "Poppins, system-ui, sans-serif",
    "Montserrat": "Montserrat, system-ui, sans-serif",
}

DEFAULT_PRIMARY_COLOR = "#3b82f6"
DEFAULT_SECONDARY_COLOR = "#10b981"
DEFAULT_BACKGROUND_COLOR = "#ffffff"
DEFAULT_FONT = "Inter"

LAYOUT_CLASSES = {
    "grid": "layout-grid",
    "timeline": "layout-timeline",
    "cards": "layout-cards",
}

_HTML_TAG_RE = re.compile(r"<[^>]*>")
_IMPORT_RE = re.compile(r"@import", re.IGNORECASE)
_URL_RE = re.compile(r"url\(", re.IGNORECASE)

def is_valid_color(color: Optional[str]) -> bool:
    return bool(color) and _HEX_COLOR_RE.match(color) is not None

def sanitize_css(css: Optional[str]) -> Optional[str]:
    """Strip HTML tags, @import rules and url() calls from user CSS"""
    if not css:
        return css
    # Removing one match can splice together another, so repeat until stable
    while True:
        cleaned = _URL_RE.sub("", _IMPORT_RE.sub("", _HTML_TAG_RE.sub("", css)))
        if cleaned == css:
            return cleaned
        css = cleaned

def _get(theme, name: str):
    if isinstance(theme, dict):
        return theme.get(name)
    return getattr(theme, name, None)

def generate_theme_variables(theme) -> Dict[str, str]:
    """CSS custom properties for a theme, falling back to defaults for missing or invalid values"""
    primary = _get(theme, "primary_color")
    secondary = _get(theme, "secondary_color")
    background = _get(theme, "background_color")
    font = _get(theme, "font_family")
    return {
        "--primary-color": primary if is_valid_color(primary) else DEFAULT_PRIMARY_COLOR,
        "--secondary-color": secondary if is_valid_color(secondary) else DEFAULT_SECONDARY_COLOR,
        "--background-color": background if is_valid_color(background) else DEFAULT_BACKGROUND_COLOR,
        "--font-family": SUPPORTED_FONTS.get(font, SUPPORTED_FONTS[DEFAULT_FONT]),
    }

def generate_theme_styles(theme) -> str:
    """Build the stylesheet for a theme; custom CSS is sanitized again before it is appended"""
    variables = generate_theme_variables(theme)
    lines = [":root {"]
    lines += [f"  {key}: {value};" for key, value in variables.items()]
    lines.append("}")
    lines.append("")
    lines.append("body {")
    lines.append("  font-family: var(--font-family);")
    lines.append("  background-color: var(--background-color);")
    background_image = _get(theme, "background_image")
    if background_image:
        # quotes and parens would let the value break out of url()
        safe_image = re.sub(r"[\"'()\\\s]", "", background_image)
        lines.append(f"  background-image: url(\"{safe_image}\");")
        lines.append("  background-size: cover;")
        lines.append("  background-position: center;")
    lines.append("}")
    for name, prop, var in (
        ("theme-primary", "color", "--primary-color"),
        ("theme-secondary", "color", "--secondary-color"),
        ("theme-bg-primary", "background-color", "--primary-color"),
        ("theme-bg-secondary", "background-color", "--secondary-color"),
        ("theme-border-primary", "border-color", "--primary-color"),
        ("theme-border-secondary", "border-color", "--secondary-color"),
    ):
        lines.append("")
        lines.append(f".{name} {{")
        lines.append(f"  {prop}: var({var});")
        lines.append("}")
    styles = "\n".join(lines) + "\n"

    custom_css = sanitize_css(_get(theme, "custom_css"))
    if custom_css:
        styles += "\n" + custom_css + "\n"
    return styles

def get_layout_class(layout: Optional[str]) -> str:
    if layout in LAYOUT_CLASSES:
        return LAYOUT_CLASSES[layout]
    logger.warning(f"Invalid layout type: {layout}, falling back to grid")
    return LAYOUT_CLASSES["grid"]
