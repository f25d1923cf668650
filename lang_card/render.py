import math
import re
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class Theme:
    bg: str
    border: str
    title: str
    text: str
    subtitle: str


DEFAULT_THEME = "tokyonight"

THEMES = MappingProxyType(
    {
        "tokyonight": Theme(
            bg="#1a1b27",
            border="#38bdae",
            title="#70a5fd",
            text="#a9b1d6",
            subtitle="#38bdae",
        ),
        "dark": Theme(
            bg="#0d1117",
            border="#30363d",
            title="#58a6ff",
            text="#c9d1d9",
            subtitle="#8b949e",
        ),
        "light": Theme(
            bg="#ffffff",
            border="#d0d7de",
            title="#0969da",
            text="#1f2328",
            subtitle="#656d76",
        ),
    }
)

FONT_FAMILY = "-apple-system, BlinkMacSystemFont, 'Segoe UI', Helvetica, Arial, sans-serif"
TITLE = "Top Languages"
WARNING_COLOR = "#e5534b"

CARD_WIDTH = 450
PADDING = 25
DONUT_CX = 120
DONUT_CY = 130
OUTER_RADIUS = 70
INNER_RADIUS = 42
MAX_SPAN = 359.999
LEGEND_X = 230
LEGEND_START_Y = 65
LEGEND_ROW_HEIGHT = 28
LEGEND_DOT_RADIUS = 5
ERROR_MIN_HEIGHT = 120
ERROR_LINE_HEIGHT = 20
WRAP_WIDTH = 50

# Code points outside the XML 1.0 Char production
INVALID_XML_CHARS = re.compile(
    r"[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)


def get_theme(name):
    return THEMES.get(name, THEMES[DEFAULT_THEME])


def escape_xml(value):
    """
    Escape the five XML metacharacters and drop characters XML cannot carry
    """
    return (
        INVALID_XML_CHARS.sub("", str(value))
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def wrap_text(message, width=WRAP_WIDTH):
    """
    Greedily pack words into lines of at most `width` characters.
    A single word longer than `width` gets a line of its own.
    """
    lines = []
    current = ""
    for word in message.split():
        candidate = f"{current} {word}" if current else word
        if len(candidate) > width and current:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def polar_to_cartesian(cx, cy, radius, degrees):
    """
    0 degrees is 12 o'clock, angles grow clockwise.
    """
    radians = math.radians(degrees - 90)
    return cx + radius * math.cos(radians), cy + radius * math.sin(radians)


def describe_arc(cx, cy, outer_r, inner_r, start_deg, end_deg):
    """
    Build the path `d` attribute for one donut ring sector.
    The span is clamped below 360 so the start and end points never coincide.
    """
    span = min(end_deg - start_deg, MAX_SPAN)
    end_deg = start_deg + span

    outer_start = polar_to_cartesian(cx, cy, outer_r, start_deg)
    outer_end = polar_to_cartesian(cx, cy, outer_r, end_deg)
    inner_end = polar_to_cartesian(cx, cy, inner_r, end_deg)
    inner_start = polar_to_cartesian(cx, cy, inner_r, start_deg)

    large_arc = 1 if span > 180 else 0

    return " ".join(
        [
            f"M {outer_start[0]:.4f} {outer_start[1]:.4f}",
            f"A {outer_r} {outer_r} 0 {large_arc} 1 {outer_end[0]:.4f} {outer_end[1]:.4f}",
            f"L {inner_end[0]:.4f} {inner_end[1]:.4f}",
            f"A {inner_r} {inner_r} 0 {large_arc} 0 {inner_start[0]:.4f} {inner_start[1]:.4f}",
            "Z",
        ]
    )


def create_donut_chart(stats, theme):
    if len(stats) == 1:
        # A near-360 arc leaves a seam, so one language is drawn as a full ring
        return "\n    ".join(
            [
                f'<circle cx="{DONUT_CX}" cy="{DONUT_CY}" r="{OUTER_RADIUS}" fill="{stats[0].color}"/>',
                f'<circle cx="{DONUT_CX}" cy="{DONUT_CY}" r="{INNER_RADIUS}" fill="{theme.bg}"/>',
            ]
        )

    svg_parts = []
    current_angle = 0
    for lang in stats:
        slice_deg = lang.percentage / 100 * 360
        path = describe_arc(
            DONUT_CX, DONUT_CY, OUTER_RADIUS, INNER_RADIUS, current_angle, current_angle + slice_deg
        )
        svg_parts.append(
            f'<path d="{path}" fill="{lang.color}" stroke="{theme.bg}" stroke-width="1.5"/>'
        )
        current_angle += slice_deg

    return "\n    ".join(svg_parts)


def create_center_label(stats, theme):
    if not stats:
        return ""

    top = stats[0]
    return "\n    ".join(
        [
            f'<text x="{DONUT_CX}" y="{DONUT_CY - 4}" text-anchor="middle" fill="{theme.text}" font-size="15" font-family="{FONT_FAMILY}" font-weight="700">{top.percentage:.1f}%</text>',
            f'<text x="{DONUT_CX}" y="{DONUT_CY + 14}" text-anchor="middle" fill="{theme.subtitle}" font-size="10" font-family="{FONT_FAMILY}" font-weight="400">{escape_xml(top.name)}</text>',
        ]
    )


def create_legend(stats, theme):
    svg_parts = []
    for i, lang in enumerate(stats):
        y = LEGEND_START_Y + i * LEGEND_ROW_HEIGHT
        svg_parts.append(
            f'<circle cx="{LEGEND_X}" cy="{y}" r="{LEGEND_DOT_RADIUS}" fill="{lang.color}"/>'
        )
        svg_parts.append(
            f'<text x="{LEGEND_X + 14}" y="{y + 4}" fill="{theme.text}" font-size="12" font-family="{FONT_FAMILY}" font-weight="400">{escape_xml(lang.name)}</text>'
        )
        svg_parts.append(
            f'<text x="{CARD_WIDTH - PADDING}" y="{y + 4}" fill="{theme.subtitle}" font-size="11" font-family="{FONT_FAMILY}" font-weight="400" text-anchor="end">{lang.percentage:.1f}%</text>'
        )
    return "\n    ".join(svg_parts)


def _card_frame(width, height, theme):
    return f"""<rect x="0.5" y="0.5" width="{width - 1}" height="{height - 1}" rx="10" ry="10" fill="{theme.bg}" stroke="{theme.border}" stroke-width="1" stroke-opacity="0.7"/>
  <text x="{PADDING}" y="{PADDING + 14}" fill="{theme.title}" font-size="16" font-family="{FONT_FAMILY}" font-weight="700">{TITLE}</text>"""


def create_svg(stats, theme_name=DEFAULT_THEME):
    """
    Render the language stats card: title, donut chart and legend.

    The card grows vertically so the legend never clips.
    """
    theme = get_theme(theme_name)

    legend_rows = len(stats) or 1
    height = max(
        DONUT_CY + OUTER_RADIUS + PADDING + 10,
        LEGEND_START_Y + legend_rows * LEGEND_ROW_HEIGHT + PADDING,
    )

    return f"""<svg xmlns="http://www.w3.org/2000/svg" width="{CARD_WIDTH}" height="{height}" viewBox="0 0 {CARD_WIDTH} {height}" fill="none">
  {_card_frame(CARD_WIDTH, height, theme)}

  <g>
    {create_donut_chart(stats, theme)}
    {create_center_label(stats, theme)}
  </g>

  <g>
    {create_legend(stats, theme)}
  </g>
</svg>"""


def create_error_svg(message, theme_name=DEFAULT_THEME):
    """
    Render a fallback card with a warning line and the wrapped message.
    """
    theme = get_theme(theme_name)
    lines = wrap_text(str(message))

    text_lines = "\n  ".join(
        f'<text x="{PADDING}" y="{PADDING + 50 + i * ERROR_LINE_HEIGHT}" fill="{theme.text}" font-size="12" font-family="{FONT_FAMILY}" font-weight="400">{escape_xml(line)}</text>'
        for i, line in enumerate(lines)
    )

    height = max(ERROR_MIN_HEIGHT, PADDING + 50 + len(lines) * ERROR_LINE_HEIGHT + PADDING)

    return f"""<svg xmlns="http://www.w3.org/2000/svg" width="{CARD_WIDTH}" height="{height}" viewBox="0 0 {CARD_WIDTH} {height}" fill="none">
  {_card_frame(CARD_WIDTH, height, theme)}
  <text x="{PADDING}" y="{PADDING + 34}" fill="{WARNING_COLOR}" font-size="13" font-family="{FONT_FAMILY}" font-weight="600">⚠ Error</text>
  {text_lines}
</svg>"""
