import math
import xml.etree.ElementTree as ET

import pytest

from lang_card import render
from lang_card.stats import LanguageStat, calculate_stats

SVG_NS = "{http://www.w3.org/2000/svg}"


def parse(svg):
    return ET.fromstring(svg)


def find_all(root, tag):
    return root.findall(f".//{SVG_NS}{tag}")


def texts(root):
    return [el.text for el in find_all(root, "text")]


def test_escape_xml_handles_all_metacharacters():
    assert render.escape_xml("<a href=\"x\">Tom & Jerry's</a>") == (
        "&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&apos;s&lt;/a&gt;"
    )


def test_wrap_text_packs_words_greedily():
    message = "one two three four five six seven eight nine ten eleven twelve thirteen"
    lines = render.wrap_text(message, width=20)

    assert all(len(line) <= 20 for line in lines)
    assert " ".join(lines) == message
    assert lines[0] == "one two three four"


def test_wrap_text_keeps_long_word_on_its_own_line():
    assert render.wrap_text("short " + "x" * 60 + " tail", width=50) == [
        "short",
        "x" * 60,
        "tail",
    ]


def test_wrap_text_empty_message():
    assert render.wrap_text("") == []


def test_polar_to_cartesian_zero_is_top_and_clockwise():
    x, y = render.polar_to_cartesian(100, 100, 10, 0)
    assert x == pytest.approx(100)
    assert y == pytest.approx(90)

    x, y = render.polar_to_cartesian(100, 100, 10, 90)
    assert x == pytest.approx(110)
    assert y == pytest.approx(100)


def test_describe_arc_quarter():
    path = render.describe_arc(0, 0, 10, 5, 0, 90)
    assert path == (
        "M 0.0000 -10.0000 A 10 10 0 0 1 10.0000 0.0000 "
        "L 5.0000 0.0000 A 5 5 0 0 0 0.0000 -5.0000 Z"
    )


def test_describe_arc_uses_large_arc_flag_past_half():
    path = render.describe_arc(0, 0, 10, 5, 0, 270)
    assert "A 10 10 0 1 1" in path
    assert "A 5 5 0 1 0" in path


def test_describe_arc_clamps_full_circle():
    path = render.describe_arc(120, 130, 70, 42, 0, 360)
    tokens = path.split()
    start = (tokens[1], tokens[2])
    end = (tokens[9], tokens[10])
    assert start != end


def test_get_theme_falls_back_to_default():
    assert render.get_theme("nope") == render.THEMES["tokyonight"]
    assert render.get_theme("light").bg == "#ffffff"


def test_success_card_for_two_languages():
    stats = calculate_stats({"JavaScript": 700, "Python": 300}, 8)
    svg = render.create_svg(stats, "dark")
    root = parse(svg)

    paths = find_all(root, "path")
    assert [p.get("fill") for p in paths] == ["#f1e05a", "#3572A5"]
    assert all(p.get("stroke") == render.THEMES["dark"].bg for p in paths)
    assert root.get("width") == "450"
    assert "70.0%" in texts(root)
    assert "30.0%" in texts(root)
    assert texts(root)[:3] == ["Top Languages", "70.0%", "JavaScript"]


def test_single_language_draws_full_ring():
    stats = calculate_stats({"Rust": 100}, 8)
    root = parse(render.create_svg(stats))

    assert find_all(root, "path") == []
    ring = [c for c in find_all(root, "circle") if c.get("r") in ("70", "42")]
    assert [c.get("r") for c in ring] == ["70", "42"]
    assert ring[0].get("fill") == "#dea584"
    assert ring[1].get("fill") == render.THEMES["tokyonight"].bg
    assert texts(root)[1:3] == ["100.0%", "Rust"]


def test_empty_stats_renders_only_the_title():
    root = parse(render.create_svg([]))

    assert find_all(root, "path") == []
    assert find_all(root, "circle") == []
    assert texts(root) == ["Top Languages"]


def test_card_height_grows_with_legend():
    small = parse(render.create_svg(calculate_stats({"Go": 1, "C": 1}, 8)))
    many = {f"Lang{i}": i + 1 for i in range(20)}
    large = parse(render.create_svg(calculate_stats(many, 20)))

    assert int(small.get("height")) == 235
    assert int(large.get("height")) == 65 + 20 * 28 + 25
    legend_y = [int(c.get("cy")) for c in find_all(large, "circle")]
    assert max(legend_y) < int(large.get("height"))


def test_sectors_cover_the_whole_ring():
    stats = calculate_stats({"A": 1, "B": 2, "C": 3, "D": 4}, 8)
    svg = render.create_svg(stats)
    last_path = find_all(parse(svg), "path")[-1].get("d").split()
    # last outer arc ends back at 12 o'clock
    assert float(last_path[9]) == pytest.approx(120, abs=1e-3)
    assert float(last_path[10]) == pytest.approx(60, abs=1e-3)


def test_language_names_are_escaped():
    stats = [
        LanguageStat("<script>&\"'", 60.0, "#000000"),
        LanguageStat("Go", 40.0, "#00ADD8"),
    ]
    svg = render.create_svg(stats)

    assert "<script>" not in svg
    root = parse(svg)
    assert "<script>&\"'" in texts(root)


def test_error_card_wraps_and_escapes_message():
    message = 'GitHub user "<b>&evil</b>" not found. ' + "word " * 30
    svg = render.create_error_svg(message, "light")
    root = parse(svg)

    body = texts(root)[2:]
    assert texts(root)[:2] == ["Top Languages", "⚠ Error"]
    assert len(body) == len(render.wrap_text(message))
    assert all(len(line) <= 50 for line in body)
    assert body[0].startswith('GitHub user "<b>&evil</b>"')
    assert int(root.get("height")) == 25 + 50 + len(body) * 20 + 25


def test_error_card_has_minimum_height_and_warning_color():
    root = parse(render.create_error_svg("short"))
    assert int(root.get("height")) == render.ERROR_MIN_HEIGHT
    warning = find_all(root, "text")[1]
    assert warning.get("fill") == render.WARNING_COLOR


def test_error_and_success_cards_share_frame():
    success = find_all(parse(render.create_svg([])), "rect")[0]
    error = find_all(parse(render.create_error_svg("x")), "rect")[0]
    assert success.get("stroke") == error.get("stroke")
    assert success.get("rx") == error.get("rx")


def test_sector_spans_follow_percentages():
    stats = calculate_stats({"A": 3, "B": 1}, 8)
    first = find_all(parse(render.create_svg(stats)), "path")[0].get("d").split()
    end_x, end_y = float(first[9]), float(first[10])
    angle = math.degrees(math.atan2(end_y - 130, end_x - 120)) + 90
    assert angle % 360 == pytest.approx(270, abs=1e-2)


def test_escape_xml_drops_characters_xml_cannot_hold():
    assert render.escape_xml("a\x01b\x0bc\ufffed") == "abcd"
    assert render.escape_xml("tab\tok\n") == "tab\tok\n"


def test_error_card_with_control_characters_in_username_is_well_formed():
    from lang_card.errors import NotFound
    from lang_card.generate import error_message

    svg = render.create_error_svg(error_message(NotFound("missing"), "a\x01b"))
    root = parse(svg)

    assert 'GitHub user "ab" not found.' in " ".join(texts(root)[2:])
