from dataclasses import dataclass
from types import MappingProxyType

# GitHub-canonical language colors (https://github.com/ozh/github-colors)
LANGUAGE_COLORS = MappingProxyType(
    {
        "JavaScript": "#f1e05a",
        "TypeScript": "#3178c6",
        "Python": "#3572A5",
        "Java": "#b07219",
        "C++": "#f34b7d",
        "C": "#555555",
        "C#": "#178600",
        "Go": "#00ADD8",
        "Rust": "#dea584",
        "Ruby": "#701516",
        "PHP": "#4F5D95",
        "Swift": "#F05138",
        "Kotlin": "#A97BFF",
        "Dart": "#00B4AB",
        "Scala": "#c22d40",
        "Shell": "#89e051",
        "Lua": "#000080",
        "R": "#198CE7",
        "Perl": "#0298c3",
        "Haskell": "#5e5086",
        "Elixir": "#6e4a7e",
        "Clojure": "#db5855",
        "Erlang": "#B83998",
        "Julia": "#a270ba",
        "OCaml": "#3be133",
        "Vim Script": "#199f4b",
        "Objective-C": "#438eff",
        "CoffeeScript": "#244776",
        "PowerShell": "#012456",
        "HTML": "#e34c26",
        "CSS": "#563d7c",
        "SCSS": "#c6538c",
        "Vue": "#41b883",
        "Svelte": "#ff3e00",
        "Astro": "#ff5a03",
        "HCL": "#844FBA",
        "Nix": "#7e7eff",
        "Zig": "#ec915c",
        "Dockerfile": "#384d54",
        "Makefile": "#427819",
        "TeX": "#3D6117",
        "MATLAB": "#e16737",
        "Jupyter": "#F37626",
        "Assembly": "#6E4C13",
    }
)

FALLBACK_COLOR = "#8b8b8b"
OTHER_NAME = "Other"


@dataclass(frozen=True)
class LanguageStat:
    name: str
    percentage: float
    color: str


def language_color(name):
    return LANGUAGE_COLORS.get(name, FALLBACK_COLOR)


def exclude_languages(language_bytes, excluded):
    """
    Drop languages whose lowercased name is in `excluded`
    """
    excluded = {name.lower() for name in excluded}
    return {
        name: size for name, size in language_bytes.items() if name.lower() not in excluded
    }


def calculate_stats(language_bytes, max_langs=8):
    """
    Turn raw byte counts into percentage stats, largest first.

    `max_langs` must already be clamped to 1..20 by the caller. Languages
    past the first `max_langs` are folded into a single "Other" entry.
    Equal percentages keep the mapping's iteration order (stable sort).

    Args:
        language_bytes (dict): language name -> bytes, e.g. {"JavaScript": 50000}
        max_langs (int): number of languages to keep before grouping as "Other"

    Returns:
        list[LanguageStat]
    """
    if not language_bytes:
        return []

    total_bytes = sum(language_bytes.values())
    if total_bytes == 0:
        return []

    ranked = sorted(
        (
            LanguageStat(name, size / total_bytes * 100, language_color(name))
            for name, size in language_bytes.items()
        ),
        key=lambda stat: stat.percentage,
        reverse=True,
    )

    if len(ranked) <= max_langs:
        return ranked

    top = ranked[:max_langs]
    other_percentage = sum(stat.percentage for stat in ranked[max_langs:])
    if other_percentage > 0:
        top.append(LanguageStat(OTHER_NAME, other_percentage, FALLBACK_COLOR))
    return top
