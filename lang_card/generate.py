import logging

from lang_card.config import load_config, resolve_max_langs, resolve_theme
from lang_card.errors import ErrorKind, FetchError
from lang_card.fetch import fetch_languages
from lang_card.render import create_error_svg, create_svg
from lang_card.stats import calculate_stats, exclude_languages

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred while fetching data."


def empty_data_message(username):
    return (
        f'No public language data found for user "{username}". '
        "They may have no public repos or only forked repos."
    )


def error_message(error, username):
    """
    Pick the user-facing message shown on the error card
    """
    kind = getattr(error, "kind", None)
    if kind == ErrorKind.RATE_LIMITED:
        return "GitHub API rate limit exceeded. Please try again later."
    if kind == ErrorKind.NOT_FOUND:
        return f'GitHub user "{username}" not found. Please check the username.'
    if kind == ErrorKind.API_ERROR:
        return f"GitHub API error: {error}"
    return GENERIC_ERROR_MESSAGE


def build_card(username, token=None, max_langs=8, theme_name=None, config=None):
    """
    Fetch, aggregate and render the language card for a user.

    `max_langs` is expected to be clamped already (see resolve_max_langs).
    FetchError subclasses propagate to the caller.

    Returns:
        tuple: (svg, has_data)
    """
    config = config or load_config()
    theme_name = theme_name or config["default_theme"]

    language_bytes = fetch_languages(
        username,
        token,
        excluded_repositories=config["excluded_repositories"],
        timeout=config["request_timeout"],
    )
    language_bytes = exclude_languages(language_bytes, config["excluded_languages"])

    if not language_bytes:
        return create_error_svg(empty_data_message(username), theme_name), False

    stats = calculate_stats(language_bytes, max_langs)
    return create_svg(stats, theme_name), True


def generate_stats(username, token=None, theme=None, max_langs=None, config=None):
    """
    Fetch GitHub language statistics and generate SVG.
    Always returns an SVG, falling back to an error card on failure.
    """
    config = config or load_config()
    theme_name = resolve_theme(theme, config["default_theme"])
    max_langs = resolve_max_langs(max_langs, config["default_max_langs"])

    try:
        svg, has_data = build_card(username, token, max_langs, theme_name, config)
        return {"success": True, "svg": svg, "username": username, "has_data": has_data}
    except FetchError as e:
        logger.warning("Fetching languages for %s failed (%s): %s", username, e.kind.value, e)
        return {
            "success": False,
            "svg": create_error_svg(error_message(e, username), theme_name),
            "error": str(e),
            "kind": e.kind.value,
        }


if __name__ == "__main__":
    import os

    from lang_card.config import github_token, log_level

    logging.basicConfig(level=log_level())

    username = os.getenv("GITHUB_USERNAME")
    if not username:
        print("Error: GITHUB_USERNAME environment variable is required")
        exit(1)

    print(f"Generating language card for {username}...")
    result = generate_stats(
        username,
        github_token(),
        theme=os.getenv("THEME"),
        max_langs=os.getenv("MAX_LANGS"),
    )

    with open("top_languages.svg", "w", encoding="utf-8") as f:
        f.write(result["svg"])

    if result["success"]:
        print("SVG saved as top_languages.svg")
    else:
        print(f"Error: {result['error']} (error card saved as top_languages.svg)")
        exit(1)
