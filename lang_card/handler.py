import logging

from lang_card.config import github_token, load_config, log_level, resolve_theme
from lang_card.generate import GENERIC_ERROR_MESSAGE, generate_stats
from lang_card.render import create_error_svg

logger = logging.getLogger()
logger.setLevel(log_level())

CACHE_PUBLIC = "public, max-age=3600"
CACHE_NONE = "no-cache, no-store"
USAGE_MESSAGE = (
    "Missing required query parameter: username. Usage: /api?username=octocat"
)


def svg_response(status_code, svg, cache_control):
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "image/svg+xml; charset=utf-8",
            "Cache-Control": cache_control,
        },
        "body": svg,
    }


def handler(event, context):
    """
    GitHub top languages card handler.
    GET /api?username=xxx&theme=tokyonight&max_langs=8

    Always answers with an SVG so embedded images never break.
    """
    params = (event or {}).get("queryStringParameters") or {}
    config = load_config()
    theme = resolve_theme(params.get("theme"), config["default_theme"])
    username = (params.get("username") or "").strip()

    if not username:
        return svg_response(400, create_error_svg(USAGE_MESSAGE, theme), CACHE_NONE)

    try:
        result = generate_stats(
            username,
            github_token(),
            theme=theme,
            max_langs=params.get("max_langs"),
            config=config,
        )
    except Exception:
        logger.exception("Unexpected failure rendering card for %s", username)
        return svg_response(200, create_error_svg(GENERIC_ERROR_MESSAGE, theme), CACHE_NONE)

    cache_control = CACHE_PUBLIC if result["success"] else CACHE_NONE
    return svg_response(200, result["svg"], cache_control)
