import fnmatch
import json
import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from urllib.parse import quote, urlsplit

import requests
from requests.adapters import HTTPAdapter

from lang_card.errors import (
    ApiError,
    DisallowedTarget,
    MalformedResponse,
    NotFound,
    OversizedResponse,
    RateLimited,
    TransportError,
)

logger = logging.getLogger(__name__)

API_ROOT = "https://api.github.com"
ALLOWED_SCHEME = "https"
ALLOWED_HOST = "api.github.com"
MAX_BODY_BYTES = 5 * 1024 * 1024
MAX_PAGES = 10  # 10 pages x 100 repos = 1000 repos
PER_PAGE = 100
BATCH_SIZE = 10
CHUNK_SIZE = 64 * 1024
DEFAULT_TIMEOUT = 10


def check_allowed_url(url):
    """
    Reject any URL that does not point at https://api.github.com.
    Pagination links come from response headers, so they are checked too.
    """
    try:
        parsed = urlsplit(url)
        port = parsed.port
    except ValueError as e:
        raise DisallowedTarget(f"Invalid URL: {url!r}") from e

    if (
        parsed.scheme != ALLOWED_SCHEME
        or parsed.hostname != ALLOWED_HOST
        or parsed.username is not None
        or port not in (None, 443)
    ):
        raise DisallowedTarget(f"Request blocked: {url!r} does not point to {ALLOWED_HOST}")
    return url


def create_session():
    """
    One session is shared by the language workers, so its connection pool
    is sized to hold a connection for every request in a batch.
    """
    session = requests.Session()
    session.mount("https://", HTTPAdapter(pool_connections=1, pool_maxsize=BATCH_SIZE))
    return session


def build_headers(token=None):
    headers = {
        "User-Agent": "github-lang-card",
        "Accept": "application/vnd.github+json",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _raise_for_status(response):
    status = response.status_code
    if status in (403, 429) and response.headers.get("X-RateLimit-Remaining") == "0":
        raise RateLimited("GitHub API rate limit exceeded")
    if status == 404:
        raise NotFound("GitHub user or resource not found")
    if status < 200 or status >= 300:
        raise ApiError(f"GitHub API returned HTTP {status}", status=status)


def _read_body(response):
    declared = response.headers.get("Content-Length")
    if declared and declared.isdigit() and int(declared) > MAX_BODY_BYTES:
        raise OversizedResponse(f"Response too large ({declared} bytes)")

    body = bytearray()
    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
        body.extend(chunk)
        if len(body) > MAX_BODY_BYTES:
            response.close()
            raise OversizedResponse(f"Response too large (over {MAX_BODY_BYTES} bytes)")
    return bytes(body)


def get_json(session, url, token=None, timeout=DEFAULT_TIMEOUT):
    """
    GET a GitHub API URL and decode the JSON body.

    Returns:
        tuple: (decoded body, response links dict)
    """
    check_allowed_url(url)

    try:
        with session.get(
            url, headers=build_headers(token), timeout=timeout, stream=True
        ) as response:
            _raise_for_status(response)
            body = _read_body(response)
            links = response.links
    except requests.exceptions.RequestException as e:
        raise TransportError(f"Request to {url} failed: {e}") from e

    try:
        data = json.loads(body)
    except ValueError as e:
        raise MalformedResponse("Failed to parse GitHub API response") from e

    return data, links


def parse_next_link(links):
    return links.get("next", {}).get("url")


def fetch_all_repos(session, username, token=None, timeout=DEFAULT_TIMEOUT):
    """
    Fetch every repository owned by the user, following pagination
    until there is no next link or MAX_PAGES pages have been read.
    """
    url = f"{API_ROOT}/users/{quote(username, safe='')}/repos?per_page={PER_PAGE}&type=owner"
    repos = []
    page = 0

    while url and page < MAX_PAGES:
        data, links = get_json(session, url, token, timeout)
        if not isinstance(data, list):
            raise MalformedResponse("Expected a list of repositories")
        repos.extend(data)
        page += 1
        logger.debug("Fetched repository page %d for %s (%d repos)", page, username, len(data))
        url = parse_next_link(links)

    if url:
        logger.info("Stopped after %d pages for %s; remaining repositories ignored", page, username)

    return repos


def fetch_repo_languages(session, owner, repo, token=None, timeout=DEFAULT_TIMEOUT):
    """
    Fetch language byte counts for a single repository, e.g. {"Python": 6789}
    """
    url = f"{API_ROOT}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/languages"
    data, _ = get_json(session, url, token, timeout)

    if not isinstance(data, dict):
        raise MalformedResponse(f"Expected a language mapping for {owner}/{repo}")
    for name, size in data.items():
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise MalformedResponse(f"Invalid byte count for {name!r} in {owner}/{repo}")
    return data


def own_repositories(repos, excluded_repositories=()):
    """
    Drop forks and excluded names, returning (owner, name) pairs.
    """
    pairs = []
    for repo in repos:
        try:
            if repo["fork"]:
                continue
            owner, name = repo["owner"]["login"], repo["name"]
        except (KeyError, TypeError) as e:
            raise MalformedResponse("Repository entry is missing owner, name or fork") from e

        if any(fnmatch.fnmatch(name, pattern) for pattern in excluded_repositories):
            continue
        pairs.append((owner, name))
    return pairs


def merge_language_bytes(*maps):
    """
    Sum byte counts per language across any number of mappings.
    """
    merged = defaultdict(int)
    for language_map in maps:
        for language, size in language_map.items():
            merged[language] += size
    return dict(merged)


def fetch_languages(
    username,
    token=None,
    excluded_repositories=(),
    timeout=DEFAULT_TIMEOUT,
    session=None,
):
    """
    Fetch and aggregate language byte counts over a user's own repositories.

    Args:
        username (str): GitHub username
        token (str): GitHub token (optional, raises the rate limit)
        excluded_repositories (iterable): fnmatch patterns of repository names to skip
        timeout (float): per-request timeout in seconds
        session (requests.Session): session to reuse; one is created when omitted

    Returns:
        dict: language name -> total bytes
    """
    owns_session = session is None
    if owns_session:
        session = create_session()

    try:
        repos = fetch_all_repos(session, username, token, timeout)
        if not repos:
            return {}

        targets = own_repositories(repos, excluded_repositories)
        merged = {}

        with ThreadPoolExecutor(max_workers=BATCH_SIZE) as executor:
            for start in range(0, len(targets), BATCH_SIZE):
                batch = targets[start : start + BATCH_SIZE]
                results = list(
                    executor.map(
                        lambda target: fetch_repo_languages(
                            session, target[0], target[1], token, timeout
                        ),
                        batch,
                    )
                )
                merged = merge_language_bytes(merged, *results)
                logger.debug("Merged languages for %d repositories", start + len(batch))

        logger.info(
            "Aggregated %d languages across %d repositories for %s",
            len(merged),
            len(targets),
            username,
        )
        return merged
    finally:
        if owns_session:
            session.close()
