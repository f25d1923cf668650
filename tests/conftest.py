import io
import json

import requests


def make_response(status=200, body=b"", headers=None, url=""):
    if not isinstance(body, (bytes, bytearray)):
        body = json.dumps(body).encode("utf-8")
    response = requests.Response()
    response.status_code = status
    response.headers.update(headers or {})
    response.raw = io.BytesIO(body)
    response.url = url
    return response


class FakeSession:
    """
    Stands in for requests.Session, serving canned responses by URL.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.closed = False

    def get(self, url, headers=None, timeout=None, stream=False):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout, "stream": stream})
        route = self.routes.get(url)
        if route is None:
            return make_response(404, {"message": "Not Found"}, url=url)
        if isinstance(route, Exception):
            raise route
        return make_response(url=url, **route)

    def close(self):
        self.closed = True

    def requested_urls(self):
        return [call["url"] for call in self.calls]


def repos_url(username, page=None):
    url = f"https://api.github.com/users/{username}/repos?per_page=100&type=owner"
    if page:
        url += f"&page={page}"
    return url


def languages_url(owner, name):
    return f"https://api.github.com/repos/{owner}/{name}/languages"


def repo(owner, name, fork=False):
    return {"owner": {"login": owner}, "name": name, "fork": fork}
