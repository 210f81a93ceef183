"""
Shared HTTP session for data sources.

One ``requests.Session`` with a urllib3 retry adapter (transient failures,
429 and 502/503/504 with exponential backoff), a default per-request timeout,
and gzip/deflate negotiation. The station document is fetched through it::

    from wuweather.services.http import session

    resp = session.get(url)
    if not resp.ok:
        ...
"""

from __future__ import annotations

from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

#: Retries finish well inside one refresh interval.
DEFAULT_RETRY = Retry(
    total=3,
    backoff_factor=1,
    status_forcelist=[429, 502, 503, 504],
    allowed_methods=["GET", "HEAD"],
    raise_on_status=False,  # the caller turns the final status into an error
)

DEFAULT_TIMEOUT = 30  # seconds

DEFAULT_HEADERS = {
    "User-Agent": "wuweather-sync/0.1",
    "Accept-Encoding": "gzip, deflate",
}


class TimeoutSession(requests.Session):
    """Session whose requests fall back to ``timeout`` when none is given."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__()
        self.timeout = timeout

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = self.timeout
        return super().send(request, **kwargs)


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a session with the retry adapter mounted for http and https.

    Args:
        retry: Custom retry strategy (defaults to ``DEFAULT_RETRY``).
        timeout: Timeout for requests that do not pass one.
    """
    s = TimeoutSession(timeout)
    adapter = HTTPAdapter(max_retries=retry or DEFAULT_RETRY)
    for prefix in ("http://", "https://"):
        s.mount(prefix, adapter)
    s.headers.update(DEFAULT_HEADERS)
    return s


#: Module-level session; import and use directly.
session: requests.Session = create_session()
