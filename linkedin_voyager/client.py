"""
Low-level HTTP client for the LinkedIn Voyager API.

Handles the session, the CSRF header derived from ``JSESSIONID``, request
pacing and the mapping of HTTP failures to exceptions.  The rest of the
package only sees the ``Transport`` protocol: give it a RequestPlan, get
back the raw JSON object.
"""

import logging
from typing import Any, Dict, Optional, Protocol

import requests
from requests.cookies import RequestsCookieJar

from . import config
from .dispatch import RequestPlan
from .exceptions import (
    ChallengeError,
    LinkedInRequestError,
    NetworkError,
    RateLimitError,
    UnauthorizedError,
)
from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can fetch the raw JSON for a request plan."""

    def fetch_raw(self, plan: RequestPlan) -> Dict[str, Any]:
        ...


class Client:
    """HTTP client for the LinkedIn Voyager API."""

    LINKEDIN_BASE_URL = config.LINKEDIN_BASE_URL
    API_BASE_URL = f"{LINKEDIN_BASE_URL}/voyager/api"

    REQUEST_HEADERS = {
        "user-agent": (
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/131.0.0.0 Safari/537.36"
        ),
        "accept": "application/vnd.linkedin.normalized+json+2.1",
        "accept-language": "en-AU,en-GB;q=0.9,en-US;q=0.8,en;q=0.7",
        "x-li-lang": "en_US",
        "x-restli-protocol-version": "2.0.0",
    }

    def __init__(
        self,
        *,
        debug: bool = False,
        proxies: Optional[dict] = None,
        rate_limiter: Optional[RateLimiter] = None,
        timeout: float = config.REQUEST_TIMEOUT,
    ):
        self.session = requests.Session()
        if proxies:
            self.session.proxies.update(proxies)
        self.session.headers.update(self.REQUEST_HEADERS)
        self.timeout = timeout
        self.rate_limiter = rate_limiter or RateLimiter(
            min_delay=config.REQUEST_MIN_DELAY,
            max_delay=config.REQUEST_MAX_DELAY,
            requests_per_minute=config.REQUESTS_PER_MINUTE,
        )
        logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)

    # ── cookie helpers ───────────────────────────────────────────

    def set_cookies(self, cookies: RequestsCookieJar) -> None:
        """Set session cookies and extract CSRF token."""
        if "JSESSIONID" not in cookies:
            raise UnauthorizedError("JSESSIONID cookie is required for the CSRF token")
        self.session.cookies = cookies
        self.session.headers["csrf-token"] = (
            self.session.cookies["JSESSIONID"].strip('"')
        )

    def set_session_tokens(self, li_at: str, jsessionid: str) -> None:
        """Build the cookie jar from the two cookies a browser session needs."""
        jar = RequestsCookieJar()
        jar.set("li_at", li_at, domain=".www.linkedin.com", path="/")
        jar.set("JSESSIONID", jsessionid, domain=".www.linkedin.com", path="/")
        self.set_cookies(jar)

    @property
    def cookies(self) -> RequestsCookieJar:
        return self.session.cookies

    # ── transport ────────────────────────────────────────────────

    def fetch_raw(self, plan: RequestPlan) -> Dict[str, Any]:
        self.rate_limiter.wait()
        url = f"{self.API_BASE_URL}{plan.uri}"
        logger.debug("GET %s", url)
        try:
            res = self.session.get(url, timeout=self.timeout, allow_redirects=False)
        except requests.RequestException as e:
            raise NetworkError(f"{plan.endpoint}: {e}") from e

        if res.status_code == 401:
            raise UnauthorizedError()
        if res.status_code == 429:
            raise RateLimitError(res.text[:500] or "Too many requests")
        if 300 <= res.status_code < 400:
            # expired sessions are bounced to the login / checkpoint pages
            location = res.headers.get("location", "")
            if "checkpoint" in location or "challenge" in location:
                raise ChallengeError(location)
            raise UnauthorizedError(f"Redirected to {location or 'login'}")
        if not 200 <= res.status_code < 300:
            raise LinkedInRequestError(res.status_code, res.text[:500])

        try:
            data = res.json()
        except ValueError as e:
            raise LinkedInRequestError(res.status_code, "Response is not JSON") from e
        if not isinstance(data, dict):
            raise LinkedInRequestError(res.status_code, "Expected a JSON object")

        # some endpoints answer 200 with the real status in the body
        status = data.get("status")
        if isinstance(status, int) and not isinstance(status, bool) and status >= 400:
            if status == 401:
                raise UnauthorizedError(data.get("message", ""))
            raise LinkedInRequestError(status, str(data.get("message", "")))
        return data
