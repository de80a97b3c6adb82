# ============================================================================
# HTTP PROBES
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Probes - HTTP response assertions
# PURPOSE: Probe operations asserting on (or against) HTTP responses
# CREATED: 17 OCT 2026
# ============================================================================
"""
HTTP Probes

http_probe() builds an operation that sends one request and applies a set
of criteria to the response. no_http_probe() builds the inverse: it passes
only when the endpoint does not answer at all.

Criteria are collected on an HttpCheck:

    def criteria(check: HttpCheck):
        check.method = "HEAD"
        check.responds_with(200, 302)

    operation = http_probe("http://localhost:4502/", criteria)

Client defaults (timeout, user agent, transport retries) come from
HttpProbeDefaults and can be overridden per check with check.options().
"""

from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx

from healthgate.core.config import HttpProbeDefaults, get_http_defaults
from healthgate.core.errors import ProbeFailure
from healthgate.core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.PROBE)

HTTP_OK = 200

# Transport-level retries used when connection_retries is enabled
CONNECTION_RETRIES = 3

ResponseCriterion = Callable[[httpx.Response], None]


class HttpCheck:
    """
    Request description plus the criteria its response must meet.

    Attributes:
        url: Target URL
        method: HTTP method (default GET)
        headers: Extra request headers
        auth: Optional (user, password) tuple or httpx.Auth
        json: Optional JSON body
        content: Optional raw body
    """

    def __init__(self, url: str, method: str = "GET"):
        self.url = url
        self.method = method
        self.headers: Dict[str, str] = {}
        self.auth: Any = None
        self.json: Any = None
        self.content: Any = None
        self.client_options: Dict[str, Any] = {}
        self.checks: List[ResponseCriterion] = []

    def options(self, **client_options) -> "HttpCheck":
        """Override httpx.Client keyword arguments (timeout, transport, ...)."""
        self.client_options.update(client_options)
        return self

    def check(self, criterion: ResponseCriterion) -> "HttpCheck":
        """Add a custom criterion; it should raise ProbeFailure when unmet."""
        self.checks.append(criterion)
        return self

    # Shorthand criteria

    def responds_with(self, *status_codes: int) -> "HttpCheck":
        expected = list(status_codes)
        return self.check(lambda response: self.check_status(response, expected))

    def responds_ok(self) -> "HttpCheck":
        return self.responds_with(HTTP_OK)

    def contains_text(self, text: str, status_code: int = HTTP_OK) -> "HttpCheck":
        return self.contains_texts(text, status_code=status_code)

    def contains_texts(self, *texts: str, status_code: int = HTTP_OK) -> "HttpCheck":
        expected = list(texts)

        def criterion(response: httpx.Response) -> None:
            self.check_status(response, [status_code])
            self.check_texts(response, expected)
        return self.check(criterion)

    # Assertions

    def check_status(self, response: httpx.Response, expected: Iterable[int]) -> None:
        expected = list(expected)
        if response.status_code not in expected:
            wanted = ", ".join(str(code) for code in expected)
            raise ProbeFailure(
                f"Unexpected response status {response.status_code} "
                f"for {self.method} '{self.url}' (expected {wanted})"
            )

    def check_texts(self, response: httpx.Response, texts: Iterable[str]) -> None:
        body = response.text
        for text in texts:
            if text not in body:
                raise ProbeFailure(
                    f"Response of {self.method} '{self.url}' does not contain text '{text}'"
                )

    @property
    def description(self) -> str:
        return f"{self.method} {self.url}"


def _build_client(check: HttpCheck, defaults: HttpProbeDefaults) -> httpx.Client:
    headers = {}
    if defaults.user_agent:
        headers["user-agent"] = defaults.user_agent

    options: Dict[str, Any] = {
        "timeout": defaults.timeout_seconds,
        "verify": defaults.verify_ssl,
    }
    if defaults.connection_retries:
        options["transport"] = httpx.HTTPTransport(
            retries=CONNECTION_RETRIES,
            verify=defaults.verify_ssl,
        )
    options.update(check.client_options)
    headers.update(options.pop("headers", None) or {})
    return httpx.Client(headers=headers, **options)


def _send(client: httpx.Client, check: HttpCheck) -> httpx.Response:
    return client.request(
        check.method,
        check.url,
        headers=check.headers or None,
        auth=check.auth,
        json=check.json,
        content=check.content,
    )


def build_check(
    url: str,
    criteria: Optional[Callable[[HttpCheck], Any]] = None,
    method: str = "GET",
    status_code: Optional[int] = None,
    contained_text: Optional[str] = None,
    client_options: Optional[Dict[str, Any]] = None,
) -> HttpCheck:
    """
    Assemble an HttpCheck from shorthand arguments and a criteria callback.

    Without any criterion the response must have status 200.
    """
    check = HttpCheck(url, method=method)
    if client_options:
        check.options(**client_options)
    if contained_text is not None:
        check.contains_text(contained_text, status_code or HTTP_OK)
    elif status_code is not None:
        check.responds_with(status_code)
    if criteria is not None:
        criteria(check)
    if not check.checks:
        check.responds_ok()
    return check


def http_probe(
    url: str,
    criteria: Optional[Callable[[HttpCheck], Any]] = None,
    method: str = "GET",
    status_code: Optional[int] = None,
    contained_text: Optional[str] = None,
    client_options: Optional[Dict[str, Any]] = None,
    defaults: Optional[HttpProbeDefaults] = None,
) -> Callable[[], str]:
    """
    Build an operation asserting on the response of one HTTP request.

    Returns:
        Zero-argument operation returning "<METHOD> <url> -> <status> <reason>"
    """
    check = build_check(url, criteria, method, status_code, contained_text, client_options)

    def operation() -> str:
        settings = defaults or get_http_defaults()
        with _build_client(check, settings) as client:
            response = _send(client, check)
            for criterion in check.checks:
                criterion(response)
        return f"{check.description} -> {response.status_code} {response.reason_phrase}".rstrip()

    return operation


def no_http_probe(
    url: str,
    criteria: Optional[Callable[[HttpCheck], Any]] = None,
    method: str = "GET",
    client_options: Optional[Dict[str, Any]] = None,
    defaults: Optional[HttpProbeDefaults] = None,
) -> Callable[[], str]:
    """
    Build an operation that passes only when the endpoint does not respond.

    Any HTTP response, whatever its status, fails the probe.
    """
    check = HttpCheck(url, method=method)
    if client_options:
        check.options(**client_options)
    if criteria is not None:
        criteria(check)

    def operation() -> str:
        settings = defaults or get_http_defaults()
        responds = False
        try:
            with _build_client(check, settings) as client:
                _send(client, check)
                responds = True
        except httpx.HTTPError as e:
            logger.debug(f"{check.description} unavailable: {e}")

        if responds:
            raise ProbeFailure(f"HTTP {check.method.upper()} '{check.url}' is available")
        return f"{check.description} -> unavailable"

    return operation


__all__ = [
    "HttpCheck",
    "build_check",
    "http_probe",
    "no_http_probe",
]
