"""HTTP client factory for talking to the QStash REST API."""

import re

import httpx

from qstash_client._version import __version__
from qstash_client.errors import InvalidHeaderValue, UrlError

# RFC 7230 field-value (visible ASCII and tab) and token grammars.
_HEADER_VALUE_RE = re.compile(r"[\t\x20-\x7e]*")
_HEADER_NAME_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


def ensure_header_value(value: str, field_name: str) -> str:
    """Return ``value`` unchanged if it is legal as an HTTP header value."""
    if not isinstance(value, str) or not _HEADER_VALUE_RE.fullmatch(value):
        # The value itself may be a secret, so it is never echoed back.
        raise InvalidHeaderValue(f"{field_name} contains characters not allowed in an HTTP header value.")
    return value


def ensure_header_name(name: str) -> str:
    """Return ``name`` unchanged if it is a legal HTTP header name."""
    if not isinstance(name, str) or not _HEADER_NAME_RE.fullmatch(name):
        raise InvalidHeaderValue(f"{name!r} is not a valid HTTP header name.")
    return name


def parse_base_url(base_url: str) -> httpx.URL:
    """Parse and check that ``base_url`` is an absolute http(s) URL."""
    try:
        url = httpx.URL(base_url)
    except httpx.InvalidURL as exc:
        raise UrlError(f"Invalid QStash base URL {base_url!r}: {exc!s}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise UrlError(f"QStash base URL must be an absolute http(s) URL, got {base_url!r}.")
    return url


def create_qstash_http_client(
    token: str,
    *,
    base_url: str,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Build an AsyncClient pre-authenticated against the QStash API.

    The bearer token is attached as a default header for every request.
    httpx masks ``Authorization`` values in its header repr, so the token
    does not leak through debug output of the client or its headers.
    """
    authorization = ensure_header_value(f"Bearer {token}", "token")
    return httpx.AsyncClient(
        base_url=parse_base_url(base_url),
        headers={
            "Authorization": authorization,
            "User-Agent": f"qstash-client/{__version__}",
        },
        timeout=timeout,
        transport=transport,
    )
