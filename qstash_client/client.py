"""
QStash API client.

One coroutine per REST endpoint. Each call performs a single round trip and
either returns the decoded JSON body or raises a :class:`QStashError`.
"""

import json
import logging
import re
from types import TracebackType
from typing import Any

import httpx
from pydantic import BaseModel

from qstash_client.errors import ClientError, SerdeError, UnknownError, UrlError
from qstash_client.http_client import create_qstash_http_client
from qstash_client.messages import MessageSettings
from qstash_client.settings import DEFAULT_BASE_URL, Settings

logger = logging.getLogger(__name__)

_ERROR_SNIPPET_LIMIT = 512
# Characters that would split an identifier out of its path segment.
_UNSAFE_SEGMENT_RE = re.compile(r"[/?#\s\x00-\x1f\x7f]")
# Publish targets may be full URLs and keep their "/" and "?".
_UNSAFE_TARGET_RE = re.compile(r"[#\s\x00-\x1f\x7f]")


def _require_non_empty(value: str, field_name: str) -> str:
    """Normalize and validate non-empty request arguments."""
    cleaned = value.strip()
    if not cleaned:
        raise ValueError(f"{field_name} must be a non-empty string.")
    return cleaned


def _path_segment(value: str, field_name: str) -> str:
    cleaned = _require_non_empty(value, field_name)
    if _UNSAFE_SEGMENT_RE.search(cleaned):
        raise UrlError(f"{field_name} {cleaned!r} cannot be used as a URL path segment.")
    return cleaned


def _publish_target(value: str) -> str:
    cleaned = _require_non_empty(value, "target")
    if _UNSAFE_TARGET_RE.search(cleaned):
        raise UrlError(f"target {cleaned!r} cannot be used as a publish destination.")
    return cleaned


def _cursor_param(cursor: int) -> str:
    if isinstance(cursor, bool) or not isinstance(cursor, int):
        raise ValueError("cursor must be an integer.")
    return str(cursor)


def _encode_body(body: Any) -> bytes:
    if isinstance(body, BaseModel):
        body = body.model_dump(mode="json")
    try:
        return json.dumps(body).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerdeError(f"Message body is not JSON serializable: {exc!s}") from exc


class QStashClient:
    """Async client for the QStash REST API."""

    __slots__ = ("_client", "_base_url")

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = create_qstash_http_client(
            token,
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )
        self._base_url = self._client.base_url

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "QStashClient":
        """Factory that builds the client from Settings."""
        return cls(
            settings.token.get_secret_value(),
            base_url=settings.base_url,
            timeout=settings.timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> httpx.URL:
        return self._base_url

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={str(self._base_url)!r})"

    async def __aenter__(self) -> "QStashClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP resources."""
        await self._client.aclose()

    async def publish(
        self,
        target: str,
        body: Any,
        settings: MessageSettings | None = None,
    ) -> Any:
        """
        Publish a JSON message to a destination URL or a topic.

        ``target`` is appended verbatim to ``publish/``, so a full URL such as
        ``https://example.com/hook`` is accepted as-is. The response carries
        at least a ``messageId``.
        """
        target_clean = _publish_target(target)
        headers = httpx.Headers({"Content-Type": "application/json"})
        if settings is not None:
            headers.update(settings.as_headers())
        content = _encode_body(body)
        logger.debug("Publishing message", extra={"target": target_clean})
        return await self._request(
            "POST",
            f"publish/{target_clean}",
            headers=headers,
            content=content,
        )

    publish_json = publish

    async def get_message(self, message_id: str) -> Any:
        """Retrieve a previously published message."""
        message_id_clean = _path_segment(message_id, "message_id")
        logger.debug("Fetching message", extra={"message_id": message_id_clean})
        return await self._request("GET", f"messages/{message_id_clean}")

    async def cancel_message(self, message_id: str) -> Any:
        """Cancel delivery of a message. Nothing is undone client-side."""
        message_id_clean = _path_segment(message_id, "message_id")
        logger.debug("Cancelling message", extra={"message_id": message_id_clean})
        return await self._request("DELETE", f"messages/{message_id_clean}")

    async def get_tasks(self, message_id: str, cursor: int | None = None) -> Any:
        """List delivery tasks for a message, continuing from ``cursor`` if given."""
        message_id_clean = _path_segment(message_id, "message_id")
        params = None if cursor is None else {"cursor": _cursor_param(cursor)}
        logger.debug(
            "Listing message tasks",
            extra={"message_id": message_id_clean, "cursor": cursor},
        )
        return await self._request("GET", f"messages/{message_id_clean}/tasks", params=params)

    async def get_quota(self) -> Any:
        """Return the account's current usage quota."""
        return await self._request("GET", "quota")

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Normalized request handler for all outgoing API calls."""

        def _transport_error(message: str, *, exc: Exception | None = None) -> ClientError:
            logger.error(
                message,
                extra={"method": method, "path": path},
                exc_info=exc,
            )
            return ClientError(message)

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.InvalidURL as exc:
            raise UrlError(f"Could not build QStash URL for {method} {path}: {exc!s}") from exc
        except httpx.TimeoutException as exc:
            raise _transport_error(
                f"QStash request timed out ({method} {path}).",
                exc=exc,
            ) from exc
        except httpx.RequestError as exc:
            raise _transport_error(
                f"QStash request failed ({method} {path}): {exc!s}",
                exc=exc,
            ) from exc
        except httpx.StreamError as exc:
            logger.error(
                "QStash request failed unexpectedly",
                extra={"method": method, "path": path},
                exc_info=exc,
            )
            raise UnknownError(f"Unexpected failure during {method} {path}: {exc!s}") from exc

        if not response.is_success:
            snippet = response.text.strip()
            if len(snippet) > _ERROR_SNIPPET_LIMIT:
                snippet = f"{snippet[:_ERROR_SNIPPET_LIMIT]}..."
            logger.warning(
                "QStash responded with error",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "content": snippet,
                },
            )
            raise ClientError(
                f"QStash error ({response.status_code}) during {method} {path}: {snippet or 'no body provided.'}",
                status_code=response.status_code,
                body=snippet or None,
            )

        if not response.content.strip():
            return None

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.error(
                "QStash returned invalid JSON",
                extra={"method": method, "path": path, "status_code": response.status_code},
            )
            raise SerdeError(f"QStash returned invalid JSON during {method} {path}.") from exc
