"""Optional per-message delivery directives sent to QStash as headers."""

from collections.abc import Mapping
from dataclasses import dataclass, replace

import httpx

from qstash_client.http_client import ensure_header_name, ensure_header_value

DELAY_HEADER = "Upstash-Delay"
RETRIES_HEADER = "Upstash-Retries"
CRON_HEADER = "Upstash-Cron"
CALLBACK_HEADER = "Upstash-Callback"
DEDUPLICATION_ID_HEADER = "Upstash-Deduplication-Id"

RESERVED_HEADERS = (
    DELAY_HEADER,
    RETRIES_HEADER,
    CRON_HEADER,
    CALLBACK_HEADER,
    DEDUPLICATION_ID_HEADER,
)


@dataclass(frozen=True, slots=True)
class MessageSettings:
    """
    Fluent, immutable set of publish options.

    Every setter returns a new ``MessageSettings`` with one field replaced, so
    calls chain naturally and the last write to a field wins::

        settings = MessageSettings().delay("10s").retries(3)

    Validation of header legality is deferred to :meth:`as_headers`.
    """

    _delay: str | None = None
    _retries: int | None = None
    _cron: str | None = None
    _callback: str | None = None
    _dedup_id: str | None = None
    _custom_headers: tuple[tuple[str, str], ...] | None = None

    @classmethod
    def new(cls) -> "MessageSettings":
        return cls()

    def delay(self, delay: str) -> "MessageSettings":
        """
        Delay delivery relative to publish time.

        The duration format is ``<number><unit>``: ``10s``, ``1m``, ``2h``, ``7d``.
        """
        return replace(self, _delay=delay)

    def retries(self, retries: int) -> "MessageSettings":
        """Number of delivery retries; the upper bound depends on the plan."""
        if isinstance(retries, bool) or not isinstance(retries, int) or retries < 0:
            raise ValueError("retries must be a non-negative integer.")
        return replace(self, _retries=retries)

    def cron(self, cron: str) -> "MessageSettings":
        """Publish on a recurring schedule; QStash evaluates cron expressions in UTC."""
        return replace(self, _cron=cron)

    def callback_url(self, callback_url: str) -> "MessageSettings":
        """URL QStash calls with the destination's response once delivery finishes."""
        return replace(self, _callback=callback_url)

    def dedup_id(self, dedup_id: str) -> "MessageSettings":
        """Idempotency key; duplicates are accepted by QStash but not enqueued."""
        return replace(self, _dedup_id=dedup_id)

    def custom_headers(self, custom_headers: Mapping[str, str]) -> "MessageSettings":
        """Extra headers forwarded with the message. These override named directives."""
        return replace(self, _custom_headers=tuple(custom_headers.items()))

    def as_headers(self) -> httpx.Headers:
        """Materialize the populated directives into request headers."""
        headers = httpx.Headers()

        directives = (
            (DELAY_HEADER, self._delay),
            (RETRIES_HEADER, None if self._retries is None else str(self._retries)),
            (CRON_HEADER, self._cron),
            (CALLBACK_HEADER, self._callback),
            (DEDUPLICATION_ID_HEADER, self._dedup_id),
        )
        for name, value in directives:
            if value is not None:
                headers[name] = ensure_header_value(value, name)

        # Custom headers go last; assignment replaces any same-named directive.
        for name, value in self._custom_headers or ():
            headers[ensure_header_name(name)] = ensure_header_value(value, name)

        return headers
