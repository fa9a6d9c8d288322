"""Error taxonomy raised by the QStash client."""


class QStashError(RuntimeError):
    """Base class for every failure surfaced by this package."""


class ClientError(QStashError):
    """The HTTP transport failed or the service answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class InvalidHeaderValue(QStashError, ValueError):
    """A token or message setting cannot be represented as an HTTP header."""


class UrlError(QStashError, ValueError):
    """The base URL or a composed endpoint URL could not be parsed."""


class SerdeError(QStashError):
    """A request body could not be encoded or a response body decoded as JSON."""


class UnknownError(QStashError):
    """A failure that none of the other error classes describes."""
