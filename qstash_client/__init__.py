"""
Async client for the Upstash QStash HTTP messaging API.

Example::

    from qstash_client import MessageSettings, QStashClient

    async with QStashClient("your-token") as qstash:
        result = await qstash.publish(
            "https://example.com/hook",
            {"key1": "value1"},
            MessageSettings().delay("10s").retries(3),
        )
        print(result["messageId"])
"""

from qstash_client._version import __version__
from qstash_client.client import QStashClient
from qstash_client.errors import (
    ClientError,
    InvalidHeaderValue,
    QStashError,
    SerdeError,
    UnknownError,
    UrlError,
)
from qstash_client.messages import RESERVED_HEADERS, MessageSettings
from qstash_client.settings import DEFAULT_BASE_URL, Settings

__all__ = [
    "ClientError",
    "DEFAULT_BASE_URL",
    "InvalidHeaderValue",
    "MessageSettings",
    "QStashClient",
    "QStashError",
    "RESERVED_HEADERS",
    "SerdeError",
    "Settings",
    "UnknownError",
    "UrlError",
    "__version__",
]
