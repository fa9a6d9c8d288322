"""Environment-driven configuration for the QStash client."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv
from pydantic import SecretStr

DEFAULT_BASE_URL = "https://qstash.upstash.io/v1/"


@dataclass(frozen=True, slots=True)
class Settings:
    """Container for client configuration."""

    token: SecretStr = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = None

    @classmethod
    def load(cls) -> "Settings":
        """
        Load configuration from environment variables.

        Python-dotenv is used so developers can keep QSTASH_TOKEN in a local
        .env file without exporting it globally.
        """
        load_dotenv()

        token = os.getenv("QSTASH_TOKEN", "").strip()
        if not token:
            raise ValueError("QSTASH_TOKEN is required but was not provided.")

        base_url = os.getenv("QSTASH_URL", "").strip() or DEFAULT_BASE_URL

        timeout_raw = os.getenv("QSTASH_TIMEOUT", "").strip()
        timeout: float | None = None
        if timeout_raw:
            try:
                timeout = float(timeout_raw)
            except ValueError as exc:
                raise ValueError("QSTASH_TIMEOUT must be a numeric value.") from exc
            if timeout <= 0:
                raise ValueError("QSTASH_TIMEOUT must be greater than zero.")

        return cls(token=SecretStr(token), base_url=base_url, timeout=timeout)
