"""Client configuration and environment loading.

WHY: Every client needs an API key, a base URL, and timeouts. Keeping them
in one explicit, validated object means the transport never has to reach
into the process environment, and tests can build clients without
touching os.environ.

HOW: ClientConfig is a frozen dataclass validated in __post_init__.
ClientConfig.from_env() is the single place that reads the environment:
python-dotenv loads a .env file, then ELEVENLABS_API_KEY and
ELEVENLABS_BASE_URL are read, with explicit arguments taking precedence.

RULES:
- API key is never hardcoded and never printed (to_dict() redacts it)
- base_url must be http(s); a trailing slash is stripped
- Timeouts must be positive numbers (seconds)
- Missing API key raises ConfigurationError naming the variable
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from dotenv import find_dotenv, load_dotenv

from elevenlabs_client import __version__
from elevenlabs_client.api.errors import ConfigurationError

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_BASE_URL = "https://api.elevenlabs.io"
API_KEY_ENV = "ELEVENLABS_API_KEY"
BASE_URL_ENV = "ELEVENLABS_BASE_URL"

DEFAULT_TIMEOUT_S = 30.0
DEFAULT_OPEN_TIMEOUT_S = 10.0
DEFAULT_USER_AGENT = "elevenlabs-client-python/{}".format(__version__)

API_KEY_HEADER = "xi-api-key"


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for one client instance.

    RULES:
    - api_key is required and non-blank
    - timeout applies to read/write/pool, open_timeout to connecting
    """

    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT_S
    open_timeout: float = DEFAULT_OPEN_TIMEOUT_S
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if not self.api_key or not str(self.api_key).strip():
            raise ConfigurationError("API key is required")

        base_url = (self.base_url or "").strip()
        if not (base_url.startswith("http://") or base_url.startswith("https://")):
            raise ConfigurationError("Invalid base URL: {!r}".format(self.base_url))
        object.__setattr__(self, "base_url", base_url.rstrip("/"))

        for name in ("timeout", "open_timeout"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigurationError("{} must be a positive number".format(name))

    @classmethod
    def from_env(
        cls,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        *,
        api_key_env: str = API_KEY_ENV,
        base_url_env: str = BASE_URL_ENV,
        dotenv_path: Optional[str] = None,
        **overrides: Any,
    ) -> ClientConfig:
        """Build a config from explicit values, falling back to the environment.

        WHY: Scripts and the CLI want "just use my key from .env". Doing the
        lookup here, once, keeps environment access out of the transport.

        HOW: Loads .env from dotenv_path, or the nearest one found from the
        working directory upwards (without overriding variables already set), then
        resolves each setting as explicit argument → environment → default.

        RULES:
        - Explicit api_key/base_url always win over the environment
        - Raises ConfigurationError if no API key can be found
        - Extra keyword arguments (timeout, open_timeout, user_agent) pass through
        """
        load_dotenv(dotenv_path or find_dotenv(usecwd=True))

        key = api_key or os.getenv(api_key_env, "").strip()
        if not key:
            raise ConfigurationError(
                "{} environment variable is required but not set. "
                "Add it to your environment or .env file.".format(api_key_env)
            )

        url = base_url or os.getenv(base_url_env, "").strip() or DEFAULT_BASE_URL
        return cls(api_key=key, base_url=url, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "api_key": "[REDACTED]",
            "base_url": self.base_url,
            "timeout": self.timeout,
            "open_timeout": self.open_timeout,
            "user_agent": self.user_agent,
        }
