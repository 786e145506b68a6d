# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for agentprobe."""

import os
from dataclasses import dataclass, field

from .errors import ConfigError
from .version import __version__

DEFAULT_USER_AGENT = f"agentprobe/{__version__} (live OpenAPI conformance prober)"
DEFAULT_API_KEY_NAME = "X-API-Key"

AUTH_TYPES = frozenset({"bearer", "api_key", "basic"})
API_KEY_LOCATIONS = frozenset({"header", "query"})


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _optional_float_env(name: str, default: float | None) -> float | None:
    try:
        value = os.getenv(name)
        if value is None:
            return default
        parsed = float(value)
        return parsed if parsed > 0 else None
    except ValueError:
        return default


@dataclass
class AuthConfig:
    """Credentials the transport attaches to every request except ``missing-auth`` probes."""

    type: str = "bearer"
    token: str | None = None
    api_key: str | None = None
    api_key_name: str = DEFAULT_API_KEY_NAME
    api_key_in: str = "header"
    username: str | None = None
    password: str | None = None

    @classmethod
    def from_env(cls) -> "AuthConfig | None":
        """Build credentials from environment variables; ``None`` when none are set."""
        token = os.getenv("AGENTPROBE_AUTH_TOKEN")
        api_key = os.getenv("AGENTPROBE_API_KEY")
        username = os.getenv("AGENTPROBE_BASIC_USERNAME")
        password = os.getenv("AGENTPROBE_BASIC_PASSWORD")
        if token:
            return cls(type="bearer", token=token)
        if api_key:
            return cls(
                type="api_key",
                api_key=api_key,
                api_key_name=os.getenv("AGENTPROBE_API_KEY_NAME", DEFAULT_API_KEY_NAME),
                api_key_in=os.getenv("AGENTPROBE_API_KEY_IN", "header").strip().lower(),
            )
        if username and password:
            return cls(type="basic", username=username, password=password)
        return None

    def validate(self) -> None:
        if self.type not in AUTH_TYPES:
            raise ConfigError(f"Unknown auth type: {self.type!r}", {"allowed": sorted(AUTH_TYPES)})
        if self.type == "api_key" and self.api_key_in not in API_KEY_LOCATIONS:
            raise ConfigError(
                f"Unknown API key placement: {self.api_key_in!r}",
                {"allowed": sorted(API_KEY_LOCATIONS)},
            )


@dataclass
class ProberSettings:
    """Prober and HTTP transport defaults. Durations are in seconds."""

    base_url: str = ""
    timeout: float = 30.0
    retries: int = 2
    retry_delay: float = 1.0
    requests_per_second: float | None = None
    sandbox: bool = False
    headers: dict[str, str] = field(default_factory=dict)
    user_agent: str = DEFAULT_USER_AGENT
    verify_ssl: bool = True
    allow_redirects: bool = True
    max_body_bytes: int = 16 * 1024 * 1024
    extended_malformations: bool = False
    auth: AuthConfig | None = None

    @classmethod
    def from_env(cls) -> "ProberSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("AGENTPROBE_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        return cls(
            base_url=os.getenv("AGENTPROBE_BASE_URL", cls.base_url),
            timeout=_float_env("AGENTPROBE_HTTP_TIMEOUT", cls.timeout),
            retries=_int_env("AGENTPROBE_HTTP_RETRIES", cls.retries),
            retry_delay=_float_env("AGENTPROBE_HTTP_RETRY_DELAY", cls.retry_delay),
            requests_per_second=_optional_float_env("AGENTPROBE_RATE_LIMIT", cls.requests_per_second),
            sandbox=_bool_env("AGENTPROBE_SANDBOX", cls.sandbox),
            user_agent=os.getenv("AGENTPROBE_USER_AGENT", cls.user_agent),
            verify_ssl=_bool_env("AGENTPROBE_HTTP_VERIFY_SSL", cls.verify_ssl),
            allow_redirects=_bool_env("AGENTPROBE_HTTP_REDIRECTS", cls.allow_redirects),
            max_body_bytes=max_body_bytes,
            extended_malformations=_bool_env("AGENTPROBE_EXTENDED_MALFORMATIONS", cls.extended_malformations),
            auth=AuthConfig.from_env(),
        )

    def validate(self) -> None:
        """Raise ConfigError when the settings cannot drive a probe run."""
        if not self.base_url or not self.base_url.strip():
            raise ConfigError("base_url is required for live probing")
        if self.retries < 0:
            raise ConfigError("retries must be >= 0", {"retries": self.retries})
        if self.timeout <= 0:
            raise ConfigError("timeout must be > 0", {"timeout": self.timeout})
        if self.retry_delay < 0:
            raise ConfigError("retry_delay must be >= 0", {"retry_delay": self.retry_delay})
        if self.requests_per_second is not None and self.requests_per_second <= 0:
            raise ConfigError(
                "requests_per_second must be > 0",
                {"requests_per_second": self.requests_per_second},
            )
        if self.auth is not None:
            self.auth.validate()


def load_settings() -> ProberSettings:
    """Load prober settings from environment with sensible defaults."""
    return ProberSettings.from_env()
