"""Graylog server configuration: address, stream and credentials.

Secrets never live in the YAML file; the ``*_env`` keys name environment
variables (usually set through ``.env``) that hold them.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any, Mapping

from GraylogSearch.config.common import (
    expect_float,
    expect_int,
    expect_optional_str,
    expect_str,
    get_required_value,
    get_section,
)

_ALLOWED_SCHEMES = {"http", "https"}


@dataclass(frozen=True, slots=True)
class GraylogConfig:
    """Validated ``graylog`` section.

    Attributes:
        scheme: ``http`` or ``https``.
        host: Graylog server host name.
        port: Graylog REST API port.
        stream_id: Stream searched by default.
        username_env: Environment variable holding the user name.
        password_env: Environment variable holding the password.
        token_env: Environment variable holding an API access token.
        timeout: HTTP timeout in seconds.
        max_attempts: Attempts per request made by the transport.
        username: Resolved user name, if any.
        password: Resolved password, if any.
        token: Resolved access token, if any.
    """

    scheme: str
    host: str
    port: int
    stream_id: str
    username_env: str | None
    password_env: str | None
    token_env: str | None
    timeout: float
    max_attempts: int
    username: str | None = None
    password: str | None = None
    token: str | None = None

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"


def load_graylog(raw: Mapping[str, Any]) -> GraylogConfig:
    """Load the ``graylog`` section and resolve credentials from the environment.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "graylog", required=True)
    username_env = expect_optional_str(section.get("username_env"), "graylog.username_env")
    password_env = expect_optional_str(section.get("password_env"), "graylog.password_env")
    token_env = expect_optional_str(section.get("token_env"), "graylog.token_env")
    return GraylogConfig(
        scheme=expect_str(get_required_value(section, "scheme", "graylog.scheme"), "graylog.scheme").lower(),
        host=expect_str(get_required_value(section, "host", "graylog.host"), "graylog.host").strip(),
        port=expect_int(get_required_value(section, "port", "graylog.port"), "graylog.port"),
        stream_id=expect_str(get_required_value(section, "stream_id", "graylog.stream_id"), "graylog.stream_id").strip(),
        username_env=username_env,
        password_env=password_env,
        token_env=token_env,
        timeout=expect_float(section.get("timeout", 30), "graylog.timeout"),
        max_attempts=expect_int(section.get("max_attempts", 1), "graylog.max_attempts"),
        username=_read_env(username_env),
        password=_read_env(password_env),
        token=_read_env(token_env),
    )


def check_graylog(config: GraylogConfig) -> None:
    """Validate graylog domain constraints.

    Raises:
        ValueError: If values violate graylog constraints.
    """
    if config.scheme not in _ALLOWED_SCHEMES:
        raise ValueError(f"graylog.scheme must be one of {sorted(_ALLOWED_SCHEMES)}")
    if not config.host:
        raise ValueError("graylog.host must not be empty")
    if not 0 < config.port < 65536:
        raise ValueError("graylog.port must be between 1 and 65535")
    if not config.stream_id:
        raise ValueError("graylog.stream_id must not be empty")
    if config.timeout <= 0:
        raise ValueError("graylog.timeout must be > 0")
    if config.max_attempts < 1:
        raise ValueError("graylog.max_attempts must be >= 1")


def _read_env(name: str | None) -> str | None:
    if not name:
        return None
    return os.getenv(name, "").strip() or None
