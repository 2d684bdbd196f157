"""Configuration loading and validation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .types import AccountType, CredentialConfig, MailboxEntry, ProtocolDefaults
from .uri import parse

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/mailuri/config.yaml")
DEFAULT_ROOT_DIR = Path("~/.local/lib/mailuri")
DEFAULT_LOG_LEVEL = "info"
CONFIG_ENV_VAR = "MAILURI_CONFIG"

_PROTOCOL_KEYS = {"user", "login", "pass", "oauth_refresh_command"}
_UNSUPPORTED_KEYS = {
    AccountType.POP: {"login"},
    AccountType.SMTP: {"login"},
    AccountType.NNTP: {"login", "oauth_refresh_command"},
}


class ConfigError(ValueError):
    """Raised when configuration is invalid or missing."""


@dataclass(frozen=True)
class LoggingConfig:
    """Logging-related configuration."""

    level: str = DEFAULT_LOG_LEVEL
    debug_file: bool = False


@dataclass(frozen=True)
class Config:
    """Fully parsed configuration."""

    root_dir: Path = field(default_factory=DEFAULT_ROOT_DIR.expanduser)
    credentials: CredentialConfig = field(default_factory=CredentialConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    mailboxes: list[MailboxEntry] = field(default_factory=list)


def load_config(path: Path | str | None = None) -> Config:
    """Load and validate configuration from YAML.

    An explicitly requested file must exist; a missing default file yields an
    empty configuration.
    """

    config_path, explicit = _resolve_config_path(path)
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        LOGGER.debug("No config file at %s, using defaults.", config_path)
        return Config()

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a mapping.")

    return _parse_config(raw)


def resolved_config_path(path: Path | str | None = None) -> Path:
    """Return the config path that :func:`load_config` would read."""

    return _resolve_config_path(path)[0]


def _resolve_config_path(explicit: Path | str | None) -> tuple[Path, bool]:
    if explicit:
        return Path(explicit).expanduser(), True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser(), True
    return DEFAULT_CONFIG_PATH.expanduser(), False


def _parse_config(raw: dict[str, Any]) -> Config:
    root_dir = Path(raw.get("rootdir") or raw.get("root_dir") or DEFAULT_ROOT_DIR).expanduser()
    interactive = raw.get("interactive", True)
    if not isinstance(interactive, bool):
        raise ConfigError("interactive must be a boolean.")
    protocols = {
        account_type: _parse_protocol(raw.get(account_type.value), account_type)
        for account_type in AccountType
    }
    return Config(
        root_dir=root_dir,
        credentials=CredentialConfig(protocols=protocols, interactive=interactive),
        logging=_parse_logging(raw.get("logging")),
        mailboxes=_parse_mailboxes(raw.get("mailboxes")),
    )


def _parse_protocol(value: Any, account_type: AccountType) -> ProtocolDefaults:
    name = account_type.value
    if value is None:
        return ProtocolDefaults()
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be a mapping.")

    unknown = set(value) - _PROTOCOL_KEYS
    if unknown:
        raise ConfigError(f"{name} has unknown keys: {', '.join(sorted(map(str, unknown)))}.")
    unsupported = set(value) & _UNSUPPORTED_KEYS.get(account_type, set())
    if unsupported:
        raise ConfigError(f"{name} does not support: {', '.join(sorted(unsupported))}.")

    return ProtocolDefaults(
        user=_optional_string(value.get("user"), f"{name}.user"),
        login=_optional_string(value.get("login"), f"{name}.login"),
        password=_optional_string(value.get("pass"), f"{name}.pass"),
        oauth_refresh_command=_optional_string(
            value.get("oauth_refresh_command"),
            f"{name}.oauth_refresh_command",
        ),
    )


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        raise ConfigError(f"{field_name} must be a string.")
    text = str(value)
    return text or None


def _parse_mailboxes(value: Any) -> list[MailboxEntry]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError("mailboxes must be a list.")

    mailboxes: list[MailboxEntry] = []
    seen: set[str] = set()
    for idx, entry in enumerate(value, start=1):
        if not isinstance(entry, dict):
            raise ConfigError(f"mailboxes[{idx}] must be a mapping.")
        name = entry.get("name")
        url = entry.get("url")
        if not name or not url:
            raise ConfigError(f"mailboxes[{idx}] requires 'name' and 'url'.")
        uri = parse(url) if isinstance(url, str) else None
        if uri is None:
            raise ConfigError(f"mailboxes[{idx}].url is not a valid mailbox URL.")
        if str(name) in seen:
            raise ConfigError(f"mailboxes[{idx}] duplicates name '{name}'.")
        seen.add(str(name))
        if uri.password is not None:
            LOGGER.warning(
                "Mailbox '%s' stores a password in its URL; prefer the protocol 'pass' setting.",
                name,
            )
        mailboxes.append(MailboxEntry(name=str(name), url=url))
    return mailboxes


def _parse_logging(value: Any) -> LoggingConfig:
    if value is None:
        return LoggingConfig()
    if not isinstance(value, dict):
        raise ConfigError("logging must be a mapping.")
    level = str(value.get("level", DEFAULT_LOG_LEVEL)).lower()
    debug_file = bool(value.get("debug_file", False))
    return LoggingConfig(level=level, debug_file=debug_file)


__all__ = [
    "CONFIG_ENV_VAR",
    "Config",
    "ConfigError",
    "LoggingConfig",
    "load_config",
    "resolved_config_path",
]
