"""Core immutable data structures shared across mailuri."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, IntFlag


class AccountType(str, Enum):
    """Network protocol an account connects with."""

    IMAP = "imap"
    POP = "pop"
    SMTP = "smtp"
    NNTP = "nntp"


class AccountFlag(IntFlag):
    """Records which account fields have been resolved."""

    NONE = 0
    USER = 1 << 0
    LOGIN = 1 << 1
    PORT = 1 << 2
    PASS = 1 << 3


@dataclass(frozen=True)
class ProtocolDefaults:
    """Configured fallback credentials for one protocol."""

    user: str | None = None
    login: str | None = None
    password: str | None = field(default=None, repr=False)
    oauth_refresh_command: str | None = None


@dataclass(frozen=True)
class CredentialConfig:
    """Snapshot of credential-related settings passed to the resolver."""

    protocols: Mapping[AccountType, ProtocolDefaults] = field(default_factory=dict)
    interactive: bool = True

    def defaults_for(self, account_type: AccountType) -> ProtocolDefaults:
        return self.protocols.get(account_type) or ProtocolDefaults()


@dataclass(frozen=True)
class MailboxEntry:
    """Configured mailbox addressed by URL."""

    name: str
    url: str


__all__ = [
    "AccountType",
    "AccountFlag",
    "ProtocolDefaults",
    "CredentialConfig",
    "MailboxEntry",
]
