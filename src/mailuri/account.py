"""Connection accounts and their projection to and from URIs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .errors import MissingHostError, UnknownSchemeError
from .schemes import name_of, protocol_of, scheme_for
from .types import AccountFlag, AccountType
from .uri import Uri

LOGGER = logging.getLogger(__name__)


@dataclass
class ConnAccount:
    """Credentials and endpoint for one remote mail service.

    ``flags`` records which of user, login, port and password have been
    resolved, so that an empty value can be told apart from a missing one.
    """

    host: str
    type: AccountType
    secure: bool = False
    user: str = ""
    login: str = ""
    password: str = field(default="", repr=False)
    port: int = 0
    flags: AccountFlag = AccountFlag.NONE

    def has(self, flag: AccountFlag) -> bool:
        return bool(self.flags & flag)

    def set_user(self, user: str) -> None:
        self.user = user
        self.flags |= AccountFlag.USER

    def set_login(self, login: str) -> None:
        self.login = login
        self.flags |= AccountFlag.LOGIN

    def set_password(self, password: str) -> None:
        self.password = password
        self.flags |= AccountFlag.PASS

    def set_port(self, port: int) -> None:
        self.port = port
        self.flags |= AccountFlag.PORT

    def unset_pass(self) -> None:
        """Force the password to be resolved again; the stored value is kept."""

        self.flags &= ~AccountFlag.PASS

    @property
    def identity(self) -> str:
        """Login if resolved, else the user name (used in prompts)."""

        return self.login if self.has(AccountFlag.LOGIN) else self.user

    @property
    def protocol(self) -> str:
        return name_of(scheme_for(self.type, self.secure))


def account_from_uri(uri: Uri) -> ConnAccount:
    """Build an account from the host, user, password and port of ``uri``."""

    if not uri.host:
        raise MissingHostError("URI has no host.")
    protocol = protocol_of(uri.scheme)
    if protocol is None:
        raise UnknownSchemeError(f"Scheme {uri.scheme.name.lower()} has no network protocol.")

    account_type, secure = protocol
    account = ConnAccount(host=uri.host, type=account_type, secure=secure)
    if uri.user is not None:
        account.set_user(uri.user)
    if uri.password is not None:
        account.set_password(uri.password)
    if uri.port:
        account.set_port(uri.port)
    LOGGER.debug(
        "Account for %s://%s created with flags %s",
        account.protocol,
        account.host,
        account.flags,
    )
    return account


def account_to_uri(account: ConnAccount) -> Uri:
    """Project ``account`` back onto a URI (for display or storage)."""

    return Uri(
        scheme=scheme_for(account.type, account.secure),
        host=account.host,
        user=account.user if account.has(AccountFlag.USER) else None,
        password=account.password if account.has(AccountFlag.PASS) else None,
        port=account.port if account.has(AccountFlag.PORT) else 0,
    )


__all__ = ["ConnAccount", "account_from_uri", "account_to_uri"]
