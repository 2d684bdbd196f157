"""Registry mapping URI scheme tokens to scheme tags."""

from __future__ import annotations

from enum import IntEnum
from typing import Final

from .errors import UnknownSchemeError
from .types import AccountType

_MAX_SCHEME_LENGTH: Final = 254


class Scheme(IntEnum):
    """All recognised URI schemes. ``UNKNOWN`` marks a failed lookup."""

    UNKNOWN = 0
    FILE = 1
    IMAP = 2
    IMAPS = 3
    POP = 4
    POPS = 5
    NNTP = 6
    NNTPS = 7
    SMTP = 8
    SMTPS = 9
    MAILTO = 10
    NOTMUCH = 11


# First entry for a tag is the token used when serializing.
SCHEME_TABLE: Final[tuple[tuple[str, Scheme], ...]] = (
    ("file", Scheme.FILE),
    ("imap", Scheme.IMAP),
    ("imaps", Scheme.IMAPS),
    ("pop", Scheme.POP),
    ("pops", Scheme.POPS),
    ("news", Scheme.NNTP),
    ("snews", Scheme.NNTPS),
    ("nntp", Scheme.NNTP),
    ("nntps", Scheme.NNTPS),
    ("mailto", Scheme.MAILTO),
    ("notmuch", Scheme.NOTMUCH),
    ("smtp", Scheme.SMTP),
    ("smtps", Scheme.SMTPS),
)

_BY_TOKEN: Final = {token: scheme for token, scheme in reversed(SCHEME_TABLE)}
_BY_SCHEME: Final = {scheme: token for token, scheme in reversed(SCHEME_TABLE)}

_PROTOCOLS: Final[dict[Scheme, tuple[AccountType, bool]]] = {
    Scheme.IMAP: (AccountType.IMAP, False),
    Scheme.IMAPS: (AccountType.IMAP, True),
    Scheme.POP: (AccountType.POP, False),
    Scheme.POPS: (AccountType.POP, True),
    Scheme.SMTP: (AccountType.SMTP, False),
    Scheme.SMTPS: (AccountType.SMTP, True),
    Scheme.NNTP: (AccountType.NNTP, False),
    Scheme.NNTPS: (AccountType.NNTP, True),
}
_SCHEMES_BY_PROTOCOL: Final = {value: scheme for scheme, value in _PROTOCOLS.items()}


def scheme_of(text: str | None) -> Scheme:
    """Return the scheme of a URI string, or ``Scheme.UNKNOWN``."""

    if not text:
        return Scheme.UNKNOWN
    token, sep, _rest = text.partition(":")
    if not sep or len(token) > _MAX_SCHEME_LENGTH:
        return Scheme.UNKNOWN
    return _BY_TOKEN.get(token.lower(), Scheme.UNKNOWN)


def name_of(scheme: Scheme) -> str:
    """Return the canonical token for ``scheme``."""

    try:
        return _BY_SCHEME[Scheme(scheme)]
    except (KeyError, ValueError) as exc:
        raise UnknownSchemeError(f"Scheme {scheme!r} cannot be serialized.") from exc


def protocol_of(scheme: Scheme) -> tuple[AccountType, bool] | None:
    """Return ``(account type, secure)`` for network schemes, else None."""

    return _PROTOCOLS.get(scheme)


def scheme_for(account_type: AccountType, secure: bool) -> Scheme:
    """Return the scheme addressing ``account_type`` with or without TLS."""

    return _SCHEMES_BY_PROTOCOL[(AccountType(account_type), bool(secure))]


__all__ = ["Scheme", "SCHEME_TABLE", "scheme_of", "name_of", "protocol_of", "scheme_for"]
