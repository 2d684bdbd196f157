"""Mailbox path values with an explicit canonical form."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from .schemes import Scheme, scheme_of
from .uri import parse, to_string


class MailboxKind(str, Enum):
    """Backend family a mailbox path points at."""

    LOCAL = "local"
    IMAP = "imap"
    POP = "pop"
    NNTP = "nntp"
    NOTMUCH = "notmuch"
    UNKNOWN = "unknown"


_KINDS: Final = {
    Scheme.FILE: MailboxKind.LOCAL,
    Scheme.IMAP: MailboxKind.IMAP,
    Scheme.IMAPS: MailboxKind.IMAP,
    Scheme.POP: MailboxKind.POP,
    Scheme.POPS: MailboxKind.POP,
    Scheme.NNTP: MailboxKind.NNTP,
    Scheme.NNTPS: MailboxKind.NNTP,
    Scheme.NOTMUCH: MailboxKind.NOTMUCH,
}


class SameAsOriginal:
    """Marker: the canonical path is the original text."""

    _instance: SameAsOriginal | None = None

    def __new__(cls) -> SameAsOriginal:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SAME_AS_ORIGINAL"


SAME_AS_ORIGINAL: Final = SameAsOriginal()


@dataclass(frozen=True)
class Distinct:
    """Canonical path that differs from the original text."""

    value: str


Canonical = SameAsOriginal | Distinct


@dataclass(frozen=True)
class MailboxPath:
    """A user-supplied mailbox path plus its canonical spelling."""

    orig: str
    canon: Canonical = SAME_AS_ORIGINAL
    kind: MailboxKind = MailboxKind.UNKNOWN

    @property
    def canonical(self) -> str:
        if isinstance(self.canon, Distinct):
            return self.canon.value
        return self.orig


def probe_kind(text: str) -> MailboxKind:
    """Classify ``text`` by scheme; scheme-less text is a local path."""

    scheme = scheme_of(text)
    if scheme == Scheme.UNKNOWN:
        return MailboxKind.LOCAL if text else MailboxKind.UNKNOWN
    return _KINDS.get(scheme, MailboxKind.UNKNOWN)


def canonicalize(text: str) -> MailboxPath:
    """Build a :class:`MailboxPath` for ``text``.

    URLs are re-serialized, which drops any password. Local paths are
    user-expanded.
    """

    kind = probe_kind(text)
    if kind is MailboxKind.LOCAL and scheme_of(text) == Scheme.UNKNOWN:
        canonical = str(Path(text).expanduser())
    else:
        uri = parse(text)
        canonical = to_string(uri) if uri is not None else text
    if canonical == text:
        return MailboxPath(orig=text, canon=SAME_AS_ORIGINAL, kind=kind)
    return MailboxPath(orig=text, canon=Distinct(canonical), kind=kind)


__all__ = [
    "Canonical",
    "Distinct",
    "MailboxKind",
    "MailboxPath",
    "SAME_AS_ORIGINAL",
    "SameAsOriginal",
    "canonicalize",
    "probe_kind",
]
