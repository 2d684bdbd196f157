"""Exception hierarchy shared by the URI and credential layers."""

from __future__ import annotations


class MailUriError(Exception):
    """Base class for every error raised by mailuri."""


class MalformedUriError(MailUriError, ValueError):
    """Raised when a URI (or one of its percent-escapes) violates the grammar."""


class UnknownSchemeError(MailUriError, ValueError):
    """Raised when a scheme is missing, unrecognised or has no protocol."""


class EncodingOverflowError(MailUriError, ValueError):
    """Raised when percent-encoded output does not fit the requested capacity."""


class MissingHostError(MailUriError, ValueError):
    """Raised when an account is requested for a URI without a host."""


class CredentialError(MailUriError, RuntimeError):
    """Raised when credential resolution fails for an account."""

    def __init__(self, message: str, *, host: str | None = None, protocol: str | None = None):
        if host or protocol:
            message = f"{message} ({protocol or '?'}://{host or '?'})"
        super().__init__(message)
        self.host = host
        self.protocol = protocol


class MissingCredentialError(CredentialError):
    """Raised when a user name or password cannot be determined."""


class RefreshCommandMissingError(CredentialError):
    """Raised when no OAuth refresh command is configured for a protocol."""


class RefreshCommandFailedError(CredentialError):
    """Raised when the OAuth refresh command fails or prints nothing."""


__all__ = [
    "MailUriError",
    "MalformedUriError",
    "UnknownSchemeError",
    "EncodingOverflowError",
    "MissingHostError",
    "CredentialError",
    "MissingCredentialError",
    "RefreshCommandMissingError",
    "RefreshCommandFailedError",
]
