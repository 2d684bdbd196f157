"""mailuri package initialisation."""

from importlib import metadata

from .account import ConnAccount, account_from_uri, account_to_uri
from .codec import pct_decode, pct_encode
from .resolver import CredentialResolver
from .schemes import Scheme, name_of, scheme_of
from .uri import QueryEntry, Uri, parse, to_string


def _discover_version() -> str:
    """Return the installed package version, falling back to dev marker."""
    try:
        return metadata.version("mailuri")
    except metadata.PackageNotFoundError:  # pragma: no cover - occurs in editable installs
        return "0.0.0"


__all__ = [
    "__version__",
    "ConnAccount",
    "CredentialResolver",
    "QueryEntry",
    "Scheme",
    "Uri",
    "account_from_uri",
    "account_to_uri",
    "name_of",
    "parse",
    "pct_decode",
    "pct_encode",
    "scheme_of",
    "to_string",
]
__version__ = _discover_version()
