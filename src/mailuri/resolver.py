"""Resolve missing account credentials from configuration or the user."""

from __future__ import annotations

import base64
import getpass
import logging
import subprocess
import sys
from collections.abc import Callable
from typing import Protocol

import typer

from .account import ConnAccount
from .errors import (
    CredentialError,
    MissingCredentialError,
    RefreshCommandFailedError,
    RefreshCommandMissingError,
)
from .types import AccountFlag, AccountType, CredentialConfig, ProtocolDefaults

LOGGER = logging.getLogger(__name__)

CommandRunner = Callable[[str], str]

_OAUTH_PROTOCOLS = frozenset({AccountType.IMAP, AccountType.POP, AccountType.SMTP})


class Prompter(Protocol):
    """Interactive capability used when configuration has no answer."""

    def is_interactive(self) -> bool: ...

    def prompt_text(self, prompt: str, default: str | None = None) -> str | None: ...

    def prompt_secret(self, prompt: str) -> str | None: ...


class ConsolePrompter:
    """Prompt on the controlling terminal via Typer."""

    def is_interactive(self) -> bool:
        return bool(getattr(sys.stdin, "isatty", lambda: False)())

    def prompt_text(self, prompt: str, default: str | None = None) -> str | None:
        try:
            return typer.prompt(prompt, default=default or "", prompt_suffix="", err=True)
        except typer.Abort:
            return None

    def prompt_secret(self, prompt: str) -> str | None:
        try:
            return typer.prompt(
                prompt,
                default="",
                hide_input=True,
                show_default=False,
                prompt_suffix="",
                err=True,
            )
        except typer.Abort:
            return None


class NonInteractivePrompter:
    """Prompter for batch use; never asks anything."""

    def is_interactive(self) -> bool:
        return False

    def prompt_text(self, prompt: str, default: str | None = None) -> str | None:
        return None

    def prompt_secret(self, prompt: str) -> str | None:
        return None


def run_refresh_command(command: str) -> str:
    """Run ``command`` through the shell and return its first output line."""

    with subprocess.Popen(command, shell=True, stdout=subprocess.PIPE, text=True) as process:
        output, _errors = process.communicate()
    line = output.split("\n", 1)[0]
    if process.returncode:
        LOGGER.warning("Refresh command exited with status %s", process.returncode)
    return line.rstrip("\r\n")


class CredentialResolver:
    """Fill in user, login and password of accounts on demand.

    Lookups go through the configured per-protocol defaults first and only
    then fall back to prompting, which is skipped in non-interactive sessions.
    """

    def __init__(
        self,
        config: CredentialConfig,
        prompter: Prompter | None = None,
        *,
        run_command: CommandRunner = run_refresh_command,
        local_user: Callable[[], str] = getpass.getuser,
    ) -> None:
        self._config = config
        self._prompter: Prompter = prompter or NonInteractivePrompter()
        self._run_command = run_command
        self._local_user = local_user

    @property
    def interactive(self) -> bool:
        return self._config.interactive and self._prompter.is_interactive()

    def resolve_user(self, account: ConnAccount) -> None:
        if account.has(AccountFlag.USER):
            return
        configured = self._defaults(account).user
        if configured:
            account.set_user(configured)
            return
        if not self.interactive:
            raise _credential_error(MissingCredentialError, "No user name configured", account)

        answer = self._prompter.prompt_text(
            f"Username at {account.host}: ",
            default=self._default_user(),
        )
        if answer is None:
            raise _credential_error(MissingCredentialError, "User name prompt cancelled", account)
        account.set_user(answer)

    def resolve_login(self, account: ConnAccount) -> None:
        if account.has(AccountFlag.LOGIN):
            return
        if account.type is AccountType.IMAP:
            configured = self._defaults(account).login
            if configured:
                account.set_login(configured)
                return
        try:
            self.resolve_user(account)
        except MissingCredentialError:
            LOGGER.debug("Couldn't get user info for %s", account.host)
            raise
        account.set_login(account.user)

    def resolve_pass(self, account: ConnAccount) -> None:
        if account.has(AccountFlag.PASS):
            return
        configured = self._defaults(account).password
        if configured:
            account.set_password(configured)
            return
        if not self.interactive:
            raise _credential_error(MissingCredentialError, "No password configured", account)

        answer = self._prompter.prompt_secret(f"Password for {account.identity}@{account.host}: ")
        if answer is None:
            raise _credential_error(MissingCredentialError, "Password prompt cancelled", account)
        account.set_password(answer)

    def oauth_bearer_token(self, account: ConnAccount) -> str:
        """Return a base64 OAUTHBEARER (RFC 7628) initial response."""

        self.resolve_login(account)

        command = None
        if account.type in _OAUTH_PROTOCOLS:
            command = self._defaults(account).oauth_refresh_command
        if not command:
            raise _credential_error(
                RefreshCommandMissingError, "No OAUTH refresh command defined", account
            )

        try:
            token = self._run_command(command)
        except (OSError, subprocess.SubprocessError) as exc:
            raise _credential_error(
                RefreshCommandFailedError, f"Unable to run refresh command: {exc}", account
            ) from exc
        if not token:
            raise _credential_error(RefreshCommandFailedError, "Command returned empty string", account)

        message = (
            f"n,a={account.login},\x01host={account.host}\x01port={account.port}"
            f"\x01auth=Bearer {token}\x01\x01"
        )
        return base64.b64encode(message.encode("utf-8")).decode("ascii")

    def _defaults(self, account: ConnAccount) -> ProtocolDefaults:
        return self._config.defaults_for(account.type)

    def _default_user(self) -> str | None:
        try:
            return self._local_user()
        except (KeyError, OSError):
            return None


def _credential_error(
    error_type: type[CredentialError], message: str, account: ConnAccount
) -> CredentialError:
    LOGGER.debug("%s for %s://%s", message, account.protocol, account.host)
    return error_type(message, host=account.host, protocol=account.protocol)


__all__ = [
    "CommandRunner",
    "ConsolePrompter",
    "CredentialResolver",
    "NonInteractivePrompter",
    "Prompter",
    "run_refresh_command",
]
