"""mailuri command-line interface."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from . import __version__
from .account import ConnAccount, account_from_uri, account_to_uri
from .codec import pct_decode, pct_encode
from .config import Config, ConfigError, load_config, resolved_config_path
from .errors import MailUriError
from .logging import REDACTED, configure_logging
from .mailbox_path import canonicalize
from .resolver import ConsolePrompter, CredentialResolver, NonInteractivePrompter, Prompter
from .schemes import name_of
from .types import AccountFlag
from .uri import Uri, parse_or_raise, to_string

app = typer.Typer(help="Parse mail-service URIs and resolve their credentials.")
LOGGER = logging.getLogger(__name__)


@dataclass
class CLIState:
    """Stores shared CLI options."""

    config_path: Path | None


@app.callback()
def _mailuri(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "-c",
            "--config",
            help="Path to mailuri config (env MAILURI_CONFIG or ~/.config/mailuri/config.yaml).",
        ),
    ] = None,
) -> None:
    """Capture global CLI options."""

    resolved = config.expanduser() if config else None
    ctx.obj = CLIState(config_path=resolved)


@app.command("parse")
def parse_command(
    uri: Annotated[str, typer.Argument(..., help="URI to parse.")],
    show_password: Annotated[
        bool,
        typer.Option("--show-password", help="Print the password instead of masking it."),
    ] = False,
) -> None:
    """Print the decoded fields of a URI."""

    parsed = _parse_uri(uri)
    typer.echo(f"Scheme: {name_of(parsed.scheme)}")
    typer.echo(f"User: {_display(parsed.user)}")
    if parsed.password is None or show_password:
        typer.echo(f"Password: {_display(parsed.password)}")
    else:
        typer.echo(f"Password: {REDACTED}")
    typer.echo(f"Host: {_display(parsed.host)}")
    typer.echo(f"Port: {parsed.port or 'default'}")
    typer.echo(f"Path: {_display(parsed.path)}")
    if parsed.query:
        typer.echo("Query:")
        for entry in parsed.query:
            typer.echo(f"  {entry.name} = {entry.value}")


@app.command("format")
def format_command(
    uri: Annotated[str, typer.Argument(..., help="URI to re-serialize.")],
    path_only: Annotated[
        bool,
        typer.Option("--path-only", help="Omit the '//' authority marker."),
    ] = False,
    encode_path: Annotated[
        bool,
        typer.Option("--encode-path", help="Percent-encode path segments as well."),
    ] = False,
) -> None:
    """Parse a URI and print it back without its password."""

    parsed = _parse_uri(uri)
    typer.echo(to_string(parsed, path_only=path_only, encode_path=encode_path))


@app.command()
def encode(text: Annotated[str, typer.Argument(..., help="Text to percent-encode.")]) -> None:
    """Percent-encode the reserved URI characters of TEXT."""

    typer.echo(pct_encode(text))


@app.command()
def decode(text: Annotated[str, typer.Argument(..., help="Text to percent-decode.")]) -> None:
    """Decode %XX escapes in TEXT."""

    try:
        typer.echo(pct_decode(text))
    except MailUriError as exc:
        _failure(f"Cannot decode: {exc}", exc)


@app.command()
def account(
    ctx: typer.Context,
    uri: Annotated[str, typer.Argument(..., help="URI of the remote mail service.")],
    password: Annotated[
        bool,
        typer.Option("--password", help="Resolve the password too."),
    ] = False,
    no_prompt: Annotated[
        bool,
        typer.Option("--no-prompt", help="Never prompt; fail if configuration lacks a value."),
    ] = False,
) -> None:
    """Resolve the credentials of a remote account."""

    config = _load_environment(_state(ctx))
    conn = _account_for(uri)
    resolver = CredentialResolver(config.credentials, _prompter(no_prompt))
    try:
        resolver.resolve_login(conn)
        if password:
            resolver.resolve_pass(conn)
    except MailUriError as exc:
        _failure(f"Credential resolution failed: {exc}", exc)

    typer.echo(f"URL: {to_string(account_to_uri(conn))}")
    typer.echo(f"Protocol: {conn.protocol}")
    typer.echo(f"Host: {conn.host}")
    typer.echo(f"Port: {conn.port if conn.has(AccountFlag.PORT) else 'default'}")
    typer.echo(f"User: {conn.user}")
    typer.echo(f"Login: {conn.login}")
    if conn.has(AccountFlag.PASS):
        typer.echo(f"Password: {REDACTED}")


@app.command()
def oauth(
    ctx: typer.Context,
    uri: Annotated[str, typer.Argument(..., help="URI of the remote mail service.")],
    no_prompt: Annotated[
        bool,
        typer.Option("--no-prompt", help="Never prompt; fail if configuration lacks a value."),
    ] = False,
) -> None:
    """Print a base64 OAUTHBEARER token for an account."""

    config = _load_environment(_state(ctx))
    conn = _account_for(uri)
    resolver = CredentialResolver(config.credentials, _prompter(no_prompt))
    try:
        token = resolver.oauth_bearer_token(conn)
    except MailUriError as exc:
        _failure(f"OAUTHBEARER failed: {exc}", exc)
    typer.echo(token)


@app.command()
def mailboxes(ctx: typer.Context) -> None:
    """List configured mailboxes."""

    state = _state(ctx)
    config = _load_environment(state)
    typer.echo(f"→ mailuri {__version__}")
    typer.echo(f"Config path: {resolved_config_path(state.config_path)}")
    if not config.mailboxes:
        typer.echo("No mailboxes configured.")
        return
    typer.echo("Mailboxes:")
    for entry in config.mailboxes:
        path = canonicalize(entry.url)
        typer.echo(f"  - {entry.name} [{path.kind.value}]: {path.canonical}")


def _state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise RuntimeError("CLI state missing from context.")
    return state


def _load_environment(state: CLIState) -> Config:
    try:
        config = load_config(state.config_path)
        configure_logging(config.logging, config.root_dir)
    except ConfigError as exc:
        _config_failure(exc)
    return config


def _config_failure(exc: ConfigError) -> NoReturn:
    typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(2) from exc


def _failure(message: str, exc: Exception | None = None) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(1) from exc


def _parse_uri(text: str) -> Uri:
    try:
        return parse_or_raise(text)
    except MailUriError as exc:
        _failure(f"Invalid URI: {exc}", exc)


def _account_for(text: str) -> ConnAccount:
    try:
        return account_from_uri(_parse_uri(text))
    except MailUriError as exc:
        _failure(f"Cannot build account: {exc}", exc)


def _prompter(no_prompt: bool) -> Prompter:
    if no_prompt:
        return NonInteractivePrompter()
    return ConsolePrompter()


def _display(value: str | None) -> str:
    if value is None:
        return "<none>"
    return value or "<empty>"


def main() -> None:  # pragma: no cover - delegated to Typer
    app()


__all__ = ["app", "main"]
