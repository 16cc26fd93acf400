#!/usr/bin/env python3
"""
Command line interface for regauth.

Pings registries and exchanges credentials for registry bearer tokens,
which is handy when debugging a registry's token service by hand.
"""

from typing import Optional, Tuple

import click
import httpx

from regauth.auth.exceptions import AuthenticationError
from regauth.auth.interfaces import Anonymous, AuthConfig, Authenticator, Basic, FromConfig
from regauth.transport.bearer import BearerTransport
from regauth.transport.factory import new_transport
from regauth.transport.ping import ping
from regauth.types.registry import Registry, repository_scope
from regauth.utils.config import Config, get_config, set_config
from regauth.utils.exceptions import RegauthError
from regauth.utils.logging import add_context, setup_logging


def build_authenticator(
    username: Optional[str],
    password: Optional[str],
    identity_token: Optional[str],
) -> Authenticator:
    """Pick the credential from the given options."""
    if identity_token:
        return FromConfig(AuthConfig(identity_token=identity_token))
    if username or password:
        if not (username and password):
            raise click.UsageError("--username and --password must be given together")
        return Basic(username=username, password=password)
    return Anonymous()


def parse_registry(name: str) -> Registry:
    try:
        return Registry.parse(name)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="REGISTRY")


@click.group(name="regauth")
@click.option("--insecure", is_flag=True, help="Allow plain http registries")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, ...)")
@click.pass_context
def cli(ctx: click.Context, insecure: bool, log_level: Optional[str]):
    """Registry token exchange tools."""
    config = get_config()
    overrides = {}
    if insecure:
        overrides["insecure"] = True
    if log_level:
        overrides["log_level"] = log_level
    if overrides:
        config = config.model_copy(update=overrides)
        set_config(config)
    
    setup_logging(config)
    ctx.obj = config


@cli.command(name="ping")
@click.argument("registry")
@click.pass_obj
def ping_command(config: Config, registry: str):
    """Show how REGISTRY wants to be authenticated."""
    target = parse_registry(registry)
    add_context(registry=target.registry_str())
    
    transport = httpx.HTTPTransport()
    try:
        pr = ping(target, transport, insecure=config.insecure, config=config)
    except (RegauthError, httpx.HTTPError) as e:
        raise click.ClickException(f"Ping failed: {e}")
    finally:
        transport.close()
    
    click.echo(f"scheme: {pr.scheme}")
    click.echo(f"challenge: {pr.challenge.scheme}")
    for name, value in sorted(pr.challenge.parameters.items()):
        click.echo(f"{name}: {value}")


@cli.command(name="token")
@click.argument("registry")
@click.option("--scope", "scopes", multiple=True, help="Scope to request (repeatable)")
@click.option("--repository", "repositories", multiple=True, help="Request pull access to a repository (repeatable)")
@click.option("--username", envvar="REGAUTH_USERNAME", help="Registry username")
@click.option("--password", envvar="REGAUTH_PASSWORD", help="Registry password")
@click.option("--identity-token", envvar="REGAUTH_IDENTITY_TOKEN", help="OAuth2 refresh token")
@click.pass_obj
def token_command(
    config: Config,
    registry: str,
    scopes: Tuple[str, ...],
    repositories: Tuple[str, ...],
    username: Optional[str],
    password: Optional[str],
    identity_token: Optional[str],
):
    """Exchange credentials for a bearer token for REGISTRY and print it."""
    target = parse_registry(registry)
    add_context(registry=target.registry_str())
    auth = build_authenticator(username, password, identity_token)
    requested = list(scopes) + [repository_scope(repo) for repo in repositories]
    
    inner = httpx.HTTPTransport()
    try:
        try:
            transport = new_transport(target, auth, inner=inner, scopes=requested, config=config)
        except AuthenticationError as e:
            raise click.ClickException(f"Authentication failed: {e}")
        except (RegauthError, httpx.HTTPError) as e:
            raise click.ClickException(f"Token exchange failed: {e}")
        
        if not isinstance(transport, BearerTransport) or transport.bearer is None:
            raise click.ClickException(f"{target} does not use bearer tokens")
        click.echo(transport.bearer.token)
    finally:
        inner.close()


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
