"""
Chain Registry — CLI Entry Point

Usage:
    chain-registry sync [--local]
    chain-registry show CHAIN_ID [--local] [--json]
    chain-registry config [--json]

A .env file in the working directory is loaded before the remote source
is resolved, so GITHUB_CHAIN_REGISTRY_URL / GITHUB_CHAIN_REGISTRY_REF can
live there.
"""

from __future__ import annotations

import json

import click

from .config import default_mirror_path, get_remote_source, load_env_file
from .errors import ChainNotFoundError, RegistryError, SyncError
from .logging_config import setup_logging
from .registry import ChainRegistry

local_option = click.option(
    "--local",
    is_flag=True,
    help="Keep the mirror in ./.cosmos-chain-registry instead of the temp directory",
)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Look up chain metadata in the Cosmos chain registry."""
    load_env_file()
    setup_logging()
    ctx.ensure_object(dict)
    ctx.obj["source"] = get_remote_source()


def _open_registry(ctx: click.Context, local: bool) -> ChainRegistry:
    source = ctx.obj["source"]
    try:
        return ChainRegistry.from_remote(source, default_mirror_path(local=local))
    except SyncError as e:
        click.secho(f"✗ Sync failed: {e}", fg="red", err=True)
        raise SystemExit(2)


@cli.command()
@local_option
@click.pass_context
def sync(ctx: click.Context, local: bool) -> None:
    """Clone or refresh the local mirror."""
    registry = _open_registry(ctx, local)
    result = registry.sync_result

    action = "Cloned" if result.cloned else "Updated"
    head = "detached" if result.detached else result.revision
    click.secho(f"✓ {action} {result.origin}", fg="green")
    click.echo(f"  Path:    {result.path}")
    click.echo(f"  Commit:  {result.short_commit} ({head})")


@cli.command()
@click.argument("chain_id")
@local_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def show(ctx: click.Context, chain_id: str, local: bool, as_json: bool) -> None:
    """Show the registry record for CHAIN_ID."""
    registry = _open_registry(ctx, local)

    try:
        info = registry.get_by_chain_id(chain_id)
    except ChainNotFoundError:
        click.secho(f"✗ No chain with chain_id {chain_id!r}", fg="yellow", err=True)
        raise SystemExit(1)
    except RegistryError as e:
        click.secho(f"✗ Lookup failed: {e}", fg="red", err=True)
        raise SystemExit(2)

    if as_json:
        click.echo(json.dumps(info.model_dump(), indent=2))
        return

    click.echo(f"Chain ID:     {info.chain_id}")
    click.echo(f"Chain name:   {info.chain_name}")
    click.echo(f"Pretty name:  {info.pretty_name}")


@cli.command("config")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def config_cmd(ctx: click.Context, as_json: bool) -> None:
    """Show the resolved remote source and mirror locations."""
    source = ctx.obj["source"]
    result = {
        "origin": source.origin,
        "revision": source.revision,
        "mirror_path": str(default_mirror_path()),
        "local_mirror_path": str(default_mirror_path(local=True)),
    }

    if as_json:
        click.echo(json.dumps(result, indent=2))
        return

    click.echo(f"Origin:       {result['origin']}")
    click.echo(f"Revision:     {result['revision']}")
    click.echo(f"Mirror:       {result['mirror_path']}")
    click.echo(f"Local mirror: {result['local_mirror_path']}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
