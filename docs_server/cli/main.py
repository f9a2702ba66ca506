"""Main CLI entry point for Docs Server."""

import asyncio
from pathlib import Path

import click

from docs_server import __version__
from docs_server.core.config_store import ConfigStore
from docs_server.core.docs import DocumentationResolver
from docs_server.core.github import GitHubClient
from docs_server.mcp_server.config import ServerSettings

from .utils import (
    console,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    print_key_values,
)


def _load_settings(base_path: Path | None) -> ServerSettings:
    if base_path is not None:
        return ServerSettings(base_path=base_path)
    return ServerSettings()


@click.group(invoke_without_command=True)
@click.option("-v", "--version", is_flag=True, help="Show version information")
@click.option(
    "--base-path",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding config.json, repodata.json and docsdata/",
)
@click.pass_context
def cli(ctx, version, base_path):
    """Docs Server - documentation and source browsing over MCP.

    Serves local markdown docs and configured GitHub repositories to
    Claude Code as MCP tools.

    Examples:
        docs-server init                 # Create config.json and repodata.json
        docs-server info                 # Show resolved paths and counts
        docs-server serve                # Run the stdio MCP server
    """
    if version:
        console.print(f"Docs Server v{__version__}")
        ctx.exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        ctx.exit()

    ctx.ensure_object(dict)
    ctx.obj["settings"] = _load_settings(base_path)


@cli.command()
@click.pass_context
def serve(ctx):
    """Run the MCP server on stdio."""
    from docs_server.mcp_server.main import main

    asyncio.run(main(ctx.obj["settings"]))


@cli.command()
@click.option("--api-key", default=None, help="GitHub token written to a new config.json")
@click.pass_context
def init(ctx, api_key):
    """Create config.json and repodata.json if they are missing.

    Existing files are never overwritten.

    Examples:
        docs-server init
        docs-server init --api-key ghp_...
    """
    settings: ServerSettings = ctx.obj["settings"]
    store = ConfigStore(settings.config_path, settings.repodata_path)

    try:
        created = store.ensure_defaults()
        if api_key and settings.config_path in created:
            config = store.load_operational_config()
            config.github.api_key = api_key
            store.save_operational_config(config)
    except OSError as e:
        echo_error(f"Failed to write configuration: {e}")
        ctx.exit(1)

    if api_key and settings.config_path not in created:
        echo_warning(f"{settings.config_path} already exists, API key not written")

    if not created:
        echo_info("Configuration files already exist")
    for path in created:
        echo_success(f"Created {path}")


@cli.command()
@click.pass_context
def info(ctx):
    """Show resolved paths, libraries and GitHub token status."""
    settings: ServerSettings = ctx.obj["settings"]
    store = ConfigStore(settings.config_path, settings.repodata_path)
    resolver = DocumentationResolver(store, GitHubClient(store), settings.docs_path)
    github = store.load_operational_config().github

    print_key_values(
        [
            ("Base path", str(settings.base_path)),
            ("Docs path", str(settings.docs_path)),
            ("Settings", str(settings.config_path)),
            ("Registry", str(settings.repodata_path)),
            ("Libraries", str(len(resolver.get_available_libraries()))),
            ("Repositories", str(len(store.load_registry()))),
            ("GitHub token", "configured" if github.api_key else "not configured"),
            ("Expected rate limit", f"{github.expected_rate_limit}/hour"),
        ],
        title="Docs Server",
    )


if __name__ == "__main__":
    cli()
