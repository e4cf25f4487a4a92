# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Command-line interface for mta-hooks.

Usage:
    mta-hooks parse "http://127.0.0.1:3000/rcptto?onfailure=tempfail&timeout=5"
    mta-hooks endpoints --config /etc/mta-hooks/config.ini
    mta-hooks serve --config /etc/mta-hooks/config.ini --port 8080
"""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from .config_loader import load_hooks_config
from .endpoint import EndpointDescriptor, parse_endpoint
from .errors import ConfigError
from .hook_config import HOOK_NAMES
from .logger import configure_logging

console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print a formatted error message to stderr."""
    err_console.print(f"[red]Error:[/red] {message}")


def _yes(value: bool) -> str:
    return "[green]yes[/green]" if value else "no"


def _descriptor_row(endpoint: EndpointDescriptor) -> list[str]:
    return [
        endpoint.address,
        f"{endpoint.timeout_seconds}s",
        endpoint.on_failure.value,
        _yes(endpoint.fire_and_forget),
        _yes(endpoint.skip_if_authenticated),
    ]


def _endpoint_table(title: str) -> Table:
    table = Table(title=title)
    table.add_column("Hook", style="cyan")
    table.add_column("Address")
    table.add_column("Timeout", justify="right")
    table.add_column("On failure")
    table.add_column("F&F")
    table.add_column("Skip auth")
    return table


@click.group()
@click.option("--log-level", default=None, help="Logging level (default: MTH_LOG_LEVEL or INFO).")
def main(log_level: str | None) -> None:
    """Inspect and serve MTA hook configuration."""
    configure_logging(log_level)


@main.command("parse")
@click.argument("reference")
def parse_cmd(reference: str) -> None:
    """Show how an endpoint REFERENCE is interpreted."""
    try:
        endpoint = parse_endpoint(reference)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc
    table = _endpoint_table("Endpoint")
    table.add_row("-", *_descriptor_row(endpoint))
    console.print(table)


@main.command("endpoints")
@click.option("--config", "config_path", type=click.Path(), default=None, help="Path to config.ini.")
def endpoints_cmd(config_path: str | None) -> None:
    """List configured endpoints per hook, in call order."""
    config = load_hooks_config(config_path)
    table = _endpoint_table("Hook endpoints")
    invalid = 0
    for hook_name in HOOK_NAMES:
        for reference in config.endpoints_for(hook_name):
            try:
                endpoint = parse_endpoint(reference)
            except ConfigError as exc:
                invalid += 1
                table.add_row(hook_name, f"[red]{reference}[/red]", "", exc.reason, "", "")
                continue
            table.add_row(hook_name, *_descriptor_row(endpoint))

    if table.row_count == 0:
        console.print("[dim]No hook endpoints configured[/dim]")
        return
    console.print(table)
    if invalid:
        print_error(f"{invalid} invalid endpoint reference(s)")
        raise SystemExit(1)


@main.command("serve")
@click.option("--config", "config_path", type=click.Path(), default=None, help="Path to config.ini.")
@click.option("--host", default="0.0.0.0", show_default=True, help="Bind address.")
@click.option("--port", type=int, default=None, help="Bind port (default: configured REST port).")
def serve_cmd(config_path: str | None, host: str, port: int | None) -> None:
    """Run the REST server exposing message bodies to data hook endpoints.

    No pipeline runs in this process, so /metrics reports zero counters.
    """
    import uvicorn

    from .api import create_app

    config = load_hooks_config(config_path)
    bind_port = port if port is not None else config.rest.port
    console.print(f"[green]Serving {config.temp_directory()} on {host}:{bind_port}[/green]")
    uvicorn.run(create_app(config), host=host, port=bind_port)


if __name__ == "__main__":
    main()
