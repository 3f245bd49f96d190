"""CLI commands for ezdispatch.

The CLI is a thin shell over the library pipeline: ``generate`` writes or
prints the expanded module, ``inspect`` shows the parsed interface, ``check``
validates a declaration without emitting anything.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ezdispatch import __logo__, __version__
from ezdispatch.cli.command_groups.config_commands import register_config_commands
from ezdispatch.cli.shared.logging_utils import configure_cli_logging
from ezdispatch.config.loader import load_config
from ezdispatch.config.schema import GeneratorConfig
from ezdispatch.model.parser import parse_interface_file
from ezdispatch.synth.pipeline import generate_file
from ezdispatch.utils.exceptions import EzdispatchError, format_error

app = typer.Typer(
    name="ezdispatch",
    help=f"{__logo__} ezdispatch - request/dispatch layer generator",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline details to stderr"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to ezdispatch.json"),
) -> None:
    """Generate request types, dispatchers and proxies from interface classes."""
    configure_cli_logging(verbose)
    ctx.obj = {"config_path": config}


def _fail(exc: Exception) -> NoReturn:
    console.print(f"[red]{escape(format_error(exc))}[/red]")
    raise typer.Exit(1)


def _load_config(ctx: typer.Context) -> GeneratorConfig:
    config_path = (ctx.obj or {}).get("config_path")
    try:
        return load_config(config_path)
    except EzdispatchError as e:
        _fail(e)


@app.command()
def generate(
    ctx: typer.Context,
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Python file with the interface class"),
    class_name: str | None = typer.Option(None, "--class", "-k", help="Interface class name"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write here instead of stdout"),
) -> None:
    """Expand an interface declaration into a module with its dispatch layer."""
    cfg = _load_config(ctx)
    try:
        module = generate_file(source, output, class_name=class_name, config=cfg)
    except (EzdispatchError, OSError) as e:
        _fail(e)
    if output is None:
        typer.echo(module.source, nl=False)
        return
    console.print(
        f"[green]✓[/green] {escape(module.interface.name)}: wrote "
        f"{', '.join(module.names.exports)} to [cyan]{escape(str(output))}[/cyan]"
    )


@app.command("inspect")
def inspect_command(
    ctx: typer.Context,
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Python file with the interface class"),
    class_name: str | None = typer.Option(None, "--class", "-k", help="Interface class name"),
) -> None:
    """Show the methods, request variants and result shapes of an interface."""
    cfg = _load_config(ctx)
    try:
        interface = parse_interface_file(source, class_name, config=cfg)
    except (EzdispatchError, OSError) as e:
        _fail(e)

    table = Table(title=f"{interface.name} ({interface.receiver.name.lower()} receiver)")
    table.add_column("Method", style="cyan")
    table.add_column("Variant", style="green")
    table.add_column("Parameters")
    table.add_column("Success")
    table.add_column("Error")
    table.add_column("Async")
    for method in interface.methods:
        table.add_row(
            method.name,
            f"{cfg.variant_prefix}{method.variant_name}",
            escape(", ".join(p.declaration() for p in method.parameters)) or "[dim]-[/dim]",
            escape(method.result.success),
            escape(method.result.error),
            "✓" if method.is_async else "[yellow]sync[/yellow]",
        )
    console.print(table)
    if not interface.is_homogeneous:
        console.print("[dim]Mixed result types: proxies re-specialize erased dispatcher results.[/dim]")


@app.command()
def check(
    ctx: typer.Context,
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Python file with the interface class"),
    class_name: str | None = typer.Option(None, "--class", "-k", help="Interface class name"),
) -> None:
    """Validate an interface declaration without writing anything."""
    cfg = _load_config(ctx)
    try:
        module = generate_file(source, class_name=class_name, config=cfg)
    except (EzdispatchError, OSError) as e:
        _fail(e)
    interface = module.interface
    console.print(
        f"[green]✓[/green] {escape(interface.name)}: {len(interface.methods)} methods, "
        f"variants {', '.join(module.names.variant_classes)}"
    )


@app.command()
def version() -> None:
    """Show ezdispatch version."""
    console.print(f"{__logo__} ezdispatch v{__version__}")


register_config_commands(app=app, console=console)


if __name__ == "__main__":
    app()
