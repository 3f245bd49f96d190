"""Config command group (init/show)."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console

from ezdispatch.config.loader import convert_to_camel, get_config_path, load_config, save_config
from ezdispatch.config.schema import GeneratorConfig
from ezdispatch.utils.exceptions import ConfigError, format_error


def register_config_commands(app: typer.Typer, console: Console) -> None:
    """Register the config command group."""
    config_app = typer.Typer(help="Generator configuration helpers (init/show)")
    app.add_typer(config_app, name="config")

    @config_app.command("init")
    def config_init(
        path: Path | None = typer.Argument(None, help="Where to write ezdispatch.json (default: ./ezdispatch.json)"),
        force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
    ) -> None:
        """Write a config file with default settings."""
        target = path or get_config_path()
        if target.exists() and not force:
            console.print(f"[yellow]Config already exists:[/yellow] {target} (use --force to overwrite)")
            raise typer.Exit(1)
        save_config(GeneratorConfig(), target)
        console.print(f"[green]✓[/green] Wrote {target}")

    @config_app.command("show")
    def config_show(ctx: typer.Context) -> None:
        """Print the effective configuration as JSON."""
        config_path = (ctx.obj or {}).get("config_path")
        try:
            cfg = load_config(config_path)
        except ConfigError as e:
            console.print(f"[red]{format_error(e)}[/red]")
            raise typer.Exit(1)
        typer.echo(json.dumps(convert_to_camel(cfg.model_dump()), indent=2))
