"""
The `status` command: show configuration and model availability.

oneiromancer/src/oneiromancer/cli/status.py
"""

from typing import Optional

import click
from rich.markup import escape

from ..console_utils import console
from ..errors import OneiromancerError
from ..ollama import OllamaClient
from .cli_group import cli, exit_code_for, report_error, resolve_config


def model_available(model: str, available: list[str]) -> bool:
    """Match `aidapal` against `aidapal:latest` style tags as Ollama does."""
    wanted = model if ":" in model else f"{model}:latest"
    return model in available or wanted in available


@cli.command("status")
@click.option("--base-url", "-b", help="Ollama base URL")
@click.option("--model", "-m", help="Model name")
@click.pass_context
def status(ctx: click.Context, base_url: Optional[str], model: Optional[str]) -> None:
    """Show Ollama configuration status."""
    config = resolve_config(base_url, model)

    console.print("[bold cyan]Ollama Configuration Status[/bold cyan]\n")
    console.print(f"Base URL: {escape(config.base_url)}")
    console.print(f"Model: {escape(config.model)}")
    console.print(f"Timeout: {config.timeout:g}s")

    try:
        models = OllamaClient(config).list_models()
    except OneiromancerError as e:
        report_error(e)
        ctx.exit(exit_code_for(e))

    console.print(f"Server models: {escape(', '.join(models)) if models else 'none'}")
    if model_available(config.model, models):
        console.print(f"[green]Model '{escape(config.model)}' is available[/green]")
    else:
        console.print(f"[red]Model '{escape(config.model)}' is not available (try: ollama pull {escape(config.model)})[/red]")
        ctx.exit(1)
