"""Main CLI entry point for sllmi."""

import asyncio
from typing import NoReturn, Optional

import typer
from rich.console import Console

from sllmi.cli.presenters.models import ConfigPresenter, ModelListPresenter
from sllmi.core.client import GenerationClient
from sllmi.core.config import get_config, validate_all
from sllmi.core.errors import SllmiError
from sllmi.core.generation_config import GenerationConfig
from sllmi.core.logging import configure_root_logging
from sllmi.registry import ModelRegistry, create_registry

app = typer.Typer(
    name="sllmi",
    help="sllmi CLI - generate text across providers with API key failover",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """sllmi CLI."""
    configure_root_logging("DEBUG" if verbose else get_config().log_level)


@app.command()
def version() -> None:
    """Show version information."""
    from sllmi import __version__

    console.print(f"[bold cyan]sllmi[/bold cyan] version [green]{__version__}[/green]")


@app.command()
def models() -> None:
    """List every model the configured providers expose."""
    ModelListPresenter(console=console).present(_load_registry())


@app.command()
def config() -> None:
    """Show configuration and report invalid settings."""
    ConfigPresenter(console=console).present()
    errors = validate_all()
    if errors:
        for error in errors:
            err_console.print(f"❌ {error}", style="red", markup=False)
        raise typer.Exit(1)
    console.print("[green]✅ Configuration is valid[/green]")


@app.command()
def generate(
    model: str = typer.Argument(..., help="Model name, see 'sllmi models'"),
    prompt: str = typer.Argument(..., help="Prompt text"),
    stream: bool = typer.Option(False, "--stream", "-s", help="Print chunks as they arrive"),
    temperature: Optional[float] = typer.Option(None, "--temperature", help="Sampling temperature"),
    top_p: Optional[float] = typer.Option(None, "--top-p", help="Nucleus sampling mass"),
    top_k: Optional[int] = typer.Option(None, "--top-k", help="Top-k sampling"),
    max_tokens: Optional[int] = typer.Option(None, "--max-tokens", help="Maximum output tokens"),
) -> None:
    """Generate text with a model."""
    generation_config = GenerationConfig(
        temperature=temperature,
        top_p=top_p,
        top_k=top_k,
        output_length=max_tokens,
    )
    client = _get_model(model)
    try:
        if stream:
            asyncio.run(_stream(client, prompt, generation_config))
        else:
            console.print(asyncio.run(client.generate(prompt, generation_config)), markup=False)
    except SllmiError as e:
        _fail(e)


@app.command()
def tokens(
    model: str = typer.Argument(..., help="Model name, see 'sllmi models'"),
    prompt: str = typer.Argument(..., help="Prompt text"),
) -> None:
    """Count tokens in a prompt."""
    client = _get_model(model)
    try:
        console.print(client.count_tokens(prompt))
    except SllmiError as e:
        _fail(e)


async def _stream(client: GenerationClient, prompt: str, config: GenerationConfig) -> None:
    async with client.generate_stream(prompt, config) as session:
        async for chunk in session:
            console.print(chunk, end="", markup=False, highlight=False)
        error = await session.error()
    console.print()
    if error is not None:
        raise error


def _load_registry() -> ModelRegistry:
    try:
        return create_registry()
    except SllmiError as e:
        _fail(e)


def _get_model(name: str) -> GenerationClient:
    try:
        return _load_registry().get_model(name)
    except SllmiError as e:
        _fail(e)


def _fail(error: SllmiError) -> NoReturn:
    err_console.print(f"❌ {error.error_type.value}: {error}", style="red", markup=False)
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
