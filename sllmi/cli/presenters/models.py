"""Presenters for model and configuration display in CLI."""

import os

from rich.console import Console
from rich.table import Table

from sllmi.core.config import ConfigSchema
from sllmi.core.provider.key_pool import mask_api_key
from sllmi.registry import ModelRegistry

PROVIDER_COLORS = {
    "gemini": "red",
    "openrouter": "magenta",
}


class ModelListPresenter:
    """Render a model registry as a table.

    Contains no business logic - only presentation logic.
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def present(self, registry: ModelRegistry) -> None:
        if len(registry) == 0:
            self.console.print("[yellow]No models registered[/yellow]")
            return

        table = Table(title=f"Models ({len(registry)})")
        table.add_column("Model", style="cyan")
        table.add_column("Provider")
        table.add_column("API keys", justify="right", style="green")

        for name in sorted(registry.list_models()):
            client = registry.get_model(name)
            provider = getattr(client, "provider_name", "unknown")
            color = PROVIDER_COLORS.get(provider)
            provider_cell = f"[{color}]{provider}[/{color}]" if color else provider
            table.add_row(name, provider_cell, str(getattr(client, "key_count", "?")))

        self.console.print(table)


class ConfigPresenter:
    """Render every environment setting with its effective source."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def present(self) -> None:
        table = Table(title="Configuration")
        table.add_column("Variable", style="cyan")
        table.add_column("Value")
        table.add_column("Source", style="dim")

        for _name, spec in sorted(ConfigSchema.all_specs().items()):
            raw = os.environ.get(spec.name)
            if raw is None:
                value, source = spec.default, "default"
            else:
                value, source = raw, "env"
            if spec.secret and raw is not None:
                keys = [part.strip() for part in raw.split(",") if part.strip()]
                value = ", ".join(mask_api_key(key) for key in keys) or "<empty>"
            elif isinstance(value, tuple):
                value = ",".join(value)
            table.add_row(spec.name, "-" if value is None else str(value), source)

        self.console.print(table)
