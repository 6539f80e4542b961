# promptfan/cli.py
from __future__ import annotations

import asyncio
import dataclasses
import json
from typing import Dict, List, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from promptfan.aggregator import Aggregator
from promptfan.config import get_config, run_wizard
from promptfan.llm import PROVIDER_CLASSES, ProviderResponse, build_providers, default_configs
from promptfan.observability import configure_logging

app = typer.Typer(add_completion=False, help="Send one prompt to several LLM backends at once.")
console = Console()


def build_aggregator() -> Aggregator:
    cfg = get_config()
    configure_logging(cfg.log_level, json=cfg.log_json)
    return Aggregator(build_providers(cfg))


def _resolve_name(agg: Aggregator, token: str) -> str:
    """Accept a display name ("Google Gemini") or a config section ("gemini")."""
    cls = PROVIDER_CLASSES.get(token.lower())
    if cls is not None and agg.get(cls.name) is not None:
        return cls.name
    for p in agg.get_providers():
        if p.name.lower() == token.lower():
            return p.name
    rprint(f"[red]Unknown provider[/red]: {token}")
    raise typer.Exit(2)


# --------------------------- Commands ---------------------------

@app.command()
def wizard():
    """Run interactive setup."""
    run_wizard()


@app.command()
def api(host: Optional[str] = None, port: Optional[int] = None):
    """Launch FastAPI."""
    cfg = get_config()
    import uvicorn
    uvicorn.run("promptfan.api.main:create_app", factory=True,
                host=host or cfg.host, port=port or cfg.api_port, reload=False)


@app.command()
def providers():
    """List registered providers and their models."""
    agg = build_aggregator()
    table = Table(title="Providers")
    table.add_column("Name")
    table.add_column("Models")
    table.add_column("API key")
    for d in agg.describe():
        table.add_row(d["name"], "\n".join(d["available_models"]),
                      "[green]yes[/green]" if d["has_api_key"] else "[yellow]no[/yellow]")
    console.print(table)


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Prompt sent to every provider"),
    only: Optional[List[str]] = typer.Option(None, "--only", help="Restrict to these providers (repeatable)"),
    model: Optional[List[str]] = typer.Option(None, "--model", help="Override a model as NAME=MODEL (repeatable)"),
    temperature: Optional[float] = typer.Option(None, min=0.0, help="Sampling temperature for all providers"),
    max_tokens: Optional[int] = typer.Option(None, min=1, help="Token budget for all providers"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """Fan a prompt out to every configured provider."""
    if not prompt.strip():
        rprint("[red]Prompt is empty[/red]")
        raise typer.Exit(2)

    agg = build_aggregator()

    chosen: Dict[str, str] = {}
    for item in model or []:
        name, sep, model_id = item.partition("=")
        if not sep or not model_id:
            rprint(f"[red]Expected NAME=MODEL[/red]: {item}")
            raise typer.Exit(2)
        name = _resolve_name(agg, name)
        if model_id not in agg.get(name).available_models:
            rprint(f"[red]{name} does not offer model[/red] {model_id}")
            raise typer.Exit(2)
        chosen[name] = model_id

    configs = default_configs(get_config(), list(agg.get_providers()), models=chosen)

    if only:
        wanted = {_resolve_name(agg, n) for n in only}
        configs = {k: v for k, v in configs.items() if k in wanted}

    overrides: Dict[str, object] = {}
    if temperature is not None:
        overrides["temperature"] = temperature
    if max_tokens is not None:
        overrides["max_tokens"] = max_tokens
    if overrides:
        configs = {k: dataclasses.replace(v, **overrides) for k, v in configs.items()}

    responses = asyncio.run(agg.run_all(prompt, configs))
    skipped = agg.skipped(configs)

    if as_json:
        print(json.dumps({"responses": [r.to_dict() for r in responses], "skipped": skipped}, indent=2))
    else:
        for r in responses:
            console.print(_card(r))
        if skipped:
            console.print(f"[dim]Not configured: {', '.join(skipped)}[/dim]")

    if responses and all(r.error is not None for r in responses):
        raise typer.Exit(1)


def _card(r: ProviderResponse) -> Panel:
    title = f"{r.provider_name} · {r.model}"
    meta = []
    if r.latency is not None:
        meta.append(f"{r.latency} ms")
    if r.tokens_used is not None:
        meta.append(f"{r.tokens_used.total} tokens")
    subtitle = " · ".join(meta) or None
    if r.error is not None:
        return Panel(Text(r.error, style="red"), title=title, subtitle=subtitle, border_style="red")
    return Panel(Text(r.content), title=title, subtitle=subtitle, border_style="green")


if __name__ == "__main__":
    app()
