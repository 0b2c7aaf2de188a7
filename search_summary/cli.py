"""
Command-line interface for AI search summaries.

Uses Typer to expose the provider operations: generating a summary from a
posts file, testing an API key, and listing models and providers. Loads
.env files so API keys can live outside the config file.
"""

from __future__ import annotations

import json
from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console
from rich.table import Table

from .config import AppConfig, load_config
from .input.posts import load_request, prepare_posts
from .llm.providers.base import SummaryProvider
from .llm.providers.factory import (
    create_provider_from_config,
    get_available_providers,
    get_default_provider,
)
from .llm.tracing import flush, setup_langfuse
from .utils.logging import setup_llm_logger, setup_logging

app = typer.Typer(add_completion=False)
console = Console()


@app.command()
def summarize(
    posts: Path = typer.Option(..., "--posts", "-p", exists=True, readable=True),
    query: str | None = typer.Option(
        None, "--query", "-q", help="Search query (defaults to the 'query' key in the posts file)."
    ),
    provider: str | None = typer.Option(None, "--provider", help="openai, claude or gemini."),
    model: str | None = typer.Option(None, "--model", help="Model identifier."),
    api_key: str | None = typer.Option(None, "--api-key", help="Override the provider API key."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    log_dir: Path | None = typer.Option(
        None, "--log-dir", help="Directory for run and LLM log files."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON."),
):
    """Generate an AI summary for a search query from a posts file."""
    cfg = _bootstrap(config, provider, model, api_key, log_dir)
    try:
        request = load_request(posts, query)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2)

    request.posts = prepare_posts(request.posts, cfg.search)
    llm_logger = setup_llm_logger(cfg.logging, log_dir)
    summary_provider = _build_provider(cfg, llm_logger=llm_logger)

    result = summary_provider.summarize(request)
    flush()

    if as_json:
        console.print_json(json.dumps(result.to_dict()))
    elif result.ok:
        console.print(result.answer_html, markup=False)
        if result.results:
            table = Table("ID", "Title", "URL", "Type", title="Sources")
            for item in result.results:
                table.add_row(
                    str(item.get("id", "")),
                    str(item.get("title", "")),
                    str(item.get("url", "")),
                    str(item.get("type", "")),
                )
            console.print(table)
    else:
        console.print(f"[red]{result.error}[/red]")

    if not result.ok:
        raise typer.Exit(code=1)


@app.command("test-key")
def test_key(
    provider: str | None = typer.Option(None, "--provider", help="openai, claude or gemini."),
    model: str | None = typer.Option(None, "--model", help="Model identifier."),
    api_key: str | None = typer.Option(None, "--api-key", help="Override the provider API key."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
):
    """Check that the configured API key authenticates."""
    cfg = _bootstrap(config, provider, model, api_key, None)
    outcome = _build_provider(cfg).test_api_key()
    flush()

    style = "green" if outcome.success else "red"
    console.print(f"[{style}]{outcome.message}[/{style}]")
    for key, value in outcome.details.items():
        console.print(f"  {key}: {value}")
    if not outcome.success:
        raise typer.Exit(code=1)


@app.command()
def models(
    provider: str | None = typer.Option(None, "--provider", help="openai, claude or gemini."),
    api_key: str | None = typer.Option(None, "--api-key", help="Override the provider API key."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    live: bool = typer.Option(
        False, "--live/--static", help="Query the vendor catalog instead of the curated list."
    ),
):
    """List the models a provider offers."""
    cfg = _bootstrap(config, provider, None, api_key, None)
    summary_provider = _build_provider(cfg)
    names = summary_provider.fetch_models_from_api() if live else summary_provider.get_available_models()
    flush()

    if not names:
        console.print("[yellow]No models returned.[/yellow]")
        return
    default = summary_provider.get_default_model()
    for name in names:
        marker = " (default)" if name == default else ""
        console.print(f"{name}{marker}")


@app.command()
def providers():
    """List supported providers."""
    default = get_default_provider()
    table = Table("ID", "Name", "Default")
    for provider_id, name in get_available_providers().items():
        table.add_row(provider_id, name, "yes" if provider_id == default else "")
    console.print(table)


def _bootstrap(
    config: Path | None,
    provider: str | None,
    model: str | None,
    api_key: str | None,
    log_dir: Path | None,
) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)

    if provider:
        cfg.provider.name = provider
        if not model:
            cfg.provider.model = ""
    if model:
        cfg.provider.model = model
    if api_key:
        cfg.provider.api_key = api_key

    setup_logging(cfg.logging, log_dir)
    setup_langfuse(cfg.langfuse)
    return cfg


def _build_provider(cfg: AppConfig, **options) -> SummaryProvider:
    summary_provider = create_provider_from_config(
        cfg.provider,
        cfg.search,
        log_cfg=cfg.logging,
        **options,
    )
    if summary_provider is None:
        console.print(f"[red]AI provider '{cfg.provider.name}' is not available.[/red]")
        raise typer.Exit(code=1)
    return summary_provider


if __name__ == "__main__":
    app()
