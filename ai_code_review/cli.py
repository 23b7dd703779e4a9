"""CLI application for AI Code Review."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ai_code_review import __version__
from ai_code_review.adapters.ci_runner import CIRunner
from ai_code_review.core.ai_service import AIService
from ai_code_review.core.errors import ReviewError
from ai_code_review.core.models import AIConfig, Finding, ReviewOutcome, Severity
from ai_code_review.core.prompt_builder import CodeContext
from ai_code_review.core.providers import ProviderIdentity, get_all_provider_ids, list_providers
from ai_code_review.utils.config import Settings, get_effective_settings
from ai_code_review.utils.file_ops import write_file_safe
from ai_code_review.utils.logger import set_log_level, setup_logging
from ai_code_review.utils.storage import ConfigStore

app = typer.Typer(
    name="acr",
    help="AI Code Review - review code with OpenAI, Gemini, Claude or any OpenAI-compatible API",
    add_completion=False,
)

config_app = typer.Typer(help="Show, set, edit or clear the stored provider configuration")
app.add_typer(config_app, name="config")

console = Console()

PROVIDER_HELP = f"Provider ({', '.join(get_all_provider_ids())})"

SEVERITY_STYLES: dict[Severity, tuple[str, str]] = {
    Severity.SUCCESS: ("✓", "green"),
    Severity.WARNING: ("⚠", "yellow"),
    Severity.ERROR: ("✗", "red"),
    Severity.INFO: ("ℹ", "blue"),
}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"AI Code Review v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    _: Annotated[  # noqa: PYL-W0613
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Enable verbose output"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress non-error output"),
    ] = False,
) -> None:
    """AI Code Review - LLM-powered review of pasted code."""
    if verbose:
        log_level = "DEBUG"
    elif quiet:
        log_level = "ERROR"
    else:
        log_level = get_effective_settings().log_level
    setup_logging(level=log_level)


def resolve_config(
    settings: Settings,
    store: ConfigStore,
    provider: str | None = None,
    api_key: str | None = None,
    base_url: str | None = None,
    model: str | None = None,
) -> AIConfig:
    """
    Combine command-line values with the environment and the stored record.

    Each field is taken from the explicit option, then settings
    (environment / project file), then the stored record. A stored model
    or base URL only applies while the stored provider is the one chosen.
    """
    stored = store.get()
    chosen = (
        provider
        or settings.provider
        or (stored.provider if stored is not None else None)
        or ProviderIdentity.OPENAI.value
    )
    if stored is not None and stored.provider != chosen:
        stored = AIConfig(provider=chosen, api_key=stored.api_key)

    def pick(option: str | None, setting: str | None, field: str) -> str | None:
        if option is not None:
            return option
        if setting:
            return setting
        return getattr(stored, field) if stored is not None else None

    return AIConfig(
        provider=chosen,
        api_key=pick(api_key, settings.api_key, "api_key") or "",
        base_url=pick(base_url, settings.base_url, "base_url"),
        model=pick(model, settings.model, "model"),
    )


def _read_code(file: Path | None) -> CodeContext:
    if file is None or str(file) == "-":
        stdin = typer.get_text_stream("stdin")
        return CodeContext(content=stdin.read())

    context = CodeContext.from_file(file)
    if context is None:
        console.print(f"[red]Could not read: {file}[/red]")
        raise typer.Exit(1)
    return context


def render_finding(finding: Finding) -> Panel:
    """Render one finding as a card."""
    icon, color = SEVERITY_STYLES[finding.severity]

    badges = Text.assemble((f" {finding.category} ", f"bold reverse {color}"))
    if finding.line is not None:
        badges.append("  ")
        badges.append(f" Line {finding.line} ", style="reverse")

    parts: list[Text | Panel] = [badges]
    if finding.description:
        parts.append(Text(finding.description))
    if finding.suggestion:
        parts.append(
            Panel(
                Text.assemble(("Suggestion: ", "bold"), finding.suggestion),
                border_style="dim",
            )
        )

    title = Text.assemble((f"{icon} ", color), (finding.title, "bold"))
    return Panel(Group(*parts), title=title, title_align="left", border_style=color)


def render_outcome(outcome: ReviewOutcome, source: str) -> None:
    """Print the analysis report for a successful review."""
    findings = outcome.findings or []

    header = Text.assemble(
        ("Analysis Report", "bold"),
        (f"  {source}", "dim"),
        (f"  ({outcome.provider}, {outcome.model})", "dim"),
    )
    counts = Text.assemble(
        ("✓ ", "green"),
        f"{outcome.count(Severity.SUCCESS)} Good   ",
        ("⚠ ", "yellow"),
        f"{outcome.count(Severity.WARNING)} Warnings   ",
        ("✗ ", "red"),
        f"{outcome.count(Severity.ERROR)} Issues",
    )
    console.print(Panel(Group(header, counts), border_style="cyan"))

    if not findings:
        console.print("[green]No findings reported.[/green]")
        return

    for finding in findings:
        console.print(render_finding(finding))


def print_failure(outcome: ReviewOutcome) -> None:
    """Print a failed review and how to fix it when that is known."""
    console.print(Text(f"Error: {outcome.message}", style="red"))
    if outcome.kind == "configuration":
        console.print("Run 'acr config edit' or 'acr config set' to configure a provider.")


@app.command()
def review(
    file: Annotated[
        Optional[Path],
        typer.Argument(help="File to review ('-' or omitted reads stdin)"),
    ] = None,
    provider: Annotated[
        Optional[str],
        typer.Option("--provider", "-p", help=PROVIDER_HELP),
    ] = None,
    api_key: Annotated[
        Optional[str],
        typer.Option("--api-key", help="API key for the provider"),
    ] = None,
    base_url: Annotated[
        Optional[str],
        typer.Option("--base-url", help="Base URL for an OpenAI-compatible API"),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", "-m", help="Model to use (provider default if omitted)"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (text, json)"),
    ] = "text",
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write findings as JSON to this file"),
    ] = None,
) -> None:
    """Review a file, or code piped on stdin.

    Examples:
        acr review app.py                       # Use the stored provider
        cat app.py | acr review                 # Review pasted/piped code
        acr review -p gemini -m gemini-1.5-pro app.py
        acr review -f json app.py > findings.json
    """
    if output_format not in ("text", "json"):
        console.print(f"[red]Unknown output format: {output_format}[/red]")
        raise typer.Exit(1)

    context = _read_code(file)
    if not context.content.strip():
        console.print("[red]No code to review[/red]")
        raise typer.Exit(1)

    settings = get_effective_settings()
    config = resolve_config(
        settings,
        ConfigStore(settings=settings),
        provider=provider,
        api_key=api_key,
        base_url=base_url,
        model=model,
    )

    service = AIService(settings=settings)
    with console.status("Analyzing your code...", spinner="dots"):
        outcome = service.review(config, context)

    if not outcome.ok:
        print_failure(outcome)
        raise typer.Exit(1)

    findings_json = json.dumps([f.to_dict() for f in outcome.findings or []], indent=2)

    if output_format == "json":
        typer.echo(findings_json)
    else:
        render_outcome(outcome, context.display_name)

    if output:
        if write_file_safe(output, findings_json):
            console.print(f"[green]Results saved to: {output}[/green]")
        else:
            console.print(f"[red]Could not write: {output}[/red]")
            raise typer.Exit(1)


@app.command()
def providers() -> None:
    """List supported providers and their default models."""
    table = Table(title="Supported Providers")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Default Model", style="green")

    for info in list_providers():
        table.add_row(info.id, info.name, info.default_model)

    console.print(table)


@app.command()
def ci(
    files: Annotated[
        list[Path],
        typer.Argument(help="Files to review"),
    ],
    provider: Annotated[
        Optional[str],
        typer.Option("--provider", "-p", help="Provider override"),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", "-m", help="Model override"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (text, json, github)"),
    ] = "text",
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file"),
    ] = None,
    fail_on_warning: Annotated[
        bool,
        typer.Option("--fail-on-warning", help="Fail if warnings are found"),
    ] = False,
) -> None:
    """Run code review for CI/CD pipelines (reads ACR_* environment variables)."""
    settings = get_effective_settings()
    config = resolve_config(settings, ConfigStore(settings=settings), provider=provider, model=model)

    try:
        config.validate()
    except ReviewError as e:
        console.print(Text(f"Error: {e.message}", style="red"))
        raise typer.Exit(1)

    runner = CIRunner(
        config,
        settings=settings,
        fail_on_error=True,
        fail_on_warning=fail_on_warning,
        service=AIService(settings=settings),
    )
    result = runner.review_files(files)

    try:
        rendered = runner.format_results(result, output_format=output_format)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if output:
        write_file_safe(output, rendered)
        console.print(f"[green]Results written to: {output}[/green]")
    else:
        typer.echo(rendered)

    if not result.success:
        raise typer.Exit(1)


@config_app.command("show")
def config_show() -> None:
    """Show the stored provider configuration (API key masked)."""
    store = ConfigStore(settings=get_effective_settings())
    stored = store.get()

    if stored is None:
        console.print(f"[yellow]No configuration saved at {store.path}[/yellow]")
        console.print("Run 'acr config edit' or 'acr config set' to configure a provider.")
        raise typer.Exit(1)

    try:
        model = stored.resolved_model if stored.model else f"Default: {stored.resolved_model}"
    except ReviewError:
        model = stored.model or "-"

    table = Table(title="AI Provider Configuration", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Provider", stored.provider)
    table.add_row("API Key", stored.masked_api_key)
    table.add_row("Base URL", stored.base_url or "-")
    table.add_row("Model", model)
    table.add_row("Stored in", str(store.path))
    console.print(table)


@config_app.command("set")
def config_set(
    api_key: Annotated[
        str,
        typer.Option("--api-key", help="API key for the provider", prompt=True, hide_input=True),
    ],
    provider: Annotated[
        str,
        typer.Option("--provider", "-p", help=PROVIDER_HELP),
    ] = ProviderIdentity.OPENAI.value,
    base_url: Annotated[
        Optional[str],
        typer.Option("--base-url", help="Base URL (required for openai-compatible)"),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", "-m", help="Model (provider default if omitted)"),
    ] = None,
) -> None:
    """Save a provider configuration."""
    from ai_code_review.tui.config_app import FormState, form_to_config

    try:
        ProviderIdentity.parse(provider)
        config = form_to_config(
            FormState(
                provider=provider,
                api_key=api_key,
                base_url=base_url or "",
                model=model or "",
            )
        )
    except ReviewError as e:
        console.print(Text(f"Error: {e.message}", style="red"))
        raise typer.Exit(1)

    store = ConfigStore(settings=get_effective_settings())
    if not store.save(config):
        console.print("[red]Failed to save configuration. Please try again.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Saved {config.provider} configuration to {store.path}[/green]")


@config_app.command("clear")
def config_clear() -> None:
    """Remove the stored provider configuration."""
    store = ConfigStore(settings=get_effective_settings())
    if not store.clear():
        console.print(f"[red]Failed to clear configuration at {store.path}[/red]")
        raise typer.Exit(1)
    console.print("[green]Configuration cleared.[/green]")


@config_app.command("edit")
def config_edit() -> None:
    """Open the interactive configuration form."""
    from ai_code_review.tui import run_config_tui

    # Log lines would draw over the form.
    set_log_level("ERROR")
    saved = run_config_tui(ConfigStore(settings=get_effective_settings()))
    if saved is None:
        console.print("[yellow]Configuration unchanged.[/yellow]")
        return
    console.print(f"[green]Saved {saved.provider} configuration.[/green]")


if __name__ == "__main__":
    app()
