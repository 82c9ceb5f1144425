"""Command line interface for the Declutter project."""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from declutter.analysis import (
    CreateFolderSuggestion,
    NamingCleanupSuggestion,
    NamingImprovementSuggestion,
    ProjectAnalysis,
)
from declutter.catalog import ProjectCatalog
from declutter.catalog.errors import CatalogError
from declutter.catalog.health import ProjectHealth
from declutter.config import ConfigError, ConfigManager, DeclutterConfig, resolve_with_precedence
from declutter.config.resolver import assign_nested
from declutter.learning import LearningStore
from declutter.organizer import Organizer
from declutter.state import StateError, StateRepository
from declutter.templates import (
    ApplicationResult,
    Template,
    TemplateError,
    TemplateService,
    TemplateStore,
)

console = Console()

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class _Runtime:
    """Configuration and stores shared by a single command invocation."""

    config: DeclutterConfig
    repository: StateRepository
    learning: LearningStore
    templates: TemplateStore


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, quiet: bool, mode: str = "detail") -> None:
    """Print CLI output unless quiet mode suppresses it."""
    if quiet and mode != "error":
        return
    console.print(message)


def _configure_logging(level: str) -> None:
    """Route library logging through Rich at the configured level."""
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.WARNING
    root = logging.getLogger("declutter")
    root.setLevel(resolved)
    if not any(isinstance(handler, RichHandler) for handler in root.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)


def _load_runtime(cli_overrides: dict[str, Any] | None = None) -> _Runtime:
    """Load configuration and the persistent stores.

    Raises:
        ConfigError: If the configuration is invalid.
    """
    manager = ConfigManager()
    manager.ensure_exists()
    config = manager.load(cli_overrides=cli_overrides)
    _configure_logging(config.logging.level)
    repository = StateRepository(Path(config.state_dir))
    return _Runtime(
        config=config,
        repository=repository,
        learning=LearningStore(repository, settings=config.learning),
        templates=TemplateStore(repository),
    )


def _require_runtime(*, json_output: bool = False) -> _Runtime:
    """Load the runtime for commands that have no config overrides of their own."""
    try:
        return _load_runtime()
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
        raise  # pragma: no cover - _handle_cli_error always raises


def _resolve_quiet(ctx: click.Context, quiet: bool, config: DeclutterConfig) -> bool:
    explicit = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
    return quiet if explicit else config.cli.quiet_default


def _format_summary_line(command: str, target: Path | str, metrics: dict[str, Any]) -> str:
    """Return a consistent summary line for CLI commands."""
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {target}: {parts}.[/green]"


def _suggestions_table(analysis: ProjectAnalysis) -> Table:
    table = Table(title="Suggestions", show_lines=False)
    table.add_column("Kind", style="cyan")
    table.add_column("Suggestion", style="bold")
    table.add_column("Reason")
    table.add_column("Confidence", justify="right")
    for suggestion in analysis.suggestions:
        if isinstance(suggestion, CreateFolderSuggestion):
            label = "personalized" if suggestion.is_personalized else "folder"
            title = f"{suggestion.name} ({len(suggestion.matching_assets)} assets)"
        elif isinstance(suggestion, NamingImprovementSuggestion):
            label, title = "naming", suggestion.title
        elif isinstance(suggestion, NamingCleanupSuggestion):
            words = ", ".join(pattern.word for pattern in suggestion.patterns)
            label, title = "cleanup", f"{suggestion.title}: {words}"
        else:  # pragma: no cover - union is closed
            continue
        table.add_row(label, title, suggestion.reason, f"{suggestion.confidence:.0%}")
    return table


def _health_table(health: ProjectHealth) -> Table:
    table = Table(title="Project Health", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total assets", str(health.total_assets))
    table.add_row("Total folders", str(health.total_folders))
    table.add_row("Unorganized assets", str(health.unorganized_assets))
    table.add_row("Organization rate", f"{health.organization_rate:.1f}%")
    table.add_row("Average folder depth", f"{health.average_folder_depth:.2f}")
    table.add_row("Naming consistency", str(health.naming_consistency))
    table.add_row("Duplicate risk", f"{health.duplicate_risk:.1f}%")
    table.add_row("Overall score", str(health.overall_score))
    return table


def _templates_table(templates: list[Template]) -> Table:
    table = Table(title="Templates")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Category")
    table.add_column("Author")
    table.add_column("Folders", justify="right")
    for template in templates:
        table.add_row(
            template.id,
            template.name,
            template.category,
            template.author,
            str(len(template.folders)),
        )
    return table


def _load_catalog(project: str, *, json_output: bool) -> ProjectCatalog:
    try:
        return ProjectCatalog.from_file(Path(project).expanduser())
    except CatalogError as exc:
        _handle_cli_error(str(exc), code="catalog_error", json_output=json_output, original=exc)
        raise  # pragma: no cover - _handle_cli_error always raises


def _read_input(path: str) -> str:
    if path == "-":
        return click.get_text_stream("stdin").read()
    return Path(path).expanduser().read_text(encoding="utf-8")


def _write_output(text: str, output: str | None) -> None:
    if output is None:
        click.echo(text)
        return
    Path(output).expanduser().write_text(text, encoding="utf-8")
    console.print(f"[green]Wrote {output}.[/green]")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="declutter")
def cli() -> None:
    """Declutter analyzes compositing projects and organizes their assets.

    Returns:
        None: This function is invoked for its side effects.
    """


@cli.command()
@click.argument("project", type=click.Path(exists=True, dir_okay=False, path_type=str))
@click.option("--json", "json_output", is_flag=True, help="Emit the analysis as JSON.")
@click.option(
    "--no-personalized",
    is_flag=True,
    help="Skip suggestions learned from previous sessions.",
)
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def analyze(
    ctx: click.Context,
    project: str,
    json_output: bool,
    no_personalized: bool,
    quiet: bool,
) -> None:
    """Classify PROJECT and suggest how to organize its assets.

    Args:
        ctx: Click context for parameter source inspection.
        project: Path to a JSON project snapshot.
        json_output: When True, emit JSON instead of tables.
        no_personalized: When True, omit learned suggestions.
        quiet: When True, suppress non-error output entirely.
    """
    try:
        overrides = {"analysis": {"include_personalized": False}} if no_personalized else None
        runtime = _load_runtime(overrides)
        catalog = _load_catalog(project, json_output=json_output)
        organizer = Organizer(
            catalog, learning=runtime.learning, settings=runtime.config.analysis
        )
        analysis = organizer.analyze_project()
        runtime.learning.flush()
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
        return

    if json_output:
        console.print_json(data=analysis.model_dump(mode="json", by_alias=True))
        return

    quiet_enabled = _resolve_quiet(ctx, quiet, runtime.config)
    classification = analysis.project_type
    _emit_message(
        f"[bold]Project type:[/bold] {classification.archetype} "
        f"(confidence {analysis.confidence:.0%})",
        quiet=quiet_enabled,
    )
    breakdown = ", ".join(
        f"{kind}={count}" for kind, count in analysis.asset_breakdown.counts.items()
    )
    _emit_message(f"[bold]Assets:[/bold] {breakdown or 'none'}", quiet=quiet_enabled)
    _emit_message(
        f"[bold]Naming consistency:[/bold] {analysis.naming_patterns.consistency_score}",
        quiet=quiet_enabled,
    )
    if analysis.suggestions:
        _emit_message(_suggestions_table(analysis), quiet=quiet_enabled)
    _emit_message(
        _format_summary_line(
            "Analyze",
            project,
            {
                "assets": analysis.asset_breakdown.total,
                "suggestions": len(analysis.suggestions),
            },
        ),
        quiet=quiet_enabled,
    )


@cli.command()
@click.argument("project", type=click.Path(exists=True, dir_okay=False, path_type=str))
@click.option("--json", "json_output", is_flag=True, help="Emit health metrics as JSON.")
def health(project: str, json_output: bool) -> None:
    """Report organization health metrics for PROJECT."""
    catalog = _load_catalog(project, json_output=json_output)
    metrics = Organizer(catalog).project_health()
    if json_output:
        console.print_json(data=metrics.model_dump(mode="json", by_alias=True))
        return
    console.print(_health_table(metrics))


@cli.command()
@click.argument("template_id")
@click.argument("project", type=click.Path(exists=True, dir_okay=False, path_type=str))
@click.option(
    "--asset",
    "asset_ids",
    multiple=True,
    help="Restrict the template to these asset ids (repeatable).",
)
@click.option(
    "--pool",
    type=click.Choice(["snapshot", "live"]),
    default=None,
    help="Asset pool mode (defaults to configuration).",
)
@click.option(
    "--write/--no-write",
    default=False,
    show_default=True,
    help="Save the reorganized project back to PROJECT.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the application result as JSON.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def apply(
    ctx: click.Context,
    template_id: str,
    project: str,
    asset_ids: tuple[str, ...],
    pool: str | None,
    write: bool,
    json_output: bool,
    quiet: bool,
) -> None:
    """Apply template TEMPLATE_ID to PROJECT.

    Without ``--asset`` the template organizes every asset at the project root.

    Args:
        ctx: Click context for parameter source inspection.
        template_id: Identifier of a built-in or user template.
        project: Path to a JSON project snapshot.
        asset_ids: Optional asset ids to organize.
        pool: Optional pool mode override.
        write: When True, persist the reorganized snapshot.
        json_output: When True, emit JSON instead of text.
        quiet: When True, suppress non-error output entirely.
    """
    try:
        overrides = {"templates": {"pool_mode": pool}} if pool else None
        runtime = _load_runtime(overrides)
        catalog = _load_catalog(project, json_output=json_output)
        service = TemplateService(
            runtime.templates,
            catalog,
            learning=runtime.learning,
            pool_mode=runtime.config.templates.pool_mode,
            default_color=runtime.config.templates.default_color,
        )
        result: ApplicationResult = service.apply_template(
            template_id, list(asset_ids) if asset_ids else None
        )
        runtime.learning.flush()
        if write:
            catalog.save(Path(project).expanduser())
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
        return
    except TemplateError as exc:
        _handle_cli_error(str(exc), code="template_error", json_output=json_output, original=exc)
        return
    except OSError as exc:
        _handle_cli_error(
            f"Unable to write project: {exc}",
            code="write_error",
            json_output=json_output,
            original=exc,
        )
        return

    if json_output:
        payload = result.model_dump(mode="json", by_alias=True)
        payload["written"] = write
        console.print_json(data=payload)
        return

    quiet_enabled = _resolve_quiet(ctx, quiet, runtime.config)
    for folder in result.created_folders:
        _emit_message(f"[cyan]Created folder[/cyan] {folder.name}", quiet=quiet_enabled)
    for error in result.errors:
        _emit_message(f"[red]{error}[/red]", quiet=quiet_enabled, mode="error")
    if not write:
        _emit_message(
            "[yellow]Dry run; pass --write to save the project.[/yellow]", quiet=quiet_enabled
        )
    _emit_message(
        _format_summary_line(
            "Apply",
            project,
            {
                "folders": result.folders_created,
                "moved": result.assets_moved,
                "errors": len(result.errors),
            },
        ),
        quiet=quiet_enabled,
    )


@cli.group()
def templates() -> None:
    """Manage built-in and user folder templates."""


@templates.command("list")
@click.option("--search", "query", default="", help="Filter by name, description or author.")
@click.option("--category", type=str, default=None, help="Only show this category.")
@click.option("--json", "json_output", is_flag=True, help="Emit templates as JSON.")
def templates_list(query: str, category: str | None, json_output: bool) -> None:
    """List templates, built-ins first."""
    runtime = _require_runtime(json_output=json_output)
    found = runtime.templates.search(query, category=category)
    if json_output:
        console.print_json(data=[template.to_payload() for template in found])
        return
    console.print(_templates_table(found))


@templates.command("show")
@click.argument("template_id")
def templates_show(template_id: str) -> None:
    """Display a template's folder definitions."""
    runtime = _require_runtime()
    template = runtime.templates.get(template_id)
    if template is None:
        raise click.ClickException(f"Template not found: {template_id}")
    console.print(f"[bold]{template.name}[/bold] ({template.category}, v{template.version})")
    if template.description:
        console.print(template.description)
    table = Table()
    table.add_column("Folder", style="bold")
    table.add_column("Parent")
    table.add_column("Color")
    table.add_column("Filters")
    for folder in template.folders:
        filters = " OR ".join(
            f"{item.type} {item.operator} {item.value}" for item in folder.filters
        )
        table.add_row(folder.name, folder.parent_name or "", folder.color, filters)
    console.print(table)


@templates.command("export")
@click.argument("template_id")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=str), default=None)
def templates_export(template_id: str, output: str | None) -> None:
    """Export a template as shareable JSON."""
    runtime = _require_runtime()
    exported = runtime.templates.export(template_id)
    if exported is None:
        raise click.ClickException(f"Template not found: {template_id}")
    _write_output(exported, output)


@templates.command("import")
@click.argument("source", type=click.Path(dir_okay=False, allow_dash=True, path_type=str))
def templates_import(source: str) -> None:
    """Import a template from exported JSON (use - for stdin)."""
    runtime = _require_runtime()
    try:
        text = _read_input(source)
    except OSError as exc:
        raise click.ClickException(f"Unable to read {source}: {exc}") from exc
    template = runtime.templates.import_template(text)
    if template is None:
        raise click.ClickException("Invalid template JSON.")
    console.print(f"[green]Imported {template.name} as {template.id}.[/green]")


@templates.command("duplicate")
@click.argument("template_id")
@click.option("--name", "new_name", type=str, default=None, help="Name for the copy.")
def templates_duplicate(template_id: str, new_name: str | None) -> None:
    """Copy a template into a new user template."""
    runtime = _require_runtime()
    duplicate = runtime.templates.duplicate(template_id, new_name)
    if duplicate is None:
        raise click.ClickException(f"Template not found: {template_id}")
    console.print(f"[green]Created {duplicate.name} as {duplicate.id}.[/green]")


@templates.command("delete")
@click.argument("template_id")
def templates_delete(template_id: str) -> None:
    """Delete a user template; built-in templates are protected."""
    runtime = _require_runtime()
    if not runtime.templates.delete(template_id):
        raise click.ClickException(
            f"Cannot delete {template_id}: not found or built-in."
        )
    console.print(f"[green]Deleted {template_id}.[/green]")


@templates.command("stats")
@click.option("--json", "json_output", is_flag=True, help="Emit usage statistics as JSON.")
def templates_stats(json_output: bool) -> None:
    """Show how often each template has been applied."""
    runtime = _require_runtime(json_output=json_output)
    stats = runtime.templates.usage_statistics()
    if json_output:
        console.print_json(
            data=[entry.model_dump(mode="json", by_alias=True) for entry in stats]
        )
        return
    table = Table(title="Template Usage")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Uses", justify="right")
    table.add_column("Last used")
    for entry in stats:
        last_used = entry.last_used.isoformat() if entry.last_used else "never"
        table.add_row(entry.id, entry.name, str(entry.usage_count), last_used)
    console.print(table)


@cli.group()
def learning() -> None:
    """Back up, restore or clear learned organization patterns."""


@learning.command("export")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=str), default=None)
def learning_export(output: str | None) -> None:
    """Export learning data as JSON."""
    runtime = _require_runtime()
    _write_output(runtime.learning.export_json(), output)


@learning.command("import")
@click.argument("source", type=click.Path(dir_okay=False, allow_dash=True, path_type=str))
def learning_import(source: str) -> None:
    """Merge a learning backup into the stored data (use - for stdin)."""
    runtime = _require_runtime()
    try:
        text = _read_input(source)
    except OSError as exc:
        raise click.ClickException(f"Unable to read {source}: {exc}") from exc
    if not runtime.learning.import_json(text):
        raise click.ClickException("Invalid learning data.")
    if not runtime.learning.flush():
        raise click.ClickException("Unable to save learning data.")
    console.print("[green]Learning data imported.[/green]")


@learning.command("reset")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
def learning_reset(yes: bool) -> None:
    """Discard all learned patterns and history."""
    if not yes:
        click.confirm("Discard all learning data?", abort=True)
    runtime = _require_runtime()
    runtime.learning.reset()
    if not runtime.learning.flush():
        raise click.ClickException("Unable to save learning data.")
    console.print("[green]Learning data reset.[/green]")


@cli.group()
def config() -> None:
    """Manage Declutter configuration files and overrides.

    Returns:
        None: This function is invoked for its side effects.
    """


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Args:
        no_env: If True, ignore environment-derived overrides.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Args:
        key: Dotted path describing the configuration field to update.
        value: YAML-literal value to write into the configuration file.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException(
            "KEY must specify a dotted path such as 'templates.pool_mode'."
        )

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        file_data = manager.load_file_overrides()
        assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=DeclutterConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = [
        line
        for line in difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
        if not line[1:].startswith("# Last updated")
    ]

    if any(line.startswith(("+", "-")) and not line.startswith(("+++", "---")) for line in diff):
        console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    else:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point.

    Returns:
        None: This function is invoked for its side effects.
    """
    try:
        cli()
    except StateError as exc:
        LOGGER.debug("Unhandled state error", exc_info=exc)
        raise SystemExit(f"State error: {exc}") from exc


if __name__ == "__main__":
    main()
