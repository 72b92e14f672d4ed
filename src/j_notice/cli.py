"""Typer CLI entry point for j-notice."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from j_notice.config import NoticeConfig
from j_notice.exceptions import NoticeError, UnresolvedLicenseError
from j_notice.graph import RepositoryGraphProvider
from j_notice.log import configure_logging
from j_notice.models import Project
from j_notice.notice import NoticeGenerator
from j_notice.repository import LocalRepository
from j_notice.resources import ResourceFinder
from j_notice.scanner import load_project
from j_notice.sinks import CheckNoticeSink, FileNoticeSink, NoticeSink
from j_notice.visualize import build_license_table, build_module_tree, build_unresolved_table

app = typer.Typer(add_completion=False, help="Generate NOTICE files for Maven projects.")
console = Console()

ProjectArg = Annotated[
    Path,
    typer.Argument(help="Project directory or pom.xml (the execution root of the build)."),
]


@app.callback()
def configure(
    ctx: typer.Context,
    lookup: Annotated[
        Optional[list[str]],
        typer.Option("--lookup", "-l", help="License lookup file, URL or bundled resource. Later ones win."),
    ] = None,
    template: Annotated[Optional[str], typer.Option("--template", help="NOTICE template.")] = None,
    placeholder: Annotated[Optional[str], typer.Option("--placeholder", help="Template placeholder.")] = None,
    output_dir: Annotated[Optional[str], typer.Option("--output-dir", help="Output directory.")] = None,
    file_name: Annotated[Optional[str], typer.Option("--file-name", help="Output file name.")] = None,
    indent: Annotated[Optional[int], typer.Option("--indent", help="Indentation of notice lines.")] = None,
    encoding: Annotated[Optional[str], typer.Option("--encoding", help="Template and NOTICE encoding.")] = None,
    aggregate: Annotated[
        Optional[bool],
        typer.Option("--aggregate/--no-aggregate", help="Include the dependencies of all modules."),
    ] = None,
    message: Annotated[
        Optional[str],
        typer.Option("--message", help="Line format: {0} indent, {1} artifact, {2} license."),
    ] = None,
    exclude_module: Annotated[
        Optional[list[str]],
        typer.Option("--exclude-module", help="Module path to skip when aggregating."),
    ] = None,
    scope: Annotated[
        Optional[list[str]],
        typer.Option("--scope", help="Dependency scope to include (default: compile, runtime)."),
    ] = None,
    pom_licenses: Annotated[
        Optional[bool],
        typer.Option("--pom-licenses/--no-pom-licenses", help="Use licenses declared in dependency POMs."),
    ] = None,
    repository: Annotated[
        Optional[Path],
        typer.Option("--repository", help="Maven local repository (default: ~/.m2/repository)."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug output.")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only show warnings and errors.")] = False,
) -> None:
    """Options shared by every command; environment variables (JNOTICE_*) supply defaults."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO, console)
    try:
        ctx.obj = NoticeConfig.from_env().with_overrides(
            license_lookup=lookup or None,
            notice_template=template,
            placeholder=placeholder,
            output_dir=output_dir,
            file_name=file_name,
            indent=indent,
            encoding=encoding,
            aggregating=aggregate,
            notice_message=message,
            excluded_module_paths=exclude_module or None,
            include_scopes=scope or None,
            use_pom_licenses=pom_licenses,
            local_repository=repository,
        )
    except NoticeError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1) from None


def _generator(config: NoticeConfig, project: Project, sink: NoticeSink) -> NoticeGenerator:
    local_repository = LocalRepository(config.local_repository)
    return NoticeGenerator(
        config,
        provider=RepositoryGraphProvider(local_repository, config.include_scopes),
        finder=ResourceFinder(project.basedir, timeout=config.http_timeout),
        sink=sink,
        metadata=local_repository if config.use_pom_licenses else None,
    )


def _run(ctx: typer.Context, project_path: Path, sink: NoticeSink) -> str | None:
    config: NoticeConfig = ctx.obj
    try:
        project = load_project(project_path)
        return _generator(config, project, sink).run(project)
    except UnresolvedLicenseError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.stub_path is not None:
            console.print(f"Fill in the licenses in [bold]{exc.stub_path}[/bold] and add it with --lookup.")
        raise typer.Exit(code=1) from None
    except NoticeError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1) from None


@app.command()
def generate(ctx: typer.Context, project: ProjectArg = Path(".")) -> None:
    """Resolve dependency licenses and write the NOTICE file."""
    config: NoticeConfig = ctx.obj
    if _run(ctx, project, FileNoticeSink(config.encoding)) is not None:
        console.print("[green]NOTICE generated[/green]")


@app.command()
def check(ctx: typer.Context, project: ProjectArg = Path(".")) -> None:
    """Fail if the existing NOTICE file does not match the generated one."""
    config: NoticeConfig = ctx.obj
    if _run(ctx, project, CheckNoticeSink(config.encoding)) is not None:
        console.print("[green]NOTICE is up to date[/green]")


@app.command("list")
def list_licenses(ctx: typer.Context, project: ProjectArg = Path(".")) -> None:
    """Print the resolved licenses and unresolved artifacts without writing anything."""
    config: NoticeConfig = ctx.obj
    try:
        config.validate()
        loaded = load_project(project)
        visitor = _generator(config, loaded, FileNoticeSink(config.encoding)).resolve(loaded)
    except NoticeError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1) from None

    if config.aggregating and loaded.modules:
        console.print(build_module_tree(loaded))
    console.print(build_license_table(visitor.resolved_licenses))

    unresolved = visitor.unresolved_artifacts
    if unresolved:
        console.print(build_unresolved_table(unresolved))
    else:
        console.print("[dim]All dependencies have a license.[/dim]")


def main() -> None:
    """Console-script entry point."""
    app()
