"""Command-line tool for operating a design system CMS instance."""
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from sqlalchemy import text
from sqlmodel import Session, select

from design_cms import crud
from design_cms.core.config import settings
from design_cms.core.db import create_db_and_tables, engine, init_db
from design_cms.core.logging import setup_logging
from design_cms.core.policy import ROLES
from design_cms.exceptions import DuplicateRecordError
from design_cms.models import Component, UserCreate
from design_cms.seed import ImportReport, import_components, import_themes, seed_database
from design_cms.variants import is_normalized, normalize_variants

app = typer.Typer(
    name="design-cms",
    help="Manage a design system CMS database",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Override LOG_LEVEL"),
) -> None:
    setup_logging(log_level)


def _prepare_database() -> None:
    create_db_and_tables()
    with Session(engine) as session:
        init_db(session)


@app.command()
def seed() -> None:
    """Insert the starter themes and components."""
    _prepare_database()
    with Session(engine) as session:
        created = seed_database(session)
    console.print(
        f"[green]Seeded {created['themes']} theme(s) and {created['components']} component(s)[/green]"
    )


@app.command("import")
def import_data(
    themes: Path = typer.Option(None, "--themes", help="Directory of theme JSON files"),
    components: Path = typer.Option(None, "--components", help="Directory of component JSON files"),
) -> None:
    """Load themes and components from JSON files; existing entries are skipped."""
    if themes is None and components is None:
        console.print("[red]Pass --themes and/or --components[/red]")
        raise typer.Exit(1)
    _prepare_database()
    with Session(engine) as session:
        if themes is not None:
            _print_import("theme", themes, import_themes(session, themes))
        if components is not None:
            _print_import("component", components, import_components(session, components))


def _print_import(kind: str, directory: Path, report: ImportReport) -> None:
    if not directory.is_dir():
        console.print(f"[yellow]{escape(str(directory))} not found, skipping {kind}s[/yellow]")
        return
    for name in report.skipped:
        console.print(f"[yellow]Skipped {escape(name)}: already exists[/yellow]")
    for name, error in report.failed.items():
        console.print(f"[red]Failed {escape(name)}: {escape(error)}[/red]")
    console.print(
        f"[green]Imported {len(report.created)} {kind}(s)[/green], "
        f"{len(report.skipped)} skipped, {len(report.failed)} failed"
    )


@app.command("check-setup")
def check_setup() -> None:
    """Verify the database is reachable and report what is configured."""
    table = Table(title="Setup")
    table.add_column("Check", style="cyan")
    table.add_column("Status")

    healthy = True
    try:
        _prepare_database()
        with Session(engine) as session:
            session.exec(text("SELECT 1"))  # type: ignore[call-overload]
            stats = crud.get_dashboard_stats(session=session)
        table.add_row("Database", "[green]ok[/green]")
        table.add_row("Themes", str(stats.themes))
        table.add_row("Components", str(stats.components))
        table.add_row("Active theme", stats.active_theme or "[yellow]none[/yellow]")
    except Exception as e:
        healthy = False
        table.add_row("Database", f"[red]{e}[/red]")

    table.add_row(
        "LLM API key",
        "[green]configured[/green]" if settings.LLM_API_KEY else "[yellow]missing[/yellow]",
    )
    table.add_row("Default model", settings.MODEL_DEFAULT)
    table.add_row("Vision model", settings.vision_model)
    console.print(table)

    if not healthy:
        raise typer.Exit(1)


@app.command("set-password")
def set_password(
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, confirmation_prompt=True, help="New admin password"
    ),
) -> None:
    """Set the shared admin password."""
    if len(password) < 8:
        console.print("[red]Password must be at least 8 characters[/red]")
        raise typer.Exit(1)
    _prepare_database()
    with Session(engine) as session:
        crud.set_admin_password(session=session, password=password)
    console.print("[green]Admin password updated[/green]")


@app.command("create-user")
def create_user(
    email: str = typer.Argument(..., help="Login email"),
    role: str = typer.Option("editor", "--role", "-r", help=f"One of: {', '.join(ROLES)}"),
    full_name: str = typer.Option(None, "--name", help="Display name"),
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, confirmation_prompt=True, help="User password"
    ),
) -> None:
    """Create an admin or editor account."""
    if role not in ROLES:
        console.print(f"[red]Unknown role '{role}'. Use one of: {', '.join(ROLES)}[/red]")
        raise typer.Exit(1)
    _prepare_database()
    with Session(engine) as session:
        try:
            user = crud.create_user(
                session=session,
                user_create=UserCreate(
                    email=email, password=password, role=role, full_name=full_name
                ),
            )
        except DuplicateRecordError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
    console.print(f"[green]Created {user.role} {user.email}[/green]")


@app.command("normalize-variants")
def normalize_variants_command(
    apply: bool = typer.Option(False, "--apply", help="Write changes (default is a dry run)"),
) -> None:
    """Rewrite stored component variants to the lowercase schema."""
    _prepare_database()
    table = Table(title="Variant normalisation" + ("" if apply else " (dry run)"))
    table.add_column("Component", style="cyan")
    table.add_column("Before")
    table.add_column("After", style="green")

    changed = 0
    with Session(engine) as session:
        for component in session.exec(select(Component).order_by(Component.slug)).all():
            if is_normalized(component.variants):
                continue
            normalized = normalize_variants(component.variants)
            table.add_row(component.slug, str(component.variants), str(normalized))
            changed += 1
            if apply:
                component.variants = normalized
                session.add(component)
        if apply:
            session.commit()

    if not changed:
        console.print("[green]All component variants are already normalised[/green]")
        return
    console.print(table)
    verb = "Updated" if apply else "Would update"
    console.print(f"{verb} {changed} component(s)")


@app.command()
def mcp() -> None:
    """Serve read-only design system tools over stdio for AI assistants."""
    from design_cms.mcp_server import run

    create_db_and_tables()
    run()


if __name__ == "__main__":
    app()
