"""Admin commands for init, reset and app preferences."""

import asyncio
import sqlite3
import sys
from pathlib import Path

import typer

from budgetrule.budget_store import budget_store
from budgetrule.commands.session import console, fail, get_persistence
from budgetrule.config import DEFAULT_CONFIG, ConfigError, create_default_config, load_settings, resolve_db_path
from budgetrule.domain.models import SUPPORTED_LANGUAGES, THEME_MODES
from budgetrule.paths import get_config_path
from budgetrule.store import BudgetPersistence, init_database


def run_full_init(db_path: Path, config_path: Path) -> None:
    """Initialize new database and config."""
    console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Database initialized")

    console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
    create_default_config(config_path)
    console.print("[green]✓[/green] Config file created (permissions: 600)")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Database: {db_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")
    console.print("\n[dim]Next: run 'budgetrule onboard --income <amount>'[/dim]")


def init_command(force: bool = False) -> None:
    """Initialize budgetrule database and configuration."""
    config_path = get_config_path()
    try:
        settings = load_settings(config_path)
    except ConfigError:
        # Unreadable config is replaced by --force, or refused below
        settings = DEFAULT_CONFIG
    db_path = resolve_db_path(settings)

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        # Guard: refuse to overwrite without force flag
        if not force and (db_exists or config_exists):
            console.print("[red]Initialization failed:[/red]", style="bold")
            if db_exists:
                console.print(f"  Database already exists: {db_path}")
            if config_exists:
                console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'budgetrule init --force' to overwrite[/yellow]")
            sys.exit(1)

        run_full_init(db_path, config_path)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


async def _reset(persistence: BudgetPersistence) -> None:
    async with budget_store(persistence) as store:
        await store.reset_all()


def reset_command(yes: bool = False) -> None:
    """Erase income, expenses and preferences."""
    persistence = get_persistence()

    if not yes and not typer.confirm("This deletes all budget data. Continue?", default=False):
        console.print("[dim]Reset cancelled[/dim]")
        return

    asyncio.run(_reset(persistence))
    console.print("[green]✓ All budget data cleared[/green]")


async def _load_preferences(persistence: BudgetPersistence) -> tuple[str, str]:
    language, theme = await asyncio.gather(persistence.load_language(), persistence.load_theme())
    return language, theme


async def _save_preferences(persistence: BudgetPersistence, language: str | None, theme: str | None) -> None:
    saves = []
    if language is not None:
        saves.append(persistence.save_language(language))
    if theme is not None:
        saves.append(persistence.save_theme(theme))  # type: ignore[arg-type]
    await asyncio.gather(*saves)


def settings_command(language: str | None = None, theme: str | None = None) -> None:
    """Show or set language and theme preferences."""
    persistence = get_persistence()

    if language is not None and language not in SUPPORTED_LANGUAGES:
        fail(f"Unsupported language: {language} (choose from {', '.join(SUPPORTED_LANGUAGES)})")
    if theme is not None and theme not in THEME_MODES:
        fail(f"Unsupported theme: {theme} (choose from {', '.join(THEME_MODES)})")

    if language is not None or theme is not None:
        asyncio.run(_save_preferences(persistence, language, theme))
        console.print("[green]✓ Settings saved[/green]")

    current_language, current_theme = asyncio.run(_load_preferences(persistence))
    console.print(f"Language: [bold]{current_language}[/bold]")
    console.print(f"Theme:    [bold]{current_theme}[/bold]")
