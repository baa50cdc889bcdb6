"""
na_generator.cli - Command Line Interface
=========================================

This module provides the command-line interface for na-generator using Typer.

Architecture
------------
    app (main entry point)
    └── setup  - Set up a new dataviz project from the boilerplate

``~/.na-generator`` is loaded into the environment before any command runs.
When no access token is stored, the user is prompted for GitHub credentials
with questionary.

Usage Examples
--------------
    $ na-generator setup my-chart
    $ na-generator setup my-chart --directory ~/projects
    $ na-generator --version
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import questionary
import typer
from pydantic import SecretStr
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from na_generator import __version__
from na_generator.credentials import CONFIG_FILE, CredentialStore, load_user_config
from na_generator.errors import SetupError
from na_generator.models import LoginCredentials, SetupSettings
from na_generator.workflow import run_setup


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="na-generator",
    help="Generate New America data visualization projects.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

console = Console()


def configure_logging(verbose: bool) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


# =============================================================================
# Version Callback
# =============================================================================

def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(Panel(
            f"[bold green]na-generator[/] version [cyan]{__version__}[/]\n\n"
            f"[dim]New America dataviz project generator[/]",
            border_style="green",
        ))
        raise typer.Exit()


# =============================================================================
# Interactive Prompts
# =============================================================================

class InteractivePrompter:
    """Asks for GitHub login credentials on the terminal."""

    def get_login(self) -> LoginCredentials:
        """
        Prompt for username, password and 2FA code.

        Returns
        -------
        LoginCredentials
            What the user typed.
        """
        console.print("[dim]No Github access token found, log in to create one.[/]")

        username = questionary.text("Github username:").ask()
        if username is None:
            raise typer.Abort()

        password = questionary.password("Github password:").ask()
        if password is None:
            raise typer.Abort()

        otp = questionary.text("2-factor authentication code:").ask()
        if otp is None:
            raise typer.Abort()

        return LoginCredentials(
            username=username.strip(),
            password=SecretStr(password),
            otp=otp.strip(),
        )


# =============================================================================
# Main Application Callback
# =============================================================================

@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    [bold]na-generator[/] - New America dataviz project generator.

    [bold]Quick Start:[/]

        na-generator setup my-chart
    """
    load_user_config(CONFIG_FILE)


# =============================================================================
# Setup Command
# =============================================================================

@app.command()
def setup(
    slug: Annotated[
        str,
        typer.Argument(
            help="Project slug, used as directory and repository name",
        ),
    ],
    directory: Annotated[
        Path | None,
        typer.Option(
            "--directory",
            "-d",
            help="The install path for your new app",
        ),
    ] = None,
    insecure: Annotated[
        bool,
        typer.Option(
            "--insecure",
            help="Accept any remote certificate during clone and push",
        ),
    ] = False,
    ssh: Annotated[
        bool,
        typer.Option(
            "--ssh",
            help="Point origin at the repository's SSH URL",
        ),
    ] = False,
    install_command: Annotated[
        str | None,
        typer.Option(
            "--install-command",
            help="Command to install the new project's dependencies, e.g. 'npm install'",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Show debug logging",
        ),
    ] = False,
) -> None:
    """
    Setup a new dataviz project with specified slug.

    [bold]Examples:[/]

        na-generator setup my-chart

        na-generator setup my-chart -d ~/projects --install-command "npm install"
    """
    configure_logging(verbose)

    if not slug.strip():
        rprint("[red]Error:[/] You need to specify a project name")
        raise typer.Exit(1)

    settings = SetupSettings.from_env(
        verify_certificates=False if insecure else None,
        use_ssh_url=True if ssh else None,
        install_command=install_command,
    )

    try:
        result = run_setup(
            slug,
            directory=directory.expanduser() if directory else None,
            settings=settings,
            store=CredentialStore(CONFIG_FILE),
            provider=InteractivePrompter(),
        )
    except SetupError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    if result.push_error is not None:
        rprint(
            f"[yellow]Warning:[/] the init commit was not pushed: {result.push_error}\n"
            f"[dim]Push manually with: git -C {result.project_dir} push "
            f"{settings.remote_name} {settings.branch}[/]"
        )
