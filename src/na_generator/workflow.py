"""
na_generator.workflow - The Setup Workflow
==========================================

This module runs the ordered steps that turn the boilerplate into a new
project repository.

Architecture
------------
The workflow is a strictly sequential pipeline. Each step's output is the
next step's input:

    1. Authenticate        -> Credentials -> GitHubClient
    2. Clone or open       -> Repo
    3. Replace project name in the manifest
    4. Find or create the GitHub repository -> clone URL
    5. Repoint origin      -> Remote
    6. Commit and push     -> commit sha (push failure is reported, not raised)
    7. Install dependencies

Steps 1-5, the commit and the install raise a ``SetupError`` subclass and
stop the run. A failed push is recorded on ``SetupResult.push_error`` and the
run continues. Nothing is rolled back.

Usage Example
-------------
>>> from na_generator.workflow import run_setup
>>> result = run_setup("foo-bar", directory=Path("/tmp"))
>>> result.pushed
True
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel

from na_generator.credentials import CredentialProvider, CredentialStore, authenticate
from na_generator.errors import (
    InstallError,
    InvalidSlugError,
    ManifestError,
    PushError,
)
from na_generator.hosting import GitHubClient
from na_generator.models import (
    DEFAULT_INSTALL_ROOT,
    Credentials,
    ProjectDescriptor,
    SetupSettings,
    SetupStep,
)
from na_generator.repository import (
    clone_or_open,
    commit_manifest,
    push,
    read_identity,
    repoint_remote,
)


logger = logging.getLogger(__name__)

console = Console()

ClientFactory = Callable[[Credentials, SetupSettings], GitHubClient]


# =============================================================================
# Result Data Classes
# =============================================================================


@dataclass
class SetupResult:
    """
    Outcome of one setup run.

    Attributes
    ----------
    project_dir : Path
        Working copy of the new project.

    steps_completed : list[SetupStep]
        Steps that finished, in order.

    token_minted : bool
        Whether a new access token was created and saved.

    cloned : bool
        False when an existing working copy was reopened.

    repository_created : bool
        False when the GitHub repository already existed.

    clone_url : str | None
        URL origin now points at.

    remote_changed : bool
        Whether origin's URL was rewritten.

    commit_sha : str | None
        The init commit.

    push_error : PushError | None
        Set when the push failed. The run still completes.

    installed : bool
        Whether an install command ran.
    """

    project_dir: Path
    steps_completed: list[SetupStep] = field(default_factory=list)
    token_minted: bool = False
    cloned: bool = False
    repository_created: bool = False
    clone_url: str | None = None
    remote_changed: bool = False
    commit_sha: str | None = None
    push_error: PushError | None = None
    installed: bool = False

    @property
    def success(self) -> bool:
        """Whether every step completed (a failed push still counts)."""
        return self.steps_completed == list(SetupStep)

    @property
    def pushed(self) -> bool:
        return self.commit_sha is not None and self.push_error is None


# =============================================================================
# Step Helpers
# =============================================================================


def validate_slug(slug: str | None, directory: Path | None = None) -> ProjectDescriptor:
    """
    Build the project descriptor, rejecting unusable slugs.

    Raises
    ------
    InvalidSlugError
        If the slug is missing, blank or contains path separators.
    """
    if slug is None or not slug.strip():
        raise InvalidSlugError("You need to specify a project name")
    try:
        return ProjectDescriptor(slug=slug, parent_dir=directory or DEFAULT_INSTALL_ROOT)
    except ValidationError as e:
        raise InvalidSlugError(e.errors()[0]["msg"]) from e


def replace_project_name(
    project_dir: Path,
    slug: str,
    manifest_name: str = "package.json",
    placeholder: str = "data_viz_project_template",
) -> int:
    """
    Replace every placeholder occurrence in the manifest with the slug.

    Line endings and all other bytes are preserved.

    Returns
    -------
    int
        Number of occurrences replaced.

    Raises
    ------
    ManifestError
        If the manifest cannot be read or written.
    """
    manifest = project_dir / manifest_name
    try:
        with manifest.open(encoding="utf-8", newline="") as f:
            content = f.read()

        count = content.count(placeholder)
        if count:
            with manifest.open("w", encoding="utf-8", newline="") as f:
                f.write(content.replace(placeholder, slug))
    except OSError as e:
        raise ManifestError(f"Could not update {manifest}: {e}") from e

    if not count:
        logger.warning("Placeholder '%s' not found in %s", placeholder, manifest)
    return count


def install_dependencies(project_dir: Path, command: str | None) -> bool:
    """
    Run the install command inside the project.

    Returns
    -------
    bool
        False if no command is configured.

    Raises
    ------
    InstallError
        If the command is missing or exits non-zero.
    """
    if not command:
        return False
    try:
        subprocess.run(shlex.split(command), cwd=project_dir, check=True)
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        raise InstallError(f"'{command}' failed: {e}") from e
    return True


def _step(step: SetupStep, verbose: bool) -> None:
    if verbose:
        console.print()
        console.print(f"[bold]{step.description}...[/]")


# =============================================================================
# Main Workflow
# =============================================================================


def run_setup(
    slug: str | None,
    *,
    directory: Path | None = None,
    settings: SetupSettings | None = None,
    store: CredentialStore | None = None,
    provider: CredentialProvider | None = None,
    client_factory: ClientFactory = GitHubClient,
    verbose: bool = True,
) -> SetupResult:
    """
    Set up a new project from the boilerplate.

    Parameters
    ----------
    slug : str | None
        Project and repository name.

    directory : Path | None
        Parent directory of the project; defaults to the tool's own
        install location.

    settings : SetupSettings | None
        Workflow constants, read from the environment by default.

    store : CredentialStore | None
        Where the access token is read from and saved to.

    provider : CredentialProvider | None
        Asked for login credentials when no token is stored. Without one, a
        missing token is an ``AuthenticationError``.

    client_factory : ClientFactory
        Builds the GitHub client from the resolved credentials.

    verbose : bool, default=True
        If True, display progress information to the console.

    Returns
    -------
    SetupResult
        What happened. ``push_error`` is set if the push failed.

    Raises
    ------
    InvalidSlugError
        Before any side effect, if the slug is unusable.

    SetupError
        The subclass matching the failed step.
    """
    project = validate_slug(slug, directory)
    settings = settings or SetupSettings.from_env()
    store = store or CredentialStore()
    result = SetupResult(project_dir=project.project_dir)

    if verbose:
        console.print()
        console.print(
            Panel(
                f"[bold blue]Setting up project:[/] [green]{project.slug}[/]\n"
                f"[dim]Location: {project.project_dir}[/]",
                title="[bold]na-generator[/]",
                border_style="blue",
            )
        )
        if not settings.verify_certificates:
            console.print(
                "[yellow]⚠[/] Certificate verification is disabled for git operations"
            )

    # Step 1: Authenticate
    _step(SetupStep.AUTHENTICATE, verbose)
    credentials, result.token_minted = authenticate(store, provider, settings)
    client = client_factory(credentials, settings)
    if verbose and result.token_minted:
        console.print(f"  [green]✓[/] Github access token saved to {store.path}")
    result.steps_completed.append(SetupStep.AUTHENTICATE)

    # Step 2: Clone or open
    _step(SetupStep.CLONE, verbose)
    repo, result.cloned = clone_or_open(
        settings.boilerplate_url,
        project.project_dir,
        verify_certificates=settings.verify_certificates,
    )
    if verbose:
        if result.cloned:
            console.print(f"  [green]✓[/] Cloned {settings.boilerplate_url}")
        else:
            console.print("  [yellow]⚠[/] Directory already exists, reusing the existing clone")
    result.steps_completed.append(SetupStep.CLONE)

    # Step 3: Replace project name
    _step(SetupStep.RENAME, verbose)
    replaced = replace_project_name(
        project.project_dir,
        project.slug,
        settings.manifest_name,
        settings.placeholder,
    )
    if verbose:
        console.print(
            f"  [green]✓[/] Renamed project in {settings.manifest_name} "
            f"({replaced} replacement{'s' if replaced != 1 else ''})"
        )
    result.steps_completed.append(SetupStep.RENAME)

    # Step 4: Find or create the GitHub repository
    _step(SetupStep.CREATE_REMOTE, verbose)
    remote_repo, result.repository_created = client.find_or_create_repository(
        settings.organization, project.slug
    )
    result.clone_url = remote_repo.remote_url(use_ssh=settings.use_ssh_url)
    if verbose:
        action = "Created" if result.repository_created else "Found existing"
        console.print(f"  [green]✓[/] {action} {remote_repo.full_name}")
    result.steps_completed.append(SetupStep.CREATE_REMOTE)

    # Step 5: Repoint origin
    _step(SetupStep.REPOINT, verbose)
    remote, result.remote_changed = repoint_remote(repo, result.clone_url, settings.remote_name)
    if verbose:
        console.print(f"  [green]✓[/] {settings.remote_name} -> {result.clone_url}")
    result.steps_completed.append(SetupStep.REPOINT)

    # Step 6: Commit and push
    _step(SetupStep.COMMIT_PUSH, verbose)
    identity = read_identity(repo)
    result.commit_sha = commit_manifest(
        repo, settings.manifest_name, settings.commit_message, identity
    )
    if verbose:
        console.print(f"  [green]✓[/] Committed {result.commit_sha[:7]} as {identity.name}")
    try:
        push(remote, settings.branch, verify_certificates=settings.verify_certificates)
    except PushError as e:
        logger.warning("Push failed: %s", e)
        result.push_error = e
        if verbose:
            console.print(f"  [yellow]⚠[/] Push failed: {e}")
    else:
        if verbose:
            console.print(f"  [green]✓[/] Pushed {settings.branch}")
    result.steps_completed.append(SetupStep.COMMIT_PUSH)

    # Step 7: Install dependencies
    _step(SetupStep.INSTALL, verbose)
    result.installed = install_dependencies(project.project_dir, settings.install_command)
    if verbose and not result.installed:
        console.print("  [dim]No install command configured, skipped[/]")
    result.steps_completed.append(SetupStep.INSTALL)

    if verbose:
        console.print()
        console.print(
            Panel(
                f"[bold green]✨ Project set up![/]\n\n"
                f"[dim]Location:[/] {project.project_dir}\n"
                f"[dim]Repository:[/] {result.clone_url}",
                title="[bold green]Success[/]",
                border_style="green",
            )
        )

    return result
