"""
na_generator.repository - Local Git Operations
==============================================

GitPython-based helpers for the local working copy: clone or reopen the
boilerplate, point ``origin`` at the project repository, commit the renamed
manifest and push it.

Certificate verification
------------------------
Network operations verify TLS certificates and SSH host keys unless
``verify_certificates=False`` is passed. The insecure mode sets
``GIT_SSL_NO_VERIFY`` and disables ``StrictHostKeyChecking`` for the single
git invocation only. Push credentials always come from the user's SSH agent
(git's default), never from a password prompt.
"""

from __future__ import annotations

from pathlib import Path

from git import Actor, Remote, Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from na_generator.errors import LocalRepositoryError, PushError
from na_generator.models import GitIdentity


def git_environment(*, verify_certificates: bool = True) -> dict[str, str]:
    """
    Extra environment for git network commands.

    Git never prompts for a username or password; missing credentials fail
    the command instead.

    Returns
    -------
    dict[str, str]
        Variables to set for the command.
    """
    env = {"GIT_TERMINAL_PROMPT": "0", "GIT_ASKPASS": "true"}
    if not verify_certificates:
        env["GIT_SSL_NO_VERIFY"] = "true"
        env["GIT_SSH_COMMAND"] = "ssh -o StrictHostKeyChecking=no"
    return env


def has_repository(directory: Path) -> bool:
    """Whether ``directory`` already holds a git working copy."""
    return (directory / ".git").exists()


def clone_or_open(
    url: str,
    directory: Path,
    *,
    verify_certificates: bool = True,
) -> tuple[Repo, bool]:
    """
    Clone ``url`` into ``directory`` unless a repository is already there.

    Parameters
    ----------
    url : str
        Repository to clone.

    directory : Path
        Target working copy.

    verify_certificates : bool
        Verify the remote's certificate while cloning.

    Returns
    -------
    tuple[Repo, bool]
        The repository and whether it was cloned by this call.

    Raises
    ------
    LocalRepositoryError
        If cloning fails or the existing repository cannot be opened.
    """
    if has_repository(directory):
        try:
            return Repo(directory), False
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise LocalRepositoryError(f"Could not open repository at {directory}: {e}") from e

    try:
        repo = Repo.clone_from(
            url,
            directory,
            env=git_environment(verify_certificates=verify_certificates),
        )
    except GitCommandError as e:
        raise LocalRepositoryError(f"Could not clone {url}: {e.stderr.strip() or e}") from e
    return repo, True


def repoint_remote(repo: Repo, url: str, name: str = "origin") -> tuple[Remote, bool]:
    """
    Make remote ``name`` point at ``url``.

    The remote configuration is only written when the URL differs.

    Returns
    -------
    tuple[Remote, bool]
        The remote and whether its URL was changed.
    """
    try:
        remote = repo.remote(name)
    except ValueError as e:
        raise LocalRepositoryError(f"Repository has no remote named '{name}'") from e

    if remote.url == url:
        return remote, False

    try:
        remote.set_url(url)
    except GitCommandError as e:
        raise LocalRepositoryError(f"Could not update remote '{name}': {e}") from e
    # the old handle caches the previous url
    return repo.remote(name), True


def read_identity(repo: Repo) -> GitIdentity:
    """
    Read ``user.name`` and ``user.email`` from the git configuration.

    Raises
    ------
    LocalRepositoryError
        If either value is not configured.
    """
    with repo.config_reader() as reader:
        name = str(reader.get_value("user", "name", "")).strip()
        email = str(reader.get_value("user", "email", "")).strip()

    if not name or not email:
        raise LocalRepositoryError(
            "git user.name and user.email must be configured "
            "(git config --global user.name ...)"
        )
    return GitIdentity(name=name, email=email)


def commit_manifest(
    repo: Repo,
    manifest_name: str,
    message: str,
    identity: GitIdentity,
) -> str:
    """
    Stage the manifest and commit it on the current head.

    Returns
    -------
    str
        The new commit's hexsha.
    """
    actor = Actor(identity.name, identity.email)
    try:
        repo.index.add([manifest_name])
        commit = repo.index.commit(message, author=actor, committer=actor)
    except (GitCommandError, OSError) as e:
        raise LocalRepositoryError(f"Could not commit {manifest_name}: {e}") from e
    return commit.hexsha


def push(
    remote: Remote,
    branch: str = "master",
    *,
    verify_certificates: bool = True,
) -> None:
    """
    Push ``branch`` to the same branch on ``remote``.

    Raises
    ------
    PushError
        If git fails or the remote rejects the update.
    """
    refspec = f"refs/heads/{branch}:refs/heads/{branch}"
    env = git_environment(verify_certificates=verify_certificates)

    try:
        with remote.repo.git.custom_environment(**env):
            results = remote.push(refspec)
        results.raise_if_error()
    except GitCommandError as e:
        raise PushError(f"Could not push {branch} to {remote.name}: {e}") from e
