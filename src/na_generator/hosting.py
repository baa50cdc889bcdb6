"""
na_generator.hosting - GitHub API Client
========================================

Thin wrapper around PyGithub that carries its own credentials. The client
is built once from the resolved access token and passed to the steps that
need it; nothing here is module-level state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import requests
from github import Auth, Github, GithubException, UnknownObjectException

from na_generator.errors import RepositoryLookupError
from na_generator.models import Credentials, RemoteRepository, SetupSettings


if TYPE_CHECKING:
    from github.Repository import Repository


logger = logging.getLogger(__name__)


def _to_remote_repository(repo: Repository) -> RemoteRepository:
    return RemoteRepository(
        owner=repo.owner.login,
        name=repo.name,
        clone_url=repo.clone_url,
        ssh_url=repo.ssh_url,
    )


class GitHubClient:
    """
    GitHub API client authenticated with an access token.

    Parameters
    ----------
    credentials : Credentials
        Token used for every call.

    settings : SetupSettings
        Supplies the API base URL.

    github : Github | None
        Preconfigured PyGithub instance, mainly for tests.
    """

    def __init__(
        self,
        credentials: Credentials,
        settings: SetupSettings | None = None,
        github: Github | None = None,
    ) -> None:
        settings = settings or SetupSettings()
        self.github = github or Github(
            auth=Auth.Token(credentials.token.get_secret_value()),
            base_url=settings.api_url,
        )

    def get_repository(self, owner: str, name: str) -> RemoteRepository | None:
        """
        Look up ``owner/name``.

        Returns
        -------
        RemoteRepository | None
            The repository, or None if GitHub reports it does not exist.

        Raises
        ------
        RepositoryLookupError
            On any failure other than "not found" (permissions, rate limit,
            network).
        """
        try:
            repo = self.github.get_repo(f"{owner}/{name}")
        except UnknownObjectException:
            return None
        except GithubException as e:
            raise RepositoryLookupError(
                f"Could not look up {owner}/{name}: {e.data or e}", status=e.status
            ) from e
        except requests.RequestException as e:
            raise RepositoryLookupError(f"Could not reach GitHub: {e}") from e
        return _to_remote_repository(repo)

    def create_repository(self, organization: str, name: str) -> RemoteRepository:
        """Create ``name`` inside ``organization``."""
        try:
            org = self.github.get_organization(organization)
            repo = org.create_repo(name)
        except GithubException as e:
            raise RepositoryLookupError(
                f"Could not create {organization}/{name}: {e.data or e}", status=e.status
            ) from e
        except requests.RequestException as e:
            raise RepositoryLookupError(f"Could not reach GitHub: {e}") from e
        logger.info("Created repository %s/%s", organization, name)
        return _to_remote_repository(repo)

    def find_or_create_repository(
        self, organization: str, name: str
    ) -> tuple[RemoteRepository, bool]:
        """
        Return the existing repository or create it.

        Returns
        -------
        tuple[RemoteRepository, bool]
            The repository and whether it was created by this call.
        """
        existing = self.get_repository(organization, name)
        if existing is not None:
            logger.debug("Repository %s already exists", existing.full_name)
            return existing, False
        return self.create_repository(organization, name), True
