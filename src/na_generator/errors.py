"""
na_generator.errors - Failure Kinds
===================================

Every failure the setup workflow can report has its own exception type so
programmatic callers can tell them apart. The CLI only prints the message.

    SetupError
    ├── InvalidSlugError       - empty or blank slug, nothing was touched
    ├── AuthenticationError    - token exchange failed
    │   └── CredentialStoreError - minted token could not be saved
    ├── ManifestError          - package manifest could not be read/written
    ├── RepositoryLookupError  - GitHub lookup/create failed (not a 404)
    ├── LocalRepositoryError   - clone, open, remote or commit failed
    ├── PushError              - push failed (reported, never raised by run_setup)
    └── InstallError           - dependency install command failed
"""

from __future__ import annotations


class SetupError(Exception):
    """Base class for all setup failures."""


class InvalidSlugError(SetupError, ValueError):
    """The project slug is empty or whitespace-only."""


class AuthenticationError(SetupError):
    """Exchanging login credentials for an access token failed."""


class CredentialStoreError(AuthenticationError):
    """The minted access token could not be written to the config file."""


class ManifestError(SetupError):
    """The project manifest could not be read or rewritten."""


class RepositoryLookupError(SetupError):
    """
    The hosted repository could not be looked up or created.

    A plain "not found" is not an error: it is what triggers creation.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class LocalRepositoryError(SetupError):
    """A local git operation (clone, open, remote, commit) failed."""


class PushError(SetupError):
    """Pushing the init commit to the remote failed."""


class InstallError(SetupError):
    """The configured dependency install command failed."""
