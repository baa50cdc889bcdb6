"""
na_generator.models - Pydantic Models for Setup State
=====================================================

This module defines the data models used by the setup workflow. Nothing
here is persisted except the access token; every model lives for one
invocation only.

Architecture Notes
------------------
    SetupSettings (fixed constants, overridable)
    ProjectDescriptor (slug + target directory)
    ├── Credentials (access token)
    │   └── LoginCredentials (one-off username/password/otp)
    ├── RemoteRepository (GitHub-side record)
    └── GitIdentity (local user.name / user.email)

    SetupStep (enum of the ordered workflow steps)

Usage Example
-------------
>>> from na_generator.models import ProjectDescriptor
>>> project = ProjectDescriptor(slug="foo-bar", parent_dir=Path("/tmp"))
>>> project.project_dir
PosixPath('/tmp/foo-bar')
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, Field, SecretStr, field_validator


# =============================================================================
# Constants
# =============================================================================

TOKEN_ENV_VAR = "NA_GITHUB_ACCESS_TOKEN"
VERIFY_ENV_VAR = "NA_GENERATOR_VERIFY_CERTIFICATES"
INSTALL_ENV_VAR = "NA_GENERATOR_INSTALL_COMMAND"

# Projects land next to the tool itself unless --directory is given
DEFAULT_INSTALL_ROOT = Path(__file__).resolve().parent

_FALSY = {"0", "false", "no", "off"}


# =============================================================================
# Enumerations
# =============================================================================

class SetupStep(str, Enum):
    """
    The ordered steps of the setup workflow.

    Steps run strictly in declaration order. ``SetupResult.steps_completed``
    lists the ones that finished.
    """

    AUTHENTICATE = "authenticate"
    CLONE = "clone"
    RENAME = "rename"
    CREATE_REMOTE = "create-remote"
    REPOINT = "repoint"
    COMMIT_PUSH = "commit-push"
    INSTALL = "install"

    @property
    def description(self) -> str:
        """
        Human-readable label used in console progress output.

        Returns
        -------
        str
            A short description of what the step does.
        """
        descriptions = {
            SetupStep.AUTHENTICATE: "Authenticating to GitHub",
            SetupStep.CLONE: "Cloning boilerplate",
            SetupStep.RENAME: "Scaffolding your project",
            SetupStep.CREATE_REMOTE: "Creating GitHub repository",
            SetupStep.REPOINT: "Pointing origin at the new repository",
            SetupStep.COMMIT_PUSH: "Committing and pushing",
            SetupStep.INSTALL: "Installing dependencies",
        }
        return descriptions[self]


# =============================================================================
# Settings
# =============================================================================

class SetupSettings(BaseModel):
    """
    Fixed constants of the setup workflow.

    The defaults reproduce the hardcoded values of the tool. They are
    exposed as a model so the programmatic API and tests can point the
    workflow at other repositories.

    Attributes
    ----------
    boilerplate_url : str
        Repository cloned as the starting point of every project.

    organization : str
        GitHub organization that owns the new project repositories.

    manifest_name : str
        File in the boilerplate holding the project name placeholder.

    placeholder : str
        Literal token replaced with the slug in the manifest.

    verify_certificates : bool
        Verify TLS certificates and SSH host keys on git network operations.
        Turning this off accepts any remote certificate.

    install_command : str | None
        Command run inside the new project by the install step. ``None``
        leaves the step as a no-op.
    """

    boilerplate_url: str = "https://github.com/newamerica-graphics/data-viz-boilerplate.git"
    organization: str = "newamerica-graphics"
    manifest_name: str = "package.json"
    placeholder: str = "data_viz_project_template"
    remote_name: str = "origin"
    branch: str = "master"
    commit_message: str = "project init"
    api_url: str = "https://api.github.com"
    token_note: str = "CLI to generate New America dataviz projects"
    token_scopes: list[str] = Field(default_factory=lambda: ["repo"])
    use_ssh_url: bool = Field(
        default=False,
        description="Repoint origin at the SSH URL instead of the HTTPS clone URL",
    )
    verify_certificates: bool = True
    install_command: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: object) -> SetupSettings:
        """
        Build settings from environment variables.

        Parameters
        ----------
        environ : Mapping[str, str] | None
            Environment to read, defaults to ``os.environ``.

        **overrides
            Explicit values (usually CLI options) that win over the
            environment. ``None`` values are ignored.

        Returns
        -------
        SetupSettings
            The resolved settings.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        verify = env.get(VERIFY_ENV_VAR)
        if verify is not None:
            values["verify_certificates"] = verify.strip().lower() not in _FALSY

        install = env.get(INSTALL_ENV_VAR)
        if install and install.strip():
            values["install_command"] = install.strip()

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


# =============================================================================
# Transient State
# =============================================================================

class ProjectDescriptor(BaseModel):
    """
    The project being scaffolded.

    Attributes
    ----------
    slug : str
        Used as both the directory name and the GitHub repository name.

    parent_dir : Path
        Directory the project directory is created in.
    """

    slug: Annotated[str, Field(min_length=1, max_length=100)]
    parent_dir: Path = DEFAULT_INSTALL_ROOT

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        """Reject blank slugs and slugs that would escape the parent directory."""
        v = v.strip()
        if not v:
            msg = "You need to specify a project name"
            raise ValueError(msg)
        if "/" in v or "\\" in v or v in {".", ".."}:
            msg = f"Invalid project name '{v}': must not contain path separators"
            raise ValueError(msg)
        return v

    @property
    def project_dir(self) -> Path:
        """Target directory of the new project."""
        return self.parent_dir / self.slug


class LoginCredentials(BaseModel):
    """One-off login material used to mint an access token."""

    username: Annotated[str, Field(min_length=1)]
    password: SecretStr
    otp: str = ""


class Credentials(BaseModel):
    """Access token authenticating every GitHub API call."""

    token: SecretStr

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            msg = "Access token must not be empty"
            raise ValueError(msg)
        return v


class RemoteRepository(BaseModel):
    """
    GitHub-side repository record.

    Attributes
    ----------
    owner : str
        Organization or user login owning the repository.

    name : str
        Repository name (the slug).

    clone_url : str
        HTTPS clone URL.

    ssh_url : str | None
        SSH clone URL, when the API reported one.
    """

    owner: str
    name: str
    clone_url: str
    ssh_url: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def remote_url(self, *, use_ssh: bool = False) -> str:
        """URL origin should point at."""
        if use_ssh and self.ssh_url:
            return self.ssh_url
        return self.clone_url


class GitIdentity(BaseModel):
    """Local git identity used for the init commit signature."""

    name: Annotated[str, Field(min_length=1)]
    email: Annotated[str, Field(min_length=1)]
