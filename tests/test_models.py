"""
Tests for na_generator.models
=============================

Test Organization
-----------------
- TestSetupStep: Tests for the SetupStep enum
- TestSetupSettings: Tests for defaults and environment parsing
- TestProjectDescriptor: Tests for slug validation and paths
- TestCredentials: Tests for token and login models
- TestRemoteRepository: Tests for the GitHub-side record
"""

from pathlib import Path

import pytest
from pydantic import SecretStr, ValidationError

from na_generator.models import (
    DEFAULT_INSTALL_ROOT,
    INSTALL_ENV_VAR,
    VERIFY_ENV_VAR,
    Credentials,
    GitIdentity,
    LoginCredentials,
    ProjectDescriptor,
    RemoteRepository,
    SetupSettings,
    SetupStep,
)


# =============================================================================
# SetupStep Tests
# =============================================================================

class TestSetupStep:
    """Tests for the SetupStep enumeration."""

    def test_step_order(self) -> None:
        """Steps are declared in execution order."""
        assert list(SetupStep) == [
            SetupStep.AUTHENTICATE,
            SetupStep.CLONE,
            SetupStep.RENAME,
            SetupStep.CREATE_REMOTE,
            SetupStep.REPOINT,
            SetupStep.COMMIT_PUSH,
            SetupStep.INSTALL,
        ]

    def test_descriptions_exist(self) -> None:
        for step in SetupStep:
            assert isinstance(step.description, str)
            assert len(step.description) > 0


# =============================================================================
# SetupSettings Tests
# =============================================================================

class TestSetupSettings:
    """Tests for SetupSettings."""

    def test_defaults(self) -> None:
        settings = SetupSettings()

        assert settings.boilerplate_url == (
            "https://github.com/newamerica-graphics/data-viz-boilerplate.git"
        )
        assert settings.organization == "newamerica-graphics"
        assert settings.manifest_name == "package.json"
        assert settings.placeholder == "data_viz_project_template"
        assert settings.remote_name == "origin"
        assert settings.branch == "master"
        assert settings.commit_message == "project init"
        assert settings.token_scopes == ["repo"]
        assert settings.verify_certificates is True
        assert settings.install_command is None

    def test_from_empty_env(self) -> None:
        assert SetupSettings.from_env({}) == SetupSettings()

    @pytest.mark.parametrize("value", ["false", "0", "no", "OFF", " False "])
    def test_verify_disabled_from_env(self, value: str) -> None:
        settings = SetupSettings.from_env({VERIFY_ENV_VAR: value})
        assert settings.verify_certificates is False

    def test_verify_enabled_from_env(self) -> None:
        settings = SetupSettings.from_env({VERIFY_ENV_VAR: "true"})
        assert settings.verify_certificates is True

    def test_install_command_from_env(self) -> None:
        settings = SetupSettings.from_env({INSTALL_ENV_VAR: " npm install "})
        assert settings.install_command == "npm install"

    def test_blank_install_command_ignored(self) -> None:
        settings = SetupSettings.from_env({INSTALL_ENV_VAR: "   "})
        assert settings.install_command is None

    def test_overrides_win(self) -> None:
        settings = SetupSettings.from_env(
            {VERIFY_ENV_VAR: "true", INSTALL_ENV_VAR: "npm install"},
            verify_certificates=False,
            install_command="yarn",
        )
        assert settings.verify_certificates is False
        assert settings.install_command == "yarn"

    def test_none_overrides_ignored(self) -> None:
        settings = SetupSettings.from_env(
            {INSTALL_ENV_VAR: "npm install"},
            install_command=None,
        )
        assert settings.install_command == "npm install"


# =============================================================================
# ProjectDescriptor Tests
# =============================================================================

class TestProjectDescriptor:
    """Tests for ProjectDescriptor."""

    def test_project_dir(self, tmp_path: Path) -> None:
        project = ProjectDescriptor(slug="foo-bar", parent_dir=tmp_path)
        assert project.project_dir == tmp_path / "foo-bar"

    def test_default_parent_dir(self) -> None:
        project = ProjectDescriptor(slug="foo-bar")
        assert project.project_dir == DEFAULT_INSTALL_ROOT / "foo-bar"

    def test_slug_is_stripped(self) -> None:
        assert ProjectDescriptor(slug="  foo-bar ").slug == "foo-bar"

    @pytest.mark.parametrize("slug", ["", "   ", "a/b", "..", "a\\b"])
    def test_invalid_slugs(self, slug: str) -> None:
        with pytest.raises(ValidationError):
            ProjectDescriptor(slug=slug)


# =============================================================================
# Credential Model Tests
# =============================================================================

class TestCredentials:
    """Tests for Credentials and LoginCredentials."""

    def test_token_is_secret(self) -> None:
        creds = Credentials(token=SecretStr("abc123"))
        assert "abc123" not in repr(creds)
        assert creds.token.get_secret_value() == "abc123"

    def test_empty_token_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Credentials(token=SecretStr("  "))

    def test_login_requires_username(self) -> None:
        with pytest.raises(ValidationError):
            LoginCredentials(username="", password=SecretStr("pw"))

    def test_login_otp_optional(self) -> None:
        login = LoginCredentials(username="octocat", password=SecretStr("pw"))
        assert login.otp == ""

    def test_identity_requires_values(self) -> None:
        with pytest.raises(ValidationError):
            GitIdentity(name="", email="a@b.c")


# =============================================================================
# RemoteRepository Tests
# =============================================================================

class TestRemoteRepository:
    """Tests for RemoteRepository."""

    @pytest.fixture
    def repo(self) -> RemoteRepository:
        return RemoteRepository(
            owner="newamerica-graphics",
            name="foo-bar",
            clone_url="https://github.com/newamerica-graphics/foo-bar.git",
            ssh_url="git@github.com:newamerica-graphics/foo-bar.git",
        )

    def test_full_name(self, repo: RemoteRepository) -> None:
        assert repo.full_name == "newamerica-graphics/foo-bar"

    def test_remote_url_defaults_to_clone_url(self, repo: RemoteRepository) -> None:
        assert repo.remote_url() == repo.clone_url

    def test_remote_url_ssh(self, repo: RemoteRepository) -> None:
        assert repo.remote_url(use_ssh=True) == repo.ssh_url

    def test_remote_url_ssh_missing(self, repo: RemoteRepository) -> None:
        repo.ssh_url = None
        assert repo.remote_url(use_ssh=True) == repo.clone_url
