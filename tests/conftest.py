"""
pytest configuration and shared fixtures for na-generator tests.

Fixtures
--------
git_home : Path
    A temporary HOME with a ``.gitconfig`` holding a test identity.

boilerplate : Path
    A local git repository standing in for the data-viz boilerplate.

hosted_repo : Path
    A bare repository standing in for the GitHub project repository.

settings : SetupSettings
    Settings pointing the workflow at the local repositories.
"""

from pathlib import Path

import pytest
from git import Actor, Repo

from na_generator.models import TOKEN_ENV_VAR, SetupSettings


PACKAGE_JSON = """{
  "name": "data_viz_project_template",
  "version": "1.0.0",
  "scripts": {
    "start": "webpack-dev-server"
  }
}
"""


@pytest.fixture
def git_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Isolate git from the developer's own configuration.

    Yields
    ------
    Path
        The temporary home directory.
    """
    home = tmp_path / "home"
    home.mkdir()
    (home / ".gitconfig").write_text(
        "[user]\n\tname = Test Author\n\temail = test@example.com\n"
    )
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv(TOKEN_ENV_VAR, raising=False)
    return home


@pytest.fixture
def boilerplate(tmp_path: Path, git_home: Path) -> Path:
    """Create a boilerplate repository with one commit on master."""
    path = tmp_path / "boilerplate"
    repo = Repo.init(path, mkdir=True, initial_branch="master")
    (path / "package.json").write_text(PACKAGE_JSON)
    (path / "README.md").write_text("# data viz boilerplate\n")
    repo.index.add(["package.json", "README.md"])
    author = Actor("Boilerplate", "boilerplate@example.com")
    repo.index.commit("initial", author=author, committer=author)
    repo.close()
    return path


@pytest.fixture
def hosted_repo(tmp_path: Path) -> Path:
    """Create an empty bare repository to push to."""
    path = tmp_path / "hosted" / "foo-bar.git"
    Repo.init(path, mkdir=True, bare=True).close()
    return path


@pytest.fixture
def settings(boilerplate: Path) -> SetupSettings:
    """Settings cloning the local boilerplate."""
    return SetupSettings(boilerplate_url=str(boilerplate))


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests requiring external resources"
    )
