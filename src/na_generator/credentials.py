"""
na_generator.credentials - GitHub Access Token Handling
=======================================================

This module obtains the access token every GitHub API call uses.

Resolution order
----------------
1. ``NA_GITHUB_ACCESS_TOKEN`` in the process environment
2. ``NA_GITHUB_ACCESS_TOKEN`` in ``~/.na-generator``
3. Ask a ``CredentialProvider`` for username/password/one-time code, mint a
   token with them and write it to ``~/.na-generator`` for future runs

The workflow depends only on the ``CredentialProvider`` protocol, so it runs
headless with ``StaticLoginProvider`` and interactively with the
terminal prompter in ``cli``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

import requests
from dotenv import dotenv_values, load_dotenv
from pydantic import SecretStr, ValidationError

from na_generator.errors import AuthenticationError, CredentialStoreError
from na_generator.models import (
    TOKEN_ENV_VAR,
    Credentials,
    LoginCredentials,
    SetupSettings,
)


logger = logging.getLogger(__name__)

CONFIG_FILE = Path.home() / ".na-generator"


# =============================================================================
# Credential Store
# =============================================================================

def load_user_config(path: Path = CONFIG_FILE) -> bool:
    """
    Inject the user config file into ``os.environ``.

    Values already present in the environment are left alone.

    Returns
    -------
    bool
        True if the file existed and was loaded.
    """
    if not path.is_file():
        return False
    return load_dotenv(path, override=False)


class CredentialStore:
    """
    Reads and writes the access token.

    Parameters
    ----------
    path : Path
        ``KEY=value`` file holding the token.

    environ : Mapping[str, str] | None
        Environment checked before the file, defaults to ``os.environ``.
    """

    def __init__(self, path: Path = CONFIG_FILE, environ: Mapping[str, str] | None = None) -> None:
        self.path = path
        self.environ = os.environ if environ is None else environ

    def load_token(self) -> str | None:
        """Return the stored token, environment first, or None."""
        token = self.environ.get(TOKEN_ENV_VAR)
        if token and token.strip():
            return token.strip()

        if self.path.is_file():
            token = dotenv_values(self.path).get(TOKEN_ENV_VAR)
            if token and token.strip():
                return token.strip()

        return None

    def save_token(self, token: str) -> None:
        """
        Overwrite the config file with the token.

        The file is created readable by the owner only.

        Raises
        ------
        CredentialStoreError
            If the file cannot be written.
        """
        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(f"{TOKEN_ENV_VAR}={token}\n")
        except OSError as e:
            raise CredentialStoreError(f"Could not save access token to {self.path}: {e}") from e
        logger.debug("Saved access token to %s", self.path)


# =============================================================================
# Credential Providers
# =============================================================================

class CredentialProvider(Protocol):
    """Something that can supply login credentials for minting a token."""

    def get_login(self) -> LoginCredentials: ...


class StaticLoginProvider:
    """Returns credentials given up front. Used for headless runs."""

    def __init__(self, login: LoginCredentials) -> None:
        self.login = login

    def get_login(self) -> LoginCredentials:
        return self.login


# =============================================================================
# Token Minting
# =============================================================================

def mint_token(
    login: LoginCredentials,
    settings: SetupSettings,
    session: requests.Session | None = None,
) -> str:
    """
    Exchange login credentials for a personal access token.

    Parameters
    ----------
    login : LoginCredentials
        Username, password and one-time passcode.

    settings : SetupSettings
        Supplies the API URL, token note and scopes.

    session : requests.Session | None
        HTTP session to use, a fresh one by default.

    Returns
    -------
    str
        The new access token.

    Raises
    ------
    AuthenticationError
        On network errors, rejected credentials or a malformed response.
    """
    http = session or requests.Session()
    headers = {"Accept": "application/vnd.github+json"}
    if login.otp:
        headers["X-GitHub-OTP"] = login.otp

    try:
        response = http.post(
            f"{settings.api_url.rstrip('/')}/authorizations",
            auth=(login.username, login.password.get_secret_value()),
            headers=headers,
            json={"note": settings.token_note, "scopes": settings.token_scopes},
        )
    except requests.RequestException as e:
        raise AuthenticationError(f"Could not reach GitHub: {e}") from e

    if response.status_code != 201:
        try:
            detail = response.json().get("message", response.text)
        except ValueError:
            detail = response.text
        raise AuthenticationError(
            f"GitHub rejected the credentials ({response.status_code}): {detail}"
        )

    try:
        token = response.json().get("token")
    except ValueError as e:
        raise AuthenticationError("GitHub returned a malformed response") from e
    if not token:
        raise AuthenticationError("GitHub response did not contain a token")
    return token


# =============================================================================
# Authentication Step
# =============================================================================

def authenticate(
    store: CredentialStore,
    provider: CredentialProvider | None,
    settings: SetupSettings,
    session: requests.Session | None = None,
) -> tuple[Credentials, bool]:
    """
    Resolve the access token, minting and saving one if needed.

    Returns
    -------
    tuple[Credentials, bool]
        The credentials and whether a new token was minted.

    Raises
    ------
    AuthenticationError
        If no token is stored and there is no provider to ask, or minting
        fails.

    CredentialStoreError
        If the minted token cannot be saved.
    """
    token = store.load_token()
    if token:
        logger.debug("Using stored access token")
        return Credentials(token=SecretStr(token)), False

    if provider is None:
        raise AuthenticationError(
            f"No access token found. Set {TOKEN_ENV_VAR} or log in interactively."
        )

    try:
        login = provider.get_login()
    except ValidationError as e:
        raise AuthenticationError(f"Invalid login: {e}") from e

    token = mint_token(login, settings, session)
    store.save_token(token)
    return Credentials(token=SecretStr(token)), True
