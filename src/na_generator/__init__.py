"""
na_generator - Data Visualization Project Scaffolder
====================================================

A CLI tool that sets up a new New America data visualization project from
the shared boilerplate, in one command.

Features
--------
- **One Command**: ``na-generator setup <slug>`` does the whole setup
- **GitHub Integration**: Creates ``newamerica-graphics/<slug>`` if missing
- **Idempotent**: Re-running against the same directory reopens the clone
- **Remembered Credentials**: The access token is stored in ``~/.na-generator``

Quick Start
-----------
```bash
# Install na-generator
pip install na-generator

# Scaffold a new project next to the tool
na-generator setup my-chart

# Or into a specific parent directory
na-generator setup my-chart --directory ~/projects
```

Example
-------
>>> from na_generator import run_setup
>>> result = run_setup("my-chart", directory=Path("~/projects").expanduser())
>>> result.clone_url
'https://github.com/newamerica-graphics/my-chart.git'

Architecture
------------
The package is organized into these main modules:

- ``cli``: Typer-based command line interface
- ``workflow``: The ordered setup steps and their result
- ``credentials``: Token storage, prompting and minting
- ``hosting``: GitHub API client
- ``repository``: Local git operations
- ``models``: Pydantic models for settings and transient state
- ``errors``: Distinguishable failure kinds
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.0.1"
__author__ = "New America Graphics"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from na_generator.errors import (
    AuthenticationError,
    CredentialStoreError,
    InstallError,
    InvalidSlugError,
    LocalRepositoryError,
    ManifestError,
    PushError,
    RepositoryLookupError,
    SetupError,
)
from na_generator.models import ProjectDescriptor, SetupSettings, SetupStep
from na_generator.workflow import SetupResult, run_setup


__all__ = [
    "AuthenticationError",
    "CredentialStoreError",
    "InstallError",
    "InvalidSlugError",
    "LocalRepositoryError",
    "ManifestError",
    "ProjectDescriptor",
    "PushError",
    "RepositoryLookupError",
    "SetupError",
    "SetupResult",
    "SetupSettings",
    "SetupStep",
    "__author__",
    "__version__",
    "run_setup",
]
