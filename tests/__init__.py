"""
na-generator test suite
=======================

Test Modules
------------
- test_models.py: Tests for Pydantic models and settings
- test_credentials.py: Tests for token storage and minting
- test_hosting.py: Tests for the GitHub API client
- test_repository.py: Tests for local git operations
- test_workflow.py: Tests for the setup workflow
- test_cli.py: Tests for command-line interface

Running Tests
-------------
    # Run all tests
    pytest

    # Run specific module
    pytest tests/test_workflow.py
"""
