"""Shared fixtures: settings without .env, and fake GitHub/OpenAI payloads."""

from types import SimpleNamespace

import pytest

from changelog_generator.config import ChangelogSettings


@pytest.fixture
def settings():
    return ChangelogSettings(_env_file=None, model="test-model")


@pytest.fixture
def make_commit():
    """Build a commit object as returned by the GitHub REST API."""
    def _make(message, author="Ada Lovelace"):
        git_author = {"name": author} if author is not None else None
        return {"sha": "0" * 40, "commit": {"message": message, "author": git_author}}
    return _make


@pytest.fixture
def completion():
    """Build an object shaped like an OpenAI chat completion."""
    def _make(text):
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])
    return _make
