"""Shared fixtures: a temporary workspace wired to an in-memory GitHub API."""

import json
from pathlib import Path

import pytest

from docs_server.core.config_store import ConfigStore
from docs_server.core.github import GitHubClient
from docs_server.mcp_server.config import ServerSettings
from docs_server.mcp_server.tools import DocsServerTools
from tests._fixtures.fake_github import FakeGitHub


@pytest.fixture
def store(tmp_path: Path) -> ConfigStore:
    return ConfigStore(tmp_path / "config.json", tmp_path / "repodata.json")


@pytest.fixture
def make_client(store):
    def _make(fake: FakeGitHub) -> GitHubClient:
        return GitHubClient(store, transport=fake.transport)

    return _make


@pytest.fixture
def make_tools(tmp_path: Path):
    """Build DocsServerTools over tmp_path with the given registry and fake API."""

    def _make(
        fake: FakeGitHub | None = None,
        registry: dict | None = None,
        config: dict | None = None,
    ) -> DocsServerTools:
        if registry is not None:
            (tmp_path / "repodata.json").write_text(json.dumps(registry))
        if config is not None:
            (tmp_path / "config.json").write_text(json.dumps(config))
        settings = ServerSettings(base_path=tmp_path)
        transport = (fake or FakeGitHub({})).transport
        return DocsServerTools.from_settings(settings, transport=transport)

    return _make
