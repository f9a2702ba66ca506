"""Unit tests for repository structure analysis."""

import pytest

from docs_server.core.analyzer import (
    RepositoryAnalyzer,
    file_extension,
    format_file_tree,
    should_expand,
    top_file_types,
)
from docs_server.models.content import EntryType, TreeNode
from tests._fixtures.fake_github import FakeGitHub


class TestHelpers:
    """Test analysis helper functions."""

    @pytest.mark.parametrize("name", ["src", "examples", "Docs", "demo-app", "packages", "apps"])
    def test_expanded_directories(self, name):
        assert should_expand(name)

    @pytest.mark.parametrize("name", ["lib", "scripts", "Packages", "build"])
    def test_not_expanded(self, name):
        assert not should_expand(name)

    def test_file_extension(self):
        assert file_extension("App.TSX") == ".tsx"
        assert file_extension("LICENSE") == ""
        assert file_extension("archive.tar.gz") == ".gz"

    def test_format_file_tree(self):
        nodes = [
            TreeNode(
                name="src",
                path="src",
                type=EntryType.DIR,
                children=[TreeNode(name="a.ts", path="src/a.ts", type=EntryType.FILE)],
            ),
            TreeNode(name="README.md", path="README.md", type=EntryType.FILE),
        ]

        assert format_file_tree(nodes) == "📁 src/\n  📄 a.ts\n📄 README.md"

    def test_top_file_types(self):
        counts = {".ts": 5, "": 1, ".md": 3}

        assert top_file_types(counts) == ".ts: 5, .md: 3, (no ext): 1"
        assert top_file_types(counts, limit=1) == ".ts: 5"


class TestRepositoryAnalyzer:
    """Test RepositoryAnalyzer.analyze."""

    @pytest.mark.asyncio
    async def test_example_directory(self, make_client):
        """An examples directory is suggested and its files are counted."""
        fake = FakeGitHub({"owner/repo": {"examples/demo.tsx": "export default 1"}})
        analyzer = RepositoryAnalyzer(make_client(fake))

        analysis = await analyzer.analyze("owner/repo", "main")

        assert analysis.suggested_paths.example_paths == ["examples"]
        assert analysis.file_type_counts[".tsx"] == 1
        assert analysis.main_branch == "main"
        assert analysis.structure[0].children[0].name == "demo.tsx"

    @pytest.mark.asyncio
    async def test_unmatched_directories_are_not_expanded(self, make_client):
        fake = FakeGitHub(
            {"owner/repo": {"lib/index.js": "", "src/index.ts": "", "LICENSE": ""}}
        )
        analyzer = RepositoryAnalyzer(make_client(fake))

        analysis = await analyzer.analyze("owner/repo")

        assert "lib" not in fake.requested_paths()
        assert "src" in fake.requested_paths()
        assert analysis.suggested_paths.src_paths == ["src"]
        assert analysis.file_type_counts == {"": 1, ".ts": 1}

        lib = next(node for node in analysis.structure if node.name == "lib")
        assert lib.children is None

    @pytest.mark.asyncio
    async def test_depth_is_two_levels(self, make_client):
        """Matching directories one level down are suggested but not listed."""
        fake = FakeGitHub(
            {
                "owner/repo": {
                    "packages/docs/intro.md": "",
                    "packages/core-src/index.ts": "",
                }
            }
        )
        analyzer = RepositoryAnalyzer(make_client(fake))

        analysis = await analyzer.analyze("owner/repo")

        assert fake.requested_paths() == ["", "packages"]
        assert analysis.suggested_paths.docs_paths == ["packages/docs"]
        assert analysis.suggested_paths.src_paths == ["packages/core-src"]
        assert analysis.file_type_counts == {}

    @pytest.mark.asyncio
    async def test_unreadable_repository(self, make_client):
        """A failing root listing yields an empty analysis."""
        fake = FakeGitHub({}, failing={""})
        analyzer = RepositoryAnalyzer(make_client(fake))

        analysis = await analyzer.analyze("owner/repo", "dev")

        assert analysis.structure == []
        assert analysis.file_type_counts == {}
        assert analysis.main_branch == "dev"
