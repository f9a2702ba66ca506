"""Unit tests for MCP tool routing."""

from unittest.mock import MagicMock

import pytest

from docs_server.core.errors import GatewayError, NotFoundError
from docs_server.mcp_server.main import TOOL_DEFINITIONS, dispatch, run_tool
from docs_server.mcp_server.tools import DocsServerTools
from tests._fixtures.fake_github import FakeGitHub, registry_entry


def sample_arguments(schema: dict) -> dict:
    """Fill every required property with a placeholder of the right type."""
    arguments = {}
    for name in schema.get("required", []):
        prop = schema["properties"][name]
        arguments[name] = ["x"] if prop["type"] == "array" else "x"
    return arguments


class TestToolDefinitions:
    """Test the advertised tool catalogue."""

    def test_all_tools_listed(self):
        names = [tool.name for tool in TOOL_DEFINITIONS]

        assert len(names) == 17
        assert len(set(names)) == 17
        assert "get-doc" in names
        assert "remove-repository" in names

    def test_required_arguments_are_declared(self):
        for tool in TOOL_DEFINITIONS:
            schema = tool.inputSchema
            assert schema["type"] == "object"
            assert set(schema["required"]) <= set(schema["properties"])

    @pytest.mark.asyncio
    async def test_every_definition_is_routed(self):
        """Each advertised tool reaches a DocsServerTools method."""
        tools = MagicMock(spec=DocsServerTools)

        for tool in TOOL_DEFINITIONS:
            result = await dispatch(tools, tool.name, sample_arguments(tool.inputSchema))
            assert result != f"Error: Unknown tool '{tool.name}'"


class TestRunTool:
    """Test error rendering around tool calls."""

    @pytest.mark.asyncio
    async def test_unknown_tool(self, make_tools):
        text = await run_tool(make_tools(), "does-not-exist", {})

        assert text == "Error: Unknown tool 'does-not-exist'"

    @pytest.mark.asyncio
    async def test_missing_argument(self, make_tools):
        text = await run_tool(make_tools(), "list-docs", {})

        assert text == "Error: Missing required argument 'library' for tool 'list-docs'"

    @pytest.mark.asyncio
    async def test_none_arguments(self, make_tools):
        text = await run_tool(make_tools(), "list-repositories", None)

        assert text == "No repositories configured in repodata.json"

    @pytest.mark.asyncio
    async def test_domain_error_with_status(self):
        tools = MagicMock(spec=DocsServerTools)
        tools.list_libraries.side_effect = GatewayError("upstream down", status_code=502)

        text = await run_tool(tools, "list-libraries", {})

        assert text == "Docs Server Error: upstream down (HTTP 502)"

    @pytest.mark.asyncio
    async def test_domain_error_without_status(self):
        tools = MagicMock(spec=DocsServerTools)
        tools.list_docs.side_effect = NotFoundError("no such library")

        text = await run_tool(tools, "list-docs", {"library": "x"})

        assert text == "Docs Server Error: no such library"

    @pytest.mark.asyncio
    async def test_unexpected_error(self):
        tools = MagicMock(spec=DocsServerTools)
        tools.health_check.side_effect = RuntimeError("kaboom")

        text = await run_tool(tools, "health-check", {})

        assert text == "Error: Tool execution failed - kaboom"

    @pytest.mark.asyncio
    async def test_camel_case_arguments(self, make_tools):
        fake = FakeGitHub({"owner/repo": {"src/a.ts": "export {}"}})
        tools = make_tools(fake=fake, registry={"lib": registry_entry()})

        text = await run_tool(tools, "read-source-file", {"library": "lib", "filePath": "src/a.ts"})

        assert "```typescript\nexport {}\n```" in text

    @pytest.mark.asyncio
    async def test_rate_limit_payload(self, make_tools):
        fake = FakeGitHub({}, forbidden={""})
        tools = make_tools(fake=fake, registry={"lib": registry_entry()})

        text = await run_tool(tools, "browse-repo", {"library": "lib"})

        assert "rate limit" in text
        assert "22:13:20" in text

    @pytest.mark.asyncio
    async def test_undecodable_config_uses_defaults(self, tmp_path, make_tools):
        """A config.json that is not UTF-8 does not break remote tools."""
        fake = FakeGitHub({"owner/repo": {"src/a.ts": ""}})
        tools = make_tools(fake=fake, registry={"lib": registry_entry()})
        (tmp_path / "config.json").write_bytes(b"\xff\xfe{bad")

        text = await run_tool(tools, "browse-repo", {"library": "lib"})

        assert "📁 src/" in text
        assert "Authorization" not in fake.requests[0].headers

    @pytest.mark.asyncio
    async def test_add_repository_arguments(self, tmp_path, make_tools):
        tools = make_tools()
        arguments = {
            "key": "drei",
            "name": "Drei",
            "description": "helpers",
            "repo": "pmndrs/drei",
            "mainBranch": "master",
            "srcPaths": ["src"],
            "examplePaths": [],
            "docsPaths": ["docs"],
        }

        text = await run_tool(tools, "add-repository", arguments)

        assert text.startswith("✅")
        entry = tools.store.load_registry()["drei"]
        assert entry.main_branch == "master"
        assert entry.docs.repo == "pmndrs/drei"
        assert entry.docs.branch == "master"
