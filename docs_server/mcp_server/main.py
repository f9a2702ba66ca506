"""Main MCP server for documentation and repository browsing."""

import asyncio
from typing import Any

import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from docs_server.core.errors import DocsServerError
from docs_server.core.logging import get_logger, setup_logging
from docs_server.mcp_server.config import ServerSettings
from docs_server.mcp_server.tools import DocsServerTools

logger = get_logger(__name__)

server = Server("docs-server")

# Set in main() or by tests
tools: DocsServerTools | None = None


def _string(description: str) -> dict:
    return {"type": "string", "description": description}


def _string_array(description: str) -> dict:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def _schema(properties: dict | None = None, required: list[str] | None = None) -> dict:
    return {
        "type": "object",
        "properties": properties or {},
        "required": required or [],
    }


TOOL_DEFINITIONS = [
    # Server Tools
    types.Tool(
        name="health-check",
        description="Check if the MCP server is alive and get server information",
        inputSchema=_schema(),
    ),
    # Documentation Tools
    types.Tool(
        name="list-libraries",
        description="Get a list of all available documentation libraries",
        inputSchema=_schema(),
    ),
    types.Tool(
        name="list-docs",
        description="Get a list of all documentation files for a specific library",
        inputSchema=_schema(
            {"library": _string("The library name (e.g., 'drei', 'fiber')")},
            ["library"],
        ),
    ),
    types.Tool(
        name="get-doc",
        description="Get the content of a specific documentation file. Supports sections with # (e.g., 'file.md#section')",
        inputSchema=_schema(
            {
                "library": _string("The library name"),
                "file": _string(
                    "The relative path to the documentation file, optionally with #section"
                ),
            },
            ["library", "file"],
        ),
    ),
    types.Tool(
        name="search-docs",
        description="Search for specific content within a library's documentation",
        inputSchema=_schema(
            {
                "library": _string("The library name to search in"),
                "query": _string("The search query/keyword"),
            },
            ["library", "query"],
        ),
    ),
    types.Tool(
        name="get-overview",
        description="Get an overview of a library's documentation structure",
        inputSchema=_schema({"library": _string("The library name")}, ["library"]),
    ),
    types.Tool(
        name="get-readme",
        description="Get the README content from any GitHub repository",
        inputSchema=_schema(
            {
                "repo": _string("GitHub repository in 'owner/repo' format or full URL"),
                "branch": _string("Branch name (optional, defaults to main/master)"),
            },
            ["repo"],
        ),
    ),
    # Repository Tools
    types.Tool(
        name="list-repositories",
        description="Get a list of all available source code repositories",
        inputSchema=_schema(),
    ),
    types.Tool(
        name="browse-repo",
        description="Browse the file structure of a source code repository",
        inputSchema=_schema(
            {
                "library": _string("The library name (e.g., 'uikit', 'drei')"),
                "path": _string("Path within the repository (optional, defaults to root)"),
            },
            ["library"],
        ),
    ),
    types.Tool(
        name="read-source-file",
        description="Read the content of a specific source file from a repository",
        inputSchema=_schema(
            {
                "library": _string("The library name (e.g., 'uikit', 'drei')"),
                "filePath": _string("Path to the file within the repository"),
            },
            ["library", "filePath"],
        ),
    ),
    types.Tool(
        name="search-source",
        description="Search for specific patterns in source code across a repository",
        inputSchema=_schema(
            {
                "library": _string("The library name to search in"),
                "query": _string("The search pattern/keyword"),
                "paths": _string_array(
                    "Specific paths to search within (optional, uses srcPaths from config by default)"
                ),
            },
            ["library", "query"],
        ),
    ),
    # Example Tools
    types.Tool(
        name="search-examples",
        description="Search for example code snippets in both documentation and repository example directories",
        inputSchema=_schema(
            {
                "library": _string("The library name to search in"),
                "query": _string("The search query/keyword to find in example code"),
            },
            ["library", "query"],
        ),
    ),
    types.Tool(
        name="get-example",
        description="Get a specific example file from the repository",
        inputSchema=_schema(
            {
                "library": _string("The library name"),
                "filePath": _string("Path to the example file within the repository"),
            },
            ["library", "filePath"],
        ),
    ),
    types.Tool(
        name="list-examples",
        description="List available example directories for a library",
        inputSchema=_schema({"library": _string("The library name")}, ["library"]),
    ),
    # Repository Management Tools
    types.Tool(
        name="analyze-repository",
        description="Analyze a GitHub repository structure to prepare for adding it to repodata.json. Provides file tree with expanded common directories and suggests paths for src, examples, and docs.",
        inputSchema=_schema(
            {
                "url": _string(
                    "GitHub repository URL (e.g., 'https://github.com/owner/repo' or 'owner/repo')"
                ),
                "branch": _string("Branch name (optional, defaults to 'main')"),
            },
            ["url"],
        ),
    ),
    types.Tool(
        name="add-repository",
        description="Add a new repository configuration to repodata.json. Use after analyzing the repository structure with analyze-repository.",
        inputSchema=_schema(
            {
                "key": _string(
                    "Unique key for this library (e.g., 'react-spring', 'framer-motion')"
                ),
                "name": _string("Display name for the library (e.g., '@react-spring/core')"),
                "description": _string("Short description of the library"),
                "repo": _string("GitHub repository in 'owner/repo' format"),
                "mainBranch": _string("Main branch name (usually 'main' or 'master')"),
                "srcPaths": _string_array("Array of source code paths within the repository"),
                "examplePaths": _string_array(
                    "Array of example code paths within the repository"
                ),
                "docsRepo": _string(
                    "Documentation repository if different from main repo (optional)"
                ),
                "docsBranch": _string(
                    "Documentation repository branch (optional, defaults to mainBranch)"
                ),
                "docsPaths": _string_array(
                    "Array of documentation paths within the docs repository"
                ),
            },
            [
                "key",
                "name",
                "description",
                "repo",
                "mainBranch",
                "srcPaths",
                "examplePaths",
            ],
        ),
    ),
    types.Tool(
        name="remove-repository",
        description="Remove a repository configuration from repodata.json",
        inputSchema=_schema({"key": _string("The repository key to remove")}, ["key"]),
    ),
]


async def dispatch(tools: DocsServerTools, name: str, arguments: dict[str, Any]) -> str:
    """Route a named tool call to its implementation."""
    args = arguments or {}

    if name == "health-check":
        return await tools.health_check()
    elif name == "list-libraries":
        return await tools.list_libraries()
    elif name == "list-docs":
        return await tools.list_docs(args["library"])
    elif name == "get-doc":
        return await tools.get_doc(args["library"], args["file"])
    elif name == "search-docs":
        return await tools.search_docs(args["library"], args["query"])
    elif name == "get-overview":
        return await tools.get_overview(args["library"])
    elif name == "get-readme":
        return await tools.get_readme(args["repo"], args.get("branch"))
    elif name == "list-repositories":
        return await tools.list_repositories()
    elif name == "browse-repo":
        return await tools.browse_repo(args["library"], args.get("path") or "")
    elif name == "read-source-file":
        return await tools.read_source_file(args["library"], args["filePath"])
    elif name == "search-source":
        return await tools.search_source(args["library"], args["query"], args.get("paths"))
    elif name == "search-examples":
        return await tools.search_examples(args["library"], args["query"])
    elif name == "get-example":
        return await tools.get_example(args["library"], args["filePath"])
    elif name == "list-examples":
        return await tools.list_examples(args["library"])
    elif name == "analyze-repository":
        return await tools.analyze_repository(args["url"], args.get("branch") or "main")
    elif name == "add-repository":
        return await tools.add_repository(
            key=args["key"],
            name=args["name"],
            description=args["description"],
            repo=args["repo"],
            main_branch=args["mainBranch"],
            src_paths=args["srcPaths"],
            example_paths=args["examplePaths"],
            docs_repo=args.get("docsRepo"),
            docs_branch=args.get("docsBranch"),
            docs_paths=args.get("docsPaths"),
        )
    elif name == "remove-repository":
        return await tools.remove_repository(args["key"])

    return f"Error: Unknown tool '{name}'"


async def run_tool(tools: DocsServerTools, name: str, arguments: dict[str, Any]) -> str:
    """Run a tool and always produce a text payload."""
    try:
        return await dispatch(tools, name, arguments)
    except DocsServerError as e:
        error_message = f"Docs Server Error: {e.message}"
        if e.status_code:
            error_message += f" (HTTP {e.status_code})"
        return error_message
    except KeyError as e:
        return f"Error: Missing required argument {e} for tool '{name}'"
    except Exception as e:
        logger.error(f"Tool execution failed: {e}", exc_info=True, tool=name)
        return f"Error: Tool execution failed - {str(e)}"


@server.list_tools()
async def handle_list_tools() -> list[types.Tool]:
    """List available MCP tools."""
    return TOOL_DEFINITIONS


@server.call_tool()
async def handle_call_tool(
    name: str, arguments: dict[str, Any]
) -> list[types.TextContent]:
    """Handle MCP tool calls."""
    text = await run_tool(tools, name, arguments)
    return [types.TextContent(type="text", text=text)]


async def main(settings: ServerSettings | None = None):
    """Main entry point for the MCP server."""
    global tools

    settings = settings or ServerSettings()
    setup_logging(settings.log_level)
    tools = DocsServerTools.from_settings(settings)

    logger.info(
        "Starting MCP server",
        docs_path=str(settings.docs_path),
        repodata=str(settings.repodata_path),
    )

    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name=settings.server_name,
                server_version=settings.server_version,
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


def cli_main():
    """Synchronous entry point for script generation."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
