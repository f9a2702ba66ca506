"""MCP tools for documentation and repository browsing.

Every tool returns a Markdown string. Failures that belong to the caller's
request (unknown library, missing file, rate limit) are rendered into that
string rather than raised.
"""

import json
import platform
import sys
import time
from datetime import datetime, timezone
from pathlib import PurePosixPath

import httpx

from docs_server.core.analyzer import RepositoryAnalyzer, format_file_tree, top_file_types
from docs_server.core.config_store import ConfigStore
from docs_server.core.docs import (
    DocumentationResolver,
    find_section,
    list_headings,
    split_anchor,
)
from docs_server.core.enumerator import get_file_language, is_example_file, join_repo_path
from docs_server.core.errors import DocsServerError, NotFoundError
from docs_server.core.github import GitHubClient, fetch_first_file, normalize_github_url
from docs_server.core.logging import get_logger
from docs_server.core.search import (
    search_local_doc_examples,
    search_repo_examples,
    search_source_files,
)
from docs_server.mcp_server.config import ServerSettings
from docs_server.models.config import DocsSource, RepositoryEntry
from docs_server.models.content import EntryType

logger = get_logger(__name__)

_STARTED_AT = time.monotonic()

README_FILES = ["README.md", "readme.md", "README.txt", "README"]
DEFAULT_README_BRANCHES = ["main", "master"]

TOOL_CATALOGUE = """### Documentation Tools:
• `health-check` - Check server status and information
• `list-libraries` - Get all available documentation libraries
• `list-docs` - Get documentation files for a specific library
• `get-doc` - Get content of a specific documentation file
• `search-docs` - Search for content within a library's documentation
• `get-overview` - Get an overview of a library's documentation structure
• `get-readme` - Get the README content from any GitHub repository

### Repository Tools:
• `list-repositories` - Get all available source code repositories
• `browse-repo` - Browse the file structure of a source code repository
• `read-source-file` - Read the content of a specific source file from a repository
• `search-source` - Search for specific patterns in source code across a repository

### Example Tools:
• `search-examples` - Search for example code snippets in docs and repository examples
• `get-example` - Get a specific example file from the repository
• `list-examples` - List available example directories for a library

### Repository Management Tools:
• `analyze-repository` - Analyze a GitHub repository structure to prepare for adding it to repodata.json
• `add-repository` - Add a new repository configuration to repodata.json
• `remove-repository` - Remove a repository configuration from repodata.json"""


def _bullets(items: list[str], empty: str) -> str:
    return "\n".join(f"• {item}" for item in items) if items else empty


class DocsServerTools:
    """Collection of MCP tools backed by the config store and GitHub client."""

    def __init__(
        self,
        settings: ServerSettings,
        store: ConfigStore,
        client: GitHubClient,
    ):
        self.settings = settings
        self.store = store
        self.client = client
        self.docs = DocumentationResolver(store, client, settings.docs_path)
        self.analyzer = RepositoryAnalyzer(client)

    @classmethod
    def from_settings(
        cls,
        settings: ServerSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "DocsServerTools":
        store = ConfigStore(settings.config_path, settings.repodata_path)
        client = GitHubClient(
            store,
            api_url=settings.github_api_url,
            timeout=settings.request_timeout,
            transport=transport,
        )
        return cls(settings, store, client)

    def _get_repository(self, library: str, label: str = "Repository") -> RepositoryEntry:
        registry = self.store.load_registry()
        entry = registry.get(library)
        if entry is None:
            raise NotFoundError(
                f"{label} '{library}' not found. "
                f"Available repositories: {', '.join(registry)}"
            )
        return entry

    def _no_docs_message(self, library: str) -> str:
        return (
            f"No documentation found for '{library}'. Available libraries: "
            f"{', '.join(self.docs.get_available_libraries())}"
        )

    # Server Tools

    async def health_check(self) -> str:
        """Report server status, configuration and the tool catalogue."""
        libraries = self.docs.get_available_libraries()
        registry = self.store.load_registry()
        github = self.store.load_operational_config().github
        docs_path = self.settings.docs_path

        path_exists = docs_path.exists()
        path_contents: list[str] = []
        path_error = ""
        if path_exists:
            try:
                path_contents = [
                    f"{entry.name} ({'dir' if entry.is_dir() else 'file'})"
                    for entry in sorted(docs_path.iterdir())
                ]
            except OSError as e:
                path_error = str(e)

        return f"""# MCP Documentation Server - Health Check

**Status:** ✅ ALIVE
**Timestamp:** {datetime.now(timezone.utc).isoformat()}
**Server Version:** {self.settings.server_version}
**Python Version:** {sys.version.split()[0]}
**Platform:** {platform.system().lower()}
**Uptime:** {int(time.monotonic() - _STARTED_AT)} seconds

## Configuration
- **Documentation Base Path:** {docs_path}
- **Available Libraries:** {len(libraries)}
- **Available Repositories:** {len(registry)}
- **GitHub API Token:** {"✅ Configured" if github.api_key else "❌ Not configured"}
- **Expected Rate Limit:** {github.expected_rate_limit}/hour

## Debug Information
- **Process Working Directory:** {self.settings.base_path}
- **Docs Path Exists:** {"✅ YES" if path_exists else "❌ NO"}
- **Path Error:** {path_error or "None"}

## Directory Contents:
{_bullets(path_contents, "  No items found or path does not exist")}

## Libraries Found:
{_bullets(libraries, "  No libraries found in docsdata folder")}

## Repositories Configured:
{_bullets(list(registry), "  No repositories found in repodata.json")}

## Available Tools:

{TOOL_CATALOGUE}"""

    # Documentation Tools

    async def list_libraries(self) -> str:
        libraries = self.docs.get_available_libraries()
        if not libraries:
            return "No documentation libraries found."

        local = set(self.docs.get_local_libraries())
        registry = self.store.load_registry()

        lines = []
        for library in libraries:
            sources = []
            if library in local:
                sources.append("local")
            entry = registry.get(library)
            if entry and entry.docs:
                sources.append("GitHub")
            lines.append(f"• {library} ({', '.join(sources)})")

        return "Available documentation libraries:\n\n" + "\n".join(lines)

    async def list_docs(self, library: str) -> str:
        doc_set = await self.docs.resolve_doc_set(library)
        if not doc_set.files:
            return self._no_docs_message(library)

        source = (
            "local docsdata folder" if doc_set.is_local else f"GitHub ({doc_set.source_repo})"
        )
        return (
            f"Documentation files for {library} (from {source}):\n\n"
            + _bullets(doc_set.files, "")
        )

    async def get_doc(self, library: str, file: str) -> str:
        """Return a doc file, or one section of it when ``file`` has ``#anchor``."""
        file_path, anchor = split_anchor(file)

        try:
            content = await self.docs.get_content(library, file_path)
        except DocsServerError as e:
            return f"Error reading file '{file}' from library '{library}': {e.message}"

        if not anchor:
            return f"# {library}/{file}\n\n{content}"

        section = find_section(content, anchor)
        if section is not None:
            return f"# {library}/{file_path}#{anchor}\n\n{section}"

        available = "\n".join(
            f"• #{heading.anchor} ({heading.title})" for heading in list_headings(content)
        )
        return (
            f"Section '#{anchor}' not found in {library}/{file_path}.\n\n"
            f"Available sections:\n{available}"
        )

    async def search_docs(self, library: str, query: str) -> str:
        doc_set = await self.docs.resolve_doc_set(library)
        if not doc_set.files:
            return self._no_docs_message(library)

        results = await self.docs.search_documentation(library, query)
        if not results:
            return f'No matches found for "{query}" in {library} documentation.'

        formatted = []
        for result in results:
            output = f"**{result.file}:**\n"
            if result.sections:
                output += "\n🎯 **Found matching sections - try these specific queries:**\n"
                for section in result.sections:
                    output += (
                        f"• `get-doc` with `{result.file}#{section.anchor}` "
                        f'for "{section.title}"\n'
                    )
                output += "\n"
            if result.matches:
                output += "**Text matches:**\n" + "\n\n".join(
                    f"  {match}" for match in result.matches
                )
            formatted.append(output)

        return f'Search results for "{query}" in {library}:\n\n' + "\n\n---\n\n".join(
            formatted
        )

    async def get_overview(self, library: str) -> str:
        doc_set = await self.docs.resolve_doc_set(library)
        if not doc_set.files:
            return self._no_docs_message(library)

        structure: dict[str, list[str]] = {}
        for file in doc_set.files:
            path = PurePosixPath(file)
            directory = "root" if str(path.parent) == "." else str(path.parent)
            structure.setdefault(directory, []).append(path.name)

        source = (
            "local docsdata folder" if doc_set.is_local else f"GitHub ({doc_set.source_repo})"
        )
        overview = f"# {library} Documentation Overview\n\n"
        overview += f"**Source:** {source}\n"
        overview += f"**Total files:** {len(doc_set.files)}\n\n"
        for directory, names in structure.items():
            overview += f"## {directory}\n" + _bullets(names, "") + "\n\n"
        return overview

    async def get_readme(self, repo: str, branch: str | None = None) -> str:
        """Fetch the README of any repository, trying common names and branches."""
        try:
            repo_path, _ = normalize_github_url(repo)
        except ValueError:
            repo_path = repo

        branches = [branch] if branch else DEFAULT_README_BRANCHES
        found = await fetch_first_file(self.client, repo_path, README_FILES, branches)
        if found is None:
            return (
                f"No README file found in repository '{repo_path}'. "
                f"Tried: {', '.join(README_FILES)} on branches: {', '.join(branches)}"
            )

        content, name, found_branch = found
        return f"# README: {repo_path} ({name} from {found_branch})\n\n{content}"

    # Repository Tools

    async def list_repositories(self) -> str:
        registry = self.store.load_registry()
        if not registry:
            return "No repositories configured in repodata.json"

        entries = [
            f"• **{key}** ({entry.name})\n  {entry.description}\n  📂 {entry.github}\n"
            f"  🌿 Branch: {entry.main_branch}\n"
            f"  📁 Source: {', '.join(entry.src_paths)}\n"
            f"  📝 Examples: {', '.join(entry.example_paths)}"
            for key, entry in registry.items()
        ]
        return "Available source code repositories:\n\n" + "\n\n".join(entries)

    async def browse_repo(self, library: str, path: str = "") -> str:
        try:
            entry = self._get_repository(library)
        except NotFoundError as e:
            return e.message

        try:
            contents = await self.client.fetch_content(entry.repo, path, entry.main_branch)
        except DocsServerError as e:
            return f"Error browsing repository: {e.message}"

        if not isinstance(contents, list):
            return f"Path '{path}' is not a directory or does not exist in {library}"

        items = [
            f"📁 {item.name}/" if item.type == EntryType.DIR else f"📄 {item.name}"
            for item in contents
        ]
        return (
            f"# {entry.name} Repository Structure\n\n"
            f"**Path:** /{path}\n"
            f"**Repository:** {entry.github}\n"
            f"**Branch:** {entry.main_branch}\n\n"
            "## Contents:\n\n" + "\n".join(items)
        )

    async def _render_file(self, library: str, file_path: str, title: str) -> str:
        entry = self._get_repository(library)
        file, text = await self.client.read_text_file(
            entry.repo, file_path, entry.main_branch
        )
        return (
            f"# {entry.name}{title} - {file_path}\n\n"
            f"**Repository:** {entry.github}\n"
            f"**Branch:** {entry.main_branch}\n"
            f"**Size:** {file.size / 1024:.1f} KB\n"
            f"**GitHub URL:** {entry.github}/blob/{entry.main_branch}/{file_path}\n\n"
            f"```{get_file_language(file_path)}\n{text}\n```"
        )

    async def read_source_file(self, library: str, file_path: str) -> str:
        try:
            return await self._render_file(library, file_path, "")
        except DocsServerError as e:
            return f"Error reading file: {e.message}"

    async def search_source(
        self, library: str, query: str, paths: list[str] | None = None
    ) -> str:
        try:
            entry = self._get_repository(library)
        except NotFoundError as e:
            return e.message

        results = await search_source_files(
            self.client, entry.repo, entry.main_branch, paths or entry.src_paths, query
        )
        if not results:
            return f'No matches found for "{query}" in {library} source code.'

        formatted = [
            f"**{result.file}:**\n" + "\n\n".join(f"  {m}" for m in result.matches)
            for result in results
        ]
        return (
            f'Source code search results for "{query}" in {library}:\n\n'
            + "\n\n---\n\n".join(formatted)
        )

    # Example Tools

    async def search_examples(self, library: str, query: str) -> str:
        """Search code blocks in local docs and files in repository example paths."""
        try:
            entry = self._get_repository(library, label="Library")
        except NotFoundError as e:
            return e.message

        doc_results = []
        library_path = self.settings.docs_path / library
        if library_path.is_dir():
            doc_results = search_local_doc_examples(library_path, query)

        repo_results = await search_repo_examples(
            self.client, entry.repo, entry.main_branch, entry.example_paths, query
        )

        if not doc_results and not repo_results:
            return f'No example code found for "{query}" in {library}.'

        result = f'# Example Code Search Results for "{query}" in {library}\n\n'

        if doc_results:
            result += "## 📚 Documentation Examples\n\n"
            for index, doc_result in enumerate(doc_results, start=1):
                result += f"### {index}. {doc_result.file}\n\n"
                for match in doc_result.matches:
                    result += f"{match}\n\n---\n\n"

        if repo_results:
            result += "## 🔗 Repository Examples\n\n"
            for index, repo_result in enumerate(repo_results, start=1):
                language = get_file_language(repo_result.file)
                result += f"### {index}. {repo_result.file}\n\n"
                result += (
                    f"**GitHub:** {entry.github}/blob/{entry.main_branch}/"
                    f"{repo_result.file}\n\n"
                )
                for match in repo_result.matches:
                    result += f"```{language}\n{match}\n```\n\n---\n\n"

        return result

    async def get_example(self, library: str, file_path: str) -> str:
        try:
            return await self._render_file(library, file_path, " Example")
        except DocsServerError as e:
            return f"Error reading example file: {e.message}"

    async def list_examples(self, library: str) -> str:
        try:
            entry = self._get_repository(library)
        except NotFoundError as e:
            return e.message

        result = f"# {entry.name} Example Directories\n\n"
        result += f"**Repository:** {entry.github}\n\n"

        for example_path in entry.example_paths:
            try:
                contents = await self.client.fetch_content(
                    entry.repo, example_path, entry.main_branch
                )
            except DocsServerError as e:
                result += f"## {example_path}/\n\nError accessing directory: {e.message}\n\n"
                continue

            if not isinstance(contents, list):
                continue

            result += f"## {example_path}/\n\n"
            items = [
                f"📁 {item.name}/" if item.type == EntryType.DIR else f"📄 {item.name}"
                for item in contents
                if item.type == EntryType.DIR
                or is_example_file(item.name, join_repo_path(example_path, item.name))
            ]
            if items:
                result += "\n".join(items) + "\n\n"
            else:
                result += "No example files found.\n\n"

        return result

    # Repository Management Tools

    async def analyze_repository(self, url: str, branch: str = "main") -> str:
        """Analyze a repository and suggest an add-repository configuration."""
        try:
            repo, github = normalize_github_url(url)
        except ValueError as e:
            return f"Error analyzing repository: {e}"

        analysis = await self.analyzer.analyze(repo, branch)
        suggested = analysis.suggested_paths

        return f"""# Repository Analysis: {repo}

## 📊 Overview
- **Repository:** {github}
- **Branch:** {analysis.main_branch}
- **Total file types:** {len(analysis.file_type_counts)}
- **Top file types:** {top_file_types(analysis.file_type_counts, limit=10)}

## 📁 Repository Structure
{format_file_tree(analysis.structure)}

## 🎯 Suggested Configuration Paths

### Source Paths:
{_bullets(suggested.src_paths, "• No obvious source directories found")}

### Example Paths:
{_bullets(suggested.example_paths, "• No obvious example directories found")}

### Documentation Paths:
{_bullets(suggested.docs_paths, "• No obvious documentation directories found")}

## 📝 Recommended Next Steps
Use the `add-repository` tool with the following suggested configuration:
- **name**: (You should provide a descriptive name)
- **description**: (You should provide a description)
- **repo**: {repo}
- **mainBranch**: {analysis.main_branch}
- **srcPaths**: {json.dumps(suggested.src_paths)}
- **examplePaths**: {json.dumps(suggested.example_paths)}
- **docsPaths**: {json.dumps(suggested.docs_paths)} (if you want separate docs repo, modify accordingly)

**File Type Distribution:**
{top_file_types(analysis.file_type_counts)}"""

    async def add_repository(
        self,
        key: str,
        name: str,
        description: str,
        repo: str,
        main_branch: str,
        src_paths: list[str],
        example_paths: list[str],
        docs_repo: str | None = None,
        docs_branch: str | None = None,
        docs_paths: list[str] | None = None,
    ) -> str:
        try:
            docs = None
            if docs_paths:
                docs = DocsSource(
                    repo=docs_repo or repo,
                    branch=docs_branch or main_branch,
                    paths=docs_paths,
                )
            entry = RepositoryEntry(
                name=name,
                description=description,
                github=f"https://github.com/{repo}",
                repo=repo,
                main_branch=main_branch,
                src_paths=src_paths,
                example_paths=example_paths,
                docs=docs,
            )
        except ValueError as e:
            return f"❌ Error adding repository: {e}"

        try:
            self.store.add_entry(key, entry)
        except DocsServerError as e:
            return f"❌ {e.message}"

        if docs:
            docs_summary = (
                f"- **Docs Repository:** https://github.com/{docs.repo}\n"
                f"- **Docs Branch:** {docs.branch}\n"
                f"- **Docs Paths:** {', '.join(docs.paths)}"
            )
        else:
            docs_summary = "- **Docs:** Using local documentation only"

        return f"""✅ Successfully added repository '{key}' to repodata.json!

## 📋 Configuration Added:
- **Key:** {key}
- **Name:** {name}
- **Description:** {description}
- **Repository:** {entry.github}
- **Branch:** {main_branch}
- **Source Paths:** {', '.join(src_paths)}
- **Example Paths:** {', '.join(example_paths)}
{docs_summary}

## 🚀 Available Tools for '{key}':
You can now use all repository and example tools with this library:
- `browse-repo library:{key}`
- `read-source-file library:{key}`
- `search-source library:{key}`
- `search-examples library:{key}`
- `list-examples library:{key}`
- `get-example library:{key}`

The new repository is immediately available for use!"""

    async def remove_repository(self, key: str) -> str:
        try:
            _, removed = self.store.remove_entry(key)
        except DocsServerError as e:
            return f"❌ {e.message}"
        return f"✅ Successfully removed repository '{key}' ({removed.name}) from repodata.json!"
