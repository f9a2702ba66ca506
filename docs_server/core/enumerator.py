"""Depth-limited recursive file discovery over the contents API."""

from collections.abc import Callable
from pathlib import PurePosixPath

from docs_server.core.errors import DocsServerError
from docs_server.core.github import GitHubClient
from docs_server.core.logging import get_logger
from docs_server.models.content import EntryType

logger = get_logger(__name__)

FileFilter = Callable[[str, str], bool]

SOURCE_EXTENSIONS = (
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".mjs",
    ".cjs",
    ".py",
    ".rs",
    ".go",
    ".java",
    ".cpp",
    ".c",
    ".h",
    ".vue",
    ".svelte",
    ".astro",
    ".md",
    ".mdx",
    ".json",
)

EXAMPLE_EXTENSIONS = (
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".mjs",
    ".cjs",
    ".vue",
    ".svelte",
    ".astro",
    ".md",
    ".mdx",
)

EXAMPLE_PATH_MARKERS = ("example", "demo", "sandbox", "test")

DOC_EXTENSIONS = (".md", ".mdx", ".txt")

LANGUAGE_BY_EXTENSION = {
    ".ts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".jsx": "jsx",
    ".py": "python",
    ".rs": "rust",
    ".go": "go",
    ".java": "java",
    ".cpp": "cpp",
    ".c": "c",
    ".h": "c",
    ".vue": "vue",
    ".svelte": "svelte",
    ".astro": "astro",
    ".json": "json",
    ".md": "markdown",
    ".mdx": "mdx",
}


def is_source_file(filename: str, file_path: str = "") -> bool:
    """Any file with a recognised source or doc extension."""
    return filename.lower().endswith(SOURCE_EXTENSIONS)


def is_example_file(filename: str, file_path: str) -> bool:
    """Example-type extension and a path that looks like an example location."""
    if not filename.lower().endswith(EXAMPLE_EXTENSIONS):
        return False
    path_lower = file_path.lower()
    return any(marker in path_lower for marker in EXAMPLE_PATH_MARKERS)


def is_doc_file(filename: str, file_path: str = "") -> bool:
    return filename.lower().endswith(DOC_EXTENSIONS)


def get_file_language(filename: str) -> str:
    """Fence language for syntax highlighting."""
    return LANGUAGE_BY_EXTENSION.get(PurePosixPath(filename).suffix.lower(), "text")


def join_repo_path(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name


async def find_files_recursively(
    client: GitHubClient,
    repo: str,
    path: str,
    ref: str,
    file_filter: FileFilter,
    max_depth: int = 3,
) -> list[str]:
    """Collect repository paths under ``path`` accepted by ``file_filter``.

    Directories are only descended while ``max_depth > 1``. A subtree that
    cannot be listed contributes nothing; siblings are still visited.
    """
    if max_depth <= 0:
        return []

    try:
        contents = await client.fetch_content(repo, path, ref)
    except DocsServerError as e:
        logger.debug("Skipping unreadable subtree", repo=repo, path=path, error=e.message)
        return []

    if not isinstance(contents, list):
        return []

    files: list[str] = []
    for item in contents:
        item_path = join_repo_path(path, item.name)

        if item.type == EntryType.FILE and file_filter(item.name, item_path):
            files.append(item_path)
        elif item.type == EntryType.DIR and max_depth > 1:
            files.extend(
                await find_files_recursively(
                    client, repo, item_path, ref, file_filter, max_depth - 1
                )
            )

    return files
