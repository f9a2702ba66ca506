"""Keyword search over documentation, example and source files.

Plain case-insensitive substring matching. Remote searches cap the number
of files fetched and matches kept so a single query stays within the
GitHub rate limit.
"""

from pathlib import Path

from docs_server.core.enumerator import (
    find_files_recursively,
    is_example_file,
    is_source_file,
)
from docs_server.core.errors import DocsServerError
from docs_server.core.github import GitHubClient
from docs_server.core.logging import get_logger
from docs_server.models.content import CodeBlock, FileMatches, SearchMatch

logger = get_logger(__name__)

FENCE = "```"

# Limits for example search
EXAMPLE_SEARCH_DEPTH = 2
EXAMPLE_FILES_PER_PATH = 15
EXAMPLE_MATCHES_PER_FILE = 3
EXAMPLE_CONTEXT_LINES = 2

# Limits for source search
SOURCE_SEARCH_DEPTH = 3
SOURCE_FILES_PER_PATH = 20
SOURCE_MATCHES_PER_FILE = 5


def search_text(content: str, query: str, context_lines: int = 1) -> list[SearchMatch]:
    """Find every line containing ``query``, ignoring case.

    Each match carries the line plus ``context_lines`` lines on either side,
    clamped to the content.
    """
    lines = content.split("\n")
    query_lower = query.lower()
    matches = []

    for index, line in enumerate(lines):
        if query_lower in line.lower():
            start = max(0, index - context_lines)
            end = min(len(lines) - 1, index + context_lines)
            matches.append(
                SearchMatch(
                    line_number=index + 1,
                    context="\n".join(lines[start : end + 1]),
                )
            )

    return matches


def extract_code_blocks(content: str) -> list[CodeBlock]:
    """Collect fenced code blocks. An unclosed trailing fence is dropped."""
    blocks = []
    in_block = False
    language = None
    code: list[str] = []

    for line in content.split("\n"):
        if line.startswith(FENCE):
            if in_block:
                blocks.append(CodeBlock(language=language, code="\n".join(code)))
                code = []
                language = None
                in_block = False
            else:
                language = line[len(FENCE) :].strip() or None
                in_block = True
        elif in_block:
            code.append(line)

    return blocks


def search_code_blocks(content: str, query: str) -> list[str]:
    """Formatted code blocks whose code or language tag contains ``query``."""
    query_lower = query.lower()
    results = []
    for index, block in enumerate(extract_code_blocks(content)):
        language_hit = block.language and query_lower in block.language.lower()
        if query_lower in block.code.lower() or language_hit:
            results.append(
                f"Code block {index + 1} ({block.language or 'text'}):\n{block.code}"
            )
    return results


def search_local_doc_examples(library_path: Path, query: str) -> list[FileMatches]:
    """Search code blocks in every markdown file below ``library_path``."""
    results = []
    doc_files = sorted(
        path
        for path in library_path.rglob("*")
        if path.is_file() and path.suffix.lower() in (".md", ".mdx")
    )

    for doc_file in doc_files:
        try:
            content = doc_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Skipping unreadable doc", path=str(doc_file), error=str(e))
            continue

        matches = search_code_blocks(content, query)
        if matches:
            results.append(
                FileMatches(
                    file=doc_file.relative_to(library_path).as_posix(),
                    matches=matches,
                )
            )

    return results


async def _search_remote_file(
    client: GitHubClient,
    repo: str,
    branch: str,
    file_path: str,
    query: str,
    context_lines: int,
) -> list[SearchMatch]:
    try:
        _, text = await client.read_text_file(repo, file_path, branch)
    except DocsServerError as e:
        logger.debug("Skipping unreadable file", repo=repo, path=file_path, error=e.message)
        return []
    return search_text(text, query, context_lines=context_lines)


async def search_repo_examples(
    client: GitHubClient,
    repo: str,
    branch: str,
    example_paths: list[str],
    query: str,
) -> list[FileMatches]:
    results = []

    for example_path in example_paths:
        files = await find_files_recursively(
            client, repo, example_path, branch, is_example_file, EXAMPLE_SEARCH_DEPTH
        )

        for file_path in files[:EXAMPLE_FILES_PER_PATH]:
            matches = await _search_remote_file(
                client, repo, branch, file_path, query, EXAMPLE_CONTEXT_LINES
            )
            if matches:
                results.append(
                    FileMatches(
                        file=file_path,
                        matches=[
                            f"Line {m.line_number}:\n{m.context}"
                            for m in matches[:EXAMPLE_MATCHES_PER_FILE]
                        ],
                    )
                )

    return results


async def search_source_files(
    client: GitHubClient,
    repo: str,
    branch: str,
    paths: list[str],
    query: str,
    max_depth: int = SOURCE_SEARCH_DEPTH,
) -> list[FileMatches]:
    results = []

    for search_path in paths:
        files = await find_files_recursively(
            client, repo, search_path, branch, is_source_file, max_depth
        )

        for file_path in files[:SOURCE_FILES_PER_PATH]:
            matches = await _search_remote_file(
                client, repo, branch, file_path, query, context_lines=1
            )
            if matches:
                results.append(
                    FileMatches(
                        file=file_path,
                        matches=[
                            f"Line {m.line_number}: {m.context}"
                            for m in matches[:SOURCE_MATCHES_PER_FILE]
                        ],
                    )
                )

    return results
