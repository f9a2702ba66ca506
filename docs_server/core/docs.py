"""Documentation lookup for local docs trees and GitHub-hosted docs."""

import re
from pathlib import Path

from docs_server.core.config_store import ConfigStore
from docs_server.core.enumerator import find_files_recursively, is_doc_file
from docs_server.core.errors import DocsServerError, NotFoundError
from docs_server.core.github import GitHubClient, decode_file_body
from docs_server.core.logging import get_logger
from docs_server.core.search import search_text
from docs_server.models.content import DocSearchResult, DocSet, FileContent, Heading

logger = get_logger(__name__)

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+)$")
REMOTE_DOCS_DEPTH = 3


def slugify(title: str) -> str:
    """Anchor for a heading: lower-case, punctuation dropped, spaces to hyphens."""
    anchor = re.sub(r"[^a-z0-9\s-]", "", title.lower())
    return re.sub(r"\s+", "-", anchor)


def list_headings(content: str) -> list[Heading]:
    headings = []
    for line in content.split("\n"):
        match = HEADING_PATTERN.match(line)
        if match:
            title = match.group(2).strip()
            headings.append(
                Heading(level=len(match.group(1)), title=title, anchor=slugify(title))
            )
    return headings


def extract_sections(content: str) -> dict[str, str]:
    """Map lower-cased heading text to the section body.

    A body starts with its heading line and runs up to the next heading of
    any level. Text before the first heading is not indexed. When two
    headings share the same text the later section wins.
    """
    sections: dict[str, str] = {}
    current_name = ""
    current_lines: list[str] = []

    def flush() -> None:
        if not current_name:
            return
        key = current_name.lower()
        if key in sections:
            logger.debug("Duplicate heading overrides earlier section", heading=key)
        sections[key] = "\n".join(current_lines)

    for line in content.split("\n"):
        match = HEADING_PATTERN.match(line)
        if match:
            flush()
            current_name = match.group(2).strip()
            current_lines = [line]
        else:
            current_lines.append(line)

    flush()
    return sections


def find_section(content: str, anchor: str) -> str | None:
    """Resolve ``anchor`` by heading text first, then by slug."""
    sections = extract_sections(content)
    key = anchor.lower()
    if key in sections:
        return sections[key]
    for heading in list_headings(content):
        if heading.anchor == key:
            return sections.get(heading.title.lower())
    return None


def split_anchor(file: str) -> tuple[str, str | None]:
    """Split ``path#anchor`` into its parts. Text after a second ``#`` is ignored."""
    parts = file.split("#")
    anchor = parts[1] if len(parts) > 1 else ""
    return parts[0], anchor or None


def find_local_doc_files(library_path: Path, current: Path | None = None) -> list[str]:
    """Recursively list doc files under ``library_path`` with no depth limit."""
    directory = library_path / current if current else library_path
    files: list[str] = []

    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError:
        return files

    for entry in entries:
        relative = entry.relative_to(library_path)
        if entry.is_dir():
            files.extend(find_local_doc_files(library_path, relative))
        elif is_doc_file(entry.name):
            files.append(relative.as_posix())

    return files


class DocumentationResolver:
    """Decides where a library's docs live and reads them."""

    def __init__(self, store: ConfigStore, client: GitHubClient, docs_base_path: Path):
        self.store = store
        self.client = client
        self.docs_base_path = Path(docs_base_path)

    def get_local_libraries(self) -> list[str]:
        if not self.docs_base_path.exists():
            logger.debug("Docs base path does not exist", path=str(self.docs_base_path))
            return []
        try:
            return sorted(p.name for p in self.docs_base_path.iterdir() if p.is_dir())
        except OSError as e:
            logger.warning("Error reading docs base path", path=str(self.docs_base_path), error=str(e))
            return []

    def get_available_libraries(self) -> list[str]:
        libraries = set(self.get_local_libraries()) | set(self.store.load_registry())
        return sorted(libraries)

    async def resolve_doc_set(self, library: str) -> DocSet:
        """Find documentation files for a library.

        A registry entry with a docs source wins; otherwise the local
        ``<docs root>/<library>`` directory is used.
        """
        entry = self.store.load_registry().get(library)

        if entry and entry.docs:
            files: list[str] = []
            for base_path in entry.docs.paths:
                files.extend(
                    await find_files_recursively(
                        self.client,
                        entry.docs.repo,
                        base_path,
                        entry.docs.branch,
                        is_doc_file,
                        REMOTE_DOCS_DEPTH,
                    )
                )
            return DocSet(is_local=False, files=files, source_repo=entry.docs.repo)

        library_path = self.docs_base_path / library
        if library_path.is_dir():
            return DocSet(is_local=True, files=find_local_doc_files(library_path))

        return DocSet(is_local=True, files=[])

    async def get_content(self, library: str, file_path: str) -> str:
        """Read a doc file, preferring the remote docs source when configured.

        Raises:
            NotFoundError: If neither the remote source nor the local tree
                has the file
        """
        entry = self.store.load_registry().get(library)

        if entry and entry.docs:
            try:
                remote = await self.client.fetch_content(
                    entry.docs.repo, file_path, entry.docs.branch
                )
                if isinstance(remote, FileContent) and remote.content:
                    return decode_file_body(remote.content)
            except DocsServerError as e:
                logger.warning(
                    "Error fetching GitHub doc, trying local copy",
                    library=library,
                    file=file_path,
                    error=e.message,
                )

        library_path = (self.docs_base_path / library).resolve()
        local_path = (library_path / file_path).resolve()
        if local_path.is_relative_to(library_path) and local_path.is_file():
            try:
                return local_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Error reading local doc", path=str(local_path), error=str(e))

        raise NotFoundError(f"Documentation file not found: {file_path}")

    async def search_documentation(
        self, library: str, query: str
    ) -> list[DocSearchResult]:
        """Line matches plus headings whose title or anchor match ``query``."""
        doc_set = await self.resolve_doc_set(library)
        query_lower = query.lower()
        results = []

        for doc_file in doc_set.files:
            try:
                content = await self.get_content(library, doc_file)
            except DocsServerError as e:
                logger.warning("Error searching doc", file=doc_file, error=e.message)
                continue

            sections = [
                heading
                for heading in list_headings(content)
                if query_lower in heading.title.lower() or query_lower in heading.anchor
            ]
            matches = [
                f"Line {m.line_number}: {m.context}" for m in search_text(content, query)
            ]

            if matches or sections:
                results.append(
                    DocSearchResult(file=doc_file, matches=matches, sections=sections)
                )

        return results
