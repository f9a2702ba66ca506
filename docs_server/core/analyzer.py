"""Repository structure analysis used to draft new registry entries."""

from pathlib import PurePosixPath

from docs_server.core.errors import DocsServerError
from docs_server.core.enumerator import join_repo_path
from docs_server.core.github import GitHubClient
from docs_server.core.logging import get_logger
from docs_server.models.content import (
    EntryType,
    RepositoryAnalysis,
    SuggestedPaths,
    TreeNode,
)

logger = get_logger(__name__)

EXPAND_MARKERS = ("src", "example", "docs", "demo", "readme.md")
EXPAND_EXACT = ("packages", "apps")
ANALYSIS_DEPTH = 2


def should_expand(name: str) -> bool:
    """Directories worth descending into when looking for code and docs."""
    lowered = name.lower()
    return any(marker in lowered for marker in EXPAND_MARKERS) or name in EXPAND_EXACT


def file_extension(name: str) -> str:
    """Lower-cased suffix including the dot, or "" when there is none."""
    return PurePosixPath(name).suffix.lower()


class RepositoryAnalyzer:
    """Walks the interesting top-level directories of a repository."""

    def __init__(self, client: GitHubClient):
        self.client = client

    async def analyze(self, repo: str, branch: str = "main") -> RepositoryAnalysis:
        file_type_counts: dict[str, int] = {}
        suggested = SuggestedPaths()

        structure = await self._explore(
            repo, branch, "", ANALYSIS_DEPTH, file_type_counts, suggested
        )
        logger.info(
            "Analyzed repository",
            repo=repo,
            branch=branch,
            file_types=len(file_type_counts),
        )
        return RepositoryAnalysis(
            structure=structure,
            file_type_counts=file_type_counts,
            suggested_paths=suggested,
            main_branch=branch,
        )

    async def _explore(
        self,
        repo: str,
        branch: str,
        dir_path: str,
        max_depth: int,
        file_type_counts: dict[str, int],
        suggested: SuggestedPaths,
    ) -> list[TreeNode]:
        if max_depth <= 0:
            return []

        try:
            contents = await self.client.fetch_content(repo, dir_path, branch)
        except DocsServerError as e:
            logger.debug("Skipping unreadable directory", repo=repo, path=dir_path, error=e.message)
            return []

        if not isinstance(contents, list):
            return []

        nodes = []
        for item in contents:
            item_path = join_repo_path(dir_path, item.name)

            if item.type == EntryType.FILE:
                ext = file_extension(item.name)
                file_type_counts[ext] = file_type_counts.get(ext, 0) + 1

            if item.type == EntryType.DIR and should_expand(item.name):
                children = await self._explore(
                    repo, branch, item_path, max_depth - 1, file_type_counts, suggested
                )
                nodes.append(
                    TreeNode(
                        name=item.name,
                        path=item_path,
                        type=item.type,
                        children=children or None,
                    )
                )

                lowered = item.name.lower()
                if "src" in lowered:
                    suggested.src_paths.append(item_path)
                if "example" in lowered or "demo" in lowered:
                    suggested.example_paths.append(item_path)
                if "docs" in lowered:
                    suggested.docs_paths.append(item_path)
            else:
                nodes.append(TreeNode(name=item.name, path=item_path, type=item.type))

        return nodes


def format_file_tree(nodes: list[TreeNode], indent: str = "") -> str:
    lines = []
    for node in nodes:
        is_dir = node.type == EntryType.DIR
        icon = "📁" if is_dir else "📄"
        name = f"{node.name}/" if is_dir else node.name
        lines.append(f"{indent}{icon} {name}")
        if node.children:
            lines.append(format_file_tree(node.children, indent + "  "))
    return "\n".join(lines)


def top_file_types(counts: dict[str, int], limit: int | None = None) -> str:
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return ", ".join(f"{ext or '(no ext)'}: {count}" for ext, count in ranked)
